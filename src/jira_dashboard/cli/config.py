"""
jira-dashboard CLI - Config command.

Show the effective configuration after merging all layers.
"""

import json
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from jira_dashboard.core.config.loader import (
    get_project_config_path,
    get_user_config_path,
    load_config,
)

console = Console()

SECRET_KEYS = {"token"}


def mask_secrets(data: Any) -> Any:
    """Replace secret values (tokens) with asterisks, recursively."""
    if isinstance(data, dict):
        return {
            k: ("****" if k in SECRET_KEYS and v else mask_secrets(v))
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_secrets(item) for item in data]
    return data


def show_config() -> None:
    """
    Print the effective configuration with secrets masked.

    Layers: defaults < user config < project config < JIRA_DASHBOARD_* env vars
    """
    try:
        config = load_config(use_cache=False)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid configuration:\n{escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[dim]User config: {get_user_config_path()}[/dim]")
    console.print(f"[dim]Project config: {get_project_config_path()}[/dim]\n")

    data = mask_secrets(config.model_dump(mode="json", exclude_none=True))
    console.print(Syntax(json.dumps(data, indent=2), "json"))

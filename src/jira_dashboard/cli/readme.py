"""
jira-dashboard CLI - README command.

Fetch an entity's README from a running backend and render it.
"""

import asyncio
from typing import Optional

import httpx
import typer
from rich.console import Console

from jira_dashboard.core.catalog.models import EntityRef
from jira_dashboard.core.readme.client import ReadmeClient
from jira_dashboard.core.readme.component import FetchComponent, RenderedView, ViewState

console = Console()
err_console = Console(stderr=True)


async def _load(ref: EntityRef, base_url: str, token: Optional[str]) -> RenderedView:
    async with httpx.AsyncClient(timeout=30.0) as http:
        async with FetchComponent(ref, ReadmeClient(base_url, http, token)) as component:
            with console.status(f"Loading README for {ref}..."):
                return await component.load()


def readme(
    entity_ref: str = typer.Argument(
        ...,
        help="Entity reference, e.g. component:default/petstore",
    ),
    base_url: str = typer.Option(
        "http://127.0.0.1:7008",
        "--base-url",
        envvar="JIRA_DASHBOARD_URL",
        help="Dashboard backend URL",
    ),
    token: Optional[str] = typer.Option(
        None,
        "--token",
        envvar="JIRA_DASHBOARD_USER_TOKEN",
        help="Bearer token identifying you to the backend",
    ),
) -> None:
    """
    Render the README of a catalog entity.

    Examples:
        jira-dashboard readme component:default/petstore
        jira-dashboard readme petstore --base-url http://dashboard:7008
    """
    try:
        ref = EntityRef.parse(entity_ref, default_kind="component")
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    view = asyncio.run(_load(ref, base_url, token))
    console.print(view.renderable)

    if view.state is ViewState.ERROR:
        raise typer.Exit(1)

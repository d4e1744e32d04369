"""
jira-dashboard CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging

import typer
from rich.console import Console

from jira_dashboard import __version__
from jira_dashboard.cli import config, readme, serve
from jira_dashboard.core.config.env import load_layered_env

app = typer.Typer(
    name="jira-dashboard",
    help="Jira issues and project data for software catalog entities",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"jira-dashboard version {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    jira-dashboard - Jira for your software catalog.

    Serves the dashboard backend that joins catalog entities with their
    Jira projects, and renders entity READMEs in the terminal.

    Examples:
        jira-dashboard serve --port 7008
        jira-dashboard readme component:default/petstore
        jira-dashboard config
    """
    # Tokens usually come from .env files. Precedence: OS env > project .env > user .env
    load_layered_env()

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ctx.obj = {"debug": debug}


app.add_typer(serve.app, name="serve")
app.command(name="readme")(readme.readme)
app.command(name="config")(config.show_config)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]

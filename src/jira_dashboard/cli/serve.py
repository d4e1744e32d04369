"""
jira-dashboard CLI - Serve command.

Run the dashboard backend with uvicorn.
"""

import logging
from typing import Optional

import typer
import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from jira_dashboard.core.config.loader import load_config
from jira_dashboard.core.dashboard.api.app import create_app

app = typer.Typer(
    name="serve",
    help="Run the dashboard backend",
    no_args_is_help=False,
)

console = Console()
logger = logging.getLogger(__name__)

APP_FACTORY = "jira_dashboard.core.dashboard.api.app:create_app"


@app.callback(invoke_without_command=True)
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Interface to bind (default: server.host from config)",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to run the server on (default: server.port from config)",
    ),
    reload: bool = typer.Option(
        False,
        "--reload/--no-reload",
        help="Restart the server when source files change (development)",
    ),
) -> None:
    """
    Start the dashboard backend.

    Examples:
        jira-dashboard serve                  # Use host/port from config
        jira-dashboard serve --port 7010      # Override the port
        jira-dashboard serve --reload         # Auto-reload during development
    """
    if ctx.invoked_subcommand is not None:
        return

    debug = ctx.obj.get("debug", False) if ctx.obj else False

    try:
        config = load_config()
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid configuration:\n{escape(str(e))}")
        raise typer.Exit(1)

    bind_host = host or config.server.host
    bind_port = port or config.server.port

    if not config.jira.token:
        console.print(
            "[yellow]Warning:[/yellow] No Jira token configured "
            "(set JIRA_DASHBOARD_JIRA_TOKEN); Jira requests will be anonymous"
        )

    logger.debug("Serving on %s:%s (reload=%s)", bind_host, bind_port, reload)
    url = f"http://{bind_host}:{bind_port}"
    console.print("[bold cyan]Starting Jira dashboard backend...[/bold cyan]")
    console.print(f"[dim]Jira: {config.jira.base_url}[/dim]")
    console.print(f"[dim]Catalog: {config.catalog.base_url}[/dim]")
    console.print(f"[dim]Health: {url}/health[/dim]")
    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    log_level = "debug" if debug else "info"
    try:
        if reload:
            # Reload needs an import string; the worker loads config itself
            uvicorn.run(
                APP_FACTORY,
                factory=True,
                reload=True,
                host=bind_host,
                port=bind_port,
                log_level=log_level,
            )
        else:
            uvicorn.run(
                create_app(config),
                host=bind_host,
                port=bind_port,
                log_level=log_level,
            )
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
        raise typer.Exit(0)

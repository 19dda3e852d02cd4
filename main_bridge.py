"""Mini README: Entry point CLI for launching the Actual bridge service.

This script exposes a Typer CLI that starts the FastAPI application under
uvicorn. Required settings are checked before the server binds so a
misconfigured deployment exits with status 1 instead of serving errors.
"""

from __future__ import annotations

import typer
import uvicorn

from actual_bridge.configuration import get_settings, validate_required
from actual_bridge.errors import ConfigMissing
from actual_bridge.logging_utils import configure_root_logger, get_logger

cli = typer.Typer(help="Serve the Actual budget bridge HTTP API.")

LOGGER = get_logger("actual_bridge.cli")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Restart on code changes (development only)."),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    try:
        validate_required(settings)
    except ConfigMissing as error:
        LOGGER.error("%s", error.message)
        raise typer.Exit(code=1) from error

    effective_host = host or settings.host
    effective_port = port or settings.port
    typer.echo(
        f"Actual bridge listening on {effective_host}:{effective_port} ({settings.environment})"
    )
    uvicorn.run(
        "actual_bridge.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=reload,
        access_log=False,
        log_config=None,
    )


if __name__ == "__main__":
    cli()

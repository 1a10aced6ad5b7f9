"""Zoom Alert Proxy CLI - entrypoint."""

from typing import Optional

import typer
import uvicorn

from zoom_alert_proxy.app import create_app
from zoom_alert_proxy.config import Settings

UVICORN_LOG_LEVELS = {
    "TRACE": "trace",
    "DEBUG": "debug",
    "INFO": "info",
    "SUCCESS": "info",
    "WARNING": "warning",
    "ERROR": "error",
    "CRITICAL": "critical",
}

app = typer.Typer(help="Zoom Alert Proxy - relay Alertmanager notifications to Zoom")


def build_settings(
    host: Optional[str],
    port: Optional[int],
    log_level: Optional[str],
) -> Settings:
    """Overlay command line options on the environment-derived settings."""
    overrides = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if log_level is not None:
        overrides["log_level"] = log_level
    return Settings(**overrides)


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Listen address (default: $HOST or 0.0.0.0)",
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Listen port (default: $PORT or 8080)",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (default: $LOG_LEVEL or INFO)",
    ),
):
    """Start the webhook relay server."""
    settings = build_settings(host, port, log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=UVICORN_LOG_LEVELS[settings.log_level],
    )


@app.callback()
def main():
    """Zoom Alert Proxy CLI."""


if __name__ == "__main__":
    app()

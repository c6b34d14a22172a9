"""bigquery-mcp-server CLI entrypoint."""

from __future__ import annotations

import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

import anyio
import typer
from dotenv import load_dotenv

from bigquery_mcp.config import (
    DEFAULT_LOCATION,
    DEFAULT_MAX_BYTES_BILLED,
    DEFAULT_MAX_RESULTS,
    ServerConfig,
)
from bigquery_mcp.errors import ConfigurationError
from bigquery_mcp.server import BigQueryMcpServer

app = typer.Typer(help="Serve read-only BigQuery tools over MCP stdio.", add_completion=False)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level_name: str) -> None:
    """Send logs to stderr; stdout carries the MCP transport."""
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level: {level_name}", param_hint="--log-level")
    logging.basicConfig(level=level, format=_LOG_FORMAT, stream=sys.stderr, force=True)


def _version_callback(value: bool) -> None:
    if not value:
        return
    try:
        ver = version("bigquery-mcp-server")
    except PackageNotFoundError:
        ver = "0.0.0+local"
    typer.echo(ver)
    raise typer.Exit()


@app.command()
def serve_command(
    project_id: Annotated[
        str,
        typer.Option("--project-id", envvar="BIGQUERY_PROJECT_ID", help="Google Cloud project ID."),
    ],
    location: Annotated[
        str, typer.Option("--location", envvar="BIGQUERY_LOCATION", help="BigQuery location.")
    ] = DEFAULT_LOCATION,
    key_file: Annotated[
        Path | None,
        typer.Option(
            "--key-file",
            envvar="BIGQUERY_KEY_FILE",
            exists=True,
            dir_okay=False,
            help="Service account key file. Application Default Credentials when omitted.",
        ),
    ] = None,
    max_results: Annotated[
        int,
        typer.Option(
            "--max-results", envvar="BIGQUERY_MAX_RESULTS", min=0, help="Maximum rows to return."
        ),
    ] = DEFAULT_MAX_RESULTS,
    max_bytes_billed: Annotated[
        int,
        typer.Option(
            "--max-bytes-billed",
            envvar="BIGQUERY_MAX_BYTES_BILLED",
            min=0,
            help="Maximum bytes a query may process (default 500GB).",
        ),
    ] = DEFAULT_MAX_BYTES_BILLED,
    log_level: Annotated[
        str, typer.Option("--log-level", envvar="BIGQUERY_MCP_LOG_LEVEL", help="Logging level.")
    ] = "INFO",
    show_version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Print version and exit."
        ),
    ] = False,
) -> None:
    """Run the BigQuery MCP server on stdio."""
    del show_version
    configure_logging(log_level)
    try:
        config = ServerConfig(
            project_id=project_id,
            location=location,
            key_file=key_file,
            max_results=max_results,
            max_bytes_billed=max_bytes_billed,
        )
        server = BigQueryMcpServer(config)
        anyio.run(server.serve)
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def main() -> None:
    load_dotenv(dotenv_path=Path(".env"), override=False, encoding="utf-8")
    app()


if __name__ == "__main__":
    main()

"""BigQuery MCP server: tool registration, authentication check and stdio serving.

Lifecycle::

    CONSTRUCTED -> AUTHENTICATED -> SERVING -> SHUTTING_DOWN

Construction makes no network calls. ``serve()`` probes BigQuery once and
raises ``ConfigurationError`` if that fails; the process is expected to exit.
"""

from __future__ import annotations

import enum
import logging
import signal
from typing import Any

import anyio
from google.auth.exceptions import GoogleAuthError
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool
from pydantic import ValidationError

from .config import ServerConfig
from .errors import ConfigurationError
from .tools.registry import TOOL_SPECS, TOOLS_BY_NAME
from .tools.responses import format_failure
from .warehouse import BigQueryWarehouse, Warehouse

logger = logging.getLogger(__name__)

SERVER_NAME = "bigquery-mcp-server"
SERVER_VERSION = "1.0.0"


class ServerState(enum.Enum):
    CONSTRUCTED = "constructed"
    AUTHENTICATED = "authenticated"
    SERVING = "serving"
    SHUTTING_DOWN = "shutting_down"


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "arguments"
        problems.append(f"{location}: {detail['msg']}")
    return "; ".join(problems)


class BigQueryMcpServer:
    """Registers the BigQuery tools on a low-level MCP server and serves them over stdio."""

    def __init__(self, config: ServerConfig, warehouse: Warehouse | None = None) -> None:
        self.config = config
        if warehouse is None:
            try:
                warehouse = BigQueryWarehouse.from_config(config)
            except (GoogleAuthError, OSError, ValueError) as exc:
                raise ConfigurationError(f"Failed to create BigQuery client: {exc}") from exc
        self.warehouse = warehouse
        self.state = ServerState.CONSTRUCTED
        self._cancel_scope: anyio.CancelScope | None = None
        self._server: Server = Server(SERVER_NAME, version=SERVER_VERSION)
        self._register_handlers()

    @property
    def mcp_server(self) -> Server:
        return self._server

    def _register_handlers(self) -> None:
        @self._server.list_tools()  # type: ignore[misc, no-untyped-call, untyped-decorator]
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        # Arguments are validated by the pydantic models in dispatch().
        @self._server.call_tool(validate_input=False)  # type: ignore[misc, untyped-decorator]
        async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
            return await self.dispatch(name, arguments)

    def list_tools(self) -> list[Tool]:
        return [spec.to_tool() for spec in TOOL_SPECS]

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Validate ``arguments`` for tool ``name`` and run its handler."""
        spec = TOOLS_BY_NAME.get(name)
        if spec is None:
            return format_failure(f"Unknown tool: {name}")
        try:
            params = spec.arguments.model_validate(arguments or {})
        except ValidationError as exc:
            return format_failure(f"Invalid arguments: {_format_validation_error(exc)}")

        logger.info("server.tool_call", extra={"tool": name})
        result = await spec.handler(params, self.warehouse, self.config)
        if result.isError:
            logger.info("server.tool_error", extra={"tool": name})
        return result

    async def authenticate(self) -> None:
        """Probe BigQuery by listing at most one dataset.

        Raises:
            ConfigurationError: The probe failed (bad credentials or permissions).
        """
        try:
            await self.warehouse.list_datasets(max_results=1)
        except Exception as exc:
            logger.error(f"Authentication error: {exc}")
            raise ConfigurationError(
                "Failed to authenticate with BigQuery. "
                f"Please check your credentials and permissions. ({exc})"
            ) from exc
        self.state = ServerState.AUTHENTICATED

    def _log_startup(self) -> None:
        config = self.config
        logger.info("BigQuery MCP Server starting...")
        logger.info(f"Project ID: {config.project_id}")
        logger.info(f"Location: {config.location}")
        logger.info(f"Max Results: {config.max_results}")
        logger.info(
            f"Max Bytes Billed: {config.max_bytes_billed} ({config.max_bytes_billed_gb:g} GB)"
        )

    async def _close_on_signal(self) -> None:
        with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
            async for signum in signals:
                logger.info(
                    "Shutting down BigQuery MCP Server...",
                    extra={"signal": signal.Signals(signum).name},
                )
                self.close()
                return

    async def serve(self) -> None:
        """Authenticate, then serve tool calls on stdio until disconnect or a signal."""
        await self.authenticate()
        self._log_startup()
        try:
            async with stdio_server() as (read_stream, write_stream):
                async with anyio.create_task_group() as task_group:
                    self._cancel_scope = task_group.cancel_scope
                    task_group.start_soon(self._close_on_signal)
                    self.state = ServerState.SERVING
                    logger.info("BigQuery MCP Server running on stdio")
                    await self._server.run(
                        read_stream,
                        write_stream,
                        self._server.create_initialization_options(),
                    )
                    # Peer closed the transport; stop the signal watcher.
                    task_group.cancel_scope.cancel()
        finally:
            self.state = ServerState.SHUTTING_DOWN
            self.warehouse.close()
        logger.info("server.stopped")

    def close(self) -> None:
        """Stop serving; in-flight tool calls are cancelled, not drained."""
        self.state = ServerState.SHUTTING_DOWN
        if self._cancel_scope is not None:
            self._cancel_scope.cancel()

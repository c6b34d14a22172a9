"""Read-only BigQuery tools served over the Model Context Protocol."""

from .config import ServerConfig
from .errors import ConfigurationError, ToolValidationError
from .server import BigQueryMcpServer, ServerState

__all__ = [
    "BigQueryMcpServer",
    "ConfigurationError",
    "ServerConfig",
    "ServerState",
    "ToolValidationError",
]

"""`query` tool: execute a read-only SQL query."""

from __future__ import annotations

import logging

from mcp.types import CallToolResult

from ..config import ServerConfig
from ..errors import ToolValidationError, WriteOperationRejectedError
from ..models import QueryExecutionOptions
from ..warehouse import Warehouse
from .query_utils import format_backend_error, validate_query
from .responses import format_failure, format_success
from .schemas import QueryArguments

logger = logging.getLogger(__name__)


async def run_query(
    params: QueryArguments, warehouse: Warehouse, config: ServerConfig
) -> CallToolResult:
    """Run the query with the billing cap and return its rows."""
    max_rows = params.max_results if params.max_results is not None else config.max_results
    try:
        validate_query(params.query)
    except WriteOperationRejectedError as exc:
        logger.info("tools.query.rejected", extra={"keyword": exc.keyword})
        return format_failure(str(exc))
    except ToolValidationError as exc:
        return format_failure(str(exc))

    options = QueryExecutionOptions(
        query_text=params.query,
        max_bytes_billed=config.max_bytes_billed,
        max_result_rows=max_rows,
    )
    try:
        rows = await warehouse.query(options)
    except Exception as exc:
        logger.warning("tools.query.failed", extra={"error": str(exc)})
        return format_failure(f"Error executing query: {format_backend_error(exc)}")
    return format_success(rows)

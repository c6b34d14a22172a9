"""`dry_run_query` tool: validate a query and estimate its cost without running it."""

from __future__ import annotations

from mcp.types import CallToolResult

from ..config import ServerConfig
from ..errors import ToolValidationError
from ..models import QueryExecutionOptions
from ..warehouse import Warehouse
from .query_utils import (
    estimate_cost,
    format_backend_error,
    format_gigabytes,
    format_usd,
    validate_query,
)
from .responses import format_failure, format_success
from .schemas import DryRunArguments, DryRunEstimate


async def dry_run_estimate(
    params: DryRunArguments, warehouse: Warehouse, config: ServerConfig
) -> CallToolResult:
    """Dry-run the query; ``params.dry_run`` is ignored and always treated as true."""
    try:
        validate_query(params.query)
    except ToolValidationError as exc:
        return format_failure(str(exc))

    options = QueryExecutionOptions(
        query_text=params.query,
        max_bytes_billed=config.max_bytes_billed,
        dry_run=True,
    )
    try:
        statistics = await warehouse.dry_run(options)
    except Exception as exc:
        return format_failure(f"Error in query: {format_backend_error(exc)}")

    if statistics.total_bytes_processed is None:
        return format_failure("Could not retrieve query statistics.")

    total_bytes = statistics.total_bytes_processed
    return format_success(
        DryRunEstimate(
            total_bytes_processed=total_bytes,
            total_bytes_processed_gb=format_gigabytes(total_bytes),
            estimated_cost=format_usd(estimate_cost(total_bytes)),
            query_plan=statistics.query_plan,
        )
    )

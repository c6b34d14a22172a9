"""`list_all_tables_with_dataset` tool: tables of one dataset with their schemas."""

from __future__ import annotations

import logging

import anyio
from mcp.types import CallToolResult

from ..config import ServerConfig
from ..warehouse import Warehouse
from .query_utils import format_backend_error
from .responses import format_failure, format_success
from .schemas import DatasetArguments, TableFetchError, TableSummary

logger = logging.getLogger(__name__)


async def _describe_table(
    warehouse: Warehouse, dataset_id: str, table_id: str
) -> TableSummary | TableFetchError:
    try:
        table = await warehouse.get_table(dataset_id, table_id)
    except Exception as exc:
        logger.warning(
            "tools.list_tables.table_failed",
            extra={"dataset_id": dataset_id, "table_id": table_id, "error": str(exc)},
        )
        return TableFetchError(
            table_id=table_id,
            error=f"Error fetching table metadata: {format_backend_error(exc)}",
        )
    return TableSummary(
        table_id=table_id,
        columns=table.columns,
        time_partitioning=table.time_partitioning,
        description=table.description,
    )


async def list_tables_in_dataset(
    params: DatasetArguments, warehouse: Warehouse, config: ServerConfig
) -> CallToolResult:
    """List a dataset's tables, fetching each table's metadata concurrently.

    A table whose metadata cannot be fetched is reported with an ``error``
    entry instead of failing the whole listing.
    """
    del config
    dataset_id = params.dataset_id
    try:
        if not await warehouse.dataset_exists(dataset_id):
            return format_failure(f"Dataset {dataset_id} not found")
        table_ids = await warehouse.list_tables(dataset_id)
    except Exception as exc:
        return format_failure(f"Error listing tables: {format_backend_error(exc)}")

    entries: list[TableSummary | TableFetchError | None] = [None] * len(table_ids)

    async def _fill(index: int, table_id: str) -> None:
        entries[index] = await _describe_table(warehouse, dataset_id, table_id)

    async with anyio.create_task_group() as task_group:
        for index, table_id in enumerate(table_ids):
            task_group.start_soon(_fill, index, table_id)

    return format_success(entries)

"""Dataset and project-wide table listing tools."""

from __future__ import annotations

from mcp.types import CallToolResult

from ..config import ServerConfig
from ..warehouse import Warehouse
from .query_utils import format_backend_error
from .responses import format_failure, format_success
from .schemas import NoArguments


async def list_datasets(
    params: NoArguments, warehouse: Warehouse, config: ServerConfig
) -> CallToolResult:
    """Return the ids of every dataset in the project."""
    del params, config
    try:
        dataset_ids = await warehouse.list_datasets()
    except Exception as exc:
        return format_failure(f"Error listing datasets: {format_backend_error(exc)}")
    return format_success([dataset_id for dataset_id in dataset_ids if dataset_id])


async def list_all_tables(
    params: NoArguments, warehouse: Warehouse, config: ServerConfig
) -> CallToolResult:
    """Map every dataset id in the project to its table ids."""
    del params, config
    tables_by_dataset: dict[str, list[str]] = {}
    try:
        for dataset_id in await warehouse.list_datasets():
            if not dataset_id:
                continue
            tables_by_dataset[dataset_id] = await warehouse.list_tables(dataset_id)
    except Exception as exc:
        return format_failure(f"Error listing tables: {format_backend_error(exc)}")
    return format_success(tables_by_dataset)

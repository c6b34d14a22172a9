"""`get_table_information` tool: table schema plus up to 20 sample rows."""

from __future__ import annotations

from mcp.types import CallToolResult

from ..config import ServerConfig
from ..errors import MissingPartitionFilterError, ToolValidationError
from ..models import INGESTION_TIME_COLUMN, QueryExecutionOptions, TableDescriptor
from ..warehouse import Warehouse
from .query_utils import (
    SAMPLE_ROW_LIMIT,
    build_partition_filter,
    build_sample_query,
    format_backend_error,
)
from .responses import format_failure, format_success
from .schemas import TableInfo, TableInfoArguments


def build_table_sample_query(
    table: TableDescriptor, project_id: str, partition: str | None
) -> str:
    """Sample query for ``table``.

    Raises:
        MissingPartitionFilterError: The table is partitioned and no partition was given.
    """
    partition_filter = None
    if table.is_partitioned:
        partition_column = table.partition_column or INGESTION_TIME_COLUMN
        if not partition:
            raise MissingPartitionFilterError(table.table_id, partition_column)
        partition_filter = build_partition_filter(partition_column, partition)
    return build_sample_query(project_id, table.dataset_id, table.table_id, partition_filter)


async def get_table_info(
    params: TableInfoArguments, warehouse: Warehouse, config: ServerConfig
) -> CallToolResult:
    try:
        table = await warehouse.get_table(params.dataset_id, params.table_id)
        sql = build_table_sample_query(table, config.project_id, params.partition)
        rows = await warehouse.query(
            QueryExecutionOptions(
                query_text=sql,
                max_bytes_billed=config.max_bytes_billed,
                max_result_rows=SAMPLE_ROW_LIMIT,
            )
        )
    except ToolValidationError as exc:
        return format_failure(str(exc))
    except Exception as exc:
        return format_failure(f"Error getting table information: {format_backend_error(exc)}")

    return format_success(
        TableInfo(
            columns=table.columns,
            time_partitioning=table.time_partitioning,
            sample_data=rows[:SAMPLE_ROW_LIMIT],
        )
    )

"""Error taxonomy for the BigQuery MCP server."""

from __future__ import annotations


class BigQueryMcpError(Exception):
    """Base class for errors raised by this package."""


class ToolValidationError(BigQueryMcpError):
    """Caller-correctable tool input error, surfaced verbatim as a tool failure."""


class EmptyQueryError(ToolValidationError):
    def __init__(self) -> None:
        super().__init__("Empty query is not allowed.")


class WriteOperationRejectedError(ToolValidationError):
    def __init__(self, keyword: str) -> None:
        super().__init__("Only read operations are allowed.")
        self.keyword = keyword


class MissingPartitionFilterError(ToolValidationError):
    def __init__(self, table_id: str, partition_column: str) -> None:
        super().__init__(
            f"Table {table_id} is partitioned by {partition_column} but no partition filter "
            "was provided. This may result in a large query. Please provide a partition value."
        )
        self.table_id = table_id
        self.partition_column = partition_column


class ConfigurationError(BigQueryMcpError):
    """Fatal startup error: invalid configuration or failed connectivity probe."""

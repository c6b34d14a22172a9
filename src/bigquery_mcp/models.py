"""Request-scoped data passed between tool handlers and the warehouse."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

INGESTION_TIME_COLUMN = "_PARTITIONTIME"


@dataclass(frozen=True)
class QueryExecutionOptions:
    """Per-call submission settings derived from the config and tool arguments."""

    query_text: str
    max_bytes_billed: int
    max_result_rows: int | None = None
    dry_run: bool = False


class TableDescriptor(BaseModel):
    """Table metadata as reported by BigQuery."""

    dataset_id: str
    table_id: str
    columns: list[dict[str, Any]] = Field(default_factory=list)
    time_partitioning: dict[str, Any] | None = None
    description: str | None = None

    @property
    def is_partitioned(self) -> bool:
        return self.time_partitioning is not None

    @property
    def partition_column(self) -> str | None:
        if self.time_partitioning is None:
            return None
        return self.time_partitioning.get("field") or INGESTION_TIME_COLUMN


class DryRunStatistics(BaseModel):
    """Statistics of a dry-run query job."""

    total_bytes_processed: int | None = None
    query_plan: list[dict[str, Any]] | None = None

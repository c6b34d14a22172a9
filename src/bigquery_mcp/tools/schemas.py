"""Argument and result models for the MCP tools.

Argument models define each tool's input schema; wire names are camelCase.
Result models fix the JSON shape each tool returns on success.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class NoArguments(ToolArguments):
    pass


class QueryArguments(ToolArguments):
    query: str = Field(min_length=1, description="Read-only BigQuery SQL query")
    max_results: int | None = Field(
        default=None,
        ge=0,
        alias="maxResults",
        description="Maximum rows to return (defaults to the server's --max-results)",
    )


class DatasetArguments(ToolArguments):
    dataset_id: str = Field(min_length=1, alias="datasetId", description="Dataset ID")


class TableInfoArguments(ToolArguments):
    dataset_id: str = Field(min_length=1, alias="datasetId", description="Dataset ID")
    table_id: str = Field(min_length=1, alias="tableId", description="Table ID")
    partition: str | None = Field(
        default=None,
        description="Partition filter (e.g., '20250101' or '2025-01-01')",
    )


class DryRunArguments(ToolArguments):
    query: str = Field(min_length=1, description="BigQuery SQL query to validate")
    dry_run: bool = Field(
        default=True,
        alias="dryRun",
        description="Ignored; this tool never executes the query",
    )


class ToolResultModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TableSummary(ToolResultModel):
    table_id: str
    columns: list[dict[str, Any]] = Field(default_factory=list, alias="schema")
    time_partitioning: dict[str, Any] | None = None
    description: str | None = None


class TableFetchError(ToolResultModel):
    table_id: str
    error: str


class TableInfo(ToolResultModel):
    columns: list[dict[str, Any]] = Field(default_factory=list, alias="schema")
    time_partitioning: dict[str, Any] | None = None
    sample_data: list[dict[str, Any]] = Field(default_factory=list)


class DryRunEstimate(ToolResultModel):
    status: Literal["Query is valid"] = "Query is valid"
    total_bytes_processed: int
    total_bytes_processed_gb: str
    estimated_cost: str
    query_plan: list[dict[str, Any]] | None = None

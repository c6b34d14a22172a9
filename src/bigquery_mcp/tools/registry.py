"""Fixed registry of tool names, descriptions, argument models and handlers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from mcp.types import CallToolResult, Tool
from pydantic import BaseModel

from ..config import ServerConfig
from ..warehouse import Warehouse
from .datasets import list_all_tables, list_datasets
from .dry_run import dry_run_estimate
from .query import run_query
from .schemas import (
    DatasetArguments,
    DryRunArguments,
    NoArguments,
    QueryArguments,
    TableInfoArguments,
)
from .table_info import get_table_info
from .tables import list_tables_in_dataset

ToolHandler = Callable[[Any, Warehouse, ServerConfig], Awaitable[CallToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    arguments: type[BaseModel]
    handler: ToolHandler

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.arguments.model_json_schema(by_alias=True),
        )


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="query",
        description="Execute a read-only BigQuery SQL query",
        arguments=QueryArguments,
        handler=run_query,
    ),
    ToolSpec(
        name="list_all_datasets",
        description="List all datasets in the project",
        arguments=NoArguments,
        handler=list_datasets,
    ),
    ToolSpec(
        name="list_all_tables_with_dataset",
        description="List all tables in a specific dataset with their schemas",
        arguments=DatasetArguments,
        handler=list_tables_in_dataset,
    ),
    ToolSpec(
        name="get_table_information",
        description="Get table schema and sample data (up to 20 rows)",
        arguments=TableInfoArguments,
        handler=get_table_info,
    ),
    ToolSpec(
        name="dry_run_query",
        description="Check query for errors and estimate cost without executing it",
        arguments=DryRunArguments,
        handler=dry_run_estimate,
    ),
    ToolSpec(
        name="list_all_tables",
        description="List all datasets and tables in the project",
        arguments=NoArguments,
        handler=list_all_tables,
    ),
)

TOOLS_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOL_SPECS}

"""MCP tool handlers over BigQuery."""

from .datasets import list_all_tables, list_datasets
from .dry_run import dry_run_estimate
from .query import run_query
from .query_utils import estimate_cost, validate_query
from .registry import TOOL_SPECS, TOOLS_BY_NAME, ToolSpec
from .responses import format_failure, format_success
from .table_info import get_table_info
from .tables import list_tables_in_dataset

__all__ = [
    "TOOLS_BY_NAME",
    "TOOL_SPECS",
    "ToolSpec",
    "dry_run_estimate",
    "estimate_cost",
    "format_failure",
    "format_success",
    "get_table_info",
    "list_all_tables",
    "list_datasets",
    "list_tables_in_dataset",
    "run_query",
    "validate_query",
]

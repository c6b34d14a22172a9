from typing import Any

import pytest

from bigquery_mcp.config import ServerConfig
from bigquery_mcp.models import DryRunStatistics, QueryExecutionOptions, TableDescriptor


class FakeWarehouse:
    """In-memory warehouse recording every call made by the tools."""

    def __init__(self) -> None:
        self.datasets: list[str] = []
        self.tables: dict[str, dict[str, TableDescriptor | Exception]] = {}
        self.rows: list[dict[str, Any]] = []
        self.statistics = DryRunStatistics()
        self.errors: dict[str, Exception] = {}
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    def _maybe_fail(self, operation: str) -> None:
        error = self.errors.get(operation)
        if error is not None:
            raise error

    async def query(self, options: QueryExecutionOptions) -> list[dict[str, Any]]:
        self.calls.append(("query", options))
        self._maybe_fail("query")
        limit = options.max_result_rows
        return list(self.rows if limit is None else self.rows[:limit])

    async def dry_run(self, options: QueryExecutionOptions) -> DryRunStatistics:
        self.calls.append(("dry_run", options))
        self._maybe_fail("dry_run")
        return self.statistics

    async def list_datasets(self, max_results: int | None = None) -> list[str]:
        self.calls.append(("list_datasets", max_results))
        self._maybe_fail("list_datasets")
        return list(self.datasets if max_results is None else self.datasets[:max_results])

    async def dataset_exists(self, dataset_id: str) -> bool:
        self.calls.append(("dataset_exists", dataset_id))
        self._maybe_fail("dataset_exists")
        return dataset_id in self.tables

    async def list_tables(self, dataset_id: str) -> list[str]:
        self.calls.append(("list_tables", dataset_id))
        self._maybe_fail("list_tables")
        return list(self.tables.get(dataset_id, {}))

    async def get_table(self, dataset_id: str, table_id: str) -> TableDescriptor:
        self.calls.append(("get_table", (dataset_id, table_id)))
        table = self.tables[dataset_id][table_id]
        if isinstance(table, Exception):
            raise table
        return table

    def close(self) -> None:
        self.closed = True

    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def warehouse() -> FakeWarehouse:
    return FakeWarehouse()


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(project_id="test-project", max_results=100, max_bytes_billed=1_000_000)

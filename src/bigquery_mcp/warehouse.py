"""BigQuery access used by the tool handlers.

The google-cloud-bigquery client is synchronous; every call is pushed to a
worker thread so handlers can await it without blocking the event loop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Any, ParamSpec, Protocol, TypeVar

from anyio import to_thread
from google.api_core.exceptions import NotFound

from .models import DryRunStatistics, QueryExecutionOptions, TableDescriptor

if TYPE_CHECKING:
    from google.cloud.bigquery import Client as BigQueryClient
    from google.cloud.bigquery.job import QueryPlanEntry

    from .config import ServerConfig

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


class Warehouse(Protocol):
    """Read-only warehouse operations required by the tools."""

    async def query(self, options: QueryExecutionOptions) -> list[dict[str, Any]]:
        """Run a query and return its rows."""
        ...

    async def dry_run(self, options: QueryExecutionOptions) -> DryRunStatistics:
        """Submit a non-executing query and return its statistics."""
        ...

    async def list_datasets(self, max_results: int | None = None) -> list[str]:
        """Return dataset ids of the project."""
        ...

    async def dataset_exists(self, dataset_id: str) -> bool:
        """Return whether the dataset exists."""
        ...

    async def list_tables(self, dataset_id: str) -> list[str]:
        """Return table ids of a dataset."""
        ...

    async def get_table(self, dataset_id: str, table_id: str) -> TableDescriptor:
        """Return metadata for one table."""
        ...

    def close(self) -> None:
        """Release client resources."""
        ...


async def _run_client_call(func: Callable[P, T], /, *args: P.args, **kwargs: P.kwargs) -> T:
    return await to_thread.run_sync(partial(func, *args, **kwargs))


def _plan_entry_to_dict(entry: QueryPlanEntry) -> dict[str, Any]:
    return {
        "name": entry.name,
        "id": entry.entry_id,
        "status": entry.status,
        "inputStages": entry.input_stages,
        "recordsRead": entry.records_read,
        "recordsWritten": entry.records_written,
        "shuffleOutputBytes": entry.shuffle_output_bytes,
        "steps": [{"kind": step.kind, "substeps": step.substeps} for step in entry.steps],
    }


def create_bigquery_client(config: ServerConfig) -> BigQueryClient:
    """Build a client from a service-account key file, or Application Default Credentials."""
    from google.cloud import bigquery

    if config.uses_application_default_credentials:
        return bigquery.Client(project=config.project_id, location=config.location)
    return bigquery.Client.from_service_account_json(
        str(config.key_file),
        project=config.project_id,
        location=config.location,
    )


class BigQueryWarehouse:
    """`Warehouse` backed by a long-lived `google.cloud.bigquery.Client`."""

    def __init__(self, client: BigQueryClient, *, location: str | None = None) -> None:
        self._client = client
        self._location = location

    @classmethod
    def from_config(cls, config: ServerConfig) -> BigQueryWarehouse:
        return cls(create_bigquery_client(config), location=config.location)

    @property
    def project(self) -> str:
        return str(self._client.project)

    def _job_config(self, options: QueryExecutionOptions) -> Any:
        from google.cloud import bigquery

        config = bigquery.QueryJobConfig(use_legacy_sql=False)
        config.maximum_bytes_billed = options.max_bytes_billed
        if options.dry_run:
            config.dry_run = True
            config.use_query_cache = False
        return config

    def _query_sync(self, options: QueryExecutionOptions) -> list[dict[str, Any]]:
        query_job = self._client.query(
            options.query_text,
            job_config=self._job_config(options),
            location=self._location,
        )
        iterator = query_job.result(max_results=options.max_result_rows)
        return [dict(row.items()) for row in iterator]

    def _dry_run_sync(self, options: QueryExecutionOptions) -> DryRunStatistics:
        query_job = self._client.query(
            options.query_text,
            job_config=self._job_config(options),
            location=self._location,
        )
        plan = query_job.query_plan
        return DryRunStatistics(
            total_bytes_processed=query_job.total_bytes_processed,
            query_plan=[_plan_entry_to_dict(entry) for entry in plan] if plan else None,
        )

    def _get_table_sync(self, dataset_id: str, table_id: str) -> TableDescriptor:
        table = self._client.get_table(f"{self.project}.{dataset_id}.{table_id}")
        partitioning = table.time_partitioning
        return TableDescriptor(
            dataset_id=table.dataset_id,
            table_id=table.table_id,
            columns=[field.to_api_repr() for field in table.schema],
            time_partitioning=partitioning.to_api_repr() if partitioning is not None else None,
            description=table.description,
        )

    def _dataset_exists_sync(self, dataset_id: str) -> bool:
        try:
            self._client.get_dataset(f"{self.project}.{dataset_id}")
        except NotFound:
            return False
        return True

    async def query(self, options: QueryExecutionOptions) -> list[dict[str, Any]]:
        logger.debug(
            "warehouse.query",
            extra={"query_chars": len(options.query_text), "max_rows": options.max_result_rows},
        )
        return await _run_client_call(self._query_sync, options)

    async def dry_run(self, options: QueryExecutionOptions) -> DryRunStatistics:
        logger.debug("warehouse.dry_run", extra={"query_chars": len(options.query_text)})
        return await _run_client_call(self._dry_run_sync, options)

    async def list_datasets(self, max_results: int | None = None) -> list[str]:
        datasets = await _run_client_call(
            lambda: list(self._client.list_datasets(max_results=max_results))
        )
        return [dataset.dataset_id or "" for dataset in datasets]

    async def dataset_exists(self, dataset_id: str) -> bool:
        return await _run_client_call(self._dataset_exists_sync, dataset_id)

    async def list_tables(self, dataset_id: str) -> list[str]:
        tables = await _run_client_call(
            lambda: list(self._client.list_tables(f"{self.project}.{dataset_id}"))
        )
        return [table.table_id for table in tables]

    async def get_table(self, dataset_id: str, table_id: str) -> TableDescriptor:
        return await _run_client_call(self._get_table_sync, dataset_id, table_id)

    def close(self) -> None:
        self._client.close()

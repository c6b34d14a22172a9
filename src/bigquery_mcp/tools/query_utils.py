"""Query validation, cost estimation and SQL assembly helpers."""

from __future__ import annotations

import re

from google.api_core.exceptions import BadRequest, GoogleAPICallError

from ..errors import EmptyQueryError, WriteOperationRejectedError
from ..models import INGESTION_TIME_COLUMN

PRICE_PER_TEBIBYTE_USD = 5.0
SAMPLE_ROW_LIMIT = 20

# Whole-word match anywhere in the text. Keywords inside string literals are
# rejected too, and writes hidden in comments or dynamic SQL are not detected.
_WRITE_KEYWORDS = re.compile(
    r"\b(INSERT|UPDATE|DELETE|CREATE|DROP|ALTER|MERGE|TRUNCATE)\b",
    re.IGNORECASE,
)


def validate_query(query: str, *, read_only: bool = True) -> None:
    """Reject empty queries and, when ``read_only``, queries containing write keywords.

    Raises:
        EmptyQueryError: The query is empty after trimming.
        WriteOperationRejectedError: A write keyword appears as a whole word.
    """
    normalized = query.strip()
    if not normalized:
        raise EmptyQueryError()
    if read_only:
        match = _WRITE_KEYWORDS.search(normalized)
        if match is not None:
            raise WriteOperationRejectedError(match.group(1).upper())


def estimate_cost(bytes_processed: int) -> float:
    """Estimated on-demand price in USD for scanning ``bytes_processed`` bytes."""
    if bytes_processed < 0:
        raise ValueError(f"bytes_processed must be >= 0, got {bytes_processed}")
    tebibyte = float(1024**4)
    return (bytes_processed / tebibyte) * PRICE_PER_TEBIBYTE_USD


def format_gigabytes(bytes_processed: int) -> str:
    return f"{bytes_processed / 1024**3:.2f} GB"


def format_usd(amount: float) -> str:
    return f"${amount:.2f}"


def format_partition_date(value: str) -> str:
    """``YYYYMMDD`` becomes ``YYYY-MM-DD``; anything else is returned unchanged."""
    if len(value) == 8 and value.isdigit():
        return f"{value[:4]}-{value[4:6]}-{value[6:]}"
    return value


def build_partition_filter(partition_column: str, partition: str) -> str:
    # Values are interpolated as-is, not bound as query parameters.
    if partition_column == INGESTION_TIME_COLUMN:
        return f"{INGESTION_TIME_COLUMN} = TIMESTAMP('{format_partition_date(partition)}')"
    return f"{partition_column} = '{partition}'"


def build_sample_query(
    project_id: str,
    dataset_id: str,
    table_id: str,
    partition_filter: str | None = None,
    *,
    limit: int = SAMPLE_ROW_LIMIT,
) -> str:
    sql = f"SELECT * FROM `{project_id}.{dataset_id}.{table_id}`"
    if partition_filter:
        sql += f" WHERE {partition_filter}"
    return f"{sql} LIMIT {limit}"


def format_backend_error(error: Exception) -> str:
    """Human-readable message for an exception raised by the BigQuery client."""
    if isinstance(error, BadRequest):
        errors = getattr(error, "errors", None)
        if isinstance(errors, list) and errors:
            first = errors[0] if isinstance(errors[0], dict) else {}
            message = first.get("message")
            if isinstance(message, str) and message.strip():
                return message
    if isinstance(error, GoogleAPICallError) and error.message:
        return str(error.message)
    return str(error) if str(error).strip() else f"Unknown BigQuery error ({type(error).__name__})"

"""Server configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError

DEFAULT_LOCATION = "asia-northeast1"
DEFAULT_MAX_RESULTS = 1000
DEFAULT_MAX_BYTES_BILLED = 500_000_000_000


@dataclass(frozen=True)
class ServerConfig:
    """Immutable process-wide settings shared by every tool handler."""

    project_id: str
    location: str = DEFAULT_LOCATION
    key_file: Path | None = None
    max_results: int = DEFAULT_MAX_RESULTS
    max_bytes_billed: int = DEFAULT_MAX_BYTES_BILLED

    def __post_init__(self) -> None:
        if not self.project_id or not self.project_id.strip():
            raise ConfigurationError("Project ID is required")
        if self.max_results < 0:
            raise ConfigurationError(f"max_results must be >= 0, got {self.max_results}")
        if self.max_bytes_billed < 0:
            raise ConfigurationError(
                f"max_bytes_billed must be >= 0, got {self.max_bytes_billed}"
            )

    @property
    def uses_application_default_credentials(self) -> bool:
        return self.key_file is None

    @property
    def max_bytes_billed_gb(self) -> float:
        return self.max_bytes_billed / 1024**3

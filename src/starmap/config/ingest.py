"""Ingestion run defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int
from .errors import ConfigurationError

DEFAULT_MAX_CONCURRENCY = 16


@dataclass(frozen=True, slots=True)
class IngestConfig:
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ConfigurationError("max_concurrency must be at least 1")


def get_ingest_config() -> IngestConfig:
    return IngestConfig(
        max_concurrency=env_int("STARMAP_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY),
    )

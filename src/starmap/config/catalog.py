"""Remote catalog (ESI) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int, optional_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_CATALOG_BASE_URL = "https://esi.evetech.net/latest"
DEFAULT_CATALOG_TIMEOUT_SECONDS = 30.0
SYSTEMS_INDEX_PATH = "universe/systems/"
SYSTEM_DETAIL_PATH = "universe/systems/{system_id}/"


@dataclass(frozen=True, slots=True)
class CatalogConfig:
    """Holds the catalog endpoint layout and its HTTP client settings."""

    resilience: ResilienceConfig
    index_path: str = SYSTEMS_INDEX_PATH
    detail_path: str = SYSTEM_DETAIL_PATH

    def detail_url(self, system_id: int) -> str:
        return self.detail_path.format(system_id=system_id)


def is_cacheable_payload(payload: object) -> bool:
    """ESI reports failures as ``{"error": ...}`` bodies; those are never cached."""

    return not (isinstance(payload, dict) and "error" in payload)


def _cache_config() -> CacheConfig | None:
    backend = (optional_env_var("CATALOG_HTTP_CACHE") or "off").lower()
    if backend == "off":
        return None
    if backend in {"memory", "sqlite"}:
        return CacheConfig(
            backend="memory" if backend == "memory" else "sqlite",
            should_cache=is_cacheable_payload,
        )
    raise ConfigurationError(f"Unsupported CATALOG_HTTP_CACHE backend: {backend}")


def _rate_limit(per_second: float | None) -> RateLimit | None:
    if per_second is None:
        return None
    if per_second >= 1:
        return RateLimit(max_calls=per_second, per_seconds=1.0)
    return RateLimit(max_calls=1, per_seconds=1.0 / per_second)


def get_catalog_config(*, max_connections: int | None = None) -> CatalogConfig:
    base_url = optional_env_var("CATALOG_BASE_URL") or DEFAULT_CATALOG_BASE_URL
    timeout = env_float("CATALOG_TIMEOUT_SECONDS", DEFAULT_CATALOG_TIMEOUT_SECONDS)
    if timeout is None or timeout <= 0:
        raise ConfigurationError("CATALOG_TIMEOUT_SECONDS must be positive")

    retry_total = env_int("CATALOG_RETRY_TOTAL", 0)
    if retry_total < 0:
        raise ConfigurationError("CATALOG_RETRY_TOTAL must be non-negative")

    rate = env_float("CATALOG_RATE_LIMIT", None)
    if rate is not None and rate <= 0:
        raise ConfigurationError("CATALOG_RATE_LIMIT must be positive")

    user_agent = optional_env_var("CATALOG_USER_AGENT")

    resilience = ResilienceConfig(
        name="catalog",
        base_url=base_url.rstrip("/") + "/",
        timeout_seconds=timeout,
        retry=RetryPolicy(total=retry_total) if retry_total else None,
        ratelimit=_rate_limit(rate),
        cache=_cache_config(),
        default_headers={"User-Agent": user_agent} if user_agent else None,
        max_connections=max_connections,
    )
    return CatalogConfig(resilience=resilience)

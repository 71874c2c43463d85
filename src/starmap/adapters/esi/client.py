"""HTTP client for the ESI universe/systems endpoints."""

from __future__ import annotations

import sqlite3
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from starmap.domain.errors import DecodeError, TransportError

from .schema import ErrorResponse, SystemDetail, SystemIdList

if TYPE_CHECKING:
    from starmap.adapters.http_resilience import ResilientClient
    from starmap.config.catalog import CatalogConfig

log = getLogger(__name__)


class EsiClient:
    """Lists and fetches solar systems over a shared ``ResilientClient``.

    Every failure is reported through the ingestion taxonomy: anything that
    keeps a response from arriving with a success status becomes a
    ``TransportError``, anything wrong with the body a ``DecodeError``.
    Storage failures of the sqlite response cache count as transport failures.
    """

    def __init__(self, *, config: CatalogConfig, client: ResilientClient) -> None:
        self._config = config
        self._client = client

    async def list_system_ids(self) -> list[int]:
        payload = await self._get_json(self._config.index_path)
        try:
            return SystemIdList.validate_python(payload)
        except ValidationError as exc:
            raise DecodeError(f"Unexpected system index payload: {exc}") from exc

    async def fetch_system(self, system_id: int) -> SystemDetail:
        payload = await self._get_json(self._config.detail_url(system_id), system_id=system_id)
        try:
            detail = SystemDetail.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(
                f"Unexpected payload for system {system_id}: {exc}",
                system_id=system_id,
            ) from exc
        if detail.system_id != system_id:
            raise DecodeError(
                f"Requested system {system_id} but catalog returned {detail.system_id}",
                system_id=system_id,
            )
        return detail

    async def _get_json(self, path: str, *, system_id: int | None = None) -> object:
        try:
            response = await self._client.get(path)
        except (httpx.HTTPError, sqlite3.Error) as exc:
            raise TransportError(
                f"Request to {path} failed: {exc!r}", system_id=system_id
            ) from exc

        if not response.is_success:
            raise TransportError(
                f"Catalog returned {response.status_code} for {path}: {_error_detail(response)}",
                system_id=system_id,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"Malformed JSON body from {path}", system_id=system_id) from exc


def _error_detail(response: httpx.Response) -> str:
    try:
        return ErrorResponse.model_validate(response.json()).error
    except (ValueError, ValidationError):
        log.debug("Catalog error response without an error message: %s", response.text[:200])
        return response.reason_phrase

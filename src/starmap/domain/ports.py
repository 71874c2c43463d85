"""Ports the ingestion orchestrator depends on.

Adapters implement these protocols; the orchestrator only sees the failure
taxonomy from :mod:`starmap.domain.errors`, never library exceptions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .model import SystemRecord


@runtime_checkable
class SystemIdLister(Protocol):
    """Returns every system ID the catalog knows about."""

    async def list_system_ids(self) -> Sequence[int]: ...


@runtime_checkable
class SystemDetailFetcher[TDetail](Protocol):
    """Retrieves the detail document of a single system."""

    async def fetch_system(self, system_id: int) -> TDetail: ...


@runtime_checkable
class SystemWriter(Protocol):
    """Persists a transformed system record.

    Returns ``True`` when a node was created and ``False`` when the record was
    already present and the write was skipped.
    """

    async def write(self, record: SystemRecord) -> bool: ...


type SystemTransformer[TDetail] = Callable[[TDetail], SystemRecord]

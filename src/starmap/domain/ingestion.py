"""Concurrent ingestion of catalog systems into the graph store."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import IngestError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .errors import ErrorKind
    from .ports import SystemDetailFetcher, SystemIdLister, SystemTransformer, SystemWriter

DEFAULT_MAX_CONCURRENCY = 16

log = getLogger(__name__)


@dataclass(slots=True)
class IngestionReport:
    """Per-system outcome of one ingestion run."""

    succeeded: set[int] = field(default_factory=set[int])
    failed: dict[int, ErrorKind] = field(default_factory=dict[int, "ErrorKind"])
    reasons: dict[int, str] = field(default_factory=dict[int, str])
    skipped: set[int] = field(default_factory=set[int])
    created: set[int] = field(default_factory=set[int])
    existing: set[int] = field(default_factory=set[int])

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.skipped)

    def record_success(self, system_id: int, *, created: bool) -> None:
        self.succeeded.add(system_id)
        if created:
            self.created.add(system_id)
        else:
            self.existing.add(system_id)

    def record_failure(self, system_id: int, error: IngestError) -> None:
        self.failed[system_id] = error.kind
        self.reasons[system_id] = str(error)


@dataclass(slots=True)
class IngestionOrchestrator[TDetail]:
    """Fan out one fetch -> transform -> write unit per listed system.

    Listing is the only fatal step: its errors propagate before any unit starts.
    Every unit afterwards runs to completion on its own and its ``IngestError``
    is recorded against the system ID instead of aborting the run. At most
    ``max_concurrency`` units are in flight at any time.
    """

    lister: SystemIdLister
    fetcher: SystemDetailFetcher[TDetail]
    transform: SystemTransformer[TDetail]
    writer: SystemWriter
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

    def run(self) -> IngestionReport:
        return asyncio.run(self.run_async())

    async def run_async(self, *, cancel: asyncio.Event | None = None) -> IngestionReport:
        """Execute one ingestion run.

        Setting ``cancel`` stops new units from being launched; units already in
        flight drain normally and the IDs never started end up in
        ``IngestionReport.skipped``.
        """

        system_ids = _unique(await self.lister.list_system_ids())
        log.info(
            "Ingesting %s systems with max_concurrency=%s",
            len(system_ids),
            self.max_concurrency,
        )

        report = IngestionReport()
        slots = asyncio.Semaphore(self.max_concurrency)
        async with asyncio.TaskGroup() as group:
            for index, system_id in enumerate(system_ids):
                await slots.acquire()
                if cancel is not None and cancel.is_set():
                    slots.release()
                    report.skipped.update(system_ids[index:])
                    log.warning(
                        "Cancellation requested, skipping %s remaining systems",
                        len(system_ids) - index,
                    )
                    break
                group.create_task(self._run_unit(system_id, slots=slots, report=report))

        return report

    async def _run_unit(
        self,
        system_id: int,
        *,
        slots: asyncio.Semaphore,
        report: IngestionReport,
    ) -> None:
        try:
            detail = await self.fetcher.fetch_system(system_id)
            record = self.transform(detail)
            created = await self.writer.write(record)
        except IngestError as exc:
            log.warning("System %s failed (%s): %s", system_id, exc.kind, exc)
            report.record_failure(system_id, exc)
        else:
            log.debug("System %s stored (created=%s)", system_id, created)
            report.record_success(system_id, created=created)
        finally:
            slots.release()


def _unique(system_ids: Iterable[int]) -> list[int]:
    return list(dict.fromkeys(system_ids))

"""Behaviour of the concurrent ingestion orchestrator."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import pytest

from starmap.domain.errors import DecodeError, ErrorKind, StoreError, TransportError
from starmap.domain.ingestion import IngestionOrchestrator, IngestionReport
from starmap.domain.model import SystemRecord
from tests.support.ports import (
    FakeDetail,
    FakeFetcher,
    FakeLister,
    FakeWriter,
    InFlightCounter,
    fake_transform,
)


def _orchestrator(
    lister: FakeLister,
    fetcher: FakeFetcher | None = None,
    writer: FakeWriter | None = None,
    *,
    max_concurrency: int = 4,
) -> IngestionOrchestrator[FakeDetail]:
    return IngestionOrchestrator(
        lister=lister,
        fetcher=fetcher or FakeFetcher(),
        transform=fake_transform,
        writer=writer or FakeWriter(),
        max_concurrency=max_concurrency,
    )


def test_transport_failure_is_recorded_per_system() -> None:
    fetcher = FakeFetcher(errors={30000144: TransportError("connection reset")})
    orchestrator = _orchestrator(FakeLister([30000142, 30000144]), fetcher)

    report = orchestrator.run()

    assert report.succeeded == {30000142}
    assert report.failed == {30000144: ErrorKind.TRANSPORT}
    assert report.reasons[30000144] == "connection reset"


def test_decode_failure_does_not_abort_run() -> None:
    fetcher = FakeFetcher(errors={30000142: DecodeError("position missing")})
    writer = FakeWriter()
    orchestrator = _orchestrator(FakeLister([30000142, 30000144, 31000005]), fetcher, writer)

    report = orchestrator.run()

    assert report.failed == {30000142: ErrorKind.DECODE}
    assert report.succeeded == {30000144, 31000005}
    assert sorted(record.system_id for record in writer.stored) == [30000144, 31000005]


def test_store_failure_is_recorded() -> None:
    writer = FakeWriter(errors={30000144: StoreError("constraint violated")})

    report = _orchestrator(FakeLister([30000142, 30000144]), writer=writer).run()

    assert report.failed == {30000144: ErrorKind.STORE}
    assert report.succeeded == {30000142}


def test_empty_id_list_performs_no_work() -> None:
    fetcher = FakeFetcher()
    writer = FakeWriter()

    report = _orchestrator(FakeLister([]), fetcher, writer).run()

    assert report == IngestionReport()
    assert fetcher.fetched == []
    assert writer.stored == []


def test_lister_failure_is_fatal_before_any_unit() -> None:
    lister = FakeLister([30000142], error=TransportError("catalog down"))
    fetcher = FakeFetcher()
    writer = FakeWriter()

    with pytest.raises(TransportError, match="catalog down"):
        _orchestrator(lister, fetcher, writer).run()

    assert lister.calls == 1
    assert fetcher.fetched == []
    assert writer.stored == []


def test_every_unit_completes_despite_failures() -> None:
    system_ids = list(range(30000001, 30000021))
    errors = {system_id: TransportError("boom") for system_id in system_ids[::2]}
    fetcher = FakeFetcher(errors=dict(errors), delay=0.001)

    report = _orchestrator(FakeLister(system_ids), fetcher, max_concurrency=3).run()

    assert set(report.failed) == set(errors)
    assert report.succeeded == set(system_ids) - set(errors)
    assert sorted(fetcher.fetched) == system_ids


@pytest.mark.parametrize("max_concurrency", [1, 3, 5])
def test_in_flight_units_never_exceed_bound(max_concurrency: int) -> None:
    counter = InFlightCounter()
    system_ids = list(range(30000001, 30000031))
    fetcher = FakeFetcher(counter=counter, delay=0.002)
    writer = FakeWriter(counter=counter, delay=0.002)

    report = _orchestrator(
        FakeLister(system_ids), fetcher, writer, max_concurrency=max_concurrency
    ).run()

    assert report.succeeded == set(system_ids)
    assert counter.peak == max_concurrency
    assert counter.current == 0


def test_duplicate_ids_are_processed_once() -> None:
    fetcher = FakeFetcher()

    report = _orchestrator(FakeLister([30000142, 30000142, 30000144]), fetcher).run()

    assert sorted(fetcher.fetched) == [30000142, 30000144]
    assert report.succeeded == {30000142, 30000144}


def test_report_separates_created_and_existing() -> None:
    writer = FakeWriter()
    orchestrator = _orchestrator(FakeLister([30000142]), writer=writer)

    first = orchestrator.run()
    second = orchestrator.run()

    assert first.created == {30000142}
    assert second.existing == {30000142}
    assert second.succeeded == {30000142}
    assert len(writer.stored) == 1


def test_cancellation_stops_launching_new_units() -> None:
    system_ids = list(range(30000001, 30000011))
    first_write = asyncio.Event()
    writer = FakeWriter(on_write=first_write, delay=0.001)
    orchestrator = _orchestrator(FakeLister(system_ids), writer=writer, max_concurrency=1)

    async def run_with_cancel() -> IngestionReport:
        cancel = asyncio.Event()

        async def cancel_after_first_write() -> None:
            await first_write.wait()
            cancel.set()

        watcher = asyncio.create_task(cancel_after_first_write())
        report = await orchestrator.run_async(cancel=cancel)
        await watcher
        return report

    report = asyncio.run(run_with_cancel())

    assert report.succeeded
    assert report.skipped
    assert report.succeeded.isdisjoint(report.skipped)
    assert report.succeeded | report.skipped == set(system_ids)
    assert report.total == len(system_ids)


def test_invalid_concurrency_bound_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_concurrency"):
        _orchestrator(FakeLister([]), max_concurrency=0)


@dataclass(slots=True)
class _ExplodingTransform:
    def __call__(self, detail: FakeDetail) -> object:
        raise AssertionError(f"unexpected transform of {detail.system_id}")


def test_transform_is_not_called_for_failed_fetch() -> None:
    orchestrator = IngestionOrchestrator(
        lister=FakeLister([30000144]),
        fetcher=FakeFetcher(errors={30000144: TransportError("unreachable")}),
        transform=_ExplodingTransform(),  # type: ignore[arg-type]
        writer=FakeWriter(),
    )

    report = orchestrator.run()

    assert report.failed == {30000144: ErrorKind.TRANSPORT}


def _broken_transform(detail: FakeDetail) -> SystemRecord:
    raise KeyError(f"position of {detail.system_id}")


def test_defect_outside_error_taxonomy_aborts_run() -> None:
    orchestrator = IngestionOrchestrator(
        lister=FakeLister([30000142]),
        fetcher=FakeFetcher(),
        transform=_broken_transform,
        writer=FakeWriter(),
    )

    with pytest.raises(ExceptionGroup) as excinfo:
        orchestrator.run()

    assert [type(exc) for exc in excinfo.value.exceptions] == [KeyError]

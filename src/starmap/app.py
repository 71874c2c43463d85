"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
import contextlib
import signal
from logging import getLogger
from typing import TYPE_CHECKING

from starmap.adapters.esi import EsiClient, translate_system
from starmap.adapters.http_resilience import ResilientClient
from starmap.adapters.neo4j import Neo4jSystemWriter, open_graph_driver
from starmap.config import get_catalog_config, get_graph_store_config, get_ingest_config
from starmap.domain.ingestion import IngestionOrchestrator

if TYPE_CHECKING:
    from starmap.config import CatalogConfig, GraphStoreConfig, IngestConfig
    from starmap.domain.ingestion import IngestionReport

log = getLogger(__name__)


def ingest_systems(
    *,
    catalog: CatalogConfig | None = None,
    graph_store: GraphStoreConfig | None = None,
    ingest: IngestConfig | None = None,
) -> IngestionReport:
    """Ingest every catalog system into the graph store using the configured adapters."""

    effective_ingest = ingest or get_ingest_config()
    effective_catalog = catalog or get_catalog_config(
        max_connections=effective_ingest.max_concurrency
    )
    effective_store = graph_store or get_graph_store_config()
    log.info(
        "Starting system ingest: catalog=%s, store=%s, max_concurrency=%s",
        effective_catalog.resilience.base_url,
        effective_store.uri,
        effective_ingest.max_concurrency,
    )

    report = asyncio.run(
        _ingest_systems_async(
            catalog=effective_catalog,
            graph_store=effective_store,
            ingest=effective_ingest,
        )
    )

    log.info(
        "Finished system ingest: succeeded=%s (created=%s, existing=%s), failed=%s, skipped=%s",
        len(report.succeeded),
        len(report.created),
        len(report.existing),
        len(report.failed),
        len(report.skipped),
    )
    return report


async def _ingest_systems_async(
    *,
    catalog: CatalogConfig,
    graph_store: GraphStoreConfig,
    ingest: IngestConfig,
) -> IngestionReport:
    cancel = asyncio.Event()
    _install_shutdown_handlers(cancel)

    async with (
        ResilientClient(catalog.resilience) as http_client,
        open_graph_driver(
            graph_store, max_connection_pool_size=ingest.max_concurrency
        ) as driver,
    ):
        esi = EsiClient(config=catalog, client=http_client)
        orchestrator = IngestionOrchestrator(
            lister=esi,
            fetcher=esi,
            transform=translate_system,
            writer=Neo4jSystemWriter(driver, database=graph_store.database),
            max_concurrency=ingest.max_concurrency,
        )
        return await orchestrator.run_async(cancel=cancel)


def _install_shutdown_handlers(cancel: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()

    def request_shutdown() -> None:
        if not cancel.is_set():
            log.warning("Shutdown requested, draining in-flight systems")
        cancel.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        # not available on Windows event loops
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(signum, request_shutdown)

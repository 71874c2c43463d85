"""Scoped acquisition of the shared Neo4j driver."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from neo4j import AsyncGraphDatabase

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from neo4j import AsyncDriver

    from starmap.config.graph_store import GraphStoreConfig

log = getLogger(__name__)


@asynccontextmanager
async def open_graph_driver(
    config: GraphStoreConfig,
    *,
    max_connection_pool_size: int | None = None,
) -> AsyncIterator[AsyncDriver]:
    """Open one driver for the whole run and close it on exit.

    Connectivity is verified up front so an unreachable store fails the run
    before any system is fetched.
    """

    options: dict[str, int] = {}
    if max_connection_pool_size is not None:
        options["max_connection_pool_size"] = max_connection_pool_size

    driver = AsyncGraphDatabase.driver(config.uri, auth=(config.user, config.password), **options)
    try:
        log.info("Connecting to graph store at %s", config.uri)
        await driver.verify_connectivity()
        yield driver
    finally:
        await driver.close()
        log.info("Closed graph store driver")

"""Persist system records as ``System`` nodes in Neo4j."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Final

from neo4j.exceptions import DriverError, Neo4jError, ServiceUnavailable, SessionExpired

from starmap.domain.errors import StoreError, TransportError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from neo4j import AsyncDriver, AsyncManagedTransaction

    from starmap.domain.model import SystemRecord

log = getLogger(__name__)

SYSTEM_EXISTS_QUERY: Final[str] = (
    "MATCH (s:System {system_id: $system_id}) RETURN count(s) AS count"
)

CREATE_SYSTEM_QUERY: Final[str] = """
CREATE (s:System {
    system_id: $system_id,
    name: $name,
    constellation_id: $constellation_id,
    security_status: $security_status,
    star_id: $star_id,
    security_class: $security_class,
    x: $x,
    y: $y,
    z: $z,
    planets: $planets,
    stargates: $stargates
})
"""

type PropertyValue = int | float | str


def encode_optional(value: int | Sequence[int] | None) -> str:
    """Serialise an optional scalar or list as compact JSON text (``"null"`` if absent)."""

    if value is None or isinstance(value, int):
        return json.dumps(value)
    return json.dumps(list(value), separators=(",", ":"))


def system_properties(record: SystemRecord) -> dict[str, PropertyValue]:
    """Node properties for ``record`` in the stored layout of ``System`` nodes."""

    return {
        "system_id": record.system_id,
        "name": record.name or "",
        "constellation_id": encode_optional(record.constellation_id),
        "security_status": record.security_status,
        "star_id": encode_optional(record.star_id),
        "security_class": record.security_class or "",
        "x": record.x,
        "y": record.y,
        "z": record.z,
        "planets": encode_optional(record.planet_ids),
        "stargates": encode_optional(record.stargate_ids),
    }


async def _count_systems(tx: AsyncManagedTransaction, system_id: int) -> int:
    result = await tx.run(SYSTEM_EXISTS_QUERY, system_id=system_id)
    record = await result.single()
    if record is None:
        return 0
    return int(record["count"])


async def _create_if_absent(
    tx: AsyncManagedTransaction,
    properties: dict[str, PropertyValue],
) -> bool:
    if await _count_systems(tx, int(properties["system_id"])) > 0:
        return False
    result = await tx.run(CREATE_SYSTEM_QUERY, properties)
    await result.consume()
    return True


class Neo4jSystemWriter:
    """Existence-gated insert of ``System`` nodes.

    The existence check and the ``CREATE`` share one write transaction, so
    writing a ``system_id`` that is already stored is a successful no-op.
    The driver is shared by all concurrent writers; each write opens its own
    session from the driver's pool.
    """

    def __init__(self, driver: AsyncDriver, *, database: str | None = None) -> None:
        self._driver = driver
        self._database = database

    async def write(self, record: SystemRecord) -> bool:
        properties = system_properties(record)
        try:
            async with self._driver.session(database=self._database) as session:
                created = await session.execute_write(_create_if_absent, properties)
        except (ServiceUnavailable, SessionExpired) as exc:
            raise TransportError(
                f"Graph store unreachable while writing system {record.system_id}: {exc}",
                system_id=record.system_id,
            ) from exc
        except (Neo4jError, DriverError) as exc:
            raise StoreError(
                f"Graph store rejected system {record.system_id}: {exc}",
                system_id=record.system_id,
            ) from exc

        if not created:
            log.debug("System %s already stored, skipping insert", record.system_id)
        return created

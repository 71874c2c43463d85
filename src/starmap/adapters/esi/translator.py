"""Translate ESI system payloads into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starmap.domain.model import SystemRecord

if TYPE_CHECKING:
    from .schema import PlanetPayload, SystemDetail


def translate_system(detail: SystemDetail) -> SystemRecord:
    position = detail.position
    return SystemRecord(
        system_id=detail.system_id,
        name=detail.name,
        constellation_id=detail.constellation_id,
        security_status=detail.security_status,
        security_class=detail.security_class,
        x=position.x,
        y=position.y,
        z=position.z,
        star_id=detail.star_id,
        planet_ids=_planet_ids(detail.planets),
        stargate_ids=tuple(detail.stargates) if detail.stargates is not None else None,
    )


def _planet_ids(planets: list[PlanetPayload] | None) -> tuple[int, ...] | None:
    # moons and asteroid belts are not part of the System node
    if planets is None:
        return None
    return tuple(planet.planet_id for planet in planets)

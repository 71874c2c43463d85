"""Domain records produced by the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Position(NamedTuple):
    x: float
    y: float
    z: float


@dataclass(frozen=True, slots=True)
class SystemRecord:
    """Flat persistence shape of one star system.

    Optional attributes stay ``None`` when the catalog omits them; the graph writer
    decides how absence is encoded in the store.
    """

    system_id: int
    security_status: float
    x: float
    y: float
    z: float
    name: str | None = None
    constellation_id: int | None = None
    security_class: str | None = None
    star_id: int | None = None
    planet_ids: tuple[int, ...] | None = None
    stargate_ids: tuple[int, ...] | None = None

    @property
    def position(self) -> Position:
        return Position(self.x, self.y, self.z)

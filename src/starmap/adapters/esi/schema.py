"""Pydantic models describing the ESI universe/systems payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, TypeAdapter


class EsiBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)


class PositionPayload(EsiBaseModel):
    x: float
    y: float
    z: float


class PlanetPayload(EsiBaseModel):
    planet_id: int
    moons: list[int] | None = None
    asteroid_belts: list[int] | None = None


class SystemDetail(EsiBaseModel):
    system_id: int
    security_status: float
    position: PositionPayload
    name: str | None = None
    constellation_id: int | None = None
    security_class: str | None = None
    star_id: int | None = None
    stargates: list[int] | None = None
    planets: list[PlanetPayload] | None = None


class ErrorResponse(EsiBaseModel):
    error: str


SystemIdList = TypeAdapter(list[int], config=ConfigDict(strict=True))

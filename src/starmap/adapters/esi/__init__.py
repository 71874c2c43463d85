"""Public interface for the ESI catalog adapter."""

from __future__ import annotations

from .client import EsiClient
from .schema import PlanetPayload, PositionPayload, SystemDetail
from .translator import translate_system

__all__ = [
    "EsiClient",
    "PlanetPayload",
    "PositionPayload",
    "SystemDetail",
    "translate_system",
]

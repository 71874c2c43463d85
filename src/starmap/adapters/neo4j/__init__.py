"""Neo4j graph store adapter."""

from __future__ import annotations

from .driver import open_graph_driver
from .writer import Neo4jSystemWriter, encode_optional, system_properties

__all__ = [
    "Neo4jSystemWriter",
    "encode_optional",
    "open_graph_driver",
    "system_properties",
]

"""Graph store (Neo4j) connection settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars


@dataclass(frozen=True, slots=True)
class GraphStoreConfig:
    uri: str
    user: str
    password: str = field(repr=False)
    database: str | None = None


def get_graph_store_config() -> GraphStoreConfig:
    values = require_env_vars(("NEO4J_URI", "NEO4J_USER", "NEO4J_PASSWORD"))
    return GraphStoreConfig(
        uri=values["NEO4J_URI"],
        user=values["NEO4J_USER"],
        password=values["NEO4J_PASSWORD"],
        database=optional_env_var("NEO4J_DATABASE"),
    )

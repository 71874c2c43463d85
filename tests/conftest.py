from __future__ import annotations

import json
from pathlib import Path

import pytest

from starmap.adapters.esi.schema import SystemDetail
from starmap.config.catalog import CatalogConfig
from starmap.config.http_resilience import ResilienceConfig

EsiPayload = dict[str, object]
FIXTURES = Path(__file__).resolve().parent / "data" / "esi"


def _load_system_payloads() -> list[EsiPayload]:
    payloads: list[EsiPayload] = []
    for line in (FIXTURES / "systems.jsonl").read_text().splitlines():
        if not line.strip():
            continue
        payloads.append(json.loads(line))
    return payloads


@pytest.fixture
def system_payloads() -> list[EsiPayload]:
    return _load_system_payloads()


@pytest.fixture
def system_payloads_by_id(system_payloads: list[EsiPayload]) -> dict[int, EsiPayload]:
    return {int(str(payload["system_id"])): payload for payload in system_payloads}


@pytest.fixture
def jita_payload(system_payloads_by_id: dict[int, EsiPayload]) -> EsiPayload:
    return system_payloads_by_id[30000142]


@pytest.fixture
def jita(jita_payload: EsiPayload) -> SystemDetail:
    return SystemDetail.model_validate(jita_payload)


@pytest.fixture
def catalog_config() -> CatalogConfig:
    return CatalogConfig(
        resilience=ResilienceConfig(name="catalog", base_url="https://esi.example/latest/")
    )

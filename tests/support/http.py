"""Helpers wiring ``ResilientClient`` to an ``httpx.MockTransport``."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx

from starmap.adapters.http_resilience import ResilientClient

if TYPE_CHECKING:
    from starmap.config.http_resilience import ResilienceConfig

Handler = Callable[[httpx.Request], httpx.Response]


def make_mock_client(resilience: ResilienceConfig, handler: Handler) -> ResilientClient:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    return ResilientClient(resilience, transport=httpx.MockTransport(async_handler))

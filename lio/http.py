"""LIO Library - HTTP sources and sinks.

Labeled endpoints backed by an httpx.AsyncClient. The client is owned by the
caller, who decides timeouts, transports and its lifetime.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .io_async import AsyncSink, AsyncSource, async_snk, async_src
from .lattice import Level

logger = logging.getLogger(__name__)


def http_source(
    level: Level, client: httpx.AsyncClient, url: str, *, as_json: bool = True
) -> AsyncSource[Any]:
    """Source reading `url` with GET.

    The response body is decoded as JSON unless `as_json` is False, in which
    case the text is returned. Error statuses raise httpx.HTTPStatusError.
    """

    async def reader() -> Any:
        response = await client.get(url)
        response.raise_for_status()
        logger.debug("GET %s -> %d", url, response.status_code)
        return response.json() if as_json else response.text

    return async_src(level, reader)


def http_sink(level: Level, client: httpx.AsyncClient, url: str) -> AsyncSink[Any]:
    """Sink POSTing each written value to `url` as JSON."""

    async def writer(value: Any) -> None:
        response = await client.post(url, json=value)
        response.raise_for_status()
        logger.debug("POST %s -> %d", url, response.status_code)

    return async_snk(level, writer)

"""Unit tests for HTTP sources and sinks."""

import asyncio
import json

import httpx
import pytest

from lio import (
    FlowViolationError,
    bind_async,
    input_async,
    level,
    output_async,
    unsafe_run_async_lio,
)
from lio.http import http_sink, http_source

ALICE = level("Alice")
BOB = level("Bob")


class FakeService:
    """In-process HTTP endpoint recording posted bodies."""

    def __init__(self, status_code=200):
        self.status_code = status_code
        self.posted = []

    def __call__(self, request):
        if request.method == "POST":
            self.posted.append(json.loads(request.content))
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json={"balance": 52})


def run_with_client(service, build):
    """Runs the computation built from a client backed by `service`."""

    async def main():
        transport = httpx.MockTransport(service)
        async with httpx.AsyncClient(transport=transport) as client:
            return await unsafe_run_async_lio(build(client))

    return asyncio.run(main())


class TestHttp:
    def test_source_labels_decoded_body(self):
        lv = run_with_client(
            FakeService(),
            lambda client: input_async(
                http_source(ALICE, client, "http://alice.test/balance")
            ),
        )
        assert lv.get_label() == ALICE
        assert lv.unsafe_get_value() == {"balance": 52}

    def test_source_as_text(self):
        lv = run_with_client(
            FakeService(),
            lambda client: input_async(
                http_source(ALICE, client, "http://alice.test/balance", as_json=False)
            ),
        )
        assert json.loads(lv.unsafe_get_value()) == {"balance": 52}

    def test_source_to_sink(self):
        service = FakeService()
        run_with_client(
            service,
            lambda client: bind_async(
                input_async(http_source(ALICE, client, "http://alice.test/balance")),
                output_async(http_sink(ALICE, client, "http://alice.test/report")),
            ),
        )
        assert service.posted == [{"balance": 52}]

    def test_sink_of_other_principal_rejected(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(FakeService()))
        with pytest.raises(FlowViolationError):
            bind_async(
                input_async(http_source(ALICE, client, "http://alice.test/balance")),
                output_async(http_sink(BOB, client, "http://bob.test/report")),
            )

    def test_error_status_propagates(self):
        with pytest.raises(httpx.HTTPStatusError):
            run_with_client(
                FakeService(status_code=503),
                lambda client: input_async(
                    http_source(ALICE, client, "http://alice.test/balance")
                ),
            )

from __future__ import annotations

import asyncio
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from owntone_bridge.speaker.adapters.owntone import OwntoneClient

HOST = "http://owntone.test:3689/"


class FakeOwntone:
    """In-memory Owntone server answering the calls the bridge makes."""

    def __init__(self) -> None:
        self.state = "stop"
        self.volume = 0
        self.config: Dict[str, Any] = {"version": "28.9", "library_name": "Living Room", "websocket_port": 3688}
        self.calls: List[Tuple[str, str]] = []
        self.counts: Counter = Counter()
        # path -> status code forced for that path
        self.fail: Dict[str, int] = {}
        # path -> raw body returned instead of the real one
        self.raw: Dict[str, bytes] = {}
        # paths that raise a transport error
        self.down: set = set()
        # when set, GET /api/player waits for it before answering
        self.gate: Optional[asyncio.Event] = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        self.counts[(request.method, path)] += 1
        if path in self.down:
            raise httpx.ConnectError("connection refused", request=request)
        if path == "/api/player" and self.gate is not None:
            await self.gate.wait()
        if path in self.fail:
            return httpx.Response(self.fail[path])
        if path in self.raw:
            return httpx.Response(200, content=self.raw[path])

        if request.method == "GET" and path == "/api/player":
            return httpx.Response(200, json={"state": self.state, "volume": self.volume})
        if request.method == "GET" and path == "/api/config":
            return httpx.Response(200, json=self.config)
        if request.method == "PUT" and path == "/api/player/play":
            self.state = "play"
            return httpx.Response(204)
        if request.method == "PUT" and path == "/api/player/pause":
            self.state = "pause"
            return httpx.Response(204)
        if request.method == "PUT" and path == "/api/queue/clear":
            self.state = "stop"
            return httpx.Response(204)
        if request.method == "PUT" and path == "/api/player/volume":
            self.volume = int(request.url.params["volume"])
            return httpx.Response(204)
        return httpx.Response(404)

    def fetches(self) -> int:
        return self.counts[("GET", "/api/player")]


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def server() -> FakeOwntone:
    return FakeOwntone()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def client(server: FakeOwntone):
    cli = OwntoneClient(HOST, transport=httpx.MockTransport(server.handler))
    yield cli
    await cli.close()


@pytest.fixture
def host() -> str:
    return HOST

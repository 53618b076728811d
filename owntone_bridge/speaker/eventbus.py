from __future__ import annotations
import asyncio
import contextlib
import logging
from typing import Any, AsyncIterator, Dict, List

log = logging.getLogger(__name__)

Event = Dict[str, Any]

class EventBus:
    """Fan-out of accessory events to any number of listeners (SSE clients)."""

    def __init__(self) -> None:
        self._queues: List[asyncio.Queue] = []
        self._lock = asyncio.Lock()

    @property
    def listeners(self) -> int:
        return len(self._queues)

    async def publish(self, kind: str, data: Any) -> None:
        event: Event = {"type": kind, "data": data}
        async with self._lock:
            for q in list(self._queues):
                if q.full():
                    # slow listener: drop its oldest event, keep the fresh one
                    with contextlib.suppress(asyncio.QueueEmpty):
                        q.get_nowait()
                    log.debug("Dropped oldest %s event for a slow listener", kind)
                q.put_nowait(event)

    async def subscribe(self, maxsize: int = 100) -> AsyncIterator[Event]:
        q: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        async with self._lock:
            self._queues.append(q)
        try:
            while True:
                yield await q.get()
        finally:
            async with self._lock:
                with contextlib.suppress(ValueError):
                    self._queues.remove(q)

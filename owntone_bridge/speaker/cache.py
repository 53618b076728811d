from __future__ import annotations
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from .adapters.owntone import OwntoneError
from .state import CachedState, RemotePlayerState, DEFAULT_STATE

log = logging.getLogger(__name__)

STALENESS_WINDOW = 1.0  # seconds

Fetch = Callable[[], Awaitable[RemotePlayerState]]

class PlayerStateCache:
    """
    Time-bounded view of the remote player's state.
    - read(): serve from cache while younger than the staleness window,
      otherwise refresh once (single-flight) and serve the result
    - never raises: a failed refresh leaves the last good value in place,
      or DEFAULT_STATE when nothing was ever fetched
    A failed attempt also holds off the next attempt for one window.
    """
    def __init__(
        self,
        fetch: Fetch,
        *,
        window: float = STALENESS_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._window = window
        self._clock = clock
        self._cached = CachedState()
        self._attempted_at: Optional[float] = None
        self._lock = asyncio.Lock()
        self.on_change: Optional[Callable[[RemotePlayerState], Awaitable[None]]] = None

    @property
    def cached(self) -> CachedState:
        return self._cached

    @property
    def has_state(self) -> bool:
        return not self._cached.empty

    def _fresh(self) -> bool:
        return self._attempted_at is not None and self._clock() - self._attempted_at < self._window

    def _current(self) -> RemotePlayerState:
        return self._cached.state or DEFAULT_STATE

    async def read(self) -> RemotePlayerState:
        if self._fresh():
            return self._current()
        async with self._lock:
            # Callers queued behind an in-flight refresh reuse its outcome
            if not self._fresh():
                await self._refresh()
        return self._current()

    async def _refresh(self) -> None:
        prev = self._cached.state
        try:
            state = await self._fetch()
        except OwntoneError as exc:
            self._attempted_at = self._clock()
            log.error("Error fetching player: %s", exc)
            return
        except Exception:
            self._attempted_at = self._clock()
            log.exception("Unexpected error fetching player")
            return
        now = self._clock()
        self._cached = CachedState(state=state, fetched_at=now)
        self._attempted_at = now
        if state != prev and self.on_change:
            try:
                await self.on_change(state)
            except Exception:
                log.exception("Player state listener failed")

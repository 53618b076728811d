from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import httpx

from ..state import RemotePlayerState, ServerConfig
from ..translator import clamp_volume

log = logging.getLogger(__name__)

class OwntoneError(Exception):
    """A remote call was not confirmed."""

class OwntoneConnectionError(OwntoneError):
    """Transport failure: DNS, connect, timeout."""

class OwntoneStatusError(OwntoneError):
    def __init__(self, status: int, url: str) -> None:
        super().__init__(f"HTTP {status} from {url}")
        self.status = status
        self.url = url

class OwntoneResponseError(OwntoneError):
    """Body did not have the expected shape."""


class OwntoneClient:
    """
    Thin async client for the Owntone JSON API.
    - get_config(), get_player()
    - play(), pause(), clear_queue(), set_volume(v)
    Every failure surfaces as an OwntoneError subclass.
    """
    def __init__(
        self,
        host: str,
        *,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.host = host
        self._cli = httpx.AsyncClient(base_url=host, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "OwntoneClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._cli.aclose()

    # ---------- reads ----------

    async def get_config(self) -> ServerConfig:
        body = await self._get_json("/api/config")
        try:
            version = body["version"]
            library_name = body["library_name"]
            websocket_port = body.get("websocket_port", 0)
        except KeyError as exc:
            raise OwntoneResponseError(f"config response missing {exc}") from exc
        if not isinstance(version, str) or not isinstance(library_name, str):
            raise OwntoneResponseError(f"unexpected config response: {body!r}")
        if isinstance(websocket_port, bool) or not isinstance(websocket_port, int):
            raise OwntoneResponseError(f"unexpected websocket_port: {websocket_port!r}")
        return ServerConfig(version=version, library_name=library_name, websocket_port=websocket_port)

    async def get_player(self) -> RemotePlayerState:
        body = await self._get_json("/api/player")
        log.debug("Player: %s", body)
        state = body.get("state")
        volume = body.get("volume")
        if not isinstance(state, str):
            raise OwntoneResponseError(f"player state missing or not a string: {state!r}")
        if isinstance(volume, bool) or not isinstance(volume, int):
            raise OwntoneResponseError(f"player volume missing or not an integer: {volume!r}")
        if state not in {"play", "pause", "stop"}:
            log.debug("Unknown player state %r, treating as stop", state)
            state = "stop"
        return RemotePlayerState(playback=state, volume=clamp_volume(volume))  # type: ignore[arg-type]

    # ---------- commands ----------

    async def play(self) -> None:
        await self._put("/api/player/play")

    async def pause(self) -> None:
        await self._put("/api/player/pause")

    async def clear_queue(self) -> None:
        await self._put("/api/queue/clear")

    async def set_volume(self, volume: int) -> None:
        await self._put("/api/player/volume", params={"volume": volume})

    # ---------- transport ----------

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._cli.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise OwntoneConnectionError(f"{method} {path} failed: {exc!r}") from exc
        if not resp.is_success:
            raise OwntoneStatusError(resp.status_code, str(resp.request.url))
        return resp

    async def _put(self, path: str, **kwargs: Any) -> None:
        resp = await self._request("PUT", path, **kwargs)
        log.debug("PUT %s -> %s", resp.request.url, resp.status_code)

    async def _get_json(self, path: str) -> Dict[str, Any]:
        resp = await self._request("GET", path)
        try:
            body = resp.json()
        except ValueError as exc:
            raise OwntoneResponseError(f"{path} returned a non-JSON body") from exc
        if not isinstance(body, dict):
            raise OwntoneResponseError(f"{path} returned {type(body).__name__}, expected an object")
        return body

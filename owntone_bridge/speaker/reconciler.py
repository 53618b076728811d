from __future__ import annotations
import logging
from typing import Any, Awaitable, Callable, Dict

from .adapters.owntone import OwntoneClient, OwntoneError
from .cache import PlayerStateCache
from .state import MediaState, TargetState
from . import translator

log = logging.getLogger(__name__)

class CommandReconciler:
    """
    Turns accessory commands into player calls and derives accessory values
    from the cached player state.

    SETs follow one shape: validate, record the target, issue one request.
    They return True when the player confirmed the request. A failed
    request is logged and the recorded target is kept as the last intent.
    GETs never touch the target: they read through the cache.
    """
    def __init__(self, client: OwntoneClient, cache: PlayerStateCache) -> None:
        self._client = client
        self._cache = cache
        self.target = TargetState()
        self._commands: Dict[translator.RemoteCommand, Callable[[], Awaitable[None]]] = {
            "play": client.play,
            "clear": client.clear_queue,
        }

    # ---------- commands ----------

    async def set_power(self, on: bool) -> bool:
        return await self.set_media_state(translator.power_to_media_state(bool(on)))

    async def set_media_state(self, target: Any) -> bool:
        try:
            target = MediaState(int(target))
        except (TypeError, ValueError):
            log.warning("Ignoring invalid media state %r", target)
            return False
        self.target.record_playback(target)
        command = translator.to_remote_command(target)
        try:
            await self._commands[command]()
        except OwntoneError as exc:
            log.warning("SET media state %s (%s) not confirmed: %s", target.name, command, exc)
            return False
        return True

    async def set_volume(self, volume: Any) -> bool:
        try:
            volume = translator.clamp_volume(volume)
        except (TypeError, ValueError):
            log.warning("Ignoring invalid volume %r", volume)
            return False
        self.target.record_volume(volume)
        try:
            await self._client.set_volume(volume)
        except OwntoneError as exc:
            log.warning("SET volume %d not confirmed: %s", volume, exc)
            return False
        return True

    async def set_mute(self, mute: bool) -> bool:
        return await self.set_volume(translator.mute_to_volume(bool(mute)))

    # ---------- derived values ----------

    async def get_power(self) -> bool:
        return translator.to_power(await self._cache.read())

    async def get_media_state(self) -> MediaState:
        return translator.to_media_state((await self._cache.read()).playback)

    async def get_volume(self) -> int:
        return (await self._cache.read()).volume

    async def get_mute(self) -> bool:
        state = await self._cache.read()
        if not self._cache.has_state:
            # Bootstrap volume 0 must not read as muted
            return False
        return translator.to_mute(state)

    async def get_target_media_state(self) -> MediaState:
        if self.target.playback is not None:
            return self.target.playback
        return await self.get_media_state()

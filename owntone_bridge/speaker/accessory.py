from __future__ import annotations
import logging
import uuid
from typing import Any, Optional

from .adapters.owntone import OwntoneClient, OwntoneError
from .cache import PlayerStateCache
from .eventbus import EventBus
from .reconciler import CommandReconciler
from .registry import (
    CharacteristicRegistry, ON, CURRENT_MEDIA_STATE, TARGET_MEDIA_STATE, VOLUME, MUTE,
)
from .state import AccessoryConfig, AccessoryInformation, MediaState

log = logging.getLogger(__name__)

def accessory_uuid(host: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_URL, host))

async def discover(client: OwntoneClient, host: str) -> Optional[AccessoryConfig]:
    """Read the server config once and describe the accessory for it."""
    try:
        cfg = await client.get_config()
    except OwntoneError as exc:
        log.error("Error fetching config: %s", exc)
        return None
    log.debug("Found version: %s", cfg.version)
    return AccessoryConfig(
        host=host,
        version=cfg.version,
        library_name=cfg.library_name,
        websocket_port=cfg.websocket_port,
        uuid=accessory_uuid(host),
    )


class SpeakerAccessory:
    """
    One Owntone server exposed as a switch + speaker.

    Handlers are what the host calls, any number of times, concurrently and
    in any order. None of them raise: faults degrade to the defaults
    (stopped, off, volume 0, not muted).
    """

    def __init__(
        self,
        config: AccessoryConfig,
        client: OwntoneClient,
        registry: CharacteristicRegistry,
        *,
        bus: Optional[EventBus] = None,
        cache: Optional[PlayerStateCache] = None,
    ) -> None:
        self.config = config
        self.info = AccessoryInformation(name=config.library_name, firmware_revision=config.version)
        self.registry = registry
        self.bus = bus
        self.cache = cache or PlayerStateCache(client.get_player)
        self.reconciler = CommandReconciler(client, self.cache)
        if bus:
            self.cache.on_change = self._publish_state
        log.debug("Constructed accessory: %s", config.library_name)

        registry.characteristic(ON).on_get(self.handle_on_get).on_set(self.handle_on_set)
        registry.characteristic(CURRENT_MEDIA_STATE).on_get(self.handle_current_media_state_get)
        (registry.characteristic(TARGET_MEDIA_STATE)
            .on_get(self.handle_target_media_state_get)
            .on_set(self.handle_media_state_set))
        registry.characteristic(VOLUME).on_get(self.handle_volume_get).on_set(self.handle_volume_set)
        registry.characteristic(MUTE).on_get(self.handle_mute_get).on_set(self.handle_mute_set)

    async def _publish_state(self, state) -> None:
        await self.bus.publish("state", {"playback": state.playback, "volume": state.volume})

    # ---- On (switch) ----

    async def handle_on_get(self) -> bool:
        log.debug("Triggered GET On")
        try:
            return await self.reconciler.get_power()
        except Exception:
            log.exception("GET On failed")
            return False

    async def handle_on_set(self, value: Any) -> None:
        log.debug("Triggered SET On: %r", value)
        on = bool(value)
        try:
            confirmed = await self.reconciler.set_power(on)
        except Exception:
            log.exception("SET On failed")
            confirmed = False
        if on and not confirmed:
            await self.registry.update_value(ON, False)

    # ---- media state ----

    async def handle_media_state_get(self) -> int:
        try:
            return int(await self.reconciler.get_media_state())
        except Exception:
            log.exception("GET media state failed")
            return int(MediaState.STOPPED)

    async def handle_media_state_set(self, value: Any) -> None:
        log.debug("Triggered SET TargetMediaState: %r", value)
        try:
            await self.reconciler.set_media_state(value)
        except Exception:
            log.exception("SET TargetMediaState failed")

    async def handle_current_media_state_get(self) -> int:
        log.debug("Triggered GET CurrentMediaState")
        return await self.handle_media_state_get()

    async def handle_target_media_state_get(self) -> int:
        log.debug("Triggered GET TargetMediaState")
        try:
            return int(await self.reconciler.get_target_media_state())
        except Exception:
            log.exception("GET TargetMediaState failed")
            return int(MediaState.STOPPED)

    # ---- Volume ----

    async def handle_volume_get(self) -> int:
        log.debug("Triggered GET Volume")
        try:
            return await self.reconciler.get_volume()
        except Exception:
            log.exception("GET Volume failed")
            return 0

    async def handle_volume_set(self, value: Any) -> None:
        log.debug("Triggered SET Volume: %r", value)
        try:
            await self.reconciler.set_volume(value)
        except Exception:
            log.exception("SET Volume failed")

    # ---- Mute ----

    async def handle_mute_get(self) -> bool:
        log.debug("Triggered GET Mute")
        try:
            return await self.reconciler.get_mute()
        except Exception:
            log.exception("GET Mute failed")
            return False

    async def handle_mute_set(self, value: Any) -> None:
        log.debug("Triggered SET Mute: %r", value)
        try:
            await self.reconciler.set_mute(bool(value))
        except Exception:
            log.exception("SET Mute failed")

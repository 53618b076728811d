"""Named characteristics with get/set handlers, as the accessory host sees them."""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from .eventbus import EventBus

log = logging.getLogger(__name__)

ON = "On"
CURRENT_MEDIA_STATE = "CurrentMediaState"
TARGET_MEDIA_STATE = "TargetMediaState"
VOLUME = "Volume"
MUTE = "Mute"

GetHandler = Union[Callable[[], Awaitable[Any]], Callable[[], Any]]
SetHandler = Union[Callable[[Any], Awaitable[Any]], Callable[[Any], Any]]

class UnknownCharacteristic(LookupError):
    pass

class ReadOnlyCharacteristic(Exception):
    pass


class Characteristic:
    def __init__(self, name: str, bus: Optional[EventBus] = None) -> None:
        self.name = name
        self.value: Any = None
        self._bus = bus
        self._get: Optional[GetHandler] = None
        self._set: Optional[SetHandler] = None

    def on_get(self, handler: GetHandler) -> "Characteristic":
        self._get = handler
        return self

    def on_set(self, handler: SetHandler) -> "Characteristic":
        self._set = handler
        return self

    @property
    def readable(self) -> bool:
        return self._get is not None

    @property
    def writable(self) -> bool:
        return self._set is not None

    async def get(self) -> Any:
        if self._get is None:
            return self.value
        res = self._get()
        if asyncio.iscoroutine(res):
            res = await res
        self.value = res
        return res

    async def set(self, value: Any) -> None:
        if self._set is None:
            raise ReadOnlyCharacteristic(self.name)
        self.value = value
        res = self._set(value)
        if asyncio.iscoroutine(res):
            await res

    async def update_value(self, value: Any) -> None:
        """Push a value outward without running the set handler."""
        self.value = value
        if self._bus:
            await self._bus.publish("characteristic", {"name": self.name, "value": value})


class CharacteristicRegistry:
    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self._bus = bus
        self._chars: Dict[str, Characteristic] = {}

    def characteristic(self, name: str) -> Characteristic:
        """Return the named characteristic, creating it on first use."""
        ch = self._chars.get(name)
        if ch is None:
            ch = self._chars[name] = Characteristic(name, self._bus)
        return ch

    def lookup(self, name: str) -> Characteristic:
        try:
            return self._chars[name]
        except KeyError:
            raise UnknownCharacteristic(name) from None

    def names(self) -> List[str]:
        return list(self._chars)

    async def get(self, name: str) -> Any:
        return await self.lookup(name).get()

    async def set(self, name: str, value: Any) -> None:
        log.debug("SET %s = %r", name, value)
        await self.lookup(name).set(value)

    async def update_value(self, name: str, value: Any) -> None:
        await self.lookup(name).update_value(value)

    async def snapshot(self) -> Dict[str, Any]:
        return {name: await ch.get() for name, ch in self._chars.items() if ch.readable}

from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import IntEnum
from typing import Literal, Optional, Dict, Any

Playback = Literal["play", "pause", "stop"]

class MediaState(IntEnum):
    # Numeric values follow the host's CurrentMediaState/TargetMediaState codes
    ACTIVE = 0
    PAUSED = 1
    STOPPED = 2

@dataclass(frozen=True)
class RemotePlayerState:
    playback: Playback = "stop"
    volume: int = 0

DEFAULT_STATE = RemotePlayerState(playback="stop", volume=0)

@dataclass(frozen=True)
class CachedState:
    # Replaced wholesale by the cache: never one field without the other
    state: Optional[RemotePlayerState] = None
    fetched_at: Optional[float] = None

    @property
    def empty(self) -> bool:
        return self.state is None

class TargetState:
    """Last command issued by the accessory layer. Advisory only."""

    def __init__(self) -> None:
        self._playback: Optional[MediaState] = None
        self._volume: Optional[int] = None

    @property
    def playback(self) -> Optional[MediaState]:
        return self._playback

    @property
    def volume(self) -> Optional[int]:
        return self._volume

    def record_playback(self, target: MediaState) -> None:
        self._playback = target

    def record_volume(self, volume: int) -> None:
        self._volume = volume

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playback": self._playback.name.lower() if self._playback is not None else None,
            "volume": self._volume,
        }

@dataclass(frozen=True)
class ServerConfig:
    version: str
    library_name: str
    websocket_port: int

@dataclass(frozen=True)
class AccessoryConfig:
    host: str
    version: str
    library_name: str
    websocket_port: int
    uuid: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass(frozen=True)
class AccessoryInformation:
    name: str
    firmware_revision: str
    manufacturer: str = "Owntone"
    model: str = "Default-Model"
    serial_number: str = "Default-Serial"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

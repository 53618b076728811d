"""Pure mapping between the player's vocabulary and the accessory's."""

from __future__ import annotations
from typing import Any, Literal

from .state import MediaState, RemotePlayerState

RemoteCommand = Literal["play", "clear"]

MIN_VOLUME = 0
MAX_VOLUME = 100

def to_media_state(playback: str) -> MediaState:
    if playback == "play":
        return MediaState.ACTIVE
    if playback == "pause":
        return MediaState.PAUSED
    return MediaState.STOPPED

def to_power(state: RemotePlayerState) -> bool:
    return state.playback == "play"

def to_mute(state: RemotePlayerState) -> bool:
    return state.volume == 0

def power_to_media_state(on: bool) -> MediaState:
    return MediaState.ACTIVE if on else MediaState.STOPPED

def to_remote_command(target: MediaState) -> RemoteCommand:
    # The player has no usable pause primitive: pause and stop both clear the queue
    if target == MediaState.ACTIVE:
        return "play"
    return "clear"

def mute_to_volume(mute: bool) -> int:
    # Lossy: the pre-mute volume is not remembered, unmute lands on 1
    return 0 if mute else 1

def clamp_volume(value: Any) -> int:
    """Coerce a characteristic value to an integer volume in 0..100.

    Raises TypeError/ValueError for values that are not numbers.
    """
    if isinstance(value, bool):
        raise TypeError(f"volume must be a number, got {value!r}")
    return max(MIN_VOLUME, min(MAX_VOLUME, int(value)))

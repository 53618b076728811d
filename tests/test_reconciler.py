"""CommandReconciler: optimistic targets, command shaping, derived values."""

from __future__ import annotations

import pytest

from owntone_bridge.speaker.cache import PlayerStateCache
from owntone_bridge.speaker.reconciler import CommandReconciler
from owntone_bridge.speaker.state import MediaState


@pytest.fixture
def reconciler(client, clock):
    return CommandReconciler(client, PlayerStateCache(client.get_player, clock=clock))


class TestMediaState:
    async def test_power_on_plays(self, reconciler, server):
        assert await reconciler.set_power(True) is True
        assert server.calls == [("PUT", "/api/player/play")]
        assert reconciler.target.playback == MediaState.ACTIVE

    async def test_power_off_clears_queue(self, reconciler, server):
        assert await reconciler.set_power(False) is True
        assert server.calls == [("PUT", "/api/queue/clear")]
        assert reconciler.target.playback == MediaState.STOPPED

    @pytest.mark.parametrize("target", [MediaState.PAUSED, MediaState.STOPPED, 1, 2])
    async def test_pause_and_stop_clear_queue(self, reconciler, server, target):
        await reconciler.set_media_state(target)
        assert server.calls == [("PUT", "/api/queue/clear")]

    async def test_invalid_media_state_is_ignored(self, reconciler, server):
        assert await reconciler.set_media_state(7) is False
        assert server.calls == []
        assert reconciler.target.playback is None

    async def test_failed_command_keeps_target(self, reconciler, server, caplog):
        server.fail["/api/player/play"] = 500
        assert await reconciler.set_media_state(MediaState.ACTIVE) is False
        assert reconciler.target.playback == MediaState.ACTIVE
        assert "not confirmed" in caplog.text

    async def test_transport_failure_keeps_target(self, reconciler, server):
        server.down.add("/api/queue/clear")
        assert await reconciler.set_power(False) is False
        assert reconciler.target.playback == MediaState.STOPPED

    async def test_newer_command_overwrites_target(self, reconciler):
        await reconciler.set_media_state(MediaState.ACTIVE)
        await reconciler.set_media_state(MediaState.PAUSED)
        assert reconciler.target.playback == MediaState.PAUSED


class TestVolume:
    async def test_set_volume(self, reconciler, server):
        assert await reconciler.set_volume(30) is True
        assert server.volume == 30
        assert reconciler.target.volume == 30

    async def test_volume_is_clamped_before_sending(self, reconciler, server):
        await reconciler.set_volume(250)
        assert server.volume == 100
        assert reconciler.target.volume == 100

    async def test_invalid_volume_is_ignored(self, reconciler, server):
        assert await reconciler.set_volume("loud") is False
        assert server.calls == []
        assert reconciler.target.volume is None

    async def test_failed_volume_keeps_target(self, reconciler, server):
        server.fail["/api/player/volume"] = 503
        assert await reconciler.set_volume(40) is False
        assert reconciler.target.volume == 40


class TestMute:
    async def test_mute_sets_volume_zero(self, reconciler, server, clock):
        server.volume = 60
        await reconciler.set_mute(True)
        assert server.volume == 0
        assert await reconciler.get_mute() is True

    async def test_unmute_does_not_restore_previous_volume(self, reconciler, server, clock):
        server.volume = 60
        await reconciler.set_mute(True)
        await reconciler.set_mute(False)
        assert server.volume == 1
        assert await reconciler.get_volume() == 1


class TestDerivedValues:
    async def test_playing_at_45(self, reconciler, server):
        server.state, server.volume = "play", 45
        assert await reconciler.get_media_state() == MediaState.ACTIVE
        assert await reconciler.get_power() is True
        assert await reconciler.get_volume() == 45
        assert await reconciler.get_mute() is False

    async def test_defaults_when_player_unreachable(self, reconciler, server, caplog):
        server.fail["/api/player"] = 500
        assert await reconciler.get_media_state() == MediaState.STOPPED
        assert await reconciler.get_power() is False
        assert await reconciler.get_volume() == 0
        assert await reconciler.get_mute() is False
        assert "Error fetching player" in caplog.text

    async def test_get_after_set_is_driven_by_cache(self, reconciler, server, clock):
        assert await reconciler.get_power() is False
        await reconciler.set_power(True)
        # the player reports pause regardless of the play we just sent
        server.state = "pause"
        clock.advance(0.5)
        assert await reconciler.get_power() is False
        assert await reconciler.get_media_state() == MediaState.STOPPED
        clock.advance(0.5)
        assert await reconciler.get_media_state() == MediaState.PAUSED
        assert server.fetches() == 2

    async def test_target_media_state_falls_back_to_current(self, reconciler, server):
        server.state = "pause"
        assert await reconciler.get_target_media_state() == MediaState.PAUSED
        await reconciler.set_media_state(MediaState.ACTIVE)
        assert await reconciler.get_target_media_state() == MediaState.ACTIVE

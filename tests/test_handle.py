"""Tests for pending start handling while media loads."""

from types import SimpleNamespace

import pytest

from core.handle import PendingStart
from core.model import TimeRange


def test_retarget_needs_an_armed_load():
    pending = PendingStart()

    assert pending.retarget(1000, True) is False
    assert not pending.active


def test_latest_command_wins():
    pending = PendingStart()
    pending.arm(70000, False)

    assert pending.retarget(120000, True) is True
    assert pending.take() == (120000, True)
    assert not pending.active
    assert pending.take() == (None, False)


def test_cancel_drops_pending_start():
    pending = PendingStart()
    pending.arm(5000, True)

    pending.cancel()

    assert pending.retarget(1, True) is False


class _Signal:
    def connect(self, slot):
        pass


class _FakeMediaPlayer:
    class MediaStatus:
        LoadedMedia = "loaded"
        InvalidMedia = "invalid"
        EndOfMedia = "end"

    class PlaybackState:
        PlayingState = "playing"
        PausedState = "paused"

    def __init__(self, parent=None):
        self.calls = []
        self.state = "paused"
        self.positionChanged = _Signal()
        self.mediaStatusChanged = _Signal()
        self.errorOccurred = _Signal()

    def setAudioOutput(self, output):
        pass

    def setSource(self, url):
        self.calls.append(("setSource", url.toString()))

    def setPosition(self, ms):
        self.calls.append(("setPosition", ms))

    def play(self):
        self.state = "playing"
        self.calls.append(("play",))

    def pause(self):
        self.state = "paused"
        self.calls.append(("pause",))

    def stop(self):
        self.calls.append(("stop",))

    def playbackState(self):
        return self.state


class _FakeAudio:
    def __init__(self, parent=None):
        pass

    def setVolume(self, volume):
        pass


@pytest.fixture
def media_handle(monkeypatch):
    """MediaPlayerHandle on a recording stand-in for QMediaPlayer."""
    player_mod = pytest.importorskip("core.player", exc_type=ImportError)
    monkeypatch.setattr(player_mod, "QtMultimedia",
                        SimpleNamespace(QMediaPlayer=_FakeMediaPlayer, QAudioOutput=_FakeAudio))
    handle = player_mod.MediaPlayerHandle("front", lambda cam, r: f"http://nvr/vod/{cam}/{r.start:.0f}")
    return handle


CHUNK = TimeRange(1180.0, 1360.0)


def test_seek_during_load_resumes_at_seek_target(media_handle):
    media_handle.set_source(CHUNK, 1250.0, False)
    media_handle.seek_to(1300.0, True)
    player = media_handle.player
    player.calls.clear()

    media_handle._on_media_status("loaded")

    assert player.calls == [("setPosition", 120000), ("play",)]


def test_scrub_during_load_stays_paused(media_handle):
    media_handle.set_source(CHUNK, 1250.0, True)
    media_handle.scrub_to(1200.0)
    player = media_handle.player
    player.calls.clear()

    media_handle._on_media_status("loaded")

    assert player.calls == [("setPosition", 20000), ("pause",)]


def test_seek_after_load_goes_straight_to_player(media_handle):
    media_handle.set_source(CHUNK, 1250.0, False)
    media_handle._on_media_status("loaded")
    player = media_handle.player
    player.calls.clear()

    media_handle.seek_to(1300.0, True)

    assert player.calls == [("setPosition", 120000), ("play",)]


def test_preview_never_autoplays(media_handle):
    media_handle.set_role(False)
    media_handle.set_source(CHUNK, 1250.0, True)
    media_handle.seek_to(1300.0, True)
    player = media_handle.player
    player.calls.clear()

    media_handle._on_media_status("loaded")

    assert player.calls == [("setPosition", 120000), ("pause",)]


def test_invalid_media_clears_pending_start(media_handle):
    media_handle.set_source(CHUNK, 1250.0, True)
    media_handle._on_media_status("invalid")
    player = media_handle.player
    player.calls.clear()

    media_handle.seek_to(1300.0, True)

    assert player.calls == [("setPosition", 120000), ("play",)]

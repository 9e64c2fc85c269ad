"""Shared fixtures for the recview test suite."""

import os
from dataclasses import replace

import pytest
from PySide6 import QtCore

from core.config import default_cfg
from core.event_bus import EventBus
from core.handle import PlayerHandle
from core.session import RecordingSession


class FakeHandle(PlayerHandle):
    """Player handle that records every command it receives."""

    def __init__(self, camera):
        super().__init__(camera)
        self.calls = []
        self.is_primary = None

    def set_source(self, time_range, start_time, autoplay):
        self.calls.append(("set_source", time_range, start_time, autoplay))

    def seek_to(self, ts, autoplay):
        self.calls.append(("seek_to", ts, autoplay))

    def scrub_to(self, ts):
        self.calls.append(("scrub_to", ts))

    def set_role(self, primary):
        self.is_primary = primary

    def named(self, name):
        return [c for c in self.calls if c[0] == name]

    def reset(self):
        self.calls.clear()


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Qt application object; a widget-capable one when QtWidgets loads."""
    app = QtCore.QCoreApplication.instance()
    if app is None:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
        try:
            from PySide6 import QtWidgets
        except ImportError:
            app = QtCore.QCoreApplication([])
        else:
            app = QtWidgets.QApplication([])
    yield app


@pytest.fixture
def cfg():
    """Default configuration."""
    return default_cfg()


@pytest.fixture
def small_cfg():
    """180 s chunks with day boundaries aligned on t=1000."""
    cfg = default_cfg()
    cfg.timelineconfig = replace(cfg.timelineconfig, chunk_duration=180, utc_offset=-1000)
    return cfg


@pytest.fixture
def bus():
    """Fresh event bus."""
    return EventBus()


@pytest.fixture
def make_handle():
    """Factory for recording player handles."""
    return FakeHandle


@pytest.fixture
def make_session(bus):
    """Factory for sessions sharing the test bus."""
    sessions = []

    def _make(cfg, camera="front", start_time=1050.0, **kwargs):
        session = RecordingSession(bus, cfg, camera, start_time, **kwargs)
        sessions.append(session)
        return session

    yield _make
    for session in sessions:
        session.teardown()

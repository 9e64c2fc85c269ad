"""Tests for switching the main camera."""

import pytest

from core.model import TimeRange

CHUNK = TimeRange(3600.0, 7200.0)


@pytest.fixture
def rig(cfg, make_session, make_handle):
    """Session at t=5000 on hourly chunks with front as primary and side as preview."""
    session = make_session(cfg, start_time=5000.0)
    front, side = make_handle("front"), make_handle("side")
    session.registry.register_primary(front)
    session.registry.register_secondary("side", side)
    front.reset()
    side.reset()
    return session, front, side


def test_switch_keeps_timestamp(bus, rig):
    session, front, side = rig
    changed = []
    bus.sig_camera_changed.connect(changed.append)

    bus.sig_camera_selected.emit("side")

    assert session.active_camera == "side"
    assert session.registry.primary is side
    assert side.is_primary is True
    assert front.is_primary is False
    assert side.calls == [("set_source", CHUNK, 5000.0, True)]
    assert front.calls == [("scrub_to", 5000.0)]
    assert changed == ["side"]


def test_new_primary_drives_clock_after_switch(bus, rig):
    session, front, side = rig
    bus.sig_camera_selected.emit("side")
    front.reset()

    side.sig_time_update.emit(5001.4)
    front.sig_time_update.emit(9.0)

    assert session.current_time == 5001.4
    assert front.calls == [("scrub_to", 5001)]


def test_switch_to_active_camera_is_noop(bus, rig):
    session, front, side = rig
    changed = []
    bus.sig_camera_changed.connect(changed.append)

    bus.sig_camera_selected.emit("front")

    assert changed == []
    assert front.calls == [] and side.calls == []


def test_switch_while_scrubbing_does_not_autoplay(bus, rig):
    session, _, side = rig
    bus.sig_dragging_changed.emit(True)
    bus.sig_handlebar_time_changed.emit(5100.0)
    side.reset()

    bus.sig_camera_selected.emit("side")

    assert side.calls == [("set_source", CHUNK, 5100.0, False)]


def test_single_handle_rebind(bus, cfg, make_session, make_handle):
    session = make_session(cfg, start_time=5000.0)
    handle = make_handle("front")
    session.registry.register_primary(handle)
    handle.reset()

    bus.sig_camera_selected.emit("side")
    # no handle for "side" yet; the old one only mirrors the time
    assert session.registry.primary is None
    assert handle.calls == [("scrub_to", 5000.0)]

    handle.reset()
    session.registry.unregister("front")
    handle.camera = "side"
    session.registry.register_primary(handle)

    assert session.registry.primary is handle
    assert handle.calls == [("set_source", CHUNK, 5000.0, True)]

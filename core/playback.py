from __future__ import annotations

import math

from PySide6 import QtCore

from core.advancer import ClipBoundaryAdvancer
from core.event_bus import EventBus
from core.model import PlaybackMode, Session
from core.registry import ControllerRegistry


class PlaybackClock(QtCore.QObject):
    """
    Owns the authoritative current time and the playing/scrubbing mode.

    PLAYING: time comes only from the primary handle's time updates and is
    mirrored to the previews as scrubs.
    SCRUBBING: time comes only from timeline handlebar drags; each update
    scrubs every handle, or re-anchors the active chunk when the time has
    left the chunk by more than the tolerance.
    Leaving SCRUBBING issues a single autoplay seek on the primary.
    """

    def __init__(
        self,
        bus: EventBus,
        session: Session,
        registry: ControllerRegistry,
        advancer: ClipBoundaryAdvancer,
        tolerance: float = 60.0,
        parent: QtCore.QObject | None = None,
    ):
        super().__init__(parent)
        self.bus = bus
        self.session = session
        self.registry = registry
        self.advancer = advancer
        self.tolerance = float(tolerance)

        # bus connections
        bus.sig_dragging_changed.connect(self.set_dragging)
        bus.sig_handlebar_time_changed.connect(self.on_handlebar_time)
        registry.sig_primary_time_update.connect(self.on_primary_time_update)

    @property
    def mode(self) -> PlaybackMode:
        return self.session.mode

    @property
    def current_time(self) -> float:
        return self.session.current_time

    # state transitions
    def set_dragging(self, dragging: bool) -> None:
        if self.session.closed:
            return
        if dragging:
            self._begin_scrub()
        else:
            self._end_scrub()

    def _begin_scrub(self) -> None:
        if self.session.mode is PlaybackMode.SCRUBBING:
            return
        self._set_mode(PlaybackMode.SCRUBBING)

    def _end_scrub(self) -> None:
        if self.session.mode is not PlaybackMode.SCRUBBING:
            return
        self._set_mode(PlaybackMode.PLAYING)
        primary = self.registry.primary
        if primary is None:
            print("[Clock] No primary handle to resume")
            return
        primary.seek_to(self.session.current_time, True)

    def _set_mode(self, mode: PlaybackMode) -> None:
        self.session.mode = mode
        print(f"[Clock] Mode -> {mode.value} at {self.session.current_time:.2f}")
        self.bus.sig_mode_changed.emit(mode.value)

    # time sources
    def on_handlebar_time(self, ts: float) -> None:
        if self.session.closed:
            return
        if self.session.mode is not PlaybackMode.SCRUBBING:
            # playback owns the clock
            return
        ts = float(ts)
        self._set_time(ts)

        chunk = self.advancer.current_range()
        if not chunk.contains(ts, self.tolerance):
            # handles reload for the new chunk; the next update scrubs
            self.advancer.reanchor(ts)
            return

        self.registry.broadcast_scrub(ts, include_primary=True)

    def on_primary_time_update(self, ts: float) -> None:
        if self.session.closed:
            return
        if self.session.mode is not PlaybackMode.PLAYING:
            return
        ts = float(ts)
        self._set_time(ts)
        self.registry.broadcast_scrub(math.floor(ts))

    def _set_time(self, ts: float) -> None:
        self.session.current_time = ts
        self.bus.sig_time_changed.emit(ts)

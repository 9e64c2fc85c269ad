from __future__ import annotations

import time
from typing import Iterable, List, Optional

from PySide6 import QtCore

from core.advancer import ClipBoundaryAdvancer
from core.config import config
from core.event_bus import EventBus
from core.model import (
    CameraDirectory, ChunkSet, MotionSample, PlaybackMode, ReviewSegment, Session, TimeRange,
)
from core.motion import MotionCache, MotionLookup
from core.playback import PlaybackClock
from core.registry import ControllerRegistry
from core.switcher import CameraSwitcher
from core.timeline import find_chunk_index, get_chunked_time_day

MOTION_SEVERITY = "significant_motion"


def _clamp(ts: float, time_range: TimeRange) -> float:
    return min(max(ts, time_range.start), time_range.end)


class RecordingSession(QtCore.QObject):
    """
    Shared core behind the desktop and mobile recording views.

    Owns the Session state and wires chunker, registry, clock, advancer,
    switcher and motion cache together. Views only talk to it through the
    EventBus and the read accessors below.
    """

    def __init__(
        self,
        bus: EventBus,
        cfg: config,
        start_camera: str,
        start_time: Optional[float] = None,
        *,
        review_items: Iterable[ReviewSegment] = (),
        cameras: Optional[CameraDirectory] = None,
        motion_lookup: Optional[MotionLookup] = None,
        severity: Optional[str] = None,
        parent: QtCore.QObject | None = None,
    ):
        super().__init__(parent)
        self.bus = bus
        self.cfg = cfg
        self.tlcfg = cfg.timelineconfig
        self.cameras = cameras or CameraDirectory()
        self.severity = severity or cfg.viewconfig.severity
        self._review_items: List[ReviewSegment] = list(review_items)

        start = float(start_time) if start_time else time.time()
        chunks = get_chunked_time_day(start, self.tlcfg)
        idx = find_chunk_index(chunks.ranges, start)
        self.state = Session(
            active_camera=start_camera,
            active_chunk_index=max(idx, 0),
            current_time=start,
            playback_start=start,
        )
        self.start_time = start

        self.registry = ControllerRegistry(start_camera, self)
        self.advancer = ClipBoundaryAdvancer(self.state, chunks, self.registry, self)
        self.clock = PlaybackClock(bus, self.state, self.registry, self.advancer,
                                   tolerance=self.tlcfg.scrub_tolerance, parent=self)
        self.switcher = CameraSwitcher(bus, self.state, self.registry, self.advancer, self)
        self.motion = MotionCache(motion_lookup, self) if motion_lookup else None

        self.registry.sig_handle_registered.connect(self._on_handle_registered)
        self.advancer.sig_active_chunk_changed.connect(self._on_chunk_changed)
        bus.sig_severity_changed.connect(self.set_severity)
        if self.motion is not None:
            self.motion.sig_updated.connect(self.bus.sig_motion_updated)

        print(f"[Session] Start {self.state.debug_summary()}")

    # read accessors
    @property
    def chunks(self) -> ChunkSet:
        return self.advancer.chunks

    @property
    def current_range(self) -> TimeRange:
        return self.advancer.current_range()

    @property
    def active_camera(self) -> str:
        return self.state.active_camera

    @property
    def current_time(self) -> float:
        return self.state.current_time

    @property
    def mode(self) -> PlaybackMode:
        return self.state.mode

    def timeline_bounds(self):
        return self.chunks.timeline_bounds()

    def camera_review_items(self) -> List[ReviewSegment]:
        return [item for item in self._review_items if item.camera == self.state.active_camera]

    def motion_events(self) -> List[MotionSample]:
        if self.severity != MOTION_SEVERITY or self.motion is None:
            return []
        scale = self.tlcfg.segment_duration / 2
        return self.motion.get(self.chunks.window, self.state.active_camera, scale)

    def aspect_class(self) -> str:
        return self.cameras.aspect_class(self.state.active_camera)

    # mutations from outside the playback loop
    def set_severity(self, severity: str) -> None:
        if severity == self.severity:
            return
        self.severity = severity
        print(f"[Session] Severity -> {severity}")
        self.bus.sig_motion_updated.emit()

    def set_review_items(self, items: Iterable[ReviewSegment]) -> None:
        self._review_items = list(items)
        self.bus.sig_review_items_changed.emit()

    def set_reference_time(self, ts: float) -> None:
        """Jump the view to ts, rebuilding the chunk set if ts lies in another day."""
        if self.state.closed:
            return
        ts = float(ts)
        self.start_time = ts
        self.state.current_time = ts
        self.state.playback_start = ts
        self.bus.sig_time_changed.emit(ts)
        chunks = get_chunked_time_day(ts, self.tlcfg)
        if chunks.day_start != self.chunks.day_start:
            # activating a chunk reloads every handle
            self.advancer.set_chunks(chunks, ts)
            self.bus.sig_chunks_changed.emit(chunks)
            return
        if self.current_range.contains(ts):
            self._load_primary(ts)
            self.registry.broadcast_scrub(ts)
        else:
            self.advancer.reanchor(ts)

    def teardown(self) -> None:
        if self.state.closed:
            return
        self.state.closed = True
        self.registry.clear()
        if self.motion is not None:
            self.motion.clear()
        print("[Session] Closed")

    # handle loading
    def _autoplay(self) -> bool:
        return self.state.mode is PlaybackMode.PLAYING

    def _load_primary(self, start: float) -> None:
        primary = self.registry.primary
        if primary is None:
            return
        chunk = self.current_range
        primary.set_source(chunk, _clamp(start, chunk), self._autoplay())

    def _on_handle_registered(self, camera: str, is_primary: bool) -> None:
        if self.state.closed:
            return
        handle = self.registry.get(camera)
        if handle is None:
            return
        chunk = self.current_range
        if is_primary:
            start = self.state.playback_start
            if not chunk.contains(start):
                start = _clamp(self.state.current_time, chunk)
            handle.set_source(chunk, start, self._autoplay())
        else:
            handle.set_source(chunk, _clamp(self.state.current_time, chunk), False)

    def _on_chunk_changed(self, idx: int) -> None:
        if self.state.closed:
            return
        chunk = self.current_range
        start = _clamp(self.state.current_time, chunk)
        primary = self.registry.primary
        if primary is not None:
            primary.set_source(chunk, start, self._autoplay())
        for handle in self.registry.secondaries().values():
            handle.set_source(chunk, start, False)
        self.bus.sig_chunk_changed.emit(idx)

from __future__ import annotations

from PySide6 import QtCore

from core.advancer import ClipBoundaryAdvancer
from core.event_bus import EventBus
from core.model import PlaybackMode, Session
from core.registry import ControllerRegistry


class CameraSwitcher(QtCore.QObject):
    """Changes the main camera while keeping the viewed timestamp."""

    def __init__(
        self,
        bus: EventBus,
        session: Session,
        registry: ControllerRegistry,
        advancer: ClipBoundaryAdvancer,
        parent: QtCore.QObject | None = None,
    ):
        super().__init__(parent)
        self.bus = bus
        self.session = session
        self.registry = registry
        self.advancer = advancer

        bus.sig_camera_selected.connect(self.switch_to)

    def switch_to(self, camera: str) -> None:
        if self.session.closed or camera == self.session.active_camera:
            return
        previous = self.session.active_camera
        ts = self.session.current_time
        self.session.playback_start = ts
        self.registry.promote(camera)
        self.session.active_camera = camera
        print(f"[Switcher] {previous} -> {camera} at {ts:.2f}")

        primary = self.registry.primary
        if primary is not None:
            primary.set_source(
                self.advancer.current_range(),
                self.session.playback_start,
                self.session.mode is PlaybackMode.PLAYING,
            )
        demoted = self.registry.get(previous)
        if demoted is not None:
            demoted.scrub_to(ts)

        self.bus.sig_camera_changed.emit(camera)

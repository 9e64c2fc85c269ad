from __future__ import annotations

from typing import List

from PySide6 import QtWidgets
from PySide6.QtMultimediaWidgets import QVideoWidget

from core.event_bus import EventBus
from core.player import MediaPlayerHandle, SourceUrl
from core.session import RecordingSession
from views.timeline import create_timeline


class MobileRecordingView(QtWidgets.QWidget):
    """Compact layout: camera picker, one player, timeline below."""

    def __init__(self, bus: EventBus, session: RecordingSession, source_url: SourceUrl,
                 all_cameras: List[str], parent=None):
        super().__init__(parent)
        self.bus = bus
        self.session = session

        self.camera_combo = QtWidgets.QComboBox(self)
        for cam in all_cameras:
            self.camera_combo.addItem(cam.replace("_", " ").title(), cam)
        idx = self.camera_combo.findData(session.active_camera)
        if idx >= 0:
            self.camera_combo.setCurrentIndex(idx)
        self.camera_combo.currentIndexChanged.connect(self._on_combo_changed)

        self.video = QVideoWidget(self)
        self.video.setMinimumHeight(200)

        # one player follows whichever camera is active
        self.handle = MediaPlayerHandle(session.active_camera, source_url, parent=self)
        self.handle.sig_ready.connect(lambda: self.session.registry.register_primary(self.handle))
        self.handle.set_video_output(self.video)

        self.timeline = create_timeline(bus, session, self)

        lay = QtWidgets.QVBoxLayout(self)
        lay.addWidget(self.camera_combo)
        lay.addWidget(self.video)
        lay.addWidget(self.timeline, 1)

        self.bus.sig_camera_changed.connect(self._on_camera_changed)

    def rebuild_timeline(self) -> None:
        old = self.timeline
        self.timeline = create_timeline(self.bus, self.session, self)
        self.layout().replaceWidget(old, self.timeline)
        old.deleteLater()

    def _on_combo_changed(self, idx: int) -> None:
        cam = self.camera_combo.itemData(idx)
        if cam:
            self.bus.sig_camera_selected.emit(cam)

    def _on_camera_changed(self, camera: str) -> None:
        registry = self.session.registry
        if registry.primary is self.handle:
            return
        # the switch left our handle under the old camera; rebind it as the new primary
        registry.unregister(self.handle.camera)
        self.handle.set_camera(camera)
        registry.register_primary(self.handle)

    def closeEvent(self, ev):
        self.handle.stop()
        super().closeEvent(ev)

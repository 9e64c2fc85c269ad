from __future__ import annotations

from typing import Dict, List

from PySide6 import QtCore, QtWidgets
from PySide6.QtMultimediaWidgets import QVideoWidget

from core.event_bus import EventBus
from core.player import MediaPlayerHandle, SourceUrl
from core.session import RecordingSession
from views.timeline import create_timeline

ASPECT_RATIOS = {"aspect-video": 16 / 9, "aspect-wide": 32 / 9}


class _PreviewTile(QtWidgets.QFrame):
    """Clickable preview slot for a non-main camera."""
    clicked = QtCore.Signal(str)

    def __init__(self, camera: str, parent=None):
        super().__init__(parent)
        self.camera = camera
        self.video = QVideoWidget(self)
        self.label = QtWidgets.QLabel(camera.replace("_", " ").title(), self)
        lay = QtWidgets.QVBoxLayout(self)
        lay.setContentsMargins(2, 2, 2, 2)
        lay.setSpacing(2)
        lay.addWidget(self.video, 1)
        lay.addWidget(self.label)
        self.setFixedSize(220, 150)
        self.setCursor(QtCore.Qt.PointingHandCursor)
        # let clicks on the video reach the frame
        self.video.setAttribute(QtCore.Qt.WA_TransparentForMouseEvents, True)

    def mouseReleaseEvent(self, ev):
        if ev.button() == QtCore.Qt.LeftButton:
            self.clicked.emit(self.camera)
        ev.accept()


class DesktopRecordingView(QtWidgets.QWidget):
    """Main player with a strip of camera previews and the review timeline on the right."""

    def __init__(self, bus: EventBus, session: RecordingSession, source_url: SourceUrl,
                 all_cameras: List[str], parent=None):
        super().__init__(parent)
        self.bus = bus
        self.session = session
        self._handles: Dict[str, MediaPlayerHandle] = {}
        self._tiles: Dict[str, _PreviewTile] = {}

        self.main_video = QVideoWidget(self)
        self.main_video.setMinimumSize(480, 270)

        strip = QtWidgets.QWidget(self)
        strip_lay = QtWidgets.QHBoxLayout(strip)
        strip_lay.setContentsMargins(0, 0, 0, 0)
        strip_lay.setSpacing(8)
        strip_scroll = QtWidgets.QScrollArea(self)
        strip_scroll.setWidget(strip)
        strip_scroll.setWidgetResizable(True)
        strip_scroll.setFixedHeight(170)

        for cam in all_cameras:
            tile = _PreviewTile(cam, strip)
            tile.clicked.connect(self.bus.sig_camera_selected.emit)
            strip_lay.addWidget(tile)
            self._tiles[cam] = tile

            is_main = cam == session.active_camera
            handle = MediaPlayerHandle(cam, source_url, preview=not is_main, parent=self)
            self._handles[cam] = handle
            handle.sig_ready.connect(lambda cam=cam, h=handle: self._on_handle_ready(cam, h))
            handle.set_video_output(self.main_video if is_main else tile.video)
        strip_lay.addStretch(1)

        self.timeline = create_timeline(bus, session, self)
        self.timeline.setFixedWidth(110)

        left = QtWidgets.QVBoxLayout()
        left.addWidget(self.main_video, 1)
        left.addWidget(strip_scroll)
        root = QtWidgets.QHBoxLayout(self)
        root.addLayout(left, 1)
        root.addWidget(self.timeline)

        self.bus.sig_camera_changed.connect(self._on_camera_changed)
        self._show_tiles()
        self._apply_aspect()

    def rebuild_timeline(self) -> None:
        old = self.timeline
        self.timeline = create_timeline(self.bus, self.session, self)
        self.timeline.setFixedWidth(110)
        self.layout().replaceWidget(old, self.timeline)
        old.deleteLater()

    def _on_handle_ready(self, camera: str, handle: MediaPlayerHandle) -> None:
        if camera == self.session.active_camera:
            self.session.registry.register_primary(handle)
        else:
            self.session.registry.register_secondary(camera, handle)

    def _on_camera_changed(self, camera: str) -> None:
        for cam, handle in self._handles.items():
            handle.set_video_output(self.main_video if cam == camera else self._tiles[cam].video)
        self._show_tiles()
        self._apply_aspect()

    def _show_tiles(self) -> None:
        for cam, tile in self._tiles.items():
            tile.setVisible(cam != self.session.active_camera)

    def _apply_aspect(self) -> None:
        ratio = ASPECT_RATIOS[self.session.aspect_class()]
        self.main_video.setMinimumHeight(int(self.main_video.minimumWidth() / ratio))

    def closeEvent(self, ev):
        for handle in self._handles.values():
            handle.stop()
        super().closeEvent(ev)

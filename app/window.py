from __future__ import annotations

from typing import Optional

from PySide6 import QtCore, QtWidgets

from core.api import ApiError, RecordingApi
from core.config import config
from core.event_bus import EventBus
from core.model import CameraDirectory, CameraInfo
from core.session import RecordingSession
from core.timeline import day_window
from ui.desktop import DesktopRecordingView
from ui.mobile import MobileRecordingView

SEVERITY_LABELS = {
    "alert": "Alerts",
    "detection": "Detections",
    "significant_motion": "Motion",
}


class AppWindow(QtWidgets.QMainWindow):
    def __init__(self, cfg: config, start_camera: Optional[str] = None, start_time: Optional[float] = None):
        super().__init__()
        self.setWindowTitle("recview")
        self.cfg = cfg
        self.api = RecordingApi(cfg.apiconfig.base_url, cfg.apiconfig.timeout)

        cameras = self._load_cameras()
        names = cameras.names()
        if start_camera is None:
            start_camera = names[0] if names else "default"
        if start_camera not in names:
            cameras.cameras.append(CameraInfo(start_camera))
            names = cameras.names()

        # Core objects
        self.bus = EventBus()
        self.session = RecordingSession(
            self.bus,
            cfg,
            start_camera,
            start_time,
            cameras=cameras,
            motion_lookup=self.api.motion_activity,
            parent=self,
        )
        self._load_review_items()

        # Main view
        view_cls = MobileRecordingView if cfg.viewconfig.layout == "mobile" else DesktopRecordingView
        self.view = view_cls(self.bus, self.session, self.api.vod_url, names)
        self.setCentralWidget(self.view)

        # Toolbar
        tb = self.addToolBar("Review")
        self.severity_combo = QtWidgets.QComboBox(self)
        for key, label in SEVERITY_LABELS.items():
            self.severity_combo.addItem(label, key)
        self.severity_combo.setCurrentIndex(self.severity_combo.findData(self.session.severity))
        self.severity_combo.currentIndexChanged.connect(self._on_severity_changed)
        tb.addWidget(self.severity_combo)

        self.bus.sig_mode_changed.connect(self._on_mode_changed)
        self.bus.sig_chunk_changed.connect(self._on_chunk_changed)
        self.bus.sig_chunks_changed.connect(self._on_chunks_changed)
        self.resize(1280, 860)

    def _load_cameras(self) -> CameraDirectory:
        try:
            return self.api.cameras()
        except ApiError as exc:
            print(f"[App] Camera directory unavailable: {exc}")
            return CameraDirectory()

    def _load_review_items(self) -> None:
        window = day_window(self.session.current_time,
                            self.cfg.timelineconfig.day_duration,
                            self.cfg.timelineconfig.utc_offset)
        try:
            items = self.api.review(window.start, window.end)
        except ApiError as exc:
            print(f"[App] Review items unavailable: {exc}")
            items = []
        self.session.set_review_items(items)

    def _on_chunks_changed(self, _chunks) -> None:
        self._load_review_items()

    def _on_severity_changed(self, idx: int) -> None:
        severity = self.severity_combo.itemData(idx)
        if not severity:
            return
        self.bus.sig_severity_changed.emit(severity)
        # the timeline variant depends on severity
        self.view.rebuild_timeline()

    def _on_mode_changed(self, mode: str) -> None:
        self.statusBar().showMessage("Scrubbing" if mode == "scrubbing" else "Playing")

    def _on_chunk_changed(self, idx: int) -> None:
        chunk = self.session.current_range
        start = QtCore.QDateTime.fromSecsSinceEpoch(int(chunk.start)).toString("yyyy-MM-dd HH:mm")
        self.statusBar().showMessage(f"Chunk {idx}: {start}")

    def closeEvent(self, ev):
        self.session.teardown()
        super().closeEvent(ev)

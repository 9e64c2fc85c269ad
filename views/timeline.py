from PySide6 import QtCore, QtWidgets
import numpy as np
import pyqtgraph as pg
from .base import TimelineView, register_view, REGISTRY

SEVERITY_COLORS = {
    "alert": (220, 60, 60),
    "detection": (240, 150, 40),
    "significant_motion": (230, 210, 60),
}


class HandlebarViewBox(pg.ViewBox):
    """Drag-only view box: presses and drags on the timeline move the handlebar."""
    def __init__(self, bus, get_bounds, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.bus = bus
        self._get_bounds = get_bounds    # def get_bounds() -> (lo, hi)
        self._dragging = False
        self.setMouseEnabled(x=False, y=False)
        if hasattr(self, 'setWheelEnabled'):
            self.setWheelEnabled(False)

    def wheelEvent(self, ev):
        ev.ignore()

    def mousePressEvent(self, ev):
        if ev.button() == QtCore.Qt.LeftButton:
            self._dragging = True
            self.bus.sig_dragging_changed.emit(True)
            t = self._map_scene_y_to_time(ev.scenePos().y())
            if t is not None:
                self.bus.sig_handlebar_time_changed.emit(t)
        ev.accept()

    def mouseMoveEvent(self, ev):
        if self._dragging and ev.buttons() & QtCore.Qt.LeftButton:
            t = self._map_scene_y_to_time(ev.scenePos().y())
            if t is not None:
                self.bus.sig_handlebar_time_changed.emit(t)
        ev.accept()

    def mouseReleaseEvent(self, ev):
        if ev.button() == QtCore.Qt.LeftButton and self._dragging:
            t = self._map_scene_y_to_time(ev.scenePos().y())
            if t is not None:
                self.bus.sig_handlebar_time_changed.emit(t)
            self._dragging = False
            self.bus.sig_dragging_changed.emit(False)
        ev.accept()

    def _map_scene_y_to_time(self, scene_y):
        y = self.mapSceneToView(QtCore.QPointF(0, scene_y)).y()
        if not np.isfinite(y):
            return None
        lo, hi = self._get_bounds()
        return float(np.clip(y, min(lo, hi), max(lo, hi)))


class _ClockAxis(pg.AxisItem):
    def tickStrings(self, values, scale, spacing):
        return [QtCore.QDateTime.fromSecsSinceEpoch(int(v)).toString("HH:mm") for v in values]


class _ReviewTimelineBase(TimelineView):
    """Vertical day timeline with review segments and the playback handlebar."""

    def __init__(self, bus, session, parent=None):
        super().__init__(bus, session, parent)
        tl = session.tlcfg
        self.segment_duration = tl.segment_duration
        self.timestamp_spread = tl.timestamp_spread

        self.canvas = pg.GraphicsLayoutWidget(show=True)
        self.vb = HandlebarViewBox(bus=bus, get_bounds=self.session.timeline_bounds)
        axis = _ClockAxis(orientation="left")
        # a labelled tick every timestamp_spread segments
        axis.setTickSpacing(major=self.segment_duration * self.timestamp_spread, minor=self.segment_duration)
        self.p = self.canvas.addPlot(row=0, col=0, viewBox=self.vb, axisItems={"left": axis})
        self.p.setMenuEnabled(False)
        self.p.hideButtons()
        self.p.hideAxis("bottom")
        self.p.setXRange(0.0, 1.0, padding=0)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.canvas, 1)

        self.events_item = None
        # active chunk band, drawn under everything else
        self.chunk_item = pg.BarGraphItem(x0=[0.0], y0=[0.0], width=1.0, height=[0.0],
                                          brush=pg.mkBrush(255, 255, 255, 28), pen=pg.mkPen(None))
        self.chunk_item.setZValue(-10)
        self.p.addItem(self.chunk_item)
        self.handlebar = pg.InfiniteLine(angle=0, movable=False, pen=pg.mkPen((255, 200, 50), width=2))
        self.p.addItem(self.handlebar)

        self.bus.sig_time_changed.connect(self.update_time)
        self.bus.sig_chunk_changed.connect(self.update_chunk)
        self.bus.sig_chunks_changed.connect(self._on_chunks_changed)
        self.bus.sig_camera_changed.connect(self._on_camera_changed)
        self.bus.sig_review_items_changed.connect(self.update_events)

        self.render_initial()

    def render_initial(self):
        start, end = self.session.timeline_bounds()
        # timeline_start sits at the top
        self.vb.invertY(start < end)
        self.p.setYRange(min(start, end), max(start, end), padding=0)
        self.update_chunk(self.session.state.active_chunk_index)
        self.update_events()
        self.update_time(self.session.current_time)

    def update_time(self, t: float):
        self.handlebar.setPos(float(t))

    def _on_chunks_changed(self, _chunks):
        self.render_initial()

    def _on_camera_changed(self, _camera: str):
        self.update_events()
        self.update_motion()

    def update_chunk(self, _idx: int):
        chunk = self.session.current_range
        self.chunk_item.setOpts(y0=[chunk.start], height=[chunk.duration])

    def update_events(self):
        if self.events_item is not None:
            self.p.removeItem(self.events_item)
            self.events_item = None
        items = self.session.camera_review_items()
        if not items:
            return
        now = self.session.current_time
        y0 = np.array([it.start for it in items], dtype=float)
        y1 = np.array([it.end if it.end is not None else now for it in items], dtype=float)
        brushes = [self._brush_for(it.severity) for it in items]
        self.events_item = pg.BarGraphItem(
            x0=np.full(len(items), 0.55), y0=y0, width=0.4,
            height=np.maximum(y1 - y0, self.segment_duration), brushes=brushes,
        )
        self.p.addItem(self.events_item)

    def _brush_for(self, severity: str):
        r, g, b = SEVERITY_COLORS.get(severity, (150, 150, 150))
        alpha = 220 if severity == self.session.severity else 70
        return pg.mkBrush(r, g, b, alpha)


@register_view("EventReviewTimeline")
class EventReviewTimeline(_ReviewTimelineBase):
    pass


@register_view("MotionReviewTimeline")
class MotionReviewTimeline(_ReviewTimelineBase):
    def __init__(self, bus, session, parent=None):
        self.motion_item = None
        super().__init__(bus, session, parent)
        self.bus.sig_motion_updated.connect(self.update_motion)

    def render_initial(self):
        super().render_initial()
        self.update_motion()

    def update_motion(self):
        if self.motion_item is not None:
            self.p.removeItem(self.motion_item)
            self.motion_item = None
        samples = self.session.motion_events()
        if not samples:
            return
        motion = np.array([s.motion for s in samples], dtype=float)
        peak = float(motion.max()) if motion.size else 0.0
        widths = 0.5 * motion / peak if peak > 0 else np.zeros_like(motion)
        self.motion_item = pg.BarGraphItem(
            x0=np.zeros(len(samples)),
            y0=np.array([s.start_time for s in samples], dtype=float),
            width=widths,
            height=self.segment_duration / 2,
            brush=pg.mkBrush(*SEVERITY_COLORS["significant_motion"], 160),
        )
        self.p.addItem(self.motion_item)


def create_timeline(bus, session, parent=None) -> TimelineView:
    name = "MotionReviewTimeline" if session.severity == "significant_motion" else "EventReviewTimeline"
    return REGISTRY[name](bus, session, parent)

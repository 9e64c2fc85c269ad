from __future__ import annotations

from typing import Optional, Tuple

from PySide6 import QtCore

from core.model import TimeRange


class PlayerHandle(QtCore.QObject):
    """
    Capability set driven by the playback controller.
    Timestamps are absolute epoch seconds; implementations map them onto
    the chunk currently loaded with set_source().
    """
    sig_time_update = QtCore.Signal(float)
    sig_boundary_crossed = QtCore.Signal(str)  # "forward" | "backward"
    sig_ready = QtCore.Signal()

    def __init__(self, camera: str, parent: QtCore.QObject | None = None):
        super().__init__(parent)
        self.camera = camera

    def set_source(self, time_range: TimeRange, start_time: float, autoplay: bool) -> None:
        raise NotImplementedError

    def seek_to(self, ts: float, autoplay: bool) -> None:
        raise NotImplementedError

    def scrub_to(self, ts: float) -> None:
        raise NotImplementedError

    def set_role(self, primary: bool) -> None:
        """Called when the registry relabels this handle."""


class PendingStart:
    """
    Start position and play intent for media that is still loading.
    Seeks and scrubs issued before the load finishes retarget it, so the
    latest command wins once the media is ready.
    """

    def __init__(self):
        self.ms: Optional[int] = None
        self.play = False

    @property
    def active(self) -> bool:
        return self.ms is not None

    def arm(self, ms: int, play: bool) -> None:
        self.ms = ms
        self.play = play

    def retarget(self, ms: int, play: bool) -> bool:
        """Replace the pending start if a load is in flight. Returns False when nothing is pending."""
        if self.ms is None:
            return False
        self.ms = ms
        self.play = play
        return True

    def take(self) -> Tuple[Optional[int], bool]:
        ms, play = self.ms, self.play
        self.ms = None
        self.play = False
        return ms, play

    def cancel(self) -> None:
        self.ms = None
        self.play = False

from __future__ import annotations

from typing import Callable, Optional

from PySide6 import QtCore, QtMultimedia

from core.handle import PendingStart, PlayerHandle
from core.model import TimeRange

SourceUrl = Callable[[str, TimeRange], str]


class MediaPlayerHandle(PlayerHandle):
    """QMediaPlayer backed handle that plays one recording chunk at a time."""

    def __init__(
        self,
        camera: str,
        source_url: SourceUrl,
        *,
        preview: bool = False,
        parent: QtCore.QObject | None = None,
    ):
        super().__init__(camera, parent)
        self._source_url = source_url
        self._preview = preview
        self._range: Optional[TimeRange] = None
        self._pending = PendingStart()
        self._announced = False

        self.player = QtMultimedia.QMediaPlayer(self)
        self.audio = QtMultimedia.QAudioOutput(self)
        self.audio.setVolume(0.5)
        if not preview:
            self.player.setAudioOutput(self.audio)

        self.player.positionChanged.connect(self._on_position)
        self.player.mediaStatusChanged.connect(self._on_media_status)
        self.player.errorOccurred.connect(self._on_error)

    def set_video_output(self, output) -> None:
        self.player.setVideoOutput(output)
        if not self._announced:
            # ready once the first output exists; listeners register on the next tick
            self._announced = True
            QtCore.QTimer.singleShot(0, self.sig_ready.emit)

    def set_role(self, primary: bool) -> None:
        self._preview = not primary
        self.player.setAudioOutput(None if self._preview else self.audio)
        if self._preview:
            self._pending.play = False
            self.player.pause()

    def set_camera(self, camera: str) -> None:
        self.camera = camera
        self._range = None

    def time_range(self) -> Optional[TimeRange]:
        return self._range

    # PlayerHandle
    def set_source(self, time_range: TimeRange, start_time: float, autoplay: bool) -> None:
        autoplay = autoplay and not self._preview
        self._range = time_range
        self._pending.arm(self._offset_ms(start_time), autoplay)
        url = self._source_url(self.camera, time_range)
        print(f"[Player:{self.camera}] Load {url} start={start_time:.2f} autoplay={autoplay}")
        self.player.setSource(QtCore.QUrl(url))

    def seek_to(self, ts: float, autoplay: bool) -> None:
        if self._range is None:
            return
        autoplay = autoplay and not self._preview
        if self._pending.retarget(self._offset_ms(ts), autoplay):
            return
        self.player.setPosition(self._offset_ms(ts))
        if autoplay:
            self.player.play()
        else:
            self.player.pause()

    def scrub_to(self, ts: float) -> None:
        if self._range is None:
            return
        if self._pending.retarget(self._offset_ms(ts), False):
            return
        if self.player.playbackState() == QtMultimedia.QMediaPlayer.PlaybackState.PlayingState:
            self.player.pause()
        self.player.setPosition(self._offset_ms(ts))

    def stop(self) -> None:
        self._pending.cancel()
        self.player.stop()
        self.player.setSource(QtCore.QUrl())
        self._range = None

    # helpers
    def _offset_ms(self, ts: float) -> int:
        if self._range is None:
            return 0
        clamped = min(max(ts, self._range.start), self._range.end)
        return int(round((clamped - self._range.start) * 1000.0))

    def _on_position(self, ms: int):
        if self._range is None:
            return
        if self.player.playbackState() != QtMultimedia.QMediaPlayer.PlaybackState.PlayingState:
            return
        self.sig_time_update.emit(self._range.start + ms / 1000.0)

    def _on_media_status(self, status):
        Status = QtMultimedia.QMediaPlayer.MediaStatus
        if status == Status.LoadedMedia:
            ms, play = self._pending.take()
            if ms is not None:
                self.player.setPosition(ms)
            if play:
                self.player.play()
            else:
                self.player.pause()
        elif status == Status.InvalidMedia:
            self._pending.cancel()
        elif status == Status.EndOfMedia:
            self.sig_boundary_crossed.emit("forward")

    def _on_error(self, _error, message: str):
        self._pending.cancel()
        print(f"[Player:{self.camera}] Media error: {message}")

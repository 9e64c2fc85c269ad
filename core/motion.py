from __future__ import annotations

from typing import Callable, Dict, List, Tuple

from PySide6 import QtCore

from core.model import MotionSample, TimeRange

MotionLookup = Callable[[TimeRange, str, float], List[MotionSample]]
MotionKey = Tuple[float, float, str, float]


class _LookupWorker(QtCore.QObject):
    finished = QtCore.Signal(int, object, object)
    error = QtCore.Signal(int, object, str)

    def __init__(self, token: int, key: MotionKey, lookup: MotionLookup):
        super().__init__()
        self._token = token
        self._key = key
        self._lookup = lookup

    @QtCore.Slot()
    def run(self):
        start, end, camera, scale = self._key
        try:
            samples = list(self._lookup(TimeRange(start, end), camera, scale))
            self.finished.emit(self._token, self._key, samples)
        except Exception as exc:
            self.error.emit(self._token, self._key, str(exc))


class MotionCache(QtCore.QObject):
    """
    Keyed cache over the motion lookup.
    get() never blocks: it returns what is cached (or an empty list) and
    starts one background lookup per missing key.
    """
    sig_updated = QtCore.Signal()

    def __init__(self, lookup: MotionLookup, parent: QtCore.QObject | None = None):
        super().__init__(parent)
        self._lookup = lookup
        self._cache: Dict[MotionKey, List[MotionSample]] = {}
        self._pending: Dict[MotionKey, int] = {}
        self._token = 0
        self._jobs: Dict[int, Tuple[QtCore.QThread, _LookupWorker]] = {}

    @staticmethod
    def make_key(window: TimeRange, camera: str, scale: float) -> MotionKey:
        return (float(window.start), float(window.end), camera, float(scale))

    def get(self, window: TimeRange, camera: str, scale: float) -> List[MotionSample]:
        key = self.make_key(window, camera, scale)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        if key not in self._pending:
            self._token += 1
            self._pending[key] = self._token
            self._start_job(self._token, key)
        return []

    def is_pending(self, window: TimeRange, camera: str, scale: float) -> bool:
        return self.make_key(window, camera, scale) in self._pending

    def clear(self) -> None:
        self._cache.clear()
        self._pending.clear()
        for token in list(self._jobs.keys()):
            self._cleanup_job(token)

    # async lookup helpers
    def _start_job(self, token: int, key: MotionKey):
        thread = QtCore.QThread(self)
        worker = _LookupWorker(token, key, self._lookup)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._on_lookup_ready)
        worker.error.connect(self._on_lookup_error)
        worker.finished.connect(thread.quit)
        worker.error.connect(thread.quit)
        worker.finished.connect(worker.deleteLater)
        worker.error.connect(worker.deleteLater)
        thread.finished.connect(thread.deleteLater)

        self._jobs[token] = (thread, worker)
        thread.start()

    @QtCore.Slot(int, object, object)
    def _on_lookup_ready(self, token: int, key: MotionKey, samples: object):
        self._cleanup_job(token)
        if self._pending.get(key) != token:
            return
        del self._pending[key]
        self._cache[key] = list(samples or [])
        print(f"[Motion] {len(self._cache[key])} samples for {key[2]}")
        self.sig_updated.emit()

    @QtCore.Slot(int, object, str)
    def _on_lookup_error(self, token: int, key: MotionKey, message: str):
        self._cleanup_job(token)
        if self._pending.get(key) != token:
            return
        del self._pending[key]
        self._cache[key] = []
        print(f"[Motion] Lookup error for {key[2]}: {message}")
        self.sig_updated.emit()

    def _cleanup_job(self, token: int):
        entry = self._jobs.pop(token, None)
        if not entry:
            return
        thread, worker = entry
        try:
            if thread.isRunning():
                thread.quit()
        except RuntimeError:
            pass

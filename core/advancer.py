from __future__ import annotations

from PySide6 import QtCore

from core.model import ChunkSet, Session, TimeRange
from core.registry import ControllerRegistry
from core.timeline import find_chunk_index, step_toward_later


class ClipBoundaryAdvancer(QtCore.QObject):
    """Selects the active chunk index on boundary crossings and scrub excursions."""
    sig_active_chunk_changed = QtCore.Signal(int)

    def __init__(
        self,
        session: Session,
        chunks: ChunkSet,
        registry: ControllerRegistry,
        parent: QtCore.QObject | None = None,
    ):
        super().__init__(parent)
        self.session = session
        self._chunks = chunks
        self.registry = registry

        registry.sig_primary_boundary_crossed.connect(self.on_boundary_crossed)

    @property
    def chunks(self) -> ChunkSet:
        return self._chunks

    def current_range(self) -> TimeRange:
        return self._chunks[self.session.active_chunk_index]

    def set_chunks(self, chunks: ChunkSet, anchor_ts: float) -> None:
        """Swap in a new day's chunk set and anchor on anchor_ts."""
        idx = find_chunk_index(chunks.ranges, anchor_ts)
        if idx < 0:
            idx = 0
        self._chunks = chunks
        self._activate(idx, "new day")

    def on_boundary_crossed(self, direction: str) -> None:
        if self.session.closed:
            return
        later = step_toward_later(self._chunks)
        if direction == "forward":
            delta = later
        elif direction == "backward":
            delta = -later
        else:
            print(f"[Advancer] Unknown direction {direction!r}")
            return

        new_idx = self.session.active_chunk_index + delta
        if not 0 <= new_idx < len(self._chunks):
            print(f"[Advancer] {direction} at edge (index {self.session.active_chunk_index}), staying")
            return
        self._activate(new_idx, direction)

    def reanchor(self, ts: float) -> bool:
        """Make the chunk containing ts active. Returns False when no chunk contains it."""
        if self.session.closed:
            return False
        idx = find_chunk_index(self._chunks.ranges, ts)
        if idx < 0:
            print(f"[Advancer] {ts:.2f} outside {self._chunks.day_start:.0f}-{self._chunks.day_end:.0f}, keeping chunk {self.session.active_chunk_index}")
            return False
        if idx != self.session.active_chunk_index:
            self._activate(idx, "re-anchor")
        return True

    def _activate(self, idx: int, reason: str) -> None:
        self.session.active_chunk_index = idx
        chunk = self._chunks[idx]
        print(f"[Advancer] Chunk {idx} [{chunk.start:.0f}, {chunk.end:.0f}] ({reason})")
        self.sig_active_chunk_changed.emit(idx)

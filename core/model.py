from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class TimeRange:
    start: float
    end: float

    def contains(self, ts: float, tolerance: float = 0.0) -> bool:
        return self.start - tolerance <= ts <= self.end + tolerance

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class ChunkSet:
    """A day window split into fixed-duration chunks, in configured index order."""
    day_start: float
    day_end: float
    ranges: Tuple[TimeRange, ...]
    reverse: bool = False

    def __len__(self) -> int:
        return len(self.ranges)

    def __getitem__(self, idx: int) -> TimeRange:
        return self.ranges[idx]

    @property
    def window(self) -> TimeRange:
        return TimeRange(self.day_start, self.day_end)

    def timeline_bounds(self) -> Tuple[float, float]:
        """(timeline_start, timeline_end) so the widget lays chunks out in index order."""
        if self.reverse:
            return self.day_end, self.day_start
        return self.day_start, self.day_end


class PlaybackMode(str, Enum):
    PLAYING = "playing"
    SCRUBBING = "scrubbing"


@dataclass(frozen=True)
class ReviewSegment:
    id: str
    camera: str
    start: float
    end: Optional[float]
    severity: str

    @classmethod
    def from_dict(cls, d: dict) -> "ReviewSegment":
        return cls(
            id=str(d.get("id", "")),
            camera=str(d["camera"]),
            start=float(d["start_time"]),
            end=float(d["end_time"]) if d.get("end_time") is not None else None,
            severity=str(d.get("severity", "alert")),
        )


@dataclass(frozen=True)
class MotionSample:
    start_time: float
    motion: float
    audio: float = 0.0

    @classmethod
    def from_dict(cls, d: dict) -> "MotionSample":
        return cls(
            start_time=float(d["start_time"]),
            motion=float(d.get("motion") or 0.0),
            audio=float(d.get("audio") or 0.0),
        )


@dataclass
class Session:
    """Mutable playback state owned by a single recording view."""
    active_camera: str
    active_chunk_index: int
    current_time: float
    playback_start: float
    mode: PlaybackMode = PlaybackMode.PLAYING
    closed: bool = False

    def debug_summary(self) -> str:
        return (
            f"Session(camera={self.active_camera}, chunk={self.active_chunk_index}, "
            f"time={self.current_time:.3f}, start={self.playback_start:.3f}, "
            f"mode={self.mode.value}, closed={self.closed})"
        )


@dataclass
class CameraInfo:
    name: str
    width: int = 16
    height: int = 9

    @property
    def aspect_ratio(self) -> float:
        return self.width / max(1, self.height)


@dataclass
class CameraDirectory:
    cameras: List[CameraInfo] = field(default_factory=list)

    def names(self) -> List[str]:
        return [c.name for c in self.cameras]

    def get(self, name: str) -> Optional[CameraInfo]:
        for cam in self.cameras:
            if cam.name == name:
                return cam
        return None

    def aspect_class(self, name: str) -> str:
        cam = self.get(name)
        if cam is None:
            return "aspect-video"
        return "aspect-wide" if cam.aspect_ratio > 2 else "aspect-video"

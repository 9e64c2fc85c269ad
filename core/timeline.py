from __future__ import annotations

from typing import Sequence

import numpy as np

from core.config import timelineconfig
from core.model import ChunkSet, TimeRange


def day_window(ts: float, day_duration: int = 86400, utc_offset: int = 0) -> TimeRange:
    """Enclosing day for ts. Floor division keeps negative timestamps on the same grid."""
    day_start = ((ts + utc_offset) // day_duration) * day_duration - utc_offset
    return TimeRange(float(day_start), float(day_start + day_duration))


def get_chunked_time_day(ts: float, cfg: timelineconfig) -> ChunkSet:
    """Split the day containing ts into chunk_duration ranges.

    The last range is shortened when the day is not an exact multiple of
    the chunk duration, so the ranges always cover the day exactly.
    """
    window = day_window(ts, cfg.day_duration, cfg.utc_offset)
    edges = np.arange(window.start, window.end, float(cfg.chunk_duration), dtype=np.float64)
    edges = np.append(edges, window.end)
    ranges = [TimeRange(float(a), float(b)) for a, b in zip(edges[:-1], edges[1:])]
    reverse = cfg.chunk_order == "reverse"
    if reverse:
        ranges.reverse()
    return ChunkSet(day_start=window.start, day_end=window.end, ranges=tuple(ranges), reverse=reverse)


def find_chunk_index(ranges: Sequence[TimeRange], ts: float) -> int:
    """First range in stored order with start <= ts <= end, or -1."""
    for idx, chunk in enumerate(ranges):
        if chunk.start <= ts <= chunk.end:
            return idx
    return -1


def step_toward_later(chunks: ChunkSet) -> int:
    """Index delta that moves one chunk later in time."""
    return -1 if chunks.reverse else 1

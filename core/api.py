from __future__ import annotations

from typing import Iterable, List, Optional

import requests

from core.model import CameraDirectory, CameraInfo, MotionSample, ReviewSegment, TimeRange


class ApiError(Exception):
    """Raised when the recording server cannot be reached or answers badly."""


class RecordingApi:
    """Thin client for the recording server's config, review, motion and VOD endpoints."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    def _get(self, path: str, params: Optional[dict] = None):
        url = f"{self.base_url}/api/{path.lstrip('/')}"
        try:
            resp = self.http.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise ApiError(f"GET {url} failed: {exc}") from exc

    def cameras(self) -> CameraDirectory:
        data = self._get("config")
        cams = []
        for name, cam in (data.get("cameras") or {}).items():
            detect = cam.get("detect") or {}
            cams.append(CameraInfo(
                name=name,
                width=int(detect.get("width") or 16),
                height=int(detect.get("height") or 9),
            ))
        return CameraDirectory(cams)

    def review(self, after: float, before: float, cameras: Optional[Iterable[str]] = None) -> List[ReviewSegment]:
        params = {"after": after, "before": before}
        if cameras:
            params["cameras"] = ",".join(cameras)
        data = self._get("review", params)
        return [ReviewSegment.from_dict(d) for d in data or []]

    def motion_activity(self, window: TimeRange, camera: str, scale: float) -> List[MotionSample]:
        params = {
            "before": window.end,
            "after": window.start,
            "scale": scale,
            "cameras": camera,
        }
        data = self._get("review/activity/motion", params)
        return [MotionSample.from_dict(d) for d in data or []]

    def vod_url(self, camera: str, time_range: TimeRange) -> str:
        return (
            f"{self.base_url}/vod/{camera}/start/{time_range.start:.0f}"
            f"/end/{time_range.end:.0f}/index.m3u8"
        )

"""Tests for the recording server client."""

import pytest
import requests

from core.api import ApiError, RecordingApi
from core.model import MotionSample, ReviewSegment, TimeRange


class FakeResponse:
    def __init__(self, payload, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeHttp:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


def _api(payload=None, **kwargs):
    http = FakeHttp(FakeResponse(payload, **kwargs))
    return RecordingApi("http://nvr.local:5000/", timeout=3.0, session=http), http


def test_cameras_reads_detect_size():
    api, http = _api({"cameras": {
        "front": {"detect": {"width": 2560, "height": 720}},
        "side": {"detect": {}},
    }})

    cameras = api.cameras()

    assert http.requests == [("http://nvr.local:5000/api/config", None, 3.0)]
    assert cameras.names() == ["front", "side"]
    assert cameras.aspect_class("front") == "aspect-wide"
    assert cameras.aspect_class("side") == "aspect-video"


def test_review_passes_window_and_cameras():
    api, http = _api([
        {"id": "r1", "camera": "front", "start_time": 100.5, "end_time": 130.0, "severity": "alert"},
        {"id": "r2", "camera": "side", "start_time": 200, "end_time": None, "severity": "detection"},
    ])

    items = api.review(0.0, 86400.0, cameras=["front", "side"])

    url, params, _ = http.requests[0]
    assert url == "http://nvr.local:5000/api/review"
    assert params == {"after": 0.0, "before": 86400.0, "cameras": "front,side"}
    assert items == [
        ReviewSegment("r1", "front", 100.5, 130.0, "alert"),
        ReviewSegment("r2", "side", 200.0, None, "detection"),
    ]


def test_motion_activity_params():
    api, http = _api([{"start_time": 10, "motion": 3, "audio": None}])

    samples = api.motion_activity(TimeRange(0.0, 86400.0), "front", 15.0)

    url, params, _ = http.requests[0]
    assert url == "http://nvr.local:5000/api/review/activity/motion"
    assert params == {"before": 86400.0, "after": 0.0, "scale": 15.0, "cameras": "front"}
    assert samples == [MotionSample(10.0, 3.0, 0.0)]


def test_vod_url():
    api, _ = _api()

    url = api.vod_url("front", TimeRange(3600.0, 7200.0))

    assert url == "http://nvr.local:5000/vod/front/start/3600/end/7200/index.m3u8"


def test_http_error_raises_api_error():
    api, _ = _api({}, status=500)

    with pytest.raises(ApiError):
        api.cameras()


def test_bad_json_raises_api_error():
    api, _ = _api(ValueError("no json"))

    with pytest.raises(ApiError):
        api.review(0.0, 1.0)


def test_connection_error_raises_api_error():
    http = FakeHttp(exc=requests.ConnectionError("refused"))
    api = RecordingApi("http://nvr.local:5000", session=http)

    with pytest.raises(ApiError):
        api.motion_activity(TimeRange(0.0, 1.0), "front", 15.0)

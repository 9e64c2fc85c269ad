"""Tests for the motion activity cache."""

import pytest

from core.model import MotionSample, TimeRange
from core.motion import MotionCache, _LookupWorker

WINDOW = TimeRange(0.0, 86400.0)


@pytest.fixture
def cache(monkeypatch):
    """Cache whose background jobs are recorded instead of started."""
    started = []
    monkeypatch.setattr(MotionCache, "_start_job", lambda self, token, key: started.append((token, key)))
    c = MotionCache(lambda window, camera, scale: [])
    c.started = started
    return c


def test_miss_returns_empty_and_starts_one_lookup(cache):
    assert cache.get(WINDOW, "front", 15.0) == []
    assert cache.get(WINDOW, "front", 15.0) == []

    assert cache.started == [(1, (0.0, 86400.0, "front", 15.0))]
    assert cache.is_pending(WINDOW, "front", 15.0)


def test_result_is_cached_and_announced(cache):
    updates = []
    cache.sig_updated.connect(lambda: updates.append(True))
    cache.get(WINDOW, "front", 15.0)
    token, key = cache.started[0]
    samples = [MotionSample(10.0, 0.5), MotionSample(25.0, 0.0)]

    cache._on_lookup_ready(token, key, samples)

    assert updates == [True]
    assert cache.get(WINDOW, "front", 15.0) == samples
    assert not cache.is_pending(WINDOW, "front", 15.0)
    assert len(cache.started) == 1


def test_stale_result_is_dropped(cache):
    cache.get(WINDOW, "front", 15.0)
    _, key = cache.started[0]

    cache._on_lookup_ready(99, key, [MotionSample(1.0, 1.0)])

    assert cache.is_pending(WINDOW, "front", 15.0)
    assert cache.get(WINDOW, "front", 15.0) == []


def test_error_caches_empty_result(cache):
    updates = []
    cache.sig_updated.connect(lambda: updates.append(True))
    cache.get(WINDOW, "side", 15.0)
    token, key = cache.started[0]

    cache._on_lookup_error(token, key, "boom")

    assert updates == [True]
    assert cache.get(WINDOW, "side", 15.0) == []
    assert len(cache.started) == 1


def test_clear_forgets_results(cache):
    cache.get(WINDOW, "front", 15.0)
    token, key = cache.started[0]
    cache._on_lookup_ready(token, key, [MotionSample(1.0, 1.0)])

    cache.clear()
    cache.get(WINDOW, "front", 15.0)

    assert len(cache.started) == 2


def test_worker_reports_samples():
    calls = []

    def lookup(window, camera, scale):
        calls.append((window, camera, scale))
        return [MotionSample(5.0, 0.2)]

    worker = _LookupWorker(3, (0.0, 100.0, "front", 15.0), lookup)
    results = []
    worker.finished.connect(lambda token, key, samples: results.append((token, key, samples)))

    worker.run()

    assert calls == [(TimeRange(0.0, 100.0), "front", 15.0)]
    assert results == [(3, (0.0, 100.0, "front", 15.0), [MotionSample(5.0, 0.2)])]


def test_worker_reports_errors():
    def lookup(window, camera, scale):
        raise RuntimeError("server down")

    worker = _LookupWorker(4, (0.0, 100.0, "front", 15.0), lookup)
    errors = []
    worker.error.connect(lambda token, key, message: errors.append((token, message)))

    worker.run()

    assert errors == [(4, "server down")]

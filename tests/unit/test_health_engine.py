"""
Unit tests for the HealthMonitor entry point.
"""

import threading
from datetime import timedelta
from math import isclose

from autoping.core.config import MonitorConfig
from autoping.health.engine import HealthMonitor
from autoping.health.schema import LifecycleEventKind


def _process_all(monitor, outcomes):
    events = []
    for outcome in outcomes:
        events.extend(monitor.process_probe(outcome))
    return events


def test_outage_end_to_end(warm_monitor, make_outcomes, tick):
    outcomes = make_outcomes([None, None, None, 31], start=11)

    events = _process_all(warm_monitor, outcomes)

    assert [e.kind for e in events] == [
        LifecycleEventKind.OUTAGE_STARTED,
        LifecycleEventKind.OUTAGE_ENDED,
    ]
    assert events[0].time == tick(11)
    assert events[1].time == tick(14)
    assert events[1].duration == timedelta(seconds=180)

    baseline = warm_monitor.baseline
    assert len(baseline) == 10
    assert baseline.values[-1] == 31.0
    assert isclose(baseline.mean(), 30.1, rel_tol=1e-9)


def test_anomaly_end_to_end(warm_monitor, make_outcomes, tick):
    outcomes = make_outcomes([150, 150, 150, 30, 30], start=11)

    events = _process_all(warm_monitor, outcomes)

    assert [e.kind for e in events] == [
        LifecycleEventKind.ANOMALY_PERIOD_STARTED,
        LifecycleEventKind.ANOMALY_PERIOD_ENDED,
    ]
    assert events[0].time == tick(11)
    assert 150.0 not in warm_monitor.baseline.values


def test_failures_do_not_touch_latency_state(warm_monitor, make_outcomes):
    _process_all(warm_monitor, make_outcomes([None, None], start=11))

    snapshot = warm_monitor.snapshot()
    assert snapshot.consecutive_misses == 2
    assert snapshot.baseline_size == 10
    assert snapshot.consecutive_anomalous == 0


def test_reply_ending_outage_is_also_classified(warm_monitor, make_outcomes):
    outcomes = make_outcomes([None, None, None, 500, 500, 500], start=11)

    events = _process_all(warm_monitor, outcomes)

    assert [e.kind for e in events] == [
        LifecycleEventKind.OUTAGE_STARTED,
        LifecycleEventKind.OUTAGE_ENDED,
        LifecycleEventKind.ANOMALY_PERIOD_STARTED,
    ]
    assert events[2].time == events[1].time


def test_completed_events_reach_digest(warm_monitor, make_outcomes, tick):
    outcomes = make_outcomes([None, None, None, 30, 150, 150, 150, 30, 30], start=11)
    _process_all(warm_monitor, outcomes)

    assert warm_monitor.snapshot().pending_digest_events == 2

    summary = warm_monitor.fire_digest(tick(20))

    assert summary.outage_count == 1
    assert summary.anomaly_count == 1
    assert summary.outage_details[0].kind == LifecycleEventKind.OUTAGE_ENDED
    assert summary.anomaly_details[0].kind == LifecycleEventKind.ANOMALY_PERIOD_ENDED
    assert warm_monitor.snapshot().pending_digest_events == 0


def test_snapshot_reflects_state(warm_monitor):
    snapshot = warm_monitor.snapshot()

    assert snapshot.outage_active is False
    assert snapshot.has_succeeded is True
    assert isclose(snapshot.baseline_mean_ms, 30.0, rel_tol=1e-9)
    assert isclose(snapshot.cutoff_ms, 90.0, rel_tol=1e-9)


def test_monitors_are_independent(make_outcomes):
    config = MonitorConfig(require_initial_success=False)
    first = HealthMonitor(config)
    second = HealthMonitor(config)

    _process_all(first, make_outcomes([None, None, None]))

    assert first.snapshot().outage_active is True
    assert second.snapshot().outage_active is False


def test_process_probe_is_serialized(monitor, make_outcomes):
    outcome = make_outcomes([30])[0]
    results = []

    monitor._lock.acquire()
    try:
        worker = threading.Thread(target=lambda: results.append(monitor.process_probe(outcome)))
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert results == []
    finally:
        monitor._lock.release()

    worker.join(timeout=2.0)
    assert results == [[]]
    assert len(monitor.baseline) == 1


def test_concurrent_callers_keep_counters_consistent(monitor, make_outcomes):
    outcomes = make_outcomes([30] * 200)
    chunks = [outcomes[i::4] for i in range(4)]

    threads = [
        threading.Thread(target=lambda chunk=chunk: _process_all(monitor, chunk))
        for chunk in chunks
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    snapshot = monitor.snapshot()
    assert snapshot.baseline_size == 10
    assert snapshot.consecutive_misses == 0
    assert snapshot.consecutive_anomalous == 0

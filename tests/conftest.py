"""
Pytest configuration and shared fixtures.

Provides monitor configurations, a fixed clock and helpers that build probe
outcome sequences for unit and integration tests.
"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, List

from autoping.core.config import MonitorConfig
from autoping.health.engine import HealthMonitor
from autoping.health.schema import FailureKind, ProbeOutcome


T0 = datetime(2026, 10, 15, 10, 0, 0, tzinfo=timezone.utc)
INTERVAL = timedelta(seconds=60)


@pytest.fixture
def monitor_config() -> MonitorConfig:
    """
    Fixture providing the default thresholds with the initial-success guard
    turned off, so sequences can start with failures.

    Returns:
        MonitorConfig: interval 60s, thresholds 3, window 10, multiplier 3
    """
    return MonitorConfig(require_initial_success=False)


@pytest.fixture
def monitor(monitor_config) -> HealthMonitor:
    return HealthMonitor(monitor_config)


@pytest.fixture
def tick() -> Callable[[int], datetime]:
    """
    Fixture returning the timestamp of the n-th probe (1-based) on a 60s cadence.
    """
    def _tick(n: int) -> datetime:
        return T0 + INTERVAL * (n - 1)
    return _tick


@pytest.fixture
def make_outcomes(tick) -> Callable[..., List[ProbeOutcome]]:
    """
    Fixture building ProbeOutcome sequences from a compact description.

    Each item is either a latency in ms (success) or None (timeout).
    Timestamps continue from ``start`` (1-based tick number).
    """
    def _make(items, start: int = 1) -> List[ProbeOutcome]:
        outcomes = []
        for offset, item in enumerate(items):
            ts = tick(start + offset)
            if item is None:
                outcomes.append(ProbeOutcome.failed(ts, FailureKind.TIMEOUT))
            else:
                outcomes.append(ProbeOutcome.ok(ts, float(item)))
        return outcomes
    return _make


@pytest.fixture
def warm_monitor(monitor, make_outcomes) -> HealthMonitor:
    """
    Fixture providing a monitor whose baseline holds ten 30ms samples
    (ticks 1-10), with no open outage or anomaly period.
    """
    for outcome in make_outcomes([30] * 10):
        monitor.process_probe(outcome)
    return monitor


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (deferred CI)"
    )

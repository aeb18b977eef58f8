"""
Health module: the health-signal state machine.

Implements the latency baseline, latency anomaly detection, outage tracking,
the daily digest aggregator, and the HealthMonitor context that ties them
together behind a single process_probe entry point.
"""

from .baselines import LatencyBaseline
from .detectors import LatencyAnomalyDetector
from .digest import DigestAggregator, next_midnight, seconds_until, seconds_until_next_midnight
from .engine import HealthMonitor
from .outage import OutageTracker
from .schema import (
	AnomalyPeriodState,
	DigestSummary,
	FailureKind,
	HealthSnapshot,
	LifecycleEvent,
	LifecycleEventKind,
	OutageState,
	ProbeOutcome,
)

__all__ = [
	"HealthMonitor",
	"LatencyBaseline",
	"LatencyAnomalyDetector",
	"OutageTracker",
	"DigestAggregator",
	"next_midnight",
	"seconds_until",
	"seconds_until_next_midnight",
	"AnomalyPeriodState",
	"DigestSummary",
	"FailureKind",
	"HealthSnapshot",
	"LifecycleEvent",
	"LifecycleEventKind",
	"OutageState",
	"ProbeOutcome",
]

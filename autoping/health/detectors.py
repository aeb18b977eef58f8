"""
Latency anomaly detection against the rolling baseline.

A latency is anomalous when it exceeds mean x cutoff_multiplier. Anomalous
latencies never enter the baseline. A run of anomalous probes becomes an
anomaly period once it reaches the threshold. Before that, any normal probe
discards the run. An open period ends after two consecutive normal probes
(a single normal probe inside an open period is tolerated).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from autoping.core.exceptions import ConfigurationError

from .baselines import LatencyBaseline
from .schema import AnomalyPeriodState, LifecycleEvent, LifecycleEventKind

logger = logging.getLogger(__name__)


@dataclass
class LatencyAnomalyDetector:
    """
    Classifies successful probe latencies into anomaly-period events.

    Notes:
    - With an empty baseline every latency is normal, so nothing fires at startup.
    - Runs that never reach the threshold are discarded silently.
    - Period duration is anomalous probe count x probe_interval.
    """

    baseline: LatencyBaseline
    probe_interval: timedelta = timedelta(seconds=60)
    threshold: int = 3
    cutoff_multiplier: float = 3.0
    state: AnomalyPeriodState = field(default_factory=AnomalyPeriodState)

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ConfigurationError(f"Anomaly threshold must be positive, got {self.threshold}")
        if self.cutoff_multiplier <= 0:
            raise ConfigurationError(
                f"Cutoff multiplier must be positive, got {self.cutoff_multiplier}"
            )
        if self.probe_interval <= timedelta(0):
            raise ConfigurationError("Probe interval must be positive")

    def is_anomalous(self, latency_ms: float) -> bool:
        cutoff = self.baseline.cutoff(self.cutoff_multiplier)
        return cutoff is not None and cutoff > 0 and latency_ms > cutoff

    def evaluate(self, timestamp: datetime, latency_ms: float) -> Optional[LifecycleEvent]:
        logger.debug(
            "Evaluating reply sent at %s with RTT %.3f ms (mean %s, cutoff %s)",
            timestamp,
            latency_ms,
            self.baseline.mean(),
            self.baseline.cutoff(self.cutoff_multiplier),
        )
        if self.is_anomalous(latency_ms):
            return self._on_anomalous(timestamp)
        return self._on_normal(timestamp, latency_ms)

    def _on_anomalous(self, timestamp: datetime) -> Optional[LifecycleEvent]:
        state = self.state
        if state.consecutive_anomalous == 0:
            state.run_start = timestamp
        state.consecutive_anomalous += 1
        state.last_anomalous_time = timestamp
        state.recovery_time = None
        state.previous_was_anomalous = True
        logger.debug("High latency for %d probe(s)", state.consecutive_anomalous)

        if state.active or state.consecutive_anomalous < self.threshold:
            return None

        state.active = True
        logger.debug("Latency anomaly period active from %s", state.run_start)
        return LifecycleEvent(kind=LifecycleEventKind.ANOMALY_PERIOD_STARTED, time=state.run_start)

    def _on_normal(self, timestamp: datetime, latency_ms: float) -> Optional[LifecycleEvent]:
        state = self.state
        self.baseline.admit(latency_ms)
        logger.debug("RTT %.3f ms is normal, baseline now holds %d", latency_ms, len(self.baseline))

        if state.consecutive_anomalous == 0:
            return None

        if not state.active:
            logger.debug(
                "Discarding run of %d high-latency probe(s) below threshold",
                state.consecutive_anomalous,
            )
            state.reset()
            return None

        if state.previous_was_anomalous:
            # one recovery probe is tolerated inside an open period
            state.previous_was_anomalous = False
            state.recovery_time = timestamp
            return None

        duration = self.probe_interval * state.consecutive_anomalous
        event = LifecycleEvent(
            kind=LifecycleEventKind.ANOMALY_PERIOD_ENDED,
            time=state.recovery_time or timestamp,
            duration=duration,
            started_at=state.run_start,
        )
        logger.debug("Normal latency restored at %s, period lasted %s", event.time, duration)
        state.reset()
        return event

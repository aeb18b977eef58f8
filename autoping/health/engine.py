"""
Health monitor: the single entry point of the state machine.

Consumes one ProbeOutcome at a time, updates outage and latency state, feeds
completed events to the digest aggregator and returns the lifecycle events the
probe produced.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import List, Optional

from autoping.core.config import MonitorConfig

from .baselines import LatencyBaseline
from .detectors import LatencyAnomalyDetector
from .digest import DigestAggregator
from .outage import OutageTracker
from .schema import DigestSummary, HealthSnapshot, LifecycleEvent, ProbeOutcome

logger = logging.getLogger(__name__)


class HealthMonitor:
    """
    Owns all health state for one monitored target.

    Notes:
    - One instance per target; nothing is shared between instances.
    - process_probe and fire_digest are serialized by a single lock, so
      outcomes and digest triggers may arrive from different threads.
    - Probe failures are ordinary outcomes and never raise.
    """

    def __init__(self, config: Optional[MonitorConfig] = None) -> None:
        self.config = config or MonitorConfig()
        self._lock = threading.Lock()
        self.baseline = LatencyBaseline(window_size=self.config.baseline_window)
        self.outage = OutageTracker(
            probe_interval=self.config.probe_interval,
            threshold=self.config.outage_threshold,
            require_initial_success=self.config.require_initial_success,
        )
        self.latency = LatencyAnomalyDetector(
            baseline=self.baseline,
            probe_interval=self.config.probe_interval,
            threshold=self.config.anomaly_threshold,
            cutoff_multiplier=self.config.cutoff_multiplier,
        )
        self.digest = DigestAggregator()

    def process_probe(self, outcome: ProbeOutcome) -> List[LifecycleEvent]:
        """
        Apply one probe outcome.

        Args:
            outcome: Result of a probe; its timestamp is the time it was sent

        Returns:
            Lifecycle events in the order they occurred (possibly empty)
        """
        with self._lock:
            events: List[LifecycleEvent] = []

            outage_event = self.outage.evaluate(outcome)
            if outage_event is not None:
                events.append(outage_event)

            if outcome.success:
                latency_event = self.latency.evaluate(outcome.timestamp, outcome.latency_ms)
                if latency_event is not None:
                    events.append(latency_event)

            for event in events:
                logger.debug("Emitting %s at %s", event.kind.value, event.time)
                if event.is_completed:
                    self.digest.on_completed_event(event)

            return events

    def fire_digest(self, now: Optional[datetime] = None) -> DigestSummary:
        with self._lock:
            return self.digest.fire(now)

    def snapshot(self) -> HealthSnapshot:
        with self._lock:
            outage = self.outage.state
            anomaly = self.latency.state
            return HealthSnapshot(
                outage_active=outage.active,
                consecutive_misses=outage.consecutive_misses,
                outage_duration=outage.duration,
                has_succeeded=outage.has_succeeded,
                baseline_size=len(self.baseline),
                baseline_mean_ms=self.baseline.mean(),
                cutoff_ms=self.baseline.cutoff(self.config.cutoff_multiplier),
                anomaly_active=anomaly.active,
                consecutive_anomalous=anomaly.consecutive_anomalous,
                pending_digest_events=len(self.digest),
            )

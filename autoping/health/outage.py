"""
Outage tracking from consecutive missed probes.

Timeouts, name resolution failures and other transport errors all count as a
missed probe. A short run of misses is tolerated; once the run reaches the
threshold an outage is opened, dated back to the first miss of the run, and
closed by the next successful probe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from autoping.core.exceptions import ConfigurationError

from .schema import LifecycleEvent, LifecycleEventKind, OutageState, ProbeOutcome

logger = logging.getLogger(__name__)


@dataclass
class OutageTracker:
    """
    Classifies probe outcomes into outage lifecycle events.

    Notes:
    - Durations are miss count x probe_interval, not wall-clock deltas.
    - With require_initial_success, misses seen before the first reply are
      counted but never open an outage.
    """

    probe_interval: timedelta = timedelta(seconds=60)
    threshold: int = 3
    require_initial_success: bool = True
    state: OutageState = field(default_factory=OutageState)

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ConfigurationError(f"Outage threshold must be positive, got {self.threshold}")
        if self.probe_interval <= timedelta(0):
            raise ConfigurationError("Probe interval must be positive")

    def evaluate(self, outcome: ProbeOutcome) -> Optional[LifecycleEvent]:
        if outcome.success:
            return self._on_success(outcome)
        return self._on_miss(outcome)

    def _on_miss(self, outcome: ProbeOutcome) -> Optional[LifecycleEvent]:
        state = self.state
        if state.consecutive_misses == 0:
            state.run_start = outcome.timestamp
        state.consecutive_misses += 1
        logger.debug(
            "Missed probe at %s (%s), consecutive misses now %d",
            outcome.timestamp,
            outcome.failure_kind.value if outcome.failure_kind else "unknown",
            state.consecutive_misses,
        )

        if state.active:
            state.duration = self.probe_interval * state.consecutive_misses
            logger.debug("Outage ongoing, duration %s", state.duration)
            return None

        if state.consecutive_misses < self.threshold:
            return None

        if self.require_initial_success and not state.has_succeeded:
            logger.debug("No successful probe yet, not opening an outage")
            return None

        state.active = True
        state.start_time = state.run_start
        state.duration = self.probe_interval * state.consecutive_misses
        logger.debug("Setting outage active from %s", state.start_time)
        return LifecycleEvent(kind=LifecycleEventKind.OUTAGE_STARTED, time=state.start_time)

    def _on_success(self, outcome: ProbeOutcome) -> Optional[LifecycleEvent]:
        state = self.state
        state.has_succeeded = True

        if not state.active:
            if state.consecutive_misses:
                logger.debug(
                    "Reply after %d missed probe(s), below threshold", state.consecutive_misses
                )
            state.reset()
            return None

        duration = self.probe_interval * state.consecutive_misses
        event = LifecycleEvent(
            kind=LifecycleEventKind.OUTAGE_ENDED,
            time=outcome.timestamp,
            duration=duration,
            started_at=state.start_time,
        )
        logger.debug("Connection restored at %s after %s", outcome.timestamp, duration)
        state.reset()
        return event

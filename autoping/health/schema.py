"""
Schema definitions for the health-signal state machine.

Inputs (probe outcomes) and outputs (lifecycle events, digests) are immutable
pydantic models. The mutable per-target state owned by the trackers is kept in
plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FailureKind(str, Enum):
    """Why a probe got no reply."""

    TIMEOUT = "timeout"
    UNRESOLVABLE = "unresolvable"
    OTHER = "other"


class ProbeOutcome(BaseModel):
    """
    Result of a single probe attempt.

    Fields:
    - timestamp: when the probe was sent
    - success: True if a reply came back
    - latency_ms: round-trip time, present iff success
    - failure_kind: why it failed, present iff not success
    - detail: free text for log rendering (address, error message)
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    success: bool
    latency_ms: Optional[float] = Field(None, ge=0.0)
    failure_kind: Optional[FailureKind] = None
    detail: Optional[str] = None

    @model_validator(mode="after")
    def _check_consistency(self) -> "ProbeOutcome":
        if self.success:
            if self.latency_ms is None:
                raise ValueError("successful probe requires latency_ms")
            if self.failure_kind is not None:
                raise ValueError("successful probe cannot carry failure_kind")
        else:
            if self.failure_kind is None:
                raise ValueError("failed probe requires failure_kind")
            if self.latency_ms is not None:
                raise ValueError("failed probe cannot carry latency_ms")
        return self

    @classmethod
    def ok(
        cls, timestamp: datetime, latency_ms: float, detail: Optional[str] = None
    ) -> "ProbeOutcome":
        return cls(timestamp=timestamp, success=True, latency_ms=latency_ms, detail=detail)

    @classmethod
    def failed(
        cls,
        timestamp: datetime,
        failure_kind: FailureKind = FailureKind.TIMEOUT,
        detail: Optional[str] = None,
    ) -> "ProbeOutcome":
        return cls(timestamp=timestamp, success=False, failure_kind=failure_kind, detail=detail)


class LifecycleEventKind(str, Enum):
    """Start/end transitions of the two health signals."""

    OUTAGE_STARTED = "outage_started"
    OUTAGE_ENDED = "outage_ended"
    ANOMALY_PERIOD_STARTED = "anomaly_period_started"
    ANOMALY_PERIOD_ENDED = "anomaly_period_ended"


COMPLETED_KINDS = frozenset(
    {LifecycleEventKind.OUTAGE_ENDED, LifecycleEventKind.ANOMALY_PERIOD_ENDED}
)


class LifecycleEvent(BaseModel):
    """
    Discrete transition emitted by the state machine.

    Fields:
    - kind: which transition happened
    - time: when it happened (first failing/slow probe for starts)
    - duration: length of the finished condition, ended events only
    - started_at: start of the finished condition, ended events only
    """

    model_config = ConfigDict(frozen=True)

    kind: LifecycleEventKind
    time: datetime
    duration: Optional[timedelta] = None
    started_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.kind in COMPLETED_KINDS

    @property
    def is_outage(self) -> bool:
        return self.kind in (
            LifecycleEventKind.OUTAGE_STARTED,
            LifecycleEventKind.OUTAGE_ENDED,
        )


class DigestSummary(BaseModel):
    """
    Summary of one digest period.

    Fields:
    - date: calendar date the summary covers
    - generated_at: when the digest fired
    - outage_count/outage_details: completed outages in the period
    - anomaly_count/anomaly_details: completed latency anomaly periods
    """

    model_config = ConfigDict(frozen=True)

    date: date
    generated_at: datetime
    outage_count: int = Field(0, ge=0)
    outage_details: List[LifecycleEvent] = Field(default_factory=list)
    anomaly_count: int = Field(0, ge=0)
    anomaly_details: List[LifecycleEvent] = Field(default_factory=list)


class HealthSnapshot(BaseModel):
    """
    Read-only view of a monitor's state, for rendering and inspection.
    """

    outage_active: bool
    consecutive_misses: int
    outage_duration: timedelta
    has_succeeded: bool
    baseline_size: int
    baseline_mean_ms: Optional[float] = None
    cutoff_ms: Optional[float] = None
    anomaly_active: bool
    consecutive_anomalous: int
    pending_digest_events: int


@dataclass
class OutageState:
    """Mutable outage state owned by the outage tracker."""

    active: bool = False
    consecutive_misses: int = 0
    start_time: Optional[datetime] = None
    run_start: Optional[datetime] = None
    duration: timedelta = timedelta(0)
    has_succeeded: bool = False

    def reset(self) -> None:
        self.active = False
        self.consecutive_misses = 0
        self.start_time = None
        self.run_start = None
        self.duration = timedelta(0)


@dataclass
class AnomalyPeriodState:
    """Mutable latency anomaly state owned by the anomaly detector."""

    active: bool = False
    consecutive_anomalous: int = 0
    run_start: Optional[datetime] = None
    last_anomalous_time: Optional[datetime] = None
    recovery_time: Optional[datetime] = None
    previous_was_anomalous: bool = False

    def reset(self) -> None:
        self.active = False
        self.consecutive_anomalous = 0
        self.run_start = None
        self.last_anomalous_time = None
        self.recovery_time = None
        self.previous_was_anomalous = False

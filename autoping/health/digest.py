"""
Daily digest aggregation.

Collects completed outages and latency anomaly periods between calendar
boundaries and turns them into a DigestSummary. The record lives in memory
only: if the process restarts before the boundary, the partial day is lost.
The per-event log lines are the durable record.

Design:
- Only completed (ended) events are recorded
- fire() snapshots and clears the record in one step
- Boundaries are local midnight
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from .schema import DigestSummary, LifecycleEvent, LifecycleEventKind

logger = logging.getLogger(__name__)


def next_midnight(now: datetime) -> datetime:
    """
    Next local calendar boundary strictly after ``now``.

    Example:
    - 2026-10-15 13:45 -> 2026-10-16 00:00
    - 2026-10-16 00:00 -> 2026-10-17 00:00

    Naive times are wall-clock times. A fixed-offset time (what
    ``datetime.now().astimezone()`` returns) is resolved against the system
    local zone, so the offset of the boundary may differ from the offset of
    ``now`` on a daylight saving change. Named zones (zoneinfo) are used as is.

    Args:
        now: Current time (naive local or timezone-aware)

    Returns:
        Midnight of the following day
    """
    tomorrow = now.date() + timedelta(days=1)
    if now.tzinfo is None:
        return datetime.combine(tomorrow, time.min)
    if isinstance(now.tzinfo, timezone):
        tomorrow = now.astimezone().date() + timedelta(days=1)
        return datetime.combine(tomorrow, time.min).astimezone()
    return datetime.combine(tomorrow, time.min, tzinfo=now.tzinfo)


def seconds_until(boundary: datetime, now: datetime) -> float:
    if now.tzinfo is None:
        return (boundary - now).total_seconds()
    # same-tzinfo subtraction ignores offsets, compare in UTC
    return (boundary.astimezone(timezone.utc) - now.astimezone(timezone.utc)).total_seconds()


def seconds_until_next_midnight(now: datetime) -> float:
    return seconds_until(next_midnight(now), now)


def digest_date_for(now: datetime) -> date:
    """
    Calendar date a digest fired at ``now`` covers.

    A digest fired exactly at midnight summarizes the day that just ended.
    """
    return (now - timedelta(seconds=1)).date()


class DigestAggregator:
    """
    Accumulates completed lifecycle events until the next digest.

    Not synchronized on its own; the owning HealthMonitor serializes access.
    """

    def __init__(self) -> None:
        self._outages: List[LifecycleEvent] = []
        self._anomalies: List[LifecycleEvent] = []

    def on_completed_event(self, event: LifecycleEvent) -> None:
        if event.kind == LifecycleEventKind.OUTAGE_ENDED:
            self._outages.append(event)
        elif event.kind == LifecycleEventKind.ANOMALY_PERIOD_ENDED:
            self._anomalies.append(event)
        else:
            logger.debug("Ignoring %s for digest, not a completed event", event.kind.value)
            return
        logger.debug("Adding %s to daily list (%d pending)", event.kind.value, len(self))

    def fire(self, now: Optional[datetime] = None) -> DigestSummary:
        """
        Produce the summary for the period and start a new one.

        Args:
            now: Trigger time (defaults to current local time)

        Returns:
            DigestSummary covering everything recorded since the last fire
        """
        now = now or datetime.now().astimezone()
        outages, self._outages = self._outages, []
        anomalies, self._anomalies = self._anomalies, []

        summary = DigestSummary(
            date=digest_date_for(now),
            generated_at=now,
            outage_count=len(outages),
            outage_details=outages,
            anomaly_count=len(anomalies),
            anomaly_details=anomalies,
        )
        logger.debug(
            "Digest for %s: %d outage(s), %d anomaly period(s)",
            summary.date,
            summary.outage_count,
            summary.anomaly_count,
        )
        return summary

    @property
    def pending_outages(self) -> List[LifecycleEvent]:
        return list(self._outages)

    @property
    def pending_anomalies(self) -> List[LifecycleEvent]:
        return list(self._anomalies)

    def __len__(self) -> int:
        return len(self._outages) + len(self._anomalies)

"""
Output sinks: the categorized event log and the daily digest file.

Sinks only render what the HealthMonitor produced. A failing sink never
feeds back into monitor state.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path
from typing import Iterable, List, Optional

from autoping.core.exceptions import DigestWriteError
from autoping.core.logging_config import OUTAGE_LOGGER, PING_LOGGER
from autoping.health.schema import (
    DigestSummary,
    FailureKind,
    HealthSnapshot,
    LifecycleEvent,
    LifecycleEventKind,
    ProbeOutcome,
)


def format_minutes(duration: Optional[timedelta]) -> str:
    minutes = (duration or timedelta(0)).total_seconds() / 60
    return f"{minutes:.2f} minutes"


def render_event(event: LifecycleEvent) -> str:
    """Human readable line for a lifecycle event."""
    clock = event.time.strftime("%H:%M:%S")
    if event.kind == LifecycleEventKind.OUTAGE_STARTED:
        return f"Lost contact. Outage started at {clock}"
    if event.kind == LifecycleEventKind.OUTAGE_ENDED:
        return f"Connection restored at {clock}. Total outage duration {format_minutes(event.duration)}"
    if event.kind == LifecycleEventKind.ANOMALY_PERIOD_STARTED:
        return f"Period of high latency started at {clock}"
    return f"Period of high latency finished at {clock}. Duration = {format_minutes(event.duration)}"


class EventLogSink:
    """
    Writes PING and OUTAGE lines for every processed probe.
    """

    def __init__(
        self,
        host: str,
        ping_logger: Optional[logging.Logger] = None,
        outage_logger: Optional[logging.Logger] = None,
    ) -> None:
        self.host = host
        self.ping_log = ping_logger or logging.getLogger(PING_LOGGER)
        self.outage_log = outage_logger or logging.getLogger(OUTAGE_LOGGER)

    def record(
        self,
        outcome: ProbeOutcome,
        events: Iterable[LifecycleEvent],
        snapshot: Optional[HealthSnapshot] = None,
    ) -> None:
        self.record_probe(outcome)
        events = list(events)
        for event in events:
            self.outage_log.info(render_event(event))
        if snapshot is not None and snapshot.outage_active and not events:
            self.outage_log.info(
                "Lost contact. Outage duration %s", format_minutes(snapshot.outage_duration)
            )

    def record_probe(self, outcome: ProbeOutcome) -> None:
        if outcome.success:
            self.ping_log.info(
                "Reply from %s (%s): time=%.3f ms",
                self.host,
                outcome.detail or self.host,
                outcome.latency_ms,
            )
        elif outcome.failure_kind == FailureKind.UNRESOLVABLE:
            self.ping_log.info("Could not resolve %s", outcome.detail or self.host)
        elif outcome.failure_kind == FailureKind.TIMEOUT:
            self.ping_log.info("Timeout - Missed pong from %s", self.host)
        else:
            self.ping_log.info("Probe to %s failed: %s", self.host, outcome.detail or "unknown error")


class DigestFileWriter:
    """
    Writes one dated digest file per summary.

    File name: ``<prefix>.digest.YYYYMMDD.log`` inside ``directory``.
    """

    def __init__(self, directory: Path, prefix: str = "autoping") -> None:
        self.directory = Path(directory)
        self.prefix = prefix

    def path_for(self, summary: DigestSummary) -> Path:
        return self.directory / f"{self.prefix}.digest.{summary.date:%Y%m%d}.log"

    def render(self, summary: DigestSummary) -> List[str]:
        stamp = f"{summary.date:%Y%m%d}"
        lines = [
            f"Outage digest for {stamp}",
            f"Number of outages: {summary.outage_count}",
        ]
        for number, outage in enumerate(summary.outage_details, start=1):
            lines.append(
                f"\tOutage {number} ended at {outage.time:%H:%M:%S} "
                f"and lasted {format_minutes(outage.duration)}"
            )
        lines.append(f"Bad latency digest for {stamp}")
        lines.append(f"Number of periods of bad latency: {summary.anomaly_count}")
        for number, period in enumerate(summary.anomaly_details, start=1):
            lines.append(
                f"\tPeriod {number} ended at {period.time:%H:%M:%S} "
                f"and lasted {format_minutes(period.duration)}"
            )
        return lines

    def write(self, summary: DigestSummary) -> Path:
        """
        Append the rendered summary to its dated file.

        Raises:
            DigestWriteError: If the file cannot be written
        """
        path = self.path_for(summary)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as handle:
                handle.write("\n".join(self.render(summary)) + "\n")
        except OSError as exc:
            raise DigestWriteError(f"Cannot write digest to {path}: {exc}") from exc
        return path

"""
Probe scheduling and the single-consumer event loop.

Threads:
- ticker: fires one probe thread per interval (fire-and-forget)
- probe threads: run the prober and enqueue the outcome
- consumer: the only caller of HealthMonitor.process_probe
- digest: sleeps until local midnight, then fires and writes the digest

Probes may overlap in time; their outcomes reach the monitor one at a time.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from datetime import datetime
from typing import Callable, List, Optional

from autoping.core.exceptions import DigestWriteError
from autoping.health.digest import next_midnight, seconds_until
from autoping.health.engine import HealthMonitor
from autoping.health.schema import DigestSummary, FailureKind, LifecycleEvent, ProbeOutcome

from .prober import Prober
from .sinks import DigestFileWriter, EventLogSink

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    return datetime.now().astimezone()


class ProbeService:
    """
    Drives a HealthMonitor from a prober at a fixed interval.

    Notes:
    - stop() stops new ticks, processes outcomes already queued and joins the
      consumer; probe threads still in flight are abandoned.
    - A failing sink or digest writer is logged and never touches monitor state.
    """

    def __init__(
        self,
        monitor: HealthMonitor,
        prober: Prober,
        event_sink: EventLogSink,
        digest_writer: Optional[DigestFileWriter] = None,
        interval_seconds: float = 60.0,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self.monitor = monitor
        self.prober = prober
        self.event_sink = event_sink
        self.digest_writer = digest_writer
        self.interval_seconds = interval_seconds
        self.clock = clock

        self._queue: "queue.Queue[Optional[ProbeOutcome]]" = queue.Queue()
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def start(self) -> None:
        self._spawn(self._consume, "autoping-consumer", daemon=False)
        self._spawn(self._digest_loop, "autoping-digest")
        self._spawn(self._tick_loop, "autoping-ticker")

    def run_forever(self) -> None:
        self.start()
        try:
            self._stop.wait()
        finally:
            self.stop()

    def request_stop(self) -> None:
        self._stop.set()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        self._queue.put(None)
        for thread in self._threads:
            if thread is not threading.current_thread():
                thread.join(timeout)
        self._threads.clear()

    def submit(self, outcome: ProbeOutcome) -> None:
        self._queue.put(outcome)

    def process(self, outcome: ProbeOutcome) -> List[LifecycleEvent]:
        """
        Apply one outcome to the monitor and render it.

        Only the consumer thread calls this while the service is running.
        """
        events = self.monitor.process_probe(outcome)
        try:
            self.event_sink.record(outcome, events, self.monitor.snapshot())
        except Exception:  # pragma: no cover - runtime guard
            logger.exception("Event sink failed for probe at %s", outcome.timestamp)
        return events

    def fire_digest(self, now: Optional[datetime] = None) -> DigestSummary:
        summary = self.monitor.fire_digest(now or self.clock())
        if self.digest_writer is None:
            return summary
        try:
            path = self.digest_writer.write(summary)
            logger.info("Daily digest for %s written to %s", summary.date, path)
        except DigestWriteError as exc:
            logger.error("%s", exc)
        return summary

    def digest_tick(self, boundary: datetime) -> datetime:
        """
        Fire the digest once ``boundary`` has passed.

        Returns the boundary to wait for next. A wake-up before ``boundary``
        returns it unchanged, so an early wake never fires twice for one day.
        """
        now = self.clock()
        if now < boundary:
            logger.debug(
                "Digest thread woke %.3fs before %s", seconds_until(boundary, now), boundary
            )
            return boundary
        self.fire_digest(boundary)
        return next_midnight(now)

    def probe_once(self) -> None:
        timestamp = self.clock()
        try:
            outcome = self.prober.probe(timestamp)
        except Exception as exc:  # pragma: no cover - runtime guard
            logger.exception("Prober failed unexpectedly")
            outcome = ProbeOutcome.failed(timestamp, FailureKind.OTHER, detail=str(exc))
        self.submit(outcome)

    def _spawn(self, target: Callable[[], None], name: str, daemon: bool = True) -> None:
        thread = threading.Thread(target=target, name=name, daemon=daemon)
        thread.start()
        self._threads.append(thread)

    def _tick_loop(self) -> None:
        next_tick = time.monotonic()
        while not self._stop.is_set():
            logger.debug("Running probe now")
            threading.Thread(target=self.probe_once, name="autoping-probe", daemon=True).start()
            next_tick += self.interval_seconds
            if self._stop.wait(max(0.0, next_tick - time.monotonic())):
                break

    def _consume(self) -> None:
        while True:
            outcome = self._queue.get()
            if outcome is None:
                break
            self.process(outcome)

    def _digest_loop(self) -> None:
        boundary = next_midnight(self.clock())
        while not self._stop.wait(max(0.0, seconds_until(boundary, self.clock()))):
            boundary = self.digest_tick(boundary)

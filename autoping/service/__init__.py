"""
Service module: probing, scheduling, sinks and the command line.

Everything outside the health state machine lives here: the system ping
prober, the ticker and single-consumer loop, the event log and digest writer.
"""

from .prober import Prober, SystemPingProber, parse_rtts
from .scheduler import ProbeService
from .sinks import DigestFileWriter, EventLogSink, render_event

__all__ = [
    "Prober",
    "SystemPingProber",
    "parse_rtts",
    "ProbeService",
    "DigestFileWriter",
    "EventLogSink",
    "render_event",
]

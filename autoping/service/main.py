"""
Command line entry point.

Probes a host every interval and logs outages and periods of high latency,
with a daily digest written at local midnight.

Usage:
    autoping -i 192.0.2.1
    autoping -i example.com -t --interval 30
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from autoping.core.config import Config
from autoping.core.exceptions import AutopingError
from autoping.core.logging_config import setup_logging
from autoping.health.engine import HealthMonitor

from .prober import SystemPingProber
from .scheduler import ProbeService
from .sinks import DigestFileWriter, EventLogSink

logger = logging.getLogger("autoping.service")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autoping",
        description="Ping a host at a fixed interval and log outages and latency anomalies.",
    )
    parser.add_argument("-i", "--host", help="IP address or hostname to be pinged")
    parser.add_argument("-t", "--trace", action="store_true", help="turn on trace to the log file")
    parser.add_argument("--interval", type=float, help="seconds between probes")
    parser.add_argument("--timeout", type=float, help="seconds to wait for a reply")
    parser.add_argument("--logs-dir", type=Path, help="directory for the event log")
    parser.add_argument("--digest-dir", type=Path, help="directory for daily digests")
    return parser


def build_config(args: argparse.Namespace, base: Optional[Config] = None) -> Config:
    """
    Merge command line overrides into the environment-derived configuration.

    Raises:
        pydantic.ValidationError: If an override is out of range
    """
    base = base or Config()
    data = base.model_dump()

    if args.host:
        data["probe"]["host"] = args.host
    if args.timeout is not None:
        data["probe"]["timeout_seconds"] = args.timeout
    if args.interval is not None:
        data["monitor"]["probe_interval_seconds"] = args.interval
    if args.logs_dir is not None:
        data["logs_dir"] = args.logs_dir
    if args.digest_dir is not None:
        data["digest_dir"] = args.digest_dir
    if args.trace:
        data["trace"] = True

    return Config.model_validate(data)


def build_service(cfg: Config) -> ProbeService:
    host = cfg.probe.host or ""
    prober = SystemPingProber(
        host,
        timeout_seconds=cfg.probe.timeout_seconds,
        count=cfg.probe.count,
    )
    return ProbeService(
        monitor=HealthMonitor(cfg.monitor),
        prober=prober,
        event_sink=EventLogSink(prober.host),
        digest_writer=DigestFileWriter(cfg.digest_path),
        interval_seconds=cfg.monitor.probe_interval_seconds,
    )


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        cfg = build_config(args)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    if not cfg.probe.host:
        print("You forgot to provide the IP address or hostname to be pinged", file=sys.stderr)
        print("Try 'autoping -i <IP ADDRESS or HOSTNAME>'", file=sys.stderr)
        return 1

    try:
        cfg.ensure_dirs()
        setup_logging(cfg=cfg)
    except OSError as exc:
        print(f"I'm having trouble writing to the log file: {exc}", file=sys.stderr)
        return 1

    try:
        service = build_service(cfg)
    except AutopingError as exc:
        logger.error("%s", exc)
        return 1

    def _handle_signal(signum, _frame) -> None:
        logger.error("Captured %s, exiting..", signal.Signals(signum).name)
        service.request_stop()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    logger.info(
        "Probing %s every %.0fs (timeout %.0fs)",
        cfg.probe.host,
        cfg.monitor.probe_interval_seconds,
        cfg.probe.timeout_seconds,
    )
    service.run_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())

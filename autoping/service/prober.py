"""
Probe transmission using the system ``ping`` binary.

Each probe resolves the target, sends ``count`` ICMP echo requests and reports
a single ProbeOutcome. Network conditions never raise: unresolvable names,
timeouts and transport errors are returned as failed outcomes.
"""

from __future__ import annotations

import logging
import re
import socket
import subprocess
from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from autoping.core.exceptions import ProbeError
from autoping.health.schema import FailureKind, ProbeOutcome

logger = logging.getLogger(__name__)

_RTT_PATTERN = re.compile(r"time[=<]\s*([\d.]+)\s*ms")


@runtime_checkable
class Prober(Protocol):
    """Anything that turns one probe attempt into a ProbeOutcome without raising."""

    def probe(self, timestamp: Optional[datetime] = None) -> ProbeOutcome: ...


def parse_rtts(output: str) -> List[float]:
    """
    Extract round-trip times in milliseconds from ``ping`` output.

    Example line: ``64 bytes from 1.1.1.1: icmp_seq=1 ttl=57 time=12.3 ms``
    """
    return [float(match) for match in _RTT_PATTERN.findall(output)]


class SystemPingProber:
    """
    Prober backed by ``ping -c <count> -W <timeout> -n <address>``.

    The reported latency is the minimum RTT over the replies received.
    """

    def __init__(
        self,
        host: str,
        timeout_seconds: float = 30.0,
        count: int = 1,
        ping_binary: str = "ping",
    ) -> None:
        if not host or not host.strip():
            raise ProbeError("A host to probe is required")
        self.host = host.strip()
        self.timeout_seconds = timeout_seconds
        self.count = count
        self.ping_binary = ping_binary

    def resolve(self) -> str:
        infos = socket.getaddrinfo(self.host, None)
        return infos[0][4][0]

    def command(self, address: str) -> List[str]:
        return [
            self.ping_binary,
            "-c",
            str(self.count),
            "-W",
            str(max(1, int(round(self.timeout_seconds)))),
            "-n",
            address,
        ]

    def probe(self, timestamp: Optional[datetime] = None) -> ProbeOutcome:
        """
        Send one probe and classify the result.

        Args:
            timestamp: Time the probe is fired (defaults to now, local time)

        Returns:
            ProbeOutcome for this attempt
        """
        timestamp = timestamp or datetime.now().astimezone()

        try:
            address = self.resolve()
        except (socket.gaierror, UnicodeError) as exc:
            logger.debug("Name resolution failed for %s: %s", self.host, exc)
            return ProbeOutcome.failed(
                timestamp, FailureKind.UNRESOLVABLE, detail=f"{self.host}: {exc}"
            )

        cmd = self.command(address)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds * self.count + 5,
            )
        except subprocess.TimeoutExpired:
            return ProbeOutcome.failed(timestamp, FailureKind.TIMEOUT, detail=address)
        except OSError as exc:
            logger.debug("Could not run %s: %s", self.ping_binary, exc)
            return ProbeOutcome.failed(timestamp, FailureKind.OTHER, detail=str(exc))

        return self.classify(timestamp, address, result.returncode, result.stdout, result.stderr)

    def classify(
        self,
        timestamp: datetime,
        address: str,
        returncode: int,
        stdout: str,
        stderr: str = "",
    ) -> ProbeOutcome:
        rtts = parse_rtts(stdout)
        if rtts:
            return ProbeOutcome.ok(timestamp, min(rtts), detail=address)
        if returncode == 1:
            return ProbeOutcome.failed(timestamp, FailureKind.TIMEOUT, detail=address)

        message = (stderr or stdout).strip() or f"exit status {returncode}"
        return ProbeOutcome.failed(timestamp, FailureKind.OTHER, detail=message)

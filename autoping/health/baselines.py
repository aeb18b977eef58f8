"""
Latency baseline for anomaly classification.

Keeps a bounded FIFO window of recent normal round-trip times and computes
their arithmetic mean on demand. An empty window has no mean, which callers
treat as "cannot classify yet".
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from autoping.core.exceptions import ConfigurationError


@dataclass
class LatencyBaseline:
    """
    Rolling window of normal latencies in milliseconds.

    Oldest samples are evicted first once window_size is reached. Only
    latencies already classified as normal should be admitted.
    """

    window_size: int = 10
    _values: Deque[float] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.window_size < 1:
            raise ConfigurationError(
                f"Baseline window size must be positive, got {self.window_size}"
            )
        self._values = deque(maxlen=self.window_size)

    def admit(self, latency_ms: float) -> None:
        self._values.append(float(latency_ms))

    def mean(self) -> Optional[float]:
        if not self._values:
            return None
        return sum(self._values) / len(self._values)

    def cutoff(self, multiplier: float) -> Optional[float]:
        """Latency above which a sample is anomalous, or None without a baseline."""
        mean = self.mean()
        if mean is None:
            return None
        return mean * multiplier

    @property
    def values(self) -> List[float]:
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)

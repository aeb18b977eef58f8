"""
Core module: Configuration, logging, and exception handling.
"""

from .config import Config, MonitorConfig, ProbeConfig, config
from .exceptions import (
    AutopingError,
    ConfigurationError,
    DigestWriteError,
    ProbeError,
)

__all__ = [
    "Config",
    "MonitorConfig",
    "ProbeConfig",
    "config",
    "AutopingError",
    "ConfigurationError",
    "DigestWriteError",
    "ProbeError",
]

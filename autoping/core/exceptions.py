"""
Custom exceptions for autoping.

Probe failures are never exceptions: they are ordinary outcomes. These
exceptions cover misconfiguration and collaborator failures only.
"""


class AutopingError(Exception):
    """Base exception for autoping failures."""
    pass


class ConfigurationError(AutopingError):
    """Raised when configuration is invalid or missing."""
    pass


class ProbeError(AutopingError):
    """Raised when a prober cannot be set up (not when a probe fails)."""
    pass


class DigestWriteError(AutopingError):
    """Raised when a daily digest cannot be persisted."""
    pass

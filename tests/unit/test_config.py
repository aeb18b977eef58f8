"""
Unit tests for configuration loading and validation.
"""

import pytest
from datetime import timedelta
from pathlib import Path

from pydantic import ValidationError

from autoping.core.config import Config, MonitorConfig, ProbeConfig


def test_monitor_defaults():
    cfg = MonitorConfig()

    assert cfg.probe_interval == timedelta(seconds=60)
    assert cfg.outage_threshold == 3
    assert cfg.anomaly_threshold == 3
    assert cfg.baseline_window == 10
    assert cfg.cutoff_multiplier == 3.0
    assert cfg.require_initial_success is True


def test_probe_defaults():
    cfg = ProbeConfig()

    assert cfg.host is None
    assert cfg.timeout_seconds == 30.0
    assert cfg.count == 1


@pytest.mark.parametrize(
    "field,value",
    [
        ("probe_interval_seconds", 0),
        ("outage_threshold", 0),
        ("anomaly_threshold", -1),
        ("baseline_window", 0),
        ("cutoff_multiplier", 0.0),
    ],
)
def test_non_positive_values_rejected(field, value):
    with pytest.raises(ValidationError):
        MonitorConfig(**{field: value})


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("AUTOPING_LOGS_DIR", str(tmp_path))
    monkeypatch.setenv("AUTOPING_TRACE", "true")
    monkeypatch.setenv("AUTOPING_MONITOR__OUTAGE_THRESHOLD", "5")
    monkeypatch.setenv("AUTOPING_PROBE__HOST", "192.0.2.10")

    cfg = Config()

    assert cfg.logs_dir == tmp_path
    assert cfg.trace is True
    assert cfg.monitor.outage_threshold == 5
    assert cfg.probe.host == "192.0.2.10"


def test_digest_path_defaults_to_logs_dir(tmp_path):
    cfg = Config(logs_dir=tmp_path / "logs")

    assert cfg.digest_path == tmp_path / "logs"

    cfg.ensure_dirs()
    assert (tmp_path / "logs").is_dir()


def test_explicit_digest_dir(tmp_path):
    cfg = Config(logs_dir=tmp_path / "logs", digest_dir=tmp_path / "digests")

    assert cfg.digest_path == Path(tmp_path / "digests")

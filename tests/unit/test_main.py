"""
Unit tests for the command line wiring (no probing is started).
"""

from pathlib import Path

import pytest

from autoping.core.config import Config
from autoping.service.main import build_config, build_parser, build_service, main


def test_cli_overrides(tmp_path):
    args = build_parser().parse_args(
        ["-i", "192.0.2.1", "-t", "--interval", "30", "--timeout", "5", "--logs-dir", str(tmp_path)]
    )

    cfg = build_config(args, base=Config(logs_dir=Path("logs")))

    assert cfg.probe.host == "192.0.2.1"
    assert cfg.trace is True
    assert cfg.monitor.probe_interval_seconds == 30
    assert cfg.probe.timeout_seconds == 5
    assert cfg.logs_dir == tmp_path


def test_invalid_interval_rejected():
    args = build_parser().parse_args(["-i", "192.0.2.1", "--interval", "0"])

    with pytest.raises(ValueError):
        build_config(args, base=Config())


def test_build_service_wires_monitor(tmp_path):
    cfg = Config(logs_dir=tmp_path, probe={"host": "192.0.2.1"}, monitor={"outage_threshold": 4})

    service = build_service(cfg)

    assert service.monitor.outage.threshold == 4
    assert service.prober.host == "192.0.2.1"
    assert service.digest_writer.directory == tmp_path
    assert service.interval_seconds == 60.0


def test_missing_host_exits_with_error(monkeypatch, capsys):
    monkeypatch.delenv("AUTOPING_PROBE__HOST", raising=False)

    code = main([])

    assert code == 1
    assert "forgot to provide" in capsys.readouterr().err

"""
Application configuration for autoping.

Provides environment-aware settings with conservative defaults. All health
signal thresholds are configurable to avoid hard-coded "magic numbers".
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MonitorConfig(BaseModel):
	"""
	Thresholds for the health-signal state machine.

	Notes:
	- probe_interval_seconds: fixed probe cadence; durations are counted in
	  multiples of it rather than measured.
	- outage_threshold: consecutive missed probes that open an outage.
	- anomaly_threshold: consecutive high-latency probes that open an anomaly period.
	- baseline_window: number of recent normal latencies kept for the mean.
	- cutoff_multiplier: a latency above mean x multiplier is anomalous.
	- require_initial_success: never open an outage before the first reply.
	"""

	probe_interval_seconds: float = Field(60.0, gt=0.0)
	outage_threshold: int = Field(3, ge=1)
	anomaly_threshold: int = Field(3, ge=1)
	baseline_window: int = Field(10, ge=1)
	cutoff_multiplier: float = Field(3.0, gt=0.0)
	require_initial_success: bool = True

	@property
	def probe_interval(self) -> timedelta:
		return timedelta(seconds=self.probe_interval_seconds)


class ProbeConfig(BaseModel):
	"""
	Settings handed to the prober for each tick.
	"""

	host: Optional[str] = Field(None, description="IP address or hostname to probe")
	timeout_seconds: float = Field(30.0, gt=0.0)
	count: int = Field(1, ge=1)


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.
	"""

	model_config = SettingsConfigDict(
		env_prefix="AUTOPING_",
		env_file=".env",
		env_nested_delimiter="__",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Path = Field(Path("logs"), description="Directory for log files")
	log_file: str = Field("autoping.log", description="Event log file name")
	digest_dir: Optional[Path] = Field(
		None, description="Directory for daily digests (defaults to logs_dir)"
	)
	trace: bool = Field(False, description="Write every intermediate decision to the log")
	monitor: MonitorConfig = MonitorConfig()
	probe: ProbeConfig = ProbeConfig()

	@property
	def digest_path(self) -> Path:
		return self.digest_dir or self.logs_dir

	def ensure_dirs(self) -> None:
		self.logs_dir.mkdir(parents=True, exist_ok=True)
		self.digest_path.mkdir(parents=True, exist_ok=True)


config = Config()

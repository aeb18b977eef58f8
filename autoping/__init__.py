"""
autoping: probe a host at a fixed cadence and log outages and latency
anomaly periods, with a daily digest.

Pipeline:

    Scheduler tick
        ↓
    Prober (autoping/service/prober.py) → ProbeOutcome
        ↓
    Single-consumer queue (autoping/service/scheduler.py)
        ↓
    HealthMonitor.process_probe (autoping/health/engine.py) → LifecycleEvent
        ↓
    Event log (autoping/service/sinks.py), daily digest at midnight
"""

__version__ = "0.1.0"

"""Streaming wake word monitoring."""

from wake_word.pipeline.monitor import (
    DetectionWorker,
    MonitorConfig,
    SharedDetector,
    WakeWordMonitor,
)

__all__ = ["DetectionWorker", "MonitorConfig", "SharedDetector", "WakeWordMonitor"]

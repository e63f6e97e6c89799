"""Always-on monitoring: share one detector between a capture thread and a decision loop.

Two ways to hand audio to a detector living on another thread:
- SharedDetector: one detector behind a lock, held for a whole detect/train call.
- DetectionWorker: a thread that owns the detector and consumes buffers from a queue.

WakeWordMonitor sits on either side of that seam: it keeps a rolling window of
recent audio, rate-limits evaluation and suppresses re-triggering.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Union

import numpy as np

from wake_word.audio.features import AudioLike, RingBuffer
from wake_word.detector.wake_word_detector import DetectionResult, WakeWordDetector

logger = logging.getLogger(__name__)

ResultCallback = Callable[[DetectionResult], None]
DetectCallback = Callable[[float], None]

_STOP = object()
_DETECT = "detect"
_TRAIN = "train"


@dataclass(frozen=True)
class MonitorConfig:
    """Rolling-window monitoring parameters."""

    sample_rate: int = 16_000
    window_sec: float = 2.0  # audio kept for matching
    min_buffer_sec: float = 0.1  # skip evaluation until this much is buffered
    cooldown_sec: float = 3.0  # no re-trigger within this many seconds

    def __post_init__(self) -> None:
        if self.sample_rate <= 0 or self.window_sec <= 0:
            raise ValueError("sample_rate and window_sec must be > 0")
        if self.min_buffer_sec < 0 or self.cooldown_sec < 0:
            raise ValueError("min_buffer_sec and cooldown_sec must be >= 0")

    @property
    def window_samples(self) -> int:
        return int(self.window_sec * self.sample_rate)

    @property
    def min_buffer_samples(self) -> int:
        return int(self.min_buffer_sec * self.sample_rate)


class SharedDetector:
    """A single WakeWordDetector guarded by one exclusive lock.

    Every call holds the lock for its full duration, so a detect never sees a
    half-replaced template.
    """

    def __init__(self, detector: Optional[WakeWordDetector] = None):
        self._detector = detector or WakeWordDetector()
        self._lock = threading.Lock()

    @contextmanager
    def locked(self) -> Iterator[WakeWordDetector]:
        with self._lock:
            yield self._detector

    def detect(self, audio: AudioLike) -> DetectionResult:
        with self._lock:
            return self._detector.detect(audio)

    def train_template(self, samples: Iterable[AudioLike]) -> np.ndarray:
        samples = list(samples)
        with self._lock:
            return self._detector.train_template(samples)

    def set_template(self, template: np.ndarray) -> None:
        with self._lock:
            self._detector.set_template(template)

    def set_threshold(self, threshold: float) -> None:
        with self._lock:
            self._detector.set_threshold(threshold)

    @property
    def threshold(self) -> float:
        with self._lock:
            return self._detector.threshold

    @property
    def has_template(self) -> bool:
        with self._lock:
            return self._detector.template is not None


class DetectionWorker:
    """Owns a detector on a dedicated thread and serves a queue of requests.

    Capture code calls submit() with raw buffers; results are delivered to
    on_result from the worker thread in submission order. retrain() is queued
    like any other request, so it never overlaps a detect.
    """

    def __init__(
        self,
        detector: WakeWordDetector,
        on_result: ResultCallback,
        maxsize: int = 0,
    ):
        self._detector = detector
        self.on_result = on_result
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._thread = threading.Thread(target=self._run, name="wake-word-detector", daemon=True)
        self._thread.start()

    def submit(self, audio: AudioLike) -> None:
        self._queue.put((_DETECT, np.asarray(audio, dtype=np.float32)))

    def retrain(self, samples: Iterable[AudioLike]) -> None:
        self._queue.put((_TRAIN, list(samples)))

    def stop(self, timeout: Optional[float] = None) -> None:
        """Finish queued requests, then end the worker thread."""
        if self._thread is None:
            return
        self._queue.put(_STOP)
        self._thread.join(timeout)
        self._thread = None

    def __enter__(self) -> "DetectionWorker":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            kind, payload = item
            try:
                if kind == _TRAIN:
                    self._detector.train_template(payload)
                else:
                    self.on_result(self._detector.detect(payload))
            except Exception:
                logger.exception("Wake word worker failed on %s request", kind)


class WakeWordMonitor:
    """Feeds streaming audio chunks to a shared detector.

    Keeps the last window_sec of audio, evaluates once at least min_buffer_sec
    is buffered, and ignores audio for cooldown_sec after each detection.
    """

    def __init__(
        self,
        detector: Union[SharedDetector, WakeWordDetector],
        config: Optional[MonitorConfig] = None,
        on_detect: Optional[DetectCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if isinstance(detector, WakeWordDetector):
            detector = SharedDetector(detector)
        self.detector = detector
        self.config = config or MonitorConfig()
        self.on_detect = on_detect or (lambda similarity: None)
        self._clock = clock
        self._buffer = RingBuffer(self.config.window_samples, dtype=np.float32)
        self._last_fire: Optional[float] = None
        self._stopped = False

    @property
    def buffered_samples(self) -> int:
        return len(self._buffer)

    def in_cooldown(self, now: Optional[float] = None) -> bool:
        if self._last_fire is None:
            return False
        now = self._clock() if now is None else now
        return now - self._last_fire < self.config.cooldown_sec

    def push(self, chunk: AudioLike) -> Optional[DetectionResult]:
        """Buffer one chunk and evaluate the window.

        Returns None when evaluation was skipped (too little audio or cooling down).
        """
        self._buffer.push(np.asarray(chunk, dtype=np.float32))
        if len(self._buffer) < self.config.min_buffer_samples:
            return None
        now = self._clock()
        if self.in_cooldown(now):
            return None

        detected, similarity = self.detector.detect(self._buffer.get_all())
        if detected:
            self._last_fire = now
            logger.info("Wake word detected (similarity %.3f)", similarity)
            self.on_detect(similarity)
        return detected, similarity

    def reset(self) -> None:
        self._buffer.clear()
        self._last_fire = None

    def stop(self) -> None:
        """Signal run() to exit (checked before each chunk)."""
        self._stopped = True

    def run(self, chunks: Iterable[AudioLike]) -> int:
        """Consume chunks until exhausted or stopped; return the number of detections."""
        self._stopped = False
        detections = 0
        for chunk in chunks:
            if self._stopped:
                break
            result = self.push(chunk)
            if result is not None and result[0]:
                detections += 1
        return detections

"""Microphone capture that hands mono float blocks to the wake word core."""

import logging
import queue
from typing import Iterator, Optional

import numpy as np

try:
    import sounddevice as sd
except ImportError:
    sd = None  # type: ignore

from wake_word.audio.formats import SampleFormat, to_mono

logger = logging.getLogger(__name__)


def _require_sounddevice() -> None:
    if sd is None:
        raise ImportError("sounddevice is required for recording. pip install sounddevice")


class AudioCollector:
    """Records mono audio at a fixed rate in streaming or batch mode."""

    def __init__(
        self,
        sample_rate: int = 16_000,
        channels: int = 1,
        sample_format: SampleFormat = SampleFormat.F32,
    ):
        self.sample_rate = sample_rate
        self.channels = channels
        self.sample_format = sample_format

    def to_samples(self, block: np.ndarray) -> np.ndarray:
        """Convert one raw device block to mono float32."""
        return to_mono(self.sample_format.to_float(block), self.channels)

    def record_chunk(self, duration_sec: float, device: Optional[int] = None) -> np.ndarray:
        """Record a single chunk of audio.

        Returns:
            Mono float32 array, shape (n_samples,), normalized [-1, 1].
        """
        _require_sounddevice()
        frames = int(duration_sec * self.sample_rate)
        rec = sd.rec(
            frames,
            samplerate=self.sample_rate,
            channels=self.channels,
            dtype=self.sample_format.dtype,
            device=device,
        )
        sd.wait()
        return self.to_samples(rec)

    def record_stream(
        self,
        chunk_duration_sec: float = 0.1,
        device: Optional[int] = None,
    ) -> Iterator[np.ndarray]:
        """Stream mono float32 chunks continuously."""
        _require_sounddevice()
        chunk_frames = int(chunk_duration_sec * self.sample_rate)
        q: queue.Queue[np.ndarray] = queue.Queue()

        def callback(indata: np.ndarray, _frames: int, _time: object, status: object) -> None:
            if status:
                logger.warning("Input stream status: %s", status)
            q.put(self.to_samples(indata.copy()))

        with sd.InputStream(
            samplerate=self.sample_rate,
            channels=self.channels,
            dtype=self.sample_format.dtype,
            blocksize=chunk_frames,
            device=device,
            callback=callback,
        ):
            while True:
                yield q.get()

"""Raw sample formats delivered by capture devices and their float conversion."""

import enum
from typing import Callable

import numpy as np


def _f32_to_float(raw: np.ndarray) -> np.ndarray:
    return raw.astype(np.float32, copy=False)


def _i16_to_float(raw: np.ndarray) -> np.ndarray:
    return raw.astype(np.float32) / 32767.0


def _u16_to_float(raw: np.ndarray) -> np.ndarray:
    return (raw.astype(np.float32) - 32768.0) / 32768.0


class SampleFormat(enum.Enum):
    """Device sample format; pick once at stream setup, then call to_float per block."""

    F32 = ("float32", _f32_to_float)
    I16 = ("int16", _i16_to_float)
    U16 = ("uint16", _u16_to_float)

    def __init__(self, dtype: str, converter: Callable[[np.ndarray], np.ndarray]):
        self.dtype = dtype
        self._converter = converter

    @classmethod
    def from_dtype(cls, dtype) -> "SampleFormat":
        name = np.dtype(dtype).name
        for fmt in cls:
            if fmt.dtype == name:
                return fmt
        raise ValueError(f"Unsupported sample format: {name}")

    def to_float(self, raw) -> np.ndarray:
        """Convert a block of raw samples to float32 in [-1, 1]."""
        return self._converter(np.asarray(raw, dtype=self.dtype))


def to_mono(samples: np.ndarray, channels: int) -> np.ndarray:
    """Average interleaved (or (frames, channels)) samples down to one channel."""
    samples = np.asarray(samples, dtype=np.float32)
    if channels == 1:
        return samples.reshape(-1)
    return samples.reshape(-1, channels).mean(axis=1)

"""Synthetic signals for demos and tests.

Randomness always comes from a caller-owned numpy Generator, so two runs
seeded alike produce identical audio.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

DEFAULT_SAMPLE_RATE = 16_000


def _time_axis(duration_sec: float, sample_rate: int) -> np.ndarray:
    return np.arange(int(round(duration_sec * sample_rate))) / sample_rate


def sine_sweep(
    duration_sec: float = 1.0,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    start_hz: float = 300.0,
    end_hz: float = 1500.0,
    amplitude: float = 0.5,
    pitch_shift: float = 1.0,
) -> np.ndarray:
    """Sweep whose instantaneous parameter rises linearly from start_hz over one second.

    sin(2*pi*f(t)*t) with f(t) = (start_hz + (end_hz - start_hz) * t) * pitch_shift.
    """
    t = _time_axis(duration_sec, sample_rate)
    freq = (start_hz + (end_hz - start_hz) * t) * pitch_shift
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


def multi_tone(
    freqs: Sequence[float] = (440.0, 880.0, 1320.0),
    amplitudes: Sequence[float] = (0.3, 0.3, 0.2),
    duration_sec: float = 1.0,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> np.ndarray:
    """Sum of steady sines."""
    if len(freqs) != len(amplitudes):
        raise ValueError("freqs and amplitudes must have the same length")
    t = _time_axis(duration_sec, sample_rate)
    out = np.zeros_like(t)
    for freq, amp in zip(freqs, amplitudes):
        out += amp * np.sin(2 * np.pi * freq * t)
    return out.astype(np.float32)


def uniform_noise(
    rng: np.random.Generator,
    duration_sec: float = 1.0,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    amplitude: float = 0.05,
) -> np.ndarray:
    """White noise uniform in [-amplitude, amplitude)."""
    n = int(round(duration_sec * sample_rate))
    return rng.uniform(-amplitude, amplitude, size=n).astype(np.float32)


def training_variations(
    count: int = 3,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    rng: Optional[np.random.Generator] = None,
    noise_amplitude: float = 0.0,
) -> List[np.ndarray]:
    """Sweeps that differ slightly in length (+0.1 s each) and pitch (+5% each).

    With an rng and a non-zero noise_amplitude, low-level noise is mixed in.
    """
    samples = []
    for variation in range(count):
        sample = sine_sweep(
            duration_sec=1.0 + 0.1 * variation,
            sample_rate=sample_rate,
            pitch_shift=1.0 + 0.05 * variation,
        )
        if rng is not None and noise_amplitude > 0:
            sample = sample + rng.uniform(-noise_amplitude, noise_amplitude, size=sample.shape)
            sample = sample.astype(np.float32)
        samples.append(sample)
    return samples

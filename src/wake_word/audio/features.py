"""Feature extraction: Mel filterbank, DCT-II basis, MFCC frames, ring buffer."""

import logging
from typing import Optional, Sequence, Union

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view
from scipy.fft import rfft

from wake_word.audio.config import MfccConfig

logger = logging.getLogger(__name__)

PRE_EMPHASIS = 0.97
LOG_FLOOR = 1e-10

AudioLike = Union[np.ndarray, Sequence[float]]


class RingBuffer:
    """Fixed-size ring buffer holding the most recent samples of a stream."""

    def __init__(self, size: int, dtype: type = np.float32):
        if size <= 0:
            raise ValueError(f"size must be > 0, got {size}")
        self.size = size
        self.dtype = dtype
        self._data = np.zeros(size, dtype=dtype)
        self._write_idx = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def push(self, chunk: np.ndarray) -> None:
        """Append a chunk; the oldest samples are overwritten once full."""
        chunk = np.asarray(chunk, dtype=self.dtype)
        n = len(chunk)
        if n == 0:
            return
        if n >= self.size:
            self._data[:] = chunk[-self.size :]
            self._write_idx = 0
            self._count = self.size
            return
        end = self._write_idx + n
        if end <= self.size:
            self._data[self._write_idx : end] = chunk
        else:
            head = self.size - self._write_idx
            self._data[self._write_idx :] = chunk[:head]
            self._data[: end - self.size] = chunk[head:]
        self._write_idx = end % self.size
        self._count = min(self._count + n, self.size)

    def get_all(self) -> np.ndarray:
        """Return buffered samples oldest-first."""
        if self._count < self.size:
            return self._data[: self._count].copy()
        return np.roll(self._data, -self._write_idx)

    def clear(self) -> None:
        self._write_idx = 0
        self._count = 0


def hz_to_mel(hz):
    return 2595.0 * np.log10(1.0 + np.asarray(hz, dtype=np.float64) / 700.0)


def mel_to_hz(mel):
    return 700.0 * (10.0 ** (np.asarray(mel, dtype=np.float64) / 2595.0) - 1.0)


def mel_filterbank(config: MfccConfig) -> np.ndarray:
    """Build the (num_filters, frame_size // 2) triangular Mel filterbank.

    Filter edges are num_filters + 2 points spaced evenly on the Mel scale
    between min_freq and max_freq, mapped to FFT bins with
    floor(hz * frame_size / sample_rate). Bins at or past frame_size // 2
    are dropped.
    """
    n_bins = config.num_fft_bins
    mel_points = np.linspace(
        hz_to_mel(config.min_freq),
        hz_to_mel(config.max_freq),
        config.num_filters + 2,
    )
    hz_points = mel_to_hz(mel_points)
    bin_points = np.floor(hz_points * config.frame_size / config.sample_rate).astype(int)

    bins = np.arange(n_bins)
    filters = np.zeros((config.num_filters, n_bins))
    for i in range(config.num_filters):
        left, center, right = bin_points[i], bin_points[i + 1], bin_points[i + 2]
        if center > left:
            rising = (bins >= left) & (bins < center)
            filters[i, rising] = (bins[rising] - left) / (center - left)
        if right > center:
            falling = (bins >= center) & (bins < right)
            filters[i, falling] = (right - bins[falling]) / (right - center)
    return filters


def dct_matrix(num_filters: int, num_mfcc: int) -> np.ndarray:
    """Orthonormal DCT-II basis, shape (num_mfcc, num_filters)."""
    i = np.arange(num_mfcc)[:, np.newaxis]
    j = np.arange(num_filters)[np.newaxis, :]
    basis = np.cos(np.pi * i * (j + 0.5) / num_filters)
    basis[0] *= np.sqrt(1.0 / num_filters)
    basis[1:] *= np.sqrt(2.0 / num_filters)
    return basis


def pre_emphasis(signal: AudioLike, alpha: float = PRE_EMPHASIS) -> np.ndarray:
    """First-order high-pass: y[0] = x[0], y[i] = x[i] - alpha * x[i-1].

    Works along the last axis, so a (n_frames, frame_size) block filters
    each frame independently.
    """
    x = np.asarray(signal, dtype=np.float64)
    y = x.copy()
    y[..., 1:] -= alpha * x[..., :-1]
    return y


def hamming_window(n: int) -> np.ndarray:
    """0.54 - 0.46 * cos(2*pi*i / (n - 1)) for i in [0, n)."""
    return np.hamming(n)


class MfccExtractor:
    """Turns raw mono audio into an (n_frames, num_mfcc) MFCC matrix.

    The filterbank and DCT basis are built once from the config and reused
    by every call.
    """

    def __init__(self, config: Optional[MfccConfig] = None):
        self.config = config or MfccConfig()
        self.mel_filters = mel_filterbank(self.config)
        self.dct_basis = dct_matrix(self.config.num_filters, self.config.num_mfcc)
        self._window = hamming_window(self.config.frame_size)

    def empty(self) -> np.ndarray:
        """Feature matrix with zero frames."""
        return np.zeros((0, self.config.num_mfcc), dtype=np.float32)

    def frames(self, audio: np.ndarray) -> np.ndarray:
        """Slice audio into (n_frames, frame_size) overlapping windows (views)."""
        n_frames = self.config.num_frames(len(audio))
        windows = sliding_window_view(audio, self.config.frame_size)
        return windows[:: self.config.hop_size][:n_frames]

    def log_power_spectrum(self, frames: np.ndarray) -> np.ndarray:
        """Pre-emphasis, Hamming window, FFT, then ln(|X|^2 + 1e-10) per frame."""
        windowed = pre_emphasis(frames) * self._window
        spectrum = rfft(windowed, n=self.config.frame_size, axis=-1)
        spectrum = spectrum[..., : self.config.num_fft_bins]
        return np.log(np.abs(spectrum) ** 2 + LOG_FLOOR)

    def extract(self, audio: AudioLike) -> np.ndarray:
        """Extract MFCC features.

        Args:
            audio: Mono samples at config.sample_rate, nominally in [-1, 1].

        Returns:
            float32 array of shape (n_frames, num_mfcc). Audio shorter than
            one frame yields zero rows.
        """
        audio = np.asarray(audio, dtype=np.float64)
        if audio.ndim != 1:
            raise ValueError(f"expected mono 1-D audio, got shape {audio.shape}")
        if len(audio) < self.config.frame_size:
            return self.empty()

        power = self.log_power_spectrum(self.frames(audio))
        mel_energies = power @ self.mel_filters.T
        mfcc = mel_energies @ self.dct_basis.T
        logger.debug("Extracted %d frames x %d MFCCs", mfcc.shape[0], mfcc.shape[1])
        return mfcc.astype(np.float32)

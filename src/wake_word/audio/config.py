"""Centralized MFCC feature extraction configuration.

Encoding standards:
- Audio: mono 16 kHz float samples in [-1, 1]
- Frames: 512 samples / 128 hop (75% overlap)
- Features: 13 MFCCs from a 26-band Mel filterbank over 300-8000 Hz
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MfccConfig:
    """Feature extraction configuration, fixed for a detector's lifetime."""

    sample_rate: int = 16_000

    # Framing
    frame_size: int = 512
    hop_size: int = 128

    # Cepstrum
    num_mfcc: int = 13
    num_filters: int = 26

    # Analysis band (Hz)
    min_freq: float = 300.0
    max_freq: float = 8000.0

    def __post_init__(self) -> None:
        if self.frame_size <= 0:
            raise ValueError(f"frame_size must be > 0, got {self.frame_size}")
        if not 0 < self.hop_size <= self.frame_size:
            raise ValueError(
                f"hop_size must be in (0, frame_size={self.frame_size}], got {self.hop_size}"
            )
        if self.num_mfcc > self.num_filters:
            raise ValueError(
                f"num_mfcc ({self.num_mfcc}) must not exceed num_filters ({self.num_filters})"
            )
        if not 0 <= self.min_freq < self.max_freq <= self.sample_rate / 2:
            raise ValueError(
                "expected 0 <= min_freq < max_freq <= sample_rate / 2, got "
                f"min_freq={self.min_freq}, max_freq={self.max_freq}, sample_rate={self.sample_rate}"
            )

    @property
    def num_fft_bins(self) -> int:
        """Power spectrum bins kept per frame."""
        return self.frame_size // 2

    @property
    def frames_per_second(self) -> float:
        """Number of feature frames per second."""
        return self.sample_rate / self.hop_size

    def num_frames(self, num_samples: int) -> int:
        """Frames produced for a buffer of num_samples (0 if shorter than one frame)."""
        if num_samples < self.frame_size:
            return 0
        return (num_samples - self.frame_size) // self.hop_size + 1

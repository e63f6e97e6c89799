"""Lightweight wake word matching - MFCC features, DTW alignment, template training."""

from wake_word.audio.config import MfccConfig
from wake_word.detector import WakeWordDetector
from wake_word.exceptions import EmptyInputError, NoValidSamplesError, WakeWordError

__all__ = [
    "EmptyInputError",
    "MfccConfig",
    "NoValidSamplesError",
    "WakeWordDetector",
    "WakeWordError",
]

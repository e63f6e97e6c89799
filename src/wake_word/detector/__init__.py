"""Template training and detection."""

from wake_word.detector.training import resample_features, train_template
from wake_word.detector.wake_word_detector import DEFAULT_THRESHOLD, WakeWordDetector

__all__ = [
    "DEFAULT_THRESHOLD",
    "WakeWordDetector",
    "resample_features",
    "train_template",
]

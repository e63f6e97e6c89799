"""Wake word detector: MFCC features matched against a template with DTW.

Lightweight enough for always-on use. The detector only answers "does this
audio resemble the trained utterance"; capture, buffering and what happens
after a detection belong to the caller.

Not thread-safe: share one instance through SharedDetector or DetectionWorker.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Tuple

import numpy as np

from wake_word.audio.config import MfccConfig
from wake_word.audio.features import AudioLike, MfccExtractor
from wake_word.detector.training import train_template
from wake_word.matching.dtw import dtw_distance

logger = logging.getLogger(__name__)

# 0.0 triggers on anything, 1.0 only on a perfect match
DEFAULT_THRESHOLD = 0.7

DetectionResult = Tuple[bool, float]


def _clamp_unit(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


class WakeWordDetector:
    """Matches incoming audio against a single trained template."""

    def __init__(
        self,
        config: Optional[MfccConfig] = None,
        threshold: float = DEFAULT_THRESHOLD,
    ):
        self.config = config or MfccConfig()
        self.extractor = MfccExtractor(self.config)
        self._threshold = _clamp_unit(threshold)
        self._template: Optional[np.ndarray] = None

    @property
    def mel_filterbank(self) -> np.ndarray:
        return self.extractor.mel_filters

    @property
    def dct_matrix(self) -> np.ndarray:
        return self.extractor.dct_basis

    @property
    def template(self) -> Optional[np.ndarray]:
        return self._template

    @property
    def threshold(self) -> float:
        return self._threshold

    def set_template(self, template: np.ndarray) -> None:
        """Replace the template with precomputed (frames, num_mfcc) features."""
        template = np.array(template, dtype=np.float32)
        if template.ndim != 2 or template.shape[1] != self.config.num_mfcc:
            raise ValueError(
                f"template must have shape (frames, {self.config.num_mfcc}), got {template.shape}"
            )
        self._template = template

    def set_threshold(self, threshold: float) -> None:
        """Set the similarity cutoff; values outside [0, 1] are clamped."""
        self._threshold = _clamp_unit(threshold)

    def extract_mfcc(self, audio: AudioLike) -> np.ndarray:
        return self.extractor.extract(audio)

    def similarity(self, features: np.ndarray) -> float:
        """Similarity in [0, 1] between extracted features and the template.

        The DTW distance is divided by sqrt(template_frames * num_mfcc), an
        assumed typical maximum rather than a true bound, and clipped at 1.
        """
        if self._template is None:
            return 0.0
        distance = dtw_distance(features, self._template)
        max_distance = math.sqrt(self._template.shape[0] * self.config.num_mfcc)
        normalized = min(distance / max(max_distance, 1e-10), 1.0)
        return 1.0 - normalized

    def detect(self, audio: AudioLike) -> DetectionResult:
        """Return (detected, similarity) for one audio buffer.

        Untrained detectors and audio shorter than one frame give (False, 0.0).
        """
        if self._template is None:
            return False, 0.0
        features = self.extract_mfcc(audio)
        if features.shape[0] == 0:
            return False, 0.0
        similarity = self.similarity(features)
        return similarity >= self._threshold, similarity

    def train_template(self, samples: Iterable[AudioLike]) -> np.ndarray:
        """Average several recordings into a new template and activate it.

        The previous template is kept if training raises.
        """
        template = train_template(samples, self.extractor)
        self._template = template
        logger.info("Template replaced: %d frames x %d MFCCs", *template.shape)
        return template

"""Template training: length-align several MFCC sequences and average them."""

from __future__ import annotations

import logging
from typing import Iterable, List

import numpy as np

from wake_word.audio.features import AudioLike, MfccExtractor
from wake_word.exceptions import EmptyInputError, NoValidSamplesError

logger = logging.getLogger(__name__)


def resample_features(features: np.ndarray, target_length: int) -> np.ndarray:
    """Nearest-index resample of a (frames, coeffs) matrix to target_length rows.

    Output row i reads source row round(i * (src - 1) / (target_length - 1)),
    clamped to the source range. A single-row target reads source row 0.
    """
    n_src = features.shape[0]
    if target_length == 1:
        indices = np.zeros(1, dtype=int)
    else:
        positions = np.arange(target_length) * (n_src - 1) / (target_length - 1)
        indices = np.clip(np.round(positions).astype(int), 0, n_src - 1)
    return features[indices]


def median_length(lengths: List[int]) -> int:
    """Middle element of the sorted lengths (upper middle for an even count)."""
    ordered = sorted(lengths)
    return ordered[len(ordered) // 2]


def average_features(features: List[np.ndarray]) -> np.ndarray:
    """Resample every matrix to the median length and average coefficient-wise."""
    target_length = median_length([f.shape[0] for f in features])
    total = np.zeros((target_length, features[0].shape[1]), dtype=np.float64)
    for f in features:
        total += resample_features(f, target_length)
    return (total / len(features)).astype(np.float32)


def train_template(samples: Iterable[AudioLike], extractor: MfccExtractor) -> np.ndarray:
    """Build a template from several recordings of the same utterance.

    Raises:
        EmptyInputError: samples is empty.
        NoValidSamplesError: every sample is shorter than one frame.
    """
    samples = list(samples)
    if not samples:
        raise EmptyInputError("Need at least one sample to train")

    valid = []
    for idx, sample in enumerate(samples):
        features = extractor.extract(sample)
        if features.shape[0] == 0:
            logger.warning(
                "Discarding training sample %d: %d samples is shorter than one frame (%d)",
                idx,
                len(sample),
                extractor.config.frame_size,
            )
            continue
        valid.append(features)

    if not valid:
        raise NoValidSamplesError(
            f"No valid features extracted from {len(samples)} sample(s)"
        )

    template = average_features(valid)
    logger.debug(
        "Trained template from %d/%d samples, %d frames",
        len(valid),
        len(samples),
        template.shape[0],
    )
    return template

"""Sequence matching for feature matrices."""

from wake_word.matching.dtw import MAX_DISTANCE, dtw_distance

__all__ = ["MAX_DISTANCE", "dtw_distance"]

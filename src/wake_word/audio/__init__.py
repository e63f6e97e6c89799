"""Audio collection, sample formats and MFCC feature extraction."""

from wake_word.audio.collector import AudioCollector
from wake_word.audio.config import MfccConfig
from wake_word.audio.features import MfccExtractor, RingBuffer
from wake_word.audio.formats import SampleFormat, to_mono

__all__ = [
    "AudioCollector",
    "MfccConfig",
    "MfccExtractor",
    "RingBuffer",
    "SampleFormat",
    "to_mono",
]

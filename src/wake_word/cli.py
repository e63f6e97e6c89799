"""CLI for training and trying out a wake word template."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from wake_word import synth
from wake_word.audio.config import MfccConfig
from wake_word.audio.formats import SampleFormat, to_mono
from wake_word.detector import DEFAULT_THRESHOLD, WakeWordDetector
from wake_word.exceptions import WakeWordError
from wake_word.pipeline import MonitorConfig, WakeWordMonitor

logger = logging.getLogger(__name__)


def load_wav(path: Path, sample_rate: int) -> np.ndarray:
    """Load a WAV file as mono float32 at the expected rate."""
    import scipy.io.wavfile as wavfile

    sr, audio = wavfile.read(str(path))
    if sr != sample_rate:
        raise ValueError(f"{path}: expected {sample_rate} Hz, got {sr} Hz. Resample the file.")
    channels = 1 if audio.ndim == 1 else audio.shape[1]
    return to_mono(SampleFormat.from_dtype(audio.dtype).to_float(audio), channels)


def _mark(detected: bool) -> str:
    return "DETECTED" if detected else "not detected"


def run_demo(threshold: float) -> int:
    detector = WakeWordDetector(threshold=threshold)
    rng = np.random.default_rng(12345)

    sweep = synth.sine_sweep()
    features = detector.extract_mfcc(sweep)
    print(f"Sweep: {features.shape[0]} frames x {features.shape[1]} MFCCs")
    detector.set_template(features)

    cases = [
        ("same sweep", sweep),
        ("noise", synth.uniform_noise(rng)),
        ("steady 550 Hz tone", synth.multi_tone((550.0,), (0.5,))),
    ]
    for name, audio in cases:
        detected, similarity = detector.detect(audio)
        print(f"  {name:20} {_mark(detected):13} similarity {similarity:.1%}")

    detector.train_template(synth.training_variations(3))
    print(f"Trained template from 3 variations: {detector.template.shape[0]} frames")
    detected, similarity = detector.detect(sweep)
    print(f"  {'similar sweep':20} {_mark(detected):13} similarity {similarity:.1%}")
    return 0


def run_score(train: List[Path], test: List[Path], threshold: float, config: MfccConfig) -> int:
    detector = WakeWordDetector(config, threshold=threshold)
    samples = [load_wav(p, config.sample_rate) for p in train]
    detector.train_template(samples)
    print(f"Template: {detector.template.shape[0]} frames from {len(train)} file(s)")

    for path in list(train) + list(test):
        detected, similarity = detector.detect(load_wav(path, config.sample_rate))
        print(f"  {path}: {_mark(detected)} (similarity {similarity:.1%})")
    return 0


def run_listen(train: List[Path], threshold: float, config: MfccConfig, device: Optional[int]) -> int:
    from wake_word.audio import AudioCollector

    detector = WakeWordDetector(config, threshold=threshold)
    detector.train_template([load_wav(p, config.sample_rate) for p in train])

    monitor = WakeWordMonitor(
        detector,
        MonitorConfig(sample_rate=config.sample_rate),
        on_detect=lambda similarity: print(f"Wake word! (similarity {similarity:.1%})", flush=True),
    )
    collector = AudioCollector(sample_rate=config.sample_rate)
    print(f"Listening at {config.sample_rate} Hz, threshold {detector.threshold:.2f}. Ctrl+C to stop.")
    try:
        monitor.run(collector.record_stream(chunk_duration_sec=0.1, device=device))
    except KeyboardInterrupt:
        print("\nStopped.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="MFCC + DTW wake word matching (mono 16 kHz)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Similarity cutoff 0-1 (default: {DEFAULT_THRESHOLD})",
    )
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List available audio input devices and exit",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("demo", help="Train and detect on synthetic signals")

    score = sub.add_parser("score", help="Train from WAV files and score WAV files")
    score.add_argument("--train", type=Path, nargs="+", required=True, help="Wake word recordings")
    score.add_argument("--test", type=Path, nargs="*", default=[], help="Recordings to score")

    listen = sub.add_parser("listen", help="Train from WAV files, then monitor the microphone")
    listen.add_argument("--train", type=Path, nargs="+", required=True, help="Wake word recordings")
    listen.add_argument("--device", type=int, default=None, help="Input device index")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.list_devices:
        try:
            import sounddevice as sd
        except ImportError:
            print("sounddevice not installed: pip install sounddevice", file=sys.stderr)
            return 1
        print(sd.query_devices())
        return 0

    config = MfccConfig()
    try:
        if args.command == "score":
            return run_score(args.train, args.test, args.threshold, config)
        if args.command == "listen":
            return run_listen(args.train, args.threshold, config, args.device)
        return run_demo(args.threshold)
    except (WakeWordError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

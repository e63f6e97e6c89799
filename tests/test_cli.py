"""Tests for the wake-word command line."""

from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import numpy as np
import scipy.io.wavfile as wavfile

from wake_word import synth
from wake_word.cli import load_wav, main


class TestCli(unittest.TestCase):
    """Tests for cli.main and WAV loading."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, audio: np.ndarray, sample_rate: int = 16_000) -> Path:
        path = self.tmp / name
        wavfile.write(str(path), sample_rate, (audio * 32767).astype(np.int16))
        return path

    def test_load_wav_int16(self) -> None:
        path = self._write("sweep.wav", synth.sine_sweep())
        audio = load_wav(path, 16_000)
        self.assertEqual(audio.shape, (16_000,))
        self.assertEqual(audio.dtype, np.float32)
        np.testing.assert_allclose(audio, synth.sine_sweep(), atol=1e-4)

    def test_load_wav_stereo(self) -> None:
        path = self.tmp / "stereo.wav"
        stereo = np.stack([np.full(100, 0.5), np.full(100, -0.5)], axis=1).astype(np.float32)
        wavfile.write(str(path), 16_000, stereo)
        np.testing.assert_allclose(load_wav(path, 16_000), np.zeros(100))

    def test_load_wav_wrong_rate(self) -> None:
        path = self._write("sweep.wav", synth.sine_sweep(), sample_rate=8_000)
        with self.assertRaises(ValueError):
            load_wav(path, 16_000)

    def test_demo(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(main(["demo"]), 0)
        self.assertIn("122 frames x 13 MFCCs", out.getvalue())

    def test_score(self) -> None:
        train = self._write("train.wav", synth.sine_sweep())
        noise = self._write("noise.wav", synth.uniform_noise(np.random.default_rng(0)))
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(["score", "--train", str(train), "--test", str(noise)])
        self.assertEqual(code, 0)
        lines = out.getvalue().splitlines()
        self.assertIn("DETECTED", lines[1])
        self.assertIn("not detected", lines[2])

    def test_score_too_short(self) -> None:
        short = self._write("short.wav", np.zeros(100, dtype=np.float32))
        self.assertEqual(main(["score", "--train", str(short)]), 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)

"""Unit tests for shared detector access and streaming monitoring."""

from __future__ import annotations

import threading
import unittest
from typing import List

import numpy as np

from wake_word import synth
from wake_word.detector import WakeWordDetector
from wake_word.detector.wake_word_detector import DetectionResult
from wake_word.pipeline import DetectionWorker, MonitorConfig, SharedDetector, WakeWordMonitor


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _trained_detector() -> WakeWordDetector:
    detector = WakeWordDetector()
    detector.train_template([synth.sine_sweep()])
    return detector


class TestMonitorConfig(unittest.TestCase):
    """Tests for MonitorConfig."""

    def test_defaults(self) -> None:
        config = MonitorConfig()
        self.assertEqual(config.window_samples, 32_000)
        self.assertEqual(config.min_buffer_samples, 1_600)

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            MonitorConfig(window_sec=0)
        with self.assertRaises(ValueError):
            MonitorConfig(cooldown_sec=-1)


class TestSharedDetector(unittest.TestCase):
    """Tests for SharedDetector."""

    def test_delegates(self) -> None:
        shared = SharedDetector()
        self.assertFalse(shared.has_template)
        self.assertEqual(shared.detect(synth.sine_sweep()), (False, 0.0))
        shared.train_template([synth.sine_sweep()])
        self.assertTrue(shared.has_template)
        shared.set_threshold(0.95)
        self.assertEqual(shared.threshold, 0.95)
        self.assertTrue(shared.detect(synth.sine_sweep())[0])

    def test_locked_context(self) -> None:
        shared = SharedDetector(_trained_detector())
        with shared.locked() as detector:
            self.assertIsInstance(detector, WakeWordDetector)
            self.assertIsNotNone(detector.template)

    def test_concurrent_detect_and_train(self) -> None:
        """Detect calls racing a retrain see either the old or new template, never a mix."""
        shared = SharedDetector(_trained_detector())
        sweep = synth.sine_sweep()
        results: List[DetectionResult] = []

        def detect_loop() -> None:
            for _ in range(5):
                results.append(shared.detect(sweep))

        threads = [threading.Thread(target=detect_loop) for _ in range(2)]
        for t in threads:
            t.start()
        shared.train_template([sweep])
        for t in threads:
            t.join()
        self.assertEqual(len(results), 10)
        for detected, similarity in results:
            self.assertTrue(detected)
            self.assertEqual(similarity, 1.0)


class TestWakeWordMonitor(unittest.TestCase):
    """Tests for WakeWordMonitor buffering and cooldown."""

    def setUp(self) -> None:
        self.clock = FakeClock()
        self.fired: List[float] = []
        self.monitor = WakeWordMonitor(
            _trained_detector(),
            MonitorConfig(window_sec=1.0, min_buffer_sec=0.1, cooldown_sec=3.0),
            on_detect=self.fired.append,
            clock=self.clock,
        )
        self.sweep = synth.sine_sweep()

    def test_waits_for_min_buffer(self) -> None:
        self.assertIsNone(self.monitor.push(np.zeros(800, dtype=np.float32)))
        self.assertEqual(self.monitor.buffered_samples, 800)
        self.assertIsNotNone(self.monitor.push(np.zeros(800, dtype=np.float32)))

    def test_window_is_bounded(self) -> None:
        self.monitor.push(np.zeros(20_000, dtype=np.float32))
        self.assertEqual(self.monitor.buffered_samples, 16_000)

    def test_detects_and_cools_down(self) -> None:
        result = self.monitor.push(self.sweep)
        self.assertIsNotNone(result)
        self.assertTrue(result[0])
        self.assertEqual(self.fired, [1.0])

        self.clock.now += 1.0
        self.assertTrue(self.monitor.in_cooldown())
        self.assertIsNone(self.monitor.push(self.sweep))

        self.clock.now += 2.5
        self.assertFalse(self.monitor.in_cooldown())
        result = self.monitor.push(self.sweep)
        self.assertTrue(result[0])
        self.assertEqual(len(self.fired), 2)

    def test_run_counts_detections(self) -> None:
        chunks = [self.sweep, self.sweep, self.sweep]
        self.assertEqual(self.monitor.run(chunks), 1)
        self.monitor.reset()
        self.assertEqual(self.monitor.buffered_samples, 0)
        self.assertFalse(self.monitor.in_cooldown())

    def test_stop(self) -> None:
        monitor = self.monitor

        def chunks():
            yield self.sweep
            monitor.stop()
            yield self.sweep

        self.assertEqual(monitor.run(chunks()), 1)
        self.assertEqual(self.fired, [1.0])


class TestDetectionWorker(unittest.TestCase):
    """Tests for DetectionWorker message passing."""

    def test_results_in_order(self) -> None:
        results: List[DetectionResult] = []
        rng = np.random.default_rng(1)
        with DetectionWorker(_trained_detector(), results.append) as worker:
            self.assertTrue(worker.running)
            worker.submit(synth.sine_sweep())
            worker.submit(synth.uniform_noise(rng))
        self.assertFalse(worker.running)
        self.assertEqual(len(results), 2)
        self.assertEqual(results[0], (True, 1.0))
        self.assertFalse(results[1][0])

    def test_retrain_is_queued(self) -> None:
        results: List[DetectionResult] = []
        worker = DetectionWorker(WakeWordDetector(), results.append)
        worker.start()
        worker.submit(synth.sine_sweep())
        worker.retrain([synth.sine_sweep()])
        worker.submit(synth.sine_sweep())
        worker.stop()
        self.assertEqual(results, [(False, 0.0), (True, 1.0)])

    def test_failure_is_logged_and_worker_survives(self) -> None:
        results: List[DetectionResult] = []
        worker = DetectionWorker(_trained_detector(), results.append)
        worker.start()
        with self.assertLogs("wake_word.pipeline.monitor", level="ERROR"):
            worker.retrain([])
            worker.submit(synth.sine_sweep())
            worker.stop()
        self.assertEqual(results, [(True, 1.0)])


if __name__ == "__main__":
    unittest.main(verbosity=2)

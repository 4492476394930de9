import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from wanderspectrum_core.performance import PerformanceController, PerformanceTargets


class PerformanceTests(unittest.TestCase):
    def setUp(self):
        self.ctl = PerformanceController(PerformanceTargets(cpu_percent_max=50.0, rss_mb_max=512.0, fps_tolerance=0.2))

    def test_budget_sample_shape(self):
        status = self.ctl.sample(fps=30.0, frame_rate=30)
        self.assertGreaterEqual(status.cpu_percent, 0.0)
        self.assertGreater(status.rss_mb, 0.0)
        self.assertAlmostEqual(status.target_fps, 1000.0 / 33)

    def test_within_target(self):
        status = self.ctl.evaluate(cpu_percent=5.0, rss_mb=100.0, fps=29.5, frame_rate=30)
        self.assertFalse(status.overloaded)
        self.assertIsNone(status.warning)

    def test_below_target(self):
        status = self.ctl.evaluate(cpu_percent=5.0, rss_mb=100.0, fps=10.0, frame_rate=30)
        self.assertEqual(status.warning, "below_fps_target")

    def test_above_target(self):
        status = self.ctl.evaluate(cpu_percent=5.0, rss_mb=100.0, fps=20.0, frame_rate=10)
        self.assertEqual(status.warning, "above_fps_target")

    def test_overload_wins(self):
        status = self.ctl.evaluate(cpu_percent=90.0, rss_mb=100.0, fps=10.0, frame_rate=30)
        self.assertTrue(status.overloaded)
        self.assertEqual(status.warning, "resource_overload")


if __name__ == "__main__":
    unittest.main()

import math
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from wanderspectrum_renderer.models import GridGeometry
from wanderspectrum_renderer.spectrum import build_buffer, compute_color, die_off, period


class DieOffTests(unittest.TestCase):
    def test_center_is_full_intensity(self):
        for max_x in (2, 7, 24, 25, 33.5, 100, 641):
            self.assertEqual(die_off(max_x / 2, max_x), 255)

    def test_edges_are_dark(self):
        for max_x in (2, 7, 24, 25, 100):
            self.assertEqual(die_off(0, max_x), 0)
            self.assertEqual(die_off(max_x, max_x), 0)

    def test_symmetric_and_bounded(self):
        max_x = 40
        for x in range(max_x + 1):
            value = die_off(x, max_x)
            self.assertGreaterEqual(value, 0)
            self.assertLessEqual(value, 255)
            self.assertLessEqual(abs(value - die_off(max_x - x, max_x)), 1)

    def test_falls_off_away_from_center(self):
        values = [die_off(x, 100) for x in (50, 49, 45, 30, 10, 0)]
        self.assertEqual(values, sorted(values, reverse=True))
        self.assertLess(values[2], values[0])


class PeriodTests(unittest.TestCase):
    def test_peak_is_one(self):
        self.assertAlmostEqual(period(3.0, 3.0, 8.0), 1.0)

    def test_zero_outside_quarter_window(self):
        peak, p = 3.0, 8.0
        for x in (5.01, 6.0, 7.0, 8.0, 9.0, 0.99, -3.0):
            self.assertEqual(period(x, peak, p), 0.0, msg=f"x={x}")

    def test_positive_inside_quarter_window(self):
        peak, p = 3.0, 8.0
        for x in (1.1, 2.0, 3.0, 4.0, 4.9):
            self.assertGreater(period(x, peak, p), 0.0, msg=f"x={x}")

    def test_periodic(self):
        peak, p = 12.5, 50.0
        for x in (0.0, 3.3, 12.5, 20.0, 37.1):
            self.assertAlmostEqual(period(x, peak, p), period(x + p, peak, p))
            self.assertAlmostEqual(period(x, peak, p), period(x - 2 * p, peak, p))

    def test_matches_rectified_cosine(self):
        self.assertAlmostEqual(period(1.0, 0.0, 8.0), math.cos(math.pi / 4))


class ComputeColorTests(unittest.TestCase):
    def test_channels_within_byte_range(self):
        x_max, y_max = 25.0, 50.0
        for x in range(int(x_max) + 1):
            for y in range(int(1.5 * y_max)):
                for channel in compute_color(x, x_max, y, y_max):
                    self.assertIsInstance(channel, int)
                    self.assertGreaterEqual(channel, 0)
                    self.assertLessEqual(channel, 255)

    def test_hue_progression_at_center_column(self):
        x_max, y_max = 24.0, 50.0
        self.assertEqual(compute_color(12, x_max, 0, y_max), (255, 51, 51))
        self.assertEqual(compute_color(12, x_max, 25, y_max), (51, 255, 51))
        self.assertEqual(compute_color(12, x_max, 50, y_max), (51, 51, 255))

    def test_edge_column_is_black(self):
        self.assertEqual(compute_color(0, 24.0, 17, 50.0), (0, 0, 0))

    def test_channels_clamped_outside_buffer_rows(self):
        # rows between 1.5 and 2 times y_max sit under both red bands
        self.assertEqual(compute_color(12, 24.0, 87, 50.0), (255, 51, 51))
        for y in range(75, 100):
            for channel in compute_color(12, 24.0, y, 50.0):
                self.assertLessEqual(channel, 255)

    def test_channels_clamped_past_right_edge(self):
        self.assertEqual(compute_color(30, 24.0, 0, 50.0), (0, 0, 0))


class BuildBufferTests(unittest.TestCase):
    def test_dimensions_for_reference_surface(self):
        buffer = build_buffer(100, 200, 4)
        self.assertEqual(buffer.width, 25)
        self.assertEqual(buffer.height, 75)
        self.assertEqual(buffer.geometry.visible_rows, 50)
        self.assertTrue(all(len(column) == 75 for column in buffer.columns))

    def test_floor_on_uneven_sizes(self):
        geometry = GridGeometry(width=101, height=201, pixel_size=4)
        self.assertEqual(geometry.grid_width, 25)
        self.assertEqual(geometry.buffer_height, 75)
        self.assertEqual(geometry.visible_rows, 50)

    def test_rebuild_is_idempotent(self):
        self.assertEqual(build_buffer(90, 60, 3), build_buffer(90, 60, 3))

    def test_cells_match_compute_color(self):
        buffer = build_buffer(100, 200, 4)
        self.assertEqual(buffer[12][30], compute_color(12, 25.0, 30, 50.0))
        self.assertEqual(buffer.wrapped(12, 30 + 75), buffer[12][30])
        self.assertEqual(buffer.wrapped(12, -1), buffer[12][74])

    def test_wrapped_rows_for_any_offset(self):
        buffer = build_buffer(40, 40, 4)
        column = buffer[3]
        for offset in range(-1000, 1000, 37):
            for y in range(buffer.geometry.visible_rows):
                self.assertEqual(buffer.wrapped(3, y + offset), column[(y + offset) % 15])

    def test_invalid_pixel_size(self):
        with self.assertRaises(ValueError):
            build_buffer(100, 200, 0)


if __name__ == "__main__":
    unittest.main()

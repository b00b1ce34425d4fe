"""Unit tests for moving averages and trend helpers."""

import unittest
from datetime import date, timedelta

from peband.analytics.technical import (
    compute_ma,
    compute_moving_averages,
    is_above,
    is_long_term_bull,
    is_short_term_bull,
)
from peband.domain.models import DailyRecord, HistorySeries, MovingAverageSet


def _series(closes):
    start = date(2023, 1, 1)
    return HistorySeries(tuple(
        DailyRecord(date=start + timedelta(days=i), close=float(c))
        for i, c in enumerate(closes)
    ))


class TestComputeMA(unittest.TestCase):
    """Test single-window moving average."""

    def test_mean_of_newest_closes(self):
        """Closes 1..20 chronologically: ma5 = mean(20, 19, 18, 17, 16) = 18."""
        series = _series(range(1, 21))
        self.assertAlmostEqual(compute_ma(series.newest_first, 5), 18.0)
        self.assertAlmostEqual(compute_ma(series.newest_first, 20), 10.5)

    def test_undefined_below_window(self):
        series = _series(range(1, 20))
        self.assertIsNone(compute_ma(series.newest_first, 20))

    def test_exact_window_length(self):
        series = _series([2, 4, 6, 8, 10])
        self.assertAlmostEqual(compute_ma(series.newest_first, 5), 6.0)

    def test_rejects_chronological_view(self):
        series = _series(range(1, 21))
        with self.assertRaises(TypeError):
            compute_ma(series.chronological, 5)

    def test_rejects_plain_list(self):
        with self.assertRaises(TypeError):
            compute_ma([1.0, 2.0, 3.0], 2)

    def test_rejects_non_positive_window(self):
        series = _series(range(1, 21))
        with self.assertRaises(ValueError):
            compute_ma(series.newest_first, 0)


class TestMovingAverageSet(unittest.TestCase):
    """Test the full MA set."""

    def test_all_windows_with_long_history(self):
        series = _series([100.0] * 300)
        mas = compute_moving_averages(series)
        for value in mas.as_dict().values():
            self.assertAlmostEqual(value, 100.0)

    def test_partial_history_leaves_long_windows_undefined(self):
        series = _series(range(1, 61))
        mas = compute_moving_averages(series)
        self.assertAlmostEqual(mas.ma5, 58.0)
        self.assertAlmostEqual(mas.ma60, 30.5)
        self.assertIsNone(mas.ma120)
        self.assertIsNone(mas.ma240)

    def test_recomputation_is_identical(self):
        series = _series(range(1, 250))
        self.assertEqual(compute_moving_averages(series), compute_moving_averages(series))


class TestTrendHelpers(unittest.TestCase):
    """Test price-vs-average reads."""

    def test_is_above(self):
        self.assertTrue(is_above(11, 10))
        self.assertFalse(is_above(10, 10))
        self.assertIsNone(is_above(10, None))

    def test_long_and_short_term(self):
        mas = MovingAverageSet(ma20=100.0, ma240=120.0)
        self.assertFalse(is_long_term_bull(110.0, mas))
        self.assertTrue(is_short_term_bull(110.0, mas))

    def test_undefined_long_term(self):
        mas = MovingAverageSet(ma20=100.0)
        self.assertIsNone(is_long_term_bull(110.0, mas))


if __name__ == "__main__":
    unittest.main()

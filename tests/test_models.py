"""Unit tests for domain models (HistorySeries views and invariants)."""

import unittest
from datetime import date, timedelta

from peband.domain.models import (
    ChronologicalView,
    DailyRecord,
    HistorySeries,
    MovingAverageSet,
    NewestFirstView,
    ValuationBand,
    ValuationStatus,
)


def _records(closes, start=date(2024, 1, 1)):
    return [
        DailyRecord(date=start + timedelta(days=i), close=float(c), pe=None)
        for i, c in enumerate(closes)
    ]


class TestHistorySeries(unittest.TestCase):
    """Test HistorySeries construction and ordering."""

    def test_empty_series_rejected(self):
        with self.assertRaises(ValueError):
            HistorySeries(())

    def test_unordered_dates_rejected(self):
        records = _records([1, 2, 3])
        with self.assertRaises(ValueError):
            HistorySeries((records[1], records[0], records[2]))

    def test_duplicate_dates_rejected(self):
        records = _records([1, 2])
        dup = DailyRecord(date=records[1].date, close=5.0)
        with self.assertRaises(ValueError):
            HistorySeries((records[0], records[1], dup))

    def test_views_are_type_distinguished(self):
        series = HistorySeries(tuple(_records([1, 2, 3])))
        self.assertIsInstance(series.chronological, ChronologicalView)
        self.assertIsInstance(series.newest_first, NewestFirstView)
        self.assertNotIsInstance(series.chronological, NewestFirstView)

    def test_newest_first_is_reverse_of_chronological(self):
        series = HistorySeries(tuple(_records([1, 2, 3])))
        self.assertEqual(series.chronological.closes(), [1.0, 2.0, 3.0])
        self.assertEqual(series.newest_first.closes(), [3.0, 2.0, 1.0])
        self.assertEqual(series.newest_first[0], series.latest)

    def test_latest_and_previous(self):
        series = HistorySeries(tuple(_records([10, 11])))
        self.assertEqual(series.latest.close, 11.0)
        self.assertEqual(series.previous.close, 10.0)

        single = HistorySeries(tuple(_records([10])))
        self.assertIsNone(single.previous)

    def test_pe_observations_skip_absent(self):
        start = date(2024, 1, 1)
        series = HistorySeries((
            DailyRecord(start, 100.0, 12.0),
            DailyRecord(start + timedelta(days=1), 101.0, None),
            DailyRecord(start + timedelta(days=2), 102.0, 13.0),
        ))
        self.assertEqual(series.pe_observations(), [12.0, 13.0])
        self.assertEqual(series.latest_pe(), 13.0)

    def test_latest_pe_skips_trailing_absent(self):
        start = date(2024, 1, 1)
        series = HistorySeries((
            DailyRecord(start, 100.0, 12.0),
            DailyRecord(start + timedelta(days=1), 101.0, None),
        ))
        self.assertEqual(series.latest_pe(), 12.0)

    def test_series_is_immutable(self):
        series = HistorySeries(tuple(_records([1, 2])))
        with self.assertRaises(AttributeError):
            series.records = ()


class TestSmallModels(unittest.TestCase):
    """Test helper properties on value objects."""

    def test_fair_pe_is_midpoint(self):
        band = ValuationBand(10, 20, 10, 100, 150, 200)
        self.assertEqual(band.fair_pe, 15)

    def test_moving_average_set_lookup(self):
        mas = MovingAverageSet(ma5=1.0, ma240=None)
        self.assertEqual(mas.get(5), 1.0)
        self.assertIsNone(mas.get(240))
        self.assertEqual(set(mas.as_dict()), {"ma5", "ma10", "ma20", "ma60", "ma120", "ma240"})

    def test_status_labels(self):
        self.assertEqual(ValuationStatus.CHEAP.label, "Cheap")
        self.assertEqual(ValuationStatus.NO_DATA.value, "no_data")


if __name__ == "__main__":
    unittest.main()

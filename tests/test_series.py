"""Unit tests for HistorySeries assembly (price/P-E join)."""

from datetime import date

import pytest

from peband.domain.series import assemble_history


def test_join_by_exact_date_and_absent_pe_is_none():
    prices = [
        {"date": "2024-01-02", "close": 100.0},
        {"date": "2024-01-03", "close": 101.0},
        {"date": "2024-01-04", "close": 102.0},
    ]
    pes = [
        {"date": "2024-01-02", "pe": 15.0},
        {"date": "2024-01-04", "pe": 16.0},
        {"date": "2024-01-05", "pe": 99.0},  # no matching price day
    ]

    series = assemble_history(prices, pes)

    assert len(series) == 3
    assert [r.pe for r in series.chronological] == [15.0, None, 16.0]
    assert series.latest.date == date(2024, 1, 4)


def test_output_is_chronological_even_if_input_is_newest_first():
    prices = [
        {"date": "2024-01-04", "close": 102.0},
        {"date": "2024-01-03", "close": 101.0},
        {"date": "2024-01-02", "close": 100.0},
    ]
    series = assemble_history(prices, [])

    assert series.chronological.closes() == [100.0, 101.0, 102.0]
    assert series.newest_first.closes() == [102.0, 101.0, 100.0]


def test_missing_pe_never_defaults_to_zero():
    prices = [{"date": "2024-01-02", "close": 100.0}]
    series = assemble_history(prices, [])

    assert series.latest.pe is None
    assert series.pe_observations() == []


def test_duplicate_dates_keep_last():
    prices = [
        {"date": "2024-01-02", "close": 100.0},
        {"date": "2024-01-02", "close": 105.0},
        {"date": "2024-01-03", "close": 106.0},
    ]
    pes = [
        {"date": "2024-01-02", "pe": 10.0},
        {"date": "2024-01-02", "pe": 11.0},
    ]
    series = assemble_history(prices, pes)

    assert len(series) == 2
    assert series.chronological[0].close == 105.0
    assert series.chronological[0].pe == 11.0


def test_non_positive_and_bad_closes_dropped():
    prices = [
        {"date": "2024-01-02", "close": 0},
        {"date": "2024-01-03", "close": -4},
        {"date": "2024-01-04", "close": "n/a"},
        {"date": "2024-01-05", "close": 50.5},
    ]
    series = assemble_history(prices, [])

    assert len(series) == 1
    assert series.latest.close == 50.5


def test_accepts_date_objects():
    prices = [{"date": date(2024, 1, 2), "close": 10}]
    pes = [{"date": date(2024, 1, 2), "pe": 8}]
    series = assemble_history(prices, pes)

    assert series.latest.date == date(2024, 1, 2)
    assert series.latest.pe == 8.0


def test_null_pe_values_are_absent():
    prices = [{"date": "2024-01-02", "close": 10}]
    pes = [{"date": "2024-01-02", "pe": None}]
    series = assemble_history(prices, pes)

    assert series.latest.pe is None


def test_no_usable_prices_raises():
    with pytest.raises(ValueError):
        assemble_history([], [{"date": "2024-01-02", "pe": 10}])

    with pytest.raises(ValueError):
        assemble_history([{"date": "not a date", "close": 10}], [])

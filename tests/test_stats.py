"""Tests for derived blood pressure statistics."""

from datetime import date

import pytest

from stats import (
    avg_rounded,
    calc_stats,
    calculate_daily_average,
    calculate_full_stats,
    calculate_stats,
    category_distribution,
    filter_readings,
    get_previous_period_readings,
    get_trend,
    linear_trend,
    mean_arterial_pressure,
    standard_deviation,
)

READINGS = [
    {"systolic": 120, "diastolic": 80, "pulse": 70},
    {"systolic": 130, "diastolic": 85, "pulse": 75},
    {"systolic": 125, "diastolic": 82, "pulse": 72},
]


class TestBasics:
    def test_avg_rounded_half_up(self):
        assert avg_rounded([80, 85]) == 83
        assert avg_rounded([]) is None

    def test_calc_stats_empty(self):
        assert calc_stats([]) == {"min": None, "max": None, "avg": None}

    def test_standard_deviation(self):
        assert standard_deviation([5]) == 0.0
        assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)


class TestCalculateStats:
    def test_empty(self):
        assert calculate_stats([]) is None
        assert calculate_stats(None) is None

    def test_averages_and_ranges(self):
        stats = calculate_stats(READINGS, "htnCanada2025")
        assert stats["avg_systolic"] == 125
        assert stats["avg_diastolic"] == 82
        assert stats["avg_pulse"] == 72
        assert (stats["min_systolic"], stats["max_systolic"]) == (120, 130)
        assert (stats["min_diastolic"], stats["max_diastolic"]) == (80, 85)
        assert stats["count"] == 3

    def test_latest_category_uses_last_reading(self):
        stats = calculate_stats(READINGS, "simple")
        assert stats["latest_category"] == "hypertension"

    def test_no_pulse(self):
        stats = calculate_stats([{"systolic": 120, "diastolic": 80}, {"systolic": 130, "diastolic": 85}])
        assert stats["avg_pulse"] is None


class TestCalculateFullStats:
    def test_empty(self):
        assert calculate_full_stats([]) is None

    def test_pulse_pressure_and_map(self):
        stats = calculate_full_stats(READINGS[:2])
        assert stats["systolic"] == {"min": 120, "max": 130, "avg": 125}
        assert stats["diastolic"]["avg"] == 82.5
        assert stats["pp"] == {"min": 40, "max": 45, "avg": 42.5}
        assert stats["map"]["min"] == pytest.approx(80 + 40 / 3)
        assert stats["map"]["max"] == pytest.approx(85 + 45 / 3)
        assert stats["count"] == 2

    def test_pulse_only_from_readings_with_pulse(self):
        readings = [
            {"systolic": 120, "diastolic": 80, "pulse": 70},
            {"systolic": 130, "diastolic": 85, "pulse": None},
            {"systolic": 125, "diastolic": 82, "pulse": 80},
        ]
        assert calculate_full_stats(readings)["pulse"] == {"min": 70, "max": 80, "avg": 75}

    def test_map_keeps_precision(self):
        assert mean_arterial_pressure(121, 80) == pytest.approx(93.6667, rel=1e-4)


class TestDistributionAndTrend:
    def test_daily_average(self):
        assert calculate_daily_average(READINGS[:2]) == {"systolic": 125, "diastolic": 83}
        assert calculate_daily_average([]) is None

    def test_distribution_in_severity_order(self):
        readings = [
            {"systolic": 150, "diastolic": 95},
            {"systolic": 115, "diastolic": 75},
            {"systolic": 135, "diastolic": 70},
            {"systolic": 112, "diastolic": 72},
            {"systolic": None, "diastolic": 72},
        ]
        dist = category_distribution(readings, "htnCanada2025")
        assert list(dist.items()) == [("normal", 2), ("hypertensionCanada", 1), ("hypertensionTreat", 1)]

    def test_distribution_unknown_guideline_is_empty(self):
        assert category_distribution(READINGS, "nonexistent") == {}

    def test_linear_trend(self):
        slope, intercept = linear_trend([120, 122, 124, 126])
        assert slope == pytest.approx(2.0)
        assert intercept == pytest.approx(120.0)
        assert linear_trend([120]) is None

    def test_get_trend(self):
        readings = [
            {"date": "2026-03-02", "systolic": 128, "diastolic": 80},
            {"date": "2026-03-01", "systolic": 132, "diastolic": 80},
        ]
        trend = get_trend(readings)
        assert trend["systolic"] == {"diff": -4, "direction": "down", "is_improving": True}
        assert trend["diastolic"]["direction"] == "stable"
        assert get_trend(readings[:1]) is None

    def test_get_trend_same_day_uses_time_of_day(self):
        # newest first, as fetch_sessions returns them
        readings = [
            {"date": "2026-10-10", "time_of_day": "evening", "systolic": 140, "diastolic": 90},
            {"date": "2026-10-10", "time_of_day": "morning", "systolic": 120, "diastolic": 80},
        ]
        trend = get_trend(readings)
        assert trend["systolic"] == {"diff": 20, "direction": "up", "is_improving": False}
        assert trend["diastolic"]["diff"] == 10
        assert get_trend(list(reversed(readings))) == trend


class TestFilters:
    TODAY = date(2026, 3, 31)
    ROWS = [
        {"date": "2026-03-30", "time_of_day": "morning", "systolic": 120, "diastolic": 80},
        {"date": "2026-03-25", "time_of_day": "evening", "systolic": 130, "diastolic": 85},
        {"date": "2026-03-20", "time_of_day": "morning", "systolic": 125, "diastolic": 82},
        {"date": "2026-02-01", "time_of_day": "morning", "systolic": 140, "diastolic": 90},
    ]

    def test_all(self):
        assert filter_readings(self.ROWS, "all", "all", self.TODAY) == self.ROWS

    def test_date_range(self):
        assert len(filter_readings(self.ROWS, "7", "all", self.TODAY)) == 2

    def test_time_of_day(self):
        out = filter_readings(self.ROWS, "30", "morning", self.TODAY)
        assert [r["date"] for r in out] == ["2026-03-30", "2026-03-20"]

    def test_previous_period(self):
        out = get_previous_period_readings(self.ROWS, "7", "all", self.TODAY)
        assert [r["date"] for r in out] == ["2026-03-20"]

    def test_previous_period_all_time(self):
        assert get_previous_period_readings(self.ROWS, "all", "all", self.TODAY) == []

"""
Unit Tests for Parameter Status Classification

Tests for deviation arithmetic, tier thresholds and display helpers.
"""
import math
from datetime import datetime, timedelta, timezone

import pytest

from reefmetrics.core.status import (
    OptimalRange,
    StatusResult,
    Tier,
    calculate_deviation,
    classify,
    format_relative_time,
    status_label,
    tier_for_deviation,
)
from reefmetrics.utils import ValidationError

from conftest import make_quantity


class TestClassify:
    """Tests for classify()."""

    def test_no_value_is_no_data(self):
        result = classify(None, 1.02, 1.03)
        assert result == StatusResult(tier=Tier.NO_DATA, deviation_pct=None)

    @pytest.mark.parametrize("value", [1.021, 1.025, 1.029])
    def test_inside_range_is_normal_with_zero_deviation(self, value):
        result = classify(value, 1.02, 1.03)
        assert result.tier == Tier.NORMAL
        assert result.deviation_pct == 0

    @pytest.mark.parametrize("value", [1.02, 1.03])
    def test_bounds_are_inclusive(self, value):
        assert classify(value, 1.02, 1.03).deviation_pct == 0

    def test_small_deviation_is_normal(self):
        result = classify(1.05, 1.02, 1.04)
        assert result.tier == Tier.NORMAL
        assert 0 < result.deviation_pct < 10

    def test_warning_band(self):
        result = classify(0.85, 1.0, 1.1)
        assert result.tier == Tier.WARNING
        assert 10 <= result.deviation_pct < 20

    def test_critical_band(self):
        result = classify(0.75, 1.0, 1.1)
        assert result.tier == Tier.CRITICAL
        assert result.deviation_pct == pytest.approx(25.0)

    def test_exact_ten_percent_is_warning(self):
        result = classify(9.0, 10.0, 11.0)
        assert result.deviation_pct == 10.0
        assert result.tier == Tier.WARNING

    def test_exact_twenty_percent_is_critical(self):
        result = classify(8.0, 10.0, 11.0)
        assert result.deviation_pct == 20.0
        assert result.tier == Tier.CRITICAL

    def test_just_past_boundaries(self):
        assert classify(0.8999, 1.0, 1.1).tier == Tier.WARNING
        assert classify(0.7999, 1.0, 1.1).tier == Tier.CRITICAL

    def test_above_range_uses_max_as_base(self):
        result = classify(1.5, 1.0, 1.1)
        assert result.deviation_pct == pytest.approx((1.5 - 1.1) / 1.1 * 100)
        assert result.tier == Tier.CRITICAL

    def test_slightly_above_range_is_normal(self):
        result = classify(8.5, 7.8, 8.3)
        assert result.deviation_pct == pytest.approx(2.41, abs=0.01)
        assert result.tier == Tier.NORMAL

    def test_zero_value_below_positive_minimum(self):
        result = classify(0, 1.0, 2.0)
        assert result.deviation_pct == 100
        assert result.tier == Tier.CRITICAL

    def test_negative_value_is_classified(self):
        result = classify(-1.0, 1.0, 2.0)
        assert result.deviation_pct == 200
        assert result.tier == Tier.CRITICAL

    def test_nan_value_falls_through_as_normal(self):
        result = classify(math.nan, 1.0, 2.0)
        assert result.tier == Tier.NORMAL
        assert result.deviation_pct == 0

    def test_below_range_deviation_grows_as_value_drops(self):
        deviations = [classify(v, 400.0, 450.0).deviation_pct for v in (390, 360, 320, 200)]
        assert deviations == sorted(deviations)
        assert deviations[0] == pytest.approx((400 - 390) / 400 * 100)

    def test_zero_minimum_with_non_negative_value(self):
        assert classify(0.0, 0.0, 0.1).tier == Tier.NORMAL
        assert classify(0.2, 0.0, 0.1).tier == Tier.CRITICAL

    def test_below_zero_minimum_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            classify(-0.01, 0.0, 0.1)
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.field == "optimal_min"


class TestThresholds:

    @pytest.mark.parametrize("deviation,tier", [
        (0.0, Tier.NORMAL),
        (9.999, Tier.NORMAL),
        (10.0, Tier.WARNING),
        (19.999, Tier.WARNING),
        (20.0, Tier.CRITICAL),
        (250.0, Tier.CRITICAL),
    ])
    def test_half_open_bands(self, deviation, tier):
        assert tier_for_deviation(deviation) == tier

    def test_calculate_deviation_inside_range(self):
        assert calculate_deviation(25.0, 24.0, 26.0) == 0.0


class TestOptimalRange:

    def test_rejects_inverted_range(self):
        with pytest.raises(ValidationError):
            OptimalRange("type-1", make_quantity("Ca"), 450.0, 400.0)

    def test_rejects_empty_range(self):
        with pytest.raises(ValidationError):
            OptimalRange("type-1", make_quantity("Ca"), 400.0, 400.0)

    def test_rejects_negative_minimum(self):
        with pytest.raises(ValidationError):
            OptimalRange("type-1", make_quantity("PO4"), -0.1, 0.1)

    def test_accepts_zero_minimum(self):
        r = OptimalRange("type-1", make_quantity("PO4"), 0.0, 0.1)
        assert r.parameter_id == "param-PO4"


class TestDisplayHelpers:

    def test_status_labels(self):
        assert status_label(Tier.NORMAL) == "Normal"
        assert status_label(Tier.WARNING) == "Warning"
        assert status_label(Tier.CRITICAL) == "Critical"
        assert status_label(Tier.NO_DATA) == "No Data"

    @pytest.mark.parametrize("delta,expected", [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=45), "45 minutes ago"),
        (timedelta(hours=1), "1 hour ago"),
        (timedelta(hours=5), "5 hours ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(days=6), "6 days ago"),
        (timedelta(days=14), "2 weeks ago"),
    ])
    def test_format_relative_time(self, delta, expected):
        now = datetime(2025, 11, 20, 12, 0, tzinfo=timezone.utc)
        assert format_relative_time(now - delta, now=now) == expected

    def test_old_readings_show_date(self):
        now = datetime(2025, 11, 20, 12, 0, tzinfo=timezone.utc)
        assert format_relative_time(datetime(2025, 9, 1, 8, 0), now=now) == "2025-09-01"

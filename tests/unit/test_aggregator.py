"""
Unit Tests for Measurement Aggregation

Latest-wins reduction, range-driven cardinality and severity ordering.
"""
import pytest

from reefmetrics.core.status import (
    MeasurementAggregator,
    OptimalRange,
    Tier,
    aggregate,
    latest_per_parameter,
    most_recent_measurement_time,
)

from conftest import BASE_TIME, make_quantity, make_record


class TestLatestPerParameter:

    def test_first_occurrence_wins_on_sorted_input(self):
        records = [
            make_record("param-A", 12.0, 10),
            make_record("param-A", 30.0, 5),
            make_record("param-B", 15.0, 1),
        ]
        latest = latest_per_parameter(records)

        assert set(latest) == {"param-A", "param-B"}
        assert latest["param-A"].value == 12.0
        assert latest["param-B"].value == 15.0

    def test_unsorted_input_still_keeps_newest(self):
        records = [
            make_record("param-A", 30.0, 5),
            make_record("param-A", 12.0, 10),
        ]
        assert latest_per_parameter(records)["param-A"].value == 12.0

    def test_equal_creation_time_keeps_input_order(self):
        records = [
            make_record("param-A", 1.0, 10, record_id="first"),
            make_record("param-A", 2.0, 10, record_id="second"),
        ]
        assert latest_per_parameter(records)["param-A"].id == "first"

    def test_empty(self):
        assert latest_per_parameter([]) == {}
        assert most_recent_measurement_time([]) is None

    def test_most_recent_measurement_time(self):
        records = [make_record("param-A", 1.0, 3), make_record("param-B", 1.0, 42)]
        assert most_recent_measurement_time(records) == records[1].measurement_time


class TestAggregate:

    def test_latest_values_and_unmeasured_quantity(self, ranges_abc):
        records = [
            make_record("param-A", 12.0, 10),
            make_record("param-A", 30.0, 5),
            make_record("param-B", 15.0, 1),
        ]
        views = {v.name: v for v in aggregate(records, ranges_abc)}

        assert len(views) == 3
        assert views["A"].current_value == 12.0
        assert views["A"].measurement_time == records[0].measurement_time
        assert views["B"].current_value == 15.0
        assert views["C"].tier == Tier.NO_DATA
        assert views["C"].current_value is None
        assert views["C"].deviation_pct is None
        assert views["C"].measurement_time is None

    def test_sorted_by_tier_then_name(self):
        ranges = [
            OptimalRange("t", make_quantity("Z"), 10.0, 20.0),
            OptimalRange("t", make_quantity("B"), 10.0, 20.0),
            OptimalRange("t", make_quantity("A"), 10.0, 20.0),
        ]
        records = [
            make_record("param-Z", 15.0, 1),   # normal
            make_record("param-B", 5.0, 2),    # 50 % below → critical
            make_record("param-A", 8.5, 3),    # 15 % below → warning
        ]
        views = MeasurementAggregator().aggregate(records, ranges)

        assert [(v.tier, v.name) for v in views] == [
            (Tier.CRITICAL, "B"),
            (Tier.WARNING, "A"),
            (Tier.NORMAL, "Z"),
        ]

    def test_ties_break_by_name(self, ranges_abc):
        views = aggregate([], list(reversed(ranges_abc)))
        assert [v.name for v in views] == ["A", "B", "C"]

    def test_no_data_sorts_last(self, ranges_abc):
        views = aggregate([make_record("param-C", 15.0, 1)], ranges_abc)
        assert views[0].name == "C"
        assert views[0].tier == Tier.NORMAL
        assert [v.tier for v in views[1:]] == [Tier.NO_DATA, Tier.NO_DATA]

    def test_empty_ranges_give_empty_result(self):
        assert aggregate([make_record("param-A", 1.0, 1)], []) == []

    def test_empty_measurements_give_no_data(self, ranges_abc):
        views = aggregate([], ranges_abc)
        assert all(v.tier == Tier.NO_DATA for v in views)

    def test_measurements_without_range_are_ignored(self, ranges_abc):
        views = aggregate([make_record("param-X", 99.0, 1)], ranges_abc)
        assert {v.name for v in views} == {"A", "B", "C"}

    def test_view_serialisation(self, ranges_abc):
        view = aggregate([make_record("param-A", 12.0, 0)], ranges_abc[:1])[0]
        assert view.to_dict() == {
            "quantityId": "param-A",
            "name": "A",
            "fullName": "A",
            "unit": "ppm",
            "currentValue": 12.0,
            "optimalMin": 10.0,
            "optimalMax": 20.0,
            "deviationPct": 0.0,
            "tier": "normal",
            "measurementTime": BASE_TIME.isoformat(),
        }

    def test_summarise(self, ranges_abc):
        records = [make_record("param-A", 5.0, 1), make_record("param-B", 15.0, 1)]
        summary = MeasurementAggregator.summarise(aggregate(records, ranges_abc))
        assert summary == {"total": 3, "critical": 1, "warning": 0, "normal": 1, "no_data": 1}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""Tests for the availability analytics aggregator."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from asset_analytics.analysis.availability import (
    activity_downtime,
    calculate_asset_analytics,
    calculate_day_metrics,
    calculate_downtime_breakdown,
)
from asset_analytics.config import AnalyticsConfig
from asset_analytics.models.core import ActivityRecord, DowntimeType
from asset_analytics.parsers.activity_parser import load_activities


def _analyze(activities, start, end, **kwargs):
    return calculate_asset_analytics("A1", "Pump", "Mechanical", activities, start, end, **kwargs)


class TestScenario:
    """One unplanned 08:00-10:00 activity on day 2 of a 3-day range."""

    @pytest.fixture
    def analytics(self, make_activity):
        activity = make_activity(date(2024, 3, 2), start_time="08:00", end_time="10:00", downtime_type="unplanned")
        return _analyze([activity], date(2024, 3, 1), date(2024, 3, 3))

    def test_day_two(self, analytics):
        day2 = analytics.trends[1]
        assert day2.date == date(2024, 3, 2)
        assert day2.total_downtime_minutes == 120
        assert day2.unplanned_downtime_minutes == 120
        assert day2.planned_downtime_minutes == 0
        assert day2.availability == pytest.approx(91.67)
        assert day2.number_of_incidents == 1
        assert day2.mtbf == 1440
        assert day2.mttr == 120

    def test_quiet_days(self, analytics):
        for day in (analytics.trends[0], analytics.trends[2]):
            assert day.availability == 100
            assert day.number_of_incidents == 0
            assert day.mttr == 0

    def test_summary(self, analytics):
        assert analytics.summary.total_downtime_hours == 2.0
        assert analytics.summary.total_operational_hours == 72.0
        assert analytics.summary.total_incidents == 1
        assert analytics.analysis_period.total_days == 3


class TestDayMetrics:
    def test_no_activity_day(self):
        day = calculate_day_metrics(date(2024, 3, 1), [], 1440)
        assert day.availability == 100
        assert day.uptime_percentage == 100
        assert day.downtime_percentage == 0
        assert day.number_of_incidents == 0
        assert day.mttr == 0
        assert day.mtbf == 1440

    def test_conservation_with_overflow(self, make_activity):
        activities = [
            make_activity(date(2024, 3, 1), downtime=1000),
            make_activity(date(2024, 3, 1), downtime=800),
        ]
        day = calculate_day_metrics(date(2024, 3, 1), activities, 1440)
        assert day.total_downtime_minutes == 1800
        assert day.total_uptime_minutes == 0
        assert day.total_uptime_minutes + min(day.total_downtime_minutes, 1440) == 1440

    def test_precomputed_downtime_wins(self, make_activity):
        activity = make_activity(date(2024, 3, 1), start_time="08:00", end_time="12:00", downtime=30)
        day = calculate_day_metrics(date(2024, 3, 1), [activity], 1440)
        assert day.total_downtime_minutes == 30

    def test_zero_precomputed_falls_back_to_clock(self, make_activity):
        activity = make_activity(date(2024, 3, 1), start_time="08:00", end_time="09:00", downtime=0)
        assert activity_downtime(activity) == 60

    def test_mtbf_divides_day_by_gaps(self, make_activity):
        activities = [make_activity(date(2024, 3, 1), downtime=10, downtime_type="planned") for _ in range(3)]
        day = calculate_day_metrics(date(2024, 3, 1), activities, 1440)
        assert day.mtbf == 720
        assert day.mttr == 10
        assert day.planned_downtime_minutes == 30

    def test_unparseable_and_ongoing_count_as_incidents(self, make_activity):
        activities = [
            make_activity(date(2024, 3, 1), start_time="bad", end_time="10:00"),
            make_activity(date(2024, 3, 1), start_time="14:00"),
        ]
        day = calculate_day_metrics(date(2024, 3, 1), activities, 1440)
        assert day.number_of_incidents == 2
        assert day.total_downtime_minutes == 0
        assert day.availability == 100
        assert day.mttr == 0

    def test_untyped_downtime_is_unplanned(self, make_activity):
        activity = make_activity(date(2024, 3, 1), downtime=45)
        day = calculate_day_metrics(date(2024, 3, 1), [activity], 1440)
        assert day.unplanned_downtime_minutes == 45

    def test_custom_operational_minutes(self, make_activity):
        activity = make_activity(date(2024, 3, 1), downtime=120)
        day = calculate_day_metrics(date(2024, 3, 1), [activity], 480)
        assert day.total_operational_minutes == 480
        assert day.total_uptime_minutes == 360
        assert day.availability == 75


class TestAssetAnalytics:
    @pytest.fixture
    def analytics(self, activities_json_path):
        activities = load_activities(activities_json_path)
        return _analyze(activities, date(2024, 3, 1), date(2024, 3, 7))

    def test_filters_other_assets(self, analytics):
        assert {i.id for i in analytics.incidents} == {"a1", "a2", "a3", "a4"}

    def test_trends_cover_every_day(self, analytics):
        assert [d.date for d in analytics.trends] == [date(2024, 3, d) for d in range(1, 8)]

    def test_day_conservation(self, analytics):
        for day in analytics.trends:
            assert day.total_uptime_minutes + min(day.total_downtime_minutes, 1440) == 1440

    def test_summary_consistency(self, analytics):
        s = analytics.summary
        assert s.total_uptime_hours + s.total_downtime_hours == pytest.approx(s.total_operational_hours, abs=0.01)
        assert s.total_downtime_hours == 4.5
        assert s.planned_downtime_hours == 2.5
        assert s.unplanned_downtime_hours == 2.0
        assert s.overall_availability == pytest.approx(97.32)
        assert s.total_incidents == 4
        assert s.average_incident_duration == pytest.approx(67.5)
        assert s.mtbf == pytest.approx(56.0)
        assert s.mttr == pytest.approx(1.125, abs=0.01)

    def test_breakdown_completeness(self, analytics):
        b = analytics.downtime_breakdown
        assert b.planned.total + b.unplanned.total == sum(i.duration for i in analytics.incidents)
        assert b.planned.percentage + b.unplanned.percentage == pytest.approx(100)
        assert b.planned.incidents == 2
        assert b.unplanned.incidents == 2

    def test_incidents(self, analytics):
        by_id = {i.id: i for i in analytics.incidents}
        assert by_id["a1"].duration == 120
        assert by_id["a1"].attended_by == "Ravi, Sam"
        assert by_id["a3"].duration == 120
        assert by_id["a3"].type is DowntimeType.PLANNED
        assert by_id["a4"].end_time == "Ongoing"
        assert by_id["a4"].duration == 0
        assert by_id["a4"].type is DowntimeType.UNPLANNED

    def test_department_breakdown(self, analytics):
        depts = analytics.department_breakdown
        assert set(depts) == {"Mechanical", "Electrical"}
        assert depts["Mechanical"].total == 150
        assert depts["Mechanical"].incidents == 3
        assert depts["Electrical"].percentage == pytest.approx(44.44)

    def test_range_excludes_outside_days(self, activities_json_path):
        activities = load_activities(activities_json_path)
        analytics = _analyze(activities, date(2024, 3, 3), date(2024, 3, 5))
        assert [i.id for i in analytics.incidents] == ["a3"]

    def test_accepts_datetimes(self, make_activity):
        activity = make_activity(date(2024, 3, 1), downtime=60)
        analytics = _analyze([activity], datetime(2024, 3, 1, 0, 0), datetime(2024, 3, 1, 23, 59, 59, 999999))
        assert analytics.analysis_period.total_days == 1
        assert analytics.summary.total_downtime_hours == 1.0

    def test_timestamped_activity_counts_on_its_day(self):
        activity = ActivityRecord(id="ts", asset_id="A1", date=datetime(2024, 3, 2, 8, 0), downtime=60)
        assert activity.date == date(2024, 3, 2)
        analytics = _analyze([activity], date(2024, 3, 1), date(2024, 3, 3))
        assert analytics.summary.total_downtime_hours == 1.0
        assert analytics.trends[1].total_downtime_minutes == 60
        assert analytics.incidents[0].date == date(2024, 3, 2)

    def test_department_breakdown_is_read_only(self, analytics):
        with pytest.raises(TypeError):
            analytics.department_breakdown["Civil"] = analytics.department_breakdown["Mechanical"]

    def test_inverted_range(self):
        with pytest.raises(ValueError):
            _analyze([], date(2024, 3, 5), date(2024, 3, 1))

    def test_empty_activities(self):
        analytics = _analyze([], date(2024, 3, 1), date(2024, 3, 10))
        assert analytics.summary.overall_availability == 100
        assert analytics.summary.total_incidents == 0
        assert analytics.downtime_breakdown.planned.percentage == 0
        assert analytics.downtime_breakdown.unplanned.percentage == 0
        assert analytics.department_breakdown == {}
        assert all(d.availability == 100 for d in analytics.trends)

    def test_to_dict_shape(self, analytics):
        data = analytics.to_dict()
        assert data["assetId"] == "A1"
        assert data["analysisPeriod"] == {"startDate": "2024-03-01", "endDate": "2024-03-07", "totalDays": 7}
        assert data["summary"]["totalDowntimeHours"] == 4.5
        assert data["trends"][1]["totalDowntimeMinutes"] == 150
        assert data["incidents"][0]["type"] == "unplanned"
        assert data["downtimeBreakdown"]["planned"]["incidents"] == 2
        assert data["departmentBreakdown"]["Electrical"]["downtime"] == 120

    def test_trends_frame(self, analytics):
        df = analytics.trends_frame()
        assert len(df) == 7
        assert df.loc[date(2024, 3, 2), "total_downtime_minutes"] == 150


class TestPerformanceByPeriod:
    def test_fourteen_days_is_daily(self):
        analytics = _analyze([], date(2024, 3, 1), date(2024, 3, 14))
        periods = analytics.performance_by_period
        assert len(periods) == 14
        assert periods[0].period == "Mar 01"
        assert periods[0].total_operational == 1440

    def test_fifteen_days_is_weekly(self):
        analytics = _analyze([], date(2024, 3, 1), date(2024, 3, 15))
        periods = analytics.performance_by_period
        assert len(periods) < 15
        assert [p.period for p in periods] == ["Feb 26 - Mar 03", "Mar 04 - Mar 10", "Mar 11 - Mar 17"]
        # partial weeks only count the days inside the range
        assert periods[0].start == date(2024, 3, 1)
        assert periods[0].end == date(2024, 3, 3)
        assert periods[0].total_operational == 3 * 1440

    def test_weekly_ratios_come_from_sums(self, make_activity):
        activities = [
            make_activity(date(2024, 3, 4), downtime=120),
            make_activity(date(2024, 3, 5), downtime=60, downtime_type="planned"),
        ]
        analytics = _analyze(activities, date(2024, 3, 1), date(2024, 3, 15))
        week = analytics.performance_by_period[1]
        assert week.total_downtime == 180
        assert week.total_uptime == 7 * 1440 - 180
        assert week.availability == pytest.approx(98.21)
        assert week.planned_downtime == 60
        assert week.unplanned_downtime == 120
        assert week.number_of_incidents == 2
        assert week.mtbf == 7 * 1440
        assert week.mttr == 90

    def test_ninety_days_is_weekly(self):
        analytics = _analyze([], date(2024, 1, 1), date(2024, 3, 30))
        assert analytics.analysis_period.total_days == 90
        assert len(analytics.performance_by_period) == 13

    def test_long_range_is_monthly(self):
        analytics = _analyze([], date(2024, 1, 1), date(2024, 4, 30))
        periods = analytics.performance_by_period
        assert [p.period for p in periods] == ["Jan 2024", "Feb 2024", "Mar 2024", "Apr 2024"]
        assert periods[1].total_operational == 29 * 1440
        assert all(p.availability == 100 for p in periods)

    def test_custom_bucket_thresholds(self):
        config = AnalyticsConfig(daily_bucket_max_days=3, weekly_bucket_max_days=5)
        analytics = _analyze([], date(2024, 1, 1), date(2024, 2, 29), config=config)
        assert len(analytics.performance_by_period) == 2


class TestDowntimeBreakdown:
    def test_no_downtime_has_zero_shares(self, make_activity):
        breakdown = calculate_downtime_breakdown([make_activity(date(2024, 3, 1), start_time="10:00")])
        assert breakdown.total == 0
        assert breakdown.planned.percentage == 0
        assert breakdown.unplanned.percentage == 0
        assert breakdown.unplanned.incidents == 1

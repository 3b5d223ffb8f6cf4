"""Tests for the statistics engine."""

from datetime import datetime, timedelta

import pytest

from daily_planner.plans.models import PlanStatus, PlanType
from daily_planner.plans.statistics import (
	build_report,
	compute_statistics,
	compute_streaks,
	start_of_week,
	summarize_period,
)
from tests.helpers import NOW, completed_plan, make_plan


def _days_ago(days: int, hour: int = 9) -> datetime:
	return (NOW - timedelta(days=days)).replace(hour=hour, minute=0)


class TestTotals:
	def test_empty_collection(self):
		stats = compute_statistics([], now=NOW)
		assert stats.total_plans == 0
		assert stats.completed_plans == 0
		assert stats.completion_rate == 0
		assert stats.current_streak == 0
		assert stats.longest_streak == 0
		assert stats.daily_completions == []
		assert stats.weekly_completions == []
		assert stats.monthly_completions == []

	def test_completion_rate(self):
		plans = [
			completed_plan("a", _days_ago(0)),
			make_plan("b"),
			make_plan("c", status=PlanStatus.IN_PROGRESS),
		]
		stats = compute_statistics(plans, now=NOW)
		assert stats.total_plans == 3
		assert stats.completed_plans == 1
		assert stats.completion_rate == 33

	def test_completed_without_timestamp_counts_but_has_no_streak(self):
		plans = [make_plan("a", status=PlanStatus.COMPLETED)]
		stats = compute_statistics(plans, now=NOW)
		assert stats.completed_plans == 1
		assert stats.completion_rate == 100
		assert stats.current_streak == 0
		assert stats.longest_streak == 0


class TestStreaks:
	def test_three_consecutive_days_ending_today(self):
		plans = [completed_plan(str(d), _days_ago(d)) for d in range(3)]
		stats = compute_statistics(plans, now=NOW)
		assert stats.current_streak == 3
		assert stats.longest_streak == 3

	def test_no_completion_today_means_no_current_streak(self):
		plans = [completed_plan(str(d), _days_ago(d)) for d in range(1, 4)]
		stats = compute_statistics(plans, now=NOW)
		assert stats.current_streak == 0

	def test_gap_closes_run(self):
		days = [0, 1, 5, 6, 7]
		plans = [completed_plan(str(d), _days_ago(d)) for d in days]
		stats = compute_statistics(plans, now=NOW)
		assert stats.current_streak == 2
		assert stats.longest_streak == 3

	def test_several_completions_same_day(self):
		completions = [_days_ago(0, hour=8), _days_ago(0, hour=9), _days_ago(1, hour=20)]
		assert compute_streaks(completions, NOW) == (3, 3)

	def test_gap_just_over_a_day_breaks(self):
		completions = [_days_ago(0, hour=10), _days_ago(1, hour=9)]
		current, longest = compute_streaks(completions, NOW)
		assert current == 1
		assert longest == 1

	def test_order_of_input_does_not_matter(self):
		completions = [_days_ago(2), _days_ago(0), _days_ago(1)]
		assert compute_streaks(completions, NOW) == (3, 3)

	def test_empty(self):
		assert compute_streaks([], NOW) == (0, 0)


class TestHistograms:
	def test_buckets(self):
		plans = [
			completed_plan("a", datetime(2026, 10, 14, 9)),
			completed_plan("b", datetime(2026, 10, 14, 18)),
			completed_plan("c", datetime(2026, 10, 1, 12)),
			make_plan("d"),
		]
		stats = compute_statistics(plans, now=NOW)

		daily = [(b.label, b.count) for b in stats.daily_completions]
		assert daily == [("2026-10-01", 1), ("2026-10-14", 2)]

		weekly = [(b.label, b.count) for b in stats.weekly_completions]
		assert weekly == [("2026-09-27", 1), ("2026-10-11", 2)]

		monthly = [(b.label, b.count) for b in stats.monthly_completions]
		assert monthly == [("2026-10", 3)]

	def test_start_of_week_is_sunday(self):
		assert start_of_week(NOW) == datetime(2026, 10, 11)
		assert start_of_week(datetime(2026, 10, 11, 23, 59)) == datetime(2026, 10, 11)
		assert start_of_week(datetime(2026, 10, 10, 1, 0)) == datetime(2026, 10, 4)


class TestPeriodSummary:
	def _plans(self):
		return [
			completed_plan("a", NOW, created_at=NOW),
			make_plan("b", status=PlanStatus.IN_PROGRESS, plan_type=PlanType.WEEKLY),
			make_plan("c", plan_type=PlanType.LONG_TERM, created_at=datetime(2026, 10, 2)),
			make_plan("d", created_at=datetime(2026, 3, 2)),
		]

	def test_month(self):
		summary = summarize_period(self._plans(), "month", now=NOW)
		assert summary.total == 3
		assert summary.completed == 1
		assert summary.in_progress == 1
		assert summary.pending == 1
		assert summary.completion_rate == 33
		assert summary.by_type == {"daily": 1, "weekly": 1, "long_term": 1}

	def test_week(self):
		summary = summarize_period(self._plans(), "week", now=NOW)
		assert summary.total == 2

	def test_year(self):
		summary = summarize_period(self._plans(), "year", now=NOW)
		assert summary.total == 4

	def test_unknown_period(self):
		with pytest.raises(ValueError, match="Unknown period"):
			summarize_period([], "decade", now=NOW)

	def test_report(self):
		report = build_report(self._plans(), "month", now=NOW)
		assert report["timeRange"] == "month"
		assert report["stats"]["total"] == 3
		assert report["stats"]["completionRate"] == 33
		assert report["exportDate"] == NOW.isoformat()

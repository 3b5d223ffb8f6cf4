"""Tests for the filter engine."""

from datetime import datetime
from itertools import product

import pytest

from daily_planner.plans.filters import filter_plans, in_time_range, plan_matches
from daily_planner.plans.models import FilterOptions, PlanStatus, PlanType, TimeRange
from tests.helpers import NOW, make_plan


def _plans():
	return [
		make_plan("p1", status=PlanStatus.PENDING, plan_type=PlanType.DAILY),
		make_plan("p2", status=PlanStatus.COMPLETED, plan_type=PlanType.WEEKLY),
		make_plan("p3", status=PlanStatus.IN_PROGRESS, plan_type=PlanType.DAILY),
		make_plan("p4", status=PlanStatus.COMPLETED, plan_type=PlanType.LONG_TERM),
		make_plan("p5", status=PlanStatus.PENDING, plan_type=PlanType.WEEKLY),
	]


def _ids(plans):
	return [p.id for p in plans]


def test_default_options_pass_everything():
	assert _ids(filter_plans(_plans(), FilterOptions(), now=NOW)) == ["p1", "p2", "p3", "p4", "p5"]


def test_completed_only_preserves_order():
	options = FilterOptions(status="completed", type="all", time_range="all")
	assert _ids(filter_plans(_plans(), options, now=NOW)) == ["p2", "p4"]


def test_type_filter():
	options = FilterOptions(type=PlanType.WEEKLY)
	assert _ids(filter_plans(_plans(), options, now=NOW)) == ["p2", "p5"]


def test_status_and_type_together():
	options = FilterOptions(status=PlanStatus.PENDING, type=PlanType.WEEKLY)
	assert _ids(filter_plans(_plans(), options, now=NOW)) == ["p5"]


@pytest.mark.parametrize(
	"status,plan_type",
	list(product(["all", *PlanStatus], ["all", *PlanType])),
)
def test_conjunction_without_time_range(status, plan_type):
	options = FilterOptions(status=status, type=plan_type)
	for plan in _plans():
		expected = (status == "all" or plan.status == status) and (plan_type == "all" or plan.type == plan_type)
		assert plan_matches(plan, options, NOW) is expected


class TestTimeRange:
	def _dated(self):
		return [
			make_plan("today", created_at=datetime(2026, 10, 14, 8)),
			make_plan("sunday", created_at=datetime(2026, 10, 11, 8)),
			make_plan("last-week", created_at=datetime(2026, 10, 10, 23)),
			make_plan("early-month", created_at=datetime(2026, 10, 1)),
			make_plan("last-year", created_at=datetime(2025, 10, 14)),
		]

	def test_today(self):
		options = FilterOptions(time_range=TimeRange.TODAY)
		assert _ids(filter_plans(self._dated(), options, now=NOW)) == ["today"]

	def test_week(self):
		options = FilterOptions(time_range=TimeRange.WEEK)
		assert _ids(filter_plans(self._dated(), options, now=NOW)) == ["today", "sunday"]

	def test_month(self):
		options = FilterOptions(time_range=TimeRange.MONTH)
		assert _ids(filter_plans(self._dated(), options, now=NOW)) == [
			"today", "sunday", "last-week", "early-month",
		]

	def test_uses_created_at_not_end_date(self):
		plan = make_plan(created_at=datetime(2026, 9, 1))
		plan.end_date = NOW
		assert plan_matches(plan, FilterOptions(time_range=TimeRange.MONTH), NOW) is False

	def test_status_still_rejects_before_window(self):
		plan = make_plan(status=PlanStatus.PENDING, created_at=NOW)
		options = FilterOptions(status=PlanStatus.COMPLETED, time_range=TimeRange.TODAY)
		assert plan_matches(plan, options, NOW) is False

	def test_in_time_range_all(self):
		assert in_time_range(datetime(1999, 1, 1), TimeRange.ALL, NOW) is True


def test_merged_options():
	options = FilterOptions().merged(status="completed")
	options = options.merged(type="weekly", unknown="ignored")
	assert options.status == PlanStatus.COMPLETED
	assert options.type == PlanType.WEEKLY
	assert options.time_range == TimeRange.ALL

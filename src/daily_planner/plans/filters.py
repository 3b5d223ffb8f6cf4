"""Filter Engine - declarative status/type/time filtering of plans."""

from datetime import datetime
from typing import Optional

from .models import ALL, FilterOptions, Plan, TimeRange
from .statistics import same_day, same_month, same_week

_WINDOW_CHECKS = {
	TimeRange.TODAY: same_day,
	TimeRange.WEEK: same_week,
	TimeRange.MONTH: same_month,
}


def in_time_range(moment: datetime, time_range: TimeRange, now: Optional[datetime] = None) -> bool:
	"""Whether moment falls in the same day/week/month as now."""
	if time_range == TimeRange.ALL:
		return True
	now = now or datetime.now()
	return _WINDOW_CHECKS[time_range](moment, now)


def plan_matches(plan: Plan, options: FilterOptions, now: Optional[datetime] = None) -> bool:
	"""Verdict for a single plan."""
	if options.status != ALL and plan.status != options.status:
		return False

	if options.type != ALL and plan.type != options.type:
		return False

	# The window check is the final verdict when a range is set
	if options.time_range != TimeRange.ALL:
		return in_time_range(plan.created_at, options.time_range, now)

	return True


def filter_plans(plans: list[Plan], options: FilterOptions, now: Optional[datetime] = None) -> list[Plan]:
	"""Plans matching options, in their original order."""
	now = now or datetime.now()
	return [p for p in plans if plan_matches(p, options, now)]

"""
Statistics Engine - completion rate, streaks and completion histograms.

Everything here is recomputed on demand from the plan list; nothing is
stored.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from .models import CompletionBucket, Plan, PlanStatus, PlanType, Statistics
from .progress import percentage

STREAK_GAP = timedelta(days=1)

PERIODS = ("week", "month", "year")


def start_of_week(moment: datetime) -> datetime:
	"""Midnight of the Sunday on or before moment."""
	days_since_sunday = (moment.weekday() + 1) % 7
	day = moment.date() - timedelta(days=days_since_sunday)
	return datetime(day.year, day.month, day.day)


def same_day(a: datetime, b: datetime) -> bool:
	return a.date() == b.date()


def same_week(a: datetime, b: datetime) -> bool:
	return start_of_week(a) == start_of_week(b)


def same_month(a: datetime, b: datetime) -> bool:
	return (a.year, a.month) == (b.year, b.month)


def same_year(a: datetime, b: datetime) -> bool:
	return a.year == b.year


def compute_streaks(completions: list[datetime], now: datetime) -> tuple[int, int]:
	"""
	Current and longest streak over completion timestamps.

	The walk goes from the most recent completion backwards. A pair of
	neighbours at most 24 hours apart continues the run; a wider gap
	closes it. The current streak only counts when the most recent
	completion happened today.

	Returns:
		(current_streak, longest_streak)
	"""
	ordered = sorted(completions, reverse=True)
	if not ordered:
		return 0, 0

	starts_today = same_day(ordered[0], now)
	running = 1 if starts_today else 0
	current = running
	longest = 0
	unbroken = starts_today

	for i in range(1, len(ordered)):
		if abs(ordered[i - 1] - ordered[i]) <= STREAK_GAP:
			running += 1
			if unbroken:
				current = running
		else:
			longest = max(longest, running)
			running = 1
			unbroken = False

	longest = max(longest, running)
	return current, longest


def _completion_moment(plan: Plan) -> datetime:
	return plan.completed_at or plan.created_at


def _buckets(moments: Iterable[datetime], label: Callable[[datetime], str]) -> list[CompletionBucket]:
	counts = Counter(label(m) for m in moments)
	return [CompletionBucket(label=k, count=counts[k]) for k in sorted(counts)]


def completion_histograms(plans: list[Plan]) -> dict[str, list[CompletionBucket]]:
	"""Completed plans grouped by day, week (Sunday start) and month."""
	moments = [_completion_moment(p) for p in plans if p.status == PlanStatus.COMPLETED]
	return {
		"daily_completions": _buckets(moments, lambda m: m.strftime("%Y-%m-%d")),
		"weekly_completions": _buckets(moments, lambda m: start_of_week(m).strftime("%Y-%m-%d")),
		"monthly_completions": _buckets(moments, lambda m: m.strftime("%Y-%m")),
	}


def compute_statistics(plans: list[Plan], now: Optional[datetime] = None) -> Statistics:
	"""Aggregate the plan collection into a Statistics object."""
	now = now or datetime.now()
	completed = [p for p in plans if p.status == PlanStatus.COMPLETED]

	current, longest = compute_streaks(
		[p.completed_at for p in completed if p.completed_at is not None],
		now,
	)

	return Statistics(
		total_plans=len(plans),
		completed_plans=len(completed),
		completion_rate=percentage(len(completed), len(plans)),
		current_streak=current,
		longest_streak=longest,
		**completion_histograms(plans),
	)


@dataclass
class PeriodSummary:
	"""Counts for plans created within the current week, month or year."""
	period: str
	total: int = 0
	completed: int = 0
	in_progress: int = 0
	pending: int = 0
	overdue: int = 0
	completion_rate: int = 0
	by_type: dict[str, int] = field(default_factory=dict)

	def to_dict(self) -> dict:
		return {
			"total": self.total,
			"completed": self.completed,
			"inProgress": self.in_progress,
			"pending": self.pending,
			"overdue": self.overdue,
			"completionRate": self.completion_rate,
			"byType": dict(self.by_type),
		}


_PERIOD_MATCHERS: dict[str, Callable[[datetime, datetime], bool]] = {
	"week": same_week,
	"month": same_month,
	"year": same_year,
}


def summarize_period(plans: list[Plan], period: str = "month", now: Optional[datetime] = None) -> PeriodSummary:
	"""
	Summarise plans created in the current period.

	Args:
		plans: Plan collection
		period: One of "week", "month", "year"
		now: Reference time

	Raises:
		ValueError: If period is not recognised
	"""
	if period not in _PERIOD_MATCHERS:
		raise ValueError(f"Unknown period: {period} (expected one of {', '.join(PERIODS)})")

	now = now or datetime.now()
	matcher = _PERIOD_MATCHERS[period]
	selected = [p for p in plans if matcher(p.created_at, now)]
	statuses = Counter(p.status for p in selected)

	summary = PeriodSummary(
		period=period,
		total=len(selected),
		completed=statuses[PlanStatus.COMPLETED],
		in_progress=statuses[PlanStatus.IN_PROGRESS],
		pending=statuses[PlanStatus.PENDING],
		overdue=statuses[PlanStatus.OVERDUE],
		by_type={t.value: 0 for t in PlanType},
	)
	for plan in selected:
		summary.by_type[plan.type.value] += 1
	summary.completion_rate = percentage(summary.completed, summary.total)
	return summary


def build_report(plans: list[Plan], period: str = "month", now: Optional[datetime] = None) -> dict:
	"""JSON-serialisable analytics export for the given period."""
	now = now or datetime.now()
	summary = summarize_period(plans, period, now)
	return {
		"timeRange": period,
		"stats": summary.to_dict(),
		"exportDate": now.isoformat(),
	}

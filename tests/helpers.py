"""Shared test fixtures and helpers for daily-planner tests."""

from datetime import datetime, timedelta
from typing import Optional

from daily_planner.plans.models import Plan, PlanStatus, PlanType, SubTask

# A Wednesday; the week (Sunday start) began on 2026-10-11
NOW = datetime(2026, 10, 14, 10, 30)


class FakeClock:
	"""Callable clock that tests can move around."""

	def __init__(self, now: datetime = NOW):
		self.now = now

	def __call__(self) -> datetime:
		return self.now

	def advance(self, **kwargs) -> datetime:
		self.now = self.now + timedelta(**kwargs)
		return self.now


def make_sub_tasks(total: int, done: int) -> list[SubTask]:
	return [
		SubTask(id=f"sub-{i}", title=f"Step {i}", is_completed=i < done, created_at=NOW)
		for i in range(total)
	]


def make_plan(
	plan_id: str = "plan-1",
	title: str = "Morning run",
	status: PlanStatus = PlanStatus.PENDING,
	plan_type: PlanType = PlanType.DAILY,
	created_at: datetime = NOW,
	completed_at: Optional[datetime] = None,
	sub_tasks: Optional[list[SubTask]] = None,
) -> Plan:
	"""Create a Plan with sensible defaults for testing."""
	return Plan(
		id=plan_id,
		title=title,
		type=plan_type,
		status=status,
		start_date=created_at,
		sub_tasks=sub_tasks or [],
		created_at=created_at,
		updated_at=created_at,
		completed_at=completed_at,
	)


def completed_plan(plan_id: str, completed_at: datetime, **kwargs) -> Plan:
	return make_plan(
		plan_id=plan_id,
		status=PlanStatus.COMPLETED,
		completed_at=completed_at,
		created_at=kwargs.pop("created_at", completed_at),
		**kwargs,
	)

"""Progress calculation for plans."""

import math

from .models import Plan, PlanStatus


def round_half_up(value: float) -> int:
	"""Round to the nearest integer, halves away from zero for non-negative values."""
	return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
	"""Integer percentage of part over whole, 0 when whole is 0."""
	if whole <= 0:
		return 0
	return round_half_up(part * 100 / whole)


def calculate_progress(plan: Plan) -> int:
	"""
	Compute a plan's completion percentage from its sub-tasks.

	A plan without sub-tasks is either done (100) or not (0).
	"""
	if not plan.sub_tasks:
		return 100 if plan.status == PlanStatus.COMPLETED else 0

	return percentage(plan.completed_sub_task_count(), len(plan.sub_tasks))

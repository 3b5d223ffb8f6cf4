"""Achievement catalog and unlock evaluation."""

import logging
from datetime import datetime
from typing import Callable, Optional

from .models import Achievement, Plan, Statistics

logger = logging.getLogger(__name__)

Predicate = Callable[[list[Plan], Statistics], bool]

ACHIEVEMENT_CATALOG: tuple[Achievement, ...] = (
	Achievement(
		id="first_plan",
		title="First Step",
		description="Create your first plan",
		icon="🎯",
	),
	Achievement(
		id="streak_7",
		title="One Week Strong",
		description="Complete plans 7 days in a row",
		icon="🔥",
	),
	Achievement(
		id="completion_90",
		title="Perfectionist",
		description="Reach a 90% completion rate over at least 10 plans",
		icon="⭐",
	),
	Achievement(
		id="total_50",
		title="Plan Master",
		description="Complete 50 plans in total",
		icon="🏆",
	),
)

PREDICATES: dict[str, Predicate] = {
	"first_plan": lambda plans, stats: len(plans) >= 1,
	"streak_7": lambda plans, stats: stats.current_streak >= 7,
	"completion_90": lambda plans, stats: stats.completion_rate >= 90 and stats.total_plans >= 10,
	"total_50": lambda plans, stats: stats.completed_plans >= 50,
}


def default_achievements() -> list[Achievement]:
	"""Fresh, all-locked copy of the catalog."""
	return [a.model_copy() for a in ACHIEVEMENT_CATALOG]


def evaluate_achievements(
	plans: list[Plan],
	statistics: Statistics,
	achievements: list[Achievement],
	now: Optional[datetime] = None,
) -> list[Achievement]:
	"""
	Unlock every locked achievement whose predicate now holds.

	Already-unlocked achievements are returned untouched, so calling this
	repeatedly never re-locks or re-stamps anything.
	"""
	now = now or datetime.now()
	result: list[Achievement] = []
	unlocked: list[str] = []

	for achievement in achievements:
		if achievement.is_unlocked:
			result.append(achievement)
			continue

		predicate = PREDICATES.get(achievement.id)
		if predicate is not None and predicate(plans, statistics):
			result.append(achievement.model_copy(update={"is_unlocked": True, "unlocked_at": now}))
			unlocked.append(achievement.id)
		else:
			result.append(achievement)

	if unlocked:
		logger.info("Unlocked achievements: %s", ", ".join(unlocked))
	return result

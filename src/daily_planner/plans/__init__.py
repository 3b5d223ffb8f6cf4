"""Plans module - planning-state engine: models, parser, statistics and store."""

from .achievements import default_achievements, evaluate_achievements
from .filters import filter_plans
from .models import (
	Achievement,
	FilterOptions,
	Plan,
	PlanDraft,
	PlannerState,
	PlanStatus,
	PlanType,
	Rejection,
	Statistics,
	SubTask,
	TimeRange,
)
from .parser import parse_natural_language
from .progress import calculate_progress
from .statistics import compute_statistics
from .store import PlanStore

__all__ = [
	"Achievement",
	"FilterOptions",
	"Plan",
	"PlanDraft",
	"PlannerState",
	"PlanStatus",
	"PlanStore",
	"PlanType",
	"Rejection",
	"Statistics",
	"SubTask",
	"TimeRange",
	"calculate_progress",
	"compute_statistics",
	"default_achievements",
	"evaluate_achievements",
	"filter_plans",
	"parse_natural_language",
]

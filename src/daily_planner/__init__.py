"""daily-planner - planning-state engine for a personal task and habit planner."""

from .plans import (
	FilterOptions,
	Plan,
	PlanStatus,
	PlanStore,
	PlanType,
	Rejection,
	parse_natural_language,
)

__version__ = "0.1.0"

__all__ = [
	"FilterOptions",
	"Plan",
	"PlanStatus",
	"PlanStore",
	"PlanType",
	"Rejection",
	"parse_natural_language",
]

"""
Plan Models - Pydantic schemas for the planner state.

Defines plans with their sub-tasks, the achievement catalog entries,
filter options, derived statistics and the persisted state blob.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class PlanType(str, Enum):
	"""Cadence of a plan."""
	DAILY = "daily"
	WEEKLY = "weekly"
	LONG_TERM = "long_term"


class PlanStatus(str, Enum):
	"""Status of a plan."""
	PENDING = "pending"
	IN_PROGRESS = "in_progress"
	COMPLETED = "completed"
	OVERDUE = "overdue"


class TimeRange(str, Enum):
	"""Creation-time window used by the filter."""
	TODAY = "today"
	WEEK = "week"
	MONTH = "month"
	ALL = "all"


ALL = "all"


class SubTask(BaseModel):
	"""A checklist item owned by a plan."""
	id: str
	title: str
	is_completed: bool = False
	created_at: datetime = Field(default_factory=datetime.now)
	completed_at: Optional[datetime] = None


class Plan(BaseModel):
	"""A user-defined task or habit."""
	id: str
	title: str
	description: Optional[str] = None
	type: PlanType = PlanType.DAILY
	status: PlanStatus = PlanStatus.PENDING
	start_date: datetime = Field(default_factory=datetime.now)
	end_date: Optional[datetime] = None
	is_repeating: bool = False
	repeat_interval: Optional[int] = Field(default=None, gt=0)
	estimated_duration: Optional[int] = Field(default=None, ge=0, description="Minutes")
	sub_tasks: list[SubTask] = Field(default_factory=list)
	progress: int = Field(default=0, ge=0, le=100)

	# Timestamps
	created_at: datetime = Field(default_factory=datetime.now)
	updated_at: datetime = Field(default_factory=datetime.now)
	completed_at: Optional[datetime] = None

	def get_sub_task(self, sub_task_id: str) -> Optional[SubTask]:
		"""Find a sub-task by id."""
		for sub_task in self.sub_tasks:
			if sub_task.id == sub_task_id:
				return sub_task
		return None

	def completed_sub_task_count(self) -> int:
		return sum(1 for s in self.sub_tasks if s.is_completed)


class Achievement(BaseModel):
	"""A one-way unlockable badge."""
	id: str
	title: str
	description: str
	icon: str
	is_unlocked: bool = False
	unlocked_at: Optional[datetime] = None


class FilterOptions(BaseModel):
	"""Declarative criteria applied to the plan list."""
	status: Union[PlanStatus, Literal["all"]] = ALL
	type: Union[PlanType, Literal["all"]] = ALL
	time_range: TimeRange = TimeRange.ALL

	def merged(self, **partial) -> "FilterOptions":
		"""Return a copy with the given fields replaced, unknown keys ignored."""
		known = {k: v for k, v in partial.items() if k in type(self).model_fields}
		data = self.model_dump()
		data.update(known)
		return FilterOptions.model_validate(data)


class CompletionBucket(BaseModel):
	"""Number of completions in one day, week or month."""
	label: str
	count: int = 0


class Statistics(BaseModel):
	"""Derived metrics over the plan collection. Never persisted."""
	total_plans: int = 0
	completed_plans: int = 0
	completion_rate: int = 0
	current_streak: int = 0
	longest_streak: int = 0
	daily_completions: list[CompletionBucket] = Field(default_factory=list)
	weekly_completions: list[CompletionBucket] = Field(default_factory=list)
	monthly_completions: list[CompletionBucket] = Field(default_factory=list)


class PlanDraft(BaseModel):
	"""Structured result of parsing free-form text."""
	title: str
	type: PlanType = PlanType.DAILY
	start_date: Optional[datetime] = None
	end_date: Optional[datetime] = None
	is_repeating: bool = False
	repeat_interval: Optional[int] = None


class PlanTemplate(BaseModel):
	"""A reusable starting point for a new plan."""
	id: str
	title: str
	description: str
	type: PlanType
	default_duration: int = Field(description="Minutes")
	sub_tasks: list[str] = Field(default_factory=list)


class PlannerState(BaseModel):
	"""Everything the persistence layer saves and restores."""
	plans: list[Plan] = Field(default_factory=list)
	filter_options: FilterOptions = Field(default_factory=FilterOptions)
	achievements: list[Achievement] = Field(default_factory=list)


@dataclass(frozen=True)
class Rejection:
	"""Validation failure returned to the caller instead of being raised."""
	field: str
	message: str

	def __str__(self) -> str:
		return f"{self.field}: {self.message}"

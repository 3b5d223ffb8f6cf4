"""
Plan Store - in-memory owner of plans, filter options and achievements.

Features:
- CRUD operations for plans and their sub-tasks
- Status transitions with completion timestamps
- Progress and achievement bookkeeping after each mutation
- Change notification for an external persistence sink
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from .achievements import default_achievements, evaluate_achievements
from .filters import filter_plans
from .models import (
	Achievement,
	FilterOptions,
	Plan,
	PlannerState,
	PlanStatus,
	PlanType,
	Rejection,
	Statistics,
	SubTask,
)
from .parser import parse_natural_language
from .progress import calculate_progress
from .statistics import compute_statistics
from .templates import get_template

logger = logging.getLogger(__name__)

ChangeListener = Callable[[PlannerState], None]

# Fields callers may change through update_plan
UPDATABLE_FIELDS = frozenset({
	"title",
	"description",
	"type",
	"status",
	"start_date",
	"end_date",
	"is_repeating",
	"repeat_interval",
	"estimated_duration",
	"sub_tasks",
})

ALLOWED_TRANSITIONS: dict[PlanStatus, frozenset[PlanStatus]] = {
	PlanStatus.PENDING: frozenset({PlanStatus.IN_PROGRESS, PlanStatus.COMPLETED}),
	PlanStatus.IN_PROGRESS: frozenset({PlanStatus.COMPLETED}),
	PlanStatus.COMPLETED: frozenset({PlanStatus.PENDING}),
	# Set by the UI only; the engine lets the plan leave it
	PlanStatus.OVERDUE: frozenset({PlanStatus.PENDING, PlanStatus.IN_PROGRESS, PlanStatus.COMPLETED}),
}


def generate_id() -> str:
	return uuid.uuid4().hex[:12]


def _rejection_from(error: ValidationError) -> Rejection:
	first = error.errors()[0]
	field = ".".join(str(part) for part in first.get("loc", ())) or "plan"
	return Rejection(field=field, message=first.get("msg", str(error)))


def _is_blank(value: Optional[str]) -> bool:
	return value is None or not str(value).strip()


def _coerce_status(value: Any) -> Union[PlanStatus, Rejection]:
	try:
		return PlanStatus(value)
	except ValueError:
		return Rejection(field="status", message=f"Unknown status: {value}")


class PlanStore:
	"""
	State container for one user's plans.

	Usage:
		store = PlanStore(on_change=snapshots.save)

		plan = store.quick_add("每天运动30分钟")
		store.add_sub_task(plan.id, "Warm up")
		store.toggle_plan_status(plan.id)

		stats = store.get_statistics()

	Mutations never raise for bad input: blank titles come back as a
	Rejection and unknown ids leave the collection unchanged.
	"""

	def __init__(
		self,
		state: Optional[PlannerState] = None,
		on_change: Optional[ChangeListener] = None,
		clock: Callable[[], datetime] = datetime.now,
	):
		state = state or PlannerState()
		self._plans: list[Plan] = [p.model_copy(deep=True) for p in state.plans]
		self._filter_options = state.filter_options.model_copy()
		self._achievements = self._seed_achievements(state.achievements)
		self._on_change = on_change
		self._clock = clock

	@staticmethod
	def _seed_achievements(loaded: list[Achievement]) -> list[Achievement]:
		"""Loaded achievements, with any catalog entry missing from them added locked."""
		by_id = {a.id: a.model_copy() for a in loaded}
		return [by_id.get(a.id, a) for a in default_achievements()]

	# -- readers --

	@property
	def plans(self) -> list[Plan]:
		"""Copies of all plans; edits go through the store methods."""
		return [p.model_copy(deep=True) for p in self._plans]

	@property
	def achievements(self) -> list[Achievement]:
		return [a.model_copy() for a in self._achievements]

	@property
	def filter_options(self) -> FilterOptions:
		return self._filter_options

	def get_plan(self, plan_id: str) -> Optional[Plan]:
		for plan in self._plans:
			if plan.id == plan_id:
				return plan.model_copy(deep=True)
		return None

	def get_filtered_plans(self) -> list[Plan]:
		"""Plans matching the current filter options."""
		return [p.model_copy(deep=True) for p in filter_plans(self._plans, self._filter_options, self._clock())]

	def get_statistics(self) -> Statistics:
		return compute_statistics(self._plans, self._clock())

	def snapshot(self) -> PlannerState:
		"""Deep copy of the full state for persistence."""
		return PlannerState(
			plans=[p.model_copy(deep=True) for p in self._plans],
			filter_options=self._filter_options.model_copy(),
			achievements=[a.model_copy() for a in self._achievements],
		)

	# -- internals --

	def _index(self, plan_id: str) -> Optional[int]:
		for i, plan in enumerate(self._plans):
			if plan.id == plan_id:
				return i
		return None

	def _notify(self) -> None:
		"""Hand the state to the listener; its failures never reach the caller."""
		if self._on_change is None:
			return
		try:
			self._on_change(self.snapshot())
		except Exception:
			logger.warning("State change listener failed", exc_info=True)

	def _check_achievements(self) -> None:
		now = self._clock()
		stats = compute_statistics(self._plans, now)
		self._achievements = evaluate_achievements(self._plans, stats, self._achievements, now)

	def _replace(self, index: int, plan: Plan) -> Plan:
		"""Store plan at index and hand back a copy for the caller."""
		self._plans[index] = plan
		return plan.model_copy(deep=True)

	def _with_status(self, plan: Plan, status: PlanStatus, now: datetime) -> Union[Plan, Rejection]:
		"""Copy of plan moved to status, or a Rejection if the move is not allowed."""
		if status == plan.status:
			return plan
		if status not in ALLOWED_TRANSITIONS[plan.status]:
			return Rejection(
				field="status",
				message=f"Cannot move plan from {plan.status.value} to {status.value}",
			)

		updated = plan.model_copy(update={
			"status": status,
			"completed_at": now if status == PlanStatus.COMPLETED else None,
			"updated_at": now,
		})
		updated.progress = calculate_progress(updated)
		return updated

	# -- plan operations --

	def add_plan(
		self,
		title: str,
		type: PlanType = PlanType.DAILY,
		sub_tasks: Optional[list[Union[str, SubTask]]] = None,
		**fields: Any,
	) -> Union[Plan, Rejection]:
		"""
		Create a plan and append it to the collection.

		Args:
			title: Plan title (must not be blank)
			type: Plan cadence
			sub_tasks: Sub-task titles or SubTask objects
			**fields: Any other Plan field (description, start_date, end_date,
				is_repeating, repeat_interval, estimated_duration, status)

		Returns:
			The new Plan, or a Rejection when the input is invalid
		"""
		if _is_blank(title):
			return Rejection(field="title", message="Plan title is required")

		now = self._clock()
		tasks = [
			s.model_copy() if isinstance(s, SubTask) else SubTask(id=generate_id(), title=s, created_at=now)
			for s in (sub_tasks or [])
		]
		data = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS and v is not None}
		data.setdefault("start_date", now)

		try:
			plan = Plan(
				**data,
				id=generate_id(),
				title=title,
				type=type,
				sub_tasks=tasks,
				progress=0,
				created_at=now,
				updated_at=now,
			)
		except ValidationError as e:
			return _rejection_from(e)

		if plan.status == PlanStatus.OVERDUE:
			return Rejection(field="status", message="New plans cannot start overdue")
		if plan.status == PlanStatus.COMPLETED:
			plan.completed_at = now

		self._plans.append(plan)
		logger.info("Created plan %s (%s): %s", plan.id, plan.type.value, plan.title)

		self._check_achievements()
		self._notify()
		return plan.model_copy(deep=True)

	def quick_add(self, text: str) -> Union[Plan, Rejection]:
		"""Create a plan straight from free-form text."""
		if _is_blank(text):
			return Rejection(field="text", message="Quick-add text is required")

		draft = parse_natural_language(text, self._clock())
		return self.add_plan(
			draft.title,
			type=draft.type,
			status=PlanStatus.PENDING,
			start_date=draft.start_date,
			end_date=draft.end_date,
			is_repeating=draft.is_repeating,
			repeat_interval=draft.repeat_interval,
		)

	def add_plan_from_template(self, template_id: str) -> Union[Plan, Rejection, None]:
		"""Create a plan pre-filled from a built-in template; None for unknown ids."""
		template = get_template(template_id)
		if template is None:
			logger.debug("Unknown template: %s", template_id)
			return None

		return self.add_plan(
			template.title,
			type=template.type,
			sub_tasks=list(template.sub_tasks),
			description=template.description,
			estimated_duration=template.default_duration,
		)

	def update_plan(self, plan_id: str, **updates: Any) -> Union[Plan, Rejection, None]:
		"""
		Merge field updates into a plan.

		Unknown or read-only keys (id, created_at, progress, ...) are
		ignored. Progress is recomputed only when sub_tasks change; a status
		change goes through the same transition rules as update_plan_status.

		Returns:
			Updated Plan, a Rejection, or None if the plan does not exist
		"""
		index = self._index(plan_id)
		if index is None:
			return None

		ignored = set(updates) - UPDATABLE_FIELDS
		if ignored:
			logger.debug("Ignoring read-only plan fields: %s", ", ".join(sorted(ignored)))
		changes = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}

		if "title" in changes and _is_blank(changes["title"]):
			return Rejection(field="title", message="Plan title is required")

		now = self._clock()
		current = self._plans[index]
		status = changes.pop("status", None)

		data = current.model_dump()
		data.update(changes)
		data["updated_at"] = now
		try:
			updated = Plan.model_validate(data)
		except ValidationError as e:
			return _rejection_from(e)

		if "sub_tasks" in changes:
			updated.progress = calculate_progress(updated)

		status_changed = False
		if status is not None:
			status = _coerce_status(status)
			if isinstance(status, Rejection):
				return status
			moved = self._with_status(updated, status, now)
			if isinstance(moved, Rejection):
				return moved
			status_changed = moved.status != current.status
			updated = moved

		result = self._replace(index, updated)
		logger.info("Updated plan %s", plan_id)

		if status_changed:
			self._check_achievements()
		self._notify()
		return result

	def delete_plan(self, plan_id: str) -> bool:
		"""Remove a plan and its sub-tasks. Returns False if it did not exist."""
		index = self._index(plan_id)
		if index is None:
			return False

		del self._plans[index]
		logger.info("Deleted plan %s", plan_id)
		self._notify()
		return True

	def update_plan_status(self, plan_id: str, status: PlanStatus) -> Union[Plan, Rejection, None]:
		"""Move a plan to a new status."""
		index = self._index(plan_id)
		if index is None:
			return None

		target = _coerce_status(status)
		if isinstance(target, Rejection):
			return target

		current = self._plans[index]
		moved = self._with_status(current, target, self._clock())
		if isinstance(moved, Rejection):
			return moved
		if moved is current:
			return current.model_copy(deep=True)

		result = self._replace(index, moved)
		logger.info("Plan %s: %s -> %s", plan_id, current.status.value, moved.status.value)

		self._check_achievements()
		self._notify()
		return result

	def toggle_plan_status(self, plan_id: str) -> Union[Plan, Rejection, None]:
		"""Completed plans go back to pending; anything else is completed."""
		plan = self.get_plan(plan_id)
		if plan is None:
			return None

		target = PlanStatus.PENDING if plan.status == PlanStatus.COMPLETED else PlanStatus.COMPLETED
		return self.update_plan_status(plan_id, target)

	# -- sub-task operations --

	def _mutate_sub_tasks(
		self,
		plan_id: str,
		mutate: Callable[[list[SubTask], datetime], list[SubTask]],
	) -> Optional[Plan]:
		index = self._index(plan_id)
		if index is None:
			return None

		now = self._clock()
		current = self._plans[index]
		updated = current.model_copy(update={
			"sub_tasks": mutate([s.model_copy() for s in current.sub_tasks], now),
			"updated_at": now,
		})
		updated.progress = calculate_progress(updated)

		result = self._replace(index, updated)
		self._notify()
		return result

	def add_sub_task(self, plan_id: str, title: str) -> Union[SubTask, Rejection, None]:
		"""Append a sub-task to a plan."""
		if _is_blank(title):
			return Rejection(field="title", message="Sub-task title is required")

		created: list[SubTask] = []

		def append(sub_tasks: list[SubTask], now: datetime) -> list[SubTask]:
			sub_task = SubTask(id=generate_id(), title=title, created_at=now)
			created.append(sub_task)
			return [*sub_tasks, sub_task]

		if self._mutate_sub_tasks(plan_id, append) is None:
			return None
		logger.debug("Added sub-task %s to plan %s", created[0].id, plan_id)
		return created[0].model_copy()

	def _has_sub_task(self, plan_id: str, sub_task_id: str) -> bool:
		plan = self.get_plan(plan_id)
		return plan is not None and plan.get_sub_task(sub_task_id) is not None

	def toggle_sub_task(self, plan_id: str, sub_task_id: str) -> Optional[Plan]:
		"""Flip a sub-task's completion flag."""
		if not self._has_sub_task(plan_id, sub_task_id):
			return None

		def toggle(sub_tasks: list[SubTask], now: datetime) -> list[SubTask]:
			for sub_task in sub_tasks:
				if sub_task.id == sub_task_id:
					sub_task.is_completed = not sub_task.is_completed
					sub_task.completed_at = now if sub_task.is_completed else None
			return sub_tasks

		return self._mutate_sub_tasks(plan_id, toggle)

	def delete_sub_task(self, plan_id: str, sub_task_id: str) -> Optional[Plan]:
		"""Remove a sub-task from a plan."""
		if not self._has_sub_task(plan_id, sub_task_id):
			return None

		return self._mutate_sub_tasks(
			plan_id,
			lambda sub_tasks, now: [s for s in sub_tasks if s.id != sub_task_id],
		)

	# -- filter --

	def set_filter(self, **partial: Any) -> Union[FilterOptions, Rejection]:
		"""Merge the given fields into the current filter options."""
		try:
			self._filter_options = self._filter_options.merged(**partial)
		except ValidationError as e:
			return _rejection_from(e)
		self._notify()
		return self._filter_options

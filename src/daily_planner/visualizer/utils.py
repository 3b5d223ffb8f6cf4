"""Shared utilities for visualizer views."""

from datetime import datetime
from typing import Optional

from ..plans.models import Plan, PlanStatus, PlanType

STATUS_STYLES = {
	PlanStatus.PENDING: "dim",
	PlanStatus.IN_PROGRESS: "yellow",
	PlanStatus.COMPLETED: "green",
	PlanStatus.OVERDUE: "red",
}

STATUS_ICONS = {
	PlanStatus.PENDING: "[ ]",
	PlanStatus.IN_PROGRESS: "[~]",
	PlanStatus.COMPLETED: "[x]",
	PlanStatus.OVERDUE: "[!]",
}

TYPE_LABELS = {
	PlanType.DAILY: "daily",
	PlanType.WEEKLY: "weekly",
	PlanType.LONG_TERM: "long-term",
}


def display_status(plan: Plan, now: Optional[datetime] = None) -> PlanStatus:
	"""
	Status to show for a plan.

	Unfinished plans past their end date are labelled overdue here;
	the stored status is never changed.
	"""
	now = now or datetime.now()
	if plan.status != PlanStatus.COMPLETED and plan.end_date is not None and plan.end_date < now:
		return PlanStatus.OVERDUE
	return plan.status


def format_status(status: PlanStatus) -> str:
	"""Status with its Rich markup."""
	style = STATUS_STYLES.get(status, "")
	label = f"{STATUS_ICONS.get(status, '[ ]')} {status.value}"
	# Escape the opening bracket so Rich does not read the icon as markup
	label = label.replace("[", "\\[")
	return f"[{style}]{label}[/{style}]" if style else label


def format_date(moment: Optional[datetime], with_time: bool = False) -> str:
	if moment is None:
		return "-"
	return moment.strftime("%Y-%m-%d %H:%M" if with_time else "%Y-%m-%d")


def format_timestamp(moment: Optional[datetime], now: Optional[datetime] = None) -> str:
	"""Format a timestamp as relative time (e.g. '2m ago') or absolute."""
	if moment is None:
		return "-"
	now = now or datetime.now()
	total_secs = int((now - moment).total_seconds())

	if total_secs < 0:
		return format_date(moment, with_time=True)
	if total_secs < 60:
		return f"{total_secs}s ago"
	if total_secs < 3600:
		return f"{total_secs // 60}m ago"
	if total_secs < 86400:
		return f"{total_secs // 3600}h ago"
	return f"{total_secs // 86400}d ago"


def progress_bar(percent: int, width: int = 10) -> str:
	"""Text bar like '#####-----  50%'."""
	percent = max(0, min(100, percent))
	filled = percent * width // 100
	return f"{'#' * filled}{'-' * (width - filled)} {percent:>3}%"

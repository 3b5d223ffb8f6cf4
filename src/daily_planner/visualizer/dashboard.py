"""Combined dashboard view."""

from typing import Optional

from rich.console import Console

from ..plans.store import PlanStore
from .plan_views import render_plan_list
from .stats_views import render_achievements, render_statistics


def render_dashboard(store: PlanStore, console: Optional[Console] = None) -> None:
	"""Render statistics, the filtered plan list and achievements."""
	console = console or Console()

	console.print()
	console.rule("[bold cyan]Planner Dashboard[/bold cyan]")
	console.print()

	render_statistics(store.get_statistics(), console=console)
	console.print()

	options = store.filter_options
	title = f"Plans (status={_label(options.status)}, type={_label(options.type)}, range={options.time_range.value})"
	render_plan_list(store.get_filtered_plans(), console=console, title=title)
	console.print()

	render_achievements(store.achievements, console=console)
	console.print()


def _label(value) -> str:
	return getattr(value, "value", value)

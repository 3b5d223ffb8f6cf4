"""Rich views for plan lists and plan details."""

from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from ..plans.models import Plan, PlanDraft
from .utils import TYPE_LABELS, display_status, format_date, format_status, format_timestamp, progress_bar


def render_plan_list(
	plans: list[Plan],
	console: Optional[Console] = None,
	now: Optional[datetime] = None,
	title: str = "Plans",
) -> None:
	"""Render a table of plans."""
	console = console or Console()

	if not plans:
		console.print("[dim]No plans match the current filter.[/dim]")
		return

	table = Table(title=f"{title} ({len(plans)})")
	table.add_column("ID", style="cyan")
	table.add_column("Title")
	table.add_column("Type")
	table.add_column("Status")
	table.add_column("Progress")
	table.add_column("Ends")

	for plan in plans:
		table.add_row(
			escape(plan.id),
			escape(plan.title),
			TYPE_LABELS[plan.type],
			format_status(display_status(plan, now)),
			progress_bar(plan.progress),
			format_date(plan.end_date),
		)

	console.print(table)


def render_plan_detail(plan: Plan, console: Optional[Console] = None, now: Optional[datetime] = None) -> None:
	"""Render a plan summary panel followed by its sub-task tree."""
	console = console or Console()

	lines = [f"[bold]{escape(plan.title)}[/bold]"]
	if plan.description:
		lines.append(f"[dim]{escape(plan.description)}[/dim]")
	lines.append("")
	lines.append(f"[bold]Type:[/bold] {TYPE_LABELS[plan.type]}")
	lines.append(f"[bold]Status:[/bold] {format_status(display_status(plan, now))}")
	lines.append(f"[bold]Progress:[/bold] {progress_bar(plan.progress, width=20)}")
	lines.append(f"[bold]Dates:[/bold] {format_date(plan.start_date)} -> {format_date(plan.end_date)}")
	if plan.is_repeating:
		lines.append(f"[bold]Repeats:[/bold] every {plan.repeat_interval or 1}")
	if plan.estimated_duration:
		lines.append(f"[bold]Estimated:[/bold] {plan.estimated_duration} min")
	lines.append(f"[bold]Updated:[/bold] {format_timestamp(plan.updated_at, now)}")
	if plan.completed_at:
		lines.append(f"[bold]Completed:[/bold] {format_date(plan.completed_at, with_time=True)}")

	console.print(Panel("\n".join(lines), title=f"Plan: {escape(plan.id)}", border_style="cyan"))

	if plan.sub_tasks:
		tree = Tree(
			f"[bold]Sub-tasks[/bold] "
			f"[dim]({plan.completed_sub_task_count()}/{len(plan.sub_tasks)})[/dim]"
		)
		for sub_task in plan.sub_tasks:
			icon = "[green]\\[x][/green]" if sub_task.is_completed else "[dim]\\[ ][/dim]"
			tree.add(f"{icon} {escape(sub_task.title)} [dim]({escape(sub_task.id)})[/dim]")
		console.print(tree)


def render_draft(draft: PlanDraft, console: Optional[Console] = None) -> None:
	"""Render what the parser extracted from a piece of text."""
	console = console or Console()

	lines = [
		f"[bold]Title:[/bold] {escape(draft.title)}",
		f"[bold]Type:[/bold] {TYPE_LABELS[draft.type]}",
		f"[bold]Start:[/bold] {format_date(draft.start_date, with_time=True)}",
		f"[bold]End:[/bold] {format_date(draft.end_date, with_time=True)}",
		f"[bold]Repeating:[/bold] {'yes' if draft.is_repeating else 'no'}",
	]
	if draft.repeat_interval:
		lines.append(f"[bold]Interval:[/bold] {draft.repeat_interval}")

	console.print(Panel("\n".join(lines), title="Parsed plan", border_style="magenta"))

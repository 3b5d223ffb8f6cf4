"""Rich views for statistics, achievements and templates."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..plans.models import Achievement, CompletionBucket, PlanTemplate, Statistics
from ..plans.statistics import PeriodSummary
from .utils import TYPE_LABELS, format_date


def _rate_style(rate: int) -> str:
	return "green" if rate >= 90 else ("yellow" if rate >= 50 else "red")


def render_statistics(stats: Statistics, console: Optional[Console] = None, recent_days: int = 7) -> None:
	"""Render headline numbers and the most recent daily completions."""
	console = console or Console()

	style = _rate_style(stats.completion_rate)
	summary = (
		f"[bold]Plans:[/bold] {stats.completed_plans}/{stats.total_plans} completed  |  "
		f"[bold]Rate:[/bold] [{style}]{stats.completion_rate}%[/{style}]  |  "
		f"[bold]Streak:[/bold] {stats.current_streak} (best {stats.longest_streak})"
	)
	console.print(Panel(summary, title="Statistics", border_style="green"))

	if stats.daily_completions:
		render_completions(stats.daily_completions[-recent_days:], "Recent completions", console)


def render_completions(buckets: list[CompletionBucket], title: str, console: Optional[Console] = None) -> None:
	"""Render completion counts as a small bar table."""
	console = console or Console()

	table = Table(title=title)
	table.add_column("Period")
	table.add_column("Count", justify="right")
	table.add_column("")

	for bucket in buckets:
		table.add_row(bucket.label, str(bucket.count), "[blue]" + "#" * bucket.count + "[/blue]")

	console.print(table)


def render_achievements(achievements: list[Achievement], console: Optional[Console] = None) -> None:
	"""Render the achievement catalog with unlock state."""
	console = console or Console()

	table = Table(title="Achievements")
	table.add_column("", justify="center")
	table.add_column("Title")
	table.add_column("Description")
	table.add_column("Unlocked")

	for a in achievements:
		if a.is_unlocked:
			unlocked = f"[green]{format_date(a.unlocked_at)}[/green]"
		else:
			unlocked = "[dim]locked[/dim]"
		table.add_row(a.icon, escape(a.title), escape(a.description), unlocked)

	console.print(table)


def render_period_summary(summary: PeriodSummary, console: Optional[Console] = None) -> None:
	"""Render status and type counts for one period."""
	console = console or Console()

	table = Table(title=f"This {summary.period}")
	table.add_column("Metric")
	table.add_column("Value", justify="right")

	table.add_row("Total", str(summary.total))
	table.add_row("Completed", str(summary.completed))
	table.add_row("In progress", str(summary.in_progress))
	table.add_row("Pending", str(summary.pending))
	table.add_row("Overdue", str(summary.overdue))
	style = _rate_style(summary.completion_rate)
	table.add_row("Completion rate", f"[{style}]{summary.completion_rate}%[/{style}]")
	for plan_type, count in summary.by_type.items():
		table.add_row(f"Type: {plan_type}", str(count))

	console.print(table)


def render_templates(templates: list[PlanTemplate], console: Optional[Console] = None) -> None:
	console = console or Console()

	table = Table(title="Templates")
	table.add_column("ID", style="cyan")
	table.add_column("Title")
	table.add_column("Type")
	table.add_column("Minutes", justify="right")
	table.add_column("Sub-tasks", justify="right")

	for t in templates:
		table.add_row(escape(t.id), escape(t.title), TYPE_LABELS[t.type], str(t.default_duration), str(len(t.sub_tasks)))

	console.print(table)

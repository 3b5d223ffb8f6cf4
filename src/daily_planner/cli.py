"""CLI for daily-planner: quick-add, plan and sub-task management, stats and achievements."""

import argparse
import json
import sys
from datetime import datetime, timedelta
from pathlib import Path

from .config import load_config
from .logging_config import setup_logging
from .persistence import open_store
from .plans.models import ALL, PlanStatus, PlanType, Rejection, TimeRange
from .plans.parser import end_of_day, parse_natural_language
from .plans.statistics import PERIODS, build_report, summarize_period
from .plans.store import PlanStore
from .plans.templates import PLAN_TEMPLATES


def _open_store(args: argparse.Namespace) -> PlanStore:
	"""Store backed by the configured snapshot database."""
	config = load_config()
	setup_logging(level=getattr(args, "log_level", None) or config.log_level, log_dir=config.log_dir)
	return open_store(str(config.state_db_path))


def _fail(message: str) -> None:
	print(message, file=sys.stderr)
	sys.exit(1)


def _check(result, what: str):
	"""Exit on a rejection or a missing plan; otherwise hand the result back."""
	if isinstance(result, Rejection):
		_fail(f"Rejected: {result}")
	if result is None:
		_fail(f"{what} not found.")
	return result


def _parse_date(value: str) -> datetime:
	try:
		return end_of_day(datetime.strptime(value, "%Y-%m-%d"))
	except ValueError:
		raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def cmd_add(args: argparse.Namespace) -> None:
	"""Quick-add a plan from free-form text."""
	store = _open_store(args)
	text = " ".join(args.text)
	if args.plain:
		plan = store.add_plan(text, type=PlanType.DAILY, end_date=datetime.now() + timedelta(days=1))
	else:
		plan = store.quick_add(text)
	plan = _check(plan, "Plan")
	print(f"Created {plan.type.value} plan {plan.id}: {plan.title}")


def cmd_new(args: argparse.Namespace) -> None:
	"""Create a plan from explicit fields or a template."""
	store = _open_store(args)

	if args.template:
		plan = _check(store.add_plan_from_template(args.template), f"Template '{args.template}'")
	else:
		plan = _check(
			store.add_plan(
				args.title or "",
				type=PlanType(args.type),
				sub_tasks=args.subtask or [],
				description=args.description,
				end_date=args.end,
				is_repeating=args.repeat is not None,
				repeat_interval=args.repeat,
				estimated_duration=args.duration,
			),
			"Plan",
		)
	print(f"Created {plan.type.value} plan {plan.id}: {plan.title}")


def cmd_parse(args: argparse.Namespace) -> None:
	"""Show what quick-add would extract, without saving."""
	from .visualizer.plan_views import render_draft

	render_draft(parse_natural_language(" ".join(args.text)))


def cmd_list(args: argparse.Namespace) -> None:
	"""List plans matching the filter; filter flags are remembered."""
	from .visualizer.plan_views import render_plan_list

	store = _open_store(args)
	partial = {}
	if args.status:
		partial["status"] = args.status
	if args.type:
		partial["type"] = args.type
	if args.range:
		partial["time_range"] = args.range
	if partial:
		_check(store.set_filter(**partial), "Filter")

	render_plan_list(store.get_filtered_plans())


def cmd_show(args: argparse.Namespace) -> None:
	from .visualizer.plan_views import render_plan_detail

	store = _open_store(args)
	render_plan_detail(_check(store.get_plan(args.plan_id), f"Plan '{args.plan_id}'"))


def cmd_start(args: argparse.Namespace) -> None:
	store = _open_store(args)
	plan = _check(store.update_plan_status(args.plan_id, PlanStatus.IN_PROGRESS), f"Plan '{args.plan_id}'")
	print(f"Plan {plan.id} is {plan.status.value}")


def cmd_done(args: argparse.Namespace) -> None:
	"""Toggle a plan between completed and pending."""
	store = _open_store(args)
	plan = _check(store.toggle_plan_status(args.plan_id), f"Plan '{args.plan_id}'")
	print(f"Plan {plan.id} is {plan.status.value}")


def cmd_delete(args: argparse.Namespace) -> None:
	store = _open_store(args)
	if not store.delete_plan(args.plan_id):
		_fail(f"Plan '{args.plan_id}' not found.")
	print(f"Deleted plan {args.plan_id}")


def cmd_subtask(args: argparse.Namespace) -> None:
	"""Add, toggle or delete a sub-task."""
	store = _open_store(args)
	action = getattr(args, "subtask_action", None)

	if action == "add":
		sub_task = _check(store.add_sub_task(args.plan_id, " ".join(args.title)), f"Plan '{args.plan_id}'")
		print(f"Added sub-task {sub_task.id}")
	elif action == "toggle":
		plan = _check(store.toggle_sub_task(args.plan_id, args.sub_task_id), "Sub-task")
		print(f"Plan {plan.id} progress: {plan.progress}%")
	elif action == "delete":
		plan = _check(store.delete_sub_task(args.plan_id, args.sub_task_id), "Sub-task")
		print(f"Plan {plan.id} progress: {plan.progress}%")
	else:
		print("Usage: daily-planner subtask {add|toggle|delete}")
		sys.exit(1)


def cmd_stats(args: argparse.Namespace) -> None:
	from .visualizer.stats_views import render_completions, render_period_summary, render_statistics

	store = _open_store(args)
	stats = store.get_statistics()
	render_statistics(stats)
	if args.period:
		render_period_summary(summarize_period(store.plans, args.period))
	if args.monthly and stats.monthly_completions:
		render_completions(stats.monthly_completions, "Completions by month")


def cmd_achievements(args: argparse.Namespace) -> None:
	from .visualizer.stats_views import render_achievements

	store = _open_store(args)
	render_achievements(store.achievements)


def cmd_templates(args: argparse.Namespace) -> None:
	from .visualizer.stats_views import render_templates

	render_templates(list(PLAN_TEMPLATES))


def cmd_export(args: argparse.Namespace) -> None:
	"""Write an analytics report as JSON."""
	store = _open_store(args)
	now = datetime.now()
	report = build_report(store.plans, args.period, now)

	output = Path(args.output or f"plan-analytics-{now.strftime('%Y-%m-%d')}.json")
	with open(output, "w", encoding="utf-8") as f:
		json.dump(report, f, indent=2, ensure_ascii=False)
	print(f"Exported {args.period} report to {output}")


def cmd_dashboard(args: argparse.Namespace) -> None:
	from .visualizer.dashboard import render_dashboard

	render_dashboard(_open_store(args))


def main() -> None:
	"""CLI entry point."""
	parser = argparse.ArgumentParser(
		prog="daily-planner",
		description="Personal task and habit planner",
	)
	parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING or ERROR")
	subparsers = parser.add_subparsers(dest="command")

	# add
	add_parser = subparsers.add_parser("add", help="Quick-add a plan from free-form text")
	add_parser.add_argument("text", nargs="+", help="e.g. '每天运动30分钟' or 'read every day'")
	add_parser.add_argument("--plain", action="store_true", help="Use the text as the title without parsing; due in 24 hours")
	add_parser.set_defaults(func=cmd_add)

	# new
	new_parser = subparsers.add_parser("new", help="Create a plan from explicit fields")
	new_parser.add_argument("title", nargs="?", default=None, help="Plan title")
	new_parser.add_argument("--type", choices=[t.value for t in PlanType], default=PlanType.DAILY.value)
	new_parser.add_argument("--description", type=str, default=None)
	new_parser.add_argument("--end", type=_parse_date, default=None, help="End date (YYYY-MM-DD)")
	new_parser.add_argument("--repeat", type=int, default=None, help="Repeat every N periods")
	new_parser.add_argument("--duration", type=int, default=None, help="Estimated minutes")
	new_parser.add_argument("--subtask", action="append", default=None, help="Sub-task title (repeatable)")
	new_parser.add_argument("--template", type=str, default=None, help="Start from a template id")
	new_parser.set_defaults(func=cmd_new)

	# parse
	parse_parser = subparsers.add_parser("parse", help="Preview how text would be parsed")
	parse_parser.add_argument("text", nargs="+")
	parse_parser.set_defaults(func=cmd_parse)

	# list
	list_parser = subparsers.add_parser("list", help="List plans")
	list_parser.add_argument("--status", choices=[ALL] + [s.value for s in PlanStatus], default=None)
	list_parser.add_argument("--type", choices=[ALL] + [t.value for t in PlanType], default=None)
	list_parser.add_argument("--range", choices=[r.value for r in TimeRange], default=None)
	list_parser.set_defaults(func=cmd_list)

	# show / start / done / delete
	for name, func, help_text in (
		("show", cmd_show, "Show plan details"),
		("start", cmd_start, "Mark a plan in progress"),
		("done", cmd_done, "Toggle a plan between completed and pending"),
		("delete", cmd_delete, "Delete a plan"),
	):
		plan_parser = subparsers.add_parser(name, help=help_text)
		plan_parser.add_argument("plan_id")
		plan_parser.set_defaults(func=func)

	# subtask
	subtask_parser = subparsers.add_parser("subtask", help="Manage sub-tasks")
	subtask_subparsers = subtask_parser.add_subparsers(dest="subtask_action")

	subtask_add = subtask_subparsers.add_parser("add", help="Add a sub-task")
	subtask_add.add_argument("plan_id")
	subtask_add.add_argument("title", nargs="+")
	subtask_add.set_defaults(func=cmd_subtask)

	for name, help_text in (("toggle", "Toggle a sub-task"), ("delete", "Delete a sub-task")):
		sub = subtask_subparsers.add_parser(name, help=help_text)
		sub.add_argument("plan_id")
		sub.add_argument("sub_task_id")
		sub.set_defaults(func=cmd_subtask)

	subtask_parser.set_defaults(func=cmd_subtask)

	# stats
	stats_parser = subparsers.add_parser("stats", help="Completion statistics")
	stats_parser.add_argument("--period", choices=PERIODS, default=None, help="Add a summary for this period")
	stats_parser.add_argument("--monthly", action="store_true", help="Show completions by month")
	stats_parser.set_defaults(func=cmd_stats)

	# achievements / templates / dashboard
	subparsers.add_parser("achievements", help="Show achievements").set_defaults(func=cmd_achievements)
	subparsers.add_parser("templates", help="List plan templates").set_defaults(func=cmd_templates)
	subparsers.add_parser("dashboard", help="Combined dashboard").set_defaults(func=cmd_dashboard)

	# export
	export_parser = subparsers.add_parser("export", help="Export an analytics report as JSON")
	export_parser.add_argument("--period", choices=PERIODS, default="month")
	export_parser.add_argument("--output", type=str, default=None, help="Output file path")
	export_parser.set_defaults(func=cmd_export)

	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	args.func(args)

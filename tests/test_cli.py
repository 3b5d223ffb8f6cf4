"""Tests for the daily-planner CLI."""

import json
import logging
import os
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from daily_planner.cli import main
from daily_planner.persistence import SnapshotStore


@pytest.fixture
def env(tmp_path: Path):
	"""Point config and data dirs at a temp directory."""
	with patch.dict(os.environ, {
		"DAILY_PLANNER_DATA_DIR": str(tmp_path / "data"),
		"DAILY_PLANNER_CONFIG_DIR": str(tmp_path / "config"),
	}):
		yield tmp_path
	logger = logging.getLogger("daily_planner")
	for handler in list(logger.handlers):
		logger.removeHandler(handler)
		handler.close()


def _run(*argv: str) -> None:
	with patch("sys.argv", ["daily-planner", *argv]):
		main()


def _saved_plans(tmp_path: Path):
	state = SnapshotStore(str(tmp_path / "data" / "planner.db")).load()
	return state.plans if state else []


@pytest.mark.parametrize(
	"argv",
	[
		["--help"],
		["add", "--help"],
		["new", "--help"],
		["list", "--help"],
		["subtask", "add", "--help"],
		["stats", "--help"],
		["export", "--help"],
	],
)
def test_subparsers_registered(argv):
	with patch("sys.argv", ["daily-planner", *argv]):
		with pytest.raises(SystemExit) as e:
			main()
		assert e.value.code == 0


def test_no_command_prints_help(capsys):
	with patch("sys.argv", ["daily-planner"]):
		with pytest.raises(SystemExit) as e:
			main()
	assert e.value.code == 1
	assert "daily-planner" in capsys.readouterr().out


def test_quick_add(env, capsys):
	_run("add", "每天运动30分钟")
	out = capsys.readouterr().out
	assert "Created daily plan" in out
	assert "运动30分钟" in out

	plans = _saved_plans(env)
	assert len(plans) == 1
	assert plans[0].is_repeating is True


def test_plain_add_keeps_text(env):
	_run("add", "--plain", "每天运动")
	plan = _saved_plans(env)[0]
	assert plan.title == "每天运动"
	assert plan.is_repeating is False


def test_plain_add_is_due_in_a_day(env):
	_run("add", "--plain", "Pay rent")
	plan = _saved_plans(env)[0]
	assert plan.end_date is not None
	assert timedelta(hours=23, minutes=59) < plan.end_date - plan.created_at <= timedelta(days=1)


def test_blank_quick_add_is_rejected(env, capsys):
	with pytest.raises(SystemExit) as e:
		_run("add", "  ")
	assert e.value.code == 1
	assert "Rejected" in capsys.readouterr().err
	assert _saved_plans(env) == []


def test_new_with_fields(env):
	_run("new", "Write report", "--type", "weekly", "--end", "2026-12-31", "--subtask", "Outline", "--subtask", "Draft")
	plan = _saved_plans(env)[0]
	assert plan.type.value == "weekly"
	assert plan.end_date.date().isoformat() == "2026-12-31"
	assert [s.title for s in plan.sub_tasks] == ["Outline", "Draft"]


def test_new_from_template(env):
	_run("new", "--template", "fitness-plan")
	plan = _saved_plans(env)[0]
	assert plan.title == "Fitness plan"
	assert len(plan.sub_tasks) == 3


def test_new_without_title_is_rejected(env):
	with pytest.raises(SystemExit) as e:
		_run("new")
	assert e.value.code == 1


def test_done_and_subtasks(env, capsys):
	_run("add", "--plain", "Gym")
	plan_id = _saved_plans(env)[0].id

	_run("subtask", "add", plan_id, "Warm", "up")
	sub_task_id = _saved_plans(env)[0].sub_tasks[0].id
	_run("subtask", "toggle", plan_id, sub_task_id)
	assert _saved_plans(env)[0].progress == 100

	_run("done", plan_id)
	assert _saved_plans(env)[0].status.value == "completed"
	assert "completed" in capsys.readouterr().out


def test_unknown_plan_exits(env, capsys):
	with pytest.raises(SystemExit) as e:
		_run("done", "missing")
	assert e.value.code == 1
	assert "not found" in capsys.readouterr().err


def test_list_remembers_filter(env, capsys):
	_run("add", "--plain", "Read")
	_run("list", "--status", "completed")
	assert "No plans match" in capsys.readouterr().out

	_run("list")
	assert "No plans match" in capsys.readouterr().out

	_run("list", "--status", "all")
	assert "Read" in capsys.readouterr().out


def test_delete(env):
	_run("add", "--plain", "Read")
	plan_id = _saved_plans(env)[0].id
	_run("delete", plan_id)
	assert _saved_plans(env) == []


def test_export(env, capsys):
	_run("add", "--plain", "Read")
	output = env / "report.json"
	_run("export", "--period", "week", "--output", str(output))

	report = json.loads(output.read_text(encoding="utf-8"))
	assert report["timeRange"] == "week"
	assert report["stats"]["total"] == 1


def test_views_run(env, capsys):
	_run("add", "--plain", "Read")
	_run("stats", "--period", "month")
	_run("achievements")
	_run("templates")
	_run("parse", "明天交报告")
	out = capsys.readouterr().out
	assert "Statistics" in out
	assert "Achievements" in out
	assert "morning-routine" in out
	assert "交报告" in out

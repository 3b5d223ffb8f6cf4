"""Visualizer package - Rich terminal views for plans and statistics."""

from .dashboard import render_dashboard
from .plan_views import render_draft, render_plan_detail, render_plan_list
from .stats_views import (
	render_achievements,
	render_completions,
	render_period_summary,
	render_statistics,
	render_templates,
)

__all__ = [
	"render_achievements",
	"render_completions",
	"render_dashboard",
	"render_draft",
	"render_period_summary",
	"render_plan_detail",
	"render_plan_list",
	"render_statistics",
	"render_templates",
]

"""Built-in plan templates."""

from typing import Optional

from .models import PlanTemplate, PlanType

PLAN_TEMPLATES: tuple[PlanTemplate, ...] = (
	PlanTemplate(
		id="morning-routine",
		title="Morning routine",
		description="Build a healthy start to the day",
		type=PlanType.DAILY,
		default_duration=60,
		sub_tasks=[
			"Drink a glass of water",
			"10 minutes of exercise",
			"Read for 15 minutes",
			"Plan the day",
		],
	),
	PlanTemplate(
		id="work-review",
		title="Work review",
		description="Daily summary and reflection",
		type=PlanType.DAILY,
		default_duration=30,
		sub_tasks=[
			"Review what got done today",
			"Note the problems that came up",
			"Plan tomorrow",
		],
	),
	PlanTemplate(
		id="fitness-plan",
		title="Fitness plan",
		description="Regular exercise to stay healthy",
		type=PlanType.DAILY,
		default_duration=45,
		sub_tasks=["Warm up", "Main workout", "Stretch"],
	),
	PlanTemplate(
		id="learn-skill",
		title="Learn a new skill",
		description="Keep learning and improving",
		type=PlanType.WEEKLY,
		default_duration=120,
		sub_tasks=[
			"Pick learning material",
			"Make a study plan",
			"Practice",
			"Write up notes",
		],
	),
	PlanTemplate(
		id="reading-challenge",
		title="Reading challenge",
		description="Build a reading habit",
		type=PlanType.WEEKLY,
		default_duration=90,
		sub_tasks=["Choose a book", "Set a reading goal", "Keep reading notes"],
	),
	PlanTemplate(
		id="project-milestone",
		title="Project milestone",
		description="A major goal for an important project",
		type=PlanType.LONG_TERM,
		default_duration=240,
		sub_tasks=["Plan the project", "Break down tasks", "Track progress", "Review results"],
	),
)


def get_template(template_id: str) -> Optional[PlanTemplate]:
	"""Look up a template by id."""
	for template in PLAN_TEMPLATES:
		if template.id == template_id:
			return template
	return None

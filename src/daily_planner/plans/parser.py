"""
Temporal Phrase Parser - turn free-form text into a plan draft.

Heuristic keyword matching, not a grammar. Rules are kept in ordered
tables so precedence can be read (and tested) top to bottom:

- CADENCE_RULES decide the plan type and recurrence
- WINDOW_RULES decide the start/end dates
- the two tables are evaluated independently; first match wins in each
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from .models import PlanDraft, PlanType

logger = logging.getLogger(__name__)


def start_of_day(moment: datetime) -> datetime:
	return datetime.combine(moment.date(), time.min)


def end_of_day(moment: datetime) -> datetime:
	return datetime.combine(moment.date(), time.max)


@dataclass(frozen=True)
class CadenceRule:
	"""Keyword set mapped to a plan type and recurrence."""
	name: str
	tokens: tuple[str, ...]
	plan_type: PlanType
	is_repeating: bool
	repeat_interval: Optional[int] = None
	# Tokens that select the rule but are left in the title
	implicit_tokens: tuple[str, ...] = ()


@dataclass(frozen=True)
class WindowRule:
	"""Keyword set mapped to a (start, end) date window."""
	name: str
	tokens: tuple[str, ...]
	window: Callable[[datetime], tuple[datetime, datetime]]


CADENCE_RULES: tuple[CadenceRule, ...] = (
	CadenceRule(
		name="daily",
		tokens=("每日", "每天", "天天", "every day", "daily"),
		plan_type=PlanType.DAILY,
		is_repeating=True,
		repeat_interval=1,
	),
	CadenceRule(
		name="weekly",
		tokens=("每周", "每星期", "周周", "every week", "weekly"),
		plan_type=PlanType.WEEKLY,
		is_repeating=True,
		repeat_interval=1,
	),
	CadenceRule(
		name="long_term",
		tokens=("长期", "long-term", "long term"),
		plan_type=PlanType.LONG_TERM,
		is_repeating=False,
		implicit_tokens=("月", "年", "month", "months", "year", "years"),
	),
)

WINDOW_RULES: tuple[WindowRule, ...] = (
	WindowRule(
		name="today",
		tokens=("今天", "today"),
		window=lambda now: (start_of_day(now), end_of_day(now)),
	),
	WindowRule(
		name="tomorrow",
		tokens=("明天", "tomorrow"),
		window=lambda now: (
			start_of_day(now + timedelta(days=1)),
			end_of_day(now + timedelta(days=1)),
		),
	),
	WindowRule(
		name="this_week",
		tokens=("本周", "this week"),
		window=lambda now: (start_of_day(now), end_of_day(now + timedelta(days=7))),
	),
	WindowRule(
		name="next_week",
		tokens=("下周", "next week"),
		window=lambda now: (
			start_of_day(now + timedelta(days=7)),
			end_of_day(now + timedelta(days=14)),
		),
	),
	WindowRule(
		name="one_month",
		tokens=("一个月", "1个月", "one month", "1 month"),
		window=lambda now: (start_of_day(now), end_of_day(now + relativedelta(months=1))),
	),
	WindowRule(
		name="three_months",
		tokens=("三个月", "3个月", "three months", "3 months"),
		window=lambda now: (start_of_day(now), end_of_day(now + relativedelta(months=3))),
	),
)

# Words like "keep at it" that carry no meaning once the window is known
FILLER_TOKENS: tuple[str, ...] = ("持续", "坚持", "连续")


def _is_ascii(token: str) -> bool:
	return token.isascii()


def _token_pattern(token: str) -> str:
	"""Regex for one token: CJK matches anywhere, ASCII on word boundaries."""
	if _is_ascii(token):
		return rf"\b{re.escape(token)}\b"
	return re.escape(token)


def _contains(text: str, tokens: tuple[str, ...]) -> bool:
	return any(re.search(_token_pattern(t), text) for t in tokens)


def _strip_tokens(text: str, tokens: list[str]) -> str:
	"""Remove tokens from text, longest first so overlapping phrases go whole."""
	for token in sorted(tokens, key=len, reverse=True):
		if _is_ascii(token):
			text = re.sub(rf"\s*\b{re.escape(token)}\b", "", text, flags=re.IGNORECASE)
		else:
			text = text.replace(token, "")
	return text


def _strippable_tokens() -> list[str]:
	tokens: list[str] = []
	for rule in CADENCE_RULES:
		tokens.extend(rule.tokens)
	for rule in WINDOW_RULES:
		tokens.extend(rule.tokens)
	tokens.extend(FILLER_TOKENS)
	return tokens


def match_cadence(text: str) -> Optional[CadenceRule]:
	"""First cadence rule whose tokens appear in the lower-cased text."""
	for rule in CADENCE_RULES:
		if _contains(text, rule.tokens + rule.implicit_tokens):
			return rule
	return None


def match_window(text: str) -> Optional[WindowRule]:
	"""First window rule whose tokens appear in the lower-cased text."""
	for rule in WINDOW_RULES:
		if _contains(text, rule.tokens):
			return rule
	return None


def extract_title(text: str) -> str:
	"""Strip recognised keywords; fall back to the raw input if nothing is left."""
	cleaned = _strip_tokens(text, _strippable_tokens()).strip()
	return cleaned or text


def parse_natural_language(text: str, now: Optional[datetime] = None) -> PlanDraft:
	"""
	Parse free-form text into a PlanDraft.

	Never fails. Text without any recognised keyword gives a
	non-repeating daily plan starting today with no end date.

	Args:
		text: Raw user input, e.g. "每天运动30分钟" or "read every day"
		now: Reference time (defaults to the current time)

	Returns:
		PlanDraft with title, type, dates and recurrence filled in
	"""
	now = now or datetime.now()
	lowered = text.lower().strip()

	draft = PlanDraft(title=extract_title(text), start_date=start_of_day(now))

	cadence = match_cadence(lowered)
	if cadence:
		draft.type = cadence.plan_type
		draft.is_repeating = cadence.is_repeating
		draft.repeat_interval = cadence.repeat_interval

	window = match_window(lowered)
	if window:
		draft.start_date, draft.end_date = window.window(now)

	logger.debug(
		"Parsed %r: cadence=%s window=%s",
		text,
		cadence.name if cadence else None,
		window.name if window else None,
	)
	return draft

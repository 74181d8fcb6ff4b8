"""Turn raw model text into a complete :class:`Plan`.

The model is asked for JSON but routinely wraps it in prose, leaves trailing
commas, uses typographic quotes or stops mid-object when it runs out of
tokens. ``normalize_plan`` walks an ordered chain of recovery steps:

1. extract the ``{...}`` span (greedy, first ``{`` to last ``}``)
2. clean surface artifacts
3. strict ``json`` parse
4. lenient ``json5`` parse
5. truncation repair, then the static default plan
6. back-fill every missing or falsy top-level field

Each step returns an :class:`Attempt`; none of them raise. The greedy span
can swallow unrelated braces from prose around the object, in which case the
parse steps fail and the later fallbacks take over.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import json5
from pydantic import ValidationError

from .models import MEAL_KEYS, Plan, UserProfile

logger = logging.getLogger(__name__)

JSON_SPAN_RE = re.compile(r"\{.*\}", re.DOTALL)
TRAILING_COMMA_RE = re.compile(r"(?:,\s*)+([}\]])")
SMART_DOUBLE_QUOTES_RE = re.compile("[“”„‟]")
ESCAPED_SINGLE_QUOTE_RE = re.compile(r"\\+'")
TRAILING_NON_BRACKET_RE = re.compile(r"[^{}\[\]]+$")

DEFAULT_MOTIVATION = "Keep pushing forward — you’ve got this!"


@dataclass(frozen=True)
class Attempt:
    """Outcome of one recovery step: a value on success, ``None`` to fall through."""

    value: Optional[Any] = None
    stage: str = ""

    @property
    def ok(self) -> bool:
        return self.value is not None


FAILED = Attempt()


def extract_json_span(text: str) -> Attempt:
    match = JSON_SPAN_RE.search(text or "")
    if not match:
        return FAILED
    return Attempt(match.group(0), "extract")


def clean_json_text(text: str) -> str:
    cleaned = TRAILING_COMMA_RE.sub(r"\1", text)
    cleaned = SMART_DOUBLE_QUOTES_RE.sub('"', cleaned)
    cleaned = ESCAPED_SINGLE_QUOTE_RE.sub("'", cleaned)
    return cleaned.strip()


def _as_object(value: Any, stage: str) -> Attempt:
    # Only a JSON object can become a plan
    if isinstance(value, dict):
        return Attempt(value, stage)
    return FAILED


def parse_strict(text: str) -> Attempt:
    try:
        return _as_object(json.loads(text), "strict")
    except (ValueError, RecursionError):
        return FAILED


def parse_lenient(text: str, stage: str = "lenient") -> Attempt:
    try:
        return _as_object(json5.loads(text), stage)
    except (ValueError, TypeError, RecursionError):
        return FAILED


def repair_truncated(text: str) -> Attempt:
    """Assume the object was cut off: drop the dangling tail and close it."""
    repaired = TRAILING_NON_BRACKET_RE.sub("", text or "") + "}"
    return parse_lenient(repaired, stage="repaired")


def default_plan(profile: Optional[UserProfile] = None) -> Plan:
    return Plan(
        name=(profile.name if profile else "") or "User",
        fitness_goal=(profile.goal if profile else "") or "General",
        workout_plan=[
            {
                "day": "Day 1",
                "exercises": [
                    {"name": "Push-ups", "sets": "3", "reps": "12", "rest": "60 sec"},
                    {"name": "Squats", "sets": "3", "reps": "15", "rest": "60 sec"},
                ],
            },
            {
                "day": "Day 2",
                "exercises": [
                    {"name": "Plank", "sets": "3", "reps": "30 sec", "rest": "45 sec"},
                    {"name": "Lunges", "sets": "3", "reps": "10 each leg", "rest": "60 sec"},
                ],
            },
        ],
        diet_plan={
            "breakfast": ["Oats with banana", "Green tea"],
            "lunch": ["Grilled paneer or chicken with veggies"],
            "dinner": ["Salad with olive oil dressing"],
            "snacks": ["Mixed nuts", "Fruit smoothie"],
        },
        tips=[
            "Stay hydrated",
            "Maintain proper form during exercises",
            "Get 7–8 hours of sleep",
        ],
        motivation="You're doing amazing! Keep pushing forward.",
    )


def field_defaults(profile: Optional[UserProfile] = None) -> Dict[str, Callable[[], Any]]:
    name = profile.name if profile else ""
    goal = profile.goal if profile else ""
    return {
        "name": lambda: name or "User",
        "fitness_goal": lambda: goal or "General Fitness",
        "workout_plan": list,
        "diet_plan": lambda: {key: [] for key in MEAL_KEYS},
        "tips": list,
        "motivation": lambda: DEFAULT_MOTIVATION,
    }


def apply_defaults(parsed: Dict[str, Any], profile: Optional[UserProfile] = None) -> Dict[str, Any]:
    """Keep each truthy parsed field, otherwise take its default. Field by field."""
    defaults = field_defaults(profile)
    return {key: parsed.get(key) or make() for key, make in defaults.items()}


def build_plan(merged: Dict[str, Any], profile: Optional[UserProfile] = None) -> Optional[Plan]:
    """Validate a defaulted mapping, resetting only the fields with a bad shape."""
    try:
        return Plan.model_validate(merged)
    except ValidationError as e:
        bad = {err["loc"][0] for err in e.errors() if err.get("loc")}
        logger.info("Resetting malformed plan fields: %s", sorted(map(str, bad)))
    defaults = field_defaults(profile)
    patched = {key: (defaults[key]() if key in bad else value) for key, value in merged.items()}
    try:
        return Plan.model_validate(patched)
    except ValidationError:
        return None


def parse_model_output(raw_text: str) -> Attempt:
    span = extract_json_span(raw_text)
    if span.ok:
        cleaned = clean_json_text(span.value)
        for step in (parse_strict, parse_lenient, repair_truncated):
            attempt = step(cleaned)
            if attempt.ok:
                return attempt
        return FAILED
    # No closing brace anywhere: the object was most likely cut off
    return repair_truncated(raw_text)


def normalize_plan(raw_text: str, profile: Optional[UserProfile] = None) -> Plan:
    attempt = parse_model_output(raw_text)
    if not attempt.ok:
        logger.warning("Model output could not be parsed (%d chars); using default plan", len(raw_text or ""))
        return default_plan(profile)

    plan = build_plan(apply_defaults(attempt.value, profile), profile)
    if plan is None:
        logger.warning("Parsed plan failed validation after field reset; using default plan")
        return default_plan(profile)
    logger.info("Plan normalized via %s parse", attempt.stage)
    return plan

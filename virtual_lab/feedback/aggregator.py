"""
virtual_lab/feedback/aggregator.py
Reduces the per-question Likert ratings of a feedback form to one overall
rating.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from virtual_lab.utils import round_half_up
from virtual_lab.errors import InvalidRating, MissingFields, ValidationError

MIN_RATING = 1
MAX_RATING = 5

# ── Rating form ───────────────────────────────────────────────────────────────
RATING_QUESTIONS: List[Dict[str, str]] = [
    {"id": "content_quality", "question": "How would you rate the quality of the content?",       "category": "Content"},
    {"id": "clarity",         "question": "How clear and easy to understand was the material?",   "category": "Clarity"},
    {"id": "simulation",      "question": "How helpful was the interactive simulation?",          "category": "Simulation"},
    {"id": "learning",        "question": "How much did you learn from this experiment?",         "category": "Learning"},
    {"id": "overall",         "question": "Overall, how would you rate this experiment?",         "category": "Overall"},
]

RATING_OPTIONS: List[Dict[str, str]] = [
    {"value": "5", "label": "Excellent"},
    {"value": "4", "label": "Good"},
    {"value": "3", "label": "Average"},
    {"value": "2", "label": "Poor"},
    {"value": "1", "label": "Very Poor"},
]

RATING_KEYS = frozenset(q["id"] for q in RATING_QUESTIONS)


def _parse(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidRating(f"Rating for '{key}' must be a number")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidRating(f"Rating for '{key}' must be a number")


def aggregate_ratings(ratings: Any) -> int:
    """
    Rounded mean of the submitted ratings.

    Only the overall value is range-checked: a partial form is accepted
    here, the form itself decides when every question has been answered.
    """
    if not isinstance(ratings, Mapping) or not ratings:
        raise MissingFields()

    unknown = set(ratings) - RATING_KEYS
    if unknown:
        raise ValidationError(f"Unknown rating question(s): {', '.join(sorted(map(str, unknown)))}")

    values = [_parse(k, v) for k, v in ratings.items()]
    overall = round_half_up(sum(values), len(values))

    if not MIN_RATING <= overall <= MAX_RATING:
        raise InvalidRating()
    return overall


def ratings_complete(ratings: Mapping) -> bool:
    """True when every question on the form has a rating."""
    return isinstance(ratings, Mapping) and set(ratings) == RATING_KEYS

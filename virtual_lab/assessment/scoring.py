"""
virtual_lab/assessment/scoring.py
Scores a completed pretest/posttest against its answer key.

Pure functions: nothing here touches the database or the request.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping, Sequence

from virtual_lab.utils import round_half_up
from virtual_lab.errors import (
    InvalidQuestionDefinition, MissingAnswers, ValidationError
)


@dataclass(frozen=True)
class Score:
    correct: int
    total: int
    percentage: int

    def passes(self, passing_percentage: int) -> bool:
        return self.percentage >= passing_percentage

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _as_index(value: Any):
    """int, or a string holding an int, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _answer_key(question) -> int:
    options = question.options or []
    if len(options) < 2:
        raise InvalidQuestionDefinition(
            f"Question {question.id} needs at least two options"
        )
    index = _as_index(question.correct_answer)
    if index is None or not 0 <= index < len(options):
        raise InvalidQuestionDefinition(
            f"Question {question.id} has an out-of-range answer key"
        )
    return index


def _check_complete(questions: Sequence, answers: Mapping) -> None:
    if not isinstance(answers, Mapping):
        raise MissingAnswers("Answers must map question ids to options")
    ids = {str(q.id) for q in questions}
    given = {str(k) for k in answers}
    missing = ids - given
    if missing or len(answers) != len(questions):
        raise MissingAnswers(
            f"Expected {len(questions)} answers, got {len(answers)}",
            {"missing": sorted(missing), "unexpected": sorted(given - ids)},
        )


def _chosen(question, answers: Mapping) -> int:
    raw = answers.get(str(question.id), answers.get(question.id))
    index = _as_index(raw)
    if index is None:
        raise ValidationError(f"Answer for question {question.id} must be an option index")
    return index


def score_answers(questions: Sequence, answers: Mapping) -> Score:
    """
    Compare each chosen option index with the question's answer key.

    questions: ordered QuizQuestion rows (anything with id, options and
               correct_answer).
    answers:   {question_id: option_index}; indices may arrive as numeric
               strings from form posts.
    """
    if not questions:
        raise InvalidQuestionDefinition("Quiz has no questions")
    _check_complete(questions, answers)

    correct = 0
    for q in questions:
        if _chosen(q, answers) == _answer_key(q):
            correct += 1

    total = len(questions)
    return Score(
        correct=correct,
        total=total,
        percentage=round_half_up(100 * correct, total),
    )


def review_answers(questions: Sequence, answers: Mapping) -> List[Dict[str, Any]]:
    """Per-question breakdown shown after submission."""
    _check_complete(questions, answers)
    results = []
    for q in questions:
        chosen = _chosen(q, answers)
        key = _answer_key(q)
        options = list(q.options)
        results.append({
            "id":             q.id,
            "chosen":         chosen,
            "chosen_text":    options[chosen] if 0 <= chosen < len(options) else None,
            "correct":        key,
            "correct_text":   options[key],
            "is_correct":     chosen == key,
            "explanation":    q.explanation or "",
        })
    return results

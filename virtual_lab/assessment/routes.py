from datetime import datetime, timezone
from typing import Any, Optional

from flask import current_app, jsonify, request
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from virtual_lab import db
from virtual_lab.assessment import assessment
from virtual_lab.assessment.scoring import review_answers, score_answers
from virtual_lab.errors import (
    MissingFields, NotFound, PersistenceError, Unauthorized, ValidationError
)
from virtual_lab.labs.utils import mark_section_complete
from virtual_lab.models import Quiz, QuizSubmission


def _parse_started_at(value) -> Optional[datetime]:
    if value is None:
        return None
    try:
        started = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError("started_at must be an ISO-8601 timestamp")
    if started.tzinfo is None:
        started = started.replace(tzinfo=timezone.utc)
    return started


def submit_quiz(user_id: Optional[str], quiz_id: str, payload: Any):
    """
    Score and store one attempt. Returns (submission, per-question review).
    The pass mark only labels the attempt; it never blocks progression.
    """
    if not user_id:
        raise Unauthorized()
    if not isinstance(payload, dict) or not isinstance(payload.get("answers"), dict):
        raise MissingFields()

    quiz = db.session.get(Quiz, quiz_id)
    if not quiz or not quiz.experiment.published:
        raise NotFound("Quiz not found")

    answers = payload["answers"]
    questions = list(quiz.questions)
    score = score_answers(questions, answers)
    results = review_answers(questions, answers)
    started_at = _parse_started_at(payload.get("started_at"))

    mark_section_complete(user_id, quiz.experiment, quiz.quiz_type, commit=False)
    submission = QuizSubmission(
        user_id=user_id,
        quiz_id=quiz.id,
        answers={str(k): v for k, v in answers.items()},
        score=score.correct,
        total_questions=score.total,
        percentage=score.percentage,
        passed=score.passes(quiz.passing_percentage),
        started_at=started_at,
    )
    db.session.add(submission)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error saving %s submission for quiz %s",
                                     quiz.quiz_type, quiz.id)
        raise PersistenceError("Failed to submit answers")

    current_app.logger.info(
        "Quiz %s (%s) submitted by %s: %d/%d", quiz.id, quiz.quiz_type,
        user_id, score.correct, score.total,
    )
    return submission, results


@assessment.route("/api/quizzes/<quiz_id>/submissions", methods=["POST"])
def create_submission(quiz_id):
    """
    Body: {answers: {question_id: option_index}, started_at?}
    201 -> {success, data: <submission>, results: [...]}
    """
    user_id = current_user.get_id() if current_user.is_authenticated else None
    submission, results = submit_quiz(user_id, quiz_id, request.get_json(silent=True))
    return jsonify({
        "success": True,
        "data":    submission.to_dict(),
        "results": results,
    }), 201

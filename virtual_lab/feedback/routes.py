from typing import Any, Optional

from flask import current_app, jsonify, request
from flask_login import current_user
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from virtual_lab import db
from virtual_lab.errors import (
    DuplicateSubmission, MissingFields, PersistenceError, Unauthorized,
    ValidationError
)
from virtual_lab.feedback import feedback
from virtual_lab.feedback.aggregator import aggregate_ratings
from virtual_lab.labs.utils import (
    _get_published_experiment_by_id, mark_section_complete
)
from virtual_lab.models import Feedback


def submit_feedback(user_id: Optional[str], payload: Any) -> Feedback:
    """
    Validate and persist one feedback form for (user, experiment).
    user_id is the authenticated learner, or None when the caller has no
    identity; nothing is written in that case.
    """
    if not user_id:
        raise Unauthorized()
    if not isinstance(payload, dict):
        raise MissingFields()

    experiment_id = payload.get("experiment_id")
    ratings = payload.get("ratings")
    comments = payload.get("comments")
    is_anonymous = payload.get("is_anonymous")
    if is_anonymous is None:
        is_anonymous = False
    if not experiment_id or not isinstance(experiment_id, str):
        raise MissingFields()
    if not ratings or not isinstance(ratings, dict):
        raise MissingFields()
    if comments is not None and not isinstance(comments, str):
        raise MissingFields("comments must be text")
    if not isinstance(is_anonymous, bool):
        raise ValidationError("is_anonymous must be true or false")

    rating = aggregate_ratings(ratings)
    experiment = _get_published_experiment_by_id(experiment_id)

    mark_section_complete(user_id, experiment, "feedback", commit=False)
    row = Feedback(
        user_id=user_id,
        experiment_id=experiment.id,
        ratings=dict(ratings),
        rating=rating,
        comments=(comments or "").strip() or None,
        is_anonymous=is_anonymous,
    )
    db.session.add(row)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.warning(
            "Integrity error saving feedback from %s on %s", user_id, experiment.id,
            exc_info=True,
        )
        raise DuplicateSubmission()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error inserting feedback for %s", experiment.id)
        raise PersistenceError("Failed to submit feedback")

    current_app.logger.info(
        "Feedback from %s on %s: rating=%d", user_id, experiment.slug, rating
    )
    return row


@feedback.route("/api/feedback", methods=["POST"])
def create_feedback():
    """
    Body: {experiment_id, ratings: {question_key: "1".."5"}, comments?}
    201 -> {success: true, data: <feedback row>}
    """
    user_id = current_user.get_id() if current_user.is_authenticated else None
    payload = request.get_json(silent=True)
    row = submit_feedback(user_id, payload)
    return jsonify({"success": True, "data": row.to_dict()}), 201

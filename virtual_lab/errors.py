"""
virtual_lab/errors.py
Error taxonomy shared by the scorer, the aggregator, the sequencer and the
HTTP layer, plus the Flask handlers that turn them into responses.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from flask import jsonify, render_template, request


class LabError(Exception):
    """Base error. Carries the HTTP status used when it reaches a route."""

    status_code = 500
    error_code = "LAB_ERROR"
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None,
                 extra: Optional[Dict[str, Any]] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.extra = extra or {}


class Unauthorized(LabError):
    status_code = 401
    error_code = "UNAUTHORIZED"
    message = "Unauthorized"


class ValidationError(LabError):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    message = "Invalid request"


class MissingFields(ValidationError):
    error_code = "MISSING_FIELDS"
    message = "Missing required fields"


class InvalidRating(ValidationError):
    error_code = "INVALID_RATING"
    message = "Invalid rating value"


class MissingAnswers(ValidationError):
    """The answer map does not hold exactly one answer per question."""

    error_code = "MISSING_ANSWERS"
    message = "Every question must be answered"


class NotFound(LabError):
    status_code = 404
    error_code = "NOT_FOUND"
    message = "Not found"


class UnknownSection(NotFound):
    error_code = "UNKNOWN_SECTION"

    def __init__(self, section: Any):
        super().__init__(f"Unknown section '{section}'", {"section": section})
        self.section = section


class DuplicateSubmission(LabError):
    status_code = 409
    error_code = "DUPLICATE_SUBMISSION"
    message = "Feedback already submitted for this experiment"


class InvalidQuestionDefinition(LabError):
    """A stored question cannot be scored (bad answer key or options)."""

    status_code = 500
    error_code = "INVALID_QUESTION"
    message = "Quiz is misconfigured"


class InvalidContentBlock(LabError):
    """A stored aim/theory/procedure/simulation block has the wrong shape."""

    status_code = 500
    error_code = "INVALID_CONTENT"
    message = "Experiment content is misconfigured"


class PersistenceError(LabError):
    status_code = 500
    error_code = "PERSISTENCE_ERROR"
    message = "Failed to save submission"


def _wants_json() -> bool:
    return request.path.startswith('/api/')


def register_error_handlers(app):

    @app.errorhandler(LabError)
    def handle_lab_error(exc: LabError):
        if exc.status_code >= 500:
            app.logger.error("%s on %s: %s", exc.error_code, request.path, exc)
        if _wants_json():
            return jsonify({"error": exc.message}), exc.status_code
        return render_template(
            'error.html',
            title=exc.message,
            status=exc.status_code,
            message=exc.message,
        ), exc.status_code

    @app.errorhandler(404)
    def handle_not_found(exc):
        if _wants_json():
            return jsonify({"error": "Not found"}), 404
        return render_template(
            'error.html', title='Not found', status=404,
            message="The page you are looking for does not exist.",
        ), 404

    @app.errorhandler(500)
    def handle_internal_error(exc):
        app.logger.error("Unhandled error on %s: %s", request.path,
                         getattr(exc, "original_exception", exc))
        if _wants_json():
            return jsonify({"error": "Internal server error"}), 500
        return render_template(
            'error.html', title='Server error', status=500,
            message="Something went wrong on our side.",
        ), 500

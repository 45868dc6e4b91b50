from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from flask import current_app

from virtual_lab import db
from virtual_lab.errors import NotFound, PersistenceError
from virtual_lab.models import Category, Experiment, UserProgress
from virtual_lab.labs.sequencer import SECTIONS, ensure_section, order_sections


# ── Lookups ───────────────────────────────────────────────────────────────────
def _get_category(slug: str) -> Category:
    category = Category.query.filter_by(slug=slug).first()
    if not category:
        raise NotFound(f"Category '{slug}' not found")
    return category


def _get_published_experiment(category_slug: str, slug: str) -> Experiment:
    """Experiment by slug, only if published and filed under category_slug."""
    experiment = Experiment.query.filter_by(slug=slug, published=True).first()
    if not experiment or experiment.category.slug != category_slug:
        raise NotFound(f"Experiment '{slug}' not found")
    return experiment


def _get_published_experiment_by_id(experiment_id) -> Experiment:
    experiment = None
    if isinstance(experiment_id, str):
        experiment = db.session.get(Experiment, experiment_id)
    if not experiment or not experiment.published:
        raise NotFound("Experiment not found")
    return experiment


def _published_experiments():
    return (
        Experiment.query
        .filter_by(published=True)
        .order_by(Experiment.featured.desc(), Experiment.title.asc())
        .all()
    )


# ── Progress ──────────────────────────────────────────────────────────────────
def _get_or_create_progress(user_id: str, experiment_id: str) -> UserProgress:
    prog = UserProgress.query.filter_by(
        user_id=user_id, experiment_id=experiment_id
    ).first()
    if not prog:
        prog = UserProgress(user_id=user_id, experiment_id=experiment_id,
                            completed_sections=[])
        db.session.add(prog)
    return prog


def _commit(action: str) -> None:
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to %s", action)
        raise PersistenceError()


def record_visit(user_id: str, experiment: Experiment, section: str) -> UserProgress:
    """Move the learner's cursor to `section`."""
    ensure_section(section)
    prog = _get_or_create_progress(user_id, experiment.id)
    prog.current_section = section
    prog.last_accessed_at = datetime.now(timezone.utc)
    _commit("record section visit")
    return prog


def mark_section_complete(user_id: str, experiment: Experiment, section: str,
                          commit: bool = True) -> UserProgress:
    """
    Add `section` to the learner's completed list. The experiment counts as
    complete once every section in the curriculum has been completed.
    """
    ensure_section(section)
    prog = _get_or_create_progress(user_id, experiment.id)
    done = order_sections(list(prog.completed_sections or []) + [section])
    # Reassign so the JSON column is flagged dirty
    prog.completed_sections = done
    prog.last_accessed_at = datetime.now(timezone.utc)
    if len(done) == len(SECTIONS) and prog.completed_at is None:
        prog.completed_at = prog.last_accessed_at
        current_app.logger.info("User %s completed experiment %s", user_id, experiment.slug)
    if commit:
        _commit("mark section complete")
    return prog

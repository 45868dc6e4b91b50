from flask import render_template, redirect, url_for
from flask_login import login_required, current_user

from virtual_lab.errors import UnknownSection
from virtual_lab.models import Category, Feedback, QuizSubmission
from virtual_lab.labs import labs
from virtual_lab.labs.sequencer import (
    SECTIONS, SECTION_META, INITIAL_SECTION, QUIZ_SECTIONS,
    is_section, next_section, previous_section, requires_completion,
    section_label
)
from virtual_lab.labs.utils import (
    _get_category, _get_published_experiment, _published_experiments,
    record_visit, mark_section_complete
)
from virtual_lab.feedback.aggregator import RATING_QUESTIONS, RATING_OPTIONS

# Sections that count as done as soon as the learner opens them
CONTENT_SECTIONS = ("aim", "theory", "procedure", "simulation")


@labs.route("/labs")
def index():
    categories = Category.query.order_by(Category.display_order.asc()).all()
    experiments = _published_experiments()
    counts = {c.id: len(c.published_experiments()) for c in categories}
    return render_template(
        "labs/index.html",
        title="Virtual Labs",
        categories=categories,
        experiments=experiments,
        counts=counts,
    )


@labs.route("/labs/<category>")
def category_page(category):
    cat = _get_category(category)
    return render_template(
        "labs/category.html",
        title=cat.name,
        category=cat,
        experiments=cat.published_experiments(),
    )


@labs.route("/labs/<category>/<experiment_slug>")
@login_required
def experiment_root(category, experiment_slug):
    experiment = _get_published_experiment(category, experiment_slug)
    return redirect(url_for(
        "labs.section_page",
        category=category,
        experiment_slug=experiment.slug,
        section=INITIAL_SECTION,
    ))


@labs.route("/labs/<category>/<experiment_slug>/<section>")
@login_required
def section_page(category, experiment_slug, section):
    if not is_section(section):
        raise UnknownSection(section)
    experiment = _get_published_experiment(category, experiment_slug)
    user_id = current_user.get_id()

    if section in CONTENT_SECTIONS:
        mark_section_complete(user_id, experiment, section, commit=False)
    progress = record_visit(user_id, experiment, section)

    context = {
        "title":           f"{section_label(section)} · {experiment.title}",
        "experiment":      experiment,
        "category":        experiment.category,
        "section":         section,
        "section_meta":    SECTION_META[section],
        "sections":        [(s, section_label(s)) for s in SECTIONS],
        "previous":        previous_section(section),
        "next":            next_section(section),
        "gated":           (requires_completion(section)
                            and section not in (progress.completed_sections or [])),
        "progress":        progress,
        "content":         experiment.content_for(section),
    }

    if section in QUIZ_SECTIONS:
        quiz = experiment.quiz_of_type(section)
        # Nothing can complete a missing or empty quiz
        if not (quiz and quiz.questions):
            context["gated"] = False
        context["quiz"] = quiz
        context["questions"] = [q.to_client_dict() for q in quiz.questions] if quiz else []
        context["last_submission"] = (
            QuizSubmission.query
            .filter_by(user_id=user_id, quiz_id=quiz.id)
            .order_by(QuizSubmission.submitted_at.desc())
            .first()
        ) if quiz else None
        template = "labs/quiz.html"
    elif section == "feedback":
        context["rating_questions"] = RATING_QUESTIONS
        context["rating_options"] = RATING_OPTIONS
        context["existing_feedback"] = Feedback.query.filter_by(
            user_id=user_id, experiment_id=experiment.id
        ).first()
        template = "labs/feedback.html"
    else:
        template = f"labs/{section}.html"

    return render_template(template, **context)

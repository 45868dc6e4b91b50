import uuid
from datetime import datetime, timezone
from urllib.parse import urlencode

from flask import current_app, redirect, request
from flask_login import UserMixin
from itsdangerous import BadSignature, URLSafeTimedSerializer as Serializer

from virtual_lab import db, login_manager
from virtual_lab.errors import Unauthorized


def _uuid():
    return str(uuid.uuid4())


def _now():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, user_id)


@login_manager.request_loader
def load_user_from_request(req):
    """Resolve an identity-provider bearer token to a User."""
    header = req.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return None
    return User.verify_auth_token(header[len('Bearer '):].strip())


@login_manager.unauthorized_handler
def unauthorized():
    """API callers get a 401; browsers go to the identity provider's sign-in page."""
    sign_in_url = current_app.config.get('SIGN_IN_URL')
    if sign_in_url and not request.path.startswith('/api/'):
        return redirect(f"{sign_in_url}?{urlencode({'redirect_url': request.url})}")
    raise Unauthorized()


class User(db.Model, UserMixin):
    """
    A learner known to the identity provider.
    id is the provider's own user id, so rows written on the learner's
    behalf (feedback, submissions) carry the same key the provider issues.
    role: 'student' | 'instructor' | 'admin'
    """
    __tablename__ = 'user'

    id         = db.Column(db.String(64), primary_key=True)
    email      = db.Column(db.String(120), unique=True, nullable=False)
    first_name = db.Column(db.String(60), nullable=True)
    last_name  = db.Column(db.String(60), nullable=True)
    role       = db.Column(db.String(20), nullable=False, default='student')
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)

    feedback    = db.relationship('Feedback', backref='user', lazy=True)
    submissions = db.relationship('QuizSubmission', backref='user', lazy=True)
    progress    = db.relationship('UserProgress', backref='user', lazy=True)

    def get_auth_token(self):
        s = Serializer(current_app.config['SECRET_KEY'])
        return s.dumps({'user_id': self.id})

    @staticmethod
    def verify_auth_token(token, max_age=None):
        s = Serializer(current_app.config['SECRET_KEY'])
        if max_age is None:
            max_age = current_app.config.get('AUTH_TOKEN_MAX_AGE', 3600)
        try:
            user_id = s.loads(token, max_age=max_age)['user_id']
        except (BadSignature, KeyError, TypeError):
            return None
        return db.session.get(User, user_id)

    def __repr__(self):
        return f"User('{self.id}', '{self.email}', '{self.role}')"


class Category(db.Model):
    __tablename__ = 'category'

    id            = db.Column(db.String(36), primary_key=True, default=_uuid)
    slug          = db.Column(db.String(60), unique=True, nullable=False)
    name          = db.Column(db.String(120), nullable=False)
    description   = db.Column(db.Text, nullable=True)
    icon          = db.Column(db.String(40), nullable=True)
    color         = db.Column(db.String(20), nullable=True)
    display_order = db.Column(db.Integer, nullable=False, default=0)

    experiments = db.relationship(
        'Experiment', backref='category', lazy=True,
        order_by='Experiment.title',
    )

    def published_experiments(self):
        return [e for e in self.experiments if e.published]

    def __repr__(self):
        return f"Category('{self.slug}', '{self.name}')"


class Experiment(db.Model):
    """
    One lab unit. aim/theory/procedure/simulation hold loosely structured
    JSON; read them through content_for() so they come back validated.
    difficulty: 'beginner' | 'intermediate' | 'advanced'
    """
    __tablename__ = 'experiment'

    id                 = db.Column(db.String(36), primary_key=True, default=_uuid)
    category_id        = db.Column(db.String(36), db.ForeignKey('category.id'), nullable=False)
    slug               = db.Column(db.String(80), unique=True, nullable=False)
    title              = db.Column(db.String(200), nullable=False)
    description        = db.Column(db.Text, nullable=False, default='')
    difficulty         = db.Column(db.String(20), nullable=False, default='beginner')
    estimated_duration = db.Column(db.Integer, nullable=False, default=30)
    aim                = db.Column(db.JSON, nullable=True)
    theory             = db.Column(db.JSON, nullable=True)
    procedure          = db.Column(db.JSON, nullable=True)
    simulation         = db.Column(db.JSON, nullable=True)
    tags               = db.Column(db.JSON, nullable=True)
    prerequisites      = db.Column(db.JSON, nullable=True)
    published          = db.Column(db.Boolean, nullable=False, default=False)
    featured           = db.Column(db.Boolean, nullable=False, default=False)
    created_by         = db.Column(db.String(64), nullable=True)
    created_at         = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    updated_at         = db.Column(db.DateTime(timezone=True), nullable=False,
                                   default=_now, onupdate=_now)

    quizzes = db.relationship('Quiz', backref='experiment', lazy=True,
                              cascade='all, delete-orphan')

    def content_for(self, section):
        from virtual_lab.labs.content import parse_block
        return parse_block(section, getattr(self, section, None))

    def quiz_of_type(self, quiz_type):
        return next((q for q in self.quizzes if q.quiz_type == quiz_type), None)

    def __repr__(self):
        return f"Experiment('{self.slug}', published={self.published})"


class Quiz(db.Model):
    """quiz_type: 'pretest' | 'posttest'. One of each per experiment."""
    __tablename__ = 'quiz'

    id                 = db.Column(db.String(36), primary_key=True, default=_uuid)
    experiment_id      = db.Column(db.String(36), db.ForeignKey('experiment.id'), nullable=False)
    quiz_type          = db.Column(db.String(10), nullable=False)
    title              = db.Column(db.String(200), nullable=False)
    passing_percentage = db.Column(db.Integer, nullable=False, default=70)
    created_at         = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)

    questions = db.relationship(
        'QuizQuestion', backref='quiz', lazy=True,
        order_by='QuizQuestion.display_order', cascade='all, delete-orphan'
    )

    __table_args__ = (
        db.UniqueConstraint('experiment_id', 'quiz_type', name='uq_experiment_quiz_type'),
    )

    def __repr__(self):
        return f"Quiz('{self.title}', type={self.quiz_type}, pass={self.passing_percentage})"


class QuizQuestion(db.Model):
    """
    correct_answer is the zero-based index into options. Older rows carry
    it as a numeric string; the scorer normalizes both forms.
    """
    __tablename__ = 'quiz_question'

    id             = db.Column(db.String(36), primary_key=True, default=_uuid)
    quiz_id        = db.Column(db.String(36), db.ForeignKey('quiz.id'), nullable=False)
    question_text  = db.Column(db.Text, nullable=False)
    options        = db.Column(db.JSON, nullable=False)
    correct_answer = db.Column(db.Integer, nullable=False)
    explanation    = db.Column(db.Text, nullable=True)
    display_order  = db.Column(db.Integer, nullable=False, default=0)

    def to_client_dict(self):
        """Question as sent to the browser, answer key withheld."""
        return {
            "id":            self.id,
            "question_text": self.question_text,
            "options":       list(self.options or []),
            "display_order": self.display_order,
        }

    def __repr__(self):
        return f"QuizQuestion(quiz={self.quiz_id}, order={self.display_order})"


class QuizSubmission(db.Model):
    """One scored attempt. Learners may retake a quiz, so no uniqueness."""
    __tablename__ = 'quiz_submission'

    id              = db.Column(db.String(36), primary_key=True, default=_uuid)
    user_id         = db.Column(db.String(64), db.ForeignKey('user.id'), nullable=False)
    quiz_id         = db.Column(db.String(36), db.ForeignKey('quiz.id'), nullable=False)
    answers         = db.Column(db.JSON, nullable=False)
    score           = db.Column(db.Integer, nullable=False)
    total_questions = db.Column(db.Integer, nullable=False)
    percentage      = db.Column(db.Integer, nullable=False)
    passed          = db.Column(db.Boolean, nullable=False)
    started_at      = db.Column(db.DateTime(timezone=True), nullable=True)
    submitted_at    = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)

    def to_dict(self):
        return {
            "id":              self.id,
            "user_id":         self.user_id,
            "quiz_id":         self.quiz_id,
            "answers":         self.answers,
            "score":           self.score,
            "total_questions": self.total_questions,
            "percentage":      self.percentage,
            "passed":          self.passed,
            "started_at":      _iso(self.started_at),
            "submitted_at":    _iso(self.submitted_at),
        }

    def __repr__(self):
        return f"QuizSubmission(user={self.user_id}, quiz={self.quiz_id}, {self.percentage}%)"


class UserProgress(db.Model):
    """
    Where a learner is within one experiment.
    completed_sections: list of section names, kept in curriculum order.
    """
    __tablename__ = 'user_progress'

    id                 = db.Column(db.String(36), primary_key=True, default=_uuid)
    user_id            = db.Column(db.String(64), db.ForeignKey('user.id'), nullable=False)
    experiment_id      = db.Column(db.String(36), db.ForeignKey('experiment.id'), nullable=False)
    current_section    = db.Column(db.String(20), nullable=True)
    completed_sections = db.Column(db.JSON, nullable=False, default=list)
    started_at         = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    last_accessed_at   = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)
    completed_at       = db.Column(db.DateTime(timezone=True), nullable=True)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'experiment_id', name='uq_user_experiment_progress'),
    )

    def __repr__(self):
        return f"UserProgress(user={self.user_id}, experiment={self.experiment_id}, at={self.current_section})"


class Feedback(db.Model):
    """
    A learner's rating of one experiment.
    ratings: {question_key: "1".."5"} as submitted; rating: rounded mean.
    """
    __tablename__ = 'feedback'

    id            = db.Column(db.String(36), primary_key=True, default=_uuid)
    user_id       = db.Column(db.String(64), db.ForeignKey('user.id'), nullable=False)
    experiment_id = db.Column(db.String(36), db.ForeignKey('experiment.id'), nullable=False)
    ratings       = db.Column(db.JSON, nullable=False)
    rating        = db.Column(db.Integer, nullable=False)
    comments      = db.Column(db.Text, nullable=True)
    is_anonymous  = db.Column(db.Boolean, nullable=False, default=False)
    submitted_at  = db.Column(db.DateTime(timezone=True), nullable=False, default=_now)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'experiment_id', name='uq_user_experiment_feedback'),
    )

    def to_dict(self):
        return {
            "id":            self.id,
            "user_id":       self.user_id,
            "experiment_id": self.experiment_id,
            "ratings":       self.ratings,
            "rating":        self.rating,
            "comments":      self.comments,
            "is_anonymous":  self.is_anonymous,
            "submitted_at":  _iso(self.submitted_at),
        }

    def __repr__(self):
        return f"Feedback(user={self.user_id}, experiment={self.experiment_id}, rating={self.rating})"

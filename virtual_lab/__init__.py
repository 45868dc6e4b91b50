from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from virtual_lab.config import Config


db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
login_manager.login_message_category = 'info'


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    from virtual_lab.main.routes import main
    from virtual_lab.labs import labs
    from virtual_lab.assessment import assessment
    from virtual_lab.feedback import feedback
    from virtual_lab.errors import register_error_handlers
    from virtual_lab.utils import format_date, format_duration

    app.register_blueprint(main)
    app.register_blueprint(labs)
    app.register_blueprint(assessment)
    app.register_blueprint(feedback)
    register_error_handlers(app)

    app.add_template_filter(format_date, 'format_date')
    app.add_template_filter(format_duration, 'format_duration')

    @app.cli.command('seed-db')
    def seed_db_command():
        """Create tables and load the experiment catalogue."""
        from virtual_lab.labs.catalogue import seed_database
        db.create_all()
        if seed_database():
            print("Catalogue seeded.")
        else:
            print("Catalogue already present, nothing to do.")

    # Category list for the navigation bar on every page.
    @app.context_processor
    def inject_categories():
        from virtual_lab.models import Category
        return {
            "nav_categories": (
                Category.query
                .order_by(Category.display_order.asc(), Category.name.asc())
                .all()
            )
        }

    return app

import os

from virtual_lab import create_app, db
from virtual_lab.labs.catalogue import seed_database
from flask_migrate import upgrade
from sqlalchemy import inspect

app = create_app()


def setup_database():
    """Create tables on an empty database, migrate an existing one, then seed."""
    with app.app_context():
        tables = inspect(db.engine).get_table_names()
        print(f"📊 Found tables: {tables}")

        if not tables:
            print("🔄 Database empty - creating schema...")
            db.create_all()
        elif os.path.exists('migrations'):
            print("🔄 Running any pending migrations...")
            try:
                upgrade()
                print("✅ Migrations complete!")
            except Exception as e:
                print(f"❌ Migration error: {e}")

        if seed_database():
            print("✅ Catalogue seeded")


setup_database()

if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1')

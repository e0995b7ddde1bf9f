# Creates the database tables for the configured DATABASE_URL
from blogfeed import create_app, db
from blogfeed import models  # noqa: F401  registers User and Post on the metadata


def create_tables():
    app = create_app()
    # SQLAlchemy needs an app context to find the engine
    with app.app_context():
        print(f"Creating tables on {app.config['SQLALCHEMY_DATABASE_URI']} ...")
        db.create_all()
        print("Done!")


if __name__ == '__main__':
    create_tables()

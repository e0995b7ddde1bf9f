# Creates the Flask app (App Factory)
from datetime import timedelta
import logging
import os

from flask import Flask
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy

from .config import Config

# Initialize the database extension; bound to an app in create_app()
db = SQLAlchemy()


# Application Factory Function
def create_app(test_config=None):
    # Images are served by the site blueprint, not Flask's static handler
    app = Flask(__name__, static_folder=None)
    app.config.from_object(Config)
    if test_config is not None:
        app.config.from_mapping(test_config)

    # Logging configuration (DEBUG level by default)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=app.config['LOG_LEVEL'],
                            format='%(asctime)s %(levelname)s %(name)s - %(message)s')
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Ensure the upload folder exists
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # Extensions
    db.init_app(app)
    CORS(
        app,
        origins=app.config['CORS_ORIGINS'],
        methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE'],
        allow_headers=['Content-Type', 'Authorization'],
    )

    from .security import TokenService
    tokens = TokenService(
        app.config['JWT_SECRET_KEY'],
        expires_in=timedelta(seconds=app.config['JWT_EXPIRES_SECONDS']),
    )
    tokens.init_app(app)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # Import and register the blueprints from routes.py
    from .routes import auth, feed, site
    app.register_blueprint(feed, url_prefix='/feed')
    app.register_blueprint(auth, url_prefix='/auth')
    app.register_blueprint(site)

    app.logger.debug('Application created and configured')
    return app

import os

from flask import Flask

from libraryapp.commands import register_commands
from libraryapp.error_handling import register_error_handlers
from libraryapp.routes.health_routes import health_bp
from libraryapp.routes.user_routes import user_bp


def create_app(test_config=None):
    # create and configure the app
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev"),
        INIT_DB=True,
    )

    if test_config is None:
        # load the instance config, if it exists, when not testing
        app.config.from_pyfile("config.py", silent=True)
    else:
        # load the test config if passed in
        app.config.from_mapping(test_config)

    if app.config["INIT_DB"]:
        _init_database(app)

    # register error handlers
    register_error_handlers(app)

    # register health check blueprint
    app.register_blueprint(health_bp)

    # register user blueprint
    app.register_blueprint(user_bp)

    # register CLI commands
    register_commands(app)

    return app


def _init_database(app):
    """
    Create the user table if it does not exist yet.

    Failures are logged and re-raised; the app cannot serve users without
    its table.
    """
    from libraryapp.db.database import init_db

    try:
        init_db()
        app.logger.info("✓ Database schema initialized")
    except Exception as e:
        app.logger.error(f"Database initialization failed: {e}")
        raise

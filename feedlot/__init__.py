"""
This module initializes the Flask application and its extensions.

It follows the application factory pattern, allowing for easy configuration
switching and testing. It also sets up logging and registers blueprints.
"""
import os

from flask import Flask

from feedlot.config import TestingConfig

from .extensions import db, login_manager, migrate
from .logging_config import configure_logging


def create_app(config_class=None):
    """
    Create and configure an instance of the Flask application.

    Args:
        config_class: The configuration class to use. Can be a class object,
                      a string path to the class, or None (defaults to env var).

    Returns:
        The configured Flask application instance.
    """
    if config_class is None:
        config_class_name = os.getenv('FLASK_CONFIG', 'development')
        if config_class_name == 'testing':
            config_class = TestingConfig
        else:
            config_class = 'feedlot.config.Config'

    app = Flask(__name__)

    if isinstance(config_class, str):
        app.config.from_object(config_class)
        if config_class == 'feedlot.config.Config':
            from feedlot.config import Config
            Config.check_configuration()
    else:
        app.config.from_object(config_class)
        if hasattr(config_class, 'check_configuration'):
            config_class.check_configuration()

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from .exceptions import AuthenticationError
    from .models import User

    @login_manager.user_loader
    def load_user(user_id):
        """User loader callback for Flask-Login."""
        user = db.session.get(User, user_id)
        return user if user is not None and user.is_active else None

    @login_manager.unauthorized_handler
    def unauthorized():
        raise AuthenticationError("Please sign in to record events.")

    configure_logging(app)

    @app.route('/favicon.ico')
    def favicon():
        """Serve the favicon."""
        return '', 204

    from feedlot.api import api_bp as api_blueprint
    from feedlot.cli.setup_commands import setup_bp

    app.register_blueprint(api_blueprint)
    app.register_blueprint(setup_bp)

    return app

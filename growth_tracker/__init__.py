"""Growth Tracker Flask Application Factory."""

import logging
from typing import Optional

from flask import Flask

from growth_tracker.config import get_global_settings


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production)

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = config_name or settings.app_env
    app.config["DEBUG"] = settings.app_env == "development"
    app.config["TESTING"] = app.config["ENV"] == "testing"
    app.config["ANALYTICS"] = settings.analytics_config()

    logging.basicConfig(level=settings.log_level)

    # Register blueprints
    from growth_tracker.blueprints.health import health_bp
    from growth_tracker.blueprints.trackers import trackers_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(trackers_bp)

    return app

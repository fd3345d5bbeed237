"""Application factory and app-wide configuration."""

from typing import Optional

from flask import Flask
from flask_cors import CORS
from loguru import logger

from first_million.app.api.routes import api_bp
from first_million.config import Settings
from first_million.log_setup import configure_logging
from first_million.storage import ScenarioStore


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app instance."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.extensions["scenario_store"] = ScenarioStore(settings.database)

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    logger.info(f"API ready; scenarios stored in {settings.database}")
    return app

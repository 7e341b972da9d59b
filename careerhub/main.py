"""Flask application setup and blueprint wiring."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS
from pymongo.errors import PyMongoError

from careerhub import database
from careerhub.config import load_config
from careerhub.errors import register_error_handlers
from careerhub.routes import register_routes
from careerhub.utils.auth import register_session_cleanup


def create_app(config_overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Configure and return the Flask application instance."""
    app = Flask(__name__)
    app.config.update(load_config())
    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("careerhub").setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    database.configure(app.config["MONGODB_URI"], app.config["MONGODB_DATABASE"])

    register_error_handlers(app)
    register_session_cleanup(app)
    register_routes(app)

    if app.config["CREATE_INDEXES"]:
        try:
            with app.app_context():
                database.create_indexes()
                app.logger.info("MongoDB indexes created successfully")
        except PyMongoError as exc:
            app.logger.warning("Failed to create MongoDB indexes: %s", exc)

    return app

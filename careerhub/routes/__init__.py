"""Blueprint registration helper."""

from __future__ import annotations

from flask import Flask, jsonify

from .applications import bp as applications_bp
from .auth import bp as auth_bp
from .chat import bp as chat_bp
from .contacts import bp as contacts_bp
from .cover_letters import bp as cover_letters_bp
from .cover_letters import generate_bp as cover_letter_generation_bp
from .jobs import bp as jobs_bp
from .learning import bp as learning_bp
from .resumes import bp as resumes_bp


def register_routes(app: Flask) -> None:
    """Register all application blueprints on the provided Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(contacts_bp)
    app.register_blueprint(resumes_bp)
    app.register_blueprint(cover_letters_bp)
    app.register_blueprint(cover_letter_generation_bp)
    app.register_blueprint(applications_bp)
    app.register_blueprint(learning_bp)
    app.register_blueprint(chat_bp)
    app.register_blueprint(jobs_bp)

    @app.get("/")
    def index():
        return jsonify(message="Hello from the CareerHub API"), 200

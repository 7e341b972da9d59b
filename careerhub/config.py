"""Environment-driven configuration for the Flask application."""

from __future__ import annotations

import os
from typing import Any, Dict

UPLOAD_LIMIT_BYTES = 5 * 1024 * 1024  # 5 MB per request


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_config() -> Dict[str, Any]:
    """Read settings from the process environment into a Flask config mapping."""
    return {
        "MAX_CONTENT_LENGTH": _env_int("MAX_CONTENT_LENGTH", UPLOAD_LIMIT_BYTES),
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),
        "CORS_ORIGINS": _env_list("CORS_ORIGINS", "*"),
        # Storage
        "MONGODB_URI": os.getenv("MONGODB_URI", "mongodb://localhost:27017/"),
        "MONGODB_DATABASE": os.getenv("MONGODB_DATABASE", "careerhub"),
        "CREATE_INDEXES": _env_bool("CREATE_INDEXES", True),
        # Sign-in
        "CODE_TTL_SECONDS": _env_int("CODE_TTL_SECONDS", 5 * 60),
        "SESSION_TTL_SECONDS": _env_int("SESSION_TTL_SECONDS", 24 * 60 * 60),
        "EXPOSE_LOGIN_CODES": _env_bool("EXPOSE_LOGIN_CODES", False),
        "SESSION_CLEANUP_INTERVAL_SECONDS": _env_int("SESSION_CLEANUP_INTERVAL_SECONDS", 10 * 60),
        # Completion API
        "OPENAI_API_KEY": os.getenv("OPENAI_API_KEY"),
        "OPENAI_MODEL": os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        "OPENAI_TIMEOUT_SECONDS": float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30")),
        "COVER_LETTER_TOKEN_LIMIT": _env_int("COVER_LETTER_TOKEN_LIMIT", 7500),
        # Learning resource search
        "BRAVE_API_KEY": os.getenv("BRAVE_API_KEY"),
        "SEARCH_TIMEOUT_SECONDS": float(os.getenv("SEARCH_TIMEOUT_SECONDS", "10")),
        "RESUME_FETCH_TIMEOUT_SECONDS": float(os.getenv("RESUME_FETCH_TIMEOUT_SECONDS", "10")),
    }

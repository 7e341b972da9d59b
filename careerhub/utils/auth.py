"""Authentication helpers for session and token management."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from flask import Flask, Response, current_app, request
from pymongo.errors import PyMongoError

from careerhub.errors import Unauthenticated
from careerhub.services import auth_service

SESSION_COOKIE = "careerhub_session"


@dataclass(frozen=True)
class Principal:
    """The authenticated identity attached to a request."""

    id: str
    email: str


def now_seconds() -> int:
    """Return the current UNIX timestamp in seconds."""
    return int(time.time())


def now_millis() -> int:
    """Return the current UNIX timestamp in milliseconds."""
    return int(time.time() * 1000)


def generate_code() -> str:
    """Return a pseudo-random six character alphanumeric sign-in code."""
    chars = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"  # Exclude similar looking chars (0,O,1,I)
    return "".join(secrets.choice(chars) for _ in range(6))


def generate_token(prefix: str = "sess") -> str:
    """Return a random token with the given prefix, also used for document ids."""
    return f"{prefix}_{secrets.token_urlsafe(12)}"


def request_token() -> Optional[str]:
    """Pull the opaque session token from the Authorization header or cookie."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return request.cookies.get(SESSION_COOKIE) or None


def resolve_principal() -> Optional[Principal]:
    """Verify the request's credential and return its principal, or None.

    Every failure mode (no token, unknown token, expired session, deleted user,
    storage error) yields None so callers cannot tell them apart. Nothing is
    written to the store here.
    """
    token = request_token()
    if not token:
        return None

    try:
        session = auth_service.get_session(token)
        if not session or session["expires_at"] <= now_seconds():
            return None
        user = auth_service.get_user(session["user_id"])
    except Exception:
        current_app.logger.warning("Session verification failed", exc_info=True)
        return None

    if not user:
        return None
    return Principal(id=user["_id"], email=user["email"])


def require_principal(*, plain_text: bool = False) -> Tuple[Optional[Principal], Optional[object]]:
    """Resolve the caller or build the 401 response the route should return."""
    principal = resolve_principal()
    if principal is not None:
        return principal, None

    error = Unauthenticated()
    if plain_text:
        return None, error.to_text_response()
    return None, error.to_response()


def clear_session_cookie(response: Response) -> Response:
    response.delete_cookie(SESSION_COOKIE)
    return response


def register_session_cleanup(app: Flask) -> None:
    """Attach a before-request handler that prunes expired codes and sessions.

    The sweep runs at most once per SESSION_CLEANUP_INTERVAL_SECONDS; an
    interval of 0 disables it.
    """
    interval = app.config.get("SESSION_CLEANUP_INTERVAL_SECONDS", 0)
    if not interval:
        return
    app.extensions["careerhub.last_cleanup"] = 0

    @app.before_request
    def _cleanup_state() -> None:
        current = now_seconds()
        if current - app.extensions["careerhub.last_cleanup"] < interval:
            return
        app.extensions["careerhub.last_cleanup"] = current
        try:
            removed = auth_service.cleanup_expired_codes_and_sessions()
        except PyMongoError:
            app.logger.warning("Session cleanup failed", exc_info=True)
            return
        if removed["codes_deleted"] or removed["sessions_deleted"]:
            app.logger.info(
                "Removed %d expired codes and %d expired sessions",
                removed["codes_deleted"],
                removed["sessions_deleted"],
            )

"""Error taxonomy shared by every route and the handlers that render it."""

from __future__ import annotations

from typing import Any, Optional, Tuple

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    """Base class for failures that map onto a client-visible status code."""

    status_code = 500
    error_code = "internal_error"
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    @property
    def error(self) -> str:
        return self.detail or self.error_code

    def to_response(self) -> Tuple[Response, int]:
        return json_error(self.message, self.status_code, self.error)

    def to_text_response(self) -> Response:
        """Plain-text rendering used by the streaming endpoints."""
        return Response(self.message, status=self.status_code, mimetype="text/plain")


class Unauthenticated(ApiError):
    status_code = 401
    error_code = "unauthenticated"
    default_message = "Unauthorized"


class NotFound(ApiError):
    status_code = 404
    error_code = "not_found"
    default_message = "Resource not found"


class ValidationError(ApiError):
    status_code = 400
    error_code = "validation_error"
    default_message = "Validation failed"


class ContentTooLarge(ApiError):
    status_code = 413
    error_code = "token_limit"
    default_message = "Content exceeds maximum length. Please reduce the length of your inputs."


class RateLimited(ApiError):
    status_code = 429
    error_code = "rate_limited"
    default_message = "Too many requests. Please try again later."


class UpstreamError(ApiError):
    status_code = 500
    error_code = "upstream_error"
    default_message = "The AI service failed to respond. Please try again."


class SearchUnavailable(UpstreamError):
    status_code = 502
    default_message = "Failed to generate learning resources"


def json_error(message: str, status: int, error: Optional[str] = None) -> Tuple[Response, int]:
    """Build the `{message, error}` body used for every JSON failure."""
    return jsonify(message=message, error=error or message), status


def register_error_handlers(app: Flask) -> None:
    """Map the taxonomy, werkzeug errors and stray exceptions onto JSON responses."""

    @app.errorhandler(ApiError)
    def _handle_api_error(exc: ApiError):
        if exc.status_code >= 500:
            app.logger.error("%s: %s", type(exc).__name__, exc.message)
        return exc.to_response()

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        name = (exc.name or "error").lower().replace(" ", "_")
        body, status = json_error(exc.description or exc.name, exc.code or 500, name)
        # Keep werkzeug's own headers, e.g. Allow on 405.
        for header, value in exc.get_response().headers.items():
            if header not in ("Content-Type", "Content-Length"):
                body.headers[header] = value
        return body, status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception) -> Any:
        app.logger.exception("Unhandled error while processing request")
        return json_error("Internal server error", 500, "internal_error")

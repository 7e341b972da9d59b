"""/api/auth routes handling sign-in code issuance and verification."""

from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify

from careerhub.errors import Unauthenticated
from careerhub.schemas import CodeRequest, VerifyRequest
from careerhub.services import auth_service
from careerhub.utils.auth import (
    SESSION_COOKIE,
    clear_session_cookie,
    generate_code,
    generate_token,
    now_seconds,
    request_token,
    require_principal,
)
from careerhub.utils.payload import read_json_object, validate_model

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _expose_codes() -> bool:
    return bool(current_app.debug or current_app.testing or current_app.config.get("EXPOSE_LOGIN_CODES"))


@bp.post("/request-code")
def request_code():
    """Issue a short-lived sign-in code for an email address.

    Delivering the code is left to whatever mail transport fronts this API;
    in debug and test runs the code is returned in the response instead.
    """
    body = validate_model(CodeRequest, read_json_object())
    email = auth_service.normalize_email(body.email)

    code = generate_code()
    expires_at = now_seconds() + current_app.config["CODE_TTL_SECONDS"]
    auth_service.save_verification_code(email, code, expires_at)
    current_app.logger.info("Issued sign-in code for %s", email)

    payload = {"email": email, "expiresAt": expires_at * 1000}
    if _expose_codes():
        payload["code"] = code
    return jsonify(payload), 200


@bp.post("/verify")
def verify_code():
    """Redeem a sign-in code and issue a session token."""
    body = validate_model(VerifyRequest, read_json_object())
    email = auth_service.normalize_email(body.email)
    code = body.code.upper()

    record = auth_service.get_verification_code(email, code)
    if not record or record["expires_at"] <= now_seconds():
        raise Unauthenticated("Invalid or expired code.")
    if not auth_service.mark_code_as_used(email, code):
        raise Unauthenticated("Invalid or expired code.")

    user = auth_service.get_or_create_user(email)
    expires_at = now_seconds() + current_app.config["SESSION_TTL_SECONDS"]
    token = auth_service.save_session(generate_token("sess"), user["_id"], expires_at)

    response = jsonify(
        token=token,
        userId=user["_id"],
        email=user["email"],
        expiresAt=expires_at * 1000,
    )
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=current_app.config["SESSION_TTL_SECONDS"],
        httponly=True,
        samesite="Lax",
    )
    return response, 200


@bp.get("/session")
def get_session_info():
    """Return the principal behind the current session token."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    return jsonify(userId=principal.id, email=principal.email), 200


@bp.post("/sign-out")
def sign_out():
    token = request_token()
    if token:
        auth_service.delete_session(token)
    return clear_session_cookie(Response(status=204))

"""/api chat, coaching, interview practice and career planning endpoints."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from flask import Blueprint, Response, current_app, jsonify
from pydantic import ValidationError as PydanticValidationError

from careerhub.errors import ApiError, UpstreamError, ValidationError
from careerhub.schemas import ChatRequest
from careerhub.services import openai_service, prompt_service
from careerhub.utils.auth import require_principal
from careerhub.utils.payload import read_json_object, validate_model

bp = Blueprint("chat", __name__, url_prefix="/api")

STREAM_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def _chat_messages() -> List[Dict[str, Any]]:
    try:
        body = ChatRequest.model_validate(read_json_object())
    except (ValidationError, PydanticValidationError) as exc:
        raise ValidationError("Messages array is required") from exc
    if not body.messages:
        raise ValidationError("Messages array is required")
    return [message.model_dump(exclude={"timestamp"}) for message in body.messages]


def _stream_reply(default_prompt: str, *, allow_override: bool = False, override_marker: Optional[str] = None):
    principal, error_response = require_principal(plain_text=True)
    if error_response is not None:
        return error_response

    try:
        messages = prompt_service.with_system_prompt(
            _chat_messages(),
            default_prompt,
            allow_override=allow_override,
            override_marker=override_marker,
        )
        stream = openai_service.relay(openai_service.CompletionRequest(messages=messages), stream=True)
    except ApiError as exc:
        return exc.to_text_response()

    current_app.logger.info("Streaming completion for %s", principal.id)
    return Response(stream, mimetype="text/plain", headers=STREAM_HEADERS)


@bp.post("/chat")
def chat():
    """Stream a career-assistant reply as plain text."""
    return _stream_reply(prompt_service.CAREER_CHAT_PROMPT)


@bp.post("/salary-coach")
def salary_coach():
    """Stream salary negotiation advice; a caller system message replaces the default prompt."""
    return _stream_reply(prompt_service.SALARY_COACH_PROMPT, allow_override=True)


@bp.post("/challenges/feedback")
def challenge_feedback():
    """Stream technical interviewer feedback on a coding challenge answer."""
    return _stream_reply(
        prompt_service.TECHNICAL_INTERVIEWER_PROMPT,
        allow_override=True,
        override_marker=prompt_service.TECHNICAL_INTERVIEWER_MARKER,
    )


@bp.post("/interview")
def interview():
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    payload = read_json_object()
    action = str(payload.get("action") or "").strip()
    role = str(payload.get("role") or "").strip()
    message = str(payload.get("message") or "").strip()

    if not role:
        raise ValidationError(detail="Role is required")
    if action != "start" and not message:
        raise ValidationError(detail="Message is required")

    history = validate_model(ChatRequest, {"messages": payload.get("history") or []}).messages

    messages = prompt_service.interview_messages(
        role,
        action=action,
        message=message,
        history=[entry.model_dump(exclude={"timestamp"}) for entry in history],
    )
    result = openai_service.relay(openai_service.CompletionRequest(messages=messages))
    return jsonify(message=result.text), 200


@bp.post("/career-path")
def career_path():
    """Plan career steps for the described goal; the reply is the model's JSON object."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    career_input = str(read_json_object().get("careerInput") or "").strip()
    if not career_input:
        raise ValidationError(detail="Career input is required")

    request = openai_service.CompletionRequest(
        messages=prompt_service.career_path_messages(career_input),
        temperature=0.7,
        response_format={"type": "json_object"},
    )
    result = openai_service.relay(request)
    try:
        plan = json.loads(result.text)
    except ValueError as exc:
        raise UpstreamError("Failed to generate career path", detail="invalid_completion") from exc
    if not isinstance(plan, dict):
        raise UpstreamError("Failed to generate career path", detail="invalid_completion")

    current_app.logger.info("Generated career path for %s", principal.id)
    return jsonify(plan), 200

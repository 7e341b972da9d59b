"""/api/cover-letters storage and export, plus /api/cover-letter generation."""

from __future__ import annotations

from io import BytesIO
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, send_file

from careerhub.errors import NotFound, ValidationError, json_error
from careerhub.routes.resources import accept_name_as_title, resource_blueprint
from careerhub.services import openai_service, prompt_service
from careerhub.services.pdf_service import render_cover_letter_pdf
from careerhub.services.resource_service import cover_letters, resumes
from careerhub.utils.auth import Principal, require_principal
from careerhub.utils.payload import read_json_object
from careerhub.utils.text import fetch_resume_text, resume_content_to_text

bp = resource_blueprint(
    "cover_letters",
    "/api/cover-letters",
    cover_letters,
    prepare_payload=accept_name_as_title,
    put_alias=True,
)

generate_bp = Blueprint("cover_letter_generation", __name__, url_prefix="/api/cover-letter")


@bp.get("/<resource_id>/pdf")
def export_cover_letter_pdf(resource_id: str):
    """Return a downloadable PDF for an existing cover letter."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    record = cover_letters.find_owned(principal, resource_id)
    if record is None:
        return json_error(cover_letters.not_found_message, 404, "not_found")

    buffer = BytesIO(render_cover_letter_pdf(record))
    return send_file(
        buffer,
        mimetype="application/pdf",
        as_attachment=True,
        download_name=f"cover-letter-{resource_id}.pdf",
    )


def _resume_text(principal: Principal, payload: Dict[str, Any]) -> str:
    """Résumé text from inline content, an owned résumé id, or a download URL."""
    inline = str(payload.get("resumeContent") or "").strip()
    if inline:
        return inline

    resume_id = payload.get("resumeId")
    if resume_id:
        record = resumes.find_owned(principal, str(resume_id))
        if record is None:
            raise NotFound(resumes.not_found_message)
        return resume_content_to_text(record.get("content") or {})

    resume_url = str(payload.get("resumeUrl") or "").strip()
    if resume_url:
        return fetch_resume_text(
            resume_url, timeout=current_app.config["RESUME_FETCH_TIMEOUT_SECONDS"]
        )
    return ""


@generate_bp.post("")
def generate_cover_letter():
    """Draft a cover letter for a job from the caller's résumé."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    payload = read_json_object()
    job_description = str(payload.get("jobDescription") or "").strip()
    if not job_description:
        raise ValidationError(detail="Job description and resume content are required")

    resume_text = _resume_text(principal, payload)
    if not resume_text:
        raise ValidationError(detail="Job description and resume content are required")

    messages = prompt_service.cover_letter_messages(
        job_description=job_description,
        resume_content=resume_text,
        job_title=payload.get("jobTitle"),
        company_name=payload.get("companyName"),
        key_skills=payload.get("keySkills"),
        industry=payload.get("industry"),
        template=payload.get("template"),
    )
    prompt_service.ensure_within_limit(
        prompt_service.prompt_text(messages),
        current_app.config["COVER_LETTER_TOKEN_LIMIT"],
    )

    result = openai_service.relay(openai_service.CompletionRequest(messages=messages, temperature=0.7))
    return jsonify(coverLetter=result.text), 200

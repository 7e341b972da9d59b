"""/api/resumes endpoints, including PDF export."""

from __future__ import annotations

from io import BytesIO

from flask import send_file

from careerhub.errors import json_error
from careerhub.routes.resources import accept_name_as_title, resource_blueprint
from careerhub.services.pdf_service import render_resume_pdf
from careerhub.services.resource_service import resumes
from careerhub.utils.auth import require_principal

bp = resource_blueprint(
    "resumes",
    "/api/resumes",
    resumes,
    prepare_payload=accept_name_as_title,
    put_alias=True,
)


@bp.get("/<resource_id>/pdf")
def export_resume_pdf(resource_id: str):
    """Return a downloadable PDF rendering of a stored résumé."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    record = resumes.find_owned(principal, resource_id)
    if record is None:
        return json_error(resumes.not_found_message, 404, "not_found")

    buffer = BytesIO(render_resume_pdf(record))
    return send_file(
        buffer,
        mimetype="application/pdf",
        as_attachment=True,
        download_name=f"resume-{resource_id}.pdf",
    )

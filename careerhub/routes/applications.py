"""/api/applications endpoints for the job application tracker."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from flask import jsonify

from careerhub.errors import ValidationError, json_error
from careerhub.routes.resources import resource_blueprint
from careerhub.schemas import CommunicationEntry
from careerhub.services.resource_service import applications, contacts, cover_letters, resumes
from careerhub.utils.auth import Principal, require_principal
from careerhub.utils.payload import read_json_object, validate_model

LINKED_RESOURCES = (
    ("contact_id", contacts),
    ("resume_id", resumes),
    ("cover_letter_id", cover_letters),
)


def _check_linked_resources(principal: Principal, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Reject links to contacts, résumés or letters the caller does not own."""
    for field, repository in LINKED_RESOURCES:
        linked_id = payload.get(field)
        if linked_id and repository.find_owned(principal, str(linked_id)) is None:
            raise ValidationError(detail=f"{field}: {repository.not_found_message}")
    return payload


bp = resource_blueprint(
    "applications",
    "/api/applications",
    applications,
    prepare_payload=_check_linked_resources,
)


@bp.post("/<resource_id>/communication")
def add_communication(resource_id: str):
    """Append a dated communication entry to an application's history."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    existing = applications.find_owned(principal, resource_id)
    if existing is None:
        return json_error(applications.not_found_message, 404, "not_found")

    entry = validate_model(CommunicationEntry, read_json_object()).model_dump()
    entry["date"] = datetime.utcnow().isoformat()

    history = list(existing.get("communication_history") or [])
    history.append(entry)
    document = applications.update_owned(principal, resource_id, {"communication_history": history})
    if document is None:
        return json_error(applications.not_found_message, 404, "not_found")
    return jsonify(applications.serialize(document)), 200

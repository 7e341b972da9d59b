"""/api/learning-path endpoints built on the web-search client."""

from __future__ import annotations

from flask import current_app, jsonify

from careerhub.errors import SearchUnavailable
from careerhub.routes.resources import resource_blueprint
from careerhub.schemas import LearningPathRequest
from careerhub.services import search_service
from careerhub.services.resource_service import learning_paths
from careerhub.utils.auth import require_principal
from careerhub.utils.payload import read_json_object, validate_model

bp = resource_blueprint("learning_paths", "/api/learning-path", learning_paths, allow_create=False)


@bp.post("")
def create_learning_path():
    """Search resources for each skill gap and store the resulting path."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    request_body = validate_model(LearningPathRequest, read_json_object())
    skill_gaps = search_service.build_skill_gaps(
        [skill.model_dump() for skill in request_body.skills],
        api_key=current_app.config.get("BRAVE_API_KEY"),
        timeout=current_app.config.get("SEARCH_TIMEOUT_SECONDS", 10),
    )
    if not skill_gaps:
        raise SearchUnavailable()

    document = learning_paths.create_for(
        principal,
        {
            "title": "Custom Learning Path",
            "description": "Based on your skill gaps",
            "skill_gaps": skill_gaps,
            "completed": False,
        },
    )
    current_app.logger.info("Created learning path with %d skill gaps", len(skill_gaps))
    return jsonify(learning_paths.serialize(document)), 200

"""/api/contacts endpoints for the networking contact book."""

from __future__ import annotations

from flask import jsonify

from careerhub.routes.resources import resource_blueprint
from careerhub.services.resource_service import contacts
from careerhub.utils.auth import require_principal

bp = resource_blueprint("contacts", "/api/contacts", contacts)


@bp.get("/stats")
def contact_stats():
    """Return network summary counts for the signed-in user."""
    principal, error_response = require_principal()
    if error_response is not None:
        return error_response

    return jsonify(contacts.stats_for(principal)), 200

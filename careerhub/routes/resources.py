"""Blueprint factory for the uniform owned-resource CRUD surface."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from flask import Blueprint, Response, jsonify

from careerhub.errors import json_error
from careerhub.services.resource_service import OwnedResourceRepository
from careerhub.utils.auth import Principal, require_principal
from careerhub.utils.payload import read_json_object

PayloadHook = Callable[[Principal, Dict[str, Any]], Dict[str, Any]]


def resource_blueprint(
    name: str,
    url_prefix: str,
    repository: OwnedResourceRepository,
    *,
    allow_create: bool = True,
    prepare_payload: Optional[PayloadHook] = None,
    put_alias: bool = False,
) -> Blueprint:
    """Build list/create/read/update/delete routes for one resource class.

    Every route resolves the principal first; reads, updates and deletes go
    through the repository's ownership check and answer 404 for documents
    that are missing or owned by someone else.
    """
    bp = Blueprint(name, __name__, url_prefix=url_prefix)
    prepare = prepare_payload or (lambda principal, payload: payload)

    def _not_found():
        return json_error(repository.not_found_message, 404, "not_found")

    @bp.get("")
    def list_resources():
        principal, error_response = require_principal()
        if error_response is not None:
            return error_response

        documents = repository.list_for(principal)
        return jsonify([repository.serialize(document) for document in documents]), 200

    if allow_create:

        @bp.post("")
        def create_resource():
            principal, error_response = require_principal()
            if error_response is not None:
                return error_response

            payload = prepare(principal, read_json_object())
            document = repository.create_for(principal, payload)
            return jsonify(repository.serialize(document)), 200

    @bp.get("/<resource_id>")
    def get_resource(resource_id: str):
        principal, error_response = require_principal()
        if error_response is not None:
            return error_response

        document = repository.find_owned(principal, resource_id)
        if document is None:
            return _not_found()
        return jsonify(repository.serialize(document)), 200

    def update_resource(resource_id: str):
        principal, error_response = require_principal()
        if error_response is not None:
            return error_response

        if repository.find_owned(principal, resource_id) is None:
            return _not_found()

        changes = prepare(principal, read_json_object())
        document = repository.update_owned(principal, resource_id, changes)
        if document is None:
            return _not_found()
        return jsonify(repository.serialize(document)), 200

    bp.add_url_rule("/<resource_id>", view_func=update_resource, methods=["PATCH"])
    if put_alias:
        bp.add_url_rule("/<resource_id>", endpoint="replace_resource", view_func=update_resource, methods=["PUT"])

    @bp.delete("/<resource_id>")
    def delete_resource(resource_id: str):
        principal, error_response = require_principal()
        if error_response is not None:
            return error_response

        if not repository.delete_owned(principal, resource_id):
            return _not_found()
        return Response(status=204)

    return bp


def accept_name_as_title(principal: Principal, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Older clients rename documents by sending `name` instead of `title`."""
    if "name" in payload and "title" not in payload:
        payload = dict(payload)
        payload["title"] = payload.pop("name")
    return payload

"""Request body parsing and schema validation helpers."""

from __future__ import annotations

from typing import Any, Dict, Type, TypeVar

import pydantic
from flask import request

from careerhub.errors import ValidationError

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def read_json_object() -> Dict[str, Any]:
    """Return the JSON request body, rejecting anything that is not an object."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError(detail="Request body must be a JSON object.")
    return payload


def describe_validation_error(exc: pydantic.ValidationError) -> str:
    """Flatten pydantic errors into `field.path: message` pairs."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return ", ".join(parts)


def validate_model(schema: Type[ModelT], data: Any) -> ModelT:
    """Validate data against a schema, raising the API validation error on failure."""
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(detail=describe_validation_error(exc)) from exc

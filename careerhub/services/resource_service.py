"""Owner-scoped persistence for every user-owned resource class."""

from __future__ import annotations

import secrets
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Type

import pydantic
from pymongo import DESCENDING
from pymongo.collection import Collection

from careerhub import database
from careerhub.errors import ValidationError
from careerhub.schemas import (
    ApplicationPayload,
    ContactPayload,
    CoverLetterPayload,
    LearningPathPayload,
    ResumePayload,
)
from careerhub.utils.payload import validate_model

if TYPE_CHECKING:  # pragma: no cover
    from careerhub.utils.auth import Principal

# Fields managed by the repository; payloads can never set them.
RESERVED_FIELDS = ("_id", "id", "user_id", "userId", "created_at", "updated_at", "createdAt", "updatedAt")


def _utcnow() -> datetime:
    # BSON dates carry millisecond precision
    now = datetime.utcnow()
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


def _isoformat(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class OwnedResourceRepository:
    """CRUD over one collection where every document belongs to exactly one user.

    Reads, updates and deletes always filter on both the document id and the
    caller's id, so a document owned by someone else is indistinguishable
    from one that does not exist.
    """

    def __init__(
        self,
        collection_name: str,
        schema: Type[pydantic.BaseModel],
        *,
        id_prefix: str,
        label: str,
    ) -> None:
        self.collection_name = collection_name
        self.schema = schema
        self.id_prefix = id_prefix
        self.label = label

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"

    def _collection(self) -> Collection:
        return database.get_database()[self.collection_name]

    def _new_id(self) -> str:
        return f"{self.id_prefix}_{secrets.token_urlsafe(12)}"

    def validate(self, payload: Any) -> Dict[str, Any]:
        """Validate a complete payload and return its canonical stored form."""
        if not isinstance(payload, Mapping):
            raise ValidationError(detail="Request body must be a JSON object.")
        reserved = sorted(key for key in payload if key in RESERVED_FIELDS)
        if reserved:
            raise ValidationError(detail=f"{', '.join(reserved)}: field is read-only")
        return validate_model(self.schema, dict(payload)).model_dump()

    def payload_of(self, document: Mapping[str, Any]) -> Dict[str, Any]:
        """Strip bookkeeping fields, leaving only schema-declared values."""
        return {key: document[key] for key in self.schema.model_fields if key in document}

    def find_owned(self, principal: "Principal", resource_id: str) -> Optional[Dict[str, Any]]:
        """Return the document only when it exists and belongs to the principal."""
        if not resource_id:
            return None
        return self._collection().find_one({"_id": resource_id, "user_id": principal.id})

    def list_for(self, principal: "Principal") -> List[Dict[str, Any]]:
        """All of the principal's documents, most recently updated first."""
        cursor = self._collection().find({"user_id": principal.id}).sort(
            [("updated_at", DESCENDING), ("created_at", DESCENDING)]
        )
        return list(cursor)

    def create_for(self, principal: "Principal", payload: Any) -> Dict[str, Any]:
        values = self.validate(payload)
        timestamp = _utcnow()
        document = {
            "_id": self._new_id(),
            "user_id": principal.id,
            **values,
            "created_at": timestamp,
            "updated_at": timestamp,
        }
        self._collection().insert_one(document)
        return document

    def update_owned(
        self, principal: "Principal", resource_id: str, changes: Any
    ) -> Optional[Dict[str, Any]]:
        """Apply a partial update after the ownership check; None when not found.

        The merged document is validated as a whole before anything is written.
        """
        existing = self.find_owned(principal, resource_id)
        if existing is None:
            return None
        if not isinstance(changes, Mapping):
            raise ValidationError(detail="Request body must be a JSON object.")

        values = self.validate({**self.payload_of(existing), **changes})
        values["updated_at"] = _utcnow()
        self._collection().update_one(
            {"_id": resource_id, "user_id": principal.id},
            {"$set": values},
        )
        return {**existing, **values}

    def delete_owned(self, principal: "Principal", resource_id: str) -> bool:
        if self.find_owned(principal, resource_id) is None:
            return False
        result = self._collection().delete_one({"_id": resource_id, "user_id": principal.id})
        return result.deleted_count > 0

    def serialize(self, document: Mapping[str, Any]) -> Dict[str, Any]:
        """Render a stored document as the JSON shape returned to clients."""
        body: Dict[str, Any] = {"id": document["_id"], "userId": document["user_id"]}
        for key, value in self.payload_of(document).items():
            body[key] = _isoformat(value)
        body["createdAt"] = _isoformat(document.get("created_at"))
        body["updatedAt"] = _isoformat(document.get("updated_at"))
        return body


class ContactRepository(OwnedResourceRepository):
    def stats_for(self, principal: "Principal", *, today: Optional[date] = None) -> Dict[str, Any]:
        """Summary counts for the principal's network."""
        today_iso = (today or _utcnow().date()).isoformat()
        contacts = self.list_for(principal)
        scores = [contact.get("relationship_score") or 0 for contact in contacts]
        needs_followup = sum(
            1
            for contact in contacts
            if contact.get("next_followup_date") and contact["next_followup_date"][:10] <= today_iso
        )
        return {
            "totalContacts": len(contacts),
            "averageRelationshipScore": round(sum(scores) / len(scores), 1) if scores else 0,
            "needsFollowup": needs_followup,
        }


contacts = ContactRepository("contacts", ContactPayload, id_prefix="contact", label="Contact")
resumes = OwnedResourceRepository("resumes", ResumePayload, id_prefix="resume", label="Resume")
cover_letters = OwnedResourceRepository(
    "cover_letters", CoverLetterPayload, id_prefix="letter", label="Cover letter"
)
applications = OwnedResourceRepository(
    "applications", ApplicationPayload, id_prefix="application", label="Application"
)
learning_paths = OwnedResourceRepository(
    "learning_paths", LearningPathPayload, id_prefix="path", label="Learning path"
)

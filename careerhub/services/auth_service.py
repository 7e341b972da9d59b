"""Service for managing sign-in codes, users and sessions in MongoDB."""

from __future__ import annotations

import secrets
import time
from datetime import datetime
from typing import Any, Dict, Optional

from careerhub import database


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def save_verification_code(
    email: str,
    code: str,
    expires_at: int,
) -> str:
    """
    Save a sign-in code for an email address.

    Any earlier unused code for the same address is replaced.

    Args:
        email: Address the code was issued to
        code: The 6-character sign-in code
        expires_at: Unix timestamp when the code expires

    Returns:
        The code that was saved
    """
    db = database.get_database()
    collection = db.verification_codes

    document = {
        "email": normalize_email(email),
        "code": code,
        "expires_at": expires_at,
        "created_at": datetime.utcnow(),
        "used": False,
    }

    collection.update_one(
        {"email": document["email"], "used": False},
        {"$set": document},
        upsert=True,
    )

    return code


def get_verification_code(email: str, code: str) -> Optional[Dict[str, Any]]:
    """Return the unused code document for this address, if any."""
    db = database.get_database()
    return db.verification_codes.find_one(
        {"email": normalize_email(email), "code": code, "used": False}
    )


def mark_code_as_used(email: str, code: str) -> bool:
    """
    Mark a sign-in code as used so it can't be redeemed twice.

    Returns:
        True if the code was marked as used, False if not found
    """
    db = database.get_database()
    result = db.verification_codes.update_one(
        {"email": normalize_email(email), "code": code, "used": False},
        {"$set": {"used": True, "used_at": datetime.utcnow()}},
    )
    return result.modified_count > 0


def get_or_create_user(email: str) -> Dict[str, Any]:
    """Return the user row for an address, creating it on first sign-in."""
    db = database.get_database()
    normalized = normalize_email(email)

    db.users.update_one(
        {"email": normalized},
        {
            "$setOnInsert": {
                "_id": f"user_{secrets.token_urlsafe(12)}",
                "email": normalized,
                "created_at": datetime.utcnow(),
            }
        },
        upsert=True,
    )
    return db.users.find_one({"email": normalized})


def get_user(user_id: str) -> Optional[Dict[str, Any]]:
    db = database.get_database()
    return db.users.find_one({"_id": user_id})


def save_session(token: str, user_id: str, expires_at: int) -> str:
    """
    Save a session to MongoDB.

    Args:
        token: The opaque session token handed to the client
        user_id: The owning user's id
        expires_at: Unix timestamp when the session expires

    Returns:
        The token that was saved
    """
    db = database.get_database()
    db.sessions.update_one(
        {"token": token},
        {
            "$set": {
                "token": token,
                "user_id": user_id,
                "expires_at": expires_at,
                "created_at": datetime.utcnow(),
            }
        },
        upsert=True,
    )
    return token


def get_session(token: str) -> Optional[Dict[str, Any]]:
    """Return the stored session for a token; expiry is checked by the caller."""
    db = database.get_database()
    return db.sessions.find_one({"token": token})


def delete_session(token: str) -> bool:
    """
    Delete a session from MongoDB.

    Returns:
        True if the session was deleted, False if not found
    """
    db = database.get_database()
    result = db.sessions.delete_one({"token": token})
    return result.deleted_count > 0


def cleanup_expired_codes_and_sessions() -> Dict[str, int]:
    """Remove expired or redeemed sign-in codes and expired sessions."""
    db = database.get_database()

    current_timestamp = int(time.time())

    codes_result = db.verification_codes.delete_many(
        {"$or": [{"expires_at": {"$lte": current_timestamp}}, {"used": True}]}
    )
    sessions_result = db.sessions.delete_many({"expires_at": {"$lte": current_timestamp}})

    return {
        "codes_deleted": codes_result.deleted_count,
        "sessions_deleted": sessions_result.deleted_count,
    }

"""MongoDB database configuration and connection management."""

from __future__ import annotations

from typing import Optional

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

DEFAULT_URI = "mongodb://localhost:27017/"
DEFAULT_DATABASE = "careerhub"

OWNED_COLLECTIONS = (
    "contacts",
    "resumes",
    "cover_letters",
    "applications",
    "learning_paths",
)

# Global MongoDB client instance
_client: Optional[MongoClient] = None
_database: Optional[Database] = None
_uri: str = DEFAULT_URI
_database_name: str = DEFAULT_DATABASE


def configure(uri: str, database_name: str) -> None:
    """Record connection settings; an existing client is dropped if they change."""
    global _uri, _database_name
    if (uri, database_name) != (_uri, _database_name):
        close_mongo_connection()
    _uri = uri
    _database_name = database_name


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client instance."""
    global _client
    if _client is None:
        _client = MongoClient(_uri, tz_aware=False)
    return _client


def get_database() -> Database:
    """Get the MongoDB database instance."""
    global _database
    if _database is None:
        client = get_mongo_client()
        _database = client[_database_name]
    return _database


def create_indexes() -> None:
    """Create the lookup indexes every collection relies on."""
    db = get_database()
    db.users.create_index([("email", ASCENDING)], unique=True)
    db.sessions.create_index([("token", ASCENDING)], unique=True)
    db.sessions.create_index([("expires_at", ASCENDING)])
    db.verification_codes.create_index([("email", ASCENDING), ("code", ASCENDING)])
    for name in OWNED_COLLECTIONS:
        db[name].create_index([("user_id", ASCENDING), ("updated_at", DESCENDING)])


def close_mongo_connection():
    """Close the MongoDB connection."""
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None

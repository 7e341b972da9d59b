#!/usr/bin/env python3
"""Drop every CareerHub collection so the database starts empty."""

import sys

from dotenv import load_dotenv

load_dotenv()

from careerhub import database  # noqa: E402
from careerhub.config import load_config  # noqa: E402

COLLECTIONS = ("verification_codes", "sessions", "users", *database.OWNED_COLLECTIONS)


def reset_all_collections():
    """Drop all collections and recreate their indexes."""
    config = load_config()
    database.configure(config["MONGODB_URI"], config["MONGODB_DATABASE"])
    db = database.get_database()

    print(f"Clearing all collections in {config['MONGODB_DATABASE']}...")
    for collection_name in COLLECTIONS:
        db[collection_name].drop()
        print(f"   dropped {collection_name}")

    database.create_indexes()
    print("\nDatabase reset complete. Existing sign-in sessions are gone; users must sign in again.")


if __name__ == "__main__":
    print("Resetting database. This will DELETE ALL existing data.")

    confirm = input("\nAre you sure? Type 'yes' to continue: ")
    if confirm.lower() != "yes":
        print("Reset cancelled.")
        sys.exit(1)
    reset_all_collections()

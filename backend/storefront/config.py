"""
storefront/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and lazily initializes the Firebase Admin SDK (Firestore DB) when the Firestore backend is selected.
All other modules can import from config to access `settings` and `get_db()` (Firestore client).
"""
from typing import Literal, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    storage_backend: Literal["memory", "firestore"] = Field("memory", description="Where products and carts live")

    firebase_cred_file: str = Field("firebase_service_account.json")
    firebase_project_id: Optional[str] = None
    collection_prefix: str = Field("", description="Prefix for every Firestore collection name")

    cart_storage_key: str = Field("andan_cart", description="Fixed key the cart payload is stored under")
    cart_store_dir: Optional[str] = Field(None, description="If set (memory backend), carts are kept as JSON files here")

    debug: bool = False
    allowed_origins: str = Field("*", description="Comma-separated list or '*' for all")
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore"}


# Load settings from environment (.env file, etc.)
settings = Settings()

_db = None


def prefixed(name: str) -> str:
    prefix = (settings.collection_prefix or "").strip()
    return f"{prefix}{name}" if prefix else name


def get_db():
    """
    Return the Firestore client, initializing Firebase Admin on first use.
    Only the Firestore backend calls this; the memory backend never touches Firebase.
    """
    global _db
    if _db is not None:
        return _db

    try:
        cred = credentials.Certificate(settings.firebase_cred_file)
        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        firebase_admin.initialize_app(cred, options)
    except ValueError as e:
        # Firebase app already initialized, reuse the default app
        if "already exists" not in str(e):
            raise

    _db = firestore.client()
    return _db

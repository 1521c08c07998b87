# pyright: reportMissingTypeStubs=false
"""
Firebase client setup and store adapters.

This module initializes the Firebase Admin app once per process and exposes
the two stores the retention sweeper works against:
- the Realtime Database holding post records
- Cloud Storage holding the media files referenced by those posts

The sweeper only depends on the RecordStore/BlobStore protocols, so tests
can hand it in-memory fakes instead of these adapters.
"""

import logging
from typing import Any, Mapping, Optional, Protocol

import firebase_admin  # type: ignore
from firebase_admin import credentials, db, storage  # type: ignore

from core.config import (
    FIREBASE_CREDENTIALS_PATH,
    FIREBASE_DATABASE_URL,
    FIREBASE_STORAGE_BUCKET,
)

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Hierarchical key-value store holding records under named collections."""

    def fetch_collection(self, name: str) -> Optional[Mapping[str, Any]]:
        ...

    def delete_record(self, name: str, record_id: str) -> None:
        ...


class BlobStore(Protocol):
    """Object store addressed by store-internal paths."""

    def delete_object(self, path: str) -> None:
        ...


# Process-wide instances, created on first use and never torn down
_firebase_app: Optional[Any] = None
_record_store: Optional['RealtimeDatabaseStore'] = None
_blob_store: Optional['CloudStorageBlobStore'] = None


def get_firebase_app() -> Any:
    """
    Get the Firebase Admin app, initializing it on first use.

    Uses the service account file at FIREBASE_CREDENTIALS_PATH when set,
    otherwise Application Default Credentials.

    Returns:
        The default firebase_admin.App instance
    """
    global _firebase_app
    if _firebase_app is not None:
        return _firebase_app

    try:
        # Another component in the process may already have initialized it
        _firebase_app = firebase_admin.get_app()
        return _firebase_app
    except ValueError:
        pass

    if FIREBASE_CREDENTIALS_PATH:
        credential = credentials.Certificate(FIREBASE_CREDENTIALS_PATH)
    else:
        credential = credentials.ApplicationDefault()

    options: dict[str, str] = {}
    if FIREBASE_DATABASE_URL:
        options["databaseURL"] = FIREBASE_DATABASE_URL
    if FIREBASE_STORAGE_BUCKET:
        options["storageBucket"] = FIREBASE_STORAGE_BUCKET

    _firebase_app = firebase_admin.initialize_app(credential, options)
    logger.info("Firebase app initialized")
    return _firebase_app


class RealtimeDatabaseStore:
    """RecordStore backed by the Firebase Realtime Database."""

    def __init__(self, app: Any):
        self.app = app

    def fetch_collection(self, name: str) -> Optional[Mapping[str, Any]]:
        # Full snapshot; the database offers no server-side age filter we rely on
        return db.reference(name, app=self.app).get()

    def delete_record(self, name: str, record_id: str) -> None:
        db.reference(f"{name}/{record_id}", app=self.app).delete()


class CloudStorageBlobStore:
    """BlobStore backed by the Firebase Cloud Storage bucket."""

    def __init__(self, app: Any, bucket_name: Optional[str] = None):
        self.bucket = storage.bucket(name=bucket_name or None, app=app)

    def delete_object(self, path: str) -> None:
        self.bucket.blob(path).delete()


def get_record_store() -> RealtimeDatabaseStore:
    """Get the process-wide Realtime Database store."""
    global _record_store
    if _record_store is None:
        _record_store = RealtimeDatabaseStore(get_firebase_app())
    return _record_store


def get_blob_store() -> CloudStorageBlobStore:
    """Get the process-wide Cloud Storage store."""
    global _blob_store
    if _blob_store is None:
        _blob_store = CloudStorageBlobStore(get_firebase_app(), FIREBASE_STORAGE_BUCKET)
    return _blob_store

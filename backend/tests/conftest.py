"""
Test configuration and shared fixtures for the retention sweeper test suite.

Firebase is never contacted: the sweeper is handed in-memory stores that
record every call, and a fixed clock so expiry decisions are deterministic.
"""

from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

import pytest

from core.constants import POSTS_COLLECTION
from services.retention_sweeper import RetentionSweeper


DAY_MS = 24 * 60 * 60 * 1000

# 2023-11-14T22:13:20Z
NOW_MS = 1_700_000_000_000

MEDIA_URL_TEMPLATE = (
    "https://firebasestorage.googleapis.com/v0/b/demo-app.appspot.com/o/{encoded}"
    "?alt=media&token=0b6f3a52-1e8c-4b4e-9d3c-2f7a1c9e5d10"
)


def media_url(encoded_path: str) -> str:
    """Build a Cloud Storage download URL for an already percent-encoded path."""
    return MEDIA_URL_TEMPLATE.format(encoded=encoded_path)


class FakeRecordStore:
    """In-memory RecordStore recording fetches and deletes."""

    def __init__(self, collections: Optional[Dict[str, Any]] = None):
        self.collections: Dict[str, Any] = collections if collections is not None else {}
        self.fetch_calls: List[str] = []
        self.delete_calls: List[Tuple[str, str]] = []
        self.fetch_error: Optional[Exception] = None
        self.failing_ids: Set[str] = set()

    def fetch_collection(self, name: str) -> Optional[Mapping[str, Any]]:
        self.fetch_calls.append(name)
        if self.fetch_error is not None:
            raise self.fetch_error
        collection = self.collections.get(name)
        if isinstance(collection, dict):
            return dict(collection)
        return collection

    def delete_record(self, name: str, record_id: str) -> None:
        self.delete_calls.append((name, record_id))
        if record_id in self.failing_ids:
            raise RuntimeError(f"permission denied for {name}/{record_id}")
        collection = self.collections.get(name)
        if isinstance(collection, dict):
            collection.pop(record_id, None)


class FakeBlobStore:
    """In-memory BlobStore recording deletes."""

    def __init__(self, objects: Optional[Set[str]] = None):
        self.objects: Set[str] = objects if objects is not None else set()
        self.delete_calls: List[str] = []
        self.failing_paths: Set[str] = set()

    def delete_object(self, path: str) -> None:
        self.delete_calls.append(path)
        if path in self.failing_paths:
            raise RuntimeError(f"404 No such object: {path}")
        self.objects.discard(path)


@pytest.fixture
def record_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def sweeper(record_store, blob_store) -> RetentionSweeper:
    """Sweeper over the fake stores with the clock pinned to NOW_MS."""
    return RetentionSweeper(record_store, blob_store, clock=lambda: NOW_MS)


@pytest.fixture
def seed_posts(record_store):
    """Put posts into the fake posts collection."""
    def _seed(posts: Dict[str, Any]) -> None:
        record_store.collections[POSTS_COLLECTION] = posts
    return _seed

"""
Retention sweeper for expired posts.

One sweep reads the whole posts collection, picks the posts older than the
retention window, and deletes them together with their media files:
1. Fetch every post from the Realtime Database in one snapshot
2. Mark posts whose timestamp is older than RETENTION_WINDOW_MS as expired
3. Derive the storage path of each expired post's video
4. Delete all expired posts and media files concurrently and wait for all of them
5. Summarize the run as a SweepResult

Media deletions are best effort: failures are logged and ignored. Post
deletion failures fail the sweep, but only after every delete has settled.
Nothing ties a post deletion to its media deletion. A post that failed to
delete is picked up again by the next sweep; an orphaned media file is not.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Tuple

from core.constants import (
    POSTS_COLLECTION,
    POST_MEDIA_FIELD,
    POST_TIMESTAMP_FIELD,
    RETENTION_WINDOW_MS,
)
from core.firebase import BlobStore, RecordStore
from shared_types.sweep import SweepResult
from utils.datetime_utils import now_ms
from utils.media_path import MediaReferenceError, extract_media_path

logger = logging.getLogger(__name__)


class RecordDeletionError(RuntimeError):
    """Raised after the delete batch settles when one or more posts could not be deleted."""

    def __init__(self, failures: Dict[str, BaseException]):
        self.failures = failures
        first_id, first_error = next(iter(failures.items()))
        super().__init__(
            f"Failed to delete {len(failures)} post(s) "
            f"(first: {first_id}: {str(first_error) or type(first_error).__name__})"
        )


def is_expired(post: Any, cutoff_ms: int) -> bool:
    """
    Check whether a post is past the retention cutoff.

    Posts without a numeric timestamp are never expired.

    Args:
        post: Post payload from the database
        cutoff_ms: Epoch milliseconds; posts created before this are expired

    Returns:
        True if the post should be deleted
    """
    if not isinstance(post, Mapping):
        return False
    timestamp = post.get(POST_TIMESTAMP_FIELD)
    # bool is an int subclass but never a real timestamp
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return False
    return timestamp < cutoff_ms


def collect_expired(posts: Mapping[str, Any], cutoff_ms: int) -> Tuple[List[str], List[str]]:
    """
    Split out the expired posts and the media paths they reference.

    A post whose media URL cannot be parsed is still returned as expired;
    only its media deletion is skipped.

    Returns:
        (expired post ids, media object paths)
    """
    expired_ids: List[str] = []
    media_paths: List[str] = []

    for post_id, post in posts.items():
        if not is_expired(post, cutoff_ms):
            continue
        expired_ids.append(post_id)

        media_url = post.get(POST_MEDIA_FIELD)
        if not media_url:
            continue
        try:
            media_paths.append(extract_media_path(media_url))
        except MediaReferenceError as e:
            logger.error(f"❌ Error parsing video URL for post {post_id}: {e}")

    return expired_ids, media_paths


def _as_mapping(snapshot: Any) -> Dict[str, Any]:
    """Normalize a collection snapshot to an id -> post mapping."""
    if isinstance(snapshot, Mapping):
        return {str(key): value for key, value in snapshot.items()}
    # The Realtime Database returns a list when keys are sequential integers
    if isinstance(snapshot, list):
        return {str(index): value for index, value in enumerate(snapshot) if value is not None}
    raise TypeError(f"Unexpected {POSTS_COLLECTION} snapshot type: {type(snapshot).__name__}")


class RetentionSweeper:
    """
    Deletes posts older than the retention window and their media files.

    The stores are injected so the process-wide Firebase clients can be
    shared across runs and replaced with fakes in tests.
    """

    def __init__(
        self,
        record_store: RecordStore,
        blob_store: BlobStore,
        clock: Callable[[], int] = now_ms,
        collection: str = POSTS_COLLECTION,
    ):
        self.record_store = record_store
        self.blob_store = blob_store
        self.clock = clock
        self.collection = collection

    async def run_sweep(self) -> SweepResult:
        """
        Run one sweep.

        Never raises: fetch and post deletion errors are logged and reported
        as a failed SweepResult.
        """
        logger.info("🧹 Starting automatic cleanup of expired posts...")
        try:
            return await self._sweep()
        except Exception as e:
            logger.exception(f"💥 Error during automated cleanup: {e}")
            return SweepResult(success=False, error=str(e) or type(e).__name__)

    async def _sweep(self) -> SweepResult:
        snapshot = await asyncio.to_thread(self.record_store.fetch_collection, self.collection)
        if not snapshot:
            logger.info("📭 No posts found in database")
            return SweepResult(success=True, message="No posts found")

        posts = _as_mapping(snapshot)
        cutoff_ms = self.clock() - RETENTION_WINDOW_MS
        expired_ids, media_paths = collect_expired(posts, cutoff_ms)

        logger.info(f"📊 Found {len(expired_ids)} expired posts to delete")

        if not expired_ids:
            logger.info("✅ No expired posts found - cleanup complete")
            return SweepResult(success=True, message="No expired posts to delete")

        await self._delete_all(expired_ids, media_paths)

        logger.info(
            f"✅ Cleanup completed successfully! "
            f"Deleted {len(expired_ids)} expired posts, {len(media_paths)} video files"
        )
        return SweepResult(
            success=True,
            message=f"Successfully deleted {len(expired_ids)} expired posts",
            deleted_posts=len(expired_ids),
            deleted_media_files=len(media_paths),
        )

    async def _delete_all(self, post_ids: List[str], media_paths: List[str]) -> None:
        """
        Dispatch every delete at once and wait for all of them to settle.

        Raises:
            RecordDeletionError: If any post deletion failed
        """
        outcomes = await asyncio.gather(
            *(self._delete_post(post_id) for post_id in post_ids),
            *(self._delete_media(path) for path in media_paths),
            return_exceptions=True,
        )

        failures: Dict[str, BaseException] = {
            post_id: outcome
            for post_id, outcome in zip(post_ids, outcomes)
            if isinstance(outcome, BaseException)
        }
        if failures:
            raise RecordDeletionError(failures)

    async def _delete_post(self, post_id: str) -> None:
        logger.info(f"🗑️ Deleting post: {post_id}")
        await asyncio.to_thread(self.record_store.delete_record, self.collection, post_id)

    async def _delete_media(self, path: str) -> None:
        logger.info(f"🎥 Deleting video file: {path}")
        try:
            await asyncio.to_thread(self.blob_store.delete_object, path)
        except Exception as e:
            logger.warning(f"❌ Error deleting video file {path}: {e}")

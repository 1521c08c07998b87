"""
Shared types for retention sweeps.

SweepResult is the summary a single sweep produces. It is not persisted;
the scheduler logs it and the manual cleanup script prints it.
"""

from dataclasses import dataclass, field
from typing import Optional

from utils.datetime_utils import isoformat_utc


@dataclass
class SweepResult:
    """
    Outcome of one retention sweep.

    Counts are attempts: deleted_posts is the number of expired posts found
    and dispatched for deletion, deleted_media_files the number of media paths
    derived and dispatched. Individual media failures do not lower them.
    """
    success: bool
    deleted_posts: int = 0
    deleted_media_files: int = 0
    message: Optional[str] = None
    error: Optional[str] = None
    cleanup_time: str = field(default_factory=isoformat_utc)

    def to_dict(self) -> dict[str, str | int | bool]:
        """Convert to dictionary format, omitting unset optional fields."""
        result: dict[str, str | int | bool] = {"success": self.success}
        if self.message is not None:
            result["message"] = self.message
        if self.success:
            result["deletedPosts"] = self.deleted_posts
            result["deletedMediaFiles"] = self.deleted_media_files
        if self.error is not None:
            result["error"] = self.error
        result["cleanupTime"] = self.cleanup_time
        return result

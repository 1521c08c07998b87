"""
Services package for the retention sweep.

This package contains the sweeper itself and the scheduler that runs it.
"""

from .retention_sweeper import RetentionSweeper, RecordDeletionError

__all__ = [
    "RetentionSweeper",
    "RecordDeletionError",
]

"""
Utility modules for the retention sweeper.

This package contains shared helpers used across the application,
including UTC clock helpers and media URL parsing.
"""

from utils.media_path import MediaReferenceError, extract_media_path

__all__ = ['MediaReferenceError', 'extract_media_path']

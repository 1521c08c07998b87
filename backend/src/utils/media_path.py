"""
Media URL parsing.

Cloud Storage download URLs look like
https://firebasestorage.googleapis.com/v0/b/<bucket>/o/<percent-encoded path>?alt=media&token=...
and the object path is the percent-decoded text between "/o/" and the query.
"""

import re
from urllib.parse import unquote, urlsplit

from core.constants import MEDIA_OBJECT_PATH_MARKER

# "%" not followed by two hex digits
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class MediaReferenceError(ValueError):
    """Raised when a media URL cannot be turned into a storage object path."""


def extract_media_path(url: str) -> str:
    """
    Derive the storage object path from a media download URL.

    Args:
        url: Media reference URL stored on a post

    Returns:
        Decoded object path, e.g. "folder/file.mp4"

    Raises:
        MediaReferenceError: If the URL is not absolute, has no object path or
            the path is not valid percent-encoded UTF-8
    """
    if not isinstance(url, str):
        raise MediaReferenceError(f"Media reference is not a string: {url!r}")

    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        raise MediaReferenceError(f"Invalid media URL {url!r}: {e}") from e

    if not parts.scheme or not parts.netloc:
        raise MediaReferenceError(f"Media URL is not absolute: {url!r}")

    # urlsplit already cut the path at the first "?"
    _, marker, encoded_path = parts.path.partition(MEDIA_OBJECT_PATH_MARKER)
    if not marker:
        raise MediaReferenceError(f"Media URL has no {MEDIA_OBJECT_PATH_MARKER!r} segment: {url!r}")

    if _BAD_PERCENT_ESCAPE.search(encoded_path):
        raise MediaReferenceError(f"Media URL has a malformed percent escape: {url!r}")
    try:
        path = unquote(encoded_path, errors="strict")
    except UnicodeDecodeError as e:
        raise MediaReferenceError(f"Media URL path is not valid UTF-8: {url!r}") from e
    if not path:
        raise MediaReferenceError(f"Media URL has an empty object path: {url!r}")
    return path

"""Mapping of file extensions to MIME types."""

from __future__ import annotations

_MAPPINGS: dict[str, str] = {
    "gif": "image/gif",
    "htm": "text/html",
    "html": "text/html",
    "jpg": "image/jpeg",
    "png": "image/png",
}

DEFAULT_TYPE = "text/plain"


def extension_to_type(extension: str) -> str:
    """Return the MIME type for a file extension, or plain text if unknown."""
    return _MAPPINGS.get(extension, DEFAULT_TYPE)
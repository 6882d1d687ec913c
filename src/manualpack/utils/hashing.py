"""Content hashing for duplicate chunk detection."""

import hashlib


def content_hash(text: str) -> str:
    """Return the SHA-256 hex digest of a chunk's text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()

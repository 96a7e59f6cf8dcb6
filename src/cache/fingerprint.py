# src/cache/fingerprint.py — v3
"""Content fingerprinting for the AI result cache.

The cache key is the SHA-256 of the text exactly as extracted. The file path,
timestamps and analysis options never participate, so two files with the
same text share one cache entry.
"""

from __future__ import annotations

import hashlib


def compute_content_hash(text: str) -> str:
    """SHA-256 hex digest of ``text`` encoded as UTF-8."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def short_id(content_hash: str, length: int = 12) -> str:
    """Shortened hash used as a document id in logs."""
    return content_hash[:length]

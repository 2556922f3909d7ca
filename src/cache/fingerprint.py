# src/cache/fingerprint.py — v3
"""Content fingerprints for change detection and filename cache-busting.

The full SHA-256 hex digest is what the cache stores and compares; only
filenames use the truncated display form.
"""

from __future__ import annotations

import hashlib
import re

FINGERPRINT_HEX_LENGTH = 64


def compute_fingerprint(data: bytes | str) -> str:
    """SHA-256 hex digest of a byte buffer (str is encoded as UTF-8).

    Total, deterministic, and stable across platforms and process restarts.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def short_fingerprint(fingerprint: str, length: int = 8) -> str:
    """Display form of a fingerprint for filenames."""
    return fingerprint[:length]


def hashed_name_pattern(stem: str, suffix: str, length: int) -> re.Pattern[str]:
    """Regex matching '<stem>.<hash><suffix>' siblings with a hash of given length.

    The single capture group is the hash segment.
    """
    return re.compile(
        rf"^{re.escape(stem)}\.([0-9a-f]{{{length}}}){re.escape(suffix)}$"
    )

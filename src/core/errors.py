# src/core/errors.py — v1
"""Exception taxonomy shared across modules.

Only ConfigurationError and WatchSessionError ever reach the operator.
AssetTransformError and RenderError are raised at the transform/render seams
and always caught by their caller, which records a BuildIssue instead.
"""

from __future__ import annotations

from lingosite.config.settings import ConfigurationError

__all__ = [
    "AssetTransformError",
    "ConfigurationError",
    "RenderError",
    "WatchSessionError",
]


class WatchSessionError(RuntimeError):
    """The underlying file-watch transport stopped delivering events."""


class AssetTransformError(Exception):
    """A single asset could not be transformed (decode, codec, I/O)."""

    def __init__(self, source_path: str, reason: str) -> None:
        self.source_path = source_path
        self.reason = reason
        super().__init__(f"{source_path}: {reason}")


class RenderError(Exception):
    """A single route/locale combination failed to render."""

    def __init__(self, page_id: str, reason: str) -> None:
        self.page_id = page_id
        self.reason = reason
        super().__init__(f"{page_id}: {reason}")

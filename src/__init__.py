# src/__init__.py — v1
"""lingosite: incremental build pipeline for multi-locale static sites."""

from lingosite.version import __version__

__all__ = ["__version__"]

# src/assets/minify.py — v1
"""Text minifiers for production builds (pure byte transforms)."""

from __future__ import annotations

import rcssmin
import rjsmin


def minify_css(content: str) -> str:
    return rcssmin.cssmin(content)


def minify_js(content: str) -> str:
    return rjsmin.jsmin(content)

# src/config/routes.py — v1
"""Route configuration: per-locale page paths and metadata.

The route document is read-only input. Two shapes are accepted and normalised
into RouteEntry models:

    {"basePath": {"en": "/en"}, "routes": [{"key": "about", "path": "/about"}]}
    {"locales": ["en"], "routes": {"en": [{"key": "about", "path": "/en/about"}]}}

Metadata values (title, themeColor, anchors, hidden) are either scalars that
apply to every locale or objects keyed by locale with an optional "default".
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("title", "themeColor", "anchors", "hidden")


class RouteEntry(BaseModel):
    """One logical page: its path per locale and its metadata."""

    model_config = ConfigDict(frozen=True)

    key: str
    paths: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def path_for(self, locale: str) -> str | None:
        """Full route path for a locale, or None if the route is absent there."""
        return self.paths.get(locale)

    def property_for(self, name: str, locale: str) -> Any:
        """Metadata value with locale → default → scalar fallback."""
        value = self.metadata.get(name)
        if not isinstance(value, dict):
            return value
        if locale in value:
            return value[locale]
        return value.get("default")


class RoutesConfig(BaseModel):
    """Immutable route table for one build pass."""

    model_config = ConfigDict(frozen=True)

    locales: list[str] = Field(default_factory=list)
    base_paths: dict[str, str] = Field(default_factory=dict)
    routes: list[RouteEntry] = Field(default_factory=list)

    def get(self, key: str) -> RouteEntry | None:
        """Route by key."""
        for route in self.routes:
            if route.key == key:
                return route
        return None

    def path_for(self, key: str, locale: str) -> str | None:
        """Route path for a page key in a locale."""
        route = self.get(key)
        return route.path_for(locale) if route else None

    def all_paths(self, key: str) -> dict[str, str]:
        """All localized paths for a page key."""
        route = self.get(key)
        return dict(route.paths) if route else {}

    def visible_routes(self, locale: str) -> list[RouteEntry]:
        """Routes present in a locale and not hidden there, in document order."""
        return [
            r
            for r in self.routes
            if r.path_for(locale) is not None and not r.property_for("hidden", locale)
        ]


def load_routes_config(path: Path, locales: list[str]) -> RoutesConfig:
    """Load and normalise the route document.

    A missing or unparseable document is not fatal: it is logged and an empty
    table is returned, so every page is skipped with a warning.

    Args:
        path: Route document (JSON).
        locales: Configured locales, used when the document does not list them.

    Returns:
        Normalised RoutesConfig.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load route configuration %s: %s", path, e)
        return RoutesConfig(locales=list(locales))
    return parse_routes_config(data, locales)


def parse_routes_config(data: dict[str, Any], locales: list[str]) -> RoutesConfig:
    """Normalise either accepted route document shape."""
    doc_locales = list(data.get("locales") or locales)
    raw_routes = data.get("routes") or []

    if isinstance(raw_routes, dict):
        return _parse_per_locale_lists(raw_routes, doc_locales)
    return _parse_keyed_routes(data, raw_routes, doc_locales)


def _parse_keyed_routes(
    data: dict[str, Any], raw_routes: list[dict[str, Any]], locales: list[str]
) -> RoutesConfig:
    base_paths: dict[str, str] = dict(data.get("basePath") or {})
    routes: list[RouteEntry] = []

    for raw in raw_routes:
        key = raw.get("key")
        if not key:
            logger.warning("Skipping route without key: %r", raw)
            continue
        raw_path = raw.get("path")
        paths: dict[str, str] = {}
        for locale in locales:
            prefix = base_paths.get(locale, "")
            if isinstance(raw_path, str):
                paths[locale] = f"{prefix}{raw_path}"
            elif isinstance(raw_path, dict) and raw_path.get(locale) is not None:
                paths[locale] = f"{prefix}{raw_path[locale]}"
        metadata = {k: raw[k] for k in METADATA_FIELDS if k in raw}
        routes.append(RouteEntry(key=key, paths=paths, metadata=metadata))

    return RoutesConfig(locales=locales, base_paths=base_paths, routes=routes)


def _parse_per_locale_lists(
    raw_routes: dict[str, list[dict[str, Any]]], locales: list[str]
) -> RoutesConfig:
    # Merge per-locale lists into one entry per key, keeping first-seen order.
    order: list[str] = []
    paths: dict[str, dict[str, str]] = {}
    metadata: dict[str, dict[str, dict[str, Any]]] = {}

    for locale in locales:
        for raw in raw_routes.get(locale) or []:
            key = raw.get("key")
            if not key:
                logger.warning("Skipping %s route without key: %r", locale, raw)
                continue
            if key not in paths:
                order.append(key)
                paths[key] = {}
                metadata[key] = {}
            if raw.get("path") is not None:
                paths[key][locale] = raw["path"]
            for field in METADATA_FIELDS:
                if field in raw:
                    metadata[key].setdefault(field, {})[locale] = raw[field]

    routes = [
        RouteEntry(key=key, paths=paths[key], metadata=metadata[key]) for key in order
    ]
    return RoutesConfig(locales=locales, routes=routes)


def output_file_for(route_path: str, locales: list[str]) -> str:
    """Map a route path to an output file path relative to the output root.

    "/" → "index.html"; "/en" or "/en/about/" → "<dir>/index.html";
    "/en/about" → "en/about.html".
    """
    rel = route_path.strip("/")
    if not rel:
        return "index.html"
    if rel.endswith(".html"):
        return rel
    if route_path.endswith("/") or rel in locales:
        return f"{rel}/index.html"
    return f"{rel}.html"

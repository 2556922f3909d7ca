# src/pages/locale_data.py — v1
"""Locale data files and the translator built from them."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)

RTL_LOCALES = ("ar", "he", "fa", "ur")

Translator = Callable[..., str]


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top level is not an object", path)
        return {}
    return data


def load_locale_data(data_dir: Path, locales: list[str]) -> dict[str, dict[str, Any]]:
    """Read '<data_dir>/<locale>.json' for every locale; unreadable files yield {}."""
    return {locale: _read_json(Path(data_dir) / f"{locale}.json") for locale in locales}


def load_meta_data(data_dir: Path) -> dict[str, Any]:
    """Read '<data_dir>/meta.json'."""
    return _read_json(Path(data_dir) / "meta.json")


def get_nested(data: dict[str, Any], key: str) -> Any:
    """Look up a dotted key ('homepage.title'); None when any segment is missing."""
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def make_translator(
    locale_data: dict[str, dict[str, Any]], locale: str, default_locale: str
) -> Translator:
    """Build t(key, **params): locale → default locale → the key itself.

    '{{name}}' placeholders are replaced from params.
    """
    primary = locale_data.get(locale) or {}
    fallback = locale_data.get(default_locale) or {}

    def t(key: str, params: dict[str, Any] | None = None, **kwargs: Any) -> str:
        value = get_nested(primary, key)
        if value is None:
            value = get_nested(fallback, key)
        text = key if value is None else str(value)
        for name, replacement in {**(params or {}), **kwargs}.items():
            text = text.replace("{{" + name + "}}", str(replacement))
        return text

    return t


def is_rtl(locale: str, locale_meta: dict[str, Any] | None = None) -> bool:
    if locale_meta and locale_meta.get("rtl") is not None:
        return bool(locale_meta["rtl"])
    return locale in RTL_LOCALES

# src/logging/context.py — v2
"""Contextual logging support: attach build_id, scope and locale to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per build pass.
_build_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "build_id", default=None
)
_scope: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scope", default=None
)
_locale: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "locale", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    build_id: str | None = None
    scope: str | None = None
    locale: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        build_id=_build_id.get(),
        scope=_scope.get(),
        locale=_locale.get(),
    )


def set_build_context(build_id: str, scope: str | None = None) -> None:
    """Set pass-level context (called once per build or rebuild pass)."""
    _build_id.set(build_id)
    _scope.set(scope)


def set_locale_context(locale: str | None) -> None:
    """Set locale-level context (called per rendered locale)."""
    _locale.set(locale)


def clear_context() -> None:
    """Reset all context variables."""
    _build_id.set(None)
    _scope.set(None)
    _locale.set(None)

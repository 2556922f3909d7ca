# src/watch/models.py — v1
"""Watch domain models: FileEvent, PendingChange, RebuildPlan, states."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

# Scope key of a full regeneration; scoped rebuilds use "page:<base id>".
FULL_SCOPE = "*"


class EventKind(str, Enum):
    CHANGED = "changed"
    ADDED = "added"
    DELETED = "deleted"


class ChangeCategory(str, Enum):
    TEMPLATE = "template"
    DATA = "data"
    ASSET = "asset"
    OTHER = "other"


class OrchestratorState(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    DISPATCHING = "dispatching"
    NOTIFYING = "notifying"


class FileEvent(BaseModel):
    """Raw filesystem notification, as delivered by the watch transport."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    path: Path
    modified_at: float | None = None


class PendingChange(BaseModel):
    """A classified change, consumed by the dispatcher and then discarded."""

    model_config = ConfigDict(frozen=True)

    file_path: Path
    kind: EventKind
    category: ChangeCategory
    modified_at: float | None = None
    previous_modified_at: float | None = None


class RebuildPlan(BaseModel):
    """What one change requires."""

    model_config = ConfigDict(frozen=True)

    assets: Literal["none", "one", "all"] = "none"
    asset_path: Path | None = None
    pages: Literal["none", "scoped", "full"] = "none"
    base_id: str | None = None

    @property
    def is_noop(self) -> bool:
        return self.assets == "none" and self.pages == "none"

    @property
    def scope(self) -> str:
        if self.pages == "scoped" and self.assets == "none" and self.base_id is not None:
            return f"page:{self.base_id}"
        return FULL_SCOPE

# src/assets/manifest.py — v1
"""Manifest builder: logical asset URL → physical asset URL.

Entries registered during a pass are staged; flush() publishes them,
replacing the previous manifest wholesale, and writes the artifact. The
renderer only ever reads the published map, so a page rendered during an
asset pass sees a complete manifest from the previous pass.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from lingosite.storage.local_writer import atomic_write_bytes
from lingosite.tracking.issues import IssueLog

logger = logging.getLogger(__name__)


class ManifestBuilder:
    """Accumulate and publish the asset manifest."""

    def __init__(self, manifest_file: Path, issues: IssueLog | None = None) -> None:
        self._path = Path(manifest_file)
        self._issues = issues
        self._staged: dict[str, str] = {}
        self._published: dict[str, str] = {}

    @property
    def path(self) -> Path:
        return self._path

    @property
    def entries(self) -> dict[str, str]:
        """Published manifest."""
        return dict(self._published)

    @property
    def staged_count(self) -> int:
        return len(self._staged)

    def begin_pass(self) -> None:
        """Start a fresh manifest; nothing carries over from the last pass."""
        self._staged = {}

    def register(self, logical: str, physical: str) -> None:
        previous = self._staged.get(logical)
        if previous is not None and previous != physical:
            logger.warning("Manifest entry %s remapped %s → %s", logical, previous, physical)
        self._staged[logical] = physical

    def register_all(self, urls: dict[str, str]) -> None:
        for logical, physical in urls.items():
            self.register(logical, physical)

    def resolve(self, logical: str) -> str:
        """Physical URL for a logical reference, or the reference itself."""
        return self._published.get(logical, logical)

    async def flush(self) -> bool:
        """Publish the staged manifest and persist it.

        Returns:
            False when the artifact could not be written; the published
            in-memory manifest is still updated.
        """
        self._published = dict(sorted(self._staged.items()))
        data = json.dumps(self._published, indent=2).encode("utf-8")
        try:
            atomic_write_bytes(self._path, data)
        except OSError as e:
            logger.warning("Could not write manifest %s: %s", self._path, e)
            if self._issues is not None:
                self._issues.record("persistence", str(self._path), f"manifest write failed: {e}")
            return False
        logger.debug("Manifest flushed with %d entries", len(self._published))
        return True

    def verify(self, output_root: Path) -> list[str]:
        """Physical URLs that do not exist under output_root."""
        return missing_outputs(self._published, output_root)


def load_manifest(manifest_file: Path) -> dict[str, str]:
    """Read a persisted manifest; raises OSError / ValueError when unreadable."""
    return json.loads(Path(manifest_file).read_text(encoding="utf-8"))


def missing_outputs(manifest: dict[str, str], output_root: Path) -> list[str]:
    root = Path(output_root)
    return sorted(
        physical
        for physical in manifest.values()
        if not (root / physical.lstrip("/")).is_file()
    )

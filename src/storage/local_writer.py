# src/storage/local_writer.py — v3
"""Local filesystem output writer.

Every write goes to a temporary sibling first and is moved into place with
os.replace, so an external reader (dev server, second build) never observes
a half-written file.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from lingosite.storage.base_output_writer import BaseOutputWriter


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write bytes to path via temp file + rename in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class LocalWriter(BaseOutputWriter):
    """Write outputs to the local filesystem."""

    def __init__(self, base_path: Path | str) -> None:
        """Initialize with the output root.

        Args:
            base_path: Root directory for all writes.
        """
        self._base = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base

    def resolve(self, path: str) -> Path:
        """Resolve a relative output path to an absolute file path."""
        return self._base / path

    async def write(self, path: str, content: bytes | str) -> bool:
        """Write content, skipping the write when the bytes are identical."""
        data = content.encode("utf-8") if isinstance(content, str) else content
        p = self.resolve(path)
        if p.is_file() and p.stat().st_size == len(data) and p.read_bytes() == data:
            return False
        atomic_write_bytes(p, data)
        return True

    async def read(self, path: str) -> bytes:
        return self.resolve(path).read_bytes()

    async def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    async def remove(self, path: str) -> bool:
        p = self.resolve(path)
        if not p.is_file():
            return False
        p.unlink()
        return True

    async def list_dir(self, path: str) -> list[str]:
        p = self.resolve(path)
        if not p.is_dir():
            return []
        return [entry.name for entry in sorted(p.iterdir()) if entry.is_file()]

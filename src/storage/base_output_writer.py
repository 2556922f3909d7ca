# src/storage/base_output_writer.py — v2
"""Abstract output writer interface.

Paths are posix strings relative to the writer's output root.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseOutputWriter(ABC):
    """Unified interface for output tree backends."""

    @abstractmethod
    async def write(self, path: str, content: bytes | str) -> bool:
        """Write content atomically. Returns False when bytes were unchanged."""

    @abstractmethod
    async def read(self, path: str) -> bytes:
        """Read content from the given path."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if path exists."""

    @abstractmethod
    async def remove(self, path: str) -> bool:
        """Delete a file. Returns False when it did not exist."""

    @abstractmethod
    async def list_dir(self, path: str) -> list[str]:
        """List file names in an output directory."""

# tests/integration/conftest.py — v2
"""Integration fixtures: output tree snapshots and asset reference scanning."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable

import pytest

ASSET_REF_RE = re.compile(r'(?:href|src)="(/assets/[^"]+)"')


def snapshot_tree(root: Path, exclude: tuple[str, ...] = ()) -> dict[str, bytes]:
    """{posix path relative to root: bytes} for every file under root."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file() and p.relative_to(root).as_posix() not in exclude
    }


def mtimes_tree(root: Path) -> dict[str, int]:
    return {
        p.relative_to(root).as_posix(): p.stat().st_mtime_ns
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def snapshot() -> Callable[..., dict[str, bytes]]:
    return snapshot_tree


@pytest.fixture
def mtimes() -> Callable[[Path], dict[str, int]]:
    return mtimes_tree


@pytest.fixture
def asset_refs() -> Callable[[str], list[str]]:
    """Every /assets/ URL referenced from href/src attributes of a page."""
    return ASSET_REF_RE.findall

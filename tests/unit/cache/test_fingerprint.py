# tests/unit/cache/test_fingerprint.py — v1
"""Tests for cache/fingerprint.py — content hashing and hashed filenames."""

from __future__ import annotations

from lingosite.cache.fingerprint import (
    FINGERPRINT_HEX_LENGTH,
    compute_fingerprint,
    hashed_name_pattern,
    short_fingerprint,
)


class TestComputeFingerprint:
    def test_deterministic(self):
        assert compute_fingerprint(b"abc") == compute_fingerprint(b"abc")

    def test_full_length_hex(self):
        fp = compute_fingerprint(b"abc")
        assert len(fp) == FINGERPRINT_HEX_LENGTH
        int(fp, 16)

    def test_str_encoded_as_utf8(self):
        assert compute_fingerprint("é") == compute_fingerprint("é".encode("utf-8"))

    def test_different_content(self):
        assert compute_fingerprint(b"a") != compute_fingerprint(b"b")

    def test_empty_input(self):
        assert compute_fingerprint(b"") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )


class TestShortFingerprint:
    def test_prefix(self):
        fp = compute_fingerprint(b"abc")
        assert short_fingerprint(fp) == fp[:8]
        assert short_fingerprint(fp, 12) == fp[:12]


class TestHashedNamePattern:
    def test_matches_sibling(self):
        pattern = hashed_name_pattern("main", ".css", 8)
        match = pattern.match("main.0123abcd.css")
        assert match is not None
        assert match.group(1) == "0123abcd"

    def test_rejects_other_names(self):
        pattern = hashed_name_pattern("main", ".css", 8)
        assert pattern.match("main.css") is None
        assert pattern.match("main.0123abcd.webp") is None
        assert pattern.match("main.0123abc.css") is None
        assert pattern.match("other.0123abcd.css") is None

    def test_stem_is_escaped(self):
        pattern = hashed_name_pattern("a.b", ".css", 8)
        assert pattern.match("a.b.0123abcd.css")
        assert pattern.match("axb.0123abcd.css") is None

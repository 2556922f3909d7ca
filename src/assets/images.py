# src/assets/images.py — v1
"""Image recompression and WebP conversion with Pillow.

These functions are blocking; callers run them on the default executor.
Every decode/encode failure surfaces as AssetTransformError.
"""

from __future__ import annotations

import io
import logging

from PIL import Image

from lingosite.core.errors import AssetTransformError

logger = logging.getLogger(__name__)

# Formats that get a compact WebP sibling
CONVERTIBLE_SUFFIXES = (".png", ".jpg", ".jpeg")
# Formats re-encoded in place; everything else is copied byte for byte
RECOMPRESSED_SUFFIXES = (".png", ".jpg", ".jpeg", ".webp")


def _encode(im: Image.Image, fmt: str, **params: object) -> bytes:
    buf = io.BytesIO()
    im.save(buf, format=fmt, **params)
    return buf.getvalue()


def recompress(data: bytes, suffix: str, name: str, quality: int, webp_quality: int) -> bytes:
    """Re-encode an image in its own format.

    Args:
        data: Source bytes.
        suffix: Lowercase suffix selecting the codec.
        name: Source name, for error messages.
        quality: JPEG quality.
        webp_quality: WebP quality.
    """
    if suffix not in RECOMPRESSED_SUFFIXES:
        return data
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            if suffix == ".png":
                return _encode(im, "PNG", optimize=True)
            if suffix == ".webp":
                return _encode(im, "WEBP", quality=webp_quality, method=6)
            if im.mode not in ("RGB", "L"):
                im = im.convert("RGB")
            return _encode(im, "JPEG", quality=quality, optimize=True, progressive=True)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise AssetTransformError(name, f"recompress failed: {e}") from e


def to_webp(data: bytes, name: str, quality: int, fast: bool = False) -> bytes:
    """Convert any decodable image to WebP."""
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            if im.mode not in ("RGB", "RGBA", "L", "LA"):
                im = im.convert("RGBA")
            return _encode(im, "WEBP", quality=quality, method=0 if fast else 6)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise AssetTransformError(name, f"webp conversion failed: {e}") from e

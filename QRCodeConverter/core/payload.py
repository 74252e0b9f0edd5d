"""Payload classification for text input.

This module decides whether a text is an image data-URI or plain text:
- ``classify`` returns ``DataUri(subtype)`` or ``PlainText``
- ``can_handle`` is the routing predicate used to hand clipboard content
  to the converter
- ``parse_data_uri`` turns a data-URI into an ``ImagePayload``
- ``sniff_subtype`` identifies an image format from its bytes

All functions are pure and UI-independent.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .errors import ClassificationInconclusive, InvalidPayloadError
from .models import ImagePayload, ImageSubtype


@dataclass(frozen=True)
class PlainText:
    """Text to be QR-encoded as-is."""


@dataclass(frozen=True)
class DataUri:
    """A Base64 image data-URI of the given subtype."""

    subtype: ImageSubtype


Classification = Union[PlainText, DataUri]

# Prefixes are mutually exclusive, so the order only matters for readability
DATA_URI_PREFIXES = tuple((s.data_uri_prefix, s) for s in ImageSubtype)

_WHITESPACE_RE = re.compile(r"\s+")


def _match_prefix(trimmed: str) -> Optional[ImageSubtype]:
    lowered = trimmed.lower()
    for prefix, subtype in DATA_URI_PREFIXES:
        if lowered.startswith(prefix):
            return subtype
    return None


def classify(text: Optional[str]) -> Classification:
    """Classify ``text`` as a data-URI image payload or plain text.

    The input is trimmed and matched case-insensitively against the
    recognized ``data:image/...;base64,`` prefixes.

    Raises:
        ClassificationInconclusive: If the input is empty after trimming.
    """
    trimmed = (text or "").strip()
    if not trimmed:
        raise ClassificationInconclusive("Input is empty")
    subtype = _match_prefix(trimmed)
    if subtype is None:
        return PlainText()
    return DataUri(subtype)


def can_handle(text: Optional[str]) -> bool:
    """Return True if ``text`` is an image data-URI this tool can display."""
    trimmed = (text or "").strip()
    if not trimmed:
        return False
    return _match_prefix(trimmed) is not None


def parse_data_uri(text: str) -> ImagePayload:
    """Decode an image data-URI into raw image bytes.

    Whitespace inside the Base64 body (line-wrapped clipboard content) is
    ignored; any other non-alphabet character is rejected.

    Raises:
        ClassificationInconclusive: If ``text`` is not a recognized data-URI.
        InvalidPayloadError: If the Base64 body cannot be decoded.
    """
    result = classify(text)
    if not isinstance(result, DataUri):
        raise ClassificationInconclusive("Input is not an image data-URI")

    trimmed = text.strip()
    body = _WHITESPACE_RE.sub("", trimmed[trimmed.index(",") + 1 :])
    try:
        data = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidPayloadError(f"Invalid Base64 data: {e}") from e
    return ImagePayload(data=data, subtype=result.subtype)


_EXTENSION_SUBTYPES = {
    ".png": ImageSubtype.PNG,
    ".jpg": ImageSubtype.JPEG,
    ".jpeg": ImageSubtype.JPEG,
    ".bmp": ImageSubtype.BMP,
    ".gif": ImageSubtype.GIF,
    ".ico": ImageSubtype.ICO,
    ".svg": ImageSubtype.SVG,
    ".webp": ImageSubtype.WEBP,
}


def sniff_subtype(data: bytes, filename: Union[str, Path, None] = None) -> Optional[ImageSubtype]:
    """Identify an image format from its leading bytes.

    Falls back on the filename suffix when the content is not recognized.

    Returns:
        The detected subtype, or None if neither content nor suffix match.
    """
    head = data[:512]
    if head.startswith(b"\x89PNG\r\n\x1a\n"):
        return ImageSubtype.PNG
    if head.startswith(b"\xff\xd8\xff"):
        return ImageSubtype.JPEG
    if head.startswith((b"GIF87a", b"GIF89a")):
        return ImageSubtype.GIF
    if head.startswith(b"RIFF") and head[8:12] == b"WEBP":
        return ImageSubtype.WEBP
    if head.startswith(b"BM"):
        return ImageSubtype.BMP
    if head.startswith(b"\x00\x00\x01\x00"):
        return ImageSubtype.ICO
    text_head = head.lstrip(b"\xef\xbb\xbf \t\r\n").lower()
    if text_head.startswith(b"<svg") or (text_head.startswith(b"<?xml") and b"<svg" in text_head):
        return ImageSubtype.SVG

    if filename is not None:
        return _EXTENSION_SUBTYPES.get(Path(filename).suffix.lower())
    return None


def is_image_file(path: Union[str, Path]) -> bool:
    """Return True if the given path has a supported image file suffix.

    This is a lightweight check that relies solely on the filename suffix
    (case-insensitive). It does not attempt to open the file.
    """
    return Path(path).suffix.lower() in _EXTENSION_SUBTYPES

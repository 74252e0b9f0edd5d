"""Data model shared by the pipeline, the orchestrator and the view-model.

Requests and results are small frozen dataclasses; a request or result
"kind" is simply its class, so callers dispatch with ``isinstance``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class ImageSubtype(Enum):
    """Image formats recognized in data-URIs and selected files.

    Each member holds ``(mime_type, extension)``.
    """

    PNG = ("image/png", ".png")
    JPEG = ("image/jpeg", ".jpeg")
    BMP = ("image/bmp", ".bmp")
    GIF = ("image/gif", ".gif")
    ICO = ("image/x-icon", ".ico")
    SVG = ("image/svg+xml", ".svg")
    WEBP = ("image/webp", ".webp")

    @property
    def mime_type(self) -> str:
        return self.value[0]

    @property
    def extension(self) -> str:
        return self.value[1]

    @property
    def data_uri_prefix(self) -> str:
        return f"data:{self.mime_type};base64,"


# ------------------------
# Requests
# ------------------------
@dataclass(frozen=True)
class TextToImage:
    """Encode ``raw_text`` (plain text or an image data-URI) into an image."""

    raw_text: str


@dataclass(frozen=True)
class ImageToText:
    """Decode the QR symbol contained in the image file at ``path``."""

    path: Path


ConversionRequest = Union[TextToImage, ImageToText]


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    subtype: ImageSubtype
    source_uri: Optional[str] = None


# ------------------------
# Results
# ------------------------
@dataclass(frozen=True)
class ImageResult:
    path: Path
    subtype: ImageSubtype


@dataclass(frozen=True)
class TextResult:
    text: str


@dataclass(frozen=True)
class NoOpResult:
    """Input was empty; nothing to publish."""


@dataclass(frozen=True)
class FailedResult:
    error: Exception

    @property
    def reason(self) -> str:
        return str(self.error) or type(self.error).__name__


ConversionResult = Union[ImageResult, TextResult, NoOpResult, FailedResult]


@dataclass(frozen=True)
class TempAsset:
    path: Path
    created_at: datetime = field(default_factory=datetime.now)

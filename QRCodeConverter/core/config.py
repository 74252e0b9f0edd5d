"""Converter configuration.

``ConverterConfig`` gathers every knob the orchestrator needs so nothing
is read from global state. The only persisted setting (text encoding) is
read through ``QSettings`` by ``from_settings``.
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from .constants import (
    DEBOUNCE_INTERVAL_MS,
    DEFAULT_ENCODING,
    QR_ERROR_CORRECTION,
    QR_IMAGE_SIZE,
    QR_MARGIN,
    SETTINGS_ENCODER_KEY,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConverterConfig:
    encoding: str = DEFAULT_ENCODING
    qr_size: int = QR_IMAGE_SIZE
    qr_margin: int = QR_MARGIN
    error_correction: str = QR_ERROR_CORRECTION
    debounce_ms: int = DEBOUNCE_INTERVAL_MS
    temp_dir: Optional[Path] = None

    @classmethod
    def from_settings(cls, settings: QSettings, **overrides) -> "ConverterConfig":
        """Build a config using the encoding stored in ``settings``.

        Unknown encodings are logged and replaced with the default.
        """
        value = settings.value(SETTINGS_ENCODER_KEY, DEFAULT_ENCODING)
        encoding = str(value) if value else DEFAULT_ENCODING
        try:
            codecs.lookup(encoding)
        except LookupError:
            logger.warning("Unknown encoding %r in settings, using %s", encoding, DEFAULT_ENCODING)
            encoding = DEFAULT_ENCODING
        return cls(encoding=encoding, **overrides)

"""Shared fixtures for QRCodeConverter tests."""

import os
import sys
import threading
import time
from pathlib import Path

import numpy as np
import pytest

# Run Qt without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add parent directory to path to import QRCodeConverter module
sys.path.insert(0, str(Path(__file__).parent.parent))

from QRCodeConverter.core.codec import QRCodec
from QRCodeConverter.core.config import ConverterConfig
from QRCodeConverter.core.image_io import encode_png
from QRCodeConverter.core.temp_assets import TempAssetStore


class CountingCodec(QRCodec):
    """QRCodec recording every encode call, optionally slowed down."""

    def __init__(self, delay: float = 0.0, **kwargs):
        super().__init__(**kwargs)
        self.delay = delay
        self.encoded = []
        self._lock = threading.Lock()

    def encode(self, text):
        with self._lock:
            self.encoded.append(text)
        if self.delay:
            time.sleep(self.delay)
        return super().encode(text)


@pytest.fixture
def store(tmp_path):
    s = TempAssetStore(tmp_path / "scratch")
    yield s
    s.release_all()


@pytest.fixture
def qr_png(tmp_path):
    """Write a QR-code PNG for ``text`` and return its path."""

    def make(text: str, name: str = "qr.png") -> Path:
        path = tmp_path / name
        path.write_bytes(encode_png(QRCodec().encode(text)))
        return path

    return make


@pytest.fixture
def blank_png(tmp_path):
    path = tmp_path / "blank.png"
    path.write_bytes(encode_png(np.full((200, 200), 255, dtype=np.uint8)))
    return path


@pytest.fixture
def make_orchestrator(qtbot, tmp_path):
    """Factory for orchestrators that are shut down after the test."""
    from QRCodeConverter.ui.orchestrator import ConversionOrchestrator

    created = []

    def factory(debounce_ms: int = 50, codec=None):
        config = ConverterConfig(debounce_ms=debounce_ms, temp_dir=tmp_path / "scratch")
        orch = ConversionOrchestrator(config, codec=codec)
        created.append(orch)
        return orch

    yield factory
    for orch in created:
        orch.shutdown()

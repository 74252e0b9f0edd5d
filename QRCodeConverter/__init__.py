"""QRCodeConverter - convert between text and QR-code images.

This package provides a Qt-based tool that:
    - Encodes typed text into a 600x600 QR-code PNG (error correction H)
    - Shows Base64 image data-URIs (PNG, JPEG, BMP, GIF, ICO, SVG, WEBP)
    - Decodes the QR code of a selected or dropped image back into text

Input is debounced and every new input cancels the previous conversion,
which runs on a background thread.

Package Structure:
    - core/: UI-independent pipeline (classifier, codec, temp files)
    - ui/: orchestrator, view-model and main window

Quick Start:
    from QRCodeConverter import main
    main()

Dependencies:
    - PySide6: Qt for Python
    - numpy: Raster arrays
    - opencv-python: fallback QR detection, image decoding/encoding
    - Pillow: GIF/ICO decoding
    - qrcode: QR symbol generation
    - zxing-cpp: QR symbol reading
"""

from .app import main
from .ui import ConverterWindow, QRCodeViewModel, ConversionOrchestrator, OrchestratorState
from .core import QRCodec, ConverterConfig, TempAssetStore, can_handle, classify

__version__ = "0.1.0"
__all__ = [
    "main",
    "ConverterWindow",
    "QRCodeViewModel",
    "ConversionOrchestrator",
    "OrchestratorState",
    "QRCodec",
    "ConverterConfig",
    "TempAssetStore",
    "can_handle",
    "classify",
]

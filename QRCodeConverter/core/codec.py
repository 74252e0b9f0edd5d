"""QR-code encode/decode adapter.

Encoding is delegated to the ``qrcode`` package (module matrix only, no
image backend) and decoding to ``zxing-cpp``, with OpenCV's
``QRCodeDetector`` as a fallback. The adapter performs no I/O: it maps
text to a NumPy raster and back.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np
import qrcode
import zxingcpp
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from qrcode.exceptions import DataOverflowError

from .constants import (
    DECODE_PADDING_RATIO,
    DECODE_RETRY_SCALES,
    DEFAULT_ENCODING,
    QR_ERROR_CORRECTION,
    QR_IMAGE_SIZE,
    QR_MARGIN,
)
from .errors import EncodeError, SymbolNotFoundError, SymbolUnreadableError

logger = logging.getLogger(__name__)

ERROR_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


def to_grayscale(raster: np.ndarray) -> np.ndarray:
    """Convert a raster to 2-D uint8 grayscale, flattening alpha onto white."""
    a = np.asarray(raster)
    if a.ndim == 3 and a.shape[2] == 1:
        a = a[..., 0]
    if a.ndim == 2:
        return np.ascontiguousarray(a.astype(np.uint8, copy=False))
    if a.ndim != 3 or a.shape[2] not in (3, 4):
        raise ValueError(f"Unsupported raster shape: {a.shape}")

    rgb = a[..., :3].astype(np.float32)
    if a.shape[2] == 4:
        alpha = a[..., 3:4].astype(np.float32) / 255.0
        rgb = rgb * alpha + 255.0 * (1.0 - alpha)
    gray = cv2.cvtColor(np.clip(rgb, 0, 255).astype(np.uint8), cv2.COLOR_RGB2GRAY)
    return gray


class QRCodec:
    """Encode text to a square QR raster and decode rasters back to text.

    Args:
        size: Side length of the encoded raster in pixels.
        margin: Quiet-zone width in modules around the symbol.
        error_correction: One of ``"L"``, ``"M"``, ``"Q"``, ``"H"``.
        encoding: Text encoding used to turn the input into symbol bytes.
    """

    def __init__(
        self,
        size: int = QR_IMAGE_SIZE,
        margin: int = QR_MARGIN,
        error_correction: str = QR_ERROR_CORRECTION,
        encoding: str = DEFAULT_ENCODING,
    ):
        if error_correction.upper() not in ERROR_LEVELS:
            raise ValueError(f"Unknown error correction level: {error_correction!r}")
        self.size = size
        self.margin = margin
        self.error_correction = error_correction.upper()
        self.encoding = encoding

    def encode(self, text: str) -> np.ndarray:
        """Encode ``text`` as a ``size`` x ``size`` grayscale raster.

        Modules are drawn at an integer box size first so that every module
        has the same width before the final fit to ``size``.

        Raises:
            EncodeError: If the text is not representable in ``encoding`` or
                exceeds the symbol capacity at the chosen error correction.
        """
        try:
            data = text.encode(self.encoding)
        except (UnicodeEncodeError, LookupError) as e:
            raise EncodeError(f"Cannot encode text as {self.encoding}: {e}") from e

        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_LEVELS[self.error_correction],
            box_size=1,
            border=self.margin,
        )
        try:
            qr.add_data(data)
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as e:
            raise EncodeError(f"Data too large for a QR code at level {self.error_correction}") from e

        modules = np.asarray(qr.get_matrix(), dtype=bool)
        box = max(1, self.size // modules.shape[0])
        img = np.where(modules, 0, 255).astype(np.uint8)
        img = np.repeat(np.repeat(img, box, axis=0), box, axis=1)
        logger.debug("Encoded %d bytes as QR version %s (%d px/module)", len(data), qr.version, box)
        if img.shape[0] != self.size:
            img = cv2.resize(img, (self.size, self.size), interpolation=cv2.INTER_NEAREST)
        return img

    def decode(self, raster: np.ndarray) -> str:
        """Decode the QR symbol in ``raster``.

        The raster is padded with a white quiet zone and read with zxing-cpp,
        retrying at twice the scale. OpenCV's detector is the last resort and
        also tells a missing symbol apart from an unreadable one.

        Raises:
            SymbolNotFoundError: If no symbol is located.
            SymbolUnreadableError: If a symbol is located but cannot be read.
        """
        gray = to_grayscale(raster)
        h, w = gray.shape
        pad = max(8, int(max(h, w) * DECODE_PADDING_RATIO))
        padded = cv2.copyMakeBorder(gray, pad, pad, pad, pad, cv2.BORDER_CONSTANT, value=255)

        for scale in DECODE_RETRY_SCALES:
            img = padded
            if scale != 1:
                img = cv2.resize(padded, None, fx=scale, fy=scale, interpolation=cv2.INTER_NEAREST)
            barcodes = zxingcpp.read_barcodes(img, formats=zxingcpp.BarcodeFormat.QRCode)
            if barcodes:
                return self._barcode_text(barcodes[0])
            logger.debug("No QR code read at scale %d", scale)

        detector = cv2.QRCodeDetector()
        text, points, _ = detector.detectAndDecode(padded)
        if points is None:
            raise SymbolNotFoundError("No QR code found in image")
        if not text:
            raise SymbolUnreadableError("QR code found but could not be decoded")
        return text

    def _barcode_text(self, barcode) -> str:
        # Symbol bytes carry no charset unless an ECI is present
        try:
            return barcode.bytes.decode(self.encoding)
        except (UnicodeDecodeError, LookupError):
            return barcode.text

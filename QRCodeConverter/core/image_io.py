"""Image I/O utilities for loading and writing rasters.

This module provides functions for:
- Reading an image file into an ``ImagePayload`` (bytes + sniffed format)
- Decoding payload bytes into a NumPy raster (OpenCV, Pillow, Qt for SVG)
- Encoding a raster as PNG bytes

Rasters are NumPy ``uint8`` arrays: (H, W) grayscale, (H, W, 3) RGB or
(H, W, 4) RGBA. Functions raise ``AssetIOError`` on unreadable data.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError
from PySide6.QtGui import QImage

from .errors import AssetIOError
from .models import ImagePayload, ImageSubtype
from .payload import sniff_subtype

logger = logging.getLogger(__name__)


def read_image_payload(path: Union[str, Path]) -> ImagePayload:
    """Read an image file and identify its format.

    Args:
        path: Path to the image file (str or pathlib.Path).

    Returns:
        ImagePayload with the file bytes, the sniffed subtype and the
        resolved path as ``source_uri``.

    Raises:
        AssetIOError: If the file cannot be read or is not a known format.
    """
    path_obj = Path(path)
    try:
        data = path_obj.read_bytes()
    except OSError as e:
        raise AssetIOError(f"Cannot read image: {path_obj}: {e}") from e

    subtype = sniff_subtype(data, path_obj)
    if subtype is None:
        raise AssetIOError(f"Cannot open image: {path_obj} (unsupported format)")
    return ImagePayload(data=data, subtype=subtype, source_uri=str(path_obj.resolve()))


def cv2_imdecode(data: bytes):
    """Decode encoded image bytes with OpenCV, returning RGB/RGBA or None."""
    buf = np.frombuffer(data, dtype=np.uint8)
    if buf.size == 0:
        return None
    img = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if img is None:
        return None

    # 4チャンネルの場合は BGRA → RGBA に変換
    if img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    # 3チャンネルは BGR → RGB に変換
    elif img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    # 16-bit PNG/TIFF-like data
    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif np.issubdtype(img.dtype, np.floating):
        img = np.clip(img * 255.0, 0, 255).astype(np.uint8)
    return img


def pil_imdecode(data: bytes) -> np.ndarray:
    """Decode image bytes with Pillow (GIF first frame, largest ICO entry)."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return np.asarray(img.convert("RGBA")).copy()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise AssetIOError(f"Cannot decode image data: {e}") from e


def qimage_to_numpy(qimg: QImage) -> np.ndarray:
    """Convert a QImage to an (H, W, 4) RGBA uint8 array (copied)."""
    img = qimg.convertToFormat(QImage.Format_RGBA8888)
    w, h = img.width(), img.height()
    bpl = img.bytesPerLine()
    buf = np.frombuffer(img.constBits(), dtype=np.uint8, count=bpl * h)
    return buf.reshape(h, bpl)[:, : w * 4].reshape(h, w, 4).copy()


def svg_imdecode(data: bytes) -> np.ndarray:
    """Rasterize SVG bytes at their intrinsic size through Qt's image plugins."""
    qimg = QImage.fromData(data, "SVG")
    if qimg.isNull():
        raise AssetIOError("Cannot render SVG image")
    return qimage_to_numpy(qimg)


def load_raster(payload: ImagePayload) -> np.ndarray:
    """Decode an ``ImagePayload`` into a NumPy raster.

    - SVG: rendered with Qt
    - GIF, ICO: read with Pillow
    - other formats: read with OpenCV, falling back to Pillow

    Raises:
        AssetIOError: If no decoder can read the data.
    """
    if payload.subtype is ImageSubtype.SVG:
        return svg_imdecode(payload.data)
    if payload.subtype in (ImageSubtype.GIF, ImageSubtype.ICO):
        return pil_imdecode(payload.data)

    img = cv2_imdecode(payload.data)
    if img is not None:
        return img
    logger.debug("OpenCV could not decode %s data, trying Pillow", payload.subtype.name)
    return pil_imdecode(payload.data)


def encode_png(raster: np.ndarray) -> bytes:
    """Encode a grayscale/RGB/RGBA raster as PNG bytes.

    Raises:
        AssetIOError: If OpenCV fails to encode the array.
    """
    a = np.ascontiguousarray(raster)
    if a.ndim == 3 and a.shape[2] == 4:
        a = cv2.cvtColor(a, cv2.COLOR_RGBA2BGRA)
    elif a.ndim == 3 and a.shape[2] == 3:
        a = cv2.cvtColor(a, cv2.COLOR_RGB2BGR)
    ok, buf = cv2.imencode(".png", a)
    if not ok:
        raise AssetIOError("Cannot encode raster as PNG")
    return buf.tobytes()

"""Scratch-file management for conversion outputs.

Encoded QR images and images decoded from data-URIs are written to a
process-local scratch directory so the UI can display them by path.
Written files are tracked and only deleted by ``release_all`` at teardown;
a newer output supersedes an older one without deleting it.
"""

from __future__ import annotations

import logging
import tempfile
import threading
import uuid
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np

from .constants import TEMP_DIR_NAME
from .errors import AssetIOError
from .image_io import encode_png
from .models import TempAsset

logger = logging.getLogger(__name__)


class TempAssetStore:
    """Create, track and release temporary image files.

    Args:
        base_dir: Directory for scratch files. Defaults to
            ``<system temp>/QRCodeConverter``; created lazily on first write.
    """

    def __init__(self, base_dir: Union[str, Path, None] = None):
        if base_dir is None:
            base_dir = Path(tempfile.gettempdir()) / TEMP_DIR_NAME
        self.base_dir = Path(base_dir)
        self._assets: List[TempAsset] = []
        self._lock = threading.Lock()

    @property
    def assets(self) -> Tuple[TempAsset, ...]:
        """Snapshot of the tracked assets, oldest first."""
        with self._lock:
            return tuple(self._assets)

    @property
    def current(self) -> Optional[TempAsset]:
        """Most recently persisted asset, if any."""
        with self._lock:
            return self._assets[-1] if self._assets else None

    def persist_image(self, raster: np.ndarray, ext: str = ".png") -> TempAsset:
        """Write ``raster`` as a PNG scratch file and track it."""
        return self.persist_bytes(encode_png(raster), ext)

    def persist_bytes(self, data: bytes, ext: str) -> TempAsset:
        """Write raw bytes to a new scratch file and track it.

        Raises:
            AssetIOError: If the directory or file cannot be written.
        """
        if ext and not ext.startswith("."):
            ext = f".{ext}"
        path = self.base_dir / f"{uuid.uuid4()}{ext}"
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise AssetIOError(f"Cannot write temporary file {path}: {e}") from e

        asset = TempAsset(path=path)
        with self._lock:
            self._assets.append(asset)
        logger.debug("Persisted temporary asset %s (%d bytes)", path, len(data))
        return asset

    def release_all(self) -> int:
        """Delete every tracked file.

        Failures are logged per file and do not stop the remaining deletions.

        Returns:
            Number of files actually removed.
        """
        with self._lock:
            assets, self._assets = self._assets, []

        removed = 0
        for asset in assets:
            try:
                if asset.path.exists():
                    asset.path.unlink()
                    removed += 1
            except OSError:
                logger.exception("Unable to delete a temporary file: %s", asset.path)
        logger.debug("Released %d of %d temporary assets", removed, len(assets))
        return removed

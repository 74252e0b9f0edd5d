"""Synchronous conversion pipeline.

``ConversionPipeline.run`` executes one request end to end
(classifier -> codec -> asset store) and returns a ``ConversionResult``.
It is called from the orchestrator's worker thread and never touches Qt
widgets. Cancellation is polled at checkpoints through a
``CancellationToken``; a cancelled job raises ``OperationCancelled``.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .codec import QRCodec
from .errors import ConversionError, OperationCancelled
from .image_io import load_raster, read_image_payload
from .models import (
    ConversionRequest,
    ConversionResult,
    FailedResult,
    ImageResult,
    ImageSubtype,
    ImageToText,
    NoOpResult,
    TextResult,
    TextToImage,
)
from .payload import DataUri, classify, parse_data_uri
from .temp_assets import TempAssetStore

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe, one-way cancellation flag."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled()


class ConversionPipeline:
    """Run conversion requests against a codec and a temp asset store."""

    def __init__(self, codec: QRCodec, store: TempAssetStore):
        self.codec = codec
        self.store = store

    def run(self, request: ConversionRequest, token: Optional[CancellationToken] = None) -> ConversionResult:
        """Execute ``request`` and return its result.

        Conversion errors are logged and returned as ``FailedResult``.

        Raises:
            OperationCancelled: If ``token`` was cancelled at a checkpoint.
        """
        if token is None:
            token = CancellationToken()
        try:
            if isinstance(request, TextToImage):
                return self._text_to_image(request, token)
            if isinstance(request, ImageToText):
                return self._image_to_text(request, token)
            raise TypeError(f"Unsupported request: {request!r}")
        except ConversionError as e:
            logger.warning("Conversion failed for %s: %s", type(request).__name__, e)
            return FailedResult(e)

    def _text_to_image(self, request: TextToImage, token: CancellationToken) -> ConversionResult:
        if not request.raw_text.strip():
            return NoOpResult()

        kind = classify(request.raw_text)
        if isinstance(kind, DataUri):
            payload = parse_data_uri(request.raw_text)
            token.raise_if_cancelled()
            asset = self.store.persist_bytes(payload.data, kind.subtype.extension)
            return ImageResult(asset.path, kind.subtype)

        raster = self.codec.encode(request.raw_text)
        token.raise_if_cancelled()
        asset = self.store.persist_image(raster, ImageSubtype.PNG.extension)
        return ImageResult(asset.path, ImageSubtype.PNG)

    def _image_to_text(self, request: ImageToText, token: CancellationToken) -> ConversionResult:
        payload = read_image_payload(request.path)
        raster = load_raster(payload)
        text = self.codec.decode(raster)
        token.raise_if_cancelled()
        return TextResult(text)



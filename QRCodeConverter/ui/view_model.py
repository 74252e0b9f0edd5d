"""View-model bridging the converter window and the orchestrator.

Exposes two observable properties:
- ``input_text``: settable by the UI; each change triggers a conversion
- ``output_image``: path of the image to display; set from results only

and the ``files_selected`` command feeding the image -> text direction.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from PySide6.QtCore import QObject, Signal

from ..core.config import ConverterConfig
from ..core.models import FailedResult, ImageResult, ImageToText, NoOpResult, TextResult
from ..core.payload import can_handle
from .orchestrator import ConversionOrchestrator

logger = logging.getLogger(__name__)


class QRCodeViewModel(QObject):
    """State of the QR encoder/decoder tool.

    Args:
        config: Converter configuration.
        orchestrator: Optional pre-built orchestrator (tests inject one
            with a custom codec or store).
        parent: Optional Qt parent.
    """

    input_text_changed = Signal(str)
    output_image_changed = Signal(object)

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        orchestrator: Optional[ConversionOrchestrator] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._input_text = ""
        self._output_image: Optional[Path] = None
        self.orchestrator = orchestrator or ConversionOrchestrator(config, parent=self)
        self.orchestrator.result_ready.connect(self._on_result_ready)

    @staticmethod
    def can_handle(text: Optional[str]) -> bool:
        """Routing predicate: True for image data-URIs."""
        return can_handle(text)

    @property
    def input_text(self) -> str:
        return self._input_text

    @input_text.setter
    def input_text(self, value: Optional[str]) -> None:
        value = value or ""
        if value == self._input_text:
            return
        self._input_text = value
        self.input_text_changed.emit(value)
        self.orchestrator.submit_text(value)

    @property
    def output_image(self) -> Optional[Path]:
        return self._output_image

    def _set_output_image(self, path: Optional[Path]) -> None:
        if path == self._output_image:
            return
        self._output_image = path
        self.output_image_changed.emit(path)

    def files_selected(self, files: Sequence[Union[str, Path]]) -> None:
        """Decode the single selected image file.

        Raises:
            ValueError: If more than one file is given.
        """
        if not files:
            return
        if len(files) != 1:
            raise ValueError(f"Exactly one file expected, got {len(files)}")
        path = Path(files[0])
        self._set_output_image(path)
        self.orchestrator.submit_file(path)

    def cancel_conversion(self) -> None:
        """Drop the queued or running conversion; inputs are left as they are."""
        self.orchestrator.cancel()

    def dispose(self) -> None:
        self.orchestrator.shutdown()

    def _on_result_ready(self, request, result) -> None:
        if isinstance(result, NoOpResult):
            return
        if isinstance(result, ImageResult):
            self._set_output_image(result.path)
        elif isinstance(result, TextResult):
            self.input_text = result.text
        elif isinstance(result, FailedResult):
            logger.info("Conversion failed: %s", result.reason)
            # Silent failure: clear the output of the failed direction
            if isinstance(request, ImageToText):
                self.input_text = ""
            else:
                self._set_output_image(None)

"""Asynchronous conversion orchestration.

``ConversionOrchestrator`` lives on the UI thread and drives a small state
machine:

    IDLE -> PENDING (text only, debounce) -> RUNNING -> PUBLISHING -> COMPLETED

- Every new input cancels the in-flight job's token and starts a new job.
- Text input waits ``debounce_ms`` before running; a job cancelled during
  the wait never starts.
- Image input runs immediately.
- Jobs run one at a time on a dedicated worker thread.
- Results of cancelled jobs are dropped, so the last surviving request wins
  even if an older job finishes later.
- A dropped result returns the machine to IDLE unless a newer job took over.
- While PUBLISHING, new submissions are ignored. This keeps a decoded text
  written back into the input from being re-encoded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import QObject, QThread, QTimer, Signal, Slot

from ..core.codec import QRCodec
from ..core.config import ConverterConfig
from ..core.errors import OperationCancelled
from ..core.models import ConversionRequest, FailedResult, ImageToText, NoOpResult, TextToImage
from ..core.pipeline import CancellationToken, ConversionPipeline
from ..core.temp_assets import TempAssetStore

logger = logging.getLogger(__name__)


class OrchestratorState(Enum):
    IDLE = auto()  # Nothing queued
    PENDING = auto()  # Text job waiting for the debounce interval
    RUNNING = auto()  # Job handed to the worker thread
    PUBLISHING = auto()  # Result being delivered; submissions are ignored
    COMPLETED = auto()  # Last job published its result


@dataclass(eq=False)
class ConversionJob:
    job_id: int
    request: ConversionRequest
    token: CancellationToken = field(default_factory=CancellationToken)


class ConversionWorker(QObject):
    """Runs jobs on the worker thread and reports ``(job, result)``.

    ``result`` is None when the job was cancelled before or while running.
    """

    finished = Signal(object, object)

    def __init__(self, pipeline: ConversionPipeline):
        super().__init__()
        self._pipeline = pipeline

    @Slot(object)
    def run(self, job: ConversionJob) -> None:
        if job.token.is_cancelled:
            self.finished.emit(job, None)
            return
        try:
            result = self._pipeline.run(job.request, job.token)
        except OperationCancelled:
            result = None
        except Exception as e:
            logger.exception("Unexpected error in conversion job %d", job.job_id)
            result = FailedResult(e)
        self.finished.emit(job, result)


class ConversionOrchestrator(QObject):
    """Debounce, cancel and sequence conversions off the UI thread.

    Args:
        config: Converter configuration (defaults to ``ConverterConfig()``).
        codec: QR codec; built from ``config`` when omitted.
        store: Temp asset store; built from ``config.temp_dir`` when omitted.
        parent: Optional Qt parent.

    Signals:
        result_ready(request, result): Emitted on the UI thread for each
            published result (including ``NoOpResult``).
        state_changed(state): Emitted with the new ``OrchestratorState``.
    """

    result_ready = Signal(object, object)
    state_changed = Signal(object)
    _dispatch = Signal(object)

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        codec: Optional[QRCodec] = None,
        store: Optional[TempAssetStore] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.config = config or ConverterConfig()
        if codec is None:
            codec = QRCodec(
                size=self.config.qr_size,
                margin=self.config.qr_margin,
                error_correction=self.config.error_correction,
                encoding=self.config.encoding,
            )
        self.store = store or TempAssetStore(self.config.temp_dir)
        self._pipeline = ConversionPipeline(codec, self.store)

        self._state = OrchestratorState.IDLE
        self._job_counter = 0
        self._current_job: Optional[ConversionJob] = None
        self._pending_job: Optional[ConversionJob] = None
        self._closed = False

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(self.config.debounce_ms)
        self._debounce.timeout.connect(self._on_debounce_elapsed)

        self._thread = QThread(self)
        self._worker = ConversionWorker(self._pipeline)
        self._worker.moveToThread(self._thread)
        self._dispatch.connect(self._worker.run)
        self._worker.finished.connect(self._on_job_finished)
        self._thread.finished.connect(self._worker.deleteLater)
        self._thread.start()

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state in (OrchestratorState.PENDING, OrchestratorState.RUNNING)

    # ------------------------
    # Triggers
    # ------------------------
    def submit_text(self, text: Optional[str]) -> bool:
        """Queue a text -> image conversion after the debounce interval.

        Empty or whitespace-only text publishes ``NoOpResult`` at once.

        Returns:
            False if the submission was ignored (publishing or shut down).
        """
        if not self._accepting():
            return False
        self._supersede()

        text = text or ""
        if not text.strip():
            self._current_job = None
            self._publish(TextToImage(text), NoOpResult(), OrchestratorState.IDLE)
            return True

        job = self._new_job(TextToImage(text))
        self._pending_job = job
        self._set_state(OrchestratorState.PENDING)
        self._debounce.start()
        return True

    def submit_file(self, path: Union[str, Path]) -> bool:
        """Queue an image -> text conversion immediately.

        Returns:
            False if the submission was ignored (publishing or shut down).
        """
        if not self._accepting():
            return False
        self._supersede()
        self._start(self._new_job(ImageToText(Path(path))))
        return True

    def cancel(self) -> None:
        """Cancel queued and in-flight work without submitting new input.

        A pending text job is dropped at once. A running job keeps the
        RUNNING state until the worker hands it back and it is discarded.
        """
        if self._closed:
            return
        self._supersede()
        if self._state is OrchestratorState.PENDING:
            self._current_job = None
            self._set_state(OrchestratorState.IDLE)

    def shutdown(self) -> None:
        """Cancel pending work, stop the worker thread and delete temp files."""
        if self._closed:
            return
        self._closed = True
        self._supersede()
        self._thread.quit()
        self._thread.wait()
        self.store.release_all()
        self._set_state(OrchestratorState.IDLE)

    # ------------------------
    # State machine
    # ------------------------
    def _accepting(self) -> bool:
        if self._closed:
            return False
        if self._state is OrchestratorState.PUBLISHING:
            logger.debug("Ignoring input submitted while publishing")
            return False
        return True

    def _supersede(self) -> None:
        self._debounce.stop()
        self._pending_job = None
        if self._current_job is not None:
            self._current_job.token.cancel()

    def _new_job(self, request: ConversionRequest) -> ConversionJob:
        self._job_counter += 1
        job = ConversionJob(self._job_counter, request)
        self._current_job = job
        return job

    def _start(self, job: ConversionJob) -> None:
        logger.debug("Starting conversion job %d (%s)", job.job_id, type(job.request).__name__)
        self._set_state(OrchestratorState.RUNNING)
        self._dispatch.emit(job)

    def _on_debounce_elapsed(self) -> None:
        job, self._pending_job = self._pending_job, None
        if job is None or job.token.is_cancelled:
            return
        self._start(job)

    @Slot(object, object)
    def _on_job_finished(self, job: ConversionJob, result) -> None:
        if result is None or job.token.is_cancelled:
            logger.debug("Discarding result of superseded job %d", job.job_id)
            if job is self._current_job:
                # Nothing newer was submitted
                self._current_job = None
                self._set_state(OrchestratorState.IDLE)
            return
        self._publish(job.request, result, OrchestratorState.COMPLETED)

    def _publish(self, request: ConversionRequest, result, final_state: OrchestratorState) -> None:
        self._set_state(OrchestratorState.PUBLISHING)
        try:
            self.result_ready.emit(request, result)
        finally:
            self._set_state(final_state)

    def _set_state(self, state: OrchestratorState) -> None:
        if state is self._state:
            return
        self._state = state
        self.state_changed.emit(state)

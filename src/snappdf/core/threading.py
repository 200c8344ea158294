"""
Threading system for non-blocking conversion and merge runs.

A run is executed on one QThread so the UI stays responsive, while documents
and pages are still processed strictly one at a time inside the run. Results
reach the BatchState through queued signal connections, so the state is only
ever mutated on the thread that owns it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot

from .batch_state import BatchMode, BatchState
from .conversion import ConversionOrchestrator
from .errors import BaseAppError, from_exception
from .merge import MIN_MERGE_ITEMS, MergeOrchestrator
from .models import ConversionItem, InputDocument, MergeItem, OutputArtifact

logger = logging.getLogger(__name__)

ItemCallback = Callable[[int, object], None]
RunJob = Callable[[ItemCallback], OutputArtifact]


class RunWorker(QThread):
    """
    QThread-based worker running one orchestration pass.

    Signals:
        itemUpdated(int, object): An item finished (converted, errored or appended)
        runCompleted(object): The run produced its OutputArtifact
        runError(str, str): The run failed with error type and user message
        logMessage(str, str): Level and message for the UI log
    """

    itemUpdated = Signal(int, object)
    runCompleted = Signal(object)
    runError = Signal(str, str)
    logMessage = Signal(str, str)

    def __init__(self, mode: BatchMode, job: RunJob, *, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.mode = mode
        self._job = job
        self.error: BaseAppError | None = None
        self.setObjectName(f"RunWorker-{mode.value}")

    def _item_callback(self, index: int, item: object) -> None:
        self.itemUpdated.emit(index, item)

    def run(self) -> None:
        """
        Worker thread body.

        Exactly one of runCompleted or runError is emitted.
        """
        logger.info(f"Starting {self.mode.value} run")
        try:
            artifact = self._job(self._item_callback)
        except Exception as e:
            self.error = from_exception(e, {"mode": self.mode.value})
            if isinstance(e, BaseAppError):
                logger.error(f"{self.mode.value} run failed: [{e.code.value}] {e.user_message}")
            else:
                logger.exception(f"Unexpected error during {self.mode.value} run")
            self.logMessage.emit("ERROR", self.error.user_message)
            self.runError.emit(e.__class__.__name__, self.error.user_message)
            return

        self.logMessage.emit("INFO", f"Created {artifact.suggested_file_name}")
        self.runCompleted.emit(artifact)


class RunController(QObject):
    """
    Manages the lifecycle of RunWorker threads for one BatchState.

    At most one run is active at a time. There is no cancellation: a started
    run always ends in completion or failure.
    """

    runFinished = Signal()  # Emitted after cleanup
    logMessage = Signal(str, str)

    def __init__(self, state: BatchState, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.state = state
        self.current_worker: RunWorker | None = None
        self.setObjectName("RunController")

    def is_running(self) -> bool:
        return self.current_worker is not None and self.current_worker.isRunning()

    def start_conversion(
        self, documents: Sequence[InputDocument], orchestrator: ConversionOrchestrator | None = None
    ) -> bool:
        """
        Start converting ``documents`` in a worker thread.

        Returns:
            False if a run is already active or there is nothing to convert
        """
        if not documents:
            logger.warning("Cannot start conversion: no documents")
            return False

        orchestrator = orchestrator or ConversionOrchestrator()
        documents = list(documents)
        items = [ConversionItem(document=document) for document in documents]

        def job(item_cb: ItemCallback) -> OutputArtifact:
            return orchestrator.convert(documents, item_cb=item_cb)

        return self._start(BatchMode.CONVERT, items, job)

    def start_merge(self, items: Sequence[MergeItem], orchestrator: MergeOrchestrator | None = None) -> bool:
        """
        Start merging ``items`` in a worker thread.

        Returns:
            False if a run is already active or fewer than two items are given
        """
        if len(items) < MIN_MERGE_ITEMS:
            logger.warning(f"Cannot start merge: {len(items)} item(s), need {MIN_MERGE_ITEMS}")
            return False

        orchestrator = orchestrator or MergeOrchestrator()
        ordered = sorted(items, key=lambda item: item.order)

        def job(item_cb: ItemCallback) -> OutputArtifact:
            return orchestrator.merge(ordered, item_cb=item_cb)

        return self._start(BatchMode.MERGE, ordered, job)

    def _start(self, mode: BatchMode, items: Sequence[object], job: RunJob) -> bool:
        if self.is_running() or self.state.is_processing:
            logger.warning("Cannot start run: another run is already in progress")
            return False

        self.state.begin_run(mode, items)

        worker = RunWorker(mode, job, parent=self)
        worker.itemUpdated.connect(self.state.update_item, Qt.ConnectionType.QueuedConnection)
        worker.runCompleted.connect(self._on_run_completed, Qt.ConnectionType.QueuedConnection)
        worker.runError.connect(self._on_run_error, Qt.ConnectionType.QueuedConnection)
        worker.logMessage.connect(self.logMessage, Qt.ConnectionType.QueuedConnection)
        worker.finished.connect(self._cleanup_worker, Qt.ConnectionType.QueuedConnection)
        self.current_worker = worker

        worker.start()
        return True

    @Slot(object)
    def _on_run_completed(self, artifact: OutputArtifact) -> None:
        self.state.complete(artifact)

    @Slot(str, str)
    def _on_run_error(self, error_type: str, message: str) -> None:
        logger.debug(f"Run error of type {error_type}")
        self.state.fail(message)

    @Slot()
    def _cleanup_worker(self) -> None:
        """Release the finished worker. Connected to the worker's finished signal."""
        worker = self.current_worker
        self.current_worker = None

        if worker is not None:
            try:
                worker.itemUpdated.disconnect(self.state.update_item)
                worker.runCompleted.disconnect(self._on_run_completed)
                worker.runError.disconnect(self._on_run_error)
                worker.logMessage.disconnect(self.logMessage)
                worker.finished.disconnect(self._cleanup_worker)
            except (RuntimeError, TypeError):
                logger.debug("Worker signals already disconnected")

            if worker.isRunning():
                worker.wait(1000)
            worker.deleteLater()
            logger.debug(f"Worker {worker.objectName()} scheduled for deletion")

        self.runFinished.emit()

    def wait_for_completion(self, timeout_ms: int = 0) -> bool:
        """Block until the current worker finishes. Intended for shutdown and tests."""
        if self.current_worker:
            return self.current_worker.wait(timeout_ms) if timeout_ms else self.current_worker.wait()
        return True

    @Slot()
    def shutdown(self, timeout_ms: int = 3000) -> None:
        """Wait for an active run and release the live artifact."""
        if self.is_running():
            logger.info("Application shutting down, waiting for the active run")
            if not self.wait_for_completion(timeout_ms):
                logger.warning(f"Run did not finish within {timeout_ms}ms during shutdown")
        self.state.release()

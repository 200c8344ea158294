"""
Run state management for SnapPDF.

BatchState is the in-memory model of one conversion or merge run: the items
being processed, the run state, and at most one live output artifact. It is
mutated only by the flow driving the run; views subscribe to its signals.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum, auto

from PySide6.QtCore import QObject, Signal

from .models import ConversionItem, MergeItem, OutputArtifact

logger = logging.getLogger(__name__)


class RunState(Enum):
    """
    Enumeration of run states.

    There is no cancelled state: a started run ends in COMPLETE or FAILED.
    """

    IDLE = auto()  # No run yet
    PROCESSING = auto()  # Run in progress
    COMPLETE = auto()  # Run finished and produced an artifact
    FAILED = auto()  # Run stopped on an error


class BatchMode(Enum):
    """Which pipeline a run belongs to."""

    CONVERT = "convert"
    MERGE = "merge"


class BatchState(QObject):
    """
    Observable state of the current run.

    Signals:
        stateChanged(object): New RunState
        itemUpdated(int, object): Index and new value of an item
        artifactReady(object): OutputArtifact of a completed run
        artifactReleased(object): Artifact that was superseded or torn down
        runFailed(str): Error message of a failed run, verbatim
    """

    stateChanged = Signal(object)
    itemUpdated = Signal(int, object)
    artifactReady = Signal(object)
    artifactReleased = Signal(object)
    runFailed = Signal(str)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.state = RunState.IDLE
        self.mode: BatchMode | None = None
        self.items: list[ConversionItem | MergeItem] = []
        self.artifact: OutputArtifact | None = None
        self.error_message: str | None = None
        self.setObjectName("BatchState")

    @property
    def is_processing(self) -> bool:
        return self.state is RunState.PROCESSING

    def _set_state(self, state: RunState) -> None:
        logger.debug(f"Run state {self.state.name} -> {state.name}")
        self.state = state
        self.stateChanged.emit(state)

    def _release_artifact(self) -> None:
        if self.artifact is None:
            return
        artifact = self.artifact
        self.artifact = None
        artifact.release()
        logger.debug(f"Released artifact {artifact.suggested_file_name}")
        self.artifactReleased.emit(artifact)

    def begin_run(self, mode: BatchMode, items: Sequence[ConversionItem | MergeItem]) -> None:
        """
        Start a new run, discarding the previous error and artifact.

        Raises:
            RuntimeError: If a run is already in progress
        """
        if self.is_processing:
            raise RuntimeError("A run is already in progress")

        self._release_artifact()
        self.error_message = None
        self.mode = mode
        self.items = list(items)
        logger.info(f"Starting {mode.value} run with {len(self.items)} item(s)")
        self._set_state(RunState.PROCESSING)

    def update_item(self, index: int, item: ConversionItem | MergeItem) -> None:
        """Publish the new value of one item."""
        if not 0 <= index < len(self.items):
            raise IndexError(f"No item at index {index}")
        self.items[index] = item
        self.itemUpdated.emit(index, item)

    def complete(self, artifact: OutputArtifact) -> None:
        """
        Finish the run successfully.

        Raises:
            RuntimeError: If no run is in progress
        """
        if not self.is_processing:
            raise RuntimeError(f"Cannot complete a run in state {self.state.name}")

        self.artifact = artifact
        logger.info(f"Run complete: {artifact.suggested_file_name} ({artifact.size} bytes)")
        self._set_state(RunState.COMPLETE)
        self.artifactReady.emit(artifact)

    def fail(self, message: str) -> None:
        """
        Finish the run with an error. No artifact is kept.

        Raises:
            RuntimeError: If no run is in progress
        """
        if not self.is_processing:
            raise RuntimeError(f"Cannot fail a run in state {self.state.name}")

        self.error_message = message
        logger.error(f"Run failed: {message}")
        self._set_state(RunState.FAILED)
        self.runFailed.emit(message)

    def reset(self) -> None:
        """Return to IDLE, clearing items, error and artifact."""
        if self.is_processing:
            raise RuntimeError("Cannot reset while a run is in progress")
        self._release_artifact()
        self.items = []
        self.mode = None
        self.error_message = None
        if self.state is not RunState.IDLE:
            self._set_state(RunState.IDLE)

    def release(self) -> None:
        """Release the live artifact, e.g. when the owner is torn down."""
        self._release_artifact()

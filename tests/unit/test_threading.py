"""
Tests for the threaded run controller.
"""

from unittest.mock import MagicMock, patch

import pytest

from snappdf.core.batch_state import BatchMode, BatchState, RunState
from snappdf.core.conversion import ConversionOrchestrator
from snappdf.core.merge import MergeOrchestrator, MergeQueue
from snappdf.core.models import ArtifactKind, InputDocument, ItemStatus
from snappdf.core.threading import RunController, RunWorker


@pytest.fixture
def controller(qtbot):
    state = BatchState()
    controller = RunController(state)
    yield controller
    controller.wait_for_completion(5000)


class TestRunWorker:
    def test_emits_completion(self, qtbot):
        artifact = MagicMock()
        artifact.suggested_file_name = "x.png"
        worker = RunWorker(BatchMode.CONVERT, lambda item_cb: artifact)

        with qtbot.waitSignal(worker.runCompleted, timeout=5000) as blocker:
            worker.start()
        worker.wait()

        assert blocker.args == [artifact]
        assert worker.error is None

    def test_emits_error(self, qtbot):
        def job(item_cb):
            raise KeyError("boom")

        worker = RunWorker(BatchMode.MERGE, job)

        with qtbot.waitSignal(worker.runError, timeout=5000) as blocker:
            worker.start()
        worker.wait()

        assert blocker.args == ["KeyError", "An unexpected error occurred"]
        assert worker.error.context["mode"] == "merge"


class TestRunController:
    """Test RunController end to end with real documents."""

    def test_conversion_run(self, qtbot, controller, make_document):
        documents = [make_document("a.pdf", 2), make_document("b.pdf", 1)]

        with qtbot.waitSignal(controller.state.artifactReady, timeout=10000) as blocker:
            assert controller.start_conversion(documents, ConversionOrchestrator())

        artifact = blocker.args[0]
        assert artifact.suggested_file_name == "converted_files.zip"
        assert controller.state.state is RunState.COMPLETE
        assert [item.status for item in controller.state.items] == [ItemStatus.CONVERTED, ItemStatus.CONVERTED]

    def test_conversion_failure(self, qtbot, controller, make_document):
        documents = [make_document("a.pdf"), InputDocument("broken.pdf", b"garbage"), make_document("c.pdf")]

        with qtbot.waitSignal(controller.state.runFailed, timeout=10000) as blocker:
            controller.start_conversion(documents)

        assert "broken.pdf" in blocker.args[0]
        statuses = [item.status for item in controller.state.items]
        assert statuses == [ItemStatus.CONVERTED, ItemStatus.ERRORED, ItemStatus.PENDING]
        assert controller.state.artifact is None

    def test_merge_run(self, qtbot, controller, make_document):
        queue = MergeQueue([make_document("a.pdf"), make_document("b.pdf")])

        with qtbot.waitSignal(controller.state.artifactReady, timeout=10000) as blocker:
            assert controller.start_merge(queue.items, MergeOrchestrator())

        assert blocker.args[0].kind is ArtifactKind.PDF
        assert blocker.args[0].suggested_file_name == "merged.pdf"

    def test_refuses_empty_conversion(self, controller):
        assert not controller.start_conversion([])
        assert controller.state.state is RunState.IDLE

    def test_refuses_single_merge(self, controller, make_document):
        queue = MergeQueue([make_document("a.pdf")])
        assert not controller.start_merge(queue.items)

    def test_refuses_concurrent_run(self, qtbot, controller, make_document):
        controller.state.begin_run(BatchMode.CONVERT, [])

        assert not controller.start_conversion([make_document("a.pdf")])

    def test_run_finished_after_cleanup(self, qtbot, controller, make_document):
        with qtbot.waitSignal(controller.runFinished, timeout=10000):
            controller.start_conversion([make_document("a.pdf")])

        assert controller.current_worker is None
        assert not controller.is_running()

    def test_shutdown_releases_artifact(self, qtbot, controller, make_document):
        with qtbot.waitSignal(controller.state.artifactReady, timeout=10000) as blocker:
            controller.start_conversion([make_document("a.pdf")])

        controller.shutdown()

        assert blocker.args[0].released
        assert controller.state.artifact is None

    def test_merge_write_failure_message_kept(self, qtbot, controller, make_document):
        queue = MergeQueue([make_document("a.pdf"), make_document("b.pdf")])

        with patch("snappdf.core.merger.PdfWriter.write", side_effect=ValueError("broken xref")):
            with qtbot.waitSignal(controller.state.runFailed, timeout=10000) as blocker:
                controller.start_merge(queue.items)
            controller.wait_for_completion(5000)

        assert blocker.args == ["Could not write merged.pdf"]

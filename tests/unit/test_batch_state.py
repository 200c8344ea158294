"""
Tests for BatchState run state management.
"""

import pytest

from snappdf.core.batch_state import BatchMode, BatchState, RunState
from snappdf.core.models import ArtifactKind, ConversionItem, InputDocument, ItemStatus, OutputArtifact


def make_items(count: int) -> list[ConversionItem]:
    return [ConversionItem(document=InputDocument(f"{i}.pdf", b"")) for i in range(count)]


def make_artifact(name: str = "a.png") -> OutputArtifact:
    return OutputArtifact(payload=b"data", suggested_file_name=name, kind=ArtifactKind.PNG)


class TestBatchState:
    """Test BatchState transitions and signals."""

    def test_initial_state(self, qtbot):
        state = BatchState()

        assert state.state is RunState.IDLE
        assert state.artifact is None
        assert state.items == []
        assert not state.is_processing

    def test_begin_run(self, qtbot):
        state = BatchState()

        with qtbot.waitSignal(state.stateChanged) as blocker:
            state.begin_run(BatchMode.CONVERT, make_items(2))

        assert blocker.args == [RunState.PROCESSING]
        assert state.is_processing
        assert state.mode is BatchMode.CONVERT
        assert len(state.items) == 2

    def test_begin_run_while_processing(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))

        with pytest.raises(RuntimeError):
            state.begin_run(BatchMode.MERGE, [])

    def test_update_item(self, qtbot):
        state = BatchState()
        items = make_items(2)
        state.begin_run(BatchMode.CONVERT, items)
        items[1].mark_errored("boom")

        with qtbot.waitSignal(state.itemUpdated) as blocker:
            state.update_item(1, items[1])

        assert blocker.args[0] == 1
        assert [item.status for item in state.items] == [ItemStatus.PENDING, ItemStatus.ERRORED]

    def test_update_item_out_of_range(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))

        with pytest.raises(IndexError):
            state.update_item(3, make_items(1)[0])

    def test_complete(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))
        artifact = make_artifact()

        with qtbot.waitSignal(state.artifactReady) as blocker:
            state.complete(artifact)

        assert blocker.args == [artifact]
        assert state.state is RunState.COMPLETE
        assert state.artifact is artifact

    def test_fail_keeps_message_verbatim(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))

        with qtbot.waitSignal(state.runFailed) as blocker:
            state.fail("Failed to process page 2 of b.pdf")

        assert blocker.args == ["Failed to process page 2 of b.pdf"]
        assert state.state is RunState.FAILED
        assert state.artifact is None

    def test_complete_requires_processing(self, qtbot):
        state = BatchState()

        with pytest.raises(RuntimeError):
            state.complete(make_artifact())
        with pytest.raises(RuntimeError):
            state.fail("nope")

    def test_new_run_releases_previous_artifact(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))
        first = make_artifact("first.png")
        state.complete(first)

        with qtbot.waitSignal(state.artifactReleased) as blocker:
            state.begin_run(BatchMode.MERGE, make_items(2))

        assert blocker.args == [first]
        assert first.released
        assert state.artifact is None
        assert state.error_message is None

    def test_new_run_clears_error(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))
        state.fail("bad")

        state.begin_run(BatchMode.CONVERT, make_items(1))

        assert state.error_message is None

    def test_reset(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))
        artifact = make_artifact()
        state.complete(artifact)

        with qtbot.waitSignal(state.stateChanged) as blocker:
            state.reset()

        assert blocker.args == [RunState.IDLE]
        assert artifact.released
        assert state.items == []

    def test_reset_while_processing(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))

        with pytest.raises(RuntimeError):
            state.reset()

    def test_release(self, qtbot):
        state = BatchState()
        state.begin_run(BatchMode.CONVERT, make_items(1))
        artifact = make_artifact()
        state.complete(artifact)

        state.release()

        assert artifact.released
        assert state.artifact is None

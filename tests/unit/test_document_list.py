"""
Tests for the DocumentList widget.
"""

import pytest
from PySide6.QtCore import QModelIndex
from PySide6.QtWidgets import QAbstractItemView

from snappdf.core.models import ItemStatus
from snappdf.gui.widgets.document_list import DocumentList


@pytest.fixture
def widget(qtbot):
    widget = DocumentList()
    qtbot.addWidget(widget)
    return widget


class TestDocumentList:
    def test_set_documents(self, widget):
        widget.set_documents(["a.pdf", "b.pdf"])

        assert widget.count() == 2
        assert widget.names() == ["a.pdf", "b.pdf"]

    def test_set_status(self, widget):
        widget.set_documents(["a.pdf", "b.pdf"])

        widget.set_status(1, ItemStatus.ERRORED, "Failed to process page 2 of b.pdf")

        item = widget.item(1)
        assert item.text() == "❌ b.pdf"
        assert item.toolTip() == "Failed to process page 2 of b.pdf"
        assert widget.names() == ["a.pdf", "b.pdf"]

    def test_set_status_out_of_range(self, widget):
        widget.set_status(4, ItemStatus.CONVERTED)

    def test_reorderable(self, widget):
        assert widget.dragDropMode() == QAbstractItemView.DragDropMode.NoDragDrop

        widget.set_reorderable(True)

        assert widget.dragDropMode() == QAbstractItemView.DragDropMode.InternalMove

    @pytest.mark.parametrize("start, row, expected", [(0, 3, (0, 2)), (2, 0, (2, 0)), (1, 2, None)])
    def test_rows_moved_translation(self, widget, qtbot, start, row, expected):
        received = []
        widget.itemMoved.connect(lambda a, b: received.append((a, b)))

        widget._on_rows_moved(QModelIndex(), start, start, QModelIndex(), row)

        assert received == ([expected] if expected else [])

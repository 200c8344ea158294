"""
Pending document list with per-item status and drag reordering.
"""

from PySide6.QtCore import QModelIndex, Qt, Signal
from PySide6.QtWidgets import QAbstractItemView, QListWidget, QListWidgetItem, QWidget

from snappdf.core.models import ItemStatus

STATUS_MARKS = {
    ItemStatus.PENDING: "⏳",
    ItemStatus.CONVERTED: "✅",
    ItemStatus.ERRORED: "❌",
}


class DocumentList(QListWidget):
    """
    List of the documents queued for the next run.

    In reorder mode rows can be dragged; every completed move is reported as
    ``itemMoved(from_index, to_index)`` with the same meaning as a splice.
    """

    itemMoved = Signal(int, int)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("documentList")
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setAccessibleName("Pending PDF files")
        self.model().rowsMoved.connect(self._on_rows_moved)
        self.set_reorderable(False)

    def set_reorderable(self, enabled: bool) -> None:
        mode = QAbstractItemView.DragDropMode.InternalMove if enabled else QAbstractItemView.DragDropMode.NoDragDrop
        self.setDragDropMode(mode)
        self.setDefaultDropAction(Qt.DropAction.MoveAction)

    def _on_rows_moved(self, parent: QModelIndex, start: int, end: int, destination: QModelIndex, row: int) -> None:
        # Qt reports the destination row before the source row is removed
        to_index = row - 1 if row > start else row
        if to_index != start:
            self.itemMoved.emit(start, to_index)

    def set_documents(self, names: list[str]) -> None:
        self.clear()
        for name in names:
            item = QListWidgetItem(name)
            item.setData(Qt.ItemDataRole.UserRole, name)
            self.addItem(item)

    def set_status(self, index: int, status: ItemStatus, detail: str | None = None) -> None:
        item = self.item(index)
        if item is None:
            return
        name = item.data(Qt.ItemDataRole.UserRole)
        item.setText(f"{STATUS_MARKS[status]} {name}")
        item.setToolTip(detail or "")

    def names(self) -> list[str]:
        return [self.item(i).data(Qt.ItemDataRole.UserRole) for i in range(self.count())]

"""
Ordered merging of PDF documents.

The pending merge list is user editable (reorder, remove) until a run starts.
Concatenation walks the items by ascending ``order`` and appends every page of
each document in its original order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace

from .errors import InsufficientInputError
from .merger import DocumentMerger
from .models import ArtifactKind, InputDocument, MergeItem, OutputArtifact

logger = logging.getLogger(__name__)

MIN_MERGE_ITEMS = 2
MERGED_FILE_NAME = "merged.pdf"

ItemCallback = Callable[[int, MergeItem], None]  # (position, item)


def _rerank(items: list[MergeItem]) -> list[MergeItem]:
    return [replace(item, order=position) for position, item in enumerate(items)]


def reorder_items(items: Sequence[MergeItem], from_index: int, to_index: int) -> list[MergeItem]:
    """
    Move the item at ``from_index`` to ``to_index``.

    Items in between shift by one position. Returns a new list; equal or
    out-of-range indices leave the sequence unchanged.
    """
    result = sorted(items, key=lambda item: item.order)
    size = len(result)
    if from_index == to_index or not (0 <= from_index < size and 0 <= to_index < size):
        return result

    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return _rerank(result)


def remove_item(items: Sequence[MergeItem], index: int) -> list[MergeItem]:
    """Remove the item at ``index`` (in ``order`` sequence). Out-of-range is a no-op."""
    result = sorted(items, key=lambda item: item.order)
    if 0 <= index < len(result):
        del result[index]
    return result


class MergeQueue:
    """
    The pending, user-editable list of documents to merge.

    The queue is frozen while a merge run is in progress.
    """

    def __init__(self, documents: Iterable[InputDocument] = ()) -> None:
        self._items: list[MergeItem] = []
        self._next_order = 0
        self._frozen = False
        self.extend(documents)

    def _check_editable(self) -> None:
        if self._frozen:
            raise RuntimeError("The merge list cannot be changed while a merge is running")

    @property
    def items(self) -> list[MergeItem]:
        return sorted(self._items, key=lambda item: item.order)

    @property
    def documents(self) -> list[InputDocument]:
        return [item.document for item in self.items]

    @property
    def can_merge(self) -> bool:
        return len(self._items) >= MIN_MERGE_ITEMS

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._items)

    def add(self, document: InputDocument) -> MergeItem:
        self._check_editable()
        item = MergeItem(document=document, order=self._next_order)
        self._next_order += 1
        self._items.append(item)
        return item

    def extend(self, documents: Iterable[InputDocument]) -> None:
        for document in documents:
            self.add(document)

    def reorder(self, from_index: int, to_index: int) -> None:
        self._check_editable()
        self._items = reorder_items(self._items, from_index, to_index)
        if self._items:
            self._next_order = max(item.order for item in self._items) + 1

    def remove(self, index: int) -> None:
        self._check_editable()
        self._items = remove_item(self._items, index)

    def clear(self) -> None:
        self._check_editable()
        self._items = []
        self._next_order = 0

    def freeze(self) -> None:
        self._frozen = True

    def thaw(self) -> None:
        self._frozen = False


class MergeOrchestrator:
    """Concatenates the pages of an ordered list of documents."""

    def __init__(self, merger: DocumentMerger | None = None) -> None:
        self.merger = merger or DocumentMerger()

    def merge(self, items: Sequence[MergeItem], item_cb: ItemCallback | None = None) -> OutputArtifact:
        """
        Merge the documents into one PDF.

        Args:
            items: Merge items; processed by ascending ``order``
            item_cb: Called with (position, item) after each document is appended

        Returns:
            OutputArtifact named ``merged.pdf``

        Raises:
            InsufficientInputError: If fewer than two items are given
            DocumentLoadError: If a document cannot be opened
            MergeCopyError: If the pages of a document cannot be copied
        """
        if len(items) < MIN_MERGE_ITEMS:
            raise InsufficientInputError(minimum=MIN_MERGE_ITEMS, actual=len(items))

        ordered = sorted(items, key=lambda item: item.order)
        logger.info(f"Merging {len(ordered)} document(s): {', '.join(item.name for item in ordered)}")

        output = self.merger.new_document()
        total_pages = 0
        for position, item in enumerate(ordered):
            reader = self.merger.load(item.name, item.document.data)
            pages = self.merger.copy_pages(item.name, reader)
            self.merger.append_pages(item.name, output, pages)
            total_pages += len(pages)
            logger.debug(f"Appended {len(pages)} page(s) from {item.name}")
            if item_cb:
                item_cb(position, item)

        data = self.merger.serialize(MERGED_FILE_NAME, output)
        logger.info(f"Merged {total_pages} page(s) into {MERGED_FILE_NAME}")
        return OutputArtifact(payload=data, suggested_file_name=MERGED_FILE_NAME, kind=ArtifactKind.PDF)

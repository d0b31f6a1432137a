"""Front-to-back review of parsed items before they are committed."""

from __future__ import annotations

from dataclasses import replace

from .errors import ReviewStateError
from .models import ParsedItem, ReviewSummary
from .validation import validate_item

PENDING = "pending"
EDITING = "editing"
APPROVED = "approved"
REJECTED = "rejected"


class ReviewQueue:
    """Presents each item once for approve / reject / edit.

    Only the item at ``current_index`` is active. Editing replaces its fields
    and returns it to pending; approving or rejecting moves to the next item.
    Discarding the queue has no side effects.
    """

    def __init__(self, items: list[ParsedItem]) -> None:
        self._items = list(items)
        self._states = [PENDING] * len(self._items)
        self._index = 0

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> list[ParsedItem]:
        return list(self._items)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current(self) -> ParsedItem | None:
        if self._index >= len(self._items):
            return None
        return self._items[self._index]

    def state(self, index: int) -> str:
        return self._states[index]

    def _active(self) -> int:
        if self._index >= len(self._items):
            raise ReviewStateError("All items have already been reviewed")
        return self._index

    def _decide(self, state: str) -> ParsedItem:
        index = self._active()
        if self._states[index] == EDITING:
            raise ReviewStateError("Finish editing before deciding on this item")
        self._states[index] = state
        self._index += 1
        return self._items[index]

    def approve(self) -> ParsedItem:
        return self._decide(APPROVED)

    def reject(self) -> ParsedItem:
        return self._decide(REJECTED)

    def start_edit(self) -> ParsedItem:
        """Enter the editing detour and return a copy to modify."""
        index = self._active()
        self._states[index] = EDITING
        return replace(self._items[index])

    def save_edit(self, item: ParsedItem) -> ParsedItem:
        """Replace the active item with a normalized copy of ``item``.

        The edit goes through the same normalization as model output, so an
        unknown quantity type falls back to units. The item stays in editing
        if it has no product name.
        """
        index = self._active()
        if self._states[index] != EDITING:
            raise ReviewStateError("Item is not being edited")
        normalized = validate_item(item.to_dict())
        if normalized is None:
            raise ReviewStateError("Edited item needs a product name")
        self._items[index] = normalized
        self._states[index] = PENDING
        return normalized

    def cancel_edit(self) -> None:
        index = self._active()
        if self._states[index] == EDITING:
            self._states[index] = PENDING

    @property
    def approved(self) -> list[ParsedItem]:
        return [i for i, s in zip(self._items, self._states) if s == APPROVED]

    @property
    def rejected(self) -> list[ParsedItem]:
        return [i for i, s in zip(self._items, self._states) if s == REJECTED]

    @property
    def is_complete(self) -> bool:
        return len(self.approved) + len(self.rejected) >= len(self._items)

    def summary(self) -> ReviewSummary:
        approved = self.approved
        rejected = self.rejected
        return ReviewSummary(
            approved=approved,
            rejected=rejected,
            pending=len(self._items) - len(approved) - len(rejected),
        )

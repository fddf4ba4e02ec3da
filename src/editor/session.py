"""In-memory edit buffer over one ContentDocument.

The session owns a working copy and the last snapshot confirmed by the
backend.  ``dirty`` is never stored: it is the deep structural difference
between the two, so an edit that is later undone by hand leaves the
session clean again.  All mutators are synchronous.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from pagecraft.content.localize import default_style_for
from pagecraft.content.models import (
    BlockKind,
    ContentBlock,
    ContentDocument,
    ListItem,
    LocalizedValue,
)
from pagecraft.content.schemas import DocumentSchema
from pagecraft.editor.patch import merge_patch, toggle_at
from pagecraft.errors import (
    InvalidPatch,
    InvalidPlacement,
    InvariantViolation,
    UnknownCollection,
)

logger = logging.getLogger(__name__)

Listener = Callable[["EditSession"], None]


class EditSession:
    """Mutation buffer with dirty tracking.

    Args:
        document: The document to edit; it becomes the saved snapshot.
        schema: Declares valid placements and lists.
        strict: Raise on invariant violations (development).  When False
            the offending call is logged and ignored.
    """

    def __init__(
        self,
        document: ContentDocument,
        schema: DocumentSchema,
        *,
        strict: bool = True,
    ) -> None:
        self.schema = schema
        self.strict = strict
        self._document = document.model_copy(deep=True)
        self._snapshot = document.model_copy(deep=True)
        self._listeners: list[Listener] = []

    # ── State ────────────────────────────────────────────────────

    @property
    def document(self) -> ContentDocument:
        """The working document.  Mutate it through the session only."""
        return self._document

    @property
    def last_saved_snapshot(self) -> ContentDocument:
        return self._snapshot

    @property
    def dirty(self) -> bool:
        return self._document != self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every change.  Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Mutations ────────────────────────────────────────────────

    def apply(self, patch: dict[str, Any]) -> bool:
        """Merge a deep-partial patch into the working document.

        Returns True if the document changed.  A patch that leaves the
        document deep-equal to its current state changes nothing.
        """
        data = self._document.model_dump()
        try:
            merged = merge_patch(data, patch)
            candidate = ContentDocument.model_validate(merged)
        except InvalidPatch as exc:
            return self._violation(exc, False)
        except ValidationError as exc:
            return self._violation(InvalidPatch(str(exc)), False)
        if candidate.id != self._document.id:
            return self._violation(InvalidPatch("A patch cannot change the document id"), False)
        return self._commit(candidate)

    def add_block(self, kind: BlockKind | str, placement: str) -> str | None:
        """Append an empty block at the end of ``placement``; return its id."""
        if placement not in self.schema.placements:
            return self._violation(InvalidPlacement(placement, self.schema.placements), None)
        orders = [b.order for b in self._document.blocks if b.placement == placement]
        block = ContentBlock(
            kind=BlockKind(kind),
            placement=placement,
            order=max(orders) + 1 if orders else 1,
            style=default_style_for(kind),
        )
        updated = self._document.model_copy(deep=True)
        updated.blocks.append(block)
        self._commit(updated)
        return block.id

    def remove_block(self, block_id: str) -> None:
        """Remove a block by id.  Unknown ids are ignored."""
        if self._document.find_block(block_id) is None:
            logger.debug("remove_block: %s not found, nothing to do", block_id)
            return
        updated = self._document.model_copy(deep=True)
        updated.blocks = [b for b in updated.blocks if b.id != block_id]
        self._commit(updated)

    def add_list_item(self, list_name: str, mn: str = "", en: str = "", **extra: Any) -> str | None:
        """Append an entry to a localized list; return its id."""
        if not self._has_list(list_name):
            return self._violation(UnknownCollection(list_name), None)
        item = ListItem(value=LocalizedValue(mn=mn, en=en), extra=extra)
        updated = self._document.model_copy(deep=True)
        updated.lists.setdefault(list_name, []).append(item)
        self._commit(updated)
        return item.id

    def remove_list_item(self, list_name: str, item_id: str) -> None:
        """Remove a list entry by id.  Unknown ids are ignored."""
        if not self._has_list(list_name):
            self._violation(UnknownCollection(list_name), None)
            return
        items = self._document.lists.get(list_name, [])
        if not any(item.id == item_id for item in items):
            return
        updated = self._document.model_copy(deep=True)
        updated.lists[list_name] = [i for i in updated.lists[list_name] if i.id != item_id]
        self._commit(updated)

    def toggle_visibility(self, path: str | tuple[Any, ...]) -> None:
        """Flip the boolean at a dotted path such as ``blocks.<id>.visible``."""
        try:
            data = toggle_at(self._document.model_dump(), path)
        except InvariantViolation as exc:
            self._violation(exc, None)
            return
        self._commit(ContentDocument.model_validate(data))

    # ── Snapshot handling ────────────────────────────────────────

    def reset(self) -> None:
        """Discard working changes and return to the saved snapshot."""
        self._commit(self._snapshot.model_copy(deep=True))

    def mark_saved(self, snapshot: ContentDocument) -> None:
        """Record ``snapshot`` as the backend's confirmed state.

        Only the save pipeline calls this.  Edits made after ``snapshot``
        was taken keep the session dirty.
        """
        self._snapshot = snapshot.model_copy(deep=True)
        self._notify()

    def load(self, document: ContentDocument) -> None:
        """Switch to another (freshly fetched) document."""
        self._document = document.model_copy(deep=True)
        self._snapshot = document.model_copy(deep=True)
        self._notify()

    # ── Internals ────────────────────────────────────────────────

    def _has_list(self, name: str) -> bool:
        return name in self._document.lists or name in self.schema.lists

    def _commit(self, candidate: ContentDocument) -> bool:
        if candidate == self._document:
            return False
        self._document = candidate
        self._notify()
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _violation(self, exc: InvariantViolation, fallback: Any) -> Any:
        if self.strict:
            raise exc
        logger.warning("Ignoring invalid edit on %s: %s", self._document.id, exc)
        return fallback

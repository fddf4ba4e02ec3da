"""Editor facade: one open document with its session, autosave and gate.

Every admin screen drives the same Editor, parameterized only by the
document schema.  Manual save and publish run the validation gate first
and skip the network entirely when it reports issues.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pagecraft.config import EditorSection
from pagecraft.content.models import BlockKind, ContentDocument, DocumentStatus
from pagecraft.content.schemas import DocumentSchema
from pagecraft.editor.autosave import AutosavePolicy, UnloadGuard
from pagecraft.editor.session import EditSession
from pagecraft.editor.ui_state import EditorUIState
from pagecraft.editor.validation import validate
from pagecraft.errors import PersistenceError, ValidationIssue
from pagecraft.persistence.base import CollectionRef, PersistenceAdapter, SaveMode

logger = logging.getLogger(__name__)


@dataclass
class EditorProps:
    """Everything a screen component needs to render and edit a document."""

    document: ContentDocument
    schema: DocumentSchema
    ui: EditorUIState
    dirty: bool
    errors: list[ValidationIssue]
    banner: str | None
    on_patch: Callable[[dict[str, Any]], bool]
    on_add_block: Callable[[BlockKind | str, str], str | None]
    on_remove_block: Callable[[str], None]
    on_save: Callable[[], Awaitable[list[ValidationIssue]]]
    on_publish: Callable[[], Awaitable[list[ValidationIssue]]]


class Editor:
    """Coordinates an EditSession, its AutosavePolicy and the adapter."""

    def __init__(
        self,
        adapter: PersistenceAdapter,
        schema: DocumentSchema,
        document: ContentDocument,
        *,
        settings: EditorSection | None = None,
        scheduler: Any = None,
        guard: UnloadGuard | None = None,
    ) -> None:
        settings = settings or EditorSection()
        self.adapter = adapter
        self.schema = schema
        self.session = EditSession(document, schema, strict=settings.strict_invariants)
        self.policy = AutosavePolicy(
            self.session,
            adapter,
            delay=settings.autosave_delay,
            scheduler=scheduler,
            guard=guard,
        )
        self.ui = EditorUIState(
            locale=settings.default_locale,
            preview_locale=settings.default_locale,
        )
        self.errors: list[ValidationIssue] = []
        self.persistence_error: PersistenceError | None = None

    @classmethod
    async def open(
        cls,
        adapter: PersistenceAdapter,
        schema: DocumentSchema,
        document_id: str | None = None,
        **kwargs: Any,
    ) -> Editor:
        """Hydrate a document from the adapter, or start from schema defaults.

        A 404 from the adapter means the page was never saved; the editor
        then starts from defaults under the requested id.
        """
        if document_id is None:
            return cls(adapter, schema, schema.new_document(), **kwargs)
        try:
            document = await adapter.fetch(document_id)
        except PersistenceError as exc:
            if exc.status != 404:
                raise
            logger.info("No stored %s document %s, starting from defaults", schema.name, document_id)
            document = schema.new_document(document_id)
        return cls(adapter, schema, document, **kwargs)

    # ── State ────────────────────────────────────────────────────

    @property
    def document(self) -> ContentDocument:
        return self.session.document

    @property
    def dirty(self) -> bool:
        return self.session.dirty

    @property
    def banner(self) -> str | None:
        """Message for the dismissible error banner, if any."""
        error = self.persistence_error or self.policy.last_error
        return str(error) if error is not None else None

    def dismiss_error(self) -> None:
        self.persistence_error = None
        self.policy.last_error = None

    # ── Actions ──────────────────────────────────────────────────

    def validate(self) -> list[ValidationIssue]:
        self.errors = validate(self.session.document, self.schema)
        return self.errors

    async def save(self) -> list[ValidationIssue]:
        """Validate, then save immediately.

        Returns the validation issues (nothing is sent if there are any).

        Raises:
            PersistenceError: If the adapter fails; edits stay dirty.
        """
        issues = self.validate()
        if issues:
            return issues
        await self.policy.pause()
        try:
            sent = self.session.document.model_copy(deep=True)
            await self._call(self.adapter.save(sent, SaveMode.MANUAL))
            if self.session.document.id == sent.id:
                self.session.mark_saved(sent)
        finally:
            self.policy.resume()
        return []

    async def publish(self) -> list[ValidationIssue]:
        """Validate, save and publish.

        Status flips to published only after both backend calls succeed.
        Any failure leaves status and content as they were.

        Raises:
            PersistenceError: If saving or publishing fails.
        """
        issues = self.validate()
        if issues:
            logger.info("Publish of %s blocked by %d issue(s)", self.document.id, len(issues))
            return issues
        await self.policy.pause()
        try:
            sent = self.session.document.model_copy(deep=True)
            await self._call(self.adapter.save(sent, SaveMode.MANUAL))
            await self._call(self.adapter.publish(sent.id))
            if self.session.document.id != sent.id:
                logger.info("Published %s after the editor moved on", sent.id)
                return []
            published = sent.model_copy(update={"status": DocumentStatus.PUBLISHED})
            self.session.apply({"status": DocumentStatus.PUBLISHED})
            self.session.mark_saved(published)
        finally:
            self.policy.resume()
        logger.info("Published %s", sent.id)
        return []

    async def delete_item(self, list_name: str, item_id: str) -> None:
        """Delete a list entry on the server, then locally.

        The entry is flagged ``pending_delete`` while the request runs so
        validation ignores it.

        Raises:
            PersistenceError: If the server refuses; the flag is reverted.
        """
        items = self.session.document.lists.get(list_name, [])
        if not any(item.id == item_id for item in items):
            return
        self.session.apply({"lists": {list_name: {item_id: {"pending_delete": True}}}})
        ref = CollectionRef(document_id=self.document.id, list_name=list_name)
        try:
            await self._call(self.adapter.delete_item(ref, item_id))
        except PersistenceError:
            self.session.apply({"lists": {list_name: {item_id: {"pending_delete": False}}}})
            raise
        self.session.remove_list_item(list_name, item_id)

    def dispose(self) -> None:
        """Release the autosave timer and the unload guard."""
        self.policy.dispose()

    def props(self) -> EditorProps:
        return EditorProps(
            document=self.session.document,
            schema=self.schema,
            ui=self.ui,
            dirty=self.session.dirty,
            errors=list(self.errors),
            banner=self.banner,
            on_patch=self.session.apply,
            on_add_block=self.session.add_block,
            on_remove_block=self.session.remove_block,
            on_save=self.save,
            on_publish=self.publish,
        )

    async def _call(self, awaitable: Awaitable[Any]) -> Any:
        try:
            result = await awaitable
        except PersistenceError as exc:
            self.persistence_error = exc
            logger.warning("Persistence call for %s failed: %s", self.document.id, exc)
            raise
        self.persistence_error = None
        return result

"""Shared fixtures: a manual clock for autosave timers and an in-memory adapter."""

from __future__ import annotations

import asyncio

import pytest
from pagecraft.content.models import ContentDocument, DocumentStatus, ListItem, LocalizedValue
from pagecraft.content.schemas import PRODUCT
from pagecraft.errors import PersistenceError
from pagecraft.persistence.base import (
    CollectionRef,
    PersistenceAdapter,
    SavedDocument,
    SaveMode,
)


class _Timer:
    def __init__(self, when: float, callback, args) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Stand-in for the event loop's call_later/time, advanced by hand."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[_Timer] = []

    def time(self) -> float:
        return self.now

    def call_later(self, delay, callback, *args) -> _Timer:
        timer = _Timer(self.now + delay, callback, args)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> list[_Timer]:
        return [t for t in self._timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.pending if t.when <= target + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.now = max(self.now, timer.when)
            timer.fired = True
            timer.callback(*timer.args)
        self.now = target


class FakeAdapter(PersistenceAdapter):
    """Records every call; failures and slow saves are switchable."""

    def __init__(self, clock: ManualScheduler | None = None) -> None:
        self.clock = clock
        self.documents: dict[str, ContentDocument] = {}
        self.saves: list[tuple[ContentDocument, SaveMode, float]] = []
        self.published: list[str] = []
        self.deleted: list[tuple[CollectionRef, str]] = []
        self.fail_save = False
        self.fail_publish = False
        self.fail_delete = False
        self.hold: asyncio.Event | None = None

    async def fetch(self, document_id: str) -> ContentDocument:
        if document_id not in self.documents:
            raise PersistenceError(f"{document_id} not found", status=404)
        return self.documents[document_id].model_copy(deep=True)

    async def save(self, document: ContentDocument, mode: SaveMode) -> SavedDocument:
        when = self.clock.now if self.clock else 0.0
        if self.hold is not None:
            await self.hold.wait()
        if self.fail_save:
            raise PersistenceError("save rejected", status=500)
        self.saves.append((document.model_copy(deep=True), mode, when))
        self.documents[document.id] = document.model_copy(deep=True)
        return SavedDocument(document=document, mode=mode)

    async def publish(self, document_id: str) -> None:
        if self.fail_publish:
            raise PersistenceError("publish rejected", status=502)
        self.published.append(document_id)
        stored = self.documents.get(document_id)
        if stored is not None:
            stored.status = DocumentStatus.PUBLISHED

    async def delete_item(self, collection: CollectionRef, item_id: str) -> None:
        if self.fail_delete:
            raise PersistenceError("delete rejected", status=500)
        self.deleted.append((collection, item_id))


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def adapter(scheduler: ManualScheduler) -> FakeAdapter:
    return FakeAdapter(scheduler)


@pytest.fixture
def product_doc() -> ContentDocument:
    """A product document that passes validation."""
    doc = PRODUCT.new_document("fence")
    doc.fields["name"].value.mn = "Хашаа барьцаалсан зээл"
    doc.fields["name"].value.en = "Fence Collateral Loan"
    doc.lists["materials"] = []
    doc.lists["materials"].append(
        ListItem(id="m1", value=LocalizedValue(mn="Үнэлгээний акт", en="Valuation report"))
    )
    return doc

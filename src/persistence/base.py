"""Persistence boundary the editor depends on.

Contract for adapter authors
----------------------------
``save`` and ``publish`` must be idempotent from the caller's point of
view: sending the same payload twice must not create duplicates or fire
side effects twice on the server.  Autosave and a manual save can race,
so the editor may legitimately send the same document back to back.  The
editor assumes this guarantee and does not enforce it.

Every failure must surface as :class:`pagecraft.errors.PersistenceError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from pagecraft.content.models import ContentDocument


class SaveMode(StrEnum):
    """Why a save happened."""

    AUTO = "auto"
    MANUAL = "manual"


class CollectionRef(BaseModel):
    """Addresses one list of a document for item deletion."""

    document_id: str
    list_name: str


class SavedDocument(BaseModel):
    """What the backend confirmed for a save call."""

    document: ContentDocument
    mode: SaveMode
    saved_at: datetime = Field(default_factory=lambda: datetime.now(tz=UTC))


class PersistenceAdapter(ABC):
    """Async storage backend for content documents."""

    @abstractmethod
    async def fetch(self, document_id: str) -> ContentDocument:
        """Load a document.  Raises PersistenceError when it cannot."""

    @abstractmethod
    async def save(self, document: ContentDocument, mode: SaveMode) -> SavedDocument:
        """Store the full document (replace semantics)."""

    @abstractmethod
    async def publish(self, document_id: str) -> None:
        """Mark the stored document as published."""

    @abstractmethod
    async def delete_item(self, collection: CollectionRef, item_id: str) -> None:
        """Delete one list entry on the server."""

"""JSON-backed document store usable as a PersistenceAdapter.

Persists every ContentDocument in a single JSON file, loaded on init and
written after every mutation.  Used for local drafts and by the CLI.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field

from pagecraft.content.models import ContentDocument, DocumentStatus
from pagecraft.errors import PersistenceError
from pagecraft.persistence.base import (
    CollectionRef,
    PersistenceAdapter,
    SaveMode,
    SavedDocument,
)

logger = logging.getLogger(__name__)

STORE_FILENAME = ".pagecraft-documents.json"

# Alias to avoid shadowing by JsonFileAdapter.list method
_list = list


class _StoreData(BaseModel):
    """Internal wrapper for JSON serialization."""

    documents: list[ContentDocument] = Field(default_factory=list)


class JsonFileAdapter(PersistenceAdapter):
    """Single-file JSON store for content documents."""

    def __init__(self, directory: Path) -> None:
        self._path = directory / STORE_FILENAME
        self._data = self._load()

    @property
    def path(self) -> Path:
        return self._path

    # ── Private helpers ──────────────────────────────────────────

    def _load(self) -> _StoreData:
        if not self._path.exists():
            return _StoreData()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return _StoreData.model_validate(raw)
        except (json.JSONDecodeError, ValueError, KeyError):
            logger.warning("Corrupt document store at %s, starting fresh", self._path)
            return _StoreData()

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(self._data.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot write {self._path}: {exc}") from exc

    def _find(self, document_id: str) -> ContentDocument | None:
        for document in self._data.documents:
            if document.id == document_id:
                return document
        return None

    def _require(self, document_id: str) -> ContentDocument:
        document = self._find(document_id)
        if document is None:
            raise PersistenceError(f"Document {document_id} not found", status=404)
        return document

    # ── Synchronous access ───────────────────────────────────────

    def get(self, document_id: str) -> ContentDocument | None:
        """Return a copy of a stored document, or None."""
        document = self._find(document_id)
        return document.model_copy(deep=True) if document is not None else None

    def upsert(self, document: ContentDocument) -> None:
        """Insert or replace a document by id."""
        self._data.documents = [d for d in self._data.documents if d.id != document.id]
        self._data.documents.append(document.model_copy(deep=True))
        self._save()

    def list(
        self,
        schema_name: str | None = None,
        status: DocumentStatus | None = None,
    ) -> _list[ContentDocument]:
        """Return documents, optionally filtered by schema and/or status."""
        results = self._data.documents
        if schema_name is not None:
            results = [d for d in results if d.schema_name == schema_name]
        if status is not None:
            results = [d for d in results if d.status == status]
        return _list(results)

    def exists(self, document_id: str) -> bool:
        return self._find(document_id) is not None

    # ── PersistenceAdapter ───────────────────────────────────────

    async def fetch(self, document_id: str) -> ContentDocument:
        return self._require(document_id).model_copy(deep=True)

    async def save(self, document: ContentDocument, mode: SaveMode) -> SavedDocument:
        self.upsert(document)
        logger.debug("Stored %s (%s save)", document.id, mode.value)
        return SavedDocument(document=document, mode=mode)

    async def publish(self, document_id: str) -> None:
        document = self._require(document_id)
        document.status = DocumentStatus.PUBLISHED
        self._save()

    async def delete_item(self, collection: CollectionRef, item_id: str) -> None:
        document = self._require(collection.document_id)
        items = document.lists.get(collection.list_name, [])
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return
        document.lists[collection.list_name] = remaining
        self._save()

"""REST backend: a blocking JSON client and the async adapter over it.

Endpoints per resource::

    GET    /{resource}/{id}/            fetch
    PUT    /{resource}/{id}/            save (full replace, body carries "mode")
    POST   /{resource}/{id}/publish/    publish
    DELETE /{item_resource}/{item_id}/  delete a list entry

Blocking calls run in a worker thread so the editor's event loop keeps
serving edits while a request is in flight.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.request
from typing import Any

from pagecraft.config import ApiSection
from pagecraft.content.models import ContentDocument
from pagecraft.content.schemas import DocumentSchema
from pagecraft.errors import PersistenceError
from pagecraft.persistence.base import (
    CollectionRef,
    PersistenceAdapter,
    SaveMode,
    SavedDocument,
)
from pagecraft.persistence.mappers import LocalizationMapper, create_mapper

logger = logging.getLogger(__name__)


class RestClient:
    """Minimal JSON client for the admin API.

    Every failure (HTTP status >= 400, network error, undecodable body)
    is raised as PersistenceError.
    """

    def __init__(self, config: ApiSection) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")

    def _request(self, method: str, path: str, data: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        body = json.dumps(data).encode("utf-8") if data is not None else None
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        req = urllib.request.Request(url, data=body, method=method, headers=headers)

        logger.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            raise PersistenceError(f"{method} {path} failed: {exc.reason}", status=exc.code) from exc
        except (urllib.error.URLError, TimeoutError, OSError) as exc:
            raise PersistenceError(f"{method} {path} failed: {exc}") from exc

        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"{method} {path} returned invalid JSON") from exc

    def get(self, path: str) -> Any:
        return self._request("GET", path)

    def post(self, path: str, data: dict[str, Any]) -> Any:
        return self._request("POST", path, data)

    def put(self, path: str, data: dict[str, Any]) -> Any:
        return self._request("PUT", path, data)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)


class RestAdapter(PersistenceAdapter):
    """PersistenceAdapter for one resource of the admin REST API."""

    def __init__(
        self,
        client: RestClient,
        schema: DocumentSchema,
        mapper: LocalizationMapper | None = None,
    ) -> None:
        self.client = client
        self.schema = schema
        self.mapper = mapper or create_mapper(schema)

    @classmethod
    def from_config(cls, config: ApiSection, schema: DocumentSchema) -> RestAdapter:
        return cls(RestClient(config), schema)

    def _document_path(self, document_id: str) -> str:
        return f"/{self.schema.resource}/{document_id}/"

    async def fetch(self, document_id: str) -> ContentDocument:
        payload = await asyncio.to_thread(self.client.get, self._document_path(document_id))
        # Singleton resources sometimes answer with a one-element list.
        if isinstance(payload, list):
            payload = payload[0] if payload else None
        if not isinstance(payload, dict):
            raise PersistenceError(f"{self.schema.resource} {document_id} not found", status=404)
        return self.mapper.from_payload(payload)

    async def save(self, document: ContentDocument, mode: SaveMode) -> SavedDocument:
        payload = self.mapper.to_payload(document)
        payload["mode"] = mode.value
        await asyncio.to_thread(self.client.put, self._document_path(document.id), payload)
        logger.info("Saved %s %s (%s)", self.schema.resource, document.id, mode.value)
        return SavedDocument(document=document, mode=mode)

    async def publish(self, document_id: str) -> None:
        path = f"{self._document_path(document_id)}publish/"
        await asyncio.to_thread(self.client.post, path, {"id": document_id})
        logger.info("Published %s %s", self.schema.resource, document_id)

    async def delete_item(self, collection: CollectionRef, item_id: str) -> None:
        if self.schema.item_resource:
            base = self.schema.item_resource
        else:
            list_key = self.schema.wire_name(collection.list_name)
            base = f"{self.schema.resource}/{collection.document_id}/{list_key}"
        await asyncio.to_thread(self.client.delete, f"/{base}/{item_id}/")

"""Wire mappers between ContentDocument and the backend's flat JSON.

Resources disagree on how a bilingual value travels:

* footer-style resources use suffixed keys: ``description_mn`` /
  ``description_en`` (``FlatSuffixMapper``);
* app-download-style resources use translation rows:
  ``{"translations": [{"language_id": 1, "label": "..."}]}``
  (``TranslationsMapper``);
* governance-style resources nest the pair: ``{"name": {"mn": ..., "en": ...}}``
  (``NestedMapper``).

All share the same document layout; only the encoding of a localized
pair differs, so each mapper implements two hooks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from pagecraft.content.models import (
    BlockKind,
    ContentBlock,
    ContentDocument,
    DocumentStatus,
    ListItem,
    LocalizedValue,
    Locale,
    StyleToken,
    new_id,
)
from pagecraft.content.schemas import DocumentSchema, MappingStyle
from pagecraft.errors import PersistenceError


def _dump_style(style: StyleToken) -> dict[str, Any]:
    return style.model_dump(mode="json", by_alias=True, exclude_none=True)


class LocalizationMapper(ABC):
    """Converts documents of one schema to and from wire payloads."""

    block_prefix: str | None = None

    def __init__(self, schema: DocumentSchema) -> None:
        self.schema = schema

    @abstractmethod
    def dump_localized(
        self, prefix: str | None, value: LocalizedValue, meta: dict[str, Any]
    ) -> dict[str, Any]:
        """Encode ``value`` as the keys to merge into the enclosing object."""

    @abstractmethod
    def load_localized(
        self, raw: dict[str, Any], prefix: str | None
    ) -> tuple[LocalizedValue, dict[str, Any], set[str]]:
        """Decode a localized pair from ``raw``.

        Returns the value, mapper metadata worth keeping for the next
        write, and the keys of ``raw`` that were consumed.
        """

    # ── Document → payload ───────────────────────────────────────

    def to_payload(self, document: ContentDocument) -> dict[str, Any]:
        payload: dict[str, Any] = dict(document.attributes)
        payload["id"] = document.id
        payload["status"] = document.status.value

        for name, field in document.fields.items():
            key = self.schema.wire_name(name)
            payload.update(self.dump_localized(key, field.value, {}))
            if field.style is not None:
                payload[f"{key}_style"] = _dump_style(field.style)

        if document.blocks or self.schema.placements:
            payload["blocks"] = [self._dump_block(block) for block in document.blocks]

        for name, items in document.lists.items():
            payload[self.schema.wire_name(name)] = [
                self._dump_item(name, item) for item in items if not item.pending_delete
            ]
        return payload

    def _dump_block(self, block: ContentBlock) -> dict[str, Any]:
        raw: dict[str, Any] = {
            "id": block.id,
            "type": block.kind.value,
            "style": _dump_style(block.style),
            "placement": block.placement,
            "order": block.order,
            "visible": block.visible,
        }
        raw.update(self.dump_localized(self.block_prefix, block.text, {}))
        return raw

    def _dump_item(self, list_name: str, item: ListItem) -> dict[str, Any]:
        extra = dict(item.extra)
        meta = extra.pop("translation_ids", {})
        raw = {**extra, "id": item.id, **self._visibility(item.visible)}
        raw.update(self.dump_localized(self.item_prefix(list_name), item.value, meta))
        return raw

    def _visibility(self, visible: bool) -> dict[str, Any]:
        return {"visible": visible}

    def item_prefix(self, list_name: str) -> str | None:
        return self.schema.list_labels.get(list_name)

    # ── Payload → document ───────────────────────────────────────

    def from_payload(self, payload: dict[str, Any]) -> ContentDocument:
        """Build a document; fields missing from the payload keep defaults.

        Raises:
            PersistenceError: If the payload cannot be decoded.
        """
        if "id" not in payload:
            raise PersistenceError(f"{self.schema.resource} payload has no id")
        try:
            return self._from_payload(payload)
        except (ValidationError, KeyError, ValueError, TypeError, AttributeError) as exc:
            raise PersistenceError(
                f"Malformed {self.schema.resource} payload: {exc}"
            ) from exc

    def _from_payload(self, payload: dict[str, Any]) -> ContentDocument:
        document = self.schema.new_document(str(payload["id"]))
        document.status = DocumentStatus(payload.get("status") or DocumentStatus.DRAFT)
        consumed = {"id", "status"}

        for name in self.schema.fields:
            key = self.schema.wire_name(name)
            value, _meta, keys = self.load_localized(payload, key)
            if not keys:
                continue
            consumed |= keys
            field = document.fields[name]
            field.value = value
            style_key = f"{key}_style"
            if style_key in payload:
                consumed.add(style_key)
                if payload[style_key] is not None:
                    field.style = StyleToken.model_validate(payload[style_key])

        if "blocks" in payload:
            consumed.add("blocks")
            document.blocks = [self._load_block(raw) for raw in payload["blocks"] or []]

        for name in self.schema.lists:
            key = self.schema.wire_name(name)
            if key not in payload:
                continue
            consumed.add(key)
            document.lists[name] = [self._load_item(name, raw) for raw in payload[key] or []]

        document.attributes.update(
            {key: value for key, value in payload.items() if key not in consumed}
        )
        return document

    def _load_block(self, raw: dict[str, Any]) -> ContentBlock:
        text, _meta, _keys = self.load_localized(raw, self.block_prefix)
        return ContentBlock(
            id=str(raw.get("id") or new_id()),
            kind=BlockKind(raw.get("type", BlockKind.PARAGRAPH)),
            text=text,
            style=StyleToken.model_validate(raw.get("style") or {}),
            placement=raw["placement"],
            order=int(raw.get("order", 1)),
            visible=bool(raw.get("visible", True)),
        )

    def _load_item(self, list_name: str, raw: dict[str, Any]) -> ListItem:
        value, meta, keys = self.load_localized(raw, self.item_prefix(list_name))
        visible, visibility_keys = self._load_visibility(raw)
        extra = {
            key: val
            for key, val in raw.items()
            if key not in keys and key not in visibility_keys and key != "id"
        }
        if meta:
            extra["translation_ids"] = meta
        return ListItem(
            id=str(raw.get("id") or new_id()),
            value=value,
            visible=visible,
            extra=extra,
        )

    def _load_visibility(self, raw: dict[str, Any]) -> tuple[bool, set[str]]:
        return bool(raw.get("visible", True)), {"visible"}


class FlatSuffixMapper(LocalizationMapper):
    """``{prefix}_mn`` / ``{prefix}_en`` keys; bare ``mn`` / ``en`` without a prefix."""

    block_prefix = "content"

    @staticmethod
    def _keys(prefix: str | None) -> dict[Locale, str]:
        if prefix:
            return {locale: f"{prefix}_{locale.value}" for locale in Locale}
        return {locale: locale.value for locale in Locale}

    def dump_localized(
        self, prefix: str | None, value: LocalizedValue, meta: dict[str, Any]
    ) -> dict[str, Any]:
        return {key: value.get(locale) for locale, key in self._keys(prefix).items()}

    def load_localized(
        self, raw: dict[str, Any], prefix: str | None
    ) -> tuple[LocalizedValue, dict[str, Any], set[str]]:
        keys = self._keys(prefix)
        present = {key for key in keys.values() if key in raw}
        value = LocalizedValue(
            mn=raw.get(keys[Locale.MN]) or "",
            en=raw.get(keys[Locale.EN]) or "",
        )
        return value, {}, present


class TranslationsMapper(LocalizationMapper):
    """Translation rows keyed by numeric language id (en=1, mn=2 by default)."""

    block_prefix = None

    def __init__(
        self,
        schema: DocumentSchema,
        language_ids: dict[Locale, int] | None = None,
    ) -> None:
        super().__init__(schema)
        self.language_ids = language_ids or {Locale.EN: 1, Locale.MN: 2}
        self._locales = {lang_id: locale for locale, lang_id in self.language_ids.items()}

    def item_prefix(self, list_name: str) -> str | None:
        return None

    def _visibility(self, visible: bool) -> dict[str, Any]:
        return {"active": visible}

    def _load_visibility(self, raw: dict[str, Any]) -> tuple[bool, set[str]]:
        return bool(raw.get("active", True)), {"active"}

    def _rows(self, value: LocalizedValue, meta: dict[str, Any]) -> list[dict[str, Any]]:
        rows = []
        for locale in (Locale.EN, Locale.MN):
            row: dict[str, Any] = {"language_id": self.language_ids[locale], "label": value.get(locale)}
            if locale.value in meta:
                row["id"] = meta[locale.value]
            rows.append(row)
        return rows

    def dump_localized(
        self, prefix: str | None, value: LocalizedValue, meta: dict[str, Any]
    ) -> dict[str, Any]:
        rows = self._rows(value, meta)
        if prefix is None:
            return {"translations": rows}
        return {prefix: {"translations": rows}}

    def load_localized(
        self, raw: dict[str, Any], prefix: str | None
    ) -> tuple[LocalizedValue, dict[str, Any], set[str]]:
        if prefix is None:
            container, consumed = raw, {"translations"}
        else:
            container, consumed = raw.get(prefix), {prefix}
        if not isinstance(container, dict) or "translations" not in container:
            return LocalizedValue(), {}, set()

        labels: dict[str, str] = {}
        meta: dict[str, Any] = {}
        for row in container["translations"] or []:
            locale = self._locales.get(row.get("language_id"))
            if locale is None:
                continue
            labels[locale.value] = row.get("label") or ""
            if row.get("id") is not None:
                meta[locale.value] = row["id"]
        return LocalizedValue(**labels), meta, consumed


class NestedMapper(LocalizationMapper):
    """``{prefix: {"mn": ..., "en": ...}}`` objects; bare ``mn`` / ``en`` without a prefix."""

    block_prefix = "content"

    def dump_localized(
        self, prefix: str | None, value: LocalizedValue, meta: dict[str, Any]
    ) -> dict[str, Any]:
        pair = {locale.value: value.get(locale) for locale in Locale}
        if prefix is None:
            return pair
        return {prefix: pair}

    def load_localized(
        self, raw: dict[str, Any], prefix: str | None
    ) -> tuple[LocalizedValue, dict[str, Any], set[str]]:
        if prefix is None:
            container = raw
            consumed = {locale.value for locale in Locale if locale.value in raw}
        else:
            container = raw.get(prefix)
            if not isinstance(container, dict):
                return LocalizedValue(), {}, set()
            consumed = {prefix}
        value = LocalizedValue(
            mn=container.get(Locale.MN.value) or "",
            en=container.get(Locale.EN.value) or "",
        )
        return value, {}, consumed


def create_mapper(schema: DocumentSchema, style: MappingStyle | str | None = None) -> LocalizationMapper:
    """Return the mapper for ``schema`` (or an explicitly requested style).

    Raises:
        ValueError: If the style is unknown.
    """
    style = MappingStyle(style or schema.mapping)
    mappers: dict[MappingStyle, type[LocalizationMapper]] = {
        MappingStyle.FLAT: FlatSuffixMapper,
        MappingStyle.TRANSLATIONS: TranslationsMapper,
        MappingStyle.NESTED: NestedMapper,
    }
    return mappers[style](schema)

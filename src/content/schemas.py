"""Document schemas: what each editor screen's document may contain.

A schema names the placements blocks may use, the localized fields and
lists, which of them are required, and how the document travels over the
wire.  One EditSession/AutosavePolicy implementation serves every screen;
the schema is the only per-resource input.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from pagecraft.content.localize import preset_style
from pagecraft.content.models import (
    ContentDocument,
    ListItem,
    LocalizedField,
    LocalizedValue,
    new_id,
)
from pagecraft.errors import SchemaNotFound


class MappingStyle(StrEnum):
    """Wire shape used for localized values of a resource."""

    FLAT = "flat"  # {field}_mn / {field}_en
    TRANSLATIONS = "translations"  # translations: [{language_id, label}]
    NESTED = "nested"  # {field: {mn, en}}


class DocumentSchema(BaseModel):
    """Declared structure of one document type."""

    name: str
    resource: str
    item_resource: str = ""
    placements: list[str] = Field(default_factory=list)
    fields: list[str] = Field(default_factory=list)
    required_fields: list[str] = Field(default_factory=list)
    styled_fields: dict[str, str] = Field(default_factory=dict)  # field -> preset
    lists: list[str] = Field(default_factory=list)
    required_nonempty: list[str] = Field(default_factory=list)  # placements or lists
    mapping: MappingStyle = MappingStyle.FLAT
    list_labels: dict[str, str] = Field(default_factory=dict)
    wire_names: dict[str, str] = Field(default_factory=dict)
    font_size_min: float = 8
    font_size_max: float = 72
    default_fields: dict[str, LocalizedValue] = Field(default_factory=dict)
    default_lists: dict[str, list[LocalizedValue]] = Field(default_factory=dict)
    default_attributes: dict[str, Any] = Field(default_factory=dict)

    def wire_name(self, name: str) -> str:
        return self.wire_names.get(name, name)

    def clamp_font_size(self, value: float) -> float:
        """Clamp a font size typed into the editor to the declared bounds."""
        return min(max(value, self.font_size_min), self.font_size_max)

    def new_document(self, document_id: str | None = None) -> ContentDocument:
        """Build a draft document filled with this schema's defaults."""
        fields: dict[str, LocalizedField] = {}
        for name in self.fields:
            preset = self.styled_fields.get(name)
            fields[name] = LocalizedField(
                value=self.default_fields.get(name, LocalizedValue()).model_copy(),
                style=preset_style(preset) if preset else None,
            )
        lists = {
            name: [
                ListItem(value=value.model_copy())
                for value in self.default_lists.get(name, [])
            ]
            for name in self.lists
        }
        return ContentDocument(
            id=document_id or new_id(),
            schema_name=self.name,
            fields=fields,
            lists=lists,
            attributes=dict(self.default_attributes),
        )


# ── Built-in schemas ──────────────────────────────────────────────────

PRODUCT = DocumentSchema(
    name="product",
    resource="products",
    placements=["hero", "details", "footer"],
    fields=[
        "name",
        "category",
        "description",
        "details_title",
        "details_subtitle",
        "materials_title",
        "collateral_title",
        "conditions_title",
    ],
    required_fields=["name"],
    styled_fields={
        "name": "heroTitle",
        "category": "note",
        "description": "paragraph",
        "details_title": "sectionTitle",
        "details_subtitle": "paragraph",
        "materials_title": "sectionTitle",
        "collateral_title": "sectionTitle",
        "conditions_title": "sectionTitle",
    },
    lists=["materials", "collateral", "conditions"],
    required_nonempty=["materials"],
    default_fields={
        "materials_title": LocalizedValue(mn="Шаардагдах материал", en="Required Documents"),
        "collateral_title": LocalizedValue(mn="Барьцаа", en="Collateral"),
        "conditions_title": LocalizedValue(mn="Нөхцөл", en="Conditions"),
    },
)

FOOTER = DocumentSchema(
    name="footer",
    resource="footer",
    fields=["description", "address", "copyright"],
    required_fields=["description"],
    lists=["quick_links"],
    list_labels={"quick_links": "name"},
    default_fields={
        "address": LocalizedValue(mn="Улаанбаатар хот", en="Ulaanbaatar City"),
        "copyright": LocalizedValue(
            mn="Бүх эрх хуулиар хамгаалагдсан.", en="All rights reserved."
        ),
    },
    default_lists={
        "quick_links": [
            LocalizedValue(mn="Бидний тухай", en="About Us"),
            LocalizedValue(mn="Бүтээгдэхүүн", en="Products"),
            LocalizedValue(mn="Мэдээ", en="News"),
        ],
    },
    default_attributes={
        "email": "",
        "phone": "",
        "bgColor": "#ffffff",
        "textColor": "#4b5563",
        "accentColor": "#14b8a6",
        "iconColor": "#14b8a6",
    },
)

APP_DOWNLOAD = DocumentSchema(
    name="app_download",
    resource="app-download",
    item_resource="app-download-list",
    lists=["titles", "features"],
    required_nonempty=["titles"],
    wire_names={"features": "lists"},
    mapping=MappingStyle.TRANSLATIONS,
    default_attributes={
        "appstore": "",
        "playstore": "",
        "titlecolor": "#0f172a",
        "buttonStyle": "solid",
        "deviceFrame": "none",
    },
)

ABOUT_INTRO = DocumentSchema(
    name="about_intro",
    resource="about/intro",
    placements=["origin", "what_we_do", "sme", "citizen", "timeline"],
    fields=["title", "content"],
    required_fields=["title"],
    styled_fields={"title": "sectionTitle", "content": "paragraph"},
    required_nonempty=["timeline"],
)

ABOUT_VALUES = DocumentSchema(
    name="about_values",
    resource="about/values",
    lists=["values"],
    list_labels={"values": "title"},
    required_nonempty=["values"],
    default_lists={
        "values": [
            LocalizedValue(mn="Алсын хараа", en="Vision"),
            LocalizedValue(mn="Эрхэм зорилго", en="Mission"),
            LocalizedValue(mn="Эрсдэлгүй ирээдүй", en="Risk-free Future"),
            LocalizedValue(mn="Хамтын өгөөж", en="Mutual Benefits"),
            LocalizedValue(mn="Нэгдмэл зорилго", en="Unified Purpose"),
            LocalizedValue(mn="Ёс зүй, итгэл", en="Ethics & Trust"),
            LocalizedValue(mn="Харилцагчийн хөгжил", en="Customer Development"),
        ],
    },
)

# People carry {mn, en} objects; role, position and the branch address
# fields ride along in each item's extra data.
ABOUT_GOVERNANCE = DocumentSchema(
    name="about_governance",
    resource="about/governance",
    lists=["people"],
    list_labels={"people": "name"},
    required_nonempty=["people"],
    wire_names={"people": "governance"},
    mapping=MappingStyle.NESTED,
)

_REGISTRY: dict[str, DocumentSchema] = {
    schema.name: schema
    for schema in (PRODUCT, FOOTER, APP_DOWNLOAD, ABOUT_INTRO, ABOUT_VALUES, ABOUT_GOVERNANCE)
}


def get_schema(name: str) -> DocumentSchema:
    """Look up a registered schema.

    Raises:
        SchemaNotFound: If no schema has this name.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        raise SchemaNotFound(name) from None


def register_schema(schema: DocumentSchema) -> None:
    """Add or replace a schema in the registry."""
    _REGISTRY[schema.name] = schema


def schema_names() -> list[str]:
    return sorted(_REGISTRY)

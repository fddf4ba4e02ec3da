"""Content domain: bilingual document models, schemas and rendering.

This package holds the data model every editor screen shares: localized
values, style tokens, ordered blocks and lists, and the ContentDocument
aggregate, plus the locale resolution used by the public site.
"""

from pagecraft.content.localize import resolve, resolve_field
from pagecraft.content.models import (
    Align,
    BlockKind,
    ContentBlock,
    ContentDocument,
    DocumentStatus,
    FontSize,
    FontWeight,
    ListItem,
    LocalizedField,
    LocalizedValue,
    Locale,
    StyleToken,
)
from pagecraft.content.render import RenderedPage, render_document
from pagecraft.content.schemas import DocumentSchema, MappingStyle, get_schema

__all__ = [
    "Align",
    "BlockKind",
    "ContentBlock",
    "ContentDocument",
    "DocumentSchema",
    "DocumentStatus",
    "FontSize",
    "FontWeight",
    "ListItem",
    "Locale",
    "LocalizedField",
    "LocalizedValue",
    "MappingStyle",
    "RenderedPage",
    "StyleToken",
    "get_schema",
    "render_document",
    "resolve",
    "resolve_field",
]

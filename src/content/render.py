"""Public-site projection of a content document.

The public site never sees drafts' structure directly; it receives a
RenderedPage with every localized value resolved for one locale, hidden
content dropped, and blocks ordered within their placement.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from pagecraft.content.localize import resolve, resolve_field
from pagecraft.content.models import BlockKind, ContentDocument, Locale, StyleToken


class RenderedBlock(BaseModel):
    id: str
    kind: BlockKind
    text: str
    style: StyleToken


class RenderedPage(BaseModel):
    """Everything a page template needs for one locale."""

    document_id: str
    locale: Locale
    fields: dict[str, str] = Field(default_factory=dict)
    styles: dict[str, StyleToken] = Field(default_factory=dict)
    placements: dict[str, list[RenderedBlock]] = Field(default_factory=dict)
    lists: dict[str, list[str]] = Field(default_factory=dict)
    attributes: dict[str, Any] = Field(default_factory=dict)


def render_document(document: ContentDocument, locale: Locale | str) -> RenderedPage:
    """Resolve ``document`` for ``locale``.

    Invisible blocks, fields with a hidden style, invisible list entries and
    entries pending deletion are left out.  The underlying text is untouched.
    """
    locale = Locale(locale)
    page = RenderedPage(
        document_id=document.id,
        locale=locale,
        attributes=dict(document.attributes),
    )

    for name, field in document.fields.items():
        text = resolve_field(field, locale)
        if not text:
            continue
        page.fields[name] = text
        if field.style is not None:
            page.styles[name] = field.style

    placements = dict.fromkeys(b.placement for b in document.blocks)
    for placement in placements:
        rendered = [
            RenderedBlock(
                id=block.id,
                kind=block.kind,
                text=resolve(block.text, locale),
                style=block.style,
            )
            for block in document.blocks_in(placement)
            if block.visible and block.style.visible
        ]
        page.placements[placement] = [b for b in rendered if b.text]

    for name in document.lists:
        texts = [
            resolve(item.value, locale)
            for item in document.live_items(name)
            if item.visible
        ]
        page.lists[name] = [t for t in texts if t]

    return page

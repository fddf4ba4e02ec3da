"""Content domain models: pure Pydantic v2 data types.

A ContentDocument is the full editable aggregate for one page or page
section (product page, footer, app download banner, ...).  It holds
bilingual scalar fields, ordered style-carrying blocks grouped by
placement, and bilingual lists.  Documents move between two lifecycle
states, draft and published; publishing overwrites in place.
"""

from __future__ import annotations

import re
import uuid
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def new_id() -> str:
    """Return a fresh opaque identifier for blocks and list items."""
    return uuid.uuid4().hex


class Locale(StrEnum):
    """The two supported site languages."""

    MN = "mn"
    EN = "en"

    @property
    def other(self) -> Locale:
        return Locale.EN if self is Locale.MN else Locale.MN


class DocumentStatus(StrEnum):
    """Lifecycle status of a content document."""

    DRAFT = "draft"
    PUBLISHED = "published"


class BlockKind(StrEnum):
    TITLE = "title"
    SUBTITLE = "subtitle"
    PARAGRAPH = "paragraph"
    NOTE = "note"
    LIST_ITEM = "listItem"


class FontWeight(StrEnum):
    NORMAL = "normal"
    MEDIUM = "medium"
    SEMIBOLD = "semibold"
    BOLD = "bold"
    EXTRABOLD = "extrabold"


class Align(StrEnum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class LocalizedValue(BaseModel):
    """A text value paired across both locales."""

    mn: str = ""
    en: str = ""

    def get(self, locale: Locale | str) -> str:
        return self.mn if Locale(locale) is Locale.MN else self.en

    @property
    def is_empty(self) -> bool:
        """True when neither locale has non-blank text."""
        return not self.mn.strip() and not self.en.strip()

    @property
    def is_complete(self) -> bool:
        """True when both locales have non-blank text."""
        return bool(self.mn.strip() and self.en.strip())


class _WireModel(BaseModel):
    # Style objects travel as camelCase JSON (fontSize, fontWeight, ...).
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FontSize(_WireModel):
    """Font size in px per breakpoint.

    ``mobile <= desktop`` is a recommendation only; editors accept any
    number, so neither ordering nor finiteness is enforced here.
    """

    mobile: float = 14
    desktop: float = 16


class StyleToken(_WireModel):
    """Presentation attributes attachable to any text field or block."""

    color: str = "#0f172a"
    font_size: FontSize = Field(default_factory=FontSize)
    font_weight: FontWeight = FontWeight.NORMAL
    font_family: str = "font-sans"
    align: Align | None = None
    letter_spacing: float | None = None
    visible: bool = True

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        if not HEX_COLOR.match(value):
            raise ValueError(f"color must be a hex string like #14b8a6, got {value!r}")
        return value.lower()


class ContentBlock(BaseModel):
    """An orderable, independently visible unit of localized content.

    ``order`` is a sort key scoped to the block's placement.  Gaps are
    allowed and equal orders fall back to insertion order.
    """

    id: str = Field(default_factory=new_id)
    kind: BlockKind = BlockKind.PARAGRAPH
    text: LocalizedValue = Field(default_factory=LocalizedValue)
    style: StyleToken = Field(default_factory=StyleToken)
    placement: str
    order: int = 1
    visible: bool = True


class LocalizedField(BaseModel):
    """A scalar localized field with an optional style."""

    value: LocalizedValue = Field(default_factory=LocalizedValue)
    style: StyleToken | None = None


class ListItem(BaseModel):
    """One entry of a localized list (required documents, quick links, ...).

    ``pending_delete`` marks an entry the editor is about to remove; such
    entries are skipped by validation and rendering.  ``extra`` carries
    resource-specific keys (url, icon, color) through round trips.
    """

    id: str = Field(default_factory=new_id)
    value: LocalizedValue = Field(default_factory=LocalizedValue)
    visible: bool = True
    pending_delete: bool = False
    extra: dict[str, Any] = Field(default_factory=dict)


class ContentDocument(BaseModel):
    """The editable aggregate for one page or section."""

    id: str
    schema_name: str = ""
    status: DocumentStatus = DocumentStatus.DRAFT
    fields: dict[str, LocalizedField] = Field(default_factory=dict)
    blocks: list[ContentBlock] = Field(default_factory=list)
    lists: dict[str, list[ListItem]] = Field(default_factory=dict)
    attributes: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_published(self) -> bool:
        return self.status == DocumentStatus.PUBLISHED

    def find_block(self, block_id: str) -> ContentBlock | None:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def blocks_in(self, placement: str) -> list[ContentBlock]:
        """Blocks of one placement sorted by order, ties in insertion order."""
        return sorted(
            (b for b in self.blocks if b.placement == placement),
            key=lambda b: b.order,
        )

    def live_items(self, list_name: str) -> list[ListItem]:
        """List entries that are not pending deletion."""
        return [item for item in self.lists.get(list_name, []) if not item.pending_delete]

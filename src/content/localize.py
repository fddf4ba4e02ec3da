"""Locale resolution and default styles for localized content."""

from __future__ import annotations

from pagecraft.content.models import (
    Align,
    BlockKind,
    FontSize,
    FontWeight,
    LocalizedField,
    LocalizedValue,
    Locale,
    StyleToken,
)


def resolve(value: LocalizedValue, locale: Locale | str) -> str:
    """Return the text to show for ``locale``.

    Falls back to the other locale when the active one is blank, so a
    populated value never renders as an empty string.
    """
    active = Locale(locale)
    text = value.get(active)
    if text.strip():
        return text
    fallback = value.get(active.other)
    if fallback.strip():
        return fallback
    return ""


def resolve_field(field: LocalizedField | None, locale: Locale | str) -> str:
    """Resolve a styled field, returning "" when its style hides it."""
    if field is None:
        return ""
    if field.style is not None and not field.style.visible:
        return ""
    return resolve(field.value, locale)


# ── Style presets ────────────────────────────────────────────────────

STYLE_PRESETS: dict[str, StyleToken] = {
    "heroTitle": StyleToken(
        color="#1e293b",
        font_size=FontSize(mobile=24, desktop=32),
        font_weight=FontWeight.BOLD,
        align=Align.CENTER,
    ),
    "sectionTitle": StyleToken(
        color="#0f172a",
        font_size=FontSize(mobile=16, desktop=18),
        font_weight=FontWeight.SEMIBOLD,
        align=Align.LEFT,
    ),
    "paragraph": StyleToken(
        color="#334155",
        font_size=FontSize(mobile=13, desktop=14),
        font_weight=FontWeight.NORMAL,
        align=Align.LEFT,
    ),
    "note": StyleToken(
        color="#64748b",
        font_size=FontSize(mobile=11, desktop=12),
        font_weight=FontWeight.NORMAL,
        align=Align.LEFT,
    ),
}

_PRESET_FOR_KIND: dict[BlockKind, str] = {
    BlockKind.TITLE: "heroTitle",
    BlockKind.SUBTITLE: "sectionTitle",
    BlockKind.PARAGRAPH: "paragraph",
    BlockKind.NOTE: "note",
    BlockKind.LIST_ITEM: "paragraph",
}


def preset_style(name: str) -> StyleToken:
    """Return a copy of a named preset.

    Raises:
        KeyError: If the preset does not exist.
    """
    return STYLE_PRESETS[name].model_copy(deep=True)


def default_style_for(kind: BlockKind | str) -> StyleToken:
    """Default style for a newly added block of ``kind``."""
    return preset_style(_PRESET_FOR_KIND[BlockKind(kind)])

"""Validation gate run before a manual save or a publish.

``validate`` is pure and collects every issue in one pass so the editor
can show them all at once.  Rules run in a fixed order: required fields,
list localization, style numbers, required-nonempty collections.
"""

from __future__ import annotations

import math

from pagecraft.content.models import ContentDocument, StyleToken
from pagecraft.content.schemas import DocumentSchema
from pagecraft.errors import (
    EmptyRequiredCollection,
    IncompleteLocalization,
    MissingRequiredField,
    NonFiniteStyleValue,
    ValidationIssue,
)


def validate(document: ContentDocument, schema: DocumentSchema) -> list[ValidationIssue]:
    """Return every issue found in ``document``; an empty list means valid."""
    issues: list[ValidationIssue] = []
    issues.extend(_required_fields(document, schema))
    issues.extend(_list_localization(document))
    issues.extend(_style_numbers(document))
    issues.extend(_required_collections(document, schema))
    return issues


def _required_fields(document: ContentDocument, schema: DocumentSchema) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for name in schema.required_fields:
        field = document.fields.get(name)
        if field is None or field.value.is_empty:
            issues.append(MissingRequiredField(field=name))
    return issues


def _list_localization(document: ContentDocument) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for list_name, items in document.lists.items():
        for index, item in enumerate(items):
            if item.pending_delete:
                continue
            if not item.value.is_complete:
                issues.append(IncompleteLocalization(list_name=list_name, index=index))
    return issues


def _style_numbers(document: ContentDocument) -> list[ValidationIssue]:
    styles: list[tuple[str, StyleToken]] = []
    for name, field in document.fields.items():
        if field.style is not None:
            styles.append((f"fields.{name}.style", field.style))
    for block in document.blocks:
        styles.append((f"blocks.{block.id}.style", block.style))

    issues: list[ValidationIssue] = []
    for prefix, style in styles:
        numbers = {
            "font_size.mobile": style.font_size.mobile,
            "font_size.desktop": style.font_size.desktop,
        }
        if style.letter_spacing is not None:
            numbers["letter_spacing"] = style.letter_spacing
        for key, value in numbers.items():
            if not math.isfinite(value):
                issues.append(NonFiniteStyleValue(path=f"{prefix}.{key}"))
    return issues


def _required_collections(
    document: ContentDocument, schema: DocumentSchema
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for name in schema.required_nonempty:
        if name in schema.placements:
            empty = not document.blocks_in(name)
        else:
            empty = not document.live_items(name)
        if empty:
            issues.append(EmptyRequiredCollection(collection=name))
    return issues

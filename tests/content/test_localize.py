"""Tests for locale resolution and style presets."""

import pytest
from pagecraft.content.localize import (
    STYLE_PRESETS,
    default_style_for,
    preset_style,
    resolve,
    resolve_field,
)
from pagecraft.content.models import (
    BlockKind,
    Locale,
    LocalizedField,
    LocalizedValue,
    StyleToken,
)


class TestResolve:
    def test_active_locale(self):
        value = LocalizedValue(mn="Зээл", en="Loan")
        assert resolve(value, Locale.MN) == "Зээл"
        assert resolve(value, Locale.EN) == "Loan"

    def test_falls_back_to_other_locale(self):
        assert resolve(LocalizedValue(mn="Зээл"), Locale.EN) == "Зээл"
        assert resolve(LocalizedValue(en="Loan"), "mn") == "Loan"

    def test_blank_counts_as_missing(self):
        assert resolve(LocalizedValue(mn="   ", en="Loan"), Locale.MN) == "Loan"

    def test_both_empty(self):
        assert resolve(LocalizedValue(), Locale.MN) == ""


class TestResolveField:
    def test_none_field(self):
        assert resolve_field(None, Locale.EN) == ""

    def test_hidden_style(self):
        field = LocalizedField(
            value=LocalizedValue(mn="а", en="a"), style=StyleToken(visible=False)
        )
        assert resolve_field(field, Locale.EN) == ""

    def test_unstyled_field(self):
        field = LocalizedField(value=LocalizedValue(en="a"))
        assert resolve_field(field, Locale.MN) == "a"


class TestPresets:
    def test_preset_is_a_copy(self):
        style = preset_style("heroTitle")
        style.font_size.desktop = 99
        assert STYLE_PRESETS["heroTitle"].font_size.desktop == 32

    def test_unknown_preset(self):
        with pytest.raises(KeyError):
            preset_style("banner")

    @pytest.mark.parametrize(
        ("kind", "preset"),
        [
            (BlockKind.TITLE, "heroTitle"),
            (BlockKind.SUBTITLE, "sectionTitle"),
            (BlockKind.PARAGRAPH, "paragraph"),
            (BlockKind.NOTE, "note"),
            ("listItem", "paragraph"),
        ],
    )
    def test_default_style_for_kind(self, kind, preset):
        assert default_style_for(kind) == STYLE_PRESETS[preset]

"""Tests for EditSession mutations and dirty tracking."""

import logging

import pytest
from pagecraft.content.models import BlockKind, DocumentStatus
from pagecraft.content.schemas import FOOTER, PRODUCT
from pagecraft.editor.session import EditSession
from pagecraft.errors import (
    InvalidPatch,
    InvalidPath,
    InvalidPlacement,
    UnknownCollection,
)


@pytest.fixture
def session() -> EditSession:
    return EditSession(PRODUCT.new_document("fence"), PRODUCT)


class _Recorder:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, session: EditSession) -> None:
        self.calls += 1


class TestApply:
    def test_patch_makes_dirty(self, session: EditSession):
        changed = session.apply({"fields": {"name": {"value": {"en": "Fence Loan"}}}})
        assert changed is True
        assert session.dirty
        assert session.document.fields["name"].value.en == "Fence Loan"
        assert session.last_saved_snapshot.fields["name"].value.en == ""

    def test_noop_patch(self, session: EditSession):
        recorder = _Recorder()
        session.subscribe(recorder)
        assert session.apply({"fields": {"name": {"value": {"en": ""}}}}) is False
        assert not session.dirty
        assert recorder.calls == 0

    def test_manual_undo_is_clean(self, session: EditSession):
        session.apply({"fields": {"name": {"value": {"mn": "Хашаа"}}}})
        session.apply({"fields": {"name": {"value": {"mn": ""}}}})
        assert not session.dirty

    def test_style_patch(self, session: EditSession):
        session.apply({"fields": {"name": {"style": {"color": "#14B8A6"}}}})
        assert session.document.fields["name"].style.color == "#14b8a6"

    def test_invalid_value_rejected(self, session: EditSession):
        with pytest.raises(InvalidPatch):
            session.apply({"fields": {"name": {"style": {"color": "teal"}}}})
        assert not session.dirty

    def test_id_change_rejected(self, session: EditSession):
        with pytest.raises(InvalidPatch):
            session.apply({"id": "other"})

    def test_lenient_mode_logs(self, caplog):
        session = EditSession(PRODUCT.new_document("fence"), PRODUCT, strict=False)
        with caplog.at_level(logging.WARNING):
            assert session.apply({"status": "archived"}) is False
        assert "Ignoring invalid edit" in caplog.text
        assert session.document.status == DocumentStatus.DRAFT

    def test_working_copy_is_isolated(self):
        original = PRODUCT.new_document("fence")
        session = EditSession(original, PRODUCT)
        session.apply({"fields": {"name": {"value": {"en": "x"}}}})
        assert original.fields["name"].value.en == ""


class TestBlocks:
    def test_add_block_appends_with_next_order(self, session: EditSession):
        first = session.add_block(BlockKind.TITLE, "hero")
        second = session.add_block("paragraph", "hero")
        other = session.add_block(BlockKind.NOTE, "footer")
        orders = {b.id: b.order for b in session.document.blocks}
        assert orders == {first: 1, second: 2, other: 1}

    def test_add_block_uses_kind_style(self, session: EditSession):
        block_id = session.add_block(BlockKind.TITLE, "hero")
        block = session.document.find_block(block_id)
        assert block.style.font_size.desktop == 32
        assert block.text.is_empty

    def test_add_block_after_gap(self, session: EditSession):
        session.add_block(BlockKind.TITLE, "hero")
        block_id = session.document.blocks[0].id
        session.apply({"blocks": {block_id: {"order": 10}}})
        new_id = session.add_block(BlockKind.NOTE, "hero")
        assert session.document.find_block(new_id).order == 11

    def test_unknown_placement(self, session: EditSession):
        with pytest.raises(InvalidPlacement):
            session.add_block(BlockKind.TITLE, "sidebar")

    def test_unknown_placement_lenient(self):
        session = EditSession(PRODUCT.new_document("fence"), PRODUCT, strict=False)
        assert session.add_block(BlockKind.TITLE, "sidebar") is None
        assert session.document.blocks == []

    def test_remove_block(self, session: EditSession):
        block_id = session.add_block(BlockKind.TITLE, "hero")
        session.remove_block(block_id)
        assert session.document.blocks == []
        assert not session.dirty

    def test_remove_unknown_block_is_noop(self, session: EditSession):
        recorder = _Recorder()
        session.subscribe(recorder)
        session.remove_block("missing")
        assert recorder.calls == 0


class TestLists:
    def test_add_list_item(self, session: EditSession):
        item_id = session.add_list_item("materials", mn="Үнэмлэх", en="ID card", icon="id")
        item = session.document.lists["materials"][0]
        assert item.id == item_id
        assert item.value.en == "ID card"
        assert item.extra == {"icon": "id"}

    def test_unknown_list(self, session: EditSession):
        with pytest.raises(UnknownCollection):
            session.add_list_item("faq")

    def test_remove_list_item(self):
        session = EditSession(FOOTER.new_document("footer"), FOOTER)
        first = session.document.lists["quick_links"][0].id
        session.remove_list_item("quick_links", first)
        assert len(session.document.lists["quick_links"]) == 2
        assert session.dirty

    def test_remove_unknown_item_is_noop(self, session: EditSession):
        session.remove_list_item("materials", "missing")
        assert not session.dirty

    def test_remove_from_unknown_list(self, session: EditSession):
        with pytest.raises(UnknownCollection):
            session.remove_list_item("faq", "x")


class TestToggleVisibility:
    def test_toggle_block(self, session: EditSession):
        block_id = session.add_block(BlockKind.TITLE, "hero")
        session.toggle_visibility(f"blocks.{block_id}.visible")
        assert session.document.find_block(block_id).visible is False

    def test_toggle_field_style(self, session: EditSession):
        session.toggle_visibility("fields.name.style.visible")
        assert session.document.fields["name"].style.visible is False
        session.toggle_visibility("fields.name.style.visible")
        assert not session.dirty

    def test_bad_path(self, session: EditSession):
        with pytest.raises(InvalidPath):
            session.toggle_visibility("fields.name.value")


class TestSnapshots:
    def test_reset(self, session: EditSession):
        session.add_block(BlockKind.TITLE, "hero")
        session.reset()
        assert session.document.blocks == []
        assert not session.dirty

    def test_reset_when_clean_does_not_notify(self, session: EditSession):
        recorder = _Recorder()
        session.subscribe(recorder)
        session.reset()
        assert recorder.calls == 0

    def test_mark_saved_current(self, session: EditSession):
        session.apply({"fields": {"name": {"value": {"en": "Loan"}}}})
        session.mark_saved(session.document)
        assert not session.dirty

    def test_edits_after_snapshot_stay_dirty(self, session: EditSession):
        session.apply({"fields": {"name": {"value": {"en": "Loan"}}}})
        sent = session.document.model_copy(deep=True)
        session.apply({"fields": {"name": {"value": {"mn": "Зээл"}}}})
        session.mark_saved(sent)
        assert session.dirty
        assert session.last_saved_snapshot == sent

    def test_mark_saved_notifies(self, session: EditSession):
        recorder = _Recorder()
        session.subscribe(recorder)
        session.mark_saved(session.document)
        assert recorder.calls == 1

    def test_load_switches_document(self, session: EditSession):
        session.apply({"fields": {"name": {"value": {"en": "Loan"}}}})
        session.load(PRODUCT.new_document("other"))
        assert session.document.id == "other"
        assert not session.dirty


class TestSubscribe:
    def test_unsubscribe(self, session: EditSession):
        recorder = _Recorder()
        unsubscribe = session.subscribe(recorder)
        session.add_block(BlockKind.TITLE, "hero")
        unsubscribe()
        unsubscribe()
        session.add_block(BlockKind.TITLE, "hero")
        assert recorder.calls == 1

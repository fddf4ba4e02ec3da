"""Tests for the validation gate."""

import math

from pagecraft.content.models import ContentBlock, ListItem, LocalizedValue
from pagecraft.content.schemas import ABOUT_GOVERNANCE, ABOUT_INTRO, FOOTER, PRODUCT
from pagecraft.editor.validation import validate
from pagecraft.errors import (
    EmptyRequiredCollection,
    IncompleteLocalization,
    IssueCode,
    MissingRequiredField,
    NonFiniteStyleValue,
)


class TestValidate:
    def test_valid_document(self, product_doc):
        assert validate(product_doc, PRODUCT) == []

    def test_new_product_issues_in_rule_order(self):
        issues = validate(PRODUCT.new_document("fence"), PRODUCT)
        assert issues == [
            MissingRequiredField(field="name"),
            EmptyRequiredCollection(collection="materials"),
        ]

    def test_one_locale_satisfies_required_field(self, product_doc):
        product_doc.fields["name"].value.en = ""
        assert validate(product_doc, PRODUCT) == []

    def test_blank_required_field(self, product_doc):
        product_doc.fields["name"].value = LocalizedValue(mn="  ", en="")
        assert validate(product_doc, PRODUCT) == [MissingRequiredField(field="name")]

    def test_incomplete_list_item(self, product_doc):
        product_doc.lists["collateral"].append(ListItem(value=LocalizedValue(mn="Хашаа")))
        assert validate(product_doc, PRODUCT) == [
            IncompleteLocalization(list_name="collateral", index=0)
        ]

    def test_pending_delete_items_ignored(self, product_doc):
        product_doc.lists["collateral"].append(
            ListItem(value=LocalizedValue(mn="Хашаа"), pending_delete=True)
        )
        assert validate(product_doc, PRODUCT) == []

    def test_pending_delete_does_not_count_towards_required(self, product_doc):
        product_doc.lists["materials"][0].pending_delete = True
        assert validate(product_doc, PRODUCT) == [
            EmptyRequiredCollection(collection="materials")
        ]

    def test_non_finite_style_values(self, product_doc):
        product_doc.fields["name"].style.font_size.mobile = math.nan
        product_doc.blocks.append(ContentBlock(id="b1", placement="hero"))
        product_doc.blocks[0].style.letter_spacing = math.inf
        issues = validate(product_doc, PRODUCT)
        assert issues == [
            NonFiniteStyleValue(path="fields.name.style.font_size.mobile"),
            NonFiniteStyleValue(path="blocks.b1.style.letter_spacing"),
        ]

    def test_required_placement(self):
        doc = ABOUT_INTRO.new_document("intro")
        doc.fields["title"].value.en = "About us"
        assert validate(doc, ABOUT_INTRO) == [EmptyRequiredCollection(collection="timeline")]
        doc.blocks.append(ContentBlock(placement="timeline"))
        assert validate(doc, ABOUT_INTRO) == []

    def test_governance_needs_people(self):
        doc = ABOUT_GOVERNANCE.new_document("governance")
        assert validate(doc, ABOUT_GOVERNANCE) == [EmptyRequiredCollection(collection="people")]
        doc.lists["people"].append(ListItem(value=LocalizedValue(mn="Болд", en="Bold")))
        assert validate(doc, ABOUT_GOVERNANCE) == []

    def test_footer_defaults_only_miss_description(self):
        assert validate(FOOTER.new_document("footer"), FOOTER) == [
            MissingRequiredField(field="description")
        ]

    def test_does_not_mutate(self, product_doc):
        before = product_doc.model_copy(deep=True)
        validate(product_doc, PRODUCT)
        assert product_doc == before


class TestIssueMessages:
    def test_codes(self):
        assert MissingRequiredField(field="x").code == IssueCode.MISSING_REQUIRED_FIELD
        assert EmptyRequiredCollection(collection="x").code == (
            IssueCode.EMPTY_REQUIRED_COLLECTION
        )

    def test_messages(self):
        assert "name" in MissingRequiredField(field="name").message
        assert "#3" in IncompleteLocalization(list_name="titles", index=2).message
        assert "materials" in EmptyRequiredCollection(collection="materials").message

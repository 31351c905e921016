"""Tests for coded value transitions."""

import pytest

from define_engine.domain.entities import (
    CodeListItem,
    CodeListType,
    EnumeratedItem,
    TranslatedText,
)
from define_engine.domain.exceptions import InvariantViolationError, UnknownOidError
from define_engine.domain.services.codelist_transitions import (
    CodedValuePatch,
    add_coded_value,
    delete_coded_values,
    put_coded_item,
    set_type,
    update_coded_value,
)


class TestAddCodedValue:
    """Tests for add_coded_value."""

    def test_appends_to_collection_and_order(self, sex_code_list):
        """New values get the next free item OID at the end of the order."""
        result, item_oid = add_coded_value({"CL.SEX": sex_code_list}, "CL.SEX", "U")

        assert item_oid == "CI.3"
        code_list = result["CL.SEX"]
        assert code_list.item_order == ("CI.1", "CI.2", "CI.3")
        assert code_list.code_list_items["CI.3"].coded_value == "U"

    def test_enumerated_code_list_gets_enumerated_item(self, make_code_list):
        """The new item matches the codelist type."""
        code_list = make_code_list("CL.YN", values={"CI.1": "Y"}, enumerated=True)

        result, item_oid = add_coded_value({"CL.YN": code_list}, "CL.YN", "N")

        assert isinstance(result["CL.YN"].enumerated_items[item_oid], EnumeratedItem)

    def test_external_code_list_is_unchanged(self, sex_code_list):
        """External codelists hold no coded values."""
        state = set_type({"CL.SEX": sex_code_list}, "CL.SEX", CodeListType.EXTERNAL)

        result, item_oid = add_coded_value(state, "CL.SEX", "U")

        assert item_oid is None
        assert result["CL.SEX"] is state["CL.SEX"]


class TestUpdateCodedValue:
    """Tests for update_coded_value."""

    def test_patch_replaces_fields(self, sex_code_list):
        """Patched fields change, the rest stays."""
        result = update_coded_value(
            {"CL.SEX": sex_code_list},
            "CL.SEX",
            "CI.1",
            CodedValuePatch(decode=TranslatedText(value="Man"), rank=1.0),
        )

        item = result["CL.SEX"].code_list_items["CI.1"]
        assert item.decode == TranslatedText(value="Man")
        assert item.rank == 1.0
        assert item.coded_value == "M"
        assert result["CL.SEX"].item_order == sex_code_list.item_order

    def test_decode_is_ignored_for_enumerated_items(self, make_code_list):
        """Enumerated items have no decode to patch."""
        code_list = make_code_list("CL.YN", values={"CI.1": "Y"}, enumerated=True)

        result = update_coded_value(
            {"CL.YN": code_list},
            "CL.YN",
            "CI.1",
            CodedValuePatch(coded_value="YES", decode=TranslatedText(value="Yes")),
        )

        assert result["CL.YN"].enumerated_items["CI.1"] == EnumeratedItem(
            coded_value="YES"
        )

    def test_unknown_item_raises(self, sex_code_list):
        """Unknown item OIDs are caller errors."""
        with pytest.raises(UnknownOidError):
            update_coded_value(
                {"CL.SEX": sex_code_list}, "CL.SEX", "CI.9", CodedValuePatch(rank=1.0)
            )


class TestDeleteCodedValues:
    """Tests for delete_coded_values."""

    def test_removes_from_collection_and_order(self, sex_code_list):
        """Deletion removes the item by key from both places."""
        result = delete_coded_values({"CL.SEX": sex_code_list}, "CL.SEX", ["CI.1"])

        code_list = result["CL.SEX"]
        assert "CI.1" not in code_list.code_list_items
        assert code_list.item_order == ("CI.2",)

    def test_unknown_item_raises(self, sex_code_list):
        """Deleting an unknown item is a caller error."""
        with pytest.raises(UnknownOidError):
            delete_coded_values({"CL.SEX": sex_code_list}, "CL.SEX", ["CI.7"])


class TestPutCodedItem:
    """Tests for put_coded_item."""

    def test_replacing_keeps_position(self, sex_code_list):
        """Replacing an item leaves the order alone."""
        item = CodeListItem(coded_value="F", decode=TranslatedText(value="Woman"))

        result = put_coded_item(sex_code_list, "CI.2", item)

        assert result.item_order == ("CI.1", "CI.2")
        assert result.code_list_items["CI.2"] == item

    def test_item_is_converted_to_collection_type(self, make_code_list):
        """A decoded item put into an enumerated codelist loses its decode."""
        code_list = make_code_list("CL.YN", enumerated=True)

        result = put_coded_item(
            code_list, "CI.1", CodeListItem(coded_value="Y", decode=TranslatedText("Yes"))
        )

        assert result.enumerated_items == {"CI.1": EnumeratedItem(coded_value="Y")}

    def test_external_code_list_rejects_items(self, sex_code_list):
        """External codelists cannot hold coded values."""
        external = set_type({"CL.SEX": sex_code_list}, "CL.SEX", "external")["CL.SEX"]

        with pytest.raises(InvariantViolationError):
            put_coded_item(external, "CI.1", EnumeratedItem(coded_value="M"))

"""Tests for the form field locator tables."""

import pytest

from taxforms_core.exceptions import ValidationError
from taxforms_core.field_maps import (
    FORM_1099_MISC_FIELDS,
    FORM_1099_NEC_FIELDS,
    FORM_W2_FIELDS,
    FORM_W3_FIELDS,
    W2_BOX_12_CODES,
    W3_DEFERRED_COMP_CODES,
    Form1099MISCBox,
    Form1099NECBox,
    FormType,
    FormW2Box,
    FormW3Box,
    get_field_map,
)


class TestFormType:
    """Form type parsing and template names."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1099-NEC", FormType.NEC_1099),
            ("1099nec", FormType.NEC_1099),
            ("1099_misc", FormType.MISC_1099),
            ("w2", FormType.W2),
            ("W-3", FormType.W3),
            (FormType.W2, FormType.W2),
        ],
    )
    def test_parse(self, raw, expected: FormType):
        assert FormType.parse(raw) is expected

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValidationError) as exc_info:
            FormType.parse("1099-K")
        assert exc_info.value.field == "form_type"
        assert "Unsupported form type" in str(exc_info.value)

    def test_template_files(self):
        assert FormType.NEC_1099.template_file == "f1099nec.pdf"
        assert FormType.MISC_1099.template_file == "f1099msc.pdf"
        assert FormType.W2.template_file == "fw2.pdf"
        assert FormType.W3.template_file == "fw3.pdf"


class TestFieldMaps:
    """Locator table coverage."""

    def test_every_nec_box_is_mapped(self):
        for key in Form1099NECBox:
            assert FORM_1099_NEC_FIELDS.locator(key) is not None, key

    def test_every_w2_box_is_mapped(self):
        assert len(FORM_W2_FIELDS) == len(FormW2Box)

    def test_every_w3_box_is_mapped(self):
        assert set(FORM_W3_FIELDS.keys()) == set(FormW3Box)

    def test_misc_second_state_row_is_unmapped(self):
        assert FORM_1099_MISC_FIELDS.locator(Form1099MISCBox.BOX16_STATE_PAYER_NUMBER_2) is None
        assert Form1099MISCBox.BOX16_STATE_PAYER_NUMBER in FORM_1099_MISC_FIELDS

    def test_nec_box1_locator(self):
        assert (
            FORM_1099_NEC_FIELDS.locator(Form1099NECBox.BOX1_NONEMPLOYEE_COMPENSATION)
            == "topmostSubform[0].CopyA[0].RightCol[0].f1_11[0]"
        )

    def test_locators_are_unique_per_form(self):
        for field_map in (FORM_1099_NEC_FIELDS, FORM_1099_MISC_FIELDS, FORM_W2_FIELDS, FORM_W3_FIELDS):
            locators = [field_map.locator(key) for key in field_map.keys()]
            assert len(locators) == len(set(locators)), field_map

    def test_get_field_map_accepts_strings(self):
        assert get_field_map("w-2") is FORM_W2_FIELDS
        assert repr(get_field_map(FormType.W3)).startswith("FieldMap('W-3'")


class TestBox12Codes:
    def test_common_codes_present(self):
        for code in ("D", "DD", "W", "AA"):
            assert code in W2_BOX_12_CODES

    def test_retired_codes_absent(self):
        assert "I" not in W2_BOX_12_CODES
        assert "O" not in W2_BOX_12_CODES

    def test_deferred_comp_codes_are_valid_box12_codes(self):
        assert W3_DEFERRED_COMP_CODES <= set(W2_BOX_12_CODES)

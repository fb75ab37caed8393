"""Tests for tax identifier and address validation."""

from decimal import Decimal

import pytest

from taxforms_core.identifiers import (
    clean_tax_id,
    format_city_state_zip,
    format_tax_amount,
    mask_tax_id,
    round_cents,
    to_decimal,
    validate_address,
    validate_ein,
    validate_ssn,
    validate_tax_id,
)
from taxforms_core.models import Address, TaxIdKind


class TestValidateSSN:
    """Test suite for SSN validation."""

    @pytest.mark.parametrize("raw", ["123-45-6789", "123456789", "123 45 6789"])
    def test_accepts_and_formats(self, raw: str):
        result = validate_ssn(raw)
        assert result.is_valid
        assert result.formatted == "123-45-6789"
        assert result.error is None

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_required(self, raw):
        result = validate_ssn(raw)
        assert not result.is_valid
        assert result.error == "SSN is required"

    @pytest.mark.parametrize("raw", ["12345678", "1234567890", "12A-45-6789"])
    def test_must_be_nine_digits(self, raw: str):
        assert validate_ssn(raw).error == "SSN must be 9 digits"

    @pytest.mark.parametrize("raw", ["000-12-3456", "666-12-3456", "900-12-3456", "999-99-9999"])
    def test_rejects_never_issued_areas(self, raw: str):
        result = validate_ssn(raw)
        assert not result.is_valid
        assert result.error == "Invalid SSN area number"

    def test_area_899_is_valid(self):
        assert validate_ssn("899-12-3456").is_valid


class TestValidateEIN:
    """Test suite for EIN validation."""

    def test_accepts_and_formats(self):
        result = validate_ein("123456789")
        assert result.is_valid
        assert result.formatted == "12-3456789"

    def test_required(self):
        assert validate_ein(None).error == "EIN is required"

    def test_must_be_nine_digits(self):
        assert validate_ein("12-345678").error == "EIN must be 9 digits"

    @pytest.mark.parametrize("prefix", ["00", "07", "08", "09", "17", "18", "19", "28", "29", "49", "69", "70", "78", "79", "89", "96", "97"])
    def test_rejects_unassigned_prefixes(self, prefix: str):
        result = validate_ein(f"{prefix}-1234567")
        assert not result.is_valid
        assert result.error == f"Invalid EIN prefix: {prefix}"


class TestValidateTaxId:
    """Dispatching on the declared identifier kind."""

    def test_ssn_kind(self):
        assert validate_tax_id("123-45-6789", TaxIdKind.SSN).formatted == "123-45-6789"

    def test_ein_kind_is_case_insensitive(self):
        assert validate_tax_id("123456789", "ein").formatted == "12-3456789"

    def test_unknown_kind_is_invalid_not_raised(self):
        result = validate_tax_id("123456789", "ITIN")
        assert not result.is_valid
        assert result.error == "Invalid tax ID type"

    def test_missing_kind_is_invalid(self):
        assert not validate_tax_id("123456789", None).is_valid


class TestValidateAddress:
    """Address completeness checks."""

    def test_complete_address(self):
        address = Address(street="1 Main St", city="Albany", state="ny", zip_code="12207")
        check = validate_address(address)
        assert check.is_complete
        assert check.missing_fields == []

    def test_accepts_mapping_and_zip_plus_four(self):
        check = validate_address(
            {"street": "1 Main St", "city": "Albany", "state": "NY", "zip_code": "12207-1234"}
        )
        assert check.is_complete

    def test_none_reports_every_field(self):
        check = validate_address(None)
        assert not check.is_complete
        assert check.missing_fields == ["street", "city", "state", "zip_code"]

    def test_reports_missing_fields_by_name(self):
        check = validate_address(Address(street="1 Main St", state="NY"))
        assert check.missing_fields == ["city", "zip_code"]

    def test_rejects_bad_state_and_zip(self):
        check = validate_address(
            Address(street="1 Main St", city="Albany", state="New York", zip_code="1220")
        )
        assert not check.is_complete
        assert "state (must be 2-letter code)" in check.missing_fields
        assert "zip_code (invalid format)" in check.missing_fields

    def test_blank_strings_count_as_missing(self):
        check = validate_address(Address(street="  ", city="Albany", state="NY", zip_code="12207"))
        assert check.missing_fields == ["street"]


class TestMaskTaxId:
    """Preview masking keeps only the last four digits."""

    def test_masks_ssn(self):
        assert mask_tax_id("123-45-6789") == "***-**-6789"

    def test_masks_ein(self):
        assert mask_tax_id("12-3456789", TaxIdKind.EIN) == "**-***6789"

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_not_provided(self, raw):
        assert mask_tax_id(raw) == "Not provided"

    def test_short_input(self):
        assert mask_tax_id("12") == "***"

    def test_never_exposes_more_than_four_digits(self):
        masked = mask_tax_id("987-65-4321")
        assert sum(c.isdigit() for c in masked) == 4


class TestFormatting:
    """Amount and address formatting helpers."""

    def test_clean_tax_id(self):
        assert clean_tax_id(" 12-345 6789 ") == "123456789"
        assert clean_tax_id(None) == ""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (Decimal("750"), "750.00"),
            ("1234.565", "1234.57"),
            (-42.1, "42.10"),
            (None, "0.00"),
            ("not a number", "0.00"),
        ],
    )
    def test_format_tax_amount(self, amount, expected: str):
        assert format_tax_amount(amount) == expected

    def test_round_cents_half_up(self):
        assert round_cents(Decimal("0.125")) == Decimal("0.13")

    def test_to_decimal(self):
        assert to_decimal("10.5") == Decimal("10.5")
        assert to_decimal(True) is None
        assert to_decimal("NaN") is None

    def test_format_city_state_zip(self):
        address = Address(street="1 Main St", city="Albany", state="ny", zip_code="12207")
        assert format_city_state_zip(address) == "Albany, NY 12207"

    def test_format_city_state_zip_partial(self):
        assert format_city_state_zip(Address(city="Albany")) == "Albany"
        assert format_city_state_zip(None) == ""

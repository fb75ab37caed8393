"""Taxpayer identifier and mailing address validation.

Pure, deterministic helpers with no I/O: every function here can be used
without a form template or a ledger. Formatting helpers used when printing
amounts and addresses onto forms live here as well.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from .models import Address, AddressCheck, TaxIdKind, TaxIdResult

# IRS campus prefixes assigned to EINs
VALID_EIN_PREFIXES = frozenset({
    "01", "02", "03", "04", "05", "06", "10", "11", "12", "13", "14", "15",
    "16", "20", "21", "22", "23", "24", "25", "26", "27", "30", "31", "32",
    "33", "34", "35", "36", "37", "38", "39", "40", "41", "42", "43", "44",
    "45", "46", "47", "48", "50", "51", "52", "53", "54", "55", "56", "57",
    "58", "59", "60", "61", "62", "63", "64", "65", "66", "67", "68", "71",
    "72", "73", "74", "75", "76", "77", "80", "81", "82", "83", "84", "85",
    "86", "87", "88", "90", "91", "92", "93", "94", "95", "98", "99",
})

ADDRESS_REQUIRED_FIELDS = ("street", "city", "state", "zip_code")

_SEPARATORS = re.compile(r"[-\s]")
_NINE_DIGITS = re.compile(r"^\d{9}$")
_STATE_CODE = re.compile(r"^[A-Za-z]{2}$")
_ZIP_CODE = re.compile(r"^\d{5}(-?\d{4})?$")

NOT_PROVIDED = "Not provided"

AddressLike = Union[Address, Mapping[str, Any], None]


def clean_tax_id(raw: Optional[str]) -> str:
    """Strip dashes and whitespace from an identifier."""
    if raw is None:
        return ""
    return _SEPARATORS.sub("", str(raw))


def validate_ssn(raw: Optional[str]) -> TaxIdResult:
    """Validate a Social Security Number and format it as DDD-DD-DDDD.

    Area numbers 000, 666 and 900-999 are never issued.
    """
    if not raw or not str(raw).strip():
        return TaxIdResult(is_valid=False, error="SSN is required")

    cleaned = clean_tax_id(raw)
    if not _NINE_DIGITS.match(cleaned):
        return TaxIdResult(is_valid=False, error="SSN must be 9 digits")

    area = int(cleaned[:3])
    if area == 0 or area == 666 or area >= 900:
        return TaxIdResult(is_valid=False, error="Invalid SSN area number")

    return TaxIdResult(
        is_valid=True,
        formatted=f"{cleaned[:3]}-{cleaned[3:5]}-{cleaned[5:]}",
    )


def validate_ein(raw: Optional[str]) -> TaxIdResult:
    """Validate an Employer Identification Number and format it as DD-DDDDDDD."""
    if not raw or not str(raw).strip():
        return TaxIdResult(is_valid=False, error="EIN is required")

    cleaned = clean_tax_id(raw)
    if not _NINE_DIGITS.match(cleaned):
        return TaxIdResult(is_valid=False, error="EIN must be 9 digits")

    prefix = cleaned[:2]
    if prefix not in VALID_EIN_PREFIXES:
        return TaxIdResult(is_valid=False, error=f"Invalid EIN prefix: {prefix}")

    return TaxIdResult(is_valid=True, formatted=f"{prefix}-{cleaned[2:]}")


def validate_tax_id(raw: Optional[str], kind: Union[TaxIdKind, str, None]) -> TaxIdResult:
    """Validate an identifier against its declared kind (SSN or EIN)."""
    parsed = TaxIdKind.parse(kind)
    if parsed is None:
        return TaxIdResult(is_valid=False, error="Invalid tax ID type")
    if parsed is TaxIdKind.SSN:
        return validate_ssn(raw)
    return validate_ein(raw)


def _address_value(address: AddressLike, field: str) -> str:
    if address is None:
        return ""
    if isinstance(address, Address):
        value = getattr(address, field)
    else:
        value = address.get(field)
    return "" if value is None else str(value).strip()


def validate_address(address: AddressLike) -> AddressCheck:
    """Check that an address is complete enough to print on a filed form.

    Requires street, city, a 2-letter state code and a 5-digit or ZIP+4
    postal code. Each missing or malformed field is reported by name.
    """
    if address is None:
        return AddressCheck(is_complete=False, missing_fields=list(ADDRESS_REQUIRED_FIELDS))

    missing = [f for f in ADDRESS_REQUIRED_FIELDS if not _address_value(address, f)]

    state = _address_value(address, "state")
    if state and not _STATE_CODE.match(state):
        missing.append("state (must be 2-letter code)")

    zip_code = re.sub(r"\s", "", _address_value(address, "zip_code"))
    if zip_code and not _ZIP_CODE.match(zip_code):
        missing.append("zip_code (invalid format)")

    return AddressCheck(is_complete=not missing, missing_fields=missing)


def mask_tax_id(raw: Optional[str], kind: Union[TaxIdKind, str, None] = None) -> str:
    """Mask an identifier for display, keeping only the last four digits.

    Only used in previews; filed documents always carry the full number.
    Never raises, whatever the input.
    """
    if raw is None or not str(raw).strip():
        return NOT_PROVIDED

    digits = re.sub(r"\D", "", str(raw))
    if len(digits) < 4:
        return "***"

    last4 = digits[-4:]
    if TaxIdKind.parse(kind) is TaxIdKind.EIN:
        return f"**-***{last4}"
    return f"***-**-{last4}"


def to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce a number-ish value to Decimal, returning None when impossible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def round_cents(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_tax_amount(amount: Any) -> str:
    """Format an amount for a form box: absolute value, two decimals."""
    value = to_decimal(amount)
    if value is None:
        return "0.00"
    return f"{round_cents(abs(value)):.2f}"


def format_city_state_zip(address: AddressLike) -> str:
    """Format the second address line: "City, ST 12345"."""
    city = _address_value(address, "city")
    state = _address_value(address, "state").upper()
    zip_code = _address_value(address, "zip_code")

    parts = [p for p in (city, state, zip_code) if p]
    if len(parts) >= 2:
        return f"{parts[0]}, {' '.join(parts[1:])}"
    return " ".join(parts)

"""Payer, recipient and employee records.

Records are owned by the bookkeeping persistence layer; this package only
reads them. A single ``PartyRecord`` type covers companies, contractors and
employees, tagged with a ``role`` instead of relying on which optional
attributes happen to be present.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .facts import LocalTaxRow, StateTaxRow


class TaxIdKind(str, Enum):
    """Kinds of federal taxpayer identification numbers."""

    SSN = "SSN"
    EIN = "EIN"

    @classmethod
    def parse(cls, raw: "Optional[str | TaxIdKind]") -> Optional["TaxIdKind"]:
        """Parse a kind case-insensitively, returning None when unknown."""
        if isinstance(raw, TaxIdKind):
            return raw
        if not raw or not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


class PartyRole(str, Enum):
    """The role a party plays on an information return."""

    PAYER = "payer"
    EMPLOYER = "employer"
    RECIPIENT = "recipient"
    CONTRACTOR = "contractor"
    EMPLOYEE = "employee"

    @property
    def is_company(self) -> bool:
        return self in (PartyRole.PAYER, PartyRole.EMPLOYER)


class Address(BaseModel):
    """Mailing address as stored; completeness is checked by the validator."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class NameParts(BaseModel):
    """Structured employee name for W-2 box e."""

    first_name: Optional[str] = None
    middle_initial: Optional[str] = None
    last_name: Optional[str] = None
    suffix: Optional[str] = None


class StateRegistration(BaseModel):
    """A payer's state withholding account (W-2 box 15, 1099 state payer no.)."""

    state_code: str = Field(min_length=2, max_length=2)
    state_id: str


class TaxFormInfo(BaseModel):
    """Withholding metadata stored on a recipient or employee record.

    The ledger only knows gross payments; withheld amounts recorded by the
    bookkeeper live here and are merged into the derived facts.
    """

    account_number: Optional[str] = None
    federal_withholding: Decimal = Decimal("0")
    social_security_wages: Optional[Decimal] = None
    social_security_tax: Optional[Decimal] = None
    medicare_wages: Optional[Decimal] = None
    medicare_tax: Optional[Decimal] = None
    state_tax_rows: list[StateTaxRow] = Field(default_factory=list, max_length=2)
    local_tax_rows: list[LocalTaxRow] = Field(default_factory=list, max_length=2)


class PartyRecord(BaseModel):
    """A payer/employer company or a recipient/contractor/employee.

    Attributes:
        id: Persistence identifier
        role: Role tag
        name: Display name
        legal_name: Registered legal name (companies)
        business_name: Doing-business-as name printed on 1099s when present
        tax_id: Raw SSN or EIN as entered
        tax_id_kind: Declared kind; recipients default to SSN
        address: Mailing address
        phone: Telephone number printed in the payer block
        name_parts: First/middle/last/suffix for W-2 box e
        control_number: W-2 box d
        state_registrations: Per-state payer/employer account numbers
        company_id: Owning company for recipients
        is_default: Marks the user's default company
        tax_form_info: Stored withholding metadata
    """

    id: str
    role: PartyRole
    name: Optional[str] = None
    legal_name: Optional[str] = None
    business_name: Optional[str] = None
    tax_id: Optional[str] = None
    tax_id_kind: Optional[TaxIdKind] = None
    address: Optional[Address] = None
    phone: Optional[str] = None
    name_parts: Optional[NameParts] = None
    control_number: Optional[str] = None
    state_registrations: list[StateRegistration] = Field(default_factory=list)
    company_id: Optional[str] = None
    is_default: bool = False
    tax_form_info: TaxFormInfo = Field(default_factory=TaxFormInfo)

    @property
    def filing_name(self) -> Optional[str]:
        """Name printed on a form: legal name for companies, DBA for recipients."""
        if self.role.is_company:
            return self.legal_name or self.name
        return self.business_name or self.name

    @property
    def declared_tax_id_kind(self) -> TaxIdKind:
        """Declared identifier kind, defaulting by role."""
        if self.tax_id_kind is not None:
            return self.tax_id_kind
        return TaxIdKind.EIN if self.role.is_company else TaxIdKind.SSN

    def state_id_for(self, state_code: Optional[str], index: int = 0) -> str:
        """Find the state account number for a state, falling back to position."""
        if state_code:
            for registration in self.state_registrations:
                if registration.state_code.upper() == state_code.upper():
                    return registration.state_id
        if index < len(self.state_registrations):
            return self.state_registrations[index].state_id
        return ""

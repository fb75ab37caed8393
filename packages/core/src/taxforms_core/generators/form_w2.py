"""Form W-2: wage and tax statement."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel

from ..config import TaxYearConstants
from ..field_maps import (
    FORM_W2_FIELDS,
    W2_BOX_12_CODES,
    W2_BOX_12_ROWS,
    W2_LOCAL_ROWS,
    W2_STATE_ROWS,
    FormType,
    FormW2Box,
)
from ..identifiers import (
    format_city_state_zip,
    format_tax_amount,
    round_cents,
    validate_address,
    validate_ein,
    validate_ssn,
)
from ..models import PartyRecord, ValidationOutcome, WageFacts
from ..pdf_filler import PdfFormFiller
from .base import BaseFormGenerator

MAX_BOX_12_ENTRIES = len(W2_BOX_12_ROWS)

# Boxes that only print when positive
_OPTIONAL_AMOUNT_BOXES = (
    ("social_security_tips", FormW2Box.BOX7_SOCIAL_SECURITY_TIPS),
    ("allocated_tips", FormW2Box.BOX8_ALLOCATED_TIPS),
    ("dependent_care_benefits", FormW2Box.BOX10_DEPENDENT_CARE),
    ("nonqualified_plans", FormW2Box.BOX11_NONQUALIFIED_PLANS),
)


class PayrollTaxes(BaseModel):
    """Social security and Medicare figures derived from gross wages."""

    model_config = {"frozen": True}

    social_security_wages: Decimal
    social_security_tax: Decimal
    medicare_wages: Decimal
    medicare_tax: Decimal


def calculate_payroll_taxes(wages: Decimal, constants: TaxYearConstants) -> PayrollTaxes:
    """Derive boxes 3-6 from gross wages.

    Social security wages are capped at the year's wage base; Medicare wages
    are uncapped. Taxes are rounded to cents.
    """
    ss_wages = min(wages, constants.social_security_wage_base)
    return PayrollTaxes(
        social_security_wages=ss_wages,
        social_security_tax=round_cents(ss_wages * constants.social_security_rate),
        medicare_wages=wages,
        medicare_tax=round_cents(wages * constants.medicare_rate),
    )


def effective_payroll_boxes(facts: WageFacts, constants: TaxYearConstants) -> PayrollTaxes:
    """Boxes 3-6 as printed: supplied figures win, missing ones are computed."""
    wages = facts.wages or Decimal("0")
    ss_wages = (
        facts.social_security_wages
        if facts.social_security_wages is not None
        else min(wages, constants.social_security_wage_base)
    )
    medicare_wages = facts.medicare_wages if facts.medicare_wages is not None else wages
    return PayrollTaxes(
        social_security_wages=ss_wages,
        social_security_tax=(
            facts.social_security_tax
            if facts.social_security_tax is not None
            else round_cents(ss_wages * constants.social_security_rate)
        ),
        medicare_wages=medicare_wages,
        medicare_tax=(
            facts.medicare_tax
            if facts.medicare_tax is not None
            else round_cents(medicare_wages * constants.medicare_rate)
        ),
    )


def _percent(rate: Decimal) -> str:
    return f"{(rate * 100).normalize():f}%"


def employee_display_name(employee: Optional[PartyRecord]) -> str:
    """Name for box e: first, middle initial, last and suffix when split, else the plain name."""
    if employee is None:
        return "Unknown Employee"
    parts = employee.name_parts
    if parts and parts.first_name and parts.last_name:
        middle = f" {parts.middle_initial}" if parts.middle_initial else ""
        suffix = f" {parts.suffix}" if parts.suffix else ""
        return f"{parts.first_name}{middle} {parts.last_name}{suffix}"
    return employee.name or "Unknown Employee"


class FormW2Generator(BaseFormGenerator):
    """Fills Form W-2 for an employee.

    Social security and Medicare boxes are computed from wages when the
    caller does not supply them. Supplied figures are printed as given and
    reconciled against the statutory rates; a mismatch is a warning only,
    since employers may legitimately override computed withholding.
    """

    form_type = FormType.W2
    field_map = FORM_W2_FIELDS

    def calculate_taxes(self, wages: Decimal, tax_year: Optional[int] = None) -> PayrollTaxes:
        """Derive social security and Medicare wages and taxes from gross wages."""
        return calculate_payroll_taxes(Decimal(str(wages)), self.constants(tax_year))

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Optional[WageFacts],
        tax_year: Optional[int] = None,
    ) -> ValidationOutcome:
        outcome = ValidationOutcome()
        self.validate_company(payer, "Employer", outcome)
        self._validate_employee(recipient, outcome)

        if facts is None:
            outcome.errors.append("Wage data is required")
            return outcome

        if facts.wages is None or facts.wages < 0:
            outcome.errors.append("Wages must be a non-negative number")

        for name in (
            "federal_withholding",
            "social_security_wages",
            "social_security_tax",
            "medicare_wages",
            "medicare_tax",
            "social_security_tips",
            "allocated_tips",
            "dependent_care_benefits",
            "nonqualified_plans",
        ):
            value = getattr(facts, name)
            if value is not None and value < 0:
                outcome.errors.append(f"{name.replace('_', ' ').capitalize()} cannot be negative")

        self._validate_box12(facts, outcome)
        self._reconcile(facts, self.constants(tax_year), outcome)
        return outcome

    @staticmethod
    def _validate_employee(employee: Optional[PartyRecord], outcome: ValidationOutcome) -> None:
        if employee is None:
            outcome.errors.append("Employee information is required")
            return

        ssn = validate_ssn(employee.tax_id)
        if not ssn.is_valid:
            outcome.errors.append(f"Employee SSN: {ssn.error}")

        parts = employee.name_parts
        if not employee.name and not (parts and (parts.first_name or parts.last_name)):
            outcome.errors.append("Employee name is required")

        address = validate_address(employee.address)
        if not address.is_complete:
            outcome.errors.append(
                f"Employee address incomplete: missing {', '.join(address.missing_fields)}"
            )

    @staticmethod
    def _validate_box12(facts: WageFacts, outcome: ValidationOutcome) -> None:
        if len(facts.box12) > MAX_BOX_12_ENTRIES:
            outcome.errors.append(
                f"Box 12 holds at most {MAX_BOX_12_ENTRIES} entries, got {len(facts.box12)}"
            )
        for entry in facts.box12:
            if entry.code.strip().upper() not in W2_BOX_12_CODES:
                outcome.errors.append(f"Box 12 code {entry.code!r} is not a valid W-2 code")
            if entry.amount < 0:
                outcome.errors.append(f"Box 12 amount for code {entry.code} cannot be negative")

    @staticmethod
    def _reconcile(facts: WageFacts, constants: TaxYearConstants, outcome: ValidationOutcome) -> None:
        cap = constants.social_security_wage_base
        tolerance = constants.reconciliation_tolerance
        wages = facts.wages if facts.wages is not None and facts.wages > 0 else Decimal("0")

        if facts.social_security_wages is not None and facts.social_security_wages > cap:
            outcome.warnings.append(f"Social Security wages exceed ${cap:,.0f} cap")
        elif facts.social_security_wages is None and wages > cap:
            outcome.warnings.append(
                f"Wages exceed the ${cap:,.0f} Social Security wage base; box 3 is capped"
            )

        if facts.social_security_tax is not None:
            ss_wages = facts.social_security_wages if facts.social_security_wages is not None else wages
            expected = min(ss_wages, cap) * constants.social_security_rate
            if abs(facts.social_security_tax - expected) > tolerance:
                outcome.warnings.append(
                    f"Social Security tax does not match {_percent(constants.social_security_rate)} of SS wages"
                )

        if facts.medicare_tax is not None:
            medicare_wages = facts.medicare_wages if facts.medicare_wages is not None else wages
            expected = medicare_wages * constants.medicare_rate
            if abs(facts.medicare_tax - expected) > tolerance:
                outcome.warnings.append(
                    f"Medicare tax does not match {_percent(constants.medicare_rate)} of Medicare wages"
                )

    # -------------------------------------------------------------------------
    # Preview and fill
    # -------------------------------------------------------------------------

    def display_name(self, payer: Optional[PartyRecord], recipient: Optional[PartyRecord]) -> str:
        return employee_display_name(recipient)

    def headline_amount(self, facts: Optional[WageFacts]) -> Decimal:
        if facts is None or facts.wages is None:
            return Decimal("0")
        return facts.wages

    def preview_data(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Optional[WageFacts],
        tax_year: int,
    ) -> dict[str, Any]:
        employer = self.party_preview(payer)
        employer["ein"] = employer.pop("tin")
        employee = self.party_preview(recipient, kind="SSN")
        employee["ssn"] = employee.pop("tin")
        employee["name"] = employee_display_name(recipient)

        data: dict[str, Any] = {"employer": employer, "employee": employee, "boxes": {}}
        if facts is None:
            return data

        payroll = effective_payroll_boxes(facts, self.constants(tax_year))
        data["boxes"] = {
            "box1_wages": format_tax_amount(facts.wages),
            "box2_federal_withheld": format_tax_amount(facts.federal_withholding),
            "box3_ss_wages": format_tax_amount(payroll.social_security_wages),
            "box4_ss_tax": format_tax_amount(payroll.social_security_tax),
            "box5_medicare_wages": format_tax_amount(payroll.medicare_wages),
            "box6_medicare_tax": format_tax_amount(payroll.medicare_tax),
            "box7_ss_tips": format_tax_amount(facts.social_security_tips),
            "box8_allocated_tips": format_tax_amount(facts.allocated_tips),
            "box10_dependent_care": format_tax_amount(facts.dependent_care_benefits),
            "box11_nonqualified_plans": format_tax_amount(facts.nonqualified_plans),
            "box12": [
                {"code": e.code.upper(), "amount": format_tax_amount(e.amount)} for e in facts.box12
            ],
            "box13": {
                "statutory_employee": facts.statutory_employee,
                "retirement_plan": facts.retirement_plan,
                "third_party_sick_pay": facts.third_party_sick_pay,
            },
            "box14": facts.box14_other or "",
        }
        data["state"] = [
            {
                "state_code": row.state_code,
                "state_wages": format_tax_amount(row.state_income or facts.wages),
                "state_tax": format_tax_amount(row.state_tax_withheld),
            }
            for row in facts.state_rows
        ]
        data["local"] = [
            {
                "locality_name": row.locality_name,
                "local_wages": format_tax_amount(row.local_wages),
                "local_tax": format_tax_amount(row.local_tax),
            }
            for row in facts.local_rows
        ]
        return data

    def fill(
        self,
        filler: PdfFormFiller,
        payer: PartyRecord,
        recipient: PartyRecord,
        facts: WageFacts,
        tax_year: int,
    ) -> None:
        self._fill_employer(filler, payer, recipient)
        self._fill_employee(filler, recipient)
        self._fill_wages(filler, facts, self.constants(tax_year))
        self._fill_state_local(filler, payer, facts)

    def _fill_employer(self, filler: PdfFormFiller, employer: PartyRecord, employee: PartyRecord) -> None:
        ein = validate_ein(employer.tax_id)
        if ein.is_valid:
            self.set_box(filler, FormW2Box.EMPLOYER_EIN, ein.formatted)

        name_address = [
            employer.filing_name,
            employer.address.street if employer.address else None,
            format_city_state_zip(employer.address),
        ]
        self.set_box(filler, FormW2Box.EMPLOYER_NAME_ADDRESS, "\n".join(v for v in name_address if v))
        self.set_box(filler, FormW2Box.CONTROL_NUMBER, employee.control_number or employer.control_number)

    def _fill_employee(self, filler: PdfFormFiller, employee: PartyRecord) -> None:
        ssn = validate_ssn(employee.tax_id)
        if ssn.is_valid:
            self.set_box(filler, FormW2Box.EMPLOYEE_SSN, ssn.formatted)

        parts = employee.name_parts
        if parts and (parts.first_name or parts.last_name):
            first = parts.first_name or ""
            if parts.middle_initial:
                first = f"{first} {parts.middle_initial}".strip()
            self.set_box(filler, FormW2Box.EMPLOYEE_FIRST_NAME, first)
            self.set_box(filler, FormW2Box.EMPLOYEE_LAST_NAME, parts.last_name)
            self.set_box(filler, FormW2Box.EMPLOYEE_SUFFIX, parts.suffix)
        else:
            self.set_box(filler, FormW2Box.EMPLOYEE_FIRST_NAME, employee.name)

        address = [
            employee.address.street if employee.address else None,
            format_city_state_zip(employee.address),
        ]
        self.set_box(filler, FormW2Box.EMPLOYEE_ADDRESS, "\n".join(v for v in address if v))

    def _fill_wages(self, filler: PdfFormFiller, facts: WageFacts, constants: TaxYearConstants) -> None:
        payroll = effective_payroll_boxes(facts, constants)

        self.set_box(filler, FormW2Box.BOX1_WAGES, format_tax_amount(facts.wages))
        if facts.federal_withholding > 0:
            self.set_box(filler, FormW2Box.BOX2_FEDERAL_WITHHELD, format_tax_amount(facts.federal_withholding))
        self.set_box(filler, FormW2Box.BOX3_SOCIAL_SECURITY_WAGES, format_tax_amount(payroll.social_security_wages))
        self.set_box(filler, FormW2Box.BOX4_SOCIAL_SECURITY_TAX, format_tax_amount(payroll.social_security_tax))
        self.set_box(filler, FormW2Box.BOX5_MEDICARE_WAGES, format_tax_amount(payroll.medicare_wages))
        self.set_box(filler, FormW2Box.BOX6_MEDICARE_TAX, format_tax_amount(payroll.medicare_tax))

        for name, key in _OPTIONAL_AMOUNT_BOXES:
            amount = getattr(facts, name)
            if amount > 0:
                self.set_box(filler, key, format_tax_amount(amount))

        for entry, (code_key, amount_key) in zip(facts.box12, W2_BOX_12_ROWS):
            self.set_box(filler, code_key, entry.code.strip().upper())
            self.set_box(filler, amount_key, format_tax_amount(entry.amount))

        if facts.statutory_employee:
            self.check_box(filler, FormW2Box.BOX13_STATUTORY, True)
        if facts.retirement_plan:
            self.check_box(filler, FormW2Box.BOX13_RETIREMENT, True)
        if facts.third_party_sick_pay:
            self.check_box(filler, FormW2Box.BOX13_THIRD_PARTY_SICK, True)

        self.set_box(filler, FormW2Box.BOX14_OTHER, facts.box14_other)

    def _fill_state_local(self, filler: PdfFormFiller, employer: PartyRecord, facts: WageFacts) -> None:
        for index, (row, keys) in enumerate(zip(facts.state_rows, W2_STATE_ROWS)):
            state_key, state_id_key, wages_key, tax_key = keys
            self.set_box(filler, state_key, row.state_code.upper())
            self.set_box(filler, state_id_key, row.state_id or employer.state_id_for(row.state_code, index))
            self.set_box(filler, wages_key, format_tax_amount(row.state_income or facts.wages))
            self.set_box(filler, tax_key, format_tax_amount(row.state_tax_withheld))

        for row, (wages_key, tax_key, name_key) in zip(facts.local_rows, W2_LOCAL_ROWS):
            self.set_box(filler, wages_key, format_tax_amount(row.local_wages))
            self.set_box(filler, tax_key, format_tax_amount(row.local_tax))
            self.set_box(filler, name_key, row.locality_name)

"""Form W-3: transmittal of wage and tax statements.

The W-3 accompanies the Copy A W-2s sent to the SSA and carries the
employer's totals across every W-2 issued for the year.
"""

from decimal import Decimal
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from ..field_maps import FORM_W3_FIELDS, W3_DEFERRED_COMP_CODES, FormType, FormW3Box
from ..identifiers import format_tax_amount, validate_ein
from ..models import GenerateResult, PartyRecord, PreviewResult, ValidationOutcome, WageFacts
from ..pdf_filler import PdfFormFiller
from .base import BaseFormGenerator, GenerateOptions
from .form_w2 import effective_payroll_boxes

ZERO = Decimal("0")


class W3Totals(BaseModel):
    """Employer totals across a year's W-2s."""

    form_count: int = 0
    wages: Decimal = ZERO
    federal_withholding: Decimal = ZERO
    social_security_wages: Decimal = ZERO
    social_security_tax: Decimal = ZERO
    medicare_wages: Decimal = ZERO
    medicare_tax: Decimal = ZERO
    social_security_tips: Decimal = ZERO
    allocated_tips: Decimal = ZERO
    dependent_care_benefits: Decimal = ZERO
    nonqualified_plans: Decimal = ZERO
    deferred_compensation: Decimal = ZERO
    state_wages: Decimal = ZERO
    state_tax: Decimal = ZERO
    local_wages: Decimal = ZERO
    local_tax: Decimal = ZERO


# (totals attribute, box key)
_TOTAL_BOXES = (
    ("wages", FormW3Box.BOX1_WAGES),
    ("federal_withholding", FormW3Box.BOX2_FEDERAL_WITHHELD),
    ("social_security_wages", FormW3Box.BOX3_SOCIAL_SECURITY_WAGES),
    ("social_security_tax", FormW3Box.BOX4_SOCIAL_SECURITY_TAX),
    ("medicare_wages", FormW3Box.BOX5_MEDICARE_WAGES),
    ("medicare_tax", FormW3Box.BOX6_MEDICARE_TAX),
    ("social_security_tips", FormW3Box.BOX7_SOCIAL_SECURITY_TIPS),
    ("allocated_tips", FormW3Box.BOX8_ALLOCATED_TIPS),
    ("dependent_care_benefits", FormW3Box.BOX10_DEPENDENT_CARE),
    ("nonqualified_plans", FormW3Box.BOX11_NONQUALIFIED_PLANS),
    ("deferred_compensation", FormW3Box.BOX12A_DEFERRED_COMP),
    ("state_wages", FormW3Box.BOX16_STATE_WAGES),
    ("state_tax", FormW3Box.BOX17_STATE_TAX),
    ("local_wages", FormW3Box.BOX18_LOCAL_WAGES),
    ("local_tax", FormW3Box.BOX19_LOCAL_TAX),
)


class FormW3Generator(BaseFormGenerator):
    """Totals a year's W-2 wage facts onto Form W-3.

    ``recipient`` is unused: the W-3 names only the employer.

    Example:
        result = FormW3Generator(config).generate_transmittal(
            employer, [w2_facts_a, w2_facts_b], GenerateOptions(tax_year=2024)
        )
    """

    form_type = FormType.W3
    field_map = FORM_W3_FIELDS

    def totals(self, wage_facts: Sequence[WageFacts], tax_year: Optional[int] = None) -> W3Totals:
        constants = self.constants(tax_year)
        totals = W3Totals(form_count=len(wage_facts))
        for facts in wage_facts:
            payroll = effective_payroll_boxes(facts, constants)
            totals.wages += facts.wages or ZERO
            totals.federal_withholding += facts.federal_withholding
            totals.social_security_wages += payroll.social_security_wages
            totals.social_security_tax += payroll.social_security_tax
            totals.medicare_wages += payroll.medicare_wages
            totals.medicare_tax += payroll.medicare_tax
            totals.social_security_tips += facts.social_security_tips
            totals.allocated_tips += facts.allocated_tips
            totals.dependent_care_benefits += facts.dependent_care_benefits
            totals.nonqualified_plans += facts.nonqualified_plans
            totals.deferred_compensation += sum(
                (e.amount for e in facts.box12 if e.code.strip().upper() in W3_DEFERRED_COMP_CODES),
                ZERO,
            )
            for row in facts.state_rows:
                totals.state_wages += row.state_income or facts.wages or ZERO
                totals.state_tax += row.state_tax_withheld
            for row in facts.local_rows:
                totals.local_wages += row.local_wages
                totals.local_tax += row.local_tax
        return totals

    def preview_transmittal(
        self,
        employer: Optional[PartyRecord],
        wage_facts: Sequence[WageFacts],
        tax_year: Optional[int] = None,
    ) -> PreviewResult:
        return self.preview(employer, None, list(wage_facts), tax_year)

    def generate_transmittal(
        self,
        employer: Optional[PartyRecord],
        wage_facts: Sequence[WageFacts],
        options: Optional[GenerateOptions] = None,
    ) -> GenerateResult:
        return self.generate(employer, None, list(wage_facts), options)

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def fillable(self, payer: Any, recipient: Any, facts: Any) -> bool:
        return payer is not None and bool(facts)

    def validate(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Optional[Sequence[WageFacts]],
        tax_year: Optional[int] = None,
    ) -> ValidationOutcome:
        outcome = ValidationOutcome()
        self.validate_company(payer, "Employer", outcome)

        if not facts:
            outcome.errors.append("At least one W-2 is required")
            return outcome

        for number, wage_facts in enumerate(facts, start=1):
            if wage_facts.wages is None or wage_facts.wages < 0:
                outcome.errors.append(f"W-2 #{number}: wages must be a non-negative number")
        return outcome

    def display_name(self, payer: Optional[PartyRecord], recipient: Optional[PartyRecord]) -> str:
        return (payer.filing_name if payer else None) or "Unknown Employer"

    def headline_amount(self, facts: Optional[Sequence[WageFacts]]) -> Decimal:
        return sum((f.wages or ZERO for f in facts or ()), ZERO)

    def preview_data(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Optional[Sequence[WageFacts]],
        tax_year: int,
    ) -> dict[str, Any]:
        employer = self.party_preview(payer)
        employer["ein"] = employer.pop("tin")
        totals = self.totals(facts or (), tax_year)
        return {
            "employer": employer,
            "form_count": totals.form_count,
            "totals": {name: format_tax_amount(getattr(totals, name)) for name, _ in _TOTAL_BOXES},
        }

    def fill(
        self,
        filler: PdfFormFiller,
        payer: PartyRecord,
        recipient: Optional[PartyRecord],
        facts: Sequence[WageFacts],
        tax_year: int,
    ) -> None:
        totals = self.totals(facts, tax_year)

        self.set_box(filler, FormW3Box.CONTROL_NUMBER, payer.control_number)
        self.check_box(filler, FormW3Box.KIND_OF_PAYER_941, True)
        self.check_box(filler, FormW3Box.KIND_OF_EMPLOYER_NONE, True)

        for name, key in _TOTAL_BOXES:
            amount = getattr(totals, name)
            if amount > 0:
                self.set_box(filler, key, format_tax_amount(amount))

        ein = validate_ein(payer.tax_id)
        if ein.is_valid:
            self.set_box(filler, FormW3Box.EMPLOYER_EIN, ein.formatted)
        self.set_box(filler, FormW3Box.EMPLOYER_NAME, payer.filing_name)
        if payer.address:
            self.set_box(filler, FormW3Box.EMPLOYER_ADDRESS, payer.address.street)
            self.set_box(filler, FormW3Box.EMPLOYER_CITY, payer.address.city)
            self.set_box(filler, FormW3Box.EMPLOYER_STATE, (payer.address.state or "").upper())
            self.set_box(filler, FormW3Box.EMPLOYER_ZIP, payer.address.zip_code)
        self.set_box(filler, FormW3Box.CONTACT_NAME, payer.name)
        self.set_box(filler, FormW3Box.CONTACT_PHONE, payer.phone)

        if payer.state_registrations:
            registration = payer.state_registrations[0]
            self.set_box(filler, FormW3Box.BOX15_STATE_ID, f"{registration.state_code} {registration.state_id}")

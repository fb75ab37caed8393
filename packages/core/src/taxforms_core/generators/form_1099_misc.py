"""Form 1099-MISC: rents, royalties and other miscellaneous income."""

from decimal import Decimal
from typing import Any, Optional

from ..field_maps import FORM_1099_MISC_FIELDS, Form1099MISCBox, FormType
from ..identifiers import format_tax_amount
from ..models import PartyRecord, PaymentFacts, ValidationOutcome
from ..pdf_filler import PdfFormFiller
from .form_1099 import Base1099Generator

# (facts attribute, box key) for every amount box, in form order
MISC_AMOUNT_BOXES = (
    ("rents", Form1099MISCBox.BOX1_RENTS),
    ("royalties", Form1099MISCBox.BOX2_ROYALTIES),
    ("other_income", Form1099MISCBox.BOX3_OTHER_INCOME),
    ("federal_withholding", Form1099MISCBox.BOX4_FEDERAL_WITHHELD),
    ("fishing_boat_proceeds", Form1099MISCBox.BOX5_FISHING_BOAT),
    ("medical_payments", Form1099MISCBox.BOX6_MEDICAL_PAYMENTS),
    ("substitute_payments", Form1099MISCBox.BOX8_SUBSTITUTE_PAYMENTS),
    ("crop_insurance_proceeds", Form1099MISCBox.BOX9_CROP_INSURANCE),
    ("gross_proceeds_attorney", Form1099MISCBox.BOX10_GROSS_PROCEEDS),
    ("fish_purchased_for_resale", Form1099MISCBox.BOX11_FISH_PURCHASED),
    ("section_409a_deferrals", Form1099MISCBox.BOX12_SECTION_409A),
    ("excess_golden_parachute", Form1099MISCBox.BOX14_GOLDEN_PARACHUTE),
    ("nonqualified_deferred_comp", Form1099MISCBox.BOX15_NONQUALIFIED_DEFERRED),
)


class Form1099MISCGenerator(Base1099Generator):
    """Fills Form 1099-MISC. Only boxes with a positive amount are printed."""

    form_type = FormType.MISC_1099
    field_map = FORM_1099_MISC_FIELDS
    boxes = Form1099MISCBox
    state_row_boxes = (
        (
            Form1099MISCBox.BOX16_STATE_PAYER_NUMBER,
            Form1099MISCBox.BOX17_STATE_INCOME,
            Form1099MISCBox.BOX18_STATE_TAX_WITHHELD,
        ),
        (
            Form1099MISCBox.BOX16_STATE_PAYER_NUMBER_2,
            Form1099MISCBox.BOX17_STATE_INCOME_2,
            Form1099MISCBox.BOX18_STATE_TAX_WITHHELD_2,
        ),
    )

    def validate(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Optional[PaymentFacts],
        tax_year: Optional[int] = None,
    ) -> ValidationOutcome:
        outcome = self.validate_parties(payer, recipient, facts)
        if facts is None:
            return outcome

        negative = [name for name, _ in MISC_AMOUNT_BOXES if getattr(facts, name) < 0 and name != "federal_withholding"]
        if negative:
            outcome.errors.append(f"Box amounts cannot be negative: {', '.join(negative)}")
            return outcome

        self.check_reportable_amount(facts.misc_income_total, self.constants(tax_year), outcome)
        return outcome

    def preview_data(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Optional[PaymentFacts],
        tax_year: int,
    ) -> dict[str, Any]:
        boxes = {
            key.value: format_tax_amount(getattr(facts, name) if facts else 0)
            for name, key in MISC_AMOUNT_BOXES
        }
        boxes["total"] = format_tax_amount(facts.misc_income_total if facts else 0)
        return {
            "payer": self.payer_preview(payer),
            "recipient": self.recipient_preview(recipient),
            "boxes": boxes,
            "state": self.state_rows_preview(facts),
        }

    def fill(
        self,
        filler: PdfFormFiller,
        payer: PartyRecord,
        recipient: PartyRecord,
        facts: PaymentFacts,
        tax_year: int,
    ) -> None:
        self.fill_parties(filler, payer, recipient)

        for name, key in MISC_AMOUNT_BOXES:
            amount = getattr(facts, name)
            if amount > 0:
                self.set_box(filler, key, format_tax_amount(amount))

        self.fill_state_rows(filler, payer, facts.state_rows)

    def headline_amount(self, facts: Optional[PaymentFacts]) -> Decimal:
        return facts.misc_income_total if facts else Decimal("0")

"""Form 1099-NEC: nonemployee compensation."""

from decimal import Decimal
from typing import Any, Optional

from ..field_maps import FORM_1099_NEC_FIELDS, Form1099NECBox, FormType
from ..identifiers import format_tax_amount
from ..models import PartyRecord, PaymentFacts, ValidationOutcome
from ..pdf_filler import PdfFormFiller
from .form_1099 import Base1099Generator


class Form1099NECGenerator(Base1099Generator):
    """Fills Form 1099-NEC for a contractor paid during the tax year.

    Example:
        generator = Form1099NECGenerator(config)
        facts = PaymentFacts(nonemployee_compensation=Decimal("750.00"))
        result = generator.generate(payer, contractor, facts, GenerateOptions(tax_year=2024))
        if result.success:
            Path(result.file_name).write_bytes(result.buffer)
    """

    form_type = FormType.NEC_1099
    field_map = FORM_1099_NEC_FIELDS
    boxes = Form1099NECBox
    state_row_boxes = (
        (
            Form1099NECBox.BOX5_STATE_PAYER_NUMBER,
            Form1099NECBox.BOX6_STATE_INCOME,
            Form1099NECBox.BOX7_STATE_TAX_WITHHELD,
        ),
        (
            Form1099NECBox.BOX5_STATE_PAYER_NUMBER_2,
            Form1099NECBox.BOX6_STATE_INCOME_2,
            Form1099NECBox.BOX7_STATE_TAX_WITHHELD_2,
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
        if facts is not None:
            self.check_reportable_amount(facts.nonemployee_compensation, self.constants(tax_year), outcome)
        return outcome

    def preview_data(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Optional[PaymentFacts],
        tax_year: int,
    ) -> dict[str, Any]:
        return {
            "payer": self.payer_preview(payer),
            "recipient": self.recipient_preview(recipient),
            "boxes": {
                "box1": format_tax_amount(facts.nonemployee_compensation if facts else 0),
                "box2": bool(facts and facts.direct_sales),
                "box4": format_tax_amount(facts.federal_withholding if facts else 0),
            },
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

        self.set_box(filler, Form1099NECBox.BOX1_NONEMPLOYEE_COMPENSATION, format_tax_amount(facts.nonemployee_compensation))
        if facts.direct_sales:
            self.check_box(filler, Form1099NECBox.BOX2_DIRECT_SALES, True)
        if facts.federal_withholding > 0:
            self.set_box(filler, Form1099NECBox.BOX4_FEDERAL_WITHHELD, format_tax_amount(facts.federal_withholding))

        self.fill_state_rows(filler, payer, facts.state_rows)

    def headline_amount(self, facts: Optional[PaymentFacts]) -> Decimal:
        return facts.nonemployee_compensation if facts else Decimal("0")

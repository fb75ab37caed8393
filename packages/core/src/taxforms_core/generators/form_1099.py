"""Payer and recipient blocks shared by the 1099 series."""

from typing import Any, ClassVar, Optional

from ..identifiers import format_city_state_zip, format_tax_amount, validate_ein, validate_tax_id
from ..models import PartyRecord, PaymentFacts, StateTaxRow, ValidationOutcome
from ..pdf_filler import PdfFormFiller
from .base import BaseFormGenerator


class Base1099Generator(BaseFormGenerator):
    """Common 1099 layout: payer block, recipient block, state rows.

    Subclasses set ``boxes`` to their box-key enum (member names for the
    payer and recipient blocks are identical across the series) and
    ``state_row_boxes`` to (payer state no., state income, state tax) per row.
    """

    boxes: ClassVar[Any]
    state_row_boxes: ClassVar[tuple]

    def validate_parties(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Optional[PaymentFacts],
    ) -> ValidationOutcome:
        outcome = ValidationOutcome()
        self.validate_company(payer, "Payer", outcome)
        self.validate_payee(recipient, outcome)
        if facts is None:
            outcome.errors.append("Payment data is required")
        elif facts.federal_withholding < 0:
            outcome.errors.append("Federal withholding cannot be negative")
        return outcome

    def payer_preview(self, payer: Optional[PartyRecord]) -> dict[str, str]:
        data = self.party_preview(payer)
        data["phone"] = (payer.phone or "") if payer else ""
        return data

    def recipient_preview(self, recipient: Optional[PartyRecord]) -> dict[str, str]:
        data = self.party_preview(recipient)
        data["account_number"] = (recipient.tax_form_info.account_number or "") if recipient else ""
        return data

    def state_rows_preview(self, facts: Optional[PaymentFacts]) -> list[dict[str, str]]:
        if facts is None:
            return []
        return [
            {
                "state_code": row.state_code,
                "state_income": format_tax_amount(row.state_income),
                "state_tax_withheld": format_tax_amount(row.state_tax_withheld),
            }
            for row in facts.state_rows
        ]

    def fill_parties(self, filler: PdfFormFiller, payer: PartyRecord, recipient: PartyRecord) -> None:
        boxes = self.boxes

        self.set_box(filler, boxes.PAYER_NAME, payer.filing_name)
        if payer.address:
            self.set_box(filler, boxes.PAYER_STREET, payer.address.street)
        self.set_box(filler, boxes.PAYER_CITY, format_city_state_zip(payer.address))
        self.set_box(filler, boxes.PAYER_PHONE, payer.phone)
        ein = validate_ein(payer.tax_id)
        if ein.is_valid:
            self.set_box(filler, boxes.PAYER_TIN, ein.formatted)

        tin = validate_tax_id(recipient.tax_id, recipient.declared_tax_id_kind)
        if tin.is_valid:
            self.set_box(filler, boxes.RECIPIENT_TIN, tin.formatted)
        self.set_box(filler, boxes.RECIPIENT_NAME, recipient.filing_name)
        if recipient.address:
            self.set_box(filler, boxes.RECIPIENT_STREET, recipient.address.street)
        self.set_box(filler, boxes.RECIPIENT_CITY, format_city_state_zip(recipient.address))
        self.set_box(filler, boxes.ACCOUNT_NUMBER, recipient.tax_form_info.account_number)

    def fill_state_rows(self, filler: PdfFormFiller, payer: PartyRecord, rows: list[StateTaxRow]) -> None:
        for index, (row, keys) in enumerate(zip(rows, self.state_row_boxes)):
            payer_number_key, income_key, tax_key = keys
            state_id = row.state_id or payer.state_id_for(row.state_code, index)
            self.set_box(filler, payer_number_key, f"{row.state_code} {state_id}".strip())
            self.set_box(filler, income_key, format_tax_amount(row.state_income))
            self.set_box(filler, tax_key, format_tax_amount(row.state_tax_withheld))

"""Result models returned by validators, generators and the service.

Everything here is built per request and discarded once the response has
been produced. Binary form content travels on ``GeneratedForm`` and is
excluded from the JSON-shaped summaries.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field

from ..tax_standards import format_long_date

PDF_CONTENT_TYPE = "application/pdf"


class TaxIdResult(BaseModel):
    """Outcome of validating a single SSN or EIN."""

    is_valid: bool
    formatted: Optional[str] = None
    error: Optional[str] = None


class AddressCheck(BaseModel):
    """Outcome of checking an address for filing completeness."""

    is_complete: bool
    missing_fields: list[str] = Field(default_factory=list)


class ValidationOutcome(BaseModel):
    """Errors block generation; warnings are informational only."""

    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0


class PreviewResult(BaseModel):
    """Masked, display-ready view of a form before it is generated.

    Service-level previews additionally carry the resolved record ids and the
    aggregated amount.
    """

    form_type: str
    tax_year: int
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)

    record_id: Optional[str] = None
    company_id: Optional[str] = None
    amount: Optional[Decimal] = None
    meets_threshold: Optional[bool] = None


class GeneratedForm(BaseModel):
    """A filled form document.

    Attributes:
        content: PDF bytes
        file_name: Suggested download name, ``{FormType}_{TaxYear}_{Name}.pdf``
        content_type: Always application/pdf
        form_type: 1099-NEC, 1099-MISC, W-2 or W-3
        tax_year: Tax year printed on the form
        recipient_name: Recipient or employee name as printed
        amount: Headline amount (box 1 / total income / wages)
        warnings: Validation warnings carried over from generation
    """

    content: bytes = Field(repr=False)
    file_name: str
    content_type: str = PDF_CONTENT_TYPE
    form_type: str
    tax_year: int
    recipient_name: str
    amount: Decimal
    warnings: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size(self) -> int:
        return len(self.content)


class GenerateResult(BaseModel):
    """Outcome of a single generate call."""

    success: bool
    form: Optional[GeneratedForm] = None
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def buffer(self) -> Optional[bytes]:
        return self.form.content if self.form else None

    @property
    def file_name(self) -> Optional[str]:
        return self.form.file_name if self.form else None

    @property
    def content_type(self) -> Optional[str]:
        return self.form.content_type if self.form else None

    @property
    def size(self) -> int:
        return self.form.size if self.form else 0


# =============================================================================
# BULK RUNS
# =============================================================================

class BulkGenerated(BaseModel):
    """A roster record whose form was generated."""

    record_id: str
    name: Optional[str] = None
    amount: Decimal
    form: GeneratedForm


class BulkSkipped(BaseModel):
    """A roster record that did not need (or did not get) a form."""

    record_id: str
    name: Optional[str] = None
    amount: Optional[Decimal] = None
    reason: str


class BulkFailed(BaseModel):
    """A roster record whose generation failed, with its error list."""

    record_id: str
    name: Optional[str] = None
    errors: list[str]


class BulkSummary(BaseModel):
    total: int
    generated_count: int
    skipped_count: int
    error_count: int


class BulkRunResult(BaseModel):
    """Outcome of a roster-wide run.

    Every roster record id appears in exactly one of ``generated``,
    ``skipped`` or ``errors``.
    """

    form_type: str
    tax_year: int
    generated: list[BulkGenerated] = Field(default_factory=list)
    skipped: list[BulkSkipped] = Field(default_factory=list)
    errors: list[BulkFailed] = Field(default_factory=list)
    summary: BulkSummary
    cancelled: bool = False

    def summary_payload(self) -> dict[str, Any]:
        """JSON-shaped run summary without any binary form content."""
        payload = self.model_dump(
            mode="json",
            exclude={"generated": {"__all__": {"form"}}},
        )
        for entry, generated in zip(payload["generated"], self.generated):
            entry["file_name"] = generated.form.file_name
            entry["size"] = generated.form.size
            entry["warnings"] = list(generated.form.warnings)
        return payload

    def documents(self) -> dict[str, GeneratedForm]:
        """Generated documents keyed by record id."""
        return {entry.record_id: entry.form for entry in self.generated}


# =============================================================================
# SUMMARY AND MISSING-INFO REPORTS
# =============================================================================

class RecipientFilingStatus(BaseModel):
    """One recipient's line in the tax-form summary."""

    record_id: str
    name: Optional[str] = None
    amount: Decimal
    has_tax_id: bool
    has_address: bool

    @property
    def is_missing_info(self) -> bool:
        return not (self.has_tax_id and self.has_address)


class FormGroupSummary(BaseModel):
    """Aggregate for one form group (1099-eligible or W-2 wages)."""

    form_type: str
    count: int
    total_amount: Decimal
    recipients: list[RecipientFilingStatus] = Field(default_factory=list)
    threshold: Optional[Decimal] = None
    deadline: date

    @property
    def missing_info(self) -> list[RecipientFilingStatus]:
        return [r for r in self.recipients if r.is_missing_info]


class TaxFormSummary(BaseModel):
    """Year-end filing overview for a company."""

    company_id: Optional[str] = None
    company_name: Optional[str] = None
    tax_year: int
    form_1099_nec: FormGroupSummary
    form_w2: FormGroupSummary

    @computed_field  # type: ignore[prop-decorator]
    @property
    def deadlines(self) -> dict[str, str]:
        return {
            self.form_1099_nec.form_type: format_long_date(self.form_1099_nec.deadline),
            self.form_w2.form_type: format_long_date(self.form_w2.deadline),
        }


class MissingInfoEntry(BaseModel):
    """A roster record lacking information required to file."""

    record_id: str
    name: Optional[str] = None
    role: str
    missing: list[str]


class MissingInfoReport(BaseModel):
    form_type: Optional[str] = None
    total_records: int
    missing_count: int
    records: list[MissingInfoEntry] = Field(default_factory=list)


"""Shared machinery for the form generators.

Every generator follows the same contract:

- ``validate`` collects errors and warnings without raising.
- ``preview`` runs validation and returns masked, display-ready data; it
  never loads a template.
- ``generate`` runs the same validation, stops before touching the template
  when errors are present (unless ``ignore_errors`` is set), then fills and
  renders the template.
"""

import re
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, ClassVar, Optional

import structlog
from pydantic import BaseModel, Field

from ..config import TaxFormsConfig, TaxYearConstants, get_config
from ..field_maps import FieldMap, FormType
from ..identifiers import (
    format_city_state_zip,
    mask_tax_id,
    to_decimal,
    validate_address,
    validate_ein,
    validate_tax_id,
)
from ..models import (
    GeneratedForm,
    GenerateResult,
    PartyRecord,
    PreviewResult,
    ValidationOutcome,
)
from ..pdf_filler import PdfFormFiller, TemplateStore
from ..tax_standards import default_tax_year

logger = structlog.get_logger()

_UNSAFE_FILE_CHARS = re.compile(r"[^a-zA-Z0-9]")


class GenerateOptions(BaseModel):
    """Per-call generation options.

    Attributes:
        tax_year: Tax year printed on the form; defaults to last calendar year
        ignore_errors: Fill the template even when validation found errors
        flatten: Flatten the output; None uses the configured default
    """

    tax_year: Optional[int] = Field(default=None, ge=1990, le=2100)
    ignore_errors: bool = False
    flatten: Optional[bool] = None


def safe_file_name(form_type: FormType, tax_year: int, name: str) -> str:
    """Build ``{FormType}_{TaxYear}_{SanitizedName}.pdf``."""
    return f"{form_type.file_prefix}_{tax_year}_{_UNSAFE_FILE_CHARS.sub('_', name)}.pdf"


class BaseFormGenerator(ABC):
    """Base class for one information return type."""

    form_type: ClassVar[FormType]
    field_map: ClassVar[FieldMap]

    def __init__(
        self,
        config: Optional[TaxFormsConfig] = None,
        templates: Optional[TemplateStore] = None,
    ):
        self.config = config or get_config()
        self.templates = templates or TemplateStore(self.config.template_dir)

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def validate(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Any,
        tax_year: Optional[int] = None,
    ) -> ValidationOutcome:
        """Collect errors and warnings for a payer/recipient/facts triple."""

    @abstractmethod
    def preview_data(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Any,
        tax_year: int,
    ) -> dict[str, Any]:
        """Masked, display-ready form content."""

    @abstractmethod
    def fill(
        self,
        filler: PdfFormFiller,
        payer: PartyRecord,
        recipient: PartyRecord,
        facts: Any,
        tax_year: int,
    ) -> None:
        """Write every box into the template."""

    @abstractmethod
    def headline_amount(self, facts: Any) -> Decimal:
        """Amount echoed on the result (box 1, total income or wages)."""

    def fillable(self, payer: Any, recipient: Any, facts: Any) -> bool:
        """Whether there is enough input to fill a template at all."""
        return payer is not None and recipient is not None and facts is not None

    def display_name(self, payer: Optional[PartyRecord], recipient: Optional[PartyRecord]) -> str:
        """Recipient name echoed on the result and used in the file name."""
        if recipient is not None and recipient.name:
            return recipient.name
        return "Unknown"

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------

    def preview(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Any,
        tax_year: Optional[int] = None,
    ) -> PreviewResult:
        """Validate and describe the form without loading its template."""
        tax_year = tax_year or default_tax_year()
        outcome = self.validate(payer, recipient, facts, tax_year)
        return PreviewResult(
            form_type=self.form_type.value,
            tax_year=tax_year,
            is_valid=outcome.is_valid,
            errors=outcome.errors,
            warnings=outcome.warnings,
            data=self.preview_data(payer, recipient, facts, tax_year),
        )

    def generate(
        self,
        payer: Optional[PartyRecord],
        recipient: Optional[PartyRecord],
        facts: Any,
        options: Optional[GenerateOptions] = None,
    ) -> GenerateResult:
        """Fill the template and return the rendered PDF.

        Raises:
            TemplateUnavailableError: If the template cannot be loaded
        """
        options = options or GenerateOptions()
        tax_year = options.tax_year or default_tax_year()
        outcome = self.validate(payer, recipient, facts, tax_year)

        blocked = not options.ignore_errors or not self.fillable(payer, recipient, facts)
        if not outcome.is_valid and blocked:
            logger.info(
                "form_validation_failed",
                form_type=self.form_type.value,
                tax_year=tax_year,
                error_count=len(outcome.errors),
            )
            return GenerateResult(success=False, errors=outcome.errors, warnings=outcome.warnings)

        filler = self.open_template()
        self.fill(filler, payer, recipient, facts, tax_year)
        flatten = self.config.flatten_by_default if options.flatten is None else options.flatten
        content = filler.render(flatten=flatten)

        name = self.display_name(payer, recipient)
        amount = self.headline_amount(facts)
        form = GeneratedForm(
            content=content,
            file_name=safe_file_name(self.form_type, tax_year, name),
            form_type=self.form_type.value,
            tax_year=tax_year,
            recipient_name=name,
            amount=amount,
            warnings=outcome.warnings,
        )
        logger.info(
            "form_generated",
            form_type=self.form_type.value,
            tax_year=tax_year,
            amount=str(amount),
            size=form.size,
            flatten=flatten,
            warning_count=len(outcome.warnings),
        )
        return GenerateResult(success=True, form=form, errors=outcome.errors, warnings=outcome.warnings)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def constants(self, tax_year: Optional[int]) -> TaxYearConstants:
        return self.config.constants_for(tax_year or default_tax_year())

    def open_template(self) -> PdfFormFiller:
        return PdfFormFiller(self.templates.load(self.form_type), form_type=self.form_type)

    def set_box(self, filler: PdfFormFiller, key: Any, value: Any) -> bool:
        return filler.try_set(self.field_map.locator(key), value)

    def check_box(self, filler: PdfFormFiller, key: Any, checked: bool) -> bool:
        return filler.try_check(self.field_map.locator(key), checked)

    @staticmethod
    def validate_company(
        company: Optional[PartyRecord],
        label: str,
        outcome: ValidationOutcome,
    ) -> None:
        """Payer/employer checks: EIN, name and complete address."""
        if company is None:
            outcome.errors.append(f"{label} information is required")
            return

        ein = validate_ein(company.tax_id)
        if not ein.is_valid:
            outcome.errors.append(f"{label} EIN: {ein.error}")

        if not company.filing_name:
            outcome.errors.append(f"{label} name is required")

        address = validate_address(company.address)
        if not address.is_complete:
            outcome.errors.append(
                f"{label} address incomplete: missing {', '.join(address.missing_fields)}"
            )

    @staticmethod
    def validate_payee(recipient: Optional[PartyRecord], outcome: ValidationOutcome) -> None:
        """1099 recipient checks: tax id of its declared kind, name and address."""
        if recipient is None:
            outcome.errors.append("Recipient information is required")
            return

        tax_id = validate_tax_id(recipient.tax_id, recipient.declared_tax_id_kind)
        if not tax_id.is_valid:
            outcome.errors.append(f"Recipient Tax ID: {tax_id.error}")

        if not recipient.name:
            outcome.errors.append("Recipient name is required")

        address = validate_address(recipient.address)
        if not address.is_complete:
            outcome.errors.append(
                f"Recipient address incomplete: missing {', '.join(address.missing_fields)}"
            )

    def check_reportable_amount(
        self,
        amount: Any,
        constants: TaxYearConstants,
        outcome: ValidationOutcome,
    ) -> None:
        """1099 amount checks: positive total, filing threshold, sanity ceiling."""
        value = to_decimal(amount)
        if value is None or value < 0:
            outcome.errors.append("Payment amount must be a positive number")
            return
        if value == 0:
            outcome.errors.append("At least one amount box must be greater than zero")
            return

        threshold = constants.filing_threshold
        if value < threshold:
            message = (
                f"Payment amount is below ${threshold:,.0f} threshold; "
                f"{self.form_type.value} may not be required"
            )
            if self.config.below_threshold_is_error:
                outcome.errors.append(message)
            else:
                outcome.warnings.append(message)

        if value > constants.large_amount_warning:
            outcome.warnings.append(
                f"Amount exceeds ${constants.large_amount_warning:,.0f}; please verify"
            )

    @staticmethod
    def party_preview(party: Optional[PartyRecord], kind: Any = None) -> dict[str, str]:
        """Name, address lines and masked tax id of a party."""
        if party is None:
            return {"name": "", "address": "", "city_state_zip": "", "tin": mask_tax_id(None)}
        return {
            "name": party.filing_name or "",
            "address": (party.address.street or "") if party.address else "",
            "city_state_zip": format_city_state_zip(party.address),
            "tin": mask_tax_id(party.tax_id, kind or party.declared_tax_id_kind),
        }

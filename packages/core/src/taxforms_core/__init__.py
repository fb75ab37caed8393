"""taxforms-core - Year-end information return preparation from ledger data."""

__version__ = "0.1.0"

from .config import TaxFormsConfig, TaxYearConstants, get_config
from .exceptions import (
    ConfigurationError,
    RecordNotFoundError,
    TaxFormsError,
    TemplateUnavailableError,
    ValidationError,
)
from .field_maps import FieldMap, FormType, get_field_map
from .generators import (
    Form1099MISCGenerator,
    Form1099NECGenerator,
    FormW2Generator,
    FormW3Generator,
    GenerateOptions,
)
from .identifiers import mask_tax_id, validate_address, validate_ein, validate_ssn, validate_tax_id
from .ledger import InMemoryLedger, LedgerProtocol
from .log_config import configure_logging
from .models import PartyRecord, PartyRole, PaymentFacts, WageFacts
from .pdf_filler import PdfFormFiller, TemplateStore
from .report_generator import TaxFormSummaryReportGenerator
from .service import TaxFormService, find_missing_info

__all__ = [
    "TaxFormsConfig",
    "TaxYearConstants",
    "get_config",
    "configure_logging",
    "TaxFormsError",
    "ValidationError",
    "TemplateUnavailableError",
    "RecordNotFoundError",
    "ConfigurationError",
    "FormType",
    "FieldMap",
    "get_field_map",
    "validate_ssn",
    "validate_ein",
    "validate_tax_id",
    "validate_address",
    "mask_tax_id",
    "PartyRecord",
    "PartyRole",
    "PaymentFacts",
    "WageFacts",
    "GenerateOptions",
    "Form1099NECGenerator",
    "Form1099MISCGenerator",
    "FormW2Generator",
    "FormW3Generator",
    "PdfFormFiller",
    "TemplateStore",
    "LedgerProtocol",
    "InMemoryLedger",
    "TaxFormService",
    "find_missing_info",
    "TaxFormSummaryReportGenerator",
]

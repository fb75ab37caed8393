"""Data models for taxforms-core.

This package provides:
- Party records for payers, recipients and employees (party.py)
- Box amount facts for 1099 and W-2 generation (facts.py)
- Validation, preview, generation and bulk-run results (results.py)
"""

from taxforms_core.models.facts import (
    Box12Entry,
    LocalTaxRow,
    PaymentFacts,
    StateTaxRow,
    WageFacts,
)
from taxforms_core.models.party import (
    Address,
    NameParts,
    PartyRecord,
    PartyRole,
    StateRegistration,
    TaxFormInfo,
    TaxIdKind,
)
from taxforms_core.models.results import (
    PDF_CONTENT_TYPE,
    AddressCheck,
    BulkFailed,
    BulkGenerated,
    BulkRunResult,
    BulkSkipped,
    BulkSummary,
    FormGroupSummary,
    GeneratedForm,
    GenerateResult,
    MissingInfoEntry,
    MissingInfoReport,
    PreviewResult,
    RecipientFilingStatus,
    TaxFormSummary,
    TaxIdResult,
    ValidationOutcome,
)

__all__ = [
    # Facts
    "Box12Entry",
    "LocalTaxRow",
    "PaymentFacts",
    "StateTaxRow",
    "WageFacts",
    # Parties
    "Address",
    "NameParts",
    "PartyRecord",
    "PartyRole",
    "StateRegistration",
    "TaxFormInfo",
    "TaxIdKind",
    # Results
    "PDF_CONTENT_TYPE",
    "AddressCheck",
    "BulkFailed",
    "BulkGenerated",
    "BulkRunResult",
    "BulkSkipped",
    "BulkSummary",
    "FormGroupSummary",
    "GeneratedForm",
    "GenerateResult",
    "MissingInfoEntry",
    "MissingInfoReport",
    "PreviewResult",
    "RecipientFilingStatus",
    "TaxFormSummary",
    "TaxIdResult",
    "ValidationOutcome",
]

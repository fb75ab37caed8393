#!/usr/bin/env python3
"""
Year-End Tax Forms Demonstration

This script walks through a company's year-end filing:
1. Load contractors, employees and payments into a ledger
2. Print the filing summary report and missing-information list
3. Preview a 1099-NEC and a W-2
4. Bulk-generate 1099-NECs and W-2s into ./out (needs the blank IRS templates)

Run: TAXFORMS_TEMPLATE_DIR=/path/to/templates python examples/year_end_forms_demo.py
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

from taxforms_core import (
    GenerateOptions,
    InMemoryLedger,
    PartyRecord,
    PartyRole,
    TaxFormService,
    TaxFormSummaryReportGenerator,
    TemplateUnavailableError,
    configure_logging,
    get_config,
)
from taxforms_core.models import Address, NameParts, StateRegistration

TAX_YEAR = 2024


def create_sample_ledger() -> InMemoryLedger:
    """Create a ledger with one company, three contractors and two employees."""
    company = PartyRecord(
        id="company-1",
        role=PartyRole.PAYER,
        name="Acme Consulting",
        legal_name="Acme Consulting LLC",
        tax_id="12-3456789",
        address=Address(street="100 Main St", city="Brooklyn", state="NY", zip_code="11201"),
        phone="718-555-0100",
        state_registrations=[StateRegistration(state_code="NY", state_id="987654")],
        is_default=True,
    )

    contractors = [
        PartyRecord(
            id="contractor-1",
            role=PartyRole.CONTRACTOR,
            name="Jane Roe",
            tax_id="123-45-6789",
            address=Address(street="12 Elm St", city="Queens", state="NY", zip_code="11375"),
            company_id=company.id,
        ),
        # Paid under the threshold
        PartyRecord(
            id="contractor-2",
            role=PartyRole.CONTRACTOR,
            name="Sam Lee",
            tax_id="345-67-8901",
            address=Address(street="3 Pine Rd", city="Yonkers", state="NY", zip_code="10701"),
            company_id=company.id,
        ),
        # No tax id on file
        PartyRecord(
            id="contractor-3",
            role=PartyRole.CONTRACTOR,
            name="Pat Kim",
            address=Address(street="77 Bay St", city="Staten Island", state="NY", zip_code="10301"),
            company_id=company.id,
        ),
    ]

    employees = [
        PartyRecord(
            id="employee-1",
            role=PartyRole.EMPLOYEE,
            name="John Smith",
            name_parts=NameParts(first_name="John", middle_initial="Q", last_name="Smith"),
            tax_id="234-56-7890",
            address=Address(street="8 Oak Ave", city="Bronx", state="NY", zip_code="10451"),
            company_id=company.id,
        ),
        PartyRecord(
            id="employee-2",
            role=PartyRole.EMPLOYEE,
            name="Maria Garcia",
            tax_id="456-78-9012",
            address=Address(street="21 Court St", city="Brooklyn", state="NY", zip_code="11201"),
            company_id=company.id,
        ),
    ]

    ledger = InMemoryLedger(parties=[company, *contractors, *employees])
    ledger.add_payment("contractor-1", date(TAX_YEAR, 2, 15), Decimal("4200.00"), description="Design work")
    ledger.add_payment("contractor-1", date(TAX_YEAR, 8, 1), Decimal("1800.00"), description="Site updates")
    ledger.add_payment("contractor-2", date(TAX_YEAR, 5, 10), Decimal("450.00"))
    ledger.add_payment("contractor-3", date(TAX_YEAR, 11, 20), Decimal("2500.00"))
    ledger.add_payment("employee-1", date(TAX_YEAR, 12, 31), Decimal("72000.00"))
    ledger.add_payment("employee-2", date(TAX_YEAR, 12, 31), Decimal("185000.00"))
    return ledger


def main():
    """Run the year-end walkthrough."""
    config = get_config()
    configure_logging(config=config)

    service = TaxFormService(create_sample_ledger(), config=config)

    summary = service.get_tax_form_summary("company-1", TAX_YEAR)
    print(TaxFormSummaryReportGenerator().generate(summary, format="text"))

    missing = service.get_missing_info("company-1")
    print(f"\n{missing.missing_count} of {missing.total_records} records are missing information:")
    for entry in missing.records:
        print(f"  {entry.name} ({entry.role}): {', '.join(entry.missing)}")

    nec = service.preview_1099_nec("contractor-1", tax_year=TAX_YEAR)
    print(f"\n1099-NEC preview for {nec.record_id}: ${nec.amount:,.2f}")
    for warning in nec.warnings:
        print(f"  warning: {warning}")

    w2 = service.preview_w2("employee-2", tax_year=TAX_YEAR)
    print(f"W-2 preview for {w2.record_id}: ${w2.amount:,.2f} wages")
    for warning in w2.warnings:
        print(f"  warning: {warning}")

    out_dir = Path("out")
    options = GenerateOptions(tax_year=TAX_YEAR)
    try:
        runs = [
            service.bulk_generate_1099_nec("company-1", options=options),
            service.bulk_generate_w2("company-1", options=options),
        ]
    except TemplateUnavailableError as e:
        print(f"\nSkipping PDF generation: {e}")
        print(f"Place the blank IRS forms in {config.template_dir} to generate PDFs.")
        return

    out_dir.mkdir(exist_ok=True)
    for run in runs:
        print(f"\n{run.form_type}: {run.summary.generated_count} generated, "
              f"{run.summary.skipped_count} skipped, {run.summary.error_count} failed")
        for record_id, form in run.documents().items():
            (out_dir / form.file_name).write_bytes(form.content)
            print(f"  {record_id}: {out_dir / form.file_name}")
        for skipped in run.skipped:
            print(f"  {skipped.record_id}: skipped ({skipped.reason})")
        for failed in run.errors:
            print(f"  {failed.record_id}: {'; '.join(failed.errors)}")


if __name__ == "__main__":
    main()

"""Shared fixtures for taxforms-core tests.

Form templates are built on the fly with reportlab AcroForm fields named
after the locators in ``field_maps``, so no IRS download is needed.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from taxforms_core.config import TaxFormsConfig
from taxforms_core.field_maps import FormType, get_field_map
from taxforms_core.ledger import InMemoryLedger
from taxforms_core.models import (
    Address,
    NameParts,
    PartyRecord,
    PartyRole,
    StateRegistration,
)
from taxforms_core.pdf_filler import TemplateStore

TAX_YEAR = 2024


def build_template(path: Path, locators: list[str]) -> Path:
    """Write a one-page fillable PDF with one widget per locator."""
    pdf = canvas.Canvas(str(path), pagesize=letter)
    form = pdf.acroForm
    for index, locator in enumerate(locators):
        column, row = index % 2, index // 2
        x = 40 + column * 280
        y = 740 - row * 18
        if locator.rsplit(".", 1)[-1].startswith("c1_"):
            form.checkbox(name=locator, x=x, y=y, size=12)
        else:
            form.textfield(name=locator, x=x, y=y, width=250, height=14)
    pdf.showPage()
    pdf.save()
    return path


def locators_for(form_type: FormType) -> list[str]:
    field_map = get_field_map(form_type)
    return [field_map.locator(key) for key in field_map.keys()]


@pytest.fixture(scope="session")
def template_dir(tmp_path_factory) -> Path:
    """Directory holding a generated template for every form type."""
    directory = tmp_path_factory.mktemp("templates")
    for form_type in FormType:
        build_template(directory / form_type.template_file, locators_for(form_type))
    return directory


@pytest.fixture
def config(template_dir: Path) -> TaxFormsConfig:
    return TaxFormsConfig(env="test", template_dir=template_dir, bulk_max_workers=2)


@pytest.fixture
def templates(template_dir: Path) -> TemplateStore:
    return TemplateStore(template_dir)


@pytest.fixture
def payer() -> PartyRecord:
    return PartyRecord(
        id="company-1",
        role=PartyRole.PAYER,
        name="Acme Consulting",
        legal_name="Acme Consulting LLC",
        tax_id="12-3456789",
        address=Address(street="100 Main St", city="Brooklyn", state="NY", zip_code="11201"),
        phone="718-555-0100",
        control_number="ACME-01",
        state_registrations=[StateRegistration(state_code="NY", state_id="987654")],
        is_default=True,
    )


@pytest.fixture
def contractor() -> PartyRecord:
    return PartyRecord(
        id="contractor-1",
        role=PartyRole.CONTRACTOR,
        name="Jane Roe",
        tax_id="123-45-6789",
        address=Address(street="12 Elm St", city="Queens", state="ny", zip_code="11375-1234"),
        company_id="company-1",
    )


@pytest.fixture
def employee() -> PartyRecord:
    return PartyRecord(
        id="employee-1",
        role=PartyRole.EMPLOYEE,
        name="John Smith",
        name_parts=NameParts(first_name="John", middle_initial="Q", last_name="Smith", suffix="Jr"),
        tax_id="234-56-7890",
        address=Address(street="8 Oak Ave", city="Bronx", state="NY", zip_code="10451"),
        company_id="company-1",
    )


@pytest.fixture
def ledger(payer: PartyRecord, contractor: PartyRecord, employee: PartyRecord) -> InMemoryLedger:
    """A company with one contractor paid $750 and one employee paid $50,000 in 2024."""
    ledger = InMemoryLedger(parties=[payer, contractor, employee])
    ledger.add_payment(contractor.id, date(TAX_YEAR, 3, 1), Decimal("500.00"))
    ledger.add_payment(contractor.id, date(TAX_YEAR, 9, 15), Decimal("-250.00"))
    ledger.add_payment(contractor.id, date(TAX_YEAR - 1, 12, 31), Decimal("9999.00"))
    ledger.add_payment(employee.id, date(TAX_YEAR, 6, 30), Decimal("50000.00"))
    return ledger


@pytest.fixture
def template_builder():
    """Factory writing ad-hoc fillable templates."""
    return build_template

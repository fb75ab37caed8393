"""Tests for TaxFormService orchestration and bulk runs."""

import json
import threading
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from taxforms_core.config import TaxFormsConfig
from taxforms_core.exceptions import RecordNotFoundError, TemplateUnavailableError
from taxforms_core.field_maps import FormType
from taxforms_core.generators import GenerateOptions
from taxforms_core.ledger import InMemoryLedger, LedgerProtocol
from taxforms_core.models import (
    Address,
    PartyRecord,
    PartyRole,
    TaxFormInfo,
    WageFacts,
)
from taxforms_core.service import CANCELLED_REASON, TaxFormService, find_missing_info

TAX_YEAR = 2024


def add_contractor(ledger: InMemoryLedger, record_id: str, amount: str, **overrides) -> PartyRecord:
    fields = dict(
        id=record_id,
        role=PartyRole.CONTRACTOR,
        name=record_id.replace("-", " ").title(),
        tax_id="345-67-8901",
        address=Address(street="1 Pine St", city="Albany", state="NY", zip_code="12207"),
        company_id="company-1",
    )
    fields.update(overrides)
    record = ledger.add_party(PartyRecord(**fields))
    ledger.add_payment(record_id, date(TAX_YEAR, 5, 1), Decimal(amount))
    return record


def all_ids(run) -> list[str]:
    return [e.record_id for e in run.generated] + [e.record_id for e in run.skipped] + [e.record_id for e in run.errors]


@pytest.fixture
def service(ledger: InMemoryLedger, config: TaxFormsConfig) -> TaxFormService:
    return TaxFormService(ledger, config=config)


class CancellingLedger(InMemoryLedger):
    """Sets a cancel event the first time a payment total is read."""

    def __init__(self, event: threading.Event, **kwargs):
        super().__init__(**kwargs)
        self.event = event

    def get_payment_total(self, recipient_id, start, end, kind="expense"):
        self.event.set()
        return super().get_payment_total(recipient_id, start, end, kind)


class FailingLedger(InMemoryLedger):
    """Raises for one recipient's payment total."""

    def __init__(self, failing_id: str, **kwargs):
        super().__init__(**kwargs)
        self.failing_id = failing_id

    def get_payment_total(self, recipient_id, start, end, kind="expense"):
        if recipient_id == self.failing_id:
            raise RuntimeError("ledger connection lost")
        return super().get_payment_total(recipient_id, start, end, kind)


class TestLedger:
    """The in-memory reference ledger."""

    def test_satisfies_protocol(self, ledger: InMemoryLedger):
        assert isinstance(ledger, LedgerProtocol)

    def test_totals_absolute_amounts_within_year(self, ledger: InMemoryLedger):
        assert ledger.get_payment_total("contractor-1", date(2024, 1, 1), date(2024, 12, 31)) == Decimal("750.00")
        assert ledger.get_payment_total("contractor-1", date(2023, 12, 31), date(2023, 12, 31)) == Decimal("9999.00")

    def test_other_kinds_excluded(self, ledger: InMemoryLedger):
        ledger.add_payment("contractor-1", date(2024, 2, 1), Decimal("100"), kind="income")
        assert ledger.get_payment_total("contractor-1", date(2024, 1, 1), date(2024, 12, 31)) == Decimal("750.00")

    def test_roster_by_role(self, ledger: InMemoryLedger):
        assert [p.id for p in ledger.list_roster("company-1", PartyRole.CONTRACTOR)] == ["contractor-1"]
        assert [p.id for p in ledger.list_roster("company-1", PartyRole.EMPLOYEE)] == ["employee-1"]

    def test_default_company(self, ledger: InMemoryLedger):
        ledger.add_party(PartyRecord(id="company-2", role=PartyRole.EMPLOYER, name="Other"))
        assert ledger.get_default_or_first_company().id == "company-1"


class TestResolution:
    """Record and tax year resolution."""

    def test_unknown_payee(self, service: TaxFormService):
        with pytest.raises(RecordNotFoundError) as exc_info:
            service.preview_1099_nec("nobody", tax_year=TAX_YEAR)
        assert exc_info.value.message == "Payee not found"

    def test_employee_is_not_a_payee(self, service: TaxFormService):
        with pytest.raises(RecordNotFoundError):
            service.generate_1099_nec("employee-1", tax_year=TAX_YEAR)

    def test_contractor_is_not_an_employee(self, service: TaxFormService):
        with pytest.raises(RecordNotFoundError) as exc_info:
            service.preview_w2("contractor-1", tax_year=TAX_YEAR)
        assert exc_info.value.message == "Employee not found"

    def test_unknown_explicit_company(self, service: TaxFormService):
        with pytest.raises(RecordNotFoundError) as exc_info:
            service.preview_1099_nec("contractor-1", company_id="company-9", tax_year=TAX_YEAR)
        assert exc_info.value.message == "Company not found"

    def test_no_company_at_all(self, config, contractor):
        service = TaxFormService(InMemoryLedger(parties=[contractor.model_copy(update={"company_id": None})]), config=config)
        with pytest.raises(RecordNotFoundError) as exc_info:
            service.preview_1099_nec("contractor-1", tax_year=TAX_YEAR)
        assert exc_info.value.message == "No company found for tax form"

    def test_falls_back_to_default_company(self, ledger, service: TaxFormService):
        add_contractor(ledger, "orphan", "700", company_id=None)
        preview = service.preview_1099_nec("orphan", tax_year=TAX_YEAR)
        assert preview.company_id == "company-1"

    def test_tax_year_selects_ledger_window(self, service: TaxFormService):
        assert service.preview_1099_nec("contractor-1", tax_year=2023).amount == Decimal("9999.00")


class TestSingleForms:
    """Single-record preview and generation."""

    def test_preview_1099_nec(self, service: TaxFormService):
        preview = service.preview_1099_nec("contractor-1", tax_year=TAX_YEAR)

        assert preview.is_valid
        assert preview.record_id == "contractor-1"
        assert preview.company_id == "company-1"
        assert preview.amount == Decimal("750.00")
        assert preview.meets_threshold is True
        assert preview.data["recipient"]["tin"] == "***-**-6789"

    def test_preview_below_threshold(self, ledger, service: TaxFormService):
        add_contractor(ledger, "small", "400")
        preview = service.preview_1099_nec("small", tax_year=TAX_YEAR)
        assert preview.meets_threshold is False
        assert any("amount is below $600 threshold" in w for w in preview.warnings)

    def test_generate_1099_nec(self, service: TaxFormService):
        result = service.generate_1099_nec("contractor-1", tax_year=TAX_YEAR)
        assert result.success
        assert result.file_name == "1099-NEC_2024_Jane_Roe.pdf"
        assert result.form.tax_year == TAX_YEAR
        assert result.form.amount == Decimal("750.00")

    def test_generate_1099_misc_from_ledger_total(self, service: TaxFormService):
        result = service.generate_1099_misc("contractor-1", tax_year=TAX_YEAR)
        assert result.success
        assert result.form.amount == Decimal("750.00")
        assert service.preview_1099_misc("contractor-1", tax_year=TAX_YEAR).data["boxes"]["box3_other_income"] == "750.00"

    def test_generate_w2(self, service: TaxFormService):
        result = service.generate_w2("employee-1", tax_year=TAX_YEAR)
        assert result.success
        assert result.warnings == []
        assert result.form.amount == Decimal("50000.00")

    def test_preview_w2_uses_stored_withholding(self, ledger, service: TaxFormService, employee):
        ledger.add_party(employee.model_copy(update={
            "tax_form_info": TaxFormInfo(federal_withholding=Decimal("5000"), social_security_tax=Decimal("100")),
        }))
        preview = service.preview_w2("employee-1", tax_year=TAX_YEAR)
        assert preview.data["boxes"]["box2_federal_withheld"] == "5000.00"
        assert preview.data["boxes"]["box4_ss_tax"] == "100.00"
        assert "Social Security tax does not match 6.2% of SS wages" in preview.warnings

    def test_generate_w3(self, service: TaxFormService):
        result = service.generate_w3(tax_year=TAX_YEAR)
        assert result.success
        assert result.form.form_type == "W-3"
        assert result.form.amount == Decimal("50000.00")

    def test_options_tax_year_is_used(self, service: TaxFormService):
        result = service.generate_1099_nec("contractor-1", options=GenerateOptions(tax_year=2023))
        assert result.form.tax_year == 2023
        assert result.form.amount == Decimal("9999.00")


class TestBulk1099NEC:
    """Roster-wide 1099-NEC runs."""

    @pytest.fixture
    def roster(self, ledger: InMemoryLedger) -> InMemoryLedger:
        add_contractor(ledger, "small-vendor", "400")
        add_contractor(ledger, "no-ssn", "800", tax_id=None)
        add_contractor(ledger, "big-vendor", "1200")
        return ledger

    def test_partitions_roster(self, roster, service: TaxFormService):
        run = service.bulk_generate_1099_nec("company-1", tax_year=TAX_YEAR)

        assert [e.record_id for e in run.generated] == ["contractor-1", "big-vendor"]
        assert [(e.record_id, e.reason) for e in run.skipped] == [("small-vendor", "Below $600 threshold")]
        assert [e.record_id for e in run.errors] == ["no-ssn"]
        assert "Recipient Tax ID: SSN is required" in run.errors[0].errors
        assert sorted(all_ids(run)) == sorted(["contractor-1", "small-vendor", "no-ssn", "big-vendor"])
        assert run.summary.total == 4
        assert run.summary.generated_count == 2
        assert run.summary.skipped_count == 1
        assert run.summary.error_count == 1
        assert not run.cancelled

    def test_documents_and_payload(self, roster, service: TaxFormService):
        run = service.bulk_generate_1099_nec("company-1", tax_year=TAX_YEAR)

        documents = run.documents()
        assert set(documents) == {"contractor-1", "big-vendor"}
        assert documents["big-vendor"].content.startswith(b"%PDF")

        payload = run.summary_payload()
        json.dumps(payload)
        assert payload["generated"][0]["file_name"] == "1099-NEC_2024_Jane_Roe.pdf"
        assert "form" not in payload["generated"][0]

    def test_cancelled_before_start(self, roster, service: TaxFormService):
        event = threading.Event()
        event.set()

        run = service.bulk_generate_1099_nec("company-1", tax_year=TAX_YEAR, cancel_event=event)

        assert run.cancelled
        assert run.generated == []
        assert len(run.skipped) == 4
        assert all(e.reason == CANCELLED_REASON for e in run.skipped)

    def test_cancelled_mid_run(self, template_dir, payer, contractor):
        event = threading.Event()
        ledger = CancellingLedger(event, parties=[payer, contractor])
        ledger.add_payment(contractor.id, date(TAX_YEAR, 3, 1), Decimal("750"))
        add_contractor(ledger, "second", "900")
        add_contractor(ledger, "third", "900")
        config = TaxFormsConfig(env="test", template_dir=template_dir, bulk_max_workers=1)

        run = TaxFormService(ledger, config=config).bulk_generate_1099_nec(
            "company-1", tax_year=TAX_YEAR, cancel_event=event
        )

        assert run.cancelled
        assert [e.record_id for e in run.generated] == ["contractor-1"]
        assert [(e.record_id, e.reason) for e in run.skipped] == [
            ("second", CANCELLED_REASON),
            ("third", CANCELLED_REASON),
        ]

    def test_unexpected_exception_is_isolated(self, template_dir, payer, contractor):
        ledger = FailingLedger("broken", parties=[payer, contractor])
        ledger.add_payment(contractor.id, date(TAX_YEAR, 3, 1), Decimal("750"))
        add_contractor(ledger, "broken", "900")
        config = TaxFormsConfig(env="test", template_dir=template_dir)

        run = TaxFormService(ledger, config=config).bulk_generate_1099_nec("company-1", tax_year=TAX_YEAR)

        assert [e.record_id for e in run.generated] == ["contractor-1"]
        assert run.errors[0].record_id == "broken"
        assert run.errors[0].errors == ["Unexpected error: ledger connection lost"]

    def test_missing_template_aborts(self, roster, ledger, tmp_path: Path):
        service = TaxFormService(ledger, config=TaxFormsConfig(env="test", template_dir=tmp_path))
        with pytest.raises(TemplateUnavailableError):
            service.bulk_generate_1099_nec("company-1", tax_year=TAX_YEAR)

    def test_unknown_company(self, service: TaxFormService):
        with pytest.raises(RecordNotFoundError):
            service.bulk_generate_1099_nec("company-9", tax_year=TAX_YEAR)


class TestBulkW2:
    """Roster-wide W-2 runs."""

    def test_skips_employees_without_wages(self, ledger, service: TaxFormService, employee):
        ledger.add_party(employee.model_copy(update={"id": "employee-2", "name": "Idle Worker", "name_parts": None}))

        run = service.bulk_generate_w2("company-1", tax_year=TAX_YEAR)

        assert [e.record_id for e in run.generated] == ["employee-1"]
        assert [(e.record_id, e.reason) for e in run.skipped] == [("employee-2", "No wages for tax year")]
        assert run.generated[0].form.file_name == "W-2_2024_John_Q_Smith_Jr.pdf"

    def test_partitions_roster(self, ledger, service: TaxFormService, employee):
        ledger.add_party(employee.model_copy(update={"id": "idle", "name": "Idle Worker", "name_parts": None}))
        ledger.add_party(employee.model_copy(update={"id": "no-ssn", "name": "New Hire", "name_parts": None, "tax_id": None}))
        ledger.add_payment("no-ssn", date(TAX_YEAR, 12, 15), Decimal("40000.00"))
        roster = ledger.list_roster("company-1", PartyRole.EMPLOYEE)

        run = service.bulk_generate_w2("company-1", tax_year=TAX_YEAR)

        assert [e.record_id for e in run.generated] == ["employee-1"]
        assert [(e.record_id, e.reason) for e in run.skipped] == [("idle", "No wages for tax year")]
        assert [e.record_id for e in run.errors] == ["no-ssn"]
        assert "Employee SSN: SSN is required" in run.errors[0].errors
        assert sorted(all_ids(run)) == sorted(p.id for p in roster)
        assert run.summary.total == len(roster) == 3
        assert run.summary.generated_count == 1
        assert run.summary.skipped_count == 1
        assert run.summary.error_count == 1

    def test_supplied_wage_facts_win(self, service: TaxFormService):
        run = service.bulk_generate_w2(
            "company-1",
            tax_year=TAX_YEAR,
            wage_facts_map={"employee-1": WageFacts(wages=Decimal("62000"))},
        )
        assert run.generated[0].amount == Decimal("62000")
        assert run.generated[0].form.amount == Decimal("62000")


class TestReporting:
    """Summary and missing-information reports."""

    def test_tax_form_summary(self, ledger, service: TaxFormService):
        add_contractor(ledger, "small-vendor", "400")
        add_contractor(ledger, "no-ssn", "800", tax_id=None)

        summary = service.get_tax_form_summary(tax_year=TAX_YEAR)

        assert summary.company_name == "Acme Consulting LLC"
        nec = summary.form_1099_nec
        assert nec.count == 2
        assert nec.total_amount == Decimal("1550.00")
        assert nec.threshold == Decimal("600")
        assert nec.deadline == date(2025, 1, 31)
        assert [r.record_id for r in nec.missing_info] == ["no-ssn"]
        assert summary.form_w2.count == 1
        assert summary.form_w2.total_amount == Decimal("50000.00")
        assert summary.deadlines == {"1099-NEC": "January 31, 2025", "W-2": "January 31, 2025"}

    def test_missing_info_by_form(self, ledger, service: TaxFormService, employee):
        add_contractor(ledger, "no-address", "800", address=None)
        ledger.add_party(employee.model_copy(update={"id": "employee-2", "name_parts": None}))

        nec = service.get_missing_info(form_type="1099-NEC")
        assert nec.form_type == "1099-NEC"
        assert nec.total_records == 2
        assert [(r.record_id, r.missing) for r in nec.records] == [
            ("no-address", ["Address (street, city, state, zip_code)"])
        ]

        w2 = service.get_missing_info(form_type="w2")
        assert [(r.record_id, r.missing) for r in w2.records] == [("employee-2", ["First/Last name separation"])]

        everyone = service.get_missing_info()
        assert everyone.form_type is None
        assert everyone.total_records == 4
        assert everyone.missing_count == 1

    def test_find_missing_info_name_required_for_w2(self, employee):
        nameless = employee.model_copy(update={"name": None, "name_parts": None, "tax_id": None})
        entries = find_missing_info([nameless], form_type=None)
        assert entries[0].missing == ["Tax ID"]

        entries = find_missing_info([nameless], FormType.W2)
        assert entries[0].missing == ["Tax ID", "Name"]
        assert entries[0].role == "employee"

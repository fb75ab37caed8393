"""Tests for the tax form summary report."""

from datetime import date
from decimal import Decimal

import pytest

from taxforms_core.models import FormGroupSummary, RecipientFilingStatus, TaxFormSummary
from taxforms_core.report_generator import TaxFormSummaryReportGenerator


@pytest.fixture
def summary() -> TaxFormSummary:
    deadline = date(2025, 1, 31)
    return TaxFormSummary(
        company_id="company-1",
        company_name="Acme Consulting LLC",
        tax_year=2024,
        form_1099_nec=FormGroupSummary(
            form_type="1099-NEC",
            count=2,
            total_amount=Decimal("1550.00"),
            threshold=Decimal("600"),
            deadline=deadline,
            recipients=[
                RecipientFilingStatus(
                    record_id="contractor-1", name="Jane Roe", amount=Decimal("750.00"),
                    has_tax_id=True, has_address=True,
                ),
                RecipientFilingStatus(
                    record_id="no-ssn", name="No Ssn", amount=Decimal("800.00"),
                    has_tax_id=False, has_address=True,
                ),
            ],
        ),
        form_w2=FormGroupSummary(
            form_type="W-2",
            count=0,
            total_amount=Decimal("0"),
            deadline=deadline,
        ),
    )


class TestTaxFormSummaryReportGenerator:
    """Test suite for TaxFormSummaryReportGenerator."""

    def test_text(self, summary: TaxFormSummary):
        report = TaxFormSummaryReportGenerator().generate(summary)

        assert "YEAR-END TAX FORM SUMMARY" in report
        assert "Company: Acme Consulting LLC" in report
        assert "1099-NEC ELIGIBLE CONTRACTORS" in report
        assert "$1,550.00" in report
        assert "Jane Roe" in report
        assert "[1099-NEC] No Ssn: tax ID" in report
        assert "January 31, 2025" in report
        assert report.rstrip().splitlines()[-1].startswith("DISCLAIMER")

    def test_markdown_tables(self, summary: TaxFormSummary):
        report = TaxFormSummaryReportGenerator().generate(summary, format="markdown")

        assert "## 1099-NEC Eligible Contractors" in report
        assert "| Name | Amount | Tax ID | Address |" in report
        assert "| No Ssn | $800.00 | MISSING | yes |" in report

    def test_empty_group(self, summary: TaxFormSummary):
        report = TaxFormSummaryReportGenerator().generate(summary, format="text")
        w2_section = report.split("W-2 EMPLOYEES")[1]
        assert "Forms required: 0" in w2_section
        assert "None" in w2_section

    def test_pdf(self, summary: TaxFormSummary):
        content = TaxFormSummaryReportGenerator().generate(summary, format="pdf")
        assert isinstance(content, bytes)
        assert content.startswith(b"%PDF")

    def test_unknown_format(self, summary: TaxFormSummary):
        with pytest.raises(ValueError):
            TaxFormSummaryReportGenerator().generate(summary, format="html")

"""Report generation for the year-end tax form summary.

Renders a ``TaxFormSummary`` as plain text, Markdown or PDF so a bookkeeper
can see which contractors need a 1099-NEC, which employees need a W-2, who
is still missing a tax id or address, and when everything is due.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from io import BytesIO
from typing import Optional, Union
from xml.sax.saxutils import escape

import structlog
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .models import FormGroupSummary, TaxFormSummary
from .tax_standards import format_deadline

logger = structlog.get_logger()

DISCLAIMER = (
    "This report is for informational purposes only and does not constitute "
    "tax advice. Verify recipient information before filing."
)

REPORT_FORMATS = ("text", "markdown", "pdf")


@dataclass
class ReportSection:
    """A section of the report."""
    title: str
    content: str
    rows: list[list[str]] = field(default_factory=list)


def _money(amount: Optional[Decimal]) -> str:
    return f"${(amount or Decimal('0')):,.2f}"


def _flag(present: bool) -> str:
    return "yes" if present else "MISSING"


class TaxFormSummaryReportGenerator:
    """
    Generate the year-end filing summary report.

    Reports include:
    - Company and tax year header
    - 1099-NEC eligible contractors
    - Employees with W-2 wages
    - Recipients missing a tax id or address
    - Filing deadlines
    """

    def __init__(self):
        self._sections: list[ReportSection] = []

    def generate(self, summary: TaxFormSummary, format: str = "text") -> Union[str, bytes]:
        """
        Render a tax form summary.

        Args:
            summary: Summary produced by ``TaxFormService.get_tax_form_summary``
            format: Output format ("text", "markdown", "pdf")

        Returns:
            Report string, or bytes for PDF format

        Raises:
            ValueError: If the format is not supported
        """
        if format not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {format}. Must be one of: {REPORT_FORMATS}")

        self._sections = []
        self._add_header(summary)
        self._add_group("1099-NEC Eligible Contractors", summary.form_1099_nec)
        self._add_group("W-2 Employees", summary.form_w2)
        self._add_missing_info(summary)
        self._add_deadlines(summary)

        logger.info(
            "tax_form_report_generated",
            tax_year=summary.tax_year,
            format=format,
            section_count=len(self._sections),
        )

        if format == "markdown":
            return self._format_markdown()
        if format == "pdf":
            return self._format_pdf(summary)
        return self._format_text()

    def _add_header(self, summary: TaxFormSummary) -> None:
        content = "\n".join([
            "YEAR-END TAX FORM SUMMARY",
            "=========================",
            "",
            f"Company: {summary.company_name or 'Unknown'}",
            f"Tax Year: {summary.tax_year}",
            f"Report Date: {datetime.now():%B %d, %Y}",
        ])
        self._sections.append(ReportSection(title="Header", content=content))

    def _add_group(self, title: str, group: FormGroupSummary) -> None:
        lines = [f"Forms required: {group.count}", f"Total amount: {_money(group.total_amount)}"]
        if group.threshold is not None:
            lines.append(f"Filing threshold: {_money(group.threshold)}")

        rows = [["Name", "Amount", "Tax ID", "Address"]]
        for recipient in group.recipients:
            rows.append([
                recipient.name or recipient.record_id,
                _money(recipient.amount),
                _flag(recipient.has_tax_id),
                _flag(recipient.has_address),
            ])
            lines.append(
                f"  {(recipient.name or recipient.record_id)[:30]:<30} {_money(recipient.amount):>14}"
                f"  tax id: {_flag(recipient.has_tax_id):<7}  address: {_flag(recipient.has_address)}"
            )
        if not group.recipients:
            lines.append("  None")

        self._sections.append(ReportSection(title=title, content="\n".join(lines), rows=rows))

    def _add_missing_info(self, summary: TaxFormSummary) -> None:
        lines = []
        for group in (summary.form_1099_nec, summary.form_w2):
            for recipient in group.missing_info:
                missing = []
                if not recipient.has_tax_id:
                    missing.append("tax ID")
                if not recipient.has_address:
                    missing.append("address")
                lines.append(f"  [{group.form_type}] {recipient.name or recipient.record_id}: {', '.join(missing)}")

        if not lines:
            lines.append("All recipients have a tax ID and a complete address.")
        self._sections.append(ReportSection(title="Missing Information", content="\n".join(lines)))

    def _add_deadlines(self, summary: TaxFormSummary) -> None:
        deadline = format_deadline(summary.tax_year)
        content = "\n".join([
            f"1099-NEC to recipients and IRS: {deadline}",
            f"W-2 to employees and W-3 to SSA: {deadline}",
        ])
        self._sections.append(ReportSection(title="Filing Deadlines", content=content))

    def _format_text(self) -> str:
        output = []

        for section in self._sections:
            if section.title != "Header":
                output.append("")
                output.append("=" * 60)
                output.append(section.title.upper())
                output.append("=" * 60)
            output.append(section.content)

        output.append("")
        output.append("=" * 60)
        output.append("END OF REPORT")
        output.append("=" * 60)
        output.append("")
        output.append(f"DISCLAIMER: {DISCLAIMER}")

        return "\n".join(output)

    def _format_markdown(self) -> str:
        output = []

        for section in self._sections:
            if section.title == "Header":
                output.append(section.content)
                continue

            output.append(f"\n## {section.title}\n")
            if len(section.rows) > 1:
                header, *body = section.rows
                output.append("| " + " | ".join(header) + " |")
                output.append("|" + "---|" * len(header))
                for row in body:
                    output.append("| " + " | ".join(row) + " |")
            else:
                output.append("```")
                output.append(section.content)
                output.append("```")

        output.append("\n---\n")
        output.append(f"**DISCLAIMER:** {DISCLAIMER}")

        return "\n".join(output)

    def _format_pdf(self, summary: TaxFormSummary) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=0.75 * inch,
            leftMargin=0.75 * inch,
            topMargin=0.75 * inch,
            bottomMargin=0.75 * inch,
        )

        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(
            name="ReportTitle",
            parent=styles["Heading1"],
            fontSize=18,
            spaceAfter=20,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#1a365d"),
        ))
        styles.add(ParagraphStyle(
            name="SectionHeading",
            parent=styles["Heading2"],
            fontSize=14,
            spaceAfter=12,
            spaceBefore=20,
            textColor=colors.HexColor("#2c5282"),
        ))
        styles.add(ParagraphStyle(
            name="Disclaimer",
            parent=styles["Normal"],
            fontSize=8,
            textColor=colors.grey,
            alignment=TA_CENTER,
        ))

        elements = [
            Paragraph("YEAR-END TAX FORM SUMMARY", styles["ReportTitle"]),
            Spacer(1, 0.2 * inch),
        ]

        header_table = Table(
            [
                ["Company:", summary.company_name or "Unknown"],
                ["Tax Year:", str(summary.tax_year)],
                ["Filing Deadline:", format_deadline(summary.tax_year)],
                ["Report Date:", f"{datetime.now():%B %d, %Y}"],
            ],
            colWidths=[1.5 * inch, 4 * inch],
        )
        header_table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("FONTNAME", (1, 0), (1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("ALIGN", (0, 0), (0, -1), "RIGHT"),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ]))
        elements.append(header_table)

        for section in self._sections:
            if section.title == "Header":
                continue
            elements.append(Paragraph(section.title, styles["SectionHeading"]))
            if len(section.rows) > 1:
                table = Table(section.rows, colWidths=[2.6 * inch, 1.4 * inch, 1 * inch, 1 * inch])
                table.setStyle(TableStyle([
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2c5282")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f7fafc")]),
                ]))
                elements.append(table)
            else:
                for line in section.content.splitlines():
                    elements.append(Paragraph(escape(line.strip()) or "&nbsp;", styles["Normal"]))

        elements.append(Spacer(1, 0.4 * inch))
        elements.append(Paragraph(DISCLAIMER, styles["Disclaimer"]))

        doc.build(elements)
        return buffer.getvalue()

"""Tax form orchestration.

``TaxFormService`` resolves payer and recipient records and payment totals
from the ledger, hands them to the matching form generator, and runs
roster-wide bulk generation with per-record failure isolation.

Each call is independent: the service holds references to its generators,
ledger and configuration but no per-call state, so one instance can serve
concurrent callers.

Example:
    ledger = InMemoryLedger()
    service = TaxFormService(ledger, config=TaxFormsConfig(template_dir="templates"))

    preview = service.preview_1099_nec("payee-1", tax_year=2024)
    run = service.bulk_generate_1099_nec("company-1", tax_year=2024)
    for record_id, form in run.documents().items():
        Path(form.file_name).write_bytes(form.content)
"""

import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from decimal import Decimal
from typing import Callable, Iterable, Optional, Union

import structlog

from .config import TaxFormsConfig, get_config
from .exceptions import RecordNotFoundError, TemplateUnavailableError
from .field_maps import FormType
from .generators import (
    Form1099MISCGenerator,
    Form1099NECGenerator,
    FormW2Generator,
    FormW3Generator,
    GenerateOptions,
)
from .identifiers import validate_address
from .ledger import LedgerProtocol
from .models import (
    BulkFailed,
    BulkGenerated,
    BulkRunResult,
    BulkSkipped,
    BulkSummary,
    FormGroupSummary,
    GenerateResult,
    MissingInfoEntry,
    MissingInfoReport,
    PartyRecord,
    PartyRole,
    PaymentFacts,
    PreviewResult,
    RecipientFilingStatus,
    TaxFormSummary,
    WageFacts,
)
from .pdf_filler import TemplateStore
from .tax_standards import default_tax_year, filing_deadline, tax_year_bounds

logger = structlog.get_logger()

CANCELLED_REASON = "cancelled before processing"
NO_WAGES_REASON = "No wages for tax year"

BulkOutcome = Union[BulkGenerated, BulkSkipped, BulkFailed]


def find_missing_info(
    records: Iterable[PartyRecord],
    form_type: Optional[FormType] = None,
) -> list[MissingInfoEntry]:
    """List records lacking what a filed form needs.

    Every form needs a tax id and a complete address; W-2s also need the
    employee's first and last name recorded separately.
    """
    entries = []
    for record in records:
        missing = []
        if not record.tax_id:
            missing.append("Tax ID")

        address = validate_address(record.address)
        if not address.is_complete:
            missing.append(f"Address ({', '.join(address.missing_fields)})")

        if form_type is FormType.W2:
            parts = record.name_parts
            if not (parts and parts.first_name and parts.last_name):
                missing.append("First/Last name separation" if record.name else "Name")

        if missing:
            entries.append(MissingInfoEntry(
                record_id=record.id,
                name=record.name,
                role=record.role.value,
                missing=missing,
            ))
    return entries


class TaxFormService:
    """Year-end information return preparation for a bookkeeping ledger.

    Attributes:
        ledger: Read-only ledger collaborator
        config: Statutory figures, template location and pool sizing
        nec: 1099-NEC generator
        misc: 1099-MISC generator
        w2: W-2 generator
        w3: W-3 generator
    """

    def __init__(
        self,
        ledger: LedgerProtocol,
        config: Optional[TaxFormsConfig] = None,
        templates: Optional[TemplateStore] = None,
        nec: Optional[Form1099NECGenerator] = None,
        misc: Optional[Form1099MISCGenerator] = None,
        w2: Optional[FormW2Generator] = None,
        w3: Optional[FormW3Generator] = None,
    ):
        self.ledger = ledger
        self.config = config or get_config()
        self.templates = templates or TemplateStore(self.config.template_dir)
        self.nec = nec or Form1099NECGenerator(self.config, self.templates)
        self.misc = misc or Form1099MISCGenerator(self.config, self.templates)
        self.w2 = w2 or FormW2Generator(self.config, self.templates)
        self.w3 = w3 or FormW3Generator(self.config, self.templates)

    # =========================================================================
    # Resolution
    # =========================================================================

    def _recipient(self, record_id: str, roles: tuple, label: str) -> PartyRecord:
        record = self.ledger.get_party_record(record_id)
        if record is None or record.role not in roles:
            logger.info("record_not_found", record_type=label.lower(), record_id=record_id)
            raise RecordNotFoundError(f"{label} not found", record_type=label.lower(), record_id=record_id)
        return record

    def _payee(self, payee_id: str) -> PartyRecord:
        return self._recipient(payee_id, (PartyRole.CONTRACTOR, PartyRole.RECIPIENT), "Payee")

    def _employee(self, employee_id: str) -> PartyRecord:
        return self._recipient(employee_id, (PartyRole.EMPLOYEE,), "Employee")

    def _company(self, company_id: str) -> PartyRecord:
        company = self.ledger.get_party_record(company_id)
        if company is None or not company.role.is_company:
            raise RecordNotFoundError("Company not found", record_type="company", record_id=company_id)
        return company

    def resolve_payer(self, company_id: Optional[str], recipient: Optional[PartyRecord] = None) -> PartyRecord:
        """Explicit company, else the recipient's own company, else the default or first one."""
        if company_id:
            return self._company(company_id)

        if recipient is not None and recipient.company_id:
            company = self.ledger.get_party_record(recipient.company_id)
            if company is not None and company.role.is_company:
                return company

        company = self.ledger.get_default_or_first_company()
        if company is None:
            raise RecordNotFoundError("No company found for tax form", record_type="company")
        return company

    def _year_total(self, recipient_id: str, tax_year: int) -> Decimal:
        start, end = tax_year_bounds(tax_year)
        return self.ledger.get_payment_total(recipient_id, start, end)

    @staticmethod
    def _tax_year(tax_year: Optional[int], options: Optional[GenerateOptions] = None) -> int:
        return tax_year or (options.tax_year if options else None) or default_tax_year()

    @staticmethod
    def _options_for(tax_year: int, options: Optional[GenerateOptions]) -> GenerateOptions:
        return (options or GenerateOptions()).model_copy(update={"tax_year": tax_year})

    # =========================================================================
    # Facts derivation
    # =========================================================================

    @staticmethod
    def payment_facts(recipient: PartyRecord, total: Decimal) -> PaymentFacts:
        """1099-NEC facts: ledger total plus withholding stored on the payee."""
        info = recipient.tax_form_info
        return PaymentFacts(
            nonemployee_compensation=total,
            federal_withholding=info.federal_withholding,
            state_rows=info.state_tax_rows,
        )

    @staticmethod
    def wage_facts(employee: PartyRecord, total: Decimal) -> WageFacts:
        """W-2 facts: ledger total plus withholding stored on the employee.

        Social security and Medicare figures left blank on the record are
        computed from wages by the generator.
        """
        info = employee.tax_form_info
        return WageFacts(
            wages=total,
            federal_withholding=info.federal_withholding,
            social_security_wages=info.social_security_wages,
            social_security_tax=info.social_security_tax,
            medicare_wages=info.medicare_wages,
            medicare_tax=info.medicare_tax,
            state_rows=info.state_tax_rows,
            local_rows=info.local_tax_rows,
        )

    # =========================================================================
    # 1099-NEC
    # =========================================================================

    def preview_1099_nec(
        self,
        payee_id: str,
        company_id: Optional[str] = None,
        tax_year: Optional[int] = None,
    ) -> PreviewResult:
        """Preview a payee's 1099-NEC from their ledger total for the year."""
        year = self._tax_year(tax_year)
        payee = self._payee(payee_id)
        company = self.resolve_payer(company_id, payee)
        total = self._year_total(payee.id, year)

        preview = self.nec.preview(company, payee, self.payment_facts(payee, total), year)
        return preview.model_copy(update={
            "record_id": payee.id,
            "company_id": company.id,
            "amount": total,
            "meets_threshold": total >= self.config.constants_for(year).filing_threshold,
        })

    def generate_1099_nec(
        self,
        payee_id: str,
        company_id: Optional[str] = None,
        tax_year: Optional[int] = None,
        options: Optional[GenerateOptions] = None,
    ) -> GenerateResult:
        year = self._tax_year(tax_year, options)
        payee = self._payee(payee_id)
        company = self.resolve_payer(company_id, payee)
        total = self._year_total(payee.id, year)
        return self.nec.generate(company, payee, self.payment_facts(payee, total), self._options_for(year, options))

    def bulk_generate_1099_nec(
        self,
        company_id: str,
        tax_year: Optional[int] = None,
        options: Optional[GenerateOptions] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkRunResult:
        """Generate 1099-NECs for every contractor paid at least the filing threshold.

        Contractors below the threshold are skipped. A failing record is
        reported under ``errors`` and never stops the run; only an
        unavailable template aborts it.
        """
        year = self._tax_year(tax_year, options)
        company = self._company(company_id)
        roster = self.ledger.list_roster(company.id, PartyRole.CONTRACTOR)
        threshold = self.config.constants_for(year).filing_threshold
        run_options = self._options_for(year, options)

        def process(payee: PartyRecord) -> BulkOutcome:
            total = self._year_total(payee.id, year)
            if total < threshold:
                return BulkSkipped(
                    record_id=payee.id,
                    name=payee.name,
                    amount=total,
                    reason=f"Below ${threshold:,.0f} threshold",
                )
            result = self.nec.generate(company, payee, self.payment_facts(payee, total), run_options)
            return self._bulk_outcome(payee, total, result)

        return self._run_bulk(FormType.NEC_1099, year, roster, process, cancel_event)

    # =========================================================================
    # 1099-MISC
    # =========================================================================

    def _misc_facts(self, payee: PartyRecord, facts: Optional[PaymentFacts], year: int) -> PaymentFacts:
        if facts is not None:
            return facts
        info = payee.tax_form_info
        return PaymentFacts(
            other_income=self._year_total(payee.id, year),
            federal_withholding=info.federal_withholding,
            state_rows=info.state_tax_rows[:1],
        )

    def preview_1099_misc(
        self,
        payee_id: str,
        company_id: Optional[str] = None,
        facts: Optional[PaymentFacts] = None,
        tax_year: Optional[int] = None,
    ) -> PreviewResult:
        """Preview a 1099-MISC; without explicit facts the ledger total is reported as other income."""
        year = self._tax_year(tax_year)
        payee = self._payee(payee_id)
        company = self.resolve_payer(company_id, payee)
        facts = self._misc_facts(payee, facts, year)

        preview = self.misc.preview(company, payee, facts, year)
        return preview.model_copy(update={
            "record_id": payee.id,
            "company_id": company.id,
            "amount": facts.misc_income_total,
            "meets_threshold": facts.misc_income_total >= self.config.constants_for(year).filing_threshold,
        })

    def generate_1099_misc(
        self,
        payee_id: str,
        company_id: Optional[str] = None,
        facts: Optional[PaymentFacts] = None,
        tax_year: Optional[int] = None,
        options: Optional[GenerateOptions] = None,
    ) -> GenerateResult:
        year = self._tax_year(tax_year, options)
        payee = self._payee(payee_id)
        company = self.resolve_payer(company_id, payee)
        facts = self._misc_facts(payee, facts, year)
        return self.misc.generate(company, payee, facts, self._options_for(year, options))

    # =========================================================================
    # W-2 / W-3
    # =========================================================================

    def preview_w2(
        self,
        employee_id: str,
        company_id: Optional[str] = None,
        wage_facts: Optional[WageFacts] = None,
        tax_year: Optional[int] = None,
    ) -> PreviewResult:
        """Preview a W-2; wages come from the ledger unless supplied."""
        year = self._tax_year(tax_year)
        employee = self._employee(employee_id)
        company = self.resolve_payer(company_id, employee)
        if wage_facts is None:
            wage_facts = self.wage_facts(employee, self._year_total(employee.id, year))

        preview = self.w2.preview(company, employee, wage_facts, year)
        return preview.model_copy(update={
            "record_id": employee.id,
            "company_id": company.id,
            "amount": wage_facts.wages,
        })

    def generate_w2(
        self,
        employee_id: str,
        company_id: Optional[str] = None,
        wage_facts: Optional[WageFacts] = None,
        tax_year: Optional[int] = None,
        options: Optional[GenerateOptions] = None,
    ) -> GenerateResult:
        year = self._tax_year(tax_year, options)
        employee = self._employee(employee_id)
        company = self.resolve_payer(company_id, employee)
        if wage_facts is None:
            wage_facts = self.wage_facts(employee, self._year_total(employee.id, year))
        return self.w2.generate(company, employee, wage_facts, self._options_for(year, options))

    def bulk_generate_w2(
        self,
        company_id: str,
        tax_year: Optional[int] = None,
        wage_facts_map: Optional[dict[str, WageFacts]] = None,
        options: Optional[GenerateOptions] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkRunResult:
        """Generate W-2s for every employee.

        An entry in ``wage_facts_map`` (keyed by employee id) is used as
        given; otherwise wages come from the ledger and employees without
        wages are skipped.
        """
        year = self._tax_year(tax_year, options)
        company = self._company(company_id)
        roster = self.ledger.list_roster(company.id, PartyRole.EMPLOYEE)
        wage_facts_map = wage_facts_map or {}
        run_options = self._options_for(year, options)

        def process(employee: PartyRecord) -> BulkOutcome:
            facts = wage_facts_map.get(employee.id)
            if facts is None:
                total = self._year_total(employee.id, year)
                if total == 0:
                    return BulkSkipped(record_id=employee.id, name=employee.name, amount=total, reason=NO_WAGES_REASON)
                facts = self.wage_facts(employee, total)
            result = self.w2.generate(company, employee, facts, run_options)
            return self._bulk_outcome(employee, facts.wages or Decimal("0"), result)

        return self._run_bulk(FormType.W2, year, roster, process, cancel_event)

    def generate_w3(
        self,
        company_id: Optional[str] = None,
        tax_year: Optional[int] = None,
        wage_facts_map: Optional[dict[str, WageFacts]] = None,
        options: Optional[GenerateOptions] = None,
    ) -> GenerateResult:
        """Generate the W-3 transmittal totalling every employee with wages."""
        year = self._tax_year(tax_year, options)
        company = self.resolve_payer(company_id)
        wage_facts_map = wage_facts_map or {}

        facts_list = []
        for employee in self.ledger.list_roster(company.id, PartyRole.EMPLOYEE):
            facts = wage_facts_map.get(employee.id)
            if facts is None:
                total = self._year_total(employee.id, year)
                if total == 0:
                    continue
                facts = self.wage_facts(employee, total)
            facts_list.append(facts)

        return self.w3.generate_transmittal(company, facts_list, self._options_for(year, options))

    # =========================================================================
    # Bulk runner
    # =========================================================================

    @staticmethod
    def _bulk_outcome(record: PartyRecord, amount: Decimal, result: GenerateResult) -> BulkOutcome:
        if result.success and result.form is not None:
            return BulkGenerated(record_id=record.id, name=record.name, amount=amount, form=result.form)
        return BulkFailed(record_id=record.id, name=record.name, errors=result.errors)

    def _run_bulk(
        self,
        form_type: FormType,
        tax_year: int,
        roster: list[PartyRecord],
        process: Callable[[PartyRecord], BulkOutcome],
        cancel_event: Optional[threading.Event],
    ) -> BulkRunResult:
        """Process roster records on a bounded pool.

        Scheduling stops once ``cancel_event`` is set; in-flight records
        still finish and are accounted for. Unscheduled records are reported
        as skipped so every record lands in exactly one bucket.
        """
        log = logger.bind(form_type=form_type.value, tax_year=tax_year)
        log.info("bulk_generation_started", total=len(roster), max_workers=self.config.bulk_max_workers)

        outcomes: dict[int, BulkOutcome] = {}
        position = 0
        cancelled = False

        with ThreadPoolExecutor(
            max_workers=self.config.bulk_max_workers,
            thread_name_prefix="taxforms-bulk",
        ) as pool:
            pending: dict[Future, int] = {}
            try:
                while True:
                    while not cancelled and position < len(roster) and len(pending) < self.config.bulk_max_workers:
                        if cancel_event is not None and cancel_event.is_set():
                            cancelled = True
                            break
                        pending[pool.submit(process, roster[position])] = position
                        position += 1

                    if not pending:
                        break

                    done, _ = wait(pending, return_when=FIRST_COMPLETED)
                    for future in done:
                        index = pending.pop(future)
                        outcomes[index] = self._collect(roster[index], future, log)
            except TemplateUnavailableError:
                for future in pending:
                    future.cancel()
                log.error("bulk_generation_aborted", processed=len(outcomes))
                raise

        for index in range(position, len(roster)):
            record = roster[index]
            outcomes[index] = BulkSkipped(record_id=record.id, name=record.name, reason=CANCELLED_REASON)

        generated, skipped, errors = [], [], []
        for index in range(len(roster)):
            outcome = outcomes[index]
            if isinstance(outcome, BulkGenerated):
                generated.append(outcome)
            elif isinstance(outcome, BulkSkipped):
                skipped.append(outcome)
            else:
                errors.append(outcome)

        summary = BulkSummary(
            total=len(roster),
            generated_count=len(generated),
            skipped_count=len(skipped),
            error_count=len(errors),
        )
        log.info("bulk_generation_complete", cancelled=cancelled, **summary.model_dump())
        return BulkRunResult(
            form_type=form_type.value,
            tax_year=tax_year,
            generated=generated,
            skipped=skipped,
            errors=errors,
            summary=summary,
            cancelled=cancelled,
        )

    @staticmethod
    def _collect(record: PartyRecord, future: Future, log) -> BulkOutcome:
        try:
            return future.result()
        except TemplateUnavailableError:
            raise
        except Exception as e:
            log.error("bulk_record_failed", record_id=record.id, error=str(e), exc_info=True)
            return BulkFailed(record_id=record.id, name=record.name, errors=[f"Unexpected error: {e}"])

    # =========================================================================
    # Reporting
    # =========================================================================

    def get_tax_form_summary(
        self,
        company_id: Optional[str] = None,
        tax_year: Optional[int] = None,
    ) -> TaxFormSummary:
        """Who needs a 1099-NEC or W-2 this year, totals, and who is missing information."""
        year = self._tax_year(tax_year)
        company = self.resolve_payer(company_id)
        threshold = self.config.constants_for(year).filing_threshold
        deadline = filing_deadline(year)

        contractors = []
        for payee in self.ledger.list_roster(company.id, PartyRole.CONTRACTOR):
            total = self._year_total(payee.id, year)
            if total >= threshold:
                contractors.append(self._filing_status(payee, total))

        employees = []
        for employee in self.ledger.list_roster(company.id, PartyRole.EMPLOYEE):
            total = self._year_total(employee.id, year)
            if total > 0:
                employees.append(self._filing_status(employee, total))

        return TaxFormSummary(
            company_id=company.id,
            company_name=company.filing_name,
            tax_year=year,
            form_1099_nec=FormGroupSummary(
                form_type=FormType.NEC_1099.value,
                count=len(contractors),
                total_amount=sum((r.amount for r in contractors), Decimal("0")),
                recipients=contractors,
                threshold=threshold,
                deadline=deadline,
            ),
            form_w2=FormGroupSummary(
                form_type=FormType.W2.value,
                count=len(employees),
                total_amount=sum((r.amount for r in employees), Decimal("0")),
                recipients=employees,
                deadline=deadline,
            ),
        )

    @staticmethod
    def _filing_status(record: PartyRecord, amount: Decimal) -> RecipientFilingStatus:
        return RecipientFilingStatus(
            record_id=record.id,
            name=record.name,
            amount=amount,
            has_tax_id=bool(record.tax_id),
            has_address=validate_address(record.address).is_complete,
        )

    def get_missing_info(
        self,
        company_id: Optional[str] = None,
        form_type: Optional[Union[FormType, str]] = None,
    ) -> MissingInfoReport:
        """Scan a company's contractors and/or employees for missing filing information."""
        company = self.resolve_payer(company_id)
        parsed = FormType.parse(form_type) if form_type else None

        if parsed is FormType.W2 or parsed is FormType.W3:
            records = self.ledger.list_roster(company.id, PartyRole.EMPLOYEE)
        elif parsed is not None:
            records = self.ledger.list_roster(company.id, PartyRole.CONTRACTOR)
        else:
            records = (
                self.ledger.list_roster(company.id, PartyRole.CONTRACTOR)
                + self.ledger.list_roster(company.id, PartyRole.EMPLOYEE)
            )

        missing = find_missing_info(records, FormType.W2 if parsed is FormType.W3 else parsed)
        return MissingInfoReport(
            form_type=parsed.value if parsed else None,
            total_records=len(records),
            missing_count=len(missing),
            records=missing,
        )

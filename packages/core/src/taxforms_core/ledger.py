"""Ledger collaborator interface.

The bookkeeping application owns companies, payees, employees and their
transactions. Tax form generation reads from it through the small contract
below; any object with matching methods is accepted (structural typing via
``typing.Protocol``, no inheritance required).

Example:
    ```python
    class SupabaseLedger:
        def get_party_record(self, record_id): ...
        def get_default_or_first_company(self): ...
        def get_payment_total(self, recipient_id, start, end, kind="expense"): ...
        def list_roster(self, company_id, role): ...

    service = TaxFormService(ledger=SupabaseLedger())
    ```
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Protocol, runtime_checkable

import structlog
from pydantic import BaseModel, Field

from .models import PartyRecord, PartyRole

logger = structlog.get_logger()

EXPENSE = "expense"

# Roster queries for contractors also return generic 1099 recipients
_ROSTER_ROLES = {
    PartyRole.CONTRACTOR: (PartyRole.CONTRACTOR, PartyRole.RECIPIENT),
    PartyRole.RECIPIENT: (PartyRole.CONTRACTOR, PartyRole.RECIPIENT),
    PartyRole.EMPLOYEE: (PartyRole.EMPLOYEE,),
}


@runtime_checkable
class LedgerProtocol(Protocol):
    """Read-only queries the tax form service needs from the ledger."""

    def get_party_record(self, record_id: str) -> Optional[PartyRecord]:
        """Return a company, payee or employee record, or None if unknown."""
        ...

    def get_default_or_first_company(self) -> Optional[PartyRecord]:
        """Return the caller's default company, else their first one."""
        ...

    def get_payment_total(
        self,
        recipient_id: str,
        start: date,
        end: date,
        kind: str = EXPENSE,
    ) -> Decimal:
        """Sum absolute amounts of ``kind`` entries paid to a recipient, both dates inclusive."""
        ...

    def list_roster(self, company_id: str, role: PartyRole) -> list[PartyRecord]:
        """List contractors or employees belonging to a company."""
        ...


class LedgerEntry(BaseModel):
    """A single payment recorded against a recipient."""

    model_config = {"frozen": True}

    recipient_id: str
    paid_on: date
    amount: Decimal
    kind: str = EXPENSE
    description: Optional[str] = Field(default=None, max_length=500)


class InMemoryLedger:
    """Dictionary-backed ledger for demos, tests and offline batch runs.

    Records keep insertion order, so rosters come back in the order parties
    were added.
    """

    def __init__(
        self,
        parties: Iterable[PartyRecord] = (),
        entries: Iterable[LedgerEntry] = (),
    ):
        self._parties: dict[str, PartyRecord] = {}
        self._entries: list[LedgerEntry] = []
        for party in parties:
            self.add_party(party)
        for entry in entries:
            self._entries.append(entry)

    def add_party(self, party: PartyRecord) -> PartyRecord:
        self._parties[party.id] = party
        return party

    def add_payment(
        self,
        recipient_id: str,
        on: date,
        amount: Decimal,
        kind: str = EXPENSE,
        description: Optional[str] = None,
    ) -> LedgerEntry:
        entry = LedgerEntry(
            recipient_id=recipient_id,
            paid_on=on,
            amount=Decimal(str(amount)),
            kind=kind,
            description=description,
        )
        self._entries.append(entry)
        return entry

    def get_party_record(self, record_id: str) -> Optional[PartyRecord]:
        return self._parties.get(record_id)

    def get_default_or_first_company(self) -> Optional[PartyRecord]:
        companies = [p for p in self._parties.values() if p.role.is_company]
        for company in companies:
            if company.is_default:
                return company
        return companies[0] if companies else None

    def get_payment_total(
        self,
        recipient_id: str,
        start: date,
        end: date,
        kind: str = EXPENSE,
    ) -> Decimal:
        total = sum(
            (
                abs(e.amount) for e in self._entries
                if e.recipient_id == recipient_id and e.kind == kind and start <= e.paid_on <= end
            ),
            Decimal("0"),
        )
        logger.debug("ledger_payment_total", recipient_id=recipient_id, start=str(start), end=str(end), total=str(total))
        return total

    def list_roster(self, company_id: str, role: PartyRole) -> list[PartyRecord]:
        roles = _ROSTER_ROLES.get(role, (role,))
        return [
            p for p in self._parties.values()
            if p.company_id == company_id and p.role in roles
        ]

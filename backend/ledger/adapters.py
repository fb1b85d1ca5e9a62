"""
Transaction source adapters.

One adapter per transaction kind. Each is built with an explicit session and
tenant, reads its own table for one party, and maps every record to a
LedgerLine. Adapters never write.
"""

import logging
from datetime import date
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger.exceptions import LedgerInfrastructureError
from ledger.lines import LedgerLine, LineKind
from models.expenses import Expense
from models.payments import Payment, PaymentDirection
from models.purchases import Purchase
from models.returns import Return, ReturnType
from models.sales import Sale
from utils.formatting import to_money

logger = logging.getLogger(__name__)


class TransactionAdapter:
    """Base adapter. Subclasses set `name`, `model`, `party_column`, `date_column` and implement `to_line`."""

    name = None
    model = None

    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id

    @property
    def party_column(self):
        raise NotImplementedError

    @property
    def date_column(self):
        raise NotImplementedError

    def to_line(self, record) -> LedgerLine:
        raise NotImplementedError

    def _query(self, party_id: int):
        return self.db.query(self.model).filter(
            self.model.tenant_id == self.tenant_id,
            self.party_column == party_id,
            self.model.deleted_at.is_(None),
        )

    def _run(self, query, party_id: int, date_from=None, date_to=None) -> List[LedgerLine]:
        try:
            records = query.all()
        except SQLAlchemyError as e:
            logger.error(f"{self.name} query failed for party {party_id}: {e}")
            raise LedgerInfrastructureError(
                f"Failed to read {self.name}",
                party_id=party_id,
                date_from=date_from,
                date_to=date_to,
                stage=f"fetch:{self.name}",
            ) from e
        return [self.to_line(record) for record in records]

    def fetch(self, party_id: int, date_from: date, date_to: date) -> List[LedgerLine]:
        """Lines dated within [date_from, date_to], both ends inclusive."""
        query = self._query(party_id).filter(
            self.date_column >= date_from,
            self.date_column <= date_to,
        )
        return self._run(query, party_id, date_from, date_to)

    def fetch_before(self, party_id: int, before: date) -> List[LedgerLine]:
        """Lines dated strictly before `before`; used to carry the balance forward."""
        query = self._query(party_id).filter(self.date_column < before)
        return self._run(query, party_id, date_to=before)


class SalesAdapter(TransactionAdapter):
    name = "sales"
    model = Sale

    @property
    def party_column(self):
        return Sale.billing_party_id

    @property
    def date_column(self):
        return Sale.invoice_date

    def to_line(self, record: Sale) -> LedgerLine:
        return LedgerLine(
            date=record.invoice_date,
            kind=LineKind.SALE,
            party_id=record.billing_party_id,
            reference_number=record.invoice_number,
            particulars=record.direct_entry_description or "Sale",
            credit_amount=to_money(record.grand_total),
            source_id=record.id,
        )


class PurchasesAdapter(TransactionAdapter):
    name = "purchases"
    model = Purchase

    @property
    def party_column(self):
        return Purchase.supplied_by_id

    @property
    def date_column(self):
        return Purchase.invoice_date

    def to_line(self, record: Purchase) -> LedgerLine:
        return LedgerLine(
            date=record.invoice_date,
            kind=LineKind.PURCHASE,
            party_id=record.supplied_by_id,
            reference_number=record.invoice_number,
            particulars="Purchase",
            debit_amount=to_money(record.amount),
            source_id=record.id,
        )


class ExpensesAdapter(TransactionAdapter):
    """Only expenses explicitly tied to the party; company level expenses never match."""

    name = "expenses"
    model = Expense

    @property
    def party_column(self):
        return Expense.party_id

    @property
    def date_column(self):
        return Expense.invoice_date

    def to_line(self, record: Expense) -> LedgerLine:
        return LedgerLine(
            date=record.invoice_date,
            kind=LineKind.EXPENSE,
            party_id=record.party_id,
            reference_number=record.invoice_number,
            particulars=record.description or "Expense",
            debit_amount=to_money(record.amount),
            source_id=record.id,
        )


class PaymentsAdapter(TransactionAdapter):
    name = "payments"
    model = Payment

    @property
    def party_column(self):
        return Payment.party_id

    @property
    def date_column(self):
        return Payment.payment_date

    def to_line(self, record: Payment) -> LedgerLine:
        amount = to_money(record.amount)
        if record.direction == PaymentDirection.RECEIVED:
            return LedgerLine(
                date=record.payment_date,
                kind=LineKind.PAYMENT_RECEIVED,
                party_id=record.party_id,
                reference_number=record.reference_number,
                particulars="Payment Received",
                credit_amount=amount,
                source_id=record.id,
            )
        return LedgerLine(
            date=record.payment_date,
            kind=LineKind.PAYMENT_PAID,
            party_id=record.party_id,
            reference_number=record.reference_number,
            particulars="Payment Sent",
            debit_amount=amount,
            source_id=record.id,
        )


class ReturnsAdapter(TransactionAdapter):
    name = "returns"
    model = Return

    @property
    def party_column(self):
        return Return.returned_by_id

    @property
    def date_column(self):
        return Return.return_date

    def to_line(self, record: Return) -> LedgerLine:
        amount = to_money(record.amount)
        particulars = f"Return: {record.description}" if record.description else "Return"
        if record.return_type == ReturnType.CREDIT_NOTE:
            # Customer sent goods back: offsets a sale
            return LedgerLine(
                date=record.return_date,
                kind=LineKind.RETURN_CREDIT,
                party_id=record.returned_by_id,
                reference_number=record.invoice_number,
                particulars=particulars,
                debit_amount=amount,
                source_id=record.id,
            )
        # Goods sent back to the supplier: offsets a purchase
        return LedgerLine(
            date=record.return_date,
            kind=LineKind.RETURN_DEBIT,
            party_id=record.returned_by_id,
            reference_number=record.invoice_number,
            particulars=particulars,
            credit_amount=amount,
            source_id=record.id,
        )


ADAPTER_CLASSES = (
    SalesAdapter,
    PurchasesAdapter,
    ExpensesAdapter,
    PaymentsAdapter,
    ReturnsAdapter,
)


def default_adapters(db: Session, tenant_id: str) -> List[TransactionAdapter]:
    return [adapter_class(db, tenant_id) for adapter_class in ADAPTER_CLASSES]

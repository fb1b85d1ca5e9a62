"""
Ledger Line: the normalized unit every transaction kind is mapped to.

A line is dated by its invoice/payment date, belongs to one party and moves
exactly one side of the account (debit or credit).
"""

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class LineKind(str, enum.Enum):
    SALE = "Sale"
    PURCHASE = "Purchase"
    EXPENSE = "Expense"
    PAYMENT_RECEIVED = "Payment-Received"
    PAYMENT_PAID = "Payment-Paid"
    RETURN_CREDIT = "Return-Credit"
    RETURN_DEBIT = "Return-Debit"


# Tie-break for lines sharing a date: sales, purchases, expenses, payments, returns
KIND_ORDER = {
    LineKind.SALE: 0,
    LineKind.PURCHASE: 1,
    LineKind.EXPENSE: 2,
    LineKind.PAYMENT_RECEIVED: 3,
    LineKind.PAYMENT_PAID: 4,
    LineKind.RETURN_CREDIT: 5,
    LineKind.RETURN_DEBIT: 6,
}

TYPE_LABELS = {
    LineKind.SALE: "Sale",
    LineKind.PURCHASE: "Purchase",
    LineKind.EXPENSE: "Expense",
    LineKind.PAYMENT_RECEIVED: "Payment",
    LineKind.PAYMENT_PAID: "Payment",
    LineKind.RETURN_CREDIT: "Returns: Credit Note",
    LineKind.RETURN_DEBIT: "Returns: Debit Note",
}

# Credits raise the running balance, debits lower it. Fixed for every line and every caller.
CREDIT_INCREASES_BALANCE = True

ZERO = Decimal("0.00")


class LedgerLine(BaseModel):
    date: date
    kind: LineKind
    party_id: int
    reference_number: Optional[str] = None
    particulars: str
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    source_id: int

    class Config:
        frozen = True

    @property
    def type_label(self) -> str:
        return TYPE_LABELS[self.kind]

    @property
    def signed_amount(self) -> Decimal:
        """This line's effect on the running balance."""
        if CREDIT_INCREASES_BALANCE:
            return self.credit_amount - self.debit_amount
        return self.debit_amount - self.credit_amount


class PostedLine(BaseModel):
    """A ledger line together with the balance after applying it."""
    line: LedgerLine
    running_balance: Decimal

    class Config:
        frozen = True


def balance_suffix(balance: Decimal) -> str:
    """DR/CR label for a balance under the configured sign convention."""
    if CREDIT_INCREASES_BALANCE:
        return "DR" if balance < 0 else "CR"
    return "CR" if balance < 0 else "DR"

from decimal import Decimal
from typing import Iterable, List, Optional

from pydantic import BaseModel

from ledger.exceptions import LedgerInvariantError
from ledger.lines import LedgerLine, PostedLine, ZERO
from utils.formatting import to_money


class AccumulatedLedger(BaseModel):
    opening_balance: Decimal
    lines: List[PostedLine]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal


def check_line(line: LedgerLine, stage: str = "accumulate"):
    """Reject lines no adapter should ever produce."""
    if line.debit_amount < 0 or line.credit_amount < 0:
        raise LedgerInvariantError(
            f"Negative amount on {line.kind.value} {line.source_id}",
            source_id=line.source_id,
            kind=line.kind.value,
            party_id=line.party_id,
            stage=stage,
        )
    if line.debit_amount != 0 and line.credit_amount != 0:
        raise LedgerInvariantError(
            f"Both debit and credit set on {line.kind.value} {line.source_id}",
            source_id=line.source_id,
            kind=line.kind.value,
            party_id=line.party_id,
            stage=stage,
        )


def net_effect(lines: Iterable[LedgerLine]) -> Decimal:
    """Net balance movement of `lines`, used to roll the opening balance forward."""
    total = ZERO
    for line in lines:
        check_line(line, stage="opening")
        total += line.signed_amount
    return total


def accumulate(lines: Iterable[LedgerLine], opening_balance: Optional[Decimal] = None) -> AccumulatedLedger:
    """Walk the sorted lines once, posting a running balance on each."""
    opening = to_money(opening_balance)
    balance = opening
    total_debit = ZERO
    total_credit = ZERO
    posted = []

    for line in lines:
        check_line(line)
        balance += line.signed_amount
        total_debit += line.debit_amount
        total_credit += line.credit_amount
        posted.append(PostedLine(line=line, running_balance=balance))

    return AccumulatedLedger(
        opening_balance=opening,
        lines=posted,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=balance,
    )

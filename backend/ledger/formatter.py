"""
Statement presentation.

Shapes an AccumulatedLedger for callers. Nothing here recomputes balances or
totals; every number comes straight from the accumulator.
"""

from datetime import date
from decimal import Decimal
from typing import Dict

from ledger.accumulator import AccumulatedLedger
from ledger.lines import balance_suffix
from models.parties import Party
from schemas.ledgers import (
    DateRange,
    PrintableRow,
    PrintableStatement,
    PrintableTotals,
    Statement,
    StatementEntry,
    StatementTotals,
)
from utils.formatting import amount_to_words, format_indian_number

ROW_DATE_FORMAT = "%d %b %Y"
RANGE_DATE_FORMAT = "%b %d, %Y"


def format_amount(amount: Decimal) -> str:
    """Blank for zero, grouped 2dp otherwise."""
    if not amount:
        return ""
    return format_indian_number(amount)


def format_balance(balance: Decimal) -> str:
    return f"{format_indian_number(abs(balance))} {balance_suffix(balance)}"


def format_date_range(date_from: date, date_to: date) -> str:
    return f"{date_from.strftime(RANGE_DATE_FORMAT)} to {date_to.strftime(RANGE_DATE_FORMAT)}"


def to_statement(party: Party, date_from: date, date_to: date, ledger: AccumulatedLedger) -> Statement:
    entries = [
        StatementEntry(
            date=posted.line.date,
            type=posted.line.type_label,
            kind=posted.line.kind.value,
            reference_number=posted.line.reference_number,
            particulars=posted.line.particulars,
            debit_amount=posted.line.debit_amount,
            credit_amount=posted.line.credit_amount,
            running_balance=posted.running_balance,
            balance_type=balance_suffix(posted.running_balance),
            source_id=posted.line.source_id,
        )
        for posted in ledger.lines
    ]
    return Statement(
        party_id=party.id,
        party_name=party.name,
        date_range=DateRange(date_from=date_from, date_to=date_to),
        opening_balance=ledger.opening_balance,
        opening_balance_type=balance_suffix(ledger.opening_balance),
        entries=entries,
        totals=StatementTotals(
            debit=ledger.total_debit,
            credit=ledger.total_credit,
            closing_balance=ledger.closing_balance,
            closing_balance_type=balance_suffix(ledger.closing_balance),
        ),
    )


def to_printable(
    party: Party,
    date_from: date,
    date_to: date,
    ledger: AccumulatedLedger,
    business: Dict[str, str],
) -> PrintableStatement:
    rows = [
        PrintableRow(
            date=posted.line.date.strftime(ROW_DATE_FORMAT),
            type=posted.line.type_label,
            reference_number=posted.line.reference_number or "",
            particulars=posted.line.particulars,
            debit=format_amount(posted.line.debit_amount),
            credit=format_amount(posted.line.credit_amount),
            balance=format_balance(posted.running_balance),
        )
        for posted in ledger.lines
    ]
    return PrintableStatement(
        title=f"Ledger Statement of {party.name}",
        business_name=business["business_name"],
        business_address=business["business_address"],
        party_name=party.name,
        party_address=party.address,
        pan_number=party.pan_number,
        date_range_label=format_date_range(date_from, date_to),
        currency_label=business["currency_label"],
        opening_balance=format_balance(ledger.opening_balance),
        rows=rows,
        totals=PrintableTotals(
            debit=format_indian_number(ledger.total_debit),
            credit=format_indian_number(ledger.total_credit),
            closing_balance=format_balance(ledger.closing_balance),
        ),
        closing_balance_in_words=f"{amount_to_words(abs(ledger.closing_balance))} {balance_suffix(ledger.closing_balance)}",
    )

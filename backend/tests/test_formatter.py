from datetime import date
from decimal import Decimal

from ledger.accumulator import accumulate
from ledger.formatter import format_amount, format_balance, format_date_range, to_printable, to_statement
from ledger.lines import LedgerLine, LineKind
from models.parties import Party, PartyRole

BUSINESS = {"business_name": "Green Ledger Agro", "business_address": "Kathmandu, Nepal", "currency_label": "Rs."}


def make_party():
    return Party(id=3, name="Everest Traders", address="New Road", pan_number="PAN123", role=PartyRole.CUSTOMER)


def make_ledger():
    lines = [
        LedgerLine(date=date(2024, 1, 1), kind=LineKind.SALE, party_id=3, reference_number="S-1",
                   particulars="Sale", credit_amount=Decimal("1000.00"), source_id=1),
        LedgerLine(date=date(2024, 1, 3), kind=LineKind.PAYMENT_RECEIVED, party_id=3, reference_number=None,
                   particulars="Payment Received", credit_amount=Decimal("600.00"), source_id=2),
        LedgerLine(date=date(2024, 1, 4), kind=LineKind.RETURN_CREDIT, party_id=3, reference_number="CN-1",
                   particulars="Return", debit_amount=Decimal("1800.00"), source_id=3),
    ]
    return accumulate(lines, Decimal("0"))


def test_zero_amount_is_blank():
    assert format_amount(Decimal("0")) == ""
    assert format_amount(Decimal("1234.5")) == "1,234.50"


def test_balance_carries_dr_cr_suffix():
    assert format_balance(Decimal("1400")) == "1,400.00 CR"
    assert format_balance(Decimal("-200")) == "200.00 DR"
    assert format_balance(Decimal("0")) == "0.00 CR"


def test_date_range_label():
    assert format_date_range(date(2024, 1, 1), date(2024, 3, 31)) == "Jan 01, 2024 to Mar 31, 2024"


def test_statement_mirrors_accumulated_values():
    ledger = make_ledger()

    statement = to_statement(make_party(), date(2024, 1, 1), date(2024, 1, 31), ledger)

    assert statement.party_name == "Everest Traders"
    assert [e.type for e in statement.entries] == ["Sale", "Payment", "Returns: Credit Note"]
    assert [e.kind for e in statement.entries] == ["Sale", "Payment-Received", "Return-Credit"]
    assert [e.balance_type for e in statement.entries] == ["CR", "CR", "DR"]
    assert statement.entries[-1].running_balance == Decimal("-200.00")
    assert statement.totals.debit == ledger.total_debit
    assert statement.totals.credit == ledger.total_credit
    assert statement.totals.closing_balance == ledger.closing_balance
    assert statement.totals.closing_balance_type == "DR"
    assert statement.opening_balance_type == "CR"


def test_printable_rows_are_preformatted():
    printable = to_printable(make_party(), date(2024, 1, 1), date(2024, 1, 31), make_ledger(), BUSINESS)

    first, second, third = printable.rows
    assert first.date == "01 Jan 2024"
    assert first.debit == ""
    assert first.credit == "1,000.00"
    assert first.balance == "1,000.00 CR"
    assert second.reference_number == ""
    assert third.type == "Returns: Credit Note"
    assert third.debit == "1,800.00"
    assert third.balance == "200.00 DR"

    assert printable.title == "Ledger Statement of Everest Traders"
    assert printable.business_name == "Green Ledger Agro"
    assert printable.pan_number == "PAN123"
    assert printable.opening_balance == "0.00 CR"
    assert printable.totals.debit == "1,800.00"
    assert printable.totals.credit == "1,600.00"
    assert printable.totals.closing_balance == "200.00 DR"
    assert printable.closing_balance_in_words == "Two Hundred DR"

from datetime import date
from decimal import Decimal

from ledger.lines import LedgerLine, LineKind
from ledger.merge import merge_lines


def line(day, kind, source_id, debit="0", credit="0"):
    return LedgerLine(
        date=date(2024, 1, day),
        kind=kind,
        party_id=1,
        particulars=kind.value,
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
        source_id=source_id,
    )


def test_merge_orders_by_date():
    sales = [line(5, LineKind.SALE, 1, credit="10"), line(1, LineKind.SALE, 2, credit="20")]
    payments = [line(3, LineKind.PAYMENT_RECEIVED, 9, credit="5")]

    merged = merge_lines(sales, payments)

    assert [l.date.day for l in merged] == [1, 3, 5]


def test_merge_keeps_every_line():
    batches = [
        [line(1, LineKind.SALE, 1, credit="1"), line(2, LineKind.SALE, 2, credit="1")],
        [line(1, LineKind.PURCHASE, 1, debit="1")],
        [],
        [line(4, LineKind.PAYMENT_PAID, 3, debit="1")],
        [line(4, LineKind.RETURN_DEBIT, 7, credit="1")],
    ]

    merged = merge_lines(*batches)

    assert len(merged) == sum(len(b) for b in batches)
    assert {(l.kind, l.source_id) for l in merged} == {(l.kind, l.source_id) for b in batches for l in b}


def test_same_day_lines_follow_kind_order_then_source_id():
    returns = [line(2, LineKind.RETURN_CREDIT, 1, debit="1")]
    payments = [line(2, LineKind.PAYMENT_RECEIVED, 4, credit="1"), line(2, LineKind.PAYMENT_PAID, 3, debit="1")]
    purchases = [line(2, LineKind.PURCHASE, 8, debit="1")]
    sales = [line(2, LineKind.SALE, 6, credit="1"), line(2, LineKind.SALE, 5, credit="1")]

    merged = merge_lines(returns, payments, purchases, sales)

    assert [(l.kind, l.source_id) for l in merged] == [
        (LineKind.SALE, 5),
        (LineKind.SALE, 6),
        (LineKind.PURCHASE, 8),
        (LineKind.PAYMENT_RECEIVED, 4),
        (LineKind.PAYMENT_PAID, 3),
        (LineKind.RETURN_CREDIT, 1),
    ]


def test_merge_is_independent_of_batch_order():
    a = [line(1, LineKind.SALE, 1, credit="1"), line(1, LineKind.SALE, 2, credit="1")]
    b = [line(1, LineKind.EXPENSE, 1, debit="1")]
    c = [line(1, LineKind.PAYMENT_RECEIVED, 1, credit="1")]

    assert merge_lines(a, b, c) == merge_lines(c, b, a)


def test_merge_of_nothing_is_empty():
    assert merge_lines() == []
    assert merge_lines([], []) == []

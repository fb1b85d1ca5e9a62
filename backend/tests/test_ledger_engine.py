from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from ledger import (
    InvalidDateRangeError,
    LedgerEngine,
    LedgerInfrastructureError,
    LineKind,
    PartyNotFoundError,
)
from ledger.adapters import PaymentsAdapter, SalesAdapter, default_adapters
from models.parties import PartyRole
from models.payments import PaymentDirection
from models.returns import ReturnType
from utils import local_now

from conftest import OTHER_TENANT_ID, TENANT_ID

JAN_1 = date(2024, 1, 1)
JAN_31 = date(2024, 1, 31)


def test_scenario_statement(db, scenario):
    party, ledger = LedgerEngine(db, TENANT_ID).build(scenario["party"].id, JAN_1, JAN_31)

    assert party.id == scenario["party"].id
    assert [p.line.kind for p in ledger.lines] == [LineKind.SALE, LineKind.PAYMENT_RECEIVED, LineKind.PURCHASE]
    assert [p.running_balance for p in ledger.lines] == [Decimal("1000.00"), Decimal("1600.00"), Decimal("1400.00")]
    assert ledger.total_debit == Decimal("200.00")
    assert ledger.total_credit == Decimal("1600.00")
    assert ledger.closing_balance == Decimal("1400.00")


def test_every_kind_appears_exactly_once(db, make_party, make_sale, make_purchase, make_payment, make_return, make_expense):
    party = make_party(role=PartyRole.VENDOR)
    records = {
        (LineKind.SALE, make_sale(party, "500", date(2024, 1, 2)).id),
        (LineKind.PURCHASE, make_purchase(party, "300", date(2024, 1, 3)).id),
        (LineKind.EXPENSE, make_expense("40", date(2024, 1, 4), party=party).id),
        (LineKind.PAYMENT_RECEIVED, make_payment(party, "100", date(2024, 1, 5)).id),
        (LineKind.PAYMENT_PAID, make_payment(party, "60", date(2024, 1, 6), direction=PaymentDirection.PAID).id),
        (LineKind.RETURN_CREDIT, make_return(party, "25", date(2024, 1, 7)).id),
        (LineKind.RETURN_DEBIT, make_return(party, "15", date(2024, 1, 8), return_type=ReturnType.DEBIT_NOTE, invoice_number="DN-1").id),
    }

    _, ledger = LedgerEngine(db, TENANT_ID).build(party.id, JAN_1, JAN_31)

    seen = [(p.line.kind, p.line.source_id) for p in ledger.lines]
    assert len(seen) == len(records)
    assert set(seen) == records
    # 500 - 300 - 40 + 100 - 60 - 25 + 15
    assert ledger.closing_balance == Decimal("190.00")


def test_boundary_dates_are_inclusive(db, make_party, make_sale):
    party = make_party()
    make_sale(party, "1", date(2023, 12, 31), invoice_number="before")
    on_start = make_sale(party, "2", JAN_1, invoice_number="start")
    on_end = make_sale(party, "3", JAN_31, invoice_number="end")
    make_sale(party, "4", date(2024, 2, 1), invoice_number="after")

    _, ledger = LedgerEngine(db, TENANT_ID).build(party.id, JAN_1, JAN_31)

    assert [p.line.source_id for p in ledger.lines] == [on_start.id, on_end.id]


def test_prior_lines_roll_into_opening_balance(db, make_party, make_sale, make_payment):
    party = make_party(opening_balance=Decimal("100.00"))
    make_sale(party, "400", date(2023, 12, 15))
    make_payment(party, "50", date(2023, 12, 20), direction=PaymentDirection.PAID)
    make_sale(party, "10", date(2024, 1, 10))

    _, ledger = LedgerEngine(db, TENANT_ID).build(party.id, JAN_1, JAN_31)

    assert ledger.opening_balance == Decimal("450.00")
    assert ledger.closing_balance == Decimal("460.00")


def test_empty_range_returns_opening_balance(db, make_party):
    party = make_party(opening_balance=Decimal("-75.00"))

    _, ledger = LedgerEngine(db, TENANT_ID).build(party.id, JAN_1, JAN_31)

    assert ledger.lines == []
    assert ledger.total_debit == Decimal("0")
    assert ledger.total_credit == Decimal("0")
    assert ledger.closing_balance == Decimal("-75.00")


def test_company_expenses_stay_out_of_party_ledgers(db, make_party, make_expense):
    party = make_party()
    make_expense("999", date(2024, 1, 5))
    tied = make_expense("20", date(2024, 1, 6), party=party)

    _, ledger = LedgerEngine(db, TENANT_ID).build(party.id, JAN_1, JAN_31)

    assert [(p.line.kind, p.line.source_id) for p in ledger.lines] == [(LineKind.EXPENSE, tied.id)]


def test_soft_deleted_and_foreign_tenant_records_are_ignored(db, make_party, make_sale):
    party = make_party()
    kept = make_sale(party, "100", date(2024, 1, 5))
    deleted = make_sale(party, "200", date(2024, 1, 6), invoice_number="S-002")
    deleted.deleted_at = local_now()
    deleted.deleted_by = "tester"
    db.commit()
    make_sale(party, "300", date(2024, 1, 7), invoice_number="S-003", tenant_id=OTHER_TENANT_ID)

    _, ledger = LedgerEngine(db, TENANT_ID).build(party.id, JAN_1, JAN_31)

    assert [p.line.source_id for p in ledger.lines] == [kept.id]


def test_repeated_builds_are_identical(db, make_party, make_sale, make_payment, make_purchase):
    party = make_party()
    for n in range(3):
        make_sale(party, "10", date(2024, 1, 2), invoice_number=f"S-{n}")
        make_purchase(party, "5", date(2024, 1, 2), invoice_number=f"P-{n}")
        make_payment(party, "1", date(2024, 1, 2))

    engine = LedgerEngine(db, TENANT_ID)
    first = engine.build(party.id, JAN_1, JAN_31)[1]
    second = engine.build(party.id, JAN_1, JAN_31)[1]

    assert first == second
    assert [p.line.kind for p in first.lines[:3]] == [LineKind.SALE] * 3


def test_unknown_party(db):
    with pytest.raises(PartyNotFoundError) as exc_info:
        LedgerEngine(db, TENANT_ID).build(404, JAN_1, JAN_31)
    assert exc_info.value.party_id == 404


def test_party_of_another_tenant_is_not_found(db, make_party):
    party = make_party(tenant_id=OTHER_TENANT_ID)

    with pytest.raises(PartyNotFoundError):
        LedgerEngine(db, TENANT_ID).build(party.id, JAN_1, JAN_31)


def test_inverted_range(db, make_party):
    party = make_party()

    with pytest.raises(InvalidDateRangeError) as exc_info:
        LedgerEngine(db, TENANT_ID).build(party.id, JAN_31, JAN_1)
    assert exc_info.value.stage == "validate"


def test_failing_adapter_fails_the_whole_statement(db, make_party, make_sale):
    party = make_party()
    make_sale(party, "100", date(2024, 1, 5))

    class FailingQuery:
        def filter(self, *criteria):
            return self

        def all(self):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    class BrokenPayments(PaymentsAdapter):
        def _query(self, party_id):
            return FailingQuery()

    adapters = [SalesAdapter(db, TENANT_ID), BrokenPayments(db, TENANT_ID)]

    with pytest.raises(LedgerInfrastructureError) as exc_info:
        LedgerEngine(db, TENANT_ID, adapters=adapters).build(party.id, JAN_1, JAN_31)
    assert exc_info.value.stage == "fetch:payments"


def test_default_adapters_cover_every_source(db):
    names = [adapter.name for adapter in default_adapters(db, TENANT_ID)]
    assert names == ["sales", "purchases", "expenses", "payments", "returns"]


def test_unknown_party_wins_over_inverted_range(db):
    with pytest.raises(PartyNotFoundError):
        LedgerEngine(db, TENANT_ID).build(404, JAN_31, JAN_1)

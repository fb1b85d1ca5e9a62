from datetime import date
from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.orm import Session

from models.expenses import Expense
from models.parties import Party
from models.payments import Payment, PaymentDirection
from models.purchases import Purchase
from models.returns import Return
from models.sales import Sale
from schemas.stats import DashboardCards, StatCard


def _card(db: Session, amount_column, date_column, tenant_id: str, start_date: date, end_date: date, *criteria) -> StatCard:
    model = amount_column.class_
    total, count = db.query(func.sum(amount_column), func.count(model.id)).filter(
        model.tenant_id == tenant_id,
        date_column >= start_date,
        date_column <= end_date,
        model.deleted_at.is_(None),
        *criteria
    ).one()
    return StatCard(total=Decimal(total or 0).quantize(Decimal("0.01")), count=count or 0)


def get_dashboard_cards(db: Session, start_date: date, end_date: date, tenant_id: str) -> DashboardCards:
    party_count = db.query(func.count(Party.id)).filter(
        Party.tenant_id == tenant_id,
        Party.deleted_at.is_(None)
    ).scalar() or 0

    return DashboardCards(
        date_from=start_date,
        date_to=end_date,
        sales=_card(db, Sale.grand_total, Sale.invoice_date, tenant_id, start_date, end_date),
        purchases=_card(db, Purchase.amount, Purchase.invoice_date, tenant_id, start_date, end_date),
        expenses=_card(db, Expense.amount, Expense.invoice_date, tenant_id, start_date, end_date),
        payments_received=_card(db, Payment.amount, Payment.payment_date, tenant_id, start_date, end_date,
                                Payment.direction == PaymentDirection.RECEIVED),
        payments_paid=_card(db, Payment.amount, Payment.payment_date, tenant_id, start_date, end_date,
                            Payment.direction == PaymentDirection.PAID),
        returns=_card(db, Return.amount, Return.return_date, tenant_id, start_date, end_date),
        party_count=party_count,
    )

"""
Shared test configuration.

The app runs against a single in-memory SQLite connection (see database.py)
and Cognito auth is replaced with a fixed user through dependency overrides.
"""

import os
import tempfile

# Must be set before database/main are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "greenledger-test-logs"))

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from models.expense_categories import ExpenseCategory
from models.expenses import Expense
from models.parties import Party, PartyRole
from models.payments import Payment, PaymentDirection, PaymentType
from models.products import Product
from models.purchases import Purchase
from models.returns import Return, ReturnType
from models.sales import Sale
from utils.auth_utils import get_current_user

TENANT_ID = "tenant-a"
OTHER_TENANT_ID = "tenant-b"


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test function and drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(setup_database):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user():
    return {"sub": "user-1", "email": "accountant@example.com", "cognito:groups": ["admin"]}


@pytest.fixture
def client(user):
    app.dependency_overrides[get_current_user] = lambda: user
    with TestClient(app, headers={"X-Tenant-ID": TENANT_ID}) as test_client:
        yield test_client
    app.dependency_overrides = {}


# Seed helpers. Each returns a factory that commits one row and returns it.

@pytest.fixture
def make_party(db):
    counter = {"n": 0}

    def factory(name="Everest Traders", role=PartyRole.CUSTOMER, opening_balance=Decimal("0"), tenant_id=TENANT_ID, **kwargs):
        counter["n"] += 1
        party = Party(
            tenant_id=tenant_id,
            name=name,
            phone=kwargs.pop("phone", "9800000000"),
            address=kwargs.pop("address", "New Road, Kathmandu"),
            pan_number=kwargs.pop("pan_number", f"PAN{counter['n']:05d}"),
            role=role,
            opening_balance=opening_balance,
            **kwargs,
        )
        db.add(party)
        db.commit()
        db.refresh(party)
        return party
    return factory


@pytest.fixture
def make_product(db):
    def factory(name="Organic Fertilizer", mrp=Decimal("113.00"), tenant_id=TENANT_ID, **kwargs):
        product = Product(tenant_id=tenant_id, name=name, mrp=mrp, **kwargs)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return factory


@pytest.fixture
def make_sale(db):
    def factory(party, grand_total, invoice_date, invoice_number="S-001", tenant_id=TENANT_ID, **kwargs):
        sale = Sale(
            tenant_id=tenant_id,
            billing_party_id=party.id,
            invoice_number=invoice_number,
            invoice_date=invoice_date,
            grand_total=Decimal(grand_total),
            **kwargs,
        )
        db.add(sale)
        db.commit()
        db.refresh(sale)
        return sale
    return factory


@pytest.fixture
def make_purchase(db):
    def factory(party, amount, invoice_date, invoice_number="P-001", tenant_id=TENANT_ID, **kwargs):
        purchase = Purchase(
            tenant_id=tenant_id,
            supplied_by_id=party.id,
            invoice_number=invoice_number,
            invoice_date=invoice_date,
            amount=Decimal(amount),
            description=kwargs.pop("description", "Seeds"),
            **kwargs,
        )
        db.add(purchase)
        db.commit()
        db.refresh(purchase)
        return purchase
    return factory


@pytest.fixture
def make_payment(db):
    def factory(party, amount, payment_date, direction=PaymentDirection.RECEIVED, tenant_id=TENANT_ID, **kwargs):
        payment = Payment(
            tenant_id=tenant_id,
            party_id=party.id,
            payment_type=kwargs.pop("payment_type", PaymentType.CASH),
            direction=direction,
            amount=Decimal(amount),
            payment_date=payment_date,
            **kwargs,
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment
    return factory


@pytest.fixture
def make_return(db):
    def factory(party, amount, return_date, return_type=ReturnType.CREDIT_NOTE, invoice_number="CN-001", tenant_id=TENANT_ID, **kwargs):
        db_return = Return(
            tenant_id=tenant_id,
            returned_by_id=party.id,
            return_type=return_type,
            invoice_number=invoice_number,
            return_date=return_date,
            amount=Decimal(amount),
            **kwargs,
        )
        db.add(db_return)
        db.commit()
        db.refresh(db_return)
        return db_return
    return factory


@pytest.fixture
def expense_category(db):
    category = ExpenseCategory(tenant_id=TENANT_ID, name="Transport")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_expense(db, expense_category):
    def factory(amount, invoice_date, party=None, tenant_id=TENANT_ID, **kwargs):
        expense = Expense(
            tenant_id=tenant_id,
            category_id=expense_category.id,
            party_id=party.id if party else None,
            invoice_date=invoice_date,
            amount=Decimal(amount),
            description=kwargs.pop("description", "Truck hire"),
            **kwargs,
        )
        db.add(expense)
        db.commit()
        db.refresh(expense)
        return expense
    return factory


@pytest.fixture
def scenario(make_party, make_sale, make_payment, make_purchase):
    """Sale 1000 on day 1, payment received 600 on day 3, purchase 200 on day 5."""
    party = make_party()
    sale = make_sale(party, "1000.00", date(2024, 1, 1))
    payment = make_payment(party, "600.00", date(2024, 1, 3), reference_number="CHQ-77")
    purchase = make_purchase(party, "200.00", date(2024, 1, 5))
    return {"party": party, "sale": sale, "payment": payment, "purchase": purchase}

from datetime import date
from decimal import Decimal


def test_category_crud(client):
    created = client.post("/expense-categories/", json={"name": "Fuel"})
    assert created.status_code == 201
    category_id = created.json()["id"]

    assert client.post("/expense-categories/", json={"name": "Fuel"}).status_code == 400

    renamed = client.patch(f"/expense-categories/{category_id}", json={"description": "Diesel and petrol"})
    assert renamed.json()["description"] == "Diesel and petrol"

    assert [c["name"] for c in client.get("/expense-categories/").json()] == ["Fuel"]
    assert client.delete(f"/expense-categories/{category_id}").status_code == 204
    assert client.get("/expense-categories/").json() == []


def test_category_in_use_cannot_be_deleted(client, expense_category, make_expense):
    make_expense("10", date(2024, 5, 1))

    assert client.delete(f"/expense-categories/{expense_category.id}").status_code == 409


def test_create_company_expense(client, expense_category):
    response = client.post("/expenses/", json={
        "category_id": expense_category.id,
        "invoice_date": "2024-05-03",
        "amount": "1500.00",
        "description": "Office rent",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["party_id"] is None
    assert body["created_by"] == "accountant@example.com"


def test_expense_with_unknown_category_is_404(client):
    response = client.post("/expenses/", json={
        "category_id": 77,
        "invoice_date": "2024-05-03",
        "amount": "10",
        "description": "Tea",
    })
    assert response.status_code == 404


def test_party_expense_is_debited_to_the_party(client, expense_category, make_party):
    party = make_party()
    client.post("/expenses/", json={
        "category_id": expense_category.id,
        "party_id": party.id,
        "invoice_number": "TR-5",
        "invoice_date": "2024-05-03",
        "amount": "320.00",
        "description": "Freight to Butwal",
    })

    body = client.get(f"/ledgers/party/{party.id}", params={"from": "2024-05-01", "to": "2024-05-31"}).json()

    entry = body["entries"][0]
    assert entry["type"] == "Expense"
    assert entry["particulars"] == "Freight to Butwal"
    assert Decimal(entry["debit_amount"]) == Decimal("320")
    assert body["totals"]["closing_balance_type"] == "DR"


def test_list_expenses_by_range_and_category(client, expense_category, make_expense):
    inside = make_expense("10", date(2024, 5, 2))
    make_expense("20", date(2024, 6, 2))

    body = client.get("/expenses/", params={"start_date": "2024-05-01", "end_date": "2024-05-31", "category_id": expense_category.id}).json()

    assert [e["id"] for e in body] == [inside.id]


def test_update_and_delete_expense(client, db, make_expense):
    from models.audit_log import AuditLog

    expense = make_expense("10", date(2024, 5, 2))

    updated = client.patch(f"/expenses/{expense.id}", json={"amount": "12.50"})
    assert Decimal(updated.json()["amount"]) == Decimal("12.50")

    assert client.delete(f"/expenses/{expense.id}").status_code == 204
    assert client.get(f"/expenses/{expense.id}").status_code == 404
    assert [log.action for log in db.query(AuditLog).order_by(AuditLog.id)] == ["UPDATE", "DELETE"]


def test_name_of_deleted_category_cannot_be_reused(client):
    category_id = client.post("/expense-categories/", json={"name": "Fuel"}).json()["id"]
    client.delete(f"/expense-categories/{category_id}")

    response = client.post("/expense-categories/", json={"name": "Fuel"})

    assert response.status_code == 400
    assert "deleted" in response.json()["detail"]


def test_null_category_name_is_422(client, expense_category):
    response = client.patch(f"/expense-categories/{expense_category.id}", json={"name": None})
    assert response.status_code == 422

from datetime import date
from decimal import Decimal

from crud.audit_log import get_audit_trail

from conftest import TENANT_ID

PARTY = {
    "name": "Annapurna Seeds",
    "phone": "9851000000",
    "address": "Pokhara",
    "pan_number": "601234567",
    "role": "supplier",
    "email": "sales@annapurna.example.com",
    "opening_balance": "250.00",
}


def test_create_and_read_party(client):
    response = client.post("/parties/", json=PARTY)

    assert response.status_code == 201
    created = response.json()
    assert created["role"] == "supplier"
    assert Decimal(created["opening_balance"]) == Decimal("250")
    assert created["created_by"] == "accountant@example.com"

    fetched = client.get(f"/parties/{created['id']}").json()
    assert fetched["name"] == "Annapurna Seeds"


def test_duplicate_pan_is_rejected(client):
    client.post("/parties/", json=PARTY)

    response = client.post("/parties/", json={**PARTY, "name": "Copy"})

    assert response.status_code == 400


def test_list_filters(client):
    client.post("/parties/", json=PARTY)
    client.post("/parties/", json={**PARTY, "name": "Bagmati Dairy", "pan_number": "609999999", "role": "customer"})

    customers = client.get("/parties/", params={"role": "customer"}).json()
    assert [p["name"] for p in customers] == ["Bagmati Dairy"]

    found = client.get("/parties/", params={"search": "annap"}).json()
    assert [p["name"] for p in found] == ["Annapurna Seeds"]


def test_invalid_email_is_422(client):
    response = client.post("/parties/", json={**PARTY, "email": "not-an-email"})
    assert response.status_code == 422


def test_update_writes_audit_log(client, db):
    party_id = client.post("/parties/", json=PARTY).json()["id"]

    response = client.patch(f"/parties/{party_id}", json={"phone": "9800000001"})

    assert response.status_code == 200
    assert response.json()["phone"] == "9800000001"
    [log] = get_audit_trail(db, TENANT_ID, "parties", party_id)
    assert log.action == "UPDATE"
    assert log.old_values["phone"] == "9851000000"
    assert log.new_values["phone"] == "9800000001"


def test_delete_party_without_transactions(client):
    party_id = client.post("/parties/", json=PARTY).json()["id"]

    assert client.delete(f"/parties/{party_id}").status_code == 204
    assert client.get(f"/parties/{party_id}").status_code == 404


def test_delete_party_with_transactions_is_409(client, make_party, make_payment):
    party = make_party()
    make_payment(party, "10", date(2024, 1, 1))

    response = client.delete(f"/parties/{party.id}")

    assert response.status_code == 409
    assert client.get(f"/parties/{party.id}").status_code == 200


def test_staff_cannot_delete(client, user, make_party):
    party = make_party()
    user["cognito:groups"] = ["staff"]

    assert client.delete(f"/parties/{party.id}").status_code == 403


def test_parties_are_tenant_scoped(client, make_party):
    party = make_party(tenant_id="tenant-b")

    assert client.get(f"/parties/{party.id}").status_code == 404
    assert client.get("/parties/").json() == []


def test_pan_of_deleted_party_cannot_be_reused(client):
    party_id = client.post("/parties/", json=PARTY).json()["id"]
    assert client.delete(f"/parties/{party_id}").status_code == 204

    response = client.post("/parties/", json=PARTY)

    assert response.status_code == 400
    assert "deleted party" in response.json()["detail"]


def test_changing_pan_to_a_deleted_partys_pan_is_rejected(client):
    old_id = client.post("/parties/", json=PARTY).json()["id"]
    client.delete(f"/parties/{old_id}")
    party_id = client.post("/parties/", json={**PARTY, "pan_number": "609999999"}).json()["id"]

    response = client.patch(f"/parties/{party_id}", json={"pan_number": PARTY["pan_number"]})

    assert response.status_code == 400


def test_null_for_required_field_is_422(client):
    party_id = client.post("/parties/", json=PARTY).json()["id"]

    assert client.patch(f"/parties/{party_id}", json={"name": None}).status_code == 422
    assert client.patch(f"/parties/{party_id}", json={"opening_balance": None}).status_code == 422

    cleared = client.patch(f"/parties/{party_id}", json={"email": None})
    assert cleared.status_code == 200
    assert cleared.json()["email"] is None
    assert client.get(f"/parties/{party_id}").json()["name"] == "Annapurna Seeds"


def test_audit_trail_endpoint(client):
    party_id = client.post("/parties/", json=PARTY).json()["id"]
    client.patch(f"/parties/{party_id}", json={"address": "Butwal"})
    client.delete(f"/parties/{party_id}")

    response = client.get("/audit-logs/", params={"table_name": "parties", "record_id": party_id})

    assert response.status_code == 200
    trail = response.json()
    assert [entry["action"] for entry in trail] == ["UPDATE", "DELETE"]
    assert trail[0]["new_values"]["address"] == "Butwal"
    assert trail[1]["changed_by"] == "accountant@example.com"


def test_audit_trail_is_admin_only_and_tenant_scoped(client, user):
    party_id = client.post("/parties/", json=PARTY).json()["id"]
    client.patch(f"/parties/{party_id}", json={"address": "Butwal"})

    other = client.get("/audit-logs/", params={"table_name": "parties"}, headers={"X-Tenant-ID": "tenant-b"})
    assert other.json() == []

    user["cognito:groups"] = ["staff"]
    assert client.get("/audit-logs/", params={"table_name": "parties"}).status_code == 403

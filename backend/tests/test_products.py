from decimal import Decimal

PRODUCT = {"name": "Vermicompost 25kg", "code": "VC25", "mrp": "1130.00"}


def test_product_crud(client):
    created = client.post("/products/", json=PRODUCT)
    assert created.status_code == 201
    product_id = created.json()["id"]
    assert Decimal(created.json()["mrp"]) == Decimal("1130.00")

    assert client.post("/products/", json=PRODUCT).status_code == 400

    updated = client.patch(f"/products/{product_id}", json={"mrp": "1243.00"})
    assert Decimal(updated.json()["mrp"]) == Decimal("1243.00")

    assert client.delete(f"/products/{product_id}").status_code == 204
    assert client.get(f"/products/{product_id}").status_code == 404


def test_name_of_deleted_product_cannot_be_reused(client):
    product_id = client.post("/products/", json=PRODUCT).json()["id"]
    client.delete(f"/products/{product_id}")

    response = client.post("/products/", json=PRODUCT)

    assert response.status_code == 400
    assert "deleted" in response.json()["detail"]


def test_null_mrp_is_422(client):
    product_id = client.post("/products/", json=PRODUCT).json()["id"]

    assert client.patch(f"/products/{product_id}", json={"mrp": None}).status_code == 422
    assert client.patch(f"/products/{product_id}", json={"code": None}).status_code == 200

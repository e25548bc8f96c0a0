"""Integration tests for checkout, order and payment endpoints via TestClient."""

import pytest

BUYER = {"X-User-Id": "user-001", "X-User-Role": "USER"}
STRANGER = {"X-User-Id": "user-999", "X-User-Role": "USER"}
SELLER = {"X-User-Id": "seller-001", "X-User-Role": "SELLER"}
ADMIN = {"X-User-Id": "admin-001", "X-User-Role": "ADMIN"}

CHECKOUT = {
    "payment_method": "jazzcash",
    "shipping_address": "House 12, Street 4, F-7/2, Islamabad",
    "phone": "03001234567",
}


@pytest.fixture()
def order(client, listed_product):
    client.post("/cart/items", json={"product_id": listed_product["id"], "quantity": 3}, headers=BUYER)
    response = client.post("/orders", json=CHECKOUT, headers=BUYER)
    assert response.status_code == 201
    return response.json()


class TestCheckoutAPI:
    def test_create_order(self, client, listed_product, order):
        assert order["status"] == "Pending"
        assert order["total_amount"] == 7500.0
        assert client.get("/cart", headers=BUYER).json()["items"] == []
        assert client.get(f"/products/{listed_product['id']}").json()["stock"] == 2

    def test_empty_cart(self, client):
        response = client.post("/orders", json=CHECKOUT, headers=BUYER)
        assert response.status_code == 400
        assert response.json()["kind"] == "EmptyCart"

    def test_list_and_get(self, client, order):
        assert [o["id"] for o in client.get("/orders", headers=BUYER).json()] == [order["id"]]
        assert client.get(f"/orders/{order['id']}", headers=BUYER).status_code == 200
        assert client.get(f"/orders/{order['id']}", headers=STRANGER).status_code == 403
        assert client.get("/orders/ord-missing", headers=BUYER).status_code == 404

    def test_cancel_restores_stock(self, client, listed_product, order):
        response = client.post(f"/orders/{order['id']}/cancel", headers=BUYER)
        assert response.status_code == 200
        assert response.json()["status"] == "Cancelled"
        assert client.get(f"/products/{listed_product['id']}").json()["stock"] == 5

        again = client.post(f"/orders/{order['id']}/cancel", headers=BUYER)
        assert again.status_code == 409
        assert again.json()["kind"] == "InvalidTransition"

    def test_restore_stock_is_admin_only(self, client, listed_product, order):
        client.post(f"/orders/{order['id']}/cancel", headers=BUYER)

        assert client.post(f"/admin/orders/{order['id']}/restore-stock", headers=SELLER).status_code == 403
        response = client.post(f"/admin/orders/{order['id']}/restore-stock", headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["stock_restored"] is True
        assert client.get(f"/products/{listed_product['id']}").json()["stock"] == 5

    def test_status_update_requires_staff(self, client, order):
        response = client.put(f"/orders/{order['id']}/status", json={"status": "Confirmed"}, headers=BUYER)
        assert response.status_code == 403
        assert response.json()["kind"] == "NotAuthorized"

    def test_admin_and_seller_listings(self, client, order):
        assert len(client.get("/admin/orders?status=Pending", headers=ADMIN).json()) == 1
        assert client.get("/admin/orders", headers=SELLER).status_code == 403
        assert [o["id"] for o in client.get("/seller/orders", headers=SELLER).json()] == [order["id"]]
        assert client.get("/admin/stats", headers=ADMIN).json()["pending_orders"] == 1


class TestPaymentAPI:
    def test_methods(self, client):
        response = client.get("/payments/methods")
        assert response.status_code == 200
        assert {m["id"] for m in response.json()} == {"jazzcash", "easypaisa", "stripe"}

    def test_pay_and_verify(self, client, order):
        payload = {"order_id": order["id"], "phone": "03001234567"}
        response = client.post("/payments/jazzcash", json=payload, headers=BUYER)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["payment_id"].startswith("JC")
        assert body["currency"] == "PKR"

        verification = client.get(f"/payments/verify/{order['id']}", headers=BUYER).json()
        assert verification["payment_status"] == "Completed"
        assert verification["order_status"] == "Confirmed"
        assert verification["payment_id"] == body["payment_id"]

    def test_pay_twice(self, client, order):
        client.post("/payments/easypaisa", json={"order_id": order["id"], "phone": "03001234567"}, headers=BUYER)
        response = client.post(
            "/payments/easypaisa", json={"order_id": order["id"], "phone": "03001234567"}, headers=BUYER
        )
        assert response.status_code == 409
        assert response.json()["kind"] == "AlreadyPaid"

    def test_card_payment_in_usd(self, client, order):
        response = client.post(
            "/payments/stripe",
            json={
                "order_id": order["id"],
                "card_number": "4242424242424242",
                "expiry_month": "12",
                "expiry_year": "2030",
                "cvc": "123",
            },
            headers=BUYER,
        )
        assert response.status_code == 200
        assert response.json()["currency"] == "USD"
        assert response.json()["display_amount"] == round(7500.0 / 280, 2)

    def test_invalid_phone(self, client, order):
        response = client.post("/payments/jazzcash", json={"order_id": order["id"], "phone": "123"}, headers=BUYER)
        assert response.status_code == 400
        assert response.json()["kind"] == "InvalidInput"

    def test_stranger_cannot_pay(self, client, order):
        payload = {"order_id": order["id"], "phone": "03001234567"}
        response = client.post("/payments/jazzcash", json=payload, headers=STRANGER)
        assert response.status_code == 403


class TestNotFoundAPI:
    def test_missing_order_renders_detail(self, client):
        response = client.get("/orders/ord-missing", headers=BUYER)
        assert response.status_code == 404
        assert response.json() == {"error": {"order_id": ["Order ord-missing not found"]}, "kind": "NotFound"}

    def test_missing_product_renders_detail(self, client):
        response = client.get("/products/prod-missing")
        assert response.status_code == 404
        assert response.json()["error"] == {"product_id": ["Product prod-missing not found"]}

    def test_missing_cart_item_renders_detail(self, client):
        response = client.delete("/cart/items/item-missing", headers=BUYER)
        assert response.status_code == 404
        assert response.json() == {"error": {"item_id": ["Item not found in cart"]}, "kind": "NotFound"}

    def test_missing_order_payment(self, client):
        payload = {"order_id": "ord-missing", "phone": "03001234567"}
        response = client.post("/payments/jazzcash", json=payload, headers=BUYER)
        assert response.status_code == 404
        assert response.json()["kind"] == "NotFound"

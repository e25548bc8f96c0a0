"""Integration tests for the cart endpoints via TestClient."""

BUYER = {"X-User-Id": "user-001", "X-User-Role": "USER"}


class TestCartAPI:
    def test_get_cart_creates_empty_cart(self, client):
        response = client.get("/cart", headers=BUYER)
        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["total"] == 0

    def test_missing_identity(self, client):
        assert client.get("/cart").status_code == 401

    def test_add_item(self, client, listed_product):
        response = client.post("/cart/items", json={"product_id": listed_product["id"], "quantity": 2}, headers=BUYER)
        assert response.status_code == 200
        body = response.json()
        assert body["items"][0]["quantity"] == 2
        assert body["total"] == 5000.0

    def test_add_unknown_product(self, client):
        response = client.post("/cart/items", json={"product_id": "prod-missing"}, headers=BUYER)
        assert response.status_code == 404
        assert response.json()["kind"] == "NotFound"

    def test_add_beyond_stock(self, client, listed_product):
        response = client.post("/cart/items", json={"product_id": listed_product["id"], "quantity": 6}, headers=BUYER)
        assert response.status_code == 409
        assert response.json()["kind"] == "InsufficientStock"

    def test_update_to_zero(self, client, listed_product):
        cart = client.post("/cart/items", json={"product_id": listed_product["id"]}, headers=BUYER).json()
        response = client.put(f"/cart/items/{cart['items'][0]['id']}", json={"quantity": 0}, headers=BUYER)
        assert response.status_code == 400
        assert response.json()["kind"] == "InvalidInput"
        assert "quantity" in response.json()["error"]

    def test_remove_and_clear(self, client, listed_product):
        cart = client.post("/cart/items", json={"product_id": listed_product["id"]}, headers=BUYER).json()
        response = client.delete(f"/cart/items/{cart['items'][0]['id']}", headers=BUYER)
        assert response.json()["items"] == []

        client.post("/cart/items", json={"product_id": listed_product["id"]}, headers=BUYER)
        response = client.delete("/cart", headers=BUYER)
        assert response.status_code == 200
        assert response.json()["items"] == []

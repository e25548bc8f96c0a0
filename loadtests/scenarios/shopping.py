"""Buyer-side load test scenarios.

Stateful SequentialTaskSet journeys covering cart browsing and
abandonment, the cart-to-order-to-payment conversion flow, and
cancellation of a pending order.
"""

import random

from locust import SequentialTaskSet, task

from loadtests.data_generators import checkout_data, payment_data, product_data, unique_user_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import SellerState, ShopperState


def ensure_catalogue(client, minimum=5) -> list[str]:
    """Ids of active products in stock, listing a few as a seller when the catalogue is thin."""
    resp = client.get("/products", name="GET /products")
    products = [p for p in resp.json() if p["stock"] > 0] if resp.status_code == 200 else []
    if len(products) < minimum:
        seller = SellerState(user_id=unique_user_id("lt-seller"))
        for _ in range(minimum - len(products)):
            created = client.post("/products", json=product_data(), headers=seller.headers, name="POST /products")
            if created.status_code == 201:
                products.append(created.json())
    return [p["id"] for p in products]


class ShopperJourney(SequentialTaskSet):
    """Shared set-up: a fresh buyer and a stocked catalogue."""

    def on_start(self):
        self.state = ShopperState(user_id=unique_user_id())
        self.product_ids = ensure_catalogue(self.client)
        if not self.product_ids:
            self.interrupt()

    def add_to_cart(self, quantity=1, label="Add to cart"):
        with self.client.post(
            "/cart/items",
            json={"product_id": random.choice(self.product_ids), "quantity": quantity},
            headers=self.state.headers,
            catch_response=True,
            name="POST /cart/items",
        ) as resp:
            if resp.status_code == 200:
                self.state.cart_item_ids = [item["id"] for item in resp.json()["items"]]
            else:
                resp.failure(f"{label} failed: {resp.status_code} - {extract_error_detail(resp)}")

    def check_out(self, payment_method=None):
        with self.client.post(
            "/orders",
            json=checkout_data(payment_method),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                order = resp.json()
                self.state.order_id = order["id"]
                self.state.order_status = order["status"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()


class CartBrowsingJourney(ShopperJourney):
    """Add Items -> Update Quantity -> Remove Item -> Clear.

    Models a browsing buyer who changes their mind and abandons the cart.
    """

    @task
    def add_first_item(self):
        self.add_to_cart()

    @task
    def add_second_item(self):
        self.add_to_cart(label="Add second item")

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.state.headers, name="GET /cart")

    @task
    def update_quantity(self):
        if not self.state.cart_item_ids:
            return
        with self.client.put(
            f"/cart/items/{self.state.cart_item_ids[0]}",
            json={"quantity": 2},
            headers=self.state.headers,
            catch_response=True,
            name="PUT /cart/items/{id}",
        ) as resp:
            # Stock may have run out under concurrent checkouts
            if resp.status_code == 409:
                resp.success()
            elif resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def remove_item(self):
        if not self.state.cart_item_ids:
            return
        with self.client.delete(
            f"/cart/items/{self.state.cart_item_ids[-1]}",
            headers=self.state.headers,
            catch_response=True,
            name="DELETE /cart/items/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Remove item failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def clear_cart(self):
        self.client.delete("/cart", headers=self.state.headers, name="DELETE /cart")

    @task
    def done(self):
        self.interrupt()


class CheckoutAndPayJourney(ShopperJourney):
    """Add Items -> Checkout -> Pay -> Verify.

    The conversion path: a pending order is charged and confirmed.
    """

    @task
    def fill_cart(self):
        self.add_to_cart(quantity=random.randint(1, 2))
        self.add_to_cart(label="Add second item")

    @task
    def place_order(self):
        self.check_out()

    @task
    def pay(self):
        provider = random.choice(["jazzcash", "easypaisa", "stripe"])
        with self.client.post(
            f"/payments/{provider}",
            json=payment_data(self.state.order_id, provider),
            headers=self.state.headers,
            catch_response=True,
            name="POST /payments/{provider}",
        ) as resp:
            if resp.status_code == 200:
                self.state.payment_id = resp.json()["payment_id"]
            else:
                resp.failure(f"Payment failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def verify(self):
        with self.client.get(
            f"/payments/verify/{self.state.order_id}",
            headers=self.state.headers,
            catch_response=True,
            name="GET /payments/verify/{order_id}",
        ) as resp:
            if resp.status_code != 200 or resp.json()["payment_status"] != "Completed":
                resp.failure(f"Verification failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderCancellationJourney(ShopperJourney):
    """Add Item -> Checkout -> Cancel.

    The unhappy path: reserved stock goes back to the ledger.
    """

    @task
    def fill_cart(self):
        self.add_to_cart()

    @task
    def place_order(self):
        self.check_out()

    @task
    def cancel(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/cancel",
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders/{id}/cancel",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_status = resp.json()["status"]
            else:
                resp.failure(f"Cancel failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()

"""Seller and admin load test scenarios.

A seller lists a product, a buyer orders and pays for it, and the seller
walks the order through Processing, Shipped and Delivered. Admins poll
the dashboard and the order listing while this happens.
"""

from locust import SequentialTaskSet, task

from loadtests.data_generators import checkout_data, payment_data, product_data, unique_user_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import SellerState, ShopperState


class OrderFulfillmentJourney(SequentialTaskSet):
    """List Product -> Order -> Pay -> Processing -> Shipped -> Delivered."""

    def on_start(self):
        self.seller = SellerState(user_id=unique_user_id("lt-seller"))
        self.buyer = ShopperState(user_id=unique_user_id())

    @task
    def list_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            headers=self.seller.headers,
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.seller.product_ids.append(resp.json()["id"])
            else:
                resp.failure(f"List product failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def order_product(self):
        self.client.post(
            "/cart/items",
            json={"product_id": self.seller.product_ids[-1], "quantity": 1},
            headers=self.buyer.headers,
            name="POST /cart/items",
        )
        with self.client.post(
            "/orders",
            json=checkout_data("stripe"),
            headers=self.buyer.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.buyer.order_id = resp.json()["id"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def pay(self):
        with self.client.post(
            "/payments/stripe",
            json=payment_data(self.buyer.order_id, "stripe"),
            headers=self.buyer.headers,
            catch_response=True,
            name="POST /payments/{provider}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def _advance(self, status):
        with self.client.put(
            f"/orders/{self.buyer.order_id}/status",
            json={"status": status},
            headers=self.seller.headers,
            catch_response=True,
            name=f"PUT /orders/{{id}}/status [{status}]",
        ) as resp:
            if resp.status_code == 200:
                self.buyer.order_status = resp.json()["status"]
            else:
                resp.failure(f"Move to {status} failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def process(self):
        self._advance("Processing")

    @task
    def ship(self):
        self._advance("Shipped")

    @task
    def deliver(self):
        self._advance("Delivered")

    @task
    def seller_orders(self):
        self.client.get("/seller/orders", headers=self.seller.headers, name="GET /seller/orders")

    @task
    def done(self):
        self.interrupt()


class AdminMonitorJourney(SequentialTaskSet):
    """Dashboard -> Pending orders -> Completed payments."""

    headers = {"X-User-Id": "lt-admin", "X-User-Role": "ADMIN"}

    @task
    def dashboard(self):
        self.client.get("/admin/stats", headers=self.headers, name="GET /admin/stats")

    @task
    def pending_orders(self):
        self.client.get("/admin/orders?status=Pending", headers=self.headers, name="GET /admin/orders")

    @task
    def paid_orders(self):
        self.client.get("/admin/orders?payment_status=Completed", headers=self.headers, name="GET /admin/orders")

    @task
    def done(self):
        self.interrupt()

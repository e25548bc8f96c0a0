"""Checkout race: many buyers, one scarce product.

Every CheckoutRaceUser buys the same product, whose stock is far below the
number of concurrent buyers. A 409 InsufficientStock is the expected loser
outcome and counts as success. Stock is periodically topped back up by the
owning seller so the race keeps running.

Watch for: any successful checkout once GET /products reports 0 stock, or
stock reported below 0. Either means the ledger oversold.
"""

from locust import HttpUser, between, task

from loadtests.data_generators import checkout_data, product_data, unique_user_id
from loadtests.helpers.response import error_kind, extract_error_detail
from loadtests.helpers.state import SellerState, ShopperState

RACE_STOCK = 10
RACE_SELLER = SellerState(user_id="lt-race-seller")


class CheckoutRaceUser(HttpUser):
    wait_time = between(0.05, 0.2)

    product_id = None

    def on_start(self):
        self.buyer = ShopperState(user_id=unique_user_id("lt-racer"))
        if CheckoutRaceUser.product_id is None:
            resp = self.client.post(
                "/products",
                json=product_data(stock=RACE_STOCK),
                headers=RACE_SELLER.headers,
                name="[RACE] POST /products",
            )
            if resp.status_code == 201 and CheckoutRaceUser.product_id is None:
                CheckoutRaceUser.product_id = resp.json()["id"]

    @task(10)
    def race_checkout(self):
        added = self.client.post(
            "/cart/items",
            json={"product_id": self.product_id, "quantity": 1},
            headers=self.buyer.headers,
            name="[RACE] POST /cart/items",
        )
        if added.status_code != 200:
            # Sold out before it reached the cart
            return

        with self.client.post(
            "/orders",
            json=checkout_data(),
            headers=self.buyer.headers,
            catch_response=True,
            name="[RACE] POST /orders",
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409 and error_kind(resp) == "InsufficientStock":
                resp.success()
                self.client.delete("/cart", headers=self.buyer.headers, name="[RACE] DELETE /cart")
            else:
                resp.failure(f"Race checkout failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task(1)
    def check_stock(self):
        with self.client.get(
            f"/products/{self.product_id}",
            catch_response=True,
            name="[RACE] GET /products/{id}",
        ) as resp:
            if resp.status_code == 200 and resp.json()["stock"] < 0:
                resp.failure(f"Negative stock observed: {resp.json()['stock']}")

    @task(1)
    def restock(self):
        self.client.put(
            f"/products/{self.product_id}/stock",
            json={"stock": RACE_STOCK},
            headers=RACE_SELLER.headers,
            name="[RACE] PUT /products/{id}/stock",
        )

"""Shared fixtures for storefront tests: actors, products and placed orders."""

import pytest
from storefront.access.policy import Actor, Role
from storefront.cart import service as carts
from storefront.catalogue import service as catalogue
from storefront.checkout import service as checkout
from storefront.inventory.ledger import get_ledger


@pytest.fixture()
def buyer():
    return Actor(user_id="user-001", role=Role.USER)


@pytest.fixture()
def other_buyer():
    return Actor(user_id="user-002", role=Role.USER)


@pytest.fixture()
def seller():
    return Actor(user_id="seller-001", role=Role.SELLER)


@pytest.fixture()
def other_seller():
    return Actor(user_id="seller-002", role=Role.SELLER)


@pytest.fixture()
def admin():
    return Actor(user_id="admin-001", role=Role.ADMIN)


@pytest.fixture()
def ledger():
    return get_ledger()


@pytest.fixture()
def make_product(seller):
    """Factory: list a product as ``seller`` (or another actor) with a stock level."""

    def _make(name="Kashmiri Shawl", price=2500.0, stock=5, owner=None, **details):
        return catalogue.add_product(owner or seller, name=name, price=price, stock=stock, **details)

    return _make


@pytest.fixture()
def product(make_product):
    return make_product()


@pytest.fixture()
def place_order():
    """Factory: fill ``actor``'s cart with ``lines`` and check out."""

    def _place(actor, lines, payment_method="jazzcash"):
        for product_id, quantity in lines:
            carts.add_item(actor, product_id, quantity)
        return checkout.place_order(
            actor,
            payment_method=payment_method,
            shipping_address="House 12, Street 4, F-7/2, Islamabad",
            phone="03001234567",
        )

    return _place


@pytest.fixture()
def pending_order(buyer, product, place_order):
    return place_order(buyer, [(product["id"], 2)])

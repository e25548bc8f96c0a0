"""Shared BDD fixtures and step definitions for checkout, cancellation and payment."""

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then, when
from storefront.cart import service as carts
from storefront.checkout import service as checkout
from storefront.errors import StorefrontError
from storefront.inventory.ledger import get_ledger
from storefront.order.order import Order
from storefront.payment.settlement import settle_payment


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Product views keyed by the name used in the scenario."""
    return {}


@pytest.fixture()
def placed():
    return {"order": None}


@pytest.fixture()
def error():
    """Container for captured storefront errors."""
    return {"exc": None}


def stored_order(placed):
    return current_domain.repository_for(Order).get(placed["order"]["id"])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:g} with {stock:d} in stock'))
def listed_product(products, make_product, name, price, stock):
    products[name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('the buyer has {quantity:d} of "{name}" in the cart'))
def cart_with_product(products, buyer, name, quantity):
    carts.add_item(buyer, products[name]["id"], quantity)


@given(parsers.cfparse('the stock of "{name}" drops to {stock:d}'))
def stock_drops(products, name, stock):
    get_ledger().stock(products[name]["id"], stock)


# ---------------------------------------------------------------------------
# Given / When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the buyer checks out with "{method}"'))
@when(parsers.cfparse('the buyer checks out with "{method}"'))
def check_out(buyer, placed, error, method):
    try:
        placed["order"] = checkout.place_order(
            buyer,
            payment_method=method,
            shipping_address="House 7, Gulberg III, Lahore",
            phone="03001234567",
        )
    except StorefrontError as exc:
        error["exc"] = exc


@given("the buyer cancels the order")
@when("the buyer cancels the order")
def cancel(buyer, placed, error):
    try:
        checkout.cancel_order(buyer, placed["order"]["id"])
    except StorefrontError as exc:
        error["exc"] = exc


@given(parsers.cfparse('the buyer pays with "{method}" from "{phone}"'))
@when(parsers.cfparse('the buyer pays with "{method}" from "{phone}"'))
def pay(buyer, placed, error, method, phone):
    try:
        settle_payment(buyer, method, placed["order"]["id"], phone=phone)
    except StorefrontError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def stock_level(products, name, stock):
    assert get_ledger().available(products[name]["id"]) == stock


@then(parsers.cfparse('the order is "{status}"'))
def order_status(placed, status):
    assert stored_order(placed).status == status


@then(parsers.re(r'(?P<operation>checkout|cancellation|payment) fails with "(?P<kind>\w+)"'))
def operation_fails(error, operation, kind):
    assert error["exc"] is not None, f"{operation} did not fail"
    assert error["exc"].kind == kind

"""BDD tests for checkout."""

from protean.utils.globals import current_domain
from pytest_bdd import parsers, scenarios, then
from storefront.cart import service as carts
from storefront.order.order import Order

scenarios("features/checkout.feature")


@then(parsers.cfparse("an order totalling {total:g} is pending"))
def order_totals(placed, total):
    assert placed["order"]["status"] == "Pending"
    assert placed["order"]["total_amount"] == total


@then("the buyer's cart is empty")
def cart_is_empty(buyer):
    assert carts.view_cart(buyer)["items"] == []


@then("no order exists")
def no_orders(buyer):
    assert current_domain.repository_for(Order).for_user(buyer.user_id) == []

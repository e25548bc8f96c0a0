"""Application tests for converting a cart into an order."""

import pytest
from protean.utils.globals import current_domain
from storefront.cart import service as carts
from storefront.cart.cart import Cart
from storefront.catalogue import service as catalogue
from storefront.checkout import service as checkout
from storefront.errors import EmptyCart, InsufficientStock, InvalidInput, ProductNotFound
from storefront.order.order import Order, OrderStatus, PaymentStatus


def _checkout(actor, payment_method="jazzcash"):
    return checkout.place_order(
        actor,
        payment_method=payment_method,
        shipping_address="House 12, Street 4, Islamabad",
        phone="03001234567",
    )


def _order_count():
    return len(current_domain.repository_for(Order)._dao.query.all().items)


class TestSuccessfulPlacement:
    def test_quantity_three_of_five(self, buyer, product, ledger):
        carts.add_item(buyer, product["id"], 3)

        order = _checkout(buyer)

        assert ledger.available(product["id"]) == 2
        assert carts.view_cart(buyer)["items"] == []
        assert order["total_amount"] == product["price"] * 3
        assert order["status"] == OrderStatus.PENDING.value
        assert order["payment_status"] == PaymentStatus.PENDING.value
        assert order["payment_method"] == "JazzCash"

    def test_snapshot_lines(self, buyer, seller, product):
        carts.add_item(buyer, product["id"], 2)
        order = _checkout(buyer)
        item = order["items"][0]
        assert item["product_name"] == "Kashmiri Shawl"
        assert item["seller_id"] == seller.user_id
        assert item["unit_price"] == 2500.0

    def test_price_edit_does_not_change_order(self, buyer, seller, product):
        carts.add_item(buyer, product["id"], 1)
        order = _checkout(buyer)

        catalogue.update_product(seller, product["id"], price=9999.0)

        stored = current_domain.repository_for(Order).get(order["id"])
        assert stored.items[0].unit_price == 2500.0
        assert stored.total_amount == 2500.0

    def test_multiple_lines(self, buyer, make_product, ledger):
        a = make_product(name="A", price=100.0, stock=5)
        b = make_product(name="B", price=50.0, stock=3)
        carts.add_item(buyer, a["id"], 2)
        carts.add_item(buyer, b["id"], 3)

        order = _checkout(buyer, payment_method="stripe")

        assert order["total_amount"] == 350.0
        assert ledger.available(a["id"]) == 3
        assert ledger.available(b["id"]) == 0


class TestRejectedPlacement:
    def test_empty_cart(self, buyer):
        with pytest.raises(EmptyCart):
            _checkout(buyer)
        assert _order_count() == 0

    def test_stock_shrunk_after_adding(self, buyer, seller, product, ledger):
        carts.add_item(buyer, product["id"], 5)
        catalogue.set_stock(seller, product["id"], 3)

        with pytest.raises(InsufficientStock) as exc_info:
            _checkout(buyer)

        assert "Kashmiri Shawl" in exc_info.value.messages["quantity"][0]
        assert ledger.available(product["id"]) == 3
        assert _order_count() == 0
        assert len(carts.view_cart(buyer)["items"]) == 1

    def test_ten_against_five(self, buyer, product, ledger):
        cart = carts.get_or_create(buyer.user_id)
        cart.add_item(product["id"], 10)
        current_domain.repository_for(Cart).add(cart)

        with pytest.raises(InsufficientStock):
            _checkout(buyer)

        assert ledger.available(product["id"]) == 5
        assert _order_count() == 0

    def test_one_short_line_blocks_whole_order(self, buyer, make_product, ledger):
        a = make_product(name="A", stock=5)
        b = make_product(name="B", stock=5)
        carts.add_item(buyer, a["id"], 2)
        carts.add_item(buyer, b["id"], 5)
        ledger.stock(b["id"], 4)

        with pytest.raises(InsufficientStock):
            _checkout(buyer)

        assert ledger.available(a["id"]) == 5
        assert ledger.available(b["id"]) == 4
        assert _order_count() == 0

    def test_deactivated_product(self, buyer, seller, product):
        carts.add_item(buyer, product["id"], 1)
        catalogue.update_product(seller, product["id"], is_active=False)
        with pytest.raises(ProductNotFound):
            _checkout(buyer)

    def test_unknown_payment_method(self, buyer, product):
        carts.add_item(buyer, product["id"], 1)
        with pytest.raises(InvalidInput):
            _checkout(buyer, payment_method="bitcoin")


class TestPersistenceFailure:
    def test_reservation_released_when_order_cannot_be_saved(self, buyer, product, ledger, monkeypatch):
        carts.add_item(buyer, product["id"], 3)

        def _boom(*args, **kwargs):
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(Order, "place", classmethod(_boom))

        with pytest.raises(RuntimeError):
            _checkout(buyer)

        assert ledger.available(product["id"]) == 5
        assert _order_count() == 0
        assert carts.view_cart(buyer)["items"][0]["quantity"] == 3

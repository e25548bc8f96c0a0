"""Tests for the Order lifecycle state machine."""

import pytest
from storefront.errors import AlreadyPaid, InvalidTransition, ItemNotFound
from storefront.order.events import (
    OrderCancelled,
    OrderLineRestocked,
    OrderPlaced,
    OrderStatusChanged,
    PaymentSettled,
)
from storefront.order.order import Order, OrderStatus, PaymentStatus, _VALID_TRANSITIONS


def _order(**overrides):
    return Order.place(
        user_id=overrides.get("user_id", "user-001"),
        items_data=overrides.get(
            "items",
            [
                {
                    "product_id": "prod-A",
                    "product_name": "Shawl",
                    "seller_id": "seller-001",
                    "quantity": 2,
                    "unit_price": 1000.0,
                },
                {
                    "product_id": "prod-B",
                    "product_name": "Khussa",
                    "seller_id": "seller-002",
                    "quantity": 1,
                    "unit_price": 1500.0,
                },
            ],
        ),
        payment_method="JazzCash",
        shipping_address="House 1, Lahore",
        phone="03001234567",
    )


@pytest.fixture()
def order():
    return _order()


class TestPlacement:
    def test_new_order_is_pending(self, order):
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.payment_id is None

    def test_total_is_sum_of_snapshot_lines(self, order):
        assert order.total_amount == 3500.0
        assert [i.line_total for i in order.items] == [2000.0, 1500.0]

    def test_raises_order_placed(self, order):
        assert isinstance(order._events[0], OrderPlaced)
        assert order._events[0].total_amount == 3500.0


class TestTransitionTable:
    def test_terminal_states_have_no_exits(self):
        assert _VALID_TRANSITIONS[OrderStatus.DELIVERED] == set()
        assert _VALID_TRANSITIONS[OrderStatus.CANCELLED] == set()

    def test_cancellation_only_from_pending(self):
        sources = {s for s, targets in _VALID_TRANSITIONS.items() if OrderStatus.CANCELLED in targets}
        assert sources == {OrderStatus.PENDING}

    def test_happy_path(self, order):
        order.confirm()
        order.mark_processing()
        order.mark_shipped()
        order.mark_delivered()
        assert order.status == OrderStatus.DELIVERED.value
        assert order.is_terminal

    def test_cannot_skip_states(self, order):
        with pytest.raises(InvalidTransition):
            order.mark_shipped()
        assert order.status == OrderStatus.PENDING.value

    def test_status_change_event(self, order):
        order._events.clear()
        order.confirm()
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "Pending"
        assert event.new_status == "Confirmed"


class TestPayment:
    def test_record_payment_confirms_and_completes(self, order):
        order.record_payment(payment_id="JCABC123", amount=3500.0, provider="JazzCash")
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert order.payment_id == "JCABC123"
        assert isinstance(order._events[-1], PaymentSettled)

    def test_second_payment_rejected(self, order):
        order.record_payment(payment_id="JCABC123", amount=3500.0, provider="JazzCash")
        with pytest.raises(AlreadyPaid):
            order.record_payment(payment_id="JCXYZ999", amount=3500.0, provider="JazzCash")
        assert order.payment_id == "JCABC123"

    def test_cancelled_order_cannot_be_paid(self, order):
        order.cancel(cancelled_by="USER")
        with pytest.raises(InvalidTransition):
            order.record_payment(payment_id="JCABC123", amount=3500.0, provider="JazzCash")
        assert order.payment_id is None

    def test_manually_confirmed_order_can_still_be_paid(self, order):
        order.confirm()
        order.record_payment(payment_id="JCABC123", amount=3500.0, provider="JazzCash")
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert isinstance(order._events[-1], PaymentSettled)


class TestCancellation:
    def test_cancel_pending(self, order):
        order.cancel(cancelled_by="USER")
        assert order.status == OrderStatus.CANCELLED.value
        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.cancelled_by == "USER"
        assert isinstance(order._events[-1], OrderCancelled)

    def test_second_cancel_rejected(self, order):
        order.cancel(cancelled_by="USER")
        with pytest.raises(InvalidTransition):
            order.cancel(cancelled_by="USER")

    def test_confirmed_order_cannot_be_cancelled(self, order):
        order.confirm()
        with pytest.raises(InvalidTransition):
            order.cancel(cancelled_by="ADMIN")


class TestRestocking:
    def test_nothing_pending_before_cancellation(self, order):
        assert order.pending_restock() == []
        with pytest.raises(InvalidTransition):
            order.mark_restocked(order.items[0].id)

    def test_every_line_pending_after_cancellation(self, order):
        order.cancel(cancelled_by="USER")
        assert {i.product_id for i in order.pending_restock()} == {"prod-A", "prod-B"}
        assert not order.stock_restored

    def test_marking_lines_one_by_one(self, order):
        order.cancel(cancelled_by="USER")
        first, second = order.items

        order.mark_restocked(first.id)
        assert [i.id for i in order.pending_restock()] == [second.id]
        assert not order.stock_restored
        assert isinstance(order._events[-1], OrderLineRestocked)

        order.mark_restocked(second.id)
        assert order.pending_restock() == []
        assert order.stock_restored

    def test_marking_twice_is_a_no_op(self, order):
        order.cancel(cancelled_by="USER")
        line = order.items[0]
        order.mark_restocked(line.id)
        events = len(order._events)

        order.mark_restocked(line.id)

        assert len(order._events) == events

    def test_unknown_line(self, order):
        order.cancel(cancelled_by="USER")
        with pytest.raises(ItemNotFound):
            order.mark_restocked("item-missing")

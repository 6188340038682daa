"""Rendering helper tests."""

from __future__ import annotations

from decimal import Decimal

from canteen.cart import CartLine, OrderLine
from canteen.models import Feedback
from canteen.order import Order, OrderStatus, StatusUpdate
from canteen.rendering import (
    format_cart_line,
    format_menu_label,
    format_order_history,
    format_price,
    format_status_line,
)


def test_format_price():
    assert format_price(Decimal("40")) == "¥40.00"
    assert format_price(Decimal("12.5")) == "¥12.50"


def test_menu_label(momo):
    assert format_menu_label(momo).plain == "S Veg Momo - ¥12.50"


def test_cart_line(momo):
    assert format_cart_line(CartLine(item=momo, quantity=2)).plain == "Veg Momo  x2  ¥12.50  =  ¥25.00"


def test_status_line_rounds_remaining_up():
    assert format_status_line(None).plain == "No orders yet."
    assert format_status_line(StatusUpdate("ORD-1", OrderStatus.PREPARING, 2.2)).plain == (
        "Order ORD-1: Preparing (Time remaining: 3s)"
    )
    assert format_status_line(StatusUpdate("ORD-1", OrderStatus.READY, 0.0)).plain == "Order ORD-1: Ready"
    assert format_status_line(StatusUpdate("ORD-1", OrderStatus.CANCELLED)).plain == "Order ORD-1: Cancelled"


def test_history_pairs_orders_with_feedback(customer, momo):
    assert format_order_history(customer).plain == "No order history found."

    rated = Order("ORD-1", customer.customer_id, "V001", [OrderLine(momo, 2)])
    unrated = Order("ORD-2", customer.customer_id, "V001", [OrderLine(momo, 1)])
    customer.place_order(rated)
    customer.place_order(unrated)
    customer.submit_feedback(
        Feedback(feedback_id="FB-1", order_id="ORD-1", customer_id=customer.customer_id, rating=4, comments="Nice")
    )

    plain = format_order_history(customer).plain

    assert "Order ID: ORD-1" in plain
    assert " - Veg Momo x 2" in plain
    assert "Rating: 4/5" in plain
    assert "Comments: Nice" in plain
    assert plain.index("Order ID: ORD-1") < plain.index("Order ID: ORD-2")
    assert plain.rstrip().endswith("No feedback for this order.")

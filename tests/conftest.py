"""Shared fixtures for the canteen test suite."""

from __future__ import annotations

from decimal import Decimal

import pytest

from canteen.cart import Cart
from canteen.checkout import CheckoutEngine
from canteen.models import Customer, FeedbackRecord, FoodItem, Vendor
from canteen.order import OrderSequence
from canteen.scheduler import ManualScheduler


@pytest.fixture
def momo() -> FoodItem:
    return FoodItem(item_id="F001", name="Veg Momo", price=Decimal("12.50"), category="Snacks")


@pytest.fixture
def burger() -> FoodItem:
    return FoodItem(item_id="F002", name="Burger", price=Decimal("15.00"), category="Snacks")


@pytest.fixture
def coffee() -> FoodItem:
    return FoodItem(item_id="F003", name="Cold Coffee", price=Decimal("10.00"), category="Beverages")


@pytest.fixture
def vendor(momo, burger, coffee) -> Vendor:
    vendor = Vendor(vendor_id="V001", name="Abhyasi Cafe")
    for item in (momo, burger, coffee):
        vendor.add_food_item(item)
    return vendor


@pytest.fixture
def customer() -> Customer:
    return Customer(customer_id="C001", name="John Doe")


@pytest.fixture
def cart(customer) -> Cart:
    return Cart(cart_id="CART-C001", customer_id=customer.customer_id)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def stored_feedback() -> list[FeedbackRecord]:
    return []


@pytest.fixture
def engine(scheduler, stored_feedback) -> CheckoutEngine:
    return CheckoutEngine(
        scheduler,
        preparation_time_ms=5000,
        tick_interval_ms=1000,
        order_ids=OrderSequence(),
        feedback_sink=stored_feedback.append,
    )

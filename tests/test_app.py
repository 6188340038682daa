"""Textual pilot tests for the canteen app."""

from __future__ import annotations

from decimal import Decimal

import pytest

from canteen.canteen_app import CanteenApp
from canteen.checkout import CheckoutEngine
from canteen.feedback_modal import FeedbackModal
from canteen.models import FeedbackRecord
from canteen.order import OrderSequence, OrderStatus
from canteen.payment_modal import PaymentModal
from canteen.scheduler import ManualScheduler


def _make_app(tmp_path, stored: list[FeedbackRecord]) -> tuple[CanteenApp, ManualScheduler]:
    scheduler = ManualScheduler()
    engine = CheckoutEngine(scheduler, order_ids=OrderSequence(), feedback_sink=stored.append)
    return CanteenApp(engine, db_path=tmp_path / "canteen.db"), scheduler


@pytest.mark.asyncio
async def test_search_and_add_to_cart(tmp_path):
    app, _ = _make_app(tmp_path, [])
    async with app.run_test() as pilot:
        await pilot.press("m", "b", "u", "r")
        assert app.input_state == "active"
        assert [item.name for item in app._filtered_results()] == ["Burger"]

        await pilot.press("enter", "enter")
        await pilot.pause()

        burger = app.vendor.menu.find_item("F002")
        assert app.cart.quantity_of(burger) == 2
        assert app.cart.calculate_total() == Decimal("30.00")


@pytest.mark.asyncio
async def test_checkout_with_cash_then_feedback(tmp_path):
    stored: list[FeedbackRecord] = []
    app, scheduler = _make_app(tmp_path, stored)
    async with app.run_test() as pilot:
        await pilot.press("m", "enter", "enter")
        await pilot.pause()
        app.action_cancel_active_mode()

        await pilot.press("p")
        await pilot.pause()
        assert isinstance(app.screen, PaymentModal)

        await pilot.press("1", "3", "0", "enter")
        await pilot.pause()

        assert app.cart.is_empty()
        assert len(app.customer.order_history) == 1
        assert app.vendor.earnings == Decimal("25.00")
        assert app.system_status == "Payment processed! Change: ¥5.00"
        assert isinstance(app.screen, FeedbackModal)

        await pilot.press("5", "enter", "g", "o", "o", "d", "enter")
        await pilot.pause()

        assert not isinstance(app.screen, FeedbackModal)
        assert app.system_status == "Thank you for your feedback!"
        assert [(record.rating, record.comments) for record in stored] == [(5, "good")]

        scheduler.advance(5.0)
        assert app.latest_order is not None
        assert app.latest_order.status is OrderStatus.READY


@pytest.mark.asyncio
async def test_short_cash_keeps_cart(tmp_path):
    app, _ = _make_app(tmp_path, [])
    async with app.run_test() as pilot:
        await pilot.press("m", "enter")
        await pilot.pause()
        app.action_cancel_active_mode()

        await pilot.press("p")
        await pilot.pause()
        await pilot.press("1", "5", "enter")
        await pilot.pause()

        assert app.system_status == "Payment failed: Insufficient cash."
        assert not app.cart.is_empty()
        assert app.customer.order_history == []
        assert app.vendor.earnings == Decimal("0")


@pytest.mark.asyncio
async def test_checkout_with_empty_cart_is_blocked(tmp_path):
    app, _ = _make_app(tmp_path, [])
    async with app.run_test() as pilot:
        await pilot.press("p")
        await pilot.pause()

        assert not isinstance(app.screen, PaymentModal)
        assert app.system_status == "Cart is empty!"

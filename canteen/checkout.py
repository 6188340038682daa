"""Checkout orchestration: cart -> payment -> order, plus feedback hand-off."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable
from uuid import uuid4

from canteen.cart import Cart
from canteen.config import PREPARATION_TIME_MS, STATUS_TICK_MS
from canteen.errors import EmptyCartError, ValidationError
from canteen.models import Customer, Feedback, FeedbackRecord, Vendor
from canteen.order import ORDER_IDS, Order, OrderBook, OrderSequence, StatusListener, StatusUpdate
from canteen.payment import CashPayment, Payment, PaymentMethod, build_payment
from canteen.scheduler import Scheduler

logger = logging.getLogger(__name__)

FeedbackSink = Callable[[FeedbackRecord], object]


@dataclass(frozen=True)
class CheckoutResult:
    """A confirmed order and what the counter owes the customer."""

    order: Order
    payment: Payment
    change: Decimal


class CheckoutEngine:
    """
    Turns a cart into a paid order.

    An order only reaches the customer's history after its payment settled,
    and the cart is cleared if and only if checkout succeeds. Preparation
    timers start once the payment is confirmed, never for a rejected attempt.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        preparation_time_ms: int = PREPARATION_TIME_MS,
        tick_interval_ms: int | None = STATUS_TICK_MS,
        order_ids: OrderSequence = ORDER_IDS,
        status_sink: StatusListener | None = None,
        feedback_sink: FeedbackSink | None = None,
    ) -> None:
        if preparation_time_ms <= 0:
            raise ValidationError("Preparation time must be positive.")
        self.scheduler = scheduler
        self.preparation_time = preparation_time_ms / 1000
        self.tick_interval = tick_interval_ms / 1000 if tick_interval_ms else None
        self.order_ids = order_ids
        self.status_sink = status_sink
        self.feedback_sink = feedback_sink
        self.order_book = OrderBook()

    def checkout(
        self,
        cart: Cart,
        customer: Customer,
        vendor: Vendor,
        method: PaymentMethod | str,
        details: object,
    ) -> CheckoutResult:
        """Run one checkout attempt. Raises EmptyCartError or a PaymentError without changing any state."""
        if cart.is_empty():
            logger.info("checkout_blocked reason=empty_cart cart_id=%s", cart.cart_id)
            raise EmptyCartError()

        payment = build_payment(method, details)
        order = Order(
            order_id=self.order_ids.next_id(),
            customer_id=customer.customer_id,
            vendor_id=vendor.vendor_id,
            lines=cart.snapshot(),
        )
        total = cart.calculate_total()
        logger.info(
            "checkout_attempt order_id=%s method=%s total=%s lines=%d",
            order.order_id,
            payment.method.value,
            total,
            len(order.lines),
        )

        settlement = payment.settle(total)
        if not settlement.ok:
            logger.info("checkout_failed order_id=%s reason=%s", order.order_id, settlement.error)
            raise settlement.error  # type: ignore[misc]

        # Nothing may fail after the vendor is credited.
        order.subscribe(self._log_status)
        if self.status_sink is not None:
            order.subscribe(self.status_sink)
        order.start(self.scheduler, self.preparation_time, self.tick_interval)

        payment.process_payment(total, vendor)
        change = payment.calculate_change() if isinstance(payment, CashPayment) else Decimal("0")

        customer.place_order(order)
        self.order_book.place(order)
        cart.clear_cart()
        logger.info("checkout_succeeded order_id=%s change=%s", order.order_id, change)
        return CheckoutResult(order=order, payment=payment, change=change)

    def cancel_order(self, order_id: str) -> bool:
        order = self.order_book.find(order_id)
        if order is None:
            return False
        return order.cancel_order()

    def submit_feedback(
        self,
        customer: Customer,
        vendor: Vendor,
        order: Order,
        rating: int,
        comments: str = "",
    ) -> Feedback:
        """Record a rating for one of the customer's orders and hand it to the feedback sink."""
        if order.customer_id != customer.customer_id:
            raise ValidationError(f"Order {order.order_id} does not belong to {customer.customer_id}.")

        feedback = Feedback(
            feedback_id=f"FB-{uuid4().hex[:12]}",
            order_id=order.order_id,
            customer_id=customer.customer_id,
            rating=rating,
            comments=(comments or "").strip(),
        )
        if self.feedback_sink is not None:
            self.feedback_sink(feedback.to_record())

        customer.submit_feedback(feedback)
        vendor.add_feedback(feedback)
        logger.info("feedback_submitted feedback_id=%s order_id=%s rating=%d", feedback.feedback_id, order.order_id, rating)
        return feedback

    def _log_status(self, update: StatusUpdate) -> None:
        logger.debug("order_status order_id=%s status=%s remaining=%s", update.order_id, update.status.value, update.remaining)

"""Orders and their time-driven status lifecycle."""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Iterator

from canteen.cart import OrderLine
from canteen.scheduler import Scheduler

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PREPARING = "Preparing"
    READY = "Ready"
    COMPLETED = "Ready"
    CANCELLED = "Cancelled"

    @classmethod
    def _missing_(cls, value: object) -> OrderStatus | None:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "completed":
                return cls.READY
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.READY, OrderStatus.CANCELLED)


_OPEN = frozenset({OrderStatus.PENDING, OrderStatus.PREPARING})


@dataclass(frozen=True)
class StatusUpdate:
    """What a status display needs to show for one order."""

    order_id: str
    status: OrderStatus
    remaining: float | None = None


StatusListener = Callable[[StatusUpdate], None]


class Order:
    """
    A paid-for snapshot of a cart plus its preparation status.

    Status moves Pending -> Preparing -> Ready on timers started by start(), or
    to Cancelled through cancel_order(). Ready and Cancelled are terminal. Every
    transition is a compare-and-set under the order's lock, so a cancellation
    racing the Ready timer resolves to whichever commits first; the loser is a
    no-op. Listeners are called synchronously on every transition and on every
    status tick, after the order lock is released, so a listener may read the
    order or wait on another thread that does. An update older than one
    already delivered is dropped.
    """

    def __init__(
        self,
        order_id: str,
        customer_id: str,
        vendor_id: str,
        lines: Iterable[OrderLine],
        created_at: datetime | None = None,
    ) -> None:
        self.order_id = order_id
        self.customer_id = customer_id
        self.vendor_id = vendor_id
        self.lines: tuple[OrderLine, ...] = tuple(lines)
        self.created_at = created_at or datetime.now(timezone.utc)
        self._status = OrderStatus.PENDING
        self._lock = threading.RLock()
        self._delivery_lock = threading.RLock()
        self._version = 0
        self._delivered = 0
        self._listeners: list[StatusListener] = []
        self._scheduler: Scheduler | None = None
        self._started_at = 0.0
        self._preparation_time = 0.0

    @property
    def status(self) -> OrderStatus:
        with self._lock:
            return self._status

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0"))

    @property
    def started(self) -> bool:
        with self._lock:
            return self._scheduler is not None

    def remaining(self) -> float | None:
        """Seconds left until Ready; 0 once Ready, None when not started or cancelled."""
        with self._lock:
            if self._status is OrderStatus.READY:
                return 0.0
            if self._status is OrderStatus.CANCELLED or self._scheduler is None:
                return None
            elapsed = self._scheduler.now() - self._started_at
            return max(0.0, self._preparation_time - elapsed)

    def snapshot(self) -> StatusUpdate:
        with self._lock:
            return StatusUpdate(self.order_id, self._status, self.remaining())

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def start(self, scheduler: Scheduler, preparation_time: float, tick_interval: float | None = None) -> bool:
        """Schedule the Preparing (at T/2) and Ready (at T) triggers. Only the first call has an effect."""
        with self._lock:
            if self._scheduler is not None:
                return False
            self._scheduler = scheduler
            self._started_at = scheduler.now()
            self._preparation_time = preparation_time
            update = self._next_update()
        self._deliver(*update)

        scheduler.call_later(preparation_time / 2, self._begin_preparing)
        scheduler.call_later(preparation_time, self._mark_ready)
        if tick_interval and tick_interval > 0:
            self._schedule_tick(scheduler, tick_interval)
        logger.debug("order_started order_id=%s preparation_time=%.3f", self.order_id, preparation_time)
        return True

    def cancel_order(self) -> bool:
        """Cancel unless the order is already Ready or Cancelled."""
        return self._transition(_OPEN, OrderStatus.CANCELLED)

    def _begin_preparing(self) -> bool:
        return self._transition(frozenset({OrderStatus.PENDING}), OrderStatus.PREPARING)

    def _mark_ready(self) -> bool:
        # Also accepts Pending, so the order is Ready at T even if the T/2 trigger ran late.
        return self._transition(_OPEN, OrderStatus.READY)

    def _schedule_tick(self, scheduler: Scheduler, tick_interval: float) -> None:
        remaining = self.remaining()
        if remaining is None or remaining <= tick_interval:
            return

        def tick() -> None:
            with self._lock:
                if self._status.is_terminal:
                    return
                update = self._next_update()
            self._deliver(*update)
            self._schedule_tick(scheduler, tick_interval)

        scheduler.call_later(tick_interval, tick)

    def _transition(self, allowed: frozenset[OrderStatus], target: OrderStatus) -> bool:
        with self._lock:
            current = self._status
            if current not in allowed:
                logger.debug("order_transition_ignored order_id=%s status=%s target=%s", self.order_id, current.value, target.value)
                return False
            self._status = target
            logger.info("order_transition order_id=%s %s->%s", self.order_id, current.value, target.value)
            update = self._next_update()
        self._deliver(*update)
        return True

    def _next_update(self) -> tuple[int, StatusUpdate]:
        # Caller holds self._lock.
        self._version += 1
        return self._version, StatusUpdate(self.order_id, self._status, self.remaining())

    def _deliver(self, version: int, update: StatusUpdate) -> None:
        with self._delivery_lock:
            if version <= self._delivered:
                return
            self._delivered = version
            with self._lock:
                listeners = list(self._listeners)
            for listener in listeners:
                try:
                    listener(update)
                except Exception:
                    logger.exception("status listener failed order_id=%s", self.order_id)

    def __repr__(self) -> str:
        return f"Order(order_id={self.order_id!r}, customer_id={self.customer_id!r}, status={self.status.value!r}, lines={len(self.lines)})"


class OrderSequence:
    """Thread-safe generator of ORD-<n> ids."""

    def __init__(self, start: int = 1, prefix: str = "ORD-") -> None:
        self._counter = itertools.count(start)
        self._prefix = prefix
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            return f"{self._prefix}{next(self._counter)}"


# Process-wide; never reset.
ORDER_IDS = OrderSequence()


class OrderBook:
    """All orders placed during this process run, in placement order."""

    def __init__(self) -> None:
        self._orders: list[Order] = []

    def place(self, order: Order) -> None:
        self._orders.append(order)

    def find(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        return None

    def for_customer(self, customer_id: str) -> list[Order]:
        return [order for order in self._orders if order.customer_id == customer_id]

    def for_vendor(self, vendor_id: str) -> list[Order]:
        return [order for order in self._orders if order.vendor_id == vendor_id]

    def latest(self) -> Order | None:
        return self._orders[-1] if self._orders else None

    def __iter__(self) -> Iterator[Order]:
        return iter(list(self._orders))

    def __len__(self) -> int:
        return len(self._orders)

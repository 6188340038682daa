"""ThreadScheduler tests against the real clock, with short delays."""

from __future__ import annotations

import threading

import pytest

from canteen.cart import OrderLine
from canteen.order import Order, OrderStatus, StatusUpdate
from canteen.scheduler import ThreadScheduler


@pytest.fixture
def thread_scheduler():
    scheduler = ThreadScheduler(name="test-scheduler")
    yield scheduler
    scheduler.shutdown()


def test_callbacks_run_in_due_order(thread_scheduler):
    calls: list[str] = []
    done = threading.Event()

    def last() -> None:
        calls.append("second")
        done.set()

    thread_scheduler.call_later(0.10, last)
    thread_scheduler.call_later(0.02, lambda: calls.append("first"))

    assert done.wait(2.0)
    assert calls == ["first", "second"]


def test_failing_callback_does_not_stop_worker(thread_scheduler):
    done = threading.Event()

    def broken() -> None:
        raise RuntimeError("boom")

    thread_scheduler.call_later(0.01, broken)
    thread_scheduler.call_later(0.05, done.set)

    assert done.wait(2.0)


def test_call_later_after_shutdown_raises():
    scheduler = ThreadScheduler()
    scheduler.shutdown()

    with pytest.raises(RuntimeError):
        scheduler.call_later(0.1, lambda: None)


def test_shutdown_drops_pending_callbacks():
    scheduler = ThreadScheduler()
    fired = threading.Event()
    scheduler.call_later(5.0, fired.set)

    scheduler.shutdown()

    assert scheduler.pending() == 0
    assert not fired.is_set()


def test_order_reaches_ready_on_worker_thread(thread_scheduler, momo):
    order = Order("ORD-1", "C001", "V001", [OrderLine(momo, 1)])
    seen: list[StatusUpdate] = []
    ready = threading.Event()

    def listener(update: StatusUpdate) -> None:
        seen.append(update)
        if update.status is OrderStatus.READY:
            ready.set()

    order.subscribe(listener)
    order.start(thread_scheduler, preparation_time=0.2, tick_interval=0.05)

    assert order.status is OrderStatus.PENDING
    assert ready.wait(2.0)
    assert order.status is OrderStatus.READY
    statuses = [update.status for update in seen]
    assert statuses.index(OrderStatus.PREPARING) < statuses.index(OrderStatus.READY)

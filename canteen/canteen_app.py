"""Main Textual app class."""

from __future__ import annotations

import logging
import sqlite3
from functools import partial
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from canteen.cart import CartLine
from canteen.checkout import CheckoutEngine
from canteen.config import DB_PATH
from canteen.data import build_cart, build_default_customer, build_default_vendor
from canteen.errors import CheckoutError, ValidationError
from canteen.feedback_modal import FeedbackInput, FeedbackModal
from canteen.history_modal import HistoryModal
from canteen.models import Customer, FoodItem, Vendor
from canteen.order import Order, OrderStatus
from canteen.payment import PaymentMethod
from canteen.payment_modal import PaymentModal, PaymentRequest
from canteen.persistence import bootstrap_schema
from canteen.rendering import (
    category_style,
    format_cart_line,
    format_grand_total,
    format_menu_label,
    format_price,
    format_status_line,
)

logger = logging.getLogger(__name__)

# Search mode key -> menu category (None searches the whole menu).
SEARCH_MODES: dict[str, str | None] = {
    "m": None,
    "s": "Snacks",
    "b": "Beverages",
}


class CanteenApp(App):
    """A Textual app for building a cart from the menu, paying and tracking the order."""

    TITLE = "Canteen Management System"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #cart-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #menu-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-total {
        text-align: right;
        margin-top: 1;
    }

    #order-status {
        margin-top: 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    mode = reactive("m")
    search_query = reactive("")
    selected_index = reactive(0)
    cart_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "add_selected", "Add to cart"),
        ("backspace", "backspace_query", "Delete query char"),
        ("escape", "cancel_active_mode", "Exit search"),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        engine: CheckoutEngine,
        vendor: Vendor | None = None,
        customer: Customer | None = None,
        db_path: str | Path = DB_PATH,
    ) -> None:
        super().__init__()
        self.engine = engine
        self.vendor = vendor or build_default_vendor()
        self.customer = customer or build_default_customer()
        self.cart = build_cart(self.customer)
        self.db_path = db_path
        self.system_status = ""
        self.latest_order: Order | None = None
        self._announced_ready: set[str] = set()
        self.sub_title = self.vendor.name

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="cart-pane"):
                yield Static("Cart", classes="pane-title")
                yield Static("(cart is empty)", id="cart-list")
                yield Static(id="cart-total")
                yield Static(id="order-status")
            with Vertical(id="menu-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        bootstrap_schema(self.db_path)
        self.set_interval(0.25, self._poll_order_status)
        logger.debug("app_mounted vendor=%s customer=%s", self.vendor.vendor_id, self.customer.customer_id)
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        if not event.is_printable or not event.character or len(event.character) != 1 or not event.character.isalnum():
            return

        key = event.character.lower()
        if self.input_state == "normal":
            handlers = {
                "j": partial(self._move_cart_selection, 1),
                "k": partial(self._move_cart_selection, -1),
                "a": self._increment_selected,
                "x": self._decrement_selected,
                "d": self._remove_selected,
                "c": self.action_clear_cart,
                "p": self.action_checkout,
                "h": self.action_show_history,
                "z": self.action_cancel_latest_order,
            }
            handler = handlers.get(key)
            if handler is not None:
                handler()
                event.stop()
                return

            if key not in SEARCH_MODES:
                return

            self.mode = key
            self.input_state = "active"
            self.search_query = ""
            self.selected_index = 0
            self._refresh_search()
            event.stop()
            return

        self.search_query += event.character
        self.selected_index = 0
        self._refresh_search()
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_add_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        item = results[self.selected_index]
        self.cart.add_item(item)
        self.cart_selected_index = self._line_index(item)
        self._refresh_cart()

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        if not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_clear_cart(self) -> None:
        self.cart.clear_cart()
        self.cart_selected_index = None
        self.system_status = "All items removed from cart."
        self._refresh_all()

    def action_checkout(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.cart.is_empty():
            self.system_status = "Cart is empty!"
            self._refresh_search()
            return
        self.push_screen(PaymentModal(self.cart.calculate_total()), callback=self._on_payment_entered)

    def action_show_history(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.push_screen(HistoryModal(self.customer))

    def action_cancel_latest_order(self) -> None:
        order = self.latest_order
        if order is None:
            self.system_status = "No order to cancel."
        elif self.engine.cancel_order(order.order_id):
            self.system_status = f"Order {order.order_id} cancelled."
        else:
            self.system_status = f"Order {order.order_id} is already {order.status.value}."
        self._refresh_all()

    def _on_payment_entered(self, request: PaymentRequest | None) -> None:
        if request is None:
            self.system_status = "Payment cancelled."
            self._refresh_search()
            return

        try:
            result = self.engine.checkout(self.cart, self.customer, self.vendor, request.method, request.details)
        except CheckoutError as exc:
            self.system_status = f"Payment failed: {exc}"
            self._refresh_search()
            return

        self.latest_order = result.order
        self.cart_selected_index = None
        if request.method is PaymentMethod.CASH:
            self.system_status = f"Payment processed! Change: {format_price(result.change)}"
        else:
            self.system_status = "Payment processed!"
        self._refresh_all()
        self.push_screen(FeedbackModal(result.order.order_id), callback=partial(self._on_feedback_entered, result.order))

    def _on_feedback_entered(self, order: Order, entry: FeedbackInput | None) -> None:
        if entry is None:
            self.system_status = "Feedback submission cancelled."
            self._refresh_search()
            return

        try:
            self.engine.submit_feedback(self.customer, self.vendor, order, entry.rating, entry.comments)
        except (ValidationError, sqlite3.Error) as exc:
            logger.warning("feedback_failed order_id=%s error=%r", order.order_id, exc)
            self.system_status = f"Error saving feedback: {exc}"
        else:
            self.system_status = "Thank you for your feedback!"
        self._refresh_search()

    def _poll_order_status(self) -> None:
        order = self.latest_order
        try:
            status_widget = self.query_one("#order-status", Static)
        except NoMatches:
            return
        if order is None:
            status_widget.update(format_status_line(None))
            return

        update = order.snapshot()
        status_widget.update(format_status_line(update))
        if update.status is OrderStatus.READY and order.order_id not in self._announced_ready:
            self._announced_ready.add(order.order_id)
            self.notify(f"Order {order.order_id} is ready!", title="Order Ready")

    def _filtered_results(self) -> list[FoodItem]:
        category = SEARCH_MODES[self.mode]
        results = self.vendor.menu.search(self.search_query)
        if category is None:
            return results
        return [item for item in results if item.category == category]

    def _refresh_all(self) -> None:
        self._refresh_cart()
        self._refresh_search()
        self._poll_order_status()

    def _line_index(self, item: FoodItem) -> int | None:
        for idx, line in enumerate(self.cart.lines()):
            if line.item.item_id == item.item_id:
                return idx
        return None

    def _selected_line(self) -> CartLine | None:
        lines = self.cart.lines()
        if self.cart_selected_index is None:
            return None
        if not (0 <= self.cart_selected_index < len(lines)):
            return None
        return lines[self.cart_selected_index]

    def _move_cart_selection(self, delta: int) -> None:
        total = len(self.cart)
        if not total:
            return

        if self.cart_selected_index is None:
            self.cart_selected_index = 0 if delta > 0 else total - 1
        else:
            self.cart_selected_index = (self.cart_selected_index + delta) % total
        self._refresh_cart()

    def _increment_selected(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.cart.add_item(line.item)
        self._refresh_cart()

    def _decrement_selected(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.cart.remove_item(line.item)
        self._refresh_cart()

    def _remove_selected(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.cart.remove_all(line.item)
        self._refresh_cart()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            start = max(0, selected - rows // 2)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            total_widget = self.query_one("#cart-total", Static)
        except NoMatches:
            return

        total_widget.update(format_grand_total(self.cart.calculate_total()))
        lines = self.cart.lines()
        if not lines:
            self.cart_selected_index = None
            cart_widget.update("(cart is empty)")
            return

        if self.cart_selected_index is not None and self.cart_selected_index >= len(lines):
            self.cart_selected_index = len(lines) - 1

        visible_rows = self._visible_rows(cart_widget)
        start, end = self._window_bounds(len(lines), visible_rows, self.cart_selected_index)

        text = Text()
        if start > 0:
            text.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                text.append("\n")
            pointer = "➤ " if idx == self.cart_selected_index else "  "
            text.append(pointer)
            text.append(f"{idx + 1}. ")
            text.append_text(format_cart_line(lines[idx]))

        if end < len(lines):
            text.append("\n⋮", style="dim")

        cart_widget.update(text)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(f"M/S/B search menu. J/K select, A/X/D +/-/remove, C clear.\nP pay, H history, Z cancel order.\n{status}")
            return

        category = SEARCH_MODES[self.mode]
        text = Text()
        label = category or "Menu"
        text.append(label[:1], style=category_style(category or ""))
        text.append(f" {label}: {self.search_query}")
        bar.update(text)

    def _refresh_results(self, results: list[FoodItem]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index)

        text = Text()
        if start > 0:
            text.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                text.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            text.append(pointer)
            text.append_text(format_menu_label(results[idx]))

        if end < len(results):
            text.append("\n⋮", style="dim")

        results_widget.update(text)

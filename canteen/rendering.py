"""Rendering helpers for menu, cart, order status and history."""

from __future__ import annotations

import math
from decimal import Decimal

from rich.text import Text

from canteen.cart import CartLine
from canteen.config import CURRENCY_SYMBOL
from canteen.models import Customer, FoodItem
from canteen.order import OrderStatus, StatusUpdate


def format_price(amount: Decimal) -> str:
    return f"{CURRENCY_SYMBOL}{amount:.2f}"


def category_style(category: str) -> str:
    """Return a consistent badge style for menu categories."""
    if category == "Beverages":
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def status_style(status: OrderStatus) -> str:
    if status is OrderStatus.READY:
        return "bold #5fbf72"
    if status is OrderStatus.CANCELLED:
        return "bold #b23a48"
    if status is OrderStatus.PREPARING:
        return "bold #e0a030"
    return "white"


def format_menu_label(item: FoodItem) -> Text:
    """Render a menu entry with a colored category tag."""
    text = Text()
    text.append(item.category[:1].upper(), style=category_style(item.category))
    text.append(f" {item.name} - {format_price(item.price)}")
    return text


def format_cart_line(line: CartLine) -> Text:
    text = Text()
    text.append(line.item.name)
    text.append(f"  x{line.quantity}", style="bold")
    text.append(f"  {format_price(line.item.price)}  =  {format_price(line.subtotal)}", style="dim")
    return text


def format_grand_total(total: Decimal) -> Text:
    return Text(f"Grand Total: {format_price(total)}", style="bold")


def format_status_line(update: StatusUpdate | None) -> Text:
    """Render the latest order status, with whole seconds remaining while it is being prepared."""
    if update is None:
        return Text("No orders yet.")

    text = Text(f"Order {update.order_id}: ")
    text.append(update.status.value, style=status_style(update.status))
    if not update.status.is_terminal and update.remaining is not None:
        text.append(f" (Time remaining: {math.ceil(update.remaining)}s)", style="dim")
    return text


def format_order_history(customer: Customer) -> Text:
    """Render every order of a customer with its items and first feedback."""
    if not customer.order_history:
        return Text("No order history found.")

    text = Text()
    for idx, order in enumerate(customer.order_history):
        if idx > 0:
            text.append("\n\n")
        text.append(f"Order ID: {order.order_id}\n", style="bold")
        text.append("Status: ")
        text.append(order.status.value, style=status_style(order.status))
        text.append("\nItems:")
        for line in order.lines:
            text.append(f"\n - {line.item.name} x {line.quantity}")
        text.append(f"\nTotal: {format_price(order.total)}")

        feedback = customer.feedback_for(order.order_id)
        if feedback is None:
            text.append("\nNo feedback for this order.", style="dim")
        else:
            text.append(f"\nRating: {feedback.rating}/5")
            text.append(f"\nComments: {feedback.comments}")
    return text

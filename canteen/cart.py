"""Shopping cart for one customer session."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from canteen.models import FoodItem


@dataclass
class CartLine:
    """A cart row. Quantity is always at least 1 while the line is in a cart."""

    item: FoodItem
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.item.price * self.quantity


@dataclass(frozen=True)
class OrderLine:
    """An immutable copy of a cart row taken at checkout."""

    item: FoodItem
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.item.price * self.quantity


class Cart:
    """Multiset of catalog items keyed on item_id.

    Removal of an item that is not in the cart is silently ignored.
    """

    def __init__(self, cart_id: str, customer_id: str) -> None:
        self.cart_id = cart_id
        self.customer_id = customer_id
        self._lines: dict[str, CartLine] = {}

    def add_item(self, item: FoodItem) -> None:
        line = self._lines.get(item.item_id)
        if line is None:
            self._lines[item.item_id] = CartLine(item=item, quantity=1)
        else:
            line.quantity += 1

    def remove_item(self, item: FoodItem) -> None:
        line = self._lines.get(item.item_id)
        if line is None:
            return
        if line.quantity > 1:
            line.quantity -= 1
        else:
            del self._lines[item.item_id]

    def remove_all(self, item: FoodItem) -> None:
        self._lines.pop(item.item_id, None)

    def update_item_quantity(self, item: FoodItem, quantity: int) -> None:
        if quantity <= 0:
            self._lines.pop(item.item_id, None)
            return
        line = self._lines.get(item.item_id)
        if line is None:
            self._lines[item.item_id] = CartLine(item=item, quantity=quantity)
        else:
            line.quantity = quantity

    def quantity_of(self, item: FoodItem) -> int:
        line = self._lines.get(item.item_id)
        return line.quantity if line is not None else 0

    def calculate_total(self) -> Decimal:
        return sum((line.subtotal for line in self._lines.values()), Decimal("0"))

    def clear_cart(self) -> None:
        self._lines.clear()

    def is_empty(self) -> bool:
        return not self._lines

    def lines(self) -> list[CartLine]:
        """Cart rows in the order items were first added."""
        return list(self._lines.values())

    def items(self) -> dict[str, int]:
        return {item_id: line.quantity for item_id, line in self._lines.items()}

    def snapshot(self) -> tuple[OrderLine, ...]:
        return tuple(OrderLine(item=line.item, quantity=line.quantity) for line in self._lines.values())

    def __len__(self) -> int:
        return len(self._lines)

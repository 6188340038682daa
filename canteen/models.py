"""Domain models for the canteen."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from canteen.errors import ValidationError

if TYPE_CHECKING:
    from canteen.order import Order


def to_amount(value: Decimal | int | float | str) -> Decimal:
    """Coerce a money value to Decimal, going through str so floats keep their printed value."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValidationError(f"Not a valid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Not a valid amount: {value!r}")
    return amount


@dataclass(frozen=True)
class FoodItem:
    """A catalog entry offered by a vendor."""

    item_id: str
    name: str
    price: Decimal
    category: str

    def __post_init__(self) -> None:
        price = to_amount(self.price)
        if price < 0:
            raise ValidationError("Price cannot be negative.")
        object.__setattr__(self, "price", price)


@dataclass
class Menu:
    """Ordered collection of food items."""

    items: list[FoodItem] = field(default_factory=list)

    def add_item(self, item: FoodItem) -> None:
        self.items.append(item)

    def remove_item(self, item: FoodItem) -> None:
        self.items = [existing for existing in self.items if existing.item_id != item.item_id]

    def find_item(self, item_id: str) -> FoodItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def find_item_by_name(self, name: str) -> FoodItem | None:
        wanted = name.strip().lower()
        for item in self.items:
            if item.name.lower() == wanted:
                return item
        return None

    def search(self, query: str) -> list[FoodItem]:
        """Case-insensitive substring match on item names; an empty query returns the whole menu."""
        q = query.strip().lower()
        if not q:
            return list(self.items)
        return [item for item in self.items if q in item.name.lower()]


@dataclass(frozen=True)
class FeedbackRecord:
    """Complete, immutable feedback record handed to durable storage."""

    feedback_id: str
    order_id: str
    rating: int
    comments: str


@dataclass(frozen=True)
class Feedback:
    """A customer's rating of one order."""

    feedback_id: str
    order_id: str
    customer_id: str
    rating: int
    comments: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if isinstance(self.rating, bool) or not isinstance(self.rating, int):
            raise ValidationError("Rating must be a whole number between 1 and 5.")
        if not (1 <= self.rating <= 5):
            raise ValidationError("Rating must be between 1 and 5.")

    def to_record(self) -> FeedbackRecord:
        return FeedbackRecord(
            feedback_id=self.feedback_id,
            order_id=self.order_id,
            rating=self.rating,
            comments=self.comments,
        )


@dataclass
class Vendor:
    """A canteen vendor with its menu, earnings and received feedback."""

    vendor_id: str
    name: str
    menu: Menu = field(default_factory=Menu)
    earnings: Decimal = field(default=Decimal("0"), init=False)
    feedback: list[Feedback] = field(default_factory=list, init=False)

    def add_food_item(self, item: FoodItem) -> None:
        self.menu.add_item(item)

    def add_earnings(self, amount: Decimal) -> None:
        """Credit a settled payment. Earnings never decrease."""
        if amount < 0:
            raise ValidationError("Earnings cannot be credited with a negative amount.")
        self.earnings += amount

    def add_feedback(self, feedback: Feedback) -> None:
        self.feedback.append(feedback)


@dataclass
class Customer:
    """A customer and their order and feedback history, in submission order."""

    customer_id: str
    name: str
    order_history: list[Order] = field(default_factory=list, init=False)
    feedback: list[Feedback] = field(default_factory=list, init=False)

    def place_order(self, order: Order) -> None:
        self.order_history.append(order)

    def submit_feedback(self, feedback: Feedback) -> None:
        self.feedback.append(feedback)

    def feedback_for(self, order_id: str) -> Feedback | None:
        """Return the first feedback submitted for an order."""
        for entry in self.feedback:
            if entry.order_id == order_id:
                return entry
        return None

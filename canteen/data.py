"""Static catalog data wrapped into domain objects."""

from __future__ import annotations

from canteen.cart import Cart
from canteen.constant import CUSTOMER_META, MENU_ITEMS, VENDOR_META
from canteen.models import Customer, FoodItem, Vendor

MENU_CATALOG: list[FoodItem] = [
    FoodItem(
        item_id=meta["item_id"],
        name=meta["name"],
        price=meta["price"],  # type: ignore[arg-type]
        category=meta["category"],
    )
    for meta in MENU_ITEMS
]


def build_default_vendor() -> Vendor:
    """Create the canteen vendor with the full catalog on its menu."""
    vendor = Vendor(vendor_id=VENDOR_META["vendor_id"], name=VENDOR_META["name"])
    for item in MENU_CATALOG:
        vendor.add_food_item(item)
    return vendor


def build_default_customer() -> Customer:
    return Customer(customer_id=CUSTOMER_META["customer_id"], name=CUSTOMER_META["name"])


def build_cart(customer: Customer) -> Cart:
    return Cart(cart_id=f"CART-{customer.customer_id}", customer_id=customer.customer_id)

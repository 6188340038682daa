"""Editable static catalog configuration."""

from __future__ import annotations

VENDOR_META: dict[str, str] = {"vendor_id": "V001", "name": "Abhyasi Cafe"}

CUSTOMER_META: dict[str, str] = {"customer_id": "C001", "name": "John Doe"}

# Canonical menu values consumed by canteen.data (which wraps these into FoodItem instances).
MENU_ITEMS: list[dict[str, str]] = [
    {"item_id": "F001", "name": "Veg Momo", "price": "12.50", "category": "Snacks"},
    {"item_id": "F002", "name": "Burger", "price": "15.00", "category": "Snacks"},
    {"item_id": "F003", "name": "Cold Coffee", "price": "10.00", "category": "Beverages"},
]

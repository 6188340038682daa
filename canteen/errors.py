"""Error types raised by the checkout core."""

from __future__ import annotations

from decimal import Decimal


class CanteenError(Exception):
    """Base class for every error raised by the canteen core."""


class ValidationError(CanteenError, ValueError):
    """An object was constructed with invalid data and was not created."""


class CheckoutError(CanteenError):
    """Checkout could not produce an order."""


class EmptyCartError(CheckoutError):
    def __init__(self) -> None:
        super().__init__("Cart is empty!")


class PaymentError(CheckoutError):
    """A payment was rejected. Vendor, cart and customer are left unchanged."""


class InvalidPaymentDetails(PaymentError, ValidationError):
    """Payment details could not be turned into a payment."""


class InsufficientFunds(PaymentError):
    def __init__(self, required: Decimal, tendered: Decimal) -> None:
        super().__init__("Insufficient cash.")
        self.required = required
        self.tendered = tendered


class InvalidCredential(PaymentError):
    def __init__(self, transaction_id: str) -> None:
        super().__init__("Invalid transaction ID.")
        self.transaction_id = transaction_id

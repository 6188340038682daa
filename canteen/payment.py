"""Cash and digital payment settlement."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from canteen.errors import (
    InsufficientFunds,
    InvalidCredential,
    InvalidPaymentDetails,
    PaymentError,
    ValidationError,
)
from canteen.models import Vendor, to_amount

logger = logging.getLogger(__name__)

# Stand-in for a gateway lookup: any id carrying this marker is accepted.
TRANSACTION_ID_PREFIX = "TXN"


class PaymentMethod(str, Enum):
    CASH = "cash"
    DIGITAL = "digital"


@dataclass(frozen=True)
class Settlement:
    """Outcome of validating a payment against a required amount."""

    method: PaymentMethod
    amount: Decimal
    error: PaymentError | None = None
    change: Decimal = Decimal("0")

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CashPayment:
    """Cash handed over at the counter."""

    tendered_amount: Decimal
    _settled_amount: Decimal | None = field(default=None, init=False, repr=False)

    method = PaymentMethod.CASH

    def __post_init__(self) -> None:
        try:
            tendered = to_amount(self.tendered_amount)
        except ValidationError as exc:
            raise InvalidPaymentDetails(str(exc)) from exc
        if tendered < 0:
            raise InvalidPaymentDetails("Cash received cannot be negative.")
        self.tendered_amount = tendered

    def settle(self, required_amount: Decimal) -> Settlement:
        required_amount = to_amount(required_amount)
        if self.tendered_amount >= required_amount:
            return Settlement(
                method=self.method,
                amount=required_amount,
                change=self.tendered_amount - required_amount,
            )
        return Settlement(
            method=self.method,
            amount=required_amount,
            error=InsufficientFunds(required_amount, self.tendered_amount),
        )

    def process_payment(self, required_amount: Decimal, vendor: Vendor) -> bool:
        settlement = _credit_vendor(self.settle(required_amount), vendor)
        if settlement.ok:
            self._settled_amount = settlement.amount
        return settlement.ok

    def calculate_change(self) -> Decimal:
        """Change owed for the last successful settlement."""
        if self._settled_amount is None:
            raise RuntimeError("Change is only known after a successful payment.")
        return self.tendered_amount - self._settled_amount


@dataclass
class DigitalPayment:
    """A payment confirmed elsewhere and identified by its transaction id."""

    transaction_id: str

    method = PaymentMethod.DIGITAL

    def __post_init__(self) -> None:
        if self.transaction_id is None or not str(self.transaction_id).strip():
            raise InvalidPaymentDetails("Transaction ID cannot be null or empty.")
        self.transaction_id = str(self.transaction_id).strip()

    def settle(self, required_amount: Decimal) -> Settlement:
        required_amount = to_amount(required_amount)
        if self.transaction_id.startswith(TRANSACTION_ID_PREFIX):
            return Settlement(method=self.method, amount=required_amount)
        return Settlement(
            method=self.method,
            amount=required_amount,
            error=InvalidCredential(self.transaction_id),
        )

    def process_payment(self, required_amount: Decimal, vendor: Vendor) -> bool:
        return _credit_vendor(self.settle(required_amount), vendor).ok


Payment = CashPayment | DigitalPayment


def _credit_vendor(settlement: Settlement, vendor: Vendor) -> Settlement:
    if settlement.ok:
        vendor.add_earnings(settlement.amount)
        logger.info(
            "payment_settled method=%s amount=%s vendor=%s",
            settlement.method.value,
            settlement.amount,
            vendor.vendor_id,
        )
    else:
        logger.info("payment_rejected method=%s reason=%s", settlement.method.value, settlement.error)
    return settlement


def build_payment(method: PaymentMethod | str, details: object) -> Payment:
    """Build a payment variant from raw input collected by the front-end."""
    try:
        method = PaymentMethod(method)
    except ValueError as exc:
        raise InvalidPaymentDetails(f"Unknown payment method: {method!r}") from exc

    if method is PaymentMethod.CASH:
        if details is None or (isinstance(details, str) and not details.strip()):
            raise InvalidPaymentDetails("Cash amount is required.")
        return CashPayment(details)  # type: ignore[arg-type]
    return DigitalPayment(details)  # type: ignore[arg-type]

"""Cash and digital payment settlement tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from canteen.errors import (
    InsufficientFunds,
    InvalidCredential,
    InvalidPaymentDetails,
    PaymentError,
    ValidationError,
)
from canteen.payment import CashPayment, DigitalPayment, PaymentMethod, build_payment


class TestCashPayment:
    def test_exact_amount_succeeds_with_no_change(self, vendor):
        payment = CashPayment(Decimal("40.00"))

        assert payment.process_payment(Decimal("40.00"), vendor) is True
        assert payment.calculate_change() == Decimal("0")
        assert vendor.earnings == Decimal("40.00")

    def test_vendor_credited_with_required_not_tendered(self, vendor):
        payment = CashPayment(Decimal("50.00"))

        assert payment.process_payment(Decimal("40.00"), vendor)
        assert payment.calculate_change() == Decimal("10.00")
        assert vendor.earnings == Decimal("40.00")

    def test_shortfall_fails_without_crediting(self, vendor):
        payment = CashPayment(Decimal("39.99"))

        assert payment.process_payment(Decimal("40.00"), vendor) is False
        assert vendor.earnings == Decimal("0")

        settlement = payment.settle(Decimal("40.00"))
        assert not settlement.ok
        assert isinstance(settlement.error, InsufficientFunds)
        assert settlement.error.tendered == Decimal("39.99")

    def test_change_unknown_before_settlement(self):
        with pytest.raises(RuntimeError):
            CashPayment(Decimal("10")).calculate_change()

    def test_negative_cash_rejected(self):
        with pytest.raises(InvalidPaymentDetails, match="negative"):
            CashPayment(Decimal("-1"))

    def test_settle_has_no_side_effects(self, vendor):
        CashPayment(Decimal("100")).settle(Decimal("40"))
        assert vendor.earnings == Decimal("0")

    def test_float_amount_is_accepted(self, vendor):
        payment = CashPayment(Decimal("50"))

        assert payment.process_payment(40.0, vendor) is True
        assert payment.calculate_change() == Decimal("10.0")
        assert vendor.earnings == Decimal("40.0")


class TestDigitalPayment:
    def test_txn_prefix_succeeds(self, vendor):
        payment = DigitalPayment("TXN-001")

        assert payment.process_payment(Decimal("40.00"), vendor) is True
        assert vendor.earnings == Decimal("40.00")

    def test_other_prefix_is_invalid_credential(self, vendor):
        payment = DigitalPayment("ABC-001")

        assert payment.process_payment(Decimal("40.00"), vendor) is False
        assert vendor.earnings == Decimal("0")
        assert isinstance(payment.settle(Decimal("40.00")).error, InvalidCredential)

    def test_prefix_is_case_sensitive(self, vendor):
        assert DigitalPayment("txn-001").process_payment(Decimal("1"), vendor) is False

    def test_float_amount_is_accepted(self, vendor):
        assert DigitalPayment("TXN-001").process_payment(40.0, vendor) is True
        assert vendor.earnings == Decimal("40.0")
        assert isinstance(vendor.earnings, Decimal)

    @pytest.mark.parametrize("transaction_id", ["", "   ", None])
    def test_empty_transaction_id_rejected(self, transaction_id):
        with pytest.raises(InvalidPaymentDetails):
            DigitalPayment(transaction_id)  # type: ignore[arg-type]


def test_failures_are_distinguishable():
    cash_error = CashPayment(Decimal("1")).settle(Decimal("2")).error
    digital_error = DigitalPayment("ABC").settle(Decimal("2")).error

    assert type(cash_error) is InsufficientFunds
    assert type(digital_error) is InvalidCredential
    assert isinstance(cash_error, PaymentError) and isinstance(digital_error, PaymentError)


class TestBuildPayment:
    def test_cash_text_is_parsed(self):
        payment = build_payment("cash", "50.00")
        assert isinstance(payment, CashPayment)
        assert payment.tendered_amount == Decimal("50.00")

    def test_digital(self):
        payment = build_payment(PaymentMethod.DIGITAL, "TXN-9")
        assert isinstance(payment, DigitalPayment)
        assert payment.transaction_id == "TXN-9"

    @pytest.mark.parametrize("details", ["", "abc", None, "1.2.3"])
    def test_bad_cash_input(self, details):
        with pytest.raises(InvalidPaymentDetails):
            build_payment("cash", details)

    def test_unknown_method(self):
        with pytest.raises(InvalidPaymentDetails):
            build_payment("cheque", "100")

    def test_invalid_details_are_validation_and_payment_errors(self):
        with pytest.raises(InvalidPaymentDetails) as excinfo:
            build_payment("cash", "-5")
        assert isinstance(excinfo.value, ValidationError)
        assert isinstance(excinfo.value, PaymentError)

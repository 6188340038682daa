"""Payment entry modal screen."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from canteen.payment import TRANSACTION_ID_PREFIX, PaymentMethod
from canteen.rendering import format_price


@dataclass(frozen=True)
class PaymentRequest:
    """Raw payment input, validated later by the checkout engine."""

    method: PaymentMethod
    details: str


class PaymentModal(ModalScreen[PaymentRequest | None]):
    """Choose cash or digital payment and enter the amount or transaction id."""

    CSS = """
    PaymentModal {
        align: center middle;
        background: $background 60%;
    }

    #payment-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #payment-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #payment-prompt {
        color: white;
        margin-bottom: 1;
    }

    #payment-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #payment-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #payment-help {
        color: #dddddd;
    }
    """

    def __init__(self, total: Decimal) -> None:
        super().__init__()
        self.total = total
        self.method: PaymentMethod | None = None
        self.value = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="payment-dialog"):
            yield Static(f"Payment - {format_price(self.total)}", id="payment-title")
            yield Static(id="payment-prompt")
            yield Static(id="payment-value")
            yield Static(id="payment-error")
            yield Static(id="payment-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"} or (self.method is None and event.key == "q"):
            self.dismiss(None)
            event.stop()
            return

        if self.method is None:
            self._choose_method(event)
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if self.method is PaymentMethod.CASH and not (event.character.isdigit() or event.character == "."):
                event.stop()
                return
            if len(self.value) < 32:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _choose_method(self, event: Key) -> None:
        key = (event.character or "").lower()
        if key in {"1", "c"}:
            self.method = PaymentMethod.CASH
        elif key in {"2", "d"}:
            self.method = PaymentMethod.DIGITAL
        else:
            return
        self.value = ""
        self.error = ""
        self._refresh_content()
        event.stop()

    def _confirm(self) -> None:
        if not self.value.strip():
            self.error = "Cash amount is required." if self.method is PaymentMethod.CASH else "Transaction ID is required."
            self._refresh_content()
            return
        assert self.method is not None
        self.dismiss(PaymentRequest(method=self.method, details=self.value.strip()))

    def _refresh_content(self) -> None:
        prompt = self.query_one("#payment-prompt", Static)
        value_widget = self.query_one("#payment-value", Static)
        error_widget = self.query_one("#payment-error", Static)
        help_widget = self.query_one("#payment-help", Static)

        if self.method is None:
            prompt.update("Choose payment method: [1] Cash  [2] Digital")
            help_widget.update("1/C cash, 2/D digital. Esc/q/Ctrl+C cancel.")
        elif self.method is PaymentMethod.CASH:
            prompt.update("Enter cash amount:")
            help_widget.update("Digits and '.' only. Enter confirm. Backspace delete. Esc cancel.")
        else:
            prompt.update(f"Enter transaction ID ({TRANSACTION_ID_PREFIX}...):")
            help_widget.update("Enter confirm. Backspace delete. Esc cancel.")

        value_widget.update(self.value or "")
        error_widget.update(self.error or "")

"""Order history modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from canteen.models import Customer
from canteen.rendering import format_order_history


class HistoryModal(ModalScreen[None]):
    """Customer order history paired with submitted feedback."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
    ]

    CSS = """
    HistoryModal {
        align: center middle;
        background: $background 60%;
    }

    #history-dialog {
        width: 64;
        height: auto;
        max-height: 80%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #history-title {
        text-style: bold;
        margin-bottom: 1;
    }

    #history-help {
        margin-top: 1;
        color: $text-muted;
    }
    """

    def __init__(self, customer: Customer) -> None:
        super().__init__()
        self.customer = customer

    def compose(self) -> ComposeResult:
        with Container(id="history-dialog"):
            yield Static("Order History", id="history-title")
            yield Static(id="history-body")
            yield Static("Esc / q / Ctrl+C to close", id="history-help")

    def on_mount(self) -> None:
        self._refresh_content()
        self.set_interval(0.5, self._refresh_content)

    def _refresh_content(self) -> None:
        self.query_one("#history-body", Static).update(format_order_history(self.customer))

    def action_close(self) -> None:
        self.dismiss()

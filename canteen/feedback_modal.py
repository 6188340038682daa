"""Feedback entry modal screen."""

from __future__ import annotations

from dataclasses import dataclass

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


@dataclass(frozen=True)
class FeedbackInput:
    rating: int
    comments: str


class FeedbackModal(ModalScreen[FeedbackInput | None]):
    """Prompt for a 1-5 rating and optional comments after a successful checkout."""

    CSS = """
    FeedbackModal {
        align: center middle;
        background: $background 60%;
    }

    #feedback-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #feedback-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #feedback-body {
        color: white;
        margin-bottom: 1;
    }

    #feedback-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #feedback-help {
        color: #dddddd;
    }
    """

    def __init__(self, order_id: str) -> None:
        super().__init__()
        self.order_id = order_id
        self.rating: int | None = None
        self.typing_comments = False
        self.comments = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="feedback-dialog"):
            yield Static(f"Feedback for {self.order_id}", id="feedback-title")
            yield Static(id="feedback-body")
            yield Static(id="feedback-error")
            yield Static(id="feedback-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.typing_comments and self.comments:
                self.comments = self.comments[:-1]
            elif not self.typing_comments:
                self.rating = None
            self._refresh_content()
            event.stop()
            return

        if not (event.is_printable and event.character):
            return

        if self.typing_comments:
            if len(self.comments) < 200:
                self.comments += event.character
            self._refresh_content()
            event.stop()
            return

        if event.character.isdigit():
            value = int(event.character)
            if 1 <= value <= 5:
                self.rating = value
                self.error = ""
            else:
                self.error = "Please enter a rating between 1 and 5."
            self._refresh_content()
        event.stop()

    def _confirm(self) -> None:
        if self.rating is None:
            self.error = "Please enter a rating between 1 and 5."
            self._refresh_content()
            return
        if not self.typing_comments:
            self.typing_comments = True
            self.error = ""
            self._refresh_content()
            return
        self.dismiss(FeedbackInput(rating=self.rating, comments=self.comments.strip()))

    def _refresh_content(self) -> None:
        body = self.query_one("#feedback-body", Static)
        error_widget = self.query_one("#feedback-error", Static)
        help_widget = self.query_one("#feedback-help", Static)

        content = Text(style="white")
        content.append("Rating: ")
        if self.rating is None:
            content.append("_ /5", style="dim")
        else:
            content.append("★" * self.rating + "☆" * (5 - self.rating), style="bold #e0a030")
            content.append(f" {self.rating}/5")
        if self.typing_comments:
            content.append(f"\nComments: {self.comments}|")

        if self.typing_comments:
            help_widget.update("Type comments, Enter submit, Esc cancel")
        else:
            help_widget.update("1-5 rate, Enter continue, Esc cancel")
        body.update(content)
        error_widget.update(self.error or "")

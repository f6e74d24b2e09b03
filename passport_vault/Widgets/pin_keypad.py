"""
PIN keypad widget: a row of dots and a 3x4 grid of keys.
"""

from typing import List, Tuple

from textual import on
from textual.app import ComposeResult
from textual.containers import Container, Grid
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Button, Static

FILLED_DOT = "●"
EMPTY_DOT = "○"


class PinKeypad(Container):
    """Keypad for PIN entry. Posts DigitPressed and BackspacePressed."""

    DEFAULT_CSS = """
    PinKeypad {
        width: 31;
        height: auto;
        align: center top;
    }

    PinKeypad .pin-dots {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }

    PinKeypad.rejected .pin-dots {
        color: $error;
    }

    PinKeypad Grid {
        grid-size: 3 4;
        grid-gutter: 0 1;
        height: auto;
    }

    PinKeypad Button {
        width: 9;
        min-width: 9;
    }
    """

    filled: reactive[int] = reactive(0)

    class DigitPressed(Message):
        """A digit key was pressed."""

        def __init__(self, digit: str) -> None:
            super().__init__()
            self.digit = digit

    class BackspacePressed(Message):
        """The backspace key was pressed."""

    def __init__(self, length: int = 4, **kwargs):
        super().__init__(**kwargs)
        self.length = length
        self._shake_steps: List[int] = []
        self._shake_step = 0.05

    def compose(self) -> ComposeResult:
        yield Static(self._dots(), id="pin-dots", classes="pin-dots")
        with Grid():
            for digit in "123456789":
                yield Button(digit, id=f"key-{digit}", classes="pin-key")
            yield Static("")
            yield Button("0", id="key-0", classes="pin-key")
            yield Button("⌫", id="key-backspace", classes="pin-backspace")

    def _dots(self) -> str:
        return " ".join(FILLED_DOT if i < self.filled else EMPTY_DOT for i in range(self.length))

    def watch_filled(self, filled: int) -> None:
        if self.is_mounted:
            self.query_one("#pin-dots", Static).update(self._dots())

    def set_rejected(self, rejected: bool) -> None:
        self.set_class(rejected, "rejected")

    @on(Button.Pressed, ".pin-key")
    def handle_digit(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(self.DigitPressed(str(event.button.label)))

    @on(Button.Pressed, ".pin-backspace")
    def handle_backspace(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(self.BackspacePressed())

    def shake(self, offsets: Tuple[int, ...], step: float) -> None:
        """Jitter sideways through ``offsets``, one step at a time, then settle at 0."""
        self._shake_steps = list(offsets)
        self._shake_step = step
        self._advance_shake()

    def _advance_shake(self) -> None:
        if not self._shake_steps:
            self.styles.offset = (0, 0)
            return
        self.styles.offset = (self._shake_steps.pop(0), 0)
        self.set_timer(self._shake_step, self._advance_shake)

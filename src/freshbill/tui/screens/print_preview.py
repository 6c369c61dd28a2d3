from __future__ import annotations

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static


class PrintScreen(ModalScreen):
    """Print preview of the invoice without the editing controls."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
    ]

    def __init__(self, text: str) -> None:
        super().__init__()
        self._text = text

    def compose(self) -> ComposeResult:
        with Vertical(id="modal-dialog"):
            with Horizontal(id="modal-title-bar"):
                yield Static("Print preview", id="header-bar")
                yield Button("✕", id="btn-modal-close")
            with VerticalScroll(id="print-body"):
                yield Static(self._text, id="print-text", markup=False)
            yield Label("", id="status-label")
            with Horizontal(classes="button-bar"):
                yield Button("✕ Close", id="btn-close")
                yield Button("⎙ Print", id="btn-print", variant="primary")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        match event.button.id:
            case "btn-print":
                self.query_one("#btn-print", Button).disabled = True
                self.query_one("#status-label", Label).update("Sending to printer…")
                self._run_print()
            case "btn-close" | "btn-modal-close":
                self.app.pop_screen()

    @work(thread=True)
    def _run_print(self) -> None:
        try:
            from freshbill.services.printing import send_to_printer

            send_to_printer(self._text)
            self.app.call_from_thread(self._on_printed)
        except Exception as e:
            self.app.call_from_thread(self._on_error, str(e))

    def _on_printed(self) -> None:
        self.query_one("#status-label", Label).update("Sent to printer")
        self.query_one("#btn-print", Button).disabled = False
        self.notify("Invoice sent to printer", timeout=3)

    def _on_error(self, msg: str) -> None:
        self.query_one("#status-label", Label).update(f"Error: {msg}")
        self.query_one("#btn-print", Button).disabled = False
        self.notify(f"Print failed: {msg}", severity="error", timeout=5)

    def action_go_back(self) -> None:
        self.app.pop_screen()

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, Static

from freshbill.models.invoice import InvoiceDocument, InvoiceTotals
from freshbill.services.invoice_session import CLEAR_CONFIRM_MESSAGE
from freshbill.utils.formatters import format_rupee


def discard_summary(document: InvoiceDocument, totals: InvoiceTotals) -> str:
    """One line describing what a reset throws away."""
    count = len(document.items)
    parts = [f"{count} item{'s' if count != 1 else ''}"]
    if document.customer_name:
        parts.append(f"customer {document.customer_name}")
    parts.append(f"total {format_rupee(totals.total)}")
    return f"Invoice #{document.invoice_number}: " + ", ".join(parts)


class ClearAllScreen(ModalScreen[bool]):
    """Ask before wiping the invoice. Cancel has focus, so Enter keeps the data."""

    DEFAULT_CSS = """
    ClearAllScreen {
        align: center middle;
    }
    ClearAllScreen #modal-dialog {
        width: 64;
        border: thick $error;
    }
    #discard-summary {
        color: $text-muted;
        margin-top: 1;
    }
    """

    BINDINGS = [
        Binding("escape", "keep", "Keep invoice"),
        Binding("n", "keep", show=False),
        Binding("y", "clear", show=False),
    ]

    def __init__(self, document: InvoiceDocument, totals: InvoiceTotals) -> None:
        super().__init__()
        self._summary = discard_summary(document, totals)

    def compose(self) -> ComposeResult:
        with Vertical(id="modal-dialog"):
            yield Static("Clear invoice", id="header-bar")
            yield Static(CLEAR_CONFIRM_MESSAGE, id="clear-message")
            yield Label(self._summary, id="discard-summary")
            with Horizontal(classes="button-bar"):
                yield Button("Keep invoice", id="btn-keep")
                yield Button("🗑 Clear all (y)", id="btn-clear-all", variant="error")

    def on_mount(self) -> None:
        self.query_one("#btn-keep", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-clear-all")

    def action_keep(self) -> None:
        self.dismiss(False)

    def action_clear(self) -> None:
        self.dismiss(True)

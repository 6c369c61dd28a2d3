from __future__ import annotations

from pathlib import Path

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from freshbill.models.invoice import InvoiceDocument, InvoiceTotals
from freshbill.services.pdf_export import pdf_filename


class ExportPdfScreen(ModalScreen):
    """Export the current invoice as invoice-<number>.pdf."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
    ]

    def __init__(
        self,
        document: InvoiceDocument,
        totals: InvoiceTotals,
        directory: Path | None = None,
    ) -> None:
        super().__init__()
        self._document = document
        self._totals = totals
        self._initial_dir = directory

    def compose(self) -> ComposeResult:
        if self._initial_dir is None:
            from freshbill.config import get_export_dir

            self._initial_dir = get_export_dir()
        with Vertical(id="modal-dialog"):
            with Horizontal(id="modal-title-bar"):
                yield Static("Download PDF", id="header-bar")
                yield Button("✕", id="btn-modal-close")
            yield Label("File", classes="form-label")
            yield Label(pdf_filename(self._document), id="filename-label")
            yield Label("Save to folder", classes="form-label")
            yield Input(value=str(self._initial_dir), placeholder="~/invoices", id="dir-input")
            yield Label("", id="error-label")
            yield Label("", id="status-label")
            with Horizontal(classes="button-bar"):
                yield Button("✕ Close", id="btn-close", variant="error")
                yield Button("⤓ Save PDF", id="btn-save", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#dir-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._do_export()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        match event.button.id:
            case "btn-save":
                self._do_export()
            case "btn-close" | "btn-modal-close":
                self.app.pop_screen()

    def _do_export(self) -> None:
        directory = self.query_one("#dir-input", Input).value.strip()
        if not directory:
            self.query_one("#error-label", Label).update("Enter a folder")
            return

        self.query_one("#error-label", Label).update("")
        self.query_one("#status-label", Label).update("Generating…")
        self.query_one("#btn-save", Button).disabled = True
        self._run_export(Path(directory).expanduser())

    @work(thread=True)
    def _run_export(self, directory: Path) -> None:
        try:
            from freshbill.services.pdf_export import export_invoice_pdf

            path, replaced = export_invoice_pdf(self._document, self._totals, directory)
            self.app.call_from_thread(self._show_success, str(path), replaced)
        except Exception as e:
            self.app.call_from_thread(self._show_error, str(e))

    def _show_success(self, path: str, replaced: bool = False) -> None:
        message = f"PDF saved to: {path}"
        if replaced:
            message += " (replaced existing file)"
        self.query_one("#status-label", Label).update(message)
        self.query_one("#error-label", Label).update("")
        self.query_one("#btn-save", Button).disabled = False
        self.notify(message, timeout=5)

    def _show_error(self, msg: str) -> None:
        self.query_one("#status-label", Label).update("")
        self.query_one("#error-label", Label).update(f"Error: {msg}")
        self.query_one("#btn-save", Button).disabled = False
        self.notify(f"Error: {msg}", severity="error", timeout=5)

    def action_go_back(self) -> None:
        self.app.pop_screen()

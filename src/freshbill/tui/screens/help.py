from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, RichLog, Static


class HelpScreen(ModalScreen):
    """Keyboard shortcuts and a short description of the catalog modes."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="modal-dialog"):
            with Horizontal(id="modal-title-bar"):
                yield Static("Help", id="header-bar")
                yield Button("✕", id="btn-modal-close")
            yield RichLog(id="help-content", wrap=True, markup=True)
            with Horizontal(classes="button-bar"):
                yield Button("✕ Close", id="btn-close")

    def on_mount(self) -> None:
        log = self.query_one("#help-content", RichLog)

        log.write("[bold]FreshFruits Billing[/bold]")
        log.write("")
        log.write(
            "Pick products on the left to add them to the invoice. "
            "Adding a product that is already on the invoice raises its quantity."
        )
        log.write("")

        log.write("[bold]Keyboard shortcuts[/bold]")
        log.write("")
        log.write("  [bold cyan]enter[/bold cyan]  Add product / select item")
        log.write("  [bold cyan]+ / -[/bold cyan]  Change quantity of the selected item")
        log.write("  [bold cyan]del[/bold cyan]    Remove the selected item")
        log.write("  [bold cyan]g[/bold cyan]      New invoice number")
        log.write("  [bold cyan]r[/bold cyan]      Refresh products")
        log.write("  [bold cyan]x[/bold cyan]      Clear product cache and reload")
        log.write("  [bold cyan]d[/bold cyan]      Download PDF")
        log.write("  [bold cyan]p[/bold cyan]      Print")
        log.write("  [bold cyan]c[/bold cyan]      Clear all data")
        log.write("  [bold cyan]h[/bold cyan]      This screen")
        log.write("  [bold cyan]ctrl+q[/bold cyan] Quit")
        log.write("")

        log.write("[bold]Product catalog[/bold]")
        log.write("")
        log.write(
            "Without FRESHBILL_FEED_URL the built-in price list (or products.yaml) is used. "
            "With it, products come from the published sheet and are cached for 30 seconds "
            "in memory and 60 seconds on disk. If the sheet cannot be reached the last "
            "cached list is shown."
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id in ("btn-close", "btn-modal-close"):
            self.app.pop_screen()

    def action_go_back(self) -> None:
        self.app.pop_screen()

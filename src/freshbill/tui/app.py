from __future__ import annotations

from typing import TYPE_CHECKING

from textual.app import App
from textual.binding import Binding

if TYPE_CHECKING:
    from freshbill.services.catalog import Catalog
    from freshbill.services.invoice_session import InvoiceSession


class FreshbillApp(App):
    """FreshFruits Billing TUI application."""

    CSS_PATH = "app.tcss"
    TITLE = "FreshFruits Billing"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(
        self,
        session: InvoiceSession | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._catalog = catalog

    @property
    def session(self) -> InvoiceSession:
        if self._session is None:
            from freshbill.config import get_data_dir, load_company
            from freshbill.models.company import CompanyProfile
            from freshbill.services.invoice_session import InvoiceSession
            from freshbill.services.storage import JsonFileStore

            self._session = InvoiceSession.open(
                JsonFileStore(get_data_dir()),
                CompanyProfile.from_dict(load_company()),
                notify=self.notify_main,
            )
        return self._session

    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            from freshbill.services.catalog import build_catalog

            self._catalog = build_catalog(self.notify_from_worker)
        return self._catalog

    def notify_main(self, message: str, severity: str = "information") -> None:
        self.notify(message, severity=severity, timeout=2)  # type: ignore[arg-type]

    def notify_from_worker(self, message: str, severity: str = "information") -> None:
        """Notifier for catalog loads, which always run in worker threads."""
        self.call_from_thread(self.notify, message, severity=severity, timeout=3)

    def on_mount(self) -> None:
        from freshbill.tui.screens.invoice import InvoiceScreen

        self.push_screen(InvoiceScreen())

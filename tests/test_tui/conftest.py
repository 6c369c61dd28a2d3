from __future__ import annotations

import pytest

from freshbill.models.company import CompanyProfile
from freshbill.models.product import DEFAULT_PRODUCTS
from freshbill.services.catalog import StaticCatalog
from freshbill.services.invoice_session import InvoiceSession
from freshbill.services.storage import MemoryStore
from freshbill.tui.app import FreshbillApp


@pytest.fixture(autouse=True)
def isolated_dirs(monkeypatch, tmp_path):
    """Keep the TUI away from real config/data directories."""
    monkeypatch.setenv("FRESHBILL_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("FRESHBILL_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("FRESHBILL_FEED_URL", raising=False)


@pytest.fixture
def tui_session() -> InvoiceSession:
    return InvoiceSession.open(MemoryStore(), CompanyProfile())


@pytest.fixture
def make_app(tui_session):
    """Build an app over an in-memory session and the built-in price list."""

    def _make(**kwargs) -> FreshbillApp:
        kwargs.setdefault("session", tui_session)
        kwargs.setdefault("catalog", StaticCatalog(DEFAULT_PRODUCTS))
        return FreshbillApp(**kwargs)

    return _make


@pytest.fixture
def settle():
    """Wait for pending workers and the UI updates they schedule."""

    async def _settle(app, pilot) -> None:
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

    return _settle

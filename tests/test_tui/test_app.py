from __future__ import annotations

from unittest.mock import patch

import pytest
from textual.widgets import DataTable, Label

from freshbill.services.catalog import FeedCatalog, StaticCatalog
from freshbill.services.exceptions import FeedError
from freshbill.tui.app import FreshbillApp


@pytest.mark.asyncio
async def test_app_launches(make_app):
    app = make_app()
    async with app.run_test():
        assert app.title == "FreshFruits Billing"


@pytest.mark.asyncio
async def test_app_default_screen_is_invoice(make_app):
    from freshbill.tui.screens.invoice import InvoiceScreen

    app = make_app()
    async with app.run_test():
        assert isinstance(app.screen, InvoiceScreen)


@pytest.mark.asyncio
async def test_static_catalog_by_default(settle):
    app = FreshbillApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert isinstance(app.catalog, StaticCatalog)
        assert app.screen.query_one("#products-table", DataTable).row_count == 10


@pytest.mark.asyncio
async def test_feed_catalog_from_env(monkeypatch, tmp_path, settle):
    monkeypatch.setenv("FRESHBILL_FEED_URL", "https://sheet.example/pub?output=csv")
    with patch(
        "freshbill.services.catalog.fetch_feed",
        return_value="Name,Price\nJackfruit,95\nLychee,320\n",
    ):
        app = FreshbillApp()
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert isinstance(app.catalog, FeedCatalog)
            table = app.screen.query_one("#products-table", DataTable)
            assert table.row_count == 2
            label = app.screen.query_one("#product-count", Label)
            assert label.render().plain == "2 items"
    assert (tmp_path / "data" / "freshfruits_products_cache.json").exists()


@pytest.mark.asyncio
async def test_feed_unreachable_leaves_empty_table(monkeypatch, settle):
    monkeypatch.setenv("FRESHBILL_FEED_URL", "https://sheet.example/pub?output=csv")
    with patch("freshbill.services.catalog.fetch_feed", side_effect=FeedError("offline")):
        app = FreshbillApp()
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert app.screen.query_one("#products-table", DataTable).row_count == 0

from __future__ import annotations

from unittest.mock import patch

import pytest
from textual.widgets import Button, Input, Label

from freshbill.models.invoice import InvoiceTotals
from freshbill.tui.screens.export_pdf import ExportPdfScreen
from freshbill.tui.screens.print_preview import PrintScreen


@pytest.mark.asyncio
async def test_export_prefills_filename_and_folder(make_app, sample_document, tmp_path, settle):
    app = make_app()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.push_screen(
            ExportPdfScreen(sample_document, InvoiceTotals.compute(sample_document), tmp_path)
        )
        await pilot.pause()
        label = app.screen.query_one("#filename-label", Label)
        assert label.render().plain == "invoice-INV-2025-4321.pdf"
        assert app.screen.query_one("#dir-input", Input).value == str(tmp_path)


@pytest.mark.asyncio
async def test_export_default_folder(make_app, sample_document, tmp_path, settle):
    app = make_app()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.push_screen(ExportPdfScreen(sample_document, InvoiceTotals.compute(sample_document)))
        await pilot.pause()
        value = app.screen.query_one("#dir-input", Input).value
        assert value == str(tmp_path / "data" / "exports")


@pytest.mark.asyncio
async def test_export_writes_pdf(make_app, sample_document, tmp_path, settle):
    out = tmp_path / "pdfs"
    app = make_app()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.push_screen(
            ExportPdfScreen(sample_document, InvoiceTotals.compute(sample_document), out)
        )
        await pilot.pause()
        app.screen.query_one("#btn-save", Button).press()
        await settle(app, pilot)

        status = app.screen.query_one("#status-label", Label)
        assert "PDF saved to" in status.render().plain
    assert (out / "invoice-INV-2025-4321.pdf").read_bytes().startswith(b"%PDF")


@pytest.mark.asyncio
async def test_export_reports_replaced_file(make_app, sample_document, tmp_path, settle):
    (tmp_path / "invoice-INV-2025-4321.pdf").write_bytes(b"old")
    app = make_app()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.push_screen(
            ExportPdfScreen(sample_document, InvoiceTotals.compute(sample_document), tmp_path)
        )
        await pilot.pause()
        app.screen.query_one("#btn-save", Button).press()
        await settle(app, pilot)

        status = app.screen.query_one("#status-label", Label)
        assert "replaced existing file" in status.render().plain
    assert (tmp_path / "invoice-INV-2025-4321.pdf").read_bytes().startswith(b"%PDF")


@pytest.mark.asyncio
async def test_export_empty_folder_shows_error(make_app, sample_document, settle):
    app = make_app()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.push_screen(ExportPdfScreen(sample_document, InvoiceTotals.compute(sample_document)))
        await pilot.pause()
        app.screen.query_one("#dir-input", Input).value = "  "
        app.screen.query_one("#btn-save", Button).press()
        await pilot.pause()
        error = app.screen.query_one("#error-label", Label)
        assert "folder" in error.render().plain.lower()


@pytest.mark.asyncio
async def test_export_error_shown(make_app, sample_document, tmp_path, settle):
    app = make_app()
    with patch(
        "freshbill.services.pdf_export.export_invoice_pdf",
        side_effect=OSError("disk full"),
    ):
        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.push_screen(
                ExportPdfScreen(sample_document, InvoiceTotals.compute(sample_document), tmp_path)
            )
            await pilot.pause()
            app.screen.query_one("#btn-save", Button).press()
            await settle(app, pilot)
            error = app.screen.query_one("#error-label", Label)
            assert "disk full" in error.render().plain


@pytest.mark.asyncio
async def test_print_sends_text(make_app, settle):
    app = make_app()
    with patch("freshbill.services.printing.send_to_printer") as mock_send:
        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.push_screen(PrintScreen("INVOICE\n"))
            await pilot.pause()
            app.screen.query_one("#btn-print", Button).press()
            await settle(app, pilot)
            status = app.screen.query_one("#status-label", Label)
            assert status.render().plain == "Sent to printer"
    mock_send.assert_called_once_with("INVOICE\n")


@pytest.mark.asyncio
async def test_print_unavailable(make_app, settle):
    from freshbill.services.exceptions import PrintUnavailableError

    app = make_app()
    with patch(
        "freshbill.services.printing.send_to_printer",
        side_effect=PrintUnavailableError("No print command"),
    ):
        async with app.run_test() as pilot:
            await settle(app, pilot)
            app.push_screen(PrintScreen("INVOICE\n"))
            await pilot.pause()
            app.screen.query_one("#btn-print", Button).press()
            await settle(app, pilot)
            status = app.screen.query_one("#status-label", Label)
            assert "No print command" in status.render().plain


def test_discard_summary(sample_document):
    from freshbill.tui.screens.clear_all import discard_summary

    sample_document.customer_name = "Ravi Kumar"
    text = discard_summary(sample_document, InvoiceTotals.compute(sample_document))
    assert text.startswith("Invoice #INV-2025-4321: ")
    assert f"{len(sample_document.items)} item" in text
    assert "customer Ravi Kumar" in text
    assert "total ₹" in text


@pytest.mark.asyncio
async def test_clear_dialog_enter_keeps_invoice(make_app, tui_session, settle):
    from freshbill.tui.screens.clear_all import ClearAllScreen
    from freshbill.tui.screens.invoice import InvoiceScreen

    app = make_app()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        await pilot.press("enter")
        await pilot.press("c")
        await pilot.pause()
        assert isinstance(app.screen, ClearAllScreen)
        summary = app.screen.query_one("#discard-summary", Label).render().plain
        assert "1 item," in summary
        await pilot.press("enter")
        await pilot.pause()
        assert isinstance(app.screen, InvoiceScreen)
        assert len(tui_session.document.items) == 1

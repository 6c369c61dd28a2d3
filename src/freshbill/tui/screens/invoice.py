from __future__ import annotations

import logging

from textual import work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Input, Label, Static

from freshbill.models.product import Product
from freshbill.utils.formatters import format_percent, format_rupee
from freshbill.utils.validators import validate_date

logger = logging.getLogger(__name__)

# Input id -> InvoiceDocument field
_FIELD_INPUTS: dict[str, str] = {
    "customer-name": "customer_name",
    "customer-email": "customer_email",
    "customer-phone": "customer_phone",
    "customer-address": "customer_address",
    "invoice-date": "date",
    "due-date": "due_date",
    "tax-rate": "tax_rate",
    "discount": "discount",
    "notes": "notes",
    "terms": "terms",
}


class InvoiceScreen(Screen):
    """Invoice builder: product picker, customer form, line items and summary."""

    BINDINGS = [
        Binding("plus", "increment", "Qty +", show=False),
        Binding("minus", "decrement", "Qty -", show=False),
        Binding("delete", "remove_item", "Remove", show=False),
        Binding("g", "regenerate_number", "New number", show=False),
        Binding("r", "refresh_products", "Refresh"),
        Binding("x", "clear_caches", "Clear cache"),
        Binding("d", "export_pdf", "PDF"),
        Binding("p", "print", "Print"),
        Binding("c", "clear_all", "Clear all"),
        Binding("h", "help", "Help"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._products: dict[str, Product] = {}

    def compose(self) -> ComposeResult:
        with Horizontal(id="top-bar"):
            yield Static("FreshFruits Billing", id="app-title")
            yield Button(
                "#",
                id="invoice-number",
                tooltip="Generate a new invoice number (g)",
            )
            yield Button("⤓ Download PDF", id="btn-pdf", variant="primary", tooltip="(d)")
            yield Button("⎙ Print", id="btn-print", tooltip="(p)")
            yield Button("✕ Clear All", id="btn-clear", variant="error", tooltip="(c)")

        with Horizontal(id="main"):
            with VerticalScroll(id="left-pane"):
                with Horizontal(classes="section-bar"):
                    yield Static("Products", classes="section-title")
                    yield Label("…", id="product-count")
                    yield Button("↻", id="btn-refresh", tooltip="Refresh products (r)")
                    yield Button("⌫", id="btn-clear-cache", tooltip="Clear product cache (x)")
                yield DataTable(id="products-table", cursor_type="row")

                yield Static("Customer Information", classes="section-title")
                yield Label("Name", classes="form-label")
                yield Input(placeholder="Enter customer name", id="customer-name")
                yield Label("Email", classes="form-label")
                yield Input(placeholder="Enter customer email", id="customer-email")
                yield Label("Phone", classes="form-label")
                yield Input(placeholder="Enter phone number", id="customer-phone")
                yield Label("Address", classes="form-label")
                yield Input(placeholder="Enter address", id="customer-address")

            with VerticalScroll(id="right-pane"):
                with Horizontal(classes="form-row"):
                    with Vertical():
                        yield Label("Invoice date", classes="form-label")
                        yield Input(placeholder="YYYY-MM-DD", id="invoice-date")
                    with Vertical():
                        yield Label("Due date", classes="form-label")
                        yield Input(placeholder="YYYY-MM-DD", id="due-date")

                with Horizontal(classes="section-bar"):
                    yield Static("Items", classes="section-title")
                    yield Button("+", id="btn-inc", tooltip="Increase quantity (+)")
                    yield Button("−", id="btn-dec", tooltip="Decrease quantity (-)")
                    yield Button("🗑", id="btn-remove", variant="error", tooltip="Remove item (del)")
                yield DataTable(id="items-table", cursor_type="row")
                yield Static(
                    "No items added to invoice. Add products from the left panel.",
                    id="empty-state",
                )

                with Horizontal(classes="form-row"):
                    with Vertical():
                        yield Label("Tax (%)", classes="form-label")
                        yield Input(placeholder="0", id="tax-rate")
                    with Vertical():
                        yield Label("Discount (%)", classes="form-label")
                        yield Input(placeholder="0", id="discount")
                yield Label("", id="error-label")

                yield Label("Notes", classes="form-label")
                yield Input(id="notes")
                yield Label("Terms & Conditions", classes="form-label")
                yield Input(id="terms")

                yield Static("Summary", classes="section-title")
                yield DataTable(id="summary-table", show_header=False, cursor_type="none")

        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#products-table", DataTable)
        table.add_columns("Product", "Category", "Price")
        items = self.query_one("#items-table", DataTable)
        items.add_columns("S.No", "Description", "Price", "Qty", "Total")
        self._sync_inputs()
        self._refresh_items()
        table.focus()
        self._load_products(force_refresh=False)

    # --- Catalog (threaded) ---

    @work(thread=True, group="catalog")
    def _load_products(self, force_refresh: bool) -> None:
        products = self.app.catalog.load_products(force_refresh)  # type: ignore[attr-defined]
        self.app.call_from_thread(self._populate_products, products)

    @work(thread=True, group="catalog")
    def _refresh_products(self) -> None:
        products = self.app.catalog.refresh()  # type: ignore[attr-defined]
        if products is not None:
            self.app.call_from_thread(self._populate_products, products)

    @work(thread=True, group="catalog")
    def _clear_caches(self) -> None:
        products = self.app.catalog.clear_caches()  # type: ignore[attr-defined]
        if products is not None:
            self.app.call_from_thread(self._populate_products, products)

    def _populate_products(self, products: list[Product]) -> None:
        table = self.query_one("#products-table", DataTable)
        table.clear()
        self._products = {}
        for product in products:
            if product.render_key in self._products:
                logger.info(
                    "Skipping duplicate product row %r (id=%s, price=%s)",
                    product.name,
                    product.id,
                    product.price,
                )
                continue
            self._products[product.render_key] = product
            table.add_row(
                product.name,
                product.category,
                format_rupee(product.price),
                key=product.render_key,
            )
        self.query_one("#product-count", Label).update(f"{len(self._products)} items")

    # --- Rendering ---

    @property
    def _session(self):
        return self.app.session  # type: ignore[attr-defined]

    def _sync_inputs(self) -> None:
        """Copy document fields into the form (startup and after a reset)."""
        doc = self._session.document
        for input_id, field_name in _FIELD_INPUTS.items():
            value = getattr(doc, field_name)
            if field_name in ("tax_rate", "discount"):
                value = format_percent(value)
            self.query_one(f"#{input_id}", Input).value = value
        self._refresh_number()

    def _refresh_number(self) -> None:
        number = self._session.document.invoice_number
        self.query_one("#invoice-number", Button).label = f"# {number}"

    def _refresh_items(self) -> None:
        doc = self._session.document
        table = self.query_one("#items-table", DataTable)
        cursor_row = table.cursor_row
        table.clear()
        for index, item in enumerate(doc.items, start=1):
            table.add_row(
                str(index),
                item.name,
                format_rupee(item.price),
                str(item.quantity),
                format_rupee(item.line_total),
                key=str(item.id),
            )
        has_rows = table.row_count > 0
        table.display = has_rows
        self.query_one("#empty-state", Static).display = not has_rows
        if has_rows:
            table.move_cursor(row=min(cursor_row, table.row_count - 1))
        self._refresh_summary()

    def _refresh_summary(self) -> None:
        doc = self._session.document
        totals = self._session.totals
        table = self.query_one("#summary-table", DataTable)
        table.clear(columns=True)
        table.add_columns("Label", "Amount")
        table.add_row("Subtotal", format_rupee(totals.subtotal))
        table.add_row(f"Tax ({format_percent(doc.tax_rate)}%)", format_rupee(totals.tax))
        table.add_row(
            f"Discount ({format_percent(doc.discount)}%)",
            "-" + format_rupee(totals.discount),
        )
        table.add_row("[bold]Total[/bold]", f"[bold]{format_rupee(totals.total)}[/bold]")

    def _selected_item_id(self) -> int | None:
        table = self.query_one("#items-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return int(str(row_key.value))

    # --- Event handlers ---

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        if event.data_table.id != "products-table":
            return
        product = self._products.get(str(event.row_key.value))
        if product is None:
            return
        self._session.add_product(product)
        self._refresh_items()

    def on_input_changed(self, event: Input.Changed) -> None:
        field_name = _FIELD_INPUTS.get(event.input.id or "")
        if field_name is None:
            return
        error_label = self.query_one("#error-label", Label)
        try:
            self._session.update_field(field_name, event.value)
            # dates are stored as typed; a malformed one only raises a hint
            if field_name in ("date", "due_date") and event.value:
                validate_date(event.value)
        except ValueError as e:
            error_label.update(str(e))
            return
        error_label.update("")
        if field_name in ("tax_rate", "discount"):
            self._refresh_summary()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        match event.button.id:
            case "invoice-number":
                self.action_regenerate_number()
            case "btn-pdf":
                self.action_export_pdf()
            case "btn-print":
                self.action_print()
            case "btn-clear":
                self.action_clear_all()
            case "btn-refresh":
                self.action_refresh_products()
            case "btn-clear-cache":
                self.action_clear_caches()
            case "btn-inc":
                self.action_increment()
            case "btn-dec":
                self.action_decrement()
            case "btn-remove":
                self.action_remove_item()

    # --- Actions ---

    def action_increment(self) -> None:
        item_id = self._selected_item_id()
        if item_id is not None and self._session.increment(item_id):
            self._refresh_items()

    def action_decrement(self) -> None:
        item_id = self._selected_item_id()
        if item_id is not None and self._session.decrement(item_id):
            self._refresh_items()

    def action_remove_item(self) -> None:
        item_id = self._selected_item_id()
        if item_id is None:
            return
        self._session.remove_item(item_id)
        self._refresh_items()

    def action_regenerate_number(self) -> None:
        number = self._session.regenerate_invoice_number()
        self._refresh_number()
        self.notify(f"Invoice number: {number}", timeout=2)

    def action_refresh_products(self) -> None:
        self.notify("Refreshing products…", severity="information", timeout=2)
        self._refresh_products()

    def action_clear_caches(self) -> None:
        self._clear_caches()

    def action_export_pdf(self) -> None:
        from freshbill.tui.screens.export_pdf import ExportPdfScreen

        if not self._session.document.items:
            self.notify("Add at least one item before exporting", severity="warning", timeout=3)
            return
        self.app.push_screen(ExportPdfScreen(self._session.document, self._session.totals))

    def action_print(self) -> None:
        from freshbill.services.printing import render_print_view
        from freshbill.tui.screens.print_preview import PrintScreen

        text = render_print_view(self._session.document, self._session.totals)
        self.app.push_screen(PrintScreen(text))

    def action_clear_all(self) -> None:
        from freshbill.tui.screens.clear_all import ClearAllScreen

        self.app.push_screen(
            ClearAllScreen(self._session.document, self._session.totals),
            callback=self._on_clear_confirmed,
        )

    def _on_clear_confirmed(self, confirmed: bool | None) -> None:
        if self._session.clear_all(bool(confirmed)):
            self._sync_inputs()
            self._refresh_items()
            self.notify("All data cleared", timeout=2)

    def action_help(self) -> None:
        from freshbill.tui.screens.help import HelpScreen

        self.app.push_screen(HelpScreen())

from __future__ import annotations

import logging
import time
from datetime import date, timedelta

from freshbill import config as _config
from freshbill.models.company import CompanyProfile
from freshbill.models.invoice import (
    PERCENT_FIELDS,
    SCALAR_FIELDS,
    InvoiceDocument,
    InvoiceTotals,
    LineItem,
)
from freshbill.models.product import Product
from freshbill.services.notices import Notify, log_notify
from freshbill.services.storage import KeyValueStore
from freshbill.utils.invoice_number import generate_invoice_number
from freshbill.utils.validators import validate_percent

logger = logging.getLogger(__name__)

DEFAULT_NOTES = "Thank you for your business! Please make payment within 7 days."
DEFAULT_TERMS = "Payment due within 7 days. Late payments subject to 1.5% monthly interest."

CLEAR_CONFIRM_MESSAGE = "Are you sure you want to clear all data? This cannot be undone."


def default_document(company: CompanyProfile, today: date | None = None) -> InvoiceDocument:
    today = today or date.today()
    return InvoiceDocument(
        invoice_number=generate_invoice_number(today),
        date=today.isoformat(),
        due_date=(today + timedelta(days=_config.DUE_DAYS)).isoformat(),
        company_name=company.name,
        company_email=company.email,
        company_phone=company.phone,
        company_address=company.address,
        notes=DEFAULT_NOTES,
        terms=DEFAULT_TERMS,
    )


class InvoiceSession:
    """Owns the invoice being edited and persists it after every change."""

    def __init__(
        self,
        document: InvoiceDocument,
        store: KeyValueStore,
        company: CompanyProfile,
        notify: Notify = log_notify,
    ) -> None:
        self.document = document
        self.store = store
        self.company = company
        self.notify = notify

    @classmethod
    def open(
        cls,
        store: KeyValueStore,
        company: CompanyProfile | None = None,
        notify: Notify = log_notify,
    ) -> InvoiceSession:
        """Restore the saved invoice, or start a fresh one.

        A saved document that cannot be rebuilt is set aside and replaced
        with defaults rather than aborting startup.
        """
        company = company or CompanyProfile()
        raw = store.get(_config.INVOICE_KEY)
        document: InvoiceDocument | None = None
        if raw is not None:
            try:
                document = InvoiceDocument.from_dict(raw)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("Saved invoice unreadable (%s); starting fresh", exc)
                store.quarantine(_config.INVOICE_KEY)
        if document is None:
            document = default_document(company)
        return cls(document, store, company, notify)

    @property
    def totals(self) -> InvoiceTotals:
        return InvoiceTotals.compute(self.document)

    def _persist(self) -> None:
        self.store.set(_config.INVOICE_KEY, self.document.to_dict())

    def _new_item_id(self) -> int:
        """Millisecond timestamp, bumped past any id already in the document."""
        candidate = time.time_ns() // 1_000_000
        taken = {i.id for i in self.document.items}
        while candidate in taken:
            candidate += 1
        return candidate

    # --- Line items ---

    def add_product(self, product: Product) -> LineItem:
        existing = next(
            (i for i in self.document.items if i.product_id == product.id), None
        )
        if existing is not None:
            existing.quantity += 1
            self._persist()
            self.notify(f"{product.name} quantity updated to {existing.quantity}", "information")
            return existing

        item = LineItem(
            id=self._new_item_id(),
            product_id=product.id,
            name=product.name,
            quantity=1,
            price=product.price,
        )
        self.document.items.append(item)
        self._persist()
        self.notify(f"{product.name} added to invoice", "information")
        return item

    def set_quantity(self, item_id: int, quantity: int) -> bool:
        """Replace an item's quantity. Values below 1 are ignored, never clamped."""
        if quantity < 1:
            return False
        item = self.document.find_item(item_id)
        if item is None:
            return False
        item.quantity = quantity
        self._persist()
        return True

    def increment(self, item_id: int) -> bool:
        item = self.document.find_item(item_id)
        return item is not None and self.set_quantity(item_id, item.quantity + 1)

    def decrement(self, item_id: int) -> bool:
        item = self.document.find_item(item_id)
        return item is not None and self.set_quantity(item_id, item.quantity - 1)

    def remove_item(self, item_id: int) -> None:
        self.document.items = [i for i in self.document.items if i.id != item_id]
        self._persist()

    # --- Scalar fields ---

    def update_field(self, name: str, value: object) -> None:
        """Set a top-level scalar field (customer info, dates, notes, terms, tax, discount).

        Raises KeyError for unknown fields and ValueError for bad percentages.
        """
        if name not in SCALAR_FIELDS:
            raise KeyError(name)
        if name in PERCENT_FIELDS:
            value = validate_percent(value)
        else:
            value = "" if value is None else str(value)
        setattr(self.document, name, value)
        self._persist()

    def regenerate_invoice_number(self) -> str:
        self.document.invoice_number = generate_invoice_number()
        self._persist()
        return self.document.invoice_number

    def clear_all(self, confirmed: bool) -> bool:
        """Reset to a blank invoice and erase the saved copy, once the operator confirmed."""
        if not confirmed:
            return False
        self.document = default_document(self.company)
        self.store.remove(_config.INVOICE_KEY)
        return True

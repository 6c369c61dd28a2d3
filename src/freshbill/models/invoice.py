from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from freshbill.utils.money import round_cents, to_decimal, to_json_number


@dataclass
class LineItem:
    id: int
    product_id: int | str
    name: str
    quantity: int
    price: Decimal  # unit price captured when the product was added

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.price

    @classmethod
    def from_dict(cls, d: dict) -> LineItem:
        return cls(
            id=d["id"],
            product_id=d["productId"],
            name=d["name"],
            quantity=int(d["quantity"]),
            price=to_decimal(d["price"]),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "price": to_json_number(self.price),
        }


# Document attribute -> persisted JSON key, for the scalar fields.
SCALAR_FIELDS: dict[str, str] = {
    "invoice_number": "invoiceNumber",
    "date": "date",
    "due_date": "dueDate",
    "company_name": "companyName",
    "company_email": "companyEmail",
    "company_phone": "companyPhone",
    "company_address": "companyAddress",
    "customer_name": "customerName",
    "customer_email": "customerEmail",
    "customer_phone": "customerPhone",
    "customer_address": "customerAddress",
    "tax_rate": "taxRate",
    "discount": "discount",
    "notes": "notes",
    "terms": "terms",
}

PERCENT_FIELDS = frozenset({"tax_rate", "discount"})


@dataclass
class InvoiceDocument:
    """The editable invoice. Mutated in place by InvoiceSession."""

    invoice_number: str
    date: str  # YYYY-MM-DD
    due_date: str  # YYYY-MM-DD
    company_name: str
    company_email: str
    company_phone: str
    company_address: str
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    customer_address: str = ""
    items: list[LineItem] = field(default_factory=list)
    tax_rate: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    notes: str = ""
    terms: str = ""

    def find_item(self, item_id: int) -> LineItem | None:
        return next((i for i in self.items if i.id == item_id), None)

    @classmethod
    def from_dict(cls, d: dict) -> InvoiceDocument:
        """Rebuild a document from its persisted JSON form."""
        return cls(
            invoice_number=d["invoiceNumber"],
            date=d["date"],
            due_date=d["dueDate"],
            company_name=d["companyName"],
            company_email=d.get("companyEmail", ""),
            company_phone=d.get("companyPhone", ""),
            company_address=d.get("companyAddress", ""),
            customer_name=d.get("customerName", ""),
            customer_email=d.get("customerEmail", ""),
            customer_phone=d.get("customerPhone", ""),
            customer_address=d.get("customerAddress", ""),
            items=[LineItem.from_dict(i) for i in d.get("items", [])],
            tax_rate=to_decimal(d.get("taxRate", 0)),
            discount=to_decimal(d.get("discount", 0)),
            notes=d.get("notes", ""),
            terms=d.get("terms", ""),
        )

    def to_dict(self) -> dict:
        data: dict = {}
        for attr, key in SCALAR_FIELDS.items():
            value = getattr(self, attr)
            data[key] = to_json_number(value) if attr in PERCENT_FIELDS else value
        data["items"] = [i.to_dict() for i in self.items]
        return data


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal

    @classmethod
    def compute(cls, doc: InvoiceDocument) -> InvoiceTotals:
        """Derive the summary block; only the four outputs are rounded."""
        subtotal = sum((i.line_total for i in doc.items), Decimal("0"))
        tax = subtotal * doc.tax_rate / 100
        discount = subtotal * doc.discount / 100
        total = subtotal + tax - discount
        return cls(
            subtotal=round_cents(subtotal),
            tax=round_cents(tax),
            discount=round_cents(discount),
            total=round_cents(total),
        )

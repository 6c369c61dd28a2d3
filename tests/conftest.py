from __future__ import annotations

from decimal import Decimal

import pytest

from freshbill.models.company import CompanyProfile
from freshbill.models.invoice import InvoiceDocument, LineItem
from freshbill.models.product import Product
from freshbill.services.invoice_session import InvoiceSession
from freshbill.services.storage import MemoryStore


class NoticeRecorder:
    """Collects (message, severity) pairs emitted through a Notify callback."""

    def __init__(self) -> None:
        self.notices: list[tuple[str, str]] = []

    def __call__(self, message: str, severity: str = "information") -> None:
        self.notices.append((message, severity))

    def severities(self) -> list[str]:
        return [s for _, s in self.notices]


@pytest.fixture
def notices() -> NoticeRecorder:
    return NoticeRecorder()


# --- Product fixtures ---


@pytest.fixture
def apple() -> Product:
    return Product(1, "Apple", Decimal("150"))


@pytest.fixture
def mango() -> Product:
    return Product(4, "Mango", Decimal("250"))


# --- Company fixtures ---


@pytest.fixture
def company_dict() -> dict:
    return {
        "name": "Green Basket",
        "email": "hello@greenbasket.in",
        "phone": "+91 90000 11111",
        "address": "7 Market Road, Thrissur, Kerala 680001",
    }


@pytest.fixture
def company(company_dict: dict) -> CompanyProfile:
    return CompanyProfile.from_dict(company_dict)


# --- Invoice fixtures ---


@pytest.fixture
def sample_document() -> InvoiceDocument:
    return InvoiceDocument(
        invoice_number="INV-2025-4321",
        date="2025-06-01",
        due_date="2025-06-08",
        company_name="FreshFruits Co.",
        company_email="sales@freshfruits.com",
        company_phone="+91 98765 43210",
        company_address="123 Fruit Market, Kochi, Kerala 682001",
        customer_name="Anita Menon",
        customer_email="anita@example.com",
        customer_phone="+91 99999 00000",
        customer_address="12 Beach Road, Kochi",
        items=[
            LineItem(id=1001, product_id=1, name="Apple", quantity=2, price=Decimal("150")),
            LineItem(id=1002, product_id=4, name="Mango", quantity=1, price=Decimal("250")),
        ],
        tax_rate=Decimal("10"),
        discount=Decimal("5"),
        notes="Thank you!",
        terms="Net 7",
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def session(store: MemoryStore, notices: NoticeRecorder) -> InvoiceSession:
    return InvoiceSession.open(store, CompanyProfile(), notify=notices)

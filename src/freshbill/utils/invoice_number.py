from __future__ import annotations

import random
from datetime import date


def generate_invoice_number(today: date | None = None) -> str:
    """Generate an invoice number: INV-<year>-<1000..9999>.

    The suffix is random and never checked against earlier invoices, so two
    invoices in the same year can share a number.
    """
    year = (today or date.today()).year
    return f"INV-{year}-{random.randint(1000, 9999)}"

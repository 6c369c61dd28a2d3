from __future__ import annotations

import platform
import shutil
import subprocess
import textwrap

from freshbill.models.invoice import InvoiceDocument, InvoiceTotals
from freshbill.services.exceptions import PrintUnavailableError
from freshbill.utils.formatters import format_percent, format_rupee

WIDTH = 72


def _row(label: str, value: str) -> str:
    return f"{label:>{WIDTH - 20}}{value:>20}"


def render_print_view(document: InvoiceDocument, totals: InvoiceTotals) -> str:
    """Render the invoice as plain text for the print preview and the spooler."""
    lines: list[str] = []
    lines.append(f"{document.company_name:<{WIDTH - 12}}{'INVOICE':>12}")
    lines.append(f"{document.company_address:<{WIDTH - 30}}{'#' + document.invoice_number:>30}")
    lines.append(f"{'Email: ' + document.company_email:<{WIDTH - 30}}{'Date: ' + document.date:>30}")
    lines.append(
        f"{'Phone: ' + document.company_phone:<{WIDTH - 30}}{'Due: ' + document.due_date:>30}"
    )
    lines.append("=" * WIDTH)
    lines.append("Bill To:")
    lines.append(f"  {document.customer_name or 'Customer Name'}")
    lines.append(f"  {document.customer_address or 'Address'}")
    lines.append(f"  Email: {document.customer_email or 'N/A'}")
    lines.append(f"  Phone: {document.customer_phone or 'N/A'}")
    lines.append("-" * WIDTH)
    lines.append(f"{'S.No':<6}{'Description':<26}{'Price':>14}{'Qty':>8}{'Total':>18}")
    lines.append("-" * WIDTH)
    if not document.items:
        lines.append("  (no items)")
    for index, item in enumerate(document.items, start=1):
        lines.append(
            f"{index:<6}{item.name[:25]:<26}{format_rupee(item.price):>14}"
            f"{item.quantity:>8}{format_rupee(item.line_total):>18}"
        )
    lines.append("-" * WIDTH)
    lines.append(_row("Subtotal:", format_rupee(totals.subtotal)))
    lines.append(_row(f"Tax ({format_percent(document.tax_rate)}%):", format_rupee(totals.tax)))
    lines.append(
        _row(
            f"Discount ({format_percent(document.discount)}%):",
            "-" + format_rupee(totals.discount),
        )
    )
    lines.append(_row("Total:", format_rupee(totals.total)))
    lines.append("=" * WIDTH)
    lines.append("Notes:")
    lines.extend(textwrap.wrap(document.notes, WIDTH - 2, initial_indent="  ", subsequent_indent="  "))
    lines.append("Terms & Conditions:")
    lines.extend(textwrap.wrap(document.terms, WIDTH - 2, initial_indent="  ", subsequent_indent="  "))
    lines.append("")
    lines.append("Thank you for your business!".center(WIDTH).rstrip())
    return "\n".join(lines) + "\n"


def _print_cmd() -> list[str] | None:
    """Return the print spooler command for the current platform."""
    if platform.system() == "Windows":
        return None
    if shutil.which("lp"):
        return ["lp"]
    if shutil.which("lpr"):
        return ["lpr"]
    return None


def send_to_printer(text: str) -> None:
    """Hand the rendered invoice to the host print spooler.

    Raises PrintUnavailableError when no spooler command exists and
    CalledProcessError when the spooler rejects the job.
    """
    cmd = _print_cmd()
    if cmd is None:
        raise PrintUnavailableError("No print command (lp/lpr) available on this system")
    subprocess.run(cmd, input=text.encode("utf-8"), check=True, timeout=30)

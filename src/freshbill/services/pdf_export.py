from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from freshbill.models.invoice import InvoiceDocument, InvoiceTotals
from freshbill.utils.formatters import format_inr, format_percent

logger = logging.getLogger(__name__)

BRAND_GREEN = colors.Color(34 / 255, 197 / 255, 94 / 255)
MUTED = colors.Color(100 / 255, 100 / 255, 100 / 255)
FOOTER_GREY = colors.Color(150 / 255, 150 / 255, 150 / 255)

FOOTER_TEXT = "Thank you for your business!"


def pdf_filename(document: InvoiceDocument) -> str:
    return f"invoice-{document.invoice_number}.pdf"


def _draw_footer(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(FOOTER_GREY)
    canvas.drawCentredString(A4[0] / 2, 15 * mm, FOOTER_TEXT)
    canvas.restoreState()


def render_invoice_pdf(document: InvoiceDocument, totals: InvoiceTotals) -> bytes:
    """Lay out the invoice on A4 pages and return the PDF bytes.

    Sections, top to bottom: company header with the INVOICE block, Bill To,
    the S.No/Description/Price/Qty/Total table, the summary, notes and terms.
    The footer is drawn on every page.
    """
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=20 * mm,
        leftMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=25 * mm,
        title=f"Invoice {document.invoice_number}",
        author=document.company_name,
    )

    styles = getSampleStyleSheet()
    company_style = ParagraphStyle(
        "CompanyStyle",
        parent=styles["Heading1"],
        fontSize=24,
        leading=28,
        textColor=BRAND_GREEN,
    )
    title_style = ParagraphStyle(
        "InvoiceTitle",
        parent=styles["Heading2"],
        fontSize=18,
        alignment=TA_RIGHT,
    )
    muted_style = ParagraphStyle(
        "Muted", parent=styles["Normal"], fontSize=10, textColor=MUTED
    )
    normal_style = ParagraphStyle("NormalStyle", parent=styles["Normal"], fontSize=10)
    right_style = ParagraphStyle("Right", parent=normal_style, alignment=TA_RIGHT)
    heading_style = ParagraphStyle(
        "Heading", parent=styles["Normal"], fontSize=12, fontName="Helvetica-Bold"
    )

    def p(text: str, style: ParagraphStyle = normal_style) -> Paragraph:
        return Paragraph(escape(text), style)

    elements: list = []

    # Header: company identity on the left, invoice identifiers on the right
    left = [
        p(document.company_name, company_style),
        p(document.company_address, muted_style),
        p(f"Email: {document.company_email}", muted_style),
        p(f"Phone: {document.company_phone}", muted_style),
    ]
    right = [
        p("INVOICE", title_style),
        p(f"Invoice #: {document.invoice_number}", right_style),
        p(f"Date: {document.date}", right_style),
        p(f"Due Date: {document.due_date}", right_style),
    ]
    header = Table([[left, right]], colWidths=[100 * mm, 70 * mm])
    header.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    elements.append(header)
    elements.append(Spacer(1, 12 * mm))

    elements.append(p("Bill To:", heading_style))
    elements.append(Spacer(1, 2 * mm))
    elements.append(p(document.customer_name or "Customer Name"))
    elements.append(p(document.customer_address or "Address"))
    elements.append(p(f"Email: {document.customer_email or 'N/A'}"))
    elements.append(p(f"Phone: {document.customer_phone or 'N/A'}"))
    elements.append(Spacer(1, 10 * mm))

    rows = [["S.No", "Description", "Price", "Qty", "Total"]]
    for index, item in enumerate(document.items, start=1):
        rows.append(
            [
                str(index),
                p(item.name),
                format_inr(item.price),
                str(item.quantity),
                format_inr(item.line_total),
            ]
        )
    items_table = Table(
        rows,
        colWidths=[15 * mm, 70 * mm, 30 * mm, 20 * mm, 35 * mm],
        repeatRows=1,
    )
    items_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), BRAND_GREEN),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ("TOPPADDING", (0, 0), (-1, -1), 6),
                (
                    "ROWBACKGROUNDS",
                    (0, 1),
                    (-1, -1),
                    [colors.white, colors.HexColor("#F2F2F2")],
                ),
            ]
        )
    )
    elements.append(items_table)
    elements.append(Spacer(1, 10 * mm))

    summary = Table(
        [
            ["Subtotal:", format_inr(totals.subtotal)],
            [f"Tax ({format_percent(document.tax_rate)}%):", format_inr(totals.tax)],
            [
                f"Discount ({format_percent(document.discount)}%):",
                "-" + format_inr(totals.discount),
            ],
            ["Total:", format_inr(totals.total)],
        ],
        colWidths=[40 * mm, 40 * mm],
        hAlign="RIGHT",
    )
    summary.setStyle(
        TableStyle(
            [
                ("FONTSIZE", (0, 0), (-1, -2), 10),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, -1), (-1, -1), 14),
                ("TOPPADDING", (0, -1), (-1, -1), 8),
                ("LINEABOVE", (0, -1), (-1, -1), 1, colors.black),
            ]
        )
    )
    elements.append(summary)
    elements.append(Spacer(1, 10 * mm))

    elements.append(p("Notes:", heading_style))
    elements.append(p(document.notes))
    elements.append(Spacer(1, 6 * mm))
    elements.append(p("Terms & Conditions:", heading_style))
    elements.append(p(document.terms))

    doc.build(elements, onFirstPage=_draw_footer, onLaterPages=_draw_footer)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes


def export_invoice_pdf(
    document: InvoiceDocument, totals: InvoiceTotals, directory: Path
) -> tuple[Path, bool]:
    """Write invoice-<number>.pdf into *directory*.

    An earlier export of the same invoice number is replaced. Returns the
    path and whether a file was replaced.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / pdf_filename(document)
    replaced = path.exists()
    path.write_bytes(render_invoice_pdf(document, totals))
    if replaced:
        logger.info("Invoice export replaced %s", path)
    else:
        logger.info("Invoice exported to %s", path)
    return path, replaced

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from freshbill.utils.money import to_decimal


def group_indian(integer_digits: str) -> str:
    """Group digits the Indian way: last three, then pairs (12,34,567)."""
    if len(integer_digits) <= 3:
        return integer_digits
    head, tail = integer_digits[:-3], integer_digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def _grouped(d: Decimal, places: int, keep_zeros: bool) -> str:
    q = d.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    sign = "-" if q < 0 else ""
    text = f"{abs(q):.{places}f}"
    int_part, _, frac = text.partition(".")
    if not keep_zeros:
        frac = frac.rstrip("0")
    out = sign + group_indian(int_part)
    return f"{out}.{frac}" if frac else out


def format_inr(value: object) -> str:
    """Format a number as Rs. 1,23,456.5 (PDF text; up to 3 decimals, no trailing zeros)."""
    try:
        d = to_decimal(value)
    except ValueError:
        d = Decimal("0")
    return "Rs. " + _grouped(d, 3, keep_zeros=False)


def format_rupee(value: object) -> str:
    """Format a number as ₹1,23,456.50 for on-screen display."""
    d = to_decimal(value)
    return "₹" + _grouped(d, 2, keep_zeros=True)


def format_percent(value: Decimal) -> str:
    """Render a percentage without a trailing .0 (10, 12.5)."""
    return f"{value.normalize():f}"

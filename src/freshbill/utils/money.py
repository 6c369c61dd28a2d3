from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")


def to_decimal(value: object) -> Decimal:
    """Convert a JSON/YAML number or numeric string to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    Raises ValueError for anything that is not a finite number.
    """
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Invalid number: {value!r}") from None
    if not d.is_finite():
        raise ValueError(f"Invalid number: {value!r}")
    return d


def to_json_number(value: Decimal) -> int | float | str:
    """Serialize a Decimal as a plain JSON number (int when integral).

    Values a float cannot hold exactly are written as decimal strings,
    which to_decimal() reads back unchanged.
    """
    if value == value.to_integral_value():
        return int(value)
    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return str(value)


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)

"""Fetch and decode the spreadsheet-published product CSV.

The sheet is maintained by hand, so headers vary in case and spacing and
prices may carry a currency prefix or thousands separators.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from decimal import Decimal

import requests.exceptions
from requests import get

from freshbill.config import FEED_TIMEOUT
from freshbill.models.product import Product
from freshbill.services.exceptions import FeedDecodeError, FeedError
from freshbill.utils.money import to_decimal

logger = logging.getLogger(__name__)

_HEADER_ALIASES = {
    "id": "id",
    "productid": "id",
    "name": "name",
    "product": "name",
    "productname": "name",
    "price": "price",
    "unitprice": "price",
    "category": "category",
}

_PRICE_JUNK = re.compile(r"(?i)rs\.?|inr|₹|,|\s")


def _normalize_header(key: str | None) -> str | None:
    if key is None:
        return None
    compact = re.sub(r"[\s_\-]+", "", key.strip().lower())
    return _HEADER_ALIASES.get(compact)


def parse_price(value: str | None) -> Decimal | None:
    """Parse a price cell, returning None when it is missing or unparseable."""
    if value is None:
        return None
    cleaned = _PRICE_JUNK.sub("", value)
    if not cleaned:
        return None
    try:
        return to_decimal(cleaned)
    except ValueError:
        return None


def fetch_feed(url: str, now: float) -> str:
    """GET the CSV feed, defeating intermediate caches with a timestamp parameter."""
    try:
        resp = get(url, params={"t": int(now * 1000)}, timeout=FEED_TIMEOUT)
    except requests.exceptions.RequestException as exc:
        raise FeedError(f"Catalog feed unreachable: {exc}") from exc
    if not resp.ok:
        body = resp.text[:200] if resp.text else ""
        raise FeedError(
            f"Catalog feed error ({resp.status_code}): {body}",
            status_code=resp.status_code,
        )
    # Published sheets are UTF-8 but often omit the charset parameter.
    resp.encoding = "utf-8"
    return resp.text


def decode_products(text: str) -> list[Product]:
    """Decode header-labeled CSV rows into products.

    Rows without a name or with a non-positive/unparseable price are skipped.
    Raises FeedDecodeError when the header lacks Name/Price or nothing survives.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    columns = {_normalize_header(k): k for k in reader.fieldnames or []}
    if "name" not in columns or "price" not in columns:
        raise FeedDecodeError(f"Feed header missing Name/Price columns: {reader.fieldnames}")

    products: list[Product] = []
    skipped = 0
    for row_number, row in enumerate(reader, start=1):
        name = (row.get(columns["name"]) or "").strip()
        price = parse_price(row.get(columns["price"]))
        if not name or price is None or price <= 0:
            skipped += 1
            continue
        raw_id = (row.get(columns["id"]) or "").strip() if "id" in columns else ""
        category = (row.get(columns["category"]) or "").strip() if "category" in columns else ""
        products.append(
            Product(
                id=int(raw_id) if raw_id.isdigit() else (raw_id or row_number),
                name=name,
                price=price,
                category=category or "Fruits",
            )
        )

    if skipped:
        logger.info("Skipped %d invalid feed row(s)", skipped)
    if not products:
        raise FeedDecodeError("Feed contained no valid products")
    return products

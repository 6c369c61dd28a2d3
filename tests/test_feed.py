from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
import requests.exceptions

from freshbill.services.exceptions import FeedDecodeError, FeedError
from freshbill.services.feed import decode_products, fetch_feed, parse_price


def _mock_response(ok: bool = True, status_code: int = 200, text: str = ""):
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status_code
    resp.text = text
    return resp


class TestParsePrice:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("150", Decimal("150")),
            ("99.50", Decimal("99.50")),
            ("Rs. 1,200", Decimal("1200")),
            ("₹80", Decimal("80")),
            ("INR 45", Decimal("45")),
            (" 12 ", Decimal("12")),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_price(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "12abc"])
    def test_invalid(self, raw):
        assert parse_price(raw) is None


class TestDecodeProducts:
    def test_basic(self):
        products = decode_products("ID,Name,Price,Category\n1,Apple,150,Fruits\n2,Banana,80,Tropical\n")
        assert [p.name for p in products] == ["Apple", "Banana"]
        assert products[0].id == 1
        assert products[0].price == Decimal("150")
        assert products[1].category == "Tropical"

    def test_header_variants(self):
        text = "product_id, Product Name ,UNIT-PRICE\n7,Kiwi,180\n"
        (kiwi,) = decode_products(text)
        assert kiwi.id == 7
        assert kiwi.name == "Kiwi"
        assert kiwi.price == Decimal("180")
        assert kiwi.category == "Fruits"

    def test_quoted_price_with_separators(self):
        (p,) = decode_products('Name,Price\nWatermelon,"Rs. 1,450"\n')
        assert p.price == Decimal("1450")

    def test_missing_id_uses_row_number(self):
        products = decode_products("Name,Price\nApple,150\nMango,250\n")
        assert [p.id for p in products] == [1, 2]

    def test_non_numeric_id_kept_as_text(self):
        (p,) = decode_products("Id,Name,Price\nSKU-7,Grapes,280\n")
        assert p.id == "SKU-7"

    def test_skips_invalid_rows(self):
        text = (
            "Name,Price\n"
            "Apple,150\n"
            ",80\n"
            "Orange,\n"
            "Mango,abc\n"
            "Kiwi,0\n"
            "Lemon,-5\n"
            "Grapes,280\n"
        )
        products = decode_products(text)
        assert [p.name for p in products] == ["Apple", "Grapes"]

    def test_strips_bom(self):
        (p,) = decode_products("\ufeffName,Price\nApple,150\n")
        assert p.name == "Apple"

    def test_missing_columns(self):
        with pytest.raises(FeedDecodeError, match="Name/Price"):
            decode_products("Fruit,Cost\nApple,150\n")

    def test_no_valid_rows(self):
        with pytest.raises(FeedDecodeError, match="no valid products"):
            decode_products("Name,Price\n,0\nApple,free\n")

    def test_empty_body(self):
        with pytest.raises(FeedDecodeError):
            decode_products("")

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_products("garbage")


class TestFetchFeed:
    @patch("freshbill.services.feed.get")
    def test_success(self, mock_get):
        mock_get.return_value = _mock_response(text="Name,Price\nApple,150\n")
        assert fetch_feed("https://sheet.example/pub?output=csv", 1700000000.5) == (
            "Name,Price\nApple,150\n"
        )

    @patch("freshbill.services.feed.get")
    def test_cache_busting_param(self, mock_get):
        mock_get.return_value = _mock_response(text="x")
        fetch_feed("https://sheet.example/pub", 1700000000.5)
        args, kwargs = mock_get.call_args
        assert args[0] == "https://sheet.example/pub"
        assert kwargs["params"] == {"t": 1700000000500}
        assert kwargs["timeout"] == 15

    @patch("freshbill.services.feed.get")
    def test_forces_utf8(self, mock_get):
        resp = _mock_response(text="x")
        mock_get.return_value = resp
        fetch_feed("https://sheet.example/pub", 0)
        assert resp.encoding == "utf-8"

    @patch("freshbill.services.feed.get")
    def test_http_error(self, mock_get):
        mock_get.return_value = _mock_response(ok=False, status_code=404, text="Not Found")
        with pytest.raises(FeedError, match=r"404") as exc_info:
            fetch_feed("https://sheet.example/pub", 0)
        assert exc_info.value.status_code == 404

    @patch("freshbill.services.feed.get")
    def test_truncates_body(self, mock_get):
        mock_get.return_value = _mock_response(ok=False, status_code=500, text="x" * 1000)
        with pytest.raises(FeedError) as exc_info:
            fetch_feed("https://sheet.example/pub", 0)
        msg = str(exc_info.value)
        assert "x" * 200 in msg
        assert "x" * 201 not in msg

    @patch("freshbill.services.feed.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(FeedError, match="unreachable") as exc_info:
            fetch_feed("https://sheet.example/pub", 0)
        assert exc_info.value.status_code is None

    @patch("freshbill.services.feed.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(FeedError):
            fetch_feed("https://sheet.example/pub", 0)

    @patch("freshbill.services.feed.get")
    def test_single_attempt(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(FeedError):
            fetch_feed("https://sheet.example/pub", 0)
        assert mock_get.call_count == 1

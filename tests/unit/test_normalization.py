"""공급자 행 정규화 단위 테스트"""

import math

import pytest

from bundlebot.providers import FieldRules, RowNormalizer, build_reason, parse_price
from bundlebot.providers.normalization import first_present
from bundlebot.providers.rapidapi import RAPIDAPI_RULES
from bundlebot.schemas import PLACEHOLDER_IMAGE
from tests.fixtures import RAPIDAPI_PAYLOADS


class TestParsePrice:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$24.99", 24.99),
            ("1,299.00 USD", 1299.0),
            ("USD 15", 15.0),
            (12, 12.0),
            (9.5, 9.5),
            (" $ 7.25 ", 7.25),
        ],
    )
    def test_extracts_number(self, raw, expected):
        assert parse_price(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "call for price", True, "$"])
    def test_unparseable_is_nan(self, raw):
        assert math.isnan(parse_price(raw))


class TestReason:
    def test_merchant_and_rating(self):
        assert build_reason(rating=4.6, merchant="Target") == "Target • Rating: 4.6"

    def test_merchant_only(self):
        assert build_reason(merchant="Walmart") == "Walmart"

    def test_default(self):
        assert build_reason() == "Good value"


class TestFirstPresent:
    def test_skips_missing_and_blank(self):
        row = {"title": "  ", "name": None, "product_title": "Lamp"}
        assert first_present(row, ("title", "name", "product_title")) == "Lamp"

    def test_zero_is_present(self):
        assert first_present({"price": 0}, ("price",)) == 0


class TestRowNormalizer:
    def test_field_variants(self):
        normalizer = RowNormalizer(RAPIDAPI_RULES, source="rapidapi")
        candidates = normalizer.normalize(RAPIDAPI_PAYLOADS["mixed_fields"]["results"], limit=10)

        by_name = {c.name: c for c in candidates}
        assert by_name["Twin XL Sheet Set"].price == 24.99
        assert by_name["Twin XL Sheet Set"].image == "https://img.example.com/1.jpg"
        assert by_name["Twin XL Sheet Set"].reason == "Target • Rating: 4.6"
        assert by_name["Weighted Blanket"].price == 1299.0
        assert by_name["Weighted Blanket"].link == "https://a.example.com/2"
        assert by_name["Weighted Blanket"].image == PLACEHOLDER_IMAGE
        assert by_name["Mattress Pad"].price == 1049.0
        assert by_name["Mattress Pad"].reason == "Walmart"
        assert all(c.source == "rapidapi" for c in candidates)

    def test_sorted_ascending_and_truncated(self):
        normalizer = RowNormalizer(RAPIDAPI_RULES, source="rapidapi")
        candidates = normalizer.normalize(RAPIDAPI_PAYLOADS["mixed_fields"]["results"], limit=3)

        assert [c.price for c in candidates] == [9.5, 24.99, 1049.0]

    def test_invalid_rows_dropped(self):
        normalizer = RowNormalizer(RAPIDAPI_RULES, source="rapidapi")
        assert normalizer.normalize(RAPIDAPI_PAYLOADS["garbage_rows"]["results"], limit=10) == []

    def test_negative_price_dropped(self):
        normalizer = RowNormalizer(FieldRules(), source="test")
        rows = [{"title": "Refund", "price": -3, "link": "https://x.example.com"}]
        assert normalizer.normalize(rows, limit=5) == []

"""
Unit tests for number/date parsing, slugs and pagination

Run with: pytest tests/unit/test_parsing.py -v
"""

from datetime import date, datetime

import pytest

from hc_stock.utils.pagination import Pagination
from hc_stock.utils.parsing import (
    parse_date,
    parse_plain_number,
    parse_vn_date,
    parse_vn_number,
    safe_float,
)
from hc_stock.utils.slug import slugify, strip_diacritics


class TestNumbers:

    def test_vietnamese_number_with_thousands_and_decimal(self):
        assert parse_vn_number("1.234,5") == 1234.5

    def test_vietnamese_thousands_only(self):
        assert parse_vn_number("25.000") == 25000.0

    @pytest.mark.parametrize("value", [None, "", "   ", "abc"])
    def test_vietnamese_number_blank_or_garbage(self, value):
        assert parse_vn_number(value) is None

    def test_plain_number_uses_dot_decimal(self):
        assert parse_plain_number(" 0.15 ") == 0.15
        assert parse_plain_number("") is None

    def test_safe_float_rejects_non_finite_and_bools(self):
        assert safe_float("nan") is None
        assert safe_float(float("inf")) is None
        assert safe_float(True) is None
        assert safe_float("3.5") == 3.5
        assert safe_float(7) == 7.0


class TestDates:

    def test_vn_date(self):
        assert parse_vn_date("05/03/2024") == date(2024, 3, 5)

    def test_vn_date_rejects_iso(self):
        with pytest.raises(ValueError, match="DD/MM/YYYY"):
            parse_vn_date("2024-03-05")

    @pytest.mark.parametrize("value", ["31/02/2024", "aa/bb/cccc"])
    def test_vn_date_impossible(self, value):
        with pytest.raises(ValueError, match="Ngày không hợp lệ"):
            parse_vn_date(value)

    def test_parse_date_accepts_iso_datetime_and_vn(self):
        assert parse_date("2024-03-05") == date(2024, 3, 5)
        assert parse_date("2024-03-05T10:00:00Z") == date(2024, 3, 5)
        assert parse_date("05/03/2024") == date(2024, 3, 5)
        assert parse_date(datetime(2024, 3, 5, 9, 30)) == date(2024, 3, 5)

    def test_parse_date_empty(self):
        with pytest.raises(ValueError):
            parse_date("")


class TestSlugify:

    def test_vietnamese_title(self):
        assert slugify("Chứng khoán Việt Nam") == "chung-khoan-viet-nam"

    def test_d_with_stroke_and_punctuation(self):
        assert slugify("Đầu tư 2024!") == "dau-tu-2024"

    def test_whitespace_and_dashes_collapse(self):
        assert slugify("  Hello   World  ") == "hello-world"
        assert slugify("a -- b") == "a-b"

    def test_nothing_usable(self):
        assert slugify("!!!") == ""

    def test_strip_diacritics_lowercases(self):
        assert strip_diacritics("Ường") == "uong"


class TestPagination:

    def test_first_page(self):
        p = Pagination(page=1, limit=10, total=25)
        assert p.offset == 0
        assert p.total_pages == 3
        assert p.has_next
        assert not p.has_previous

    def test_last_page(self):
        p = Pagination(page=3, limit=10, total=25)
        assert p.offset == 20
        assert not p.has_next
        assert p.has_previous

    def test_empty_result(self):
        p = Pagination(page=1, limit=10, total=0)
        assert p.total_pages == 0
        assert not p.has_next

    def test_to_dict_shape(self):
        assert Pagination(page=2, limit=5, total=12).to_dict() == {
            "currentPage": 2,
            "totalPages": 3,
            "totalItems": 12,
            "limit": 5,
            "hasPrevious": True,
            "hasNext": True,
        }

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0)])
    def test_rejects_non_positive(self, page, limit):
        with pytest.raises(ValueError):
            Pagination(page=page, limit=limit, total=5)

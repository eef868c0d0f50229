"""
Unit Tests for the synthetic daily price generator

Run with: pytest tests/unit/test_stock_generator.py -v
"""

from datetime import date

import pytest

from hc_stock.services.stock_generator import SHARES_OUTSTANDING, VOLUME_RANGE, generate_daily_rows


@pytest.fixture
def january():
    return generate_daily_rows("VNM", date(2024, 1, 1), date(2024, 1, 31), seed=42)


class TestGenerateDailyRows:

    def test_one_row_per_weekday(self, january):
        assert len(january) == 23
        assert all(r["date"].weekday() < 5 for r in january)
        assert january[0]["date"] == date(2024, 1, 1)
        assert january[-1]["date"] == date(2024, 1, 31)

    def test_walk_is_continuous(self, january):
        assert january[0]["open"] == 80000.0
        for previous, row in zip(january, january[1:]):
            assert row["open"] == previous["close"]

    def test_candle_bounds(self, january):
        for row in january:
            assert row["high"] >= max(row["open"], row["close"])
            assert row["low"] <= min(row["open"], row["close"])

    def test_daily_change_within_volatility(self, january):
        for row in january:
            change = row["close"] / row["open"] - 1
            assert abs(change) <= 0.02 + 1e-4
            assert abs(row["return_value"]) <= 2.0

    def test_derived_columns(self, january):
        for row in january:
            assert VOLUME_RANGE[0] <= row["volume"] < VOLUME_RANGE[1]
            assert row["kldd"] == row["volume"]
            assert row["close_price"] == row["close"]
            assert row["von_hoa"] == row["close"] * SHARES_OUTSTANDING
            assert row["symbol"] == "VNM"

    def test_seed_reproducible(self, january):
        again = generate_daily_rows("VNM", date(2024, 1, 1), date(2024, 1, 31), seed=42)
        assert again == january

    def test_zero_volatility_is_flat(self):
        rows = generate_daily_rows("VNM", date(2024, 1, 1), date(2024, 1, 5), volatility=0, seed=1)
        assert {r["close"] for r in rows} == {80000.0}

    def test_weekend_only_range(self):
        assert generate_daily_rows("VNM", date(2024, 1, 6), date(2024, 1, 7)) == []

    def test_start_after_end(self):
        with pytest.raises(ValueError):
            generate_daily_rows("VNM", date(2024, 2, 1), date(2024, 1, 1))

    def test_negative_volatility(self):
        with pytest.raises(ValueError):
            generate_daily_rows("VNM", date(2024, 1, 1), date(2024, 1, 31), volatility=-0.1)

"""
Unit Tests for chart data shaping

Run with: pytest tests/unit/test_chart_service.py -v
"""

import pytest

from hc_stock.services.chart_service import (
    DOWN_COLOR,
    FINANCIAL_CHARTS,
    UP_COLOR,
    candlestick_points,
    financial_chart,
    histogram_points,
    line_points,
    price_chart,
    quarter_label,
    visible_range,
)


@pytest.fixture
def price_rows():
    """Out of order on purpose; the second row has no close"""
    return [
        {"date": "2024-01-04", "open": 12, "high": 13, "low": 11, "close": 12.5,
         "band_dow": 10, "band_up": 14, "trend_q": None, "fq": 1.5, "qv1": -300},
        {"date": "2024-01-03", "open": 11, "high": 12, "low": 10, "close": None,
         "band_dow": 9, "band_up": 13, "trend_q": "nan", "fq": 1.2, "qv1": 0},
        {"date": "2024-01-02", "open": 10, "high": 11, "low": 9, "close": 11,
         "band_dow": 8, "band_up": 12, "trend_q": 10.5, "fq": 1.0, "qv1": 500},
    ]


class TestPriceChart:

    def test_candlesticks_sorted_and_incomplete_dropped(self, price_rows):
        points = candlestick_points(price_rows)
        assert [p["time"] for p in points] == ["2024-01-02", "2024-01-04"]
        assert points[0] == {"time": "2024-01-02", "open": 10.0, "high": 11.0, "low": 9.0, "close": 11.0}

    def test_line_skips_missing_and_non_finite(self, price_rows):
        assert line_points(price_rows, "trend_q") == [{"time": "2024-01-02", "value": 10.5}]

    def test_histogram_colours_by_sign(self, price_rows):
        bars = histogram_points(price_rows)
        assert [b["color"] for b in bars] == [UP_COLOR, DOWN_COLOR, DOWN_COLOR]
        assert [b["value"] for b in bars] == [500.0, 0.0, -300.0]

    def test_visible_range_spans_candles(self, price_rows):
        assert visible_range(price_rows) == {"from": "2024-01-02", "to": "2024-01-04"}

    def test_visible_range_follows_drawn_candles(self, price_rows):
        price_rows[0]["close"] = None
        assert visible_range(price_rows) == {"from": "2024-01-02", "to": "2024-01-02"}

    def test_visible_range_without_candles(self):
        assert visible_range([{"date": "2024-01-02", "open": 1, "high": None, "low": 1, "close": 1}]) is None

    def test_visible_range_empty(self):
        assert visible_range([]) is None

    def test_price_chart_lines_in_fixed_order(self, price_rows):
        chart = price_chart(price_rows)
        assert [line["field"] for line in chart["lines"]] == ["band_dow", "band_up", "trend_q", "fq"]
        assert len(chart["lines"][0]["data"]) == 3
        assert set(chart) == {"candlestick", "lines", "histogram", "visibleRange"}


class TestFinancialChart:

    @pytest.mark.parametrize("value,label", [
        ("2024-03-31", "Q1/2024"),
        ("2024-04-01", "Q2/2024"),
        ("2023-10-01", "Q4/2023"),
        ("30/06/2022", "Q2/2022"),
    ])
    def test_quarter_label(self, value, label):
        assert quarter_label(value) == label

    def test_missing_values_plot_as_zero(self):
        rows = [
            {"date": "2024-06-30", "eps": 3200, "eps_nganh": None},
            {"date": "2024-03-31", "eps": 2900, "eps_nganh": 2100},
        ]
        chart = financial_chart(rows, FINANCIAL_CHARTS["eps"])
        assert chart["labels"] == ["Q1/2024", "Q2/2024"]
        eps, industry = chart["datasets"]
        assert eps["data"] == [2900.0, 3200.0]
        assert industry["data"] == [2100.0, 0.0]
        assert industry["label"] == "EPS Ngành"

    def test_metrics_chart_has_four_series(self):
        chart = financial_chart([], FINANCIAL_CHARTS["metrics"])
        assert chart["labels"] == []
        assert [d["field"] for d in chart["datasets"]] == ["roa", "roe", "tb_roa_nganh", "tb_roe_nganh"]

"""
Integration tests for OHLC/indicator rows (/api/stocks).

Tests verify that:
1. Search ranks exact, prefix, substring then company-name matches
2. Range queries validate their dates and filter by symbol
3. CSV import understands DD/MM/YYYY and Vietnamese number notation
4. (symbol, date) stays unique and symbols must exist in stock_info
"""

import pytest


@pytest.fixture
async def prices(client, alice_headers, companies):
    """Three VNM rows and one FPT row"""
    rows = [
        {"symbol": "VNM", "date": "2024-01-02", "open": 70000, "high": 71000, "low": 69500, "close": 70500, "qv1": 1200},
        {"symbol": "VNM", "date": "2024-01-03", "open": 70500, "high": 72000, "low": 70000, "close": 71800},
        {"symbol": "VNM", "date": "2024-01-04", "open": 71800, "high": 72500, "low": 71000, "close": 71200},
        {"symbol": "FPT", "date": "2024-01-03", "open": 95000, "high": 97000, "low": 94000, "close": 96500},
    ]
    created = []
    for row in rows:
        response = await client.post("/api/stocks", json=row, headers=alice_headers)
        assert response.status_code == 201
        created.append(response.json())
    return created


def csv_file(text: str):
    return {"file": ("prices.csv", text.encode("utf-8"), "text/csv")}


class TestSearch:

    async def test_ranking(self, client, alice_headers, companies):
        response = await client.get("/api/stocks/search", params={"q": "vn"}, headers=alice_headers)
        body = response.json()
        assert body["query"] == "vn"
        assert [(r["symbol"], r["matchType"]) for r in body["results"]] == [
            ("VNG", "startsWith"),
            ("VNM", "startsWith"),
        ]

    async def test_exact_before_name_match(self, client, alice_headers, companies):
        response = await client.get("/api/stocks/search", params={"q": "fpt"}, headers=alice_headers)
        results = response.json()["results"]
        assert results[0] == {"symbol": "FPT", "name": "FPT Corporation", "matchType": "exact"}

    async def test_name_match(self, client, alice_headers, companies):
        response = await client.get("/api/stocks/search", params={"q": "group"}, headers=alice_headers)
        body = response.json()
        assert body["count"] == 1
        assert body["results"][0]["matchType"] == "nameMatch"

    async def test_requires_query(self, client, alice_headers):
        response = await client.get("/api/stocks/search", headers=alice_headers)
        assert response.status_code == 400

    async def test_symbols(self, client, companies):
        response = await client.get("/api/stocks/symbols")
        assert response.json()[0] == {"symbol": "FPT", "name": "FPT Corporation"}


class TestReads:

    async def test_list(self, client, prices):
        body = (await client.get("/api/stocks")).json()
        assert body["pagination"]["totalItems"] == 4
        # newest date first
        assert body["data"][0]["date"] == "2024-01-04"
        assert body["data"][0]["stock_name"] == "Vinamilk"

    async def test_by_symbol_newest_first(self, client, prices):
        rows = (await client.get("/api/stocks/symbol/vnm")).json()
        assert [r["date"] for r in rows] == ["2024-01-04", "2024-01-03", "2024-01-02"]

    async def test_by_date(self, client, alice_headers, prices):
        rows = (await client.get("/api/stocks/date/2024-01-03", headers=alice_headers)).json()
        assert [r["symbol"] for r in rows] == ["FPT", "VNM"]

    async def test_range(self, client, prices):
        response = await client.get(
            "/api/stocks/range", params={"startDate": "2024-01-03", "endDate": "2024-01-04", "symbol": "VNM"}
        )
        assert [r["date"] for r in response.json()] == ["2024-01-04", "2024-01-03"]

    async def test_range_needs_both_dates(self, client):
        response = await client.get("/api/stocks/range", params={"startDate": "2024-01-03"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Vui lòng cung cấp startDate và endDate"

    async def test_range_bad_date(self, client):
        response = await client.get("/api/stocks/range", params={"startDate": "hôm qua", "endDate": "2024-01-04"})
        assert response.status_code == 400
        assert response.json()["detail"] == "startDate không hợp lệ"

    async def test_range_reversed(self, client):
        response = await client.get("/api/stocks/range", params={"startDate": "2024-02-01", "endDate": "2024-01-01"})
        assert response.status_code == 400

    async def test_id_range_uses_anchor_symbol(self, client, alice_headers, prices):
        anchor = prices[0]["id"]
        response = await client.get(
            f"/api/stocks/id-range/{anchor}",
            params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
            headers=alice_headers,
        )
        rows = response.json()
        assert [r["date"] for r in rows] == ["2024-01-02", "2024-01-03", "2024-01-04"]
        assert {r["symbol"] for r in rows} == {"VNM"}

    async def test_id_range_unknown_id(self, client, alice_headers):
        response = await client.get(
            "/api/stocks/id-range/999", params={"startDate": "2024-01-01", "endDate": "2024-01-31"}, headers=alice_headers
        )
        assert response.status_code == 404


class TestWrites:

    async def test_duplicate_symbol_date(self, client, alice_headers, prices):
        response = await client.post(
            "/api/stocks", json={"symbol": "VNM", "date": "2024-01-02", "close": 1}, headers=alice_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Dữ liệu stock cho symbol và ngày này đã tồn tại"

    async def test_unknown_symbol(self, client, alice_headers, companies):
        response = await client.post(
            "/api/stocks", json={"symbol": "ZZZ", "date": "2024-01-02", "close": 1}, headers=alice_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Symbol không tồn tại trong hệ thống"

    async def test_partial_update(self, client, alice_headers, prices):
        row = prices[0]
        response = await client.put(f"/api/stocks/{row['id']}", json={"fq": 1.25}, headers=alice_headers)
        body = response.json()
        assert body["fq"] == 1.25
        assert body["close"] == row["close"]
        assert body["qv1"] == 1200

    async def test_move_onto_taken_date(self, client, alice_headers, prices):
        response = await client.put(
            f"/api/stocks/{prices[0]['id']}", json={"date": "2024-01-03"}, headers=alice_headers
        )
        assert response.status_code == 400

    async def test_delete_one(self, client, alice_headers, prices):
        response = await client.delete(f"/api/stocks/{prices[0]['id']}", headers=alice_headers)
        assert response.status_code == 200
        missing = await client.get(f"/api/stocks/{prices[0]['id']}", headers=alice_headers)
        assert missing.status_code == 404

    async def test_delete_many(self, client, alice_headers, prices):
        ids = [prices[0]["id"], prices[1]["id"], 999]
        response = await client.request("DELETE", "/api/stocks", json={"ids": ids}, headers=alice_headers)
        assert response.json()["deletedCount"] == 2

    async def test_delete_many_requires_ids(self, client, alice_headers):
        response = await client.request("DELETE", "/api/stocks", json={"ids": []}, headers=alice_headers)
        assert response.status_code == 422


class TestImport:

    async def test_vietnamese_formats(self, client, alice_headers, companies):
        text = (
            "symbol,date,open,high,low,close,qv1\n"
            'vnm,05/01/2024,"70.500","71.000,5","70.000","70.800",1.200\n'
            "ZZZ,05/01/2024,1,1,1,1,1\n"
            "VNM,2024-01-08,1,1,1,1,1\n"
        )
        response = await client.post("/api/stocks/import", files=csv_file(text), headers=alice_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["importedCount"] == 1
        assert [e["row"] for e in body["errors"]] == [2, 3]

        rows = (await client.get("/api/stocks/symbol/VNM")).json()
        assert rows[0]["date"] == "2024-01-05"
        assert rows[0]["high"] == 71000.5
        assert rows[0]["close"] == 70800.0
        assert rows[0]["qv1"] == 1200

    async def test_reimport_overwrites(self, client, alice_headers, companies):
        first = "symbol,date,close\nVNM,05/01/2024,70.000\n"
        second = "symbol,date,close\nVNM,05/01/2024,72.000\n"
        await client.post("/api/stocks/import", files=csv_file(first), headers=alice_headers)
        await client.post("/api/stocks/import", files=csv_file(second), headers=alice_headers)

        rows = (await client.get("/api/stocks/symbol/VNM")).json()
        assert len(rows) == 1
        assert rows[0]["close"] == 72000.0

    async def test_nothing_valid(self, client, alice_headers, companies):
        text = "symbol,date,close\nZZZ,05/01/2024,1\n"
        response = await client.post("/api/stocks/import", files=csv_file(text), headers=alice_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["detail"] == "Không có dữ liệu hợp lệ để import"
        assert body["errors"][0]["row"] == 1

"""
Integration tests for the financial series routes
(/api/stock-daily, /api/stock-assets, /api/stock-metrics, /api/stock-eps, /api/stock-pe).

All five share one router factory, so most behaviour is checked on one or
two of them; reads need a login and writes need an admin.
"""

import pytest


def csv_file(text: str):
    return {"file": ("series.csv", text.encode("utf-8"), "text/csv")}


@pytest.fixture
async def eps_rows(client, admin_headers, companies):
    rows = [
        {"symbol": "VNM", "date": "2024-03-31", "eps": 2900, "eps_nganh": 2100},
        {"symbol": "VNM", "date": "2024-06-30", "eps": 3200},
        {"symbol": "FPT", "date": "2024-06-30", "eps": 4100, "eps_nganh": 3000},
    ]
    created = []
    for row in rows:
        response = await client.post("/api/stock-eps", json=row, headers=admin_headers)
        assert response.status_code == 201
        created.append(response.json())
    return created


class TestAccess:

    async def test_reads_need_login(self, client):
        response = await client.get("/api/stock-pe")
        assert response.status_code == 401

    async def test_writes_need_admin(self, client, alice_headers, companies):
        response = await client.post(
            "/api/stock-pe", json={"symbol": "VNM", "date": "2024-03-31", "pe": 18.5}, headers=alice_headers
        )
        assert response.status_code == 403


class TestSeriesReads:

    async def test_list(self, client, alice_headers, eps_rows):
        body = (await client.get("/api/stock-eps", headers=alice_headers)).json()
        assert body["pagination"]["totalItems"] == 3
        assert [(r["symbol"], r["date"]) for r in body["data"]] == [
            ("FPT", "2024-06-30"),
            ("VNM", "2024-06-30"),
            ("VNM", "2024-03-31"),
        ]

    async def test_by_symbol(self, client, alice_headers, eps_rows):
        rows = (await client.get("/api/stock-eps/symbol/VNM", headers=alice_headers)).json()
        assert [r["eps"] for r in rows] == [3200.0, 2900.0]
        assert rows[0]["eps_nganh"] is None
        assert rows[0]["stock_name"] == "Vinamilk"

    async def test_by_symbol_empty_is_404(self, client, alice_headers, companies):
        response = await client.get("/api/stock-eps/symbol/VIC", headers=alice_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Không tìm thấy dữ liệu stock_eps cho symbol này"

    async def test_by_date(self, client, alice_headers, eps_rows):
        rows = (await client.get("/api/stock-eps/date/2024-06-30", headers=alice_headers)).json()
        assert [r["symbol"] for r in rows] == ["FPT", "VNM"]

    async def test_range(self, client, alice_headers, eps_rows):
        response = await client.get(
            "/api/stock-eps/range",
            params={"startDate": "2024-01-01", "endDate": "2024-04-30"},
            headers=alice_headers,
        )
        assert [r["date"] for r in response.json()] == ["2024-03-31"]

    async def test_symbol_and_date(self, client, alice_headers, eps_rows):
        response = await client.get("/api/stock-eps/FPT/2024-06-30", headers=alice_headers)
        assert response.json()["eps"] == 4100.0

    async def test_by_id(self, client, alice_headers, eps_rows):
        response = await client.get(f"/api/stock-eps/id/{eps_rows[0]['id']}", headers=alice_headers)
        assert response.json()["date"] == "2024-03-31"

    async def test_missing_id(self, client, alice_headers):
        response = await client.get("/api/stock-eps/id/999", headers=alice_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Không tìm thấy dữ liệu stock_eps"


class TestSeriesWrites:

    async def test_daily_requires_close_price(self, client, admin_headers, companies):
        response = await client.post(
            "/api/stock-daily", json={"symbol": "VNM", "date": "2024-01-02"}, headers=admin_headers
        )
        assert response.status_code == 422

    async def test_daily_update_keeps_close_price_when_null(self, client, admin_headers, companies):
        created = await client.post(
            "/api/stock-daily",
            json={"symbol": "VNM", "date": "2024-01-02", "close_price": 70500, "volume": 1200000},
            headers=admin_headers,
        )
        row = created.json()
        assert row["volume"] == 1200000

        response = await client.put(
            f"/api/stock-daily/{row['id']}", json={"close_price": None, "pe": 17.2}, headers=admin_headers
        )
        assert response.json()["close_price"] == 70500.0
        assert response.json()["pe"] == 17.2

    async def test_duplicate(self, client, admin_headers, eps_rows):
        response = await client.post(
            "/api/stock-eps", json={"symbol": "VNM", "date": "2024-03-31", "eps": 1}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Dữ liệu stock_eps cho symbol và ngày này đã tồn tại"

    async def test_delete_by_items(self, client, admin_headers, eps_rows):
        items = [{"symbol": "VNM", "date": "2024-03-31"}, {"symbol": "FPT", "date": "2024-06-30"}]
        response = await client.request("DELETE", "/api/stock-eps", json={"items": items}, headers=admin_headers)
        assert response.json()["deletedCount"] == 2

        remaining = (await client.get("/api/stock-eps", headers=admin_headers)).json()
        assert [r["id"] for r in remaining["data"]] == [eps_rows[1]["id"]]

    async def test_daily_delete_by_ids(self, client, admin_headers, companies):
        ids = []
        for day in ("2024-01-02", "2024-01-03"):
            created = await client.post(
                "/api/stock-daily", json={"symbol": "FPT", "date": day, "close_price": 95000}, headers=admin_headers
            )
            ids.append(created.json()["id"])

        response = await client.request("DELETE", "/api/stock-daily", json={"ids": ids}, headers=admin_headers)
        assert response.json()["deletedCount"] == 2

        again = await client.request("DELETE", "/api/stock-daily", json={"ids": ids}, headers=admin_headers)
        assert again.status_code == 404

    async def test_delete_one(self, client, admin_headers, eps_rows):
        response = await client.delete(f"/api/stock-eps/{eps_rows[0]['id']}", headers=admin_headers)
        assert response.status_code == 200


class TestSeriesImport:

    async def test_import_metrics(self, client, admin_headers, companies):
        text = (
            "symbol,date,roa,roe,tb_roa_nganh,tb_roe_nganh\n"
            "vnm,2024-03-31,0.15,0.28,0.08,0.14\n"
            "FPT,30/06/2024,0.12,,0.08,0.14\n"
        )
        response = await client.post("/api/stock-metrics/import", files=csv_file(text), headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["importedCount"] == 2

        fpt = (await client.get("/api/stock-metrics/FPT/2024-06-30", headers=admin_headers)).json()
        assert fpt["roa"] == 0.12
        assert fpt["roe"] is None

    async def test_unknown_symbol_rejects_whole_file(self, client, admin_headers, companies):
        text = "symbol,date,pe,pe_nganh\nVNM,2024-03-31,18,15\nZZZ,2024-03-31,1,1\n"
        response = await client.post("/api/stock-pe/import", files=csv_file(text), headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["invalidSymbols"] == ["ZZZ"]
        empty = await client.get("/api/stock-pe/symbol/VNM", headers=admin_headers)
        assert empty.status_code == 404

    async def test_daily_missing_close_price(self, client, admin_headers, companies):
        text = "symbol,date,close_price\nVNM,2024-01-02,\n"
        response = await client.post("/api/stock-daily/import", files=csv_file(text), headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["errors"] == ["Dòng 1: thiếu dữ liệu bắt buộc (close_price)"]

    async def test_daily_missing_column(self, client, admin_headers, companies):
        text = "symbol,date,close\nVNM,2024-01-02,70000\n"
        response = await client.post("/api/stock-daily/import", files=csv_file(text), headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "File CSV thiếu cột: close_price"

    async def test_bad_date(self, client, admin_headers, companies):
        text = "symbol,date,eps\nVNM,quý 1,100\n"
        response = await client.post("/api/stock-eps/import", files=csv_file(text), headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "File CSV có dòng không hợp lệ"

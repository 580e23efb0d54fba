import csv
import io

import pytest

from config import settings
from services.session_guard import in_flight


@pytest.fixture
def seeded(client, operator_headers, valid_record):
    """Three logs for BAT-001 and one for BAT-002 across May 2024"""
    for day in ("2024-05-01", "2024-05-05", "2024-05-20"):
        record = dict(valid_record, date=day)
        assert client.post("/api/rows", json=record, headers=operator_headers).status_code == 200
    record = dict(valid_record, batteryId="BAT-002", date="2024-05-03",
                  chargeCurrentAmps="", droneNumber="")
    assert client.post("/api/rows", json=record, headers=operator_headers).status_code == 200
    return client


def test_admin_routes_refuse_operators(seeded, operator_headers):
    for path, params in (
        ("/api/admin/rows/search", {"batteryId": "BAT-001"}),
        ("/api/admin/rows/by-date", {"dateFrom": "2024-05-01", "dateTo": "2024-05-31"}),
        ("/api/admin/rows/export", {"batteryId": "BAT-001"}),
        ("/api/admin/rows/table", {"batteryId": "BAT-001"}),
    ):
        response = seeded.get(path, params=params, headers=operator_headers)
        assert response.status_code == 403, path


def test_search_by_battery(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/search", params={"batteryId": " BAT-001 "},
                          headers=admin_headers)
    assert response.status_code == 200
    rows = response.json()
    assert [r["date"] for r in rows] == ["2024-05-01", "2024-05-05", "2024-05-20"]
    assert list(rows[0])[:4] == ["id", "date", "customerName", "zone"]
    assert rows[-1]["chargingCycle"] == 3


def test_search_unknown_battery_is_empty_not_error(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/search", params={"batteryId": "NOPE"},
                          headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == []


def test_search_needs_battery_id(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/search", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter a Battery ID"


def test_search_by_date_range(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/by-date",
                          params={"dateFrom": "2024-05-01", "dateTo": "2024-05-05"},
                          headers=admin_headers)
    assert response.status_code == 200
    rows = response.json()
    assert [(r["id"], r["date"]) for r in rows] == [
        ("BAT-001", "2024-05-01"),
        ("BAT-002", "2024-05-03"),
        ("BAT-001", "2024-05-05"),
    ]


def test_reversed_date_range_rejected(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/by-date",
                          params={"dateFrom": "2024-05-10", "dateTo": "2024-05-01"},
                          headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "From date cannot be later than To date"


def test_export_by_battery(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/export", params={"batteryId": "BAT-001"},
                          headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == (
        "attachment; filename=\"battery_BAT-001_export.csv\"; "
        "filename*=UTF-8''battery_BAT-001_export.csv"
    )

    parsed = list(csv.reader(io.StringIO(response.text)))
    assert parsed[0][:3] == ["id", "date", "customerName"]
    assert len(parsed) == 4


def test_export_by_date_range(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/export",
                          params={"dateFrom": "2024-05-02", "dateTo": "2024-05-31"},
                          headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-disposition"].startswith(
        "attachment; filename=\"rows_2024-05-02_to_2024-05-31_export.csv\"")
    assert len(response.text.strip().splitlines()) == 4


def test_export_with_no_rows_gives_no_file(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/export", params={"batteryId": "NOPE"},
                          headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "No data found for that Battery ID"


def test_export_query_modes_exclusive(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/export",
                          params={"batteryId": "BAT-001", "dateFrom": "2024-05-01",
                                  "dateTo": "2024-05-31"},
                          headers=admin_headers)
    assert response.status_code == 400


def test_table_view_placeholders(seeded, admin_headers):
    response = seeded.get("/api/admin/rows/table", params={"batteryId": "BAT-002"},
                          headers=admin_headers)
    assert response.status_code == 200
    table = response.json()
    assert table["message"] is None
    row = dict(zip(table["columns"], table["rows"][0]))
    assert row["id"] == "BAT-002"
    assert row["chargeCurrent"] == "-"
    assert row["droneno"] == "-"
    assert row["others"] == "-"


def test_table_view_empty(seeded, admin_headers):
    table = seeded.get("/api/admin/rows/table", params={"batteryId": "NOPE"},
                       headers=admin_headers).json()
    assert table == {"columns": [], "rows": [], "message": "No data to display."}


def test_export_non_ascii_battery_id(client, operator_headers, admin_headers, valid_record):
    battery_id = "बैटरी-1"
    record = dict(valid_record, batteryId=battery_id)
    assert client.post("/api/rows", json=record, headers=operator_headers).status_code == 200

    response = client.get("/api/admin/rows/export", params={"batteryId": battery_id},
                          headers=admin_headers)
    assert response.status_code == 200
    disposition = response.headers["content-disposition"]
    assert 'filename="battery_' + "_" * 5 + '-1_export.csv"' in disposition
    assert "filename*=UTF-8''battery_%E0%A4%AC%E0%A5%88" in disposition
    assert battery_id in response.content.decode("utf-8")


def test_search_over_limit_is_reported_not_truncated(seeded, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "SEARCH_LIMIT", 2)
    for path, params in (
        ("/api/admin/rows/search", {"batteryId": "BAT-001"}),
        ("/api/admin/rows/by-date", {"dateFrom": "2024-05-01", "dateTo": "2024-05-31"}),
        ("/api/admin/rows/table", {"batteryId": "BAT-001"}),
    ):
        response = seeded.get(path, params=params, headers=admin_headers)
        assert response.status_code == 413, path
        assert "More than 2 rows match" in response.json()["detail"]

    exactly = seeded.get("/api/admin/rows/by-date",
                         params={"dateFrom": "2024-05-01", "dateTo": "2024-05-04"},
                         headers=admin_headers)
    assert exactly.status_code == 200
    assert len(exactly.json()) == 2


def test_export_is_not_limited(seeded, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "SEARCH_LIMIT", 2)
    response = seeded.get("/api/admin/rows/export",
                          params={"dateFrom": "2024-05-01", "dateTo": "2024-05-31"},
                          headers=admin_headers)
    assert response.status_code == 200
    assert len(response.text.strip().splitlines()) == 5


def test_id_and_date_exports_run_independently(seeded, admin_headers):
    in_flight._active.add(("admin1", "export"))
    try:
        busy = seeded.get("/api/admin/rows/export", params={"batteryId": "BAT-001"},
                          headers=admin_headers)
        by_date = seeded.get("/api/admin/rows/export",
                             params={"dateFrom": "2024-05-01", "dateTo": "2024-05-31"},
                             headers=admin_headers)
    finally:
        in_flight._active.discard(("admin1", "export"))
    assert busy.status_code == 409
    assert by_date.status_code == 200

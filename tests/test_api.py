from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture()
def client() -> TestClient:
    return TestClient(app)


def test_health(client) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_analysis(client, donations) -> None:
    r = client.post(
        "/analysis",
        json={"rows": donations, "column_labels": {"amount": "Betrag"}, "name_column": "donorName", "filters": {"top_n": 2}},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["numeric_columns"][0]["label"] == "Betrag"
    assert body["numeric_columns"][0]["sum"] == 450
    assert [p["period"] for p in body["time_series"]["monthly"]] == ["2025-01", "2025-02"]
    assert body["time_series"]["monthly"][0]["date"] == "2025-01-01"
    assert [d["category"] for d in body["top_donors"]] == ["Bob", "Carol"]
    assert body["metadata"] == {
        "total_rows": 3,
        "filtered_rows": 3,
        "date_range": {"start": "2025-01-05", "end": "2025-02-02"},
    }


def test_columns(client, donations) -> None:
    r = client.post("/columns", json={"rows": donations})
    assert r.json() == {
        "all": ["donorName", "amount", "date"],
        "numeric": ["amount"],
        "dates": ["date"],
        "sources": ["donations_20250105.csv", "donations_20250112.csv", "donations_20250202.csv"],
    }


def test_statistics(client, donations) -> None:
    r = client.post("/statistics", json={"rows": donations, "column": "amount"})
    body = r.json()
    assert body["label"] == "amount"
    assert body["median"] == 150
    assert body["non_null_count"] == 3


def test_time_series_single_granularity(client, donations) -> None:
    r = client.post(
        "/time-series",
        json={"rows": donations, "date_column": "date", "value_columns": ["amount"], "granularity": "quarterly"},
    )
    assert r.json() == {"quarterly": [{"period": "2025-Q1", "value": 450.0, "count": 3, "date": "2025-01-01"}]}


def test_time_series_all_granularities(client, donations) -> None:
    r = client.post("/time-series", json={"rows": donations, "date_column": "date", "value_columns": ["amount"]})
    body = r.json()
    assert set(body) == {"weekly", "monthly", "quarterly", "yearly"}
    assert body["yearly"][0]["values"] == {"amount": 450.0}


def test_time_series_rejects_unknown_granularity(client, donations) -> None:
    r = client.post(
        "/time-series",
        json={"rows": donations, "date_column": "date", "value_columns": ["amount"], "granularity": "daily"},
    )
    assert r.status_code == 422


def test_monthly_totals(client, donations) -> None:
    body = client.post("/monthly-totals", json={"rows": donations, "amount_column": "amount"}).json()
    assert body["months"][:2] == [300.0, 150.0]
    assert body["total"] == 450.0
    assert body["year"] == 2025


def test_distribution_and_pareto(client, donations) -> None:
    payload = {"rows": donations, "category_column": "donorName", "value_column": "amount", "limit": 2}
    dist = client.post("/distribution", json=payload).json()["distribution"]
    assert [d["category"] for d in dist] == ["Bob", "Carol"]

    pareto = client.post("/pareto", json=payload).json()["pareto"]
    assert [p["cumulative_value"] for p in pareto] == [200.0, 350.0]
    assert pareto[-1]["cumulative_percentage"] == pytest.approx(100)


def test_histogram_from_values(client, deciles) -> None:
    body = client.post("/histogram", json={"values": deciles, "bins": 5}).json()
    assert [b["count"] for b in body["bins"]] == [2, 2, 2, 2, 2]
    assert body["mean"] == 55


def test_histogram_rejects_bad_bin_count(client, deciles) -> None:
    assert client.post("/histogram", json={"values": deciles, "bins": 0}).status_code == 422


def test_quartiles_from_rows(client, donations) -> None:
    body = client.post("/quartiles", json={"rows": donations, "column": "amount"}).json()
    assert body["median"] == 150
    assert body["outliers"] == []


def test_ranges_default_and_custom(client) -> None:
    body = client.post("/ranges", json={"values": [10, 60, 2500, None]}).json()
    assert [r["label"] for r in body["ranges"]] == ["1-50 EUR", "51-100 EUR", "1001+ EUR"]

    custom = {"values": [1, 5, 50], "ranges": [{"label": "low", "min": 0, "max": 10}, {"label": "high", "min": 10}]}
    body = client.post("/ranges", json=custom).json()
    assert [(r["label"], r["count"]) for r in body["ranges"]] == [("low", 2), ("high", 1)]


def test_histogram_zoom_window(client, deciles) -> None:
    body = client.post("/histogram", json={"values": deciles, "bins": 3, "zoom_min": 20, "zoom_max": 50}).json()
    assert [b["count"] for b in body["bins"]] == [1, 1, 2]
    assert (body["min"], body["max"]) == (20, 50)


def test_ranges_per_donor_totals(client) -> None:
    rows = [
        {"donorName": "Alice", "amount": 30},
        {"donorName": "Alice", "amount": 40},
        {"donorName": "Bob", "amount": 200},
    ]
    per_gift = client.post("/ranges", json={"rows": rows, "column": "amount"}).json()
    assert [r["label"] for r in per_gift["ranges"]] == ["1-50 EUR", "101-200 EUR"]

    per_donor = client.post("/ranges", json={"rows": rows, "column": "amount", "name_column": "donorName"}).json()
    assert [(r["label"], r["count"]) for r in per_donor["ranges"]] == [("51-100 EUR", 1), ("101-200 EUR", 1)]

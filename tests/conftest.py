from __future__ import annotations

import pytest


@pytest.fixture()
def donations() -> list[dict]:
    return [
        {"_sourceFileName": "donations_20250105.csv", "donorName": "Alice", "amount": 100, "date": "2025-01-05"},
        {"_sourceFileName": "donations_20250112.csv", "donorName": "Bob", "amount": 200, "date": "2025-01-12"},
        {"_sourceFileName": "donations_20250202.csv", "donorName": "Carol", "amount": 150, "date": "2025-02-02"},
    ]


@pytest.fixture()
def deciles() -> list[float]:
    return [10, 20, 30, 40, 50, 60, 70, 80, 90, 100]

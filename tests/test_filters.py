from __future__ import annotations

import pytest

from core.filters import TOP_N_DEFAULT, AnalysisFilters, normalize_filters


def test_defaults() -> None:
    assert normalize_filters(None) == AnalysisFilters()
    assert normalize_filters({}) == AnalysisFilters(selected_sources=[], name_query="", top_n=TOP_N_DEFAULT)


def test_sources_are_cleaned() -> None:
    f = normalize_filters({"selected_sources": [" a.csv ", "", None, "b.xlsx"]})
    assert f.selected_sources == ["a.csv", "b.xlsx"]


def test_single_source_string() -> None:
    assert normalize_filters({"selected_sources": "a.csv"}).selected_sources == ["a.csv"]


def test_name_query_is_stripped() -> None:
    assert normalize_filters({"name_query": "  Alice "}).name_query == "Alice"
    assert normalize_filters({"name_query": None}).name_query == ""


@pytest.mark.parametrize("raw,expected", [("5", 5), (0, 1), (-4, 1), (999, 200), ("many", TOP_N_DEFAULT), (None, TOP_N_DEFAULT)])
def test_top_n_is_clamped(raw, expected) -> None:
    assert normalize_filters({"top_n": raw}).top_n == expected

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from core.columns import detect_date_columns, detect_numeric_columns
from core.data import Row, Table, as_rows, has_source_files
from core.dates import chronological_key, parse_date
from core.filters import AnalysisFilters, normalize_filters
from core.metrics_distribution import calculate_distribution, get_top_items
from core.metrics_summary import calculate_column_statistics
from core.metrics_time import aggregate_by_time
from core.models import AnalysisMetadata, CategoryDistribution, DashboardAnalysis, DateRange, TimeSeriesPoint
from core.values import SOURCE_FILE_KEY, category_label, is_missing

logger = logging.getLogger(__name__)

DASHBOARD_GRANULARITIES = ("monthly", "quarterly", "yearly")


def apply_filters(rows: List[Row], filters: AnalysisFilters, name_column: Optional[str] = None) -> List[Row]:
    out = rows
    if filters.selected_sources:
        wanted = set(filters.selected_sources)
        out = [r for r in out if not is_missing(r.get(SOURCE_FILE_KEY)) and str(r.get(SOURCE_FILE_KEY)) in wanted]
    if filters.name_query and name_column:
        q = filters.name_query.lower()
        out = [r for r in out if q in (category_label(r.get(name_column)) or "").lower()]
    return out


def _date_range(rows: List[Row], date_key: str) -> Optional[DateRange]:
    dates = [d for d in (parse_date(r.get(date_key)) for r in rows) if d is not None]
    if not dates:
        return None
    return DateRange(start=min(dates, key=chronological_key), end=max(dates, key=chronological_key))


def analyze_data_for_dashboard(
    table: Optional[Table],
    column_labels: Optional[Mapping[str, str]] = None,
    name_column: Optional[str] = None,
    *,
    filters: dict | AnalysisFilters | None = None,
) -> DashboardAnalysis:
    """Everything the dashboard renders, computed from scratch.

    Time series and distributions use only the first detected date column and
    the first detected numeric column; per-column analysis of other columns
    goes through the metric functions directly.
    """
    rows = as_rows(table)
    filt = filters if isinstance(filters, AnalysisFilters) else normalize_filters(filters)
    filtered = apply_filters(rows, filt, name_column)
    labels = column_labels or {}

    numeric_columns = detect_numeric_columns(filtered)
    date_columns = detect_date_columns(filtered)

    stats = [calculate_column_statistics(filtered, key, labels.get(key) or key) for key in numeric_columns]

    time_series: Dict[str, List[TimeSeriesPoint]] = {}
    if date_columns and numeric_columns:
        for granularity in DASHBOARD_GRANULARITIES:
            time_series[granularity] = aggregate_by_time(filtered, date_columns[0], numeric_columns[0], granularity)

    distributions: Dict[str, List[CategoryDistribution]] = {}
    if name_column and numeric_columns:
        distributions["by_name"] = calculate_distribution(filtered, name_column, numeric_columns[0])
    if has_source_files(filtered):
        distributions["by_source"] = calculate_distribution(
            filtered, SOURCE_FILE_KEY, numeric_columns[0] if numeric_columns else None
        )

    top_donors = get_top_items(distributions["by_name"], filt.top_n) if "by_name" in distributions else []

    metadata = AnalysisMetadata(
        total_rows=len(rows),
        filtered_rows=len(filtered),
        date_range=_date_range(filtered, date_columns[0]) if date_columns else None,
    )
    logger.debug(
        "dashboard analysis: %d/%d rows, numeric=%s, dates=%s",
        len(filtered),
        len(rows),
        numeric_columns,
        date_columns,
    )
    return DashboardAnalysis(
        numeric_columns=stats,
        time_series=time_series,
        distributions=distributions,
        top_donors=top_donors,
        metadata=metadata,
    )

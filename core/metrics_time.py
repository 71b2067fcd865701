from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from core.data import Row, Table, as_rows
from core.dates import chronological_key, extract_date_from_filename, iso_week_info, parse_date, parse_row_date
from core.metrics_summary import running_total
from core.models import MonthlyTotals, MultiSeriesPoint, TimeAggregation, TimeSeriesPoint
from core.values import METADATA_KEYS, SOURCE_FILE_KEY, is_missing, parse_numeric_or_default

logger = logging.getLogger(__name__)

GRANULARITIES = ("weekly", "monthly", "quarterly", "yearly")

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# period, anchor, row count, per-column totals, latest date in the bucket
_Group = Tuple[str, date, int, List[float], date]


def period_of(d: date, granularity: str) -> Tuple[str, date]:
    """Period key and first-of-period anchor for a date."""
    if granularity == "monthly":
        return f"{d.year}-{d.month:02d}", date(d.year, d.month, 1)
    if granularity == "quarterly":
        quarter = (d.month - 1) // 3
        return f"{d.year}-Q{quarter + 1}", date(d.year, quarter * 3 + 1, 1)
    if granularity == "yearly":
        return f"{d.year}", date(d.year, 1, 1)
    if granularity == "weekly":
        week_year, week_no, monday = iso_week_info(d)
        return f"{week_year}-W{week_no:02d}", monday
    raise ValueError(f"Unknown granularity: {granularity!r}. Expected one of {', '.join(GRANULARITIES)}")


def _month_day(d: date) -> str:
    return f"{MONTH_ABBR[d.month - 1]} {d.day:02d}"


def _group_by_period(dated: Sequence[Tuple[date, List[float]]], granularity: str, width: int) -> List[_Group]:
    buckets: Dict[str, list] = {}
    for d, amounts in dated:
        period, anchor = period_of(d, granularity)
        bucket = buckets.get(period)
        if bucket is None:
            bucket = buckets[period] = [anchor, 0, [0.0] * width, d]
        bucket[1] += 1
        totals = bucket[2]
        # row order, one addition at a time
        for i, amount in enumerate(amounts):
            totals[i] += amount
        if chronological_key(d) > chronological_key(bucket[3]):
            bucket[3] = d

    if not buckets:
        return []

    # chronological, not lexical: sort on the anchor date
    order = pd.Series({p: b[0].toordinal() for p, b in buckets.items()}).sort_values(kind="stable")
    return [(str(p), buckets[p][0], buckets[p][1], buckets[p][2], buckets[p][3]) for p in order.index]


def _dated_rows(rows: Sequence[Row], date_key: str) -> List[Tuple[date, Row]]:
    dated: List[Tuple[date, Row]] = []
    for row in rows:
        d = parse_date(row.get(date_key))
        if d is not None:
            dated.append((d, row))
    dropped = len(rows) - len(dated)
    if dropped:
        logger.debug("dropped %d rows with unparseable %r", dropped, date_key)
    return dated


def aggregate_by_time(table: Optional[Table], date_key: str, value_key: str, granularity: str) -> List[TimeSeriesPoint]:
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity: {granularity!r}. Expected one of {', '.join(GRANULARITIES)}")

    dated = [(d, [parse_numeric_or_default(row.get(value_key))]) for d, row in _dated_rows(as_rows(table), date_key)]
    return [
        TimeSeriesPoint(period=p, value=totals[0], count=n, date=anchor)
        for p, anchor, n, totals, _ in _group_by_period(dated, granularity, 1)
    ]


def aggregate_by_time_multiple(table: Optional[Table], date_key: str, value_keys: Sequence[str]) -> TimeAggregation:
    """Sum several value columns per week, month, quarter and year.

    Weekly points are labelled ``YYYY-Www (Mon DD)`` after the latest date
    seen in that week; other granularities use the period key as label.
    """
    keys = list(dict.fromkeys(value_keys))
    dated = [
        (d, [parse_numeric_or_default(row.get(k)) for k in keys])
        for d, row in _dated_rows(as_rows(table), date_key)
    ]

    result: Dict[str, List[MultiSeriesPoint]] = {}
    for granularity in GRANULARITIES:
        points: List[MultiSeriesPoint] = []
        for p, anchor, n, totals, latest in _group_by_period(dated, granularity, len(keys)):
            label = f"{p} ({_month_day(latest)})" if granularity == "weekly" else p
            points.append(
                MultiSeriesPoint(
                    period=p,
                    date=anchor,
                    count=n,
                    values=dict(zip(keys, totals)),
                    latest=latest,
                    label=label,
                )
            )
        result[granularity] = points
    return TimeAggregation(**result)


def _amount(value: object) -> float:
    if isinstance(value, str):
        value = "".join(value.split())
    return parse_numeric_or_default(value)


def _row_date(row: Row, amount_key: str, date_key: Optional[str]) -> Optional[date]:
    if date_key:
        raw = row.get(date_key)
        if not is_missing(raw):
            d = parse_row_date(raw)
            if d is not None:
                return d

    source = row.get(SOURCE_FILE_KEY)
    if isinstance(source, str):
        d = extract_date_from_filename(source)
        if d is not None:
            return d

    for key, value in row.items():
        if key in METADATA_KEYS or key == date_key or key == amount_key:
            continue
        d = parse_row_date(value)
        if d is not None:
            return d
    return None


def aggregate_by_month(table: Optional[Table], amount_key: str, date_key: Optional[str] = None) -> MonthlyTotals:
    """Per-calendar-month totals for the receipt's monthly breakdown.

    The date of a row comes from ``date_key``, then from a YYYYMMDD token in
    the source file name, then from the first other field holding a date
    (text such as ``Spenden_20250105.xlsx`` or an Excel serial number). The
    amount column itself is never read as a date. Rows without a date are
    skipped.
    """
    months = [0.0] * 12
    year: Optional[int] = None
    first: Optional[date] = None
    last: Optional[date] = None
    skipped = 0

    for row in as_rows(table):
        d = _row_date(row, amount_key, date_key)
        if d is None:
            skipped += 1
            continue
        if year is None:
            year = d.year
        if first is None or chronological_key(d) < chronological_key(first):
            first = d
        if last is None or chronological_key(d) > chronological_key(last):
            last = d
        months[d.month - 1] += _amount(row.get(amount_key))

    if skipped:
        logger.debug("aggregate_by_month skipped %d undated rows", skipped)
    return MonthlyTotals(months=months, total=running_total(months), year=year, start=first, end=last)

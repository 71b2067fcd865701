from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from core.data import Table, as_rows
from core.metrics_summary import running_total
from core.models import CategoryDistribution, ParetoDataPoint
from core.values import category_label, parse_numeric_or_default

logger = logging.getLogger(__name__)


def calculate_percentage(value: float, total: float) -> float:
    if total == 0:
        return 0.0
    return (value / total) * 100


def calculate_distribution(
    table: Optional[Table],
    category_key: str,
    value_key: Optional[str] = None,
) -> List[CategoryDistribution]:
    """Group rows by ``category_key`` and sum ``value_key`` (or count rows when omitted).

    Rows without a category are skipped. Sorted by value, largest first;
    ties keep first-seen order.
    """
    sums: Dict[str, float] = {}
    sizes: Dict[str, int] = {}
    for row in as_rows(table):
        category = category_label(row.get(category_key))
        if category is None:
            continue
        amount = parse_numeric_or_default(row.get(value_key)) if value_key else 1.0
        sums[category] = sums.get(category, 0.0) + amount
        sizes[category] = sizes.get(category, 0) + 1

    if not sums:
        return []

    # total over first-seen order, before sorting
    total = running_total(sums.values())
    grouped = pd.DataFrame(
        {"category": list(sums), "sum": list(sums.values()), "size": list(sizes.values())}
    ).sort_values("sum", ascending=False, kind="stable")

    return [
        CategoryDistribution(
            category=str(rec.category),
            value=float(rec.sum),
            count=int(rec.size),
            percentage=calculate_percentage(float(rec.sum), total) if total > 0 else 0.0,
        )
        for rec in grouped.itertuples(index=False)
    ]


def contributor_totals(table: Optional[Table], name_key: str, value_key: str) -> List[float]:
    """Per-donor sums, largest first, for histograms and range buckets over donors."""
    return [d.value for d in calculate_distribution(table, name_key, value_key)]


def get_top_items(distribution: Sequence[CategoryDistribution], n: int = 10) -> List[CategoryDistribution]:
    return list(distribution[: max(0, n)])


def calculate_pareto(distribution: Sequence[CategoryDistribution]) -> List[ParetoDataPoint]:
    if not distribution:
        return []

    ordered = sorted(distribution, key=lambda d: d.value, reverse=True)
    cumulative = np.cumsum([float(d.value) for d in ordered])
    total = float(cumulative[-1])
    if total == 0:
        logger.debug("pareto over %d categories with zero total", len(ordered))

    return [
        ParetoDataPoint(
            category=d.category,
            value=float(d.value),
            cumulative_value=float(cum),
            cumulative_percentage=calculate_percentage(float(cum), total),
        )
        for d, cum in zip(ordered, cumulative)
    ]

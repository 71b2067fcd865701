from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Sequence

import numpy as np

from core.columns import extract_numeric_values
from core.data import Table, as_rows
from core.models import ColumnStatistics

logger = logging.getLogger(__name__)


def running_total(values: Iterable[float]) -> float:
    """Sum in input order, one addition at a time.

    Unlike pairwise ``np.sum`` or pandas' compensated group sums, the result
    equals a plain accumulating loop to the last bit.
    """
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.cumsum(arr)[-1])


def calculate_percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linear-interpolation percentile (Excel PERCENTILE.INC / R type 7).

    ``sorted_values`` must already be ascending; it is not re-sorted here.
    ``p`` is in [0, 100].
    """
    n = len(sorted_values)
    if n == 0:
        return 0.0
    if n == 1:
        return float(sorted_values[0])

    index = (p / 100) * (n - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(sorted_values[lower])
    weight = index - lower
    return float(sorted_values[lower] + (sorted_values[upper] - sorted_values[lower]) * weight)


def calculate_column_statistics(table: Optional[Table], key: str, label: str) -> ColumnStatistics:
    rows = as_rows(table)
    values = extract_numeric_values(rows, key)
    if not values:
        logger.debug("column %r has no numeric values in %d rows", key, len(rows))
        return ColumnStatistics(name=key, label=label, count=len(rows), non_null_count=0)

    arr = np.asarray(values, dtype=float)
    total = running_total(arr)
    avg = total / arr.size
    std_dev = math.sqrt(running_total((arr - avg) ** 2) / arr.size)
    ordered = np.sort(arr)

    return ColumnStatistics(
        name=key,
        label=label,
        sum=total,
        avg=avg,
        min=float(arr.min()),
        max=float(arr.max()),
        median=calculate_percentile(ordered, 50),
        std_dev=std_dev,
        count=len(rows),
        non_null_count=int(arr.size),
        p25=calculate_percentile(ordered, 25),
        p75=calculate_percentile(ordered, 75),
        p90=calculate_percentile(ordered, 90),
        p95=calculate_percentile(ordered, 95),
    )

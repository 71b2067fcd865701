from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional, Sequence

import numpy as np

from core.metrics_summary import calculate_percentile, running_total
from core.models import HistogramBin, HistogramData, Quartiles, RangeDistributionData, ValueRange
from core.values import is_real_number

logger = logging.getLogger(__name__)

TUKEY_FACTOR = 1.5

# Inclusive bounds, first match wins. Adjacent ranges share an edge, so any
# non-negative amount (50.5 included) has exactly one bucket.
DEFAULT_VALUE_RANGES = (
    ValueRange("0 EUR", 0, 0),
    ValueRange("1-50 EUR", 0, 50),
    ValueRange("51-100 EUR", 50, 100),
    ValueRange("101-200 EUR", 100, 200),
    ValueRange("201-500 EUR", 200, 500),
    ValueRange("501-1000 EUR", 500, 1000),
    ValueRange("1001+ EUR", 1000, math.inf),
)


def _sample(values: Iterable[object]) -> np.ndarray:
    return np.asarray([float(v) for v in values if is_real_number(v)], dtype=float)  # type: ignore[arg-type]


def _format_bound(value: float) -> str:
    s = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if s == "-0" else s


def _bin_label(start: float, end: float) -> str:
    return f"{_format_bound(start)}-{_format_bound(end)}"


def zoom_window(values: Iterable[float], lo: Optional[float] = None, hi: Optional[float] = None) -> List[float]:
    """Keep values inside the inclusive ``[lo, hi]`` window; an open side is unbounded."""
    out: List[float] = []
    for v in values:
        if lo is not None and v < lo:
            continue
        if hi is not None and v > hi:
            continue
        out.append(v)
    return out


def calculate_histogram(values: Iterable[float], bin_count: int = 10) -> HistogramData:
    arr = _sample(values)
    if arr.size == 0:
        return HistogramData()

    lo = float(arr.min())
    hi = float(arr.max())
    mean = running_total(arr) / arr.size
    median = calculate_percentile(np.sort(arr), 50)

    if lo == hi:
        only = HistogramBin(bin_start=lo, bin_end=hi, count=int(arr.size), label=_bin_label(lo, hi))
        return HistogramData(bins=[only], mean=mean, median=median, min=lo, max=hi)

    bin_count = max(1, int(bin_count))
    width = (hi - lo) / bin_count
    index = np.clip(np.floor((arr - lo) / width).astype(int), 0, bin_count - 1)
    counts = np.bincount(index, minlength=bin_count)

    bins: List[HistogramBin] = []
    for i in range(bin_count):
        start = lo + i * width
        # last edge is the exact max, not lo + n * width
        end = hi if i == bin_count - 1 else lo + (i + 1) * width
        bins.append(HistogramBin(bin_start=start, bin_end=end, count=int(counts[i]), label=_bin_label(start, end)))

    return HistogramData(bins=bins, mean=mean, median=median, min=lo, max=hi)


def calculate_quartiles(values: Iterable[float]) -> Quartiles:
    arr = _sample(values)
    if arr.size == 0:
        return Quartiles()

    ordered = np.sort(arr)
    q1 = calculate_percentile(ordered, 25)
    median = calculate_percentile(ordered, 50)
    q3 = calculate_percentile(ordered, 75)
    iqr = q3 - q1
    lower_fence = q1 - TUKEY_FACTOR * iqr
    upper_fence = q3 + TUKEY_FACTOR * iqr

    inside = ordered[(ordered >= lower_fence) & (ordered <= upper_fence)]
    whisker_lo = float(inside[0]) if inside.size else q1
    whisker_hi = float(inside[-1]) if inside.size else q3
    outliers = [float(v) for v in arr if v < lower_fence or v > upper_fence]

    return Quartiles(min=whisker_lo, q1=q1, median=median, q3=q3, max=whisker_hi, iqr=iqr, outliers=outliers)


def calculate_range_distribution(
    values: Iterable[float],
    ranges: Sequence[ValueRange] = DEFAULT_VALUE_RANGES,
) -> List[RangeDistributionData]:
    """Bucket amounts into fixed ranges; empty ranges are left out."""
    counts = [0] * len(ranges)
    amounts = [0.0] * len(ranges)
    unmatched = 0

    for v in _sample(values):
        for i, r in enumerate(ranges):
            if r.min <= v <= r.max:
                counts[i] += 1
                amounts[i] += float(v)
                break
        else:
            unmatched += 1

    if unmatched:
        logger.debug("%d values outside every range", unmatched)

    total = running_total(amounts)
    return [
        RangeDistributionData(
            label=r.label,
            count=counts[i],
            amount=amounts[i],
            percentage=(amounts[i] / total) * 100 if total else 0.0,
        )
        for i, r in enumerate(ranges)
        if counts[i] > 0
    ]

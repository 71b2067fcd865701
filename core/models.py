from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ColumnStatistics:
    name: str
    label: str
    sum: float = 0.0
    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0
    median: float = 0.0
    std_dev: float = 0.0
    count: int = 0
    non_null_count: int = 0
    p25: float = 0.0
    p75: float = 0.0
    p90: float = 0.0
    p95: float = 0.0


@dataclass(frozen=True)
class TimeSeriesPoint:
    period: str
    value: float
    count: int
    date: date


@dataclass(frozen=True)
class MultiSeriesPoint:
    period: str
    date: date
    count: int
    values: Dict[str, float] = field(default_factory=dict)
    latest: Optional[date] = None
    label: str = ""


@dataclass(frozen=True)
class TimeAggregation:
    weekly: List[MultiSeriesPoint] = field(default_factory=list)
    monthly: List[MultiSeriesPoint] = field(default_factory=list)
    quarterly: List[MultiSeriesPoint] = field(default_factory=list)
    yearly: List[MultiSeriesPoint] = field(default_factory=list)


@dataclass(frozen=True)
class MonthlyTotals:
    """Calendar-month sums for one amount column (index 0 = January)."""

    months: List[float] = field(default_factory=lambda: [0.0] * 12)
    total: float = 0.0
    year: Optional[int] = None
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass(frozen=True)
class CategoryDistribution:
    category: str
    value: float
    count: int
    percentage: float


@dataclass(frozen=True)
class HistogramBin:
    bin_start: float
    bin_end: float
    count: int
    label: str


@dataclass(frozen=True)
class HistogramData:
    bins: List[HistogramBin] = field(default_factory=list)
    mean: float = 0.0
    median: float = 0.0
    min: float = 0.0
    max: float = 0.0


@dataclass(frozen=True)
class Quartiles:
    """Box-plot summary. ``min``/``max`` are whisker ends, not the sample extremes."""

    min: float = 0.0
    q1: float = 0.0
    median: float = 0.0
    q3: float = 0.0
    max: float = 0.0
    iqr: float = 0.0
    outliers: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class ParetoDataPoint:
    category: str
    value: float
    cumulative_value: float
    cumulative_percentage: float


@dataclass(frozen=True)
class ValueRange:
    label: str
    min: float
    max: float


@dataclass(frozen=True)
class RangeDistributionData:
    label: str
    count: int
    amount: float
    percentage: float


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


@dataclass(frozen=True)
class AnalysisMetadata:
    total_rows: int = 0
    filtered_rows: int = 0
    date_range: Optional[DateRange] = None


@dataclass(frozen=True)
class DashboardAnalysis:
    numeric_columns: List[ColumnStatistics] = field(default_factory=list)
    time_series: Dict[str, List[TimeSeriesPoint]] = field(default_factory=dict)
    distributions: Dict[str, List[CategoryDistribution]] = field(default_factory=dict)
    top_donors: List[CategoryDistribution] = field(default_factory=list)
    metadata: AnalysisMetadata = field(default_factory=AnalysisMetadata)

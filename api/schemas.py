from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class AnalysisFiltersModel(BaseModel):
    selected_sources: List[str] = Field(default_factory=list)
    name_query: str = ""
    top_n: int = 10


class RowsModel(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)


class AnalysisRequest(RowsModel):
    column_labels: Dict[str, str] = Field(default_factory=dict)
    name_column: Optional[str] = None
    filters: AnalysisFiltersModel = Field(default_factory=AnalysisFiltersModel)


class ColumnStatisticsRequest(RowsModel):
    column: str
    label: Optional[str] = None


class TimeSeriesRequest(RowsModel):
    date_column: str
    value_columns: List[str]
    granularity: Optional[Literal["weekly", "monthly", "quarterly", "yearly"]] = None


class MonthlyTotalsRequest(RowsModel):
    amount_column: str
    date_column: Optional[str] = None


class DistributionRequest(RowsModel):
    category_column: str
    value_column: Optional[str] = None
    limit: Optional[int] = None


class ValuesRequest(RowsModel):
    """Either explicit ``values`` or ``rows`` + ``column`` to read them from.

    With ``name_column`` the values are per-donor totals of ``column``.
    """

    values: Optional[List[Optional[float]]] = None
    column: Optional[str] = None
    name_column: Optional[str] = None


class HistogramRequest(ValuesRequest):
    bins: int = Field(default=10, ge=1, le=100)
    zoom_min: Optional[float] = None
    zoom_max: Optional[float] = None


class ValueRangeModel(BaseModel):
    label: str
    min: float
    max: Optional[float] = None  # open-ended when omitted


class RangeDistributionRequest(ValuesRequest):
    ranges: Optional[List[ValueRangeModel]] = None

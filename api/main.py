from __future__ import annotations

import logging
import math
from typing import List

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.columns import detect_date_columns, detect_numeric_columns, extract_numeric_values
from core.dashboard import analyze_data_for_dashboard
from core.data import data_keys, source_files
from core.filters import AnalysisFilters, normalize_filters
from core.metrics_distribution import calculate_distribution, calculate_pareto, contributor_totals, get_top_items
from core.metrics_shape import (
    DEFAULT_VALUE_RANGES,
    calculate_histogram,
    calculate_quartiles,
    calculate_range_distribution,
    zoom_window,
)
from core.metrics_summary import calculate_column_statistics
from core.metrics_time import aggregate_by_month, aggregate_by_time, aggregate_by_time_multiple
from core.models import ValueRange
from api.schemas import (
    AnalysisFiltersModel,
    AnalysisRequest,
    ColumnStatisticsRequest,
    DistributionRequest,
    HistogramRequest,
    MonthlyTotalsRequest,
    RangeDistributionRequest,
    RowsModel,
    TimeSeriesRequest,
    ValuesRequest,
)


app = FastAPI(title="Donation Statistics API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: AnalysisFiltersModel) -> AnalysisFilters:
    return normalize_filters(model.model_dump())


def _values_from_request(req: ValuesRequest) -> List[float]:
    if req.values is not None:
        return [v for v in req.values if v is not None]
    if not req.column:
        return []
    if req.name_column:
        totals = contributor_totals(req.rows, req.name_column, req.column)
        if totals:
            return totals
    return extract_numeric_values(req.rows, req.column)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for dataclasses and pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/analysis")
def dashboard_analysis(req: AnalysisRequest):
    try:
        f = _filters_from_model(req.filters)
        return _json(analyze_data_for_dashboard(req.rows, req.column_labels, req.name_column, filters=f))
    except Exception as exc:
        logger.exception("analysis failed")
        return _error(exc)


@app.post("/columns")
def columns(req: RowsModel):
    try:
        return _json(
            {
                "all": data_keys(req.rows),
                "numeric": detect_numeric_columns(req.rows),
                "dates": detect_date_columns(req.rows),
                "sources": source_files(req.rows),
            }
        )
    except Exception as exc:
        logger.exception("columns failed")
        return _error(exc)


@app.post("/statistics")
def statistics(req: ColumnStatisticsRequest):
    try:
        return _json(calculate_column_statistics(req.rows, req.column, req.label or req.column))
    except Exception as exc:
        logger.exception("statistics failed")
        return _error(exc)


@app.post("/time-series")
def time_series(req: TimeSeriesRequest):
    try:
        if req.granularity and len(req.value_columns) == 1:
            points = aggregate_by_time(req.rows, req.date_column, req.value_columns[0], req.granularity)
            return _json({req.granularity: points})
        series = aggregate_by_time_multiple(req.rows, req.date_column, req.value_columns)
        if req.granularity:
            return _json({req.granularity: getattr(series, req.granularity)})
        return _json(series)
    except Exception as exc:
        logger.exception("time_series failed")
        return _error(exc)


@app.post("/monthly-totals")
def monthly_totals(req: MonthlyTotalsRequest):
    try:
        return _json(aggregate_by_month(req.rows, req.amount_column, req.date_column))
    except Exception as exc:
        logger.exception("monthly_totals failed")
        return _error(exc)


@app.post("/distribution")
def distribution(req: DistributionRequest):
    try:
        dist = calculate_distribution(req.rows, req.category_column, req.value_column)
        if req.limit is not None:
            dist = get_top_items(dist, req.limit)
        return _json({"distribution": dist})
    except Exception as exc:
        logger.exception("distribution failed")
        return _error(exc)


@app.post("/pareto")
def pareto(req: DistributionRequest):
    try:
        dist = calculate_distribution(req.rows, req.category_column, req.value_column)
        if req.limit is not None:
            dist = get_top_items(dist, req.limit)
        return _json({"pareto": calculate_pareto(dist)})
    except Exception as exc:
        logger.exception("pareto failed")
        return _error(exc)


@app.post("/histogram")
def histogram(req: HistogramRequest):
    try:
        values = zoom_window(_values_from_request(req), req.zoom_min, req.zoom_max)
        return _json(calculate_histogram(values, req.bins))
    except Exception as exc:
        logger.exception("histogram failed")
        return _error(exc)


@app.post("/quartiles")
def quartiles(req: ValuesRequest):
    try:
        return _json(calculate_quartiles(_values_from_request(req)))
    except Exception as exc:
        logger.exception("quartiles failed")
        return _error(exc)


@app.post("/ranges")
def ranges(req: RangeDistributionRequest):
    try:
        value_ranges = DEFAULT_VALUE_RANGES
        if req.ranges:
            value_ranges = tuple(
                ValueRange(r.label, r.min, math.inf if r.max is None else r.max) for r in req.ranges
            )
        return _json({"ranges": calculate_range_distribution(_values_from_request(req), value_ranges)})
    except Exception as exc:
        logger.exception("ranges failed")
        return _error(exc)

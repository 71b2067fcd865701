from __future__ import annotations

import logging
from typing import Dict, List, Optional

from core.data import Table, as_rows
from core.dates import looks_like_date
from core.values import METADATA_KEYS, CellKind, classify_cell, is_missing

logger = logging.getLogger(__name__)

NUMERIC_SHARE_THRESHOLD = 0.5


def detect_numeric_columns(table: Optional[Table]) -> List[str]:
    """Columns where at least half of the non-empty values parse as numbers."""
    rows = as_rows(table)
    if not rows:
        return []

    counts: Dict[str, List[int]] = {}  # key -> [numeric, non_empty]
    for row in rows:
        for key, value in row.items():
            if key in METADATA_KEYS:
                continue
            c = counts.setdefault(key, [0, 0])
            kind = classify_cell(value).kind
            if kind is CellKind.MISSING:
                continue
            c[1] += 1
            if kind is CellKind.NUMBER:
                c[0] += 1

    numeric = [key for key, (num, total) in counts.items() if total > 0 and num / total >= NUMERIC_SHARE_THRESHOLD]
    logger.debug("numeric columns: %s", numeric)
    return numeric


def detect_date_columns(table: Optional[Table]) -> List[str]:
    """Columns holding at least one date-like value, in order of first detection."""
    rows = as_rows(table)
    if not rows:
        return []

    found: Dict[str, None] = {}
    for row in rows:
        for key, value in row.items():
            if key in METADATA_KEYS or key in found:
                continue
            if not is_missing(value) and looks_like_date(value):
                found[key] = None

    logger.debug("date columns: %s", list(found))
    return list(found)


def extract_numeric_values(table: Optional[Table], key: str) -> List[float]:
    out: List[float] = []
    for row in as_rows(table):
        cell = classify_cell(row.get(key))
        if cell.kind is CellKind.NUMBER:
            out.append(cell.value)
    return out

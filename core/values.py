from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from numbers import Real
from typing import Any, Optional

import pandas as pd


SOURCE_FILE_KEY = "_sourceFileName"
SOURCE_SHEET_KEY = "_sourceSheetName"
METADATA_KEYS = frozenset({SOURCE_FILE_KEY, SOURCE_SHEET_KEY})


class CellKind(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    DATE = "date"
    MISSING = "missing"


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    value: Any = None


def is_missing(value: object) -> bool:
    """None, empty string, NaN and NaT all mean "no value"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_real_number(value: object) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, Real) and not math.isnan(float(value))


def parse_number(value: object) -> Optional[float]:
    """Native numbers as-is, strings through float() after trimming; None otherwise."""
    if is_missing(value):
        return None
    if is_real_number(value):
        return float(value)  # type: ignore[arg-type]
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            out = float(s)
        except ValueError:
            return None
        return None if math.isnan(out) else out
    return None


def parse_numeric_or_default(value: object, default: float = 0.0) -> float:
    out = parse_number(value)
    return default if out is None else out


def classify_cell(value: object) -> Cell:
    if is_missing(value):
        return Cell(CellKind.MISSING)
    if isinstance(value, date):
        return Cell(CellKind.DATE, value)
    number = parse_number(value)
    if number is not None:
        return Cell(CellKind.NUMBER, number)
    return Cell(CellKind.TEXT, str(value))


def category_label(value: object) -> Optional[str]:
    if is_missing(value):
        return None
    if is_real_number(value) and float(value).is_integer() and not isinstance(value, int):  # type: ignore[arg-type]
        # 3.0 -> "3"
        return str(int(value))  # type: ignore[arg-type]
    return str(value)

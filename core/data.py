from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from core.values import METADATA_KEYS, SOURCE_FILE_KEY, is_missing

Row = Mapping[str, Any]
Table = Union[Sequence[Row], pd.DataFrame]


def _clean_cell(value: Any) -> Any:
    if is_missing(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        # numpy scalars -> Python scalars
        return value.item()
    return value


def as_rows(table: Optional[Table]) -> List[Row]:
    """Normalize a DataFrame or a sequence of mappings into a list of rows.

    DataFrames become plain dicts with NaN/NaT mapped to None. Sequences are
    returned as a shallow list copy; the rows themselves are not touched.
    """
    if table is None:
        return []
    if isinstance(table, pd.DataFrame):
        if table.empty:
            return []
        records = table.to_dict(orient="records")
        return [{str(k): _clean_cell(v) for k, v in rec.items()} for rec in records]
    return list(table)


def data_keys(rows: Iterable[Row]) -> List[str]:
    """All non-metadata keys in first-seen order."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row.keys():
            if key in METADATA_KEYS or key in seen:
                continue
            seen[key] = None
    return list(seen)


def has_source_files(rows: Iterable[Row]) -> bool:
    return any(SOURCE_FILE_KEY in row for row in rows)


def source_files(rows: Iterable[Row]) -> List[str]:
    seen: Dict[str, None] = {}
    for row in rows:
        name = row.get(SOURCE_FILE_KEY)
        if is_missing(name):
            continue
        seen.setdefault(str(name), None)
    return list(seen)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

TOP_N_DEFAULT = 10


@dataclass(frozen=True)
class AnalysisFilters:
    selected_sources: List[str] = field(default_factory=list)
    name_query: str = ""
    top_n: int = TOP_N_DEFAULT


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s:
            out.append(s)
    return out


def normalize_filters(raw: Optional[dict]) -> AnalysisFilters:
    raw = raw or {}

    top_n = raw.get("top_n", TOP_N_DEFAULT)
    try:
        top_n = int(top_n)
    except Exception:
        top_n = TOP_N_DEFAULT
    top_n = max(1, min(200, top_n))

    return AnalysisFilters(
        selected_sources=_as_str_list(raw.get("selected_sources")),
        name_query=str(raw.get("name_query") or "").strip(),
        top_n=top_n,
    )

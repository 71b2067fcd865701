from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

import pandas as pd

from core.values import is_real_number


ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.ASCII)
SLASH_DATE = re.compile(r"(\d{2})/(\d{2})/(\d{4})", re.ASCII)
GERMAN_DATE = re.compile(r"(\d{2})\.(\d{2})\.(\d{4})", re.ASCII)
COMPACT_DATE = re.compile(r"(\d{4})(\d{2})(\d{2})", re.ASCII)

DATE_PATTERNS = (ISO_DATE, SLASH_DATE, GERMAN_DATE, COMPACT_DATE)

FILENAME_DATE_WORD = re.compile(r"\b(\d{4})(\d{2})(\d{2})\b", re.ASCII)

# unanchored, for dates embedded in free text
LOOSE_YMD = re.compile(r"(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})", re.ASCII)
LOOSE_DMY = re.compile(r"(\d{1,2})[./-](\d{1,2})[./-](\d{2,4})", re.ASCII)

EXCEL_EPOCH = date(1899, 12, 30)
EXCEL_SERIAL_MIN = 20000
EXCEL_SERIAL_MAX = 80000


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def looks_like_date(value: object) -> bool:
    """True for native dates and for strings in one of the four supported shapes."""
    if isinstance(value, date):
        return value is not pd.NaT
    if not isinstance(value, str):
        return False
    s = value.strip()
    return any(p.fullmatch(s) for p in DATE_PATTERNS)


def parse_date(value: object) -> Optional[date]:
    """Parse a cell into a calendar date.

    Supported strings: ``YYYYMMDD``, ``YYYY-MM-DD``, ``DD.MM.YYYY`` and
    ``DD/MM/YYYY``. The slash form is always read day-first (European
    receipts); ``01/05/2025`` is the 1st of May. Native dates are returned
    unchanged. Anything else, including impossible dates, gives None.
    """
    if isinstance(value, date):
        return None if value is pd.NaT else value
    if not isinstance(value, str):
        return None

    s = value.strip()

    m = COMPACT_DATE.fullmatch(s)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = ISO_DATE.fullmatch(s)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = GERMAN_DATE.fullmatch(s)
    if m:
        return _safe_date(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    m = SLASH_DATE.fullmatch(s)
    if m:
        return _safe_date(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    return None


def find_date_in_text(text: str) -> Optional[date]:
    """Search free text (file names, notes) for a date.

    First match decides: ``YYYY-M-D`` (``-``, ``/`` or ``.``), then
    ``D.M.YYYY`` / ``D/M/YY`` (two-digit years are 20YY), then a
    ``YYYYMMDD`` run of digits. Impossible dates give None.
    """
    s = text.strip()
    if not s:
        return None

    m = LOOSE_YMD.search(s)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = LOOSE_DMY.search(s)
    if m:
        year = int(m.group(3))
        if year < 100:
            year += 2000
        return _safe_date(year, int(m.group(2)), int(m.group(1)))

    m = COMPACT_DATE.search(s)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    return None


def parse_row_date(value: object) -> Optional[date]:
    """Lenient cell date for receipts: native dates, Excel serials, or a date inside text."""
    if isinstance(value, date):
        return None if value is pd.NaT else value
    if is_real_number(value):
        return excel_serial_to_date(value)
    if isinstance(value, str):
        return find_date_in_text(value)
    return None


def extract_date_from_filename(filename: Optional[str]) -> Optional[date]:
    """Find a YYYYMMDD token in a file name, preferring a standalone word."""
    if not filename:
        return None
    m = FILENAME_DATE_WORD.search(filename) or COMPACT_DATE.search(filename)
    if not m:
        return None
    return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def excel_serial_to_date(value: object) -> Optional[date]:
    """Excel serial day number -> date, only inside a plausible range (1954..2119)."""
    if not is_real_number(value):
        return None
    n = float(value)  # type: ignore[arg-type]
    if not (EXCEL_SERIAL_MIN < n < EXCEL_SERIAL_MAX):
        return None
    return EXCEL_EPOCH + timedelta(days=int(n))


def iso_week_info(d: date) -> Tuple[int, int, date]:
    """(ISO week year, ISO week number, Monday of that week)."""
    day = d.date() if isinstance(d, datetime) else d
    week_year, week_no, weekday = day.isocalendar()[:3]
    return week_year, week_no, day - timedelta(days=weekday - 1)


def chronological_key(d: date) -> Tuple[int, float]:
    """Sort key that orders dates and datetimes together."""
    if isinstance(d, datetime):
        seconds = d.hour * 3600 + d.minute * 60 + d.second + d.microsecond / 1e6
        return d.toordinal(), seconds
    return d.toordinal(), 0.0

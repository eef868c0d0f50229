"""
Parsing helpers for spreadsheet exports and loosely typed payloads.

Vietnamese exports use '.' as thousands separator and ',' as decimal mark
("1.234,5" == 1234.5) and dates as DD/MM/YYYY.
"""

import math
from datetime import date, datetime
from typing import Any, Optional


def safe_float(value: Any) -> Optional[float]:
    """Coerce numbers and numeric strings to float; None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def parse_vn_number(value: Any) -> Optional[float]:
    """Parse a number written in Vietnamese notation ("1.234,5")."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return safe_float(text.replace('.', '').replace(',', '.'))


def parse_plain_number(value: Any) -> Optional[float]:
    """Parse a CSV cell written with '.' as decimal mark; blanks become None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return safe_float(text)


def parse_vn_date(value: Any) -> date:
    """
    Parse DD/MM/YYYY into a date.

    Raises:
        ValueError: malformed or impossible date
    """
    text = str(value or '').strip()
    parts = text.split('/')
    if len(parts) != 3:
        raise ValueError('Ngày không đúng định dạng DD/MM/YYYY')
    try:
        day, month, year = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        raise ValueError('Ngày không hợp lệ') from None


def parse_date(value: Any) -> date:
    """Accept ISO dates (YYYY-MM-DD), ISO datetimes or DD/MM/YYYY."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or '').strip()
    if '/' in text:
        return parse_vn_date(text)
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValueError('Ngày không hợp lệ') from None

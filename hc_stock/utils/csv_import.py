"""
CSV upload reading with pandas.

Every cell is read as text so Vietnamese-formatted numbers ("1.234,5") and
DD/MM/YYYY dates reach the row parsers untouched.
"""

import io
from typing import Dict, List

import pandas as pd

from hc_stock.services.exceptions import InvalidInputError


def read_csv_rows(data: bytes) -> List[Dict[str, str]]:
    """
    Parse CSV bytes into one dict per row.

    Header names are stripped and lowercased; blank cells become "".

    Raises:
        InvalidInputError: empty or unreadable file
    """
    if not data or not data.strip():
        raise InvalidInputError("File CSV trống")

    try:
        df = pd.read_csv(
            io.BytesIO(data),
            dtype=str,
            keep_default_na=False,
            encoding="utf-8-sig",
            skipinitialspace=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise InvalidInputError(f"Không đọc được file CSV: {e}") from None

    df.columns = [str(c).strip().lower() for c in df.columns]
    return [
        {key: (value or "").strip() for key, value in record.items()}
        for record in df.to_dict(orient="records")
    ]


def require_columns(rows: List[Dict[str, str]], columns: List[str]) -> None:
    if not rows:
        return
    missing = [c for c in columns if c not in rows[0]]
    if missing:
        raise InvalidInputError(f"File CSV thiếu cột: {', '.join(missing)}")

"""Reading uploaded workbooks: first sheet as dict rows, tolerant cell parsing.

Cells may hold native dates/times (openpyxl), spreadsheet serial numbers,
NaN for blanks (pandas) or plain text.
"""

from __future__ import annotations

import io
import math
from datetime import date, datetime
from typing import Any, Mapping, Optional

import pandas as pd

from ..core.constants import EXCEL_EPOCH_ORDINAL
from ..core.exceptions import ValidationError


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, float) and math.isnan(value):
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_excel_date(value: Any) -> date:
    """Native date/datetime cell, spreadsheet serial number or ``dd/mm/yyyy`` text."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if is_number(value):
        return date.fromordinal(EXCEL_EPOCH_ORDINAL + int(value))
    if isinstance(value, str):
        raw = value.strip()
        for fmt in ("%d/%m/%Y", "%d/%m/%y", "%Y-%m-%d"):
            try:
                return datetime.strptime(raw, fmt).date()
            except ValueError:
                continue
    raise ValidationError(f"Fecha inválida ({value})")


def parse_optional_excel_date(value: Any) -> Optional[date]:
    return None if is_blank(value) else parse_excel_date(value)


def cell_text(value: Any) -> str:
    if is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def column(row: Mapping[str, Any], *names: str) -> Any:
    """First non-blank value among ``names`` (case-insensitive)."""

    lowered = {str(k).strip().lower(): v for k, v in row.items()}
    for name in names:
        value = lowered.get(name.lower())
        if not is_blank(value):
            return value
    return None


def read_rows(data: bytes) -> list[dict]:
    """Rows of the first sheet as dicts keyed by the header row."""

    try:
        frame = pd.read_excel(io.BytesIO(data), sheet_name=0, dtype=object)
    except Exception as exc:
        raise ValidationError(f"Error procesando el archivo: {exc}") from exc
    frame.columns = [str(c).strip() for c in frame.columns]
    return frame.to_dict(orient="records")

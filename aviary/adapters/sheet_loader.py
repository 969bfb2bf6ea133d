# aviary/adapters/sheet_loader.py
"""
Loaders for spreadsheet exports (CSV or XLSX) of daily farm logs.

These functions:
- read the sheet with pandas, every column as text;
- normalize headers (case, punctuation, common synonyms);
- return lists of dicts keyed like the forms the use cases validate.

Notes:
- No number parsing happens here; values stay raw text so the use cases
  report bad cells with the same messages as the interactive forms.
- Dates are normalized to ISO (YYYY-MM-DD) when possible.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd


# ---------------------------
# normalization helpers
# ---------------------------

def _slug(s: str) -> str:
    """Normalize headers: lower case, non-alphanumerics collapsed to a space."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    s = re.sub(r"[^a-z0-9]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()
    return s


def _safe_get(row, key) -> Optional[str]:
    """Cell value as stripped text, None for NA or blank."""
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def _to_date_iso(val: Any) -> Optional[str]:
    """Convert a cell to an ISO date (YYYY-MM-DD) when possible."""
    if val is None:
        return None
    s = str(val).strip()
    if not s:
        return None
    for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(s[:10], fmt).date().isoformat()
        except ValueError:
            continue
    d = pd.to_datetime(s, errors="coerce")
    if pd.isna(d):
        # left as is; the use case reports it as an invalid date
        return s
    return d.date().isoformat()


_ALIASES = {
    "date": "date",
    "day": "date",
    "production date": "date",

    "small": "small",
    "s": "small",
    "medium": "medium",
    "m": "medium",
    "large": "large",
    "l": "large",
    "extra large": "extra_large",
    "extralarge": "extra_large",
    "xl": "extra_large",

    "amount": "amount_kg",
    "amount kg": "amount_kg",
    "kg": "amount_kg",
    "feed kg": "amount_kg",
    "quantity": "amount_kg",

    "type": "feed_type",
    "feed type": "feed_type",
    "feed": "feed_type",

    "cost": "cost",
    "price": "cost",
    "supplier": "supplier",
    "vendor": "supplier",
    "notes": "notes",
    "comments": "notes",
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename columns through the alias table (unknown headers keep their slug)."""
    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = _ALIASES.get(key, key.replace(" ", "_"))
    return df.rename(columns=new_cols)


def read_sheet(path: str) -> pd.DataFrame:
    """Read a CSV or XLSX file with every column as text."""
    suffix = Path(path).suffix.lower()
    if suffix in (".xlsx", ".xlsm", ".xls"):
        df = pd.read_excel(path, dtype="string")
    else:
        df = pd.read_csv(path, dtype="string", keep_default_na=False)
    return _normalize_columns(df)


# ---------------------------
# public loaders
# ---------------------------

def load_egg_records(path: str) -> List[Dict[str, Any]]:
    """Read a daily egg production sheet.

    Output keys per row: date, small, medium, large, extra_large, notes.
    A ``total`` column, when present, is ignored; totals are recomputed.
    """
    df = read_sheet(path)
    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        out.append({
            "date": _to_date_iso(_safe_get(row, "date")),
            "small": _safe_get(row, "small"),
            "medium": _safe_get(row, "medium"),
            "large": _safe_get(row, "large"),
            "extra_large": _safe_get(row, "extra_large"),
            "notes": _safe_get(row, "notes"),
        })
    return out


def load_feed_records(path: str) -> List[Dict[str, Any]]:
    """Read a feed consumption sheet.

    Output keys per row: date, amount_kg, feed_type, cost, supplier, notes.
    """
    df = read_sheet(path)
    out: List[Dict[str, Any]] = []
    for _, row in df.iterrows():
        out.append({
            "date": _to_date_iso(_safe_get(row, "date")),
            "amount_kg": _safe_get(row, "amount_kg"),
            "feed_type": _safe_get(row, "feed_type"),
            "cost": _safe_get(row, "cost"),
            "supplier": _safe_get(row, "supplier"),
            "notes": _safe_get(row, "notes"),
        })
    return out

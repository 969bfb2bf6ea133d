# aviary/adapters/inventory_csv.py
"""
CSV export (and re-import) of egg inventory snapshots.

Format, one row per snapshot:

    Date,Small,Medium,Large,Extra Large,Total,Last Updated
    2024-01-07,120,680,450,70,1320,2024-01-07 14:30

Dates are written as ``YYYY-MM-DD`` and the update timestamp as
``YYYY-MM-DD HH:MM``. The default file name carries the export day:
``egg-inventory-YYYY-MM-DD.csv``.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

import pandas as pd

from aviary.domain.errors import ValidationError
from aviary.domain.models import InventorySnapshot
from aviary.adapters.parsers import parse_count, parse_date, parse_timestamp

EXPORT_COLUMNS = ["Date", "Small", "Medium", "Large", "Extra Large", "Total", "Last Updated"]
DATE_FMT = "%Y-%m-%d"
TIMESTAMP_FMT = "%Y-%m-%d %H:%M"


def export_filename(now: datetime) -> str:
    return f"egg-inventory-{now.strftime(DATE_FMT)}.csv"


def inventory_frame(snapshots: Iterable[InventorySnapshot]) -> pd.DataFrame:
    """Snapshots as a DataFrame in export column order."""
    rows = [
        [
            s.date.strftime(DATE_FMT),
            s.small,
            s.medium,
            s.large,
            s.extra_large,
            s.total,
            s.last_updated.strftime(TIMESTAMP_FMT) if s.last_updated else "",
        ]
        for s in snapshots
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def render_inventory_csv(snapshots: Iterable[InventorySnapshot]) -> str:
    return inventory_frame(snapshots).to_csv(index=False, lineterminator="\n")


def write_inventory_csv(
    snapshots: Iterable[InventorySnapshot],
    directory: Union[str, Path],
    now: datetime,
    filename: Optional[str] = None,
) -> Path:
    """Write the CSV into ``directory`` and return the file path."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / (filename or export_filename(now))
    path.write_text(render_inventory_csv(snapshots), encoding="utf-8")
    return path


def load_inventory_csv(path: Union[str, Path]) -> List[InventorySnapshot]:
    """Read a file produced by ``write_inventory_csv``.

    Raises:
        ValidationError: missing columns, bad cells, or a Total that does
            not match the sum of the size columns.
    """
    df = pd.read_csv(path, dtype="string", keep_default_na=False)
    missing = [c for c in EXPORT_COLUMNS if c not in df.columns]
    if missing:
        raise ValidationError(f"inventory file is missing columns: {', '.join(missing)}")

    out: List[InventorySnapshot] = []
    for line, (_, row) in enumerate(df.iterrows(), start=2):
        snap = InventorySnapshot(
            date=parse_date(row["Date"], f"Date (line {line})"),
            small=parse_count(row["Small"], f"Small (line {line})", default=0),
            medium=parse_count(row["Medium"], f"Medium (line {line})", default=0),
            large=parse_count(row["Large"], f"Large (line {line})", default=0),
            extra_large=parse_count(row["Extra Large"], f"Extra Large (line {line})", default=0),
            last_updated=parse_timestamp(row["Last Updated"], f"Last Updated (line {line})"),
        )
        total = parse_count(row["Total"], f"Total (line {line})", default=snap.total)
        if total != snap.total:
            raise ValidationError(f"Total on line {line} is {total}, sizes add up to {snap.total}")
        out.append(snap)
    return out

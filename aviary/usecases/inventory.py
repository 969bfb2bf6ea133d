# aviary/usecases/inventory.py
"""
UC: Egg inventory (stock snapshots, distribution by size, CSV export).

The "current" stock is the most recently recorded snapshot. With no
snapshot yet every size reports zero eggs and 0.0 %.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from aviary.config import DB_PATH
from aviary.domain.formulas import size_percentages
from aviary.domain.models import EGG_SIZES, InventorySnapshot
from aviary.adapters.inventory_csv import load_inventory_csv, write_inventory_csv
from aviary.adapters.parsers import parse_choice, parse_count, parse_date
from aviary.infra.repositories import InventoryRepo
from aviary.infra.logger import (
    log_database_operation, log_file_operation, log_record,
    log_system_event, log_transaction,
)
from aviary.usecases.common import prepare_db, resolve_now

SIZE_LABELS = {
    "small": "Small",
    "medium": "Medium",
    "large": "Large",
    "extra_large": "Extra Large",
}


def _snapshot_row(s: InventorySnapshot) -> Dict[str, Any]:
    return {
        "id": s.id,
        "date": s.date,
        "small": s.small,
        "medium": s.medium,
        "large": s.large,
        "extra_large": s.extra_large,
        "total": s.total,
        "last_updated": s.last_updated,
    }


def record_inventory(form: Mapping[str, Any], db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Store a stock count by size; ``last_updated`` is the time of the call, to the minute."""
    prepare_db(db_path)
    now = resolve_now(now).replace(second=0, microsecond=0)
    try:
        snap = InventorySnapshot(
            date=parse_date(form.get("date"), "Date", required=False) or now.date(),
            small=parse_count(form.get("small"), "Small", default=0),
            medium=parse_count(form.get("medium"), "Medium", default=0),
            large=parse_count(form.get("large"), "Large", default=0),
            extra_large=parse_count(form.get("extra_large"), "Extra Large", default=0),
            last_updated=now,
        )
        snap.id = InventoryRepo(db_path).insert(snap)
        log_database_operation("inventory_snapshot", "INSERT", 1, total=snap.total)
        log_record("inventory", "insert", date=snap.date.isoformat(), total=snap.total)
        log_transaction("record_inventory", dict(form), result={"total": snap.total})
        return _snapshot_row(snap)
    except Exception as e:
        log_transaction("record_inventory", dict(form), error=str(e))
        raise


def current_stock(db_path: str = DB_PATH) -> InventorySnapshot:
    """Latest snapshot, or an all-zero one when nothing was recorded."""
    prepare_db(db_path)
    latest = InventoryRepo(db_path).latest()
    if latest is None:
        return InventorySnapshot(date=date.today())
    return latest


def inventory_summary(
    db_path: str = DB_PATH,
    on_date: Optional[Any] = None,
    size: Optional[str] = None,
) -> Dict[str, Any]:
    """Current stock with its size distribution, plus the snapshot list.

    Args:
        on_date: Only list snapshots of this day (the current stock is
            always the latest snapshot overall).
        size: Restrict the distribution to one size bucket ("all" or None
            for every bucket).
    """
    prepare_db(db_path)
    stock = current_stock(db_path)
    wanted = parse_choice(size, "Size", ("all",) + EGG_SIZES, default="all")
    day = parse_date(on_date, "Date", required=False)

    counts = {s: getattr(stock, s) for s in EGG_SIZES}
    pct = size_percentages(counts)
    distribution = [
        {"size": SIZE_LABELS[s], "count": counts[s], "percentage": pct[s]}
        for s in EGG_SIZES
        if wanted in ("all", s)
    ]
    snapshots = InventoryRepo(db_path).get_all(on_date=day)
    return {
        "total": stock.total,
        "distribution": distribution,
        "last_updated": stock.last_updated,
        "filter_date": day,
        "records": [_snapshot_row(s) for s in snapshots],
    }


def export_inventory(
    directory: str = ".",
    db_path: str = DB_PATH,
    on_date: Optional[Any] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Write the (optionally date-filtered) snapshots to a CSV file."""
    prepare_db(db_path)
    now = resolve_now(now)
    try:
        day = parse_date(on_date, "Date", required=False)
        snapshots = InventoryRepo(db_path).get_all(on_date=day)
        path = write_inventory_csv(snapshots, directory, now)
        log_file_operation("export", str(path), rows_processed=len(snapshots))
        return path
    except Exception as e:
        log_system_event("export_inventory_error", {"error": str(e)}, level="error")
        raise


def import_inventory(path: str, db_path: str = DB_PATH) -> Dict[str, Any]:
    """Load snapshots from an exported CSV back into the store."""
    prepare_db(db_path)
    try:
        snapshots = load_inventory_csv(path)
        # file lists newest first; insert oldest first to keep that order on read
        inserted = InventoryRepo(db_path).insert_many(list(reversed(snapshots)))
        log_file_operation("import", path, rows_processed=inserted)
        return {"file": path, "imported": inserted}
    except Exception as e:
        log_system_event("import_inventory_error", {"file_path": path, "error": str(e)}, level="error")
        raise

# aviary/usecases/imports.py
"""
UC: Import daily logs from spreadsheets (egg production, feed).

Every row goes through the same validation as the interactive form.
Rows failing validation are reported with their sheet line number and
skipped; valid rows are stored.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from aviary.config import DB_PATH
from aviary.domain.errors import ValidationError
from aviary.adapters.sheet_loader import load_egg_records, load_feed_records
from aviary.infra.logger import log_file_operation, log_system_event, print_system
from aviary.usecases.common import prepare_db, resolve_now
from aviary.usecases.feed import record_feed
from aviary.usecases.production import record_eggs


def _import_rows(kind: str, path: str, rows: List[Dict[str, Any]], handler, db_path: str, now: datetime) -> Dict[str, Any]:
    """Feed every sheet row through ``handler``; collect per-line errors."""
    errors: List[Dict[str, Any]] = []
    ok = 0
    for line, row in enumerate(rows, start=2):
        try:
            handler(row, db_path=db_path, now=now)
            ok += 1
        except ValidationError as e:
            errors.append({"line": line, "message": str(e)})
    log_file_operation("import", path, rows_processed=ok, kind=kind, errors=len(errors))
    print_system(f">> {ok} of {len(rows)} {kind} rows imported from {path}")
    return {"type": kind, "file": path, "total": len(rows), "imported": ok, "errors": errors}


def import_egg_sheet(path: str, db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Import a CSV/XLSX production log."""
    log_system_event("import_egg_sheet_start", {"file_path": path})
    prepare_db(db_path)
    rows = load_egg_records(path)
    return _import_rows("eggs", path, rows, record_eggs, db_path, resolve_now(now))


def import_feed_sheet(path: str, db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Import a CSV/XLSX feed log."""
    log_system_event("import_feed_sheet_start", {"file_path": path})
    prepare_db(db_path)
    rows = load_feed_records(path)
    return _import_rows("feed", path, rows, record_feed, db_path, resolve_now(now))

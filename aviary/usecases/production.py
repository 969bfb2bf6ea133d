# aviary/usecases/production.py
"""
UC: Daily egg production (single entry, summary).
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from aviary.config import DB_PATH
from aviary.domain.formulas import round_half_up
from aviary.domain.models import EggRecord
from aviary.adapters.parsers import optional_text, parse_count, parse_date
from aviary.infra.repositories import EggRepo
from aviary.infra.logger import log_database_operation, log_record, log_system_event, log_transaction
from aviary.usecases.common import prepare_db, resolve_now


def _egg_record(form: Mapping[str, Any], now: datetime) -> EggRecord:
    # blank size fields count as zero eggs
    return EggRecord(
        date=parse_date(form.get("date"), "Date", required=False) or now.date(),
        small=parse_count(form.get("small"), "Small", default=0),
        medium=parse_count(form.get("medium"), "Medium", default=0),
        large=parse_count(form.get("large"), "Large", default=0),
        extra_large=parse_count(form.get("extra_large"), "Extra Large", default=0),
        notes=optional_text(form.get("notes")),
    )


def record_eggs(form: Mapping[str, Any], db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Validate the production form and store the day's collection."""
    prepare_db(db_path)
    now = resolve_now(now)
    try:
        rec = _egg_record(form, now)
        rec.id = EggRepo(db_path).insert(rec)
        log_database_operation("egg_record", "INSERT", 1, total=rec.total)
        log_record("eggs", "insert", date=rec.date.isoformat(), total=rec.total)
        log_transaction("record_eggs", dict(form), result={"id": rec.id, "total": rec.total})
        return {
            "id": rec.id,
            "date": rec.date,
            "small": rec.small,
            "medium": rec.medium,
            "large": rec.large,
            "extra_large": rec.extra_large,
            "total": rec.total,
            "notes": rec.notes,
        }
    except Exception as e:
        log_transaction("record_eggs", dict(form), error=str(e))
        log_system_event("record_eggs_error", {"error": str(e)}, level="error")
        raise


def production_summary(db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Today's total, the average daily total and all records (newest first)."""
    prepare_db(db_path)
    now = resolve_now(now)
    records = EggRepo(db_path).get_all()
    today = now.date()
    # first match in newest-first order: the latest entry for today
    today_total = next((r.total for r in records if r.date == today), 0)
    average = int(round_half_up(sum(r.total for r in records) / len(records))) if records else 0
    return {
        "today_total": today_total,
        "average_production": average,
        "records": [
            {
                "id": r.id,
                "date": r.date,
                "small": r.small,
                "medium": r.medium,
                "large": r.large,
                "extra_large": r.extra_large,
                "total": r.total,
                "notes": r.notes,
            }
            for r in records
        ],
    }

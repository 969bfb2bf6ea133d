# aviary/usecases/debeaking.py
"""
UC: Debeaking schedule (schedule, mark completed, list).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from aviary.config import DB_PATH
from aviary.domain.errors import ValidationError
from aviary.domain.models import DEBEAKING_TYPES, DebeakingRecord
from aviary.domain.policies import debeaking_status, mark_debeaking_completed, sort_debeaking
from aviary.adapters.parsers import optional_text, parse_choice, parse_count, parse_date, require_text
from aviary.infra.repositories import BatchRepo, DebeakingRepo
from aviary.infra.logger import log_database_operation, log_record, log_system_event, log_transaction
from aviary.usecases.common import prepare_db, resolve_now


def _row(rec: DebeakingRecord, now: datetime) -> Dict[str, Any]:
    return {
        "id": rec.id,
        "batch_number": rec.batch_number,
        "debeaking_type": rec.debeaking_type,
        "bird_age_weeks": rec.bird_age_weeks,
        "scheduled_date": rec.scheduled_date,
        "completed_date": rec.completed_date,
        "performed_by": rec.performed_by,
        "notes": rec.notes,
        "status": debeaking_status(rec.scheduled_date, rec.completed_date, now),
    }


def schedule_debeaking(form: Mapping[str, Any], db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Validate the schedule form and store a scheduled procedure."""
    prepare_db(db_path)
    now = resolve_now(now)
    try:
        batch_number = require_text(form.get("batch_number"), "Batch number")
        # batches are matched by number only; an unknown number is still accepted
        batch = BatchRepo(db_path).find_by_number(batch_number)
        rec = DebeakingRecord(
            batch_id=batch.id if batch else None,
            batch_number=batch_number,
            scheduled_date=parse_date(form.get("scheduled_date"), "Scheduled date", required=False) or now.date(),
            debeaking_type=parse_choice(form.get("debeaking_type"), "Debeaking type", DEBEAKING_TYPES, default="first"),
            bird_age_weeks=parse_count(form.get("bird_age_weeks"), "Bird age (weeks)"),
            performed_by=optional_text(form.get("performed_by")),
            notes=optional_text(form.get("notes")),
            status="scheduled",
        )
        rec.id = DebeakingRepo(db_path).insert(rec)
        log_database_operation("debeaking_record", "INSERT", 1, batch_number=batch_number)
        log_record("debeaking", "insert", batch_number=batch_number, scheduled=rec.scheduled_date.isoformat())
        log_transaction("schedule_debeaking", dict(form), result={"id": rec.id})
        return _row(rec, now)
    except Exception as e:
        log_transaction("schedule_debeaking", dict(form), error=str(e))
        log_system_event("schedule_debeaking_error", {"error": str(e)}, level="error")
        raise


def complete_debeaking(
    record_id: int,
    performed_by: Optional[str] = None,
    db_path: str = DB_PATH,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Mark a procedure as done. Completing it again changes nothing."""
    prepare_db(db_path)
    # stored with second precision
    now = resolve_now(now).replace(microsecond=0)
    try:
        repo = DebeakingRepo(db_path)
        rec = repo.get(int(record_id))
        if rec is None:
            raise ValidationError(f"debeaking record {record_id} not found")
        done = mark_debeaking_completed(rec, now, performed_by)
        if done is not rec:
            repo.save_completion(done)
            log_record("debeaking", "complete", id=done.id, performed_by=done.performed_by)
        log_transaction("complete_debeaking", {"id": record_id}, result={"status": done.status})
        return _row(done, now)
    except Exception as e:
        log_transaction("complete_debeaking", {"id": record_id}, error=str(e))
        raise


def debeaking_schedule(db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Procedures ordered by scheduled date, with their status as of ``now``."""
    prepare_db(db_path)
    now = resolve_now(now)
    rows = [_row(r, now) for r in sort_debeaking(DebeakingRepo(db_path).get_all())]
    counts = {status: 0 for status in ("scheduled", "overdue", "completed")}
    for r in rows:
        counts[r["status"]] += 1
    return {"records": rows, **counts}

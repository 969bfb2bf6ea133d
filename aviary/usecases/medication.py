# aviary/usecases/medication.py
"""
UC: Medication and vaccination tracking.

Records are stored as administered (status 'completed'). Whether the
next administration is due or overdue depends on the day the list is
read, so it is classified on every call of ``medication_schedule``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from aviary.config import DB_PATH
from aviary.domain.formulas import next_due
from aviary.domain.models import MEDICATION_FREQUENCIES, MedicationRecord
from aviary.domain.policies import medication_status
from aviary.adapters.parsers import optional_text, parse_choice, parse_date, require_text
from aviary.infra.repositories import MedicationRepo
from aviary.infra.logger import log_database_operation, log_record, log_system_event, log_transaction
from aviary.usecases.common import load_params, prepare_db, resolve_now


def record_medication(form: Mapping[str, Any], db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Validate the medication form and store the administration.

    For ``custom`` frequency the next due date is the one chosen in the
    form; when none was chosen the record keeps no next due date.
    """
    prepare_db(db_path)
    now = resolve_now(now)
    try:
        administered = parse_date(form.get("date"), "Date", required=False) or now.date()
        frequency = parse_choice(form.get("frequency"), "Frequency", MEDICATION_FREQUENCIES, default="monthly")
        if frequency == "custom":
            due = parse_date(form.get("next_due"), "Next due date", required=False)
            if due is None:
                log_system_event("custom_medication_without_due_date", level="warning")
        else:
            due = next_due(administered, frequency)

        rec = MedicationRecord(
            date=administered,
            medication_name=require_text(form.get("medication_name"), "Medication name"),
            purpose=require_text(form.get("purpose"), "Purpose"),
            dosage=require_text(form.get("dosage"), "Dosage"),
            frequency=frequency,
            next_due=due,
            administered_by=require_text(form.get("administered_by"), "Administered by"),
            notes=optional_text(form.get("notes")),
            status="completed",
        )
        rec.id = MedicationRepo(db_path).insert(rec)
        log_database_operation("medication_record", "INSERT", 1, medication=rec.medication_name)
        log_record("medication", "insert", medication=rec.medication_name, next_due=str(rec.next_due))
        log_transaction("record_medication", dict(form), result={"id": rec.id})

        params = load_params(db_path)
        return _row(rec, now, params.medication_lookahead_days)
    except Exception as e:
        log_transaction("record_medication", dict(form), error=str(e))
        log_system_event("record_medication_error", {"error": str(e)}, level="error")
        raise


def _row(rec: MedicationRecord, now: datetime, lookahead_days: int) -> Dict[str, Any]:
    return {
        "id": rec.id,
        "date": rec.date,
        "medication_name": rec.medication_name,
        "purpose": rec.purpose,
        "dosage": rec.dosage,
        "frequency": rec.frequency,
        "next_due": rec.next_due,
        "administered_by": rec.administered_by,
        "notes": rec.notes,
        "status": medication_status(rec.next_due, now, lookahead_days),
    }


def medication_schedule(
    db_path: str = DB_PATH,
    now: Optional[datetime] = None,
    lookahead_days: Optional[int] = None,
) -> Dict[str, Any]:
    """All medication records with their status as of ``now``."""
    prepare_db(db_path)
    now = resolve_now(now)
    if lookahead_days is None:
        lookahead_days = load_params(db_path).medication_lookahead_days
    rows = [_row(r, now, lookahead_days) for r in MedicationRepo(db_path).get_all()]
    return {
        "records": rows,
        "overdue": sum(1 for r in rows if r["status"] == "overdue"),
        "due": sum(1 for r in rows if r["status"] == "due"),
        "lookahead_days": lookahead_days,
    }

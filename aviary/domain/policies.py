"""
Status classification and record transitions.

This module holds the business rules that turn stored records into the
statuses shown to the user (medication due/overdue, debeaking overdue)
and the few explicit state transitions (selling a batch, recording
losses, completing a debeaking). Statuses that depend on the current
date are never stored; they are recomputed here on every read, with
``now`` passed in by the caller.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from aviary.domain.errors import ValidationError
from aviary.domain.formulas import as_date
from aviary.domain.models import Batch, DebeakingRecord

DEFAULT_PERFORMER = "Farm Worker"


def medication_status(
    next_due: Optional[date],
    now: Union[date, datetime],
    lookahead_days: int = 7,
) -> str:
    """Classify a medication against the current date.

    Rules:
        - No next due date → ``'completed'`` (nothing pending).
        - ``next_due`` before today → ``'overdue'``
        - ``next_due`` within ``lookahead_days`` of today → ``'due'``
        - otherwise → ``'completed'``

    Args:
        next_due: Projected date of the next administration.
        now: Reference timestamp.
        lookahead_days: Size of the "due soon" window in days.

    Returns:
        ``'overdue'``, ``'due'`` or ``'completed'``.
    """
    if next_due is None:
        return "completed"
    today = as_date(now)
    due = as_date(next_due)
    if due < today:
        return "overdue"
    if due <= today + timedelta(days=max(0, int(lookahead_days))):
        return "due"
    return "completed"


def debeaking_status(
    scheduled_date: date,
    completed_date: Optional[Union[date, datetime]],
    now: Union[date, datetime],
) -> str:
    """Classify a debeaking procedure.

    Rules:
        - completed date present → ``'completed'``
        - scheduled before today → ``'overdue'``
        - otherwise → ``'scheduled'``
    """
    if completed_date is not None:
        return "completed"
    if as_date(scheduled_date) < as_date(now):
        return "overdue"
    return "scheduled"


def sort_debeaking(records: Iterable[DebeakingRecord]) -> List[DebeakingRecord]:
    """Display order: earliest scheduled first (stable for equal dates)."""
    return sorted(records, key=lambda r: as_date(r.scheduled_date))


def mark_debeaking_completed(
    record: DebeakingRecord,
    now: datetime,
    performed_by: Optional[str] = None,
) -> DebeakingRecord:
    """Return ``record`` transitioned to completed.

    An already-completed record is returned unchanged, so repeated calls
    keep the first completion timestamp and performer.
    """
    if record.completed_date is not None or record.status == "completed":
        return record
    performer = (performed_by or "").strip() or record.performed_by or DEFAULT_PERFORMER
    return replace(record, status="completed", completed_date=now, performed_by=performer)


def sell_batch(batch: Batch) -> Batch:
    """active → sold; the flock leaves the farm so no birds remain."""
    if batch.status != "active":
        raise ValidationError(f"batch {batch.batch_number} is {batch.status}, only active batches can be sold")
    return replace(batch, status="sold", current_count=0)


def apply_mortality(batch: Batch, losses: int) -> Batch:
    """Subtract dead or culled birds from an active batch."""
    if batch.status != "active":
        raise ValidationError(f"batch {batch.batch_number} is {batch.status}, losses apply to active batches only")
    if losses < 0:
        raise ValidationError("losses must not be negative")
    if losses > batch.current_count:
        raise ValidationError(
            f"losses ({losses}) exceed the {batch.current_count} birds left in batch {batch.batch_number}"
        )
    return replace(batch, current_count=batch.current_count - losses)

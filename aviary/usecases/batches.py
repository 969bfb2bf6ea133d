# aviary/usecases/batches.py
"""
UC: Bird batches (register, sell, record losses, overview).

Flow of the overview:
1) Load all batches (newest first) and the cycle parameters.
2) For each batch derive age, phase, survival rate and cycle progress.
3) The "current" batch is the most recently registered active one.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from aviary.config import DB_PATH
from aviary.domain.errors import ValidationError
from aviary.domain.formulas import (
    age_weeks,
    expected_sale_date,
    lifecycle_progress_pct,
    production_phase,
    survival_rate_pct,
    weeks_remaining,
)
from aviary.domain.models import Batch, Params
from aviary.domain.policies import apply_mortality, sell_batch
from aviary.adapters.parsers import optional_text, parse_count, parse_date, require_text
from aviary.infra.repositories import BatchRepo
from aviary.infra.logger import log_database_operation, log_record, log_system_event, log_transaction
from aviary.usecases.common import load_params, prepare_db, resolve_now


def batch_metrics(batch: Batch, now: datetime, params: Params) -> Dict[str, Any]:
    """Derived lifecycle values of one batch at ``now``."""
    age = age_weeks(batch.arrival_date, now)
    return {
        "id": batch.id,
        "batch_number": batch.batch_number,
        "breed": batch.breed,
        "supplier": batch.supplier,
        "status": batch.status,
        "arrival_date": batch.arrival_date,
        "expected_sale_date": batch.expected_sale_date,
        "initial_count": batch.initial_count,
        "current_count": batch.current_count,
        "age_weeks": age,
        "phase": production_phase(age, params.growing_weeks, params.full_cycle_weeks),
        "survival_rate_pct": survival_rate_pct(batch.current_count, batch.initial_count),
        "progress_pct": lifecycle_progress_pct(age, params.full_cycle_weeks),
        "weeks_remaining": weeks_remaining(age, params.full_cycle_weeks),
    }


def _find_batch(repo: BatchRepo, ref: Union[int, str]) -> Batch:
    """Resolve a batch by number first; an all-digit text that matches no
    batch number falls back to the row id."""
    if isinstance(ref, int):
        batch = repo.get(ref)
    else:
        text = str(ref).strip()
        batch = repo.find_by_number(text)
        if batch is None and text.isdigit():
            batch = repo.get(int(text))
    if batch is None:
        raise ValidationError(f"batch {ref} not found")
    return batch


def register_batch(form: Mapping[str, Any], db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Validate the "add batch" form and store a new active batch."""
    log_system_event("register_batch_start")
    prepare_db(db_path)
    now = resolve_now(now)
    try:
        params = load_params(db_path)
        batch_number = require_text(form.get("batch_number"), "Batch number")
        arrival = parse_date(form.get("arrival_date"), "Arrival date", required=False) or now.date()
        initial_count = parse_count(form.get("initial_count"), "Initial count")
        if initial_count <= 0:
            raise ValidationError("Initial count must be greater than zero")
        sale = parse_date(form.get("expected_sale_date"), "Expected sale date", required=False)
        batch = Batch(
            batch_number=batch_number,
            arrival_date=arrival,
            initial_count=initial_count,
            current_count=initial_count,
            breed=require_text(form.get("breed"), "Breed"),
            supplier=require_text(form.get("supplier"), "Supplier"),
            expected_sale_date=sale or expected_sale_date(arrival, params.full_cycle_weeks),
            status="active",
            notes=optional_text(form.get("notes")),
        )
        batch.id = BatchRepo(db_path).insert(batch)
        log_database_operation("batch", "INSERT", 1, batch_number=batch_number)
        log_record("batch", "insert", batch_number=batch_number, initial_count=initial_count)
        result = batch_metrics(batch, now, params)
        log_transaction("register_batch", dict(form), result={"id": batch.id})
        return result
    except Exception as e:
        log_transaction("register_batch", dict(form), error=str(e))
        log_system_event("register_batch_error", {"error": str(e)}, level="error")
        raise


def sell(ref: Union[int, str], db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Mark an active batch as sold; no birds remain on the farm."""
    prepare_db(db_path)
    now = resolve_now(now)
    try:
        repo = BatchRepo(db_path)
        batch = _find_batch(repo, ref)
        birds_sold = batch.current_count
        sold = sell_batch(batch)
        repo.update_state(sold.id, sold.status, sold.current_count)
        repo.add_event(sold.id, now, "sale", birds_sold)
        log_record("batch", "sell", batch_number=sold.batch_number, birds=birds_sold)
        log_transaction("sell_batch", {"batch": ref}, result={"birds_sold": birds_sold})
        out = batch_metrics(sold, now, load_params(db_path))
        out["birds_sold"] = birds_sold
        return out
    except Exception as e:
        log_transaction("sell_batch", {"batch": ref}, error=str(e))
        raise


def record_mortality(
    ref: Union[int, str],
    losses: Any,
    db_path: str = DB_PATH,
    now: Optional[datetime] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """Subtract dead or culled birds from an active batch."""
    prepare_db(db_path)
    now = resolve_now(now)
    try:
        count = parse_count(losses, "Losses")
        repo = BatchRepo(db_path)
        batch = apply_mortality(_find_batch(repo, ref), count)
        repo.update_state(batch.id, batch.status, batch.current_count)
        repo.add_event(batch.id, now, "mortality", count, optional_text(notes))
        log_record("batch", "mortality", batch_number=batch.batch_number, losses=count)
        log_transaction("record_mortality", {"batch": ref, "losses": losses}, result={"current_count": batch.current_count})
        return batch_metrics(batch, now, load_params(db_path))
    except Exception as e:
        log_transaction("record_mortality", {"batch": ref, "losses": losses}, error=str(e))
        raise


def batch_overview(db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Current batch, active totals and the full list of batches."""
    prepare_db(db_path)
    now = resolve_now(now)
    params = load_params(db_path)
    repo = BatchRepo(db_path)
    batches = [batch_metrics(b, now, params) for b in repo.get_all()]
    active = [b for b in batches if b["status"] == "active"]
    summary = repo.summary_by_status().get("active", {"batches": 0, "birds": 0})
    return {
        "current": active[0] if active else None,
        "active_batches": summary["batches"],
        "total_birds": summary["birds"],
        "batches": batches,
    }

# aviary/usecases/feed.py
"""
UC: Feed consumption (record usage, stock projection).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from aviary.config import DB_PATH
from aviary.domain.formulas import daily_feed_average, feed_days_remaining, round_half_up, weekly_feed_total
from aviary.domain.models import FeedRecord
from aviary.adapters.parsers import optional_text, parse_amount, parse_date, require_text
from aviary.infra.repositories import FeedRepo
from aviary.infra.logger import log_database_operation, log_record, log_system_event, log_transaction
from aviary.usecases.common import load_params, prepare_db, resolve_now

UNKNOWN = "unknown"


def record_feed(form: Mapping[str, Any], db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Validate the feed form and store the consumption record."""
    prepare_db(db_path)
    now = resolve_now(now)
    try:
        rec = FeedRecord(
            date=parse_date(form.get("date"), "Date", required=False) or now.date(),
            amount_kg=parse_amount(form.get("amount_kg"), "Amount (kg)"),
            feed_type=require_text(form.get("feed_type"), "Feed type"),
            cost=parse_amount(form.get("cost"), "Cost", required=False),
            supplier=optional_text(form.get("supplier")),
            notes=optional_text(form.get("notes")),
        )
        rec.id = FeedRepo(db_path).insert(rec)
        log_database_operation("feed_record", "INSERT", 1, amount_kg=rec.amount_kg)
        log_record("feed", "insert", date=rec.date.isoformat(), amount_kg=rec.amount_kg, feed_type=rec.feed_type)
        log_transaction("record_feed", dict(form), result={"id": rec.id})
        return {
            "id": rec.id,
            "date": rec.date,
            "amount_kg": rec.amount_kg,
            "feed_type": rec.feed_type,
            "cost": rec.cost,
            "supplier": rec.supplier,
            "notes": rec.notes,
        }
    except Exception as e:
        log_transaction("record_feed", dict(form), error=str(e))
        log_system_event("record_feed_error", {"error": str(e)}, level="error")
        raise


def feed_status(
    db_path: str = DB_PATH,
    current_stock_kg: Optional[float] = None,
) -> Dict[str, Any]:
    """Weekly total, daily average and days of stock left.

    ``current_stock_kg`` defaults to the stored ``feed_stock_kg``
    parameter. ``days_remaining`` is None when there is no consumption
    to project from; ``days_remaining_label`` then reads "unknown".
    """
    prepare_db(db_path)
    params = load_params(db_path)
    stock = params.feed_stock_kg if current_stock_kg is None else float(current_stock_kg)
    window = params.feed_window_records

    records = FeedRepo(db_path).get_all()
    amounts = [r.amount_kg for r in records]
    weekly = weekly_feed_total(amounts, window)
    average = daily_feed_average(amounts, window)
    days = feed_days_remaining(stock, average)

    return {
        "weekly_total_kg": round_half_up(weekly, 1),
        "daily_average_kg": round_half_up(average, 1),
        "current_stock_kg": stock,
        "days_remaining": days,
        "days_remaining_label": UNKNOWN if days is None else str(days),
        "records": [
            {
                "id": r.id,
                "date": r.date,
                "amount_kg": r.amount_kg,
                "feed_type": r.feed_type,
                "cost": r.cost,
                "supplier": r.supplier,
            }
            for r in records
        ],
    }

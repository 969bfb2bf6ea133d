# aviary/usecases/overview.py
"""
UC: Dashboard overview.

Collects the headline figures of every panel (today's eggs, latest feed
usage, birds on the farm, pending health tasks) and the alert list.
Only the sections the role may see are computed and returned.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from aviary.config import DB_PATH
from aviary.domain.access import ROLES, can_view
from aviary.domain.errors import ValidationError
from aviary.infra.repositories import DebeakingRepo
from aviary.usecases.batches import batch_overview
from aviary.usecases.common import prepare_db, resolve_now
from aviary.usecases.debeaking import debeaking_schedule
from aviary.usecases.feed import feed_status
from aviary.usecases.inventory import current_stock
from aviary.usecases.medication import medication_schedule
from aviary.usecases.production import production_summary

# stock lasting this many days or fewer raises the "feed stock low" alert (reorder point)
FEED_LOW_DAYS = 3


def _alerts(sections: Dict[str, Any], db_path: str, now: datetime) -> List[Dict[str, str]]:
    alerts: List[Dict[str, str]] = []
    med = sections.get("medication")
    if med and med["overdue"]:
        alerts.append({"level": "urgent", "title": "Medication Overdue",
                       "detail": f"{med['overdue']} medication(s) past their due date"})
    if med and med["due"]:
        alerts.append({"level": "warning", "title": "Medication Due",
                       "detail": f"{med['due']} medication(s) due within {med['lookahead_days']} days"})

    feed = sections.get("feed")
    if feed and feed["days_remaining"] is not None and feed["days_remaining"] <= FEED_LOW_DAYS:
        alerts.append({"level": "warning", "title": "Feed Stock Low",
                       "detail": f"Only {feed['days_remaining']} days of feed remaining"})

    deb = sections.get("debeaking")
    if deb and deb["overdue"]:
        alerts.append({"level": "urgent", "title": "Debeaking Overdue",
                       "detail": f"{deb['overdue']} procedure(s) past their scheduled date"})
    if deb:
        today = now.date().isoformat()
        # overdue rows are reported above
        pending = [r for r in DebeakingRepo(db_path).pending() if r["scheduled_date"] >= today]
        if pending:
            nxt = pending[0]
            alerts.append({"level": "info", "title": "Debeaking Scheduled",
                           "detail": f"{nxt['debeaking_type'].capitalize()} debeaking of batch "
                                     f"{nxt['batch_number']} on {nxt['scheduled_date']}"})
    return alerts


def dashboard_overview(role: str, db_path: str = DB_PATH, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Headline figures for ``role``.

    Keys present depend on what the role can view: ``production``,
    ``feed`` and ``inventory`` for everyone, ``batch``, ``medication``
    and ``debeaking`` for admins. ``alerts`` is always present.
    """
    if role not in ROLES:
        raise ValidationError(f"unknown role: {role!r}")
    prepare_db(db_path)
    now = resolve_now(now)
    out: Dict[str, Any] = {"role": role, "generated_at": now.replace(microsecond=0)}

    if can_view(role, "production"):
        prod = production_summary(db_path, now)
        out["production"] = {
            "today_eggs": prod["today_total"],
            "average_production": prod["average_production"],
        }
    if can_view(role, "feed"):
        feed = feed_status(db_path)
        out["feed"] = {
            "latest_usage_kg": feed["records"][0]["amount_kg"] if feed["records"] else 0.0,
            "weekly_total_kg": feed["weekly_total_kg"],
            "days_remaining": feed["days_remaining"],
            "days_remaining_label": feed["days_remaining_label"],
        }
    if can_view(role, "batch"):
        batches = batch_overview(db_path, now)
        current = batches["current"]
        out["batch"] = {
            "active_birds": batches["total_birds"],
            "active_batches": batches["active_batches"],
            "current_batch": current["batch_number"] if current else None,
            "age_weeks": current["age_weeks"] if current else None,
            "phase": current["phase"] if current else None,
            "survival_rate_pct": current["survival_rate_pct"] if current else None,
        }
    if can_view(role, "medication"):
        med = medication_schedule(db_path, now)
        out["medication"] = {k: med[k] for k in ("overdue", "due", "lookahead_days")}
    if can_view(role, "debeaking"):
        deb = debeaking_schedule(db_path, now)
        out["debeaking"] = {k: deb[k] for k in ("scheduled", "overdue", "completed")}
    if can_view(role, "inventory"):
        out["inventory"] = {"total_eggs": current_stock(db_path).total}

    out["alerts"] = _alerts(out, db_path, now)
    return out

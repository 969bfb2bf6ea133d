# aviary/usecases/common.py
"""
Helpers shared by the use cases: schema bootstrap and parameters.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from aviary.config import DEFAULTS
from aviary.domain.models import Params
from aviary.infra.migrations import apply_migrations
from aviary.infra.repositories import ParamsRepo
from aviary.infra.views import create_views

PARAM_KEYS = (
    "full_cycle_weeks",
    "growing_weeks",
    "medication_lookahead_days",
    "feed_window_records",
    "feed_stock_kg",
)


def prepare_db(db_path: str) -> None:
    """Make sure the schema and views exist (idempotent)."""
    apply_migrations(db_path)
    create_views(db_path)


def load_params(db_path: str) -> Params:
    """Read the stored parameters, falling back to DEFAULTS."""
    repo = ParamsRepo(db_path)
    return Params(
        full_cycle_weeks=repo.get_int("full_cycle_weeks", DEFAULTS.full_cycle_weeks),
        growing_weeks=repo.get_int("growing_weeks", DEFAULTS.growing_weeks),
        medication_lookahead_days=repo.get_int("medication_lookahead_days", DEFAULTS.medication_lookahead_days),
        feed_window_records=repo.get_int("feed_window_records", DEFAULTS.feed_window_records),
        feed_stock_kg=repo.get_float("feed_stock_kg", DEFAULTS.feed_stock_kg),
    )


def resolve_now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now()

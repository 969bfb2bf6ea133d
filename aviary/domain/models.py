# aviary/domain/models.py
"""
Domain models (dataclasses).

Notes:
- Repositories accept dicts as well; the dataclasses give typing and a
  single place where the allowed values of each record are listed.
- Dates are ``datetime.date``; timestamps (``last_updated``) are
  ``datetime.datetime``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


BATCH_STATUSES = ("active", "sold", "archived")
MEDICATION_FREQUENCIES = ("monthly", "quarterly", "bi-annually", "custom")
MEDICATION_STATUSES = ("completed", "due", "overdue")
DEBEAKING_TYPES = ("first", "second", "third")
DEBEAKING_STATUSES = ("scheduled", "overdue", "completed")
EGG_SIZES = ("small", "medium", "large", "extra_large")


@dataclass
class Params:
    """Tunable parameters (stored in the `params` table as key/value)."""
    full_cycle_weeks: int = 72
    growing_weeks: int = 20
    medication_lookahead_days: int = 7
    feed_window_records: int = 7
    feed_stock_kg: float = 150.0


@dataclass
class Batch:
    """A cohort of birds introduced together."""
    batch_number: str
    arrival_date: date
    initial_count: int
    current_count: int
    breed: str
    supplier: str
    expected_sale_date: date
    status: str = "active"                  # 'active' | 'sold' | 'archived'
    notes: Optional[str] = None
    id: Optional[int] = None


@dataclass
class FeedRecord:
    date: date
    amount_kg: float
    feed_type: str
    cost: Optional[float] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None
    id: Optional[int] = None


@dataclass
class MedicationRecord:
    """A medication or vaccination administered to the flock."""
    date: date                              # day administered
    medication_name: str
    purpose: str
    dosage: str
    frequency: str                          # see MEDICATION_FREQUENCIES
    administered_by: str
    next_due: Optional[date] = None         # None only for 'custom' without a date
    notes: Optional[str] = None
    status: str = "completed"               # stored value; due/overdue are derived
    id: Optional[int] = None


@dataclass
class DebeakingRecord:
    batch_number: str
    scheduled_date: date
    debeaking_type: str                     # 'first' | 'second' | 'third'
    bird_age_weeks: int
    batch_id: Optional[int] = None
    completed_date: Optional[datetime] = None
    performed_by: Optional[str] = None
    notes: Optional[str] = None
    status: str = "scheduled"               # stored value; overdue is derived
    id: Optional[int] = None


@dataclass
class EggRecord:
    """Daily egg production by size."""
    date: date
    small: int = 0
    medium: int = 0
    large: int = 0
    extra_large: int = 0
    notes: Optional[str] = None
    id: Optional[int] = None

    @property
    def total(self) -> int:
        return self.small + self.medium + self.large + self.extra_large


@dataclass
class InventorySnapshot:
    """Egg stock on hand by size at a given date."""
    date: date
    small: int = 0
    medium: int = 0
    large: int = 0
    extra_large: int = 0
    last_updated: Optional[datetime] = None
    id: Optional[int] = None

    @property
    def total(self) -> int:
        return self.small + self.medium + self.large + self.extra_large

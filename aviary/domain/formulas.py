"""
Arithmetic and date formulas behind the farm dashboard metrics.

These functions compute the derived values shown for batches, feed,
medication schedules and egg inventory: bird age and lifecycle phase,
survival rate, feed days-of-stock, next due dates and the size
distribution of eggs in store.

All functions are pure: they depend solely on their inputs (including
the reference ``now``) and do not modify any external state. Division by
zero never raises; it degrades to ``0.0`` or ``None`` as documented per
function.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from math import floor
from typing import Dict, Iterable, Mapping, Optional, Union

Number = Union[int, float]

FULL_CYCLE_WEEKS = 72
GROWING_WEEKS = 20

FREQUENCY_MONTHS: Dict[str, int] = {
    "monthly": 1,
    "quarterly": 3,
    "bi-annually": 6,
}
CUSTOM_FALLBACK_MONTHS = 1


def round_half_up(value: Number, ndigits: int = 0) -> float:
    """Round ``value`` with halves away from zero.

    Python's ``round`` uses banker's rounding (``round(0.5) == 0``); the
    dashboard figures always rounded halves up, so ``12.25`` becomes
    ``12.3`` and ``50.5`` becomes ``51``.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def as_date(value: Union[date, datetime]) -> date:
    """Drop the time part of a timestamp (dates are returned unchanged)."""
    if isinstance(value, datetime):
        return value.date()
    return value


# ---------------------------------
# Batch lifecycle
# ---------------------------------

def age_weeks(arrival_date: Union[date, datetime], now: Union[date, datetime]) -> int:
    """Return the number of complete weeks since ``arrival_date``.

    Arrivals in the future count as age 0 so that age never goes negative.
    """
    days = (as_date(now) - as_date(arrival_date)).days
    if days <= 0:
        return 0
    return days // 7


def production_phase(
    age: int,
    growing_weeks: int = GROWING_WEEKS,
    full_cycle_weeks: int = FULL_CYCLE_WEEKS,
) -> str:
    """Classify a batch age into its lifecycle phase.

    Parameters
    ----------
    age: int
        Age of the batch in complete weeks.
    growing_weeks: int
        Age at which birds start laying.
    full_cycle_weeks: int
        Length of the full laying cycle.

    Returns
    -------
    str
        ``'Growing'`` below ``growing_weeks``, ``'Production'`` until
        ``full_cycle_weeks`` and ``'End of Cycle'`` from then on.
    """
    if age < growing_weeks:
        return "Growing"
    if age < full_cycle_weeks:
        return "Production"
    return "End of Cycle"


def survival_rate_pct(current_count: Number, initial_count: Number) -> float:
    """Percentage of birds still alive, rounded to one decimal.

    A batch registered with zero birds reports ``0.0``.
    """
    if not initial_count:
        return 0.0
    return round_half_up(float(current_count) / float(initial_count) * 100.0, 1)


def lifecycle_progress_pct(age: int, full_cycle_weeks: int = FULL_CYCLE_WEEKS) -> int:
    """Share of the full cycle already elapsed, capped at 100."""
    if full_cycle_weeks <= 0:
        return 100
    return int(min(100.0, round_half_up(age / full_cycle_weeks * 100.0)))


def weeks_remaining(age: int, full_cycle_weeks: int = FULL_CYCLE_WEEKS) -> int:
    return max(0, full_cycle_weeks - age)


def expected_sale_date(arrival_date: date, full_cycle_weeks: int = FULL_CYCLE_WEEKS) -> date:
    """Default sale date: end of the full cycle counted from arrival."""
    return as_date(arrival_date) + timedelta(weeks=full_cycle_weeks)


# ---------------------------------
# Feed projection
# ---------------------------------

def weekly_feed_total(amounts: Iterable[Number], window: int = 7) -> float:
    """Sum of the ``window`` most recent amounts (input is newest first)."""
    total = 0.0
    for i, amount in enumerate(amounts):
        if i >= window:
            break
        total += float(amount)
    return total


def daily_feed_average(amounts: Iterable[Number], window: int = 7) -> float:
    """Average daily consumption over the most recent records.

    With fewer than ``window`` records the divisor is the record count;
    with no records the average is ``0.0``.
    """
    recent = list(amounts)[:window]
    if not recent:
        return 0.0
    return weekly_feed_total(recent, window) / len(recent)


def feed_days_remaining(current_stock: Number, daily_average: Number) -> Optional[int]:
    """Whole days the current stock lasts at ``daily_average``.

    Returns ``None`` (days unknown) when there is no consumption rate to
    project from.
    """
    avg = float(daily_average)
    if avg <= 0.0:
        return None
    return int(floor(float(current_stock) / avg))


# ---------------------------------
# Medication schedule
# ---------------------------------

def add_months(d: Union[date, datetime], months: int) -> date:
    """Add calendar months, clamping to the last day of the target month.

    ``2024-01-31 + 1 month`` gives ``2024-02-29``.
    """
    d = as_date(d)
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_due(
    administered: Union[date, datetime],
    frequency: str,
    custom_due: Optional[date] = None,
) -> date:
    """Project the next due date of a medication.

    Parameters
    ----------
    administered: date
        Day the medication was given.
    frequency: str
        ``'monthly'``, ``'quarterly'``, ``'bi-annually'`` or ``'custom'``.
    custom_due: date, optional
        Date chosen by the user for ``'custom'``. When absent the
        projection falls back to one month after ``administered``.

    Raises
    ------
    ValueError
        If ``frequency`` is not one of the known values.
    """
    if frequency in FREQUENCY_MONTHS:
        return add_months(administered, FREQUENCY_MONTHS[frequency])
    if frequency == "custom":
        if custom_due is not None:
            return as_date(custom_due)
        return add_months(administered, CUSTOM_FALLBACK_MONTHS)
    raise ValueError(f"unknown medication frequency: {frequency!r}")


# ---------------------------------
# Egg inventory
# ---------------------------------

def egg_total(small: Number = 0, medium: Number = 0, large: Number = 0, extra_large: Number = 0) -> int:
    return int(small) + int(medium) + int(large) + int(extra_large)


def size_percentages(counts: Mapping[str, Number]) -> Dict[str, float]:
    """Share of each size bucket in the total, rounded to one decimal.

    Every bucket reports ``0.0`` when the total is zero.
    """
    total = sum(float(v or 0) for v in counts.values())
    if total <= 0:
        return {size: 0.0 for size in counts}
    return {size: round_half_up(float(v or 0) / total * 100.0, 1) for size, v in counts.items()}

# aviary/config.py
"""
Global settings and default values for the farm records system.
"""

import os
from dataclasses import dataclass


# Default SQLite database path
DB_PATH = os.environ.get("AVIARY_DB", os.path.join(os.getcwd(), "aviary.db"))


@dataclass
class DefaultConfig:
    """Default values for the tunable parameters."""
    full_cycle_weeks: int = 72  # laying cycle, arrival to sale
    growing_weeks: int = 20  # pullets start laying around week 20
    medication_lookahead_days: int = 7  # "due" window before next_due
    feed_window_records: int = 7  # records averaged for the daily feed rate
    feed_stock_kg: float = 150.0  # feed currently in store


# Global default instance
DEFAULTS = DefaultConfig()

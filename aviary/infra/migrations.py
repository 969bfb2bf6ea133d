# aviary/infra/migrations.py
"""
Schema migrations driven by PRAGMA user_version.

V1: base tables (one per record type plus params)
V2: batch_event, the history of losses and sales per batch
"""

from __future__ import annotations

from typing import List
from .db import connect


SCHEMA_V1: List[str] = [
    # Params K/V
    """
    CREATE TABLE IF NOT EXISTS params (
        key TEXT PRIMARY KEY,
        value TEXT
    );
    """,
    # Bird batches
    """
    CREATE TABLE IF NOT EXISTS batch (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        batch_number TEXT NOT NULL,
        arrival_date TEXT NOT NULL,
        initial_count INTEGER NOT NULL,
        current_count INTEGER NOT NULL,
        breed TEXT,
        supplier TEXT,
        expected_sale_date TEXT,
        status TEXT NOT NULL DEFAULT 'active', -- 'active' | 'sold' | 'archived'
        notes TEXT,
        CHECK (current_count >= 0 AND current_count <= initial_count)
    );
    """,
    # Feed consumption
    """
    CREATE TABLE IF NOT EXISTS feed_record (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        amount_kg REAL NOT NULL CHECK (amount_kg >= 0),
        feed_type TEXT NOT NULL,
        cost REAL,
        supplier TEXT,
        notes TEXT
    );
    """,
    # Medications / vaccinations
    """
    CREATE TABLE IF NOT EXISTS medication_record (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        medication_name TEXT NOT NULL,
        purpose TEXT,
        dosage TEXT,
        frequency TEXT NOT NULL, -- 'monthly' | 'quarterly' | 'bi-annually' | 'custom'
        next_due TEXT,
        administered_by TEXT,
        notes TEXT,
        status TEXT NOT NULL DEFAULT 'completed'
    );
    """,
    # Debeaking schedule
    """
    CREATE TABLE IF NOT EXISTS debeaking_record (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        batch_id INTEGER,
        batch_number TEXT NOT NULL,
        scheduled_date TEXT NOT NULL,
        completed_date TEXT,
        debeaking_type TEXT NOT NULL, -- 'first' | 'second' | 'third'
        bird_age_weeks INTEGER,
        performed_by TEXT,
        notes TEXT,
        status TEXT NOT NULL DEFAULT 'scheduled',
        FOREIGN KEY (batch_id) REFERENCES batch(id) ON DELETE SET NULL
    );
    """,
    # Daily egg production
    """
    CREATE TABLE IF NOT EXISTS egg_record (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        small INTEGER NOT NULL DEFAULT 0,
        medium INTEGER NOT NULL DEFAULT 0,
        large INTEGER NOT NULL DEFAULT 0,
        extra_large INTEGER NOT NULL DEFAULT 0,
        total INTEGER NOT NULL DEFAULT 0,
        notes TEXT
    );
    """,
    # Egg stock snapshots
    """
    CREATE TABLE IF NOT EXISTS inventory_snapshot (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        small INTEGER NOT NULL DEFAULT 0,
        medium INTEGER NOT NULL DEFAULT 0,
        large INTEGER NOT NULL DEFAULT 0,
        extra_large INTEGER NOT NULL DEFAULT 0,
        total INTEGER NOT NULL DEFAULT 0,
        last_updated TEXT
    );
    """,
]

SCHEMA_V2: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS batch_event (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        batch_id INTEGER NOT NULL,
        event_date TEXT NOT NULL,
        kind TEXT NOT NULL, -- 'mortality' | 'sale'
        bird_count INTEGER NOT NULL DEFAULT 0,
        notes TEXT,
        FOREIGN KEY (batch_id) REFERENCES batch(id) ON DELETE CASCADE
    );
    """,
]


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    for sql in SCHEMA_V2:
        conn.executescript(sql)


def apply_migrations(db_path: str) -> None:
    """Apply incremental migrations according to PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            ver = 1

        if ver < 2:
            _apply_v2(conn)
            conn.execute("PRAGMA user_version = 2;")
            ver = 2

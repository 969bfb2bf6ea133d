# aviary/infra/views.py
"""
Helper views for frequent queries.

Views created:
- vw_batch_summary:     number of batches and birds per batch status.
- vw_debeaking_pending: debeaking procedures without a completion date.
- vw_inventory_latest:  the most recently recorded egg stock snapshot.

Notes:
- Views assume migrations V1→V2 were applied.
- A set of useful indexes is created as well, when missing.
"""

from __future__ import annotations

from .db import connect


def create_views(db_path: str) -> None:
    with connect(db_path) as c:
        # -----------------------
        # Views (drop + create)
        # -----------------------
        c.executescript(
            """
            ---------------------------
            -- Batches per status
            ---------------------------
            DROP VIEW IF EXISTS vw_batch_summary;
            CREATE VIEW vw_batch_summary AS
            SELECT
                status,
                COUNT(*)                          AS batches,
                COALESCE(SUM(current_count), 0)   AS birds
            FROM batch
            GROUP BY status;

            ---------------------------
            -- Debeaking still to be done
            ---------------------------
            DROP VIEW IF EXISTS vw_debeaking_pending;
            CREATE VIEW vw_debeaking_pending AS
            SELECT
                id,
                batch_id,
                batch_number,
                date(scheduled_date) AS scheduled_date,
                debeaking_type,
                bird_age_weeks
            FROM debeaking_record
            WHERE completed_date IS NULL
            ORDER BY date(scheduled_date), id;

            ---------------------------
            -- Latest egg stock (insertion order)
            ---------------------------
            DROP VIEW IF EXISTS vw_inventory_latest;
            CREATE VIEW vw_inventory_latest AS
            SELECT *
            FROM inventory_snapshot
            ORDER BY id DESC
            LIMIT 1;
            """
        )

        # --------------------------------
        # Useful indexes (IF NOT EXISTS)
        # --------------------------------
        c.executescript(
            """
            CREATE INDEX IF NOT EXISTS idx_batch_status       ON batch(status);
            CREATE INDEX IF NOT EXISTS idx_feed_date          ON feed_record(date);
            CREATE INDEX IF NOT EXISTS idx_medication_due     ON medication_record(next_due);
            CREATE INDEX IF NOT EXISTS idx_debeaking_sched    ON debeaking_record(scheduled_date);
            CREATE INDEX IF NOT EXISTS idx_egg_date           ON egg_record(date);
            CREATE INDEX IF NOT EXISTS idx_inventory_date     ON inventory_snapshot(date);
            CREATE INDEX IF NOT EXISTS idx_batch_event_batch  ON batch_event(batch_id);
            """
        )

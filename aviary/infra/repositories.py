# aviary/infra/repositories.py
"""
Repositories (DAO) for reading and writing the SQLite store.

Classes:
- ParamsRepo
- BatchRepo
- FeedRepo
- MedicationRepo
- DebeakingRepo
- EggRepo
- InventoryRepo

Entity lists come back newest first (insertion order, ``id DESC``),
as the dashboard panels showed them.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .db import connect
from aviary.domain.models import (
    Batch,
    DebeakingRecord,
    EggRecord,
    FeedRecord,
    InventorySnapshot,
    MedicationRecord,
)


# -------------------------
# Helpers
# -------------------------

def _as_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, dict):
        return dict(row)
    if is_dataclass(row):
        return asdict(row)
    raise TypeError("row must be dict or dataclass")


def _iso(value: Any) -> Optional[str]:
    """date -> YYYY-MM-DD, datetime -> YYYY-MM-DDTHH:MM:SS, str unchanged."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(microsecond=0).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _to_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return date.fromisoformat(str(value)[:10])


def _to_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(str(value))


def _rows(cur) -> List[Dict[str, Any]]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]


# -------------------------
# Params
# -------------------------

class ParamsRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
        with connect(self.db_path) as c:
            c.executemany(
                """
                INSERT INTO params (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                list(items),
            )

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with connect(self.db_path) as c:
            row = c.execute("SELECT value FROM params WHERE key = ?", (key,)).fetchone()
            return row[0] if row else default

    def get_float(self, key: str, default: float) -> float:
        v = self.get(key, None)
        if v is None:
            return default
        try:
            return float(v)
        except (TypeError, ValueError):
            return default

    def get_int(self, key: str, default: int) -> int:
        return int(self.get_float(key, float(default)))


# -------------------------
# Batches
# -------------------------

def _to_batch(r: Dict[str, Any]) -> Batch:
    return Batch(
        id=r["id"],
        batch_number=r["batch_number"],
        arrival_date=_to_date(r["arrival_date"]),
        initial_count=int(r["initial_count"]),
        current_count=int(r["current_count"]),
        breed=r["breed"],
        supplier=r["supplier"],
        expected_sale_date=_to_date(r["expected_sale_date"]),
        status=r["status"],
        notes=r["notes"],
    )


class BatchRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, row: Any) -> int:
        r = _as_dict(row)
        payload = {
            "batch_number": r.get("batch_number"),
            "arrival_date": _iso(r.get("arrival_date")),
            "initial_count": r.get("initial_count"),
            "current_count": r.get("current_count"),
            "breed": r.get("breed"),
            "supplier": r.get("supplier"),
            "expected_sale_date": _iso(r.get("expected_sale_date")),
            "status": r.get("status") or "active",
            "notes": r.get("notes"),
        }
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                INSERT INTO batch
                    (batch_number, arrival_date, initial_count, current_count,
                     breed, supplier, expected_sale_date, status, notes)
                VALUES
                    (:batch_number, :arrival_date, :initial_count, :current_count,
                     :breed, :supplier, :expected_sale_date, :status, :notes)
                """,
                payload,
            )
            return int(cur.lastrowid)

    def update_state(self, batch_id: int, status: str, current_count: int) -> None:
        with connect(self.db_path) as c:
            c.execute(
                "UPDATE batch SET status = ?, current_count = ? WHERE id = ?",
                (status, int(current_count), batch_id),
            )

    def add_event(self, batch_id: int, event_date: Any, kind: str, bird_count: int, notes: Optional[str] = None) -> None:
        with connect(self.db_path) as c:
            c.execute(
                """
                INSERT INTO batch_event (batch_id, event_date, kind, bird_count, notes)
                VALUES (?, ?, ?, ?, ?)
                """,
                (batch_id, _iso(event_date), kind, int(bird_count), notes),
            )

    def events(self, batch_id: int) -> List[Dict[str, Any]]:
        with connect(self.db_path) as c:
            cur = c.execute(
                """SELECT event_date, kind, bird_count, notes
                   FROM batch_event WHERE batch_id = ? ORDER BY id""",
                (batch_id,),
            )
            return _rows(cur)

    def get(self, batch_id: int) -> Optional[Batch]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT * FROM batch WHERE id = ?", (batch_id,))
            rows = _rows(cur)
        return _to_batch(rows[0]) if rows else None

    def find_by_number(self, batch_number: str) -> Optional[Batch]:
        with connect(self.db_path) as c:
            cur = c.execute(
                "SELECT * FROM batch WHERE batch_number = ? ORDER BY id DESC LIMIT 1",
                (batch_number,),
            )
            rows = _rows(cur)
        return _to_batch(rows[0]) if rows else None

    def get_all(self) -> List[Batch]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT * FROM batch ORDER BY id DESC")
            return [_to_batch(r) for r in _rows(cur)]

    def summary_by_status(self) -> Dict[str, Dict[str, int]]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT status, batches, birds FROM vw_batch_summary")
            return {
                r["status"]: {"batches": int(r["batches"]), "birds": int(r["birds"])}
                for r in _rows(cur)
            }


# -------------------------
# Feed
# -------------------------

class FeedRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, row: Any) -> int:
        r = _as_dict(row)
        payload = {
            "date": _iso(r.get("date")),
            "amount_kg": r.get("amount_kg"),
            "feed_type": r.get("feed_type"),
            "cost": r.get("cost"),
            "supplier": r.get("supplier"),
            "notes": r.get("notes"),
        }
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                INSERT INTO feed_record (date, amount_kg, feed_type, cost, supplier, notes)
                VALUES (:date, :amount_kg, :feed_type, :cost, :supplier, :notes)
                """,
                payload,
            )
            return int(cur.lastrowid)

    def get_all(self, limit: Optional[int] = None) -> List[FeedRecord]:
        sql = "SELECT * FROM feed_record ORDER BY id DESC"
        params: Tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (int(limit),)
        with connect(self.db_path) as c:
            cur = c.execute(sql, params)
            return [
                FeedRecord(
                    id=r["id"],
                    date=_to_date(r["date"]),
                    amount_kg=float(r["amount_kg"]),
                    feed_type=r["feed_type"],
                    cost=r["cost"],
                    supplier=r["supplier"],
                    notes=r["notes"],
                )
                for r in _rows(cur)
            ]


# -------------------------
# Medication
# -------------------------

class MedicationRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, row: Any) -> int:
        r = _as_dict(row)
        payload = {
            "date": _iso(r.get("date")),
            "medication_name": r.get("medication_name"),
            "purpose": r.get("purpose"),
            "dosage": r.get("dosage"),
            "frequency": r.get("frequency"),
            "next_due": _iso(r.get("next_due")),
            "administered_by": r.get("administered_by"),
            "notes": r.get("notes"),
            "status": r.get("status") or "completed",
        }
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                INSERT INTO medication_record
                    (date, medication_name, purpose, dosage, frequency,
                     next_due, administered_by, notes, status)
                VALUES
                    (:date, :medication_name, :purpose, :dosage, :frequency,
                     :next_due, :administered_by, :notes, :status)
                """,
                payload,
            )
            return int(cur.lastrowid)

    def get_all(self) -> List[MedicationRecord]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT * FROM medication_record ORDER BY id DESC")
            return [
                MedicationRecord(
                    id=r["id"],
                    date=_to_date(r["date"]),
                    medication_name=r["medication_name"],
                    purpose=r["purpose"],
                    dosage=r["dosage"],
                    frequency=r["frequency"],
                    next_due=_to_date(r["next_due"]),
                    administered_by=r["administered_by"],
                    notes=r["notes"],
                    status=r["status"],
                )
                for r in _rows(cur)
            ]


# -------------------------
# Debeaking
# -------------------------

def _to_debeaking(r: Dict[str, Any]) -> DebeakingRecord:
    return DebeakingRecord(
        id=r["id"],
        batch_id=r["batch_id"],
        batch_number=r["batch_number"],
        scheduled_date=_to_date(r["scheduled_date"]),
        completed_date=_to_datetime(r["completed_date"]),
        debeaking_type=r["debeaking_type"],
        bird_age_weeks=r["bird_age_weeks"],
        performed_by=r["performed_by"],
        notes=r["notes"],
        status=r["status"],
    )


class DebeakingRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, row: Any) -> int:
        r = _as_dict(row)
        payload = {
            "batch_id": r.get("batch_id"),
            "batch_number": r.get("batch_number"),
            "scheduled_date": _iso(r.get("scheduled_date")),
            "completed_date": _iso(r.get("completed_date")),
            "debeaking_type": r.get("debeaking_type"),
            "bird_age_weeks": r.get("bird_age_weeks"),
            "performed_by": r.get("performed_by"),
            "notes": r.get("notes"),
            "status": r.get("status") or "scheduled",
        }
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                INSERT INTO debeaking_record
                    (batch_id, batch_number, scheduled_date, completed_date,
                     debeaking_type, bird_age_weeks, performed_by, notes, status)
                VALUES
                    (:batch_id, :batch_number, :scheduled_date, :completed_date,
                     :debeaking_type, :bird_age_weeks, :performed_by, :notes, :status)
                """,
                payload,
            )
            return int(cur.lastrowid)

    def get(self, record_id: int) -> Optional[DebeakingRecord]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT * FROM debeaking_record WHERE id = ?", (record_id,))
            rows = _rows(cur)
        return _to_debeaking(rows[0]) if rows else None

    def get_all(self) -> List[DebeakingRecord]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT * FROM debeaking_record ORDER BY id DESC")
            return [_to_debeaking(r) for r in _rows(cur)]

    def save_completion(self, record: DebeakingRecord) -> None:
        with connect(self.db_path) as c:
            c.execute(
                """
                UPDATE debeaking_record
                SET status = ?, completed_date = ?, performed_by = ?
                WHERE id = ?
                """,
                (record.status, _iso(record.completed_date), record.performed_by, record.id),
            )

    def pending(self) -> List[Dict[str, Any]]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT * FROM vw_debeaking_pending")
            return _rows(cur)


# -------------------------
# Eggs: production and stock
# -------------------------

class EggRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, row: Any) -> int:
        r = _as_dict(row)
        sizes = {k: int(r.get(k) or 0) for k in ("small", "medium", "large", "extra_large")}
        payload = {
            "date": _iso(r.get("date")),
            **sizes,
            "total": sum(sizes.values()),
            "notes": r.get("notes"),
        }
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                INSERT INTO egg_record (date, small, medium, large, extra_large, total, notes)
                VALUES (:date, :small, :medium, :large, :extra_large, :total, :notes)
                """,
                payload,
            )
            return int(cur.lastrowid)

    def get_all(self) -> List[EggRecord]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT * FROM egg_record ORDER BY id DESC")
            return [
                EggRecord(
                    id=r["id"],
                    date=_to_date(r["date"]),
                    small=int(r["small"]),
                    medium=int(r["medium"]),
                    large=int(r["large"]),
                    extra_large=int(r["extra_large"]),
                    notes=r["notes"],
                )
                for r in _rows(cur)
            ]


def _to_snapshot(r: Dict[str, Any]) -> InventorySnapshot:
    return InventorySnapshot(
        id=r["id"],
        date=_to_date(r["date"]),
        small=int(r["small"]),
        medium=int(r["medium"]),
        large=int(r["large"]),
        extra_large=int(r["extra_large"]),
        last_updated=_to_datetime(r["last_updated"]),
    )


class InventoryRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    INSERT_SQL = """
        INSERT INTO inventory_snapshot
            (date, small, medium, large, extra_large, total, last_updated)
        VALUES
            (:date, :small, :medium, :large, :extra_large, :total, :last_updated)
    """

    @staticmethod
    def _payload(row: Any) -> Dict[str, Any]:
        r = _as_dict(row)
        sizes = {k: int(r.get(k) or 0) for k in ("small", "medium", "large", "extra_large")}
        return {
            "date": _iso(r.get("date")),
            **sizes,
            "total": sum(sizes.values()),
            "last_updated": _iso(r.get("last_updated")),
        }

    def insert_many(self, rows: Iterable[Any]) -> int:
        payloads = [self._payload(row) for row in rows]
        if not payloads:
            return 0
        with connect(self.db_path) as c:
            c.executemany(self.INSERT_SQL, payloads)
        return len(payloads)

    def insert(self, row: Any) -> int:
        with connect(self.db_path) as c:
            cur = c.execute(self.INSERT_SQL, self._payload(row))
            return int(cur.lastrowid)

    def latest(self) -> Optional[InventorySnapshot]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT * FROM vw_inventory_latest")
            rows = _rows(cur)
        return _to_snapshot(rows[0]) if rows else None

    def get_all(self, on_date: Optional[date] = None) -> List[InventorySnapshot]:
        sql = "SELECT * FROM inventory_snapshot"
        params: Tuple = ()
        if on_date is not None:
            if isinstance(on_date, datetime):
                on_date = on_date.date()
            sql += " WHERE date = ?"
            params = (_iso(on_date),)
        sql += " ORDER BY id DESC"
        with connect(self.db_path) as c:
            cur = c.execute(sql, params)
            return [_to_snapshot(r) for r in _rows(cur)]

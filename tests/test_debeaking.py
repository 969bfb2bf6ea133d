from datetime import date, datetime

import pytest

from aviary.domain.errors import ValidationError
from aviary.infra.repositories import DebeakingRepo
from aviary.usecases.batches import register_batch
from aviary.usecases.debeaking import complete_debeaking, debeaking_schedule, schedule_debeaking

NOW = datetime(2024, 3, 10, 9, 30, 15, 123456)


def _form(**kw):
    form = {
        "batch_number": "B2024-001",
        "scheduled_date": "2024-03-12",
        "debeaking_type": "first",
        "bird_age_weeks": "1",
    }
    form.update(kw)
    return form


def test_schedule_links_known_batch(tmp_path):
    db = str(tmp_path / "aviary.db")
    register_batch(
        {"batch_number": "B2024-001", "arrival_date": "2024-03-03", "initial_count": "1500",
         "breed": "ISA Brown", "supplier": "Sunrise Hatchery"},
        db_path=db, now=NOW,
    )
    res = schedule_debeaking(_form(), db_path=db, now=NOW)
    assert res["status"] == "scheduled"
    assert DebeakingRepo(db).get(res["id"]).batch_id == 1


def test_schedule_unknown_batch_is_accepted(tmp_path):
    db = str(tmp_path / "aviary.db")
    res = schedule_debeaking(_form(batch_number="B-LEGACY", debeaking_type=""), db_path=db, now=NOW)
    rec = DebeakingRepo(db).get(res["id"])
    assert rec.batch_id is None
    assert rec.debeaking_type == "first"


@pytest.mark.parametrize(
    "override",
    [
        {"batch_number": ""},
        {"debeaking_type": "fourth"},
        {"bird_age_weeks": ""},
        {"bird_age_weeks": "1.5"},
        {"scheduled_date": "next week"},
    ],
)
def test_schedule_validation(tmp_path, override):
    db = str(tmp_path / "aviary.db")
    with pytest.raises(ValidationError):
        schedule_debeaking(_form(**override), db_path=db, now=NOW)


def test_complete_is_idempotent(tmp_path):
    db = str(tmp_path / "aviary.db")
    rec_id = schedule_debeaking(_form(), db_path=db, now=NOW)["id"]

    first = complete_debeaking(rec_id, "Ana", db_path=db, now=NOW)
    assert first["status"] == "completed"
    assert first["completed_date"] == datetime(2024, 3, 10, 9, 30, 15)
    assert first["performed_by"] == "Ana"

    again = complete_debeaking(rec_id, "Bruno", db_path=db, now=datetime(2024, 3, 12, 16, 0))
    assert again["status"] == "completed"
    assert again["completed_date"] == first["completed_date"]
    assert again["performed_by"] == "Ana"

    stored = DebeakingRepo(db).get(rec_id)
    assert stored.completed_date == datetime(2024, 3, 10, 9, 30, 15)
    assert stored.performed_by == "Ana"


def test_complete_uses_scheduled_performer(tmp_path):
    db = str(tmp_path / "aviary.db")
    rec_id = schedule_debeaking(_form(performed_by="Team A"), db_path=db, now=NOW)["id"]
    assert complete_debeaking(rec_id, db_path=db, now=NOW)["performed_by"] == "Team A"

    rec_id = schedule_debeaking(_form(), db_path=db, now=NOW)["id"]
    assert complete_debeaking(rec_id, db_path=db, now=NOW)["performed_by"] == "Farm Worker"


def test_complete_unknown_record(tmp_path):
    with pytest.raises(ValidationError):
        complete_debeaking(42, db_path=str(tmp_path / "aviary.db"), now=NOW)


def test_schedule_order_and_counts(tmp_path):
    db = str(tmp_path / "aviary.db")
    schedule_debeaking(_form(scheduled_date="2024-04-01", debeaking_type="second", bird_age_weeks="10"),
                       db_path=db, now=NOW)
    schedule_debeaking(_form(scheduled_date="2024-03-01"), db_path=db, now=NOW)
    done = schedule_debeaking(_form(scheduled_date="2024-02-20"), db_path=db, now=NOW)
    complete_debeaking(done["id"], "Ana", db_path=db, now=NOW)

    res = debeaking_schedule(db_path=db, now=NOW)
    assert [r["scheduled_date"] for r in res["records"]] == [
        date(2024, 2, 20), date(2024, 3, 1), date(2024, 4, 1),
    ]
    assert [r["status"] for r in res["records"]] == ["completed", "overdue", "scheduled"]
    assert (res["scheduled"], res["overdue"], res["completed"]) == (1, 1, 1)
    assert [p["scheduled_date"] for p in DebeakingRepo(db).pending()] == ["2024-03-01", "2024-04-01"]

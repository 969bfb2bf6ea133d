from datetime import date, datetime

import pytest

from aviary.domain.errors import ValidationError
from aviary.infra.repositories import BatchRepo, ParamsRepo
from aviary.usecases.batches import batch_overview, record_mortality, register_batch, sell
from aviary.usecases.common import prepare_db

NOW = datetime(2024, 3, 25, 8, 0)


def _form(**kw):
    form = {
        "batch_number": "B2024-001",
        "arrival_date": "2024-01-01",
        "initial_count": "1500",
        "breed": "ISA Brown",
        "supplier": "Sunrise Hatchery",
    }
    form.update(kw)
    return form


def _assert_counts_valid(db_path):
    for b in BatchRepo(db_path).get_all():
        assert 0 <= b.current_count <= b.initial_count


def test_register_batch_defaults(tmp_path):
    db = str(tmp_path / "aviary.db")
    res = register_batch(_form(), db_path=db, now=NOW)
    assert res["id"] == 1
    assert res["status"] == "active"
    assert res["current_count"] == 1500
    assert res["expected_sale_date"] == date(2025, 5, 19)
    # 2024-01-01 to 2024-03-25 is 84 days
    assert res["age_weeks"] == 12
    assert res["phase"] == "Growing"
    assert res["survival_rate_pct"] == 100.0
    assert res["weeks_remaining"] == 60
    _assert_counts_valid(db)


def test_register_batch_arrival_defaults_to_today(tmp_path):
    db = str(tmp_path / "aviary.db")
    res = register_batch(_form(arrival_date=""), db_path=db, now=NOW)
    assert res["arrival_date"] == date(2024, 3, 25)
    assert res["age_weeks"] == 0


def test_register_batch_uses_cycle_parameter(tmp_path):
    db = str(tmp_path / "aviary.db")
    prepare_db(db)
    ParamsRepo(db).set_many([("full_cycle_weeks", "80")])
    res = register_batch(_form(), db_path=db, now=NOW)
    assert res["weeks_remaining"] == 68
    assert res["expected_sale_date"] == date(2025, 7, 14)


@pytest.mark.parametrize(
    "override",
    [
        {"batch_number": ""},
        {"initial_count": "0"},
        {"initial_count": "-5"},
        {"initial_count": "many"},
        {"breed": " "},
        {"supplier": None},
        {"arrival_date": "someday"},
    ],
)
def test_register_batch_validation(tmp_path, override):
    db = str(tmp_path / "aviary.db")
    with pytest.raises(ValidationError):
        register_batch(_form(**override), db_path=db, now=NOW)
    assert BatchRepo(db).get_all() == []


def test_mortality_then_sale(tmp_path):
    db = str(tmp_path / "aviary.db")
    register_batch(_form(), db_path=db, now=NOW)

    res = record_mortality("B2024-001", "15", db_path=db, now=NOW, notes="heat stress")
    assert res["current_count"] == 1485
    assert res["survival_rate_pct"] == 99.0
    _assert_counts_valid(db)

    res = sell(1, db_path=db, now=NOW)
    assert res["status"] == "sold"
    assert res["current_count"] == 0
    assert res["birds_sold"] == 1485
    _assert_counts_valid(db)

    events = BatchRepo(db).events(1)
    assert [(e["kind"], e["bird_count"]) for e in events] == [("mortality", 15), ("sale", 1485)]
    assert events[0]["notes"] == "heat stress"


def test_mortality_cannot_exceed_current_count(tmp_path):
    db = str(tmp_path / "aviary.db")
    register_batch(_form(initial_count="10"), db_path=db, now=NOW)
    with pytest.raises(ValidationError):
        record_mortality(1, "11", db_path=db, now=NOW)
    assert BatchRepo(db).get(1).current_count == 10
    _assert_counts_valid(db)


def test_sold_batch_cannot_be_sold_again(tmp_path):
    db = str(tmp_path / "aviary.db")
    register_batch(_form(), db_path=db, now=NOW)
    sell("B2024-001", db_path=db, now=NOW)
    with pytest.raises(ValidationError):
        sell("B2024-001", db_path=db, now=NOW)
    with pytest.raises(ValidationError):
        record_mortality("B2024-001", "1", db_path=db, now=NOW)


def test_batch_reference_prefers_batch_number(tmp_path):
    db = str(tmp_path / "aviary.db")
    register_batch(_form(batch_number="B-1", initial_count="50"), db_path=db, now=NOW)
    register_batch(_form(batch_number="1", initial_count="80"), db_path=db, now=NOW)

    res = record_mortality("1", "5", db_path=db, now=NOW)
    assert res["batch_number"] == "1"
    assert res["current_count"] == 75

    # digits matching no batch number fall back to the row id
    res = record_mortality("2", "5", db_path=db, now=NOW)
    assert res["batch_number"] == "1"
    assert res["current_count"] == 70
    assert BatchRepo(db).find_by_number("B-1").current_count == 50


def test_unknown_batch(tmp_path):
    db = str(tmp_path / "aviary.db")
    with pytest.raises(ValidationError, match="not found"):
        sell("B9999", db_path=db, now=NOW)


def test_batch_overview(tmp_path):
    db = str(tmp_path / "aviary.db")
    register_batch(_form(), db_path=db, now=NOW)
    register_batch(_form(batch_number="B2024-002", initial_count="800", arrival_date="2024-03-01"),
                   db_path=db, now=NOW)
    register_batch(_form(batch_number="B2023-009", initial_count="1000", arrival_date="2023-01-02"),
                   db_path=db, now=NOW)
    sell("B2023-009", db_path=db, now=NOW)

    res = batch_overview(db_path=db, now=NOW)
    assert res["active_batches"] == 2
    assert res["total_birds"] == 2300
    # most recently registered active batch
    assert res["current"]["batch_number"] == "B2024-002"
    assert [b["batch_number"] for b in res["batches"]] == ["B2023-009", "B2024-002", "B2024-001"]


def test_batch_overview_empty(tmp_path):
    res = batch_overview(db_path=str(tmp_path / "aviary.db"), now=NOW)
    assert res == {"current": None, "active_batches": 0, "total_birds": 0, "batches": []}

from datetime import date, datetime

import pytest

from aviary.domain.errors import ValidationError
from aviary.infra.repositories import FeedRepo, ParamsRepo
from aviary.usecases.common import prepare_db
from aviary.usecases.feed import UNKNOWN, feed_status, record_feed

NOW = datetime(2024, 1, 10, 7, 0)


def _add(db, amount, day):
    return record_feed(
        {"date": day, "amount_kg": amount, "feed_type": "Layer Mash", "supplier": "AgroFeed"},
        db_path=db,
        now=NOW,
    )


def test_record_feed(tmp_path):
    db = str(tmp_path / "aviary.db")
    res = record_feed({"amount_kg": "47,5", "feed_type": "Layer Mash", "cost": "1200"}, db_path=db, now=NOW)
    assert res["date"] == date(2024, 1, 10)
    assert res["amount_kg"] == 47.5
    assert res["cost"] == 1200.0
    assert res["supplier"] is None


@pytest.mark.parametrize(
    "form",
    [
        {"amount_kg": "", "feed_type": "Layer Mash"},
        {"amount_kg": "-2", "feed_type": "Layer Mash"},
        {"amount_kg": "lots", "feed_type": "Layer Mash"},
        {"amount_kg": "48", "feed_type": ""},
    ],
)
def test_record_feed_validation(tmp_path, form):
    db = str(tmp_path / "aviary.db")
    with pytest.raises(ValidationError):
        record_feed(form, db_path=db, now=NOW)
    assert FeedRepo(db).get_all() == []


def test_feed_status_without_records(tmp_path):
    res = feed_status(db_path=str(tmp_path / "aviary.db"))
    assert res["weekly_total_kg"] == 0.0
    assert res["daily_average_kg"] == 0.0
    assert res["current_stock_kg"] == 150.0
    assert res["days_remaining"] is None
    assert res["days_remaining_label"] == UNKNOWN
    assert res["records"] == []


def test_feed_status_projection(tmp_path):
    db = str(tmp_path / "aviary.db")
    for day in range(1, 9):
        _add(db, "48", f"2024-01-{day:02d}")
    res = feed_status(db_path=db)
    assert res["weekly_total_kg"] == 336.0
    assert res["daily_average_kg"] == 48.0
    assert res["days_remaining"] == 3
    assert res["days_remaining_label"] == "3"
    # newest first
    assert res["records"][0]["date"] == date(2024, 1, 8)
    assert len(res["records"]) == 8


def test_feed_status_uses_recent_records_only(tmp_path):
    db = str(tmp_path / "aviary.db")
    _add(db, "200", "2024-01-01")  # oldest, falls outside the window
    for day in range(2, 9):
        _add(db, "40", f"2024-01-{day:02d}")
    res = feed_status(db_path=db, current_stock_kg=100)
    assert res["weekly_total_kg"] == 280.0
    assert res["daily_average_kg"] == 40.0
    assert res["days_remaining"] == 2


def test_feed_status_stock_parameter(tmp_path):
    db = str(tmp_path / "aviary.db")
    prepare_db(db)
    ParamsRepo(db).set_many([("feed_stock_kg", "500")])
    _add(db, "50", "2024-01-01")
    _add(db, "45", "2024-01-02")
    res = feed_status(db_path=db)
    assert res["current_stock_kg"] == 500.0
    assert res["daily_average_kg"] == 47.5
    # floor(500 / 47.5) = 10
    assert res["days_remaining"] == 10

from datetime import datetime

import pytest

from aviary.domain.errors import ValidationError
from aviary.usecases.batches import register_batch
from aviary.usecases.debeaking import schedule_debeaking
from aviary.usecases.feed import record_feed
from aviary.usecases.inventory import record_inventory
from aviary.usecases.medication import record_medication
from aviary.usecases.overview import dashboard_overview
from aviary.usecases.production import record_eggs

NOW = datetime(2024, 3, 10, 8, 0)


def _seed(db):
    register_batch(
        {"batch_number": "B2024-001", "arrival_date": "2024-01-01", "initial_count": "1500",
         "breed": "ISA Brown", "supplier": "Sunrise Hatchery"},
        db_path=db, now=NOW,
    )
    record_eggs({"date": "2024-03-10", "small": "120", "medium": "680", "large": "450", "extra_large": "70"},
                db_path=db, now=NOW)
    record_feed({"date": "2024-03-09", "amount_kg": "50", "feed_type": "Layer Mash"}, db_path=db, now=NOW)
    record_feed({"date": "2024-03-10", "amount_kg": "46", "feed_type": "Layer Mash"}, db_path=db, now=NOW)
    record_medication(
        {"date": "2024-02-01", "medication_name": "Newcastle Disease Vaccine", "purpose": "Vaccination",
         "dosage": "0.5ml", "frequency": "monthly", "administered_by": "Dr. Smith"},
        db_path=db, now=NOW,
    )
    schedule_debeaking({"batch_number": "B2024-001", "scheduled_date": "2024-03-15",
                        "debeaking_type": "second", "bird_age_weeks": "11"}, db_path=db, now=NOW)
    record_inventory({"small": "120", "medium": "680", "large": "450", "extra_large": "70"}, db_path=db, now=NOW)


def test_admin_overview(tmp_path):
    db = str(tmp_path / "aviary.db")
    _seed(db)
    res = dashboard_overview("admin", db_path=db, now=NOW)

    assert res["production"]["today_eggs"] == 1320
    assert res["feed"]["latest_usage_kg"] == 46.0
    assert res["feed"]["days_remaining"] == 3
    assert res["batch"]["active_birds"] == 1500
    assert res["batch"]["current_batch"] == "B2024-001"
    assert res["batch"]["phase"] == "Growing"
    assert res["medication"]["overdue"] == 1
    assert res["debeaking"] == {"scheduled": 1, "overdue": 0, "completed": 0}
    assert res["inventory"]["total_eggs"] == 1320

    titles = [a["title"] for a in res["alerts"]]
    assert titles == ["Medication Overdue", "Feed Stock Low", "Debeaking Scheduled"]
    assert "B2024-001" in res["alerts"][-1]["detail"]


def test_worker_overview_hides_admin_sections(tmp_path):
    db = str(tmp_path / "aviary.db")
    _seed(db)
    res = dashboard_overview("worker", db_path=db, now=NOW)
    for section in ("batch", "medication", "debeaking"):
        assert section not in res
    assert res["production"]["today_eggs"] == 1320
    assert [a["title"] for a in res["alerts"]] == ["Feed Stock Low"]


def test_overview_on_empty_farm(tmp_path):
    res = dashboard_overview("admin", db_path=str(tmp_path / "aviary.db"), now=NOW)
    assert res["production"]["today_eggs"] == 0
    assert res["feed"]["latest_usage_kg"] == 0.0
    assert res["feed"]["days_remaining_label"] == "unknown"
    assert res["batch"]["current_batch"] is None
    assert res["alerts"] == []


def test_overview_unknown_role(tmp_path):
    with pytest.raises(ValidationError):
        dashboard_overview("guest", db_path=str(tmp_path / "aviary.db"), now=NOW)


def test_overdue_debeaking_is_not_announced_as_scheduled(tmp_path):
    db = str(tmp_path / "aviary.db")
    schedule_debeaking({"batch_number": "B2024-001", "scheduled_date": "2024-03-01",
                        "debeaking_type": "first", "bird_age_weeks": "1"}, db_path=db, now=NOW)
    res = dashboard_overview("admin", db_path=db, now=NOW)
    assert [a["title"] for a in res["alerts"]] == ["Debeaking Overdue"]

    schedule_debeaking({"batch_number": "B2024-002", "scheduled_date": "2024-03-20",
                        "debeaking_type": "second", "bird_age_weeks": "11"}, db_path=db, now=NOW)
    res = dashboard_overview("admin", db_path=db, now=NOW)
    assert [a["title"] for a in res["alerts"]] == ["Debeaking Overdue", "Debeaking Scheduled"]
    assert "B2024-002" in res["alerts"][-1]["detail"]


def test_feed_alert_only_at_reorder_point(tmp_path):
    db = str(tmp_path / "aviary.db")
    # 150 kg stock / 30 kg a day = 5 days
    record_feed({"date": "2024-03-10", "amount_kg": "30", "feed_type": "Layer Mash"}, db_path=db, now=NOW)
    res = dashboard_overview("worker", db_path=db, now=NOW)
    assert res["feed"]["days_remaining"] == 5
    assert res["alerts"] == []

    record_feed({"date": "2024-03-11", "amount_kg": "90", "feed_type": "Layer Mash"}, db_path=db, now=NOW)
    res = dashboard_overview("worker", db_path=db, now=NOW)
    assert res["feed"]["days_remaining"] == 2
    assert [a["title"] for a in res["alerts"]] == ["Feed Stock Low"]

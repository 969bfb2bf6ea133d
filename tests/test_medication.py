from datetime import date, datetime

import pytest

from aviary.domain.errors import ValidationError
from aviary.infra.repositories import MedicationRepo, ParamsRepo
from aviary.usecases.common import prepare_db
from aviary.usecases.medication import medication_schedule, record_medication

NOW = datetime(2024, 1, 5, 10, 0)


def _form(**kw):
    form = {
        "date": "2024-01-05",
        "medication_name": "Newcastle Disease Vaccine",
        "purpose": "Vaccination",
        "dosage": "0.5ml per bird",
        "frequency": "quarterly",
        "administered_by": "Dr. Smith",
    }
    form.update(kw)
    return form


def test_record_quarterly_medication(tmp_path):
    db = str(tmp_path / "aviary.db")
    res = record_medication(_form(), db_path=db, now=NOW)
    assert res["next_due"] == date(2024, 4, 5)
    assert res["status"] == "completed"
    stored = MedicationRepo(db).get_all()[0]
    assert stored.status == "completed"
    assert stored.next_due == date(2024, 4, 5)


def test_frequency_defaults_to_monthly(tmp_path):
    db = str(tmp_path / "aviary.db")
    res = record_medication(_form(frequency="", date="2024-01-31"), db_path=db, now=NOW)
    assert res["frequency"] == "monthly"
    assert res["next_due"] == date(2024, 2, 29)


def test_custom_frequency(tmp_path):
    db = str(tmp_path / "aviary.db")
    res = record_medication(_form(frequency="custom", next_due="2024-02-20"), db_path=db, now=NOW)
    assert res["next_due"] == date(2024, 2, 20)

    res = record_medication(_form(frequency="custom", next_due=""), db_path=db, now=NOW)
    assert res["next_due"] is None
    assert res["status"] == "completed"


@pytest.mark.parametrize(
    "override",
    [
        {"frequency": "weekly"},
        {"medication_name": ""},
        {"purpose": None},
        {"dosage": " "},
        {"administered_by": ""},
    ],
)
def test_record_medication_validation(tmp_path, override):
    db = str(tmp_path / "aviary.db")
    with pytest.raises(ValidationError):
        record_medication(_form(**override), db_path=db, now=NOW)
    assert MedicationRepo(db).get_all() == []


def test_schedule_classifies_on_read(tmp_path):
    db = str(tmp_path / "aviary.db")
    record_medication(_form(date="2023-12-01", frequency="monthly"), db_path=db, now=NOW)  # due 2024-01-01
    record_medication(_form(date="2023-12-10", frequency="monthly"), db_path=db, now=NOW)  # due 2024-01-10
    record_medication(_form(), db_path=db, now=NOW)  # due 2024-04-05

    res = medication_schedule(db_path=db, now=NOW)
    assert [r["status"] for r in res["records"]] == ["completed", "due", "overdue"]
    assert res["overdue"] == 1
    assert res["due"] == 1
    assert res["lookahead_days"] == 7

    # same records, read three months later
    later = medication_schedule(db_path=db, now=datetime(2024, 4, 1))
    assert [r["status"] for r in later["records"]] == ["due", "overdue", "overdue"]


def test_schedule_lookahead(tmp_path):
    db = str(tmp_path / "aviary.db")
    prepare_db(db)
    ParamsRepo(db).set_many([("medication_lookahead_days", "45")])
    record_medication(_form(date="2024-01-05", frequency="monthly"), db_path=db, now=NOW)  # due 2024-02-05

    assert medication_schedule(db_path=db, now=NOW)["records"][0]["status"] == "due"
    assert medication_schedule(db_path=db, now=NOW, lookahead_days=7)["records"][0]["status"] == "completed"

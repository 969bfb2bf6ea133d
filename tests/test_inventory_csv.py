from datetime import date, datetime

import pytest

from aviary.adapters.inventory_csv import (
    EXPORT_COLUMNS,
    export_filename,
    load_inventory_csv,
    render_inventory_csv,
    write_inventory_csv,
)
from aviary.domain.errors import ValidationError
from aviary.domain.models import InventorySnapshot


def _snapshots():
    return [
        InventorySnapshot(date=date(2024, 1, 7), small=120, medium=680, large=450, extra_large=70,
                          last_updated=datetime(2024, 1, 7, 14, 30)),
        InventorySnapshot(date=date(2024, 1, 6), small=100, medium=600, large=400, extra_large=50,
                          last_updated=datetime(2024, 1, 6, 9, 5)),
    ]


def test_export_filename():
    assert export_filename(datetime(2024, 1, 7, 18, 0)) == "egg-inventory-2024-01-07.csv"


def test_render_inventory_csv():
    text = render_inventory_csv(_snapshots())
    lines = text.splitlines()
    assert lines[0] == ",".join(EXPORT_COLUMNS)
    assert lines[1] == "2024-01-07,120,680,450,70,1320,2024-01-07 14:30"
    assert lines[2] == "2024-01-06,100,600,400,50,1150,2024-01-06 09:05"


def test_write_and_load_back(tmp_path):
    path = write_inventory_csv(_snapshots(), tmp_path / "exports", datetime(2024, 1, 7, 18, 0))
    assert path.name == "egg-inventory-2024-01-07.csv"
    loaded = load_inventory_csv(path)
    assert [(s.date, s.small, s.medium, s.large, s.extra_large, s.total) for s in loaded] == [
        (date(2024, 1, 7), 120, 680, 450, 70, 1320),
        (date(2024, 1, 6), 100, 600, 400, 50, 1150),
    ]
    assert loaded[0].last_updated == datetime(2024, 1, 7, 14, 30)


def test_empty_export_has_header_only(tmp_path):
    path = write_inventory_csv([], tmp_path, datetime(2024, 1, 7), filename="empty.csv")
    assert path.read_text(encoding="utf-8").strip() == ",".join(EXPORT_COLUMNS)
    assert load_inventory_csv(path) == []


def test_load_rejects_wrong_total(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        ",".join(EXPORT_COLUMNS) + "\n2024-01-07,120,680,450,70,1000,2024-01-07 14:30\n",
        encoding="utf-8",
    )
    with pytest.raises(ValidationError, match="line 2"):
        load_inventory_csv(path)


def test_load_rejects_missing_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("Date,Small\n2024-01-07,1\n", encoding="utf-8")
    with pytest.raises(ValidationError, match="missing columns"):
        load_inventory_csv(path)

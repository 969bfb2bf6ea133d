from datetime import datetime

from aviary.usecases.feed import feed_status
from aviary.usecases.imports import import_egg_sheet, import_feed_sheet
from aviary.usecases.production import production_summary

NOW = datetime(2024, 1, 8, 12, 0)


def test_import_egg_sheet_reports_bad_rows(tmp_path):
    sheet = tmp_path / "production.csv"
    sheet.write_text(
        "Date,Small,Medium,Large,Extra Large\n"
        "2024-01-06,100,600,400,50\n"
        "2024-01-07,120,lots,450,70\n"
        "08/01/2024,120,680,450,70\n",
        encoding="utf-8",
    )
    db = str(tmp_path / "aviary.db")
    info = import_egg_sheet(str(sheet), db_path=db, now=NOW)
    assert info["type"] == "eggs"
    assert info["total"] == 3
    assert info["imported"] == 2
    assert len(info["errors"]) == 1
    assert info["errors"][0]["line"] == 3
    assert "Medium" in info["errors"][0]["message"]

    summary = production_summary(db_path=db, now=NOW)
    assert summary["today_total"] == 1320
    assert len(summary["records"]) == 2


def test_import_feed_sheet(tmp_path):
    sheet = tmp_path / "feed.csv"
    sheet.write_text(
        "Date,Amount,Feed Type,Cost,Supplier\n"
        "2024-01-06,50,Layer Mash,1200,AgroFeed\n"
        "2024-01-07,46,Layer Mash,,AgroFeed\n"
        "2024-01-08,,Layer Mash,,\n",
        encoding="utf-8",
    )
    db = str(tmp_path / "aviary.db")
    info = import_feed_sheet(str(sheet), db_path=db, now=NOW)
    assert info["imported"] == 2
    assert [e["line"] for e in info["errors"]] == [4]

    status = feed_status(db_path=db)
    assert status["weekly_total_kg"] == 96.0
    assert status["daily_average_kg"] == 48.0
    assert status["days_remaining"] == 3

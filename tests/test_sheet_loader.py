import pandas as pd

from aviary.adapters.sheet_loader import load_egg_records, load_feed_records, read_sheet


def test_egg_sheet_headers_are_normalized(tmp_path):
    path = tmp_path / "production.csv"
    path.write_text(
        "Date,Small,Medium,Large,Extra Large,Total,Comments\n"
        "07/01/2024,120,680,450,70,1320,good day\n"
        "2024-01-08,,700,460,,1160,\n",
        encoding="utf-8",
    )
    rows = load_egg_records(str(path))
    assert rows[0] == {
        "date": "2024-01-07",
        "small": "120",
        "medium": "680",
        "large": "450",
        "extra_large": "70",
        "notes": "good day",
    }
    assert rows[1]["small"] is None
    assert rows[1]["extra_large"] is None
    assert rows[1]["notes"] is None


def test_feed_sheet_aliases(tmp_path):
    path = tmp_path / "feed.csv"
    path.write_text(
        "Day,Feed KG,Feed Type,Price,Vendor\n"
        "2024-01-07,48,Layer Mash,30.5,AgroFeed\n",
        encoding="utf-8",
    )
    rows = load_feed_records(str(path))
    assert rows == [{
        "date": "2024-01-07",
        "amount_kg": "48",
        "feed_type": "Layer Mash",
        "cost": "30.5",
        "supplier": "AgroFeed",
        "notes": None,
    }]


def test_xlsx_sheet(tmp_path):
    path = tmp_path / "production.xlsx"
    pd.DataFrame(
        [["2024-01-07", 120, 680, 450, 70]],
        columns=["Date", "Small", "Medium", "Large", "XL"],
    ).to_excel(path, index=False)
    df = read_sheet(str(path))
    assert list(df.columns) == ["date", "small", "medium", "large", "extra_large"]
    rows = load_egg_records(str(path))
    assert rows[0]["medium"] == "680"
    assert rows[0]["extra_large"] == "70"

from datetime import date, datetime

import pytest

from aviary.adapters.parsers import (
    optional_text,
    parse_amount,
    parse_choice,
    parse_count,
    parse_date,
    parse_timestamp,
    require_text,
)
from aviary.domain.errors import ValidationError


@pytest.mark.parametrize(
    "txt,expected",
    [
        ("48", 48.0),
        ("47,5", 47.5),
        (" 12.25 ", 12.25),
        (3, 3.0),
        ("", None),
        (None, None),
    ],
)
def test_parse_amount(txt, expected):
    assert parse_amount(txt, "Amount", required=False) == expected


@pytest.mark.parametrize("txt", ["abc", "-1", "1.2.3", "12kg"])
def test_parse_amount_rejects(txt):
    with pytest.raises(ValidationError):
        parse_amount(txt, "Amount")


def test_parse_amount_required():
    with pytest.raises(ValidationError, match="Amount is required"):
        parse_amount("  ", "Amount")


def test_parse_count():
    assert parse_count("1500", "Initial count") == 1500
    assert parse_count("", "Small", default=0) == 0
    assert parse_count(None, "Small", default=0) == 0
    assert parse_count(0, "Small") == 0


@pytest.mark.parametrize("txt", ["12.5", "-3", "many"])
def test_parse_count_rejects(txt):
    with pytest.raises(ValidationError):
        parse_count(txt, "Initial count")


def test_parse_count_required():
    with pytest.raises(ValidationError):
        parse_count("", "Initial count")


def test_parse_date():
    assert parse_date("2024-01-05", "Date") == date(2024, 1, 5)
    assert parse_date("05/01/2024", "Date") == date(2024, 1, 5)
    assert parse_date(datetime(2024, 1, 5, 10, 0), "Date") == date(2024, 1, 5)
    assert parse_date("", "Date", required=False) is None
    with pytest.raises(ValidationError):
        parse_date("", "Date")
    with pytest.raises(ValidationError):
        parse_date("January 5th", "Date")


def test_parse_date_time_suffix():
    assert parse_date("2024-01-05 00:00:00", "Date") == date(2024, 1, 5)
    assert parse_date("2024-01-05T08:15", "Date") == date(2024, 1, 5)
    for bad in ("2024-01-05garbage", "2024-01-05 later", "05/01/2024x"):
        with pytest.raises(ValidationError):
            parse_date(bad, "Date")


def test_parse_timestamp():
    assert parse_timestamp("2024-01-07 14:30", "Last Updated") == datetime(2024, 1, 7, 14, 30)
    assert parse_timestamp("2024-01-07T14:30:05", "Last Updated") == datetime(2024, 1, 7, 14, 30, 5)
    assert parse_timestamp("", "Last Updated") is None
    with pytest.raises(ValidationError):
        parse_timestamp("yesterday", "Last Updated")


def test_parse_choice():
    choices = ("monthly", "quarterly", "bi-annually", "custom")
    assert parse_choice("Quarterly", "Frequency", choices) == "quarterly"
    assert parse_choice("", "Frequency", choices, default="monthly") == "monthly"
    with pytest.raises(ValidationError):
        parse_choice("weekly", "Frequency", choices)


def test_text_helpers():
    assert optional_text("  ") is None
    assert optional_text(" note ") == "note"
    assert require_text(" ISA Brown ", "Breed") == "ISA Brown"
    with pytest.raises(ValidationError, match="Breed is required"):
        require_text(None, "Breed")

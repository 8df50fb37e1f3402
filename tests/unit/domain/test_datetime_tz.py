from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from src.domain.value_objects.animal_type import AnimalType
from src.domain.value_objects.sex import Sex
from src.utils.datetime_tz import (
    age_label,
    format_day_date,
    format_timestamp,
    parse_date,
    parse_timestamp,
)


def test_timestamp_is_fixed_width_utc_with_millis():
    local = datetime(2025, 9, 4, 9, 34, 56, 789999, tzinfo=timezone(timedelta(hours=-3)))
    assert format_timestamp(local) == "2025-09-04T12:34:56.789Z"
    assert format_timestamp(datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == (
        "2025-01-02T03:04:05.000Z"
    )


def test_parse_timestamp_reads_javascript_iso_strings():
    parsed = parse_timestamp("2025-09-04T12:34:56.789Z")
    assert parsed == datetime(2025, 9, 4, 12, 34, 56, 789000, tzinfo=timezone.utc)
    assert format_timestamp(parsed) == "2025-09-04T12:34:56.789Z"


def test_parse_date_variants():
    assert parse_date(None) is None
    assert parse_date("") is None
    assert parse_date("2024-02-29") == date(2024, 2, 29)
    assert parse_date("2024-02-29T00:00:00Z") == date(2024, 2, 29)
    assert parse_date(datetime(2024, 2, 29, 10, tzinfo=timezone.utc)) == date(2024, 2, 29)
    assert parse_date("2025-01-20T10:00:00.000Z") == date(2025, 1, 20)
    with pytest.raises(ValueError):
        parse_date("29/02/2024")


@pytest.mark.parametrize(
    "raw", ["2024-01-01garbage", "2024-01-01 trailing", "2024-01-01Tnoon", "2024-13-01"]
)
def test_parse_date_rejects_trailing_junk(raw):
    with pytest.raises(ValueError):
        parse_date(raw)


@pytest.mark.parametrize(
    "birth,today,label",
    [
        (None, date(2025, 9, 4), "-"),
        (date(2025, 9, 1), date(2025, 9, 4), "0m"),
        (date(2025, 4, 10), date(2025, 9, 4), "5m"),
        (date(2023, 11, 2), date(2025, 9, 4), "1a 10m"),
        (date(2022, 9, 4), date(2025, 9, 4), "3a 0m"),
    ],
)
def test_age_label(birth, today, label):
    assert age_label(birth, today) == label


def test_format_day_date():
    assert format_day_date(date(2025, 3, 7)) == "07/03/2025"
    assert format_day_date(None) == "-"


def test_enum_parse_accepts_legacy_codes():
    assert AnimalType.parse("BEZERRO") is AnimalType.CALF
    assert AnimalType.parse("novilho") is AnimalType.YEARLING
    assert AnimalType.parse("ENGORDA") is AnimalType.FEEDLOT
    assert AnimalType.parse(AnimalType.CALF) is AnimalType.CALF
    assert Sex.parse("F") is Sex.FEMALE
    assert Sex.parse("male") is Sex.MALE
    with pytest.raises(ValueError):
        Sex.parse("unknown")

import datetime as dt

import pytest

from app.services.demographics import (
    age_distribution,
    age_group,
    calculate_age,
    gender_distribution,
    normalize_gender,
)

TODAY = dt.date(2024, 11, 5)


@pytest.mark.parametrize("raw,expected", [
    ("M", "MALE"), ("male", "MALE"), (" Male ", "MALE"),
    ("F", "FEMALE"), ("female", "FEMALE"),
    ("X", "NOT STATED"), ("", "NOT STATED"), (None, "NOT STATED"),
])
def test_normalize_gender(raw, expected):
    assert normalize_gender(raw) == expected


def test_age_is_corrected_before_birthday():
    assert calculate_age(dt.date(2000, 11, 5), TODAY) == 24
    assert calculate_age(dt.date(2000, 11, 6), TODAY) == 23
    assert calculate_age(None, TODAY) is None


@pytest.mark.parametrize("age,bucket", [
    (None, "NOT STATED"), (17, "Under 18"), (18, "18-27"), (26, "18-27"),
    (27, "27-35"), (35, "35-50"), (50, "50-64"), (64, "50-64"), (65, "65+"), (90, "65+"),
])
def test_age_group(age, bucket):
    assert age_group(age) == bucket


def test_age_distribution_drops_minors_and_keeps_order():
    dobs = [
        dt.date(1950, 1, 1),   # 65+
        dt.date(2010, 1, 1),   # menor
        None,
        dt.date(2000, 1, 1),   # 18-27
        dt.date(2001, 1, 1),   # 18-27
    ]

    result = age_distribution(dobs, TODAY)

    assert list(result.items()) == [("18-27", 2), ("65+", 1), ("NOT STATED", 1)]


def test_gender_distribution_omits_empty_buckets():
    assert gender_distribution(["f", "F", "female"]) == {"FEMALE": 3}

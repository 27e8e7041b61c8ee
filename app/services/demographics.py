# app/services/demographics.py
from __future__ import annotations

import datetime as dt
from collections import Counter
from typing import Dict, Iterable, Optional

NOT_STATED = "NOT STATED"
UNDER_18 = "Under 18"

AGE_ORDER = ["18-27", "27-35", "35-50", "50-64", "65+", NOT_STATED]
GENDER_ORDER = ["MALE", "FEMALE", NOT_STATED]

# limite inferior inclusivo -> rótulo
_AGE_BUCKETS = [(65, "65+"), (50, "50-64"), (35, "35-50"), (27, "27-35"), (18, "18-27")]


def calculate_age(date_of_birth: Optional[dt.date], today: dt.date) -> Optional[int]:
    if date_of_birth is None:
        return None
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def age_group(age: Optional[int]) -> str:
    if age is None:
        return NOT_STATED
    if age < 18:
        return UNDER_18
    for floor, label in _AGE_BUCKETS:
        if age >= floor:
            return label
    return NOT_STATED


def normalize_gender(raw: Optional[str]) -> str:
    if not raw:
        return NOT_STATED
    value = raw.strip().upper()
    if value in ("M", "MALE"):
        return "MALE"
    if value in ("F", "FEMALE"):
        return "FEMALE"
    return NOT_STATED


def _ordered(counts: Counter, order: Iterable[str]) -> Dict[str, int]:
    return {key: counts[key] for key in order if counts.get(key)}


def age_distribution(dates_of_birth: Iterable[Optional[dt.date]], today: dt.date) -> Dict[str, int]:
    """Bucket counts in ascending order; under-18s are dropped and empty buckets omitted."""
    counts: Counter = Counter()
    for dob in dates_of_birth:
        group = age_group(calculate_age(dob, today))
        if group == UNDER_18:
            continue
        counts[group] += 1
    return _ordered(counts, AGE_ORDER)


def gender_distribution(sexes: Iterable[Optional[str]]) -> Dict[str, int]:
    counts = Counter(normalize_gender(s) for s in sexes)
    return _ordered(counts, GENDER_ORDER)

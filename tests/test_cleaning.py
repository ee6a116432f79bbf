"""
tests/test_cleaning.py – absent marker, sentinels, coercion and titles.

Covers:
- ABSENT is a falsy singleton that survives pickling and stays out of arithmetic.
- Sentinel tokens become ABSENT regardless of case or padding.
- Numeric and date coercion return ABSENT instead of raising.
- The title normalizer applies its replacement list in order.
"""

import pickle
from datetime import date, datetime

import pytest

from datacleaning.cleaning import (
    ABSENT,
    AbsentType,
    CAFE_SENTINELS,
    JOB_PLACEHOLDERS_UNKNOWN,
    clean_text,
    is_present,
    normalize_sentinel,
    normalize_title,
    parse_date,
    safe_div,
    safe_mul,
    to_db,
    to_float,
    to_int,
)


# ---------------------------------------------------------------------------
# Absent marker
# ---------------------------------------------------------------------------

@pytest.mark.unit
def test_absent_is_falsy_singleton():
    """ABSENT is falsy, and pickling gives back the same object."""
    assert not ABSENT
    assert pickle.loads(pickle.dumps(ABSENT)) is ABSENT
    assert repr(ABSENT) == "ABSENT"


@pytest.mark.unit
def test_store_boundary_conversions():
    """ABSENT becomes NULL for the store; present values pass through."""
    assert isinstance(ABSENT, AbsentType)
    assert to_db(ABSENT) is None
    assert to_db("x") == "x"
    assert is_present(0.0)
    assert not is_present(ABSENT)


@pytest.mark.unit
def test_safe_arithmetic_propagates_absence():
    """Absent operands and zero divisors give ABSENT."""
    assert safe_div(6.0, 2.0) == 3.0
    assert safe_div(ABSENT, 2.0) is ABSENT
    assert safe_div(6.0, ABSENT) is ABSENT
    assert safe_div(6.0, 0) is ABSENT
    assert safe_mul(1.5, 2.0) == 3.0
    assert safe_mul(1.5, ABSENT) is ABSENT


# ---------------------------------------------------------------------------
# Sentinels
# ---------------------------------------------------------------------------

@pytest.mark.unit
@pytest.mark.parametrize("value", ["ERROR", "UNKNOWN", "unknown", "  Error ", "", None])
def test_cafe_sentinels_become_absent(value):
    """Sentinel tokens and empty cells are all absent."""
    assert normalize_sentinel(value, CAFE_SENTINELS) is ABSENT


@pytest.mark.unit
def test_non_sentinel_passes_through_unchanged():
    """A real value is returned as given, not trimmed or re-typed."""
    assert normalize_sentinel("Coffee", CAFE_SENTINELS) == "Coffee"
    assert normalize_sentinel(2.0, CAFE_SENTINELS) == 2.0
    assert normalize_sentinel("Private", JOB_PLACEHOLDERS_UNKNOWN) == "Private"
    assert normalize_sentinel("Unknown", JOB_PLACEHOLDERS_UNKNOWN) is ABSENT


@pytest.mark.unit
def test_clean_text_strips_and_drops_nul():
    assert clean_text("  Lyft\x00 ") == "Lyft"
    assert clean_text("   ") is ABSENT
    assert clean_text(3.8) == "3.8"


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

@pytest.mark.unit
def test_to_float():
    """Numbers and numeric text coerce; anything else is absent."""
    assert to_float("6.0") == 6.0
    assert to_float("1,250") == 1250.0
    assert to_float(2) == 2.0
    assert to_float("abc") is ABSENT
    assert to_float(True) is ABSENT
    assert to_float(ABSENT) is ABSENT


@pytest.mark.unit
@pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-inf", "Infinity", float("nan"), float("inf")])
def test_to_float_rejects_non_finite(value):
    """NaN and infinities are not usable numbers."""
    assert to_float(value) is ABSENT


@pytest.mark.unit
def test_to_int_accepts_whole_numbers_only():
    assert to_int("1993") == 1993
    assert to_int("1993.0") == 1993
    assert to_int("19.5") is ABSENT
    assert to_int(None) is ABSENT


@pytest.mark.unit
@pytest.mark.parametrize("text", ["2023-09-08", "09/08/2023", "September 8, 2023", "Sep 8, 2023"])
def test_parse_date_formats(text):
    """All supported layouts parse to the same day."""
    assert parse_date(text) == date(2023, 9, 8)


@pytest.mark.unit
def test_parse_date_passthrough_and_failure():
    assert parse_date(datetime(2023, 9, 8, 12, 30)) == date(2023, 9, 8)
    assert parse_date(date(2023, 9, 8)) == date(2023, 9, 8)
    assert parse_date("ERROR") is ABSENT
    assert parse_date(None) is ABSENT


# ---------------------------------------------------------------------------
# Title normalizer
# ---------------------------------------------------------------------------

@pytest.mark.unit
@pytest.mark.parametrize("title, expected", [
    ("Senior Data Scientist", "sr data scientist"),
    ("Senior Data Scientist - II", "sr data scientist mid"),
    ("Data Engineer III", "data engineer sr"),
    ("Analyst I (Remote)", "analyst jr remote"),
    ("Data Scientist, Machine Learning", "data scientist machine learning"),
])
def test_normalize_title(title, expected):
    """Lowercase, punctuation to spaces, seniority rewrites, trimmed."""
    assert normalize_title(title) == expected


@pytest.mark.unit
def test_normalize_title_keeps_real_en_dash():
    """Only the mis-decoded dash is replaced; a real en dash stays."""
    assert normalize_title("Data Scientist \u2013 Senior") == "data scientist \u2013 sr"
    assert normalize_title("Data Scientist \u00e2\u20ac\u201c Senior") == "data scientist sr"


@pytest.mark.unit
def test_normalize_title_absent():
    assert normalize_title(None) is ABSENT
    assert normalize_title("  ") is ABSENT

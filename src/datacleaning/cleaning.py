"""
cleaning.py – absence handling, sentinel repair, type coercion and the
job-title normalizer.

Every value that may be "not available" is carried as :data:`ABSENT` rather
than ``None``, so that arithmetic and concatenation over missing operands are
explicit (see :func:`safe_div`, :func:`safe_mul`).  ``None`` only appears at
the store boundary, where :func:`to_db` converts back.
"""

import math
from datetime import date, datetime
from typing import Any, Iterable


# ---------------------------------------------------------------------------
# Absent marker
# ---------------------------------------------------------------------------

class _Absent:
    """Singleton "no value" marker, falsy and equal only to itself."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "ABSENT"

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()
AbsentType = _Absent


def is_present(value: Any) -> bool:
    """True unless *value* is the absent marker."""
    return value is not ABSENT


def to_db(value: Any) -> Any:
    """Map :data:`ABSENT` to ``None`` for parameter binding."""
    return None if value is ABSENT else value


def safe_div(numerator: Any, denominator: Any) -> Any:
    """Divide, or ABSENT when either side is absent or the divisor is zero."""
    if numerator is ABSENT or denominator is ABSENT or denominator == 0:
        return ABSENT
    return numerator / denominator


def safe_mul(left: Any, right: Any) -> Any:
    """Multiply, or ABSENT when either side is absent."""
    if left is ABSENT or right is ABSENT:
        return ABSENT
    return left * right


# ---------------------------------------------------------------------------
# Sentinel normalizer
# ---------------------------------------------------------------------------

CAFE_SENTINELS = frozenset({"ERROR", "UNKNOWN"})
JOB_PLACEHOLDERS = frozenset({"-1"})
JOB_PLACEHOLDERS_UNKNOWN = frozenset({"-1", "Unknown"})


def clean_text(x: Any) -> Any:
    """Convert to str, strip, and remove NUL bytes; empty text is ABSENT."""
    if x is None or x is ABSENT:
        return ABSENT
    s = str(x).replace("\x00", "").strip()
    return s if s else ABSENT


def normalize_sentinel(value: Any, sentinels: Iterable[str]) -> Any:
    """
    Return *value* unchanged unless it is one of *sentinels*.

    Comparison is on the trimmed text and ignores case, so ``"unknown"`` and
    ``" UNKNOWN "`` both match ``"UNKNOWN"``.  Empty text is absent too.
    """
    s = clean_text(value)
    if s is ABSENT:
        return ABSENT
    folded = s.casefold()
    if any(folded == token.casefold() for token in sentinels):
        return ABSENT
    return value


# ---------------------------------------------------------------------------
# Type coercion
# ---------------------------------------------------------------------------

def to_float(x: Any) -> Any:
    """Coerce a value to a finite float; ABSENT on failure, NaN or infinity."""
    if x is None or x is ABSENT or isinstance(x, bool):
        return ABSENT
    if isinstance(x, (int, float)):
        result = float(x)
    else:
        s = clean_text(x)
        if s is ABSENT:
            return ABSENT
        try:
            result = float(s.replace(",", ""))
        except ValueError:
            return ABSENT
    return result if math.isfinite(result) else ABSENT


def to_int(x: Any) -> Any:
    """Coerce whole-number text (``"1993"``, ``"1993.0"``) to int, else ABSENT."""
    f = to_float(x)
    if f is ABSENT or not f.is_integer():
        return ABSENT
    return int(f)


def parse_date(value: Any) -> Any:
    """
    Parse various date strings.

    Supported formats: ``"2023-09-08"``, ``"09/08/2023"``,
    ``"September 8, 2023"``, ``"Sep 8, 2023"``.
    Returns a :class:`datetime.date` or ABSENT.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = clean_text(value)
    if s is ABSENT:
        return ABSENT
    for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%B %d, %Y", "%b %d, %Y"):
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            pass
    return ABSENT


# ---------------------------------------------------------------------------
# Title normalizer
# ---------------------------------------------------------------------------

TITLE_PUNCTUATION = ("-", ",", ".", "/", "(", ")")

# Applied in order; later rules see the output of earlier ones.
TITLE_REPLACEMENTS = (
    ("senior", "sr"),
    ("â€“", " "),
    (" iii", " sr"),
    (" ii", " mid"),
    (" i ", " jr "),
    (" 1 ", " jr "),
    ("  ", " "),
    ("  ", " "),
)


def normalize_title(title: Any) -> Any:
    """
    Canonical lowercase job title used for keyword classification.

    >>> normalize_title("Senior Data Scientist - II")
    'sr data scientist mid'
    """
    s = clean_text(title)
    if s is ABSENT:
        return ABSENT
    s = s.lower()
    for ch in TITLE_PUNCTUATION:
        s = s.replace(ch, " ")
    for old, new in TITLE_REPLACEMENTS:
        s = s.replace(old, new)
    return s.strip()

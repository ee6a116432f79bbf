"""
field_parsers.py – split compound job-posting text fields into sub-fields.

Each parser is total: when the expected anchors (``$``, ``(``, a comma, ...)
are missing it returns ABSENT for the affected sub-field instead of raising.
Inputs are expected to be sentinel-free already; ABSENT in gives ABSENT out.
"""

import logging
import math
from typing import Any, Tuple

from .cleaning import ABSENT, clean_text, normalize_sentinel, to_float

logger = logging.getLogger(__name__)

US_COUNTRY = "United States"
ESTIMATE_MARKER = " est."
RATING_WIDTH = 4
REVENUE_MARKER = "(USD)"
SIZE_MARKER = "employees"


# ---------------------------------------------------------------------------
# Salary estimate
# ---------------------------------------------------------------------------

def parse_salary(text: Any) -> Tuple[Any, Any, Any]:
    """
    Split a salary estimate into ``(min_salary, max_salary, method)``.

    ``"$137K-$171K (Glassdoor est.)"`` → ``(137.0, 171.0, "Glassdoor")``.
    Each part is ABSENT on its own when its anchors are not found.
    """
    s = clean_text(text)
    if s is ABSENT:
        return ABSENT, ABSENT, ABSENT

    dollar = s.find("$")
    k = s.lower().find("k", dollar + 1)
    low = to_float(s[dollar + 1:k]) if dollar != -1 and k != -1 else ABSENT

    dash = s.find("-")
    paren = s.find("(", dash + 1)
    if dash != -1 and paren != -1:
        high = to_float(s[dash + 1:paren].replace("$", "").replace("K", "").replace("k", ""))
    else:
        high = ABSENT

    close = s.find(")", paren + 1) if paren != -1 else -1
    if paren != -1 and close != -1:
        inner = s[paren + 1:close]
        if inner.endswith(ESTIMATE_MARKER):
            inner = inner[:-len(ESTIMATE_MARKER)]
        method = clean_text(inner)
    else:
        method = ABSENT

    if ABSENT in (low, high, method):
        logger.debug("Partial salary parse for %r", s)
    return low, high, method


# ---------------------------------------------------------------------------
# Company name / rating
# ---------------------------------------------------------------------------

def parse_company_rating(text: Any) -> Tuple[Any, Any]:
    """
    Strip a rating glued onto the company name.

    ``"Lyft\\n3.8"`` → ``("Lyft", 3.8)``; ``"Lyft"`` → ``("Lyft", ABSENT)``.
    """
    s = clean_text(text)
    if s is ABSENT:
        return ABSENT, ABSENT
    tail = s[-RATING_WIDTH:]
    try:
        rating = float(tail)
    except ValueError:
        return s, ABSENT
    if len(s) <= RATING_WIDTH or not math.isfinite(rating):
        return s, ABSENT
    return clean_text(s[:-RATING_WIDTH]), rating


# ---------------------------------------------------------------------------
# Location / headquarters
# ---------------------------------------------------------------------------

def parse_location(text: Any) -> Tuple[Any, Any]:
    """
    ``"New York, NY"`` → ``("New York", "NY")``.

    Anything not ending in a two-character state token is all city.
    """
    s = clean_text(text)
    if s is ABSENT:
        return ABSENT, ABSENT
    tail = s[-3:].strip()
    if len(s) > 3 and len(tail) == 2:
        return clean_text(s[:-4]), tail
    return s, ABSENT


def parse_headquarters(text: Any) -> Tuple[Any, Any]:
    """
    ``"Mountain View, CA"`` → ``("Mountain View", "CA")``.

    Returns ``(hq_city, remainder)``; the remainder is a state code or a
    country name, see :func:`split_state_country`.
    """
    s = clean_text(normalize_sentinel(text, ("-1",)))
    if s is ABSENT:
        return ABSENT, ABSENT
    comma = s.find(",")
    if comma == -1:
        logger.debug("Headquarters without comma: %r", s)
        return ABSENT, ABSENT
    city = clean_text(s[:comma])
    remainder = clean_text(s[comma + 1:])
    if remainder == "1":
        remainder = ABSENT
    return city, remainder


def split_state_country(remainder: Any) -> Tuple[Any, Any]:
    """
    Decide whether a headquarters remainder is a US state or a country.

    Returns ``(hq_state, hq_country)``.
    """
    if remainder is ABSENT:
        return ABSENT, ABSENT
    if len(remainder) > 2:
        return ABSENT, remainder
    return remainder, US_COUNTRY


# ---------------------------------------------------------------------------
# Size / revenue
# ---------------------------------------------------------------------------

def parse_company_size(text: Any) -> Any:
    """
    ``"1001 to 5000 employees"`` → ``"1001-5000"``;
    ``"10000+ employees"`` → ``"10000+"``.
    """
    s = clean_text(normalize_sentinel(text, ("-1", "Unknown")))
    if s is ABSENT:
        return ABSENT
    idx = s.find(SIZE_MARKER)
    if idx == -1:
        return ABSENT
    if "+" in s:
        return clean_text(s[:idx - 1])
    return clean_text(s[:idx].replace(" to ", "-"))


def parse_revenue(text: Any) -> Any:
    """``"$1 to $2 billion (USD)"`` → ``"1 to 2 billion"``."""
    s = clean_text(text)
    if s is ABSENT:
        return ABSENT
    idx = s.find(REVENUE_MARKER)
    if idx == -1:
        return ABSENT
    return clean_text(s[:idx].replace("$", ""))

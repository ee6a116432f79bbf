"""
jobs_pipeline.py – parse, widen, repair, classify and finalize job postings.

The salary-range widening needs every row of a duplicate group before any
row can be emitted, so :func:`run` materializes the parsed table first,
builds the group bounds once, then enriches row by row.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Union

from .classifier import classify_level, classify_role, extract_skills
from .cleaning import (
    ABSENT,
    JOB_PLACEHOLDERS,
    JOB_PLACEHOLDERS_UNKNOWN,
    clean_text,
    normalize_sentinel,
    normalize_title,
    to_int,
)
from .dedup import absent_first, distinct, sequence, widen_ranges
from .field_parsers import (
    parse_company_rating,
    parse_company_size,
    parse_headquarters,
    parse_location,
    parse_revenue,
    parse_salary,
    split_state_country,
)
from .models import EnrichedJobPosting, ParsedPosting, RawJobPosting

logger = logging.getLogger(__name__)


def parse_posting(raw: RawJobPosting) -> ParsedPosting:
    """Split the salary estimate and the rating glued to the company name."""
    low, high, method = parse_salary(raw.salary_estimate)
    name, rating = parse_company_rating(raw.company_name)
    return ParsedPosting(
        raw=raw,
        min_salary=low,
        max_salary=high,
        salary_estimation_method=method,
        company_name=name,
        company_rating=rating,
    )


def _placeholder(value: Any, tokens=JOB_PLACEHOLDERS) -> Any:
    return clean_text(normalize_sentinel(value, tokens))


def enrich(parsed: ParsedPosting, min_salary: Any, max_salary: Any) -> EnrichedJobPosting:
    """Build the enriched posting from a parsed row and its widened salary range."""
    raw = parsed.raw
    city, state = parse_location(raw.location)
    hq_city, hq_remainder = parse_headquarters(raw.headquarters)
    hq_state, hq_country = split_state_country(hq_remainder)
    title_cleaned = normalize_title(raw.job_title)
    description = clean_text(raw.job_description)

    return EnrichedJobPosting(
        job_title=clean_text(raw.job_title),
        job_description=description,
        min_salary=min_salary,
        max_salary=max_salary,
        salary_estimation_method=parsed.salary_estimation_method,
        company_name=parsed.company_name,
        company_rating=parsed.company_rating,
        location_city=city,
        location_state=state,
        hq_city=hq_city,
        hq_state=hq_state,
        hq_country=hq_country,
        company_size=parse_company_size(raw.size),
        founded_year=to_int(_placeholder(raw.founded)),
        type_of_ownership=_placeholder(raw.type_of_ownership, JOB_PLACEHOLDERS_UNKNOWN),
        industry=_placeholder(raw.industry),
        sector=_placeholder(raw.sector),
        revenue_usd=parse_revenue(_placeholder(raw.revenue)),
        competitors=_placeholder(raw.competitors),
        job_title_cleaned=title_cleaned,
        job_level=classify_level(title_cleaned, description),
        job_role=classify_role(title_cleaned),
        job_requirements=extract_skills(description),
    )


def finalize(postings: Iterable[EnrichedJobPosting]) -> List[Dict[str, Any]]:
    """Presentation rows, fully-identical rows collapsed, indexed by salary."""
    rows = distinct(p.to_output_row() for p in postings)
    return sequence(
        rows,
        sort_key=lambda r: (absent_first(r["min_salary"]), absent_first(r["max_salary"])),
        assign=lambda r, i: {"job_index": i, **r},
    )


def run(rows: Iterable[Union[RawJobPosting, Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    """Run the whole jobs pipeline over raw rows (records or column mappings)."""
    raw = [r if isinstance(r, RawJobPosting) else RawJobPosting.from_row(r) for r in rows]
    parsed = [parse_posting(r) for r in raw]
    widened = widen_ranges(
        parsed,
        key=ParsedPosting.group_key,
        low=lambda p: p.min_salary,
        high=lambda p: p.max_salary,
    )
    enriched = [enrich(p, low, high) for p, low, high in widened]
    out = finalize(enriched)
    missing_salary = sum(1 for e in enriched if e.min_salary is ABSENT)
    logger.info(
        "Jobs pipeline: %d raw rows -> %d clean rows (%d without salary)",
        len(raw), len(out), missing_salary,
    )
    return out

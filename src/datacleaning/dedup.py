"""
dedup.py – group-range widening, full-row distinct and output sequencing.

``widen_ranges`` is a window-style broadcast: every member of a group gets
the group's bounds, nothing is collapsed.  Collapsing happens afterwards in
``distinct`` on the complete output row.
"""

import logging
from typing import Any, Callable, Dict, Hashable, Iterable, List, Sequence, Tuple, TypeVar

from .cleaning import ABSENT, is_present

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _min(a, b):
    if a is ABSENT:
        return b
    if b is ABSENT:
        return a
    return min(a, b)


def _max(a, b):
    if a is ABSENT:
        return b
    if b is ABSENT:
        return a
    return max(a, b)


def group_bounds(
    items: Iterable[T],
    key: Callable[[T], Hashable],
    low: Callable[[T], Any],
    high: Callable[[T], Any],
) -> Dict[Hashable, Tuple[Any, Any]]:
    """
    ``{group key: (min of lows, max of highs)}`` over all *items*.

    Absent values are ignored; a group with no present value keeps ABSENT.
    """
    bounds: Dict[Hashable, Tuple[Any, Any]] = {}
    for item in items:
        k = key(item)
        lo, hi = bounds.get(k, (ABSENT, ABSENT))
        bounds[k] = (_min(lo, low(item)), _max(hi, high(item)))
    return bounds


def widen_ranges(
    items: Sequence[T],
    key: Callable[[T], Hashable],
    low: Callable[[T], Any],
    high: Callable[[T], Any],
) -> List[Tuple[T, Any, Any]]:
    """Pair each item with its group's widened ``(low, high)`` range."""
    bounds = group_bounds(items, key, low, high)
    logger.info("Widened ranges over %d rows in %d groups", len(items), len(bounds))
    return [(item, *bounds[key(item)]) for item in items]


def _row_identity(row: Any) -> Hashable:
    if isinstance(row, dict):
        return tuple(row.items())
    return row


def distinct(rows: Iterable[T]) -> List[T]:
    """Drop rows fully identical to an earlier one, keeping input order."""
    seen = set()
    out: List[T] = []
    for row in rows:
        ident = _row_identity(row)
        if ident in seen:
            continue
        seen.add(ident)
        out.append(row)
    return out


def absent_first(value: Any) -> Tuple[int, Any]:
    """Sort key placing ABSENT/None before any present value."""
    if value is None or not is_present(value):
        return (0, 0)
    return (1, value)


def sequence(
    rows: Iterable[T],
    sort_key: Callable[[T], Any],
    assign: Callable[[T, int], T],
) -> List[T]:
    """Stable sort by *sort_key*, then number rows densely from 1."""
    ordered = sorted(rows, key=sort_key)
    return [assign(row, index) for index, row in enumerate(ordered, start=1)]

"""
imputer.py – ordered fallback chains for the cafe sales fields.

A :class:`FallbackChain` is a priority list of candidate functions.  The
first candidate returning a present value wins; when every candidate is
absent the chain's literal default is used, so resolution is total.
"""

import logging
from datetime import date
from typing import Any, Callable, Sequence

from .cleaning import ABSENT, is_present, safe_div, safe_mul
from .models import CleanedRecord, PricedRecord

logger = logging.getLogger(__name__)

Candidate = Callable[[Any], Any]


class FallbackChain:
    """Ordered candidates ending in a literal default."""

    def __init__(self, name: str, candidates: Sequence[Candidate], default: Any):
        if default is ABSENT or default is None:
            raise ValueError(f"Fallback chain {name!r} needs a literal default")
        self.name = name
        self.candidates = tuple(candidates)
        self.default = default

    def resolve(self, record: Any) -> Any:
        for candidate in self.candidates:
            value = candidate(record)
            if is_present(value):
                return value
        logger.debug("%s: all candidates absent, using default %r", self.name, self.default)
        return self.default

    def __repr__(self):
        return f"FallbackChain({self.name!r}, {len(self.candidates)} candidates)"


# ---------------------------------------------------------------------------
# Price table
# ---------------------------------------------------------------------------

ITEM_PRICES = {
    "Coffee": 2.0,
    "Cake": 3.0,
    "Cookie": 1.0,
    "Salad": 5.0,
    "Smoothie": 4.0,
    "Sandwich": 4.0,
    "Juice": 3.0,
    "Tea": 1.5,
}
_PRICES_FOLDED = {name.casefold(): price for name, price in ITEM_PRICES.items()}

# Mean price of the menu, used when nothing else identifies the item.
DEFAULT_ITEM_PRICE = 2.9

UNKNOWN_ITEM = "AVGpro"
JUICE_OR_CAKE = "JuORCa"
SMOOTHIE_OR_SANDWICH = "SmORSa"

# Keys are prices rendered with one decimal place, see price_key(). Any
# price from 2.95 up to 3.05 therefore reads as JuORCa.
PRICE_LABELS = {
    "1.0": "Cookie",
    "1.5": "Tea",
    "2.0": "Coffee",
    "2.9": UNKNOWN_ITEM,
    "3.0": JUICE_OR_CAKE,
    "4.0": SMOOTHIE_OR_SANDWICH,
    "5.0": "Salad",
}

DEFAULT_QUANTITY = 1.0
DEFAULT_PAYMENT_METHOD = "N/A"
DEFAULT_LOCATION = "N/A"
DEFAULT_TRANSACTION_DATE = date(2025, 1, 1)

# A quantity imputed as total / price divides back to that price within a
# few ulps; rounding here makes the round trip exact.
PRICE_PRECISION = 10


def lookup_price(item: Any) -> Any:
    """Fixed menu price for *item* (case-insensitive), else ABSENT."""
    if item is ABSENT:
        return ABSENT
    return _PRICES_FOLDED.get(item.casefold(), ABSENT)


def unit_price(record: CleanedRecord) -> Any:
    """``total_spent / quantity`` rounded to PRICE_PRECISION, or ABSENT."""
    price = safe_div(record.total_spent, record.quantity)
    return round(price, PRICE_PRECISION) if is_present(price) else price


def price_key(price: float) -> str:
    """Canonical text form of a price: ``2`` → ``"2.0"``, ``1.5`` → ``"1.5"``."""
    return f"{price:.1f}"


# ---------------------------------------------------------------------------
# Chains
# ---------------------------------------------------------------------------

ITEM_PRICE_CHAIN = FallbackChain(
    "item_price",
    [
        lambda r: lookup_price(r.item),
        unit_price,
        lambda r: r.price_per_unit,
    ],
    DEFAULT_ITEM_PRICE,
)

QUANTITY_CHAIN = FallbackChain(
    "quantity",
    [
        lambda p: p.record.quantity,
        lambda p: safe_div(p.record.total_spent, p.item_price),
    ],
    DEFAULT_QUANTITY,
)

# item_price is always present, so the final candidate always resolves and
# the 0.0 default is never reached.
TOTAL_SPENT_CHAIN = FallbackChain(
    "total_spent",
    [
        lambda p: p.record.total_spent,
        lambda p: safe_mul(
            p.item_price,
            p.record.quantity if is_present(p.record.quantity) else DEFAULT_QUANTITY,
        ),
        lambda p: p.item_price,
    ],
    0.0,
)

PAYMENT_METHOD_CHAIN = FallbackChain(
    "payment_method", [lambda p: p.record.payment_method], DEFAULT_PAYMENT_METHOD)

LOCATION_CHAIN = FallbackChain(
    "location", [lambda p: p.record.location], DEFAULT_LOCATION)

TRANSACTION_DATE_CHAIN = FallbackChain(
    "transaction_date", [lambda p: p.record.transaction_date], DEFAULT_TRANSACTION_DATE)


def impute_price(record: CleanedRecord) -> PricedRecord:
    """Attach the resolved ``item_price`` to a cleaned record."""
    return PricedRecord(record=record, item_price=float(ITEM_PRICE_CHAIN.resolve(record)))


def resolve_item_label(item: Any, item_price: float) -> Any:
    """
    Canonical item name.

    A known item text is kept.  Otherwise the price is mapped back to a menu
    item; prices shared by two items, and the default price, map to the
    ambiguity placeholders.  Prices matching no bucket keep *item* (ABSENT).
    """
    if is_present(item):
        return item
    return PRICE_LABELS.get(price_key(item_price), item)

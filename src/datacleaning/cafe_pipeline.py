"""
cafe_pipeline.py – Extract → Repair → Infer → Finalize for cafe sales.

Stages, each consuming the full output of the previous one:

1. :func:`clean_sales`   – sentinels to ABSENT, numeric/date coercion.
2. :func:`impute_price`  – resolve ``item_price`` (see ``imputer``).
3. :func:`finalize`      – item label, quantity, total, payment, location, date.
4. :func:`sequence_orders` – drop duplicate rows, number by transaction date.
"""

import logging
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Union

from .cleaning import CAFE_SENTINELS, clean_text, normalize_sentinel, parse_date, to_float
from .dedup import distinct, sequence
from .imputer import (
    LOCATION_CHAIN,
    PAYMENT_METHOD_CHAIN,
    QUANTITY_CHAIN,
    TOTAL_SPENT_CHAIN,
    TRANSACTION_DATE_CHAIN,
    impute_price,
    resolve_item_label,
)
from .models import CleanedRecord, FinalRecord, PricedRecord, RawRecord

logger = logging.getLogger(__name__)


def _text(value: Any) -> Any:
    return clean_text(normalize_sentinel(value, CAFE_SENTINELS))


def clean_sales(raw: RawRecord) -> CleanedRecord:
    """Replace ``ERROR``/``UNKNOWN`` with ABSENT and cast numeric/date columns."""
    return CleanedRecord(
        transaction_id=clean_text(raw.transaction_id),
        item=_text(raw.item),
        quantity=to_float(_text(raw.quantity)),
        price_per_unit=to_float(_text(raw.price_per_unit)),
        total_spent=to_float(_text(raw.total_spent)),
        payment_method=_text(raw.payment_method),
        location=_text(raw.location),
        transaction_date=parse_date(_text(raw.transaction_date)),
    )


def finalize(priced: PricedRecord) -> FinalRecord:
    """Fill every remaining gap from its fallback chain."""
    return FinalRecord(
        transaction_id=priced.record.transaction_id,
        new_item=resolve_item_label(priced.record.item, priced.item_price),
        item_price=priced.item_price,
        new_quantity=float(QUANTITY_CHAIN.resolve(priced)),
        new_total_spent=float(TOTAL_SPENT_CHAIN.resolve(priced)),
        new_payment_method=PAYMENT_METHOD_CHAIN.resolve(priced),
        new_location=LOCATION_CHAIN.resolve(priced),
        new_transaction_date=TRANSACTION_DATE_CHAIN.resolve(priced),
    )


def sequence_orders(records: Iterable[FinalRecord]) -> List[FinalRecord]:
    """Collapse identical rows and assign ``order_id`` by transaction date."""
    unique = distinct(replace(r, order_id=0) for r in records)
    return sequence(
        unique,
        sort_key=lambda r: r.new_transaction_date,
        assign=lambda r, i: replace(r, order_id=i),
    )


def run(rows: Iterable[Union[RawRecord, Mapping[str, Any]]]) -> List[FinalRecord]:
    """Run the whole cafe pipeline over raw rows (records or column mappings)."""
    raw = [r if isinstance(r, RawRecord) else RawRecord.from_row(r) for r in rows]
    cleaned = [clean_sales(r) for r in raw]
    priced = [impute_price(r) for r in cleaned]
    final = [finalize(p) for p in priced]
    ordered = sequence_orders(final)
    logger.info("Cafe pipeline: %d raw rows -> %d clean rows", len(raw), len(ordered))
    return ordered

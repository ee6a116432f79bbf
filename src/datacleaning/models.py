"""
models.py – record types for every pipeline stage.

Records are frozen: each stage derives a new record sharing the same key
instead of mutating the previous one.
"""

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Dict, Mapping, Optional, Union

from .cleaning import ABSENT, AbsentType, is_present, to_db

MaybeStr = Union[str, AbsentType]
MaybeFloat = Union[float, AbsentType]
MaybeInt = Union[int, AbsentType]
MaybeDate = Union[date, AbsentType]

NOT_AVAILABLE = "N/A"


def normalize_header(name: str) -> str:
    """``"Transaction ID"`` / ``"Transaction_ID"`` → ``"transaction_id"``."""
    return "_".join(str(name).strip().lower().split())


def _from_mapping(cls, row: Mapping[str, Any]):
    by_key = {normalize_header(k): v for k, v in row.items()}
    return cls(**{f.name: by_key.get(f.name) for f in fields(cls)})


# ---------------------------------------------------------------------------
# Cafe sales
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RawRecord:
    """One cafe transaction exactly as ingested: untyped text, maybe sentinels."""
    transaction_id: Optional[str]
    item: Optional[str]
    quantity: Optional[str]
    price_per_unit: Optional[str]
    total_spent: Optional[str]
    payment_method: Optional[str]
    location: Optional[str]
    transaction_date: Optional[str]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "RawRecord":
        return _from_mapping(cls, row)


@dataclass(frozen=True)
class CleanedRecord:
    transaction_id: MaybeStr
    item: MaybeStr
    quantity: MaybeFloat
    price_per_unit: MaybeFloat
    total_spent: MaybeFloat
    payment_method: MaybeStr
    location: MaybeStr
    transaction_date: MaybeDate


@dataclass(frozen=True)
class PricedRecord:
    record: CleanedRecord
    item_price: float


@dataclass(frozen=True)
class FinalRecord:
    """Fully repaired transaction; ``order_id`` is set by the sequencer."""
    transaction_id: MaybeStr
    new_item: MaybeStr
    item_price: float
    new_quantity: float
    new_total_spent: float
    new_payment_method: str
    new_location: str
    new_transaction_date: date
    order_id: int = 0

    def to_row(self) -> Dict[str, Any]:
        """Row for the cleaned table, keyed by its column names."""
        return {
            "order_id": self.order_id,
            "transaction_id": to_db(self.transaction_id),
            "item": to_db(self.new_item),
            "item_price": self.item_price,
            "quantity": self.new_quantity,
            "total_spent": self.new_total_spent,
            "payment_method": self.new_payment_method,
            "location": self.new_location,
            "transaction_date": self.new_transaction_date,
        }


CAFE_OUTPUT_COLUMNS = (
    "order_id", "transaction_id", "item", "item_price", "quantity",
    "total_spent", "payment_method", "location", "transaction_date",
)


# ---------------------------------------------------------------------------
# Data jobs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RawJobPosting:
    job_title: Optional[str]
    job_description: Optional[str]
    location: Optional[str]
    headquarters: Optional[str]
    size: Optional[str]
    founded: Optional[str]
    type_of_ownership: Optional[str]
    industry: Optional[str]
    sector: Optional[str]
    revenue: Optional[str]
    competitors: Optional[str]
    salary_estimate: Optional[str]
    company_name: Optional[str]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "RawJobPosting":
        return _from_mapping(cls, row)


@dataclass(frozen=True)
class ParsedPosting:
    """Raw posting plus salary and company-name sub-fields."""
    raw: RawJobPosting
    min_salary: MaybeFloat
    max_salary: MaybeFloat
    salary_estimation_method: MaybeStr
    company_name: MaybeStr
    company_rating: MaybeFloat

    def group_key(self) -> tuple:
        """Natural key used to widen salary ranges across duplicates."""
        return (
            self.raw.job_title,
            self.company_name,
            self.company_rating,
            self.raw.location,
            self.raw.headquarters,
        )


@dataclass(frozen=True)
class EnrichedJobPosting:
    job_title: MaybeStr
    job_description: MaybeStr
    min_salary: MaybeFloat
    max_salary: MaybeFloat
    salary_estimation_method: MaybeStr
    company_name: MaybeStr
    company_rating: MaybeFloat
    location_city: MaybeStr
    location_state: MaybeStr
    hq_city: MaybeStr
    hq_state: MaybeStr
    hq_country: MaybeStr
    company_size: MaybeStr
    founded_year: MaybeInt
    type_of_ownership: MaybeStr
    industry: MaybeStr
    sector: MaybeStr
    revenue_usd: MaybeStr
    competitors: MaybeStr
    job_title_cleaned: MaybeStr
    job_level: str
    job_role: MaybeStr
    job_requirements: MaybeStr

    def to_output_row(self) -> Dict[str, Any]:
        """
        Presentation row for the cleaned table.

        Columns the cleaned table shows as ``"N/A"`` get that text when
        absent; the remaining absent values become NULL.
        """
        def na(value):
            return str(value) if is_present(value) else NOT_AVAILABLE

        return {
            "Job_Title": to_db(self.job_title),
            "job_role": to_db(self.job_role),
            "job_level": self.job_level,
            "job_requirements": na(self.job_requirements),
            "min_salary": to_db(self.min_salary),
            "max_salary": to_db(self.max_salary),
            "salary_estimation_method": to_db(self.salary_estimation_method),
            "company_name": to_db(self.company_name),
            "company_rating": na(self.company_rating),
            "location_city": to_db(self.location_city),
            "location_state": na(self.location_state),
            "hq_country": na(self.hq_country),
            "hq_state": na(self.hq_state),
            "hq_city": na(self.hq_city),
            "company_size": na(self.company_size),
            "founded_year": na(self.founded_year),
            "type_of_ownership": na(self.type_of_ownership),
            "industry": na(self.industry),
            "sector": na(self.sector),
            "revenue_usd": na(self.revenue_usd),
            "competitors": na(self.competitors),
            "Job_Description": to_db(self.job_description),
        }


JOB_OUTPUT_COLUMNS = (
    "job_index", "Job_Title", "job_role", "job_level", "job_requirements",
    "min_salary", "max_salary", "salary_estimation_method", "company_name",
    "company_rating", "location_city", "location_state", "hq_country",
    "hq_state", "hq_city", "company_size", "founded_year",
    "type_of_ownership", "industry", "sector", "revenue_usd", "competitors",
    "Job_Description",
)

__all__ = [
    "ABSENT", "NOT_AVAILABLE", "CAFE_OUTPUT_COLUMNS", "JOB_OUTPUT_COLUMNS",
    "normalize_header",
    "RawRecord", "CleanedRecord", "PricedRecord", "FinalRecord",
    "RawJobPosting", "ParsedPosting", "EnrichedJobPosting",
]

"""
load_data.py – ETL against PostgreSQL: ingest raw CSV exports into TEXT
tables, scan them, run a cleaning pipeline and write the cleaned table.

- ``read_csv()`` / ``load_raw_csv()`` populate the raw tables.
- ``run_pipeline()`` reads a raw table in full, cleans it and re-creates the
  matching clean table inside one transaction.
- ``main()`` ties both together for the command line::

    python -m datacleaning.load_data cafe --csv data/dirty_cafe_sales.csv
"""

import csv
import logging
import os
from dataclasses import fields
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from psycopg import sql
from psycopg.rows import dict_row

from . import cafe_pipeline, jobs_pipeline
from .db_utils import get_conn
from .models import (
    CAFE_OUTPUT_COLUMNS,
    JOB_OUTPUT_COLUMNS,
    FinalRecord,
    RawJobPosting,
    RawRecord,
    normalize_header,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------
RAW_CAFE_TABLE = "cafe_sales"
CLEAN_CAFE_TABLE = "cafe_sales_clean"
RAW_JOBS_TABLE = "uncleaned_ds_jobs"
CLEAN_JOBS_TABLE = "cleaned_datajobs"

RAW_CAFE_COLUMNS = tuple(f.name for f in fields(RawRecord))
RAW_JOBS_COLUMNS = tuple(f.name for f in fields(RawJobPosting))

CAFE_CLEAN_TYPES = {
    "order_id": "INTEGER PRIMARY KEY",
    "item_price": "DOUBLE PRECISION",
    "quantity": "DOUBLE PRECISION",
    "total_spent": "DOUBLE PRECISION",
    "transaction_date": "DATE",
}
JOBS_CLEAN_TYPES = {
    "job_index": "INTEGER PRIMARY KEY",
    "min_salary": "DOUBLE PRECISION",
    "max_salary": "DOUBLE PRECISION",
}


def _column_defs(columns: Sequence[str], types: Mapping[str, str]) -> sql.Composable:
    return sql.SQL(", ").join(
        sql.SQL("{} {}").format(sql.Identifier(c), sql.SQL(types.get(c, "TEXT")))
        for c in columns
    )


def _insert_sql(table: str, columns: Sequence[str]) -> sql.Composable:
    return sql.SQL("INSERT INTO {} ({}) VALUES ({})").format(
        sql.Identifier(table),
        sql.SQL(", ").join(sql.Identifier(c) for c in columns),
        sql.SQL(", ").join(sql.Placeholder() * len(columns)),
    )


# ---------------------------------------------------------------------------
# CSV ingestion
# ---------------------------------------------------------------------------

def read_csv(path: str) -> Iterator[Dict[str, Any]]:
    """
    Stream a CSV export as dicts keyed by normalized column names.

    ``"Transaction ID"`` and ``"Transaction_ID"`` both become
    ``"transaction_id"``; empty cells become ``None``.
    """
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            yield {
                normalize_header(k): (v if v != "" else None)
                for k, v in row.items()
                if k is not None
            }


def ensure_raw_table(conn, table: str, columns: Sequence[str]) -> None:
    """Create an all-TEXT raw table if it does not exist.  Idempotent."""
    with conn.cursor() as cur:
        cur.execute(sql.SQL("CREATE TABLE IF NOT EXISTS {} ({})").format(
            sql.Identifier(table), _column_defs(columns, {})))


def insert_raw_rows(conn, table: str, columns: Sequence[str],
                    rows: Iterable[Mapping[str, Any]]) -> int:
    """Insert raw rows (text values, missing columns as NULL)."""
    params = [
        tuple(None if row.get(c) is None else str(row.get(c)) for c in columns)
        for row in rows
    ]
    if not params:
        return 0
    with conn.cursor() as cur:
        cur.executemany(_insert_sql(table, columns), params)
    return len(params)


def load_raw_csv(table: str, columns: Sequence[str], path: str,
                 config: Optional[Mapping[str, Any]] = None) -> int:
    """Append the rows of a CSV export to a raw table; returns rows inserted."""
    if not os.path.exists(path):
        raise FileNotFoundError(
            f"Missing CSV at {path}\n"
            "Fix: export the raw sheet as CSV and pass its path with --csv"
        )
    conn = get_conn(config)
    try:
        ensure_raw_table(conn, table, columns)
        inserted = insert_raw_rows(conn, table, columns, read_csv(path))
        conn.commit()
    finally:
        conn.close()
    logger.info("Loaded %d rows from %s into %s", inserted, path, table)
    return inserted


# ---------------------------------------------------------------------------
# Scans / writes
# ---------------------------------------------------------------------------

def fetch_rows(conn, table: str, columns: Sequence[str]) -> List[Dict[str, Any]]:
    """Full-table scan of *columns* as dict rows."""
    with conn.cursor(row_factory=dict_row) as cur:
        cur.execute(sql.SQL("SELECT {} FROM {}").format(
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            sql.Identifier(table)))
        return cur.fetchall()


def replace_table(conn, table: str, columns: Sequence[str], types: Mapping[str, str],
                  rows: Iterable[Sequence[Any]]) -> int:
    """Drop and re-create *table*, then insert *rows*.  Caller commits."""
    params = list(rows)
    with conn.cursor() as cur:
        cur.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(table)))
        cur.execute(sql.SQL("CREATE TABLE {} ({})").format(
            sql.Identifier(table), _column_defs(columns, types)))
        if params:
            cur.executemany(_insert_sql(table, columns), params)
    return len(params)


def write_cafe_clean(conn, records: Iterable[FinalRecord],
                     table: str = CLEAN_CAFE_TABLE) -> int:
    rows = (r.to_row() for r in records)
    params = (tuple(row[c] for c in CAFE_OUTPUT_COLUMNS) for row in rows)
    return replace_table(conn, table, CAFE_OUTPUT_COLUMNS, CAFE_CLEAN_TYPES, params)


def write_jobs_clean(conn, rows: Iterable[Mapping[str, Any]],
                     table: str = CLEAN_JOBS_TABLE) -> int:
    params = (tuple(row[c] for c in JOB_OUTPUT_COLUMNS) for row in rows)
    return replace_table(conn, table, JOB_OUTPUT_COLUMNS, JOBS_CLEAN_TYPES, params)


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

PIPELINES = {
    "cafe": (RAW_CAFE_TABLE, RAW_CAFE_COLUMNS, cafe_pipeline.run, write_cafe_clean),
    "jobs": (RAW_JOBS_TABLE, RAW_JOBS_COLUMNS, jobs_pipeline.run, write_jobs_clean),
}


def _pipeline(name: str):
    try:
        return PIPELINES[name]
    except KeyError:
        raise ValueError(
            f"Unknown pipeline {name!r}; expected one of {', '.join(sorted(PIPELINES))}"
        ) from None


def run_pipeline(name: str, config: Optional[Mapping[str, Any]] = None) -> Tuple[int, int]:
    """
    Clean one raw table into its clean table.

    Returns ``(rows read, rows written)``.  The clean table is replaced in a
    single transaction, so a failure leaves the previous one untouched.
    """
    raw_table, columns, run, write = _pipeline(name)
    conn = get_conn(config)
    try:
        ensure_raw_table(conn, raw_table, columns)
        raw_rows = fetch_rows(conn, raw_table, columns)
        cleaned = run(raw_rows)
        written = write(conn, cleaned)
        conn.commit()
    finally:
        conn.close()
    return len(raw_rows), written


# ---------------------------------------------------------------------------
# Main ETL entry-point
# ---------------------------------------------------------------------------

def main(config: Optional[Mapping[str, Any]] = None, pipeline: str = "cafe",
         csv_path: Optional[str] = None):
    """
    Optionally ingest a CSV export, then run one cleaning pipeline.

    Parameters
    ----------
    config :
        Optional mapping whose ``DATABASE_URL`` overrides the environment.
    pipeline :
        ``"cafe"`` or ``"jobs"``.
    csv_path :
        CSV export to append to the pipeline's raw table first.
    """
    raw_table, columns, _, _ = _pipeline(pipeline)
    if csv_path:
        load_raw_csv(raw_table, columns, csv_path, config)

    read_rows, written = run_pipeline(pipeline, config)

    print(f"=== load_data.py [{pipeline}] completed ===")
    print(f"  Read rows    : {read_rows}")
    print(f"  Written rows : {written}")
    return read_rows, written


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Clean a raw table into its clean table")
    parser.add_argument("pipeline", choices=sorted(PIPELINES), help="Which dataset to clean")
    parser.add_argument("--csv", dest="csv_path", help="CSV export to load into the raw table first")
    parser.add_argument("--verbose", action="store_true", help="Log parser misses and fallbacks")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    main(pipeline=args.pipeline, csv_path=args.csv_path)

"""SQL analysis queries over the cleaned cafe sales table."""
from typing import Any, Mapping, Optional

from psycopg import sql

from .db_utils import get_conn
from .load_data import CLEAN_CAFE_TABLE

# Transactions with no usable date are filed under 2025-01-01, so January
# 2025 is incomplete and left out of the monthly trend.
EXCLUDED_MONTH = "2025-01"


def fetch_monthly_sales(cur, table: str = CLEAN_CAFE_TABLE):
    """``(month, revenue, % vs average month, % vs previous month)`` rows."""
    cur.execute(sql.SQL("""
        WITH monthly_sales AS (
            SELECT to_char(transaction_date, 'YYYY-MM') AS month,
                   SUM(total_spent) AS total_monthly_sales
            FROM {table}
            WHERE to_char(transaction_date, 'YYYY-MM') <> %s
            GROUP BY 1
        )
        SELECT month,
               ROUND(total_monthly_sales::numeric, 2),
               ROUND(((total_monthly_sales - AVG(total_monthly_sales) OVER ())
                      / NULLIF(AVG(total_monthly_sales) OVER (), 0) * 100)::numeric, 1),
               ROUND(((total_monthly_sales - LAG(total_monthly_sales) OVER (ORDER BY month))
                      / NULLIF(LAG(total_monthly_sales) OVER (ORDER BY month), 0) * 100)::numeric, 1)
        FROM monthly_sales
        ORDER BY month;
    """).format(table=sql.Identifier(table)), (EXCLUDED_MONTH,))
    return cur.fetchall()


def fetch_item_contribution(cur, table: str = CLEAN_CAFE_TABLE):
    """``(item, quantity, revenue, % of revenue)`` rows, biggest earner first."""
    cur.execute(sql.SQL("""
        SELECT item,
               SUM(quantity) AS item_quantity,
               ROUND(SUM(total_spent)::numeric, 2) AS item_total_sales,
               ROUND((SUM(total_spent) / NULLIF(SUM(SUM(total_spent)) OVER (), 0) * 100)::numeric, 1)
        FROM {table}
        GROUP BY item
        ORDER BY item_total_sales DESC;
    """).format(table=sql.Identifier(table)))
    return cur.fetchall()


def _distribution(cur, column: str, table: str):
    cur.execute(sql.SQL("""
        SELECT {col},
               COUNT(order_id)::int,
               ROUND((COUNT(order_id) / NULLIF(SUM(COUNT(order_id)) OVER (), 0)::float * 100)::numeric, 1)
        FROM {table}
        GROUP BY {col}
        ORDER BY COUNT(order_id) DESC;
    """).format(col=sql.Identifier(column), table=sql.Identifier(table)))
    return cur.fetchall()


def fetch_location_distribution(cur, table: str = CLEAN_CAFE_TABLE):
    """``(location, orders, % of orders)`` rows."""
    return _distribution(cur, "location", table)


def fetch_payment_distribution(cur, table: str = CLEAN_CAFE_TABLE):
    """``(payment_method, orders, % of orders)`` rows."""
    return _distribution(cur, "payment_method", table)


def fetch_metrics(config: Optional[Mapping[str, Any]] = None) -> dict:
    """Fetch all analysis result sets from the database."""
    metrics = {
        "total_orders": None, "total_revenue": None,
        "monthly_sales": [], "item_contribution": [],
        "location_distribution": [], "payment_distribution": [],
    }
    conn = get_conn(config)
    try:
        with conn.cursor() as cur:
            cur.execute(sql.SQL(
                "SELECT COUNT(*), ROUND(SUM(total_spent)::numeric, 2) FROM {}"
            ).format(sql.Identifier(CLEAN_CAFE_TABLE)))
            metrics["total_orders"], metrics["total_revenue"] = cur.fetchone()
            metrics["monthly_sales"] = fetch_monthly_sales(cur)
            metrics["item_contribution"] = fetch_item_contribution(cur)
            metrics["location_distribution"] = fetch_location_distribution(cur)
            metrics["payment_distribution"] = fetch_payment_distribution(cur)
    finally:
        conn.close()
    return metrics


def main():
    """CLI entry point for running queries."""
    m = fetch_metrics()
    print(f"Total orders: {m['total_orders']}, Revenue: {m['total_revenue']}")
    for month, revenue, vs_avg, vs_prev in m["monthly_sales"]:
        print(f"  {month}  {revenue:>10}  avg {vs_avg} %  prev {vs_prev} %")
    for item, qty, revenue, share in m["item_contribution"]:
        print(f"  {item}: qty={qty} revenue={revenue} ({share} %)")
    for label, key in (("Location", "location_distribution"),
                       ("Payment", "payment_distribution")):
        for value, orders, share in m[key]:
            print(f"  {label} {value}: {orders} ({share} %)")


if __name__ == "__main__":
    main()

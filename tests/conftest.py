import os
import sys
import pytest
import psycopg
from psycopg import sql

SRC_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from datacleaning import load_data

TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "dbname=datacleaning_test user={user} host=localhost port=5432".format(
        user=os.getenv("PGUSER", os.getenv("USER", "postgres"))
    ),
)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: pure cleaning logic, no database")
    config.addinivalue_line("markers", "db: round trips through PostgreSQL")
    config.addinivalue_line("markers", "analysis: reporting queries over cleaned tables")


@pytest.fixture()
def config():
    return {"DATABASE_URL": TEST_DATABASE_URL}


@pytest.fixture()
def db_conn(config):
    try:
        conn = psycopg.connect(config["DATABASE_URL"], connect_timeout=3)
    except psycopg.OperationalError as exc:
        pytest.skip(f"PostgreSQL not reachable: {exc}")
    yield conn
    conn.close()


@pytest.fixture()
def empty_db(db_conn):
    tables = (load_data.RAW_CAFE_TABLE, load_data.CLEAN_CAFE_TABLE,
              load_data.RAW_JOBS_TABLE, load_data.CLEAN_JOBS_TABLE)
    with db_conn.cursor() as cur:
        for t in tables:
            cur.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(t)))
    db_conn.commit()
    yield
    with db_conn.cursor() as cur:
        for t in tables:
            cur.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(t)))
    db_conn.commit()


@pytest.fixture()
def cafe_rows():
    return [
        {"Transaction ID": "TXN_1961373", "Item": "Coffee", "Quantity": "2",
         "Price Per Unit": "2.0", "Total Spent": "4.0", "Payment Method": "Credit Card",
         "Location": "Takeaway", "Transaction Date": "2023-09-08"},
        {"Transaction ID": "TXN_4977031", "Item": "Cake", "Quantity": "4",
         "Price Per Unit": "3.0", "Total Spent": "12.0", "Payment Method": "Cash",
         "Location": "In-store", "Transaction Date": "2023-05-16"},
        {"Transaction ID": "TXN_4271903", "Item": "Cookie", "Quantity": "4",
         "Price Per Unit": "1.0", "Total Spent": "ERROR", "Payment Method": "Credit Card",
         "Location": "In-store", "Transaction Date": "2023-07-19"},
        {"Transaction ID": "TXN_7034554", "Item": "UNKNOWN", "Quantity": "ERROR",
         "Price Per Unit": "UNKNOWN", "Total Spent": "6.0", "Payment Method": "ERROR",
         "Location": "UNKNOWN", "Transaction Date": "ERROR"},
        {"Transaction ID": "TXN_3160411", "Item": "Tea", "Quantity": "2",
         "Price Per Unit": "1.5", "Total Spent": "UNKNOWN", "Payment Method": "Digital Wallet",
         "Location": None, "Transaction Date": "2023-04-27"},
    ]


@pytest.fixture()
def job_rows():
    return [
        {"Job Title": "Sr Data Scientist",
         "Salary Estimate": "$137K-$171K (Glassdoor est.)",
         "Job Description": "Build models in Python and Spark on AWS.",
         "Rating": "3.1", "Company Name": "Healthfirst\n3.1",
         "Location": "New York, NY", "Headquarters": "New York, NY",
         "Size": "1001 to 5000 employees", "Founded": "1993",
         "Type of ownership": "Nonprofit Organization", "Industry": "Insurance Carriers",
         "Sector": "Insurance", "Revenue": "Unknown / Non-Applicable",
         "Competitors": "EmblemHealth, UnitedHealth Group, Aetna"},
        {"Job Title": "Sr Data Scientist",
         "Salary Estimate": "$120K-$190K (Glassdoor est.)",
         "Job Description": "Build models in Python and Spark on AWS.",
         "Rating": "3.1", "Company Name": "Healthfirst\n3.1",
         "Location": "New York, NY", "Headquarters": "New York, NY",
         "Size": "1001 to 5000 employees", "Founded": "1993",
         "Type of ownership": "Nonprofit Organization", "Industry": "Insurance Carriers",
         "Sector": "Insurance", "Revenue": "Unknown / Non-Applicable",
         "Competitors": "EmblemHealth, UnitedHealth Group, Aetna"},
        {"Job Title": "Data Analyst",
         "Salary Estimate": "$75K-$131K (Employer est.)",
         "Job Description": "Reporting in Excel and Tableau.",
         "Rating": "-1", "Company Name": "Tecolote Research",
         "Location": "Remote", "Headquarters": "London, United Kingdom",
         "Size": "10000+ employees", "Founded": "-1",
         "Type of ownership": "Unknown", "Industry": "-1",
         "Sector": "-1", "Revenue": "$1 to $2 billion (USD)",
         "Competitors": "-1"},
    ]

"""Database connection settings for the raw and clean tables."""
import os
from typing import Any, Mapping, Optional

import psycopg
from psycopg.conninfo import make_conninfo

# (conninfo keyword, environment variables in priority order, default)
CONNECTION_ENV = (
    ("dbname", ("DB_NAME", "PGDATABASE"), "datacleaning"),
    ("user", ("DB_USER", "PGUSER", "USER"), "postgres"),
    ("host", ("DB_HOST", "PGHOST"), "localhost"),
    ("port", ("DB_PORT", "PGPORT"), "5432"),
    ("password", ("DB_PASSWORD", "PGPASSWORD"), None),
)


def _first_env(names, default):
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def build_conninfo(config: Optional[Mapping[str, Any]] = None) -> str:
    """Return a psycopg3-compatible connection string.

    ``config["DATABASE_URL"]`` wins, then the ``DATABASE_URL`` environment
    variable, then one keyword per ``DB_*`` / ``PG*`` variable.

    Args:
        config: Optional mapping with a ``DATABASE_URL`` entry

    Returns:
        Connection string for psycopg.connect()
    """
    url = (config.get("DATABASE_URL") if config else None) or os.getenv("DATABASE_URL")
    if url:
        return url
    params = {key: _first_env(names, default) for key, names, default in CONNECTION_ENV}
    return make_conninfo(**{k: v for k, v in params.items() if v is not None})


def get_conn(config: Optional[Mapping[str, Any]] = None):
    """Open a psycopg3 connection for *config* (see :func:`build_conninfo`)."""
    return psycopg.connect(build_conninfo(config))

from contextlib import contextmanager

import psycopg

from swissqr.core.config import settings


@contextmanager
def get_db_connection(database_url: str | None = None):
    """
    Open a read-only PostgreSQL connection for customer and company lookups.
    """
    conninfo = database_url or settings.DATABASE_URL
    if not conninfo:
        raise RuntimeError("DATABASE_URL is not configured")

    conn = psycopg.connect(
        conninfo,
        options="-c search_path=public -c statement_timeout=30000 -c default_transaction_read_only=on",
    )
    try:
        yield conn
    finally:
        conn.close()

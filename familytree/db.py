from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path

import psycopg

SCHEMA_SQL = Path(__file__).resolve().parent / "schema.sql"


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


@contextmanager
def db_conn() -> psycopg.Connection:
    """Yield a database connection; the caller commits its own writes."""
    with psycopg.connect(get_database_url()) as conn:
        yield conn


def apply_schema(conn: psycopg.Connection) -> None:
    conn.execute(SCHEMA_SQL.read_text(encoding="utf-8"))
    conn.commit()

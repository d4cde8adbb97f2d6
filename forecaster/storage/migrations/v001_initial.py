"""Initial schema: one cached forecast record per city."""

import sqlite3

DDL = [
    # Last successful forecast per city, in the flat cache text format
    """
    CREATE TABLE IF NOT EXISTS forecast_cache (
        city_key TEXT PRIMARY KEY,
        record TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)

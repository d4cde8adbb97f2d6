"""Repository for persisted forecast cache records, keyed by city."""

import sqlite3


def save_record(conn: sqlite3.Connection, city_key: str, record: str) -> None:
    """Store the record for a city, replacing any previous one.

    A single upsert, so each write replaces one full record atomically.
    """
    conn.execute(
        "INSERT INTO forecast_cache (city_key, record, updated_at) "
        "VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(city_key) DO UPDATE SET "
        "record = excluded.record, updated_at = CURRENT_TIMESTAMP",
        (city_key, record),
    )
    conn.commit()


def get_record(conn: sqlite3.Connection, city_key: str) -> str:
    """Get the stored record for a city, or "" when there is none."""
    row = conn.execute(
        "SELECT record FROM forecast_cache WHERE city_key = ?", (city_key,)
    ).fetchone()
    if row is None:
        return ""
    return row[0]


def delete_record(conn: sqlite3.Connection, city_key: str) -> bool:
    """Delete a city's record. Returns True if one existed."""
    cursor = conn.execute(
        "DELETE FROM forecast_cache WHERE city_key = ?", (city_key,)
    )
    conn.commit()
    return cursor.rowcount > 0


def list_records(conn: sqlite3.Connection) -> list[dict]:
    """List cached cities with their last update time."""
    rows = conn.execute(
        "SELECT city_key, updated_at FROM forecast_cache ORDER BY city_key"
    ).fetchall()
    return [dict(r) for r in rows]

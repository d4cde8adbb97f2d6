"""SQLite store setup: connection settings and schema migrations.

Migrations are modules named ``v###_<label>`` in
``forecaster.storage.migrations``, each exposing ``up(conn)``. A migration and
its ``schema_versions`` row are committed together.
"""

import importlib
import logging
import pkgutil
import re
import sqlite3
from pathlib import Path

from forecaster.storage import migrations

logger = logging.getLogger(__name__)

MIGRATION_NAME = re.compile(r"v\d{3}_\w+")

VERSIONS_DDL = """
CREATE TABLE IF NOT EXISTS schema_versions (
    version TEXT PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open the cache database in WAL mode.

    The connection may be used from worker threads; callers serialize access.
    """
    path = str(db_path)
    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    return conn


def available_migrations() -> list[str]:
    """Names of the shipped migration modules, oldest first."""
    return sorted(
        info.name
        for info in pkgutil.iter_modules(migrations.__path__)
        if MIGRATION_NAME.fullmatch(info.name)
    )


def applied_migrations(conn: sqlite3.Connection) -> set[str]:
    with conn:
        conn.execute(VERSIONS_DDL)
    return {row["version"] for row in conn.execute("SELECT version FROM schema_versions")}


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending migrations. Returns the names applied by this call."""
    done = applied_migrations(conn)
    pending = [name for name in available_migrations() if name not in done]
    for name in pending:
        module = importlib.import_module(f"{migrations.__name__}.{name}")
        with conn:
            conn.execute("BEGIN")
            module.up(conn)
            conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        logger.info("Applied migration %s", name)
    return pending


def open_store(db_path: str | Path) -> sqlite3.Connection:
    """Connect and bring the schema up to date."""
    conn = connect(db_path)
    run_migrations(conn)
    return conn

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from auraconnect.schema import get_schema_sql


def _debug(msg: str) -> None:
    print(f"[db] {msg}")


def sqlite_path(db_dsn: str) -> str:
    """Accept a plain file path or a sqlite:///path URL."""
    dsn = (db_dsn or "").strip()
    if dsn.lower().startswith("sqlite:///"):
        dsn = dsn[len("sqlite:///") :]
    if not dsn:
        raise ValueError("db_path_blank")
    return dsn


@contextmanager
def connect(db_dsn: str) -> Iterator[sqlite3.Connection]:
    """Open a SQLite connection for one unit of work.

    Commits when the block exits cleanly, rolls back (and re-raises) otherwise.
    Rows come back as `sqlite3.Row` so they behave like dicts.
    """
    path = sqlite_path(db_dsn)
    if path != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    # check_same_thread=False: FastAPI runs sync routes on a threadpool.
    conn = sqlite3.connect(path, timeout=30, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # Concurrency pragmas: WAL lets readers proceed while a writer commits.
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA busy_timeout=5000;")  # 5s
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_dsn: str) -> None:
    """Create all tables (idempotent)."""
    _debug(f"Initializing DB (sqlite) at {db_dsn}")
    with connect(db_dsn) as conn:
        conn.executescript(get_schema_sql())

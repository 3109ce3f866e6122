from __future__ import annotations

import sqlite3
from typing import Any, Dict, Optional

from auraconnect.db import connect, init_db
from auraconnect.errors import DuplicateEmail
from auraconnect.util.time import utcnow_iso


def _debug(msg: str) -> None:
    print(f"[store] {msg}")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def public_user(row: Any | Dict[str, Any]) -> Dict[str, Any]:
    d = dict(row)
    d.pop("password_hash", None)
    return d


def _email_taken(conn: sqlite3.Connection, email: str) -> bool:
    return conn.execute("SELECT 1 FROM users WHERE email=?", (email,)).fetchone() is not None


class CredentialStore:
    """Row-level access to users, subscriptions and contact messages.

    Every method opens its own connection and writes at most one row, so
    concurrent requests never share a transaction.
    """

    def __init__(self, db_dsn: str) -> None:
        self.db_dsn = db_dsn

    def init_schema(self) -> None:
        init_db(self.db_dsn)

    # -----------------
    # Users
    # -----------------

    def create_user(self, *, name: str, email: str, password_hash: str) -> Dict[str, Any]:
        e = normalize_email(email)
        if not e:
            raise ValueError("email_blank")

        now = utcnow_iso()
        with connect(self.db_dsn) as conn:
            if _email_taken(conn, e):
                raise DuplicateEmail()
            try:
                cur = conn.execute(
                    "INSERT INTO users (name, email, password_hash, created_at) VALUES (?,?,?,?)",
                    (name, e, password_hash, now),
                )
            except sqlite3.IntegrityError as exc:
                # Lost a race with a concurrent signup for the same email.
                raise DuplicateEmail() from exc
            user_id = int(cur.lastrowid)

        _debug(f"created user id={user_id}")
        return {
            "id": user_id,
            "name": name,
            "email": e,
            "password_hash": password_hash,
            "created_at": now,
        }

    def find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        e = normalize_email(email)
        if not e:
            return None
        with connect(self.db_dsn) as conn:
            row = conn.execute("SELECT * FROM users WHERE email=?", (e,)).fetchone()
        return dict(row) if row is not None else None

    def find_user_by_id(self, user_id: int) -> Optional[Dict[str, Any]]:
        with connect(self.db_dsn) as conn:
            row = conn.execute("SELECT * FROM users WHERE id=?", (int(user_id),)).fetchone()
        return dict(row) if row is not None else None

    # -----------------
    # Subscriptions
    # -----------------

    def upsert_subscription(self, user_id: int, plan: str) -> None:
        with connect(self.db_dsn) as conn:
            conn.execute(
                """
                INSERT INTO subscriptions (user_id, plan, created_at) VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET plan=excluded.plan, created_at=excluded.created_at
                """,
                (int(user_id), plan, utcnow_iso()),
            )

    def get_subscription(self, user_id: int) -> Optional[Dict[str, Any]]:
        with connect(self.db_dsn) as conn:
            row = conn.execute(
                "SELECT id, user_id, plan, created_at FROM subscriptions WHERE user_id=?",
                (int(user_id),),
            ).fetchone()
        return dict(row) if row is not None else None

    # -----------------
    # Contact messages
    # -----------------

    def record_contact_message(self, *, name: str, email: str, message: str) -> None:
        with connect(self.db_dsn) as conn:
            conn.execute(
                "INSERT INTO contact_messages (name, email, message, created_at) VALUES (?,?,?,?)",
                (name, email, message, utcnow_iso()),
            )

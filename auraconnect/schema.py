"""Database schema for AuraConnect.

Timestamps are ISO-8601 TEXT (UTC, with 'Z'), written by the application rather
than by column defaults, so every row uses the same format.

All statements are create-if-absent; running the script twice is a no-op.
"""

from __future__ import annotations


SCHEMA_SQLITE = r"""
PRAGMA foreign_keys = ON;

-- Users / Auth
-- Emails are stored trimmed + lowercased, so the plain UNIQUE index is case-insensitive in practice.
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at TEXT NOT NULL
);

-- Contact form (write-only audit records, not linked to users)
CREATE TABLE IF NOT EXISTS contact_messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    message TEXT NOT NULL,
    created_at TEXT NOT NULL
);

-- Subscriptions: at most one row per user (upserted on user_id)
CREATE TABLE IF NOT EXISTS subscriptions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL UNIQUE,
    plan TEXT NOT NULL CHECK (plan IN ('starter','pro','enterprise')),
    created_at TEXT NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users (id)
);
"""


def get_schema_sql() -> str:
    return SCHEMA_SQLITE

import sqlite3

import pytest

import auraconnect.store as store_module
from auraconnect.db import connect
from auraconnect.errors import DuplicateEmail
from auraconnect.store import CredentialStore, normalize_email


def _count(store: CredentialStore, table: str) -> int:
    with connect(store.db_dsn) as conn:
        return int(conn.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()["n"])


def test_normalize_email():
    assert normalize_email("  Ada@Example.COM ") == "ada@example.com"
    assert normalize_email(None) == ""


def test_init_schema_is_idempotent(store: CredentialStore):
    store.init_schema()
    store.init_schema()
    assert _count(store, "users") == 0


def test_create_and_find_user(store: CredentialStore):
    u = store.create_user(name="Ada", email="Ada@Example.com", password_hash="h")
    assert u["email"] == "ada@example.com"
    assert u["created_at"].endswith("Z")

    by_email = store.find_user_by_email("ADA@example.com ")
    by_id = store.find_user_by_id(u["id"])
    assert by_email is not None and by_id is not None
    assert by_email["id"] == by_id["id"] == u["id"]
    assert by_id["password_hash"] == "h"


def test_find_missing_user(store: CredentialStore):
    assert store.find_user_by_email("nobody@example.com") is None
    assert store.find_user_by_email("") is None
    assert store.find_user_by_id(999) is None


def test_duplicate_email_is_case_insensitive(store: CredentialStore):
    store.create_user(name="Ada", email="ada@example.com", password_hash="h")
    with pytest.raises(DuplicateEmail):
        store.create_user(name="Ada Again", email="ADA@EXAMPLE.COM", password_hash="h2")
    assert _count(store, "users") == 1


def test_unique_index_backs_up_the_precheck(store: CredentialStore):
    store.create_user(name="Ada", email="ada@example.com", password_hash="h")
    with pytest.raises(sqlite3.IntegrityError):
        with connect(store.db_dsn) as conn:
            conn.execute(
                "INSERT INTO users (name, email, password_hash, created_at) VALUES (?,?,?,?)",
                ("X", "ada@example.com", "h", "2026-01-01T00:00:00Z"),
            )


def test_upsert_subscription_keeps_one_row(store: CredentialStore):
    u = store.create_user(name="Ada", email="ada@example.com", password_hash="h")
    assert store.get_subscription(u["id"]) is None

    store.upsert_subscription(u["id"], "pro")
    first = store.get_subscription(u["id"])
    store.upsert_subscription(u["id"], "starter")
    second = store.get_subscription(u["id"])

    assert first["plan"] == "pro"
    assert second["plan"] == "starter"
    assert second["id"] == first["id"]
    assert second["created_at"] >= first["created_at"]
    assert _count(store, "subscriptions") == 1


def test_subscription_requires_existing_user(store: CredentialStore):
    with pytest.raises(sqlite3.IntegrityError):
        store.upsert_subscription(12345, "pro")


def test_record_contact_message(store: CredentialStore):
    store.record_contact_message(name="Ada", email="ada@example.com", message="Hello there!")
    with connect(store.db_dsn) as conn:
        row = conn.execute("SELECT * FROM contact_messages").fetchone()
    assert (row["name"], row["email"], row["message"]) == ("Ada", "ada@example.com", "Hello there!")


def test_unique_violation_maps_to_duplicate_email(store: CredentialStore, monkeypatch):
    # Simulate a concurrent signup that committed between the check and the insert.
    store.create_user(name="Ada", email="ada@example.com", password_hash="h")
    monkeypatch.setattr(store_module, "_email_taken", lambda conn, email: False)

    with pytest.raises(DuplicateEmail) as ei:
        store.create_user(name="Ada Again", email="Ada@Example.com", password_hash="h2")
    assert isinstance(ei.value.__cause__, sqlite3.IntegrityError)
    assert _count(store, "users") == 1

from datetime import timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from auraconnect.api.server import create_app
from auraconnect.auth import AuthService, PasswordHasher, TokenCodec
from auraconnect.config import Config
from auraconnect.store import CredentialStore


TEST_SECRET = "test-secret-do-not-use-outside-the-test-suite"


@pytest.fixture()
def cfg(tmp_path: Path) -> Config:
    return Config(
        DB_DSN=str(tmp_path / "auraconnect.db"),
        AUTH_JWT_SECRET=TEST_SECRET,
        AUTH_PASSWORD_ROUNDS=1000,
        CORS_ALLOW_ORIGINS="",
    )


@pytest.fixture()
def store(cfg: Config) -> CredentialStore:
    s = CredentialStore(cfg.DB_DSN)
    s.init_schema()
    return s


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=1000)


@pytest.fixture()
def codec() -> TokenCodec:
    return TokenCodec(TEST_SECRET, ttl=timedelta(hours=24))


@pytest.fixture()
def auth(store: CredentialStore, hasher: PasswordHasher, codec: TokenCodec) -> AuthService:
    return AuthService(store=store, hasher=hasher, codec=codec)


@pytest.fixture()
def app(cfg: Config):
    return create_app(cfg)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def signed_up(client: TestClient) -> dict:
    """A registered user; `client` now carries their session cookie."""
    r = client.post(
        "/api/auth/signup",
        json={"name": "Ada Lovelace", "email": "ada@example.com", "password": "correct-horse"},
    )
    assert r.status_code == 201, r.text
    return r.json()["user"]

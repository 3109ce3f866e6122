from datetime import timedelta

import jwt
import pytest

from auraconnect.auth.security import PasswordHasher, TokenCodec
from auraconnect.errors import ConfigError, TokenExpired, TokenInvalidSignature, TokenMalformed
from auraconnect.util.time import utcnow

from .conftest import TEST_SECRET


def test_hash_is_salted_and_verifies(hasher: PasswordHasher):
    h1 = hasher.hash("hunter2hunter2")
    h2 = hasher.hash("hunter2hunter2")
    assert h1 != h2
    assert hasher.verify("hunter2hunter2", h1)
    assert hasher.verify("hunter2hunter2", h2)
    assert not hasher.verify("hunter3hunter3", h1)


def test_hash_rejects_blank_password(hasher: PasswordHasher):
    with pytest.raises(ValueError):
        hasher.hash("")


@pytest.mark.parametrize("bad_hash", ["", "not-a-hash", "$pbkdf2-sha256$garbage", "$2b$10$short"])
def test_verify_returns_false_on_malformed_hash(hasher: PasswordHasher, bad_hash: str):
    assert hasher.verify("whatever123", bad_hash) is False


def test_rounds_are_tunable():
    h = PasswordHasher(rounds=1234).hash("password123")
    assert "$1234$" in h


def test_issue_and_verify_round_trip(codec: TokenCodec):
    token = codec.issue(user_id=7, email="a@b.co", name="Ann")
    claims = codec.verify(token)
    assert claims.identity() == {"id": 7, "email": "a@b.co", "name": "Ann"}
    assert claims.expires_at - claims.issued_at == timedelta(hours=24)


def test_verify_rejects_tampered_token(codec: TokenCodec):
    forged = TokenCodec("a-different-secret-that-is-long-enough-too").issue(user_id=7, email="a@b.co", name="Ann")
    with pytest.raises(TokenInvalidSignature):
        codec.verify(forged)


def test_verify_rejects_expired_token(codec: TokenCodec):
    token = codec.issue(user_id=7, email="a@b.co", name="Ann", now=utcnow() - timedelta(hours=25))
    with pytest.raises(TokenExpired):
        codec.verify(token)


def test_token_still_valid_after_one_hour(codec: TokenCodec):
    token = codec.issue(user_id=7, email="a@b.co", name="Ann", now=utcnow() - timedelta(hours=1))
    assert codec.verify(token).id == 7


@pytest.mark.parametrize("token", ["", "abc", "a.b.c", "not.a.jwt.at.all"])
def test_verify_rejects_garbage(codec: TokenCodec, token: str):
    with pytest.raises(TokenMalformed):
        codec.verify(token)


def test_verify_rejects_missing_identity_claims(codec: TokenCodec):
    now = int(utcnow().timestamp())
    token = jwt.encode({"email": "a@b.co", "iat": now, "exp": now + 60}, TEST_SECRET, algorithm="HS256")
    with pytest.raises(TokenMalformed):
        codec.verify(token)


def test_codec_errors_share_a_base(codec: TokenCodec):
    for exc in (TokenExpired, TokenInvalidSignature, TokenMalformed):
        assert exc().status_code == 401
        assert exc().message == "Invalid or expired token."
    assert len({TokenExpired.reason, TokenInvalidSignature.reason, TokenMalformed.reason}) == 3


def test_codec_requires_secret():
    with pytest.raises(ConfigError):
        TokenCodec("")

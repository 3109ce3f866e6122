from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from auraconnect.errors import ConfigError, TokenExpired, TokenInvalidSignature, TokenMalformed
from auraconnect.util.time import utcnow


_JWT_ALG = "HS256"


class PasswordHasher:
    """Salted one-way password hashing (pbkdf2_sha256 via passlib).

    `rounds` is the cost factor; every hash gets a fresh random salt.
    """

    def __init__(self, rounds: int = 29000) -> None:
        self._pwd = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__rounds=max(1, int(rounds)),
        )

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("password_blank")
        return self._pwd.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        if not password or not password_hash:
            return False
        try:
            return self._pwd.verify(password, password_hash)
        except (ValueError, TypeError):
            # Unrecognized or corrupt hash.
            return False


@dataclass(frozen=True)
class SessionClaims:
    id: int
    email: str
    name: str
    issued_at: datetime
    expires_at: datetime

    def identity(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "name": self.name}


class TokenCodec:
    """Issue and verify signed, expiring session tokens (JWT HS256)."""

    def __init__(self, secret: str, *, ttl: timedelta = timedelta(hours=24)) -> None:
        if not secret:
            raise ConfigError("jwt_secret_blank")
        self._secret = secret
        self.ttl = ttl

    def issue(self, *, user_id: int, email: str, name: str, now: Optional[datetime] = None) -> str:
        iat = now or utcnow()
        exp = iat + self.ttl
        payload: Dict[str, Any] = {
            "id": int(user_id),
            "email": email,
            "name": name,
            "iat": int(iat.timestamp()),
            "exp": int(exp.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=_JWT_ALG)

    def verify(self, token: str) -> SessionClaims:
        if not token:
            raise TokenMalformed()
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[_JWT_ALG],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired() from e
        except jwt.InvalidSignatureError as e:
            raise TokenInvalidSignature() from e
        except jwt.InvalidTokenError as e:
            raise TokenMalformed() from e

        user_id = payload.get("id")
        email = payload.get("email")
        name = payload.get("name")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise TokenMalformed()
        if not isinstance(email, str) or not isinstance(name, str):
            raise TokenMalformed()

        return SessionClaims(
            id=user_id,
            email=email,
            name=name,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

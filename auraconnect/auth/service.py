from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple

from auraconnect.errors import DuplicateEmail, InvalidCredentials, TokenError, Unauthorized, ValidationError
from auraconnect.store import CredentialStore, normalize_email, public_user

from .security import PasswordHasher, TokenCodec


EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 8


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match((email or "").strip()))


class AuthService:
    """Signup / login / logout / whoami.

    Holds no per-user state; every call is independent. Signup and login return
    `(public_user, token)` and leave it to the HTTP layer to set the cookie.
    """

    def __init__(self, store: CredentialStore, hasher: PasswordHasher, codec: TokenCodec) -> None:
        self.store = store
        self.hasher = hasher
        self.codec = codec
        # Verified against when the email is unknown, so both login failures cost one hash check.
        self._dummy_hash = hasher.hash("not-a-real-password")

    def _issue(self, user: Dict[str, Any]) -> str:
        return self.codec.issue(user_id=int(user["id"]), email=str(user["email"]), name=str(user["name"]))

    def signup(self, *, name: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[Dict[str, Any], str]:
        clean_name = (name or "").strip()
        if len(clean_name) < MIN_NAME_LENGTH:
            raise ValidationError("Name must be at least 2 characters.")
        if not is_valid_email(email or ""):
            raise ValidationError("Enter a valid email address.")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters.")

        normalized = normalize_email(email or "")
        # Checked before hashing; create_user re-checks against the unique index.
        if self.store.find_user_by_email(normalized) is not None:
            raise DuplicateEmail()

        password_hash = self.hasher.hash(password)
        user = public_user(self.store.create_user(name=clean_name, email=normalized, password_hash=password_hash))
        _debug(f"signup user_id={user['id']}")
        return user, self._issue(user)

    def login(self, *, email: Optional[str], password: Optional[str]) -> Tuple[Dict[str, Any], str]:
        if not email or not password:
            raise ValidationError("Email and password are required.")

        row = self.store.find_user_by_email(email)
        password_hash = str(row["password_hash"]) if row is not None else self._dummy_hash
        verified = self.hasher.verify(password, password_hash)
        # Same error for unknown email and wrong password.
        if row is None or not verified:
            raise InvalidCredentials()

        user = public_user(row)
        _debug(f"login user_id={user['id']}")
        return user, self._issue(user)

    def logout(self, token: Optional[str]) -> None:
        """Nothing to revoke server-side; the caller clears the cookie.

        A token copied before logout stays valid until it expires.
        """
        if not token:
            return
        try:
            claims = self.codec.verify(token)
        except TokenError:
            return
        _debug(f"logout user_id={claims.id}")

    def whoami(self, token: Optional[str]) -> Dict[str, Any]:
        if not token:
            raise Unauthorized("Not logged in.")
        try:
            claims = self.codec.verify(token)
        except TokenError as e:
            _debug(f"whoami rejected: {e.reason}")
            raise Unauthorized("Invalid session.") from e

        row = self.store.find_user_by_id(claims.id)
        if row is None:
            raise Unauthorized("User not found.")
        return public_user(row)

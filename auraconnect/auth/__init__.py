"""Authentication / authorization.

Auth is deliberately lightweight:

- Users table (name/email/password hash)
- JWT session tokens carried in an httpOnly cookie named `token`

There is no server-side session store. Logout only deletes the cookie, so a
token that was copied elsewhere stays valid until its `exp`.
"""

from .deps import require_session
from .security import PasswordHasher, SessionClaims, TokenCodec
from .service import AuthService

__all__ = [
    "AuthService",
    "PasswordHasher",
    "SessionClaims",
    "TokenCodec",
    "require_session",
]

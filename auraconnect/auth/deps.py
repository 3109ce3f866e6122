from __future__ import annotations

from fastapi import Request

from auraconnect.errors import ServerError, TokenError, Unauthorized

from .security import SessionClaims
from .service import AuthService


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def get_auth_service(request: Request) -> AuthService:
    auth = getattr(request.app.state, "auth", None)
    if auth is None:
        _debug("auth service missing from app.state")
        raise ServerError()
    return auth


def session_token(request: Request) -> str | None:
    """Raw session token from the request cookie, if any."""
    cfg = getattr(request.app.state, "cfg", None)
    cookie_name = str(getattr(cfg, "AUTH_COOKIE_NAME", "token") or "token")
    return request.cookies.get(cookie_name) or None


def require_session(request: Request) -> SessionClaims:
    """Gate for routes that need an identity.

    On success the decoded claims are also left on `request.state.session`.
    """
    auth = get_auth_service(request)

    token = session_token(request)
    if not token:
        raise Unauthorized("Unauthorized. Please log in.")

    try:
        claims = auth.codec.verify(token)
    except TokenError as e:
        _debug(f"rejected {request.url.path}: {e.reason}")
        raise Unauthorized("Invalid or expired token.") from e

    request.state.session = claims
    return claims

"""Error taxonomy shared by the services and the HTTP layer.

Every `AppError` carries the HTTP status it maps to and a client-safe message.
The API renders them as `{"message": ...}`; anything that is not an `AppError`
is logged and turned into a route-specific `ServerError`.
"""

from __future__ import annotations


class ConfigError(RuntimeError):
    """Fatal startup misconfiguration (e.g. missing signing secret)."""


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request."


class DuplicateEmail(AppError):
    status_code = 409
    default_message = "Email is already registered."


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Invalid email or password."


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized. Please log in."


class TokenError(Unauthorized):
    """A session token was rejected. `reason` is for logs only."""

    reason = "token_invalid"
    default_message = "Invalid or expired token."


class TokenMalformed(TokenError):
    reason = "token_malformed"


class TokenInvalidSignature(TokenError):
    reason = "token_bad_signature"


class TokenExpired(TokenError):
    reason = "token_expired"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found."


class ServerError(AppError):
    status_code = 500

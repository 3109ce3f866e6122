from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from auraconnect import __version__
from auraconnect.auth import AuthService, PasswordHasher, SessionClaims, TokenCodec, require_session
from auraconnect.auth.deps import get_auth_service, session_token
from auraconnect.config import Config, load_config, require_secret
from auraconnect.contact import submit_contact_message
from auraconnect.errors import AppError, NotFound, ServerError
from auraconnect.store import CredentialStore
from auraconnect.subscriptions import current_subscription, subscribe


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


def _server_error(context: str, message: str, exc: Exception) -> ServerError:
    """Log the real failure, hand the client a generic message."""
    _debug(f"{context} failed: {exc!r}")
    return ServerError(message)


# -----------------------------
# Cookies
# -----------------------------


def _cookie_secure(cfg: Config) -> bool:
    """Return whether the session cookie should be marked Secure."""
    # Browsers require Secure when SameSite=None
    if str(cfg.AUTH_COOKIE_SAMESITE or "lax").lower() == "none":
        return True
    return bool(cfg.AUTH_COOKIE_SECURE)


def _set_session_cookie(response: Response, *, token: str, cfg: Config) -> None:
    response.set_cookie(
        key=cfg.AUTH_COOKIE_NAME,
        value=str(token),
        httponly=True,
        samesite=str(cfg.AUTH_COOKIE_SAMESITE or "lax").lower(),
        secure=_cookie_secure(cfg),
        max_age=int(cfg.AUTH_TOKEN_TTL_HOURS) * 60 * 60,
        path=cfg.AUTH_COOKIE_PATH,
    )


def _clear_session_cookie(response: Response, cfg: Config) -> None:
    response.delete_cookie(
        key=cfg.AUTH_COOKIE_NAME,
        path=cfg.AUTH_COOKIE_PATH,
        secure=_cookie_secure(cfg),
        httponly=True,
        samesite=str(cfg.AUTH_COOKIE_SAMESITE or "lax").lower(),
    )


# -----------------------------
# Request bodies
# -----------------------------
# Fields are optional: a missing value gets the field-specific 400 from the
# services, not a generic 422.


class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ContactRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class SubscribeRequest(BaseModel):
    plan: Optional[str] = None


# -----------------------------
# App
# -----------------------------


def create_app(cfg: Config | None = None) -> FastAPI:
    """Build the API.

    Raises (and so aborts startup before the server binds) when the signing
    secret is missing or the schema cannot be created.
    """
    if cfg is None:
        cfg = load_config()
    secret = require_secret(cfg)

    store = CredentialStore(cfg.DB_DSN)
    store.init_schema()

    auth = AuthService(
        store=store,
        hasher=PasswordHasher(rounds=cfg.AUTH_PASSWORD_ROUNDS),
        codec=TokenCodec(secret, ttl=timedelta(hours=int(cfg.AUTH_TOKEN_TTL_HOURS))),
    )

    app = FastAPI(title="AuraConnect", version=__version__)
    app.state.cfg = cfg
    app.state.store = store
    app.state.auth = auth

    _cors_origins = [o.strip() for o in (cfg.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]
    if _cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    _register_error_handlers(app)
    _register_routes(app)

    _debug(f"AuraConnect ready (db={cfg.DB_DSN})")
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": "Invalid request body."})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = NotFound.default_message if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)


def _register_routes(app: FastAPI) -> None:
    cfg: Config = app.state.cfg
    store: CredentialStore = app.state.store

    # -----------------------------
    # Health
    # -----------------------------

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok"}

    # -----------------------------
    # Auth
    # -----------------------------

    @app.post("/api/auth/signup", status_code=201)
    def auth_signup(
        payload: SignupRequest,
        response: Response,
        auth: AuthService = Depends(get_auth_service),
    ) -> Dict[str, Any]:
        try:
            user, token = auth.signup(name=payload.name, email=payload.email, password=payload.password)
        except AppError:
            raise
        except Exception as e:
            raise _server_error("signup", "Server error during signup.", e) from e

        _set_session_cookie(response, token=token, cfg=cfg)
        return {"message": "Signup successful!", "user": user}

    @app.post("/api/auth/login")
    def auth_login(
        payload: LoginRequest,
        response: Response,
        auth: AuthService = Depends(get_auth_service),
    ) -> Dict[str, Any]:
        try:
            user, token = auth.login(email=payload.email, password=payload.password)
        except AppError:
            raise
        except Exception as e:
            raise _server_error("login", "Server error during login.", e) from e

        _set_session_cookie(response, token=token, cfg=cfg)
        return {"message": "Login successful!", "user": user}

    @app.post("/api/auth/logout")
    def auth_logout(
        request: Request,
        response: Response,
        auth: AuthService = Depends(get_auth_service),
    ) -> Dict[str, Any]:
        """Clear the session cookie. The token itself is not revoked."""
        auth.logout(session_token(request))
        _clear_session_cookie(response, cfg)
        return {"message": "Logged out successfully."}

    @app.get("/api/auth/me")
    def auth_me(request: Request, auth: AuthService = Depends(get_auth_service)) -> Dict[str, Any]:
        try:
            user = auth.whoami(session_token(request))
        except AppError:
            raise
        except Exception as e:
            raise _server_error("me", "Server error.", e) from e
        return {"user": user}

    # -----------------------------
    # Contact
    # -----------------------------

    @app.post("/api/contact", status_code=201)
    def contact(payload: ContactRequest) -> Dict[str, Any]:
        try:
            submit_contact_message(store, name=payload.name, email=payload.email, message=payload.message)
        except AppError:
            raise
        except Exception as e:
            raise _server_error("contact", "Could not send message.", e) from e
        return {"message": "Message sent successfully!"}

    # -----------------------------
    # Subscription / dashboard (cookie required)
    # -----------------------------

    @app.post("/api/subscribe")
    def subscribe_plan(
        payload: SubscribeRequest,
        session: SessionClaims = Depends(require_session),
    ) -> Dict[str, Any]:
        try:
            plan = subscribe(store, user_id=session.id, plan=payload.plan)
        except AppError:
            raise
        except Exception as e:
            raise _server_error("subscribe", "Could not update subscription.", e) from e
        return {"message": f"Subscription updated to {plan}."}

    @app.get("/api/dashboard")
    def dashboard(session: SessionClaims = Depends(require_session)) -> Dict[str, Any]:
        try:
            subscription = current_subscription(store, user_id=session.id)
        except Exception as e:
            raise _server_error("dashboard", "Could not load dashboard.", e) from e
        return {
            "message": "Dashboard data fetched.",
            "user": session.identity(),
            "subscription": subscription,
        }

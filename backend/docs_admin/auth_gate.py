"""Authorization gate for the admin UI and admin API."""

from __future__ import annotations

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse

from .auth import verify_session
from .config import config

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"

ADMIN_UI_PREFIX = "/admin"
ADMIN_API_PREFIX = "/api/admin"
ADMIN_LOGIN_PATH = "/admin/login"
ADMIN_API_LOGIN_PATH = "/api/admin/auth/login"
ADMIN_API_LOGOUT_PATH = "/api/admin/auth/logout"

# Reachable without a session
PUBLIC_PATHS = frozenset({ADMIN_LOGIN_PATH, ADMIN_API_LOGIN_PATH})


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def classify_path(path: str) -> str | None:
    """Return ``"ui"`` or ``"api"`` for protected paths, None otherwise."""
    if path in PUBLIC_PATHS:
        return None
    if _under(path, ADMIN_UI_PREFIX):
        return "ui"
    if _under(path, ADMIN_API_PREFIX):
        return "api"
    return None


def login_redirect(request: Request) -> RedirectResponse:
    login_url = request.url.replace(path=ADMIN_LOGIN_PATH, query="").include_query_params(
        next=request.url.path,
    )
    return RedirectResponse(str(login_url), status_code=307)


class AdminAuthMiddleware(BaseHTTPMiddleware):
    """Require a valid admin session on /admin and /api/admin paths.

    UI requests without a session are redirected to the login page with the
    original path in ``next``; API requests get a 401.
    """

    async def dispatch(self, request: Request, call_next):
        kind = classify_path(request.url.path)
        if kind is None:
            return await call_next(request)

        token = request.cookies.get(SESSION_COOKIE, "")
        session = verify_session(token, config.admin_jwt_secret) if token else None

        if session is None:
            logger.debug("Unauthenticated %s request to %s", kind, request.url.path)
            if kind == "ui":
                return login_redirect(request)
            return JSONResponse({"error": "Unauthorized"}, status_code=401)

        request.state.session = session
        return await call_next(request)

"""Auth API endpoints for the admin back-office."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from .. import auth
from ..auth_gate import ADMIN_LOGIN_PATH, SESSION_COOKIE
from ..client_identity import get_login_throttle_key
from ..config import config
from ..passwords import verify_password
from ..rate_limit import get_limiter

router = APIRouter(prefix="/api/admin/auth", tags=["auth"])
logger = logging.getLogger(__name__)

COOKIE_MAX_AGE = auth.SESSION_MAX_AGE
NO_STORE = {"Cache-Control": "no-store"}


def _error(message: str, status_code: int, retry_after: int = 0) -> JSONResponse:
    headers = dict(NO_STORE)
    if retry_after > 0:
        headers["Retry-After"] = str(retry_after)
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


def _set_session_cookie(response: Response, token: str, max_age: int = COOKIE_MAX_AGE) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=config.is_production,
        max_age=max_age,
        path="/",
    )


async def _read_password(request: Request) -> str | None:
    """Pull ``password`` from a JSON body, falling back to form data."""
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            return None
        password = body.get("password") if isinstance(body, dict) else None
        return password if isinstance(password, str) else None

    try:
        form = await request.form()
    except (MultiPartException, HTTPException, ValueError):
        # Starlette reports malformed multipart bodies as a 400 HTTPException
        logger.debug("Unparseable login form body", exc_info=True)
        return None
    password = form.get("password")
    return password if isinstance(password, str) else None


@router.post("/login")
async def auth_login(request: Request):
    key = get_login_throttle_key(request)
    limiter = get_limiter()

    # Check rate limit before touching the credential
    check = limiter.check_throttle(key)
    if check.blocked:
        return _error("Too many login attempts", 429, retry_after=check.retry_after)

    password = await _read_password(request)
    if not password:
        return _error("Missing password", 400)

    expected_hash = config.admin_password_hash
    if not expected_hash:
        logger.error("Login rejected: ADMIN_PASSWORD_HASH is not configured")
        return _error("Server misconfigured: missing ADMIN_PASSWORD_HASH", 500)

    if not await run_in_threadpool(verify_password, password, expected_hash):
        result = limiter.record_failure(key)
        return _error("Invalid password", 401, retry_after=result.retry_after if result.blocked else 0)

    secret = config.admin_jwt_secret
    if not secret:
        logger.error("Login rejected: ADMIN_JWT_SECRET is not configured")
        return _error("Server misconfigured: missing ADMIN_JWT_SECRET", 500)

    token = auth.create_session(secret)
    limiter.clear_failures(key)
    logger.info("Admin login succeeded")

    response = JSONResponse({"success": True}, headers=NO_STORE)
    _set_session_cookie(response, token)
    return response


@router.post("/logout")
async def auth_logout():
    response = RedirectResponse(ADMIN_LOGIN_PATH, status_code=303, headers=NO_STORE)
    _set_session_cookie(response, "", max_age=0)
    return response


@router.get("/session")
async def auth_session(request: Request):
    # Populated by AdminAuthMiddleware
    session: auth.SessionClaims = request.state.session
    return JSONResponse(
        {
            "authenticated": True,
            "role": session.role,
            "subject": session.subject,
            "issuedAt": session.issued_at.isoformat(),
            "expiresAt": session.expires_at.isoformat(),
        },
        headers=NO_STORE,
    )

"""Admin session tokens: HS256 JWTs signed with the configured secret.

Sessions are stateless.  A token is only invalidated by expiry or by
rotating the signing secret.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ADMIN_ROLE = "admin"
ADMIN_SUBJECT = "admin"
SESSION_LIFETIME = timedelta(days=7)
SESSION_MAX_AGE = int(SESSION_LIFETIME.total_seconds())


@dataclass(frozen=True)
class SessionClaims:
    role: str
    subject: str
    issued_at: datetime
    expires_at: datetime


def _key(secret: str) -> bytes:
    return secret.encode("utf-8")


def create_session(secret: str, now: datetime | None = None) -> str:
    """Issue a 7-day admin session token. Raises ValueError on an empty secret."""
    if not secret:
        raise ValueError("Missing JWT secret")

    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "role": ADMIN_ROLE,
        "sub": ADMIN_SUBJECT,
        "iat": issued_at,
        "exp": issued_at + SESSION_LIFETIME,
    }
    return jwt.encode(payload, _key(secret), algorithm=ALGORITHM)


def verify_session(token: str, secret: str) -> SessionClaims | None:
    """Return the claims of a valid admin session, or None.

    Every failure (bad signature, expiry, other algorithm, wrong subject or
    role) collapses to None.
    """
    if not token or not secret:
        return None

    try:
        payload = jwt.decode(
            token,
            _key(secret),
            algorithms=[ALGORITHM],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.PyJWTError as e:
        logger.debug("Session token rejected: %s", type(e).__name__)
        return None

    if payload.get("sub") != ADMIN_SUBJECT or payload.get("role") != ADMIN_ROLE:
        return None

    try:
        return SessionClaims(
            role=payload["role"],
            subject=payload["sub"],
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (TypeError, ValueError, OverflowError):
        return None

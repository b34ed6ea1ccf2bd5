"""Best-effort client identity for login throttling.

The key combines the client IP as reported by the proxy chain with a
truncated user agent.  Proxy headers are trivially spoofable when the app is
reachable directly, so the key is only good for rate limiting, never for
authorization.
"""

from __future__ import annotations

from collections.abc import Mapping

from starlette.requests import Request

UNKNOWN = "unknown"
USER_AGENT_MAX_LENGTH = 120
KEY_SEPARATOR = "|"

# Checked in order; the first non-empty value wins.
_IP_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")


def extract_client_ip(headers: Mapping[str, str]) -> str:
    """Return the client IP from proxy headers, or ``"unknown"``.

    Only the first hop of ``X-Forwarded-For`` is used.
    """
    for name in _IP_HEADERS:
        value = headers.get(name)
        if not value:
            continue
        if name == "x-forwarded-for":
            value = value.split(",")[0]
        value = value.strip()
        if value:
            return value
    return UNKNOWN


def identity_key(headers: Mapping[str, str]) -> str:
    ip = extract_client_ip(headers)
    user_agent = headers.get("user-agent")
    user_agent = user_agent[:USER_AGENT_MAX_LENGTH] if user_agent else UNKNOWN
    return f"{ip}{KEY_SEPARATOR}{user_agent}"


def get_login_throttle_key(request: Request) -> str:
    return identity_key(request.headers)

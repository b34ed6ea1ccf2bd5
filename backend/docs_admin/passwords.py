"""Admin password verification.

Two hash formats are accepted so the configured hash can be migrated
without downtime:

1. ``pbkdf2_sha256$<rounds>$<salt>$<digest>`` with base64url salt and
   digest (padding optional).  This is what ``hash_password`` produces.
2. A bare SHA-256 hex digest (legacy).

``verify_password`` never raises: empty input, malformed hashes, and any
decoding error all verify as ``False``.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import os

logger = logging.getLogger(__name__)

PBKDF2_PREFIX = "pbkdf2_sha256$"
MIN_ROUNDS = 100_000
MAX_ROUNDS = 5_000_000
DEFAULT_ROUNDS = 310_000
MIN_SALT_BYTES = 16
MIN_DIGEST_BYTES = 32
_SALT_LENGTH = 16


def _b64url_decode(value: str) -> bytes:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def constant_time_equals(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without leaking where they first differ.

    Unequal lengths still compare every byte pair, padding the shorter
    side with zeros.
    """
    size = max(len(a), len(b))
    same_content = hmac.compare_digest(a.ljust(size, b"\0"), b.ljust(size, b"\0"))
    same_length = len(a) == len(b)
    return same_content & same_length


def legacy_digest(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS, salt: bytes | None = None) -> str:
    """Hash *password* into the ``pbkdf2_sha256`` format."""
    if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
        raise ValueError(f"rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}")
    if salt is None:
        salt = os.urandom(_SALT_LENGTH)
    if len(salt) < MIN_SALT_BYTES:
        raise ValueError(f"salt must be at least {MIN_SALT_BYTES} bytes")
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return f"{PBKDF2_PREFIX}{rounds}${_b64url_encode(salt)}${_b64url_encode(dk)}"


def _parse_pbkdf2(stored_hash: str) -> tuple[int, bytes, bytes] | None:
    """Split a pbkdf2_sha256 hash into (rounds, salt, digest), or None if unusable."""
    parts = stored_hash.split("$")
    # parts: ['pbkdf2_sha256', rounds, salt, digest]
    if len(parts) != 4 or not all(parts[1:]):
        return None

    try:
        rounds = int(parts[1])
        salt = _b64url_decode(parts[2])
        expected = _b64url_decode(parts[3])
    except (ValueError, binascii.Error):
        return None

    if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
        return None
    if len(salt) < MIN_SALT_BYTES or len(expected) < MIN_DIGEST_BYTES:
        return None
    return rounds, salt, expected


def is_valid_pbkdf2_hash(stored_hash: str) -> bool:
    return stored_hash.startswith(PBKDF2_PREFIX) and _parse_pbkdf2(stored_hash) is not None


def _verify_pbkdf2(password: str, stored_hash: str) -> bool:
    parsed = _parse_pbkdf2(stored_hash)
    if parsed is None:
        logger.warning("Configured password hash is a malformed pbkdf2_sha256 string")
        return False

    rounds, salt, expected = parsed
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds, dklen=len(expected))
    return constant_time_equals(dk, expected)


def _verify_legacy(password: str, stored_hash: str) -> bool:
    provided = legacy_digest(password).encode("ascii")
    expected = stored_hash.lower().encode("utf-8")
    return constant_time_equals(provided, expected)


def verify_password(password: str, stored_hash: str) -> bool:
    """Check *password* against *stored_hash* in either supported format."""
    if not password or not stored_hash:
        return False

    stored_hash = stored_hash.strip()
    try:
        if stored_hash.startswith(PBKDF2_PREFIX):
            return _verify_pbkdf2(password, stored_hash)
        return _verify_legacy(password, stored_hash)
    except UnicodeError:
        # Lone surrogates and the like cannot be UTF-8 encoded
        return False

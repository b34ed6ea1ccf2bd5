"""FastAPI application entry-point for the docs admin back-office."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from . import __version__, pages
from .api import auth as auth_api
from .auth_gate import AdminAuthMiddleware
from .config import config
from .passwords import PBKDF2_PREFIX, is_valid_pbkdf2_hash

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Docs Admin", version=__version__, docs_url=None, redoc_url=None)

    if not config.admin_password_hash:
        logger.error("ADMIN_PASSWORD_HASH is not set; admin login will fail with 500")
    elif config.admin_password_hash.startswith(PBKDF2_PREFIX) and not is_valid_pbkdf2_hash(
        config.admin_password_hash
    ):
        logger.error("ADMIN_PASSWORD_HASH is a malformed pbkdf2_sha256 hash; every login will be rejected")

    if not config.admin_jwt_secret:
        logger.error("ADMIN_JWT_SECRET is not set; admin login will fail with 500")

    app.add_middleware(AdminAuthMiddleware)
    app.include_router(auth_api.router)
    app.include_router(pages.router)
    return app

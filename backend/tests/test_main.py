"""Tests for startup configuration checks in create_app."""

from __future__ import annotations

import logging

from docs_admin.config import config
from docs_admin.main import create_app
from docs_admin.passwords import hash_password, legacy_digest


class TestStartupChecks:
    def _errors(self, caplog) -> list[str]:
        return [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR and r.name == "docs_admin.main"]

    def test_well_configured_logs_nothing(self, configured, caplog):
        with caplog.at_level(logging.ERROR, logger="docs_admin.main"):
            create_app()
        assert self._errors(caplog) == []

    def test_malformed_pbkdf2_hash_is_reported(self, configured, monkeypatch, caplog):
        monkeypatch.setattr(config, "admin_password_hash", "pbkdf2_sha256$50$c2FsdA$ZGlnZXN0")
        with caplog.at_level(logging.ERROR, logger="docs_admin.main"):
            create_app()
        errors = self._errors(caplog)
        assert len(errors) == 1
        assert "malformed pbkdf2_sha256" in errors[0]
        assert "c2FsdA" not in errors[0]

    def test_valid_pbkdf2_hash_is_not_reported(self, configured, monkeypatch, caplog):
        monkeypatch.setattr(config, "admin_password_hash", hash_password("pw", rounds=100_000))
        with caplog.at_level(logging.ERROR, logger="docs_admin.main"):
            create_app()
        assert self._errors(caplog) == []

    def test_legacy_hash_is_not_reported(self, configured, monkeypatch, caplog):
        monkeypatch.setattr(config, "admin_password_hash", legacy_digest("pw"))
        with caplog.at_level(logging.ERROR, logger="docs_admin.main"):
            create_app()
        assert self._errors(caplog) == []

    def test_missing_settings_are_reported(self, monkeypatch, caplog):
        monkeypatch.setattr(config, "admin_password_hash", "")
        monkeypatch.setattr(config, "admin_jwt_secret", "")
        with caplog.at_level(logging.ERROR, logger="docs_admin.main"):
            create_app()
        errors = self._errors(caplog)
        assert any("ADMIN_PASSWORD_HASH" in e for e in errors)
        assert any("ADMIN_JWT_SECRET" in e for e in errors)

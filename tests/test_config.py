"""
Configuration and startup validation tests.
"""

import pytest
from pydantic import ValidationError

from taskgate.api.deps import validate_auth_config
from taskgate.config import Environment, Settings, settings


class TestSettings:
    def test_rejects_non_postgres_url(self):
        with pytest.raises(ValidationError):
            Settings(database_url="sqlite:///taskgate.db")

    def test_rejects_bad_port(self):
        with pytest.raises(ValidationError):
            Settings(port=0)

    def test_rejects_zero_depth(self):
        with pytest.raises(ValidationError):
            Settings(hierarchy_max_depth=0)

    def test_rejects_non_positive_audit_capacity(self):
        with pytest.raises(ValidationError):
            Settings(audit_max_entries=0)

    def test_async_database_url_selects_asyncpg(self):
        config = Settings(database_url="postgresql://u:p@db:5432/taskgate")
        assert config.async_database_url == "postgresql+asyncpg://u:p@db:5432/taskgate"

    def test_async_database_url_kept_when_explicit(self):
        url = "postgresql+asyncpg://u:p@db:5432/taskgate"
        assert Settings(database_url=url).async_database_url == url


class TestAuthConfigValidation:
    def test_insecure_mode_refused_outside_development(self, monkeypatch):
        monkeypatch.setattr(settings, "allow_insecure_dev", True)
        monkeypatch.setattr(settings, "env", Environment.PRODUCTION)

        with pytest.raises(RuntimeError, match="only permitted in development"):
            validate_auth_config()

    def test_missing_jwt_key_refused(self, monkeypatch):
        monkeypatch.setattr(settings, "allow_insecure_dev", False)
        monkeypatch.setattr(settings, "jwt_public_key_path", None)

        with pytest.raises(RuntimeError, match="no JWT verification key"):
            validate_auth_config()

    def test_jwt_mode_accepted(self, monkeypatch, tmp_path):
        key = tmp_path / "jwt.pem"
        key.write_text("public key")
        monkeypatch.setattr(settings, "allow_insecure_dev", False)
        monkeypatch.setattr(settings, "env", Environment.PRODUCTION)
        monkeypatch.setattr(settings, "jwt_public_key_path", str(key))

        validate_auth_config()

    def test_insecure_mode_warns_in_development(self, monkeypatch, caplog):
        monkeypatch.setattr(settings, "allow_insecure_dev", True)
        monkeypatch.setattr(settings, "env", Environment.DEVELOPMENT)

        validate_auth_config()

        assert "INSECURE DEV MODE" in caplog.text

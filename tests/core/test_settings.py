"""Tests for core.settings module.

Covers:
- DbSpineSettings defaults
- DBSPINE_* environment variable override
- Field validation
- get_settings caching
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from dbspine.core.settings import DbSpineSettings, get_settings


class TestDbSpineSettingsDefaults:
    def test_defaults(self, monkeypatch):
        for name in ("URL", "DEFAULT_ROW_LIMIT", "CONNECT_TIMEOUT", "LOG_LEVEL", "LOG_JSON"):
            monkeypatch.delenv(f"DBSPINE_{name}", raising=False)
        s = DbSpineSettings(_env_file=None)
        assert s.url is None
        assert s.default_row_limit == 300
        assert s.connect_timeout == 10
        assert s.log_level == "WARNING"
        assert s.log_json is None


class TestDbSpineSettingsEnvOverride:
    def test_env_vars(self, monkeypatch):
        monkeypatch.setenv("DBSPINE_URL", "sqlite:///shop.db")
        monkeypatch.setenv("DBSPINE_DEFAULT_ROW_LIMIT", "50")
        monkeypatch.setenv("DBSPINE_LOG_JSON", "true")
        s = DbSpineSettings(_env_file=None)
        assert s.url == "sqlite:///shop.db"
        assert s.default_row_limit == 50
        assert s.log_json is True

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DBSPINE_CONNECT_TIMEOUT", raising=False)
        env = tmp_path / ".env"
        env.write_text("DBSPINE_CONNECT_TIMEOUT=3\nUNRELATED=1\n")
        assert DbSpineSettings(_env_file=env).connect_timeout == 3

    def test_row_limit_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("DBSPINE_DEFAULT_ROW_LIMIT", "0")
        with pytest.raises(PydanticValidationError):
            DbSpineSettings(_env_file=None)


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("DBSPINE_DEFAULT_ROW_LIMIT", "42")
        assert get_settings() is first
        reloaded = get_settings(_force_reload=True)
        assert reloaded is not first
        assert reloaded.default_row_limit == 42

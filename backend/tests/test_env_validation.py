"""
Startup environment validation tests.
"""

from unittest.mock import patch

import pytest

from newsbrief.core import env_validation
from newsbrief.core.config import settings


class TestSecretKey:

    def test_valid_key(self):
        assert env_validation.validate_secret_key("SECRET_KEY", "k" * 40) == []

    def test_missing_key(self):
        assert env_validation.validate_secret_key("SECRET_KEY", None) == ["SECRET_KEY is not set"]

    def test_short_key(self):
        errors = env_validation.validate_secret_key("SECRET_KEY", "abc")

        assert errors == ["SECRET_KEY is too short (must be at least 32 characters)"]

    def test_placeholder_key(self):
        errors = env_validation.validate_secret_key("SECRET_KEY", "change-me-" + "x" * 40)

        assert len(errors) == 1
        assert "placeholder" in errors[0]


class TestDatabaseUrl:

    def test_sync_driver_is_rejected(self):
        with patch.object(settings, "DATABASE_URL", "postgresql://user:pw@db/newsbrief"):
            errors = env_validation.validate_database_url()

        assert len(errors) == 1
        assert "async driver" in errors[0]

    def test_sqlite_rejected_in_production(self):
        with patch.object(settings, "APP_ENV", "production"):
            errors = env_validation.validate_database_url()

        assert any("PostgreSQL" in e for e in errors)


class TestValidateEnvironment:

    def test_test_environment_is_valid(self):
        assert env_validation.validate_environment() == (True, [])

    def test_missing_integrations_are_warnings(self):
        warnings = env_validation.collect_integration_warnings()

        assert any("NEWS_API_KEY" in w for w in warnings)
        assert any("ANTHROPIC_API_KEY" in w for w in warnings)
        assert any("SMTP_HOST" in w for w in warnings)

    def test_invalid_environment_exits_only_in_production(self):
        with patch.object(settings, "SECRET_KEY", "short"):
            env_validation.validate_or_exit()

            with patch.object(settings, "APP_ENV", "production"):
                with pytest.raises(SystemExit):
                    env_validation.validate_or_exit()

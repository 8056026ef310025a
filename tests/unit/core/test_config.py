"""Unit tests for settings loading and environment defaults."""

from decimal import Decimal

import pytest
import pytest_check as check
from pydantic import ValidationError

from nagarkar.core.config import (
    DatabaseConfig,
    PenaltyConfig,
    SchedulerConfig,
    Settings,
    get_settings,
)


@pytest.mark.unit
class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings()

        check.equal(settings.app_name, "Nagarkar")
        check.equal(settings.environment, "development")
        check.equal(settings.auth_config.jwt_algorithm, "HS256")
        check.equal(settings.auth_config.token_expire_hours, 24)
        check.equal(settings.penalty_config.rule_selection, "first_match")
        check.equal(settings.gateway_config.currency, "INR")

    def test_nested_values_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AUTH_CONFIG__JWT_SECRET", "another-secret")
        monkeypatch.setenv("PENALTY_CONFIG__RULE_SELECTION", "highest_grace")
        monkeypatch.setenv("SCHEDULER_CONFIG__OVERDUE_CHECK_HOUR", "6")

        settings = Settings()

        check.equal(settings.auth_config.jwt_secret, "another-secret")
        check.equal(settings.penalty_config.rule_selection, "highest_grace")
        check.equal(settings.scheduler_config.overdue_check_hour, 6)

    def test_production_lowers_trace_sampling(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("AWS_EXECUTION_ENV", raising=False)
        monkeypatch.delenv("K_SERVICE", raising=False)

        settings = Settings()

        check.equal(settings.observability_config.trace_sample_rate, 0.1)
        check.equal(settings.observability_config.exporter_type, "otlp")
        check.equal(settings.log_config.log_formatter_type, "json")

    def test_empty_docs_url_disables_docs(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DOCS_URL", "")
        assert Settings().docs_url is None

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestDatabaseConfig:
    def test_sync_driver_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="async support"):
            DatabaseConfig(database_url="postgresql://localhost/db")

    def test_sqlite_is_detected(self) -> None:
        config = DatabaseConfig(database_url="sqlite+aiosqlite:///nagarkar.db")
        assert config.is_sqlite


@pytest.mark.unit
class TestPenaltyConfig:
    def test_default_rules(self) -> None:
        rules = PenaltyConfig().rules

        assert [r.id for r in rules] == ["fixed_100", "percentage_2", "escalating"]
        check.equal(rules[0].value, Decimal(100))
        check.equal(rules[1].max_penalty, Decimal(1000))
        check.is_true(rules[2].escalating)

    def test_rules_may_not_be_empty(self) -> None:
        with pytest.raises(ValidationError):
            PenaltyConfig(rules=[])


@pytest.mark.unit
class TestSchedulerConfig:
    def test_empty_result_backend_is_none(self) -> None:
        assert SchedulerConfig(result_backend="").result_backend is None

    def test_hour_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            SchedulerConfig(overdue_check_hour=24)

"""Tests for settings, the container and logging setup."""

import logging
from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from fx_bank.config import Environment, RateStoreType, Settings, get_settings
from fx_bank.container import Container, get_container
from fx_bank.domain.rounding import RoundingMode
from fx_bank.logging_config import (
    PACKAGE_LOGGER,
    LogContext,
    build_processors,
    configure_logging,
    get_logger,
)
from fx_bank.repositories.memory import HistoricalMemoryRateStore, MemoryRateStore
from fx_bank.repositories.sqlite import SQLiteRateStore
from fx_bank.services.exchange import ExchangeBank, get_default_bank


class TestSettings:
    def test_defaults(self):
        settings = Settings()

        assert settings.rate_store_type == RateStoreType.MEMORY
        assert settings.default_rounding is None
        assert settings.decimal_precision == 50
        assert settings.log_format == "console"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("FXB_RATE_STORE_TYPE", "sqlite")
        monkeypatch.setenv("FXB_SQLITE_PATH", "/tmp/fx.db")
        monkeypatch.setenv("FXB_DEFAULT_ROUNDING", "half_even")

        settings = get_settings()

        assert settings.rate_store_type == RateStoreType.SQLITE
        assert settings.sqlite_path == Path("/tmp/fx.db")
        assert settings.default_rounding is RoundingMode.HALF_EVEN

    def test_rounding_name_is_case_insensitive(self):
        assert Settings(default_rounding="HALF_EVEN").default_rounding is (
            RoundingMode.HALF_EVEN
        )
        assert Settings(default_rounding="").default_rounding is None

    def test_unknown_rounding_name_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(default_rounding="bankers")

    def test_precision_lower_bound(self):
        with pytest.raises(ValidationError):
            Settings(decimal_precision=10)

    def test_production_defaults_to_json_logs(self):
        settings = Settings(environment=Environment.PRODUCTION, log_format=None)

        assert settings.log_format == "json"
        assert settings.is_production

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestContainer:
    @pytest.mark.parametrize(
        ("store_type", "store_class"),
        [
            (RateStoreType.MEMORY, MemoryRateStore),
            (RateStoreType.HISTORICAL, HistoricalMemoryRateStore),
        ],
    )
    def test_builds_configured_store(self, store_type, store_class):
        container = Container(Settings(rate_store_type=store_type))

        assert isinstance(container.rate_store, store_class)
        assert container.bank.store is container.rate_store

    def test_sqlite_store_uses_configured_path(self, tmp_path):
        db_path = tmp_path / "rates.db"
        container = Container(
            Settings(rate_store_type=RateStoreType.SQLITE, sqlite_path=db_path)
        )

        assert isinstance(container.rate_store, SQLiteRateStore)
        assert container.rate_store.database.path == str(db_path)
        container.close()

    def test_bank_uses_configured_rounding(self):
        container = Container(Settings(default_rounding=RoundingMode.FLOOR))

        assert container.bank.rounding is RoundingMode.FLOOR

    def test_bank_receives_importer(self):
        calls = []
        container = Container(Settings(), importer=calls.append)

        container.bank.import_rates()

        assert calls == [container.bank.add_rate]

    def test_close_without_store_is_a_no_op(self):
        container = Container(Settings())

        container.close()

        assert "rate_store" not in container.__dict__

    def test_default_bank_comes_from_container(self):
        bank = get_default_bank()

        assert isinstance(bank, ExchangeBank)
        assert bank is get_container().bank


class TestLogging:
    def test_configure_logging_console(self):
        configure_logging(Settings(log_format="console"))

        assert structlog.is_configured()

    def test_configure_logging_writes_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "fx.log"
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        handlers = list(package_logger.handlers)
        try:
            configure_logging(Settings(log_file=log_file))
            assert log_file.parent.exists()
            assert any(
                isinstance(h, logging.FileHandler) for h in package_logger.handlers
            )
        finally:
            for handler in package_logger.handlers[:]:
                if handler not in handlers:
                    package_logger.removeHandler(handler)
                    handler.close()

    def test_log_context_binds_and_unbinds(self):
        with LogContext(batch="ecb-daily"):
            assert structlog.contextvars.get_contextvars() == {"batch": "ecb-daily"}

        assert structlog.contextvars.get_contextvars() == {}

    def test_get_logger_returns_bound_logger(self):
        logger = get_logger("fx_bank.test")

        assert hasattr(logger, "info")

    def test_json_processors_end_with_json_renderer(self):
        processors = build_processors("json")

        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_processors_end_with_console_renderer(self):
        processors = build_processors("console")

        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

"""Dependency container for fx-bank.

Builds the rate store and exchange bank from settings on first access.

Usage:
    from fx_bank.container import get_container

    bank = get_container().bank
    bank.add_rate("USD", "EUR", "0.75")
"""

from functools import cached_property, lru_cache

from fx_bank.config import RateStoreType, Settings, get_settings
from fx_bank.domain.currencies import CurrencyRegistry, default_registry
from fx_bank.logging_config import get_logger
from fx_bank.repositories.interfaces import RateStore
from fx_bank.services.exchange import ExchangeBank, Importer

logger = get_logger(__name__)


class Container:
    """Lazily wires the registry, rate store and bank together.

    The container can be configured with custom settings for testing:

        test_settings = Settings(rate_store_type=RateStoreType.SQLITE, sqlite_path=":memory:")
        container = Container(settings=test_settings)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        importer: Importer | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._importer = importer
        logger.debug(
            "container_created",
            rate_store_type=self._settings.rate_store_type.value,
            environment=self._settings.environment.value,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> CurrencyRegistry:
        return default_registry

    @cached_property
    def rate_store(self) -> RateStore:
        """Rate store selected by ``rate_store_type``."""
        store_type = self._settings.rate_store_type
        if store_type == RateStoreType.SQLITE:
            from fx_bank.repositories.sqlite import SQLiteRateStore

            path = str(self._settings.sqlite_path)
            logger.debug("initializing_sqlite_rate_store", path=path)
            return SQLiteRateStore(path)
        if store_type == RateStoreType.HISTORICAL:
            from fx_bank.repositories.memory import HistoricalMemoryRateStore

            return HistoricalMemoryRateStore()

        from fx_bank.repositories.memory import MemoryRateStore

        return MemoryRateStore()

    @cached_property
    def bank(self) -> ExchangeBank:
        """Exchange bank over ``rate_store`` with the configured rounding."""
        return ExchangeBank(
            self.rate_store,
            importer=self._importer,
            rounding=self._settings.default_rounding,
            registry=self.registry,
            precision=self._settings.decimal_precision,
        )

    def close(self) -> None:
        """Release the rate store's resources if it holds any."""
        if "rate_store" in self.__dict__:
            close = getattr(self.rate_store, "close", None)
            if close is not None:
                logger.info("closing_rate_store")
                close()


@lru_cache
def get_container() -> Container:
    """Get the cached container built from environment settings.

    Call get_container.cache_clear() to rebuild it.
    """
    return Container()

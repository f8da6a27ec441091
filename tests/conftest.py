from datetime import date
from decimal import Decimal

import pytest

from fx_bank.config import get_settings
from fx_bank.container import get_container
from fx_bank.domain.currencies import Currency, CurrencyRegistry
from fx_bank.repositories.memory import HistoricalMemoryRateStore, MemoryRateStore
from fx_bank.services.exchange import ExchangeBank, set_default_bank


class CountingDatelessStore:
    """Duck-typed ``get_rate(from, to)`` store that records lookups."""

    def __init__(self) -> None:
        self.rates: dict[tuple[str, str], Decimal] = {}
        self.lookups: list[tuple[str, str]] = []

    def get_rate(self, from_iso, to_iso):
        self.lookups.append((from_iso, to_iso))
        return self.rates.get((from_iso, to_iso))

    def add_rate(self, from_iso, to_iso, rate):
        self.rates[(from_iso, to_iso)] = rate
        return rate


class CountingDatedStore:
    """Duck-typed ``get_rate(from, to, date)`` store that records lookups."""

    def __init__(self) -> None:
        self.rates: dict[tuple[str, str, date | None], Decimal] = {}
        self.lookups: list[tuple[str, str, date | None]] = []

    def get_rate(self, from_iso, to_iso, on_date):
        self.lookups.append((from_iso, to_iso, on_date))
        return self.rates.get((from_iso, to_iso, on_date))

    def add_rate(self, from_iso, to_iso, rate, on_date=None):
        self.rates[(from_iso, to_iso, on_date)] = rate
        return rate


@pytest.fixture(autouse=True)
def reset_defaults():
    """Keep the process-wide bank, settings and container isolated per test."""
    set_default_bank(None)
    get_settings.cache_clear()
    get_container.cache_clear()
    yield
    set_default_bank(None)
    get_settings.cache_clear()
    get_container.cache_clear()


@pytest.fixture
def memory_store() -> MemoryRateStore:
    return MemoryRateStore()


@pytest.fixture
def historical_store() -> HistoricalMemoryRateStore:
    return HistoricalMemoryRateStore()


@pytest.fixture
def bank(memory_store: MemoryRateStore) -> ExchangeBank:
    return ExchangeBank(memory_store)


@pytest.fixture
def counting_store() -> CountingDatelessStore:
    return CountingDatelessStore()


@pytest.fixture
def counting_dated_store() -> CountingDatedStore:
    return CountingDatedStore()


@pytest.fixture
def registry() -> CurrencyRegistry:
    return CurrencyRegistry(
        [
            Currency("USD", 100, symbol="$"),
            Currency("EUR", 100, symbol="€"),
            Currency("JPY", 1, symbol="¥"),
            Currency("KWD", 1000),
        ]
    )

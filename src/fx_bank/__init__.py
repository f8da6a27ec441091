from fx_bank.domain.currencies import Currency, CurrencyRegistry
from fx_bank.domain.exchange_rates import ExchangeRate, ExchangeRateSource, wrap_rate
from fx_bank.domain.rounding import RoundingMode
from fx_bank.domain.value_objects import Money
from fx_bank.exceptions import (
    FxBankError,
    InvalidCurrencyError,
    InvalidRateValueError,
    UnknownRateError,
    UnsupportedStoreShapeError,
)
from fx_bank.repositories import (
    HistoricalMemoryRateStore,
    MemoryRateStore,
    SQLiteRateStore,
    StoreCapability,
)
from fx_bank.services.exchange import ExchangeBank, get_default_bank, set_default_bank

__all__ = [
    "Currency",
    "CurrencyRegistry",
    "ExchangeBank",
    "ExchangeRate",
    "ExchangeRateSource",
    "FxBankError",
    "HistoricalMemoryRateStore",
    "InvalidCurrencyError",
    "InvalidRateValueError",
    "MemoryRateStore",
    "Money",
    "RoundingMode",
    "SQLiteRateStore",
    "StoreCapability",
    "UnknownRateError",
    "UnsupportedStoreShapeError",
    "get_default_bank",
    "set_default_bank",
    "wrap_rate",
]

__version__ = "0.1.0"

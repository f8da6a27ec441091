from fx_bank.domain.currencies import (
    Currency,
    CurrencyRegistry,
    default_registry,
)
from fx_bank.domain.exchange_rates import ExchangeRate, ExchangeRateSource, wrap_rate
from fx_bank.domain.rounding import RoundingMode, RoundingPolicy
from fx_bank.domain.value_objects import Money

__all__ = [
    "Currency",
    "CurrencyRegistry",
    "ExchangeRate",
    "ExchangeRateSource",
    "Money",
    "RoundingMode",
    "RoundingPolicy",
    "default_registry",
    "wrap_rate",
]

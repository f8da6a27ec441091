from fx_bank.services.exchange import ExchangeBank, get_default_bank, set_default_bank
from fx_bank.services.interfaces import Bank
from fx_bank.services.resolver import (
    InsertConvention,
    LookupConvention,
    RateResolver,
    detect_convention,
    detect_insert_convention,
)

__all__ = [
    "Bank",
    "ExchangeBank",
    "InsertConvention",
    "LookupConvention",
    "RateResolver",
    "detect_convention",
    "detect_insert_convention",
    "get_default_bank",
    "set_default_bank",
]

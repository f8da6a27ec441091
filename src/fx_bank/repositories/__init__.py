from fx_bank.repositories.interfaces import (
    DatedRateStore,
    DatelessRateStore,
    RateStore,
    StoreCapability,
)
from fx_bank.repositories.memory import HistoricalMemoryRateStore, MemoryRateStore
from fx_bank.repositories.sqlite import SQLiteDatabase, SQLiteRateStore

__all__ = [
    "DatedRateStore",
    "DatelessRateStore",
    "HistoricalMemoryRateStore",
    "MemoryRateStore",
    "RateStore",
    "SQLiteDatabase",
    "SQLiteRateStore",
    "StoreCapability",
]

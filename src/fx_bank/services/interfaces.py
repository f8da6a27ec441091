from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from fx_bank.domain.currencies import Currency, CurrencyRegistry, default_registry
from fx_bank.domain.rounding import RoundingPolicy
from fx_bank.domain.value_objects import Money


class Bank(ABC):
    """What a Money value needs from the bank it is bound to."""

    @property
    def registry(self) -> CurrencyRegistry:
        """Registry that resolves currency codes and symbols for this bank."""
        return default_registry

    @abstractmethod
    def exchange_with(
        self,
        from_money: Money,
        to_currency: Currency | str,
        *,
        date: date | datetime | None = None,
        rate: Any = None,
        rounding: RoundingPolicy | str | None = None,
    ) -> Money:
        pass

    @abstractmethod
    def get_rate(
        self,
        from_currency: Currency | str,
        to_currency: Currency | str,
        date: date | datetime | None = None,
    ) -> Decimal | None:
        pass

    @abstractmethod
    def add_rate(
        self,
        from_currency: Currency | str,
        to_currency: Currency | str,
        rate: Any,
        date: date | datetime | None = None,
    ) -> Decimal:
        pass

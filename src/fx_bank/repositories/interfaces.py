from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar

from fx_bank.domain.exchange_rates import ExchangeRate


class StoreCapability(str, Enum):
    """Calling convention a rate store exposes for lookups."""

    DATELESS = "dateless"
    DATED = "dated"


class RateStore(ABC):
    """Repository interface for exchange rates keyed by ISO code pairs.

    Implementations decide their own thread-safety; the exchange bank never
    locks around store calls.
    """

    capability: ClassVar[StoreCapability]

    @abstractmethod
    def add_rate(self, from_iso: str, to_iso: str, rate: Decimal) -> Decimal:
        """Add or overwrite a rate and return it."""
        pass

    @abstractmethod
    def marshal_dump(self) -> tuple[Any, ...]:
        """Return ``(store_class, *constructor_args)`` that rebuild this store."""
        pass


class DatelessRateStore(RateStore):
    """A store holding a single current rate per currency pair."""

    capability = StoreCapability.DATELESS

    @abstractmethod
    def get_rate(self, from_iso: str, to_iso: str) -> Decimal | None:
        pass


class DatedRateStore(RateStore):
    """A store holding rate histories.

    ``get_rate`` with no date returns the latest known rate; with a date it
    returns the rate effective on that date or the most recent one before it.
    """

    capability = StoreCapability.DATED

    @abstractmethod
    def add_rate(
        self,
        from_iso: str,
        to_iso: str,
        rate: Decimal,
        effective_date: date | None = None,
    ) -> Decimal:
        pass

    @abstractmethod
    def get_rate(
        self, from_iso: str, to_iso: str, effective_date: date | None = None
    ) -> Decimal | None:
        pass

    @abstractmethod
    def list_by_currency_pair(
        self,
        from_iso: str,
        to_iso: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Iterable[ExchangeRate]:
        pass

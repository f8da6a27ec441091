"""In-process rate stores.

Both stores guard their dictionaries with a re-entrant lock so one store can
be shared between threads.
"""

import threading
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal

from fx_bank.domain.exchange_rates import ExchangeRate, ExchangeRateSource, coerce_date
from fx_bank.repositories.interfaces import DatedRateStore, DatelessRateStore

_SEPARATOR = "_TO_"


def _rate_key(from_iso: str, to_iso: str) -> str:
    return f"{from_iso}{_SEPARATOR}{to_iso}".upper()


class MemoryRateStore(DatelessRateStore):
    """Current rates keyed by pair, e.g. ``{"USD_TO_EUR": Decimal("0.75")}``."""

    def __init__(self, rates: Mapping[str, Decimal] | None = None) -> None:
        self._rates: dict[str, Decimal] = dict(rates or {})
        self._lock = threading.RLock()

    def add_rate(self, from_iso: str, to_iso: str, rate: Decimal) -> Decimal:
        with self._lock:
            self._rates[_rate_key(from_iso, to_iso)] = rate
        return rate

    def get_rate(self, from_iso: str, to_iso: str) -> Decimal | None:
        with self._lock:
            return self._rates.get(_rate_key(from_iso, to_iso))

    def marshal_dump(self) -> tuple[type["MemoryRateStore"], dict[str, Decimal]]:
        with self._lock:
            return (type(self), dict(self._rates))

    def __len__(self) -> int:
        return len(self._rates)


class HistoricalMemoryRateStore(DatedRateStore):
    """Rate histories kept per pair as ``{effective_date: ExchangeRate}``."""

    def __init__(self, rates: Iterable[ExchangeRate] | None = None) -> None:
        self._rates: dict[str, dict[date, ExchangeRate]] = {}
        self._lock = threading.RLock()
        for rate in rates or []:
            self.add(rate)

    def add(self, rate: ExchangeRate) -> None:
        with self._lock:
            history = self._rates.setdefault(
                _rate_key(rate.from_currency, rate.to_currency), {}
            )
            history[rate.effective_date] = rate

    def add_rate(
        self,
        from_iso: str,
        to_iso: str,
        rate: Decimal,
        effective_date: date | None = None,
    ) -> Decimal:
        record = ExchangeRate(
            from_currency=from_iso,
            to_currency=to_iso,
            rate=rate,
            effective_date=coerce_date(effective_date) or date.today(),
            source=ExchangeRateSource.MANUAL,
        )
        self.add(record)
        return record.rate

    def get_rate(
        self, from_iso: str, to_iso: str, effective_date: date | None = None
    ) -> Decimal | None:
        record = self.get_record(from_iso, to_iso, effective_date)
        return None if record is None else record.rate

    def get_record(
        self, from_iso: str, to_iso: str, effective_date: date | None = None
    ) -> ExchangeRate | None:
        effective_date = coerce_date(effective_date)
        with self._lock:
            history = self._rates.get(_rate_key(from_iso, to_iso))
            if not history:
                return None
            candidates = [
                day
                for day in history
                if effective_date is None or day <= effective_date
            ]
            if not candidates:
                return None
            return history[max(candidates)]

    def list_by_currency_pair(
        self,
        from_iso: str,
        to_iso: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Iterable[ExchangeRate]:
        with self._lock:
            history = dict(self._rates.get(_rate_key(from_iso, to_iso), {}))
        return [
            history[day]
            for day in sorted(history)
            if (start_date is None or day >= start_date)
            and (end_date is None or day <= end_date)
        ]

    def marshal_dump(
        self,
    ) -> tuple[type["HistoricalMemoryRateStore"], list[ExchangeRate]]:
        with self._lock:
            records = [
                rate for history in self._rates.values() for rate in history.values()
            ]
        return (type(self), records)

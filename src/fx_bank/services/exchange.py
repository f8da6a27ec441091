"""ExchangeBank: rate registration, lookup and Money conversion.

A process-wide default bank backs Money objects created without one; it is
built lazily from the container and can be replaced with set_default_bank.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, localcontext
from typing import Any

from fx_bank.domain.currencies import Currency, CurrencyRegistry, default_registry
from fx_bank.domain.exchange_rates import DEFAULT_PRECISION, coerce_date, wrap_rate
from fx_bank.domain.rounding import RoundingPolicy, resolve_rounding
from fx_bank.domain.value_objects import Money
from fx_bank.exceptions import InvalidRateValueError, UnknownRateError
from fx_bank.logging_config import LogContext, get_logger
from fx_bank.repositories.interfaces import StoreCapability
from fx_bank.repositories.memory import MemoryRateStore
from fx_bank.services.interfaces import Bank
from fx_bank.services.resolver import RateResolver

logger = get_logger(__name__)

Importer = Callable[[Callable[..., Decimal]], object]


class ExchangeBank(Bank):
    """Converts Money between currencies using rates from a pluggable store.

    The store may be dateless (``get_rate(from, to)``) or dated
    (``get_rate(from, to, date)``); which one is decided once, here, when the
    store is attached.

    The bank takes no locks. The store must be safe for concurrent reads, or
    callers sharing a bank across threads must serialize access themselves.

    Example:
        store = MemoryRateStore()
        importer = lambda add_rate: add_rate("USD", "EUR", Decimal("0.75"))
        bank = ExchangeBank(store, importer=importer, rounding=RoundingMode.HALF_EVEN)
        bank.import_rates()
        Money(1000, "USD", bank=bank).exchange_to("EUR")  # Money(750, EUR)
    """

    def __init__(
        self,
        store: object | None = None,
        *,
        importer: Importer | None = None,
        rounding: RoundingPolicy | str | None = None,
        registry: CurrencyRegistry | None = None,
        precision: int = DEFAULT_PRECISION,
    ) -> None:
        self._store = store if store is not None else MemoryRateStore()
        self._registry = registry or default_registry
        self._resolver = RateResolver(self._store, self._registry, precision)
        self._importer = importer
        self._rounding = resolve_rounding(rounding)
        self._precision = precision

    @property
    def store(self) -> Any:
        return self._store

    @property
    def capability(self) -> StoreCapability:
        return self._resolver.capability

    @property
    def rounding(self) -> RoundingPolicy | None:
        return self._rounding

    @property
    def registry(self) -> CurrencyRegistry:
        return self._registry

    def add_rate(
        self,
        from_currency: Currency | str,
        to_currency: Currency | str,
        rate: Any,
        date: date | datetime | None = None,
    ) -> Decimal:
        """Register a rate for one direction and return it as a Decimal.

        No inverse is stored; register ``to -> from`` separately if needed.
        ``date`` is only passed to dated stores whose add_rate accepts one.

        Raises:
            InvalidCurrencyError: If either currency is unknown.
            InvalidRateValueError: If ``rate`` is missing, malformed or not positive.
        """
        from_iso = self._registry.wrap(from_currency).iso_code
        to_iso = self._registry.wrap(to_currency).iso_code
        normalized = wrap_rate(rate, self._precision)
        if normalized is None:
            raise InvalidRateValueError(rate, "is required when registering")

        self._resolver.add(from_iso, to_iso, normalized, date)
        logger.debug(
            "rate_added",
            from_currency=from_iso,
            to_currency=to_iso,
            rate=str(normalized),
            date=None if date is None else str(date),
        )
        return normalized

    def get_rate(
        self,
        from_currency: Currency | str,
        to_currency: Currency | str,
        date: date | datetime | None = None,
    ) -> Decimal | None:
        return self._resolver.resolve(from_currency, to_currency, date)

    def import_rates(self) -> object:
        """Hand ``add_rate`` to the importer once; no-op without an importer."""
        if self._importer is None:
            return None
        with LogContext(rate_store=type(self._store).__name__):
            logger.info("rate_import_started")
            result = self._importer(self.add_rate)
            logger.info("rate_import_finished")
        return result

    def exchange_with(
        self,
        from_money: Money,
        to_currency: Currency | str,
        *,
        date: date | datetime | None = None,
        rate: Any = None,
        rounding: RoundingPolicy | str | None = None,
    ) -> Money:
        """Convert ``from_money`` into ``to_currency``.

        Same-currency conversion returns ``from_money`` itself without touching
        the store or rounding. An explicit ``rate`` bypasses the store. The
        per-call ``rounding`` wins over the bank default; with neither, the
        exact Decimal result is kept.

        Raises:
            UnknownRateError: If no rate is known and none was supplied.
            InvalidRateValueError: If ``rate`` is not a number or rate-shaped.
        """
        to_currency = self._registry.wrap(to_currency)
        if from_money.currency == to_currency:
            return from_money

        if rate is None:
            effective_rate = self.get_rate(from_money.currency, to_currency, date)
        else:
            effective_rate = wrap_rate(rate, self._precision)

        if effective_rate is None:
            raise UnknownRateError(
                from_money.currency.iso_code,
                to_currency.iso_code,
                _date_or_none(date),
            )

        fractional = self._calculate_fractional(from_money, to_currency)
        exchanged = self._exchange(
            fractional, effective_rate, resolve_rounding(rounding)
        )
        return type(from_money)(exchanged, to_currency, bank=from_money.bank)

    def _calculate_fractional(
        self, from_money: Money, to_currency: Currency
    ) -> Decimal:
        # Minor units of the source expressed as minor units of the target.
        with localcontext(prec=self._precision):
            return (
                Decimal(from_money.fractional)
                * Decimal(to_currency.subunit_to_unit)
                / Decimal(from_money.currency.subunit_to_unit)
            )

    def _exchange(
        self,
        fractional: Decimal,
        rate: Decimal,
        rounding: RoundingPolicy | None = None,
    ) -> Decimal | int:
        with localcontext(prec=self._precision):
            exchanged = fractional * rate
            policy = rounding if rounding is not None else self._rounding
            if policy is not None:
                return policy(exchanged)
            return exchanged

    def __getstate__(self) -> dict[str, Any]:
        store: Any = self._store
        return {
            "store": store.marshal_dump(),
            "rounding": self._rounding,
            "precision": self._precision,
            "registry": None if self._registry is default_registry else self._registry,
        }

    def __setstate__(self, state: dict[str, Any]) -> None:
        store_class, *store_args = state["store"]
        self.__init__(
            store_class(*store_args),
            rounding=state["rounding"],
            registry=state["registry"],
            precision=state["precision"],
        )


def _date_or_none(value: object) -> date | None:
    return coerce_date(value) if isinstance(value, date) else None


_default_bank: Bank | None = None
_default_bank_lock = threading.Lock()


def get_default_bank() -> Bank:
    """Return the bank used by Money values that were not given one."""
    with _default_bank_lock:
        if _default_bank is not None:
            return _default_bank
    from fx_bank.container import get_container

    return get_container().bank


def set_default_bank(bank: Bank | None) -> None:
    """Replace the process-wide default bank; None restores the configured one."""
    global _default_bank
    with _default_bank_lock:
        _default_bank = bank

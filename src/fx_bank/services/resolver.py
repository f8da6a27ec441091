"""Rate lookup across stores with different get_rate calling conventions."""

import inspect
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from fx_bank.domain.currencies import Currency, CurrencyRegistry, default_registry
from fx_bank.domain.exchange_rates import DEFAULT_PRECISION, wrap_rate
from fx_bank.exceptions import UnsupportedStoreShapeError
from fx_bank.logging_config import get_logger
from fx_bank.repositories.interfaces import StoreCapability

logger = get_logger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True, slots=True)
class LookupConvention:
    """How to call a store's get_rate.

    ``date_keyword`` is set when the date must be passed by keyword.
    """

    capability: StoreCapability
    date_keyword: str | None = None


def detect_convention(store: object) -> LookupConvention:
    """Work out once how ``store.get_rate`` must be called.

    Stores deriving from DatelessRateStore or DatedRateStore declare their
    capability. Other stores are classified from the get_rate signature:
    ``(from, to)`` is dateless; ``(from, to, date)``, an optional third
    positional parameter, a keyword-only ``date`` or ``**kwargs`` is dated.

    Raises:
        UnsupportedStoreShapeError: For any other signature.
    """
    declared = getattr(type(store), "capability", None)
    if isinstance(declared, StoreCapability):
        return LookupConvention(declared)

    get_rate = getattr(store, "get_rate", None)
    if not callable(get_rate):
        raise UnsupportedStoreShapeError(store, None)
    try:
        parameters = list(inspect.signature(get_rate).parameters.values())
    except (TypeError, ValueError):
        raise UnsupportedStoreShapeError(store, None) from None

    positional = [p for p in parameters if p.kind in _POSITIONAL]
    required = [p for p in positional if p.default is inspect.Parameter.empty]
    arity = len(required)
    has_var_positional = any(
        p.kind is inspect.Parameter.VAR_POSITIONAL for p in parameters
    )
    has_var_keyword = any(p.kind is inspect.Parameter.VAR_KEYWORD for p in parameters)
    keyword_only = {
        p.name: p for p in parameters if p.kind is inspect.Parameter.KEYWORD_ONLY
    }
    required_keyword_only = [
        name
        for name, p in keyword_only.items()
        if p.default is inspect.Parameter.empty and name != "date"
    ]
    if required_keyword_only:
        raise UnsupportedStoreShapeError(store, arity + len(required_keyword_only))

    date_required = (
        "date" in keyword_only
        and keyword_only["date"].default is inspect.Parameter.empty
    )
    if arity == 3 and not date_required:
        return LookupConvention(StoreCapability.DATED)
    if arity == 2:
        if "date" in keyword_only:
            return LookupConvention(StoreCapability.DATED, date_keyword="date")
        if len(positional) >= 3 or has_var_positional:
            return LookupConvention(StoreCapability.DATED)
        if has_var_keyword:
            return LookupConvention(StoreCapability.DATED, date_keyword="date")
        return LookupConvention(StoreCapability.DATELESS)
    raise UnsupportedStoreShapeError(store, arity)


@dataclass(frozen=True, slots=True)
class InsertConvention:
    """Whether, and how, a store's add_rate takes an effective date."""

    accepts_date: bool = False
    date_keyword: str | None = None


_DATE_KEYWORDS = ("date", "effective_date", "on_date")


def detect_insert_convention(store: object) -> InsertConvention:
    """Work out once whether ``store.add_rate`` can be given a date.

    Declared dated stores take it as a fourth positional argument. Other
    stores take it when add_rate has a fourth positional parameter,
    ``*args``, a date-named keyword or ``**kwargs``; a plain
    ``add_rate(from, to, rate)`` never receives one.
    """
    declared = getattr(type(store), "capability", None)
    if isinstance(declared, StoreCapability):
        return InsertConvention(accepts_date=declared is StoreCapability.DATED)

    add_rate = getattr(store, "add_rate", None)
    if not callable(add_rate):
        return InsertConvention()
    try:
        parameters = list(inspect.signature(add_rate).parameters.values())
    except (TypeError, ValueError):
        return InsertConvention()

    kinds = {p.kind for p in parameters}
    positional = [p for p in parameters if p.kind in _POSITIONAL]
    if len(positional) >= 4 or inspect.Parameter.VAR_POSITIONAL in kinds:
        return InsertConvention(accepts_date=True)
    names = {p.name for p in parameters if p.kind is inspect.Parameter.KEYWORD_ONLY}
    for keyword in _DATE_KEYWORDS:
        if keyword in names:
            return InsertConvention(accepts_date=True, date_keyword=keyword)
    if inspect.Parameter.VAR_KEYWORD in kinds:
        return InsertConvention(accepts_date=True, date_keyword="date")
    return InsertConvention()


class RateResolver:
    """Looks up rates in one store using the convention detected at attachment."""

    def __init__(
        self,
        store: object,
        registry: CurrencyRegistry | None = None,
        precision: int = DEFAULT_PRECISION,
    ) -> None:
        self._store = store
        self._registry = registry or default_registry
        self._precision = precision
        self._convention = detect_convention(store)
        if self._convention.capability is StoreCapability.DATED:
            self._insert = detect_insert_convention(store)
        else:
            self._insert = InsertConvention()
        logger.debug(
            "rate_store_attached",
            store=type(store).__name__,
            capability=self._convention.capability.value,
        )

    @property
    def store(self) -> object:
        return self._store

    @property
    def capability(self) -> StoreCapability:
        return self._convention.capability

    def resolve(
        self,
        from_currency: Currency | str,
        to_currency: Currency | str,
        date: date | datetime | None = None,
    ) -> Decimal | None:
        """Return the rate for the pair, or None when the store has none.

        Dateless stores ignore ``date``.
        """
        from_iso = self._registry.wrap(from_currency).iso_code
        to_iso = self._registry.wrap(to_currency).iso_code

        raw = self._lookup(from_iso, to_iso, date)
        if raw is None:
            logger.debug(
                "rate_unknown",
                from_currency=from_iso,
                to_currency=to_iso,
                date=None if date is None else str(date),
            )
            return None
        return wrap_rate(raw, self._precision)

    def add(self, from_iso: str, to_iso: str, rate: Decimal, on_date: Any) -> None:
        """Hand a normalized rate to the store, with the date only if it takes one."""
        store: Any = self._store
        if on_date is None or not self._insert.accepts_date:
            store.add_rate(from_iso, to_iso, rate)
        elif self._insert.date_keyword:
            keyword = self._insert.date_keyword
            store.add_rate(from_iso, to_iso, rate, **{keyword: on_date})
        else:
            store.add_rate(from_iso, to_iso, rate, on_date)

    def _lookup(self, from_iso: str, to_iso: str, on_date: Any) -> Any:
        store: Any = self._store
        if self._convention.capability is StoreCapability.DATELESS:
            return store.get_rate(from_iso, to_iso)
        if self._convention.date_keyword:
            keyword = self._convention.date_keyword
            return store.get_rate(from_iso, to_iso, **{keyword: on_date})
        return store.get_rate(from_iso, to_iso, on_date)

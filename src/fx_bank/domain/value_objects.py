from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from fx_bank.domain.currencies import Currency, CurrencyRegistry, default_registry
from fx_bank.domain.rounding import RoundingPolicy
from fx_bank.exceptions import InvalidAmountError

if TYPE_CHECKING:
    from fx_bank.services.interfaces import Bank


@dataclass(frozen=True, slots=True)
class Money:
    """An amount in minor units ("fractional") of a currency.

    Money never changes after construction. ``exchange_to`` is the only way to
    move a value into another currency and always returns a new Money.
    """

    fractional: Decimal
    currency: Currency | str = "USD"
    bank: Bank | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.fractional, bool):
            raise InvalidAmountError(self.fractional, "booleans are not amounts")
        if not isinstance(self.fractional, Decimal):
            try:
                object.__setattr__(self, "fractional", Decimal(str(self.fractional)))
            except InvalidOperation:
                raise InvalidAmountError(self.fractional, "not a number") from None
        if not self.fractional.is_finite():
            raise InvalidAmountError(self.fractional, "must be finite")
        registry = _registry_of(self.bank)
        object.__setattr__(self, "currency", registry.wrap(self.currency))

    @classmethod
    def from_amount(
        cls,
        amount: Decimal | int | float | str,
        currency: Currency | str = "USD",
        bank: Bank | None = None,
    ) -> Money:
        """Build from major units, e.g. ``Money.from_amount("10.50", "USD")``."""
        try:
            value = Decimal(str(amount))
        except InvalidOperation:
            raise InvalidAmountError(amount, "not a number") from None
        wrapped = _registry_of(bank).wrap(currency)
        return cls(value * wrapped.subunit_to_unit, wrapped, bank=bank)

    @property
    def amount(self) -> Decimal:
        """Value in major units."""
        return self.fractional / Decimal(self.currency.subunit_to_unit)

    def exchange_to(
        self,
        other_currency: Currency | str,
        *,
        date: date | datetime | None = None,
        rate: Any = None,
        rounding: RoundingPolicy | str | None = None,
    ) -> Money:
        """Convert into ``other_currency`` through this value's bank.

        Args:
            other_currency: Target currency code, symbol or Currency, resolved
                through the bank's registry.
            date: Date of the rate to use; ignored by dateless stores.
            rate: Explicit rate (number or object with ``rate``) that skips
                the rate store.
            rounding: Rounding policy for this call only.

        Raises:
            UnknownRateError: If no rate is known and none was supplied.
            InvalidRateValueError: If ``rate`` is not a valid rate.
            InvalidCurrencyError: If ``other_currency`` is not recognised.
        """
        bank = self._bank()
        target = _registry_of(bank).wrap(other_currency)
        if self.currency == target:
            return self
        return bank.exchange_with(
            self, target, date=date, rate=rate, rounding=rounding
        )

    def with_bank(self, bank: Bank) -> Money:
        return Money(self.fractional, self.currency, bank=bank)

    def _bank(self) -> Bank:
        if self.bank is not None:
            return self.bank
        from fx_bank.services.exchange import get_default_bank

        return get_default_bank()

    def _check_currency(self, other: Money, verb: str) -> None:
        if self.currency != other.currency:
            raise ValueError(f"Cannot {verb} {self.currency} and {other.currency}")

    def __add__(self, other: Money) -> Money:
        self._check_currency(other, "add")
        return Money(self.fractional + other.fractional, self.currency, bank=self.bank)

    def __sub__(self, other: Money) -> Money:
        self._check_currency(other, "subtract")
        return Money(self.fractional - other.fractional, self.currency, bank=self.bank)

    def __mul__(self, factor: Decimal | int | float) -> Money:
        return Money(
            self.fractional * Decimal(str(factor)), self.currency, bank=self.bank
        )

    def __neg__(self) -> Money:
        return Money(-self.fractional, self.currency, bank=self.bank)

    def __lt__(self, other: Money) -> bool:
        self._check_currency(other, "compare")
        return self.fractional < other.fractional

    def __le__(self, other: Money) -> bool:
        return self == other or self < other

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.iso_code}"

    @property
    def is_zero(self) -> bool:
        return self.fractional == Decimal("0")

    @property
    def is_positive(self) -> bool:
        return self.fractional > Decimal("0")

    @property
    def is_negative(self) -> bool:
        return self.fractional < Decimal("0")

    @classmethod
    def zero(cls, currency: Currency | str = "USD") -> Money:
        return cls(Decimal("0"), currency)


__all__ = ["Currency", "Money"]


def _registry_of(bank: Bank | None) -> CurrencyRegistry:
    if bank is None:
        return default_registry
    return bank.registry

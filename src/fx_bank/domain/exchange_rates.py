"""Exchange rate domain model and rate validation."""

import numbers
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation, localcontext
from enum import Enum
from uuid import UUID, uuid4

from fx_bank.exceptions import InvalidRateValueError

DEFAULT_PRECISION = 50


class ExchangeRateSource(str, Enum):
    """Source of exchange rate data."""

    MANUAL = "manual"
    ECB = "ecb"
    FED = "fed"
    BANK = "bank"
    API = "api"
    IMPORT = "import"


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


def _is_real(value: object) -> bool:
    # Decimal is registered as a Number but not as a Real.
    return not isinstance(value, bool) and isinstance(value, Decimal | numbers.Real)


def _to_decimal(
    value: object, original: object, precision: int = DEFAULT_PRECISION
) -> Decimal:
    if not _is_real(value):
        raise InvalidRateValueError(original)
    try:
        if isinstance(value, numbers.Integral):
            converted = Decimal(int(value))
        elif isinstance(value, numbers.Rational):
            with localcontext(prec=precision):
                converted = Decimal(int(value.numerator)) / Decimal(
                    int(value.denominator)
                )
        else:
            converted = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidRateValueError(original) from None
    if not converted.is_finite():
        raise InvalidRateValueError(original, "must be finite")
    if converted <= 0:
        raise InvalidRateValueError(original, "must be positive")
    return converted


def wrap_rate(value: object, precision: int = DEFAULT_PRECISION) -> Decimal | None:
    """Normalize a rate override into an exact Decimal.

    Accepts None (no override), any real number, or an object exposing a
    ``rate`` attribute such as ExchangeRate. Rationals that do not terminate
    in base ten are divided out to ``precision`` significant digits.

    Raises:
        InvalidRateValueError: For any other value, or a non-positive rate.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidRateValueError(value)
    if _is_real(value):
        return _to_decimal(value, value, precision)
    if not isinstance(value, str) and hasattr(value, "rate"):
        return _to_decimal(value.rate, value, precision)
    raise InvalidRateValueError(value)


def coerce_date(value: date | datetime | None) -> date | None:
    """Reduce datetimes to their calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """Immutable exchange rate value object.

    Represents a conversion rate between two currencies on a specific date.
    """

    from_currency: str
    to_currency: str
    rate: Decimal
    effective_date: date
    id: UUID = field(default_factory=uuid4)
    source: ExchangeRateSource = ExchangeRateSource.MANUAL
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate and coerce rate to a positive Decimal."""
        object.__setattr__(self, "rate", _to_decimal(self.rate, self.rate))
        object.__setattr__(self, "from_currency", self.from_currency.upper())
        object.__setattr__(self, "to_currency", self.to_currency.upper())
        object.__setattr__(self, "effective_date", coerce_date(self.effective_date))

    @property
    def pair(self) -> str:
        """Return currency pair string like 'USD/EUR'."""
        return f"{self.from_currency}/{self.to_currency}"

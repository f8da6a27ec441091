"""Domain exception hierarchy for fx-bank.

All domain-specific exceptions inherit from FxBankError.
This allows catching every conversion failure with a single base class
while preserving specificity for individual error types.
"""

from datetime import date
from typing import Any


class FxBankError(Exception):
    """Base exception for all fx-bank errors.

    Includes an error_code for machine-readable reporting and extra context.
    """

    error_code: str = "FX_BANK_ERROR"

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured reporting."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Exchange Errors
# =============================================================================


class ExchangeError(FxBankError):
    """Base exception for conversion failures."""

    error_code = "EXCHANGE_ERROR"


class UnknownRateError(ExchangeError):
    """Raised when no rate is known for a currency pair and none was supplied."""

    error_code = "UNKNOWN_RATE"

    def __init__(
        self, from_currency: str, to_currency: str, on_date: date | None = None
    ) -> None:
        message = f"No conversion rate known for '{from_currency}' -> '{to_currency}'"
        context: dict[str, Any] = {
            "from_currency": from_currency,
            "to_currency": to_currency,
        }
        if on_date is not None:
            message += f" on {on_date.isoformat()}"
            context["date"] = on_date.isoformat()
        super().__init__(message, context=context)
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.date = on_date


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(FxBankError):
    """Base exception for invalid bank or store configuration."""

    error_code = "CONFIGURATION_ERROR"


class UnsupportedStoreShapeError(ConfigurationError):
    """Raised when a rate store's get_rate matches no supported calling convention."""

    error_code = "UNSUPPORTED_STORE_SHAPE"

    def __init__(self, store: object, arity: int | None) -> None:
        store_name = type(store).__name__
        if arity is None:
            detail = "it does not define a callable get_rate"
        else:
            detail = f"get_rate takes {arity} required argument(s)"
        super().__init__(
            f"Unsupported rate store {store_name}: {detail}. "
            "Expected get_rate(from, to) or get_rate(from, to, date).",
            context={"store": store_name, "arity": arity},
        )
        self.arity = arity


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(FxBankError, ValueError):
    """Base exception for invalid input values."""

    error_code = "VALIDATION_ERROR"


class InvalidCurrencyError(ValidationError):
    """Raised when a currency identifier cannot be resolved."""

    error_code = "INVALID_CURRENCY"

    def __init__(self, identifier: object) -> None:
        super().__init__(
            f"Unknown currency: {identifier!r}",
            context={"identifier": str(identifier)},
        )
        self.identifier = identifier


class InvalidRateValueError(ValidationError):
    """Raised when a supplied rate is neither numeric nor rate-shaped, or not positive."""

    error_code = "INVALID_RATE_VALUE"

    def __init__(self, value: object, reason: str | None = None) -> None:
        reason = reason or (
            "must be a real number or an object that exposes a 'rate' attribute"
        )
        super().__init__(
            f"Supplied rate: {value!r} is not valid. Rate {reason}.",
            context={"value": repr(value), "reason": reason},
        )
        self.value = value


class InvalidAmountError(ValidationError):
    """Raised when an invalid monetary amount is provided."""

    error_code = "INVALID_AMOUNT"

    def __init__(self, amount: object, reason: str) -> None:
        super().__init__(
            f"Invalid amount '{amount}': {reason}",
            context={"amount": str(amount), "reason": reason},
        )

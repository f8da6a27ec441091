"""Rounding policies applied to converted fractional amounts."""

from collections.abc import Callable
from decimal import (
    ROUND_05UP,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
)
from enum import Enum

RoundingPolicy = Callable[[Decimal], Decimal | int]


class RoundingMode(str, Enum):
    """Named rounding policy that quantizes to whole minor units.

    Members are callable so they can be used anywhere a RoundingPolicy is
    expected, and they pickle by value.
    """

    HALF_UP = "half_up"
    HALF_EVEN = "half_even"
    HALF_DOWN = "half_down"
    UP = "up"
    DOWN = "down"
    CEILING = "ceiling"
    FLOOR = "floor"
    ZERO_FIVE_UP = "05up"

    @property
    def decimal_rounding(self) -> str:
        return _DECIMAL_ROUNDING[self]

    def __call__(self, value: Decimal) -> Decimal:
        return value.quantize(Decimal("1"), rounding=self.decimal_rounding)


_DECIMAL_ROUNDING = {
    RoundingMode.HALF_UP: ROUND_HALF_UP,
    RoundingMode.HALF_EVEN: ROUND_HALF_EVEN,
    RoundingMode.HALF_DOWN: ROUND_HALF_DOWN,
    RoundingMode.UP: ROUND_UP,
    RoundingMode.DOWN: ROUND_DOWN,
    RoundingMode.CEILING: ROUND_CEILING,
    RoundingMode.FLOOR: ROUND_FLOOR,
    RoundingMode.ZERO_FIVE_UP: ROUND_05UP,
}


def resolve_rounding(policy: RoundingPolicy | str | None) -> RoundingPolicy | None:
    """Turn a mode name, a RoundingMode or a callable into a rounding policy."""
    if policy is None or isinstance(policy, RoundingMode):
        return policy
    if isinstance(policy, str):
        try:
            return RoundingMode(policy.lower())
        except ValueError:
            valid = ", ".join(mode.value for mode in RoundingMode)
            raise ValueError(
                f"Unknown rounding mode: {policy!r} (expected one of {valid})"
            ) from None
    if callable(policy):
        return policy
    raise TypeError(f"Rounding policy must be callable, got {type(policy).__name__}")


__all__ = ["RoundingMode", "RoundingPolicy", "resolve_rounding"]

import pickle
from decimal import Decimal

import pytest

from fx_bank.domain.rounding import RoundingMode, resolve_rounding


class TestRoundingMode:
    @pytest.mark.parametrize(
        ("mode", "value", "expected"),
        [
            (RoundingMode.HALF_UP, "2.5", "3"),
            (RoundingMode.HALF_UP, "-2.5", "-3"),
            (RoundingMode.HALF_EVEN, "2.5", "2"),
            (RoundingMode.HALF_EVEN, "3.5", "4"),
            (RoundingMode.HALF_DOWN, "2.5", "2"),
            (RoundingMode.UP, "2.1", "3"),
            (RoundingMode.DOWN, "2.9", "2"),
            (RoundingMode.CEILING, "-2.9", "-2"),
            (RoundingMode.FLOOR, "-2.1", "-3"),
            (RoundingMode.ZERO_FIVE_UP, "2.1", "2"),
            (RoundingMode.ZERO_FIVE_UP, "5.1", "6"),
        ],
    )
    def test_quantizes_to_whole_minor_units(self, mode, value, expected):
        assert mode(Decimal(value)) == Decimal(expected)

    def test_result_has_no_fractional_digits(self):
        assert RoundingMode.HALF_EVEN(Decimal("749.9999")).as_tuple().exponent == 0

    def test_modes_pickle_by_value(self):
        assert pickle.loads(pickle.dumps(RoundingMode.FLOOR)) is RoundingMode.FLOOR


class TestResolveRounding:
    def test_none_stays_none(self):
        assert resolve_rounding(None) is None

    def test_names_resolve_to_modes(self):
        assert resolve_rounding("half_even") is RoundingMode.HALF_EVEN
        assert resolve_rounding("FLOOR") is RoundingMode.FLOOR

    def test_callables_pass_through(self):
        def truncate(value: Decimal) -> int:
            return int(value)

        assert resolve_rounding(truncate) is truncate

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown rounding mode"):
            resolve_rounding("bankers")

    def test_non_callable_raises(self):
        with pytest.raises(TypeError):
            resolve_rounding(42)  # type: ignore[arg-type]

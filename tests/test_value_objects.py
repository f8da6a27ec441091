from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from fx_bank.domain.currencies import Currency, CurrencyRegistry, default_registry
from fx_bank.domain.rounding import RoundingMode
from fx_bank.domain.value_objects import Money
from fx_bank.exceptions import InvalidAmountError, InvalidCurrencyError
from fx_bank.services.exchange import ExchangeBank, get_default_bank, set_default_bank


class TestMoney:
    def test_money_creation_with_decimal(self):
        money = Money(Decimal("10050"), "USD")

        assert money.fractional == Decimal("10050")
        assert money.currency == Currency("USD")

    def test_money_creation_converts_int_and_float_to_decimal(self):
        assert isinstance(Money(1000, "USD").fractional, Decimal)
        assert Money(100.5, "USD").fractional == Decimal("100.5")

    def test_currency_resolves_through_registry(self):
        money = Money(100, "jpy")

        assert money.currency.iso_code == "JPY"
        assert money.currency.subunit_to_unit == 1

    def test_unknown_currency_raises(self):
        with pytest.raises(InvalidCurrencyError):
            Money(100, "ZZZ")

    @pytest.mark.parametrize("value", ["abc", True, float("nan")])
    def test_invalid_fractional_raises(self, value):
        with pytest.raises(InvalidAmountError):
            Money(value, "USD")

    def test_from_amount_uses_major_units(self):
        assert Money.from_amount("10.50", "USD").fractional == Decimal("1050.00")
        assert Money.from_amount(10, "KWD").fractional == Decimal("10000")
        assert Money.from_amount(10, "JPY").fractional == Decimal("10")

    def test_amount_reports_major_units(self):
        assert Money(1050, "USD").amount == Decimal("10.5")
        assert Money(1100, "JPY").amount == Decimal("1100")

    def test_bank_is_not_part_of_equality(self, bank: ExchangeBank):
        assert Money(100, "USD", bank=bank) == Money(100, "USD")

    def test_money_is_immutable(self):
        money = Money(100, "USD")

        with pytest.raises(AttributeError):
            money.currency = Currency("EUR")  # type: ignore[misc]

    def test_money_addition_same_currency(self):
        assert Money(10000, "USD") + Money(5000, "USD") == Money(15000, "USD")

    def test_money_addition_different_currency_raises(self):
        with pytest.raises(ValueError, match="Cannot add"):
            Money(10000, "USD") + Money(5000, "EUR")

    def test_money_subtraction_different_currency_raises(self):
        with pytest.raises(ValueError, match="Cannot subtract"):
            Money(10000, "USD") - Money(3000, "EUR")

    def test_money_multiplication_and_negation(self):
        assert Money(100, "USD") * Decimal("1.5") == Money(150, "USD")
        assert -Money(100, "USD") == Money(-100, "USD")

    def test_money_comparison(self):
        assert Money(100, "USD") < Money(200, "USD")
        assert Money(100, "USD") <= Money(100, "USD")
        with pytest.raises(ValueError, match="Cannot compare"):
            Money(100, "USD") < Money(200, "EUR")

    def test_money_predicates(self):
        assert Money.zero("EUR").is_zero
        assert Money(1, "USD").is_positive
        assert Money(-1, "USD").is_negative

    def test_str_uses_major_units(self):
        assert str(Money(1050, "USD")) == "10.5 USD"


class TestMoneyExchangeTo:
    """The conversion entry point a Money calls on itself."""

    def test_same_currency_returns_self_without_bank(self):
        bank = MagicMock()
        bank.registry = default_registry
        money = Money(1000, "USD", bank=bank)

        assert money.exchange_to("usd") is money
        assert money.exchange_to("$") is money
        bank.exchange_with.assert_not_called()

    def test_forwards_overrides_to_bound_bank(self):
        bank = MagicMock()
        bank.registry = default_registry
        money = Money(1000, "USD", bank=bank)
        rounding = RoundingMode.FLOOR

        result = money.exchange_to(
            "eur", date=date(2024, 1, 15), rate=Decimal("0.9"), rounding=rounding
        )

        assert result is bank.exchange_with.return_value
        bank.exchange_with.assert_called_once_with(
            money,
            Currency("EUR"),
            date=date(2024, 1, 15),
            rate=Decimal("0.9"),
            rounding=rounding,
        )

    def test_converts_with_bound_bank(self, bank: ExchangeBank):
        bank.add_rate("USD", "EUR", Decimal("0.75"))

        result = Money(1000, "USD", bank=bank).exchange_to("EUR")

        assert result == Money(750, "EUR")
        assert result.bank is bank

    def test_uses_default_bank_when_unbound(self, bank: ExchangeBank):
        bank.add_rate("USD", "EUR", Decimal("0.75"))
        set_default_bank(bank)

        assert Money(1000, "USD").exchange_to("EUR") == Money(750, "EUR")

    def test_default_bank_falls_back_to_configured_bank(self):
        default = get_default_bank()

        assert isinstance(default, ExchangeBank)
        assert get_default_bank() is default

    def test_invalid_target_currency_raises(self, bank: ExchangeBank):
        with pytest.raises(InvalidCurrencyError):
            Money(1000, "USD", bank=bank).exchange_to("ZZZ")

    def test_with_bank_rebinds(self, bank: ExchangeBank):
        money = Money(1000, "USD").with_bank(bank)

        assert money.bank is bank
        assert money == Money(1000, "USD")

    def test_target_resolved_through_bank_registry(self):
        xta = Currency("XTA", 10)
        xtb = Currency("XTB", 1000)
        bank = ExchangeBank(registry=CurrencyRegistry([xta, xtb]))
        bank.add_rate("XTA", "XTB", 2)

        result = Money(10, "XTA", bank=bank).exchange_to("XTB")

        assert result.currency is xtb
        assert result.fractional == Decimal("2000")

    def test_bank_registry_used_at_construction(self):
        registry = CurrencyRegistry([Currency("XTA", 10, symbol="Ŧ")])
        bank = ExchangeBank(registry=registry)

        assert Money(5, "Ŧ", bank=bank).currency.iso_code == "XTA"
        assert Money.from_amount("1.5", "XTA", bank=bank).fractional == Decimal("15")
        with pytest.raises(InvalidCurrencyError):
            Money(5, "XTA")

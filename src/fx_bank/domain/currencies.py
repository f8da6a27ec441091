"""Currency descriptors and the registry that resolves identifiers to them."""

import threading
from dataclasses import dataclass, field

from fx_bank.exceptions import InvalidCurrencyError


@dataclass(frozen=True, slots=True)
class Currency:
    """Immutable currency descriptor.

    Two currencies are equal when their ISO codes match; symbol and name are
    informational only.
    """

    iso_code: str
    subunit_to_unit: int = field(default=100, compare=False)
    symbol: str | None = field(default=None, compare=False)
    name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.iso_code, str) or not self.iso_code.strip():
            raise InvalidCurrencyError(self.iso_code)
        object.__setattr__(self, "iso_code", self.iso_code.strip().upper())
        if (
            isinstance(self.subunit_to_unit, bool)
            or not isinstance(self.subunit_to_unit, int)
            or self.subunit_to_unit <= 0
        ):
            raise ValueError(
                f"subunit_to_unit must be a positive integer, got {self.subunit_to_unit!r}"
            )

    def __str__(self) -> str:
        return self.iso_code


# ISO 4217 code, minor units per major unit, symbol, name
_ISO_CURRENCIES: tuple[tuple[str, int, str | None, str], ...] = (
    ("USD", 100, "$", "United States Dollar"),
    ("EUR", 100, "€", "Euro"),
    ("GBP", 100, "£", "British Pound"),
    ("JPY", 1, "¥", "Japanese Yen"),
    ("CHF", 100, "CHF", "Swiss Franc"),
    ("CAD", 100, "C$", "Canadian Dollar"),
    ("AUD", 100, "A$", "Australian Dollar"),
    ("CNY", 100, "元", "Chinese Renminbi Yuan"),
    ("HKD", 100, "HK$", "Hong Kong Dollar"),
    ("SGD", 100, "S$", "Singapore Dollar"),
    ("NZD", 100, "NZ$", "New Zealand Dollar"),
    ("SEK", 100, "kr", "Swedish Krona"),
    ("NOK", 100, None, "Norwegian Krone"),
    ("DKK", 100, None, "Danish Krone"),
    ("MXN", 100, None, "Mexican Peso"),
    ("BRL", 100, "R$", "Brazilian Real"),
    ("INR", 100, "₹", "Indian Rupee"),
    ("KRW", 1, "₩", "South Korean Won"),
    ("ZAR", 100, "R", "South African Rand"),
    ("ISK", 1, None, "Icelandic Króna"),
    ("CLP", 1, None, "Chilean Peso"),
    ("VND", 1, "₫", "Vietnamese Đồng"),
    ("BHD", 1000, None, "Bahraini Dinar"),
    ("KWD", 1000, None, "Kuwaiti Dinar"),
    ("OMR", 1000, None, "Omani Rial"),
    ("JOD", 1000, None, "Jordanian Dinar"),
    ("TND", 1000, None, "Tunisian Dinar"),
    ("MRU", 5, None, "Mauritanian Ouguiya"),
    ("MGA", 5, None, "Malagasy Ariary"),
    ("BTC", 100_000_000, "₿", "Bitcoin"),
)


class CurrencyRegistry:
    """Resolves codes, symbols and Currency objects to canonical currencies.

    Codes are matched case-insensitively. A symbol shared by several
    currencies resolves to the first one registered with it.
    """

    def __init__(self, currencies: list[Currency] | None = None) -> None:
        self._by_code: dict[str, Currency] = {}
        self._by_symbol: dict[str, Currency] = {}
        self._lock = threading.RLock()
        for currency in currencies or []:
            self.register(currency)

    @classmethod
    def with_iso_defaults(cls) -> "CurrencyRegistry":
        return cls(
            [
                Currency(code, subunit, symbol=symbol, name=name)
                for code, subunit, symbol, name in _ISO_CURRENCIES
            ]
        )

    def register(self, currency: Currency) -> Currency:
        """Add or replace a currency definition."""
        with self._lock:
            self._by_code[currency.iso_code] = currency
            if currency.symbol:
                self._by_symbol.setdefault(currency.symbol, currency)
        return currency

    def find(self, code: str) -> Currency | None:
        return self._by_code.get(code.strip().upper())

    def find_by_symbol(self, symbol: str) -> Currency | None:
        return self._by_symbol.get(symbol.strip())

    def wrap(self, identifier: "Currency | str") -> Currency:
        """Resolve an identifier to a registered currency.

        Raises:
            InvalidCurrencyError: If the identifier is not a known code or symbol.
        """
        if isinstance(identifier, Currency):
            return identifier
        if isinstance(identifier, str):
            currency = self.find(identifier) or self.find_by_symbol(identifier)
            if currency is not None:
                return currency
        raise InvalidCurrencyError(identifier)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.find(code) is not None

    def __iter__(self):
        return iter(list(self._by_code.values()))

    def __len__(self) -> int:
        return len(self._by_code)

    def __getstate__(self) -> dict[str, list[Currency]]:
        return {"currencies": list(self._by_code.values())}

    def __setstate__(self, state: dict[str, list[Currency]]) -> None:
        self.__init__(state["currencies"])


default_registry = CurrencyRegistry.with_iso_defaults()


__all__ = ["Currency", "CurrencyRegistry", "default_registry"]

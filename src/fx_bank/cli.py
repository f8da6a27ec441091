"""Command-line interface for fx-bank.

Works against a SQLite rate store, e.g.:

    fxb --database rates.db rates-add --from USD --to EUR --rate 0.92 --date 2024-01-15
    fxb --database rates.db convert --amount 100 --from USD --to EUR --rounding half_even
"""

import argparse
import sys
from datetime import date
from datetime import datetime as dt
from decimal import Decimal, InvalidOperation
from pathlib import Path

from fx_bank import __version__
from fx_bank.config import LogLevel, RateStoreType, Settings, get_settings
from fx_bank.container import Container
from fx_bank.domain.exchange_rates import ExchangeRate, ExchangeRateSource
from fx_bank.domain.rounding import RoundingMode
from fx_bank.domain.value_objects import Money
from fx_bank.exceptions import FxBankError, InvalidAmountError, InvalidRateValueError
from fx_bank.logging_config import configure_logging


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    return dt.strptime(value, "%Y-%m-%d").date()


def _parse_decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise InvalidAmountError(value, "not a number") from None


def _parse_rate(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise InvalidRateValueError(value, "must be a number") from None


def _container(args: argparse.Namespace) -> Container:
    db_path = Path(args.database) if args.database else get_settings().sqlite_path
    settings = Settings(rate_store_type=RateStoreType.SQLITE, sqlite_path=db_path)
    return Container(settings=settings)


def cmd_rates_add(args: argparse.Namespace) -> int:
    """Add an exchange rate."""
    container = _container(args)
    try:
        registry = container.registry
        record = ExchangeRate(
            from_currency=registry.wrap(args.from_currency).iso_code,
            to_currency=registry.wrap(args.to_currency).iso_code,
            rate=_parse_rate(args.rate),
            effective_date=_parse_date(args.date) or date.today(),
            source=ExchangeRateSource(args.source),
        )
        container.rate_store.add(record)
        print(
            f"Added rate: {record.pair} = {record.rate} "
            f"(effective {record.effective_date}, source: {record.source.value})"
        )
        return 0
    except (FxBankError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    finally:
        container.close()


def cmd_rates_get(args: argparse.Namespace) -> int:
    """Show the rate for a pair, optionally as of a date."""
    container = _container(args)
    try:
        on_date = _parse_date(args.date)
        pair = f"{args.from_currency.upper()}/{args.to_currency.upper()}"
        rate = container.bank.get_rate(args.from_currency, args.to_currency, on_date)
        if rate is None:
            print(f"No rate found for {pair}")
            return 1
        print(f"{pair}: {rate}")
        if on_date is not None:
            print(f"  As of: {on_date}")
        return 0
    except (FxBankError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    finally:
        container.close()


def cmd_rates_list(args: argparse.Namespace) -> int:
    """List the stored history for a pair."""
    container = _container(args)
    try:
        pair = f"{args.from_currency.upper()}/{args.to_currency.upper()}"
        rates = list(
            container.rate_store.list_by_currency_pair(
                args.from_currency.upper(),
                args.to_currency.upper(),
                start_date=_parse_date(args.start_date),
                end_date=_parse_date(args.end_date),
            )
        )
        if not rates:
            print(f"No rates found for {pair}")
            return 0

        print(f"Exchange rates for {pair}:")
        print("-" * 50)
        for rate in rates:
            print(f"  {rate.effective_date}: {rate.rate} (source: {rate.source.value})")
        return 0
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    finally:
        container.close()


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert amount between currencies."""
    container = _container(args)
    try:
        bank = container.bank
        amount = Money.from_amount(
            _parse_decimal(args.amount), args.from_currency, bank=bank
        )
        converted = amount.exchange_to(
            args.to_currency,
            date=_parse_date(args.date),
            rate=_parse_rate(args.rate) if args.rate else None,
            rounding=args.rounding,
        )
        print(f"{amount} = {converted}")
        if args.date:
            print(f"  As of: {args.date}")
        return 0
    except (FxBankError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    finally:
        container.close()


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    print(f"fx-bank v{__version__}")
    return 0


def _add_pair_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--from", dest="from_currency", required=True, help="Source currency (e.g., USD)"
    )
    parser.add_argument(
        "--to", dest="to_currency", required=True, help="Target currency (e.g., EUR)"
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fxb",
        description="fx-bank - exchange rate store and money converter",
    )
    parser.add_argument(
        "--database",
        "-d",
        help="Path to SQLite rate database",
        default=None,
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log debug events"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    rates_add_parser = subparsers.add_parser("rates-add", help="Add an exchange rate")
    _add_pair_arguments(rates_add_parser)
    rates_add_parser.add_argument("--rate", required=True, help="Exchange rate")
    rates_add_parser.add_argument(
        "--date", default=None, help="Effective date (YYYY-MM-DD), defaults to today"
    )
    rates_add_parser.add_argument(
        "--source",
        choices=[source.value for source in ExchangeRateSource],
        default=ExchangeRateSource.MANUAL.value,
        help="Where the rate came from (default: manual)",
    )
    rates_add_parser.set_defaults(func=cmd_rates_add)

    rates_get_parser = subparsers.add_parser(
        "rates-get", help="Show the rate for a pair"
    )
    _add_pair_arguments(rates_get_parser)
    rates_get_parser.add_argument(
        "--date", default=None, help="As-of date (YYYY-MM-DD), defaults to latest"
    )
    rates_get_parser.set_defaults(func=cmd_rates_get)

    rates_list_parser = subparsers.add_parser(
        "rates-list", help="List exchange rate history"
    )
    _add_pair_arguments(rates_list_parser)
    rates_list_parser.add_argument("--start-date", help="Start date (YYYY-MM-DD)")
    rates_list_parser.add_argument("--end-date", help="End date (YYYY-MM-DD)")
    rates_list_parser.set_defaults(func=cmd_rates_list)

    convert_parser = subparsers.add_parser(
        "convert", help="Convert an amount between currencies"
    )
    convert_parser.add_argument(
        "--amount", required=True, help="Amount in major units (e.g., 10.50)"
    )
    _add_pair_arguments(convert_parser)
    convert_parser.add_argument("--date", default=None, help="Rate date (YYYY-MM-DD)")
    convert_parser.add_argument(
        "--rate", default=None, help="Explicit rate; skips the rate store"
    )
    convert_parser.add_argument(
        "--rounding",
        choices=[mode.value for mode in RoundingMode],
        default=None,
        help="Round the result to whole minor units",
    )
    convert_parser.set_defaults(func=cmd_convert)

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.verbose:
        settings = settings.model_copy(update={"log_level": LogLevel.DEBUG})
    configure_logging(settings)

    if args.command is None:
        parser.print_help()
        return 0

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())

import sqlite3
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from uuid import UUID

from fx_bank.domain.exchange_rates import ExchangeRate, ExchangeRateSource, coerce_date
from fx_bank.repositories.interfaces import DatedRateStore


class SQLiteDatabase:
    """SQLite database connection manager."""

    def __init__(
        self, path: str | Path = ":memory:", check_same_thread: bool = True
    ) -> None:
        self._path = str(path)
        self._check_same_thread = check_same_thread
        self._connection: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    def get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._connection is None:
            self._connection = sqlite3.connect(
                self._path, check_same_thread=self._check_same_thread
            )
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def initialize(self) -> None:
        """Create the exchange rate table."""
        conn = self.get_connection()
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS exchange_rates (
                id TEXT PRIMARY KEY,
                from_currency TEXT NOT NULL,
                to_currency TEXT NOT NULL,
                rate TEXT NOT NULL,
                effective_date TEXT NOT NULL,
                source TEXT NOT NULL,
                created_at TEXT NOT NULL,
                UNIQUE(from_currency, to_currency, effective_date)
            );

            CREATE INDEX IF NOT EXISTS idx_exchange_rates_pair_date
                ON exchange_rates(from_currency, to_currency, effective_date);
            """
        )
        conn.commit()

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None


class SQLiteRateStore(DatedRateStore):
    """Persistent rate history in a single SQLite table.

    Registering a rate for a pair and date that already has one replaces it.
    Codes are stored upper-cased; dates as ISO strings so they sort correctly.
    """

    def __init__(
        self, path: str | Path = ":memory:", check_same_thread: bool = True
    ) -> None:
        self._check_same_thread = check_same_thread
        self._db = SQLiteDatabase(path, check_same_thread=check_same_thread)
        self._db.initialize()

    @property
    def database(self) -> SQLiteDatabase:
        return self._db

    def add(self, rate: ExchangeRate) -> None:
        conn = self._db.get_connection()
        with conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO exchange_rates (id, from_currency,
                    to_currency, rate, effective_date, source, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(rate.id),
                    rate.from_currency,
                    rate.to_currency,
                    str(rate.rate),
                    rate.effective_date.isoformat(),
                    rate.source.value,
                    rate.created_at.isoformat(),
                ),
            )

    def add_rate(
        self,
        from_iso: str,
        to_iso: str,
        rate: Decimal,
        effective_date: date | None = None,
    ) -> Decimal:
        record = ExchangeRate(
            from_currency=from_iso,
            to_currency=to_iso,
            rate=rate,
            effective_date=coerce_date(effective_date) or date.today(),
        )
        self.add(record)
        return record.rate

    def get_rate(
        self, from_iso: str, to_iso: str, effective_date: date | None = None
    ) -> Decimal | None:
        record = self.get_record(from_iso, to_iso, effective_date)
        return None if record is None else record.rate

    def get_record(
        self, from_iso: str, to_iso: str, effective_date: date | None = None
    ) -> ExchangeRate | None:
        """Rate effective on ``effective_date`` or the latest one before it."""
        rows = self._select_pair(
            from_iso,
            to_iso,
            end_date=coerce_date(effective_date),
            newest_first=True,
            limit=1,
        )
        return rows[0] if rows else None

    def list_by_currency_pair(
        self,
        from_iso: str,
        to_iso: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Iterable[ExchangeRate]:
        return self._select_pair(
            from_iso, to_iso, start_date=start_date, end_date=end_date
        )

    def marshal_dump(self) -> tuple[type["SQLiteRateStore"], str, bool]:
        # An in-memory database does not survive the round trip.
        return (type(self), self._db.path, self._check_same_thread)

    def close(self) -> None:
        self._db.close()

    def _select_pair(
        self,
        from_iso: str,
        to_iso: str,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        newest_first: bool = False,
        limit: int | None = None,
    ) -> list[ExchangeRate]:
        clauses = ["from_currency = ?", "to_currency = ?"]
        params: list[str | int] = [from_iso.upper(), to_iso.upper()]
        if start_date is not None:
            clauses.append("effective_date >= ?")
            params.append(start_date.isoformat())
        if end_date is not None:
            clauses.append("effective_date <= ?")
            params.append(end_date.isoformat())

        query = "SELECT * FROM exchange_rates WHERE " + " AND ".join(clauses)
        query += " ORDER BY effective_date" + (" DESC" if newest_first else "")
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        rows = self._db.get_connection().execute(query, params).fetchall()
        return [self._row_to_exchange_rate(row) for row in rows]

    @staticmethod
    def _row_to_exchange_rate(row: sqlite3.Row) -> ExchangeRate:
        rate = ExchangeRate(
            from_currency=row["from_currency"],
            to_currency=row["to_currency"],
            rate=Decimal(row["rate"]),
            effective_date=date.fromisoformat(row["effective_date"]),
            id=UUID(row["id"]),
            source=ExchangeRateSource(row["source"]),
        )
        # Keep the stored timestamp rather than the construction time.
        object.__setattr__(
            rate, "created_at", datetime.fromisoformat(row["created_at"])
        )
        return rate

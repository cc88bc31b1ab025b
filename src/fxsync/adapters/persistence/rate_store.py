# src/fxsync/adapters/persistence/rate_store.py
"""
Rate Store - Daily Rate Snapshots in a Relational Table

This module persists one row per (date, currency) in the ExchangeRates
table and answers historical range queries over it. A day's snapshot is
replaced as a whole inside a single transaction, so readers observe either
the previous set of rows for that day or the new one, never a mix.

Rates are stored as TEXT through DecimalText so no precision is lost to
binary floating point (SQLite has no native decimal type).

Files that USE this module:
- fxsync.app (builds the store and creates the schema)
- fxsync.application.sync_scheduler (upsert_day, the only writer)
- fxsync.application.query_service (query_range)
- tests.test_rate_store (unit tests)

Files that this module USES:
- fxsync.domain (RatePoint, InvalidRangeError, to_decimal)
- fxsync.config (settings for the database URL default)
- fxsync.shared.validators (is_in_memory_sqlite)
"""
from __future__ import annotations

import logging
from datetime import date as date_type
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from sqlalchemy import Date, Index, Integer, String, create_engine, delete, func, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from fxsync.domain.conversion import to_decimal
from fxsync.domain.errors import InvalidRangeError
from fxsync.domain.models import RatePoint
from fxsync.shared.validators import is_in_memory_sqlite

log = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class DecimalText(TypeDecorator):
    """Decimal stored as its exact string form."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(to_decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


class ExchangeRate(Base):
    """One stored rate: units of ``currency_code`` per 1 base unit on ``date``."""

    __tablename__ = "ExchangeRates"

    id: Mapped[int] = mapped_column("Id", Integer, primary_key=True, autoincrement=True)
    date: Mapped[date_type] = mapped_column("Date", Date, nullable=False)
    currency_code: Mapped[str] = mapped_column("CurrencyCode", String(16), nullable=False)
    rate: Mapped[Decimal] = mapped_column("Rate", DecimalText(), nullable=False)

    def __repr__(self) -> str:
        return f"<ExchangeRate {self.date} {self.currency_code}={self.rate}>"


Index(
    "IX_ExchangeRates_Date_CurrencyCode",
    ExchangeRate.date,
    ExchangeRate.currency_code,
    unique=True,
)


def _engine_for(url: str, echo: bool = False) -> Engine:
    """
    Create an engine, with the SQLite adjustments the store relies on.

    File databases get their directory created. In-memory databases share one
    connection so every session sees the same data; that connection also
    shows an uncommitted replacement to readers, so they are for tests only
    (Settings rejects them as DATABASE_URL).
    """
    sa_url = make_url(url)
    kwargs: Dict[str, object] = {"echo": echo}
    if sa_url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if is_in_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool
        else:
            Path(sa_url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(sa_url, **kwargs)


class RateStore:
    """Persisted (date, currency) -> rate mapping with whole-day replacement."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: Optional[str] = None, echo: bool = False) -> RateStore:
        """
        Build a store for a database URL.

        Args:
            url: SQLAlchemy URL (defaults to settings.database_url)
            echo: Log every SQL statement (debugging)
        """
        if url is None:
            from fxsync.config import get_settings
            url = get_settings().database_url
        return cls(_engine_for(url, echo=echo))

    def create_schema(self) -> None:
        """Create the ExchangeRates table and its unique index if missing."""
        Base.metadata.create_all(self.engine)
        log.info("Rate store schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        self.engine.dispose()

    def upsert_day(self, day: date_type, rates: Mapping[str, Union[Decimal, float, int, str]]) -> int:
        """
        Replace every stored rate for ``day`` with ``rates``.

        Deletes all rows for the day and inserts the new ones in one
        transaction. Replacement is total: codes missing from ``rates`` no
        longer exist for that day afterwards.

        Args:
            day: Snapshot day
            rates: Currency code -> rate

        Returns:
            Number of rows written

        Raises:
            ValueError: If two codes collide after upper-casing
        """
        normalized: Dict[str, Decimal] = {}
        for code, rate in rates.items():
            key = code.strip().upper()
            if key in normalized:
                raise ValueError(f"Duplicate currency code {key} for {day}")
            normalized[key] = to_decimal(rate)

        rows = [
            ExchangeRate(date=day, currency_code=code, rate=rate)
            for code, rate in normalized.items()
        ]
        with self._sessions.begin() as session:
            deleted = session.execute(delete(ExchangeRate).where(ExchangeRate.date == day)).rowcount
            session.add_all(rows)

        log.info("Stored %d exchange rates for %s (replaced %d)", len(rows), day.isoformat(), deleted or 0)
        return len(rows)

    def query_range(self, currency_code: str, start: date_type, end: date_type) -> List[RatePoint]:
        """
        Return stored rates for one currency between two days, inclusive.

        Args:
            currency_code: Currency to look up
            start: First day of the range
            end: Last day of the range

        Returns:
            RatePoints in ascending date order; empty if nothing matches

        Raises:
            InvalidRangeError: If start is after end (checked before querying)
        """
        if start > end:
            raise InvalidRangeError(
                f"Start date {start.isoformat()} must be before or equal to end date {end.isoformat()}"
            )

        stmt = (
            select(ExchangeRate.date, ExchangeRate.rate)
            .where(
                ExchangeRate.currency_code == currency_code.strip().upper(),
                ExchangeRate.date >= start,
                ExchangeRate.date <= end,
            )
            .order_by(ExchangeRate.date)
        )
        with self._sessions() as session:
            rows = session.execute(stmt).all()
        return [RatePoint(date=row_date, rate=rate) for row_date, rate in rows]

    def get_day(self, day: date_type) -> Dict[str, Decimal]:
        """Return every stored rate for ``day`` keyed by currency code."""
        stmt = select(ExchangeRate.currency_code, ExchangeRate.rate).where(ExchangeRate.date == day)
        with self._sessions() as session:
            return {code: rate for code, rate in session.execute(stmt).all()}

    def latest_date(self) -> Optional[date_type]:
        """Return the most recent day that has a snapshot, or None."""
        with self._sessions() as session:
            return session.execute(select(func.max(ExchangeRate.date))).scalar()

"""Canonical storage names for dated, resolution-scoped market-data series.

These names double as the lookup key scheme of the on-disk data library:

    hour/daily     {symbol}.csv inside {symbol}.zip
    forex          {yyyyMMdd}_{symbol}_{resolution}_quote.csv inside {yyyyMMdd}_quote.zip
    everything     {yyyyMMdd}_{symbol}_{resolution}_trade.csv inside {yyyyMMdd}_trade.zip
    else

Everything here is pure: no I/O and no logging.
"""

from __future__ import annotations

from dataclasses import dataclass

from tickarchive.types import DateInput, Resolution, SecurityType


def format_date(date: DateInput) -> str:
    """Render ``date`` as yyyyMMdd, zero-padding years below 1000."""
    return f"{date.year:04d}{date.month:02d}{date.day:02d}"


def _tick_type(security_type: SecurityType) -> str:
    return "quote" if security_type == SecurityType.FOREX else "trade"


def entry_name(
    symbol: str,
    security_type: SecurityType,
    date: DateInput,
    resolution: Resolution,
) -> str:
    """Return the zip entry name holding ``symbol`` data for ``date``.

    Example:
        >>> from datetime import date
        >>> entry_name("EURUSD", SecurityType.FOREX, date(2023, 5, 1), Resolution.MINUTE)
        '20230501_eurusd_minute_quote.csv'
    """
    if resolution.is_aggregate:
        return f"{symbol}.csv"
    return (
        f"{format_date(date)}_{symbol.lower()}_{resolution.value.lower()}"
        f"_{_tick_type(security_type)}.csv"
    )


def file_name(
    symbol: str,
    security_type: SecurityType,
    date: DateInput,
    resolution: Resolution,
) -> str:
    """Return the zip file name holding ``symbol`` data for ``date``."""
    if resolution.is_aggregate:
        return f"{symbol}.zip"
    return f"{format_date(date)}_{_tick_type(security_type)}.zip"


@dataclass(frozen=True)
class NamingKey:
    """Identity of one stored market-data series."""

    symbol: str
    security_type: SecurityType
    date: DateInput
    resolution: Resolution

    @property
    def entry_name(self) -> str:
        return entry_name(self.symbol, self.security_type, self.date, self.resolution)

    @property
    def file_name(self) -> str:
        return file_name(self.symbol, self.security_type, self.date, self.resolution)


__all__ = ["NamingKey", "format_date", "entry_name", "file_name"]

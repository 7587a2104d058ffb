"""Market-data identity types shared by naming and storage helpers."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum


class SecurityType(str, Enum):
    """Asset class of a market-data series."""

    BASE = "Base"
    EQUITY = "Equity"
    OPTION = "Option"
    COMMODITY = "Commodity"
    FOREX = "Forex"
    FUTURE = "Future"
    CFD = "Cfd"
    CRYPTO = "Crypto"


class Resolution(str, Enum):
    """Sampling granularity of a market-data series."""

    TICK = "Tick"
    SECOND = "Second"
    MINUTE = "Minute"
    HOUR = "Hour"
    DAILY = "Daily"

    @property
    def is_aggregate(self) -> bool:
        """Hour and daily series are stored one file per symbol, not per day."""
        return self in (Resolution.HOUR, Resolution.DAILY)


# Calendar input accepted by naming helpers.
DateInput = date | datetime

__all__ = [
    "DateInput",
    "Resolution",
    "SecurityType",
]

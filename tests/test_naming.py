from __future__ import annotations

from datetime import date, datetime

import pytest

from tickarchive.naming import NamingKey, entry_name, file_name, format_date
from tickarchive.types import Resolution, SecurityType

TRADE_DATE = date(2023, 5, 1)


def test_forex_intraday_entry_is_quote_file() -> None:
    assert (
        entry_name("EURUSD", SecurityType.FOREX, TRADE_DATE, Resolution.MINUTE)
        == "20230501_eurusd_minute_quote.csv"
    )


def test_daily_entry_keeps_symbol_case() -> None:
    assert entry_name("AAPL", SecurityType.EQUITY, TRADE_DATE, Resolution.DAILY) == "AAPL.csv"


@pytest.mark.parametrize(
    ("security_type", "resolution", "expected"),
    [
        (SecurityType.EQUITY, Resolution.TICK, "20230501_aapl_tick_trade.csv"),
        (SecurityType.EQUITY, Resolution.SECOND, "20230501_aapl_second_trade.csv"),
        (SecurityType.FUTURE, Resolution.MINUTE, "20230501_aapl_minute_trade.csv"),
        (SecurityType.FOREX, Resolution.TICK, "20230501_aapl_tick_quote.csv"),
        (SecurityType.FOREX, Resolution.HOUR, "AAPL.csv"),
        (SecurityType.CRYPTO, Resolution.DAILY, "AAPL.csv"),
    ],
)
def test_entry_name_patterns(security_type, resolution, expected) -> None:
    assert entry_name("AAPL", security_type, TRADE_DATE, resolution) == expected


@pytest.mark.parametrize(
    ("security_type", "resolution", "expected"),
    [
        (SecurityType.FOREX, Resolution.MINUTE, "20230501_quote.zip"),
        (SecurityType.EQUITY, Resolution.SECOND, "20230501_trade.zip"),
        (SecurityType.OPTION, Resolution.TICK, "20230501_trade.zip"),
        (SecurityType.EQUITY, Resolution.HOUR, "SPY.zip"),
        (SecurityType.FOREX, Resolution.DAILY, "SPY.zip"),
    ],
)
def test_file_name_patterns(security_type, resolution, expected) -> None:
    assert file_name("SPY", security_type, TRADE_DATE, resolution) == expected


def test_datetime_input_uses_calendar_date_only() -> None:
    stamp = datetime(2023, 5, 1, 23, 59, 59)
    assert entry_name("SPY", SecurityType.EQUITY, stamp, Resolution.MINUTE) == entry_name(
        "SPY", SecurityType.EQUITY, TRADE_DATE, Resolution.MINUTE
    )


def test_format_date_zero_pads_early_years() -> None:
    assert format_date(date(999, 1, 2)) == "09990102"
    assert format_date(date(2024, 12, 31)) == "20241231"


def test_names_are_total_and_deterministic() -> None:
    for security_type in SecurityType:
        for resolution in Resolution:
            first = (
                entry_name("BTCUSD", security_type, TRADE_DATE, resolution),
                file_name("BTCUSD", security_type, TRADE_DATE, resolution),
            )
            second = (
                entry_name("BTCUSD", security_type, TRADE_DATE, resolution),
                file_name("BTCUSD", security_type, TRADE_DATE, resolution),
            )
            assert first == second
            assert first[0].endswith(".csv")
            assert first[1].endswith(".zip")


def test_naming_key_matches_functions() -> None:
    key = NamingKey("EURUSD", SecurityType.FOREX, TRADE_DATE, Resolution.SECOND)
    assert key.entry_name == "20230501_eurusd_second_quote.csv"
    assert key.file_name == "20230501_quote.zip"
    assert key == NamingKey("EURUSD", SecurityType.FOREX, TRADE_DATE, Resolution.SECOND)

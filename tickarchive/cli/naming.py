"""``tickarchive names``: canonical zip file/entry names for a series."""

from __future__ import annotations

import argparse
from datetime import date


def _enum_choices(enum_cls) -> list[str]:
    return [member.value.lower() for member in enum_cls]


def register(subparsers: argparse._SubParsersAction) -> None:
    from tickarchive.types import Resolution, SecurityType

    p = subparsers.add_parser("names", help="Show the storage names for a data series")
    p.add_argument("symbol", help="Ticker symbol (e.g. EURUSD, AAPL)")
    p.add_argument(
        "--security-type",
        default="equity",
        choices=_enum_choices(SecurityType),
        help="Security type (default: equity)",
    )
    p.add_argument("--date", required=True, help="Trading date (YYYY-MM-DD)")
    p.add_argument(
        "--resolution",
        default="minute",
        choices=_enum_choices(Resolution),
        help="Resolution (default: minute)",
    )
    p.set_defaults(handler=_handle)


def _lookup(enum_cls, value: str):
    return next(member for member in enum_cls if member.value.lower() == value)


def _handle(args: argparse.Namespace) -> int:
    from tickarchive.naming import NamingKey
    from tickarchive.types import Resolution, SecurityType

    try:
        trading_date = date.fromisoformat(args.date)
    except ValueError:
        print(f"error: Invalid date format: {args.date} (expected YYYY-MM-DD)")
        return 1

    key = NamingKey(
        symbol=args.symbol,
        security_type=_lookup(SecurityType, args.security_type),
        date=trading_date,
        resolution=_lookup(Resolution, args.resolution),
    )
    print(f"file:  {key.file_name}")
    print(f"entry: {key.entry_name}")
    return 0

"""Archive helpers and local job dispatch for a trading-data pipeline."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]

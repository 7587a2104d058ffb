"""Brokerage configuration lookup keyed by brokerage type name."""

from __future__ import annotations

from collections.abc import Mapping

from tickarchive.jobs.models import PAPER_BROKERAGE


def normalize_brokerage_name(name: str) -> str:
    """``PaperBrokerage``, ``paper`` and ``pkg.PaperBrokerage`` all map to ``paper``."""
    key = name.strip().rsplit(".", 1)[-1].lower()
    if key.endswith("brokerage") and key != "brokerage":
        key = key[: -len("brokerage")]
    return key


class BrokerageRegistry:
    """Known brokerages and the configuration data each one needs for live jobs."""

    def __init__(self, brokerages: Mapping[str, Mapping[str, object]] | None = None) -> None:
        self._data: dict[str, dict[str, str]] = {}
        self._names: dict[str, str] = {}
        self.register(PAPER_BROKERAGE, {})
        for name, data in (brokerages or {}).items():
            self.register(name, data)

    def register(self, name: str, data: Mapping[str, object]) -> None:
        key = normalize_brokerage_name(name)
        if not key:
            raise ValueError("Brokerage name must be non-empty")
        self._names[key] = name
        self._data[key] = {str(k): str(v) for k, v in data.items()}

    def names(self) -> list[str]:
        return sorted(self._names.values())

    def brokerage_data(self, name: str) -> dict[str, str]:
        """Return a copy of the configuration data for ``name``.

        Raises:
            KeyError: If no registered brokerage matches ``name``.
        """
        key = normalize_brokerage_name(name)
        if key not in self._data:
            raise KeyError(f"Unknown brokerage {name!r}; registered: {self.names()}")
        return dict(self._data[key])

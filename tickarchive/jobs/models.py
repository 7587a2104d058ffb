"""Job descriptors handed to the algorithm engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

UNLIMITED_RAM = 2**31 - 1
PAPER_BROKERAGE = "PaperBrokerage"
DEFAULT_ALGORITHM_LOCATION = "algorithm.bin"


class JobQueueError(Exception):
    """Raised when a job cannot be built at all (e.g. missing algorithm binary)."""

    pass


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(frozen=True)
class JobQueueConfig:
    live_mode: bool = False
    algorithm_location: str = DEFAULT_ALGORITHM_LOCATION
    live_mode_brokerage: str = PAPER_BROKERAGE
    job_channel: str = ""
    job_user_id: int = 0
    algorithm_type_name: str = ""

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> JobQueueConfig:
        """Build from a config table; ``live-mode`` and ``live_mode`` spellings both work."""
        normalized = {str(key).replace("-", "_"): value for key, value in values.items()}
        unknown = set(normalized) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown job config keys: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        if "live_mode" in normalized:
            kwargs["live_mode"] = _as_bool(normalized["live_mode"])
        if "job_user_id" in normalized:
            kwargs["job_user_id"] = int(normalized["job_user_id"])
        for key in (
            "algorithm_location",
            "live_mode_brokerage",
            "job_channel",
            "algorithm_type_name",
        ):
            if key in normalized:
                kwargs[key] = str(normalized[key])
        return cls(**kwargs)


@dataclass(frozen=True)
class BacktestJob:
    version: str
    algorithm: bytes = field(repr=False)
    backtest_id: str = ""
    user_id: int = 0
    project_id: int = 0
    starting_capital: float = 10000.0
    name: str = "local"
    ram_allocation: int = UNLIMITED_RAM

    @property
    def kind(self) -> str:
        return "backtest"


@dataclass(frozen=True)
class LiveJob:
    version: str
    algorithm: bytes = field(repr=False)
    brokerage: str = PAPER_BROKERAGE
    brokerage_data: dict[str, str] = field(default_factory=dict)
    channel: str = ""
    user_id: int = 0
    deploy_id: str = ""
    ram_allocation: int = UNLIMITED_RAM

    @property
    def kind(self) -> str:
        return "live"


JobDescriptor = BacktestJob | LiveJob

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tickarchive import __version__, config
from tickarchive.jobs import (
    BacktestJob,
    BrokerageRegistry,
    JobQueue,
    JobQueueConfig,
    JobQueueError,
    LiveJob,
    load_brokerage_registry,
    load_job_queue_config,
    normalize_brokerage_name,
)


@pytest.fixture
def algorithm(tmp_path: Path) -> Path:
    path = tmp_path / "MyAlgorithm.bin"
    path.write_bytes(b"\x7fELF-algorithm")
    return path


def test_config_from_mapping_accepts_dashed_keys() -> None:
    job_config = JobQueueConfig.from_mapping(
        {
            "live-mode": "true",
            "algorithm-location": "/opt/algos/a.bin",
            "live-mode-brokerage": "InteractiveBrokersBrokerage",
            "job-user-id": "42",
            "algorithm_type_name": "BasicTemplateAlgorithm",
        }
    )

    assert job_config.live_mode is True
    assert job_config.algorithm_location == "/opt/algos/a.bin"
    assert job_config.live_mode_brokerage == "InteractiveBrokersBrokerage"
    assert job_config.job_user_id == 42
    assert job_config.algorithm_type_name == "BasicTemplateAlgorithm"
    assert job_config.job_channel == ""


def test_config_defaults() -> None:
    job_config = JobQueueConfig.from_mapping({})
    assert job_config == JobQueueConfig()
    assert job_config.live_mode is False
    assert job_config.live_mode_brokerage == "PaperBrokerage"


def test_config_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="Unknown job config keys"):
        JobQueueConfig.from_mapping({"live-mod": True})


def test_next_job_builds_backtest_by_default(algorithm: Path) -> None:
    queue = JobQueue(
        JobQueueConfig(algorithm_location=str(algorithm), algorithm_type_name="MeanReversion")
    )

    job, location = queue.next_job()

    assert isinstance(job, BacktestJob)
    assert location == algorithm
    assert job.algorithm == b"\x7fELF-algorithm"
    assert job.backtest_id == "MeanReversion"
    assert job.version == __version__
    assert job.kind == "backtest"


def test_next_job_builds_live_job_with_brokerage_data(algorithm: Path) -> None:
    registry = BrokerageRegistry(
        {"InteractiveBrokersBrokerage": {"ib-account": "DU123", "ib-port": 4002}}
    )
    job_config = JobQueueConfig(
        live_mode=True,
        algorithm_location=str(algorithm),
        live_mode_brokerage="InteractiveBrokersBrokerage",
        job_channel="local",
        job_user_id=7,
        algorithm_type_name="MeanReversion",
    )

    job, _ = JobQueue(job_config, registry, version="9.9.9").next_job()

    assert isinstance(job, LiveJob)
    assert job.brokerage == "InteractiveBrokersBrokerage"
    assert job.brokerage_data == {"ib-account": "DU123", "ib-port": "4002"}
    assert job.channel == "local"
    assert job.user_id == 7
    assert job.deploy_id == "MeanReversion"
    assert job.version == "9.9.9"


def test_next_job_live_with_paper_brokerage_by_default(algorithm: Path) -> None:
    job, _ = JobQueue(JobQueueConfig(live_mode=True, algorithm_location=str(algorithm))).next_job()

    assert isinstance(job, LiveJob)
    assert job.brokerage == "PaperBrokerage"
    assert job.brokerage_data == {}


def test_next_job_unknown_brokerage_still_returns_job(algorithm: Path, caplog) -> None:
    job_config = JobQueueConfig(
        live_mode=True, algorithm_location=str(algorithm), live_mode_brokerage="Nowhere"
    )

    with caplog.at_level(logging.ERROR):
        job, _ = JobQueue(job_config).next_job()

    assert isinstance(job, LiveJob)
    assert job.brokerage == "Nowhere"
    assert job.brokerage_data == {}
    assert "Error resolving brokerage data" in caplog.text


def test_next_job_missing_algorithm_raises(tmp_path: Path) -> None:
    queue = JobQueue(JobQueueConfig(algorithm_location=str(tmp_path / "missing.bin")))

    with pytest.raises(JobQueueError, match="Cannot read algorithm binary"):
        queue.next_job()


def test_acknowledge_job_logs(algorithm: Path, caplog) -> None:
    queue = JobQueue(JobQueueConfig(algorithm_location=str(algorithm), algorithm_type_name="Algo"))
    job, _ = queue.next_job()

    with caplog.at_level(logging.INFO):
        queue.acknowledge_job(job)

    assert "backtest job Algo complete" in caplog.text


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("PaperBrokerage", "paper"),
        ("paper", "paper"),
        ("QuantConnect.Brokerages.Paper.PaperBrokerage", "paper"),
        ("  OandaBrokerage ", "oanda"),
        ("Brokerage", "brokerage"),
    ],
)
def test_normalize_brokerage_name(name: str, expected: str) -> None:
    assert normalize_brokerage_name(name) == expected


def test_registry_lookup_is_case_insensitive_and_copies() -> None:
    registry = BrokerageRegistry({"Oanda": {"oanda-environment": "practice"}})

    data = registry.brokerage_data("oandabrokerage")
    data["oanda-environment"] = "live"

    assert registry.brokerage_data("OANDA") == {"oanda-environment": "practice"}
    assert registry.names() == ["Oanda", "PaperBrokerage"]
    with pytest.raises(KeyError, match="Unknown brokerage"):
        registry.brokerage_data("Tradier")


def test_load_job_config_and_registry_from_file(tmp_path: Path, monkeypatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        "\n".join(
            [
                "[job]",
                "live-mode = true",
                "algorithm-location = 'algos/a.bin'",
                "live-mode-brokerage = 'OandaBrokerage'",
                "",
                "[brokerages.OandaBrokerage]",
                "oanda-account-id = '001-1'",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)

    job_config = load_job_queue_config()
    registry = load_brokerage_registry()

    assert job_config.live_mode is True
    assert job_config.algorithm_location == "algos/a.bin"
    assert registry.brokerage_data(job_config.live_mode_brokerage) == {"oanda-account-id": "001-1"}

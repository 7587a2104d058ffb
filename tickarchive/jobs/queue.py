"""Local job queue: hands the engine one backtest or live job built from config."""

from __future__ import annotations

import logging
from pathlib import Path

from tickarchive import __version__, config
from tickarchive.jobs.brokerages import BrokerageRegistry
from tickarchive.jobs.models import (
    BacktestJob,
    JobDescriptor,
    JobQueueConfig,
    JobQueueError,
    LiveJob,
)

logger = logging.getLogger(__name__)


def load_job_queue_config() -> JobQueueConfig:
    """Build a ``JobQueueConfig`` from the ``[job]`` table of the config file."""
    return JobQueueConfig.from_mapping(config.get_job_section())


def load_brokerage_registry() -> BrokerageRegistry:
    """Build a registry from the ``[brokerages.<name>]`` tables of the config file."""
    section = config.load_config().get("brokerages", {})
    if not isinstance(section, dict):
        raise ValueError(f"[brokerages] must be a table in {config.CONFIG_PATH}")
    return BrokerageRegistry(
        {name: data for name, data in section.items() if isinstance(data, dict)}
    )


class JobQueue:
    """Desktop job queue: every call returns a fresh job for the same algorithm."""

    def __init__(
        self,
        job_config: JobQueueConfig,
        registry: BrokerageRegistry | None = None,
        *,
        version: str = __version__,
    ) -> None:
        self.config = job_config
        self.registry = registry or BrokerageRegistry()
        self.version = version

    @property
    def algorithm_location(self) -> Path:
        return Path(self.config.algorithm_location).expanduser()

    def _read_algorithm(self) -> bytes:
        try:
            return self.algorithm_location.read_bytes()
        except OSError as exc:
            raise JobQueueError(
                f"Cannot read algorithm binary at {self.algorithm_location}: {exc}"
            ) from exc

    def next_job(self) -> tuple[JobDescriptor, Path]:
        """Return the next job and the algorithm location it was loaded from."""
        location = self.algorithm_location
        logger.info("JobQueue.next_job(): Selected %s", location)
        algorithm = self._read_algorithm()

        if not self.config.live_mode:
            job = BacktestJob(
                version=self.version,
                algorithm=algorithm,
                backtest_id=self.config.algorithm_type_name,
            )
            return job, location

        brokerage = self.config.live_mode_brokerage
        try:
            brokerage_data = self.registry.brokerage_data(brokerage)
        except KeyError as exc:
            logger.error(
                "JobQueue.next_job(): Error resolving brokerage data for live job "
                "for brokerage %s. %s",
                brokerage,
                exc,
            )
            brokerage_data = {}

        job = LiveJob(
            version=self.version,
            algorithm=algorithm,
            brokerage=brokerage,
            brokerage_data=brokerage_data,
            channel=self.config.job_channel,
            user_id=self.config.job_user_id,
            deploy_id=self.config.algorithm_type_name,
        )
        return job, location

    def acknowledge_job(self, job: JobDescriptor) -> None:
        """Nothing to hand back locally; just record that the run finished."""
        logger.info("JobQueue.acknowledge_job(): %s job %s complete", job.kind, _job_id(job))


def _job_id(job: JobDescriptor) -> str:
    return job.backtest_id if isinstance(job, BacktestJob) else job.deploy_id

"""Local job dispatch for the algorithm engine."""

from tickarchive.jobs.brokerages import BrokerageRegistry, normalize_brokerage_name
from tickarchive.jobs.models import (
    BacktestJob,
    JobDescriptor,
    JobQueueConfig,
    JobQueueError,
    LiveJob,
)
from tickarchive.jobs.queue import JobQueue, load_brokerage_registry, load_job_queue_config

__all__ = [
    "BacktestJob",
    "BrokerageRegistry",
    "JobDescriptor",
    "JobQueue",
    "JobQueueConfig",
    "JobQueueError",
    "LiveJob",
    "load_brokerage_registry",
    "load_job_queue_config",
    "normalize_brokerage_name",
]

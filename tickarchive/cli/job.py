"""``tickarchive job``: show the job the local queue would dispatch."""

from __future__ import annotations

import argparse


def register(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("job", help="Build the next job from the [job] config table")
    p.add_argument("--algorithm", default=None, help="Override algorithm binary location")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--live", action="store_true", default=None, help="Force a live job")
    mode.add_argument(
        "--backtest",
        action="store_false",
        dest="live",
        default=None,
        help="Force a backtest job",
    )
    p.set_defaults(handler=_handle)


def _handle(args: argparse.Namespace) -> int:
    from dataclasses import replace

    from tickarchive.jobs import (
        JobQueue,
        JobQueueError,
        LiveJob,
        load_brokerage_registry,
        load_job_queue_config,
    )

    try:
        job_config = load_job_queue_config()
        registry = load_brokerage_registry()
    except ValueError as exc:
        print(f"error: {exc}")
        return 1

    if args.algorithm is not None:
        job_config = replace(job_config, algorithm_location=args.algorithm)
    if args.live is not None:
        job_config = replace(job_config, live_mode=args.live)

    queue = JobQueue(job_config, registry)
    try:
        job, location = queue.next_job()
    except JobQueueError as exc:
        print(f"error: {exc}")
        return 1

    print(f"type:      {job.kind}")
    print(f"location:  {location}")
    print(f"version:   {job.version}")
    print(f"algorithm: {len(job.algorithm)} bytes")
    if isinstance(job, LiveJob):
        print(f"brokerage: {job.brokerage}")
        print(f"deploy_id: {job.deploy_id}")
        print(f"channel:   {job.channel or '(unset)'}")
    else:
        print(f"backtest_id: {job.backtest_id}")
    queue.acknowledge_job(job)
    return 0

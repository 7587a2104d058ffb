"""``tickarchive config show|set``: inspect and update the user config file."""

from __future__ import annotations

import argparse
import os


def register(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("config", help="Show or update tickarchive configuration")
    config_sub = p.add_subparsers(dest="config_command")

    show = config_sub.add_parser("show", help="Show resolved configuration values")
    show.set_defaults(handler=_handle_show)

    set_cmd = config_sub.add_parser("set", help="Persist configuration values")
    set_cmd.add_argument("--text-encoding", default=None, help="Codec for text entries")
    set_cmd.add_argument("--chunk-size", type=int, default=None, help="Streaming chunk size in bytes")
    set_cmd.set_defaults(handler=_handle_set)


def _handle_show(args: argparse.Namespace) -> int:
    from tickarchive import config

    file_config = config.load_config()
    env_encoding = os.getenv("TICKARCHIVE_ENCODING")

    print("tickarchive config")
    print(f"  config_path: {config.CONFIG_PATH}")
    print(f"  text_encoding: {config._resolve_text_encoding()}")
    print(f"  env_TICKARCHIVE_ENCODING: {env_encoding or '(unset)'}")
    print(f"  file_text_encoding: {file_config.get('text_encoding', '(unset)')}")
    print(f"  chunk_size: {config._resolve_chunk_size()}")

    job_section = config.get_job_section()
    if job_section:
        print("  [job]")
        for key, value in job_section.items():
            print(f"    {key}: {value}")
    else:
        print("  [job]: (unset)")
    return 0


def _handle_set(args: argparse.Namespace) -> int:
    from tickarchive import config

    updates = {
        "text_encoding": args.text_encoding,
        "chunk_size": args.chunk_size,
    }
    updates = {key: value for key, value in updates.items() if value is not None}
    if not updates:
        print("error: config set: pass --text-encoding and/or --chunk-size")
        return 1

    for key, value in updates.items():
        try:
            written = config.set_config_value(key, value)
        except ValueError as exc:
            print(f"error: config set: {exc}")
            return 1
        print(f"Updated {key} in {config.CONFIG_PATH} -> {written}")

    if "text_encoding" in updates and os.getenv("TICKARCHIVE_ENCODING"):
        print("Note: TICKARCHIVE_ENCODING env var is set and will override config in new sessions.")
    return 0

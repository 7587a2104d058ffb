"""``tickarchive zip|zip-file|unzip|extract|list|lines``: archive commands."""

from __future__ import annotations

import argparse
from contextlib import closing
from itertools import islice

EXIT_DATA_ERROR = 2


def register(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("zip", help="Zip existing files into a new archive")
    p.add_argument("destination", help="Zip file to create (overwritten)")
    p.add_argument("files", nargs="+", help="Files to add, named by their base name")
    p.set_defaults(handler=_handle_zip)

    p = subparsers.add_parser("zip-file", help="Zip a single file in place as <stem>.zip")
    p.add_argument("source", help="File to compress")
    p.add_argument("--keep", action="store_true", help="Keep the original file")
    p.set_defaults(handler=_handle_zip_file)

    p = subparsers.add_parser("unzip", help="Extract a zip next to itself, flattening folders")
    p.add_argument("archive", help="Zip file to extract")
    p.set_defaults(handler=_handle_unzip)

    p = subparsers.add_parser("extract", help="Extract a zip, tar, tar.gz or 7z archive")
    p.add_argument("archive", help="Archive to extract (format from its suffix)")
    p.add_argument("destination", help="Folder to extract into (created if missing)")
    p.set_defaults(handler=_handle_extract)

    p = subparsers.add_parser("list", help="List archive entries")
    p.add_argument("archive", help="Archive to inspect")
    p.set_defaults(handler=_handle_list)

    p = subparsers.add_parser("lines", help="Print lines of the first entry of a zip")
    p.add_argument("archive", help="Zip file to read")
    p.add_argument("--head", type=int, default=None, help="Stop after N lines")
    p.set_defaults(handler=_handle_lines)


def _print_paths(paths) -> None:
    for path in paths:
        print(path)


def _handle_zip(args: argparse.Namespace) -> int:
    from tickarchive.archive import write_zip_files

    result = write_zip_files(args.destination, args.files)
    if not result.ok:
        print(f"error: {result.error}")
        return EXIT_DATA_ERROR
    print(f"Wrote {len(result.value)} entries to {args.destination}")
    return 0


def _handle_zip_file(args: argparse.Namespace) -> int:
    from tickarchive.archive import zip_single_file

    result = zip_single_file(args.source, delete_original=not args.keep)
    if not result.ok:
        print(f"error: {result.error}")
        return EXIT_DATA_ERROR
    print(result.value)
    return 0


def _handle_unzip(args: argparse.Namespace) -> int:
    from tickarchive.archive import extract_zip_to_folder

    result = extract_zip_to_folder(args.archive)
    if not result.ok:
        print(f"error: {result.error}")
        return EXIT_DATA_ERROR
    _print_paths(result.value)
    return 0


def _handle_extract(args: argparse.Namespace) -> int:
    from tickarchive.archive import extract_archive

    result = extract_archive(args.archive, args.destination)
    if not result.ok:
        print(f"error: {result.error}")
        return EXIT_DATA_ERROR
    _print_paths(result.value)
    return 0


def _handle_list(args: argparse.Namespace) -> int:
    from tickarchive.archive import list_entries

    result = list_entries(args.archive)
    if not result.ok:
        print(f"error: {result.error}")
        return EXIT_DATA_ERROR
    _print_paths(result.value)
    return 0


def _handle_lines(args: argparse.Namespace) -> int:
    from tickarchive.archive import read_lines

    if args.head is not None and args.head < 0:
        print("error: --head must be >= 0")
        return 1

    result = read_lines(args.archive)
    if not result.ok:
        print(f"error: {result.error}")
        return EXIT_DATA_ERROR

    with closing(result.value) as lines:
        for line in islice(lines, args.head):
            print(line)
    return 0

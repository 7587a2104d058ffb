"""Zip, tar, tar.gz and 7z helpers for the local data library.

Every operation returns an ``ArchiveResult``: failures are logged and carried
as a typed error next to a safe sentinel value instead of being raised.
"""

from tickarchive.archive.extract import (
    extract_7z,
    extract_archive,
    extract_tar,
    extract_tar_gz,
    extract_zip,
    list_entries,
)
from tickarchive.archive.models import (
    ArchiveEntry,
    ArchiveError,
    ArchiveErrorKind,
    ArchiveFormat,
    ArchiveResult,
)
from tickarchive.archive.reader import (
    FirstEntryReader,
    extract_zip_to_folder,
    open_first_entry,
    open_first_entry_from_stream,
    read_lines,
    read_zip_entries,
)
from tickarchive.archive.writer import (
    write_single_entry,
    write_zip,
    write_zip_files,
    zip_single_file,
)

__all__ = [
    "ArchiveEntry",
    "ArchiveError",
    "ArchiveErrorKind",
    "ArchiveFormat",
    "ArchiveResult",
    "FirstEntryReader",
    "extract_7z",
    "extract_archive",
    "extract_tar",
    "extract_tar_gz",
    "extract_zip",
    "extract_zip_to_folder",
    "list_entries",
    "open_first_entry",
    "open_first_entry_from_stream",
    "read_lines",
    "read_zip_entries",
    "write_single_entry",
    "write_zip",
    "write_zip_files",
    "zip_single_file",
]

"""Data models for the archive helpers."""

from __future__ import annotations

import gzip
import logging
import tarfile
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Generic, TypeVar

from py7zr.exceptions import ArchiveError as SevenZipArchiveError

T = TypeVar("T")


class ArchiveFormat(str, Enum):
    ZIP = "zip"
    TAR = "tar"
    TAR_GZ = "tar.gz"
    SEVEN_ZIP = "7z"

    @classmethod
    def from_path(cls, path: str | Path) -> ArchiveFormat:
        """Detect the container format from a file name (case-insensitive)."""
        name = Path(path).name.lower()
        if name.endswith((".tar.gz", ".tgz")):
            return cls.TAR_GZ
        if name.endswith(".tar"):
            return cls.TAR
        if name.endswith(".zip"):
            return cls.ZIP
        if name.endswith(".7z"):
            return cls.SEVEN_ZIP
        raise ValueError(f"Unrecognised archive format: {path}")


@dataclass(frozen=True)
class ArchiveEntry:
    """One named payload inside an archive.

    ``name`` is stored with forward slashes regardless of host OS.
    """

    name: str
    payload: bytes | str | BinaryIO

    def __post_init__(self) -> None:
        normalized = self.name.replace("\\", "/")
        if not normalized.strip("/"):
            raise ValueError(f"Archive entry name must be non-empty, got {self.name!r}")
        object.__setattr__(self, "name", normalized)


class ArchiveErrorKind(str, Enum):
    MISSING_FILE = "missing_file"
    MALFORMED_ARCHIVE = "malformed_archive"
    IO_FAILURE = "io_failure"
    ENTRY_NOT_FOUND = "entry_not_found"
    INVALID_ENTRY = "invalid_entry"


class ArchiveError(Exception):
    """Failure of a single archive operation."""

    def __init__(self, kind: ArchiveErrorKind, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.kind = kind
        self.operation = operation
        self.message = message


@dataclass(frozen=True)
class ArchiveResult(Generic[T]):
    """Outcome of an archive operation.

    ``value`` always holds something safe to use: the real result on success,
    the operation's sentinel (False, "", {}, [] or None) on failure.
    """

    value: T
    error: ArchiveError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return ``value`` or raise the recorded ``ArchiveError``."""
        if self.error is not None:
            raise self.error
        return self.value


_MALFORMED_ERRORS: tuple[type[BaseException], ...] = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    tarfile.TarError,
    gzip.BadGzipFile,
    EOFError,
    SevenZipArchiveError,
    UnicodeDecodeError,
)

# Exceptions an operation catches at its boundary; anything else is a bug and propagates.
HANDLED_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    KeyError,
    LookupError,
    ValueError,
    *_MALFORMED_ERRORS,
)


def classify(exc: BaseException) -> ArchiveErrorKind:
    # UnicodeDecodeError subclasses ValueError and gzip.BadGzipFile subclasses OSError,
    # so check the malformed group first.
    if isinstance(exc, _MALFORMED_ERRORS):
        return ArchiveErrorKind.MALFORMED_ARCHIVE
    if isinstance(exc, FileNotFoundError):
        return ArchiveErrorKind.MISSING_FILE
    if isinstance(exc, KeyError):
        return ArchiveErrorKind.ENTRY_NOT_FOUND
    # Unknown text codecs surface as LookupError.
    if isinstance(exc, (ValueError, LookupError)):
        return ArchiveErrorKind.INVALID_ENTRY
    return ArchiveErrorKind.IO_FAILURE


def failure(
    log: logging.Logger,
    operation: str,
    sentinel: T,
    *,
    exc: BaseException | None = None,
    kind: ArchiveErrorKind | None = None,
    message: str | None = None,
) -> ArchiveResult[T]:
    """Log a failed operation and wrap its sentinel in an ``ArchiveResult``."""
    if kind is None:
        kind = classify(exc) if exc is not None else ArchiveErrorKind.IO_FAILURE
    if message is None:
        message = str(exc) if exc is not None else kind.value
    log.error("%s(): %s", operation, message)
    return ArchiveResult(sentinel, ArchiveError(kind, operation, message))

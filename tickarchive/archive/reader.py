"""Zip reading helpers: in-memory decoding, first-entry readers and lazy lines."""

from __future__ import annotations

import codecs
import io
import logging
import shutil
import zipfile
from collections.abc import Iterator
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from tickarchive import config
from tickarchive.archive.models import (
    HANDLED_ERRORS,
    ArchiveErrorKind,
    ArchiveResult,
    failure,
)

logger = logging.getLogger(__name__)


def _first_file_entry(archive: zipfile.ZipFile) -> zipfile.ZipInfo:
    for info in archive.infolist():
        if not info.is_dir():
            return info
    raise KeyError(f"No file entries in {archive.filename or 'zip stream'}")


def _missing(operation: str, path: Path, sentinel):
    return failure(
        logger,
        operation,
        sentinel,
        kind=ArchiveErrorKind.MISSING_FILE,
        message=f"File does not exist: {path}",
    )


class FirstEntryReader:
    """Text reader over the first file entry of an open zip.

    Owns both the archive handle and the entry stream; ``close()`` (or leaving
    the ``with`` block) releases both.
    """

    def __init__(self, archive: zipfile.ZipFile, entry: zipfile.ZipInfo, encoding: str) -> None:
        self.archive = archive
        self.entry_name = entry.filename
        raw = archive.open(entry)
        try:
            self._stream = io.TextIOWrapper(raw, encoding=encoding)
        except BaseException:
            raw.close()
            raise

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def readline(self) -> str:
        return self._stream.readline()

    def read(self) -> str:
        return self._stream.read()

    def __iter__(self) -> Iterator[str]:
        return iter(self._stream)

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            self.archive.close()

    def __enter__(self) -> FirstEntryReader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def read_zip_entries(
    zip_bytes: bytes,
    *,
    encoding: str | None = None,
) -> ArchiveResult[dict[str, str]]:
    """Decode every file entry of an in-memory zip into ``{entry_name: text}``.

    On failure the value is an empty dict, never a partial one.
    """
    encoding = encoding or config.TEXT_ENCODING
    entries: dict[str, str] = {}
    try:
        with zipfile.ZipFile(io.BytesIO(zip_bytes)) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                entries[info.filename] = archive.read(info).decode(encoding)
    except HANDLED_ERRORS as exc:
        return failure(logger, "read_zip_entries", {}, exc=exc)
    return ArchiveResult(entries)


def open_first_entry(
    path: str | Path,
    *,
    encoding: str | None = None,
) -> ArchiveResult[FirstEntryReader | None]:
    """Open the zip at ``path`` and return a reader bound to its first entry.

    The caller owns the returned reader and must close it.
    """
    encoding = encoding or config.TEXT_ENCODING
    path = Path(path)
    if not path.is_file():
        return _missing("open_first_entry", path, None)

    try:
        archive = zipfile.ZipFile(path)
        try:
            reader = FirstEntryReader(archive, _first_file_entry(archive), encoding)
        except BaseException:
            archive.close()
            raise
    except HANDLED_ERRORS as exc:
        return failure(logger, "open_first_entry", None, exc=exc, message=f"{path} >> {exc}")
    return ArchiveResult(reader)


def _iter_lines(path: Path, entry_name: str, encoding: str) -> Iterator[str]:
    try:
        with zipfile.ZipFile(path) as archive, archive.open(entry_name) as raw:
            with io.TextIOWrapper(raw, encoding=encoding) as reader:
                for line in reader:
                    yield line.removesuffix("\n")
    except HANDLED_ERRORS as exc:
        # Enumeration stops early; the handles above are already released.
        logger.error("read_lines(): %s >> %s", path, exc)


def read_lines(
    path: str | Path,
    *,
    encoding: str | None = None,
) -> ArchiveResult[Iterator[str] | None]:
    """Lazily yield the lines of the first entry of the zip at ``path``.

    The archive is checked up front, then re-opened only while the returned
    generator is being consumed. Breaking out early and calling ``close()`` on
    the generator releases the handle.
    """
    encoding = encoding or config.TEXT_ENCODING
    path = Path(path)
    if not path.is_file():
        return _missing("read_lines", path, None)

    try:
        codecs.lookup(encoding)
        with zipfile.ZipFile(path) as archive:
            entry_name = _first_file_entry(archive).filename
    except HANDLED_ERRORS as exc:
        return failure(logger, "read_lines", None, exc=exc, message=f"{path} >> {exc}")
    return ArchiveResult(_iter_lines(path, entry_name, encoding))


def open_first_entry_from_stream(
    stream: BinaryIO,
    *,
    encoding: str | None = None,
) -> ArchiveResult[io.StringIO | None]:
    """Read the whole first entry of a zip byte stream into an in-memory reader.

    The caller's stream is left open.
    """
    encoding = encoding or config.TEXT_ENCODING
    try:
        source = stream if stream.seekable() else io.BytesIO(stream.read())
        with zipfile.ZipFile(source) as archive:
            payload = archive.read(_first_file_entry(archive))
        return ArchiveResult(io.StringIO(payload.decode(encoding)))
    except HANDLED_ERRORS as exc:
        return failure(logger, "open_first_entry_from_stream", None, exc=exc)


def extract_zip_to_folder(
    zip_path: str | Path,
    *,
    chunk_size: int | None = None,
) -> ArchiveResult[list[Path]]:
    """Extract every file entry next to the zip, flattened to base names.

    Returns absolute output paths in entry order. Entries sharing a base name
    overwrite each other; the last one wins.
    """
    chunk_size = chunk_size or config.CHUNK_SIZE
    path = Path(zip_path)
    if not path.is_file():
        return _missing("extract_zip_to_folder", path, [])

    archive_path = path.absolute()
    out_folder = archive_path.parent
    extracted: list[Path] = []
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                name = PurePosixPath(info.filename.replace("\\", "/")).name
                if name in ("", ".", ".."):
                    continue
                target = out_folder / name
                if target == archive_path:
                    logger.warning(
                        "extract_zip_to_folder(): Skipping entry %s, it would overwrite %s",
                        info.filename,
                        archive_path,
                    )
                    continue

                with archive.open(info) as source, target.open("wb") as sink:
                    shutil.copyfileobj(source, sink, chunk_size)
                extracted.append(target)
    except HANDLED_ERRORS as exc:
        return failure(logger, "extract_zip_to_folder", [], exc=exc, message=f"{path} >> {exc}")
    return ArchiveResult(extracted)

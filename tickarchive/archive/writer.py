"""Zip creation helpers.

All writers are best-effort and non-transactional: a failure midway leaves
whatever was already written at the destination. Callers needing atomic
output should write to a temporary path and rename on success.
"""

from __future__ import annotations

import io
import logging
import shutil
import time
import zipfile
from collections.abc import Iterable, Mapping
from pathlib import Path

from tickarchive import config
from tickarchive.archive.models import (
    HANDLED_ERRORS,
    ArchiveEntry,
    ArchiveErrorKind,
    ArchiveResult,
    failure,
)

logger = logging.getLogger(__name__)

Entries = Mapping[str, bytes | str] | Iterable[ArchiveEntry]


def _open_zip(destination: Path) -> zipfile.ZipFile:
    destination.parent.mkdir(parents=True, exist_ok=True)
    return zipfile.ZipFile(destination, mode="w", compression=zipfile.ZIP_DEFLATED)


def _collect_entries(entries: Entries) -> list[ArchiveEntry]:
    if isinstance(entries, Mapping):
        collected = [ArchiveEntry(name, payload) for name, payload in entries.items()]
    else:
        collected = list(entries)

    seen: set[str] = set()
    for entry in collected:
        if entry.name in seen:
            raise ValueError(f"Duplicate archive entry name: {entry.name}")
        seen.add(entry.name)
    return collected


def _copy_stream(zf: zipfile.ZipFile, info: zipfile.ZipInfo, source, chunk_size: int) -> None:
    # force_zip64 lets unsized streams grow past 2 GiB.
    force_zip64 = info.file_size == 0
    with zf.open(info, mode="w", force_zip64=force_zip64) as target:
        shutil.copyfileobj(source, target, chunk_size)


def _entry_info(name: str, size: int = 0) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=time.localtime(time.time())[:6])
    info.compress_type = zipfile.ZIP_DEFLATED
    info.file_size = size
    return info


def _write_entry(
    zf: zipfile.ZipFile,
    entry: ArchiveEntry,
    *,
    encoding: str,
    chunk_size: int,
) -> None:
    payload = entry.payload
    if isinstance(payload, str):
        payload = payload.encode(encoding)
    if isinstance(payload, (bytes, bytearray, memoryview)):
        with io.BytesIO(payload) as source:
            _copy_stream(zf, _entry_info(entry.name, len(payload)), source, chunk_size)
    else:
        _copy_stream(zf, _entry_info(entry.name), payload, chunk_size)


def _write_entries(
    destination: Path,
    entries: list[ArchiveEntry],
    *,
    encoding: str | None,
    chunk_size: int | None,
) -> None:
    encoding = encoding or config.TEXT_ENCODING
    chunk_size = chunk_size or config.CHUNK_SIZE
    with _open_zip(destination) as zf:
        for entry in entries:
            _write_entry(zf, entry, encoding=encoding, chunk_size=chunk_size)


def write_zip(
    destination: str | Path,
    entries: Entries,
    *,
    encoding: str | None = None,
    chunk_size: int | None = None,
) -> ArchiveResult[bool]:
    """Create (or overwrite) a zip holding one entry per item, in iteration order.

    ``entries`` is either a ``{name: bytes | str}`` mapping or an iterable of
    ``ArchiveEntry``. Text payloads are encoded with ``encoding`` (defaults to
    the configured text encoding). Each payload is streamed into the archive
    in ``chunk_size`` pieces.
    """
    try:
        _write_entries(
            Path(destination),
            _collect_entries(entries),
            encoding=encoding,
            chunk_size=chunk_size,
        )
    except HANDLED_ERRORS as exc:
        return failure(logger, "write_zip", False, exc=exc)
    return ArchiveResult(True)


def _add_file(zf: zipfile.ZipFile, path: Path, chunk_size: int) -> None:
    # Zip timestamps start in 1980; older mtimes are clamped instead of rejected.
    info = zipfile.ZipInfo.from_file(path, arcname=path.name, strict_timestamps=False)
    info.compress_type = zipfile.ZIP_DEFLATED
    with path.open("rb") as handle:
        _copy_stream(zf, info, handle, chunk_size)


def write_zip_files(
    destination: str | Path,
    sources: Iterable[str | Path],
    *,
    chunk_size: int | None = None,
) -> ArchiveResult[list[str]]:
    """Zip existing files into ``destination``, each named by its base filename.

    Missing sources are skipped. Returns the entry names written.
    """
    chunk_size = chunk_size or config.CHUNK_SIZE
    written: list[str] = []
    try:
        with _open_zip(Path(destination)) as zf:
            for source in sources:
                path = Path(source)
                if not path.is_file():
                    logger.info("write_zip_files(): File does not exist: %s", path)
                    continue
                if path.name in written:
                    logger.warning(
                        "write_zip_files(): Skipping %s, entry %s already written",
                        path,
                        path.name,
                    )
                    continue

                _add_file(zf, path, chunk_size)
                written.append(path.name)
    except HANDLED_ERRORS as exc:
        return failure(logger, "write_zip_files", [], exc=exc)
    return ArchiveResult(written)


def zip_single_file(
    source: str | Path,
    delete_original: bool = True,
    *,
    chunk_size: int | None = None,
) -> ArchiveResult[str]:
    """Zip ``source`` next to itself as ``<stem>.zip``.

    The single entry keeps the file's base name. The original is deleted once
    the archive is complete when ``delete_original`` is set. The value is the
    new archive path, or ``""`` on failure.
    """
    chunk_size = chunk_size or config.CHUNK_SIZE
    path = Path(source)
    if not path.is_file():
        return failure(
            logger,
            "zip_single_file",
            "",
            kind=ArchiveErrorKind.MISSING_FILE,
            message=f"File does not exist: {path}",
        )

    zip_path = path.with_suffix(".zip")
    if zip_path == path:
        return failure(
            logger,
            "zip_single_file",
            "",
            kind=ArchiveErrorKind.INVALID_ENTRY,
            message=f"Source is already a zip: {path}",
        )

    try:
        with _open_zip(zip_path) as zf:
            _add_file(zf, path, chunk_size)
        if delete_original:
            path.unlink()
    except HANDLED_ERRORS as exc:
        return failure(logger, "zip_single_file", "", exc=exc, message=f"{path} >> {exc}")
    return ArchiveResult(str(zip_path))


def write_single_entry(
    data: str,
    destination: str | Path,
    entry_name: str,
    *,
    encoding: str | None = None,
) -> ArchiveResult[bool]:
    """Write ``data`` as the only entry ``entry_name`` of a new zip."""
    try:
        entry = ArchiveEntry(entry_name, data)
        _write_entries(Path(destination), [entry], encoding=encoding, chunk_size=None)
    except HANDLED_ERRORS as exc:
        return failure(logger, "write_single_entry", False, exc=exc)
    return ArchiveResult(True)

"""Structure-preserving extraction for tar, tar.gz, 7z and zip containers."""

from __future__ import annotations

import gzip
import logging
import tarfile
import zipfile
from pathlib import Path
from typing import BinaryIO

import py7zr

from tickarchive.archive.models import (
    HANDLED_ERRORS,
    ArchiveErrorKind,
    ArchiveFormat,
    ArchiveResult,
    failure,
)

logger = logging.getLogger(__name__)

# The "data" extraction filter ships with Python 3.12 and the 3.10/3.11 security releases.
_TAR_FILTER_KWARGS: dict = {"filter": "data"} if hasattr(tarfile, "data_filter") else {}


def _ensure_inside(root: Path, member_name: str, link_name: str | None = None) -> None:
    """Reject members (and link targets) that resolve outside ``root``."""
    resolved_root = root.resolve()
    target = (resolved_root / member_name).resolve()
    if not target.is_relative_to(resolved_root):
        raise ValueError(f"Archive member escapes destination: {member_name}")
    if link_name is not None:
        link_target = (target.parent / link_name).resolve()
        if not link_target.is_relative_to(resolved_root):
            raise ValueError(f"Archive link escapes destination: {member_name} -> {link_name}")


def _extract_tar_members(stream: BinaryIO, destination: Path) -> list[Path]:
    extracted: list[Path] = []
    # Stream mode reads the tar sequentially, so gzip input never has to seek backwards.
    with tarfile.open(fileobj=stream, mode="r|") as tar:
        for member in tar:
            if member.issym():
                _ensure_inside(destination, member.name, member.linkname)
            elif member.islnk():
                _ensure_inside(destination, member.name)
                _ensure_inside(destination, member.linkname)
            else:
                _ensure_inside(destination, member.name)
            tar.extract(member, destination, **_TAR_FILTER_KWARGS)
            if member.isfile():
                extracted.append(destination / member.name)
    return extracted


def _missing(operation: str, path: Path) -> ArchiveResult[list[Path]]:
    return failure(
        logger,
        operation,
        [],
        kind=ArchiveErrorKind.MISSING_FILE,
        message=f"File does not exist: {path}",
    )


def extract_tar(source: str | Path, destination: str | Path) -> ArchiveResult[list[Path]]:
    """Extract a plain tar into ``destination``, keeping its directory layout.

    Returns the paths of the regular files written.
    """
    src, dest = Path(source), Path(destination)
    if not src.is_file():
        return _missing("extract_tar", src)

    try:
        dest.mkdir(parents=True, exist_ok=True)
        with src.open("rb") as raw:
            extracted = _extract_tar_members(raw, dest)
    except HANDLED_ERRORS as exc:
        return failure(logger, "extract_tar", [], exc=exc, message=f"{src} >> {exc}")
    return ArchiveResult(extracted)


def extract_tar_gz(source: str | Path, destination: str | Path) -> ArchiveResult[list[Path]]:
    """Extract a gzip-wrapped tar into ``destination``, keeping its directory layout."""
    src, dest = Path(source), Path(destination)
    if not src.is_file():
        return _missing("extract_tar_gz", src)

    try:
        dest.mkdir(parents=True, exist_ok=True)
        with src.open("rb") as raw, gzip.GzipFile(fileobj=raw, mode="rb") as unzipped:
            extracted = _extract_tar_members(unzipped, dest)
    except HANDLED_ERRORS as exc:
        return failure(logger, "extract_tar_gz", [], exc=exc, message=f"{src} >> {exc}")
    return ArchiveResult(extracted)


def extract_7z(source: str | Path, destination: str | Path) -> ArchiveResult[list[Path]]:
    """Extract a 7z archive into ``destination``, keeping its directory layout."""
    src, dest = Path(source), Path(destination)
    if not src.is_file():
        return _missing("extract_7z", src)

    try:
        dest.mkdir(parents=True, exist_ok=True)
        with py7zr.SevenZipFile(src, mode="r") as archive:
            members = archive.list()
            for member in members:
                _ensure_inside(dest, member.filename)
            archive.extractall(path=dest)
    except HANDLED_ERRORS as exc:
        return failure(logger, "extract_7z", [], exc=exc, message=f"{src} >> {exc}")
    return ArchiveResult([dest / m.filename for m in members if not m.is_directory])


def extract_zip(source: str | Path, destination: str | Path) -> ArchiveResult[list[Path]]:
    """Extract a zip into ``destination``, keeping its directory layout.

    Unlike ``extract_zip_to_folder`` nothing is flattened.
    """
    src, dest = Path(source), Path(destination)
    if not src.is_file():
        return _missing("extract_zip", src)

    extracted: list[Path] = []
    try:
        dest.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(src) as archive:
            for info in archive.infolist():
                _ensure_inside(dest, info.filename)
                written = archive.extract(info, dest)
                if not info.is_dir():
                    extracted.append(Path(written))
    except HANDLED_ERRORS as exc:
        return failure(logger, "extract_zip", [], exc=exc, message=f"{src} >> {exc}")
    return ArchiveResult(extracted)


_EXTRACTORS = {
    ArchiveFormat.ZIP: extract_zip,
    ArchiveFormat.TAR: extract_tar,
    ArchiveFormat.TAR_GZ: extract_tar_gz,
    ArchiveFormat.SEVEN_ZIP: extract_7z,
}


def extract_archive(source: str | Path, destination: str | Path) -> ArchiveResult[list[Path]]:
    """Extract any supported container, picking the format from the file name."""
    try:
        archive_format = ArchiveFormat.from_path(source)
    except ValueError as exc:
        return failure(
            logger, "extract_archive", [], kind=ArchiveErrorKind.MALFORMED_ARCHIVE, exc=exc
        )
    return _EXTRACTORS[archive_format](source, destination)


def list_entries(source: str | Path) -> ArchiveResult[list[str]]:
    """List entry names of any supported container, in archive order."""
    src = Path(source)
    if not src.is_file():
        return failure(
            logger,
            "list_entries",
            [],
            kind=ArchiveErrorKind.MISSING_FILE,
            message=f"File does not exist: {src}",
        )

    try:
        archive_format = ArchiveFormat.from_path(src)
        if archive_format == ArchiveFormat.ZIP:
            with zipfile.ZipFile(src) as archive:
                names = archive.namelist()
        elif archive_format == ArchiveFormat.SEVEN_ZIP:
            with py7zr.SevenZipFile(src, mode="r") as archive:
                names = archive.getnames()
        else:
            mode = "r:gz" if archive_format == ArchiveFormat.TAR_GZ else "r:"
            with tarfile.open(src, mode=mode) as archive:
                names = archive.getnames()
    except HANDLED_ERRORS as exc:
        return failure(logger, "list_entries", [], exc=exc, message=f"{src} >> {exc}")
    return ArchiveResult(names)

"""Load archived CSV series straight into Polars DataFrames."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

import polars as pl

from tickarchive.archive.models import HANDLED_ERRORS, ArchiveErrorKind, ArchiveResult, failure
from tickarchive.archive.writer import write_zip

logger = logging.getLogger(__name__)


def read_zip_csv(
    path: str | Path,
    *,
    entry_name: str | None = None,
    has_header: bool = True,
    columns: list[str] | None = None,
    **read_options,
) -> ArchiveResult[pl.DataFrame]:
    """Read one CSV entry of a zip (the first one unless ``entry_name`` is given).

    Data-library files are headerless, so pass ``has_header=False`` together
    with explicit ``columns`` for them. An empty entry yields an empty frame.
    """
    if not has_header and columns is None:
        raise ValueError("Headerless CSV requires explicit column names")

    options = {"infer_schema_length": 10000, "try_parse_dates": False, **read_options}
    if not has_header:
        options["has_header"] = False
        options["new_columns"] = columns

    path = Path(path)
    if not path.is_file():
        return failure(
            logger,
            "read_zip_csv",
            pl.DataFrame(),
            kind=ArchiveErrorKind.MISSING_FILE,
            message=f"File does not exist: {path}",
        )

    try:
        with zipfile.ZipFile(path) as archive:
            if entry_name is None:
                csv_files = [name for name in archive.namelist() if name.lower().endswith(".csv")]
                if not csv_files:
                    raise KeyError(f"No CSV file found in ZIP archive: {path}")
                if len(csv_files) > 1:
                    logger.warning(
                        "ZIP contains %s CSVs, using first only: %s", len(csv_files), path
                    )
                entry_name = csv_files[0]
            with archive.open(entry_name) as handle:
                df = pl.read_csv(handle, **options)
    except pl.exceptions.NoDataError:
        return ArchiveResult(pl.DataFrame())
    except (*HANDLED_ERRORS, pl.exceptions.ComputeError) as exc:
        return failure(logger, "read_zip_csv", pl.DataFrame(), exc=exc, message=f"{path} >> {exc}")
    return ArchiveResult(df)


def write_zip_csv(
    df: pl.DataFrame,
    destination: str | Path,
    entry_name: str,
    *,
    include_header: bool = False,
) -> ArchiveResult[bool]:
    """Write ``df`` as a single CSV entry of a new zip at ``destination``."""
    try:
        payload = df.write_csv(include_header=include_header)
    except pl.exceptions.ComputeError as exc:
        return failure(logger, "write_zip_csv", False, exc=exc)
    return write_zip(destination, {entry_name: payload})


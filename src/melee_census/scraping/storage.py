"""
Snapshot files and the monthly summary log.

Raw API payloads are kept under ``<output_dir>/<year>-<month>/<slug>/``;
the summary log is an append-only CSV whose last row is the checkpoint.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import polars as pl

from melee_census.core.constants import SUMMARY_COLUMNS
from melee_census.core.stats import MonthlyStats

logger = logging.getLogger(__name__)


def month_dir(output_dir: str | Path, year: int, month: int) -> Path:
    """Directory holding one month's snapshots (month not zero-padded)."""
    return Path(output_dir) / f"{year}-{month}"


def group_snapshot_path(month_path: Path, slug: str, group_id: int) -> Path:
    return month_path / slug / f"{group_id}.json"


def tournament_snapshot_path(month_path: Path, slug: str) -> Path:
    return month_path / slug / f"{slug}.json"


def write_snapshot(path: Path, payload: Any) -> None:
    """Write a raw API payload as compact JSON, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(payload, f, separators=(",", ":"))
    logger.debug(f"Saved snapshot {path}")


def _summary_schema() -> dict[str, pl.DataType]:
    return {name: pl.Int64 for name in SUMMARY_COLUMNS}


def load_summary(path: str | Path) -> pl.DataFrame:
    """
    Load the summary log.

    Parameters
    ----------
    path : str or Path
        Path to ``results.csv``

    Returns
    -------
    pl.DataFrame
        One row per completed month; empty with the log's schema when the
        file does not exist or has no data rows

    Raises
    ------
    OSError, polars.exceptions.PolarsError
        When the file exists but cannot be read or parsed
    """
    path = Path(path)
    if not path.exists() or path.stat().st_size == 0:
        return pl.DataFrame(schema=_summary_schema())
    df = pl.read_csv(path, has_header=True, infer_schema_length=0)
    # Blank and whitespace-only lines come back as rows; they are not months
    first = df.columns[0] if df.columns else None
    if first is not None:
        df = df.filter(pl.col(first).str.strip_chars().fill_null("") != "")
    if df.is_empty():
        return pl.DataFrame(schema=_summary_schema())
    # Older logs may carry their own header names; position is what counts
    return df.select(
        [
            pl.col(col).str.strip_chars().cast(pl.Int64).alias(name)
            for col, name in zip(df.columns, SUMMARY_COLUMNS)
        ]
    )


def append_summary_row(path: str | Path, row: MonthlyStats) -> None:
    """Append one completed month, writing the header for a new log."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    needs_header = not path.exists() or path.stat().st_size == 0
    frame = pl.DataFrame([row.to_row()], schema=_summary_schema())
    with open(path, "a", newline="") as f:
        f.write(frame.write_csv(include_header=needs_header))
    logger.info(f"Appended {row.year}-{row.month} to {path}")

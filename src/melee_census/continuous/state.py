"""Checkpoint state: which month to harvest next."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from polars.exceptions import PolarsError

from melee_census.core.constants import EPOCH_MONTH, EPOCH_YEAR
from melee_census.scraping.storage import load_summary

logger = logging.getLogger(__name__)

YearMonth = tuple[int, int]


def next_month(year: int, month: int) -> YearMonth:
    """Advance one calendar month; ``month`` is 1-based."""
    if month >= 12:
        return year + 1, 1
    return year, month + 1


def month_window(year: int, month: int) -> tuple[int, int]:
    """UTC epoch seconds bounding ``[start of month, start of next month)``."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end_year, end_month = next_month(year, month)
    end = datetime(end_year, end_month, 1, tzinfo=timezone.utc)
    return int(start.timestamp()), int(end.timestamp())


def current_month(now: datetime | None = None) -> YearMonth:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.year, now.month


def read_checkpoint(results_path: str | Path) -> YearMonth | None:
    """
    Return the last completed (year, month) in the summary log.

    A missing, empty, header-only or unreadable log means there is no
    checkpoint; read failures are logged rather than raised so that a
    damaged log falls back to the epoch instead of stopping the run.
    """
    try:
        summary = load_summary(results_path)
    except (OSError, PolarsError) as e:
        logger.warning(f"could not read {results_path}: {e}")
        return None

    if summary.is_empty():
        return None
    last = summary.row(-1, named=True)
    if last["year"] is None or last["month"] is None:
        logger.warning(f"last row of {results_path} has no year/month")
        return None
    return int(last["year"]), int(last["month"])


def resume_month(
    results_path: str | Path,
    epoch: YearMonth = (EPOCH_YEAR, EPOCH_MONTH),
) -> YearMonth:
    """First month that still needs harvesting."""
    checkpoint = read_checkpoint(results_path)
    if checkpoint is None:
        logger.info(f"No checkpoint in {results_path}, starting at {epoch}")
        return epoch
    resumed = next_month(*checkpoint)
    logger.info(f"Last completed month {checkpoint}, resuming at {resumed}")
    return resumed


def pending_months(
    start: YearMonth, now: datetime | None = None
) -> Iterator[YearMonth]:
    """Yield months from ``start`` up to, but excluding, the current month.

    The in-progress month is never yielded, so only fully elapsed months get
    a summary row.
    """
    stop = current_month(now)
    year, month = start
    while (year, month) < stop:
        yield year, month
        year, month = next_month(year, month)

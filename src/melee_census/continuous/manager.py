"""Main month-by-month harvesting driver."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable

from tqdm import tqdm

from melee_census.continuous.state import (
    month_window,
    pending_months,
    resume_month,
)
from melee_census.core.config import FailurePolicy, HarvestConfig
from melee_census.core.errors import HarvestError
from melee_census.core.logging import log_timing
from melee_census.core.stats import MonthlyStats, Stats
from melee_census.scraping.client import FetchClient
from melee_census.scraping.listing import list_tournament_slugs
from melee_census.scraping.storage import append_summary_row, month_dir
from melee_census.scraping.walker import TournamentWalker

logger = logging.getLogger(__name__)


class MonthlyHarvester:
    """
    Backfills monthly summaries from the checkpoint up to last month.

    Handles the complete month lifecycle:
    - Resuming from the summary log
    - Listing and walking every tournament of the month
    - Folding the deltas and appending exactly one row per month

    Months are processed strictly in order and a row is only written after
    every tournament of that month has been walked, so an interrupted run
    restarts at the first month without a row.
    """

    def __init__(
        self,
        config: HarvestConfig,
        client: FetchClient | None = None,
        walker: TournamentWalker | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the harvester.

        Args:
            config: Run configuration
            client: HTTP client (built from the config if None)
            walker: Tournament walker (built around the client if None)
            sleep: Sleep function used between listing pages
        """
        self.config = config
        self.client = client or FetchClient(
            api_key=config.api_key,
            retry=config.retry,
            timeout=config.timeout,
        )
        self.walker = walker or TournamentWalker(
            self.client, exclusions=config.exclusions
        )
        self.sleep = sleep
        self.skipped: list[str] = []

    def run(self, now: datetime | None = None) -> list[MonthlyStats]:
        """
        Harvest every fully elapsed month after the checkpoint.

        Args:
            now: Reference time for the current month (UTC now if None)

        Returns:
            Rows appended during this run
        """
        start = resume_month(self.config.results_path)
        rows = []
        for year, month in pending_months(start, now):
            with log_timing(logger, f"harvesting {year}-{month}"):
                row = self.process_month(year, month)
            append_summary_row(self.config.results_path, row)
            rows.append(row)
        logger.info(f"Harvest complete: {len(rows)} months written")
        return rows

    def process_month(self, year: int, month: int) -> MonthlyStats:
        """
        List, walk and fold one month without persisting the row.

        Args:
            year: Calendar year
            month: 1-based month

        Returns:
            The month's summary row
        """
        after_s, before_s = month_window(year, month)
        slugs = list_tournament_slugs(
            self.client,
            after_s,
            before_s,
            page_size=self.config.page_size,
            page_delay=self.config.page_delay,
            sleep=self.sleep,
        )
        logger.info(f"{year}/{month}: {len(slugs)} tournaments to fetch")

        month_path = month_dir(self.config.output_dir, year, month)
        seen_players: set[int] = set()
        deltas: list[Stats] = []
        for slug in tqdm(
            slugs,
            desc=f"{year}-{month}",
            disable=not self.config.show_progress,
        ):
            delta = self._walk_tournament(slug, seen_players, month_path)
            if delta is not None:
                deltas.append(delta)

        row = MonthlyStats.from_tournaments(year, month, deltas, seen_players)
        logger.info(
            f"{year}/{month}: {row.tournaments} tournaments, "
            f"{row.players} players, {row.sets} sets, "
            f"{row.with_characters_and_stages} with characters and stages, "
            f"{row.with_stock_counts} with stocks, {row.with_colors} with colors"
        )
        return row

    def _walk_tournament(
        self, slug: str, seen_players: set[int], month_path: Path
    ) -> Stats | None:
        if self.config.failure_policy is FailurePolicy.ABORT:
            return self.walker.walk(slug, seen_players, month_path)

        # Walk against a scratch copy so a failed tournament leaves no players
        scratch = set(seen_players)
        try:
            delta = self.walker.walk(slug, scratch, month_path)
        except HarvestError as e:
            logger.error(f"Skipping tournament {slug}: {e}")
            self.skipped.append(slug)
            return None
        seen_players.update(scratch)
        return delta

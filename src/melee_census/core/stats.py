"""Statistic vectors and their aggregation.

``Stats`` is the delta produced for a phase group or a tournament;
``MonthlyStats`` is the row persisted to the summary log once a month has
been fully processed. Merging is a plain component-wise sum, so it is
associative and commutative with ``Stats()`` as the identity.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Iterable

from melee_census.core.constants import SUMMARY_COLUMNS


@dataclass(frozen=True)
class Stats:
    """Completeness counts for some slice of sets."""

    entrants: int = 0
    sets: int = 0
    with_characters_and_stages: int = 0
    with_stock_counts: int = 0
    with_colors: int = 0

    def __add__(self, other: Stats) -> Stats:
        if not isinstance(other, Stats):
            return NotImplemented
        return Stats(*(a + b for a, b in zip(astuple(self), astuple(other))))

    def is_nested(self) -> bool:
        """True when the completeness tiers respect their nesting."""
        return (
            0
            <= self.with_colors
            <= self.with_stock_counts
            <= self.with_characters_and_stages
            <= self.sets
        )


def merge_stats(*stats: Stats) -> Stats:
    """Fold any number of statistic vectors into one."""
    return sum(stats, Stats())


@dataclass(frozen=True)
class MonthlyStats:
    """One row of the summary log."""

    year: int
    month: int
    tournaments: int = 0
    entrants: int = 0
    players: int = 0
    sets: int = 0
    with_characters_and_stages: int = 0
    with_stock_counts: int = 0
    with_colors: int = 0

    @classmethod
    def from_tournaments(
        cls,
        year: int,
        month: int,
        tournament_stats: Iterable[Stats],
        player_ids: set[int],
    ) -> MonthlyStats:
        """Fold per-tournament deltas into a month row.

        ``tournaments`` counts only deltas with at least one eligible set;
        ``players`` is the size of the month-wide de-duplicated id set.
        """
        counted = 0
        total = Stats()
        for delta in tournament_stats:
            if delta.sets > 0:
                counted += 1
            total = total + delta
        return cls(
            year=year,
            month=month,
            tournaments=counted,
            entrants=total.entrants,
            players=len(player_ids),
            sets=total.sets,
            with_characters_and_stages=total.with_characters_and_stages,
            with_stock_counts=total.with_stock_counts,
            with_colors=total.with_colors,
        )

    def to_row(self) -> dict[str, int]:
        """Map to the summary log's column names, in column order."""
        values = astuple(self)
        return dict(zip(SUMMARY_COLUMNS, values))


__all__ = ["Stats", "MonthlyStats", "merge_stats"]

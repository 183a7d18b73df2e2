"""start.gg Melee data completeness census."""

from __future__ import annotations

from melee_census.continuous import MonthlyHarvester
from melee_census.core import (
    ExclusionPolicy,
    FailurePolicy,
    HarvestConfig,
    MonthlyStats,
    RetryPolicy,
    Stats,
    merge_stats,
)
from melee_census.scraping import (
    FetchClient,
    TournamentWalker,
    list_tournament_slugs,
)

__version__ = "0.1.0"

__all__ = [
    # Driver
    "MonthlyHarvester",
    "HarvestConfig",
    # Scraping
    "FetchClient",
    "TournamentWalker",
    "list_tournament_slugs",
    # Aggregation
    "Stats",
    "MonthlyStats",
    "merge_stats",
    # Policies
    "ExclusionPolicy",
    "FailurePolicy",
    "RetryPolicy",
    # Version
    "__version__",
]

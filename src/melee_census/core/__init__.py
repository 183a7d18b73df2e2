"""Core components: configuration, classification and aggregation."""

from melee_census.core.classify import (
    completeness_counts,
    has_characters_and_stages,
    has_colors,
    has_stock_counts,
    is_eligible_event,
    is_eligible_group,
    is_eligible_tournament_node,
    is_played_set,
)
from melee_census.core.config import (
    ExclusionPolicy,
    FailurePolicy,
    HarvestConfig,
    RetryPolicy,
)
from melee_census.core.errors import (
    GraphQLError,
    HarvestError,
    NetworkFailureError,
    PermanentUpstreamError,
    TransientUpstreamError,
    UpstreamError,
)
from melee_census.core.stats import MonthlyStats, Stats, merge_stats

__all__ = [
    # Classification
    "is_eligible_tournament_node",
    "is_eligible_event",
    "is_eligible_group",
    "is_played_set",
    "has_characters_and_stages",
    "has_stock_counts",
    "has_colors",
    "completeness_counts",
    # Configuration
    "ExclusionPolicy",
    "FailurePolicy",
    "HarvestConfig",
    "RetryPolicy",
    # Errors
    "HarvestError",
    "UpstreamError",
    "TransientUpstreamError",
    "PermanentUpstreamError",
    "GraphQLError",
    "NetworkFailureError",
    # Aggregation
    "Stats",
    "MonthlyStats",
    "merge_stats",
]

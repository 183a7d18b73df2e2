"""start.gg scraping: HTTP client, discovery, traversal and storage."""

from __future__ import annotations

from melee_census.scraping.api import (
    TOURNAMENTS_QUERY,
    build_event_url,
    build_phase_group_url,
    build_tournament_url,
)
from melee_census.scraping.client import FetchClient
from melee_census.scraping.listing import canonical_slug, list_tournament_slugs
from melee_census.scraping.storage import (
    append_summary_row,
    load_summary,
    month_dir,
    write_snapshot,
)
from melee_census.scraping.walker import TournamentWalker, entrant_player_ids

__all__ = [
    # API
    "TOURNAMENTS_QUERY",
    "build_tournament_url",
    "build_event_url",
    "build_phase_group_url",
    # Client
    "FetchClient",
    # Discovery
    "list_tournament_slugs",
    "canonical_slug",
    # Traversal
    "TournamentWalker",
    "entrant_player_ids",
    # Storage
    "month_dir",
    "write_snapshot",
    "load_summary",
    "append_summary_row",
]

"""
URL builders and query text for the start.gg API.

The hierarchy walk uses the legacy REST endpoints (which expose the raw
``entities`` envelope with stock and stage fields), while tournament
discovery goes through the public GraphQL endpoint.
"""

from __future__ import annotations

from urllib.parse import quote

from melee_census.core.constants import STARTGG_API_BASE_URL

TOURNAMENTS_QUERY = """
  query tournamentsQuery($afterS: Timestamp, $beforeS: Timestamp, $pageNum: Int, $perPage: Int, $videogameId: ID) {
    tournaments(
      query: {page: $pageNum, perPage: $perPage, filter: {afterDate: $afterS, beforeDate: $beforeS, videogameIds: [$videogameId]}}
    ) {
      pageInfo {
        totalPages
      }
      nodes {
        hasOfflineEvents
        slug
        state
      }
    }
  }
"""


def build_tournament_url(slug: str) -> str:
    """Tournament detail expanded with its events and phases."""
    return (
        f"{STARTGG_API_BASE_URL}/tournament/{quote(slug, safe='')}"
        "?expand[]=event&expand[]=phase"
    )


def build_event_url(event_id: int) -> str:
    """Event detail expanded with its phase groups."""
    return f"{STARTGG_API_BASE_URL}/event/{event_id}?expand[]=groups"


def build_phase_group_url(group_id: int) -> str:
    """Phase group detail expanded with sets and entrants."""
    return (
        f"{STARTGG_API_BASE_URL}/phase_group/{group_id}"
        "?expand[]=sets&expand[]=entrants"
    )


def entities(payload: dict | None) -> dict:
    """Return the ``entities`` envelope of a REST payload, or ``{}``."""
    if not isinstance(payload, dict):
        return {}
    ents = payload.get("entities")
    return ents if isinstance(ents, dict) else {}

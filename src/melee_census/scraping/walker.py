"""
Tournament → event → phase group → set traversal.

One tournament is walked strictly sequentially, one request at a time.
Every level is filtered with the predicates in ``melee_census.core.classify``
and the played sets of each group are folded into a tournament ``Stats``
delta. Raw payloads of groups and tournaments that produced at least one
played set are written to disk as snapshots.

Fetch failures are not contained here; the caller decides whether a failing
tournament aborts the month.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable

from melee_census.core.classify import (
    completeness_counts,
    is_eligible_event,
    is_eligible_group,
    is_played_set,
)
from melee_census.core.config import ExclusionPolicy
from melee_census.core.constants import (
    SUSPICIOUS_EVENT_COUNT,
    SUSPICIOUS_GROUP_COUNT,
)
from melee_census.core.stats import Stats
from melee_census.scraping.api import (
    build_event_url,
    build_phase_group_url,
    build_tournament_url,
    entities,
)
from melee_census.scraping.client import FetchClient
from melee_census.scraping.storage import (
    group_snapshot_path,
    tournament_snapshot_path,
    write_snapshot,
)

logger = logging.getLogger(__name__)


def entrant_player_ids(entrants: Iterable[Any]) -> dict[Any, list[int]]:
    """Map entrant id to the ids of its member players.

    Team entrants list several players; all of them are credited with every
    set the entrant plays.
    """
    mapping: dict[Any, list[int]] = {}
    for entrant in entrants:
        if not isinstance(entrant, dict):
            continue
        players = (entrant.get("mutations") or {}).get("players") or {}
        if isinstance(players, dict):
            players = players.values()
        mapping[entrant.get("id")] = [
            player["id"]
            for player in players
            if isinstance(player, dict) and player.get("id") is not None
        ]
    return mapping


class TournamentWalker:
    """Walk tournaments and write snapshots for the ones that count.

    Args:
        client: Client used for every REST request.
        exclusions: Slugs and owner ids that never count.
    """

    def __init__(
        self,
        client: FetchClient,
        exclusions: ExclusionPolicy | None = None,
    ) -> None:
        self.client = client
        self.exclusions = exclusions or ExclusionPolicy()

    def walk(
        self, slug: str, seen_players: set[int], month_path: Path
    ) -> Stats:
        """Return the ``Stats`` delta for one tournament.

        ``seen_players`` is the month-wide de-duplication set and is updated
        in place with every player of every played set.
        """
        if self.exclusions.excludes_slug(slug):
            logger.debug("Skipping excluded slug %s", slug)
            return Stats()

        tournament_response = self.client.get_json(build_tournament_url(slug))
        tournament_entities = entities(tournament_response)
        owner_id = (tournament_entities.get("tournament") or {}).get("ownerId")
        if self.exclusions.excludes_owner(owner_id):
            logger.debug("Skipping %s owned by excluded %s", slug, owner_id)
            return Stats()

        local_players: set[int] = set()
        total = Stats()

        events = tournament_entities.get("event")
        eligible_events = (
            [e for e in events if isinstance(e, dict) and is_eligible_event(e)]
            if isinstance(events, list)
            else []
        )
        if len(eligible_events) > SUSPICIOUS_EVENT_COUNT:
            logger.warning(
                "%s (owner %s) has %d eligible events",
                slug,
                owner_id,
                len(eligible_events),
            )

        for event in eligible_events:
            total = total + self._walk_event(
                slug, owner_id, event, local_players, seen_players, month_path
            )

        if total.sets > 0:
            write_snapshot(
                tournament_snapshot_path(month_path, slug), tournament_response
            )

        result = Stats(
            entrants=len(local_players),
            sets=total.sets,
            with_characters_and_stages=total.with_characters_and_stages,
            with_stock_counts=total.with_stock_counts,
            with_colors=total.with_colors,
        )
        logger.debug("%s: %s", slug, result)
        return result

    def _walk_event(
        self,
        slug: str,
        owner_id: Any,
        event: dict,
        local_players: set[int],
        seen_players: set[int],
        month_path: Path,
    ) -> Stats:
        event_response = self.client.get_json(build_event_url(event["id"]))
        groups = entities(event_response).get("groups")
        if not isinstance(groups, list):
            return Stats()

        eligible_groups = [
            g for g in groups if isinstance(g, dict) and is_eligible_group(g)
        ]
        if len(eligible_groups) > SUSPICIOUS_GROUP_COUNT:
            logger.warning(
                "%s (owner %s) event %s has %d eligible groups",
                slug,
                owner_id,
                event["id"],
                len(eligible_groups),
            )

        total = Stats()
        for group in eligible_groups:
            total = total + self._walk_group(
                slug, group, local_players, seen_players, month_path
            )
        return total

    def _walk_group(
        self,
        slug: str,
        group: dict,
        local_players: set[int],
        seen_players: set[int],
        month_path: Path,
    ) -> Stats:
        group_response = self.client.get_json(build_phase_group_url(group["id"]))
        group_entities = entities(group_response)
        entrants = group_entities.get("entrants")
        sets = group_entities.get("sets")
        if not isinstance(entrants, list) or not isinstance(sets, list):
            return Stats()

        players_by_entrant = entrant_player_ids(entrants)
        played = [s for s in sets if isinstance(s, dict) and is_played_set(s)]
        for match in played:
            for entrant_id in (match["entrant1Id"], match["entrant2Id"]):
                for player_id in players_by_entrant.get(entrant_id, ()):
                    local_players.add(player_id)
                    seen_players.add(player_id)

        counts = completeness_counts(played)
        if counts.sets > 0:
            write_snapshot(
                group_snapshot_path(month_path, slug, group["id"]),
                group_response,
            )
        return counts

"""
Eligibility and completeness predicates over raw start.gg payloads.

Every function here is pure and works on the plain dicts returned by the
upstream API. The completeness tiers are strictly nested:

    has_colors ⇒ has_stock_counts ⇒ has_characters_and_stages ⇒ is_played_set

Each tier calls the previous one, so the nesting holds by construction.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from melee_census.core.constants import (
    ACTIVE_STATES,
    COLOR_STOCK_THRESHOLD,
    MAX_CHARACTER_ID,
    MAX_STAGE_ID,
    MIN_CHARACTER_ID,
    MIN_STAGE_ID,
    STATE_COMPLETED,
    TRACKED_VIDEOGAME_ID,
    UNSET_SCORE,
)
from melee_census.core.stats import Stats

STOCK_FIELDS: tuple[str, str] = ("entrant1P1Stocks", "entrant2P1Stocks")


def _is_int(value: Any) -> bool:
    # bool is an int subclass; the upstream never means True as an id
    return isinstance(value, int) and not isinstance(value, bool)


def _in_range(value: Any, low: int, high: int) -> bool:
    return _is_int(value) and low <= value <= high


def is_eligible_tournament_node(node: Mapping[str, Any]) -> bool:
    """Listing filter: offline tournaments that are running or finished."""
    return bool(node.get("hasOfflineEvents")) and node.get("state") in ACTIVE_STATES


def is_eligible_event(event: Mapping[str, Any]) -> bool:
    return (
        _is_int(event.get("id"))
        and event.get("videogameId") == TRACKED_VIDEOGAME_ID
        and event.get("state") in ACTIVE_STATES
        and not event.get("isOnline")
    )


def is_eligible_group(group: Mapping[str, Any]) -> bool:
    return _is_int(group.get("id")) and group.get("state") in ACTIVE_STATES


def is_played_set(match: Mapping[str, Any]) -> bool:
    """A completed, fully scored, reachable set between two entrants."""
    return (
        match.get("state") == STATE_COMPLETED
        and _is_int(match.get("entrant1Id"))
        and _is_int(match.get("entrant2Id"))
        and match.get("entrant1Score") != UNSET_SCORE
        and match.get("entrant2Score") != UNSET_SCORE
        and not match.get("unreachable")
    )


def _valid_characters(character_ids: Any) -> bool:
    return (
        isinstance(character_ids, list)
        and len(character_ids) > 0
        and all(
            _in_range(c, MIN_CHARACTER_ID, MAX_CHARACTER_ID)
            for c in character_ids
        )
    )


def _games(match: Mapping[str, Any]) -> list:
    games = match.get("games")
    return games if isinstance(games, list) else []


def has_characters_and_stages(match: Mapping[str, Any]) -> bool:
    """Both sides report valid characters and every game a valid stage."""
    if not is_played_set(match):
        return False
    if not (
        _valid_characters(match.get("entrant1CharacterIds"))
        and _valid_characters(match.get("entrant2CharacterIds"))
    ):
        return False
    games = _games(match)
    return len(games) > 0 and all(
        isinstance(game, Mapping)
        and _in_range(game.get("stageId"), MIN_STAGE_ID, MAX_STAGE_ID)
        for game in games
    )


def has_stock_counts(match: Mapping[str, Any]) -> bool:
    """Every game reports stocks for at least one side (inclusive OR)."""
    if not has_characters_and_stages(match):
        return False
    return all(
        any(game.get(name) for name in STOCK_FIELDS) for game in _games(match)
    )


def has_colors(match: Mapping[str, Any]) -> bool:
    """Every game carries the color offset on both sides."""
    if not has_stock_counts(match):
        return False
    for game in _games(match):
        for name in STOCK_FIELDS:
            stocks = game.get(name)
            if not stocks or not isinstance(stocks, (int, float)):
                return False
            if stocks < COLOR_STOCK_THRESHOLD:
                return False
    return True


def completeness_counts(sets: Iterable[Mapping[str, Any]]) -> Stats:
    """Count played sets and their completeness tiers.

    ``entrants`` is left at zero; player counting belongs to the walker.
    """
    played = with_chars = with_stocks = with_colors = 0
    for match in sets:
        if not is_played_set(match):
            continue
        played += 1
        if not has_characters_and_stages(match):
            continue
        with_chars += 1
        if not has_stock_counts(match):
            continue
        with_stocks += 1
        if has_colors(match):
            with_colors += 1
    return Stats(
        sets=played,
        with_characters_and_stages=with_chars,
        with_stock_counts=with_stocks,
        with_colors=with_colors,
    )


__all__ = [
    "is_eligible_tournament_node",
    "is_eligible_event",
    "is_eligible_group",
    "is_played_set",
    "has_characters_and_stages",
    "has_stock_counts",
    "has_colors",
    "completeness_counts",
]

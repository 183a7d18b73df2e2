"""
Monthly tournament discovery through the paginated GraphQL search.

Pages are fetched one at a time with a flat pause between requests to stay
under the upstream rate limit.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from melee_census.core.classify import is_eligible_tournament_node
from melee_census.core.constants import (
    DEFAULT_PAGE_DELAY_SECONDS,
    DEFAULT_PAGE_SIZE,
    TOURNAMENT_SLUG_PREFIX_LENGTH,
    TRACKED_VIDEOGAME_ID,
)
from melee_census.scraping.api import TOURNAMENTS_QUERY
from melee_census.scraping.client import FetchClient

logger = logging.getLogger(__name__)


def canonical_slug(raw_slug: str) -> str:
    """Strip the fixed ``tournament/`` prefix from an upstream slug."""
    return raw_slug[TOURNAMENT_SLUG_PREFIX_LENGTH:]


def _page_slugs(tournaments: dict) -> list[str]:
    nodes = tournaments.get("nodes")
    if not isinstance(nodes, list):
        return []
    return [
        canonical_slug(node["slug"])
        for node in nodes
        if isinstance(node, dict)
        and isinstance(node.get("slug"), str)
        and is_eligible_tournament_node(node)
    ]


def _total_pages(tournaments: dict) -> int:
    page_info = tournaments.get("pageInfo") or {}
    total = page_info.get("totalPages")
    return total if isinstance(total, int) else 0


def list_tournament_slugs(
    client: FetchClient,
    after_s: int,
    before_s: int,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    page_delay: float = DEFAULT_PAGE_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> list[str]:
    """
    List eligible tournament slugs starting in ``[after_s, before_s)``.

    Parameters
    ----------
    client : FetchClient
        Client used for the GraphQL requests
    after_s, before_s : int
        UTC epoch seconds bounding the window
    page_size : int, optional
        Nodes per page
    page_delay : float, optional
        Seconds to wait between page requests
    sleep : callable, optional
        Sleep function, replaceable in tests

    Returns
    -------
    list of str
        Canonical slugs of offline, in-progress or completed tournaments,
        in page order
    """
    slugs: list[str] = []
    page = 1
    while True:
        data = client.graphql(
            TOURNAMENTS_QUERY,
            {
                "afterS": after_s,
                "beforeS": before_s,
                "pageNum": page,
                "perPage": page_size,
                "videogameId": TRACKED_VIDEOGAME_ID,
            },
        )
        tournaments = (data or {}).get("tournaments") or {}
        page_slugs = _page_slugs(tournaments)
        slugs.extend(page_slugs)
        total_pages = _total_pages(tournaments)
        logger.debug(
            "Page %d/%d: %d eligible tournaments",
            page,
            total_pages,
            len(page_slugs),
        )
        if page >= total_pages:
            break
        sleep(page_delay)
        page += 1

    logger.info(
        "Found %d eligible tournaments between %d and %d",
        len(slugs),
        after_s,
        before_s,
    )
    return slugs

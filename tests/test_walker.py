import json
import logging
from pathlib import Path

import pytest

from melee_census.core.config import ExclusionPolicy
from melee_census.core.errors import PermanentUpstreamError
from melee_census.core.stats import Stats
from melee_census.scraping.api import (
    build_event_url,
    build_phase_group_url,
    build_tournament_url,
)
from melee_census.scraping.walker import TournamentWalker, entrant_player_ids


class _FakeClient:
    def __init__(self, payloads):
        self.payloads = payloads
        self.urls = []

    def get_json(self, url):
        self.urls.append(url)
        payload = self.payloads[url]
        if isinstance(payload, Exception):
            raise payload
        return payload


def _tournament(slug="local-1", owner_id=55, events=None):
    return {
        "entities": {
            "tournament": {"slug": f"tournament/{slug}", "ownerId": owner_id},
            "event": events
            if events is not None
            else [
                {"id": 100, "videogameId": 1, "state": 3, "isOnline": False},
                {"id": 101, "videogameId": 1386, "state": 3, "isOnline": False},
                {"id": 102, "videogameId": 1, "state": 3, "isOnline": True},
            ],
        }
    }


def _event(groups):
    return {"entities": {"groups": groups}}


def _group(sets, entrants):
    return {"entities": {"sets": sets, "entrants": entrants}}


def _entrant(entrant_id, *player_ids):
    return {
        "id": entrant_id,
        "mutations": {"players": {str(p): {"id": p} for p in player_ids}},
    }


def _played_set(**overrides):
    base = {
        "state": 3,
        "entrant1Id": 1,
        "entrant2Id": 2,
        "entrant1Score": 2,
        "entrant2Score": 0,
        "unreachable": False,
        "entrant1CharacterIds": [2],
        "entrant2CharacterIds": [9],
        "games": [{"stageId": 3}, {"stageId": 24}],
    }
    base.update(overrides)
    return base


def _single_group_payloads(slug="local-1", sets=None, entrants=None):
    sets = sets if sets is not None else [_played_set()]
    entrants = (
        entrants
        if entrants is not None
        else [_entrant(1, 501), _entrant(2, 502, 503)]
    )
    return {
        build_tournament_url(slug): _tournament(slug),
        build_event_url(100): _event(
            [{"id": 900, "state": 3}, {"id": 901, "state": 1}]
        ),
        build_phase_group_url(900): _group(sets, entrants),
    }


def test_entrant_player_ids_handles_teams():
    mapping = entrant_player_ids(
        [_entrant(1, 10), _entrant(2, 20, 21), {"id": 3, "mutations": {}}]
    )
    assert mapping == {1: [10], 2: [20, 21], 3: []}


def test_single_eligible_set_with_characters_but_no_stocks(tmp_path: Path):
    client = _FakeClient(_single_group_payloads())
    walker = TournamentWalker(client)
    seen: set[int] = set()

    delta = walker.walk("local-1", seen, tmp_path)

    assert delta == Stats(
        entrants=3,
        sets=1,
        with_characters_and_stages=1,
        with_stock_counts=0,
        with_colors=0,
    )
    assert seen == {501, 502, 503}
    # ineligible events and groups are never fetched
    assert client.urls == [
        build_tournament_url("local-1"),
        build_event_url(100),
        build_phase_group_url(900),
    ]
    group_file = tmp_path / "local-1" / "900.json"
    tournament_file = tmp_path / "local-1" / "local-1.json"
    assert json.loads(group_file.read_text())["entities"]["sets"][0]["entrant1Id"] == 1
    assert json.loads(tournament_file.read_text())["entities"]["tournament"]["ownerId"] == 55


def test_excluded_slug_makes_no_request(tmp_path: Path):
    client = _FakeClient({})
    walker = TournamentWalker(
        client, exclusions=ExclusionPolicy(slugs=frozenset({"banned"}))
    )
    assert walker.walk("banned", set(), tmp_path) == Stats()
    assert client.urls == []
    assert list(tmp_path.iterdir()) == []


def test_excluded_owner_stops_after_tournament_request(tmp_path: Path):
    payloads = _single_group_payloads()
    payloads[build_tournament_url("local-1")] = _tournament(owner_id=906371)
    client = _FakeClient(payloads)
    seen: set[int] = set()
    assert TournamentWalker(client).walk("local-1", seen, tmp_path) == Stats()
    assert client.urls == [build_tournament_url("local-1")]
    assert seen == set()


def test_no_played_sets_writes_nothing(tmp_path: Path):
    payloads = _single_group_payloads(sets=[_played_set(state=2), _played_set(entrant2Score=-1)])
    client = _FakeClient(payloads)
    seen: set[int] = set()
    delta = TournamentWalker(client).walk("local-1", seen, tmp_path)
    assert delta == Stats()
    assert seen == set()
    assert not (tmp_path / "local-1").exists()


def test_group_missing_entrants_contributes_nothing(tmp_path: Path):
    payloads = _single_group_payloads()
    payloads[build_phase_group_url(900)] = {"entities": {"sets": [_played_set()]}}
    delta = TournamentWalker(_FakeClient(payloads)).walk("local-1", set(), tmp_path)
    assert delta == Stats()


def test_players_deduplicated_across_tournaments(tmp_path: Path):
    payloads = _single_group_payloads("first")
    second = _single_group_payloads("second")
    second[build_tournament_url("second")] = _tournament(
        "second",
        events=[{"id": 200, "videogameId": 1, "state": 2, "isOnline": False}],
    )
    second[build_event_url(200)] = _event([{"id": 950, "state": 3}])
    second[build_phase_group_url(950)] = _group(
        [_played_set(entrant1Id=7, entrant2Id=2)],
        [_entrant(7, 777), _entrant(2, 502, 503)],
    )
    payloads.update(second)
    walker = TournamentWalker(_FakeClient(payloads))
    seen: set[int] = set()

    first_delta = walker.walk("first", seen, tmp_path)
    second_delta = walker.walk("second", seen, tmp_path)

    assert first_delta.entrants == 3
    assert second_delta.entrants == 3
    assert seen == {501, 502, 503, 777}


def test_multiple_groups_accumulate(tmp_path: Path):
    payloads = _single_group_payloads()
    payloads[build_event_url(100)] = _event(
        [{"id": 900, "state": 3}, {"id": 902, "state": 2}]
    )
    stock_games = [
        {"stageId": 2, "entrant1P1Stocks": 101, "entrant2P1Stocks": 103},
    ]
    payloads[build_phase_group_url(902)] = _group(
        [_played_set(games=stock_games), _played_set(entrant1CharacterIds=[])],
        [_entrant(1, 501), _entrant(2, 502, 503)],
    )
    delta = TournamentWalker(_FakeClient(payloads)).walk("local-1", set(), tmp_path)
    assert delta == Stats(
        entrants=3,
        sets=3,
        with_characters_and_stages=2,
        with_stock_counts=1,
        with_colors=1,
    )
    assert (tmp_path / "local-1" / "902.json").exists()


def test_fetch_failure_propagates(tmp_path: Path):
    payloads = _single_group_payloads()
    payloads[build_phase_group_url(900)] = PermanentUpstreamError(
        "Forbidden", status_code=403
    )
    with pytest.raises(PermanentUpstreamError):
        TournamentWalker(_FakeClient(payloads)).walk("local-1", set(), tmp_path)


def test_warns_on_suspicious_event_count(tmp_path: Path, caplog):
    caplog.set_level(logging.WARNING, logger="melee_census.scraping.walker")
    events = [
        {"id": i, "videogameId": 1, "state": 3, "isOnline": False}
        for i in range(11)
    ]
    payloads = {build_tournament_url("league"): _tournament("league", events=events)}
    for i in range(11):
        payloads[build_event_url(i)] = _event([])
    TournamentWalker(_FakeClient(payloads)).walk("league", set(), tmp_path)
    assert any("11 eligible events" in m for m in caplog.messages)


def test_warns_on_suspicious_group_count(tmp_path: Path, caplog):
    caplog.set_level(logging.WARNING, logger="melee_census.scraping.walker")
    groups = [{"id": 1000 + i, "state": 3} for i in range(201)]
    payloads = {
        build_tournament_url("circuit"): _tournament(
            "circuit",
            events=[{"id": 300, "videogameId": 1, "state": 3, "isOnline": False}],
        ),
        build_event_url(300): _event(groups),
    }
    for group in groups:
        payloads[build_phase_group_url(group["id"])] = _group([], [])
    TournamentWalker(_FakeClient(payloads)).walk("circuit", set(), tmp_path)
    assert any("201 eligible groups" in m for m in caplog.messages)

"""Tests for round-robin and elimination schedules."""

from __future__ import annotations

from collections import Counter
from itertools import combinations
import random

import pytest

from clubladder.domain import ValidationError
from clubladder.domain.scheduling import (
    MatchFormat,
    ScheduledMatch,
    generate_elimination_matches,
    generate_round_robin_matches,
)
from clubladder.domain.scheduling.common import pair_key
from clubladder.domain.scheduling.round_robin import (
    circle_rounds,
    generate_balanced_doubles_rounds,
    generate_partner_rotation,
)


def _players(count: int) -> list[str]:
    return [f"p{index}" for index in range(1, count + 1)]


def _assert_no_player_twice_per_round(matches: list[ScheduledMatch]) -> None:
    by_round: dict[int, list[str]] = {}
    for match in matches:
        by_round.setdefault(match.round, []).extend(match.player_ids)
    for round_number, player_ids in by_round.items():
        assert len(player_ids) == len(set(player_ids)), f"round {round_number} reuses a player"


def test_circle_rounds_even_count_covers_every_pair_once() -> None:
    players = _players(6)
    rounds = circle_rounds(players)

    assert len(rounds) == 5
    assert all(len(pairs) == 3 for pairs in rounds)
    seen = Counter(pair_key(first, second) for pairs in rounds for first, second in pairs)
    assert set(seen) == {pair_key(first, second) for first, second in combinations(players, 2)}
    assert set(seen.values()) == {1}


def test_circle_rounds_odd_count_rests_each_player_once() -> None:
    players = _players(5)
    rounds = circle_rounds(players)

    assert len(rounds) == 5
    assert sum(len(pairs) for pairs in rounds) == 10
    resting = Counter()
    for pairs in rounds:
        playing = {player_id for pair in pairs for player_id in pair}
        resting.update(set(players) - playing)
    assert resting == Counter({player_id: 1 for player_id in players})


def test_circle_rounds_needs_two_players() -> None:
    assert circle_rounds(["solo"]) == []
    assert circle_rounds(["a", "b"]) == [[("a", "b")]]


def test_singles_round_robin_is_complete_and_numbered() -> None:
    matches = generate_round_robin_matches(_players(4), MatchFormat.SINGLES, rng=random.Random(7))

    assert len(matches) == 6
    assert [match.match_number for match in matches] == [1, 2, 3, 4, 5, 6]
    assert {match.round for match in matches} == {1, 2, 3}
    pairs = {pair_key(match.player1_id, match.player2_id) for match in matches}
    assert len(pairs) == 6
    _assert_no_player_twice_per_round(matches)


def test_singles_round_robin_is_reproducible_with_seeded_rng() -> None:
    first = generate_round_robin_matches(_players(7), "singles", rng=random.Random(42))
    second = generate_round_robin_matches(_players(7), "singles", rng=random.Random(42))

    assert first == second
    assert len(first) == 21


def test_partner_rotation_four_players_uses_every_partnership() -> None:
    matches = generate_partner_rotation(_players(4), random.Random(3))

    assert len(matches) == 3
    assert [match.round for match in matches] == [1, 2, 3]
    partnerships = {pair_key(*match.team1_player_ids) for match in matches} | {
        pair_key(*match.team2_player_ids) for match in matches
    }
    assert len(partnerships) == 6
    games = Counter(player_id for match in matches for player_id in match.player_ids)
    assert set(games.values()) == {3}


def test_partner_rotation_never_repeats_a_partnership() -> None:
    players = _players(8)
    matches = generate_round_robin_matches(players, MatchFormat.DOUBLES, rng=random.Random(11))

    assert 0 < len(matches) <= 14
    partnerships = [pair_key(*team) for match in matches for team in (match.team1_player_ids, match.team2_player_ids)]
    assert len(partnerships) == len(set(partnerships))
    games = Counter(player_id for match in matches for player_id in match.player_ids)
    assert max(games.values()) <= 7
    for match in matches:
        assert not set(match.team1_player_ids) & set(match.team2_player_ids)
    assert [match.match_number for match in matches] == list(range(1, len(matches) + 1))
    assert max(match.round for match in matches) == (len(matches) + 1) // 2


def test_balanced_doubles_rounds_fill_every_court() -> None:
    matches = generate_round_robin_matches(
        _players(8),
        MatchFormat.DOUBLES,
        rng=random.Random(5),
        max_rounds=3,
        courts_available=2,
    )

    assert len(matches) == 6
    assert Counter(match.round for match in matches) == Counter({1: 2, 2: 2, 3: 2})
    _assert_no_player_twice_per_round(matches)
    games = Counter(player_id for match in matches for player_id in match.player_ids)
    assert set(games.values()) == {3}


def test_balanced_doubles_rounds_rotate_in_rested_players() -> None:
    matches = generate_balanced_doubles_rounds(_players(8), 2, 1, random.Random(9))

    assert len(matches) == 2
    assert set(matches[0].player_ids).isdisjoint(matches[1].player_ids)


def test_singles_elimination_pairs_every_player_once() -> None:
    players = _players(6)
    matches = generate_elimination_matches(players, MatchFormat.SINGLES, rng=random.Random(1))

    assert len(matches) == 3
    assert all(match.round == 1 for match in matches)
    assert sorted(player_id for match in matches for player_id in match.player_ids) == sorted(players)


def test_doubles_elimination_builds_fixed_teams() -> None:
    players = _players(8)
    matches = generate_elimination_matches(
        players,
        MatchFormat.DOUBLES,
        rng=random.Random(2),
        double_elimination=True,
    )

    assert len(matches) == 2
    assert all(len(team) == 2 for match in matches for team in (match.team1_player_ids, match.team2_player_ids))
    assert sorted(player_id for match in matches for player_id in match.player_ids) == sorted(players)


def test_round_robin_rejects_duplicate_players() -> None:
    with pytest.raises(ValidationError, match=r"player ids must be unique"):
        generate_round_robin_matches(["a", "a", "b", "c"], MatchFormat.SINGLES, rng=random.Random(1))
    with pytest.raises(ValidationError, match=r"doubles needs an even number of players"):
        generate_round_robin_matches(_players(5), MatchFormat.DOUBLES, max_rounds=2)


def test_elimination_rejects_fields_that_would_drop_entrants() -> None:
    with pytest.raises(ValidationError, match=r"singles elimination needs an even number of players"):
        generate_elimination_matches(list("abcde"), MatchFormat.SINGLES)
    with pytest.raises(ValidationError, match=r"doubles elimination needs a multiple of 4 players") as excinfo:
        generate_elimination_matches(_players(6), MatchFormat.DOUBLES, double_elimination=True)
    assert excinfo.value.errors == ("doubles elimination needs a multiple of 4 players",)

"""Tests for schedule validation, dispatch and summaries."""

from __future__ import annotations

import random

import pytest

from clubladder.domain import Invalid, Valid, ValidationError
from clubladder.domain.scheduling import (
    MatchFormat,
    ScheduleConfig,
    TournamentType,
    estimate_duration_minutes,
    generate_matches,
    summarize_schedule,
    validate_schedule_config,
)


def _players(count: int) -> tuple[str, ...]:
    return tuple(f"p{index}" for index in range(count))


def _errors(config: ScheduleConfig) -> tuple[str, ...]:
    result = validate_schedule_config(config)
    assert isinstance(result, Invalid)
    return result.errors


def test_valid_config_is_normalized() -> None:
    result = validate_schedule_config(ScheduleConfig(player_ids=list(_players(4)), match_format="doubles"))

    assert isinstance(result, Valid)
    assert result.value.match_format is MatchFormat.DOUBLES
    assert result.value.tournament_type is TournamentType.ROUND_ROBIN
    assert result.value.player_ids == _players(4)


@pytest.mark.parametrize(
    ("config", "message"),
    [
        (ScheduleConfig(player_ids=_players(1), match_format="singles"), "singles needs at least 2 players"),
        (ScheduleConfig(player_ids=_players(2), match_format="doubles"), "doubles needs at least 4 players"),
        (ScheduleConfig(player_ids=_players(5), match_format="doubles"), "doubles needs an even number of players"),
        (
            ScheduleConfig(player_ids=_players(5), match_format="singles", tournament_type="single_elimination"),
            "singles elimination needs an even number of players",
        ),
        (
            ScheduleConfig(player_ids=_players(6), match_format="doubles", tournament_type="double_elimination"),
            "doubles elimination needs a multiple of 4 players",
        ),
        (
            ScheduleConfig(player_ids=_players(6), match_format="doubles", tournament_type="box_rotation"),
            "box rotation needs a multiple of 4 players",
        ),
        (
            ScheduleConfig(player_ids=_players(4), match_format="singles", tournament_type="box_rotation"),
            "box rotation is played as doubles",
        ),
        (ScheduleConfig(player_ids=("a", "a"), match_format="singles"), "player ids must be unique"),
        (ScheduleConfig(player_ids=_players(4), match_format="doubles", max_rounds=0), "max_rounds must be between 1 and 50"),
        (ScheduleConfig(player_ids=_players(4), match_format="doubles", max_rounds=51), "max_rounds must be between 1 and 50"),
        (ScheduleConfig(player_ids=_players(4), match_format="singles", max_rounds=3), "max_rounds only applies to doubles round robin"),
        (ScheduleConfig(player_ids=_players(4), match_format="singles", courts_available=5), "courts_available must be between 1 and 4"),
        (ScheduleConfig(player_ids=_players(4), match_format="triples"), "match_format must be one of"),
    ],
)
def test_invalid_configs_are_rejected(config: ScheduleConfig, message: str) -> None:
    assert any(error.startswith(message) for error in _errors(config))


def test_generate_matches_raises_validation_error() -> None:
    with pytest.raises(ValidationError, match=r"doubles needs an even number of players"):
        generate_matches(ScheduleConfig(player_ids=_players(7), match_format="doubles"))


def test_generate_matches_dispatches_by_tournament_type() -> None:
    rng = random.Random(12)

    round_robin = generate_matches(ScheduleConfig(player_ids=_players(5), match_format="singles"), rng=rng)
    assert len(round_robin) == 10

    elimination = generate_matches(
        ScheduleConfig(player_ids=_players(8), match_format="singles", tournament_type="single_elimination"),
        rng=rng,
    )
    assert len(elimination) == 4
    assert {match.round for match in elimination} == {1}

    balanced = generate_matches(
        ScheduleConfig(player_ids=_players(8), match_format="doubles", max_rounds=4, courts_available=1),
        rng=rng,
    )
    assert len(balanced) == 4
    assert [match.round for match in balanced] == [1, 2, 3, 4]


def test_box_rotation_seeds_by_rating_then_by_order() -> None:
    players = _players(8)
    config = ScheduleConfig(player_ids=players, match_format="doubles", tournament_type="box_rotation")

    by_rating = generate_matches(config, ratings={player_id: float(index) for index, player_id in enumerate(players)})
    assert len(by_rating) == 6
    assert by_rating[0].team1_player_ids == ("p7", "p6")
    assert by_rating[0].team2_player_ids == ("p5", "p4")

    by_order = generate_matches(config)
    assert by_order[0].team1_player_ids == ("p0", "p1")
    assert by_order[0].team2_player_ids == ("p2", "p3")
    assert [match.match_number for match in by_order] == [1, 2, 3, 4, 5, 6]


def test_summarize_schedule_counts_games_and_pairings() -> None:
    matches = generate_matches(ScheduleConfig(player_ids=_players(4), match_format="singles"), rng=random.Random(3))
    summary = summarize_schedule(matches)

    assert summary.match_count == 6
    assert summary.round_count == 3
    assert summary.games_per_player == {player_id: 3 for player_id in _players(4)}
    assert set(summary.oppositions.values()) == {1}
    assert summary.partnerships == {}


def test_estimate_duration_minutes() -> None:
    assert estimate_duration_minutes(ScheduleConfig(player_ids=_players(4), match_format="singles")) == 54
    assert (
        estimate_duration_minutes(
            ScheduleConfig(player_ids=_players(8), match_format="singles", tournament_type="single_elimination")
        )
        == 70
    )
    assert (
        estimate_duration_minutes(
            ScheduleConfig(player_ids=_players(8), match_format="doubles", max_rounds=3, courts_available=2)
        )
        == 54
    )
    assert estimate_duration_minutes(ScheduleConfig(player_ids=_players(8), match_format="doubles")) == 252
    assert estimate_duration_minutes(ScheduleConfig(player_ids=_players(8), match_format="singles")) == 252

"""Unit tests for the player rating engine."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from clubladder.domain.ratings import (
    DEFAULT_PARAMETERS,
    LEGACY_PARAMETERS,
    FormulaVersion,
    GameResult,
    GameType,
    PlayerRatingCalculator,
    PlayerRecord,
    RatingParameters,
    calculate_expected_score,
    calculate_margin_multiplier,
    calculate_performance_multiplier,
    calculate_team_rating,
    calculate_underdog_multiplier,
    compute_rating_update,
    parameters_for_version,
)


def _game(
    game_id: str,
    team1: tuple[str, ...],
    team2: tuple[str, ...],
    team1_score: int,
    team2_score: int,
    *,
    offset_minutes: int = 0,
) -> GameResult:
    return GameResult(
        game_id=game_id,
        played_at=datetime(2026, 1, 1, 12, 0, 0) + timedelta(minutes=offset_minutes),
        game_type=GameType.SINGLES if len(team1) == 1 else GameType.DOUBLES,
        team1_player_ids=team1,
        team2_player_ids=team2,
        team1_score=team1_score,
        team2_score=team2_score,
    )


def test_rating_parameters_defaults_are_expected_constants() -> None:
    params = RatingParameters()
    assert params.default_rating == pytest.approx(3.5)
    assert params.min_rating == pytest.approx(2.0)
    assert params.max_rating == pytest.approx(8.0)
    assert params.k_factor == pytest.approx(0.08)
    assert params.scale_factor == pytest.approx(2.0)
    assert params.performance_coefficient == pytest.approx(0.25)
    assert params.performance_min == pytest.approx(0.6)
    assert params.performance_max == pytest.approx(1.4)
    assert params.formula_version is FormulaVersion.V2


def test_legacy_preset_only_changes_performance_weighting() -> None:
    assert LEGACY_PARAMETERS.formula_version is FormulaVersion.V1
    assert LEGACY_PARAMETERS.performance_coefficient == pytest.approx(0.15)
    assert LEGACY_PARAMETERS.performance_min == pytest.approx(0.7)
    assert LEGACY_PARAMETERS.performance_max == pytest.approx(1.3)
    assert LEGACY_PARAMETERS.k_factor == DEFAULT_PARAMETERS.k_factor
    assert parameters_for_version("v1") is LEGACY_PARAMETERS
    assert parameters_for_version(FormulaVersion.V2) is DEFAULT_PARAMETERS


def test_team_rating_is_mean_and_rejects_empty_team() -> None:
    assert calculate_team_rating({"a": 4.0, "b": 3.0}) == pytest.approx(3.5)
    assert calculate_team_rating([5.0]) == pytest.approx(5.0)
    with pytest.raises(ValueError):
        calculate_team_rating({})


def test_expected_score_equal_ratings_is_half() -> None:
    assert calculate_expected_score(3.5, 3.5, 2.0) == pytest.approx(0.5)


def test_expected_score_one_point_favourite() -> None:
    assert calculate_expected_score(4.5, 3.5, 2.0) == pytest.approx(0.759747, abs=1e-6)


def test_expected_scores_sum_to_one() -> None:
    expected_a = calculate_expected_score(5.2, 3.1, 2.0)
    expected_b = calculate_expected_score(3.1, 5.2, 2.0)
    assert expected_a + expected_b == pytest.approx(1.0)


def test_margin_multiplier_bounds_and_monotonic() -> None:
    assert calculate_margin_multiplier(11, 10) == pytest.approx(0.7)
    assert calculate_margin_multiplier(11, 5) == pytest.approx(1.075)
    assert calculate_margin_multiplier(50, 0) == pytest.approx(1.5)

    previous = 0.0
    for difference in range(1, 51):
        multiplier = calculate_margin_multiplier(difference, 0)
        assert 0.5 <= multiplier <= 1.5
        assert multiplier >= previous
        previous = multiplier


def test_performance_multiplier_is_neutral_for_singles() -> None:
    assert calculate_performance_multiplier(6.0, 3.0, GameType.SINGLES, True) == pytest.approx(1.0)


def test_performance_multiplier_doubles_direction_and_clamps() -> None:
    assert calculate_performance_multiplier(3.0, 3.5, GameType.DOUBLES, True) == pytest.approx(1.125)
    assert calculate_performance_multiplier(4.0, 3.5, GameType.DOUBLES, False) == pytest.approx(1.125)
    assert calculate_performance_multiplier(5.5, 3.5, GameType.DOUBLES, True) == pytest.approx(0.6)
    assert calculate_performance_multiplier(5.5, 3.5, GameType.DOUBLES, False) == pytest.approx(1.4)


def test_underdog_multiplier_rewards_winning_underdog() -> None:
    multiplier = calculate_underdog_multiplier(2.5, 3.0, 4.0, True)
    assert multiplier == pytest.approx(1.1 * 1.15)


def test_underdog_multiplier_clamps_losing_favourite() -> None:
    assert calculate_underdog_multiplier(5.5, 4.5, 3.5, False) == pytest.approx(1.6)


def test_underdog_multiplier_clamps_winning_favourite() -> None:
    assert calculate_underdog_multiplier(6.0, 6.0, 3.0, True) == pytest.approx(0.7)


def test_underdog_multiplier_is_neutral_under_legacy_formula() -> None:
    assert calculate_underdog_multiplier(2.5, 3.0, 4.0, True, LEGACY_PARAMETERS) == pytest.approx(1.0)


def test_singles_baseline_game_is_zero_sum() -> None:
    update = compute_rating_update({"a": 3.5}, {"b": 3.5}, 11, 5, GameType.SINGLES)
    winner, loser = update.changes
    assert update.team1_expected_score + update.team2_expected_score == pytest.approx(1.0)
    assert winner.rating_delta == pytest.approx(0.086)
    assert loser.rating_delta == pytest.approx(-0.086)
    assert winner.won and not loser.won
    assert update.new_ratings == {"a": pytest.approx(3.586), "b": pytest.approx(3.414)}


def test_singles_above_baseline_is_asymmetric_under_current_formula() -> None:
    update = compute_rating_update({"a": 4.0}, {"b": 4.0}, 11, 5, GameType.SINGLES)
    winner, loser = update.changes
    assert winner.underdog_multiplier == pytest.approx(0.925)
    assert loser.underdog_multiplier == pytest.approx(1.225)
    assert winner.rating_delta == pytest.approx(0.086 * 0.925)
    assert loser.rating_delta == pytest.approx(-0.086 * 1.225)


def test_legacy_singles_game_is_zero_sum_at_any_rating() -> None:
    update = compute_rating_update({"a": 5.1}, {"b": 3.2}, 7, 11, GameType.SINGLES, LEGACY_PARAMETERS)
    first, second = update.changes
    assert first.rating_delta + second.rating_delta == pytest.approx(0.0)
    assert second.won


def test_doubles_update_uses_own_team_reference() -> None:
    update = compute_rating_update(
        {"a": 4.0, "b": 3.0},
        {"c": 3.5, "d": 3.5},
        11,
        9,
        GameType.DOUBLES,
    )
    changes = {change.player_id: change for change in update.changes}

    assert changes["a"].margin_multiplier == pytest.approx(0.775)
    assert changes["a"].performance_multiplier == pytest.approx(0.875)
    assert changes["a"].underdog_multiplier == pytest.approx(0.925)
    assert changes["a"].rating_delta == pytest.approx(0.062 * 0.875 * 0.925)
    assert changes["b"].performance_multiplier == pytest.approx(1.125)
    assert changes["b"].rating_delta == pytest.approx(0.062 * 1.125 * 1.075)
    assert changes["c"].rating_delta == pytest.approx(-0.062)
    assert changes["d"].rating_delta == pytest.approx(-0.062)
    assert [change.team_number for change in update.changes] == [1, 1, 2, 2]


def test_legacy_doubles_performance_uses_opposing_team() -> None:
    team1 = {"a": 4.0, "b": 4.0}
    team2 = {"c": 3.0, "d": 3.0}
    legacy = compute_rating_update(team1, team2, 11, 4, GameType.DOUBLES, LEGACY_PARAMETERS)
    current = compute_rating_update(team1, team2, 11, 4, GameType.DOUBLES)

    assert legacy.changes[0].performance_multiplier == pytest.approx(0.85)
    assert current.changes[0].performance_multiplier == pytest.approx(1.0)


def test_draw_splits_actual_score_and_neutralises_multipliers() -> None:
    update = compute_rating_update({"a": 3.5}, {"b": 4.0}, 10, 10, GameType.SINGLES)
    first, second = update.changes
    expected = calculate_expected_score(3.5, 4.0, 2.0)

    assert first.actual_score == pytest.approx(0.5)
    assert second.actual_score == pytest.approx(0.5)
    assert first.drawn and second.drawn
    assert not first.won and not second.won
    for change in update.changes:
        assert change.margin_multiplier == pytest.approx(1.0)
        assert change.performance_multiplier == pytest.approx(1.0)
        assert change.underdog_multiplier == pytest.approx(1.0)
    assert first.rating_delta == pytest.approx(0.08 * (0.5 - expected) * 2.0)
    assert first.rating_delta > 0.0 > second.rating_delta
    assert update.outcomes["a"].draw == 1
    assert update.outcomes["a"].win == 0
    assert update.outcomes["a"].loss == 0


def test_post_ratings_are_clamped_to_bounds() -> None:
    update = compute_rating_update({"top": 8.0}, {"bottom": 2.0}, 50, 0, GameType.SINGLES)
    top, bottom = update.changes
    assert top.post_rating == pytest.approx(8.0)
    assert bottom.post_rating == pytest.approx(2.0)
    assert top.rating_delta == pytest.approx(0.0)

    upset = compute_rating_update({"top": 7.99}, {"bottom": 2.01}, 0, 50, GameType.SINGLES)
    for change in upset.changes:
        assert 2.0 <= change.post_rating <= 8.0


def test_compute_rating_update_is_deterministic() -> None:
    first = compute_rating_update({"a": 4.2, "b": 3.1}, {"c": 3.9, "d": 2.8}, 11, 8, "doubles")
    second = compute_rating_update({"a": 4.2, "b": 3.1}, {"c": 3.9, "d": 2.8}, 11, 8, "doubles")
    assert first == second


def test_compute_rating_update_rejects_malformed_teams() -> None:
    with pytest.raises(ValueError):
        compute_rating_update({}, {"b": 3.5}, 11, 5, GameType.SINGLES)
    with pytest.raises(ValueError):
        compute_rating_update({"a": 3.5, "c": 3.5}, {"b": 3.5}, 11, 5, GameType.DOUBLES)
    with pytest.raises(ValueError):
        compute_rating_update({"a": 3.5}, {"a": 3.5}, 11, 5, GameType.SINGLES)
    with pytest.raises(ValueError):
        compute_rating_update({"a": 3.5}, {"b": 3.5}, 11, 5, "triples")


def test_reversed_result_roughly_undoes_legacy_change() -> None:
    calculator = PlayerRatingCalculator(
        LEGACY_PARAMETERS,
        initial_records={"a": PlayerRecord(rating=4.0), "b": PlayerRecord(rating=4.0)},
    )

    first = calculator.process_game(_game("g1", ("a",), ("b",), 11, 5))
    calculator.process_game(_game("g2", ("b",), ("a",), 11, 5, offset_minutes=1))

    delta = abs(first[0].rating_delta)
    assert delta == pytest.approx(0.086)
    assert abs(calculator.get_rating("a") - 4.0) < 0.15 * delta
    assert abs(calculator.get_rating("b") - 4.0) < 0.15 * delta


def test_calculator_tracks_records_and_default_ratings() -> None:
    calculator = PlayerRatingCalculator()
    assert calculator.get_rating("new") == pytest.approx(3.5)
    assert calculator.tracked_entity_count() == 0

    calculator.process_game(_game("g1", ("a", "b"), ("c", "d"), 11, 7))
    calculator.process_game(_game("g2", ("a",), ("c",), 9, 9, offset_minutes=5))

    records = calculator.records()
    assert calculator.tracked_entity_count() == 4
    assert records["a"].wins == 1
    assert records["a"].draws == 1
    assert records["a"].games_played == 2
    assert records["a"].points_for == 20
    assert records["a"].points_against == 16
    assert records["c"].losses == 1
    assert records["d"].games_played == 1
    assert set(calculator.ratings()) == {"a", "b", "c", "d"}
    assert calculator.ratings()["a"] > 3.5 > calculator.ratings()["d"]

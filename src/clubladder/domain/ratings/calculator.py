"""Player rating engine for singles and doubles games."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
import logging

from clubladder.domain.ratings.common import (
    FormulaVersion,
    GameResult,
    GameType,
    PlayerOutcome,
    PlayerRatingChange,
    PlayerRecord,
    RatingUpdate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingParameters:
    default_rating: float = 3.5
    min_rating: float = 2.0
    max_rating: float = 8.0
    k_factor: float = 0.08
    scale_factor: float = 2.0
    margin_base: float = 0.7
    margin_slope: float = 0.075
    margin_min: float = 0.5
    margin_max: float = 1.5
    performance_coefficient: float = 0.25
    performance_min: float = 0.6
    performance_max: float = 1.4
    underdog_team_coefficient: float = 0.10
    winner_individual_coefficient: float = 0.15
    winner_individual_min: float = 0.8
    winner_individual_max: float = 1.2
    winner_underdog_min: float = 0.7
    winner_underdog_max: float = 1.5
    loser_individual_coefficient: float = 0.45
    loser_individual_min: float = 0.5
    loser_individual_max: float = 1.5
    loser_underdog_min: float = 0.5
    loser_underdog_max: float = 1.6
    formula_version: FormulaVersion = FormulaVersion.V2

    def clamp_rating(self, rating: float) -> float:
        return clamp(rating, self.min_rating, self.max_rating)


DEFAULT_PARAMETERS = RatingParameters()

LEGACY_PARAMETERS = replace(
    DEFAULT_PARAMETERS,
    performance_coefficient=0.15,
    performance_min=0.7,
    performance_max=1.3,
    formula_version=FormulaVersion.V1,
)


def parameters_for_version(version: FormulaVersion | str) -> RatingParameters:
    """Return the preset parameter set for one formula version."""
    version = FormulaVersion(version)
    if version is FormulaVersion.V1:
        return LEGACY_PARAMETERS
    return DEFAULT_PARAMETERS


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def calculate_team_rating(ratings: Mapping[str, float] | list[float] | tuple[float, ...]) -> float:
    """Arithmetic mean of the team members' ratings."""
    values = list(ratings.values()) if isinstance(ratings, Mapping) else list(ratings)
    if not values:
        raise ValueError("team rating requires at least one player")
    return sum(values) / float(len(values))


def calculate_expected_score(rating: float, opponent_rating: float, scale_factor: float) -> float:
    """Compute the expected score for one side."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_margin_multiplier(
    winner_score: int,
    loser_score: int,
    params: RatingParameters = DEFAULT_PARAMETERS,
) -> float:
    """Scale the swing by how decisive the result was."""
    score_difference = winner_score - loser_score
    if score_difference == 0:
        return 1.0
    multiplier = params.margin_base + (score_difference - 1) * params.margin_slope
    return clamp(multiplier, params.margin_min, params.margin_max)


def calculate_performance_multiplier(
    player_rating: float,
    reference_rating: float,
    game_type: GameType,
    is_winner: bool,
    params: RatingParameters = DEFAULT_PARAMETERS,
) -> float:
    """Weight a doubles player's swing by their rating relative to a reference team.

    Winners rated below the reference gain more and losers rated above it lose more.
    """
    if game_type is GameType.SINGLES:
        return 1.0

    rating_difference = player_rating - reference_rating
    if is_winner:
        multiplier = 1.0 - rating_difference * params.performance_coefficient
    else:
        multiplier = 1.0 + rating_difference * params.performance_coefficient
    return clamp(multiplier, params.performance_min, params.performance_max)


def calculate_underdog_multiplier(
    player_rating: float,
    own_team_rating: float,
    opponent_team_rating: float,
    is_winner: bool,
    params: RatingParameters = DEFAULT_PARAMETERS,
) -> float:
    """Combine the team-matchup and individual-baseline adjustments."""
    if params.formula_version is FormulaVersion.V1:
        return 1.0

    # Positive when the player's team is favored.
    team_rating_diff = own_team_rating - opponent_team_rating
    # Positive when the player is rated above the baseline.
    player_vs_baseline = player_rating - params.default_rating

    if is_winner:
        team_multiplier = 1.0 - team_rating_diff * params.underdog_team_coefficient
        individual_multiplier = clamp(
            1.0 - player_vs_baseline * params.winner_individual_coefficient,
            params.winner_individual_min,
            params.winner_individual_max,
        )
        return clamp(
            team_multiplier * individual_multiplier,
            params.winner_underdog_min,
            params.winner_underdog_max,
        )

    team_multiplier = 1.0 + team_rating_diff * params.underdog_team_coefficient
    individual_multiplier = clamp(
        1.0 + player_vs_baseline * params.loser_individual_coefficient,
        params.loser_individual_min,
        params.loser_individual_max,
    )
    return clamp(
        team_multiplier * individual_multiplier,
        params.loser_underdog_min,
        params.loser_underdog_max,
    )


def calculate_rating_delta(
    expected_score: float,
    actual_score: float,
    *,
    margin_multiplier: float = 1.0,
    performance_multiplier: float = 1.0,
    underdog_multiplier: float = 1.0,
    params: RatingParameters = DEFAULT_PARAMETERS,
) -> float:
    base_change = params.k_factor * (actual_score - expected_score) * 2.0
    return base_change * margin_multiplier * performance_multiplier * underdog_multiplier


def _validate_teams(
    team1: Mapping[str, float],
    team2: Mapping[str, float],
    game_type: GameType,
) -> None:
    if not team1 or not team2:
        raise ValueError("both teams need at least one player")
    if len(team1) != game_type.team_size or len(team2) != game_type.team_size:
        raise ValueError(
            f"{game_type.value} games need {game_type.team_size} player(s) per team, "
            f"got {len(team1)} and {len(team2)}"
        )
    overlap = set(team1) & set(team2)
    if overlap:
        raise ValueError(f"players on both teams: {sorted(overlap)}")


def compute_rating_update(
    team1: Mapping[str, float],
    team2: Mapping[str, float],
    team1_score: int,
    team2_score: int,
    game_type: GameType | str,
    params: RatingParameters = DEFAULT_PARAMETERS,
) -> RatingUpdate:
    """Rate one completed game.

    ``team1``/``team2`` map player ids to their current ratings. Input validation
    (tied scores, score bounds) belongs to the caller; this function only guards
    against structurally impossible teams.
    """
    game_type = GameType(game_type)
    _validate_teams(team1, team2, game_type)

    team1_rating = calculate_team_rating(team1)
    team2_rating = calculate_team_rating(team2)

    team1_expected = calculate_expected_score(team1_rating, team2_rating, params.scale_factor)
    team2_expected = 1.0 - team1_expected

    is_draw = team1_score == team2_score
    team1_won = team1_score > team2_score
    if is_draw:
        team1_actual = team2_actual = 0.5
        margin_multiplier = 1.0
    else:
        team1_actual = 1.0 if team1_won else 0.0
        team2_actual = 1.0 - team1_actual
        margin_multiplier = calculate_margin_multiplier(
            max(team1_score, team2_score),
            min(team1_score, team2_score),
            params,
        )

    sides = (
        (1, team1, team1_rating, team2_rating, team1_expected, team1_actual, team1_score, team2_score),
        (2, team2, team2_rating, team1_rating, team2_expected, team2_actual, team2_score, team1_score),
    )

    changes: list[PlayerRatingChange] = []
    outcomes: dict[str, PlayerOutcome] = {}
    for team_number, members, own_rating, opponent_rating, expected, actual, points_for, points_against in sides:
        is_winner = not is_draw and actual == 1.0
        for player_id, pre_rating in members.items():
            if is_draw:
                performance_multiplier = 1.0
                underdog_multiplier = 1.0
            else:
                reference_rating = (
                    opponent_rating if params.formula_version is FormulaVersion.V1 else own_rating
                )
                performance_multiplier = calculate_performance_multiplier(
                    pre_rating, reference_rating, game_type, is_winner, params
                )
                underdog_multiplier = calculate_underdog_multiplier(
                    pre_rating, own_rating, opponent_rating, is_winner, params
                )

            delta = calculate_rating_delta(
                expected,
                actual,
                margin_multiplier=margin_multiplier,
                performance_multiplier=performance_multiplier,
                underdog_multiplier=underdog_multiplier,
                params=params,
            )
            post_rating = params.clamp_rating(pre_rating + delta)

            changes.append(
                PlayerRatingChange(
                    player_id=player_id,
                    team_number=team_number,
                    won=is_winner,
                    drawn=is_draw,
                    expected_score=expected,
                    actual_score=actual,
                    pre_rating=pre_rating,
                    rating_delta=post_rating - pre_rating,
                    post_rating=post_rating,
                    margin_multiplier=margin_multiplier,
                    performance_multiplier=performance_multiplier,
                    underdog_multiplier=underdog_multiplier,
                )
            )
            outcomes[player_id] = PlayerOutcome(
                win=1 if is_winner else 0,
                loss=1 if not is_draw and not is_winner else 0,
                draw=1 if is_draw else 0,
                points_for=points_for,
                points_against=points_against,
            )
            logger.debug(
                "player=%s expected=%.4f actual=%.1f margin=%.3f performance=%.3f underdog=%.3f delta=%+.4f",
                player_id,
                expected,
                actual,
                margin_multiplier,
                performance_multiplier,
                underdog_multiplier,
                post_rating - pre_rating,
            )

    return RatingUpdate(
        game_type=game_type,
        team1_rating=team1_rating,
        team2_rating=team2_rating,
        team1_expected_score=team1_expected,
        team2_expected_score=team2_expected,
        changes=tuple(changes),
        outcomes=outcomes,
    )


class PlayerRatingCalculator:
    """Stateful game-by-game player rating calculator used for history replays."""

    def __init__(
        self,
        params: RatingParameters = DEFAULT_PARAMETERS,
        *,
        initial_records: Mapping[str, PlayerRecord] | None = None,
    ) -> None:
        self.params = params
        self._records: dict[str, PlayerRecord] = dict(initial_records or {})

    def get_record(self, player_id: str) -> PlayerRecord:
        return self._records.get(player_id, PlayerRecord(rating=self.params.default_rating))

    def get_rating(self, player_id: str) -> float:
        return self.get_record(player_id).rating

    def tracked_entity_count(self) -> int:
        return len(self._records)

    def ratings(self) -> dict[str, float]:
        """Return a snapshot of current player ratings."""
        return {player_id: record.rating for player_id, record in self._records.items()}

    def records(self) -> dict[str, PlayerRecord]:
        return dict(self._records)

    def process_game(self, game: GameResult) -> list[PlayerRatingChange]:
        update = compute_rating_update(
            {player_id: self.get_rating(player_id) for player_id in game.team1_player_ids},
            {player_id: self.get_rating(player_id) for player_id in game.team2_player_ids},
            game.team1_score,
            game.team2_score,
            game.game_type,
            self.params,
        )
        for change in update.changes:
            record = self.get_record(change.player_id)
            self._records[change.player_id] = record.apply(change, update.outcomes[change.player_id])
        return list(update.changes)


__all__ = [
    "DEFAULT_PARAMETERS",
    "LEGACY_PARAMETERS",
    "PlayerRatingCalculator",
    "RatingParameters",
    "calculate_expected_score",
    "calculate_margin_multiplier",
    "calculate_performance_multiplier",
    "calculate_rating_delta",
    "calculate_team_rating",
    "calculate_underdog_multiplier",
    "clamp",
    "compute_rating_update",
    "parameters_for_version",
]

"""Compare two rating parameter sets over historical games."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging

from clubladder.domain.ratings.calculator import (
    DEFAULT_PARAMETERS,
    LEGACY_PARAMETERS,
    RatingParameters,
    compute_rating_update,
)
from clubladder.domain.ratings.common import GameResult

logger = logging.getLogger(__name__)

NOTE_TEAM_GAP = 0.3


@dataclass(frozen=True)
class HistoricalGame:
    """A stored game plus the ratings its players held before it was played."""

    game: GameResult
    ratings_before: Mapping[str, float]


@dataclass(frozen=True)
class FormulaComparisonRow:
    game_id: str
    player_id: str
    team_number: int
    won: bool
    pre_rating: float
    team_rating_diff: float
    baseline_delta: float
    candidate_delta: float
    note: str

    @property
    def difference(self) -> float:
        return self.candidate_delta - self.baseline_delta


@dataclass(frozen=True)
class FormulaComparison:
    rows: tuple[FormulaComparisonRow, ...]
    games_analyzed: int
    games_skipped: int

    @property
    def mean_abs_difference(self) -> float:
        if not self.rows:
            return 0.0
        return sum(abs(row.difference) for row in self.rows) / len(self.rows)

    @property
    def max_abs_difference(self) -> float:
        return max((abs(row.difference) for row in self.rows), default=0.0)


def _describe(won: bool, team_rating_diff: float) -> str:
    if won and team_rating_diff < -NOTE_TEAM_GAP:
        return "underdog bonus"
    if won and team_rating_diff > NOTE_TEAM_GAP:
        return "favorite reduced"
    if not won and team_rating_diff > NOTE_TEAM_GAP:
        return "upset penalty"
    if not won and team_rating_diff < -NOTE_TEAM_GAP:
        return "expected loss"
    return ""


def compare_formulas(
    games: Iterable[HistoricalGame],
    baseline: RatingParameters = LEGACY_PARAMETERS,
    candidate: RatingParameters = DEFAULT_PARAMETERS,
) -> FormulaComparison:
    """Rate every game twice from its stored before-ratings and diff the deltas.

    Drawn games are skipped. Players without a stored before-rating start at the
    baseline parameter set's default rating.
    """
    rows: list[FormulaComparisonRow] = []
    analyzed = 0
    skipped = 0

    for historical in games:
        game = historical.game
        if game.is_draw:
            skipped += 1
            continue

        def team_ratings(player_ids: tuple[str, ...]) -> dict[str, float]:
            return {
                player_id: float(historical.ratings_before.get(player_id, baseline.default_rating))
                for player_id in player_ids
            }

        team1 = team_ratings(game.team1_player_ids)
        team2 = team_ratings(game.team2_player_ids)
        baseline_update = compute_rating_update(
            team1, team2, game.team1_score, game.team2_score, game.game_type, baseline
        )
        candidate_update = compute_rating_update(
            team1, team2, game.team1_score, game.team2_score, game.game_type, candidate
        )

        for baseline_change, candidate_change in zip(baseline_update.changes, candidate_update.changes):
            if baseline_change.team_number == 1:
                team_rating_diff = baseline_update.team1_rating - baseline_update.team2_rating
            else:
                team_rating_diff = baseline_update.team2_rating - baseline_update.team1_rating
            rows.append(
                FormulaComparisonRow(
                    game_id=game.game_id,
                    player_id=baseline_change.player_id,
                    team_number=baseline_change.team_number,
                    won=baseline_change.won,
                    pre_rating=baseline_change.pre_rating,
                    team_rating_diff=team_rating_diff,
                    baseline_delta=baseline_change.rating_delta,
                    candidate_delta=candidate_change.rating_delta,
                    note=_describe(baseline_change.won, team_rating_diff),
                )
            )
        analyzed += 1

    comparison = FormulaComparison(rows=tuple(rows), games_analyzed=analyzed, games_skipped=skipped)
    logger.info(
        "Compared formulas over %d games (%d skipped): mean |diff|=%.4f max |diff|=%.4f",
        analyzed,
        skipped,
        comparison.mean_abs_difference,
        comparison.max_abs_difference,
    )
    return comparison


__all__ = ["FormulaComparison", "FormulaComparisonRow", "HistoricalGame", "compare_formulas"]

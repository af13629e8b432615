"""Shared types for the player rating engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum


class GameType(str, Enum):
    """Singles or doubles; fixes the number of players per team."""

    SINGLES = "singles"
    DOUBLES = "doubles"

    @property
    def team_size(self) -> int:
        return 1 if self is GameType.SINGLES else 2


class FormulaVersion(str, Enum):
    """Which rating formula variant a parameter set selects."""

    # Performance against the opposing team, no underdog adjustment.
    V1 = "v1"
    # Performance against the player's own team plus underdog adjustment.
    V2 = "v2"


@dataclass(frozen=True)
class GameResult:
    """Canonical completed-game payload consumed by rating calculators."""

    game_id: str
    played_at: datetime
    game_type: GameType
    team1_player_ids: tuple[str, ...]
    team2_player_ids: tuple[str, ...]
    team1_score: int
    team2_score: int

    @property
    def is_draw(self) -> bool:
        return self.team1_score == self.team2_score

    @property
    def player_ids(self) -> tuple[str, ...]:
        return self.team1_player_ids + self.team2_player_ids


@dataclass(frozen=True)
class PlayerOutcome:
    """Counter increments for one player after one game."""

    win: int
    loss: int
    draw: int
    points_for: int
    points_against: int


@dataclass(frozen=True)
class PlayerRatingChange:
    player_id: str
    team_number: int
    won: bool
    drawn: bool
    expected_score: float
    actual_score: float
    pre_rating: float
    rating_delta: float
    post_rating: float
    margin_multiplier: float
    performance_multiplier: float
    underdog_multiplier: float


@dataclass(frozen=True)
class RatingUpdate:
    """Everything one rated game produces; persistence is the caller's job."""

    game_type: GameType
    team1_rating: float
    team2_rating: float
    team1_expected_score: float
    team2_expected_score: float
    changes: tuple[PlayerRatingChange, ...]
    outcomes: dict[str, PlayerOutcome]

    @property
    def new_ratings(self) -> dict[str, float]:
        return {change.player_id: change.post_rating for change in self.changes}

    @property
    def rating_snapshot(self) -> dict[str, dict[str, float]]:
        """Per-player before/after values as stored on the game record."""
        return {
            change.player_id: {"before": change.pre_rating, "after": change.post_rating}
            for change in self.changes
        }


@dataclass(frozen=True)
class PlayerRecord:
    """Current rating and cumulative counters for one player."""

    rating: float
    wins: int = 0
    losses: int = 0
    draws: int = 0
    points_for: int = 0
    points_against: int = 0

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.draws

    def apply(self, change: PlayerRatingChange, outcome: PlayerOutcome) -> PlayerRecord:
        return replace(
            self,
            rating=change.post_rating,
            wins=self.wins + outcome.win,
            losses=self.losses + outcome.loss,
            draws=self.draws + outcome.draw,
            points_for=self.points_for + outcome.points_for,
            points_against=self.points_against + outcome.points_against,
        )


__all__ = [
    "FormulaVersion",
    "GameResult",
    "GameType",
    "PlayerOutcome",
    "PlayerRatingChange",
    "PlayerRecord",
    "RatingUpdate",
]

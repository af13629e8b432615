"""Input checks for game submissions before they reach the rating engine."""

from __future__ import annotations

from dataclasses import dataclass, replace

from clubladder.domain.ratings.common import GameType
from clubladder.domain.validation import ValidationResult, collect, is_score

DEFAULT_MAX_SCORE = 50


@dataclass(frozen=True)
class GameSubmission:
    game_type: GameType | str
    team1_player_ids: tuple[str, ...]
    team2_player_ids: tuple[str, ...]
    team1_score: int
    team2_score: int

    @property
    def player_ids(self) -> tuple[str, ...]:
        return tuple(self.team1_player_ids) + tuple(self.team2_player_ids)


def validate_game_submission(
    submission: GameSubmission,
    *,
    allow_draws: bool = False,
    max_score: int = DEFAULT_MAX_SCORE,
) -> ValidationResult[GameSubmission]:
    """Check one submitted game and collect every problem found.

    Oversized teams are reported, never truncated. Draws are only accepted when
    the caller allows them (quick-play tournament results).
    """
    errors: list[str] = []

    try:
        game_type = GameType(submission.game_type)
    except ValueError:
        game_type = None
        errors.append(
            f"game_type must be one of {[item.value for item in GameType]}, "
            f"got {submission.game_type!r}"
        )

    if game_type is not None:
        for label, team in (
            ("team1", submission.team1_player_ids),
            ("team2", submission.team2_player_ids),
        ):
            if len(team) != game_type.team_size:
                errors.append(
                    f"{label} must have exactly {game_type.team_size} player(s) "
                    f"for {game_type.value}, got {len(team)}"
                )

    player_ids = submission.player_ids
    if any(not str(player_id).strip() for player_id in player_ids):
        errors.append("player ids must be non-empty")
    if len(set(player_ids)) != len(player_ids):
        errors.append("a player cannot appear more than once in a game")

    scores_ok = True
    for label, score in (("team1_score", submission.team1_score), ("team2_score", submission.team2_score)):
        if not is_score(score):
            errors.append(f"{label} must be an integer")
            scores_ok = False
        elif score < 0 or score > max_score:
            errors.append(f"{label} must be between 0 and {max_score}")
            scores_ok = False

    if scores_ok and not allow_draws and submission.team1_score == submission.team2_score:
        errors.append("scores cannot be tied")

    normalized = submission
    if game_type is not None:
        normalized = replace(
            submission,
            game_type=game_type,
            team1_player_ids=tuple(submission.team1_player_ids),
            team2_player_ids=tuple(submission.team2_player_ids),
        )
    return collect(normalized, errors)


__all__ = ["DEFAULT_MAX_SCORE", "GameSubmission", "validate_game_submission"]

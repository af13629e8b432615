"""Persistence helpers for games and their rating changes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict
from datetime import datetime

from sqlalchemy import func, insert, select
from sqlalchemy.orm import Session

from clubladder.domain.ratings import GameResult, GameType, PlayerRatingChange, RatingUpdate
from clubladder.models import Game, GameRatingChange


def insert_game(
    session: Session,
    *,
    update: RatingUpdate,
    team1_player_ids: Sequence[str],
    team2_player_ids: Sequence[str],
    team1_score: int,
    team2_score: int,
    played_at: datetime,
    rating_system_id: int | None = None,
    tournament_id: str | None = None,
) -> Game:
    """Insert one immutable game row plus one rating-change row per player."""
    game = Game(
        game_type=update.game_type.value,
        team1_player_ids=list(team1_player_ids),
        team2_player_ids=list(team2_player_ids),
        team1_score=team1_score,
        team2_score=team2_score,
        played_at=played_at,
        rating_snapshot=update.rating_snapshot,
        rating_system_id=rating_system_id,
        tournament_id=tournament_id,
    )
    session.add(game)
    session.flush()
    insert_rating_changes(session, game.id, update.changes)
    return game


def insert_rating_changes(session: Session, game_id: str, changes: Sequence[PlayerRatingChange]) -> None:
    if not changes:
        return
    payload = [{"game_id": game_id, **asdict(change)} for change in changes]
    session.execute(insert(GameRatingChange), payload)


def count_games(session: Session) -> int:
    return int(session.scalar(select(func.count(Game.id))) or 0)


def load_game_history(
    session: Session,
    *,
    limit: int | None = None,
    newest_first: bool = False,
) -> list[Game]:
    if newest_first:
        statement = select(Game).order_by(Game.played_at.desc(), Game.created_at.desc())
    else:
        statement = select(Game).order_by(Game.played_at, Game.created_at)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.execute(statement).scalars())


def list_rating_changes(session: Session, game_id: str) -> list[GameRatingChange]:
    statement = (
        select(GameRatingChange)
        .where(GameRatingChange.game_id == game_id)
        .order_by(GameRatingChange.team_number, GameRatingChange.id)
    )
    return list(session.execute(statement).scalars())


def to_game_result(game: Game) -> GameResult:
    return GameResult(
        game_id=game.id,
        played_at=game.played_at,
        game_type=GameType(game.game_type),
        team1_player_ids=tuple(game.team1_player_ids),
        team2_player_ids=tuple(game.team2_player_ids),
        team1_score=game.team1_score,
        team2_score=game.team2_score,
    )


def ratings_before(game: Game) -> dict[str, float]:
    """Before-ratings stored on the game row when it was first rated."""
    snapshot = game.rating_snapshot or {}
    return {player_id: float(values["before"]) for player_id, values in snapshot.items()}

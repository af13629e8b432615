"""Persistence helpers for player rows."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from clubladder.domain.ratings import PlayerRecord
from clubladder.models import Player


def add_player(session: Session, *, name: str, rating: float) -> Player:
    player = Player(name=name, rating=rating)
    session.add(player)
    session.flush()
    return player


def get_players(session: Session, player_ids: Iterable[str]) -> dict[str, Player]:
    """Load players by id; missing ids are simply absent from the result."""
    ids = list(dict.fromkeys(player_ids))
    if not ids:
        return {}
    rows = session.execute(select(Player).where(Player.id.in_(ids))).scalars()
    return {player.id: player for player in rows}


def find_player_by_name(session: Session, name: str) -> Player | None:
    return session.execute(select(Player).where(Player.name == name)).scalar_one_or_none()


def top_players(session: Session, *, limit: int = 20, min_games: int = 0) -> list[Player]:
    """Players ordered by rating, highest first."""
    statement = select(Player).order_by(Player.rating.desc(), Player.name)
    if min_games > 0:
        statement = statement.where(Player.wins + Player.losses + Player.draws >= min_games)
    return list(session.execute(statement.limit(limit)).scalars())


def to_record(player: Player) -> PlayerRecord:
    return PlayerRecord(
        rating=player.rating,
        wins=player.wins,
        losses=player.losses,
        draws=player.draws,
        points_for=player.points_for,
        points_against=player.points_against,
    )


def apply_record(player: Player, record: PlayerRecord) -> None:
    player.rating = record.rating
    player.wins = record.wins
    player.losses = record.losses
    player.draws = record.draws
    player.points_for = record.points_for
    player.points_against = record.points_against


def reset_players(session: Session, *, default_rating: float) -> None:
    """Return every player to the default rating with zeroed counters."""
    session.execute(
        update(Player).values(
            rating=default_rating,
            wins=0,
            losses=0,
            draws=0,
            points_for=0,
            points_against=0,
        )
    )


def write_records(session: Session, records: Mapping[str, PlayerRecord]) -> int:
    """Copy replayed records onto player rows; returns the number of rows touched."""
    players = get_players(session, records.keys())
    for player_id, record in records.items():
        player = players.get(player_id)
        if player is not None:
            apply_record(player, record)
    return len(players)

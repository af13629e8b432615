"""Persistence helpers for tournaments and their scheduled matches."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import insert, select
from sqlalchemy.orm import Session

from clubladder.domain.scheduling import MatchFormat, ScheduleConfig, ScheduledMatch, TournamentType
from clubladder.models import Tournament, TournamentMatch


def insert_tournament(
    session: Session,
    *,
    name: str,
    config: ScheduleConfig,
    matches: Sequence[ScheduledMatch],
    estimated_duration_minutes: int = 0,
) -> Tournament:
    tournament = Tournament(
        name=name,
        match_format=MatchFormat(config.match_format).value,
        tournament_type=TournamentType(config.tournament_type).value,
        player_ids=list(config.player_ids),
        max_rounds=config.max_rounds,
        courts_available=config.courts_available,
        estimated_duration_minutes=estimated_duration_minutes,
    )
    session.add(tournament)
    session.flush()
    if matches:
        session.execute(
            insert(TournamentMatch),
            [
                {
                    "tournament_id": tournament.id,
                    "round": match.round,
                    "match_number": match.match_number,
                    "team1_player_ids": list(match.team1_player_ids),
                    "team2_player_ids": list(match.team2_player_ids),
                    "status": "pending",
                }
                for match in matches
            ],
        )
    return tournament


def get_tournament_match(session: Session, match_id: int) -> TournamentMatch | None:
    return session.get(TournamentMatch, match_id)


def list_tournament_matches(session: Session, tournament_id: str) -> list[TournamentMatch]:
    statement = (
        select(TournamentMatch)
        .where(TournamentMatch.tournament_id == tournament_id)
        .order_by(TournamentMatch.match_number)
    )
    return list(session.execute(statement).scalars())


def complete_tournament_match(
    match: TournamentMatch,
    *,
    game_id: str,
    team1_score: int,
    team2_score: int,
) -> None:
    match.status = "completed"
    match.game_id = game_id
    match.team1_score = team1_score
    match.team2_score = team2_score


def mark_tournament_completed_if_done(session: Session, tournament_id: str) -> bool:
    """Close the tournament once none of its matches are pending."""
    pending = session.execute(
        select(TournamentMatch.id).where(
            TournamentMatch.tournament_id == tournament_id,
            TournamentMatch.status == "pending",
        )
    ).first()
    if pending is not None:
        return False
    tournament = session.get(Tournament, tournament_id)
    if tournament is not None:
        tournament.status = "completed"
    return True


def to_scheduled_match(match: TournamentMatch) -> ScheduledMatch:
    return ScheduledMatch(
        round=match.round,
        match_number=match.match_number,
        team1_player_ids=tuple(match.team1_player_ids),
        team2_player_ids=tuple(match.team2_player_ids),
    )

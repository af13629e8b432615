"""Caller-side workflows: load state, run the pure modules, persist in one transaction."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
import logging
import random

from clubladder.domain.ratings import (
    DEFAULT_PARAMETERS,
    GameSubmission,
    GameType,
    PlayerRatingCalculator,
    RatingParameters,
    RatingSystemConfig,
    RatingUpdate,
    compute_rating_update,
    validate_game_submission,
)
from clubladder.domain.scheduling import (
    ScheduleConfig,
    ScheduledMatch,
    TournamentType,
    estimate_duration_minutes,
    generate_matches,
)
from clubladder.domain.validation import require_valid
from clubladder.repositories import (
    apply_record,
    complete_tournament_match,
    get_players,
    get_tournament_match,
    insert_game,
    insert_tournament,
    load_game_history,
    mark_tournament_completed_if_done,
    reset_players,
    to_game_result,
    to_record,
    upsert_rating_system,
    write_records,
)

logger = logging.getLogger(__name__)


class UnknownPlayerError(ValueError):
    def __init__(self, player_ids: list[str]) -> None:
        self.player_ids = player_ids
        super().__init__(f"Unknown player id(s): {', '.join(player_ids)}")


class MatchNotFoundError(ValueError):
    pass


class MatchAlreadyCompletedError(ValueError):
    pass


class MatchPlayersMismatchError(ValueError):
    pass


@dataclass(frozen=True)
class RecordedGame:
    game_id: str
    update: RatingUpdate
    tournament_match_id: int | None
    tournament_completed: bool


@dataclass(frozen=True)
class CreatedTournament:
    tournament_id: str
    matches: tuple[ScheduledMatch, ...]
    estimated_duration_minutes: int


@dataclass(frozen=True)
class ReplaySummary:
    processed_games: int
    tracked_players: int
    ratings: dict[str, float]
    written: bool


def _teams_match(
    scheduled: tuple[list[str], list[str]],
    submitted: tuple[tuple[str, ...], tuple[str, ...]],
) -> bool:
    scheduled_sets = {frozenset(scheduled[0]), frozenset(scheduled[1])}
    submitted_sets = {frozenset(submitted[0]), frozenset(submitted[1])}
    return scheduled_sets == submitted_sets


def record_game(
    session_factory,
    submission: GameSubmission,
    *,
    system: RatingSystemConfig | None = None,
    params: RatingParameters | None = None,
    allow_draws: bool = False,
    tournament_match_id: int | None = None,
    played_at: datetime | None = None,
) -> RecordedGame:
    """Validate, rate and store one game, updating every player involved.

    Raises ``ValidationError`` for a malformed submission. Everything is written
    in a single commit and rolled back on any failure.
    """
    submission = require_valid(validate_game_submission(submission, allow_draws=allow_draws))
    if params is None:
        params = system.parameters if system is not None else DEFAULT_PARAMETERS
    played_at = played_at or datetime.now(UTC).replace(tzinfo=None)

    with session_factory() as session:
        try:
            tournament_match = None
            if tournament_match_id is not None:
                tournament_match = get_tournament_match(session, tournament_match_id)
                if tournament_match is None:
                    raise MatchNotFoundError(f"Tournament match {tournament_match_id} not found")
                if tournament_match.status == "completed":
                    raise MatchAlreadyCompletedError(
                        f"Tournament match {tournament_match_id} is already completed"
                    )
                if not _teams_match(
                    (tournament_match.team1_player_ids, tournament_match.team2_player_ids),
                    (submission.team1_player_ids, submission.team2_player_ids),
                ):
                    raise MatchPlayersMismatchError(
                        f"Submitted teams do not match tournament match {tournament_match_id}"
                    )

            players = get_players(session, submission.player_ids)
            missing = [player_id for player_id in submission.player_ids if player_id not in players]
            if missing:
                raise UnknownPlayerError(missing)

            update = compute_rating_update(
                {player_id: players[player_id].rating for player_id in submission.team1_player_ids},
                {player_id: players[player_id].rating for player_id in submission.team2_player_ids},
                submission.team1_score,
                submission.team2_score,
                GameType(submission.game_type),
                params,
            )
            for change in update.changes:
                player = players[change.player_id]
                apply_record(player, to_record(player).apply(change, update.outcomes[change.player_id]))

            rating_system_id = None
            if system is not None:
                rating_system_id = upsert_rating_system(
                    session,
                    name=system.name,
                    description=system.description,
                    config_json=system.as_config_json(),
                ).id

            game = insert_game(
                session,
                update=update,
                team1_player_ids=submission.team1_player_ids,
                team2_player_ids=submission.team2_player_ids,
                team1_score=submission.team1_score,
                team2_score=submission.team2_score,
                played_at=played_at,
                rating_system_id=rating_system_id,
                tournament_id=tournament_match.tournament_id if tournament_match is not None else None,
            )

            tournament_completed = False
            if tournament_match is not None:
                complete_tournament_match(
                    tournament_match,
                    game_id=game.id,
                    team1_score=submission.team1_score,
                    team2_score=submission.team2_score,
                )
                session.flush()
                tournament_completed = mark_tournament_completed_if_done(session, tournament_match.tournament_id)

            session.commit()
        except Exception:
            session.rollback()
            raise

    logger.info(
        "Recorded %s game %s (%d-%d) with %d rating changes",
        update.game_type.value,
        game.id,
        submission.team1_score,
        submission.team2_score,
        len(update.changes),
    )
    return RecordedGame(
        game_id=game.id,
        update=update,
        tournament_match_id=tournament_match_id,
        tournament_completed=tournament_completed,
    )


def create_tournament(
    session_factory,
    name: str,
    config: ScheduleConfig,
    *,
    rng: random.Random | None = None,
) -> CreatedTournament:
    """Generate a schedule and store the tournament with all its matches."""
    with session_factory() as session:
        try:
            players = get_players(session, config.player_ids)
            missing = [player_id for player_id in config.player_ids if player_id not in players]
            if missing:
                raise UnknownPlayerError(missing)

            ratings = None
            if TournamentType(config.tournament_type) is TournamentType.BOX_ROTATION:
                ratings = {player_id: player.rating for player_id, player in players.items()}
            matches = generate_matches(config, rng=rng, ratings=ratings)
            duration = estimate_duration_minutes(config)

            tournament = insert_tournament(
                session,
                name=name,
                config=config,
                matches=matches,
                estimated_duration_minutes=duration,
            )
            session.commit()
        except Exception:
            session.rollback()
            raise

    logger.info("Created tournament %s (%s) with %d matches", tournament.id, name, len(matches))
    return CreatedTournament(
        tournament_id=tournament.id,
        matches=tuple(matches),
        estimated_duration_minutes=duration,
    )


def replay_ratings(
    session_factory,
    params: RatingParameters = DEFAULT_PARAMETERS,
    *,
    write: bool = False,
    echo: Callable[[str], None] | None = None,
) -> ReplaySummary:
    """Recompute every player's rating from stored game history.

    Games are replayed in play order from the default rating. Game and
    rating-change rows are never touched; with ``write`` the player rows are
    overwritten with the replayed records.
    """
    calculator = PlayerRatingCalculator(params)

    with session_factory() as session:
        games = load_game_history(session)
        for index, game in enumerate(games, start=1):
            calculator.process_game(to_game_result(game))
            if echo is not None and index % 1_000 == 0:
                echo(f"processed_games={index}/{len(games)}")

        if not write:
            session.rollback()
        else:
            try:
                reset_players(session, default_rating=params.default_rating)
                write_records(session, calculator.records())
                session.commit()
            except Exception:
                session.rollback()
                raise

    summary = ReplaySummary(
        processed_games=len(games),
        tracked_players=calculator.tracked_entity_count(),
        ratings=calculator.ratings(),
        written=write,
    )
    logger.info(
        "Replayed %d games for %d players (write=%s)",
        summary.processed_games,
        summary.tracked_players,
        write,
    )
    return summary


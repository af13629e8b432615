"""Schedule validation and dispatch across tournament types."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
import math
import random

from clubladder.domain.scheduling.box_league import generate_box_round, seed_boxes
from clubladder.domain.scheduling.common import (
    FairnessTracker,
    MatchFormat,
    ScheduleConfig,
    ScheduledMatch,
    TournamentType,
    entrant_errors,
)
from clubladder.domain.scheduling.elimination import generate_elimination_matches
from clubladder.domain.scheduling.round_robin import generate_round_robin_matches
from clubladder.domain.validation import ValidationResult, collect, require_valid

logger = logging.getLogger(__name__)

MAX_ROUNDS_LIMIT = 50
MAX_COURTS = 4


@dataclass(frozen=True)
class ScheduleSummary:
    match_count: int
    round_count: int
    games_per_player: dict[str, int]
    partnerships: dict[tuple[str, str], int]
    oppositions: dict[tuple[str, str], int]


def validate_schedule_config(config: ScheduleConfig) -> ValidationResult[ScheduleConfig]:
    """Check player counts and limits for the requested format and tournament type."""
    errors: list[str] = []
    player_ids = tuple(config.player_ids)

    try:
        match_format = MatchFormat(config.match_format)
    except ValueError:
        match_format = None
        errors.append(f"match_format must be one of {[item.value for item in MatchFormat]}")
    try:
        tournament_type = TournamentType(config.tournament_type)
    except ValueError:
        tournament_type = None
        errors.append(f"tournament_type must be one of {[item.value for item in TournamentType]}")

    errors.extend(entrant_errors(player_ids, match_format, tournament_type))

    if config.max_rounds is not None and not 1 <= config.max_rounds <= MAX_ROUNDS_LIMIT:
        errors.append(f"max_rounds must be between 1 and {MAX_ROUNDS_LIMIT}")
    if config.max_rounds is not None and match_format is MatchFormat.SINGLES:
        errors.append("max_rounds only applies to doubles round robin")
    if not 1 <= config.courts_available <= MAX_COURTS:
        errors.append(f"courts_available must be between 1 and {MAX_COURTS}")

    if match_format is not None and tournament_type is not None:
        config = ScheduleConfig(
            player_ids=player_ids,
            match_format=match_format,
            tournament_type=tournament_type,
            max_rounds=config.max_rounds,
            courts_available=config.courts_available,
        )
    return collect(config, errors)


def generate_matches(
    config: ScheduleConfig,
    *,
    rng: random.Random | None = None,
    ratings: Mapping[str, float] | None = None,
) -> list[ScheduledMatch]:
    """Validate a schedule request and build its matches.

    Box rotation seeds boxes by ``ratings`` when given, otherwise by the order of
    ``config.player_ids``, and returns the first round.
    """
    config = require_valid(validate_schedule_config(config))
    rng = rng or random.Random()
    tournament_type = TournamentType(config.tournament_type)

    if tournament_type is TournamentType.ROUND_ROBIN:
        matches = generate_round_robin_matches(
            config.player_ids,
            config.match_format,
            rng=rng,
            max_rounds=config.max_rounds,
            courts_available=config.courts_available,
        )
    elif tournament_type.is_elimination:
        matches = generate_elimination_matches(
            config.player_ids,
            config.match_format,
            rng=rng,
            double_elimination=tournament_type is TournamentType.DOUBLE_ELIMINATION,
        )
    else:
        count = len(config.player_ids)
        seeding = [
            (player_id, ratings.get(player_id, 0.0) if ratings else float(count - position))
            for position, player_id in enumerate(config.player_ids)
        ]
        matches = [box_match.match for box_match in generate_box_round(seed_boxes(seeding), 1)]

    summary = summarize_schedule(matches)
    logger.info(
        "Generated %s %s schedule: %d matches over %d rounds for %d players",
        tournament_type.value,
        MatchFormat(config.match_format).value,
        summary.match_count,
        summary.round_count,
        len(config.player_ids),
    )
    logger.debug("Games per player: %s", summary.games_per_player)
    return matches


def summarize_schedule(matches: Iterable[ScheduledMatch]) -> ScheduleSummary:
    matches = list(matches)
    tracker = FairnessTracker.from_matches(matches)
    return ScheduleSummary(
        match_count=len(matches),
        round_count=len({match.round for match in matches}),
        games_per_player=dict(tracker.games),
        partnerships=dict(tracker.partnerships),
        oppositions=dict(tracker.oppositions),
    )


def estimate_duration_minutes(config: ScheduleConfig) -> int:
    """Rough playing time used when announcing a tournament."""
    count = len(config.player_ids)
    match_format = MatchFormat(config.match_format)
    tournament_type = TournamentType(config.tournament_type)

    if tournament_type is not TournamentType.ROUND_ROBIN:
        estimated_matches = count - 1 if match_format is MatchFormat.SINGLES else count // 2 - 1
        return max(0, estimated_matches) * 10

    if match_format is MatchFormat.SINGLES:
        total_matches = count * (count - 1) // 2
    else:
        matches_per_round = min(count // 4, config.courts_available)
        if config.max_rounds:
            total_matches = config.max_rounds * matches_per_round
        else:
            total_partnerships = count * (count - 1) // 2
            total_matches = math.ceil(total_partnerships / max(1, matches_per_round)) * matches_per_round
    return total_matches * 9


__all__ = [
    "MAX_COURTS",
    "MAX_ROUNDS_LIMIT",
    "ScheduleSummary",
    "estimate_duration_minutes",
    "generate_matches",
    "summarize_schedule",
    "validate_schedule_config",
]

"""Quick play: build one round at a time from what has already been played."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import logging
import random

from clubladder.domain.scheduling.common import (
    QUICK_PLAY_WEIGHTS,
    FairnessTracker,
    MatchFormat,
    Pairing,
    ScheduledMatch,
    best_doubles_match,
    best_singles_match,
    number_matches,
    shuffled,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NextRound:
    round: int
    matches: tuple[ScheduledMatch, ...]
    resting_player_ids: tuple[str, ...]


def calculate_max_unique_rounds(player_count: int, match_format: MatchFormat | str) -> int:
    """Rounds available before some pairing has to repeat."""
    match_format = MatchFormat(match_format)
    if match_format is MatchFormat.SINGLES:
        if player_count < 2:
            return 0
        return player_count - 1 if player_count % 2 == 0 else player_count
    if player_count < 4 or player_count % 4:
        return 0
    return player_count - 1


def generate_next_round(
    player_ids: Sequence[str],
    match_format: MatchFormat | str,
    history: Iterable[ScheduledMatch | Pairing] = (),
    *,
    round_number: int,
    courts_available: int = 2,
    first_match_number: int = 1,
    rng: random.Random | None = None,
) -> NextRound:
    """Pick the next round, court by court, preferring rested players and fresh pairings."""
    rng = rng or random.Random()
    match_format = MatchFormat(match_format)
    team_players = 2 * match_format.team_size

    tracker = FairnessTracker.from_matches(history)
    order = shuffled(player_ids, rng)
    used: set[str] = set()
    pairings: list[Pairing] = []

    for _court in range(courts_available):
        available = [player_id for player_id in order if player_id not in used]
        if len(available) < team_players:
            break
        if match_format is MatchFormat.SINGLES:
            pairing = best_singles_match(available, tracker)
        else:
            pairing = best_doubles_match(available, tracker, QUICK_PLAY_WEIGHTS)
        if pairing is None:
            break
        pairings.append(pairing)
        used.update((*pairing[0], *pairing[1]))
        tracker.record(pairing)

    matches = number_matches(((round_number, pairing) for pairing in pairings), start=first_match_number)
    resting = tuple(player_id for player_id in player_ids if player_id not in used)
    logger.info(
        "Generated %d %s matches for round %d, %d players resting",
        len(matches),
        match_format.value,
        round_number,
        len(resting),
    )
    return NextRound(round=round_number, matches=tuple(matches), resting_player_ids=resting)


def generate_quick_play_rounds(
    player_ids: Sequence[str],
    match_format: MatchFormat | str,
    max_rounds: int,
    *,
    courts_available: int = 2,
    rng: random.Random | None = None,
) -> list[ScheduledMatch]:
    """Generate every quick play round up front, each informed by the ones before it."""
    rng = rng or random.Random()
    matches: list[ScheduledMatch] = []
    for round_number in range(1, max_rounds + 1):
        next_round = generate_next_round(
            player_ids,
            match_format,
            matches,
            round_number=round_number,
            courts_available=courts_available,
            first_match_number=len(matches) + 1,
            rng=rng,
        )
        matches.extend(next_round.matches)
    return matches


__all__ = ["NextRound", "calculate_max_unique_rounds", "generate_next_round", "generate_quick_play_rounds"]

"""Round-robin schedules for singles and doubles."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from itertools import combinations
import logging
import random

from clubladder.domain.scheduling.common import (
    BALANCED_ROUND_WEIGHTS,
    FairnessTracker,
    MatchFormat,
    Pairing,
    ScheduledMatch,
    TournamentType,
    best_doubles_match,
    number_matches,
    require_entrants,
    shuffled,
)

logger = logging.getLogger(__name__)


def circle_rounds(player_ids: Sequence[str]) -> list[list[tuple[str, str]]]:
    """Circle-method 1-factorization in the given player order.

    Even counts give ``n - 1`` rounds; odd counts give ``n`` rounds with one
    player resting in each.
    """
    if len(player_ids) < 2:
        return []
    slots: list[str | None] = list(player_ids)
    if len(slots) % 2:
        slots.append(None)

    fixed, rotating = slots[0], slots[1:]
    rounds: list[list[tuple[str, str]]] = []
    for _ in range(len(slots) - 1):
        pairs = [(fixed, rotating[0])]
        for index in range(1, len(rotating) // 2 + 1):
            pairs.append((rotating[index], rotating[-index]))
        rounds.append([(first, second) for first, second in pairs if first is not None and second is not None])
        rotating = [rotating[-1], *rotating[:-1]]
    return rounds


def generate_singles_round_robin(player_ids: Sequence[str], rng: random.Random) -> list[ScheduledMatch]:
    rounds = circle_rounds(shuffled(player_ids, rng))
    return number_matches(
        (round_number, ((first,), (second,)))
        for round_number, pairs in enumerate(rounds, start=1)
        for first, second in pairs
    )


def generate_partner_rotation(player_ids: Sequence[str], rng: random.Random) -> list[ScheduledMatch]:
    """Greedy doubles rotation aiming for every partnership once.

    Best effort: some partnerships may go unscheduled and a round may reuse a
    player, since rounds are cut from consecutive matches.
    """
    n = len(player_ids)
    game_limit = n - 1
    games: Counter[str] = Counter({player_id: 0 for player_id in player_ids})

    ordered = shuffled(player_ids, rng)
    partnerships = list(combinations(ordered, 2))
    rng.shuffle(partnerships)
    used: set[int] = set()
    pairings: list[Pairing] = []

    for index, partnership in enumerate(partnerships):
        if index in used:
            continue
        if any(games[player_id] >= game_limit for player_id in partnership):
            continue

        best_index: int | None = None
        best_score = -1
        for candidate_index, opponents in enumerate(partnerships):
            if candidate_index in used or set(opponents) & set(partnership):
                continue
            if any(games[player_id] >= game_limit for player_id in opponents):
                continue
            need_score = sum(game_limit - games[player_id] for player_id in (*partnership, *opponents))
            if need_score > best_score:
                best_score = need_score
                best_index = candidate_index

        if best_index is None:
            continue
        opponents = partnerships[best_index]
        used.update((index, best_index))
        games.update((*partnership, *opponents))
        pairings.append((partnership, opponents))

    matches_per_round = max(1, n // 4)
    matches = number_matches(
        (position // matches_per_round + 1, pairing) for position, pairing in enumerate(pairings)
    )
    logger.info("Generated %d partner-rotation matches with game distribution %s", len(matches), dict(games))
    return matches


def generate_balanced_doubles_rounds(
    player_ids: Sequence[str],
    max_rounds: int,
    courts_available: int,
    rng: random.Random,
) -> list[ScheduledMatch]:
    """Round-by-round doubles selection limited by rounds and courts."""
    n = len(player_ids)
    tracker = FairnessTracker()
    tracker.games.update({player_id: 0 for player_id in player_ids})
    rounds: list[tuple[int, Pairing]] = []

    for round_number in range(1, max_rounds + 1):
        order = shuffled(player_ids, rng)
        used: set[str] = set()
        round_pairings: list[Pairing] = []
        for _court in range(courts_available):
            if len(used) >= n - 3:
                break
            available = shuffled((player_id for player_id in order if player_id not in used), rng)
            if len(available) < 4:
                break
            pairing = best_doubles_match(available, tracker, BALANCED_ROUND_WEIGHTS)
            if pairing is None:
                break
            round_pairings.append(pairing)
            used.update((*pairing[0], *pairing[1]))
        for pairing in round_pairings:
            tracker.record(pairing)
            rounds.append((round_number, pairing))

    matches = number_matches(rounds)
    logger.info(
        "Generated %d balanced doubles matches over %d rounds; games per player %s",
        len(matches),
        max_rounds,
        dict(tracker.games),
    )
    return matches


def generate_round_robin_matches(
    player_ids: Sequence[str],
    match_format: MatchFormat | str,
    *,
    rng: random.Random | None = None,
    max_rounds: int | None = None,
    courts_available: int = 2,
) -> list[ScheduledMatch]:
    rng = rng or random.Random()
    match_format = MatchFormat(match_format)
    player_ids = require_entrants(player_ids, match_format, TournamentType.ROUND_ROBIN)
    if match_format is MatchFormat.SINGLES:
        return generate_singles_round_robin(player_ids, rng)
    if max_rounds:
        return generate_balanced_doubles_rounds(player_ids, max_rounds, courts_available, rng)
    return generate_partner_rotation(player_ids, rng)


__all__ = [
    "circle_rounds",
    "generate_balanced_doubles_rounds",
    "generate_partner_rotation",
    "generate_round_robin_matches",
    "generate_singles_round_robin",
]

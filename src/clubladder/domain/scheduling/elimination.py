"""First-round pairings for elimination brackets."""

from __future__ import annotations

from collections.abc import Sequence
import logging
import random

from clubladder.domain.scheduling.common import (
    MatchFormat,
    ScheduledMatch,
    TournamentType,
    number_matches,
    require_entrants,
    shuffled,
)

logger = logging.getLogger(__name__)


def generate_fixed_teams(player_ids: Sequence[str], rng: random.Random) -> list[tuple[str, str]]:
    """Fixed doubles teams from adjacent players of a shuffled order."""
    order = shuffled(player_ids, rng)
    return [(order[index], order[index + 1]) for index in range(0, len(order) - 1, 2)]


def generate_elimination_matches(
    player_ids: Sequence[str],
    match_format: MatchFormat | str,
    *,
    rng: random.Random | None = None,
    double_elimination: bool = False,
) -> list[ScheduledMatch]:
    """Round one of a bracket; later rounds are not generated.

    ``double_elimination`` is accepted for callers that record the bracket type
    and does not change the first round.
    """
    rng = rng or random.Random()
    match_format = MatchFormat(match_format)
    tournament_type = TournamentType.DOUBLE_ELIMINATION if double_elimination else TournamentType.SINGLE_ELIMINATION
    player_ids = require_entrants(player_ids, match_format, tournament_type)

    if match_format is MatchFormat.SINGLES:
        entrants: list[tuple[str, ...]] = [(player_id,) for player_id in shuffled(player_ids, rng)]
    else:
        entrants = list(generate_fixed_teams(player_ids, rng))
        rng.shuffle(entrants)

    matches = number_matches(
        (1, (entrants[index], entrants[index + 1])) for index in range(0, len(entrants) - 1, 2)
    )
    logger.info(
        "Generated %d first-round %s elimination matches (double=%s)",
        len(matches),
        match_format.value,
        double_elimination,
    )
    return matches


__all__ = ["generate_elimination_matches", "generate_fixed_teams"]

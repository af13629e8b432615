"""Shared types and fairness bookkeeping for match scheduling."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
import random

from clubladder.domain.validation import collect, require_valid

BOX_SIZE = 4


class MatchFormat(str, Enum):
    SINGLES = "singles"
    DOUBLES = "doubles"

    @property
    def team_size(self) -> int:
        return 1 if self is MatchFormat.SINGLES else 2


class TournamentType(str, Enum):
    ROUND_ROBIN = "round_robin"
    SINGLE_ELIMINATION = "single_elimination"
    DOUBLE_ELIMINATION = "double_elimination"
    BOX_ROTATION = "box_rotation"

    @property
    def is_elimination(self) -> bool:
        return self in (TournamentType.SINGLE_ELIMINATION, TournamentType.DOUBLE_ELIMINATION)


@dataclass(frozen=True)
class ScheduledMatch:
    """One pending match: a round number, a global match number and two teams."""

    round: int
    match_number: int
    team1_player_ids: tuple[str, ...]
    team2_player_ids: tuple[str, ...]

    @property
    def player1_id(self) -> str:
        return self.team1_player_ids[0]

    @property
    def player2_id(self) -> str:
        return self.team2_player_ids[0]

    @property
    def player_ids(self) -> tuple[str, ...]:
        return self.team1_player_ids + self.team2_player_ids


@dataclass(frozen=True)
class ScheduleConfig:
    player_ids: tuple[str, ...]
    match_format: MatchFormat | str
    tournament_type: TournamentType | str = TournamentType.ROUND_ROBIN
    max_rounds: int | None = None
    courts_available: int = 2


Pairing = tuple[tuple[str, ...], tuple[str, ...]]


def pair_key(first: str, second: str) -> tuple[str, str]:
    """Order-independent key for a partnership or an opposition."""
    return (first, second) if first <= second else (second, first)


def doubles_splits(players: Sequence[str]) -> list[Pairing]:
    """The three ways of splitting four players into two teams."""
    p1, p2, p3, p4 = players
    return [
        ((p1, p2), (p3, p4)),
        ((p1, p3), (p2, p4)),
        ((p1, p4), (p2, p3)),
    ]


@dataclass(frozen=True)
class FairnessWeights:
    """Base values and per-repeat penalties used to score candidate matches."""

    partnership_base: int
    partnership_penalty: int
    opposition_base: int
    opposition_penalty: int
    games_base: int
    games_penalty: int


BALANCED_ROUND_WEIGHTS = FairnessWeights(
    partnership_base=100,
    partnership_penalty=10,
    opposition_base=50,
    opposition_penalty=5,
    games_base=25,
    games_penalty=2,
)

QUICK_PLAY_WEIGHTS = FairnessWeights(
    partnership_base=100,
    partnership_penalty=15,
    opposition_base=50,
    opposition_penalty=10,
    games_base=30,
    games_penalty=3,
)


@dataclass
class FairnessTracker:
    """Running partnership, opposition and games-played counts."""

    games: Counter[str] = field(default_factory=Counter)
    partnerships: Counter[tuple[str, str]] = field(default_factory=Counter)
    oppositions: Counter[tuple[str, str]] = field(default_factory=Counter)

    @classmethod
    def from_matches(cls, matches: Iterable[Pairing | ScheduledMatch]) -> FairnessTracker:
        tracker = cls()
        for match in matches:
            tracker.record(match)
        return tracker

    def record(self, match: Pairing | ScheduledMatch) -> None:
        if isinstance(match, ScheduledMatch):
            team1, team2 = match.team1_player_ids, match.team2_player_ids
        else:
            team1, team2 = match
        for team in (team1, team2):
            for first, second in combinations(team, 2):
                self.partnerships[pair_key(first, second)] += 1
        for first in team1:
            for second in team2:
                self.oppositions[pair_key(first, second)] += 1
        self.games.update(team1)
        self.games.update(team2)

    def score_doubles(self, team1: Sequence[str], team2: Sequence[str], weights: FairnessWeights) -> int:
        score = 0
        for team in (team1, team2):
            score += weights.partnership_base - self.partnerships[pair_key(*team)] * weights.partnership_penalty
        for first in team1:
            for second in team2:
                score += weights.opposition_base - self.oppositions[pair_key(first, second)] * weights.opposition_penalty
        for player_id in (*team1, *team2):
            score += weights.games_base - self.games[player_id] * weights.games_penalty
        return score

    def score_singles(self, first: str, second: str) -> int:
        game_balance = 100 - self.games[first] * 5 - self.games[second] * 5
        opposition_diversity = 50 - self.oppositions[pair_key(first, second)] * 20
        return game_balance + opposition_diversity


def best_doubles_match(
    available: Sequence[str],
    tracker: FairnessTracker,
    weights: FairnessWeights,
) -> Pairing | None:
    """Highest-scoring split over every four-player combination; first seen wins ties."""
    best: Pairing | None = None
    best_score: int | None = None
    for players in combinations(available, 4):
        for team1, team2 in doubles_splits(players):
            score = tracker.score_doubles(team1, team2, weights)
            if best_score is None or score > best_score:
                best = (team1, team2)
                best_score = score
    return best


def best_singles_match(available: Sequence[str], tracker: FairnessTracker) -> Pairing | None:
    best: Pairing | None = None
    best_score: int | None = None
    for first, second in combinations(available, 2):
        score = tracker.score_singles(first, second)
        if best_score is None or score > best_score:
            best = ((first,), (second,))
            best_score = score
    return best


def entrant_errors(
    player_ids: Sequence[str],
    match_format: MatchFormat | None,
    tournament_type: TournamentType | None,
) -> list[str]:
    """Player-count and identity problems for one format and tournament type."""
    errors: list[str] = []
    count = len(player_ids)
    if count == 0:
        errors.append("at least one player is required")
    if any(not str(player_id).strip() for player_id in player_ids):
        errors.append("player ids must be non-empty")
    if len(set(player_ids)) != count:
        errors.append("player ids must be unique")

    if match_format is MatchFormat.SINGLES and count < 2:
        errors.append("singles needs at least 2 players")
    if match_format is MatchFormat.DOUBLES:
        if count < 4:
            errors.append("doubles needs at least 4 players")
        if count % 2:
            errors.append("doubles needs an even number of players")

    if tournament_type is not None and tournament_type.is_elimination:
        if match_format is MatchFormat.SINGLES and count % 2:
            errors.append("singles elimination needs an even number of players")
        if match_format is MatchFormat.DOUBLES and count % 4:
            errors.append("doubles elimination needs a multiple of 4 players")
    if tournament_type is TournamentType.BOX_ROTATION:
        if match_format is MatchFormat.SINGLES:
            errors.append("box rotation is played as doubles")
        if count % BOX_SIZE:
            errors.append(f"box rotation needs a multiple of {BOX_SIZE} players")
    return errors


def require_entrants(
    player_ids: Sequence[str],
    match_format: MatchFormat,
    tournament_type: TournamentType,
) -> tuple[str, ...]:
    """Return the players as a tuple or raise ValidationError listing every problem."""
    player_ids = tuple(player_ids)
    return require_valid(collect(player_ids, entrant_errors(player_ids, match_format, tournament_type)))


def shuffled(items: Iterable[str], rng: random.Random) -> list[str]:
    values = list(items)
    rng.shuffle(values)
    return values


def number_matches(rounds: Iterable[tuple[int, Pairing]], *, start: int = 1) -> list[ScheduledMatch]:
    """Assign consecutive match numbers across rounds."""
    return [
        ScheduledMatch(
            round=round_number,
            match_number=match_number,
            team1_player_ids=tuple(team1),
            team2_player_ids=tuple(team2),
        )
        for match_number, (round_number, (team1, team2)) in enumerate(rounds, start=start)
    ]


__all__ = [
    "BALANCED_ROUND_WEIGHTS",
    "BOX_SIZE",
    "FairnessTracker",
    "FairnessWeights",
    "MatchFormat",
    "Pairing",
    "QUICK_PLAY_WEIGHTS",
    "ScheduleConfig",
    "ScheduledMatch",
    "TournamentType",
    "best_doubles_match",
    "best_singles_match",
    "doubles_splits",
    "entrant_errors",
    "number_matches",
    "pair_key",
    "require_entrants",
    "shuffled",
]

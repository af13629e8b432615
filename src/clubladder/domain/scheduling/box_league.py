"""Box-league rotation: four-player boxes, standings and promotion/relegation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
import logging

from clubladder.domain.scheduling.common import BOX_SIZE, ScheduledMatch, number_matches
from clubladder.domain.validation import ValidationResult, collect

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Box:
    box_number: int
    player_ids: tuple[str, ...]


@dataclass(frozen=True)
class BoxMatch:
    box_number: int
    match: ScheduledMatch


@dataclass(frozen=True)
class WinLoss:
    wins: int = 0
    losses: int = 0

    def add(self, won: bool) -> WinLoss:
        if won:
            return replace(self, wins=self.wins + 1)
        return replace(self, losses=self.losses + 1)


@dataclass(frozen=True)
class BoxPlayerStats:
    """Cumulative results for one player within the current cycle."""

    player_id: str
    matches_played: int = 0
    matches_won: int = 0
    matches_lost: int = 0
    games_won: int = 0
    games_lost: int = 0
    points_for: int = 0
    points_against: int = 0
    total_points: int = 0
    partner_stats: Mapping[str, WinLoss] = field(default_factory=dict)
    opponent_stats: Mapping[str, WinLoss] = field(default_factory=dict)

    @property
    def points_difference(self) -> int:
        return self.points_for - self.points_against


@dataclass(frozen=True)
class BoxStanding:
    player_id: str
    position: int
    matches_played: int
    matches_won: int
    matches_lost: int
    games_won: int
    games_lost: int
    points_for: int
    points_against: int
    points_difference: int
    total_points: int


class MoveType(str, Enum):
    PROMOTION = "promotion"
    RELEGATION = "relegation"
    STAY = "stay"


@dataclass(frozen=True)
class PromotionMove:
    player_id: str
    from_box_number: int
    to_box_number: int
    move_type: MoveType
    reason: str


@dataclass(frozen=True)
class PromotionRelegationResult:
    moves: tuple[PromotionMove, ...]
    boxes: tuple[Box, ...]


def generate_box_pairings(player_ids: Sequence[str], *, round_number: int = 1) -> list[ScheduledMatch]:
    """The three box matches: every pair partners once and opposes twice."""
    if len(player_ids) != BOX_SIZE or len(set(player_ids)) != BOX_SIZE:
        raise ValueError(f"Box must contain exactly {BOX_SIZE} distinct players, got {list(player_ids)}")
    p1, p2, p3, p4 = player_ids
    return number_matches(
        [
            (round_number, ((p1, p2), (p3, p4))),
            (round_number, ((p1, p3), (p2, p4))),
            (round_number, ((p1, p4), (p2, p3))),
        ]
    )


def seed_boxes(players: Sequence[tuple[str, float]], box_size: int = BOX_SIZE) -> list[Box]:
    """Fill boxes from the highest rating down; box 1 holds the strongest players."""
    if not players or len(players) % box_size:
        raise ValueError(f"Box league needs a positive multiple of {box_size} players, got {len(players)}")
    ranked = sorted(players, key=lambda item: item[1], reverse=True)
    return [
        Box(
            box_number=index // box_size + 1,
            player_ids=tuple(player_id for player_id, _ in ranked[index : index + box_size]),
        )
        for index in range(0, len(ranked), box_size)
    ]


def generate_box_round(boxes: Sequence[Box], round_number: int) -> list[BoxMatch]:
    """All box matches for one round, numbered consecutively across boxes."""
    box_matches: list[BoxMatch] = []
    match_number = 1
    for box in sorted(boxes, key=lambda item: item.box_number):
        for pairing in generate_box_pairings(box.player_ids, round_number=round_number):
            box_matches.append(
                BoxMatch(box_number=box.box_number, match=replace(pairing, match_number=match_number))
            )
            match_number += 1
    logger.info("Generated %d box matches for round %d", len(box_matches), round_number)
    return box_matches


def record_box_result(
    stats: Mapping[str, BoxPlayerStats],
    match: ScheduledMatch,
    team1_score: int,
    team2_score: int,
) -> dict[str, BoxPlayerStats]:
    """Return updated stats for the four players of a completed box match."""
    if team1_score == team2_score:
        raise ValueError("Box league matches cannot end in a tie")

    winners = match.team1_player_ids if team1_score > team2_score else match.team2_player_ids
    updated = dict(stats)
    for team, opponents, points_for, points_against in (
        (match.team1_player_ids, match.team2_player_ids, team1_score, team2_score),
        (match.team2_player_ids, match.team1_player_ids, team2_score, team1_score),
    ):
        for player_id in team:
            current = updated.get(player_id, BoxPlayerStats(player_id=player_id))
            won = player_id in winners
            partner_stats = dict(current.partner_stats)
            for partner_id in team:
                if partner_id != player_id:
                    partner_stats[partner_id] = partner_stats.get(partner_id, WinLoss()).add(won)
            opponent_stats = dict(current.opponent_stats)
            for opponent_id in opponents:
                opponent_stats[opponent_id] = opponent_stats.get(opponent_id, WinLoss()).add(won)

            updated[player_id] = replace(
                current,
                matches_played=current.matches_played + 1,
                matches_won=current.matches_won + (1 if won else 0),
                matches_lost=current.matches_lost + (0 if won else 1),
                games_won=current.games_won + (1 if won else 0),
                games_lost=current.games_lost + (0 if won else 1),
                points_for=current.points_for + points_for,
                points_against=current.points_against + points_against,
                total_points=current.total_points + (1 if won else 0),
                partner_stats=partner_stats,
                opponent_stats=opponent_stats,
            )
    return updated


def calculate_box_standings(stats: Iterable[BoxPlayerStats]) -> list[BoxStanding]:
    """Rank a box by points, games won, point difference, then fewest games lost."""
    players = list(stats)
    if len(players) != BOX_SIZE:
        raise ValueError(f"Box must have exactly {BOX_SIZE} players, got {len(players)}")

    ranked = sorted(
        players,
        key=lambda item: (-item.total_points, -item.games_won, -item.points_difference, item.games_lost),
    )
    return [
        BoxStanding(
            player_id=item.player_id,
            position=position,
            matches_played=item.matches_played,
            matches_won=item.matches_won,
            matches_lost=item.matches_lost,
            games_won=item.games_won,
            games_lost=item.games_lost,
            points_for=item.points_for,
            points_against=item.points_against,
            points_difference=item.points_difference,
            total_points=item.total_points,
        )
        for position, item in enumerate(ranked, start=1)
    ]


def _ordinal(position: int) -> str:
    return {1: "1st", 2: "2nd", 3: "3rd"}.get(position, f"{position}th")


def calculate_promotion_relegation(
    boxes: Sequence[Box],
    standings_by_box: Mapping[int, Sequence[BoxStanding]],
) -> PromotionRelegationResult:
    """Move each box winner up and each box's last place down one box."""
    ordered = sorted(boxes, key=lambda item: item.box_number)
    members: dict[int, list[str]] = {box.box_number: list(box.player_ids) for box in ordered}
    moves: list[PromotionMove] = []

    for index, box in enumerate(ordered):
        standings = sorted(standings_by_box[box.box_number], key=lambda item: item.position)
        if len(standings) != BOX_SIZE:
            raise ValueError(f"Box {box.box_number} does not have exactly {BOX_SIZE} players")
        top, second, third, bottom = standings

        if index > 0:
            target = ordered[index - 1].box_number
            members[box.box_number].remove(top.player_id)
            members[target].append(top.player_id)
            moves.append(
                PromotionMove(
                    player_id=top.player_id,
                    from_box_number=box.box_number,
                    to_box_number=target,
                    move_type=MoveType.PROMOTION,
                    reason=f"Finished 1st in Box {box.box_number}",
                )
            )
        else:
            moves.append(
                PromotionMove(
                    player_id=top.player_id,
                    from_box_number=box.box_number,
                    to_box_number=box.box_number,
                    move_type=MoveType.STAY,
                    reason=f"Won Box {box.box_number} (top box)",
                )
            )

        if index < len(ordered) - 1:
            target = ordered[index + 1].box_number
            members[box.box_number].remove(bottom.player_id)
            members[target].append(bottom.player_id)
            moves.append(
                PromotionMove(
                    player_id=bottom.player_id,
                    from_box_number=box.box_number,
                    to_box_number=target,
                    move_type=MoveType.RELEGATION,
                    reason=f"Finished {_ordinal(bottom.position)} in Box {box.box_number}",
                )
            )
        else:
            moves.append(
                PromotionMove(
                    player_id=bottom.player_id,
                    from_box_number=box.box_number,
                    to_box_number=box.box_number,
                    move_type=MoveType.STAY,
                    reason="Bottom box (no relegation possible)",
                )
            )

        for standing in (second, third):
            moves.append(
                PromotionMove(
                    player_id=standing.player_id,
                    from_box_number=box.box_number,
                    to_box_number=box.box_number,
                    move_type=MoveType.STAY,
                    reason=f"Finished {_ordinal(standing.position)} in Box {box.box_number}",
                )
            )

    updated_boxes = tuple(Box(box_number=number, player_ids=tuple(ids)) for number, ids in members.items())
    logger.info(
        "Promotion/relegation: %d promoted, %d relegated",
        sum(1 for move in moves if move.move_type is MoveType.PROMOTION),
        sum(1 for move in moves if move.move_type is MoveType.RELEGATION),
    )
    return PromotionRelegationResult(moves=tuple(moves), boxes=updated_boxes)


def is_cycle_complete(current_round: int, rounds_per_cycle: int) -> bool:
    return current_round >= rounds_per_cycle


def check_ready_for_new_round(
    boxes: Sequence[Box],
    *,
    pending_match_count: int,
    current_round: int,
    rounds_per_cycle: int,
) -> ValidationResult[tuple[Box, ...]]:
    """Whether the league may start its next round; every blocking reason is reported."""
    reasons: list[str] = []
    if pending_match_count > 0:
        reasons.append(f"{pending_match_count} matches from the current round are still pending")
    if not boxes:
        reasons.append("No boxes found in league")
    for box in boxes:
        if len(box.player_ids) != BOX_SIZE:
            reasons.append(
                f"Box {box.box_number} has {len(box.player_ids)} players (needs exactly {BOX_SIZE})"
            )
    if is_cycle_complete(current_round, rounds_per_cycle):
        reasons.append(
            "Cycle is complete. Promotion/relegation must be performed before starting next cycle"
        )
    return collect(tuple(boxes), reasons)


__all__ = [
    "BOX_SIZE",
    "Box",
    "BoxMatch",
    "BoxPlayerStats",
    "BoxStanding",
    "MoveType",
    "PromotionMove",
    "PromotionRelegationResult",
    "WinLoss",
    "calculate_box_standings",
    "calculate_promotion_relegation",
    "check_ready_for_new_round",
    "generate_box_pairings",
    "generate_box_round",
    "is_cycle_complete",
    "record_box_result",
    "seed_boxes",
]

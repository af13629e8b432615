"""Match and round generation for tournaments, box leagues and quick play."""

from clubladder.domain.scheduling.box_league import (
    Box,
    BoxMatch,
    BoxPlayerStats,
    BoxStanding,
    MoveType,
    PromotionMove,
    PromotionRelegationResult,
    calculate_box_standings,
    calculate_promotion_relegation,
    check_ready_for_new_round,
    generate_box_pairings,
    generate_box_round,
    is_cycle_complete,
    record_box_result,
    seed_boxes,
)
from clubladder.domain.scheduling.common import (
    MatchFormat,
    ScheduleConfig,
    ScheduledMatch,
    TournamentType,
)
from clubladder.domain.scheduling.elimination import generate_elimination_matches
from clubladder.domain.scheduling.generator import (
    ScheduleSummary,
    estimate_duration_minutes,
    generate_matches,
    summarize_schedule,
    validate_schedule_config,
)
from clubladder.domain.scheduling.quick_play import (
    NextRound,
    calculate_max_unique_rounds,
    generate_next_round,
    generate_quick_play_rounds,
)
from clubladder.domain.scheduling.round_robin import generate_round_robin_matches

__all__ = [
    "Box",
    "BoxMatch",
    "BoxPlayerStats",
    "BoxStanding",
    "MatchFormat",
    "MoveType",
    "NextRound",
    "PromotionMove",
    "PromotionRelegationResult",
    "ScheduleConfig",
    "ScheduleSummary",
    "ScheduledMatch",
    "TournamentType",
    "calculate_box_standings",
    "calculate_max_unique_rounds",
    "calculate_promotion_relegation",
    "check_ready_for_new_round",
    "estimate_duration_minutes",
    "generate_box_pairings",
    "generate_box_round",
    "generate_elimination_matches",
    "generate_matches",
    "generate_next_round",
    "generate_quick_play_rounds",
    "generate_round_robin_matches",
    "is_cycle_complete",
    "record_box_result",
    "seed_boxes",
    "summarize_schedule",
    "validate_schedule_config",
]

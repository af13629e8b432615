"""Player rating engine, parameters and formula comparison."""

from clubladder.domain.ratings.calculator import (
    DEFAULT_PARAMETERS,
    LEGACY_PARAMETERS,
    PlayerRatingCalculator,
    RatingParameters,
    calculate_expected_score,
    calculate_margin_multiplier,
    calculate_performance_multiplier,
    calculate_team_rating,
    calculate_underdog_multiplier,
    compute_rating_update,
    parameters_for_version,
)
from clubladder.domain.ratings.common import (
    FormulaVersion,
    GameResult,
    GameType,
    PlayerOutcome,
    PlayerRatingChange,
    PlayerRecord,
    RatingUpdate,
)
from clubladder.domain.ratings.config import (
    RatingSystemConfig,
    find_rating_system,
    load_rating_system_configs,
)
from clubladder.domain.ratings.simulation import (
    FormulaComparison,
    FormulaComparisonRow,
    HistoricalGame,
    compare_formulas,
)
from clubladder.domain.ratings.validation import GameSubmission, validate_game_submission

__all__ = [
    "DEFAULT_PARAMETERS",
    "FormulaComparison",
    "FormulaComparisonRow",
    "FormulaVersion",
    "GameResult",
    "GameSubmission",
    "GameType",
    "HistoricalGame",
    "LEGACY_PARAMETERS",
    "PlayerOutcome",
    "PlayerRatingCalculator",
    "PlayerRatingChange",
    "PlayerRecord",
    "RatingParameters",
    "RatingSystemConfig",
    "RatingUpdate",
    "calculate_expected_score",
    "calculate_margin_multiplier",
    "calculate_performance_multiplier",
    "calculate_team_rating",
    "calculate_underdog_multiplier",
    "compare_formulas",
    "compute_rating_update",
    "find_rating_system",
    "load_rating_system_configs",
    "parameters_for_version",
    "validate_game_submission",
]

"""Database repository helpers."""

from clubladder.repositories.games import (
    count_games,
    insert_game,
    list_rating_changes,
    load_game_history,
    ratings_before,
    to_game_result,
)
from clubladder.repositories.players import (
    add_player,
    apply_record,
    find_player_by_name,
    get_players,
    reset_players,
    to_record,
    top_players,
    write_records,
)
from clubladder.repositories.rating_systems import upsert_rating_system
from clubladder.repositories.tournaments import (
    complete_tournament_match,
    get_tournament_match,
    insert_tournament,
    list_tournament_matches,
    mark_tournament_completed_if_done,
    to_scheduled_match,
)

__all__ = [
    "add_player",
    "apply_record",
    "complete_tournament_match",
    "count_games",
    "find_player_by_name",
    "get_players",
    "get_tournament_match",
    "insert_game",
    "insert_tournament",
    "list_rating_changes",
    "list_tournament_matches",
    "load_game_history",
    "mark_tournament_completed_if_done",
    "ratings_before",
    "reset_players",
    "to_game_result",
    "to_record",
    "to_scheduled_match",
    "top_players",
    "upsert_rating_system",
    "write_records",
]

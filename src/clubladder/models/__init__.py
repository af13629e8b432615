"""ORM models."""

from clubladder.models.base import Base
from clubladder.models.game import Game, GameRatingChange
from clubladder.models.player import Player
from clubladder.models.rating_system import RatingSystem
from clubladder.models.tournament import Tournament, TournamentMatch

__all__ = [
    "Base",
    "Game",
    "GameRatingChange",
    "Player",
    "RatingSystem",
    "Tournament",
    "TournamentMatch",
]

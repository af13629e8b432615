"""games and game_rating_changes table models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from clubladder.models.base import Base
from clubladder.models.player import new_id


class Game(Base):
    """One completed game; never updated after insert."""

    __tablename__ = "games"
    __table_args__ = (
        CheckConstraint("team1_score >= 0 AND team2_score >= 0", name="ck_games_scores"),
        Index("idx_games_played_at", "played_at"),
        Index("idx_games_tournament", "tournament_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    game_type: Mapped[str] = mapped_column(
        Enum("singles", "doubles", name="game_type", native_enum=False),
        nullable=False,
    )
    team1_player_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    team2_player_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    team1_score: Mapped[int] = mapped_column(Integer, nullable=False)
    team2_score: Mapped[int] = mapped_column(Integer, nullable=False)
    played_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    rating_snapshot: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    rating_system_id: Mapped[int | None] = mapped_column(ForeignKey("rating_systems.id"), nullable=True)
    tournament_id: Mapped[str | None] = mapped_column(ForeignKey("tournaments.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class GameRatingChange(Base):
    """Per-player rating change produced by one game."""

    __tablename__ = "game_rating_changes"
    __table_args__ = (
        UniqueConstraint("game_id", "player_id", name="uq_game_rating_changes_game_player"),
        CheckConstraint("team_number IN (1, 2)", name="ck_game_rating_changes_team_number"),
        CheckConstraint("actual_score IN (0.0, 0.5, 1.0)", name="ck_game_rating_changes_actual_score"),
        CheckConstraint(
            "expected_score >= 0.0 AND expected_score <= 1.0",
            name="ck_game_rating_changes_expected_score",
        ),
        Index("idx_game_rating_changes_player", "player_id", "game_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    game_id: Mapped[str] = mapped_column(ForeignKey("games.id"), nullable=False)
    player_id: Mapped[str] = mapped_column(ForeignKey("players.id"), nullable=False)
    team_number: Mapped[int] = mapped_column(Integer, nullable=False)
    won: Mapped[bool] = mapped_column(Boolean, nullable=False)
    drawn: Mapped[bool] = mapped_column(Boolean, nullable=False)
    expected_score: Mapped[float] = mapped_column(Float, nullable=False)
    actual_score: Mapped[float] = mapped_column(Float, nullable=False)
    pre_rating: Mapped[float] = mapped_column(Float, nullable=False)
    rating_delta: Mapped[float] = mapped_column(Float, nullable=False)
    post_rating: Mapped[float] = mapped_column(Float, nullable=False)
    margin_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    performance_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    underdog_multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

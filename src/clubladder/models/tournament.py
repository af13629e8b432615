"""tournaments and tournament_matches table models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
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


class Tournament(Base):
    __tablename__ = "tournaments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    match_format: Mapped[str] = mapped_column(
        Enum("singles", "doubles", name="match_format", native_enum=False),
        nullable=False,
    )
    tournament_type: Mapped[str] = mapped_column(
        Enum(
            "round_robin",
            "single_elimination",
            "double_elimination",
            "box_rotation",
            name="tournament_type",
            native_enum=False,
        ),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        Enum("active", "completed", name="tournament_status", native_enum=False),
        nullable=False,
        default="active",
    )
    player_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    max_rounds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    courts_available: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    estimated_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class TournamentMatch(Base):
    """A scheduled match; completed once a game is recorded against it."""

    __tablename__ = "tournament_matches"
    __table_args__ = (
        UniqueConstraint("tournament_id", "match_number", name="uq_tournament_matches_number"),
        Index("idx_tournament_matches_round", "tournament_id", "round"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[str] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    round: Mapped[int] = mapped_column(Integer, nullable=False)
    match_number: Mapped[int] = mapped_column(Integer, nullable=False)
    team1_player_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    team2_player_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(
        Enum("pending", "completed", name="tournament_match_status", native_enum=False),
        nullable=False,
        default="pending",
    )
    team1_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    team2_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    game_id: Mapped[str | None] = mapped_column(ForeignKey("games.id"), nullable=True)

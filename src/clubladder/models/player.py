"""players table model."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, Float, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from clubladder.models.base import Base


def new_id() -> str:
    return uuid4().hex


class Player(Base):
    """Current rating and cumulative counters; rewritten after every rated game."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("wins >= 0 AND losses >= 0 AND draws >= 0", name="ck_players_counters"),
        Index("idx_players_rating", "rating"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    wins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    losses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    draws: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_for: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    points_against: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def games_played(self) -> int:
        return self.wins + self.losses + self.draws

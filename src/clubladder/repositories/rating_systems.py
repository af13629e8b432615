"""Persistence helpers for rating system metadata."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from clubladder.models import RatingSystem


def upsert_rating_system(
    session: Session,
    *,
    name: str,
    description: str | None,
    config_json: dict[str, Any],
) -> RatingSystem:
    """Create or update one rating system definition."""
    system = session.execute(select(RatingSystem).where(RatingSystem.name == name)).scalar_one_or_none()
    if system is None:
        system = RatingSystem(name=name, description=description, config_json=config_json)
        session.add(system)
    else:
        system.description = description
        system.config_json = config_json
    session.flush()
    return system

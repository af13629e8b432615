#!/usr/bin/env python3
"""Record one completed game and apply its rating changes."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from clubladder.db import DEFAULT_DB_URL, create_db_engine, create_session_factory, ensure_schema
from clubladder.domain.pipeline import (
    MatchAlreadyCompletedError,
    MatchNotFoundError,
    MatchPlayersMismatchError,
    UnknownPlayerError,
    record_game,
)
from clubladder.domain.ratings import GameSubmission, GameType, find_rating_system
from clubladder.domain.validation import ValidationError
from clubladder.logging_config import configure_logging
from clubladder.repositories import find_player_by_name, get_players

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Record games against the club ladder.",
)


def _resolve_player_ids(session_factory, values: list[str]) -> tuple[str, ...]:
    """Accept either player ids or exact player names."""
    resolved: list[str] = []
    with session_factory() as session:
        known = get_players(session, values)
        for value in values:
            if value in known:
                resolved.append(value)
                continue
            player = find_player_by_name(session, value)
            resolved.append(player.id if player is not None else value)
    return tuple(resolved)


@app.command()
def record(
    game_type: Annotated[
        GameType,
        typer.Option("--type", help="Game type (singles, doubles)."),
    ],
    team1: Annotated[
        list[str],
        typer.Option("--team1", help="Team 1 player id or name; repeat for doubles."),
    ],
    team2: Annotated[
        list[str],
        typer.Option("--team2", help="Team 2 player id or name; repeat for doubles."),
    ],
    team1_score: Annotated[int, typer.Option("--team1-score", help="Points scored by team 1.")],
    team2_score: Annotated[int, typer.Option("--team2-score", help="Points scored by team 2.")],
    tournament_match_id: Annotated[
        int | None,
        typer.Option("--tournament-match-id", help="Scheduled tournament match this game completes."),
    ] = None,
    allow_draws: Annotated[
        bool,
        typer.Option("--allow-draws", help="Accept tied scores (quick play results)."),
    ] = False,
    system_name: Annotated[
        str,
        typer.Option("--system-name", help="Rating system name from the config directory."),
    ] = "club_default",
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of rating system TOML files."),
    ] = DEFAULT_CONFIG_DIR,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to a local SQLite file."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Validate, rate and store one game."""
    configure_logging()
    try:
        system = find_rating_system(config_dir, system_name)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--system-name") from exc

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    submission = GameSubmission(
        game_type=game_type,
        team1_player_ids=_resolve_player_ids(session_factory, team1),
        team2_player_ids=_resolve_player_ids(session_factory, team2),
        team1_score=team1_score,
        team2_score=team2_score,
    )
    try:
        recorded = record_game(
            session_factory,
            submission,
            system=system,
            allow_draws=allow_draws,
            tournament_match_id=tournament_match_id,
        )
    except (
        ValidationError,
        UnknownPlayerError,
        MatchNotFoundError,
        MatchAlreadyCompletedError,
        MatchPlayersMismatchError,
    ) as exc:
        raise typer.BadParameter(str(exc)) from exc

    typer.echo(
        f"game_id={recorded.game_id} type={recorded.update.game_type.value} "
        f"score={team1_score}-{team2_score} "
        f"team_ratings={recorded.update.team1_rating:.3f}/{recorded.update.team2_rating:.3f}"
    )
    for change in recorded.update.changes:
        typer.echo(
            f"  team={change.team_number} player={change.player_id} "
            f"{change.pre_rating:.3f} -> {change.post_rating:.3f} ({change.rating_delta:+.3f}) "
            f"margin={change.margin_multiplier:.3f} "
            f"performance={change.performance_multiplier:.3f} "
            f"underdog={change.underdog_multiplier:.3f}"
        )
    if recorded.tournament_completed:
        typer.echo("tournament completed")


if __name__ == "__main__":
    app()

#!/usr/bin/env python3
"""Add players and show the ladder."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer
from sqlalchemy.exc import IntegrityError

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from clubladder.db import DEFAULT_DB_URL, create_db_engine, create_session_factory, ensure_schema
from clubladder.domain.ratings import DEFAULT_PARAMETERS
from clubladder.logging_config import configure_logging
from clubladder.repositories import add_player, top_players

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Player management commands.",
)


@app.command()
def add(
    name: Annotated[str, typer.Argument(help="Unique player name.")],
    rating: Annotated[
        float,
        typer.Option("--rating", help="Starting rating."),
    ] = DEFAULT_PARAMETERS.default_rating,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to a local SQLite file."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Create a player at the starting rating."""
    configure_logging()
    if not DEFAULT_PARAMETERS.min_rating <= rating <= DEFAULT_PARAMETERS.max_rating:
        raise typer.BadParameter(
            f"--rating must be between {DEFAULT_PARAMETERS.min_rating} and {DEFAULT_PARAMETERS.max_rating}"
        )

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        try:
            player = add_player(session, name=name.strip(), rating=rating)
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise typer.BadParameter(f"A player named '{name}' already exists") from exc
    typer.echo(f"player_id={player.id} name={player.name} rating={player.rating:.3f}")


@app.command()
def top(
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to show."),
    ] = 20,
    min_games: Annotated[
        int,
        typer.Option("--min-games", help="Only show players with at least this many games."),
    ] = 0,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to a local SQLite file."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print the ladder ordered by rating."""
    configure_logging()
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")
    if min_games < 0:
        raise typer.BadParameter("--min-games must be >= 0")

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        players = top_players(session, limit=top_n, min_games=min_games)

    if not players:
        typer.echo("No players found.")
        return
    for index, player in enumerate(players, start=1):
        typer.echo(
            f"{index:2d}. {player.name:<24} rating={player.rating:6.3f} "
            f"W/L/D={player.wins}/{player.losses}/{player.draws} "
            f"points={player.points_for}-{player.points_against}"
        )


if __name__ == "__main__":
    app()

#!/usr/bin/env python3
"""Replay every stored game to recompute player ratings."""

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
from clubladder.domain.pipeline import replay_ratings
from clubladder.domain.ratings import find_rating_system
from clubladder.logging_config import configure_logging

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Rating history replay commands.",
)


@app.command()
def rebuild(
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
    write: Annotated[
        bool,
        typer.Option("--write", help="Overwrite player rows with the replayed ratings."),
    ] = False,
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of replayed ratings to print."),
    ] = 20,
) -> None:
    """Replay history under one rating system."""
    configure_logging()
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")
    try:
        system = find_rating_system(config_dir, system_name)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--system-name") from exc

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    summary = replay_ratings(
        create_session_factory(engine),
        system.parameters,
        write=write,
        echo=typer.echo,
    )

    prefix = "" if write else "[dry-run] "
    typer.echo(
        f"{prefix}system={system.name} config={system.file_path.name} "
        f"processed_games={summary.processed_games} tracked_players={summary.tracked_players}"
    )
    ranked = sorted(summary.ratings.items(), key=lambda item: item[1], reverse=True)[:top_n]
    for index, (player_id, rating) in enumerate(ranked, start=1):
        typer.echo(f"{index:2d}. {player_id:<32} rating={rating:6.3f}")


if __name__ == "__main__":
    app()

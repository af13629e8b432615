#!/usr/bin/env python3
"""Compare rating deltas of two rating systems over recent games."""

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
from clubladder.domain.ratings import HistoricalGame, compare_formulas, find_rating_system
from clubladder.logging_config import configure_logging
from clubladder.repositories import load_game_history, ratings_before, to_game_result

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Rating formula simulation commands.",
)


@app.command()
def compare(
    baseline: Annotated[
        str,
        typer.Option("--baseline", help="Baseline rating system name."),
    ] = "club_legacy",
    candidate: Annotated[
        str,
        typer.Option("--candidate", help="Candidate rating system name."),
    ] = "club_default",
    limit: Annotated[
        int,
        typer.Option("--limit", help="Number of most recent games to analyse."),
    ] = 20,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of rating system TOML files."),
    ] = DEFAULT_CONFIG_DIR,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to a local SQLite file."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print per-player deltas under both systems, using stored before-ratings."""
    configure_logging()
    if limit <= 0:
        raise typer.BadParameter("--limit must be greater than 0")
    try:
        baseline_system = find_rating_system(config_dir, baseline)
        candidate_system = find_rating_system(config_dir, candidate)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    engine = create_db_engine(db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        games = [
            HistoricalGame(game=to_game_result(game), ratings_before=ratings_before(game))
            for game in load_game_history(session, limit=limit, newest_first=True)
        ]

    if not games:
        typer.echo("No games found in database.")
        return

    comparison = compare_formulas(games, baseline_system.parameters, candidate_system.parameters)
    typer.echo(f"baseline={baseline_system.name} candidate={candidate_system.name} games={len(games)}")
    typer.echo(f"{'game':<12} {'player':<24} {'baseline':>9} {'candidate':>9} {'diff':>8}  notes")
    for row in comparison.rows:
        typer.echo(
            f"{row.game_id[:12]:<12} {row.player_id[:24]:<24} "
            f"{row.baseline_delta:+9.3f} {row.candidate_delta:+9.3f} {row.difference:+8.3f}  {row.note}"
        )
    typer.echo(
        f"games_analyzed={comparison.games_analyzed} games_skipped={comparison.games_skipped} "
        f"mean_abs_difference={comparison.mean_abs_difference:.4f} "
        f"max_abs_difference={comparison.max_abs_difference:.4f}"
    )


if __name__ == "__main__":
    app()

#!/usr/bin/env python3
"""Generate a tournament schedule and optionally store it."""

from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from clubladder.db import DEFAULT_DB_URL, create_db_engine, create_session_factory, ensure_schema
from clubladder.domain.pipeline import UnknownPlayerError, create_tournament
from clubladder.domain.scheduling import (
    MatchFormat,
    ScheduleConfig,
    ScheduledMatch,
    TournamentType,
    estimate_duration_minutes,
    generate_matches,
    summarize_schedule,
)
from clubladder.domain.validation import ValidationError
from clubladder.logging_config import configure_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Tournament schedule generation.",
)


def _render_match(match: ScheduledMatch) -> str:
    return (
        f"round={match.round:2d} match={match.match_number:3d} "
        f"{' + '.join(match.team1_player_ids)} vs {' + '.join(match.team2_player_ids)}"
    )


@app.command()
def create(
    players: Annotated[
        list[str],
        typer.Option("--player", help="Player id; repeat once per entrant."),
    ],
    match_format: Annotated[
        MatchFormat,
        typer.Option("--format", help="Match format (singles, doubles)."),
    ] = MatchFormat.DOUBLES,
    tournament_type: Annotated[
        TournamentType,
        typer.Option("--type", help="Tournament type."),
    ] = TournamentType.ROUND_ROBIN,
    max_rounds: Annotated[
        int | None,
        typer.Option("--max-rounds", help="Limit doubles round robin to this many rounds."),
    ] = None,
    courts: Annotated[
        int,
        typer.Option("--courts", help="Courts available per round (1-4)."),
    ] = 2,
    name: Annotated[
        str,
        typer.Option("--name", help="Tournament name when storing."),
    ] = "Club tournament",
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for a reproducible schedule."),
    ] = None,
    store: Annotated[
        bool,
        typer.Option("--store", help="Persist the tournament and its matches."),
    ] = False,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to a local SQLite file."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Print (and with --store, save) a generated schedule."""
    configure_logging()
    config = ScheduleConfig(
        player_ids=tuple(players),
        match_format=match_format,
        tournament_type=tournament_type,
        max_rounds=max_rounds,
        courts_available=courts,
    )
    rng = random.Random(seed)

    try:
        if store:
            engine = create_db_engine(db_url)
            ensure_schema(engine)
            created = create_tournament(create_session_factory(engine), name, config, rng=rng)
            matches = list(created.matches)
            typer.echo(f"tournament_id={created.tournament_id}")
        else:
            matches = generate_matches(config, rng=rng)
    except (ValidationError, UnknownPlayerError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    summary = summarize_schedule(matches)
    typer.echo(
        f"type={tournament_type.value} format={match_format.value} players={len(players)} "
        f"matches={summary.match_count} rounds={summary.round_count} "
        f"estimated_minutes={estimate_duration_minutes(config)}"
    )
    for match in matches:
        typer.echo(_render_match(match))
    typer.echo(
        "games_per_player: "
        + ", ".join(f"{player_id}={count}" for player_id, count in sorted(summary.games_per_player.items()))
    )


if __name__ == "__main__":
    app()

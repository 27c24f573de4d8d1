#!/usr/bin/env python3
"""
CLI for the Scorebook live scoring engine
"""
import json
import logging
import random

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from scorebook.config import settings
from scorebook.database import init_db, get_session
from scorebook.engine import create_match, decide_toss, start_match, apply, scorecard
from scorebook.engine.commands import command_from_dict
from scorebook.engine.errors import ScoringError
from scorebook.engine.state import MatchFormat
from scorebook.generators.roster_generator import RosterGenerator
from scorebook.store import MatchStore

console = Console()


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level):
    """Scorebook - Live Cricket Scoring"""
    logging.basicConfig(
        level=(log_level or settings.LOG_LEVEL).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.option("--overs", default=settings.DEFAULT_OVERS, help="Overs per innings")
@click.option("--team1", default=None, help="First team name (random franchise if omitted)")
@click.option("--team2", default=None, help="Second team name (random franchise if omitted)")
@click.option("--venue", default=None, help="Venue name")
@click.option("--seed", default=None, type=int, help="Seed for repeatable rosters")
def new_match(overs: int, team1, team2, venue, seed):
    """Create a demo match with generated rosters and a random toss"""
    if seed is not None:
        RosterGenerator.seed(seed)

    init_db()
    match_format = RosterGenerator.generate_format(overs=overs, team1_name=team1, team2_name=team2)
    winner = random.choice([match_format.team1_name, match_format.team2_name])
    decision = random.choice(["bat", "bowl"])

    try:
        state = create_match(match_format, decide_toss(match_format, winner, decision))
    except ScoringError as e:
        console.print(f"[red]{e.detail}[/red]")
        return

    session = get_session()
    try:
        row = MatchStore(session).create(state, venue=venue)
        match_id = row.id
    finally:
        session.close()

    for team, roster in (
        (match_format.team1_name, match_format.team1_roster),
        (match_format.team2_name, match_format.team2_roster),
    ):
        table = Table(title=team)
        table.add_column("ID", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("Role", style="magenta")
        for p in roster:
            table.add_row(str(p.id), p.name, p.role.value)
        console.print(table)

    console.print(Panel(
        f"[bold]Match {match_id}[/bold]: {match_format.team1_name} vs {match_format.team2_name}, "
        f"{overs} overs\n{winner} won the toss and chose to {decision}"
    ))


@cli.command()
@click.argument("script", type=click.File("r"))
@click.option("--save/--no-save", default=False, help="Persist the replayed match")
@click.option("--commentary", "show_commentary", default=10, help="Number of commentary lines to show")
def replay(script, save: bool, show_commentary: int):
    """
    Replay a JSON scoring script.

    The script holds "format" (overs_per_innings, team names and rosters),
    "toss" (winner, decision), "openers", "bowler" and a list of "commands".
    """
    data = json.load(script)
    try:
        match_format = MatchFormat.from_dict(data["format"])
        toss = decide_toss(match_format, data["toss"]["winner"], data["toss"]["decision"])
        state = create_match(match_format, toss)
        openers, bowler = tuple(data["openers"]), data["bowler"]
    except KeyError as e:
        console.print(f"[red]Script is missing {e.args[0]!r}[/red]")
        raise SystemExit(1)
    except ScoringError as e:
        console.print(f"[red]Invalid match setup: {e.detail}[/red]")
        raise SystemExit(1)

    result = start_match(state, openers, bowler)
    if not result.ok:
        console.print(f"[red]Could not start match: {result.error.detail}[/red]")
        raise SystemExit(1)
    state = result.state

    for number, raw in enumerate(data.get("commands", []), start=1):
        try:
            cmd = command_from_dict(raw)
        except ScoringError as e:
            console.print(f"[red]Command {number}: {e.detail}[/red]")
            raise SystemExit(1)
        result = apply(state, cmd)
        if not result.ok:
            console.print(f"[red]Command {number} ({raw.get('type')}) rejected: {result.error.code}: {result.error.detail}[/red]")
            break
        state = result.state

    _print_scorecard(scorecard(state))

    if show_commentary:
        console.print("\n[bold]Commentary:[/bold]")
        for entry in state.commentary_feed[:show_commentary]:
            prefix = f"{entry.over}.{entry.ball} " if entry.is_ball_event else ""
            console.print(f"  {prefix}{entry.text}")

    if save:
        init_db()
        session = get_session()
        try:
            row = MatchStore(session).create(state)
            console.print(f"\n[green]Saved as match {row.id}[/green]")
        finally:
            session.close()


@cli.command(name="scorecard")
@click.argument("match_id", type=int)
def show_scorecard(match_id: int):
    """Print the scorecard of a stored match"""
    session = get_session()
    try:
        state, version = MatchStore(session).load(match_id)
    except ScoringError as e:
        console.print(f"[red]{e.detail}[/red]")
        return
    finally:
        session.close()

    console.print(f"[dim]Match {match_id} (version {version})[/dim]")
    _print_scorecard(scorecard(state))


def _print_scorecard(card: dict):
    """Print both innings of a scorecard dict"""
    console.print(Panel(f"[bold]{card['team1']} vs {card['team2']}[/bold] ({card['status']})"))

    for innings in card["innings"]:
        extras = innings["extras"]
        console.print(
            f"\n[bold]{innings['batting_team']}[/bold] {innings['runs']}/{innings['wickets']} "
            f"({innings['overs']} overs) - RR: {innings['run_rate']}"
        )

        bat_table = Table(title="Batting")
        bat_table.add_column("Batter", style="cyan")
        bat_table.add_column("Dismissal")
        bat_table.add_column("R", justify="right")
        bat_table.add_column("B", justify="right")
        bat_table.add_column("4s", justify="right")
        bat_table.add_column("6s", justify="right")
        bat_table.add_column("SR", justify="right")
        for row in innings["batting"]:
            bat_table.add_row(
                row["name"],
                row["dismissal"],
                str(row["runs"]),
                str(row["balls"]),
                str(row["fours"]),
                str(row["sixes"]),
                f"{row['strike_rate']:.1f}",
            )
        console.print(bat_table)
        console.print(
            f"Extras: {extras['total']} (w {extras['wides']}, nb {extras['no_balls']}, "
            f"b {extras['byes']}, lb {extras['leg_byes']})"
        )

        bowl_table = Table(title="Bowling")
        bowl_table.add_column("Bowler", style="magenta")
        bowl_table.add_column("O", justify="right")
        bowl_table.add_column("M", justify="right")
        bowl_table.add_column("R", justify="right")
        bowl_table.add_column("W", justify="right")
        bowl_table.add_column("Econ", justify="right")
        for row in innings["bowling"]:
            bowl_table.add_row(
                row["name"],
                row["overs"],
                str(row["maidens"]),
                str(row["runs"]),
                str(row["wickets"]),
                f"{row['economy']:.1f}",
            )
        console.print(bowl_table)

    if card["target"] is not None:
        console.print(f"\n[cyan]Target:[/cyan] {card['target']}")
    if card["result"]:
        console.print(f"[bold green]{card['result']['summary']}[/bold green]")
    if card["player_of_match"]:
        console.print(f"[cyan]Player of the match:[/cyan] {card['player_of_match']['name']}")


if __name__ == "__main__":
    cli()

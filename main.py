"""
HoopsDay — operator CLI.

Usage:
    uv run python main.py status
    uv run python main.py import
    uv run python main.py walk-in "Jordan Smith" --category middle-school
    uv run python main.py assign --auto
    uv run python main.py generate
    uv run python main.py score 3 21 17
    uv run python main.py standings

Wires together:
    config → snapshot store → session → state machine → Rich display

Each command loads the saved tournament, applies one operation and saves
the result.  Rejected operations print the reason and exit with status 1
without touching the saved snapshot.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from pathlib import Path

from hoopsday.cli import display
from hoopsday.cli.display import console
from hoopsday.config import Config, load_config
from hoopsday.session import TournamentSession
from hoopsday.sources import create_roster_source
from hoopsday.store import SnapshotStore
from hoopsday.tournament.errors import (
    ExternalFailure,
    InconsistentStateError,
    TournamentError,
)
from hoopsday.tournament.export import export_filename, export_json, summarize
from hoopsday.tournament.progression import STEPS, TournamentStateMachine
from hoopsday.tournament.schedule import estimate_duration


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hoopsday",
        description="Run a single-day 3-on-3 basketball tournament.",
    )
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show progress and which steps are available")

    step = sub.add_parser(
        "step",
        help="Check whether a workflow step is reachable; the next run resumes from saved progress",
    )
    step.add_argument("step", choices=STEPS)

    sub.add_parser("import", help="Import approved players from the roster source")
    clear = sub.add_parser("clear-imported", help="Drop imported players, teams and games")
    clear.add_argument("--yes", action="store_true", help="Confirm the irreversible clear")

    sub.add_parser("roster", help="List participants")

    walk_in = sub.add_parser("walk-in", help="Register a walk-in player")
    walk_in.add_argument("name")
    walk_in.add_argument(
        "--category",
        choices=["middle-school", "high-school-adult"],
        default="high-school-adult",
    )
    walk_in.add_argument("--grade")
    walk_in.add_argument("--phone")

    edit = sub.add_parser("edit-player", help="Correct an unassigned player's details")
    edit.add_argument("player_id")
    edit.add_argument("--name")
    edit.add_argument("--category", choices=["middle-school", "high-school-adult"])
    edit.add_argument("--grade")
    edit.add_argument("--phone")

    remove = sub.add_parser("remove-player", help="Remove an unassigned player")
    remove.add_argument("player_id")

    assign = sub.add_parser("assign", help="Assign players to teams")
    assign.add_argument("--auto", action="store_true", help="Shuffle and deal the whole roster")
    assign.add_argument("--seed", type=int, help="Random seed for --auto")
    assign.add_argument("player_id", nargs="?")
    assign.add_argument("team_id", nargs="?")

    unassign = sub.add_parser("unassign", help="Return a player to the unassigned pool")
    unassign.add_argument("player_id")
    unassign.add_argument("team_id")

    sub.add_parser("teams", help="List teams and unassigned players")

    new_team = sub.add_parser("new-team", help="Create an empty team")
    new_team.add_argument("name", nargs="?")

    rename = sub.add_parser("rename-team", help="Rename a team")
    rename.add_argument("team_id")
    rename.add_argument("name")

    delete = sub.add_parser("delete-team", help="Delete a team; its players return to the pool")
    delete.add_argument("team_id")

    sub.add_parser("reset-teams", help="Delete every team")

    sub.add_parser("generate", help="Generate the round-robin schedule")
    clear_games = sub.add_parser("clear-games", help="Delete the schedule and all results")
    clear_games.add_argument("--yes", action="store_true", help="Confirm the irreversible clear")

    sub.add_parser("schedule", help="Show the schedule")

    start = sub.add_parser("start", help="Mark a game as in progress")
    start.add_argument("game", help="Game number or id")

    score = sub.add_parser("score", help="Record a final score")
    score.add_argument("game", help="Game number or id")
    score.add_argument("score_a", type=int)
    score.add_argument("score_b", type=int)

    standings = sub.add_parser("standings", help="Show standings")
    standings.add_argument(
        "--shared-ranks",
        action="store_true",
        help="Give teams level on every tie-break the same rank",
    )

    export = sub.add_parser("export", help="Write the results JSON")
    export.add_argument("--out", type=Path, help="Output file (default tournament-results-<date>.json)")

    settings = sub.add_parser("settings", help="Change tournament settings (before games exist)")
    settings.add_argument("--courts", type=int, dest="court_count")
    settings.add_argument("--game-length", type=int, dest="game_length")
    settings.add_argument("--max-players", type=int, dest="max_players_per_team")
    settings.add_argument("--min-players", type=int, dest="min_players_per_team")
    walk_ins = settings.add_mutually_exclusive_group()
    walk_ins.add_argument("--allow-walk-ins", action="store_true", dest="allow_walk_ins", default=None)
    walk_ins.add_argument("--no-walk-ins", action="store_false", dest="allow_walk_ins")

    return parser


def resolve_game_id(machine: TournamentStateMachine, ref: str) -> str:
    """Accept either a game number ("3") or a game id ("game-3")."""
    if ref.isdigit():
        for game in machine.data.games:
            if game.game_number == int(ref):
                return game.id
    return ref


async def run_command(args: argparse.Namespace, session: TournamentSession) -> None:
    match args.command:
        case "status":
            display.show_progress(session.data, session.machine.step)

        case "step":
            step = session.machine.go_to(args.step)
            console.print(f"[green]✓[/] [bold]{step}[/] is reachable from the saved tournament")

        case "import":
            added = await session.import_roster()
            console.print(f"[green]✓[/] Imported [bold]{added}[/] player(s)")
            display.show_roster(session.data)

        case "clear-imported":
            _require_confirmation(args, "clear-imported")
            await session.run(lambda m: m.clear_imported())
            console.print("[green]✓[/] Imported players, teams and games cleared")

        case "roster":
            display.show_roster(session.data)

        case "walk-in":
            await session.run(
                lambda m: m.add_walk_in(args.name, args.category, args.grade, args.phone)
            )
            player = session.data.participants[-1]
            console.print(f"[green]✓[/] Registered [bold]{player.name}[/] [dim]({player.id})[/]")

        case "edit-player":
            changes = {
                key: value
                for key, value in (
                    ("name", args.name),
                    ("age_category", args.category),
                    ("grade_level", args.grade),
                    ("phone", args.phone),
                )
                if value is not None
            }
            await session.run(lambda m: m.update_participant(args.player_id, **changes))
            console.print(f"[green]✓[/] Updated {args.player_id}")

        case "remove-player":
            await session.run(lambda m: m.remove_participant(args.player_id))
            console.print(f"[green]✓[/] Removed {args.player_id}")

        case "assign":
            if args.auto:
                rng = random.Random(args.seed) if args.seed is not None else None
                await session.run(lambda m: m.assign_automatic(rng))
            elif args.player_id and args.team_id:
                await session.run(lambda m: m.assign_player(args.team_id, args.player_id))
            else:
                raise SystemExit("assign: pass --auto or PLAYER_ID TEAM_ID")
            display.show_teams(session.data)

        case "unassign":
            await session.run(lambda m: m.unassign_player(args.team_id, args.player_id))
            display.show_teams(session.data)

        case "teams":
            display.show_teams(session.data)

        case "new-team":
            await session.run(lambda m: m.create_team(args.name))
            display.show_teams(session.data)

        case "rename-team":
            await session.run(lambda m: m.rename_team(args.team_id, args.name))
            display.show_teams(session.data)

        case "delete-team":
            await session.run(lambda m: m.delete_team(args.team_id))
            display.show_teams(session.data)

        case "reset-teams":
            await session.run(lambda m: m.reset_assignments())
            console.print("[green]✓[/] All teams removed")

        case "generate":
            await session.run(lambda m: m.generate_schedule())
            data = session.data
            display.show_schedule(data, estimate_duration(len(data.teams), data.settings))

        case "clear-games":
            _require_confirmation(args, "clear-games")
            await session.run(lambda m: m.clear_schedule())
            console.print("[green]✓[/] Schedule and results cleared")

        case "schedule":
            data = session.data
            display.show_schedule(data, estimate_duration(len(data.teams), data.settings))

        case "start":
            await session.run(lambda m: m.start_game(resolve_game_id(m, args.game)))
            display.show_schedule(session.data)

        case "score":
            await session.run(
                lambda m: m.submit_score(resolve_game_id(m, args.game), args.score_a, args.score_b)
            )
            display.show_standings(session.machine.standings())
            if session.machine.is_complete:
                display.show_summary(summarize(session.data))

        case "standings":
            ranking = "competition" if args.shared_ranks else "ordinal"
            display.show_standings(session.machine.standings(ranking))
            display.show_summary(summarize(session.data))

        case "export":
            session.machine.go_to("tournament-results")
            out = args.out or Path(export_filename(session.data))
            out.write_text(export_json(session.data), encoding="utf-8")
            console.print(f"[green]✓[/] Results written to [bold]{out}[/]")

        case "settings":
            changes = {
                key: getattr(args, key)
                for key in (
                    "court_count",
                    "game_length",
                    "max_players_per_team",
                    "min_players_per_team",
                    "allow_walk_ins",
                )
                if getattr(args, key) is not None
            }
            await session.run(lambda m: m.update_settings(**changes))
            console.print(f"[green]✓[/] Settings: {session.data.settings}")


def _require_confirmation(args: argparse.Namespace, command: str) -> None:
    if not args.yes:
        raise InconsistentStateError(
            f"{command} cannot be undone. Re-run with --yes to confirm."
        )


def open_session(config: Config) -> TournamentSession:
    return TournamentSession(
        store=SnapshotStore(config.storage_path),
        config=config,
        roster_source=create_roster_source(config.roster),
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    try:
        config = load_config(args.config, missing_ok=True)
    except ValueError as exc:
        console.print(f"[red]Config error:[/] {exc}")
        return 1

    try:
        session = open_session(config)
        asyncio.run(run_command(args, session))
    except ExternalFailure as exc:
        console.print(f"[red]External failure:[/] {exc}")
        return 1
    except InconsistentStateError as exc:
        console.print(f"[yellow]Refused:[/] {exc}")
        return 1
    except TournamentError as exc:
        console.print(f"[red]Rejected:[/] {exc}")
        return 1
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

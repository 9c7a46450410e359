"""
Rich-based rendering of tournament state for the operator CLI.

Every function takes a TournamentData (or derived values) and prints to
the shared console; nothing here mutates state.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from hoopsday.tournament.base import Standing, TournamentData, team_names, unassigned_players
from hoopsday.tournament.export import TournamentSummary
from hoopsday.tournament.progression import STEPS, STEP_GUARDS, TournamentStep
from hoopsday.tournament.schedule import ScheduleEstimate

console = Console(legacy_windows=False)

_STATUS_STYLES = {
    "scheduled": "dim",
    "in-progress": "bold yellow",
    "completed": "green",
}


def show_progress(data: TournamentData, current: TournamentStep) -> None:
    games_done = sum(1 for g in data.games if g.status == "completed")
    console.print()
    console.print(
        Panel(
            f"[bold]{data.name}[/]  [dim]{data.date}[/]\n\n"
            f"{len(data.participants)} players  •  {len(data.teams)} teams  •  "
            f"{games_done}/{len(data.games)} games complete\n"
            f"[dim]Status: {data.status}  •  "
            f"Last saved {data.last_modified.strftime('%H:%M:%S')}[/]",
            title="[bold green] Tournament [/]",
            border_style="green",
            expand=False,
        )
    )

    table = Table(show_header=True, header_style="bold", border_style="dim")
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Step", min_width=22)
    table.add_column("Available", justify="center")

    for i, step in enumerate(STEPS, 1):
        available = STEP_GUARDS[step](data)
        marker = "[bold bright_blue]▶ [/]" if step == current else "  "
        table.add_row(
            str(i),
            f"{marker}{step}",
            "[green]✓[/]" if available else "[dim]–[/]",
        )
    console.print(table)


def show_roster(data: TournamentData) -> None:
    table = Table(
        title=f"Participants ({len(data.participants)})",
        show_header=True,
        header_style="bold",
        border_style="dim",
    )
    table.add_column("ID", style="dim")
    table.add_column("Name", min_width=20)
    table.add_column("Category")
    table.add_column("Grade", justify="center")
    table.add_column("Walk-in", justify="center")
    table.add_column("Team")

    team_of = {p.id: t.name for t in data.teams for p in t.players}
    for p in data.participants:
        table.add_row(
            p.id,
            p.name,
            p.age_category,
            p.grade_level or "",
            "✓" if p.is_walk_in else "",
            team_of.get(p.id, "[dim]unassigned[/]"),
        )
    console.print()
    console.print(table)


def show_teams(data: TournamentData) -> None:
    console.print()
    for team in data.teams:
        names = ", ".join(p.name for p in team.players) or "[dim]no players[/]"
        console.print(
            f"[bold {team.color}]■[/] [bold]{team.name}[/] [dim]({team.id}, "
            f"{len(team.players)}/{data.settings.max_players_per_team})[/]  {names}"
        )

    pool = unassigned_players(data)
    if pool:
        console.print(
            f"\n[yellow]Unassigned ({len(pool)}):[/] "
            + ", ".join(f"{p.name} [dim]({p.id})[/]" for p in pool)
        )


def show_schedule(data: TournamentData, estimate: ScheduleEstimate | None = None) -> None:
    names = team_names(data)
    table = Table(
        title="Schedule",
        show_header=True,
        header_style="bold",
        border_style="dim",
    )
    table.add_column("Game", style="dim", width=5, justify="right")
    table.add_column("Time", width=9)
    table.add_column("Court", justify="center", width=5)
    table.add_column("Team A", min_width=14)
    table.add_column("", width=7, justify="center")
    table.add_column("Team B", min_width=14)
    table.add_column("Status")

    for g in data.games:
        score = f"{g.score_a}-{g.score_b}" if g.status == "completed" else "vs"
        team_a = names.get(g.team_a, g.team_a)
        team_b = names.get(g.team_b, g.team_b)
        if g.winner == g.team_a:
            team_a = f"[bold]{team_a}[/]"
        elif g.winner == g.team_b:
            team_b = f"[bold]{team_b}[/]"
        table.add_row(
            str(g.game_number),
            g.scheduled_time,
            str(g.court),
            team_a,
            score,
            team_b,
            f"[{_STATUS_STYLES[g.status]}]{g.status}[/]",
        )

    console.print()
    console.print(table)
    if estimate is not None:
        console.print(
            f"  [dim]{estimate.total_games} games in {estimate.total_slots} slot(s) • "
            f"{estimate.hours}h {estimate.minutes}m • "
            f"estimated finish {estimate.finish_time}[/]"
        )


def show_standings(standings: list[Standing], title: str = "Standings") -> None:
    table = Table(
        title=title,
        show_header=True,
        header_style="bold",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("#", style="dim", width=3, justify="right")
    table.add_column("Team", min_width=16)
    table.add_column("W", justify="center", width=4)
    table.add_column("L", justify="center", width=4)
    table.add_column("PF", justify="right", width=5)
    table.add_column("PA", justify="right", width=5)
    table.add_column("Diff", justify="right", width=5)
    table.add_column("Win %", justify="right", width=6)

    for s in standings:
        style = "bold yellow" if s.rank == 1 and s.wins + s.losses > 0 else ""
        table.add_row(
            str(s.rank),
            s.team.name,
            str(s.wins),
            str(s.losses),
            str(s.points_for),
            str(s.points_against),
            f"{s.point_differential:+d}",
            f"{s.win_percentage * 100:.0f}%",
            style=style,
        )

    console.print()
    console.print(table)


def show_summary(summary: TournamentSummary) -> None:
    if summary.champion:
        console.print()
        console.print(
            Panel(
                f"[bold yellow]★  {summary.champion}[/]",
                title="[bold green] Tournament Champion [/]",
                border_style="yellow",
                expand=False,
            )
        )
    console.print(
        f"  [dim]{summary.completed_games}/{summary.total_games} games played • "
        f"average score {summary.average_score:.1f}[/]"
    )

"""
Tournament data model — shared types for every core operation.

Everything here is a frozen dataclass with tuple-valued collections, so a
TournamentData snapshot can be passed around freely: operations never
mutate their input, they return a new snapshot built with
dataclasses.replace().  Entities refer to each other by id (games name
teams by id, winners are team ids); a Team holds the Player objects it
was dealt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

AgeCategory = Literal["middle-school", "high-school-adult"]
GameStatus = Literal["scheduled", "in-progress", "completed"]
TournamentStyle = Literal["round-robin"]
TournamentStatus = Literal[
    "setup",
    "registration",
    "teams-assigned",
    "brackets-generated",
    "in-progress",
    "completed",
]

AGE_CATEGORIES: tuple[AgeCategory, ...] = ("middle-school", "high-school-adult")
TOURNAMENT_STYLES: tuple[TournamentStyle, ...] = ("round-robin",)


@dataclass(frozen=True)
class Player:
    """A participant, either imported from registrations or a walk-in."""

    id: str
    name: str
    age_category: AgeCategory = "high-school-adult"
    grade_level: str | None = None
    phone: str | None = None
    is_walk_in: bool = False
    registered_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    color: str
    players: tuple[Player, ...] = ()
    wins: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0

    @property
    def player_ids(self) -> set[str]:
        return {p.id for p in self.players}


@dataclass(frozen=True)
class Game:
    """One round-robin pairing.  team_a / team_b / winner are team ids."""

    id: str
    round: int
    game_number: int
    team_a: str
    team_b: str
    court: int
    scheduled_time: str
    status: GameStatus = "scheduled"
    score_a: int | None = None
    score_b: int | None = None
    winner: str | None = None   # None on a tie or before completion
    completed_at: datetime | None = None


@dataclass(frozen=True)
class TournamentSettings:
    court_count: int = 2
    game_length: int = 15   # minutes
    max_players_per_team: int = 4
    min_players_per_team: int = 3
    tournament_style: TournamentStyle = "round-robin"
    allow_walk_ins: bool = True


@dataclass(frozen=True)
class TournamentData:
    """The aggregate root: the only unit of persistence."""

    id: str
    name: str
    date: str
    status: TournamentStatus = "setup"
    participants: tuple[Player, ...] = ()
    teams: tuple[Team, ...] = ()
    games: tuple[Game, ...] = ()
    settings: TournamentSettings = field(default_factory=TournamentSettings)
    created_at: datetime = field(default_factory=datetime.now)
    last_modified: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Standing:
    """A team's derived ranking record.  Never stored."""

    team: Team
    wins: int
    losses: int
    points_for: int
    points_against: int
    point_differential: int
    win_percentage: float
    rank: int


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def new_tournament(
    name: str = "3-on-3 Basketball Tournament",
    date: str | None = None,
    settings: TournamentSettings | None = None,
    now: datetime | None = None,
) -> TournamentData:
    """Create an empty tournament in the "setup" state."""
    now = now or datetime.now()
    return TournamentData(
        id=f"tournament-{int(now.timestamp() * 1000)}",
        name=name,
        date=date or now.date().isoformat(),
        settings=settings or TournamentSettings(),
        created_at=now,
        last_modified=now,
    )


def assigned_player_ids(data: TournamentData) -> set[str]:
    return {p.id for team in data.teams for p in team.players}


def unassigned_players(data: TournamentData) -> tuple[Player, ...]:
    """Participants not currently on any team, in roster order."""
    assigned = assigned_player_ids(data)
    return tuple(p for p in data.participants if p.id not in assigned)


def find_player(data: TournamentData, player_id: str) -> Player | None:
    return next((p for p in data.participants if p.id == player_id), None)


def team_by_id(data: TournamentData, team_id: str) -> Team | None:
    return next((t for t in data.teams if t.id == team_id), None)


def team_names(data: TournamentData) -> dict[str, str]:
    """Map team id → display name."""
    return {t.id: t.name for t in data.teams}


def replace_team(teams: tuple[Team, ...], updated: Team) -> tuple[Team, ...]:
    return tuple(updated if t.id == updated.id else t for t in teams)


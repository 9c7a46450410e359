"""
Team assignment engine.

Automatic mode:
- Shuffle the whole roster uniformly (Fisher–Yates via random.shuffle).
- Create ceil(players / 4) teams.
- Deal players round-robin by index: players[i] → teams[i % team_count],
  so team sizes differ by at most one.

Manual mode moves one player at a time between the unassigned pool and a
team, refusing to overfill a team.

Changing who plays for whom makes an existing schedule stale, so every
membership change drops generated games (or refuses once play started).
"""

from __future__ import annotations

import logging
import math
import random
import uuid
from dataclasses import replace

from hoopsday.tournament.base import (
    Team,
    TournamentData,
    TournamentSettings,
    find_player,
    replace_team,
    team_by_id,
)
from hoopsday.tournament.errors import NotFoundError, ValidationError
from hoopsday.tournament.snapshot import invalidate_schedule, refresh

logger = logging.getLogger(__name__)

TARGET_TEAM_SIZE = 4

TEAM_COLORS = (
    "#EF4444",  # red
    "#3B82F6",  # blue
    "#10B981",  # green
    "#F59E0B",  # amber
    "#8B5CF6",  # purple
    "#EC4899",  # pink
    "#F97316",  # orange
    "#06B6D4",  # cyan
)

TEAM_NAMES = (
    "Lightning", "Thunder", "Storm", "Blaze",
    "Wolves", "Eagles", "Panthers", "Hawks",
)


# ------------------------------------------------------------------ #
# Automatic assignment                                                #
# ------------------------------------------------------------------ #

def assign_automatic(data: TournamentData, rng: random.Random | None = None) -> TournamentData:
    """Replace all teams with a fresh, evenly dealt set built from the full roster."""
    players = list(data.participants)
    if not players:
        raise ValidationError("No participants to assign.")

    data = invalidate_schedule(data, "reassign teams")
    (rng or random.Random()).shuffle(players)

    team_count = math.ceil(len(players) / TARGET_TEAM_SIZE)
    rosters: list[list] = [[] for _ in range(team_count)]
    for i, player in enumerate(players):
        rosters[i % team_count].append(player)

    teams = tuple(
        replace(_new_team(i), players=tuple(roster))
        for i, roster in enumerate(rosters)
    )
    logger.info(
        "Auto-assigned %d players into %d teams (sizes %s)",
        len(players), team_count, [len(t.players) for t in teams],
    )
    return refresh(replace(data, teams=teams))


# ------------------------------------------------------------------ #
# Manual assignment                                                   #
# ------------------------------------------------------------------ #

def assign_player(data: TournamentData, team_id: str, player_id: str) -> TournamentData:
    """Move a player onto a team, from the pool or from another team."""
    target = _require_team(data, team_id)
    player = find_player(data, player_id)
    if player is None:
        raise NotFoundError(f"Unknown player: {player_id!r}")
    if player_id in target.player_ids:
        return data
    if len(target.players) >= data.settings.max_players_per_team:
        raise ValidationError(
            f"{target.name} is full ({data.settings.max_players_per_team} players max)."
        )

    data = invalidate_schedule(data, "change team rosters")
    teams = tuple(
        replace(t, players=t.players + (player,))
        if t.id == team_id
        else replace(t, players=tuple(p for p in t.players if p.id != player_id))
        for t in data.teams
    )
    logger.info("%s assigned to %s", player.name, target.name)
    return refresh(replace(data, teams=teams))


def unassign_player(data: TournamentData, team_id: str, player_id: str) -> TournamentData:
    """Return a player from a team to the unassigned pool."""
    team = _require_team(data, team_id)
    if player_id not in team.player_ids:
        raise NotFoundError(f"Player {player_id!r} is not on {team.name}.")

    data = invalidate_schedule(data, "change team rosters")
    updated = replace(team, players=tuple(p for p in team.players if p.id != player_id))
    logger.info("Player %s removed from %s", player_id, team.name)
    return refresh(replace(data, teams=replace_team(data.teams, updated)))


def create_team(data: TournamentData, name: str | None = None) -> TournamentData:
    """Add an empty team, named and colored from the next palette slot."""
    data = invalidate_schedule(data, "add a team")
    team = _new_team(len(data.teams))
    if name and name.strip():
        team = replace(team, name=name.strip())
    logger.info("Team created: %s", team.name)
    return refresh(replace(data, teams=data.teams + (team,)))


def rename_team(data: TournamentData, team_id: str, name: str) -> TournamentData:
    team = _require_team(data, team_id)
    name = name.strip()
    if not name:
        raise ValidationError("Team name is required.")
    return refresh(replace(data, teams=replace_team(data.teams, replace(team, name=name))))


def delete_team(data: TournamentData, team_id: str) -> TournamentData:
    """Delete a team; its players go back to the unassigned pool."""
    team = _require_team(data, team_id)
    data = invalidate_schedule(data, "delete a team")
    logger.info("Team %s deleted; %d player(s) returned to the pool", team.name, len(team.players))
    return refresh(replace(data, teams=tuple(t for t in data.teams if t.id != team_id)))


def reset_assignments(data: TournamentData) -> TournamentData:
    """Remove every team, returning all players to the pool."""
    data = invalidate_schedule(data, "reset team assignments")
    return refresh(replace(data, teams=()))


# ------------------------------------------------------------------ #
# Invariants                                                          #
# ------------------------------------------------------------------ #

def validate_teams(teams: tuple[Team, ...], settings: TournamentSettings) -> None:
    """
    Check the teams are ready to be scheduled.

    Raises:
        ValidationError: fewer than 2 teams, or a team outside
                         [min_players_per_team, max_players_per_team].
    """
    if len(teams) < 2:
        raise ValidationError(
            f"At least 2 teams are required to schedule games, got {len(teams)}."
        )
    low, high = settings.min_players_per_team, settings.max_players_per_team
    for team in teams:
        if not low <= len(team.players) <= high:
            raise ValidationError(
                f"{team.name} has {len(team.players)} player(s); "
                f"teams need between {low} and {high}."
            )


# ------------------------------------------------------------------ #
# Helpers                                                             #
# ------------------------------------------------------------------ #

def _new_team(index: int) -> Team:
    return Team(
        id=f"team-{uuid.uuid4().hex[:12]}",
        name=TEAM_NAMES[index] if index < len(TEAM_NAMES) else f"Team {index + 1}",
        color=TEAM_COLORS[index % len(TEAM_COLORS)],
    )


def _require_team(data: TournamentData, team_id: str) -> Team:
    team = team_by_id(data, team_id)
    if team is None:
        raise NotFoundError(f"Unknown team: {team_id!r}")
    return team

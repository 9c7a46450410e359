"""
Tournament package — the core of a single-day 3-on-3 tournament.

TournamentStateMachine is the entry point for operator workflows; the
modules below it are plain functions over an immutable TournamentData:

  roster.py       participants (imports + walk-ins)
  teams.py        team assignment, automatic or manual
  schedule.py     round-robin game generation with courts and times
  scoring.py      live game state, scores, standings
  export.py       read-only results projection
"""

from __future__ import annotations

from hoopsday.tournament.base import (
    Game,
    Player,
    Standing,
    Team,
    TournamentData,
    TournamentSettings,
    new_tournament,
    unassigned_players,
)
from hoopsday.tournament.errors import (
    ExternalFailure,
    InconsistentStateError,
    NotFoundError,
    TournamentError,
    ValidationError,
)
from hoopsday.tournament.progression import (
    STEPS,
    TournamentStateMachine,
    TournamentStep,
    available_steps,
    can_go_to_step,
    resume_step,
)
from hoopsday.tournament.schedule import estimate_duration, generate_schedule
from hoopsday.tournament.scoring import compute_standings, is_complete, submit_score, start_game

__all__ = [
    # Data model
    "Game",
    "Player",
    "Standing",
    "Team",
    "TournamentData",
    "TournamentSettings",
    "new_tournament",
    "unassigned_players",
    # Errors
    "ExternalFailure",
    "InconsistentStateError",
    "NotFoundError",
    "TournamentError",
    "ValidationError",
    # Progression
    "STEPS",
    "TournamentStateMachine",
    "TournamentStep",
    "available_steps",
    "can_go_to_step",
    "resume_step",
    # Scheduling & scoring
    "compute_standings",
    "estimate_duration",
    "generate_schedule",
    "is_complete",
    "start_game",
    "submit_score",
]

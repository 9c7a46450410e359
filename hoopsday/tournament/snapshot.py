"""
Snapshot lifecycle helpers shared by every mutating operation.

refresh() is applied to each new snapshot before it is handed back, so
TournamentData.status always reflects the data it sits next to and can
never be set independently.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from hoopsday.tournament.base import TournamentData, TournamentStatus
from hoopsday.tournament.errors import InconsistentStateError
from hoopsday.tournament.scoring import is_complete, recompute_team_stats

logger = logging.getLogger(__name__)


def derive_status(data: TournamentData) -> TournamentStatus:
    """Project the furthest stage the data has reached."""
    if is_complete(data.games):
        return "completed"
    if any(g.status != "scheduled" for g in data.games):
        return "in-progress"
    if data.games:
        return "brackets-generated"
    if data.teams:
        return "teams-assigned"
    if data.participants:
        return "registration"
    return "setup"


def refresh(data: TournamentData, now: datetime | None = None) -> TournamentData:
    return replace(data, status=derive_status(data), last_modified=now or datetime.now())


def has_started_games(data: TournamentData) -> bool:
    return any(g.status != "scheduled" for g in data.games)


def invalidate_schedule(data: TournamentData, action: str) -> TournamentData:
    """
    Drop a generated schedule ahead of a change that would make it stale.

    Only allowed while every game is still "scheduled"; once play has
    started the caller has to clear the games explicitly first.
    """
    if not data.games:
        return data
    if has_started_games(data):
        raise InconsistentStateError(
            f"Cannot {action}: games have already started. "
            "Clear the schedule first."
        )
    logger.info("Schedule of %d games invalidated by: %s", len(data.games), action)
    return replace(data, games=(), teams=recompute_team_stats(data.teams, ()))

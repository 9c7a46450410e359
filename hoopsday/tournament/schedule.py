"""
Round-robin scheduler.

Every team plays every other team exactly once: for i < j the pair
(teams[i], teams[j]) is emitted in order, giving n(n-1)/2 games numbered
from 1 in emission order.

Courts and times:
- court = ((game_number - 1) % court_count) + 1, so consecutive games
  interleave across courts.
- Games are grouped into slots of court_count simultaneous games;
  slot = (game_number - 1) // court_count.
- A slot lasts game_length + 5 minutes (5 minute changeover), starting
  at 08:00, so no two games on one court overlap.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta

from hoopsday.tournament.base import Game, Team, TournamentData, TournamentSettings
from hoopsday.tournament.errors import InconsistentStateError
from hoopsday.tournament.scoring import recompute_team_stats
from hoopsday.tournament.snapshot import has_started_games, refresh
from hoopsday.tournament.teams import validate_teams

logger = logging.getLogger(__name__)

TOURNAMENT_START = time(8, 0)
BUFFER_MINUTES = 5


@dataclass(frozen=True)
class ScheduleEstimate:
    total_games: int
    total_slots: int
    total_minutes: int
    finish_time: str

    @property
    def hours(self) -> int:
        return self.total_minutes // 60

    @property
    def minutes(self) -> int:
        return self.total_minutes % 60


def generate_schedule(teams: tuple[Team, ...], settings: TournamentSettings) -> tuple[Game, ...]:
    """
    Build the full round-robin game list.  Pure and deterministic given the
    team order.

    Raises:
        ValidationError: fewer than 2 teams or a team of invalid size.
    """
    validate_teams(teams, settings)

    games: list[Game] = []
    game_number = 1
    for i in range(len(teams)):
        for j in range(i + 1, len(teams)):
            games.append(
                Game(
                    id=f"game-{game_number}",
                    round=1,  # a single round-robin is one round
                    game_number=game_number,
                    team_a=teams[i].id,
                    team_b=teams[j].id,
                    court=court_for(game_number, settings.court_count),
                    scheduled_time=scheduled_time_for(game_number, settings),
                )
            )
            game_number += 1
    return tuple(games)


def regenerate(data: TournamentData) -> TournamentData:
    """
    Replace the schedule with a freshly generated one.

    Raises:
        InconsistentStateError: a game has already started or finished.
        ValidationError:        the teams are not ready to be scheduled.
    """
    if has_started_games(data):
        raise InconsistentStateError(
            "Cannot regenerate the schedule once games have started. "
            "Clear the schedule first."
        )
    games = generate_schedule(data.teams, data.settings)
    logger.info(
        "Generated %d games for %d teams on %d court(s)",
        len(games), len(data.teams), data.settings.court_count,
    )
    return refresh(
        replace(data, games=games, teams=recompute_team_stats(data.teams, games))
    )


def clear_schedule(data: TournamentData) -> TournamentData:
    """Drop every game and its results.  Irreversible."""
    if data.games:
        logger.warning(
            "Clearing schedule: %d game(s), %d completed",
            len(data.games),
            sum(1 for g in data.games if g.status == "completed"),
        )
    return refresh(replace(data, games=(), teams=recompute_team_stats(data.teams, ())))


def estimate_duration(team_count: int, settings: TournamentSettings) -> ScheduleEstimate:
    """Estimated length of a round-robin for team_count teams."""
    total_games = team_count * (team_count - 1) // 2 if team_count > 1 else 0
    total_slots = math.ceil(total_games / settings.court_count)
    total_minutes = total_slots * (settings.game_length + BUFFER_MINUTES)
    return ScheduleEstimate(
        total_games=total_games,
        total_slots=total_slots,
        total_minutes=total_minutes,
        finish_time=_format_clock(total_minutes),
    )


def court_for(game_number: int, court_count: int) -> int:
    return ((game_number - 1) % court_count) + 1


def scheduled_time_for(game_number: int, settings: TournamentSettings) -> str:
    slot = (game_number - 1) // settings.court_count
    return _format_clock(slot * (settings.game_length + BUFFER_MINUTES))


def _format_clock(minutes_after_start: int) -> str:
    """Format start + offset as a 12-hour clock time, e.g. "8:20 AM"."""
    start = datetime.combine(datetime.min.date(), TOURNAMENT_START)
    moment = start + timedelta(minutes=minutes_after_start)
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"

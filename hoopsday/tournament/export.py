"""
Results export — a read-only JSON projection of a tournament.

The document keeps the camelCase layout of the results download handed
to organisers:

    {
      "tournament":     {name, date, completedAt},
      "finalStandings": [{rank, team, wins, losses, pointsFor, ...}],
      "games":          [{gameNumber, teamA, teamB, scoreA, scoreB, ...}],
      "teams":          [{name, players: [{name, ageCategory, ...}]}]
    }

Teams are referred to by name, not id.  Nothing here touches the
snapshot; every value is derived from TournamentData.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime

from hoopsday.tournament.base import TournamentData, team_names
from hoopsday.tournament.scoring import RankingMode, compute_standings


@dataclass(frozen=True)
class TournamentSummary:
    total_games: int
    completed_games: int
    remaining_games: int
    average_score: float      # points per team per completed game
    champion: str | None      # set once every game is completed


def export_results(
    data: TournamentData,
    now: datetime | None = None,
    ranking: RankingMode = "ordinal",
) -> dict:
    names = team_names(data)
    standings = compute_standings(data.teams, data.games, ranking)
    return {
        "tournament": {
            "name": data.name,
            "date": data.date,
            "completedAt": (now or datetime.now()).isoformat(),
        },
        "finalStandings": [
            {
                "rank": s.rank,
                "team": s.team.name,
                "wins": s.wins,
                "losses": s.losses,
                "pointsFor": s.points_for,
                "pointsAgainst": s.points_against,
                "pointDifferential": s.point_differential,
                "winPercentage": round(s.win_percentage * 100),
            }
            for s in standings
        ],
        "games": [
            {
                "gameNumber": g.game_number,
                "teamA": names.get(g.team_a),
                "teamB": names.get(g.team_b),
                "scoreA": g.score_a,
                "scoreB": g.score_b,
                "winner": names.get(g.winner) if g.winner else None,
                "court": g.court,
                "scheduledTime": g.scheduled_time,
                "status": g.status,
            }
            for g in data.games
        ],
        "teams": [
            {
                "name": team.name,
                "players": [
                    {
                        "name": p.name,
                        "gradeLevel": p.grade_level,
                        "ageCategory": p.age_category,
                        "isWalkIn": p.is_walk_in,
                    }
                    for p in team.players
                ],
            }
            for team in data.teams
        ],
    }


def export_json(data: TournamentData, now: datetime | None = None) -> str:
    return json.dumps(export_results(data, now=now), indent=2)


def export_filename(data: TournamentData) -> str:
    return f"tournament-results-{data.date}.json"


def summarize(data: TournamentData) -> TournamentSummary:
    completed = [g for g in data.games if g.status == "completed"]
    total_points = sum((g.score_a or 0) + (g.score_b or 0) for g in completed)
    champion = None
    if completed and len(completed) == len(data.games):
        champion = compute_standings(data.teams, data.games)[0].team.name
    return TournamentSummary(
        total_games=len(data.games),
        completed_games=len(completed),
        remaining_games=len(data.games) - len(completed),
        average_score=total_points / (len(completed) * 2) if completed else 0.0,
        champion=champion,
    )

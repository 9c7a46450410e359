"""
Score and standings engine.

Team stats are never updated incrementally: every score submission
re-tallies all completed games from scratch, so submitting the same final
score twice leaves teams and games exactly as one submission would.

Standings are derived on demand from teams + games and never stored.

Tie-breaks, in order (all descending):
  1. wins
  2. point differential
  3. points scored
Teams level on all three keep their input order (stable sort).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Literal

from hoopsday.tournament.base import Game, Standing, Team
from hoopsday.tournament.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

RankingMode = Literal["ordinal", "competition"]


@dataclass
class _Tally:
    wins: int = 0
    losses: int = 0
    points_for: int = 0
    points_against: int = 0


# ------------------------------------------------------------------ #
# Game state                                                          #
# ------------------------------------------------------------------ #

def start_game(games: tuple[Game, ...], game_id: str) -> tuple[Game, ...]:
    """Move a game from scheduled to in-progress.  No-op if already running."""
    game = _find_game(games, game_id)
    if game.status == "in-progress":
        return games
    if game.status == "completed":
        raise ValidationError(f"Game {game.game_number} is already completed.")

    logger.info("Game %d started (court %d)", game.game_number, game.court)
    return _replace_game(games, replace(game, status="in-progress"))


def submit_score(
    games: tuple[Game, ...],
    teams: tuple[Team, ...],
    game_id: str,
    score_a: int,
    score_b: int,
    now: datetime | None = None,
) -> tuple[tuple[Game, ...], tuple[Team, ...]]:
    """
    Record a final score and recompute every team's stats.

    A game may be scored straight from "scheduled" or from "in-progress".
    Scoring a completed game again with a different result is a
    correction; with the same result it changes nothing.

    Raises:
        ValidationError: negative or non-integer score.
        NotFoundError:   unknown game id.
    """
    for label, score in (("score_a", score_a), ("score_b", score_b)):
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValidationError(f"{label} must be an integer, got {score!r}")
        if score < 0:
            raise ValidationError(f"{label} cannot be negative, got {score}")

    game = _find_game(games, game_id)
    if game.status == "completed" and (game.score_a, game.score_b) == (score_a, score_b):
        return games, teams

    if score_a > score_b:
        winner: str | None = game.team_a
    elif score_b > score_a:
        winner = game.team_b
    else:
        winner = None  # ties are legal and recorded without a winner

    if game.status == "completed":
        logger.info(
            "Game %d corrected: %d-%d → %d-%d",
            game.game_number, game.score_a, game.score_b, score_a, score_b,
        )
    else:
        logger.info("Game %d final: %d-%d", game.game_number, score_a, score_b)

    updated_games = _replace_game(
        games,
        replace(
            game,
            status="completed",
            score_a=score_a,
            score_b=score_b,
            winner=winner,
            completed_at=now or datetime.now(),
        ),
    )
    return updated_games, recompute_team_stats(teams, updated_games)


def is_complete(games: tuple[Game, ...]) -> bool:
    """True once a schedule exists and every game in it is completed."""
    return bool(games) and all(g.status == "completed" for g in games)


# ------------------------------------------------------------------ #
# Team stats & standings                                              #
# ------------------------------------------------------------------ #

def recompute_team_stats(teams: tuple[Team, ...], games: tuple[Game, ...]) -> tuple[Team, ...]:
    """Return teams with wins/losses/points re-tallied from completed games."""
    tallies = _tally(teams, games)
    return tuple(
        replace(
            team,
            wins=tallies[team.id].wins,
            losses=tallies[team.id].losses,
            points_for=tallies[team.id].points_for,
            points_against=tallies[team.id].points_against,
        )
        for team in teams
    )


def compute_standings(
    teams: tuple[Team, ...],
    games: tuple[Game, ...],
    ranking: RankingMode = "ordinal",
) -> list[Standing]:
    """
    Build the sorted standings table.

    ranking="ordinal" numbers teams 1..n in sorted order even when they are
    level on every tie-break.  ranking="competition" gives such teams the
    same rank and skips the following numbers (1, 1, 3).
    """
    tallies = _tally(teams, games)
    rows = []
    for team in teams:
        t = tallies[team.id]
        played = t.wins + t.losses
        rows.append(
            Standing(
                team=team,
                wins=t.wins,
                losses=t.losses,
                points_for=t.points_for,
                points_against=t.points_against,
                point_differential=t.points_for - t.points_against,
                win_percentage=t.wins / played if played > 0 else 0.0,
                rank=0,
            )
        )

    rows.sort(key=_sort_key)

    standings: list[Standing] = []
    for i, row in enumerate(rows):
        rank = i + 1
        if (
            ranking == "competition"
            and standings
            and _sort_key(standings[-1]) == _sort_key(row)
        ):
            rank = standings[-1].rank
        standings.append(replace(row, rank=rank))
    return standings


def _sort_key(s: Standing) -> tuple[int, int, int]:
    return (-s.wins, -s.point_differential, -s.points_for)


def _tally(teams: tuple[Team, ...], games: tuple[Game, ...]) -> dict[str, _Tally]:
    tallies = {team.id: _Tally() for team in teams}
    for game in games:
        if game.status != "completed":
            continue
        a = tallies.get(game.team_a)
        b = tallies.get(game.team_b)
        if a is None or b is None:
            logger.warning("Game %s references an unknown team; skipped", game.id)
            continue

        score_a = game.score_a or 0
        score_b = game.score_b or 0
        a.points_for += score_a
        a.points_against += score_b
        b.points_for += score_b
        b.points_against += score_a

        if game.winner == game.team_a:
            a.wins += 1
            b.losses += 1
        elif game.winner == game.team_b:
            b.wins += 1
            a.losses += 1
    return tallies


# ------------------------------------------------------------------ #
# Internal helpers                                                    #
# ------------------------------------------------------------------ #

def _find_game(games: tuple[Game, ...], game_id: str) -> Game:
    for game in games:
        if game.id == game_id:
            return game
    raise NotFoundError(f"Unknown game: {game_id!r}")


def _replace_game(games: tuple[Game, ...], updated: Game) -> tuple[Game, ...]:
    return tuple(updated if g.id == updated.id else g for g in games)

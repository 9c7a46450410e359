"""
Tests for standings — tie-break order, ranking modes and the four-team
scenario played end to end.
"""

from __future__ import annotations

from datetime import datetime

from hoopsday.tournament.base import Game, Player, Team, TournamentSettings
from hoopsday.tournament.schedule import generate_schedule
from hoopsday.tournament.scoring import compute_standings, submit_score

NOW = datetime(2026, 10, 24, 12, 0)


def make_team(name: str) -> Team:
    players = tuple(Player(id=f"{name}{i}", name=f"{name} {i}") for i in range(3))
    return Team(id=f"team-{name}", name=name, color="#000000", players=players)


def result(game_id: str, team_a: str, team_b: str, score_a: int, score_b: int) -> Game:
    """A completed game between two team ids."""
    if score_a > score_b:
        winner = team_a
    elif score_b > score_a:
        winner = team_b
    else:
        winner = None
    return Game(
        id=game_id,
        round=1,
        game_number=int(game_id.split("-")[1]),
        team_a=team_a,
        team_b=team_b,
        court=1,
        scheduled_time="8:00 AM",
        status="completed",
        score_a=score_a,
        score_b=score_b,
        winner=winner,
        completed_at=NOW,
    )


def play_scenario() -> tuple[tuple[Team, ...], tuple[Game, ...]]:
    teams = tuple(make_team(n) for n in "ABCD")
    games = generate_schedule(teams, TournamentSettings(court_count=2))
    scores = [(21, 15), (18, 20), (21, 19), (15, 21), (21, 10), (19, 21)]
    for game, (a, b) in zip(games, scores):
        games, teams = submit_score(games, teams, game.id, a, b, now=NOW)
    return teams, games


class TestTieBreaks:
    def test_wins_then_differential(self):
        # A: 3 wins +10, B: 3 wins +5, C: 2 wins +20
        a, b, c, d, e, f = (make_team(n) for n in "ABCDEF")
        teams = (c, b, a, d, e, f)
        games = (
            result("game-1", a.id, d.id, 20, 18),
            result("game-2", a.id, e.id, 20, 16),
            result("game-3", a.id, f.id, 20, 16),
            result("game-4", b.id, d.id, 20, 19),
            result("game-5", b.id, e.id, 20, 18),
            result("game-6", b.id, f.id, 20, 18),
            result("game-7", c.id, d.id, 20, 10),
            result("game-8", c.id, e.id, 21, 10),
            result("game-9", c.id, f.id, 10, 11),
        )
        standings = compute_standings(teams, games)
        top = [(s.team.name, s.wins, s.point_differential) for s in standings[:3]]
        assert top == [("A", 3, 10), ("B", 3, 5), ("C", 2, 20)]

    def test_points_for_breaks_equal_differential(self):
        a, b, c = (make_team(n) for n in "ABC")
        games = (
            result("game-1", a.id, c.id, 30, 25),
            result("game-2", b.id, c.id, 15, 10),
        )
        standings = compute_standings((b, a, c), games)
        assert [s.team.name for s in standings] == ["A", "B", "C"]

    def test_level_teams_keep_input_order(self):
        a, b = make_team("A"), make_team("B")
        assert [s.team.name for s in compute_standings((b, a), ())] == ["B", "A"]

    def test_deterministic(self):
        teams, games = play_scenario()
        assert compute_standings(teams, games) == compute_standings(teams, games)

    def test_only_completed_games_count(self):
        a, b = make_team("A"), make_team("B")
        pending = Game(
            id="game-1", round=1, game_number=1, team_a=a.id, team_b=b.id,
            court=1, scheduled_time="8:00 AM", status="in-progress",
        )
        standings = compute_standings((a, b), (pending,))
        assert all(s.wins == 0 and s.points_for == 0 for s in standings)

    def test_win_percentage(self):
        teams, games = play_scenario()
        by_name = {s.team.name: s for s in compute_standings(teams, games)}
        assert by_name["A"].win_percentage == 2 / 3
        assert by_name["D"].win_percentage == 1 / 3

    def test_win_percentage_zero_before_play(self):
        standings = compute_standings((make_team("A"), make_team("B")), ())
        assert all(s.win_percentage == 0.0 for s in standings)


class TestScenario:
    def test_final_order(self):
        teams, games = play_scenario()
        standings = compute_standings(teams, games)
        rows = [
            (s.rank, s.team.name, s.wins, s.losses, s.point_differential, s.points_for)
            for s in standings
        ]
        assert rows == [
            (1, "A", 2, 1, 6, 60),
            (2, "C", 2, 1, 6, 60),
            (3, "B", 1, 2, -1, 51),
            (4, "D", 1, 2, -11, 50),
        ]

    def test_ordinal_ranks_are_strict(self):
        teams, games = play_scenario()
        assert [s.rank for s in compute_standings(teams, games)] == [1, 2, 3, 4]

    def test_competition_ranks_share_level_teams(self):
        teams, games = play_scenario()
        standings = compute_standings(teams, games, ranking="competition")
        assert [(s.team.name, s.rank) for s in standings] == [
            ("A", 1), ("C", 1), ("B", 3), ("D", 4),
        ]

    def test_team_stats_match_standings(self):
        teams, games = play_scenario()
        for s in compute_standings(teams, games):
            assert (s.team.wins, s.team.losses) == (s.wins, s.losses)
            assert s.team.points_for == s.points_for
            assert s.team.points_against == s.points_against

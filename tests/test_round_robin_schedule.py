"""
Tests for the round-robin scheduler — pairings, court interleaving, slot
times and the duration estimate.
"""

from __future__ import annotations

from itertools import combinations

import pytest

from hoopsday.tournament.base import Player, Team, TournamentSettings
from hoopsday.tournament.errors import ValidationError
from hoopsday.tournament.schedule import (
    court_for,
    estimate_duration,
    generate_schedule,
    scheduled_time_for,
)


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def make_team(name: str, size: int = 3) -> Team:
    players = tuple(Player(id=f"{name}-p{i}", name=f"{name} Player {i}") for i in range(size))
    return Team(id=f"team-{name}", name=name, color="#000000", players=players)


def make_teams(n: int, size: int = 3) -> tuple[Team, ...]:
    return tuple(make_team(chr(ord("A") + i), size) for i in range(n))


# --------------------------------------------------------------------------- #
# Pairings                                                                     #
# --------------------------------------------------------------------------- #

class TestPairings:
    @pytest.mark.parametrize("n", [2, 3, 4, 5, 8])
    def test_every_pair_plays_exactly_once(self, n):
        teams = make_teams(n)
        games = generate_schedule(teams, TournamentSettings())

        assert len(games) == n * (n - 1) // 2
        pairs = [frozenset((g.team_a, g.team_b)) for g in games]
        expected = {frozenset((a.id, b.id)) for a, b in combinations(teams, 2)}
        assert set(pairs) == expected
        assert len(pairs) == len(set(pairs))

    def test_no_team_plays_itself(self):
        for game in generate_schedule(make_teams(5), TournamentSettings()):
            assert game.team_a != game.team_b

    def test_games_numbered_from_one_in_emission_order(self):
        games = generate_schedule(make_teams(4), TournamentSettings())
        assert [g.game_number for g in games] == [1, 2, 3, 4, 5, 6]
        assert [g.id for g in games] == [f"game-{i}" for i in range(1, 7)]
        assert all(g.round == 1 for g in games)
        assert all(g.status == "scheduled" for g in games)

    def test_pairs_emitted_in_team_order(self):
        teams = make_teams(4)
        games = generate_schedule(teams, TournamentSettings())
        ids = [t.id for t in teams]
        assert [(g.team_a, g.team_b) for g in games] == [
            (ids[0], ids[1]),
            (ids[0], ids[2]),
            (ids[0], ids[3]),
            (ids[1], ids[2]),
            (ids[1], ids[3]),
            (ids[2], ids[3]),
        ]

    def test_deterministic(self):
        teams = make_teams(6)
        settings = TournamentSettings(court_count=3)
        assert generate_schedule(teams, settings) == generate_schedule(teams, settings)


# --------------------------------------------------------------------------- #
# Rejections                                                                   #
# --------------------------------------------------------------------------- #

class TestRejections:
    @pytest.mark.parametrize("n", [0, 1])
    def test_fewer_than_two_teams(self, n):
        with pytest.raises(ValidationError):
            generate_schedule(make_teams(n), TournamentSettings())

    def test_team_below_minimum_size(self):
        teams = (make_team("A", 3), make_team("B", 2))
        with pytest.raises(ValidationError, match="B has 2 player"):
            generate_schedule(teams, TournamentSettings(min_players_per_team=3))

    def test_team_above_maximum_size(self):
        teams = (make_team("A", 3), make_team("B", 5))
        with pytest.raises(ValidationError):
            generate_schedule(teams, TournamentSettings(max_players_per_team=4))


# --------------------------------------------------------------------------- #
# Courts and times                                                             #
# --------------------------------------------------------------------------- #

class TestCourtsAndTimes:
    def test_four_team_scenario_courts(self):
        games = generate_schedule(make_teams(4), TournamentSettings(court_count=2))
        assert {g.game_number for g in games if g.court == 1} == {1, 3, 5}
        assert {g.game_number for g in games if g.court == 2} == {2, 4, 6}

    @pytest.mark.parametrize("courts", [1, 2, 3, 5])
    def test_court_bound(self, courts):
        games = generate_schedule(make_teams(6), TournamentSettings(court_count=courts))
        assert all(1 <= g.court <= courts for g in games)

    def test_no_court_double_booked(self):
        games = generate_schedule(make_teams(7), TournamentSettings(court_count=3))
        slots = [(g.court, g.scheduled_time) for g in games]
        assert len(slots) == len(set(slots))

    def test_slot_times_with_default_settings(self):
        games = generate_schedule(make_teams(4), TournamentSettings(court_count=2, game_length=15))
        assert [g.scheduled_time for g in games] == [
            "8:00 AM", "8:00 AM",
            "8:20 AM", "8:20 AM",
            "8:40 AM", "8:40 AM",
        ]

    def test_court_for(self):
        assert [court_for(n, 3) for n in range(1, 8)] == [1, 2, 3, 1, 2, 3, 1]

    def test_times_cross_noon(self):
        settings = TournamentSettings(court_count=1, game_length=55)
        # slot 4 starts 4 × 60 minutes after 08:00
        assert scheduled_time_for(5, settings) == "12:00 PM"
        assert scheduled_time_for(6, settings) == "1:00 PM"


# --------------------------------------------------------------------------- #
# Duration estimate                                                            #
# --------------------------------------------------------------------------- #

class TestEstimate:
    def test_four_teams_two_courts(self):
        est = estimate_duration(4, TournamentSettings(court_count=2, game_length=15))
        assert est.total_games == 6
        assert est.total_slots == 3
        assert est.total_minutes == 60
        assert (est.hours, est.minutes) == (1, 0)
        assert est.finish_time == "9:00 AM"

    def test_uneven_slots_round_up(self):
        est = estimate_duration(5, TournamentSettings(court_count=3, game_length=10))
        assert est.total_games == 10
        assert est.total_slots == 4
        assert est.total_minutes == 60

    @pytest.mark.parametrize("n", [0, 1])
    def test_nothing_to_play(self, n):
        est = estimate_duration(n, TournamentSettings())
        assert est.total_games == 0
        assert est.total_minutes == 0
        assert est.finish_time == "8:00 AM"

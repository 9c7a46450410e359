"""
Tests for the workflow state machine — step guards, status projection,
resume points and all-or-nothing operations.
"""

from __future__ import annotations

import random
import unittest
from dataclasses import replace
from datetime import datetime

from hoopsday.tournament.base import Player, new_tournament
from hoopsday.tournament.errors import (
    InconsistentStateError,
    NotFoundError,
    ValidationError,
)
from hoopsday.tournament.progression import (
    STEPS,
    TournamentStateMachine,
    available_steps,
    can_go_to_step,
    resume_step,
)
from hoopsday.tournament.snapshot import derive_status

NOW = datetime(2026, 10, 24, 8, 0)


def players(n: int) -> list[Player]:
    return [Player(id=f"p{i}", name=f"Player {i}", registered_at=NOW) for i in range(n)]


def machine_with(n_players: int) -> TournamentStateMachine:
    machine = TournamentStateMachine(new_tournament(now=NOW))
    machine.import_players(players(n_players))
    return machine


def scheduled_machine(n_players: int = 8) -> TournamentStateMachine:
    machine = machine_with(n_players)
    machine.assign_automatic(random.Random(5))
    machine.generate_schedule()
    return machine


class GuardTests(unittest.TestCase):
    def test_team_assignment_needs_six_participants(self) -> None:
        data = replace(new_tournament(now=NOW), participants=tuple(players(5)))
        self.assertFalse(can_go_to_step(data, "team-assignment"))
        data = replace(data, participants=tuple(players(6)))
        self.assertTrue(can_go_to_step(data, "team-assignment"))

    def test_score_tracking_needs_games(self) -> None:
        machine = machine_with(8)
        machine.assign_automatic(random.Random(1))
        self.assertFalse(machine.can_go_to("score-tracking"))
        machine.generate_schedule()
        self.assertTrue(machine.can_go_to("score-tracking"))

    def test_results_need_a_completed_game(self) -> None:
        machine = scheduled_machine()
        self.assertFalse(machine.can_go_to("tournament-results"))
        machine.submit_score("game-1", 21, 19, now=NOW)
        self.assertTrue(machine.can_go_to("tournament-results"))

    def test_entry_steps_always_available(self) -> None:
        data = new_tournament(now=NOW)
        self.assertEqual(available_steps(data), ["import-data", "walk-in-registration"])

    def test_unknown_step(self) -> None:
        self.assertFalse(can_go_to_step(new_tournament(now=NOW), "halftime"))
        machine = TournamentStateMachine(new_tournament(now=NOW))
        with self.assertRaises(ValidationError):
            machine.go_to("halftime")

    def test_go_to_rejects_failed_guard(self) -> None:
        machine = machine_with(5)
        with self.assertRaises(ValidationError):
            machine.go_to("team-assignment")
        self.assertEqual(machine.step, "import-data")

    def test_backward_navigation_allowed(self) -> None:
        machine = scheduled_machine()
        machine.go_to("score-tracking")
        self.assertEqual(machine.go_to("walk-in-registration"), "walk-in-registration")

    def test_advance(self) -> None:
        machine = machine_with(6)
        machine.go_to("walk-in-registration")
        self.assertEqual(machine.advance(), "team-assignment")
        with self.assertRaises(ValidationError):
            machine.advance()  # no teams yet


class StatusTests(unittest.TestCase):
    def test_status_follows_data(self) -> None:
        machine = TournamentStateMachine(new_tournament(now=NOW))
        self.assertEqual(machine.data.status, "setup")
        machine.import_players(players(8))
        self.assertEqual(machine.data.status, "registration")
        machine.assign_automatic(random.Random(2))
        self.assertEqual(machine.data.status, "teams-assigned")
        machine.generate_schedule()
        self.assertEqual(machine.data.status, "brackets-generated")
        machine.start_game("game-1")
        self.assertEqual(machine.data.status, "in-progress")
        machine.submit_score("game-1", 21, 11, now=NOW)
        self.assertEqual(machine.data.status, "completed")
        self.assertTrue(machine.is_complete)

    def test_stale_stored_status_is_recomputed_on_load(self) -> None:
        data = replace(new_tournament(now=NOW), participants=tuple(players(3)), status="completed")
        machine = TournamentStateMachine(data)
        self.assertEqual(machine.data.status, "registration")
        self.assertEqual(derive_status(machine.data), "registration")


class ResumeTests(unittest.TestCase):
    def test_resume_points(self) -> None:
        self.assertEqual(resume_step(new_tournament(now=NOW)), "import-data")
        self.assertEqual(machine_with(8).step, "import-data")
        self.assertEqual(
            TournamentStateMachine(machine_with(8).data).step, "walk-in-registration"
        )
        self.assertEqual(TournamentStateMachine(scheduled_machine().data).step, "score-tracking")

    def test_resume_with_teams(self) -> None:
        machine = machine_with(8)
        machine.assign_automatic(random.Random(0))
        self.assertEqual(TournamentStateMachine(machine.data).step, "bracket-generation")

    def test_resume_when_guard_no_longer_holds(self) -> None:
        # Two teams, then one deleted: status teams-assigned, but fewer than 2 teams
        machine = machine_with(8)
        machine.create_team()
        machine.create_team()
        machine.delete_team(machine.data.teams[0].id)
        self.assertEqual(resume_step(machine.data), "team-assignment")

    def test_resume_completed(self) -> None:
        machine = scheduled_machine(6)
        machine.submit_score("game-1", 21, 11, now=NOW)
        self.assertEqual(TournamentStateMachine(machine.data).step, "tournament-results")

    def test_every_step_listed_once(self) -> None:
        self.assertEqual(len(STEPS), len(set(STEPS)))


class AllOrNothingTests(unittest.TestCase):
    def test_regenerate_after_play_started_is_refused(self) -> None:
        machine = scheduled_machine()
        machine.start_game("game-1")
        before = machine.data

        with self.assertRaises(InconsistentStateError):
            machine.generate_schedule()
        self.assertIs(machine.data, before)
        self.assertEqual(machine.data.games[0].status, "in-progress")

    def test_regenerate_before_play_replaces_schedule(self) -> None:
        machine = scheduled_machine()
        games = machine.data.games
        machine.generate_schedule()
        self.assertEqual([g.id for g in machine.data.games], [g.id for g in games])

    def test_rejected_operation_keeps_step(self) -> None:
        machine = scheduled_machine()
        machine.go_to("walk-in-registration")
        with self.assertRaises(NotFoundError):
            machine.submit_score("game-99", 21, 10)
        self.assertEqual(machine.step, "walk-in-registration")

    def test_operation_moves_to_its_step(self) -> None:
        machine = scheduled_machine()
        machine.go_to("import-data")
        machine.submit_score("game-1", 21, 10, now=NOW)
        self.assertEqual(machine.step, "score-tracking")

    def test_operation_refused_when_guard_fails(self) -> None:
        machine = machine_with(5)
        with self.assertRaises(ValidationError):
            machine.assign_automatic()
        self.assertEqual(machine.data.teams, ())

    def test_duplicate_score_returns_same_snapshot(self) -> None:
        machine = scheduled_machine()
        machine.submit_score("game-1", 21, 10, now=NOW)
        data = machine.data
        self.assertIs(machine.submit_score("game-1", 21, 10), data)

    def test_start_running_game_returns_same_snapshot(self) -> None:
        machine = scheduled_machine()
        machine.start_game("game-2")
        data = machine.data
        self.assertIs(machine.start_game("game-2"), data)

    def test_clear_schedule_allows_reteaming(self) -> None:
        machine = scheduled_machine()
        machine.submit_score("game-1", 21, 10, now=NOW)
        machine.clear_schedule()
        self.assertEqual(machine.data.games, ())
        self.assertTrue(all(t.wins == 0 and t.losses == 0 for t in machine.data.teams))
        machine.assign_automatic(random.Random(9))
        self.assertEqual(machine.data.status, "teams-assigned")

    def test_settings_frozen_once_games_exist(self) -> None:
        machine = scheduled_machine()
        with self.assertRaises(InconsistentStateError):
            machine.update_settings(court_count=3)
        self.assertEqual(machine.data.settings.court_count, 2)

    def test_settings_update_before_games(self) -> None:
        machine = machine_with(8)
        machine.update_settings(court_count=3, game_length=12)
        self.assertEqual(machine.data.settings.court_count, 3)
        with self.assertRaises(ValidationError):
            machine.update_settings(court_count=0)
        with self.assertRaises(ValidationError):
            machine.update_settings(referees=2)
        for reserved in ("self", "data"):
            with self.assertRaises(ValidationError):
                machine.update_settings(**{reserved: 1})
        self.assertEqual(machine.data.settings.court_count, 3)

    def test_export_moves_to_results(self) -> None:
        machine = scheduled_machine()
        machine.submit_score("game-1", 21, 10, now=NOW)
        doc = machine.export_results(now=NOW)
        self.assertEqual(machine.step, "tournament-results")
        self.assertEqual(len(doc["finalStandings"]), 2)

    def test_export_refused_before_any_result(self) -> None:
        with self.assertRaises(ValidationError):
            scheduled_machine().export_results()

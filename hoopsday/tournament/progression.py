"""
Tournament progression — the operator workflow as an explicit state machine.

Steps, in forward order:

    import-data → walk-in-registration → team-assignment →
    bracket-generation → score-tracking → tournament-results

Navigation is not strictly linear: any step whose guard currently holds is
reachable, so an operator can jump back to re-edit an earlier stage.  All
guards live in STEP_GUARDS and are checked at exactly one place,
TournamentStateMachine._enter().

Each step owns its mutating operations.  Calling one enters the step
through the same guard and commits the new snapshot and step together, so
a rejected call leaves both untouched.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Literal

from hoopsday.tournament import export, roster, schedule, scoring, settings, teams
from hoopsday.tournament.base import (
    AgeCategory,
    Player,
    Standing,
    TournamentData,
    TournamentStatus,
)
from hoopsday.tournament.errors import ValidationError
from hoopsday.tournament.snapshot import refresh

logger = logging.getLogger(__name__)

TournamentStep = Literal[
    "import-data",
    "walk-in-registration",
    "team-assignment",
    "bracket-generation",
    "score-tracking",
    "tournament-results",
]

STEPS: tuple[TournamentStep, ...] = (
    "import-data",
    "walk-in-registration",
    "team-assignment",
    "bracket-generation",
    "score-tracking",
    "tournament-results",
)

# Two teams of three is the smallest playable tournament.
MIN_PARTICIPANTS = 6

STEP_GUARDS: dict[TournamentStep, Callable[[TournamentData], bool]] = {
    "import-data": lambda data: True,
    "walk-in-registration": lambda data: True,
    "team-assignment": lambda data: len(data.participants) >= MIN_PARTICIPANTS,
    "bracket-generation": lambda data: len(data.teams) >= 2,
    "score-tracking": lambda data: len(data.games) > 0,
    "tournament-results": lambda data: any(g.status == "completed" for g in data.games),
}

# Where to reopen a saved tournament, by its status projection.
_RESUME_STEPS: dict[TournamentStatus, TournamentStep] = {
    "setup": "import-data",
    "registration": "walk-in-registration",
    "teams-assigned": "bracket-generation",
    "brackets-generated": "score-tracking",
    "in-progress": "score-tracking",
    "completed": "tournament-results",
}


def can_go_to_step(data: TournamentData, step: str) -> bool:
    guard = STEP_GUARDS.get(step)  # type: ignore[arg-type]
    return guard is not None and guard(data)


def available_steps(data: TournamentData) -> list[TournamentStep]:
    return [step for step in STEPS if STEP_GUARDS[step](data)]


def resume_step(data: TournamentData) -> TournamentStep:
    """
    The step to reopen after loading a snapshot.  Falls back to the
    furthest step whose guard holds if the status and data disagree.
    """
    step = _RESUME_STEPS.get(data.status, "import-data")
    if can_go_to_step(data, step):
        return step
    return available_steps(data)[-1]


class TournamentStateMachine:
    """
    Holds the live snapshot and the operator's current step.

    Every mutating method is all-or-nothing: on ValidationError or
    InconsistentStateError neither `data` nor `step` changes.
    """

    def __init__(self, data: TournamentData, step: TournamentStep | None = None) -> None:
        self.data = refresh(data, now=data.last_modified)
        self.step: TournamentStep = step or resume_step(self.data)

    # ------------------------------------------------------------------ #
    # Navigation                                                          #
    # ------------------------------------------------------------------ #

    def can_go_to(self, step: str) -> bool:
        return can_go_to_step(self.data, step)

    def go_to(self, step: TournamentStep) -> TournamentStep:
        self._enter(step)
        self.step = step
        return step

    def advance(self) -> TournamentStep:
        """Move to the step after the current one."""
        index = STEPS.index(self.step)
        if index == len(STEPS) - 1:
            raise ValidationError("Already at the final step.")
        return self.go_to(STEPS[index + 1])

    # ------------------------------------------------------------------ #
    # import-data                                                         #
    # ------------------------------------------------------------------ #

    def import_players(self, players: Iterable[Player]) -> TournamentData:
        players = list(players)
        return self._apply("import-data", lambda d: roster.import_players(d, players))

    def clear_imported(self) -> TournamentData:
        return self._apply("import-data", roster.clear_imported)

    # ------------------------------------------------------------------ #
    # walk-in-registration                                                #
    # ------------------------------------------------------------------ #

    def add_walk_in(
        self,
        name: str,
        age_category: AgeCategory = "high-school-adult",
        grade_level: str | None = None,
        phone: str | None = None,
    ) -> TournamentData:
        return self._apply(
            "walk-in-registration",
            lambda d: roster.add_walk_in(d, name, age_category, grade_level, phone),
        )

    def update_participant(self, player_id: str, /, **changes: object) -> TournamentData:
        return self._apply(
            "walk-in-registration",
            lambda d: roster.update_participant(d, player_id, **changes),
        )

    def remove_participant(self, player_id: str) -> TournamentData:
        return self._apply(
            "walk-in-registration",
            lambda d: roster.remove_participant(d, player_id),
        )

    # ------------------------------------------------------------------ #
    # team-assignment                                                     #
    # ------------------------------------------------------------------ #

    def assign_automatic(self, rng: random.Random | None = None) -> TournamentData:
        return self._apply("team-assignment", lambda d: teams.assign_automatic(d, rng))

    def assign_player(self, team_id: str, player_id: str) -> TournamentData:
        return self._apply("team-assignment", lambda d: teams.assign_player(d, team_id, player_id))

    def unassign_player(self, team_id: str, player_id: str) -> TournamentData:
        return self._apply("team-assignment", lambda d: teams.unassign_player(d, team_id, player_id))

    def create_team(self, name: str | None = None) -> TournamentData:
        return self._apply("team-assignment", lambda d: teams.create_team(d, name))

    def rename_team(self, team_id: str, name: str) -> TournamentData:
        return self._apply("team-assignment", lambda d: teams.rename_team(d, team_id, name))

    def delete_team(self, team_id: str) -> TournamentData:
        return self._apply("team-assignment", lambda d: teams.delete_team(d, team_id))

    def reset_assignments(self) -> TournamentData:
        return self._apply("team-assignment", teams.reset_assignments)

    # ------------------------------------------------------------------ #
    # bracket-generation                                                  #
    # ------------------------------------------------------------------ #

    def generate_schedule(self) -> TournamentData:
        return self._apply("bracket-generation", schedule.regenerate)

    def clear_schedule(self) -> TournamentData:
        return self._apply("bracket-generation", schedule.clear_schedule)

    # ------------------------------------------------------------------ #
    # score-tracking                                                      #
    # ------------------------------------------------------------------ #

    def start_game(self, game_id: str) -> TournamentData:
        def _start(d: TournamentData) -> TournamentData:
            games = scoring.start_game(d.games, game_id)
            if games is d.games:
                return d
            return refresh(replace(d, games=games))

        return self._apply("score-tracking", _start)

    def submit_score(
        self,
        game_id: str,
        score_a: int,
        score_b: int,
        now: datetime | None = None,
    ) -> TournamentData:
        def _submit(d: TournamentData) -> TournamentData:
            games, updated_teams = scoring.submit_score(
                d.games, d.teams, game_id, score_a, score_b, now=now
            )
            if games is d.games:
                return d
            return refresh(replace(d, games=games, teams=updated_teams))

        return self._apply("score-tracking", _submit)

    # ------------------------------------------------------------------ #
    # tournament-results                                                  #
    # ------------------------------------------------------------------ #

    def standings(self, ranking: scoring.RankingMode = "ordinal") -> list[Standing]:
        """Current standings.  Read-only; available at any step."""
        return scoring.compute_standings(self.data.teams, self.data.games, ranking)

    def export_results(self, now: datetime | None = None) -> dict:
        self.go_to("tournament-results")
        return export.export_results(self.data, now=now)

    @property
    def is_complete(self) -> bool:
        return scoring.is_complete(self.data.games)

    # ------------------------------------------------------------------ #
    # Any step                                                            #
    # ------------------------------------------------------------------ #

    def update_settings(self, /, **changes: object) -> TournamentData:
        self.data = settings.update_settings(self.data, **changes)
        return self.data

    # ------------------------------------------------------------------ #
    # Internal helpers                                                    #
    # ------------------------------------------------------------------ #

    def _enter(self, step: TournamentStep) -> None:
        if step not in STEP_GUARDS:
            raise ValidationError(f"Unknown step: {step!r}. Valid steps: {', '.join(STEPS)}")
        if not STEP_GUARDS[step](self.data):
            raise ValidationError(f"Cannot go to {step}: {_GUARD_HINTS[step]}")

    def _apply(
        self,
        step: TournamentStep,
        transform: Callable[[TournamentData], TournamentData],
    ) -> TournamentData:
        self._enter(step)
        data = transform(self.data)
        if step != self.step:
            logger.debug("Step %s → %s", self.step, step)
        self.data, self.step = data, step
        return data


_GUARD_HINTS: dict[TournamentStep, str] = {
    "import-data": "",
    "walk-in-registration": "",
    "team-assignment": f"at least {MIN_PARTICIPANTS} participants are required.",
    "bracket-generation": "at least 2 teams are required.",
    "score-tracking": "no games have been generated yet.",
    "tournament-results": "no games have been completed yet.",
}


"""
FastAPI application — the tournament desk backend.

Exposes:
  GET    /api/tournament              Current snapshot, step and available steps
  POST   /api/steps/{step}            Navigate the workflow (guard-checked)
  POST   /api/import                  Pull approved players from the roster source
  DELETE /api/participants/imported   Drop imported players, teams and games
  POST   /api/participants            Register a walk-in
  PATCH  /api/participants/{id}       Correct an unassigned player
  DELETE /api/participants/{id}       Remove an unassigned player
  POST   /api/teams/auto              Shuffle-and-deal team assignment
  POST   /api/teams                   Create an empty team
  PATCH  /api/teams/{id}              Rename a team
  DELETE /api/teams/{id}              Delete a team
  DELETE /api/teams                   Delete every team
  POST   /api/teams/{id}/players      Assign (or move) a player
  DELETE /api/teams/{id}/players/{p}  Unassign a player
  POST   /api/games/generate          Generate the round-robin schedule
  DELETE /api/games                   Clear the schedule
  GET    /api/schedule/estimate       Duration estimate for the current teams
  POST   /api/games/{id}/start        Mark a game in progress
  POST   /api/games/{id}/score        Record (or correct) a final score
  GET    /api/standings               Ranked standings
  GET    /api/export                  Results export
  PATCH  /api/settings                Change settings (before games exist)

Rejected operations map to HTTP status codes:
  NotFoundError 404 · ValidationError 400 · InconsistentStateError 409 ·
  ExternalFailure 502
"""

from __future__ import annotations

import logging
import logging.handlers
import random
from dataclasses import fields
from pathlib import Path
from typing import Callable

from fastapi import FastAPI, HTTPException

from hoopsday.config import load_config
from hoopsday.session import TournamentSession
from hoopsday.sources import create_roster_source
from hoopsday.store import SnapshotStore, snapshot_to_dict
from hoopsday.tournament.base import Standing, TournamentSettings
from hoopsday.tournament.errors import (
    ExternalFailure,
    InconsistentStateError,
    NotFoundError,
    TournamentError,
    ValidationError,
)
from hoopsday.tournament.export import summarize
from hoopsday.tournament.progression import (
    STEPS,
    TournamentStateMachine,
    available_steps,
)
from hoopsday.tournament.roster import EDITABLE_FIELDS
from hoopsday.tournament.schedule import estimate_duration

config = load_config(missing_ok=True)

# --------------------------------------------------------------------------- #
# Logging                                                                      #
# --------------------------------------------------------------------------- #

_LOG_FILE = Path("./logs/hoopsday.log")
_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    handlers=[
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            _LOG_FILE, maxBytes=2 * 1024 * 1024, backupCount=3,
            encoding="utf-8",
        ),
    ],
)
logger = logging.getLogger("hoopsday")

session = TournamentSession(
    store=SnapshotStore(config.storage_path),
    config=config,
    roster_source=create_roster_source(config.roster),
)

_SETTING_FIELDS = tuple(f.name for f in fields(TournamentSettings))

app = FastAPI(title="HoopsDay")


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def _http_error(exc: TournamentError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, InconsistentStateError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, ExternalFailure):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


async def _mutate(operation: Callable[[TournamentStateMachine], object]) -> dict:
    """Run one operation through the session and return the new state."""
    try:
        await session.run(operation)
    except TournamentError as exc:
        logger.info("Rejected: %s", exc)
        raise _http_error(exc) from exc
    return _state()


def _state() -> dict:
    machine = session.machine
    return {
        "step": machine.step,
        "available_steps": available_steps(machine.data),
        "tournament": snapshot_to_dict(machine.data),
    }


def _standing_json(s: Standing) -> dict:
    return {
        "rank": s.rank,
        "team_id": s.team.id,
        "team": s.team.name,
        "wins": s.wins,
        "losses": s.losses,
        "points_for": s.points_for,
        "points_against": s.points_against,
        "point_differential": s.point_differential,
        "win_percentage": s.win_percentage,
    }


def _require(payload: dict, key: str) -> object:
    value = payload.get(key)
    if value is None or value == "":
        raise HTTPException(status_code=400, detail=f"{key} is required")
    return value


def _only(payload: dict, allowed: tuple[str, ...], message: str) -> dict:
    """Reject body keys outside `allowed` before they become keyword arguments."""
    unknown = sorted(str(key) for key in payload if key not in allowed)
    if unknown:
        raise HTTPException(status_code=400, detail=f"{message}: {', '.join(unknown)}")
    return dict(payload)


def _loaded() -> TournamentStateMachine:
    try:
        return session.machine
    except ExternalFailure as exc:
        raise _http_error(exc) from exc


# --------------------------------------------------------------------------- #
# Tournament + workflow                                                        #
# --------------------------------------------------------------------------- #

@app.get("/api/tournament")
def get_tournament():
    _loaded()
    return _state()


@app.get("/api/steps")
def get_steps():
    machine = _loaded()
    return [
        {"step": step, "available": machine.can_go_to(step), "current": step == machine.step}
        for step in STEPS
    ]


@app.post("/api/steps/{step}")
def go_to_step(step: str):
    machine = _loaded()
    try:
        machine.go_to(step)
    except TournamentError as exc:
        raise _http_error(exc) from exc
    return _state()


# --------------------------------------------------------------------------- #
# Roster                                                                       #
# --------------------------------------------------------------------------- #

@app.post("/api/import")
async def import_roster():
    try:
        added = await session.import_roster()
    except TournamentError as exc:
        logger.warning("Roster import failed: %s", exc)
        raise _http_error(exc) from exc
    return {"added": added, **_state()}


@app.delete("/api/participants/imported")
async def clear_imported():
    return await _mutate(lambda m: m.clear_imported())


@app.post("/api/participants")
async def add_walk_in(payload: dict):
    name = _require(payload, "name")
    return await _mutate(
        lambda m: m.add_walk_in(
            name,
            payload.get("age_category", "high-school-adult"),
            payload.get("grade_level"),
            payload.get("phone"),
        )
    )


@app.patch("/api/participants/{player_id}")
async def update_participant(player_id: str, payload: dict):
    changes = _only(payload, EDITABLE_FIELDS, "Cannot edit field(s)")
    return await _mutate(lambda m: m.update_participant(player_id, **changes))


@app.delete("/api/participants/{player_id}")
async def remove_participant(player_id: str):
    return await _mutate(lambda m: m.remove_participant(player_id))


# --------------------------------------------------------------------------- #
# Teams                                                                        #
# --------------------------------------------------------------------------- #

@app.post("/api/teams/auto")
async def assign_automatic(payload: dict | None = None):
    seed = (payload or {}).get("seed")
    rng = random.Random(seed) if seed is not None else None
    return await _mutate(lambda m: m.assign_automatic(rng))


@app.post("/api/teams")
async def create_team(payload: dict | None = None):
    name = (payload or {}).get("name")
    return await _mutate(lambda m: m.create_team(name))


@app.delete("/api/teams")
async def reset_assignments():
    return await _mutate(lambda m: m.reset_assignments())


@app.patch("/api/teams/{team_id}")
async def rename_team(team_id: str, payload: dict):
    name = str(_require(payload, "name"))
    return await _mutate(lambda m: m.rename_team(team_id, name))


@app.delete("/api/teams/{team_id}")
async def delete_team(team_id: str):
    return await _mutate(lambda m: m.delete_team(team_id))


@app.post("/api/teams/{team_id}/players")
async def assign_player(team_id: str, payload: dict):
    player_id = str(_require(payload, "player_id"))
    return await _mutate(lambda m: m.assign_player(team_id, player_id))


@app.delete("/api/teams/{team_id}/players/{player_id}")
async def unassign_player(team_id: str, player_id: str):
    return await _mutate(lambda m: m.unassign_player(team_id, player_id))


# --------------------------------------------------------------------------- #
# Schedule + scores                                                            #
# --------------------------------------------------------------------------- #

@app.post("/api/games/generate")
async def generate_schedule():
    return await _mutate(lambda m: m.generate_schedule())


@app.delete("/api/games")
async def clear_schedule():
    return await _mutate(lambda m: m.clear_schedule())


@app.get("/api/schedule/estimate")
def get_estimate():
    data = _loaded().data
    estimate = estimate_duration(len(data.teams), data.settings)
    return {
        "total_games": estimate.total_games,
        "total_slots": estimate.total_slots,
        "total_minutes": estimate.total_minutes,
        "hours": estimate.hours,
        "minutes": estimate.minutes,
        "finish_time": estimate.finish_time,
    }


@app.post("/api/games/{game_id}/start")
async def start_game(game_id: str):
    return await _mutate(lambda m: m.start_game(game_id))


@app.post("/api/games/{game_id}/score")
async def submit_score(game_id: str, payload: dict):
    score_a = _require(payload, "score_a")
    score_b = _require(payload, "score_b")
    return await _mutate(lambda m: m.submit_score(game_id, score_a, score_b))


# --------------------------------------------------------------------------- #
# Results                                                                      #
# --------------------------------------------------------------------------- #

@app.get("/api/standings")
def get_standings(ranking: str = "ordinal"):
    if ranking not in ("ordinal", "competition"):
        raise HTTPException(status_code=400, detail=f"Unknown ranking: {ranking}")
    machine = _loaded()
    summary = summarize(machine.data)
    return {
        "standings": [_standing_json(s) for s in machine.standings(ranking)],
        "complete": machine.is_complete,
        "champion": summary.champion,
        "average_score": summary.average_score,
    }


@app.get("/api/export")
def get_export():
    machine = _loaded()
    try:
        return machine.export_results()
    except TournamentError as exc:
        raise _http_error(exc) from exc


# --------------------------------------------------------------------------- #
# Settings                                                                     #
# --------------------------------------------------------------------------- #

@app.patch("/api/settings")
async def update_settings(payload: dict):
    changes = _only(payload, _SETTING_FIELDS, "Unknown setting(s)")
    return await _mutate(lambda m: m.update_settings(**changes))

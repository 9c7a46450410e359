"""
Snapshot store — the whole TournamentData as one JSON document.

The file is fully overwritten after every mutation and read once at
startup.  Writes go to a sibling temp file first and are moved into
place, so a crash mid-write never leaves a truncated snapshot behind.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from datetime import datetime
from pathlib import Path

from hoopsday.tournament.base import (
    Game,
    Player,
    Team,
    TournamentData,
    TournamentSettings,
)
from hoopsday.tournament.errors import ExternalFailure, ValidationError
from hoopsday.tournament.settings import validate_settings

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path("basketball-tournament-data.json")


class SnapshotStore:
    def __init__(self, path: str | Path = DEFAULT_PATH) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TournamentData | None:
        """
        Return the saved snapshot, or None when nothing has been saved yet.

        Raises:
            ExternalFailure: the file cannot be read or is not a valid snapshot.
        """
        if not self._path.exists():
            return None
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            data = snapshot_from_dict(raw)
        except OSError as exc:
            raise ExternalFailure(f"Cannot read {self._path}: {exc}") from exc
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            raise ExternalFailure(f"Corrupt tournament snapshot in {self._path}: {exc}") from exc
        logger.info("Loaded tournament %s from %s", data.id, self._path)
        return data

    def save(self, data: TournamentData) -> None:
        """
        Raises:
            ExternalFailure: the snapshot could not be written.
        """
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(snapshot_to_dict(data), indent=2), encoding="utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise ExternalFailure(f"Cannot write {self._path}: {exc}") from exc
        logger.debug("Saved tournament %s (%s)", data.id, data.status)


# --------------------------------------------------------------------------- #
# (De)serialisation                                                            #
# --------------------------------------------------------------------------- #

def snapshot_to_dict(data: TournamentData) -> dict:
    """JSON-safe dict of the snapshot: datetimes become ISO strings."""
    return _jsonable(dataclasses.asdict(data))


def snapshot_from_dict(raw: dict) -> TournamentData:
    """
    Raises:
        ValidationError: the stored settings break the settings rules.
    """
    settings = TournamentSettings(**raw.get("settings", {}))
    validate_settings(settings)
    return TournamentData(
        id=raw["id"],
        name=raw["name"],
        date=raw["date"],
        status=raw.get("status", "setup"),
        participants=tuple(_player(p) for p in raw.get("participants", [])),
        teams=tuple(_team(t) for t in raw.get("teams", [])),
        games=tuple(_game(g) for g in raw.get("games", [])),
        settings=settings,
        created_at=datetime.fromisoformat(raw["created_at"]),
        last_modified=datetime.fromisoformat(raw["last_modified"]),
    )


def _jsonable(value: object) -> object:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _player(raw: dict) -> Player:
    return Player(
        id=raw["id"],
        name=raw["name"],
        age_category=raw.get("age_category", "high-school-adult"),
        grade_level=raw.get("grade_level"),
        phone=raw.get("phone"),
        is_walk_in=bool(raw.get("is_walk_in", False)),
        registered_at=datetime.fromisoformat(raw["registered_at"]),
    )


def _team(raw: dict) -> Team:
    return Team(
        id=raw["id"],
        name=raw["name"],
        color=raw["color"],
        players=tuple(_player(p) for p in raw.get("players", [])),
        wins=int(raw.get("wins", 0)),
        losses=int(raw.get("losses", 0)),
        points_for=int(raw.get("points_for", 0)),
        points_against=int(raw.get("points_against", 0)),
    )


def _game(raw: dict) -> Game:
    completed_at = raw.get("completed_at")
    return Game(
        id=raw["id"],
        round=int(raw["round"]),
        game_number=int(raw["game_number"]),
        team_a=raw["team_a"],
        team_b=raw["team_b"],
        court=int(raw["court"]),
        scheduled_time=raw["scheduled_time"],
        status=raw.get("status", "scheduled"),
        score_a=raw.get("score_a"),
        score_b=raw.get("score_b"),
        winner=raw.get("winner"),
        completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
    )

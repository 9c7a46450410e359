"""Roster source backed by a local YAML or JSON file of registration rows."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import yaml

from hoopsday.sources.base import RosterSource, player_from_row
from hoopsday.tournament.base import Player
from hoopsday.tournament.errors import ExternalFailure

logger = logging.getLogger(__name__)


class FileRosterSource(RosterSource):
    """
    Reads a list of rows, either at the top level or under a "players" key.
    JSON files load through the same parser, since YAML is a superset.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def label(self) -> str:
        return f"file:{self._path}"

    async def fetch_approved_players(self) -> list[Player]:
        return await asyncio.to_thread(self._read)

    def _read(self) -> list[Player]:
        try:
            with self._path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except OSError as exc:
            raise ExternalFailure(f"Cannot read roster file {self._path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ExternalFailure(f"Invalid roster file {self._path}: {exc}") from exc

        if isinstance(raw, dict):
            raw = raw.get("players")
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ExternalFailure(
                f"Roster file {self._path} must contain a list of players"
            )

        players = [player_from_row(row) for row in raw]
        logger.info("Read %d player(s) from %s", len(players), self._path)
        return players

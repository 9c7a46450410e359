"""
Abstract roster source interface.

A RosterSource hands the tournament the approved players from the
registration system.  Rows use the registration schema
(id, player_name, age_category, grade_level, contact_phone) and are
turned into Player objects by player_from_row().

Sources never retry: any failure is raised as ExternalFailure and the
caller decides whether to try again or fall back to walk-in entry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from hoopsday.tournament.base import AGE_CATEGORIES, Player
from hoopsday.tournament.errors import ExternalFailure


class RosterSource(ABC):
    """Abstract base for every roster backend."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Short human-readable name shown in logs and the CLI."""
        ...

    @abstractmethod
    async def fetch_approved_players(self) -> list[Player]:
        """
        Return every player on an approved team.

        Raises:
            ExternalFailure: the backend could not be reached or returned
                             unusable data.
        """
        ...


def player_from_row(row: dict, now: datetime | None = None) -> Player:
    """
    Map a registration row to a Player.

    Raises:
        ExternalFailure: the row lacks an id or a player name.
    """
    try:
        player_id = str(row["id"])
        name = str(row["player_name"]).strip()
    except (KeyError, TypeError) as exc:
        raise ExternalFailure(f"Malformed roster row {row!r}: missing {exc}") from exc
    if not name:
        raise ExternalFailure(f"Roster row {player_id} has an empty player_name")

    category = row.get("age_category")
    if category not in AGE_CATEGORIES:
        category = "high-school-adult"

    return Player(
        id=player_id,
        name=name,
        age_category=category,
        grade_level=row.get("grade_level") or None,
        phone=row.get("contact_phone") or None,
        is_walk_in=False,
        registered_at=now or datetime.now(),
    )

"""
Roster store — the participant list before (and alongside) team assignment.

Imported players come from the registration system via a RosterSource;
walk-ins are entered on the day.  Corrective edits and removals are only
allowed while a player is not on a team.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Iterable

from hoopsday.tournament.base import (
    AGE_CATEGORIES,
    AgeCategory,
    Player,
    TournamentData,
    assigned_player_ids,
    find_player,
)
from hoopsday.tournament.errors import NotFoundError, ValidationError
from hoopsday.tournament.snapshot import invalidate_schedule, refresh

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "age_category", "grade_level", "phone")


def import_players(data: TournamentData, players: Iterable[Player]) -> TournamentData:
    """Append imported players, skipping ids already on the roster."""
    known = {p.id for p in data.participants}
    added: list[Player] = []
    for player in players:
        if player.id in known:
            logger.debug("Player %s already on the roster; skipped", player.id)
            continue
        known.add(player.id)
        added.append(player)

    logger.info("Imported %d player(s)", len(added))
    return refresh(replace(data, participants=data.participants + tuple(added)))


def add_walk_in(
    data: TournamentData,
    name: str,
    age_category: AgeCategory = "high-school-adult",
    grade_level: str | None = None,
    phone: str | None = None,
    now: datetime | None = None,
) -> TournamentData:
    if not data.settings.allow_walk_ins:
        raise ValidationError("Walk-in registration is disabled for this tournament.")
    name = _clean_name(name)
    _check_category(age_category)

    player = Player(
        id=f"walkin-{uuid.uuid4().hex[:12]}",
        name=name,
        age_category=age_category,
        grade_level=_optional_text("grade_level", grade_level),
        phone=_optional_text("phone", phone),
        is_walk_in=True,
        registered_at=now or datetime.now(),
    )
    logger.info("Walk-in registered: %s (%s)", player.name, player.id)
    return refresh(replace(data, participants=data.participants + (player,)))


def update_participant(
    data: TournamentData, player_id: str, /, **changes: object
) -> TournamentData:
    """
    Correct a participant's details.  Only name, age_category, grade_level
    and phone can change, and only while the player is unassigned.
    """
    player = _require_unassigned(data, player_id, "edit")

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")
    if "name" in changes:
        changes["name"] = _clean_name(changes["name"])
    if "age_category" in changes:
        _check_category(changes["age_category"])
    for optional in ("grade_level", "phone"):
        if optional in changes:
            changes[optional] = _optional_text(optional, changes[optional])

    updated = replace(player, **changes)
    participants = tuple(updated if p.id == player_id else p for p in data.participants)
    logger.info("Participant %s updated", player_id)
    return refresh(replace(data, participants=participants))


def remove_participant(data: TournamentData, player_id: str) -> TournamentData:
    _require_unassigned(data, player_id, "remove")
    participants = tuple(p for p in data.participants if p.id != player_id)
    logger.info("Participant %s removed", player_id)
    return refresh(replace(data, participants=participants))


def clear_imported(data: TournamentData) -> TournamentData:
    """Drop every imported player along with all teams and games; walk-ins stay."""
    data = invalidate_schedule(data, "clear imported players")
    walk_ins = tuple(p for p in data.participants if p.is_walk_in)
    logger.info(
        "Cleared %d imported player(s); %d walk-in(s) kept",
        len(data.participants) - len(walk_ins),
        len(walk_ins),
    )
    return refresh(replace(data, participants=walk_ins, teams=(), games=()))


# ------------------------------------------------------------------ #
# Helpers                                                             #
# ------------------------------------------------------------------ #

def _require_unassigned(data: TournamentData, player_id: str, action: str) -> Player:
    player = find_player(data, player_id)
    if player is None:
        raise NotFoundError(f"Unknown player: {player_id!r}")
    if player_id in assigned_player_ids(data):
        raise ValidationError(
            f"Cannot {action} {player.name}: the player is on a team. Unassign them first."
        )
    return player


def _clean_name(name: object) -> str:
    if not isinstance(name, str):
        raise ValidationError(f"Player name must be text, got {name!r}")
    name = name.strip()
    if not name:
        raise ValidationError("Player name is required.")
    return name


def _optional_text(field: str, value: object) -> str | None:
    """Blank means absent.  Whole numbers are accepted for grades typed as 7."""
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be text, got {value!r}")
    return value.strip() or None


def _check_category(value: object) -> None:
    if value not in AGE_CATEGORIES:
        raise ValidationError(
            f"age_category must be one of {AGE_CATEGORIES}, got {value!r}"
        )

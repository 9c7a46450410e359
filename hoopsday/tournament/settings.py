"""Tournament settings validation and updates."""

from __future__ import annotations

import logging
from dataclasses import fields, replace

from hoopsday.tournament.base import TOURNAMENT_STYLES, TournamentData, TournamentSettings
from hoopsday.tournament.errors import InconsistentStateError, ValidationError
from hoopsday.tournament.snapshot import refresh

logger = logging.getLogger(__name__)


_INT_FIELDS = ("court_count", "game_length", "max_players_per_team", "min_players_per_team")


def validate_settings(settings: TournamentSettings) -> None:
    for name in _INT_FIELDS:
        value = getattr(settings, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{name} must be an integer, got {value!r}")
    if not isinstance(settings.allow_walk_ins, bool):
        raise ValidationError(f"allow_walk_ins must be true/false, got {settings.allow_walk_ins!r}")
    if settings.court_count < 1:
        raise ValidationError("court_count must be >= 1")
    if settings.game_length < 1:
        raise ValidationError("game_length must be >= 1 minute")
    if settings.min_players_per_team < 1:
        raise ValidationError("min_players_per_team must be >= 1")
    if settings.max_players_per_team < settings.min_players_per_team:
        raise ValidationError(
            "max_players_per_team must be >= min_players_per_team "
            f"({settings.max_players_per_team} < {settings.min_players_per_team})"
        )
    if settings.tournament_style not in TOURNAMENT_STYLES:
        raise ValidationError(
            f"tournament_style must be one of {TOURNAMENT_STYLES}, "
            f"got {settings.tournament_style!r}"
        )


def update_settings(data: TournamentData, /, **changes: object) -> TournamentData:
    """
    Change tournament settings.  Settings are frozen once a schedule exists,
    since court and time assignments were derived from them.
    """
    valid = {f.name for f in fields(TournamentSettings)}
    unknown = set(changes) - valid
    if unknown:
        raise ValidationError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
    if data.games:
        raise InconsistentStateError(
            "Settings cannot change once games have been generated. "
            "Clear the schedule first."
        )

    settings = replace(data.settings, **changes)
    validate_settings(settings)
    logger.info("Settings updated: %s", changes)
    return refresh(replace(data, settings=settings))

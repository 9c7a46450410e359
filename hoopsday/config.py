"""
Configuration loading from config.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml

from hoopsday.tournament.base import TournamentSettings
from hoopsday.tournament.errors import ValidationError
from hoopsday.tournament.settings import validate_settings

RosterSourceKind = Literal["none", "file", "supabase"]


@dataclass
class TournamentConfig:
    name: str = "3-on-3 Basketball Tournament"
    date: str | None = None   # ISO date; defaults to today when a tournament is created


@dataclass
class RosterConfig:
    source: RosterSourceKind = "none"
    path: str = "./roster.yaml"   # used by source: file
    url: str = ""                 # Supabase project URL, used by source: supabase
    api_key: str = ""
    timeout: int = 15             # seconds before a roster fetch is abandoned


@dataclass
class StorageConfig:
    path: str = "./basketball-tournament-data.json"


@dataclass
class Config:
    tournament: TournamentConfig = field(default_factory=TournamentConfig)
    settings: TournamentSettings = field(default_factory=TournamentSettings)
    roster: RosterConfig = field(default_factory=RosterConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @property
    def storage_path(self) -> Path:
        return Path(self.storage.path)


def load_config(path: str | Path = "config.yaml", missing_ok: bool = False) -> Config:
    """
    Load and validate config.yaml.

    Args:
        missing_ok: return the defaults instead of raising when the file
                    does not exist.

    Raises:
        FileNotFoundError: config.yaml is missing (and missing_ok is False).
        ValueError: required fields are absent or invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        if missing_ok:
            return Config()
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and adjust it."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        tournament_raw = raw.get("tournament") or {}
        tournament_cfg = TournamentConfig(
            name=str(tournament_raw.get("name", TournamentConfig.name)),
            date=_optional_str(tournament_raw.get("date")),
        )

        settings_raw = raw.get("settings") or {}
        defaults = TournamentSettings()
        settings = TournamentSettings(
            court_count=int(settings_raw.get("court_count", defaults.court_count)),
            game_length=int(settings_raw.get("game_length", defaults.game_length)),
            max_players_per_team=int(
                settings_raw.get("max_players_per_team", defaults.max_players_per_team)
            ),
            min_players_per_team=int(
                settings_raw.get("min_players_per_team", defaults.min_players_per_team)
            ),
            tournament_style=settings_raw.get("tournament_style", defaults.tournament_style),
            allow_walk_ins=bool(settings_raw.get("allow_walk_ins", defaults.allow_walk_ins)),
        )

        roster_raw = raw.get("roster") or {}
        roster_cfg = RosterConfig(
            source=roster_raw.get("source", "none"),
            path=str(roster_raw.get("path", RosterConfig.path)),
            url=str(roster_raw.get("url", "")),
            api_key=str(roster_raw.get("api_key", "")),
            timeout=int(roster_raw.get("timeout", RosterConfig.timeout)),
        )

        storage_raw = raw.get("storage") or {}
        storage_cfg = StorageConfig(path=str(storage_raw.get("path", StorageConfig.path)))

        config = Config(
            tournament=tournament_cfg,
            settings=settings,
            roster=roster_cfg,
            storage=storage_cfg,
        )
        _validate(config)
        return config

    except (AttributeError, KeyError, TypeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def _validate(config: Config) -> None:
    try:
        validate_settings(config.settings)
    except ValidationError as exc:
        raise ValueError(f"settings: {exc}") from exc

    valid_sources = ("none", "file", "supabase")
    if config.roster.source not in valid_sources:
        raise ValueError(
            f"roster.source must be one of {valid_sources}, got '{config.roster.source}'"
        )
    if config.roster.source == "supabase" and not (config.roster.url and config.roster.api_key):
        raise ValueError("roster.url and roster.api_key are required for source: supabase")
    if config.roster.timeout < 1:
        raise ValueError("roster.timeout must be >= 1")


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    return str(value)
